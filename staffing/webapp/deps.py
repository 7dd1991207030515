from fastapi import Request

from ..service import StaffingDataService


def get_service(request: Request) -> StaffingDataService:
    return request.app.state.service
