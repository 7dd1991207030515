"""FastAPI application for the Anaesthesia Staffing Console."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..errors import PersistenceError
from ..service import StaffingDataService
from .routers import dashboard, hospitals, people

logger = logging.getLogger(__name__)


def create_app(service: Optional[StaffingDataService] = None) -> FastAPI:
    """
    Build the app. Without an explicit service one is created from the environment at
    startup; a missing STAFFING_DATABASE_URL aborts startup with InitializationError.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "service", None) is None:
            app.state.service = StaffingDataService.from_settings()
            app.state.service.refresh()
        svc = app.state.service
        logger.info("Serving %d hospitals, %d people loaded", len(svc.hospitals.items), len(svc.people.items))
        yield

    app = FastAPI(
        title="Anaesthesia Staffing Console",
        description="Hospital allocations, anaesthesiologist assignments and staffing coverage",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # Must be False when allow_origins is "*"
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        return JSONResponse(status_code=503, content={"detail": str(exc), "collection": exc.collection})

    app.include_router(hospitals.router, prefix="/api/hospitals", tags=["hospitals"])
    app.include_router(people.router, prefix="/api/people", tags=["people"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])

    @app.post("/api/refresh")
    def refresh(request: Request):
        svc: StaffingDataService = request.app.state.service
        svc.refresh()
        return {
            "ok": True,
            "hospitals": len(svc.hospitals.items),
            "people": len(svc.people.items),
            "has_more_people": svc.has_more_people,
        }

    @app.get("/")
    def root():
        return {"message": "Anaesthesia Staffing Console API", "docs": "/docs"}

    return app


# uvicorn staffing.webapp.main:app (store settings are read at startup)
app = create_app()
