"""Error types raised by the staffing core. Input validation errors come from pydantic."""


class StaffingError(Exception):
    """Base class for staffing console errors."""


class PersistenceError(StaffingError):
    """A create/update/delete against the record store failed. Local state is unchanged."""

    def __init__(self, message: str, collection: str = "", record_id: str = ""):
        super().__init__(message)
        self.collection = collection
        self.record_id = record_id


class InitializationError(StaffingError):
    """Required record store settings are missing; nothing can be served."""
