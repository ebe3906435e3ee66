# app/services/exceptions.py
class StandupServiceError(RuntimeError):
    """
    Base class for business-rule failures raised by the service layer.

    Routers translate subclasses to HTTP status codes; anything else is left
    to propagate as a 500.
    """


class StandupConflictError(StandupServiceError):
    """
    Raised when a standup already exists for the user and date.
    """


class StandupNotFoundError(StandupServiceError, LookupError):
    """
    Raised when the target standup, user or team does not exist, or when a
    blocker operation targets a standup without a blocker.
    """


class StandupValidationError(StandupServiceError, ValueError):
    """
    Raised when a request would leave a standup in an invalid state.
    """
