"""Error taxonomy for marketplace operations.

Every error carries the HTTP status it maps to and a short machine-readable
code; ``main.py`` renders them as ``{"detail": ..., "code": ...}``.
"""


class MarketplaceError(Exception):
    status_code = 400
    code = "error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(MarketplaceError):
    """Malformed or missing input. The caller should correct it and resend."""

    status_code = 422
    code = "validation_error"
    default_message = "Invalid input"


class Unauthorized(MarketplaceError):
    """Actor is not allowed to act on this project. Never retried."""

    status_code = 403
    code = "unauthorized"
    default_message = "Not allowed to perform this action"


class NotFound(MarketplaceError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class InvalidState(MarketplaceError):
    """Transition not legal from the current status. Refresh before retrying."""

    status_code = 409
    code = "invalid_state"
    default_message = "Action not allowed in the current project status"


class Conflict(MarketplaceError):
    """Lost a race against another writer. Refetch, then retry."""

    status_code = 409
    code = "conflict"
    default_message = "Project was modified concurrently; refetch and retry"


class AlreadyClaimed(Conflict):
    code = "already_claimed"
    default_message = "Project has already been claimed by another editor"


class StoreUnavailable(MarketplaceError):
    """Transient infrastructure failure. Safe to retry with backoff."""

    status_code = 503
    code = "store_unavailable"
    default_message = "Storage backend unavailable; retry later"
