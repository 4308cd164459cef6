"""Error taxonomy for sighting operations.

Every error carries the HTTP status it maps to; ``app.main`` renders them as
``{"detail": message}`` the same way ``HTTPException`` does.
"""


class SightingError(Exception):
    """Base class for errors raised by the sighting core."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SightingError):
    """Sighting id does not resolve in the store."""

    status_code = 404

    def __init__(self, sighting_id: str) -> None:
        super().__init__(f"Sighting not found with id: {sighting_id}")
        self.sighting_id = sighting_id


class ValidationError(SightingError):
    """Missing required field or malformed value."""

    status_code = 422

    @classmethod
    def from_pydantic(cls, exc: Exception) -> "ValidationError":
        """Flatten a pydantic.ValidationError into one readable message."""
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
        return cls("; ".join(parts) or str(exc))


class InvalidStatusError(SightingError):
    """Status token outside pending / approved / rejected."""

    status_code = 400

    def __init__(self, token: object) -> None:
        super().__init__(f"Unknown submission status: {token}")
        self.token = token


class StoreError(SightingError):
    """Underlying persistence failed."""

    status_code = 503
