from fastapi import HTTPException, status


# ── Remote office API failures ───────────────────────────────────


class RemoteApiError(Exception):
    """Any failure talking to the remote office API."""

    default_message = "Something went wrong. Please try again later."

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or self.default_message)
        self.message = message
        self.status_code = status_code

    def user_message(self, fallback: str | None = None) -> str:
        """Message safe to show in a toast."""
        return fallback or self.default_message


class TransportError(RemoteApiError):
    """Network / connection failure; never shown verbatim."""

    default_message = "Could not reach the office API."


class ApplicationError(RemoteApiError):
    """Well-formed `{success: false, message}` answer from the API."""

    def user_message(self, fallback: str | None = None) -> str:
        return self.message or fallback or self.default_message


class MalformedResponseError(RemoteApiError):
    """Unexpected body shape or content type."""

    default_message = "Unexpected server response."


# ── HTTP-facing errors ───────────────────────────────────────────


class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDeniedError(HTTPException):
    def __init__(self, detail: str = "Permission denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Validation failed"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )
