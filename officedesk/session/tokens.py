"""JWT encode/decode for the session bearer token."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from officedesk.config import settings
from officedesk.utils.exceptions import AuthenticationError
from .models import Session


def create_session_token(session: Session, expires_delta: timedelta | None = None) -> str:
    """
    Encode the session into a signed JWT.

    Payload keys: sub (session id), role, permissions, employee_id, admin_id.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.session_expire_minutes)
    )
    to_encode = {
        "sub": session.session_id,
        "role": session.role.value if session.role else None,
        "permissions": session.permissions,
        "employee_id": session.employee_id,
        "admin_id": session.admin_id,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_session_token(token: str) -> Session:
    """Decode and verify a session JWT. Raises 401 on failure."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise AuthenticationError("Invalid or expired session")

    if not payload.get("sub"):
        raise AuthenticationError("Session token has no subject")

    return Session(
        session_id=payload["sub"],
        role=payload.get("role"),
        permissions=payload.get("permissions"),
        employee_id=payload.get("employee_id"),
        admin_id=payload.get("admin_id"),
    )
