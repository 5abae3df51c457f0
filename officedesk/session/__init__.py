from .models import Role, Session, normalize_capability
from .tokens import create_session_token, decode_session_token

__all__ = [
    "Role",
    "Session",
    "normalize_capability",
    "create_session_token",
    "decode_session_token",
]
