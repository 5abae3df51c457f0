"""Authentication service — credentials are checked by the office API."""

from officedesk.rbac import resolve_visibility
from officedesk.remote import OfficeApiClient
from officedesk.session import Session, create_session_token
from officedesk.utils import Logger
from officedesk.utils.exceptions import MalformedResponseError

logger = Logger("auth")


def session_from_login(data: dict) -> Session:
    """Build the Session from the office API's login answer."""
    return Session(
        role=data.get("role"),
        permissions=data.get("permissions"),
        employee_id=data.get("employeeId"),
        admin_id=data.get("adminId"),
    )


class AuthService:
    def __init__(self, client: OfficeApiClient):
        self.client = client

    async def login(self, email: str, password: str) -> dict:
        """
        1. Forward credentials to /admin/login.
        2. Build the Session from {adminId, role, permissions, employeeId}.
        3. Return a signed session token plus what the session can see.
        """
        envelope = await self.client.post(
            "/admin/login", {"email": email, "password": password}
        )
        data = envelope.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError("Login response has no data object")

        session = session_from_login(data)
        logger.info(f"Login ok: role={session.role} session={session.session_id[:8]}")
        return {
            "access_token": create_session_token(session),
            "token_type": "bearer",
            "session": session_info(session),
        }


def session_info(session: Session) -> dict:
    return {
        "role": session.role.value if session.role else None,
        "employee_id": session.employee_id,
        "admin_id": session.admin_id,
        "permissions": session.permissions,
        "visibility": resolve_visibility(session).to_dict(),
    }
