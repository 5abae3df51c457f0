from fastapi import APIRouter, Depends, Request

from officedesk.config import get_api_client
from officedesk.listing import ControllerRegistry, get_controller_registry
from officedesk.remote import OfficeApiClient
from officedesk.utils import remote_error_response, success_response
from officedesk.utils.exceptions import RemoteApiError
from .schemas import LoginRequest
from .service import AuthService, session_info

auth_router = APIRouter()


@auth_router.post("/login")
async def login(
    body: LoginRequest,
    client: OfficeApiClient = Depends(get_api_client),
):
    """Authenticate against the office API and return a session token."""
    try:
        result = await AuthService(client).login(body.email, body.password)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Login failed. Please try again.")
    return success_response(data=result, message="Login successful")


@auth_router.post("/logout")
async def logout(
    request: Request,
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    """Drop every list view held for this session."""
    disposed = registry.dispose_session(request.state.session.session_id)
    return success_response(data={"disposed_views": disposed}, message="Logged out")


@auth_router.get("/me")
async def me(request: Request):
    return success_response(data=session_info(request.state.session))
