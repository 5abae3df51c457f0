"""
User Access Routes

Endpoints:
    GET    /list ...             Sub-admin list view
    GET    /permissions          Grantable permission names
    POST   /                     Register a sub-admin
    DELETE /{subadmin_id}        Remove a sub-admin
"""

from fastapi import APIRouter, Depends, Request

from officedesk.config import get_api_client
from officedesk.listing import ControllerRegistry, get_controller_registry
from officedesk.listing.routes import list_view_router
from officedesk.rbac import ALL_CAPABILITIES, ActionId, require_action
from officedesk.remote import OfficeApiClient
from officedesk.utils import Logger, remote_error_response, success_response
from officedesk.utils.exceptions import RemoteApiError
from .schemas import RegisterSubadminRequest
from .service import UserAccessService, build_subadmin_controller

logger = Logger("useraccess")

useraccess_router = APIRouter()
useraccess_router.include_router(
    list_view_router("useraccess", build_subadmin_controller, ActionId.USERACCESS_VIEW),
    prefix="/list",
)


@useraccess_router.get("/permissions")
@require_action(ActionId.USERACCESS_ADD)
async def grantable_permissions(request: Request):
    return success_response(data={"permissions": list(ALL_CAPABILITIES)})


@useraccess_router.post("/")
@require_action(ActionId.USERACCESS_ADD)
async def register_subadmin(
    request: Request,
    body: RegisterSubadminRequest,
    client: OfficeApiClient = Depends(get_api_client),
):
    try:
        data = await UserAccessService(client, request.state.session).register(body)
    except RemoteApiError as exc:
        logger.warning(f"Sub-admin registration failed: {exc!r}")
        return remote_error_response(exc, "Registration failed.")
    return success_response(
        data=data, message="Subadmin registered successfully!", code=201
    )


@useraccess_router.delete("/{subadmin_id}")
@require_action(ActionId.USERACCESS_DELETE)
async def delete_subadmin(
    request: Request,
    subadmin_id: str,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    session = request.state.session
    try:
        await UserAccessService(client, session).delete(subadmin_id)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Failed to delete")

    data = None
    controller = registry.get(session.session_id, "useraccess")
    if controller is not None:
        data = {"list": await controller.after_delete()}
    return success_response(data=data, message="Subadmin removed successfully.")
