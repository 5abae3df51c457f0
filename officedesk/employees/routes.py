"""
Employee Routes

Endpoints:
    GET    /list ...            List view (see officedesk.listing.routes)
    GET    /options             {employeeId, name} for pickers on other pages
    GET    /{employee_id}       Single employee record
    POST   /                    Add employee
    PUT    /{employee_id}       Update employee
    DELETE /{employee_id}       Delete employee (admin only)
"""

from fastapi import APIRouter, Depends, Request

from officedesk.config import get_api_client
from officedesk.listing import ControllerRegistry, get_controller_registry
from officedesk.listing.routes import list_view_router
from officedesk.rbac import ActionId, require_action
from officedesk.remote import OfficeApiClient
from officedesk.utils import Logger, remote_error_response, success_response
from officedesk.utils.exceptions import RemoteApiError
from .schemas import CreateEmployeeRequest, UpdateEmployeeRequest
from .service import EmployeeService, build_employee_controller

logger = Logger("employees")

employees_router = APIRouter()
employees_router.include_router(
    list_view_router("employees", build_employee_controller, ActionId.EMPLOYEE_VIEW),
    prefix="/list",
)


@employees_router.get("/options")
@require_action(
    ActionId.EMPLOYEE_VIEW,
    ActionId.KPI_MANAGE,
    ActionId.PAYSLIP_GENERATE,
    ActionId.USERACCESS_ADD,
)
async def employee_options(
    request: Request,
    client: OfficeApiClient = Depends(get_api_client),
):
    """Employee picker options, sorted by name."""
    try:
        options = await EmployeeService(client).list_options()
    except RemoteApiError as exc:
        logger.warning(f"Failed to fetch employees list: {exc!r}")
        return remote_error_response(exc, "Failed to fetch employees list.")
    return success_response(data={"employees": options})


@employees_router.get("/{employee_id}")
@require_action(ActionId.EMPLOYEE_VIEW, ActionId.EMPLOYEE_EDIT)
async def get_employee(
    request: Request,
    employee_id: str,
    client: OfficeApiClient = Depends(get_api_client),
):
    """Fetch one employee (used by the edit form)."""
    try:
        employee = await EmployeeService(client).get_employee(employee_id)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Failed to load employee record.")
    return success_response(data={"employee": employee})


@employees_router.post("/")
@require_action(ActionId.EMPLOYEE_ADD)
async def create_employee(
    request: Request,
    body: CreateEmployeeRequest,
    client: OfficeApiClient = Depends(get_api_client),
):
    """Add a new employee record."""
    try:
        result = await EmployeeService(client).create_employee(body.model_dump(mode="json"))
    except RemoteApiError as exc:
        return remote_error_response(exc, "Operation failed.")
    return success_response(
        data=result, message="Employee record added successfully!", code=201
    )


@employees_router.put("/{employee_id}")
@require_action(ActionId.EMPLOYEE_EDIT)
async def update_employee(
    request: Request,
    employee_id: str,
    body: UpdateEmployeeRequest,
    client: OfficeApiClient = Depends(get_api_client),
):
    """Update an employee; only the fields sent are forwarded."""
    changes = body.model_dump(mode="json", exclude_unset=True)
    try:
        result = await EmployeeService(client).update_employee(employee_id, changes)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Operation failed.")
    return success_response(data=result, message="Employee record updated successfully!")


@employees_router.delete("/{employee_id}")
@require_action(ActionId.EMPLOYEE_DELETE)
async def delete_employee(
    request: Request,
    employee_id: str,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    """
    Delete an employee, then refresh the caller's employee list so a page
    emptied by the delete steps back instead of showing nothing.
    """
    try:
        await EmployeeService(client).delete_employee(employee_id)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Failed to delete employee.")

    data = None
    controller = registry.get(request.state.session.session_id, "employees")
    if controller is not None:
        data = {"list": await controller.after_delete()}
    return success_response(data=data, message="Employee has been deleted.")
