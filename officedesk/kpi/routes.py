"""
KPI Routes

Endpoints:
    GET    /list ...                List view (search / sort / page)
    POST   /list/date-range         Filter by start/end date
    POST   /list/employees          Filter by employees (managers)
    GET    /{kpi_id}                Single KPI (edit form)
    POST   /                        Add KPI
    PUT    /{kpi_id}                Update project name / remark
    DELETE /{kpi_id}                Delete KPI
    POST   /{kpi_id}/punch          Punch in with a remark
    POST   /{kpi_id}/quality        Quality point +1 / -1 (managers)
    POST   /export                  CSV export of the current filters
"""

from fastapi import APIRouter, Depends, Request

from officedesk.config import get_api_client
from officedesk.listing import ControllerRegistry, ListQuery, get_controller_registry
from officedesk.listing.routes import list_view_response, list_view_router, session_controller
from officedesk.listing.schemas import DateRangeRequest, EmployeeFilterRequest
from officedesk.rbac import ActionId, require_action
from officedesk.remote import OfficeApiClient
from officedesk.utils import (
    Logger,
    Notice,
    download_response,
    error_response,
    notice_response,
    remote_error_response,
    success_response,
)
from officedesk.utils.exceptions import RemoteApiError
from .schemas import (
    CreateKpiRequest,
    ExportRequest,
    PunchRequest,
    QualityRequest,
    UpdateKpiRequest,
)
from .service import INITIAL_SORT_FIELD, KpiService, build_kpi_controller

logger = Logger("kpi")

KPI_VIEW = "kpi"

kpi_router = APIRouter()


# ── List view ────────────────────────────────────────────────────


@kpi_router.post("/list/date-range")
@require_action(ActionId.KPI_VIEW)
async def set_date_range(
    request: Request,
    body: DateRangeRequest,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    controller = session_controller(request, registry, client, KPI_VIEW, build_kpi_controller)
    return list_view_response(await controller.set_date_range(body.start, body.end))


@kpi_router.post("/list/employees")
@require_action(ActionId.KPI_MANAGE)
async def set_employee_filter(
    request: Request,
    body: EmployeeFilterRequest,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    controller = session_controller(request, registry, client, KPI_VIEW, build_kpi_controller)
    return list_view_response(await controller.set_employee_filter(body.employee_ids))


kpi_router.include_router(
    list_view_router(KPI_VIEW, build_kpi_controller, ActionId.KPI_VIEW),
    prefix="/list",
)


# ── Export ───────────────────────────────────────────────────────


@kpi_router.post("/export")
@require_action(ActionId.KPI_EXPORT)
async def export_kpis(
    request: Request,
    body: ExportRequest,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    """
    CSV of the KPIs matching the list's current search, date range and sort.
    Scope "selected" with nothing selected returns a warning without
    contacting the API.
    """
    session = request.state.session
    controller = registry.get(session.session_id, KPI_VIEW)
    query = controller.query if controller is not None else ListQuery(
        sort_field=INITIAL_SORT_FIELD, sort_ascending=True
    )

    try:
        result = await KpiService(client, session).export_csv(body.scope, body.employee_ids, query)
    except RemoteApiError as exc:
        logger.warning(f"KPI export failed: {exc!r}")
        return remote_error_response(exc, "Failed to export KPIs.")

    if isinstance(result, Notice):
        return notice_response(result, code=400)
    return download_response(
        result.content, result.media_type, result.filename or "kpi-export.csv"
    )


# ── Single KPI ───────────────────────────────────────────────────


@kpi_router.get("/{kpi_id}")
@require_action(ActionId.KPI_VIEW, ActionId.KPI_EDIT)
async def get_kpi(
    request: Request,
    kpi_id: str,
    client: OfficeApiClient = Depends(get_api_client),
):
    try:
        kpi = await KpiService(client, request.state.session).get_kpi(kpi_id)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Could not load KPI")
    return success_response(data={"kpi": kpi})


@kpi_router.post("/")
@require_action(ActionId.KPI_ADD)
async def add_kpi(
    request: Request,
    body: CreateKpiRequest,
    client: OfficeApiClient = Depends(get_api_client),
):
    service = KpiService(client, request.state.session)
    try:
        data = await service.add_kpi(
            body.employee_id, body.project_name, body.start_date, body.deadline, body.remark
        )
    except ValueError as exc:
        return notice_response(Notice.warning(str(exc)), code=422)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Operation failed")
    return success_response(data=data, message="KPI Added", code=201)


@kpi_router.put("/{kpi_id}")
@require_action(ActionId.KPI_EDIT)
async def update_kpi(
    request: Request,
    kpi_id: str,
    body: UpdateKpiRequest,
    client: OfficeApiClient = Depends(get_api_client),
):
    service = KpiService(client, request.state.session)
    try:
        data = await service.update_kpi(kpi_id, body.project_name, body.remark)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Operation failed")
    return success_response(data=data, message="KPI Updated")


@kpi_router.delete("/{kpi_id}")
@require_action(ActionId.KPI_DELETE)
async def delete_kpi(
    request: Request,
    kpi_id: str,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    session = request.state.session
    try:
        await KpiService(client, session).delete_kpi(kpi_id)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Delete failed")

    data = None
    controller = registry.get(session.session_id, KPI_VIEW)
    if controller is not None:
        data = {"list": await controller.after_delete()}
    return success_response(data=data, message="KPI deleted")


# ── Punch / quality ──────────────────────────────────────────────


@kpi_router.post("/{kpi_id}/punch")
@require_action(ActionId.KPI_PUNCH)
async def punch_kpi(
    request: Request,
    kpi_id: str,
    body: PunchRequest,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    session = request.state.session
    try:
        notice = await KpiService(client, session).punch(kpi_id, body.remark)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Punch failed")
    if notice is not None:
        return notice_response(notice, code=422)

    data = None
    controller = registry.get(session.session_id, KPI_VIEW)
    if controller is not None:
        data = {"list": await controller.refresh()}
    return success_response(data=data, message="Punch recorded successfully")


@kpi_router.post("/{kpi_id}/quality")
@require_action(ActionId.KPI_MANAGE)
async def set_quality(
    request: Request,
    kpi_id: str,
    body: QualityRequest,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    session = request.state.session
    try:
        await KpiService(client, session).set_quality(kpi_id, body.value)
    except ValueError as exc:
        return error_response(str(exc), code=422)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Failed to update quality points")

    data = None
    controller = registry.get(session.session_id, KPI_VIEW)
    if controller is not None:
        data = {"list": await controller.refresh()}
    return success_response(data=data, message="Quality points updated")
