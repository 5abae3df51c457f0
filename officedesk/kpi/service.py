"""
KPI Service

Managers (admin, or subadmin holding Manage KPI) browse every KPI through
/kpi/getAll with paging, date range and employee filters. Everyone else
sees only their own KPIs through /kpi/getByEmployeeId, which answers with
the whole set at once.

Remote endpoints:
    POST /kpi/getAll             paged list (managers)
    POST /kpi/getByEmployeeId    own KPIs, unpaged
    GET  /kpi/getByKpiId/{id}    single KPI
    POST /kpi/addkpi             {employeeId, projectName, startdate, deadline, Remark}
    POST /kpi/updateKPi          {kpiId, projectName, Remark}
    POST /kpi/deleteKpi          {kpiId}
    POST /kpi/punch              {kpiId, remark}
    POST /kpi/setQualityPoint    {kpiId, qualityPoints: -1 | 1}
    POST /kpi/export             CSV download
"""

from typing import Optional
from urllib.parse import quote

from officedesk.config import settings
from officedesk.listing import ListController, ListEndpoint, ListQuery, ServerPagedStrategy
from officedesk.rbac import ActionId, resolve_visibility
from officedesk.remote import BlobPayload, OfficeApiClient
from officedesk.session import Session
from officedesk.utils import Logger, Notice
from officedesk.utils.exceptions import MalformedResponseError
from .schemas import ExportScope

logger = Logger("kpi")

# Fields the API can sort on; anything else falls back to creation time
SERVER_SORT_FIELDS = ("startdate", "deadline")
DEFAULT_SORT_FIELD = "createdAt"

# The list opens on start date, earliest first
INITIAL_SORT_FIELD = "startdate"

CSV_MEDIA_TYPES = ("text/csv", "application/csv")


def api_sort_field(field: Optional[str]) -> str:
    return field if field in SERVER_SORT_FIELDS else DEFAULT_SORT_FIELD


def kpi_payload(query: ListQuery) -> dict:
    payload = {
        "search": query.search,
        "page": query.page,
        "pageSize": query.page_size,
        "sortBy": api_sort_field(query.sort_field),
        "sortOrder": "asc" if query.sort_ascending else "desc",
    }
    if query.date_range:
        payload["startDate"] = query.date_range.start
        payload["endDate"] = query.date_range.end
    if query.employee_ids:
        payload["employeeIds"] = list(query.employee_ids)
    return payload


def _quality(row: dict):
    for key in ("qualityPoints", "quality", "quality_points"):
        if row.get(key) is not None:
            return row[key]
    return None


def map_kpi_row(row: dict) -> dict:
    """Flatten an API KPI record; the last punch is surfaced for the table."""
    punches = row.get("punches") or []
    last = punches[-1] if isinstance(punches, list) and punches else {}
    if not isinstance(last, dict):
        last = {}
    return {
        "kpiId": row.get("kpiId"),
        "employeeId": row.get("employeeId"),
        "employeeName": row.get("employeeName"),
        "projectName": row.get("projectName"),
        "startdate": row.get("startdate") or None,
        "deadline": row.get("deadline") or None,
        "remark": row.get("Remark") or row.get("remark") or "",
        "points": row.get("points"),
        "qualityPoints": _quality(row),
        "lastPunchDate": last.get("punchDate"),
        "lastPunchRemark": last.get("remark"),
        "lastPunchStatus": last.get("status"),
    }


def is_kpi_manager(session: Session) -> bool:
    return resolve_visibility(session).can(ActionId.KPI_MANAGE)


def build_kpi_controller(client: OfficeApiClient, session: Session) -> ListController:
    if is_kpi_manager(session):
        endpoint = ListEndpoint(
            path="/kpi/getAll",
            rows_key="kpis",
            payload_builder=kpi_payload,
            row_mapper=map_kpi_row,
        )
    else:
        endpoint = ListEndpoint(
            path="/kpi/getByEmployeeId",
            rows_key="kpis",
            payload_builder=kpi_payload,
            row_mapper=map_kpi_row,
            paged=False,
            extra={"employeeId": session.employee_id} if session.employee_id else {},
        )
    logger.debug(f"KPI list for role={session.role} uses {endpoint.path}")

    return ListController(
        name="kpi",
        strategy=ServerPagedStrategy(client, endpoint),
        initial_query=ListQuery(
            sort_field=INITIAL_SORT_FIELD,
            sort_ascending=True,
            page_size=settings.kpi_page_size,
        ),
        failure_message="Failed to fetch KPIs",
    )


class KpiService:
    def __init__(self, client: OfficeApiClient, session: Session):
        self.client = client
        self.session = session

    async def get_kpi(self, kpi_id: str) -> dict:
        envelope = await self.client.get(f"/kpi/getByKpiId/{quote(kpi_id, safe='')}")
        data = envelope.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError("KPI record missing from response")
        return {
            "kpiId": data.get("kpiId", kpi_id),
            "employeeId": data.get("employeeId") or "",
            "projectName": data.get("projectName") or "",
            "startdate": data.get("startdate") or "",
            "deadline": data.get("deadline") or "",
            "remark": data.get("remark") or data.get("Remark") or "",
        }

    async def add_kpi(
        self,
        employee_id: Optional[str],
        project_name: str,
        start_date: str,
        deadline: str,
        remark: str,
    ) -> dict:
        if not is_kpi_manager(self.session) or not employee_id:
            employee_id = self.session.employee_id
        if not employee_id:
            raise ValueError("Please select an employee.")
        envelope = await self.client.post(
            "/kpi/addkpi",
            {
                "employeeId": employee_id,
                "projectName": project_name,
                "startdate": start_date,
                "deadline": deadline,
                "Remark": remark,
            },
        )
        return envelope.get("data") or {}

    async def update_kpi(self, kpi_id: str, project_name: str, remark: str) -> dict:
        envelope = await self.client.post(
            "/kpi/updateKPi",
            {"kpiId": kpi_id, "projectName": project_name, "Remark": remark},
        )
        return envelope.get("data") or {}

    async def delete_kpi(self, kpi_id: str) -> None:
        await self.client.post("/kpi/deleteKpi", {"kpiId": kpi_id})

    async def punch(self, kpi_id: str, remark: str) -> Optional[Notice]:
        """
        Record a punch. A blank remark sends nothing and returns a warning;
        on success returns None.
        """
        remark = (remark or "").strip()
        if not remark:
            return Notice.warning("A remark is required to punch in.")
        await self.client.post("/kpi/punch", {"kpiId": kpi_id, "remark": remark})
        return None

    async def set_quality(self, kpi_id: str, value: int) -> dict:
        if value not in (-1, 1):
            raise ValueError("Quality point must be -1 or +1")
        envelope = await self.client.post(
            "/kpi/setQualityPoint", {"kpiId": kpi_id, "qualityPoints": value}
        )
        return envelope.get("data") or {}

    def export_payload(
        self,
        scope: ExportScope,
        selected_ids: list[str],
        query: ListQuery,
    ) -> dict | Notice:
        """
        Build the export request, or a warning Notice when there is nothing
        to export (scope "selected" with no selection, "mine" without an
        employee id).
        """
        payload = {
            "scope": scope.value,
            "search": query.search,
            "sortBy": api_sort_field(query.sort_field),
            "sortOrder": "asc" if query.sort_ascending else "desc",
        }
        if query.date_range:
            payload["startDate"] = query.date_range.start
            payload["endDate"] = query.date_range.end

        if scope == ExportScope.SELECTED:
            ids = list(dict.fromkeys(i for i in selected_ids if i))
            if not ids:
                return Notice.warning("Select at least one employee to export.")
            payload["employeeIds"] = ids
        elif scope == ExportScope.MINE:
            if not self.session.employee_id:
                return Notice.warning("No employee is linked to this account.")
            payload["employeeIds"] = [self.session.employee_id]
        return payload

    async def export_csv(
        self,
        scope: ExportScope,
        selected_ids: list[str],
        query: ListQuery,
    ) -> BlobPayload | Notice:
        payload = self.export_payload(scope, selected_ids, query)
        if isinstance(payload, Notice):
            return payload
        logger.info(f"KPI export scope={scope.value}")
        return await self.client.post_blob("/kpi/export", payload, accept=CSV_MEDIA_TYPES)
