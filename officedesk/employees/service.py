"""
Employee Service — forwards employee CRUD to the office API and builds the
employee list controller.

Remote endpoints:
    POST /employee/getlist      {search, page, pageSize, ...} -> {employees, totalPages}
    GET  /employee/getrecord    ?employeeId=
    POST /employee/SaveRecord   new employee
    POST /employee/update       {employeeId, ...changes}
    POST /employee/delete       {employeeId}
"""

from officedesk.config import settings
from officedesk.listing import ListController, ListEndpoint, ListQuery, ServerPagedStrategy
from officedesk.remote import OfficeApiClient
from officedesk.session import Session
from officedesk.utils.exceptions import MalformedResponseError

EMPLOYEE_LIST = ListEndpoint(path="/employee/getlist", rows_key="employees")

# Employee pickers (KPI, payslip, user access) load this many at once
OPTIONS_PAGE_SIZE = 1000


def build_employee_controller(client: OfficeApiClient, session: Session) -> ListController:
    return ListController(
        name="employees",
        strategy=ServerPagedStrategy(client, EMPLOYEE_LIST),
        initial_query=ListQuery(sort_field="name", page_size=settings.employee_page_size),
        failure_message="Failed to fetch employee data.",
        empty_message="No employees found.",
    )


class EmployeeService:
    def __init__(self, client: OfficeApiClient):
        self.client = client

    async def get_employee(self, employee_id: str) -> dict:
        envelope = await self.client.get(
            "/employee/getrecord", params={"employeeId": employee_id}
        )
        data = envelope.get("data")
        if isinstance(data, dict) and isinstance(data.get("employee"), dict):
            return data["employee"]
        if isinstance(data, dict):
            return data
        raise MalformedResponseError("Employee record missing from response")

    async def create_employee(self, data: dict) -> dict:
        envelope = await self.client.post("/employee/SaveRecord", data)
        return envelope.get("data") or {}

    async def update_employee(self, employee_id: str, changes: dict) -> dict:
        envelope = await self.client.post(
            "/employee/update", {"employeeId": employee_id, **changes}
        )
        return envelope.get("data") or {}

    async def delete_employee(self, employee_id: str) -> None:
        await self.client.post("/employee/delete", {"employeeId": employee_id})

    async def list_options(self) -> list[dict]:
        """
        Every employee as `{employeeId, name}`, deduplicated and sorted by
        name, for the selection widgets on other pages.
        """
        envelope = await self.client.post(
            EMPLOYEE_LIST.path, {"page": 1, "pageSize": OPTIONS_PAGE_SIZE}
        )
        data = envelope.get("data") or {}
        rows = data.get("employees") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise MalformedResponseError("Employee list missing from response")

        by_id: dict[str, dict] = {}
        for row in rows:
            if not isinstance(row, dict) or not row.get("employeeId"):
                continue
            by_id[str(row["employeeId"])] = {
                "employeeId": str(row["employeeId"]),
                "name": row.get("name") or "",
            }
        return sorted(by_id.values(), key=lambda e: e["name"].casefold())
