"""
User access (sub-admin) service.

Remote endpoints:
    POST /subadmin/getlist       {search, page, pageSize} -> {subadmins, total}
    POST /subadmin/register      {adminid, employeeid, username, password, permissions}
    POST /subadmin/deleterecord  {subadminId}
"""

from officedesk.config import settings
from officedesk.listing import ListController, ListEndpoint, ListQuery, ServerPagedStrategy
from officedesk.remote import OfficeApiClient
from officedesk.session import Session
from .schemas import RegisterSubadminRequest

SUBADMIN_LIST = ListEndpoint(path="/subadmin/getlist", rows_key="subadmins")


def build_subadmin_controller(client: OfficeApiClient, session: Session) -> ListController:
    return ListController(
        name="useraccess",
        strategy=ServerPagedStrategy(client, SUBADMIN_LIST),
        initial_query=ListQuery(sort_field="name", page_size=settings.subadmin_page_size),
        failure_message="Error fetching subadmins.",
        empty_message="No subadmins found.",
    )


class UserAccessService:
    def __init__(self, client: OfficeApiClient, session: Session):
        self.client = client
        self.session = session

    async def register(self, body: RegisterSubadminRequest) -> dict:
        envelope = await self.client.post(
            "/subadmin/register",
            {
                "adminid": self.session.admin_id,
                "employeeid": body.employee_id,
                "username": body.username,
                "password": body.password,
                "permissions": {name: True for name in body.permissions},
            },
        )
        return envelope.get("data") or {}

    async def delete(self, subadmin_id: str) -> None:
        await self.client.post("/subadmin/deleterecord", {"subadminId": subadmin_id})
