import httpx
import pytest

from officedesk.kpi.schemas import ExportScope
from officedesk.kpi.service import (
    KpiService,
    build_kpi_controller,
    kpi_payload,
    map_kpi_row,
)
from officedesk.listing import DateRange, ListQuery
from officedesk.remote import BlobPayload
from officedesk.session import Session
from officedesk.utils import Notice, NoticeLevel
from officedesk.utils.exceptions import ApplicationError

from conftest import subadmin

MANAGER = subadmin("Manage KPI")
EMPLOYEE = subadmin("View KPI details", employee_id="E7")


def kpi_query(**changes) -> ListQuery:
    return ListQuery(sort_field="createdAt", sort_ascending=False, page_size=10).with_changes(
        **changes
    )


def csv_response(request):
    return httpx.Response(
        200,
        content=b"kpiId,employee,project\nK1,E7,Website\n",
        headers={
            "content-type": "text/csv; charset=utf-8",
            "content-disposition": 'attachment; filename="kpis.csv"',
        },
    )


class TestExport:
    async def test_selected_scope_without_selection_sends_nothing(self, fake_api, api_client):
        fake_api.on("/kpi/export", csv_response)

        result = await KpiService(api_client, MANAGER).export_csv(
            ExportScope.SELECTED, [], kpi_query()
        )

        assert isinstance(result, Notice)
        assert result.level == NoticeLevel.WARNING
        assert fake_api.requests == []

    async def test_selected_scope_sends_unique_ids(self, fake_api, api_client):
        fake_api.on("/kpi/export", csv_response)

        await KpiService(api_client, MANAGER).export_csv(
            ExportScope.SELECTED, ["E2", "E1", "E2"], kpi_query()
        )

        assert fake_api.calls("/kpi/export")[0]["employeeIds"] == ["E2", "E1"]

    async def test_all_scope_carries_filters_and_sort(self, fake_api, api_client):
        fake_api.on("/kpi/export", csv_response)
        query = kpi_query(
            search="website",
            sort_field="deadline",
            sort_ascending=True,
            date_range=DateRange(start="2025-05-01", end="2025-05-31"),
        )

        result = await KpiService(api_client, MANAGER).export_csv(ExportScope.ALL, [], query)

        assert isinstance(result, BlobPayload)
        assert result.media_type == "text/csv"
        assert result.filename == "kpis.csv"
        assert fake_api.calls("/kpi/export") == [
            {
                "scope": "all",
                "search": "website",
                "sortBy": "deadline",
                "sortOrder": "asc",
                "startDate": "2025-05-01",
                "endDate": "2025-05-31",
            }
        ]

    async def test_mine_scope_uses_session_employee(self, fake_api, api_client):
        fake_api.on("/kpi/export", csv_response)

        await KpiService(api_client, EMPLOYEE).export_csv(ExportScope.MINE, [], kpi_query())

        assert fake_api.calls("/kpi/export")[0]["employeeIds"] == ["E7"]

    async def test_json_error_blob_is_surfaced(self, fake_api, api_client):
        fake_api.on(
            "/kpi/export",
            lambda r: httpx.Response(
                400,
                content=b'{"success": false, "message": "Date range too large"}',
                headers={"content-type": "application/octet-stream"},
            ),
        )

        with pytest.raises(ApplicationError) as info:
            await KpiService(api_client, MANAGER).export_csv(ExportScope.ALL, [], kpi_query())
        assert info.value.user_message() == "Date range too large"


class TestPunchAndQuality:
    async def test_blank_remark_sends_nothing(self, fake_api, api_client):
        notice = await KpiService(api_client, EMPLOYEE).punch("K1", "   ")
        assert notice.level == NoticeLevel.WARNING
        assert fake_api.requests == []

    async def test_punch_forwards_remark(self, fake_api, api_client):
        fake_api.on("/kpi/punch", {"success": True, "data": {}})
        notice = await KpiService(api_client, EMPLOYEE).punch("K1", " Deployed staging ")
        assert notice is None
        assert fake_api.calls("/kpi/punch") == [{"kpiId": "K1", "remark": "Deployed staging"}]

    async def test_quality_point_must_be_one_step(self, api_client):
        with pytest.raises(ValueError):
            await KpiService(api_client, MANAGER).set_quality("K1", 2)

    async def test_quality_point_is_forwarded(self, fake_api, api_client):
        fake_api.on("/kpi/setQualityPoint", {"success": True})
        await KpiService(api_client, MANAGER).set_quality("K1", -1)
        assert fake_api.calls("/kpi/setQualityPoint") == [{"kpiId": "K1", "qualityPoints": -1}]


class TestAddKpi:
    async def test_non_manager_always_files_for_self(self, fake_api, api_client):
        fake_api.on("/kpi/addkpi", {"success": True})

        await KpiService(api_client, EMPLOYEE).add_kpi(
            "E999", "Website", "2025-05-01", "2025-05-30", "first draft"
        )

        assert fake_api.calls("/kpi/addkpi") == [
            {
                "employeeId": "E7",
                "projectName": "Website",
                "startdate": "2025-05-01",
                "deadline": "2025-05-30",
                "Remark": "first draft",
            }
        ]

    async def test_manager_files_for_chosen_employee(self, fake_api, api_client):
        fake_api.on("/kpi/addkpi", {"success": True})
        await KpiService(api_client, MANAGER).add_kpi("E3", "App", "", "", "")
        assert fake_api.calls("/kpi/addkpi")[0]["employeeId"] == "E3"

    async def test_no_employee_at_all_is_rejected(self, fake_api, api_client):
        session = Session(role="subadmin", permissions={"Add KPI details": 1})
        with pytest.raises(ValueError):
            await KpiService(api_client, session).add_kpi(None, "App", "", "", "")
        assert fake_api.requests == []


class TestKpiList:
    def test_sort_field_maps_to_api_names(self):
        assert kpi_payload(kpi_query(sort_field="deadline"))["sortBy"] == "deadline"
        assert kpi_payload(kpi_query(sort_field="projectName"))["sortBy"] == "createdAt"

    def test_row_mapping_surfaces_last_punch(self):
        row = map_kpi_row(
            {
                "kpiId": "K1",
                "Remark": "on track",
                "quality": 1,
                "punches": [
                    {"punchDate": "2025-05-01", "remark": "start", "status": "ok"},
                    {"punchDate": "2025-05-09", "remark": "review", "status": "late"},
                ],
            }
        )
        assert row["remark"] == "on track"
        assert row["qualityPoints"] == 1
        assert row["lastPunchDate"] == "2025-05-09"
        assert row["lastPunchStatus"] == "late"

    async def test_manager_list_is_paged_from_get_all(self, fake_api, api_client):
        fake_api.on(
            "/kpi/getAll",
            {"success": True, "data": {"kpis": [{"kpiId": "K1"}], "total": 21}},
        )
        controller = build_kpi_controller(api_client, MANAGER)

        view = await controller.set_employee_filter(["E1"])

        assert view["total_pages"] == 3
        assert fake_api.calls("/kpi/getAll")[0]["employeeIds"] == ["E1"]

    async def test_employee_list_is_own_and_unpaged(self, fake_api, api_client):
        fake_api.on(
            "/kpi/getByEmployeeId",
            {"success": True, "data": {"kpis": [{"kpiId": f"K{i}"} for i in range(14)]}},
        )
        controller = build_kpi_controller(api_client, EMPLOYEE)

        view = await controller.fetch_page()

        assert view["total_pages"] == 1
        assert len(view["rows"]) == 14
        sent = fake_api.calls("/kpi/getByEmployeeId")[0]
        assert sent["employeeId"] == "E7"
        assert sent["sortBy"] == "startdate"
        assert sent["sortOrder"] == "asc"

    def test_list_opens_on_start_date_earliest_first(self, api_client):
        controller = build_kpi_controller(api_client, MANAGER)
        assert controller.query.sort_field == "startdate"
        assert controller.query.sort_ascending is True
