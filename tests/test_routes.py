import json

import httpx

from officedesk.session import Session, decode_session_token

from conftest import bearer, paged_handler, subadmin

API = "/api/v1"


def employee_rows(count: int) -> list[dict]:
    return [{"employeeId": f"E{i:03d}", "name": f"Employee {i:03d}"} for i in range(1, count + 1)]


class TestSessionMiddleware:
    def test_health_is_open(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_missing_token_is_rejected(self, client):
        response = client.get(f"{API}/navigation")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_rejection_carries_cors_headers(self, client):
        response = client.get(
            f"{API}/navigation", headers={"Origin": "http://localhost:3000"}
        )
        assert response.status_code == 401
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"

    def test_garbage_token_is_rejected(self, client):
        response = client.get(
            f"{API}/navigation", headers={"Authorization": "Bearer not.a.jwt"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid or expired session"


class TestAuth:
    def test_login_builds_session_from_office_api(self, client, fake_api):
        fake_api.on(
            "/admin/login",
            {
                "success": True,
                "data": {
                    "adminId": "A9",
                    "role": "subadmin",
                    "employeeId": "E12",
                    "permissions": {"View Invoice details": 1, "Generate payslip": 0},
                },
            },
        )

        response = client.post(
            f"{API}/auth/login", json={"email": "ops@example.com", "password": "secret"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        session = decode_session_token(data["access_token"])
        assert session.role.value == "subadmin"
        assert session.employee_id == "E12"
        assert data["session"]["visibility"]["sections"] == ["dashboard", "invoice"]
        assert fake_api.calls("/admin/login") == [
            {"email": "ops@example.com", "password": "secret"}
        ]

    def test_rejected_credentials_keep_server_message(self, client, fake_api):
        fake_api.on("/admin/login", {"success": False, "message": "Invalid credentials"}, status=401)

        response = client.post(f"{API}/auth/login", json={"email": "x", "password": "y"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid credentials"

    def test_unreachable_api_is_502(self, client, fake_api):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        fake_api.on("/admin/login", refuse)
        response = client.post(f"{API}/auth/login", json={"email": "x", "password": "y"})

        assert response.status_code == 502
        assert response.json()["error"]["message"] == "Login failed. Please try again."

    def test_me_returns_visibility(self, client, admin_session):
        response = client.get(f"{API}/auth/me", headers=bearer(admin_session))
        data = response.json()["data"]
        assert data["role"] == "admin"
        assert "employee.delete" in data["visibility"]["actions"]

    def test_logout_disposes_list_views(self, client, fake_api, registry):
        fake_api.on("/employee/getlist", paged_handler(employee_rows(3), "employees"))
        session = subadmin("View Employee Details")
        headers = bearer(session)
        client.get(f"{API}/employees/list", headers=headers)
        assert registry.get(session.session_id, "employees") is not None

        response = client.post(f"{API}/auth/logout", headers=headers)

        assert response.json()["data"]["disposed_views"] == 1
        assert registry.get(session.session_id, "employees") is None


class TestNavigation:
    def test_sidebar_follows_visibility(self, client):
        response = client.get(
            f"{API}/navigation", headers=bearer(subadmin("View Invoice details"))
        )
        sidebar = response.json()["data"]["sidebar"]
        assert [e["section"] for e in sidebar] == ["dashboard", "invoice"]
        assert [c["href"] for c in sidebar[1]["children"]] == [
            "/invoice/mhd",
            "/invoice/enoylitystudio",
            "/invoice/enoylitytech",
        ]

    def test_dashboard_panels_drop_unusable_options(self, client):
        response = client.get(
            f"{API}/dashboard", headers=bearer(subadmin("View Employee Details"))
        )
        panels = response.json()["data"]["panels"]
        assert len(panels) == 1
        assert panels[0]["title"] == "Employees"
        assert [o["title"] for o in panels[0]["options"]] == ["View"]

    def test_admin_sees_every_panel(self, client, admin_session):
        response = client.get(f"{API}/dashboard", headers=bearer(admin_session))
        titles = [p["title"] for p in response.json()["data"]["panels"]]
        assert titles == ["Invoice", "Payslip", "Employees", "KPI", "User Access", "Settings"]


class TestEmployeeList:
    def test_list_requires_capability(self, client):
        response = client.get(
            f"{API}/employees/list", headers=bearer(subadmin("View Invoice details"))
        )
        assert response.status_code == 403

    def test_sort_toggles_on_same_column(self, client, fake_api):
        fake_api.on("/employee/getlist", paged_handler(employee_rows(3), "employees"))
        headers = bearer(subadmin("View Employee Details"))

        client.get(f"{API}/employees/list", headers=headers)
        response = client.post(f"{API}/employees/list/sort", json={"field": "name"}, headers=headers)

        assert response.json()["data"]["query"]["sort_ascending"] is False
        assert fake_api.calls("/employee/getlist")[-1]["sortOrder"] == "desc"

    def test_failed_fetch_returns_view_with_error_notice(self, client, fake_api):
        fake_api.on("/employee/getlist", {"success": False, "message": "Database offline"})

        response = client.get(
            f"{API}/employees/list", headers=bearer(subadmin("View Employee Details"))
        )

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is False
        assert body["data"]["notice"] == {"level": "error", "message": "Database offline"}

    def test_delete_is_admin_only(self, client):
        response = client.delete(
            f"{API}/employees/E001",
            headers=bearer(subadmin("View Employee Details", "Add Employee Details")),
        )
        assert response.status_code == 403

    def test_delete_of_last_row_steps_back_a_page(self, client, fake_api, admin_session):
        rows = employee_rows(11)
        fake_api.on(
            "/employee/getlist", paged_handler(rows, "employees", report="totalPages")
        )

        def delete(request):
            employee_id = json.loads(request.content)["employeeId"]
            rows[:] = [r for r in rows if r["employeeId"] != employee_id]
            return httpx.Response(200, json={"success": True})

        fake_api.on("/employee/delete", delete)
        headers = bearer(admin_session)

        client.get(f"{API}/employees/list", headers=headers)
        page_two = client.post(f"{API}/employees/list/page", json={"page": 2}, headers=headers)
        assert [r["employeeId"] for r in page_two.json()["data"]["rows"]] == ["E011"]

        response = client.delete(f"{API}/employees/E011", headers=headers)

        listing = response.json()["data"]["list"]
        assert listing["page"] == 1
        assert listing["total_pages"] == 1
        assert len(listing["rows"]) == 10


class TestInvoices:
    def test_generated_invoice_appears_when_history_reopens(self, client, fake_api):
        rows = [{"_id": "1", "invoice_number": "INV-001", "invoice_date": "01-05-2025"}]
        fake_api.on("/invoiceMHD/getlist", paged_handler(rows, "invoices", size_key="per_page"))

        def generate(request):
            rows.append({"_id": "2", "invoice_number": "INV-002", "invoice_date": "30-05-2025"})
            return httpx.Response(
                200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"}
            )

        fake_api.on("/invoiceMHD/generate-invoice", generate)
        headers = bearer(subadmin("View Invoice details", "Generate invoice details"))

        client.get(f"{API}/invoices/mhd/list", headers=headers)
        client.post(
            f"{API}/invoices/mhd/generate",
            json={
                "bill_to_name": "Acme",
                "bill_to_address": "1 Main St",
                "invoice_date": "2025-05-30",
                "due_date": "2025-06-14",
                "items": [{"description": "Design", "quantity": 1, "price": 10}],
            },
            headers=headers,
        )

        paged = client.post(f"{API}/invoices/mhd/list/page", json={"page": 1}, headers=headers)
        reopened = client.get(f"{API}/invoices/mhd/list", headers=headers)

        expected = ["INV-002", "INV-001"]
        assert [r["invoice_number"] for r in paged.json()["data"]["rows"]] == expected
        assert [r["invoice_number"] for r in reopened.json()["data"]["rows"]] == expected

    def test_history_sorts_loose_dates_locally(self, client, fake_api):
        rows = [
            {"_id": "a", "invoice_number": "INV-1", "invoice_date": "15-04-2025"},
            {"_id": "b", "invoice_number": "INV-2", "invoice_date": "2025-05-30T10:00:00Z"},
            {"_id": "c", "invoice_number": "INV-3", "invoice_date": "2025-01-02"},
        ]
        fake_api.on("/invoiceMHD/getlist", paged_handler(rows, "invoices", size_key="per_page"))

        response = client.get(
            f"{API}/invoices/mhd/list", headers=bearer(subadmin("View Invoice details"))
        )

        data = response.json()["data"]
        assert [r["id"] for r in data["rows"]] == ["b", "a", "c"]
        assert fake_api.calls("/invoiceMHD/getlist")[0]["per_page"] == 100

    def test_generate_streams_pdf(self, client, fake_api):
        fake_api.on(
            "/invoiceMHD/generate-invoice",
            lambda r: httpx.Response(
                200,
                content=b"%PDF-1.4",
                headers={
                    "content-type": "application/pdf",
                    "content-disposition": 'attachment; filename="INV-7.pdf"',
                },
            ),
        )

        response = client.post(
            f"{API}/invoices/mhd/generate",
            json={
                "bill_to_name": "Acme",
                "bill_to_address": "1 Main St",
                "invoice_date": "2025-05-30",
                "due_date": "2025-06-14",
                "payment_method": 1,
                "bank_note": "IBAN ...",
                "items": [{"description": "Design", "quantity": 2, "price": 150}],
            },
            headers=bearer(subadmin("Generate invoice details")),
        )

        assert response.status_code == 200
        assert response.content == b"%PDF-1.4"
        assert "INV-7.pdf" in response.headers["content-disposition"]
        sent = fake_api.calls("/invoiceMHD/generate-invoice")[0]
        assert sent["invoice_date"] == "30-05-2025"
        assert sent["due_date"] == "14-06-2025"
        assert sent["bank_Note"] == "IBAN ..."

    def test_generate_error_blob_is_decoded(self, client, fake_api):
        fake_api.on(
            "/enoylity/generate-invoice",
            lambda r: httpx.Response(
                400,
                content=b'{"success": false, "message": "Template missing"}',
                headers={"content-type": "application/octet-stream"},
            ),
        )

        response = client.post(
            f"{API}/invoices/enoylitytech/generate",
            json={
                "bill_to_name": "Acme",
                "bill_to_address": "1 Main St",
                "invoice_date": "2025-05-30",
                "due_date": "2025-06-14",
                "items": [{"description": "Design", "quantity": 1, "price": 10}],
            },
            headers=bearer(subadmin("Generate invoice details")),
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Template missing"

    def test_enoylity_settings_are_normalized(self, client, fake_api):
        fake_api.on(
            "/invoiceEnoylity/settings",
            {
                "success": True,
                "data": {
                    "company_details": {
                        "company_name": "Enoylity Studio",
                        "company_email": "hi@enoylity.test",
                        "website": "youtube.com/enoylity",
                    },
                    "assets": {"logo_url": "/static/logo.png"},
                },
            },
        )

        response = client.get(
            f"{API}/invoices/enoylitystudio/settings",
            headers=bearer(subadmin("Manage Settings")),
        )

        data = response.json()["data"]
        assert data["company_info"]["name"] == "Enoylity Studio"
        assert data["company_info"]["youtube"] == "youtube.com/enoylity"
        assert data["logo_path"] == "/static/logo.png"


class TestKpiRoutes:
    def test_export_selected_without_selection(self, client, fake_api):
        response = client.post(
            f"{API}/kpi/export",
            json={"scope": "selected", "employee_ids": []},
            headers=bearer(subadmin("Manage KPI")),
        )

        assert response.status_code == 400
        assert response.json()["notice"]["level"] == "warning"
        assert fake_api.requests == []

    def test_export_needs_kpi_manager(self, client):
        session = Session(role="user", permissions={"Manage KPI": 1})
        response = client.post(
            f"{API}/kpi/export", json={"scope": "all"}, headers=bearer(session)
        )
        assert response.status_code == 403

    def test_export_uses_current_list_filters(self, client, fake_api):
        fake_api.on("/kpi/getAll", {"success": True, "data": {"kpis": [], "total": 0}})
        fake_api.on(
            "/kpi/export",
            lambda r: httpx.Response(200, content=b"a,b\n", headers={"content-type": "text/csv"}),
        )
        headers = bearer(subadmin("Manage KPI"))

        client.post(f"{API}/kpi/list/search", json={"text": "website"}, headers=headers)
        response = client.post(f"{API}/kpi/export", json={"scope": "all"}, headers=headers)

        assert response.status_code == 200
        assert response.content == b"a,b\n"
        assert fake_api.calls("/kpi/export")[0]["search"] == "website"

    def test_punch_requires_remark(self, client, fake_api):
        response = client.post(
            f"{API}/kpi/K1/punch",
            json={"remark": ""},
            headers=bearer(subadmin("View KPI details")),
        )
        assert response.status_code == 422
        assert response.json()["notice"]["level"] == "warning"
        assert fake_api.requests == []
