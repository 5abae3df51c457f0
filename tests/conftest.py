import json
import math

import httpx
import pytest
from fastapi.testclient import TestClient

from officedesk.app import create_app
from officedesk.config import get_api_client
from officedesk.listing import ControllerRegistry, get_controller_registry
from officedesk.remote import OfficeApiClient
from officedesk.session import Session, create_session_token


# ── Fake office API ──────────────────────────────────────────────


class FakeOfficeApi:
    """
    Route table behind an httpx.MockTransport.

    `on(path, handler)` takes either a callable `(request) -> httpx.Response`
    or a JSON body returned with `status`. Every request is recorded.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def on(self, path: str, handler, status: int = 200):
        if callable(handler):
            self.routes[path] = handler
        else:
            self.routes[path] = lambda request: httpx.Response(status, json=handler)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"success": False, "message": "Not found"})
        return handler(request)

    def calls(self, path: str) -> list[dict]:
        """JSON bodies sent to `path`, oldest first."""
        return [
            json.loads(r.content or b"{}")
            for r in self.requests
            if r.url.path == path
        ]


def paged_handler(rows, rows_key, *, size_key="pageSize", report="total"):
    """Serve `rows` page by page, reporting either `total` or `totalPages`."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        page = int(body.get("page", 1))
        size = int(body.get(size_key, 10))
        start = (page - 1) * size
        data = {rows_key: rows[start : start + size]}
        if report == "total":
            data["total"] = len(rows)
        else:
            data["totalPages"] = max(1, math.ceil(len(rows) / size))
        return httpx.Response(200, json={"success": True, "data": data})

    return handler


@pytest.fixture
def fake_api():
    return FakeOfficeApi()


@pytest.fixture
def api_client(fake_api):
    return OfficeApiClient(
        base_url="http://office.test",
        transport=httpx.MockTransport(fake_api),
    )


# ── Sessions ─────────────────────────────────────────────────────


@pytest.fixture
def admin_session():
    return Session(role="admin", admin_id="A1", employee_id="E-ADMIN")


def subadmin(*capabilities: str, employee_id: str = "E100") -> Session:
    return Session(
        role="subadmin",
        permissions={c: 1 for c in capabilities},
        employee_id=employee_id,
        admin_id="A1",
    )


def bearer(session: Session) -> dict:
    return {"Authorization": f"Bearer {create_session_token(session)}"}


# ── App ──────────────────────────────────────────────────────────


@pytest.fixture
def registry():
    return ControllerRegistry()


@pytest.fixture
def client(api_client, registry):
    app = create_app()
    app.dependency_overrides[get_api_client] = lambda: api_client
    app.dependency_overrides[get_controller_registry] = lambda: registry
    return TestClient(app)
