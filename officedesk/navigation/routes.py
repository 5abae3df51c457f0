from fastapi import APIRouter, Request

from officedesk.rbac import NavSection, require_section
from officedesk.utils import success_response
from .service import build_dashboard, build_sidebar

navigation_router = APIRouter()


@navigation_router.get("/navigation")
async def navigation(request: Request):
    """Sidebar entries visible to the current session."""
    visibility = request.state.visibility
    return success_response(
        data={"sidebar": build_sidebar(visibility), **visibility.to_dict()}
    )


@navigation_router.get("/dashboard")
@require_section(NavSection.DASHBOARD)
async def dashboard(request: Request):
    return success_response(data={"panels": build_dashboard(request.state.visibility)})
