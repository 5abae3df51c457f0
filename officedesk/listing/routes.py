"""
List view routes — shared by every tabular page.

Endpoints (mounted under each feature's /list prefix):
    GET    /             Current page, refetched from the API
    POST   /search       Set search text, back to page 1
    POST   /sort         Sort by field / flip direction, back to page 1
    POST   /page         Go to page (clamped)
    POST   /refresh      Drop cached rows and refetch
    DELETE /             Forget this view's state
"""

from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from officedesk.config import get_api_client
from officedesk.rbac import ActionId, require_action
from officedesk.remote import OfficeApiClient
from officedesk.session import Session
from .controller import ListController
from .registry import ControllerRegistry, get_controller_registry
from .schemas import PageRequest, SearchRequest, SortRequest

ControllerFactory = Callable[[OfficeApiClient, Session], ListController]


def list_view_response(view: dict) -> JSONResponse:
    """200 with the page; `success` is false when the view carries an error notice."""
    notice = view.get("notice")
    ok = not (notice and notice.get("level") == "error")
    return JSONResponse(
        status_code=200,
        content={"success": ok, "data": jsonable_encoder(view)},
    )


def session_controller(
    request: Request,
    registry: ControllerRegistry,
    client: OfficeApiClient,
    view: str,
    factory: ControllerFactory,
) -> ListController:
    session: Session = request.state.session
    return registry.get_or_create(
        session.session_id, view, lambda: factory(client, session)
    )


def list_view_router(view: str, factory: ControllerFactory, *actions: ActionId) -> APIRouter:
    """Build the standard list routes for one view, gated by `actions`."""
    router = APIRouter()

    def _controller(request, registry, client) -> ListController:
        return session_controller(request, registry, client, view, factory)

    @router.get("")
    @require_action(*actions)
    async def current_page(
        request: Request,
        client: OfficeApiClient = Depends(get_api_client),
        registry: ControllerRegistry = Depends(get_controller_registry),
    ):
        controller = _controller(request, registry, client)
        # Opening the view always shows current data; paging reuses it
        return list_view_response(await controller.refresh())

    @router.post("/search")
    @require_action(*actions)
    async def search(
        request: Request,
        body: SearchRequest,
        client: OfficeApiClient = Depends(get_api_client),
        registry: ControllerRegistry = Depends(get_controller_registry),
    ):
        controller = _controller(request, registry, client)
        return list_view_response(await controller.set_search(body.text))

    @router.post("/sort")
    @require_action(*actions)
    async def sort(
        request: Request,
        body: SortRequest,
        client: OfficeApiClient = Depends(get_api_client),
        registry: ControllerRegistry = Depends(get_controller_registry),
    ):
        controller = _controller(request, registry, client)
        return list_view_response(await controller.set_sort(body.field))

    @router.post("/page")
    @require_action(*actions)
    async def page(
        request: Request,
        body: PageRequest,
        client: OfficeApiClient = Depends(get_api_client),
        registry: ControllerRegistry = Depends(get_controller_registry),
    ):
        controller = _controller(request, registry, client)
        return list_view_response(await controller.set_page(body.page))

    @router.post("/refresh")
    @require_action(*actions)
    async def refresh(
        request: Request,
        client: OfficeApiClient = Depends(get_api_client),
        registry: ControllerRegistry = Depends(get_controller_registry),
    ):
        controller = _controller(request, registry, client)
        return list_view_response(await controller.refresh())

    @router.delete("")
    @require_action(*actions)
    async def forget(
        request: Request,
        registry: ControllerRegistry = Depends(get_controller_registry),
    ):
        registry.dispose(request.state.session.session_id, view)
        return JSONResponse(status_code=200, content={"success": True, "message": "View reset"})

    return router
