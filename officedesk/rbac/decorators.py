"""
Declarative visibility decorators for route handlers.

Usage:
    @router.get("/")
    @require_action(ActionId.EMPLOYEE_VIEW)
    async def list_employees(request: Request):
        ...
"""

from functools import wraps

from fastapi import HTTPException, status
from starlette.requests import Request

from officedesk.utils.exceptions import PermissionDeniedError
from .capabilities import ActionId, NavSection
from .resolver import NOTHING, Visibility


def _find_request(args, kwargs) -> Request:
    request: Request | None = kwargs.get("request")
    if request is None:
        for arg in args:
            if isinstance(arg, Request):
                request = arg
                break
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Request object not found in handler",
        )
    return request


def _visibility(request: Request) -> Visibility:
    return getattr(request.state, "visibility", NOTHING)


def require_section(section: NavSection):
    """Reject the call unless the session can see `section`."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = _find_request(args, kwargs)
            if section not in _visibility(request).sections:
                raise PermissionDeniedError(f"Section not available: {section.value}")
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_action(*actions: ActionId):
    """
    Reject the call unless the session may perform at least one of `actions`.

    Must be applied AFTER the route decorator.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = _find_request(args, kwargs)
            granted = _visibility(request).actions
            if not any(a in granted for a in actions):
                required = " | ".join(a.value for a in actions)
                raise PermissionDeniedError(f"Permission denied. Requires: {required}")
            return await func(*args, **kwargs)

        return wrapper

    return decorator
