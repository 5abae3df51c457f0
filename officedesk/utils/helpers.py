from typing import Any, Optional
from urllib.parse import quote

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from .exceptions import ApplicationError, RemoteApiError
from .notices import Notice


def success_response(
    data: Optional[Any] = None,
    message: str = "Success",
    code: int = 200,
) -> JSONResponse:
    """Standard success JSON response."""
    content = {"success": True, "message": message}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=code, content=content)


def error_response(
    message: str,
    code: int = 400,
    data: Optional[Any] = None,
) -> JSONResponse:
    """Standard error JSON response."""
    content = {"success": False, "error": {"code": code, "message": message}}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=code, content=content)


def notice_response(notice: Notice, code: int = 400) -> JSONResponse:
    """A bare notice, used when nothing was sent upstream (e.g. form guards)."""
    return JSONResponse(
        status_code=code,
        content={
            "success": not notice.is_error and code < 400,
            "notice": notice.model_dump(mode="json"),
        },
    )


def download_response(content: bytes, media_type: str, filename: str) -> Response:
    """Binary attachment (PDF / CSV) passed through from the remote API."""
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
        },
    )


def remote_error_response(exc: RemoteApiError, fallback: str) -> JSONResponse:
    """
    Map an office API failure onto the error envelope.

    Application errors keep the upstream 4xx status and message; transport
    and shape failures become 502 with the caller's generic message.
    """
    if isinstance(exc, ApplicationError):
        code = exc.status_code if exc.status_code and 400 <= exc.status_code < 500 else 400
    else:
        code = 502
    return error_response(message=exc.user_message(fallback), code=code)
