"""
Office API client — thin async wrapper over httpx.

Every answer from the remote office API follows one envelope:

    {"success": bool, "message": str?, "data": any?}

Binary endpoints (invoice / payslip PDFs, KPI CSV) answer with the file on
success, but on failure they still send the JSON envelope, usually with a
blob-ish content type. `post_blob` recovers the message from such bodies.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from officedesk.utils import Logger
from officedesk.utils.exceptions import (
    ApplicationError,
    MalformedResponseError,
    TransportError,
)

logger = Logger("remote")

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


@dataclass(frozen=True)
class BlobPayload:
    content: bytes
    media_type: str
    filename: Optional[str] = None


def _extract_message(body: Any) -> Optional[str]:
    """Pull a human message out of an error body, whatever key it used."""
    if not isinstance(body, dict):
        return None
    for key in ("message", "error", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, dict) and isinstance(value.get("message"), str):
            return value["message"]
    return None


def _decode_json(raw: bytes) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None


class OfficeApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Low level ────────────────────────────────────────────────

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug(f"--> {method} {path}")
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"    {method} {path} failed: {exc!r}")
            raise TransportError() from exc
        logger.debug(f"<-- {method} {path} | {response.status_code}")
        return response

    def _unwrap(self, response: httpx.Response) -> dict:
        body = _decode_json(response.content)
        if not isinstance(body, dict):
            raise MalformedResponseError(status_code=response.status_code)

        if response.status_code >= 400 or body.get("success") is not True:
            message = _extract_message(body)
            if "success" not in body and response.status_code < 400:
                raise MalformedResponseError(status_code=response.status_code)
            raise ApplicationError(message, status_code=response.status_code)
        return body

    # ── JSON endpoints ───────────────────────────────────────────

    async def post(self, path: str, payload: dict | None = None) -> dict:
        """POST a JSON body; returns the full success envelope."""
        response = await self._send("POST", path, json=payload or {})
        return self._unwrap(response)

    async def get(self, path: str, params: dict | None = None) -> dict:
        response = await self._send("GET", path, params=params)
        return self._unwrap(response)

    # ── Binary endpoints ─────────────────────────────────────────

    async def post_blob(
        self,
        path: str,
        payload: dict,
        accept: tuple[str, ...] = ("application/pdf",),
    ) -> BlobPayload:
        """
        POST and expect a file back.

        Non-2xx statuses are inspected rather than raised immediately, since
        the API puts its error message inside the blob body.
        """
        response = await self._send("POST", path, json=payload)
        media_type = response.headers.get("content-type", "").split(";")[0].strip()

        if response.status_code < 400 and media_type in accept:
            disposition = response.headers.get("content-disposition", "")
            match = _FILENAME_RE.search(disposition)
            return BlobPayload(
                content=response.content,
                media_type=media_type,
                filename=match.group(1) if match else None,
            )

        body = _decode_json(response.content)
        if body is None:
            raise MalformedResponseError(status_code=response.status_code)
        raise ApplicationError(
            _extract_message(body), status_code=response.status_code
        )
