"""
List fetch strategies.

Both answer the same question — "give me page N of this query" — and the
controller picks one per sort field:

    ServerPagedStrategy       one request per page; the API sorts and slices
    DateSortFallbackStrategy  pulls every page once, sorts by a normalized
                              date key locally, then slices without further
                              requests until the query (not the page) changes
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Optional

from officedesk.remote import OfficeApiClient
from officedesk.utils import Logger
from officedesk.utils.exceptions import MalformedResponseError
from .dates import date_sort_key
from .models import ListQuery, ListResult

logger = Logger("listing")


def default_payload(query: ListQuery) -> dict:
    """Request body understood by the office API's paginated list endpoints."""
    payload = {
        "search": query.search,
        "page": query.page,
        "pageSize": query.page_size,
        "sortField": query.sort_field,
        "sortOrder": "asc" if query.sort_ascending else "desc",
    }
    if query.date_range:
        payload["startDate"] = query.date_range.start
        payload["endDate"] = query.date_range.end
    if query.employee_ids:
        payload["employeeIds"] = list(query.employee_ids)
    return payload


@dataclass(frozen=True)
class ListEndpoint:
    """Where and how one entity's list is fetched."""

    path: str
    rows_key: str
    payload_builder: Callable[[ListQuery], dict] = default_payload
    row_mapper: Optional[Callable[[dict], dict]] = None
    # False for endpoints that answer with every row at once
    paged: bool = True
    extra: dict = field(default_factory=dict)

    def build_payload(self, query: ListQuery) -> dict:
        return {**self.payload_builder(query), **self.extra}


def _as_int(value, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MalformedResponseError(f"Invalid {what} in list response")


def parse_list_envelope(envelope: dict, endpoint: ListEndpoint, query: ListQuery) -> ListResult:
    """
    Turn `{data: {<rows_key>: [...], total | totalPages}}` into a ListResult.

    When only totalPages is reported, total_count is estimated from the
    current page: exact on the last page, an upper bound before it.
    """
    data = envelope.get("data")
    if not isinstance(data, dict):
        raise MalformedResponseError("List response has no data object")

    rows = data.get(endpoint.rows_key)
    if rows is None:
        rows = []
    if not isinstance(rows, list):
        raise MalformedResponseError(f"'{endpoint.rows_key}' is not a list")
    if endpoint.row_mapper:
        rows = [endpoint.row_mapper(r) for r in rows if isinstance(r, dict)]

    if not endpoint.paged:
        return ListResult(rows=rows, total_count=len(rows), total_pages=1)

    total = data.get("total")
    total_pages = data.get("totalPages")

    if total is not None:
        total_count = _as_int(total, "total")
        if total_pages is None:
            total_pages = math.ceil(total_count / query.page_size)
    elif total_pages is not None:
        total_pages = _as_int(total_pages, "totalPages")
        if query.page >= total_pages:
            total_count = (max(total_pages, 1) - 1) * query.page_size + len(rows)
        else:
            total_count = total_pages * query.page_size
    else:
        total_count = len(rows)
        total_pages = 1

    return ListResult(
        rows=rows,
        total_count=total_count,
        total_pages=max(1, _as_int(total_pages, "totalPages")),
    )


class ListStrategy:
    async def fetch(self, query: ListQuery) -> ListResult:
        raise NotImplementedError

    def invalidate(self) -> None:
        """Forget anything cached; next fetch goes to the API."""


class ServerPagedStrategy(ListStrategy):
    def __init__(self, client: OfficeApiClient, endpoint: ListEndpoint):
        self.client = client
        self.endpoint = endpoint

    async def fetch(self, query: ListQuery) -> ListResult:
        envelope = await self.client.post(
            self.endpoint.path, self.endpoint.build_payload(query)
        )
        return parse_list_envelope(envelope, self.endpoint, query)


class DateSortFallbackStrategy(ListStrategy):
    def __init__(self, client: OfficeApiClient, endpoint: ListEndpoint, batch_size: int = 100):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.client = client
        self.endpoint = endpoint
        self.batch_size = batch_size
        self._cache_key: tuple | None = None
        self._cache_rows: list[dict] = []

    def invalidate(self) -> None:
        self._cache_key = None
        self._cache_rows = []

    async def _fetch_all(self, query: ListQuery) -> list[dict]:
        """
        Pull every page in batches until the reported total is reached.

        Any failing batch propagates; nothing collected so far is kept.
        """
        collected: list[dict] = []
        page = 1
        while True:
            batch_query = query.with_changes(page=page, page_size=self.batch_size)
            envelope = await self.client.post(
                self.endpoint.path, self.endpoint.build_payload(batch_query)
            )
            batch = parse_list_envelope(envelope, self.endpoint, batch_query)
            collected.extend(batch.rows)

            if (
                not batch.rows
                or len(collected) >= batch.total_count
                or page >= batch.total_pages
            ):
                break
            page += 1

        logger.debug(
            f"{self.endpoint.path}: fetched {len(collected)} rows in {page} batch(es)"
        )
        return collected

    async def fetch(self, query: ListQuery) -> ListResult:
        key = query.result_key()
        if key != self._cache_key:
            self.invalidate()
            rows = await self._fetch_all(query)
            rows.sort(
                key=lambda r: date_sort_key(r.get(query.sort_field)),
                reverse=not query.sort_ascending,
            )
            self._cache_key = key
            self._cache_rows = rows

        total = len(self._cache_rows)
        start = (query.page - 1) * query.page_size
        return ListResult(
            rows=self._cache_rows[start : start + query.page_size],
            total_count=total,
            total_pages=max(1, math.ceil(total / query.page_size)),
        )
