"""
Remote list controller — query state + current page for one list view.

Each operation updates the query and refetches. Responses are tagged with
a generation number; one that arrives after a newer request was issued
(or after the controller was closed) is dropped instead of overwriting
fresher state.
"""

from typing import Iterable, Optional

from officedesk.utils import Logger, Notice
from officedesk.utils.exceptions import RemoteApiError
from .models import DateRange, ListQuery, ListResult
from .strategies import ListStrategy

logger = Logger("listing")


class ListController:
    def __init__(
        self,
        name: str,
        strategy: ListStrategy,
        initial_query: ListQuery,
        *,
        date_strategy: Optional[ListStrategy] = None,
        date_fields: Iterable[str] = (),
        failure_message: str = "Failed to fetch data.",
        empty_message: Optional[str] = None,
    ):
        self.name = name
        self.strategy = strategy
        self.date_strategy = date_strategy
        self.date_fields = frozenset(date_fields)
        self.failure_message = failure_message
        self.empty_message = empty_message

        self.query = initial_query
        self.result = ListResult()
        self.notice: Optional[Notice] = None
        self._generation = 0
        self._closed = False

    # ── Strategy selection ───────────────────────────────────────

    def strategy_for(self, sort_field: str) -> ListStrategy:
        if self.date_strategy is not None and sort_field in self.date_fields:
            return self.date_strategy
        return self.strategy

    # ── Query operations ─────────────────────────────────────────

    async def set_search(self, text: str) -> dict:
        self.query = self.query.with_changes(search=text or "", page=1)
        return await self.fetch_page()

    async def set_sort(self, field: str) -> dict:
        if field == self.query.sort_field:
            self.query = self.query.with_changes(
                sort_ascending=not self.query.sort_ascending, page=1
            )
        else:
            self.query = self.query.with_changes(
                sort_field=field, sort_ascending=True, page=1
            )
        return await self.fetch_page()

    async def set_page(self, page: int) -> dict:
        page = max(1, min(int(page), self.result.total_pages))
        self.query = self.query.with_changes(page=page)
        return await self.fetch_page()

    async def set_date_range(self, start: Optional[str], end: Optional[str]) -> dict:
        # A half-open range is ignored, as the list filters only apply both ends
        date_range = DateRange(start=start, end=end) if start and end else None
        self.query = self.query.with_changes(date_range=date_range, page=1)
        return await self.fetch_page()

    async def set_employee_filter(self, employee_ids: Iterable[str]) -> dict:
        ids = tuple(dict.fromkeys(i for i in employee_ids if i)) or None
        self.query = self.query.with_changes(employee_ids=ids, page=1)
        return await self.fetch_page()

    # ── Fetching ─────────────────────────────────────────────────

    async def fetch_page(self) -> dict:
        if self._closed:
            return self.view()

        self._generation += 1
        generation = self._generation
        query = self.query
        strategy = self.strategy_for(query.sort_field)

        try:
            result = await strategy.fetch(query)
        except RemoteApiError as exc:
            if generation != self._generation:
                logger.debug(f"[{self.name}] dropped stale failure (gen {generation})")
                return self.view()
            logger.warning(f"[{self.name}] fetch failed: {exc!r}")
            self.notice = Notice.error(exc.user_message(self.failure_message))
            return self.view()

        if generation != self._generation:
            logger.debug(f"[{self.name}] dropped stale response (gen {generation})")
            return self.view()

        if not result.rows and query.page > 1:
            # The page we were on no longer exists (e.g. a delete shrank the set)
            logger.info(f"[{self.name}] page {query.page} empty, stepping back")
            self.query = query.with_changes(page=query.page - 1)
            return await self.fetch_page()

        self.result = result
        if not result.rows and self.empty_message:
            self.notice = Notice.info(self.empty_message)
        else:
            self.notice = None
        return self.view()

    def invalidate(self) -> None:
        """Drop any locally sorted full set; the next fetch goes to the API."""
        self.strategy.invalidate()
        if self.date_strategy is not None:
            self.date_strategy.invalidate()

    async def refresh(self) -> dict:
        """Refetch the current page with fresh data."""
        self.invalidate()
        return await self.fetch_page()

    async def after_delete(self) -> dict:
        return await self.refresh()

    def close(self) -> None:
        """Stop accepting results; anything still in flight is discarded."""
        self._closed = True
        self._generation += 1

    # ── Rendering ────────────────────────────────────────────────

    def view(self) -> dict:
        return {
            "view": self.name,
            "query": self.query.model_dump(mode="json"),
            "rows": self.result.rows,
            "total_count": self.result.total_count,
            "total_pages": self.result.total_pages,
            "page": self.query.page,
            "notice": self.notice.model_dump(mode="json") if self.notice else None,
        }
