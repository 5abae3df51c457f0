import asyncio
import math

import pytest

from officedesk.listing import ListController, ListQuery, ListResult, ListStrategy
from officedesk.utils.exceptions import ApplicationError, TransportError


class StubStrategy(ListStrategy):
    """Serves a mutable in-memory list and records every query it sees."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.queries: list[ListQuery] = []
        self.fail_with = None
        self.invalidated = 0

    async def fetch(self, query: ListQuery) -> ListResult:
        self.queries.append(query)
        if self.fail_with is not None:
            raise self.fail_with
        start = (query.page - 1) * query.page_size
        return ListResult(
            rows=self.rows[start : start + query.page_size],
            total_count=len(self.rows),
            total_pages=max(1, math.ceil(len(self.rows) / query.page_size)),
        )

    def invalidate(self) -> None:
        self.invalidated += 1


class GatedStrategy(ListStrategy):
    """Holds back any query whose search is "slow" until released."""

    def __init__(self):
        self.gate = asyncio.Event()

    async def fetch(self, query: ListQuery) -> ListResult:
        if query.search == "slow":
            await self.gate.wait()
        return ListResult(rows=[{"search": query.search}], total_count=1)


def rows(count: int) -> list[dict]:
    return [{"employeeId": f"E{i:03d}", "name": f"Employee {i}"} for i in range(1, count + 1)]


def make_controller(strategy, **kwargs) -> ListController:
    return ListController(
        name="employees",
        strategy=strategy,
        initial_query=ListQuery(sort_field="name", page_size=5),
        failure_message="Failed to fetch employee data.",
        **kwargs,
    )


class TestQueryOperations:
    async def test_same_field_flips_direction(self):
        controller = make_controller(StubStrategy(rows(3)))
        await controller.set_sort("name")
        assert controller.query.sort_ascending is False
        await controller.set_sort("name")
        assert controller.query.sort_ascending is True

    async def test_new_field_sorts_ascending_from_page_one(self):
        controller = make_controller(StubStrategy(rows(12)))
        await controller.set_sort("name")
        await controller.set_page(3)

        view = await controller.set_sort("designation")

        assert controller.query.sort_field == "designation"
        assert controller.query.sort_ascending is True
        assert view["page"] == 1

    async def test_search_resets_page(self):
        strategy = StubStrategy(rows(12))
        controller = make_controller(strategy)
        await controller.fetch_page()
        await controller.set_page(2)

        await controller.set_search("Employee 1")

        assert strategy.queries[-1].page == 1
        assert strategy.queries[-1].search == "Employee 1"

    async def test_page_is_clamped_to_known_pages(self):
        controller = make_controller(StubStrategy(rows(12)))
        await controller.fetch_page()

        view = await controller.set_page(99)
        assert view["page"] == 3
        view = await controller.set_page(0)
        assert view["page"] == 1

    async def test_set_page_keeps_other_fields(self):
        strategy = StubStrategy(rows(12))
        controller = make_controller(strategy)
        await controller.set_search("Employee")
        await controller.set_page(2)
        assert strategy.queries[-1].search == "Employee"
        assert strategy.queries[-1].sort_field == "name"

    async def test_half_date_range_is_ignored(self):
        strategy = StubStrategy(rows(3))
        controller = make_controller(strategy)

        await controller.set_date_range("2025-05-01", None)
        assert strategy.queries[-1].date_range is None

        await controller.set_date_range("2025-05-01", "2025-05-31")
        assert strategy.queries[-1].date_range.end == "2025-05-31"

    async def test_employee_filter_dedupes_and_clears(self):
        strategy = StubStrategy(rows(3))
        controller = make_controller(strategy)

        await controller.set_employee_filter(["E2", "E1", "E2", ""])
        assert strategy.queries[-1].employee_ids == ("E2", "E1")

        await controller.set_employee_filter([])
        assert strategy.queries[-1].employee_ids is None


class TestFetching:
    async def test_empty_page_steps_back_after_delete(self):
        strategy = StubStrategy(rows(11))
        controller = make_controller(strategy)
        await controller.fetch_page()
        await controller.set_page(3)
        assert len(controller.result.rows) == 1

        strategy.rows.pop()
        view = await controller.after_delete()

        assert view["page"] == 2
        assert len(view["rows"]) == 5
        assert view["total_pages"] == 2
        assert [q.page for q in strategy.queries[-2:]] == [3, 2]

    async def test_empty_first_page_shows_empty_notice(self):
        controller = make_controller(StubStrategy([]), empty_message="No employees found.")
        view = await controller.fetch_page()
        assert view["rows"] == []
        assert view["notice"] == {"level": "info", "message": "No employees found."}

    async def test_failure_keeps_rows_and_surfaces_server_message(self):
        strategy = StubStrategy(rows(3))
        controller = make_controller(strategy)
        await controller.fetch_page()

        strategy.fail_with = ApplicationError("Search index is rebuilding")
        view = await controller.set_search("x")

        assert len(view["rows"]) == 3
        assert view["notice"] == {"level": "error", "message": "Search index is rebuilding"}

    async def test_transport_failure_uses_view_message(self):
        strategy = StubStrategy(rows(3))
        strategy.fail_with = TransportError()
        controller = make_controller(strategy)

        view = await controller.fetch_page()

        assert view["notice"]["message"] == "Failed to fetch employee data."

    async def test_success_clears_previous_notice(self):
        strategy = StubStrategy(rows(3))
        strategy.fail_with = TransportError()
        controller = make_controller(strategy)
        await controller.fetch_page()

        strategy.fail_with = None
        view = await controller.fetch_page()
        assert view["notice"] is None

    async def test_invalidate_defers_refetch_to_next_fetch(self):
        strategy = StubStrategy(rows(3))
        controller = make_controller(strategy)
        await controller.fetch_page()

        controller.invalidate()
        assert strategy.invalidated == 1
        assert len(strategy.queries) == 1

    async def test_refresh_invalidates_strategies(self):
        strategy = StubStrategy(rows(3))
        date_strategy = StubStrategy(rows(3))
        controller = make_controller(
            strategy, date_strategy=date_strategy, date_fields=("joined",)
        )
        await controller.refresh()
        assert strategy.invalidated == 1
        assert date_strategy.invalidated == 1


class TestStrategySelection:
    async def test_date_fields_use_date_strategy(self):
        strategy = StubStrategy(rows(3))
        date_strategy = StubStrategy(rows(3))
        controller = make_controller(
            strategy, date_strategy=date_strategy, date_fields=("invoice_date",)
        )

        await controller.set_sort("invoice_date")
        assert len(date_strategy.queries) == 1
        await controller.set_sort("invoice_number")
        assert len(strategy.queries) == 1

    def test_without_date_strategy_everything_is_server_paged(self):
        strategy = StubStrategy()
        controller = make_controller(strategy, date_fields=("invoice_date",))
        assert controller.strategy_for("invoice_date") is strategy


class TestStaleResponses:
    async def test_older_response_is_discarded(self):
        strategy = GatedStrategy()
        controller = make_controller(strategy)

        slow = asyncio.create_task(controller.set_search("slow"))
        await asyncio.sleep(0)
        await controller.set_search("fast")

        strategy.gate.set()
        await slow

        assert controller.result.rows == [{"search": "fast"}]
        assert controller.query.search == "fast"

    async def test_response_after_close_is_discarded(self):
        strategy = GatedStrategy()
        controller = make_controller(strategy)

        pending = asyncio.create_task(controller.set_search("slow"))
        await asyncio.sleep(0)
        controller.close()

        strategy.gate.set()
        view = await pending

        assert controller.result.rows == []
        assert view["rows"] == []

    async def test_closed_controller_does_not_fetch(self):
        strategy = StubStrategy(rows(3))
        controller = make_controller(strategy)
        controller.close()

        await controller.fetch_page()
        assert strategy.queries == []


class TestRegistry:
    def test_one_controller_per_session_and_view(self, registry):
        built = []

        def factory():
            built.append(1)
            return make_controller(StubStrategy())

        first = registry.get_or_create("s1", "employees", factory)
        again = registry.get_or_create("s1", "employees", factory)
        other = registry.get_or_create("s2", "employees", factory)

        assert first is again
        assert first is not other
        assert len(built) == 2

    def test_dispose_session_closes_controllers(self, registry):
        controller = registry.get_or_create(
            "s1", "employees", lambda: make_controller(StubStrategy())
        )
        registry.get_or_create("s1", "kpi", lambda: make_controller(StubStrategy()))
        registry.get_or_create("s2", "kpi", lambda: make_controller(StubStrategy()))

        assert registry.dispose_session("s1") == 2
        assert controller._closed
        assert len(registry) == 1
        assert registry.get("s1", "employees") is None

    def test_least_recently_used_is_evicted(self):
        from officedesk.listing import ControllerRegistry

        registry = ControllerRegistry(max_controllers=2)
        oldest = registry.get_or_create("s1", "a", lambda: make_controller(StubStrategy()))
        registry.get_or_create("s1", "b", lambda: make_controller(StubStrategy()))
        registry.get_or_create("s1", "c", lambda: make_controller(StubStrategy()))

        assert registry.get("s1", "a") is None
        assert oldest._closed
