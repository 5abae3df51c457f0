from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class ListQuery(BaseModel):
    """Query state of one list view. Replaced, never mutated in place."""

    model_config = ConfigDict(frozen=True)

    search: str = ""
    sort_field: str
    sort_ascending: bool = True
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, gt=0)
    date_range: Optional[DateRange] = None
    employee_ids: Optional[tuple[str, ...]] = None

    def with_changes(self, **changes) -> "ListQuery":
        return self.model_copy(update=changes)

    def result_key(self) -> tuple:
        """Everything except paging; a change here invalidates a full-set sort."""
        return (
            self.search,
            self.sort_field,
            self.sort_ascending,
            self.date_range,
            self.employee_ids,
        )


class ListResult(BaseModel):
    rows: list[dict] = Field(default_factory=list)
    total_count: int = 0
    total_pages: int = 1
