from pydantic import BaseModel, Field
from typing import List, Optional


class SearchRequest(BaseModel):
    """POST .../list/search"""
    text: str = Field(default="", max_length=200)


class SortRequest(BaseModel):
    """POST .../list/sort — same field twice flips the direction."""
    field: str = Field(..., min_length=1, max_length=64)


class PageRequest(BaseModel):
    """POST .../list/page"""
    page: int = Field(..., ge=1)


class DateRangeRequest(BaseModel):
    """POST .../list/date-range — both ends or neither."""
    start: Optional[str] = None
    end: Optional[str] = None


class EmployeeFilterRequest(BaseModel):
    """POST .../list/employees"""
    employee_ids: List[str] = Field(default_factory=list)
