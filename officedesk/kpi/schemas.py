from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ExportScope(str, Enum):
    ALL = "all"
    SELECTED = "selected"
    MINE = "mine"


class CreateKpiRequest(BaseModel):
    """POST /kpi — managers pick the employee; everyone else files for themselves."""

    employee_id: Optional[str] = None
    project_name: str = Field(..., min_length=1, max_length=200)
    start_date: str = Field(..., description="Start date as entered, e.g. 2025-05-30")
    deadline: str
    remark: str = ""


class UpdateKpiRequest(BaseModel):
    project_name: str = Field(..., min_length=1, max_length=200)
    remark: str = ""


class PunchRequest(BaseModel):
    remark: str = ""


class QualityRequest(BaseModel):
    value: Literal[-1, 1]


class ExportRequest(BaseModel):
    scope: ExportScope = ExportScope.ALL
    employee_ids: list[str] = Field(default_factory=list)
