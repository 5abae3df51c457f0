from pydantic import BaseModel, Field


class GeneratePayslipRequest(BaseModel):
    """POST /payslips/generate — allowances are monthly amounts."""

    employee_id: str = Field(..., min_length=1)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    lop: float = Field(default=0, ge=0, description="Loss of pay days")
    hra: float = Field(default=0, ge=0)
    transport: float = Field(default=0, ge=0)
    medical: float = Field(default=0, ge=0)
    overtime: float = Field(default=0, ge=0)
    bonus: float = Field(default=0, ge=0)
    others: float = Field(default=0, ge=0)
