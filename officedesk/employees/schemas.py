"""
Employee schemas — field names follow the office API's employee record.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class BankDetails(BaseModel):
    account_number: str = Field(..., min_length=4, max_length=34)
    ifsc: str = Field(..., min_length=4, max_length=11)
    bank_name: str = Field(..., min_length=2, max_length=100)


class EmployeeAddress(BaseModel):
    line1: str = Field(..., min_length=2, max_length=200)
    city: str = Field(..., min_length=2, max_length=100)
    state: str = Field(..., min_length=2, max_length=100)
    pin: str = Field(..., min_length=4, max_length=10)


class CreateEmployeeRequest(BaseModel):
    """POST /employees"""

    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=15)
    dob: str = Field(..., description="Date of birth as entered, e.g. 1994-08-21")
    adharnumber: Optional[str] = Field(None, max_length=14)
    pan_number: Optional[str] = Field(None, max_length=10)
    date_of_joining: str
    annual_salary: float = Field(..., ge=0)
    base_salary: Optional[float] = Field(None, ge=0)
    department: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)
    bank_details: BankDetails
    address: EmployeeAddress


class UpdateEmployeeRequest(BaseModel):
    """PUT /employees/{employee_id} — only provided fields are sent."""

    name: Optional[str] = Field(None, min_length=2, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=7, max_length=15)
    dob: Optional[str] = None
    adharnumber: Optional[str] = Field(None, max_length=14)
    pan_number: Optional[str] = Field(None, max_length=10)
    date_of_joining: Optional[str] = None
    annual_salary: Optional[float] = Field(None, ge=0)
    base_salary: Optional[float] = Field(None, ge=0)
    department: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)
    bank_details: Optional[BankDetails] = None
    address: Optional[EmployeeAddress] = None
