"""
Invoice schemas.

Dates are taken as ISO dates from the form and sent to the office API as
DD-MM-YYYY, the format its PDF templates print.
"""

from datetime import date
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class PaymentMethod(IntEnum):
    PAYPAL = 0
    BANK_TRANSFER = 1
    OTHER = 2


class InvoiceItem(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: float = Field(..., gt=0)
    price: float = Field(..., ge=0)


class GenerateInvoiceRequest(BaseModel):
    """POST /invoices/{company}/generate"""

    bill_to_name: str = Field(..., min_length=1, max_length=200)
    bill_to_address: str = Field(..., min_length=1, max_length=500)
    bill_to_city: Optional[str] = ""
    bill_to_email: Optional[EmailStr] = None
    bill_to_phone: Optional[str] = ""
    invoice_date: date
    due_date: date
    payment_method: PaymentMethod = PaymentMethod.PAYPAL
    bank_note: Optional[str] = ""
    items: List[InvoiceItem] = Field(..., min_length=1)
    notes: Optional[str] = ""


class CompanyInfo(BaseModel):
    name: str = ""
    address: str = ""
    city_state: str = ""
    phone: str = ""
    youtube: str = ""
    email: str = ""


class InvoiceSettings(BaseModel):
    """Per-company invoice header settings, in one shape for every company."""

    company_info: CompanyInfo = Field(default_factory=CompanyInfo)
    colors: dict = Field(default_factory=lambda: {"light_pink": [255, 200, 200]})
    logo_path: str = ""
