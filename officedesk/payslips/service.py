"""
Payslip Service — builds the salary slip request and returns the PDF.

Remote endpoint:
    POST /employee/salaryslip  {employee_id, lop, date, month, salary_structure}
"""

from datetime import date
from typing import Optional

from officedesk.remote import BlobPayload, OfficeApiClient
from .schemas import GeneratePayslipRequest

# Component labels as printed on the slip
SALARY_COMPONENTS = (
    ("hra", "House Rent Allowance"),
    ("transport", "Conveyance Allowance"),
    ("medical", "MED ALL"),
    ("overtime", "Overtime Bonas"),
    ("bonus", "Performance Bonas"),
    ("others", "OTH ALL"),
)


def payslip_payload(body: GeneratePayslipRequest, today: Optional[date] = None) -> dict:
    today = today or date.today()
    return {
        "employee_id": body.employee_id,
        "lop": body.lop,
        "date": today.strftime("%d-%m-%Y"),
        "month": f"{body.month:02d}-{body.year}",
        "salary_structure": [
            {"name": label, "amount": getattr(body, field)}
            for field, label in SALARY_COMPONENTS
        ],
    }


class PayslipService:
    def __init__(self, client: OfficeApiClient):
        self.client = client

    async def generate(self, body: GeneratePayslipRequest) -> BlobPayload:
        return await self.client.post_blob("/employee/salaryslip", payslip_payload(body))
