from fastapi import APIRouter, Depends, Request

from officedesk.config import get_api_client
from officedesk.rbac import ActionId, require_action
from officedesk.remote import OfficeApiClient
from officedesk.utils import Logger, download_response, remote_error_response
from officedesk.utils.exceptions import RemoteApiError
from .schemas import GeneratePayslipRequest
from .service import PayslipService

logger = Logger("payslips")

payslips_router = APIRouter()


@payslips_router.post("/generate")
@require_action(ActionId.PAYSLIP_GENERATE)
async def generate_payslip(
    request: Request,
    body: GeneratePayslipRequest,
    client: OfficeApiClient = Depends(get_api_client),
):
    """Generate an employee's salary slip PDF for one month."""
    try:
        pdf = await PayslipService(client).generate(body)
    except RemoteApiError as exc:
        logger.warning(f"Payslip generation failed for {body.employee_id}: {exc!r}")
        return remote_error_response(exc, "Error generating payslip.")
    return download_response(
        pdf.content, pdf.media_type, pdf.filename or f"salary_slip_{body.employee_id}.pdf"
    )
