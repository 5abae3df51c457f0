"""
Invoice Routes — every path is scoped by company slug (mhd, enoylitystudio,
enoylitytech).

Endpoints:
    GET  /companies                       Companies and their labels
    GET  /{company}/list ...              Invoice history list view
    GET  /{company}/{invoice_id}          Single invoice (prefills the form)
    POST /{company}/generate              Generate the PDF
    GET  /{company}/settings              Invoice header settings
    PUT  /{company}/settings              Save invoice header settings
"""

from fastapi import APIRouter, Depends, Request

from officedesk.config import get_api_client, settings
from officedesk.listing import ControllerRegistry, get_controller_registry
from officedesk.listing.routes import list_view_router
from officedesk.rbac import ActionId, require_action
from officedesk.remote import OfficeApiClient
from officedesk.utils import (
    Logger,
    download_response,
    remote_error_response,
    success_response,
)
from officedesk.utils.exceptions import RemoteApiError
from .schemas import GenerateInvoiceRequest, InvoiceSettings
from .service import InvoiceService, invoice_controller_factory

logger = Logger("invoices")

invoices_router = APIRouter()

for _slug in settings.invoice_companies:
    invoices_router.include_router(
        list_view_router(
            f"invoices:{_slug}",
            invoice_controller_factory(_slug),
            ActionId.INVOICE_VIEW,
        ),
        prefix=f"/{_slug}/list",
    )


@invoices_router.get("/companies")
@require_action(ActionId.INVOICE_VIEW, ActionId.INVOICE_GENERATE, ActionId.SETTINGS_MANAGE)
async def list_companies(request: Request):
    companies = [
        {"slug": slug, "label": cfg["label"]}
        for slug, cfg in settings.invoice_companies.items()
    ]
    return success_response(data={"companies": companies})


# ── Settings ─────────────────────────────────────────────────────


@invoices_router.get("/{company}/settings")
@require_action(ActionId.SETTINGS_MANAGE)
async def get_invoice_settings(
    request: Request,
    company: str,
    client: OfficeApiClient = Depends(get_api_client),
):
    try:
        result = await InvoiceService(client, company).get_settings()
    except RemoteApiError as exc:
        return remote_error_response(exc, "Failed to load settings")
    return success_response(data=result)


@invoices_router.put("/{company}/settings")
@require_action(ActionId.SETTINGS_MANAGE)
async def save_invoice_settings(
    request: Request,
    company: str,
    body: InvoiceSettings,
    client: OfficeApiClient = Depends(get_api_client),
):
    try:
        await InvoiceService(client, company).save_settings(body)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Failed to save settings")
    return success_response(message="Settings saved successfully")


# ── Invoices ─────────────────────────────────────────────────────


@invoices_router.post("/{company}/generate")
@require_action(ActionId.INVOICE_GENERATE)
async def generate_invoice(
    request: Request,
    company: str,
    body: GenerateInvoiceRequest,
    client: OfficeApiClient = Depends(get_api_client),
    registry: ControllerRegistry = Depends(get_controller_registry),
):
    """Generate the invoice PDF and stream it back as a download."""
    try:
        pdf = await InvoiceService(client, company).generate_pdf(body)
    except RemoteApiError as exc:
        logger.warning(f"Invoice generation failed for {company}: {exc!r}")
        return remote_error_response(exc, "Failed to generate invoice.")

    # The new invoice must show up in this company's history
    controller = registry.get(request.state.session.session_id, f"invoices:{company}")
    if controller is not None:
        controller.invalidate()
    return download_response(pdf.content, pdf.media_type, pdf.filename or "invoice.pdf")


@invoices_router.get("/{company}/{invoice_id}")
@require_action(ActionId.INVOICE_VIEW, ActionId.INVOICE_GENERATE)
async def get_invoice(
    request: Request,
    company: str,
    invoice_id: str,
    client: OfficeApiClient = Depends(get_api_client),
):
    try:
        invoice = await InvoiceService(client, company).get_invoice(invoice_id)
    except RemoteApiError as exc:
        return remote_error_response(exc, "Unable to fetch invoice data.")
    return success_response(data={"invoice": invoice})
