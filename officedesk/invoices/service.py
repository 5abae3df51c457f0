"""
Invoice Service — one set of endpoints per billing company.

Each company's remote routes live under its own prefix (see
`settings.invoice_companies`):

    POST {prefix}/getlist            {search, sortField, sortAsc, page, per_page}
    POST {prefix}/getinvoice         {id}
    POST {prefix}/generate-invoice   PDF download
    GET  {settings}                  company header settings
    POST {settings}                  save them

The list stores `invoice_date` / `due_date` as free text, so sorting on
those columns is done locally over the full set.
"""

from officedesk.config import settings
from officedesk.listing import (
    DateSortFallbackStrategy,
    ListController,
    ListEndpoint,
    ListQuery,
    ServerPagedStrategy,
)
from officedesk.remote import BlobPayload, OfficeApiClient
from officedesk.session import Session
from officedesk.utils.exceptions import MalformedResponseError, NotFoundError
from .schemas import GenerateInvoiceRequest, InvoiceSettings, PaymentMethod

DATE_FIELDS = ("invoice_date", "due_date")


def company_config(company: str) -> dict:
    config = settings.invoice_companies.get(company)
    if config is None:
        raise NotFoundError(f"Unknown invoice company: {company}")
    return config


def invoice_payload(query: ListQuery) -> dict:
    return {
        "search": query.search,
        "sortField": query.sort_field,
        "sortAsc": query.sort_ascending,
        "page": query.page,
        "per_page": query.page_size,
    }


def map_invoice_row(row: dict) -> dict:
    return {
        "id": row.get("_id") or row.get("id"),
        "invoice_number": row.get("invoice_number"),
        "invoice_date": row.get("invoice_date"),
        "due_date": row.get("due_date"),
        "bill_to": row.get("bill_to") or {},
        "items": row.get("items") or [],
        "payment_method": row.get("payment_method"),
        "total_amount": row.get("total_amount"),
    }


def invoice_endpoint(company: str) -> ListEndpoint:
    return ListEndpoint(
        path=f"{company_config(company)['prefix']}/getlist",
        rows_key="invoices",
        payload_builder=invoice_payload,
        row_mapper=map_invoice_row,
    )


def invoice_controller_factory(company: str):
    """Controller factory for one company's invoice history."""

    def build(client: OfficeApiClient, session: Session) -> ListController:
        endpoint = invoice_endpoint(company)
        return ListController(
            name=f"invoices:{company}",
            strategy=ServerPagedStrategy(client, endpoint),
            date_strategy=DateSortFallbackStrategy(
                client, endpoint, batch_size=settings.date_sort_batch_size
            ),
            date_fields=DATE_FIELDS,
            initial_query=ListQuery(
                sort_field="invoice_date",
                sort_ascending=False,
                page_size=settings.invoice_page_size,
            ),
            failure_message="Failed to fetch invoices",
            empty_message="No invoices found.",
        )

    return build


def _ddmmyyyy(value) -> str:
    return value.strftime("%d-%m-%Y")


def generate_payload(body: GenerateInvoiceRequest) -> dict:
    return {
        "bill_to_name": body.bill_to_name,
        "bill_to_address": body.bill_to_address,
        "bill_to_city": body.bill_to_city or "",
        "bill_to_email": body.bill_to_email or "",
        "bill_to_phone": body.bill_to_phone or "",
        "invoice_date": _ddmmyyyy(body.invoice_date),
        "due_date": _ddmmyyyy(body.due_date),
        "payment_method": int(body.payment_method),
        # Bank note only applies to bank transfers
        "bank_Note": (body.bank_note or "")
        if body.payment_method == PaymentMethod.BANK_TRANSFER
        else "",
        "items": [item.model_dump() for item in body.items],
        "notes": body.notes or "",
    }


def normalize_settings(data: dict) -> InvoiceSettings:
    """
    MHD stores settings in the form's own shape; the Enoylity companies
    nest them under company_details / assets.
    """
    if "company_details" not in data:
        return InvoiceSettings.model_validate(data)

    details = data.get("company_details") or {}
    assets = data.get("assets") or {}
    return InvoiceSettings(
        company_info={
            "name": details.get("company_name") or "",
            "address": details.get("company_address") or "",
            "city_state": "",
            "email": details.get("company_email") or "",
            "phone": details.get("company_phone") or "",
            "youtube": details.get("website") or "",
        },
        logo_path=assets.get("logo_url") or "",
    )


class InvoiceService:
    def __init__(self, client: OfficeApiClient, company: str):
        self.client = client
        self.company = company
        self.config = company_config(company)

    @property
    def prefix(self) -> str:
        return self.config["prefix"]

    async def get_invoice(self, invoice_id: str) -> dict:
        envelope = await self.client.post(f"{self.prefix}/getinvoice", {"id": invoice_id})
        data = envelope.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError("Invoice missing from response")
        return data

    async def generate_pdf(self, body: GenerateInvoiceRequest) -> BlobPayload:
        return await self.client.post_blob(
            f"{self.prefix}/generate-invoice", generate_payload(body)
        )

    async def get_settings(self) -> InvoiceSettings:
        envelope = await self.client.get(self.config["settings"])
        data = envelope.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError("Settings missing from response")
        return normalize_settings(data)

    async def save_settings(self, new_settings: InvoiceSettings) -> None:
        await self.client.post(self.config["settings"], new_settings.model_dump())
