from fastapi import APIRouter, status, Query
from typing import Optional
import logging

from finishing_touch.api.deps import DbSession, CurrentUser, ManagerUser
from finishing_touch.models.invoice import Invoice, InvoiceStatus
from finishing_touch.schemas.invoice import (
    InvoiceCreate,
    InvoiceStatusUpdate,
    InvoiceResponse,
    InvoiceListResponse,
)
from finishing_touch.services import invoice_service
from finishing_touch.utils.currency import format_currency

logger = logging.getLogger(__name__)
router = APIRouter()


def line_item_to_response(item) -> dict:
    """Line item of an estimate or an invoice as a response dict."""
    return {
        "id": item.id,
        "description": item.description,
        "qty": item.qty,
        "unit_price": item.unit_price,
        "total_price": item.total_price,
        "metadata": item.item_metadata,
    }


def invoice_to_response(invoice: Invoice) -> dict:
    """Convert Invoice model to response dict."""
    return {
        "id": invoice.id,
        "number": invoice.number,
        "status": invoice.status,
        "derived_from_estimate_id": invoice.derived_from_estimate_id,
        "customer": {
            "name": invoice.customer_name,
            "phone": invoice.customer_phone,
            "email": invoice.customer_email,
            "job_address": invoice.customer_job_address,
        },
        "currency_symbol": invoice.currency_symbol,
        "subtotal": invoice.subtotal or 0,
        "tax": invoice.tax or 0,
        "total": invoice.total or 0,
        "formatted_total": format_currency(invoice.total or 0, invoice.currency_symbol),
        "line_items": [line_item_to_response(item) for item in invoice.line_items],
        "created_at": invoice.created_at,
        "updated_at": invoice.updated_at,
    }


@router.get("/", response_model=InvoiceListResponse)
async def list_invoices(
    db: DbSession,
    current_user: CurrentUser,
    search: Optional[str] = None,
    status: Optional[InvoiceStatus] = Query(None),
):
    """List invoices, newest first."""
    invoices = await invoice_service.list_invoices(db, search=search, status=status)
    return {
        "items": [invoice_to_response(i) for i in invoices],
        "total": len(invoices),
    }


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: str,
    db: DbSession,
    current_user: CurrentUser,
):
    invoice = await invoice_service.get_invoice(db, invoice_id)
    return invoice_to_response(invoice)


@router.post("/", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    db: DbSession,
    current_user: ManagerUser,
):
    """Create an invoice from already-priced line items."""
    invoice = await invoice_service.create_invoice(db, invoice_data)
    return invoice_to_response(invoice)


@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
async def update_invoice_status(
    invoice_id: str,
    status_data: InvoiceStatusUpdate,
    db: DbSession,
    current_user: ManagerUser,
):
    invoice = await invoice_service.update_invoice_status(db, invoice_id, status_data.status)
    return invoice_to_response(invoice)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    db: DbSession,
    current_user: ManagerUser,
):
    await invoice_service.delete_invoice(db, invoice_id)
