from fastapi import APIRouter, status, Query
from typing import Optional
import logging

from finishing_touch.api.deps import DbSession, CurrentUser, ManagerUser
from finishing_touch.models.estimate import Estimate, EstimateStatus
from finishing_touch.schemas.estimate import (
    EstimateCreate,
    EstimateUpdate,
    EstimateStatusUpdate,
    EstimateNotesUpdate,
    EstimateResponse,
    EstimateListResponse,
    EstimateSendResponse,
)
from finishing_touch.schemas.invoice import InvoiceResponse
from finishing_touch.schemas.pricing import PricingPreviewRequest, PricingSummary
from finishing_touch.services import estimate_service
from finishing_touch.services.pricing import calculate_estimate_pricing
from finishing_touch.api.v2.invoices import invoice_to_response, line_item_to_response
from finishing_touch.utils.currency import format_currency

logger = logging.getLogger(__name__)
router = APIRouter()


def estimate_to_response(estimate: Estimate) -> dict:
    """Convert Estimate model to response dict."""
    invoice = estimate.invoice

    return {
        "id": estimate.id,
        "number": estimate.number,
        "status": estimate.status,
        "moving_date": estimate.moving_date,
        "customer_id": estimate.customer_id,
        "customer": {
            "name": estimate.customer_name,
            "phone": estimate.customer_phone,
            "email": estimate.customer_email,
            "job_address": estimate.customer_job_address,
        },
        "currency_symbol": estimate.currency_symbol,
        "subtotal": estimate.subtotal or 0,
        "tax": estimate.tax or 0,
        "total": estimate.total or 0,
        "formatted_total": format_currency(estimate.total or 0, estimate.currency_symbol),
        "notes": estimate.notes,
        "line_items": [line_item_to_response(item) for item in estimate.line_items],
        "invoice_id": invoice.id if invoice else None,
        "invoice_number": invoice.number if invoice else None,
        "created_at": estimate.created_at,
        "updated_at": estimate.updated_at,
    }


@router.post("/pricing", response_model=PricingSummary)
async def preview_pricing(
    request: PricingPreviewRequest,
    current_user: CurrentUser,
):
    """Price a set of rooms without saving anything."""
    return calculate_estimate_pricing(request.rooms, tax=request.tax)


@router.get("/", response_model=EstimateListResponse)
async def list_estimates(
    db: DbSession,
    current_user: CurrentUser,
    search: Optional[str] = None,
    status: Optional[EstimateStatus] = Query(None),
):
    """List estimates, newest first."""
    estimates = await estimate_service.list_estimates(db, search=search, status=status)
    return {
        "items": [estimate_to_response(e) for e in estimates],
        "total": len(estimates),
    }


@router.get("/{estimate_id}", response_model=EstimateResponse)
async def get_estimate(
    estimate_id: str,
    db: DbSession,
    current_user: CurrentUser,
):
    estimate = await estimate_service.get_estimate(db, estimate_id)
    return estimate_to_response(estimate)


@router.post("/", response_model=EstimateResponse, status_code=status.HTTP_201_CREATED)
async def create_estimate(
    estimate_data: EstimateCreate,
    db: DbSession,
    current_user: ManagerUser,
):
    """Create a new estimate. Line items and totals are computed from the rooms."""
    estimate = await estimate_service.create_estimate(db, estimate_data)
    return estimate_to_response(estimate)


@router.patch("/{estimate_id}", response_model=EstimateResponse)
async def update_estimate(
    estimate_id: str,
    estimate_data: EstimateUpdate,
    db: DbSession,
    current_user: ManagerUser,
):
    estimate = await estimate_service.update_estimate(db, estimate_id, estimate_data)
    return estimate_to_response(estimate)


@router.patch("/{estimate_id}/status", response_model=EstimateResponse)
async def update_estimate_status(
    estimate_id: str,
    status_data: EstimateStatusUpdate,
    db: DbSession,
    current_user: ManagerUser,
):
    estimate = await estimate_service.update_estimate_status(db, estimate_id, status_data.status)
    return estimate_to_response(estimate)


@router.patch("/{estimate_id}/notes", response_model=EstimateResponse)
async def update_estimate_notes(
    estimate_id: str,
    notes_data: EstimateNotesUpdate,
    db: DbSession,
    current_user: ManagerUser,
):
    estimate = await estimate_service.update_estimate_notes(db, estimate_id, notes_data.notes)
    return estimate_to_response(estimate)


@router.delete("/{estimate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_estimate(
    estimate_id: str,
    db: DbSession,
    current_user: ManagerUser,
):
    await estimate_service.delete_estimate(db, estimate_id)


@router.post("/{estimate_id}/send", response_model=EstimateSendResponse)
async def send_estimate(
    estimate_id: str,
    db: DbSession,
    current_user: ManagerUser,
):
    """Send the estimate to the customer."""
    return await estimate_service.send_estimate(db, estimate_id)


@router.post("/{estimate_id}/convert-to-invoice", response_model=InvoiceResponse)
async def convert_estimate_to_invoice(
    estimate_id: str,
    db: DbSession,
    current_user: ManagerUser,
):
    """Create the invoice for an estimate, or return the one it already has."""
    invoice = await estimate_service.convert_estimate_to_invoice(db, estimate_id)
    return invoice_to_response(invoice)
