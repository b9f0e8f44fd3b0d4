"""Estimate lifecycle: creation, listing, status/notes edits, conversion to invoice.

Statuses are free-form overwrites (any status can be set through an update).
Two rules are enforced:
- a DECLINED estimate cannot be converted to an invoice;
- converting an estimate that already has an invoice returns that invoice.
"""

import copy
import logging
from typing import Optional, List

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.config import settings
from finishing_touch.exceptions import ConflictError, NotFoundError
from finishing_touch.models.customer import Customer
from finishing_touch.models.estimate import Estimate, EstimateLineItem, EstimateStatus
from finishing_touch.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from finishing_touch.schemas.customer import CustomerSnapshot
from finishing_touch.schemas.estimate import EstimateCreate, EstimateUpdate
from finishing_touch.services.invoice_service import get_invoice
from finishing_touch.services.numbering import (
    allocate_estimate_number,
    allocate_invoice_number,
    commit_numbered,
)
from finishing_touch.services.pricing import DEFAULT_RATE_CARD, RateCard, calculate_estimate_pricing
from finishing_touch.utils.currency import format_currency

logger = logging.getLogger(__name__)


async def upsert_customer(db: AsyncSession, snapshot: CustomerSnapshot) -> Customer:
    """Find the customer by email, refreshing name and phone, or create it."""
    result = await db.execute(select(Customer).where(Customer.email == snapshot.email))
    customer = result.scalar_one_or_none()

    if customer:
        customer.name = snapshot.name
        customer.phone = snapshot.phone
    else:
        customer = Customer(email=snapshot.email, name=snapshot.name, phone=snapshot.phone)
        db.add(customer)

    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("Customer was created by a concurrent request; please retry") from exc

    return customer


async def get_estimate(db: AsyncSession, estimate_id: str) -> Estimate:
    """Load an estimate with its line items and invoice, or raise NotFoundError."""
    result = await db.execute(
        select(Estimate)
        .where(Estimate.id == estimate_id)
        .execution_options(populate_existing=True)
    )
    estimate = result.scalar_one_or_none()

    if not estimate:
        raise NotFoundError("Estimate", estimate_id)

    return estimate


async def create_estimate(
    db: AsyncSession,
    data: EstimateCreate,
    rate_card: RateCard = DEFAULT_RATE_CARD,
) -> Estimate:
    """Price the rooms and persist the estimate with its line items in one commit."""
    customer = await upsert_customer(db, data.customer)
    pricing = calculate_estimate_pricing(data.rooms, rate_card=rate_card)
    number = await allocate_estimate_number(db)

    estimate = Estimate(
        number=number,
        status=EstimateStatus.DRAFT.value,
        moving_date=data.moving_date,
        customer_id=customer.id,
        customer_name=data.customer.name,
        customer_phone=data.customer.phone,
        customer_email=data.customer.email,
        customer_job_address=data.customer.job_address,
        currency_symbol=settings.CURRENCY_SYMBOL,
        subtotal=pricing.subtotal,
        tax=pricing.tax,
        total=pricing.total,
        notes=data.notes,
        line_items=[
            EstimateLineItem(
                position=position,
                description=item.description,
                qty=item.qty,
                unit_price=item.unit_price,
                total_price=item.total_price,
                item_metadata=item.metadata,
            )
            for position, item in enumerate(pricing.line_items)
        ],
    )
    db.add(estimate)
    await commit_numbered(db, "Estimate")

    logger.info("Created estimate %s (total %s)", number, format_currency(pricing.total, estimate.currency_symbol))
    return await get_estimate(db, estimate.id)


async def list_estimates(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[EstimateStatus] = None,
) -> List[Estimate]:
    """Newest first; search is a case-insensitive match on customer name or number."""
    query = select(Estimate)

    if status:
        query = query.where(Estimate.status == EstimateStatus(status).value)

    if search:
        query = query.where(
            or_(
                Estimate.customer_name.icontains(search, autoescape=True),
                Estimate.number.icontains(search, autoescape=True),
            )
        )

    query = query.order_by(Estimate.created_at.desc(), Estimate.number.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_estimate(db: AsyncSession, estimate_id: str, data: EstimateUpdate) -> Estimate:
    """Overwrite status and/or notes. Prices are never recalculated."""
    estimate = await get_estimate(db, estimate_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("status") is not None:
        estimate.status = EstimateStatus(update_data["status"]).value
    if "notes" in update_data:
        estimate.notes = update_data["notes"]

    await db.commit()
    return await get_estimate(db, estimate_id)


async def update_estimate_status(db: AsyncSession, estimate_id: str, status: EstimateStatus) -> Estimate:
    return await update_estimate(db, estimate_id, EstimateUpdate(status=status))


async def update_estimate_notes(db: AsyncSession, estimate_id: str, notes: Optional[str]) -> Estimate:
    return await update_estimate(db, estimate_id, EstimateUpdate(notes=notes))


async def delete_estimate(db: AsyncSession, estimate_id: str) -> None:
    estimate = await get_estimate(db, estimate_id)
    await db.delete(estimate)
    await db.commit()
    logger.info("Deleted estimate %s", estimate.number)


async def send_estimate(db: AsyncSession, estimate_id: str) -> dict:
    """Dev-mode delivery: the email is only written to the log."""
    estimate = await get_estimate(db, estimate_id)

    logger.info(
        "[DEV EMAIL] Sending estimate %s to %s, total %s",
        estimate.number,
        estimate.customer_email,
        format_currency(estimate.total, estimate.currency_symbol),
    )

    return {"ok": True, "message": "Estimate sent (dev log only)."}


async def convert_estimate_to_invoice(db: AsyncSession, estimate_id: str) -> Invoice:
    """
    Derive an invoice from an estimate.

    The invoice gets value copies of the customer snapshot, currency, totals
    and every line item. Creating the invoice and marking the estimate
    INVOICED happen in a single commit; any failure rolls back both.

    Raises:
        NotFoundError: estimate does not exist
        ConflictError: estimate is DECLINED, or a concurrent conversion won
    """
    estimate = await get_estimate(db, estimate_id)

    if estimate.status == EstimateStatus.DECLINED.value:
        raise ConflictError("Declined estimates cannot be invoiced")

    if estimate.invoice is not None:
        logger.debug("Estimate %s already invoiced as %s", estimate.number, estimate.invoice.number)
        return estimate.invoice

    number = await allocate_invoice_number(db)

    invoice = Invoice(
        number=number,
        status=InvoiceStatus.DRAFT.value,
        customer_name=estimate.customer_name,
        customer_phone=estimate.customer_phone,
        customer_email=estimate.customer_email,
        customer_job_address=estimate.customer_job_address,
        currency_symbol=estimate.currency_symbol,
        subtotal=estimate.subtotal,
        tax=estimate.tax,
        total=estimate.total,
        line_items=[
            InvoiceLineItem(
                position=item.position,
                description=item.description,
                qty=item.qty,
                unit_price=item.unit_price,
                total_price=item.total_price,
                item_metadata=copy.deepcopy(item.item_metadata),
            )
            for item in estimate.line_items
        ],
    )
    estimate.invoice = invoice
    estimate.status = EstimateStatus.INVOICED.value

    await commit_numbered(db, "Invoice")

    logger.info("Converted estimate %s to invoice %s", estimate.number, number)
    return await get_invoice(db, invoice.id)
