"""Invoice lifecycle: direct creation, listing, status overwrite, deletion.

Invoices derived from estimates are created by
estimate_service.convert_estimate_to_invoice.
"""

import logging
from typing import Optional, List

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.config import settings
from finishing_touch.exceptions import ConflictError, NotFoundError
from finishing_touch.models.estimate import Estimate
from finishing_touch.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from finishing_touch.schemas.invoice import InvoiceCreate
from finishing_touch.services.numbering import allocate_invoice_number, commit_numbered

logger = logging.getLogger(__name__)


async def get_invoice(db: AsyncSession, invoice_id: str) -> Invoice:
    """Load an invoice with its line items, or raise NotFoundError."""
    result = await db.execute(
        select(Invoice)
        .where(Invoice.id == invoice_id)
        .execution_options(populate_existing=True)
    )
    invoice = result.scalar_one_or_none()

    if not invoice:
        raise NotFoundError("Invoice", invoice_id)

    return invoice


async def create_invoice(db: AsyncSession, data: InvoiceCreate) -> Invoice:
    """
    Create an invoice from caller-supplied line items and totals.

    Nothing is recalculated. When derived_from_estimate_id is given the
    estimate must exist and must not already have an invoice.
    """
    estimate = None
    if data.derived_from_estimate_id:
        result = await db.execute(
            select(Estimate).where(Estimate.id == data.derived_from_estimate_id)
        )
        estimate = result.scalar_one_or_none()
        if not estimate:
            raise NotFoundError("Estimate", data.derived_from_estimate_id)
        if estimate.invoice is not None:
            raise ConflictError(f"Estimate {estimate.number} already has invoice {estimate.invoice.number}")

    number = await allocate_invoice_number(db)

    invoice = Invoice(
        number=number,
        status=InvoiceStatus.DRAFT.value,
        customer_name=data.customer.name,
        customer_phone=data.customer.phone,
        customer_email=data.customer.email,
        customer_job_address=data.customer.job_address,
        currency_symbol=data.currency_symbol or settings.CURRENCY_SYMBOL,
        subtotal=data.subtotal,
        tax=data.tax,
        total=data.total,
        line_items=[
            InvoiceLineItem(
                position=position,
                description=item.description,
                qty=item.qty,
                unit_price=item.unit_price,
                total_price=item.total_price,
                item_metadata=item.metadata,
            )
            for position, item in enumerate(data.line_items)
        ],
    )

    if estimate is not None:
        estimate.invoice = invoice
    else:
        db.add(invoice)

    await commit_numbered(db, "Invoice")

    logger.info("Created invoice %s", number)
    return await get_invoice(db, invoice.id)


async def list_invoices(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[InvoiceStatus] = None,
) -> List[Invoice]:
    """Newest first; search matches number or customer name, case-insensitive."""
    query = select(Invoice)

    if status:
        query = query.where(Invoice.status == InvoiceStatus(status).value)

    if search:
        query = query.where(
            or_(
                Invoice.number.icontains(search, autoescape=True),
                Invoice.customer_name.icontains(search, autoescape=True),
            )
        )

    query = query.order_by(Invoice.created_at.desc(), Invoice.number.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_invoice_status(db: AsyncSession, invoice_id: str, status: InvoiceStatus) -> Invoice:
    """Free-form status overwrite among DRAFT/SENT/PAID/VOID."""
    invoice = await get_invoice(db, invoice_id)
    invoice.status = InvoiceStatus(status).value

    await db.commit()
    return await get_invoice(db, invoice_id)


async def delete_invoice(db: AsyncSession, invoice_id: str) -> None:
    invoice = await get_invoice(db, invoice_id)
    await db.delete(invoice)
    await db.commit()
    logger.info("Deleted invoice %s", invoice.number)
