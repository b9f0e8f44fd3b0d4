"""Website lead intake."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.models.lead import Lead
from finishing_touch.schemas.lead import LeadCreate

logger = logging.getLogger(__name__)


async def create_lead(db: AsyncSession, data: LeadCreate) -> Lead:
    lead = Lead(
        name=data.name,
        email=data.email,
        phone=data.phone,
        message=data.message,
        source=data.source.value,
        job_address=data.job_address,
        moving_date=data.moving_date,
    )
    db.add(lead)
    await db.commit()

    # No mail transport yet; the office reads new leads from the log
    logger.info("[DEV EMAIL] New lead from %s <%s> source=%s", lead.name, lead.email, lead.source)

    result = await db.execute(
        select(Lead).where(Lead.id == lead.id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def list_leads(db: AsyncSession) -> List[Lead]:
    result = await db.execute(select(Lead).order_by(Lead.created_at.desc()))
    return list(result.scalars().all())
