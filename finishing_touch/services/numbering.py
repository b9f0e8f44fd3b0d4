"""Sequential document numbers (EST-000001, INV-000042).

The next number is derived from the most recently stored one. This is not a
gapless or race-free sequence: two concurrent requests can read the same
"last" number. The unique constraint on the number column catches that, and
commit_numbered turns the collision into a ConflictError for the caller to
retry instead of silently storing a duplicate.
"""

import logging
import re
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.exceptions import ConflictError
from finishing_touch.models.estimate import Estimate
from finishing_touch.models.invoice import Invoice

logger = logging.getLogger(__name__)

ESTIMATE_PREFIX = "EST"
INVOICE_PREFIX = "INV"
NUMBER_WIDTH = 6

_TRAILING_DIGITS = re.compile(r"-(\d+)$")


def extract_sequence_number(value: Optional[str]) -> int:
    """Digits after the last hyphen; anything else counts as 0."""
    if not value:
        return 0
    match = _TRAILING_DIGITS.search(value)
    if not match:
        return 0
    return int(match.group(1))


def format_document_number(prefix: str, value: int) -> str:
    return f"{prefix}-{value:0{NUMBER_WIDTH}d}"


def next_number(prefix: str, last_number: Optional[str]) -> str:
    """next_number("EST", "EST-000041") -> "EST-000042"."""
    return format_document_number(prefix, extract_sequence_number(last_number) + 1)


async def _latest_number(db: AsyncSession, model) -> Optional[str]:
    # Creation timestamps can tie within a second on SQLite; number breaks the tie
    result = await db.execute(
        select(model.number)
        .order_by(model.created_at.desc(), model.number.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def allocate_estimate_number(db: AsyncSession) -> str:
    return next_number(ESTIMATE_PREFIX, await _latest_number(db, Estimate))


async def allocate_invoice_number(db: AsyncSession) -> str:
    return next_number(INVOICE_PREFIX, await _latest_number(db, Invoice))


async def commit_numbered(db: AsyncSession, document: str) -> None:
    """Commit a newly numbered document, rolling back everything on failure.

    A unique-constraint violation means another request took the same number
    (or the same estimate link) first.
    """
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Unique collision while saving %s: %s", document, type(exc).__name__)
        raise ConflictError(
            f"{document} could not be saved because a concurrent request used the same number; please retry"
        ) from exc
    except Exception:
        await db.rollback()
        raise
