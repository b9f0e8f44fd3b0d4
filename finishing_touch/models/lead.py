import enum
import uuid

from sqlalchemy import Column, String, Text, Date, DateTime
from sqlalchemy.sql import func
from finishing_touch.database import Base


class LeadSource(str, enum.Enum):
    CONTACT = "CONTACT"
    REQUEST_ESTIMATE = "REQUEST_ESTIMATE"


class Lead(Base):
    """Intake record from the website contact / estimate request forms."""

    __tablename__ = "leads"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    source = Column(String(30), nullable=False, default=LeadSource.CONTACT.value)
    job_address = Column(String(500))
    moving_date = Column(Date)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
