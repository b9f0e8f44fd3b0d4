"""
SQLAlchemy models for Estimates and their line items.
"""
import enum
import uuid

from sqlalchemy import (
    Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, JSON, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finishing_touch.database import Base


class EstimateStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    INVOICED = "INVOICED"


class Estimate(Base):
    """Priced quote for a turnover painting job."""

    __tablename__ = "estimates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Sequential number, e.g. "EST-000042"
    number = Column(String(20), unique=True, nullable=False, index=True)

    status = Column(String(20), nullable=False, default=EstimateStatus.DRAFT.value, index=True)
    moving_date = Column(Date, nullable=False)

    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)

    # Customer snapshot captured at creation time
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_job_address = Column(String(500), nullable=False)

    currency_symbol = Column(String(8), nullable=False)
    subtotal = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)

    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    line_items = relationship(
        "EstimateLineItem",
        back_populates="estimate",
        cascade="all, delete-orphan",
        order_by="EstimateLineItem.position",
        lazy="selectin",
    )
    invoice = relationship(
        "Invoice",
        back_populates="derived_from_estimate",
        uselist=False,
        lazy="selectin",
    )

    __table_args__ = (
        Index('idx_estimates_customer_name', 'customer_name'),
        Index('idx_estimates_created_at', 'created_at'),
    )

    def __repr__(self):
        return f"<Estimate(id={self.id}, number={self.number}, status={self.status})>"


class EstimateLineItem(Base):
    """One priced row of an estimate. Prices are frozen at creation."""

    __tablename__ = "estimate_line_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    estimate_id = Column(
        String(36), ForeignKey("estimates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(255), nullable=False)
    qty = Column(Integer, nullable=False, default=0)
    unit_price = Column(Float, nullable=False, default=0.0)
    total_price = Column(Float, nullable=False, default=0.0)
    # "metadata" is reserved on declarative classes
    item_metadata = Column("metadata", JSON, nullable=True)

    estimate = relationship("Estimate", back_populates="line_items")
