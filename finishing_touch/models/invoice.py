import enum
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from finishing_touch.database import Base


class InvoiceStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    VOID = "VOID"


class Invoice(Base):
    """Invoice model for customer billing."""

    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    number = Column(String(20), unique=True, index=True, nullable=False)
    status = Column(String(20), default=InvoiceStatus.DRAFT.value, nullable=False, index=True)

    # At most one invoice per estimate
    derived_from_estimate_id = Column(
        String(36),
        ForeignKey("estimates.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
    )

    # Value copy of the customer, never a live reference
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_job_address = Column(String(500), nullable=False)

    currency_symbol = Column(String(8), nullable=False)
    subtotal = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    line_items = relationship(
        "InvoiceLineItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLineItem.position",
        lazy="selectin",
    )
    derived_from_estimate = relationship("Estimate", back_populates="invoice", lazy="selectin")

    def __repr__(self):
        return f"<Invoice {self.number}>"


class InvoiceLineItem(Base):
    """Line item owned by an invoice."""

    __tablename__ = "invoice_line_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    invoice_id = Column(
        String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(255), nullable=False)
    qty = Column(Integer, nullable=False, default=0)
    unit_price = Column(Float, nullable=False, default=0)
    total_price = Column(Float, nullable=False, default=0)
    item_metadata = Column("metadata", JSON, nullable=True)

    invoice = relationship("Invoice", back_populates="line_items")
