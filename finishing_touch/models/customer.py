import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from finishing_touch.database import Base


class Customer(Base):
    """Customer model, upserted by email whenever an estimate is created."""

    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Customer {self.email}>"
