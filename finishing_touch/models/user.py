import uuid

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from finishing_touch.database import Base


class User(Base):
    """Login identity for the admin UI."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(200))
    # ADMIN, MANAGER, EMPLOYEE
    role = Column(String(20), nullable=False, default="ADMIN")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.email}>"
