import enum
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from finishing_touch.database import Base


class EmployeeRole(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class Employee(Base):
    """Crew member that can be assigned to jobs and punch the clock."""

    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    role = Column(String(20), nullable=False, default=EmployeeRole.EMPLOYEE.value)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Employee {self.name}>"
