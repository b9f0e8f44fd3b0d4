from finishing_touch.models.user import User
from finishing_touch.models.customer import Customer
from finishing_touch.models.estimate import Estimate, EstimateLineItem, EstimateStatus
from finishing_touch.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from finishing_touch.models.employee import Employee, EmployeeRole
from finishing_touch.models.job import Job, JobAssignment
from finishing_touch.models.time_entry import TimeEntry
from finishing_touch.models.lead import Lead, LeadSource

__all__ = [
    "User",
    "Customer",
    "Estimate",
    "EstimateLineItem",
    "EstimateStatus",
    "Invoice",
    "InvoiceLineItem",
    "InvoiceStatus",
    "Employee",
    "EmployeeRole",
    "Job",
    "JobAssignment",
    "TimeEntry",
    "Lead",
    "LeadSource",
]
