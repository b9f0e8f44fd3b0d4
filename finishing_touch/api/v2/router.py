from fastapi import APIRouter
from finishing_touch.api.v2 import (
    auth,
    estimates,
    invoices,
    jobs,
    employees,
    time_entries,
    leads,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(estimates.router, prefix="/estimates", tags=["estimates"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(time_entries.router, prefix="/time-entries", tags=["time-entries"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
