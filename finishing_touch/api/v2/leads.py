from fastapi import APIRouter, status

from finishing_touch.api.deps import DbSession, ManagerUser
from finishing_touch.schemas.lead import LeadCreate, LeadResponse
from finishing_touch.services import lead_service

router = APIRouter()


@router.post("/", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
async def create_lead(
    lead_data: LeadCreate,
    db: DbSession,
):
    """Public website form. No authentication."""
    return await lead_service.create_lead(db, lead_data)


@router.get("/", response_model=list[LeadResponse])
async def list_leads(
    db: DbSession,
    current_user: ManagerUser,
):
    return await lead_service.list_leads(db)
