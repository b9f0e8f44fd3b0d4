#!/usr/bin/env python3
"""
Seed Script for Demo Data

Creates a working admin login plus a small demo dataset:
- Admin user (admin@finishingtouch.test / Password123!) linked to an employee
- Three crew employees
- Two estimates (one DRAFT, one ACCEPTED)
- Two website leads

Safe to run repeatedly; existing rows are left alone.

Run with: python scripts/seed_demo_data.py
"""

import asyncio
from datetime import date, timedelta
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.api.deps import get_password_hash
from finishing_touch.database import async_session_maker, init_db
from finishing_touch.models import Employee, Estimate, Lead, User
from finishing_touch.models.employee import EmployeeRole
from finishing_touch.models.estimate import EstimateStatus
from finishing_touch.models.lead import LeadSource
from finishing_touch.schemas.estimate import EstimateCreate
from finishing_touch.services import estimate_service


ADMIN_EMAIL = "admin@finishingtouch.test"
ADMIN_PASSWORD = "Password123!"

CREW = [
    {"name": "Maya Painter", "phone": "555-2000", "role": EmployeeRole.EMPLOYEE},
    {"name": "Daniel Painter", "phone": "555-3000", "role": EmployeeRole.EMPLOYEE},
    {"name": "Noa Manager", "phone": "555-4000", "role": EmployeeRole.MANAGER},
]

DEMO_ESTIMATES = [
    {
        "status": EstimateStatus.DRAFT,
        "days_ahead": 7,
        "customer": {
            "name": "Jordan Lee",
            "phone": "555-0123",
            "email": "jordan@example.com",
            "job_address": "12 Ocean Ave, Tel Aviv",
        },
        "rooms": {
            "kitchen_qty": 1,
            "dining_room_qty": 1,
            "living_room_qty": 1,
            "bathrooms_qty": 1,
            "master_bathrooms_qty": 0,
            "bedrooms": [{"beds": 1}, {"beds": 3}],
        },
    },
    {
        "status": EstimateStatus.ACCEPTED,
        "days_ahead": 14,
        "customer": {
            "name": "Riley Cohen",
            "phone": "555-0456",
            "email": "riley@example.com",
            "job_address": "48 HaYarkon St, Herzliya",
        },
        "rooms": {
            "kitchen_qty": 1,
            "dining_room_qty": 0,
            "living_room_qty": 1,
            "bathrooms_qty": 2,
            "master_bathrooms_qty": 1,
            "bedrooms": [{"beds": 2}, {"beds": 4}, {"beds": 1}],
        },
    },
]

DEMO_LEADS = [
    {
        "name": "Taylor Contact",
        "email": "taylor@example.com",
        "phone": "555-5000",
        "message": "Need turnover painting for 2BR rental before tenant move-in.",
        "source": LeadSource.CONTACT.value,
    },
    {
        "name": "Morgan Request",
        "email": "morgan@example.com",
        "phone": "555-6000",
        "message": "Please send estimate for painting an apartment next month.",
        "source": LeadSource.REQUEST_ESTIMATE.value,
        "job_address": "9 Herzl St, Ramat Gan",
    },
]


async def seed_admin(session: AsyncSession) -> User:
    """Create or reset the admin login and its employee record."""
    result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
    admin = result.scalar_one_or_none()

    if admin is None:
        admin = User(email=ADMIN_EMAIL, name="Alex Admin", role=EmployeeRole.ADMIN.value, hashed_password="")
        session.add(admin)
    admin.hashed_password = get_password_hash(ADMIN_PASSWORD)
    admin.role = EmployeeRole.ADMIN.value
    await session.flush()

    result = await session.execute(select(Employee).where(Employee.user_id == admin.id))
    if result.scalar_one_or_none() is None:
        session.add(Employee(user_id=admin.id, name="Alex Admin", phone="555-1000", role=EmployeeRole.ADMIN.value))

    await session.commit()
    print(f"  Admin login: {ADMIN_EMAIL}")
    return admin


async def seed_crew(session: AsyncSession) -> int:
    created = 0
    for member in CREW:
        result = await session.execute(
            select(Employee).where(Employee.name == member["name"], Employee.phone == member["phone"])
        )
        if result.scalar_one_or_none():
            continue
        session.add(Employee(name=member["name"], phone=member["phone"], role=member["role"].value))
        created += 1

    await session.commit()
    print(f"  Employees created: {created}")
    return created


async def seed_estimates(session: AsyncSession) -> int:
    created = 0
    for demo in DEMO_ESTIMATES:
        result = await session.execute(
            select(Estimate.id).where(Estimate.customer_email == demo["customer"]["email"])
        )
        if result.first():
            continue

        estimate = await estimate_service.create_estimate(
            session,
            EstimateCreate(
                customer=demo["customer"],
                moving_date=date.today() + timedelta(days=demo["days_ahead"]),
                rooms=demo["rooms"],
            ),
        )
        if demo["status"] != EstimateStatus.DRAFT:
            estimate = await estimate_service.update_estimate_status(session, estimate.id, demo["status"])

        print(f"  {estimate.number}: {estimate.customer_name} ({estimate.status}) total {estimate.total:,.0f}")
        created += 1

    return created


async def seed_leads(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Lead.id)))
    if result.scalar():
        print("  Leads already present, skipping")
        return 0

    session.add_all([Lead(**lead) for lead in DEMO_LEADS])
    await session.commit()
    print(f"  Leads created: {len(DEMO_LEADS)}")
    return len(DEMO_LEADS)


async def main():
    """Main seed function."""
    print("=" * 60)
    print("Finishing Touch - Demo Seed Script")
    print("=" * 60)

    await init_db()

    async with async_session_maker() as session:
        await seed_admin(session)
        await seed_crew(session)
        await seed_estimates(session)
        await seed_leads(session)

    print("=" * 60)
    print("Seed completed.")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
