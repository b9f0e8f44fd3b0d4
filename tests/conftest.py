import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from finishing_touch.main import app
from finishing_touch.database import Base, get_db
from finishing_touch.api.deps import get_password_hash
from finishing_touch.models.user import User

# Test database URL (SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

API_PREFIX = "/api/v2"


@pytest_asyncio.fixture
async def test_db():
    """Create test database and tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_user(test_db: AsyncSession):
    """Create a test user."""
    user = User(
        email="test@example.com",
        hashed_password=get_password_hash("testpassword123"),
        name="Test User",
        role="ADMIN",
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest_asyncio.fixture
async def client(test_db: AsyncSession):
    """Create test client with overridden database."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(client: AsyncClient, test_user: User):
    """Create authenticated test client."""
    response = await client.post(
        f"{API_PREFIX}/auth/login",
        json={"email": "test@example.com", "password": "testpassword123"},
    )
    token = response.json()["access_token"]

    client.headers["Authorization"] = f"Bearer {token}"
    # Bearer wins anyway; drop the cookie so unauthenticated checks stay honest
    client.cookies.clear()
    return client


@pytest_asyncio.fixture
async def employee(authenticated_client: AsyncClient):
    """An EMPLOYEE created through the API."""
    response = await authenticated_client.post(
        f"{API_PREFIX}/employees/",
        json={"name": "Maya Painter", "phone": "555-2000", "role": "EMPLOYEE"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def rooms_payload():
    """Room set priced at 9750 with the default rate card."""
    return {
        "kitchen_qty": 1,
        "dining_room_qty": 1,
        "living_room_qty": 1,
        "bathrooms_qty": 2,
        "master_bathrooms_qty": 1,
        "bedrooms": [{"beds": 1}, {"beds": 4}],
    }


@pytest_asyncio.fixture
async def crew_client(client: AsyncClient, test_db: AsyncSession):
    """A second client signed in as a crew member (EMPLOYEE role)."""
    user = User(
        email="crew@example.com",
        hashed_password=get_password_hash("crewpassword123"),
        name="Crew Member",
        role="EMPLOYEE",
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.post(
            f"{API_PREFIX}/auth/login",
            json={"email": "crew@example.com", "password": "crewpassword123"},
        )
        ac.headers["Authorization"] = f"Bearer {response.json()['access_token']}"
        ac.cookies.clear()
        yield ac
