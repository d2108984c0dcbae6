"""
InternHub - Test Configuration and Fixtures
"""
import os
from datetime import datetime, timedelta
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_internhub.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['ADMIN_EMAIL'] = 'admin-inbox@example.com'
os.environ['SMTP_USER'] = ''
os.environ['SMTP_PASSWORD'] = ''
os.environ['SENDGRID_API_KEY'] = ''

from internhub.main import app, build_services
from internhub.core.database import Base, get_db
from internhub.core.security import get_password_hash, create_user_token
from internhub.models import User, UserRole, Internship, InternshipStatus
from internhub.services.certificate_rasterizer import CertificateRasterizer
from internhub.services.email_service import EmailService

fake = Faker()

PDF_BYTES = b'%PDF-1.4 test certificate'
PNG_BYTES = b'\x89PNG\r\n\x1a\n test certificate'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_internhub.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def mock_email() -> MagicMock:
    """EmailService double whose sends all succeed"""
    service = MagicMock(spec=EmailService)
    service.send_internship_assignment_email = AsyncMock(return_value=True)
    service.send_internship_completion_email = AsyncMock(return_value=True)
    service.send_remark_notification_to_admin = AsyncMock(return_value=True)
    service.send_remark_response_to_user = AsyncMock(return_value=True)
    return service


@pytest.fixture
def mock_rasterizer() -> MagicMock:
    """Rasterizer double that never launches a browser"""
    rasterizer = MagicMock(spec=CertificateRasterizer)
    rasterizer.to_pdf = AsyncMock(return_value=PDF_BYTES)
    rasterizer.to_png = AsyncMock(return_value=PNG_BYTES)
    return rasterizer


@pytest.fixture
async def client(
    db_session: AsyncSession,
    mock_email: MagicMock,
    mock_rasterizer: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and collaborator overrides"""
    async def override_get_db():
        yield db_session

    build_services(app, email_service=mock_email, rasterizer=mock_rasterizer)
    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, role: UserRole) -> User:
    user = User(
        email=fake.unique.email(),
        name=fake.name(),
        hashed_password=get_password_hash('testpassword123'),
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test intern"""
    return await _create_user(db_session, UserRole.USER)


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second intern who owns nothing of test_user's"""
    return await _create_user(db_session, UserRole.USER)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    return await _create_user(db_session, UserRole.ADMIN)


def _headers_for(user: User) -> dict:
    return {'Authorization': f'Bearer {create_user_token(user)}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return _headers_for(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return _headers_for(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return _headers_for(admin_user)


@pytest.fixture
def make_internship(db_session: AsyncSession):
    """Factory that stores an internship straight through the session"""
    async def _make(
        user: User,
        status: InternshipStatus = InternshipStatus.ACTIVE,
        start: datetime = None,
        end: datetime = None,
        title: str = 'Backend Engineering Internship',
        role: str = 'Software Intern',
    ) -> Internship:
        start = start or datetime.utcnow() - timedelta(days=10)
        end = end or start + timedelta(days=60)
        internship = Internship(
            user_id=user.id,
            title=title,
            role=role,
            start_date=start,
            end_date=end,
            description='Build internal APIs',
            status=status,
        )
        internship.user = user
        db_session.add(internship)
        await db_session.commit()
        await db_session.refresh(internship)
        return internship

    return _make
