"""
Project Mentor Portal - Test Configuration and Fixtures
"""
import os
import re
from datetime import date, datetime
from typing import AsyncGenerator, Optional
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_mentor_portal.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['DIARY_HEADER_IMAGE_URL'] = ''

from mentor_portal.main import app
from mentor_portal.core.config import settings
from mentor_portal.core.database import Base, get_db
from mentor_portal.core.security import get_password_hash, create_session_token
from mentor_portal.models import Staff, Student, Team, Project, Review, Log
from mentor_portal.modules.auth.principal import Principal, parse_roles

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test_mentor_portal.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)

TEST_PASSWORD = 'testpassword123'


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
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


# ==================== Builders ====================

def principal_for(staff: Staff) -> Principal:
    return Principal(
        user_id=staff.id,
        staff_id=staff.staff_id,
        email=staff.email,
        role=staff.role,
        department=staff.department,
        section=staff.section,
        roles=parse_roles(staff.role),
    )


def session_headers(staff: Staff) -> dict:
    """Cookie header carrying a valid session for `staff`"""
    token = create_session_token(principal_for(staff).to_claims())
    return {'Cookie': f'{settings.SESSION_COOKIE_NAME}={token}'}


async def make_staff(
    db: AsyncSession,
    role: str,
    department: Optional[str] = 'CSE',
    section: Optional[str] = None,
    domain: Optional[str] = None,
    email: Optional[str] = None,
) -> Staff:
    staff = Staff(
        name=fake.name(),
        email=email or fake.unique.email(),
        password=get_password_hash(TEST_PASSWORD),
        role=role,
        department=department,
        section=section,
        domain=domain,
    )
    db.add(staff)
    await db.commit()
    await db.refresh(staff)
    return staff


async def make_team(
    db: AsyncSession,
    department: str = 'CSE',
    section: Optional[str] = 'A',
    mentor: Optional[str] = None,
    is_approved: Optional[bool] = None,
    team_lead: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Team:
    team = Team(
        topic=fake.catch_phrase(),
        code=fake.bothify(text='TM-###'),
        department=department,
        section=section,
        mentor=mentor,
        is_approved=is_approved,
        team_lead=team_lead,
    )
    if created_at:
        team.created_at = created_at
    db.add(team)
    await db.commit()
    await db.refresh(team)
    return team


async def make_student(db: AsyncSession, team: Optional[Team] = None, name: Optional[str] = None) -> Student:
    student = Student(
        student_id=fake.unique.bothify(text='STU#####'),
        register_number=fake.unique.numerify(text='7376########'),
        name=name or fake.name(),
        department=team.department if team else 'CSE',
        section=team.section if team else 'A',
        team_id=team.team_id if team else None,
    )
    db.add(student)
    await db.commit()
    await db.refresh(student)
    return student


async def make_project(db: AsyncSession, team: Team, is_approved: bool = False, is_hod_approved: bool = False) -> Project:
    project = Project(
        title=fake.catch_phrase(),
        team_id=team.team_id,
        theme=['AI', 'Web'],
        is_approved=is_approved,
        is_hod_approved=is_hod_approved,
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


async def make_review(
    db: AsyncSession,
    team: Team,
    stage: str = 'Review 1',
    marks: Optional[int] = None,
    result: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Review:
    review = Review(
        team_id=team.team_id,
        stage=stage,
        department=team.department,
        marks=marks,
        result=result,
    )
    if created_at:
        review.created_at = created_at
    db.add(review)
    await db.commit()
    await db.refresh(review)
    return review


async def make_log(
    db: AsyncSession,
    student: Student,
    team: Team,
    on: Optional[date] = None,
    mentor_approved: Optional[bool] = None,
) -> Log:
    log = Log(
        student_id=student.student_id,
        team_id=team.team_id,
        date=on or date(2024, 1, 15),
        expected_task=fake.sentence(),
        completed_task=fake.sentence(),
        mentor_approved=mentor_approved,
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)
    return log


# ==================== Common staff ====================

@pytest.fixture
async def hod(db_session: AsyncSession) -> Staff:
    """HOD of CSE"""
    return await make_staff(db_session, 'HOD', department='CSE')


@pytest.fixture
async def class_advisor(db_session: AsyncSession) -> Staff:
    """Class advisor of CSE section A"""
    return await make_staff(db_session, 'CLASS_ADVISOR', department='CSE', section='A')


@pytest.fixture
async def mentor(db_session: AsyncSession) -> Staff:
    """Project mentor in CSE"""
    return await make_staff(db_session, 'PROJECT_MENTOR', department='CSE', domain='AI')


@pytest.fixture
async def other_mentor(db_session: AsyncSession) -> Staff:
    """Second project mentor in the same department"""
    return await make_staff(db_session, 'PROJECT_MENTOR', department='CSE', domain='Web')


def fail_table_reads(db: AsyncSession, monkeypatch, table: str = 'teams') -> None:
    """Make every SELECT from `table` fail as if the store were down"""
    execute = db.execute
    pattern = re.compile(rf'FROM {table}\b')

    async def flaky_execute(statement, *args, **kwargs):
        if pattern.search(str(statement)):
            raise OperationalError(str(statement), {}, Exception(f'no such table: {table}'))
        return await execute(statement, *args, **kwargs)

    monkeypatch.setattr(db, 'execute', flaky_execute)
