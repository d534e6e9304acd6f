"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Seeded companies, jobs and users with their tokens
"""

import os

# Point settings at SQLite before the app is imported
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, get_db
from jobly.core.security import create_token_for_user, get_password_hash
from jobly.models import Application, Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# bcrypt is slow; hash the seed passwords once per session
U1_PASSWORD_HASH = get_password_hash("password1")
U2_PASSWORD_HASH = get_password_hash("password2")


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db_session):
    """
    Seed three companies, five jobs and two users.

    c1 has J1 and J2, c2 has J3, c3 has J4 and J5. u1 is a regular user
    who applied to J1; u2 is an admin.
    """
    db_session.add_all([
        Company(handle="c1", name="C1", description="Desc1", num_employees=1, logo_url="http://c1.img"),
        Company(handle="c2", name="C2", description="Desc2", num_employees=2, logo_url="http://c2.img"),
        Company(handle="c3", name="C3", description="Desc3", num_employees=3, logo_url="http://c3.img"),
    ])
    db_session.flush()

    jobs = [
        Job(title="J1", salary=100000, equity=None, company_handle="c1"),
        Job(title="J2", salary=120000, equity=Decimal("0"), company_handle="c1"),
        Job(title="J3", salary=60000, equity=Decimal("0.5"), company_handle="c2"),
        Job(title="J4", salary=40000, equity=Decimal("1.0"), company_handle="c3"),
        Job(title="J5", salary=70000, equity=Decimal("0.025"), company_handle="c3"),
    ]
    db_session.add_all(jobs)

    db_session.add_all([
        User(
            username="u1",
            hashed_password=U1_PASSWORD_HASH,
            first_name="U1F",
            last_name="U1L",
            email="user1@user.com",
            is_admin=False,
        ),
        User(
            username="u2",
            hashed_password=U2_PASSWORD_HASH,
            first_name="U2F",
            last_name="U2L",
            email="user2@user.com",
            is_admin=True,
        ),
    ])
    db_session.flush()

    db_session.add(Application(username="u1", job_id=jobs[0].id))
    db_session.commit()

    return {"job_ids": {job.title: job.id for job in jobs}}


@pytest.fixture
def job_ids(seeded):
    """Seeded job ids keyed by title"""
    return seeded["job_ids"]


@pytest.fixture
def u1_headers():
    """Auth headers for u1 (regular user)"""
    return {"Authorization": f"Bearer {create_token_for_user('u1', False)}"}


@pytest.fixture
def admin_headers():
    """Auth headers for u2 (admin)"""
    return {"Authorization": f"Bearer {create_token_for_user('u2', True)}"}
