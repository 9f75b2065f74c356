"""
Pytest configuration and fixtures for API tests.
"""

import os
from datetime import date
from typing import Generator

import pytest

# Override settings before the application is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fieldservice.auth import create_access_token  # noqa: E402
from fieldservice.database import Base, get_db  # noqa: E402
from fieldservice.domain.photos.storage import get_photo_storage  # noqa: E402
from fieldservice.main import app  # noqa: E402
from fieldservice.models import (  # noqa: E402
    Company,
    Customer,
    Job,
    JobAssignment,
    Profile,
    ServiceType,
    TeamMember,
)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakePhotoStorage:
    """In-memory stand-in for the R2 bucket"""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}

    def put(self, key: str, body: bytes, content_type: str) -> None:
        self.objects[key] = (body, content_type)

    def delete(self, key: str) -> None:
        self.objects.pop(key, None)

    def presigned_url(self, key: str, expiration: int = 3600) -> str:
        return f"https://storage.test/{key}?expires={expiration}"


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """Create test database session."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def photo_storage() -> FakePhotoStorage:
    return FakePhotoStorage()


@pytest.fixture(scope="function")
def client(test_db: Session, photo_storage: FakePhotoStorage) -> Generator:
    """Create test client with database and storage overrides."""

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _add(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def make_profile(db: Session, role: str, company: Company, name: str) -> Profile:
    return _add(
        db,
        Profile(
            auth_id=f"auth-{name.lower().replace(' ', '-')}",
            company_id=company.id,
            full_name=name,
            email=f"{name.lower().replace(' ', '.')}@example.com",
            role=role,
        ),
    )


def auth_headers_for(profile: Profile) -> dict:
    return {"Authorization": f"Bearer {create_access_token(profile.auth_id)}"}


@pytest.fixture
def company(test_db: Session) -> Company:
    return _add(test_db, Company(name="Sparkle Cleaning"))


@pytest.fixture
def other_company(test_db: Session) -> Company:
    return _add(test_db, Company(name="Rival Cleaning"))


@pytest.fixture
def admin(test_db: Session, company: Company) -> Profile:
    return make_profile(test_db, "admin", company, "Ada Admin")


@pytest.fixture
def manager(test_db: Session, company: Company) -> Profile:
    return make_profile(test_db, "manager", company, "Max Manager")


@pytest.fixture
def customer_profile(test_db: Session, company: Company) -> Profile:
    return make_profile(test_db, "customer", company, "Cleo Customer")


@pytest.fixture
def team_profile(test_db: Session, company: Company) -> Profile:
    return make_profile(test_db, "team", company, "Tom Team")


@pytest.fixture
def customer(test_db: Session, company: Company, customer_profile: Profile) -> Customer:
    return _add(
        test_db,
        Customer(
            company_id=company.id,
            profile_id=customer_profile.id,
            business_name="Acme Offices",
            service_address="1 Main St",
        ),
    )


@pytest.fixture
def service_type(test_db: Session, company: Company) -> ServiceType:
    return _add(
        test_db,
        ServiceType(company_id=company.id, name="Deep Clean", duration_minutes=120),
    )


@pytest.fixture
def team_member(test_db: Session, company: Company, team_profile: Profile) -> TeamMember:
    return _add(
        test_db,
        TeamMember(company_id=company.id, profile_id=team_profile.id, employee_id="EMP-1"),
    )


@pytest.fixture
def admin_headers(admin: Profile) -> dict:
    return auth_headers_for(admin)


@pytest.fixture
def manager_headers(manager: Profile) -> dict:
    return auth_headers_for(manager)


@pytest.fixture
def customer_headers(customer_profile: Profile) -> dict:
    return auth_headers_for(customer_profile)


@pytest.fixture
def team_headers(team_profile: Profile) -> dict:
    return auth_headers_for(team_profile)


@pytest.fixture
def job_payload(customer: Customer, service_type: ServiceType) -> dict:
    return {
        "title": "Office deep clean",
        "service_address": "1 Main St",
        "scheduled_date": date.today().isoformat(),
        "scheduled_time": "09:30",
        "customer_id": customer.id,
        "service_type_id": service_type.id,
    }


@pytest.fixture
def job(test_db: Session, company: Company, customer: Customer, service_type: ServiceType, manager: Profile) -> Job:
    return _add(
        test_db,
        Job(
            company_id=company.id,
            customer_id=customer.id,
            service_type_id=service_type.id,
            title="Window wash",
            service_address="1 Main St",
            scheduled_date=date.today(),
            scheduled_time="10:00",
            created_by=manager.id,
            assigned_manager=manager.id,
        ),
    )


@pytest.fixture
def assigned_job(test_db: Session, job: Job, team_member: TeamMember, manager: Profile) -> Job:
    _add(
        test_db,
        JobAssignment(job_id=job.id, team_member_id=team_member.id, assigned_by=manager.id),
    )
    return job
