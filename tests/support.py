"""Shared fixtures for API tests: an in-memory database and a TestClient bound to it."""

from collections.abc import Generator
from datetime import date

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portal_api.core.config import get_settings
from portal_api.core.database import get_db
from portal_api.core.security import create_access_token
from portal_api.main import create_app
from portal_api.models import Base, User
from portal_api.services.identity import build_user

PASSWORD = "Secret-pass1"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_client() -> TestClient:
    """App with get_db pointed at the in-memory engine. Lifespan is not run."""
    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def create_user(
    email: str,
    role: str = "CITIZEN",
    status: str = "ACTIVE",
    password: str = PASSWORD,
) -> User:
    db = TestingSessionLocal()
    try:
        user = build_user(get_settings(), email, password, role, status)
        db.add(user)
        db.commit()
        db.refresh(user)
        db.expunge(user)
        return user
    finally:
        db.close()


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, get_settings())}"}


def legislator_payload(ci: str = "1234567", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "first_names": "Ana María",
        "last_names": "Quispe Mamani",
        "ci": ci,
        "birth_date": date(1980, 6, 15).isoformat(),
        "party": "Partido Azul",
        "position": "Senadora",
        "department": "La Paz",
        "term_start": "2020-11-08",
        "term_end": "2025-11-08",
        "attendance_percentage": 90.0,
        "bills_presented": 4,
        "commissions": [{"name": "Constitución", "role": "Presidente"}],
    }
    payload.update(overrides)
    return payload
