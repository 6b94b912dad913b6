from datetime import datetime, timezone
import os

# Must be set before the app (and its settings singleton) is imported
os.environ["TESTING"] = "true"
os.environ["ENVIRONMENT"] = "dev"
os.environ["DATABASE_URL"] = "sqlite:///./test_database.db"
os.environ["CRON_API_KEY"] = "test-cron-api-key-12345"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from app.main import app
from app.database import Base
from app.dependencies import get_db
from app.models import (
    User,
    UserRole,
    Client,
    ClientStatus,
    ComercialStatus,
    KanbanBoard,
    KanbanCard,
)
from app.auth.jwt_handler import create_access_token
from app.utils.clock import FrozenClock

# SQLite test database file
DATABASE_URL = "sqlite:///./test_database.db"

# Tracks the first test so a stale file from a crashed run is removed once
_first_test = True

# Wednesday 2026-03-04, 12:00 in São Paulo
FROZEN_NOW = datetime(2026, 3, 4, 15, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session():
    """
    One shared database session per test. The first user created is the CEO
    (id 1), which is the identity behind ``dev_token``.
    """
    global _first_test

    if _first_test and os.path.exists("test_database.db"):
        os.remove("test_database.db")
        _first_test = False

    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    ceo = User(name="CEO", email="ceo@example.com", role=UserRole.CEO, is_active=True)
    session.add(ceo)
    session.commit()
    session.refresh(ceo)

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with `get_db` overridden to use the test session.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def auth_headers(client):
    """
    CEO headers via the dev token.
    """
    return {"Authorization": "Bearer dev_token"}


@pytest.fixture
def api_key_headers():
    return {"X-API-Key": os.environ["CRON_API_KEY"]}


@pytest.fixture
def frozen_clock():
    return FrozenClock(FROZEN_NOW)


@pytest.fixture
def frozen_now():
    return FROZEN_NOW


@pytest.fixture
def test_ceo(db_session):
    return db_session.query(User).filter(User.email == "ceo@example.com").first()


def _make_user(db_session: Session, name: str, email: str, role: UserRole) -> User:
    user = User(name=name, email=email, role=role, is_active=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_ads_manager(db_session):
    return _make_user(db_session, "Gestor Ads", "ads@example.com", UserRole.GESTOR_ADS)


@pytest.fixture
def test_second_ads_manager(db_session):
    return _make_user(db_session, "Outro Gestor", "ads2@example.com", UserRole.GESTOR_ADS)


@pytest.fixture
def test_consultant(db_session):
    return _make_user(db_session, "Consultora", "comercial@example.com", UserRole.CONSULTOR_COMERCIAL)


@pytest.fixture
def test_designer(db_session):
    return _make_user(db_session, "Designer", "design@example.com", UserRole.DESIGN)


@pytest.fixture
def test_new_client(db_session, test_ads_manager, test_consultant):
    """
    A client that just signed: onboarding not started, sales pipeline at "novo".
    """
    new_client = Client(
        name="Padaria Central",
        status=ClientStatus.NEW_CLIENT,
        comercial_status=ComercialStatus.NOVO,
        assigned_ads_manager_id=test_ads_manager.id,
        assigned_comercial_id=test_consultant.id,
        entry_date=FROZEN_NOW,
        comercial_entered_at=FROZEN_NOW,
    )
    db_session.add(new_client)
    db_session.commit()
    db_session.refresh(new_client)
    return new_client


@pytest.fixture
def test_unassigned_client(db_session):
    unassigned = Client(
        name="Loja Sem Gestor",
        status=ClientStatus.NEW_CLIENT,
        comercial_status=ComercialStatus.NOVO,
        entry_date=FROZEN_NOW,
        comercial_entered_at=FROZEN_NOW,
    )
    db_session.add(unassigned)
    db_session.commit()
    db_session.refresh(unassigned)
    return unassigned


@pytest.fixture
def test_design_card(db_session, test_ceo):
    card = KanbanCard(
        board=KanbanBoard.DESIGN,
        column_id="fazendo",
        title="Criativos Padaria Central",
        status="fazendo",
        position=0,
        created_by_id=test_ceo.id,
    )
    db_session.add(card)
    db_session.commit()
    db_session.refresh(card)
    return card


@pytest.fixture
def make_auth_headers():
    """
    Returns a function building JWT headers for a given user.
    """
    def _headers(user: User) -> dict:
        token = create_access_token(
            data={"sub": user.email, "id": user.id, "role": user.role.value, "name": user.name}
        )
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def ads_manager_headers(make_auth_headers, test_ads_manager):
    return make_auth_headers(test_ads_manager)


@pytest.fixture
def designer_headers(make_auth_headers, test_designer):
    return make_auth_headers(test_designer)


@pytest.fixture
def consultant_headers(make_auth_headers, test_consultant):
    return make_auth_headers(test_consultant)
