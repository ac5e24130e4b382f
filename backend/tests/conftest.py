# backend/tests/conftest.py
import os

# keep the module-level engine off the real database file
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import models  # noqa: F401  registers the tables
from database.session import Base, get_db
from main import create_app
from models.client_model import Client
from models.product_model import Product
from models.user_model import User
from schemas.users import Role
from services.session_context import SessionContext


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(
        f"sqlite:///{tmp_path / 'orders.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def api(session_factory):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    return TestClient(app)


def ctx_for(uid: str, role: Role, name: str = None) -> SessionContext:
    return SessionContext(uid=uid, email=f"{uid}@example.com", display_name=name or uid, role=role)


def headers_for(uid: str) -> dict:
    return {"X-User-Id": uid, "X-User-Email": f"{uid}@example.com"}


@pytest.fixture
def seeded(db):
    """
    Supervisor s1 owns active client c1 ("Setor A") and inactive c-off;
    s2 owns c2. Catalog: p1 Detergente (stock 50), p2 Desinfetante, p-off inactive.
    Staff users: a1 approver, a2 approver, b1 purchasing, adm admin.
    """
    db.add_all([
        User(id="s1", email="s1@example.com", display_name="Supervisor Um", role="supervisor"),
        User(id="s2", email="s2@example.com", display_name="Supervisor Dois", role="supervisor"),
        User(id="a1", email="a1@example.com", display_name="Aprovador Um", role="approver"),
        User(id="a2", email="a2@example.com", display_name="Aprovador Dois", role="approver"),
        User(id="b1", email="b1@example.com", display_name="Compras", role="purchasing"),
        User(id="adm", email="adm@example.com", display_name="Admin", role="ADMIN"),
        Client(id="c1", sector_name="Setor A", client_code="A-01", supervisor_id="s1",
               supervisor_name="Supervisor Um", active=True),
        Client(id="c-off", sector_name="Setor Fechado", supervisor_id="s1",
               supervisor_name="Supervisor Um", active=False),
        Client(id="c2", sector_name="Setor B", supervisor_id="s2",
               supervisor_name="Supervisor Dois", active=True),
        Product(id="p1", name="Detergente", unit="UN", stock=50, category="Limpeza", active=True),
        Product(id="p2", name="Desinfetante", unit="UN", stock=30, category="Limpeza", active=True),
        Product(id="p-off", name="Cera Antiga", unit="UN", stock=0, active=False),
    ])
    db.commit()
    return db


@pytest.fixture
def make_ctx():
    return ctx_for


@pytest.fixture
def auth():
    return headers_for
