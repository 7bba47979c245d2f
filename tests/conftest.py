"""
Shared fixtures.

Environment is set before the app is imported so that the cached
settings and the module-level engine pick up test values.
"""

import os
import uuid

os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.core.auth import create_access_token
from app.database import get_session
from app.main import app
from app.models.product import Product
from app.models.user import User


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    """TestClient whose requests use the test engine."""

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Auth Fixtures
# ============================================================================

@pytest.fixture
def customer_token():
    return create_access_token(uuid.uuid4(), "asha@example.com")


@pytest.fixture
def customer_headers(customer_token):
    return {"Authorization": f"Bearer {customer_token}"}


@pytest.fixture
def admin_headers(session):
    admin = User(id=uuid.uuid4(), email="owner@example.com", name="owner", role="admin")
    session.add(admin)
    session.commit()
    token = create_access_token(admin.id, admin.email)
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# Catalog Fixtures
# ============================================================================

@pytest.fixture
def make_product(session):
    def _make(name="Resin Keychain", price=149.0, stock_on_hand=10, is_active=True, category="Keychains"):
        product = Product(
            name=name,
            slug=name.lower().replace(" ", "-") + f"-{uuid.uuid4().hex[:6]}",
            price=price,
            category=category,
            stock_on_hand=stock_on_hand,
            is_active=is_active,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def product(make_product):
    return make_product()

