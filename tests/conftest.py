import os

# must be set before app.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import app.models  # noqa: F401  registers every table
from app.database import get_session
from app.main import app as fastapi_app
from app.models.product import Product, ProductOptionValue


@pytest.fixture
def engine():
    """In-memory SQLite DB for fast testing."""
    _engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(_engine)
    yield _engine
    SQLModel.metadata.drop_all(_engine)


@pytest.fixture
def db_session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    """FastAPI test client with get_session pointed at the test DB."""
    def override_get_session():
        with Session(engine) as s:
            yield s

    fastapi_app.dependency_overrides[get_session] = override_get_session
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def catalog(db_session):
    """Three jerseys at different prices, the home kit with size/patch options."""
    home = Product(name="Home Kit 24/25", slug="home-kit", base_price_cents=3499, image="/img/home.webp")
    away = Product(name="Away Kit 24/25", slug="away-kit", base_price_cents=2999)
    retro = Product(name="Retro 1998", slug="retro-1998", base_price_cents=1999)
    hidden = Product(name="Old Stock", slug="old-stock", base_price_cents=999, is_active=False)
    db_session.add_all([home, away, retro, hidden])
    db_session.commit()

    db_session.add_all([
        ProductOptionValue(product_id=home.id, group_key="size", value="S", price_delta_cents=0),
        ProductOptionValue(product_id=home.id, group_key="size", value="4XL", price_delta_cents=300),
        ProductOptionValue(product_id=home.id, group_key="patch", value="champions", price_delta_cents=500),
    ])
    db_session.commit()

    for p in (home, away, retro, hidden):
        db_session.refresh(p)

    return {"home": home, "away": away, "retro": retro, "hidden": hidden}
