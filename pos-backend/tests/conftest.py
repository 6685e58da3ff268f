"""
Pytest fixtures for the POS backend tests.

Each test gets its own SQLite file database, a seeded product catalog and,
for API tests, an authenticated TestClient.
"""

import asyncio
from decimal import Decimal

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from pos_backend.core.config import Settings
from pos_backend.core.security import CurrentUser
from pos_backend.db.base import build_engine, build_sessionmaker, init_models
from pos_backend.db.models.products import Product
from pos_backend.main import create_app

JWT_SECRET = "test-secret"
CASHIER = CurrentUser(id=7, username="cashier", role="cashier")


def create_access_token(user, secret, algorithm="HS256"):
    return jwt.encode(user.model_dump(), secret, algorithm=algorithm)


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'pos.sqlite3'}"


@pytest.fixture
def session_factory(db_url):
    """Session factory bound to a fresh database with all tables created."""
    engine = build_engine(db_url, use_null_pool=True)
    asyncio.run(init_models(engine))
    return build_sessionmaker(engine)


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(session, *args)`` to completion on a new session and return its result."""
    def _run(fn, *args):
        async def _go():
            async with session_factory() as session:
                return await fn(session, *args)
        return asyncio.run(_go())
    return _run


@pytest.fixture
def catalog(run_db):
    """Seed the product catalog and return product ids by short name.

    - rice: plain product, 50 on hand
    - soda: plain product, 5 on hand
    - sugar: plain product, 20 on hand; base of ``sugar_bale``
    - sugar_bale: bundle of 10 x sugar
    - broken_bundle: bundle with no base product
    - bale_of_bales: bundle whose base is itself a bundle
    """
    async def _seed(session):
        rice = Product(name="Rice 1kg", barcode="1001", price=Decimal("100.00"), cost_price=Decimal("60.00"), stock=50)
        soda = Product(name="Soda 500ml", barcode="1002", price=Decimal("50.00"), cost_price=Decimal("30.00"), stock=5)
        sugar = Product(name="Sugar 1kg", barcode="1003", price=Decimal("150.00"), cost_price=Decimal("100.00"), stock=20)
        session.add_all([rice, soda, sugar])
        await session.flush()

        sugar_bale = Product(
            name="Sugar Bale (10kg)", barcode="1004", price=Decimal("1400.00"), cost_price=Decimal("1000.00"),
            stock=3, is_bundle=True, base_product_id=sugar.id, bundle_quantity=10,
        )
        broken_bundle = Product(
            name="Broken Bundle", barcode="1005", price=Decimal("10.00"), cost_price=Decimal("5.00"),
            stock=0, is_bundle=True,
        )
        session.add_all([sugar_bale, broken_bundle])
        await session.flush()

        bale_of_bales = Product(
            name="Bale of Bales", barcode="1006", price=Decimal("2800.00"), cost_price=Decimal("2000.00"),
            stock=0, is_bundle=True, base_product_id=sugar_bale.id, bundle_quantity=2,
        )
        session.add(bale_of_bales)
        await session.commit()

        return {
            "rice": rice.id,
            "soda": soda.id,
            "sugar": sugar.id,
            "sugar_bale": sugar_bale.id,
            "broken_bundle": broken_bundle.id,
            "bale_of_bales": bale_of_bales.id,
        }

    return run_db(_seed)


@pytest.fixture
def stock_of(run_db):
    async def _stock(session, product_id):
        result = await session.execute(select(Product.stock).where(Product.id == product_id))
        return result.scalar_one()
    return lambda product_id: run_db(_stock, product_id)


@pytest.fixture
def count_rows(run_db):
    async def _count(session, model):
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()
    return lambda model: run_db(_count, model)


@pytest.fixture
def fetch(run_db):
    """Load one ORM row by primary key on a fresh session."""
    async def _get(session, model, pk):
        return await session.get(model, pk)
    return lambda model, pk: run_db(_get, model, pk)


@pytest.fixture
def token():
    return create_access_token(CASHIER, JWT_SECRET)


@pytest.fixture
def app_settings(db_url):
    return Settings(DB_URL=db_url, JWT_SECRET=JWT_SECRET, LOG_LEVEL="DEBUG")


@pytest.fixture
def client(app_settings, catalog, token):
    """Authenticated test client against the seeded catalog."""
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        test_client.headers.update({"Authorization": f"Bearer {token}"})
        yield test_client
