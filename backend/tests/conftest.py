"""
Pytest fixtures for EventPOS backend tests.

Provides the test database, a catalog matching the bundle prices used
throughout the suite, and in-memory snapshots for the pure components.
"""

from datetime import datetime

import pytest
from eventpos import create_app
from eventpos.extensions import db
from eventpos.services import catalog_service
from eventpos.state import AppState, ProductSnapshot, PromotionSnapshot, InventorySnapshot


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'EVENT_TIMEZONE': 'UTC',
    'EVENT_START_HOUR': 8.0,
    'EVENT_END_HOUR': 18.5,
    'PARTNER_COUNT': 2,
    'GOAL_PER_PARTNER_CENTS': 400000,
}

# Fixed instant inside the event window (5h elapsed, 5.5h remaining)
MIDDAY = datetime(2026, 10, 17, 13, 0, 0)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def beer(db_session):
    """R$ 7,00 a unit; 3 for R$ 18,00; 6 for R$ 30,00; 20 in stock."""
    product = catalog_service.create_product(
        name="Beer",
        category="beer",
        unit_cost_cents=350,
        suggested_price_cents=700,
        units_per_pack=12,
        initial_quantity=20,
    )
    catalog_service.create_promotion(product.id, 6, 3000)
    catalog_service.create_promotion(product.id, 3, 1800)
    return product


@pytest.fixture(scope='function')
def water(db_session):
    """R$ 4,00 a unit, no promotions, 10 in stock."""
    return catalog_service.create_product(
        name="Water",
        category="water",
        unit_cost_cents=150,
        suggested_price_cents=400,
        initial_quantity=10,
    )


@pytest.fixture
def pure_state():
    """
    Snapshot with no database behind it.

    1 = beer (700, bundles 6->3000 and 3->1800, 5 in stock)
    2 = water (400, no bundles, 2 in stock)
    3 = ice (no inventory record)
    """
    return AppState(
        version=1,
        products=(
            ProductSnapshot(id=1, name="Beer", suggested_price_cents=700, unit_cost_cents=350),
            ProductSnapshot(id=2, name="Water", suggested_price_cents=400, unit_cost_cents=150),
            ProductSnapshot(id=3, name="Ice", suggested_price_cents=1000),
        ),
        promotions=(
            PromotionSnapshot(id=10, product_id=1, trigger_quantity=3, bundle_price_cents=1800),
            PromotionSnapshot(id=11, product_id=1, trigger_quantity=6, bundle_price_cents=3000),
        ),
        inventory=(
            InventorySnapshot(product_id=1, initial_total_quantity=10, current_quantity=5),
            InventorySnapshot(product_id=2, initial_total_quantity=10, current_quantity=2),
        ),
    )
