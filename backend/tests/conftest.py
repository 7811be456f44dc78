"""
Pytest fixtures for dealership backend tests.

Provides an in-memory database, a per-test table wipe, a test client and a
few ready-made people/vehicles.
"""

import pytest
from dealership import create_app
from dealership.extensions import db
from dealership.services import people_service, vehicle_service, intermediary_service


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'PRICE_REFERENCE_BASE_URL': 'https://fipe.test/api/v2',
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
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
def owner(db_session):
    """Vehicle owner (consignor)."""
    return people_service.create_person({
        "name": "João Silva",
        "phone": "11999998888",
        "email": "joao@email.com",
        "document": "123.456.789-00",
        "type": "OWNER",
    })


@pytest.fixture(scope='function')
def buyer(db_session):
    """Client who buys vehicles."""
    return people_service.create_person({
        "name": "Carlos Santos",
        "phone": "11977776666",
        "document": "111.222.333-44",
        "type": "CLIENT",
    })


@pytest.fixture(scope='function')
def intermediary(db_session):
    return intermediary_service.create_intermediary({
        "name": "Pedro Corretor",
        "document": "555.666.777-88",
        "birth_date": "1985-04-12",
    })


@pytest.fixture(scope='function')
def vehicle(db_session, owner):
    """AVAILABLE vehicle with an asking price of R$ 500,00."""
    return vehicle_service.create_vehicle({
        "plate": "ABC-1234",
        "brand": "Honda",
        "model": "Civic EX",
        "color": "Prata",
        "year_fab": 2020,
        "year_model": 2020,
        "price_cents": 50000,
        "status": "AVAILABLE",
        "owner_id": owner["id"],
    })


@pytest.fixture(scope='function')
def make_vehicle(db_session):
    """Factory for vehicles with sensible defaults."""
    def _make(plate: str, **fields) -> dict:
        payload = {
            "plate": plate,
            "brand": "Toyota",
            "model": "Corolla XEi",
            "color": "Preto",
        }
        payload.update(fields)
        return vehicle_service.create_vehicle(payload)
    return _make
