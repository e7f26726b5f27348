import os

# Point the application at SQLite before anything builds the engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from vehicle_inventory.core.database import get_db
from vehicle_inventory.models.database import Base, ImportType, VehicleStatus
from vehicle_inventory.models.schemas import InventoryItemCreate

# In-memory SQLite shared by every session of a test
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def test_engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def test_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    del app.dependency_overrides[get_db]


def make_item(**overrides) -> InventoryItemCreate:
    """Build a valid create payload, overriding any field"""
    data = {
        "manufacturer": "Mercedes",
        "category": "E200",
        "engine_capacity": "2.0L",
        "year": 2024,
        "exterior_color": "Black",
        "interior_color": "Beige",
        "chassis_number": "CH-0001",
        "status": VehicleStatus.AVAILABLE,
        "import_type": ImportType.PERSONAL,
        "location": "Showroom",
    }
    data.update(overrides)
    return InventoryItemCreate(**data)


def item_payload(**overrides) -> dict:
    """JSON body for POST /api/inventory"""
    return make_item(**overrides).model_dump(mode="json", exclude_none=True)
