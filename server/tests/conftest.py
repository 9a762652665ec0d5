import copy

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry, Gauge
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from db.base import ConnectionArgs, get_storer
from db.models import SUPPORTED_MODEL, Base, ModelVersion
from db.sql import SQLDB
from helpers import BASE_PAYLOAD, FakeStorer
from main import app


@pytest.fixture
def payload():
    """Fresh copy of the two-alert webhook document."""
    return copy.deepcopy(BASE_PAYLOAD)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'alerts.db'}"


@pytest.fixture
def schema_engine(database_url):
    """Engine on a database holding the full schema and a supported model marker."""
    engine = create_engine(database_url)
    Base.metadata.create_all(bind=engine)
    with Session(engine) as db:
        db.add(ModelVersion(version=SUPPORTED_MODEL))
        db.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def up_gauge(registry):
    return Gauge("database_up", "Whether the database is reachable", registry=registry)


@pytest.fixture
def sql_db(schema_engine, database_url, up_gauge):
    db = SQLDB(ConnectionArgs(dsn=database_url), up_gauge=up_gauge)
    yield db
    db.close()


@pytest.fixture
def fake_storer():
    return FakeStorer()


@pytest.fixture(scope="function")
def client(fake_storer):
    """Test client wired to the fake storer, without running the app lifespan."""
    app.dependency_overrides[get_storer] = lambda: fake_storer
    yield TestClient(app)
    app.dependency_overrides.clear()
