import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from shortener.allocator import LinkAllocator
from shortener.config import Settings
from shortener.database import Base, create_session_factory
from shortener.main import create_app
from shortener.resolver import LinkResolver
from shortener.store import LinkStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return LinkStore(session_factory)


@pytest.fixture
def allocator(store):
    return LinkAllocator(store, rng=random.Random(1234))


@pytest.fixture
def resolver(store):
    return LinkResolver(store)


@pytest.fixture
def client(store):
    app = create_app(Settings(database_url="sqlite://"), store=store)
    with TestClient(app) as test_client:
        yield test_client
