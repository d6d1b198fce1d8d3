"""
Shared fixtures: an in-memory store, a controllable clock, the service on
top of both and an HTTP client around an application using that store.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from core.db import init_db
from core.memory_store import InMemoryTomatoStore
from core.settings import Settings
from core.sql_store import SqlTomatoStore
from main import create_app
from services.tomatoes import TomatoService


class FakeClock:
    """Epoch milliseconds that only move when the test says so."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def advance(self, ms: int = 1000) -> int:
        self.now += ms
        return self.now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryTomatoStore:
    return InMemoryTomatoStore()


@pytest.fixture
def sql_store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    sql_store = SqlTomatoStore(engine)
    yield sql_store
    sql_store.close()


@pytest.fixture
def service(store, clock) -> TomatoService:
    return TomatoService(store, clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(STORE_BACKEND="memory", LOG_LEVEL="DEBUG", _env_file=None)


@pytest.fixture
def client(store, test_settings):
    app = create_app(test_settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def cherry() -> dict:
    return {
        "name": "Cherry Tomato",
        "variety": "Sweet 100",
        "price": 4.99,
        "description": "Small sweet tomatoes",
        "inStock": True,
    }
