"""
Shared pytest fixtures for the Farm2Home function tests.

Every test gets a fresh in-memory store driven by a controllable clock,
so server timestamps and retention cutoffs are deterministic.
"""

from datetime import datetime, timedelta, timezone

import pytest

from functions import Functions, build_functions
from shared.config import Settings
from shared.document_store import DocumentStore
from shared.event_bus import EventBus


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    """The moment every test starts at."""
    return datetime(2026, 3, 1, 9, 30, 0, 123456, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now: datetime) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def settings() -> Settings:
    """
    Default settings with a short image delay.

    ``_env_file=None`` keeps a developer's .env out of the tests.
    """
    return Settings(_env_file=None, image_processing_delay_ms=20)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def store(event_bus: EventBus, clock: FakeClock) -> DocumentStore:
    """Fresh, empty DocumentStore for each test."""
    return DocumentStore(event_bus=event_bus, clock=clock)


@pytest.fixture
def functions(store: DocumentStore, settings: Settings, clock: FakeClock) -> Functions:
    """All functions wired to the test store, triggers listening."""
    return build_functions(store, settings=settings, clock=clock)


# =============================================================================
# Seed data
# =============================================================================

@pytest.fixture
def products(store: DocumentStore) -> dict[str, int]:
    """
    Two products with known stock.

    p1 has only 1 unit so ordering 3 drives it negative.
    """
    stock = {"p1": 1, "p2": 50}
    for product_id, units in stock.items():
        store.set(f"products/{product_id}", {"name": f"Product {product_id}", "stock": units})
    return stock


@pytest.fixture
def user_data() -> dict:
    return {"email": "ada@farm2home.test", "displayName": "Ada"}
