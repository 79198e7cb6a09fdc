"""Shared pytest fixtures and configuration."""

import os
from datetime import date, datetime, time, timezone

import pytest

# Set test environment variables before the app settings are loaded
os.environ.setdefault("SITE_TIMEZONE", "Asia/Kuala_Lumpur")
os.environ.setdefault("SEED_ON_STARTUP", "true")
os.environ.setdefault("SWEEP_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from vrms.store.seed import seed_intent  # noqa: E402
from vrms.store.store import DomainStore  # noqa: E402

# 10:00 in Kuala Lumpur
FIXED_NOW = datetime(2024, 3, 1, 2, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def store():
    """Empty store whose clock is pinned to FIXED_NOW."""
    s = DomainStore(clock=lambda: FIXED_NOW)
    yield s
    s.close()


@pytest.fixture
def seeded_store(store):
    """Store loaded with the startup residents and facilities."""
    store.initialize(seed_intent())
    return store


@pytest.fixture
def visitor_fields():
    """Registration form for Jane Doe visiting B-1."""
    return {
        "visitor_name": "Jane Doe",
        "contact_number": "+60111222333",
        "visiting_unit": "B-1",
        "resident_name": "Ahmad Hassan",
        "visit_date": date(2024, 3, 1),
        "visit_time": time(10, 0),
        "purpose_of_visit": "Family visit",
        "identification_number": "900101-14-5678",
        "identification_type": "ic",
    }


@pytest.fixture
def registered_visitor(store, visitor_fields):
    return store.register_visitor(**visitor_fields)
