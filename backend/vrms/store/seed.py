"""
Sample residents and facilities loaded into a fresh store
"""

from datetime import datetime, timezone

from vrms.models.entities import Facility, Resident
from vrms.models.intents import Initialize

SEED_CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


SEED_RESIDENTS = (
    Resident(
        id="RES001",
        name="Ahmad Hassan",
        unit="B-12-03",
        contact_number="+60123456789",
        email="ahmad@email.com",
        is_active=True,
        created_at=SEED_CREATED_AT,
    ),
    Resident(
        id="RES002",
        name="Li Wei Ming",
        unit="A-05-08",
        contact_number="+60198765432",
        email="li@email.com",
        is_active=True,
        created_at=SEED_CREATED_AT,
    ),
    Resident(
        id="RES003",
        name="Siti Nurhaliza",
        unit="C-08-12",
        contact_number="+60187654321",
        email="siti@email.com",
        is_active=True,
        created_at=SEED_CREATED_AT,
    ),
)

SEED_FACILITIES = (
    Facility(
        id="FAC001",
        name="Function Room A",
        description="Large function room with projector and sound system",
        capacity=50,
        hourly_rate=100,
    ),
    Facility(
        id="FAC002",
        name="BBQ Pit Area",
        description="Outdoor BBQ area with grilling equipment",
        capacity=20,
        hourly_rate=50,
    ),
    Facility(
        id="FAC003",
        name="Gymnasium",
        description="Fully equipped gym with cardio and weight equipment",
        capacity=15,
        hourly_rate=30,
    ),
)


def seed_intent() -> Initialize:
    """The Initialize intent dispatched once at startup."""
    return Initialize(residents=SEED_RESIDENTS, facilities=SEED_FACILITIES)
