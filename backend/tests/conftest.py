import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def build_salon(**overrides):
    base = {
        "_id": "salon-1",
        "name": "Demo Salon",
        "category": "Unisex",
        "address": "1 Main Street",
        "services": [{"name": "Haircut", "price": 300}],
    }
    base.update(overrides)
    return base


@pytest.fixture
def salon_factory():
    return build_salon


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def catalog():
    return [
        build_salon(
            _id="s1",
            name="Classic Cuts Barbershop",
            category="Men",
            address="12 Park Avenue",
            services=[{"name": "Haircut", "price": 250}, {"name": "Beard Trim", "price": 150}],
            rating=4.6,
            totalReviews=120,
            totalBookings=300,
            startingPrice=150,
        ),
        build_salon(
            _id="s2",
            name="Glow Nails",
            category="Nails",
            address="5 Lake Road",
            services=[{"name": "Manicure", "price": 400}, {"name": "Pedicure", "price": 500}],
            rating=4.1,
            totalReviews=40,
            totalBookings=90,
            startingPrice=400,
        ),
        build_salon(
            _id="s3",
            name="Serenity Spa",
            category="Spa",
            address="8 Hill Street",
            services=["Massage", "Facial"],
            rating=4.8,
            totalReviews=15,
            totalBookings=25,
            startingPrice=1200,
        ),
    ]
