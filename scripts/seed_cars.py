#!/usr/bin/env python3
"""
Seed the rental fleet with a small, deterministic set of cars.

Features:
- Deterministic: fixed seed → same prices every run
- Idempotent: cars whose slug already exists are deleted and recreated
- Goes through the CreateCar use case, so slugs, defaults and compensation
  behave exactly as they do for the admin API

Usage:
    DATABASE_URL=postgresql+psycopg://... python scripts/seed_cars.py
    CAR_STORE_BACKEND=supabase SUPABASE_URL=... SUPABASE_SERVICE_KEY=... python scripts/seed_cars.py
"""

from __future__ import annotations

import logging
import random
import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rental_fleet.adapters.postgres_car_store import PostgresCarStore
from rental_fleet.adapters.supabase_car_store import SupabaseCarStore
from rental_fleet.domain.car import (
    CarWriteData,
    FeatureInput,
    ImageInput,
    PricingInput,
    SpecificationInput,
)
from rental_fleet.domain.slug import generate_slug
from rental_fleet.infra.config import store_backend
from rental_fleet.infra.db.session import get_session
from rental_fleet.infra.supabase_client import get_supabase_client
from rental_fleet.ports.car_store import CarStore
from rental_fleet.use_cases.create_car import CreateCar, CreateCarRequest

logger = logging.getLogger("seed_cars")


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42
CURRENCY = "USD"
IMAGE_HOST = "https://cdn.example.com/vehicle-images"


# ==============================================================================
# Fleet
# ==============================================================================

# (name, category, daily price band, short description, featured)
FLEET = [
    ("Toyota Corolla", "Economy", (35, 45), "Reliable and frugal", False),
    ("Nissan Versa", "Economy", (30, 40), "Easy city driving", False),
    ("Honda Civic", "Compact", (40, 55), "Sporty and efficient", False),
    ("Mazda CX-5", "SUV", (60, 80), "Room for five and their luggage", True),
    ("Jeep Wrangler", "SUV", (85, 110), "Made for off-road weekends", False),
    ("Tesla Model 3", "Electric", (85, 100), "Long range, autopilot", True),
    ("Chevrolet Bolt", "Electric", (55, 70), "Affordable all-electric", False),
    ("BMW 5 Series", "Luxury", (120, 160), "Executive comfort", True),
    ("Mercedes-Benz GLC", "Luxury", (130, 170), "Premium SUV", False),
    ("Ford Mustang Convertible", "Convertible", (95, 125), "Top down on the coast", False),
]

FEATURES_BY_CATEGORY = {
    "Economy": ["Bluetooth", "Backup camera"],
    "Compact": ["Apple CarPlay", "Lane assist"],
    "SUV": ["All-wheel drive", "Roof rails", "Heated seats"],
    "Electric": ["Fast charging", "Autopilot"],
    "Luxury": ["Leather seats", "Adaptive cruise control", "Premium audio"],
    "Convertible": ["Power soft top", "Premium audio"],
}

SEATS_BY_CATEGORY = {
    "Economy": "5",
    "Compact": "5",
    "SUV": "5",
    "Electric": "5",
    "Luxury": "5",
    "Convertible": "4",
}


# ==============================================================================
# Generation
# ==============================================================================


def _pricing(band: tuple[int, int]) -> PricingInput:
    """Daily price from the band; weekly and monthly are discounted multiples."""
    daily = Decimal(random.randint(*band))
    return PricingInput(
        base_price=daily,
        weekly_price=(daily * 6).quantize(Decimal("1.00")),
        monthly_price=(daily * 22).quantize(Decimal("1.00")),
        deposit=Decimal(random.choice([200, 300, 500])),
        currency=CURRENCY,
    )


def build_car(
    name: str, category: str, band: tuple[int, int], short: str, featured: bool
) -> CarWriteData:
    slug = generate_slug(name)
    return CarWriteData(
        name=name,
        category=category,
        description=f"The {name} is part of our {category.lower()} fleet.",
        short_description=short,
        featured=featured,
        pricing=_pricing(band),
        images=[
            ImageInput(
                url=f"{IMAGE_HOST}/{slug}/{view}.jpg",
                path=f"{slug}/{view}.jpg",
                alt_text=f"{name} {view}",
                is_primary=index == 0,
                sort_order=index,
            )
            for index, view in enumerate(("front", "side", "interior"))
        ],
        features=[FeatureInput(name=feature) for feature in FEATURES_BY_CATEGORY[category]],
        specifications=[
            SpecificationInput(name="Seats", value=SEATS_BY_CATEGORY[category]),
            SpecificationInput(
                name="Fuel", value="Electric" if category == "Electric" else "Gasoline"
            ),
            SpecificationInput(name="Transmission", value="Automatic"),
        ],
    )


def seed_cars(store: CarStore, seed: int = RANDOM_SEED) -> int:
    """
    Create every car in FLEET, replacing any car with the same slug.

    Returns:
        Number of cars created
    """
    random.seed(seed)
    create = CreateCar(car_store=store)

    for name, category, band, short, featured in FLEET:
        existing = store.get_car(slug=generate_slug(name))
        if existing:
            store.delete_car(str(existing["id"]))
            logger.info("Replaced existing car", extra={"slug": existing["slug"]})

        result = create.execute(
            CreateCarRequest(data=build_car(name, category, band, short, featured))
        )
        pricing = result.car.pricing
        print(
            f"   {result.car.slug:<28} {category:<12} "
            f"{pricing.base_price if pricing else '-':>6} {CURRENCY}/day"
        )

    return len(FLEET)


# ==============================================================================
# Main
# ==============================================================================


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    backend = store_backend()
    print(f"Seeding {len(FLEET)} cars into the {backend} store (seed={RANDOM_SEED})...")

    if backend == "supabase":
        count = seed_cars(SupabaseCarStore(client=get_supabase_client()))
    else:
        with get_session() as session:
            count = seed_cars(PostgresCarStore(session=session))

    print(f"Seeded {count} cars")


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print(f"Error seeding cars: {e}", file=sys.stderr)
        sys.exit(1)
