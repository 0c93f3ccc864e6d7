"""Populate an empty catalog with a deterministic flight schedule."""
from __future__ import annotations

import logging
import os
from datetime import date, timedelta
from itertools import permutations
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, insert, select
from sqlalchemy.orm import Session, sessionmaker

from .database import session_scope
from .inventory import DATE_FORMAT
from .models import FlightRecord

logger = logging.getLogger(__name__)


def env_int(name: str, default: int) -> int:
    """Read an integer setting from the environment, keeping ``default`` if unset or malformed."""

    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


SEED_DAYS = env_int("FLIGHT_RESERVATION_SEED_DAYS", 30)

REFERENCE_CITIES: Sequence[str] = (
    "Mumbai",
    "Delhi",
    "Bangalore",
    "Chennai",
    "Kolkata",
    "Hyderabad",
    "Pune",
    "Goa",
    "Jaipur",
    "Kochi",
)
DAILY_SLOTS: Sequence[Tuple[str, str]] = (
    ("Sky Express", "06:00"),
    ("Cloud Nine", "10:00"),
    ("Wind Jet", "14:00"),
    ("Star Flight", "18:00"),
    ("Thunder Express", "21:00"),
)
FIRST_FLIGHT_NUMBER = 1001


def route_base_price(counter: int) -> int:
    return 2500 + (counter * 37) % 4500


def build_schedule(start: date, days: int) -> List[Dict[str, object]]:
    """Return catalog rows for every directed city pair over ``days`` days."""

    routes = list(permutations(REFERENCE_CITIES, 2))
    rows: List[Dict[str, object]] = []
    counter = FIRST_FLIGHT_NUMBER
    for offset in range(days):
        day = (start + timedelta(days=offset)).strftime(DATE_FORMAT)
        for source, destination in routes:
            # one price per route and day, taken from the counter at its first slot
            base_price = route_base_price(counter)
            for flight_name, departs_at in DAILY_SLOTS:
                rows.append(
                    {
                        "flight_number": f"SP{counter}",
                        "date": day,
                        "flight_name": flight_name,
                        "source": source,
                        "destination": destination,
                        "departure_time": f"{day} {departs_at}",
                        "base_price": float(base_price),
                    }
                )
                counter += 1
    return rows


def seed_flight_catalog(
    session_factory: sessionmaker[Session],
    *,
    start: Optional[date] = None,
    days: int = SEED_DAYS,
) -> int:
    """Fill the catalog when it is empty and return how many flights were added."""

    with session_scope(session_factory) as session:
        existing = session.scalar(select(func.count()).select_from(FlightRecord))
        if existing:
            logger.info("Catalog already has %d flights, skipping seeding", existing)
            return 0
        rows = build_schedule(start or date.today(), days)
        if rows:
            session.execute(insert(FlightRecord), rows)
    logger.info("Seeded %d flights over %d days", len(rows), days)
    return len(rows)
