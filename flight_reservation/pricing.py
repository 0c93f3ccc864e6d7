"""Dynamic fare calculation.

A fare is the flight's base price scaled by four independent factors:

* the seat class (First pays three times Economy, Business twice),
* demand, growing linearly with occupancy up to +50% on a full flight,
* how far ahead of departure the booking is made,
* the hour of day the flight departs.

Factors are multiplied together and the result is returned unrounded.
"""
from __future__ import annotations

from datetime import datetime
from typing import Sequence, Tuple

SECONDS_PER_DAY = 60 * 60 * 24

CLASS_MULTIPLIERS = {
    "First": 3.0,
    "Business": 2.0,
    "Economy": 1.0,
}

# (upper bound in days, exclusive) -> multiplier, checked in order
_ADVANCE_BANDS: Sequence[Tuple[float, float]] = (
    (1, 1.5),
    (3, 1.3),
    (7, 1.15),
)
_EARLY_BIRD_DAYS = 30
_EARLY_BIRD_MULTIPLIER = 0.85

# (start hour, end hour) -> multiplier; hours outside every band are night flights
_DEPARTURE_HOUR_BANDS: Sequence[Tuple[int, int, float]] = (
    (6, 9, 1.25),
    (9, 12, 1.10),
    (12, 15, 0.95),
    (15, 18, 1.05),
    (18, 21, 1.30),
)
_NIGHT_MULTIPLIER = 0.90


def class_multiplier(seat_class: str) -> float:
    try:
        return CLASS_MULTIPLIERS[seat_class]
    except KeyError:
        raise ValueError(f"Unknown seat class '{seat_class}'.") from None


def demand_multiplier(booked_seats: int, total_seats: int) -> float:
    occupancy = booked_seats / total_seats
    return 1.0 + occupancy * 0.5


def days_until_departure(departure: datetime, booking_instant: datetime) -> float:
    return (departure - booking_instant).total_seconds() / SECONDS_PER_DAY


def advance_booking_multiplier(days: float) -> float:
    """Last-minute bookings pay more, bookings over a month ahead pay less."""

    for upper, multiplier in _ADVANCE_BANDS:
        if days < upper:
            return multiplier
    if days > _EARLY_BIRD_DAYS:
        return _EARLY_BIRD_MULTIPLIER
    return 1.0


def departure_hour_multiplier(hour: int) -> float:
    for start, end, multiplier in _DEPARTURE_HOUR_BANDS:
        if start <= hour < end:
            return multiplier
    return _NIGHT_MULTIPLIER


def quote_price(
    base_price: float,
    seat_class: str,
    *,
    booked_seats: int,
    total_seats: int,
    departure: datetime,
    booking_instant: datetime,
) -> float:
    """Return the fare for one seat given the flight's current state."""

    price = base_price
    price *= class_multiplier(seat_class)
    price *= demand_multiplier(booked_seats, total_seats)
    price *= advance_booking_multiplier(days_until_departure(departure, booking_instant))
    price *= departure_hour_multiplier(departure.hour)
    return price
