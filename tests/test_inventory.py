from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from flight_reservation.inventory import Flight, Seat, SeatClass
from flight_reservation.pricing import (
    advance_booking_multiplier,
    demand_multiplier,
    departure_hour_multiplier,
)


def make_flight(departure_time: str = "2030-03-11 19:00", base_price: float = 3000) -> Flight:
    return Flight("SP1001", "Sky Express", "Mumbai", "Delhi", departure_time, base_price)


def test_seat_book_and_cancel():
    seat = Seat(12, SeatClass.BUSINESS)
    seat.book("Asha Rao")
    assert seat.is_booked
    assert seat.passenger_name == "Asha Rao"
    seat.cancel()
    assert not seat.is_booked
    assert seat.passenger_name is None


def test_flight_has_fixed_class_partition():
    flight = make_flight()
    assert len(flight.seats) == 100
    assert [seat.seat_number for seat in flight.seats] == list(range(1, 101))
    assert len(flight.seats_by_class(SeatClass.FIRST)) == 10
    assert len(flight.seats_by_class("Business")) == 20
    assert len(flight.seats_by_class(SeatClass.ECONOMY)) == 70
    assert flight.get_seat(10).seat_class is SeatClass.FIRST
    assert flight.get_seat(11).seat_class is SeatClass.BUSINESS
    assert flight.get_seat(30).seat_class is SeatClass.BUSINESS
    assert flight.get_seat(31).seat_class is SeatClass.ECONOMY
    assert flight.date == "2030-03-11"


def test_book_seat_rejects_taken_and_invalid_seats():
    flight = make_flight()
    assert flight.book_seat(5, "Asha Rao")
    assert not flight.book_seat(5, "Vikram Shah")
    assert flight.get_seat(5).passenger_name == "Asha Rao"
    assert not flight.book_seat(0, "Nobody")
    assert not flight.book_seat(101, "Nobody")
    assert flight.get_seat(0) is None
    assert flight.booked_seats_count == 1


def test_cancel_seat_requires_booked_seat():
    flight = make_flight()
    assert not flight.cancel_seat(40)
    assert not flight.cancel_seat(150)
    flight.book_seat(40, "Asha Rao")
    assert flight.cancel_seat(40)
    assert flight.book_seat(40, "Vikram Shah")


def test_counts_always_cover_every_seat():
    flight = make_flight()
    for number in (1, 15, 15, 50, 99, 200):
        flight.book_seat(number, "Passenger")
        assert flight.booked_seats_count + flight.available_seats_count == 100
    flight.cancel_seat(15)
    assert flight.booked_seats_count == 3
    assert flight.booked_seats_count + flight.available_seats_count == 100


def test_available_seats_by_class_are_ordered_and_exclude_booked():
    flight = make_flight()
    flight.book_seat(2, "Asha Rao")
    flight.book_seat(7, "Vikram Shah")
    available = [seat.seat_number for seat in flight.available_seats_by_class(SeatClass.FIRST)]
    assert available == [1, 3, 4, 5, 6, 8, 9, 10]


def test_price_for_business_seat_ten_days_ahead_in_the_evening():
    flight = make_flight("2030-03-11 19:00", 3000)
    booking_instant = datetime(2030, 3, 1, 19, 0)
    assert flight.calculate_price(SeatClass.BUSINESS, booking_instant) == pytest.approx(7800.0)


def test_price_for_economy_on_nearly_full_flight_twelve_hours_ahead():
    flight = make_flight("2030-03-11 19:00", 3000)
    for number in range(1, 91):
        flight.book_seat(number, "Passenger")
    booking_instant = flight.departure - timedelta(hours=12)
    expected = 3000 * 1.0 * 1.45 * 1.5 * 1.30
    assert flight.calculate_price("Economy", booking_instant) == pytest.approx(expected)


def test_price_orders_classes_and_is_deterministic():
    flight = make_flight("2030-03-11 13:30", 4200)
    flight.book_seat(33, "Passenger")
    instant = datetime(2030, 2, 1, 8, 0)
    first = flight.calculate_price(SeatClass.FIRST, instant)
    business = flight.calculate_price(SeatClass.BUSINESS, instant)
    economy = flight.calculate_price(SeatClass.ECONOMY, instant)
    assert first > business > economy > 0
    assert flight.calculate_price(SeatClass.FIRST, instant) == first


def test_price_rejects_unknown_class():
    with pytest.raises(ValueError):
        make_flight().calculate_price("Premium", datetime(2030, 3, 1))


@pytest.mark.parametrize(
    "days, multiplier",
    [
        (-2, 1.5),
        (0.5, 1.5),
        (1, 1.3),
        (2.99, 1.3),
        (3, 1.15),
        (6.9, 1.15),
        (7, 1.0),
        (30, 1.0),
        (30.5, 0.85),
    ],
)
def test_advance_booking_bands(days, multiplier):
    assert advance_booking_multiplier(days) == multiplier


@pytest.mark.parametrize(
    "hour, multiplier",
    [(5, 0.90), (6, 1.25), (9, 1.10), (12, 0.95), (15, 1.05), (18, 1.30), (20, 1.30), (21, 0.90), (0, 0.90)],
)
def test_departure_hour_bands(hour, multiplier):
    assert departure_hour_multiplier(hour) == multiplier


def test_demand_multiplier_range():
    assert demand_multiplier(0, 100) == 1.0
    assert demand_multiplier(100, 100) == 1.5
