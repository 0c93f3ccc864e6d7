"""In-memory seat inventory for a single flight."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from .pricing import quote_price

TOTAL_SEATS = 100
DATE_FORMAT = "%Y-%m-%d"
DEPARTURE_FORMAT = "%Y-%m-%d %H:%M"


class SeatClass(str, Enum):
    FIRST = "First"
    BUSINESS = "Business"
    ECONOMY = "Economy"

    @classmethod
    def for_seat(cls, seat_number: int) -> "SeatClass":
        """Seats 1-10 are First, 11-30 Business and the rest Economy."""

        if seat_number <= 10:
            return cls.FIRST
        if seat_number <= 30:
            return cls.BUSINESS
        return cls.ECONOMY


SeatClassLike = Union[SeatClass, str]


@dataclass
class Seat:
    seat_number: int
    seat_class: SeatClass
    is_booked: bool = False
    passenger_name: Optional[str] = None

    def book(self, name: str) -> None:
        # availability is checked by the owning flight
        self.is_booked = True
        self.passenger_name = name

    def cancel(self) -> None:
        self.is_booked = False
        self.passenger_name = None


def parse_departure(departure_time: str) -> datetime:
    """Parse a ``YYYY-MM-DD HH:MM`` departure into a naive local datetime."""

    return datetime.strptime(departure_time, DEPARTURE_FORMAT)


class Flight:
    """A catalog flight materialized with its 100 seats.

    Flights are rebuilt on every search and are never stored as objects;
    only the catalog row and the booked state of each seat are durable.
    """

    def __init__(
        self,
        flight_number: str,
        flight_name: str,
        source: str,
        destination: str,
        departure_time: str,
        base_price: float,
    ) -> None:
        self.flight_number = flight_number
        self.flight_name = flight_name
        self.source = source
        self.destination = destination
        self.departure_time = departure_time
        self.base_price = float(base_price)
        self.departure = parse_departure(departure_time)
        self._seats: List[Seat] = [
            Seat(number, SeatClass.for_seat(number)) for number in range(1, TOTAL_SEATS + 1)
        ]

    def __repr__(self) -> str:
        return (
            f"Flight({self.flight_number!r}, {self.source!r}->{self.destination!r}, "
            f"{self.departure_time!r}, booked={self.booked_seats_count})"
        )

    @property
    def date(self) -> str:
        return self.departure.strftime(DATE_FORMAT)

    @property
    def total_seats(self) -> int:
        return TOTAL_SEATS

    @property
    def seats(self) -> List[Seat]:
        return list(self._seats)

    @property
    def booked_seats_count(self) -> int:
        return sum(1 for seat in self._seats if seat.is_booked)

    @property
    def available_seats_count(self) -> int:
        return TOTAL_SEATS - self.booked_seats_count

    def get_seat(self, seat_number: int) -> Optional[Seat]:
        if 1 <= seat_number <= TOTAL_SEATS:
            return self._seats[seat_number - 1]
        return None

    def seats_by_class(self, seat_class: SeatClassLike) -> List[Seat]:
        wanted = SeatClass(seat_class)
        return [seat for seat in self._seats if seat.seat_class is wanted]

    def available_seats_by_class(self, seat_class: SeatClassLike) -> List[Seat]:
        return [seat for seat in self.seats_by_class(seat_class) if not seat.is_booked]

    def book_seat(self, seat_number: int, passenger_name: str) -> bool:
        seat = self.get_seat(seat_number)
        if seat is None or seat.is_booked:
            return False
        seat.book(passenger_name)
        return True

    def cancel_seat(self, seat_number: int) -> bool:
        seat = self.get_seat(seat_number)
        if seat is None or not seat.is_booked:
            return False
        seat.cancel()
        return True

    def calculate_price(self, seat_class: SeatClassLike, booking_instant: datetime) -> float:
        """Quote one seat of ``seat_class`` for a booking made at ``booking_instant``."""

        return quote_price(
            self.base_price,
            SeatClass(seat_class).value,
            booked_seats=self.booked_seats_count,
            total_seats=TOTAL_SEATS,
            departure=self.departure,
            booking_instant=booking_instant,
        )
