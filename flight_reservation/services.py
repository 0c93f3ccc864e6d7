"""Business logic for the flight reservation system."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .database import DEFAULT_DB_URL, create_session_factory, ensure_schema, session_scope
from .dataset import REFERENCE_CITIES, SEED_DAYS, seed_flight_catalog
from .inventory import Flight, SeatClass
from .models import BookedSeat, BookingRecord, BookingSequence, FlightRecord

logger = logging.getLogger(__name__)

BOOKING_SEQUENCE = "bookings"
# ids handed out start right above this value
BOOKING_ID_FLOOR = 1000


class ReservationError(RuntimeError):
    """Base class for reasons a seat could not be reserved."""


class InvalidPassengerError(ReservationError, ValueError):
    """Raised when passenger contact details are missing or malformed."""


class FlightNotFoundError(ReservationError):
    """Raised when the flight is not part of the current search result."""


class SeatUnavailableError(ReservationError):
    """Raised when the seat does not exist or is already taken."""


class StorageError(ReservationError):
    """Raised when the booking could not be written to the store."""


@dataclass(frozen=True)
class Booking:
    booking_id: int
    passenger_name: str
    email: str
    phone: str
    flight_number: str
    flight_date: str
    seat_number: int
    seat_class: SeatClass
    price: float
    booking_time: datetime

    @classmethod
    def from_record(cls, record: BookingRecord) -> "Booking":
        return cls(
            booking_id=record.id,
            passenger_name=record.passenger_name,
            email=record.passenger_email,
            phone=record.passenger_phone,
            flight_number=record.flight_number,
            flight_date=record.flight_date,
            seat_number=record.seat_number,
            seat_class=SeatClass(record.seat_class),
            price=record.price,
            booking_time=record.booking_time,
        )

    def to_record(self) -> BookingRecord:
        return BookingRecord(
            id=self.booking_id,
            passenger_name=self.passenger_name,
            passenger_email=self.email,
            passenger_phone=self.phone,
            flight_number=self.flight_number,
            flight_date=self.flight_date,
            seat_number=self.seat_number,
            seat_class=self.seat_class.value,
            price=self.price,
            booking_time=self.booking_time,
        )


def validate_passenger(name: str, email: str, phone: str) -> Tuple[str, str, str]:
    """Return stripped passenger details or raise ``InvalidPassengerError``."""

    name, email, phone = (name or "").strip(), (email or "").strip(), (phone or "").strip()
    if not name:
        raise InvalidPassengerError("Please enter passenger name")
    if "@" not in email:
        raise InvalidPassengerError("Please enter a valid email")
    if not phone:
        raise InvalidPassengerError("Please enter phone number")
    return name, email, phone


def add_flight(
    session: Session,
    *,
    flight_number: str,
    flight_name: str,
    source: str,
    destination: str,
    departure_time: str,
    base_price: float,
) -> FlightRecord:
    """Create a catalog entry; the catalog date is taken from the departure."""

    record = FlightRecord(
        flight_number=flight_number,
        date=departure_time[:10],
        flight_name=flight_name,
        source=source,
        destination=destination,
        departure_time=departure_time,
        base_price=base_price,
    )
    session.add(record)
    session.flush()
    return record


class ReservationSystem:
    """Searches the catalog and books or cancels seats on the flights found.

    ``flights`` holds the result of the most recent search. Bookings can only
    be made on those flights. ``bookings`` mirrors every booking in the store.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker[Session]] = None,
        *,
        db_url: str = DEFAULT_DB_URL,
        seed_days: int = SEED_DAYS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._flights: List[Flight] = []
        self._bookings: List[Booking] = []
        self._last_booking_id = BOOKING_ID_FLOOR
        if session_factory is None:
            _, session_factory = create_session_factory(db_url)
        self._session_factory = session_factory
        try:
            ensure_schema(session_factory)
            if seed_days > 0:
                seed_flight_catalog(session_factory, start=clock().date(), days=seed_days)
            self._load_bookings()
        except SQLAlchemyError:
            logger.exception("Reservation store unavailable, continuing without persisted data")

    @property
    def flights(self) -> List[Flight]:
        return list(self._flights)

    @property
    def bookings(self) -> List[Booking]:
        return list(self._bookings)

    def _load_bookings(self) -> None:
        with session_scope(self._session_factory) as session:
            records = session.scalars(select(BookingRecord).order_by(BookingRecord.id)).all()
            self._bookings = [Booking.from_record(record) for record in records]
            next_id = self._next_booking_id(session)
        self._last_booking_id = next_id - 1
        logger.info("Loaded %d bookings, next booking id %d", len(self._bookings), next_id)

    def _next_booking_id(self, session: Session) -> int:
        """Return the id after the highest one the store has ever issued.

        Read inside the writing transaction, so bookings made by another
        system on the same store are never reissued.
        """

        sequence = session.get(BookingSequence, BOOKING_SEQUENCE, populate_existing=True)
        highest = session.scalar(select(func.max(BookingRecord.id)))
        issued = [BOOKING_ID_FLOOR, self._last_booking_id, highest or 0]
        if sequence is not None:
            issued.append(sequence.last_value)
        return max(issued) + 1

    def _restore_booked_seats(self, session: Session, flight: Flight) -> None:
        rows = session.execute(
            select(BookedSeat.seat_number, BookedSeat.passenger_name).where(
                BookedSeat.flight_number == flight.flight_number,
                BookedSeat.flight_date == flight.date,
            )
        ).all()
        for row in rows:
            flight.book_seat(row.seat_number, row.passenger_name)

    def search_flights(self, date: str, source: str, destination: str) -> List[Flight]:
        """Replace the working set with the flights on ``date`` from ``source`` to ``destination``."""

        self._flights = []
        if source == destination:
            logger.info("Ignoring search with identical source and destination %r", source)
            return []
        flights: List[Flight] = []
        try:
            with session_scope(self._session_factory) as session:
                records = session.scalars(
                    select(FlightRecord)
                    .where(
                        FlightRecord.date == date,
                        FlightRecord.source == source,
                        FlightRecord.destination == destination,
                    )
                    .order_by(FlightRecord.departure_time, FlightRecord.flight_number)
                ).all()
                for record in records:
                    try:
                        flight = Flight(
                            record.flight_number,
                            record.flight_name,
                            record.source,
                            record.destination,
                            record.departure_time,
                            record.base_price,
                        )
                    except ValueError:
                        logger.warning(
                            "Skipping flight %s with unreadable departure %r",
                            record.flight_number,
                            record.departure_time,
                        )
                        continue
                    self._restore_booked_seats(session, flight)
                    flights.append(flight)
        except SQLAlchemyError:
            logger.exception("Flight search failed for %s %s->%s", date, source, destination)
            return []
        self._flights = flights
        logger.debug("Search %s %s->%s found %d flights", date, source, destination, len(flights))
        return list(flights)

    def get_unique_cities(self) -> List[str]:
        try:
            with session_scope(self._session_factory) as session:
                cities = set(session.scalars(select(FlightRecord.source).distinct()))
                cities.update(session.scalars(select(FlightRecord.destination).distinct()))
        except SQLAlchemyError:
            logger.warning("City lookup failed, using reference cities", exc_info=True)
            return list(REFERENCE_CITIES)
        if not cities:
            return list(REFERENCE_CITIES)
        return sorted(cities)

    def find_flight(self, flight_number: str) -> Optional[Flight]:
        for flight in self._flights:
            if flight.flight_number == flight_number:
                return flight
        return None

    def find_booking(self, booking_id: int) -> Optional[Booking]:
        for booking in self._bookings:
            if booking.booking_id == booking_id:
                return booking
        return None

    def reserve_seat(
        self,
        passenger_name: str,
        email: str,
        phone: str,
        flight_number: str,
        seat_number: int,
        *,
        booking_time: Optional[datetime] = None,
    ) -> Booking:
        """Book a seat on a flight from the last search and record it durably.

        The fare is quoted before the seat is taken. If the store rejects the
        write the seat is released again, so a booking exists only when its
        seat is marked booked.
        """

        passenger_name, email, phone = validate_passenger(passenger_name, email, phone)
        flight = self.find_flight(flight_number)
        if flight is None:
            raise FlightNotFoundError(f"Flight {flight_number} is not in the current search results")
        seat = flight.get_seat(seat_number)
        if seat is None:
            raise SeatUnavailableError(f"Seat {seat_number} does not exist on flight {flight_number}")

        instant = booking_time or self._clock()
        price = flight.calculate_price(seat.seat_class, instant)
        if not flight.book_seat(seat_number, passenger_name):
            raise SeatUnavailableError(f"Seat {seat_number} on flight {flight_number} is already booked")

        try:
            with session_scope(self._session_factory) as session:
                booking = Booking(
                    booking_id=self._next_booking_id(session),
                    passenger_name=passenger_name,
                    email=email,
                    phone=phone,
                    flight_number=flight.flight_number,
                    flight_date=flight.date,
                    seat_number=seat_number,
                    seat_class=seat.seat_class,
                    price=price,
                    booking_time=instant,
                )
                session.add(booking.to_record())
                session.add(
                    BookedSeat(
                        flight_number=booking.flight_number,
                        flight_date=booking.flight_date,
                        seat_number=booking.seat_number,
                        passenger_name=booking.passenger_name,
                    )
                )
                session.merge(BookingSequence(name=BOOKING_SEQUENCE, last_value=booking.booking_id))
        except IntegrityError as exc:
            flight.cancel_seat(seat_number)
            raise SeatUnavailableError(
                f"Seat {seat_number} on flight {flight_number} is already booked"
            ) from exc
        except SQLAlchemyError as exc:
            flight.cancel_seat(seat_number)
            logger.exception("Could not store booking for flight %s seat %d", flight_number, seat_number)
            raise StorageError("Booking could not be saved") from exc

        self._last_booking_id = booking.booking_id
        self._bookings.append(booking)
        logger.info(
            "Booking %d: %s seat %d on %s %s for %.2f",
            booking.booking_id,
            booking.seat_class.value,
            seat_number,
            booking.flight_number,
            booking.flight_date,
            price,
        )
        return booking

    def add_booking(
        self,
        passenger_name: str,
        email: str,
        phone: str,
        flight_number: str,
        seat_number: int,
        *,
        booking_time: Optional[datetime] = None,
    ) -> Optional[Booking]:
        """Like ``reserve_seat`` but returns ``None`` instead of raising."""

        try:
            return self.reserve_seat(
                passenger_name, email, phone, flight_number, seat_number, booking_time=booking_time
            )
        except ReservationError as exc:
            logger.warning("Booking failed: %s", exc)
            return None

    def cancel_booking(self, booking_id: int) -> bool:
        booking = self.find_booking(booking_id)
        if booking is None:
            return False
        try:
            with session_scope(self._session_factory) as session:
                session.execute(delete(BookingRecord).where(BookingRecord.id == booking_id))
                session.execute(
                    delete(BookedSeat).where(
                        BookedSeat.flight_number == booking.flight_number,
                        BookedSeat.flight_date == booking.flight_date,
                        BookedSeat.seat_number == booking.seat_number,
                    )
                )
        except SQLAlchemyError:
            logger.exception("Could not cancel booking %d", booking_id)
            return False

        for flight in self._flights:
            if flight.flight_number == booking.flight_number and flight.date == booking.flight_date:
                flight.cancel_seat(booking.seat_number)
        self._bookings.remove(booking)
        logger.info("Cancelled booking %d", booking_id)
        return True
