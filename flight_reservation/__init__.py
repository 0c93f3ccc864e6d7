"""Flight reservation engine: seat inventory, dynamic pricing and bookings."""
from .database import create_session_factory, ensure_schema
from .dataset import seed_flight_catalog
from .inventory import Flight, Seat, SeatClass
from .services import (
    Booking,
    FlightNotFoundError,
    InvalidPassengerError,
    ReservationError,
    ReservationSystem,
    SeatUnavailableError,
    StorageError,
    add_flight,
)

__all__ = [
    "create_session_factory",
    "ensure_schema",
    "seed_flight_catalog",
    "Flight",
    "Seat",
    "SeatClass",
    "Booking",
    "FlightNotFoundError",
    "InvalidPassengerError",
    "ReservationError",
    "ReservationSystem",
    "SeatUnavailableError",
    "StorageError",
    "add_flight",
]
