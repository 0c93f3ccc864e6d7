"""Command line front end for searching, quoting and booking flights."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from typing import Iterable, List, Optional

from tabulate import tabulate

from .database import DEFAULT_DB_URL
from .dataset import SEED_DAYS
from .inventory import Flight, SeatClass
from .services import Booking, ReservationError, ReservationSystem

_DEFAULT_LOG_LEVEL = os.environ.get("FLIGHT_RESERVATION_LOG_LEVEL", "WARNING")


def _render_flights(flights: Iterable[Flight], now: datetime) -> str:
    rows = [
        [
            flight.flight_number,
            flight.flight_name,
            f"{flight.source} -> {flight.destination}",
            flight.departure_time,
            flight.available_seats_count,
            f"{flight.calculate_price(SeatClass.ECONOMY, now):.2f}",
        ]
        for flight in flights
    ]
    headers = ["Flight", "Name", "Route", "Departure", "Seats left", "Economy from"]
    return tabulate(rows, headers=headers, tablefmt="github")


def _render_bookings(bookings: Iterable[Booking]) -> str:
    rows = [
        [
            booking.booking_id,
            booking.passenger_name,
            booking.flight_number,
            booking.flight_date,
            booking.seat_number,
            booking.seat_class.value,
            f"{booking.price:.2f}",
            booking.booking_time.strftime("%Y-%m-%d %H:%M"),
        ]
        for booking in bookings
    ]
    headers = ["ID", "Passenger", "Flight", "Date", "Seat", "Class", "Price", "Booked at"]
    return tabulate(rows, headers=headers, tablefmt="github")


def _add_search_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("date", help="Travel date (YYYY-MM-DD).")
    parser.add_argument("source", help="Departure city.")
    parser.add_argument("destination", help="Arrival city.")


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search, price and book flights.")
    parser.add_argument("--db", default=DEFAULT_DB_URL, help="Database URL (default: %(default)s).")
    parser.add_argument(
        "--seed-days",
        type=int,
        default=SEED_DAYS,
        help="Days of schedule to generate when the catalog is empty (default: %(default)s).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("cities", help="List the cities served.")

    search = commands.add_parser("search", help="List flights for a route and date.")
    _add_search_arguments(search)

    seats = commands.add_parser("seats", help="List available seats on a flight.")
    _add_search_arguments(seats)
    seats.add_argument("flight", help="Flight number from the search results.")
    seats.add_argument("--class", dest="seat_class", choices=[c.value for c in SeatClass])

    quote = commands.add_parser("quote", help="Quote the current fare for a seat class.")
    _add_search_arguments(quote)
    quote.add_argument("flight", help="Flight number from the search results.")
    quote.add_argument("seat_class", choices=[c.value for c in SeatClass])

    book = commands.add_parser("book", help="Book a seat.")
    _add_search_arguments(book)
    book.add_argument("flight", help="Flight number from the search results.")
    book.add_argument("seat", type=int, help="Seat number (1-100).")
    book.add_argument("--name", required=True)
    book.add_argument("--email", required=True)
    book.add_argument("--phone", required=True)

    commands.add_parser("bookings", help="List all bookings.")

    cancel = commands.add_parser("cancel", help="Cancel a booking.")
    cancel.add_argument("booking_id", type=int)

    return parser.parse_args(list(argv))


def _searched_flight(system: ReservationSystem, args: argparse.Namespace) -> Flight:
    system.search_flights(args.date, args.source, args.destination)
    flight = system.find_flight(args.flight)
    if flight is None:
        raise ReservationError(
            f"Flight {args.flight} does not fly {args.source} -> {args.destination} on {args.date}"
        )
    return flight


def _run(system: ReservationSystem, args: argparse.Namespace) -> List[str]:
    now = datetime.now()
    if args.command == "cities":
        return system.get_unique_cities()
    if args.command == "search":
        flights = system.search_flights(args.date, args.source, args.destination)
        if not flights:
            return [f"No flights available from {args.source} to {args.destination} on {args.date}."]
        return [_render_flights(flights, now)]
    if args.command == "seats":
        flight = _searched_flight(system, args)
        classes = [SeatClass(args.seat_class)] if args.seat_class else list(SeatClass)
        return [
            f"{seat_class.value}: "
            + (", ".join(str(seat.seat_number) for seat in flight.available_seats_by_class(seat_class)) or "sold out")
            for seat_class in classes
        ]
    if args.command == "quote":
        flight = _searched_flight(system, args)
        price = flight.calculate_price(args.seat_class, now)
        return [f"{flight.flight_number} {args.seat_class}: {price:.2f}"]
    if args.command == "book":
        _searched_flight(system, args)
        booking = system.reserve_seat(args.name, args.email, args.phone, args.flight, args.seat)
        return [
            f"Booking {booking.booking_id} confirmed: {booking.passenger_name}, "
            f"flight {booking.flight_number} seat {booking.seat_number} "
            f"({booking.seat_class.value}) for {booking.price:.2f}"
        ]
    if args.command == "bookings":
        return [_render_bookings(system.bookings)]
    if args.command == "cancel":
        if not system.cancel_booking(args.booking_id):
            raise ReservationError(f"Booking {args.booking_id} not found")
        return [f"Booking {args.booking_id} cancelled."]
    raise ValueError(f"Unsupported command '{args.command}'.")


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else _DEFAULT_LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    system = ReservationSystem(db_url=args.db, seed_days=args.seed_days)
    try:
        lines = _run(system, args)
    except ReservationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
