"""SQLAlchemy models for the flight reservation store."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class FlightRecord(Base):
    """A scheduled flight in the catalog."""

    __tablename__ = "flights"
    __table_args__ = (CheckConstraint("base_price > 0", name="ck_base_price_positive"),)

    flight_number: Mapped[str] = mapped_column(String(10), primary_key=True)
    date: Mapped[str] = mapped_column(String(10), primary_key=True)
    flight_name: Mapped[str] = mapped_column(String(50), nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    destination: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    departure_time: Mapped[str] = mapped_column(String(16), nullable=False)
    base_price: Mapped[float] = mapped_column(Float, nullable=False)


class BookingRecord(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("seat_number BETWEEN 1 AND 100", name="ck_booking_seat_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    passenger_name: Mapped[str] = mapped_column(String(120), nullable=False)
    passenger_email: Mapped[str] = mapped_column(String(120), nullable=False)
    passenger_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    flight_number: Mapped[str] = mapped_column(String(10), nullable=False)
    flight_date: Mapped[str] = mapped_column(String(10), nullable=False)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_class: Mapped[str] = mapped_column(String(10), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    booking_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class BookedSeat(Base):
    """Durable booked state of one seat, replayed onto flights after a search."""

    __tablename__ = "booked_seats"

    flight_number: Mapped[str] = mapped_column(String(10), primary_key=True)
    flight_date: Mapped[str] = mapped_column(String(10), primary_key=True)
    seat_number: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    passenger_name: Mapped[str] = mapped_column(String(120), nullable=False)


class BookingSequence(Base):
    """High-water mark of issued booking ids, so restarts never reuse one."""

    __tablename__ = "booking_sequence"

    name: Mapped[str] = mapped_column(String(30), primary_key=True)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False)
