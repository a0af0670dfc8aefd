from sqlalchemy import String, Integer, ForeignKey, DateTime, Date, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import date, datetime
from decimal import Decimal
import enum

from flightledger.models.base import Base
from flightledger.models.flight import Flight
from flightledger.models.user import User


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @classmethod
    def from_string(cls, value: str) -> "PaymentStatus":
        for status in cls:
            if status.value.lower() == (value or "").strip().lower():
                return status
        raise ValueError(f"Unknown payment status: {value!r}")


class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"

    @classmethod
    def from_string(cls, value: str) -> "BookingStatus":
        for status in cls:
            if status.value.lower() == (value or "").strip().lower():
                return status
        raise ValueError(f"Unknown booking status: {value!r}")

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_BOOKING_STATUSES


# Bookings in these states occupy a seat
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    pnr: Mapped[str] = mapped_column(String(12), unique=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    # Detached (NULL) once a flight without active bookings is deleted; the snapshot below keeps history
    flight_id: Mapped[int | None] = mapped_column(ForeignKey("flights.id", ondelete="SET NULL"), nullable=True, index=True)
    # Snapshot of the flight at booking time
    departure_airport_id: Mapped[int] = mapped_column(ForeignKey("airports.id"))
    destination_airport_id: Mapped[int] = mapped_column(ForeignKey("airports.id"))
    departure_time: Mapped[datetime] = mapped_column(DateTime)
    arrival_time: Mapped[datetime] = mapped_column(DateTime)
    date_of_departure: Mapped[date] = mapped_column(Date)
    date_of_arrival: Mapped[date] = mapped_column(Date)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    payment_status: Mapped[str] = mapped_column(String(20), default=PaymentStatus.PENDING.value)
    booking_status: Mapped[str] = mapped_column(String(20), default=BookingStatus.PENDING.value, index=True)
    booked_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped[User] = relationship(User)
    flight: Mapped[Flight | None] = relationship(Flight)

    @property
    def status(self) -> BookingStatus:
        return BookingStatus.from_string(self.booking_status)

    @property
    def payment(self) -> PaymentStatus:
        return PaymentStatus.from_string(self.payment_status)
