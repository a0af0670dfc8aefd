from sqlalchemy import String, Integer, ForeignKey, DateTime, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from decimal import Decimal

from flightledger.models.base import Base
from flightledger.models.airport import Airport
from flightledger.models.flight_owner import FlightOwner

class Flight(Base):
    __tablename__ = "flights"
    # Flight codes are unique per company, not globally
    __table_args__ = (UniqueConstraint("company_id", "flight_code", name="uq_flight_company_code"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("flight_owners.id"), index=True)
    flight_code: Mapped[str] = mapped_column(String(32), index=True)
    flight_name: Mapped[str] = mapped_column(String(120))
    capacity: Mapped[int] = mapped_column(Integer)
    departure_airport_id: Mapped[int] = mapped_column(ForeignKey("airports.id"), index=True)
    destination_airport_id: Mapped[int] = mapped_column(ForeignKey("airports.id"), index=True)
    departure_time: Mapped[datetime] = mapped_column(DateTime, index=True)
    arrival_time: Mapped[datetime] = mapped_column(DateTime)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

    owner: Mapped[FlightOwner] = relationship(FlightOwner)
    departure_airport: Mapped[Airport] = relationship(Airport, foreign_keys=[departure_airport_id])
    destination_airport: Mapped[Airport] = relationship(Airport, foreign_keys=[destination_airport_id])

    @property
    def route(self) -> str:
        dep = self.departure_airport.code if self.departure_airport else "DEP"
        dst = self.destination_airport.code if self.destination_airport else "DEST"
        return f"{dep} → {dst}"
