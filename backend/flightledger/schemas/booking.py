from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, Field

class BookingCreate(BaseModel):
    flight_id: int
    # Defaults to the flight's price
    amount: Optional[Decimal] = Field(None, gt=0)
    confirm: bool = Field(False, description="Book straight into Confirmed instead of Pending")

class BookingStatusUpdate(BaseModel):
    status: Literal["Pending", "Confirmed", "Cancelled"]

class PaymentStatusUpdate(BaseModel):
    status: Literal["Pending", "Completed", "Failed"]

class BookingRead(BaseModel):
    id: int
    pnr: str
    user_id: int
    flight_id: Optional[int] = None
    departure_airport_id: int
    destination_airport_id: int
    departure_time: datetime
    arrival_time: datetime
    date_of_departure: date
    date_of_arrival: date
    amount: Decimal
    payment_status: str
    booking_status: str
    booked_at: datetime

    class Config:
        from_attributes = True
