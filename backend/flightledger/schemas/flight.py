from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

class FlightCreate(BaseModel):
    flight_code: str = Field(..., max_length=32)
    flight_name: str = Field(..., max_length=120)
    capacity: int
    departure_airport_id: int
    destination_airport_id: int
    departure_time: datetime
    arrival_time: datetime
    price: Decimal

class FlightUpdate(BaseModel):
    flight_code: Optional[str] = Field(None, max_length=32)
    flight_name: Optional[str] = Field(None, max_length=120)
    capacity: Optional[int] = None
    departure_airport_id: Optional[int] = None
    destination_airport_id: Optional[int] = None
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    price: Optional[Decimal] = None

class FlightRead(BaseModel):
    id: int
    company_id: int
    company_name: Optional[str] = None
    company_code: Optional[str] = None
    flight_code: str
    flight_name: str
    route: str
    departure_airport_id: int
    destination_airport_id: int
    departure_time: datetime
    arrival_time: datetime
    price: float
    capacity: int
    available_seats: int
    is_available: bool
    occupancy_rate: float
