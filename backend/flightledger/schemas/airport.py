from typing import Optional
from pydantic import BaseModel, Field

class AirportBase(BaseModel):
    code: str = Field(..., max_length=4)
    name: str = Field(..., max_length=255)
    city: str = Field(..., max_length=120)
    country: str = Field(..., max_length=120)

class AirportUpdate(BaseModel):
    code: Optional[str] = Field(None, max_length=4)
    name: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=120)
    country: Optional[str] = Field(None, max_length=120)

class AirportRead(AirportBase):
    id: int

    class Config:
        from_attributes = True
