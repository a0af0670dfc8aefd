from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field

class Token(BaseModel):
    access_token: str
    token_type: str
    kind: str

class LoginRequest(BaseModel):
    kind: Literal["user", "owner", "admin"] = "user"
    # email for users, company code for owners, username for admins
    identifier: str
    password: str

class UserRegister(BaseModel):
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    email: EmailStr
    password: str
    phone: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None

class UserOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OwnerRegister(BaseModel):
    company_name: str = Field(..., max_length=255)
    company_code: str = Field(..., max_length=5)
    password: str
    contact_info: Optional[str] = Field(None, max_length=255)

class OwnerUpdate(BaseModel):
    company_name: Optional[str] = Field(None, max_length=255)
    company_code: Optional[str] = Field(None, max_length=5)
    contact_info: Optional[str] = Field(None, max_length=255)

class OwnerOut(BaseModel):
    id: int
    company_name: str
    company_code: str
    contact_info: Optional[str] = None
    flight_count: int = 0
