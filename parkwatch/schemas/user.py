# parkwatch/schemas/user.py
from datetime import datetime
from typing import Optional
from parkwatch.schemas.base import CamelModel


class UserRegister(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[str] = None          # resident | visitor
    unit_number: Optional[str] = None
    host_information: Optional[str] = None
    role: str = "user"


class UserLogin(CamelModel):
    phone: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None


class VisitorRegister(CamelModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    unit_to_visit: Optional[str] = None
    region: Optional[str] = None
    license_plate: Optional[str] = None
    parking_lot_id: Optional[int] = None


class StaffLogin(CamelModel):
    staff_id: Optional[str] = None
    password: Optional[str] = None


class UserOut(CamelModel):
    id: int
    name: str
    phone: str
    role: str
    user_type: str
    unit_number: Optional[str] = None
    host_information: Optional[str] = None
    created_at: Optional[datetime] = None
