# parkwatch/schemas/vehicle.py
from datetime import datetime
from typing import Optional
from parkwatch.schemas.base import CamelModel


class VehicleCreate(CamelModel):
    user_id: Optional[int] = None
    province: Optional[str] = None
    license_plate: Optional[str] = None
    lot_id: Optional[int] = None
    parking_until: Optional[datetime] = None


class VehicleOut(CamelModel):
    vehicle_id: int
    user_id: int
    province: str
    license_plate: str
    current_lot_id: Optional[int] = None
    parking_until: Optional[datetime] = None
    time_remaining: Optional[str] = None
    owner_name: Optional[str] = None
    unit_number: Optional[str] = None
    user_type: Optional[str] = None
