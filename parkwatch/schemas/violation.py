# parkwatch/schemas/violation.py
from datetime import datetime
from typing import Optional
from parkwatch.schemas.base import CamelModel


class ViolationCreate(CamelModel):
    province: Optional[str] = None
    license_plate: Optional[str] = None
    reason: Optional[str] = None
    lot_id: Optional[int] = None
    vehicle_id: Optional[int] = None


class ViolationStatusUpdate(CamelModel):
    status: Optional[str] = None


class ViolationOut(CamelModel):
    ticket_id: int
    province: str
    license_plate: str
    reason: str
    time: datetime
    lot_id: int
    vehicle_id: Optional[int] = None
    status: str
