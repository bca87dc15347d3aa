# parkwatch/schemas/visitor_pass.py
from datetime import datetime
from typing import Optional
from parkwatch.schemas.base import CamelModel


class VisitorPassCreate(CamelModel):
    user_id: Optional[int] = None
    hours: Optional[int] = None
    visitor_plate: Optional[str] = None


class VisitorPassOut(CamelModel):
    visitor_pass_id: int
    user_id: int
    hours: int
    pass_type: str
    visitor_plate: str
    created_at: datetime
    valid_time: Optional[datetime] = None
    status: str                  # active | expired | Unknown (derived)
    time_remaining: str


class PassQuotaOut(CamelModel):
    type: str
    hours: int
    total: int
    remaining: int
