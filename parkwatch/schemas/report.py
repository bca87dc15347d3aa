# parkwatch/schemas/report.py
from datetime import datetime
from typing import Optional
from parkwatch.schemas.base import CamelModel


class ReportCreate(CamelModel):
    lot_id: Optional[int] = None
    description: Optional[str] = None
    type: Optional[str] = None


class ReportOut(CamelModel):
    report_id: int
    lot_id: int
    description: Optional[str] = None
    type: str
    date_generated: datetime
