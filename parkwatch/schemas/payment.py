# parkwatch/schemas/payment.py
from datetime import datetime
from typing import Optional
from parkwatch.schemas.base import CamelModel


class PaymentCreate(CamelModel):
    amount: Optional[float] = None
    payment_method: Optional[str] = None
    card_number: Optional[str] = None
    user_id: Optional[int] = None
    lot_id: Optional[int] = None
    ticket_id: Optional[int] = None


class PaymentOut(CamelModel):
    pay_id: int
    amount: float
    payment_method: str
    card_number: Optional[str] = None
    user_id: int
    lot_id: Optional[int] = None
    ticket_id: Optional[int] = None
    status: str
    created_at: datetime
