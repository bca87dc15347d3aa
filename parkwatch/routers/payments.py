# parkwatch/routers/payments.py
"""Payments — record, list (card numbers always masked)."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.schemas.payment import PaymentCreate, PaymentOut
from parkwatch.services import payment_service

router = APIRouter()


@router.post("/payments", status_code=status.HTTP_201_CREATED, summary="Record a payment")
def create_payment(body: PaymentCreate, db: Session = Depends(get_db)):
    payment = payment_service.record_payment(
        db, body.amount, body.payment_method, body.card_number,
        body.user_id, body.lot_id, body.ticket_id,
    )
    return {"success": True,
            "data": {"payId": payment.pay_id, "amount": float(payment.amount), "status": payment.status}}


@router.get("/payments", summary="All payments, optionally within a date range")
def list_payments(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    payments = payment_service.list_payments(db, start_date, end_date)
    return {"success": True, "payments": [PaymentOut.model_validate(p) for p in payments]}


@router.get("/payments/user/{user_id}", summary="A user's payment history")
def list_user_payments(
    user_id: int,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    payments = payment_service.list_user_payments(db, user_id, start_date, end_date)
    return {"success": True, "payments": [PaymentOut.model_validate(p) for p in payments]}
