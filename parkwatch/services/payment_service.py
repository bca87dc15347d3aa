# parkwatch/services/payment_service.py
"""
Payment recording.
A payment that references a ticket flips that ticket to "paid" in the same
commit. Paying an already-paid ticket still records the payment row; it is
logged, not blocked.
"""

import re
from datetime import datetime, date, time as dtime
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parkwatch.errors import NotFound, PersistenceError, ValidationError
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.payment import Payment
from parkwatch.models.user import User
from parkwatch.models.violation import Violation
from parkwatch.utils.logger import get_logger

logger = get_logger(__name__)

_CARD_SEPARATORS_RE = re.compile(r"[\s-]")
_CARD_RE = re.compile(r"^\d{13,19}$")
PAYABLE_STATUSES = {"pending", "appealed"}


def normalize_card_number(card_number: Optional[str]) -> str:
    digits = _CARD_SEPARATORS_RE.sub("", card_number or "")
    if not _CARD_RE.match(digits):
        raise ValidationError("Card number must be 13 to 19 digits")
    return digits


def mask_card_number(card_number: Optional[str]) -> Optional[str]:
    if not card_number:
        return card_number
    if len(card_number) <= 4:
        return card_number
    return "****" + card_number[-4:]


def _parse_amount(amount) -> Decimal:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Amount must be a number")
    if not value.is_finite():
        raise ValidationError("Amount must be a number")
    try:
        cents = value.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError("Amount is too large")
    if cents != value:
        raise ValidationError("Amount must have at most two decimal places")
    if cents <= 0:
        raise ValidationError("Amount must be greater than zero")
    return cents


def record_payment(db: Session, amount, payment_method: Optional[str], card_number: Optional[str],
                   user_id: Optional[int], lot_id: Optional[int] = None, ticket_id: Optional[int] = None,
                   now: Optional[datetime] = None) -> Payment:
    value = _parse_amount(amount)
    if not payment_method or not payment_method.strip():
        raise ValidationError("Payment method is required")
    digits = normalize_card_number(card_number)
    if user_id is None:
        raise ValidationError("User is required")

    if not db.query(User).filter(User.id == user_id).first():
        raise NotFound("User does not exist")
    if lot_id is not None and not db.query(ParkingLot).filter(ParkingLot.id == lot_id).first():
        raise NotFound(f"Parking lot {lot_id} not found")

    violation = None
    if ticket_id is not None:
        violation = db.query(Violation).filter(Violation.ticket_id == ticket_id).first()
        if not violation:
            raise NotFound(f"No violation found with ID {ticket_id}")

    payment = Payment(
        amount=value,
        payment_method=payment_method.strip(),
        card_number=mask_card_number(digits),
        user_id=user_id,
        lot_id=lot_id,
        ticket_id=ticket_id,
        status="completed",
        created_at=now or datetime.utcnow(),
    )
    try:
        db.add(payment)
        if violation is not None:
            if violation.status in PAYABLE_STATUSES:
                violation.status = "paid"
            else:
                logger.warning(f"[PAYMENT] Ticket #{ticket_id} already {violation.status}; "
                               f"recording additional payment")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[PAYMENT] Failed to record payment for user={user_id}: {e}", exc_info=True)
        raise PersistenceError("Database error while recording payment") from e

    logger.info(f"[PAYMENT] #{payment.pay_id} {value} via {payment.payment_method} "
                f"user={user_id} ticket={ticket_id}")
    return payment


def list_payments(db: Session, start_date: Optional[date] = None,
                  end_date: Optional[date] = None) -> list[Payment]:
    q = db.query(Payment)
    if start_date:
        q = q.filter(Payment.created_at >= datetime.combine(start_date, dtime.min))
    if end_date:
        q = q.filter(Payment.created_at <= datetime.combine(end_date, dtime.max))
    return q.order_by(Payment.created_at.desc()).all()


def list_user_payments(db: Session, user_id: int, start_date: Optional[date] = None,
                       end_date: Optional[date] = None) -> list[Payment]:
    q = db.query(Payment).filter(Payment.user_id == user_id)
    if start_date:
        q = q.filter(Payment.created_at >= datetime.combine(start_date, dtime.min))
    if end_date:
        q = q.filter(Payment.created_at <= datetime.combine(end_date, dtime.max))
    return q.order_by(Payment.created_at.desc()).all()
