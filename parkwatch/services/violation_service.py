# parkwatch/services/violation_service.py
"""
Violation tickets.

Every create call inserts a new "pending" ticket; repeated tickets for the same
plate are allowed. Status moves forward only:

    pending  → paid | appealed | resolved
    appealed → paid | resolved
    paid, resolved: terminal
"""

from datetime import datetime, date, time as dtime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parkwatch.errors import NotFound, PersistenceError, ValidationError
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.vehicle import Vehicle
from parkwatch.models.violation import Violation
from parkwatch.services.plate_service import VerificationResult, normalize_plate
from parkwatch.utils.logger import get_logger

logger = get_logger(__name__)

VIOLATION_REASONS = (
    "No Valid Visitor Pass",
    "Expired Pass",
    "Unauthorized Parking Area",
    "Blocked Access",
    "Other",
)
VIOLATION_STATUSES = ("pending", "paid", "appealed", "resolved")
ALLOWED_TRANSITIONS = {
    "pending": {"paid", "appealed", "resolved"},
    "appealed": {"paid", "resolved"},
    "paid": set(),
    "resolved": set(),
}


def create_violation(db: Session, province: Optional[str], license_plate: Optional[str],
                     reason: Optional[str], lot_id: Optional[int], vehicle_id: Optional[int] = None,
                     now: Optional[datetime] = None) -> Violation:
    province = normalize_plate(province)
    license_plate = normalize_plate(license_plate)
    reason = (reason or "").strip()
    if not province or not license_plate:
        raise ValidationError("Province and license plate are required")
    if not reason:
        raise ValidationError("Violation reason is required")
    if lot_id is None:
        raise ValidationError("Parking lot is required")

    if not db.query(ParkingLot).filter(ParkingLot.id == lot_id).first():
        raise NotFound(f"Parking lot {lot_id} not found")
    if reason not in VIOLATION_REASONS:
        logger.debug(f"[TICKET] Free-text reason for {province}-{license_plate}: {reason!r}")

    violation = Violation(
        province=province,
        license_plate=license_plate,
        reason=reason,
        time=now or datetime.utcnow(),
        lot_id=lot_id,
        vehicle_id=vehicle_id,
        status="pending",
    )
    try:
        db.add(violation)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[TICKET] Failed to create violation for {province}-{license_plate}: {e}", exc_info=True)
        raise PersistenceError("Database error while creating violation record") from e

    logger.warning(f"[TICKET] #{violation.ticket_id} {province}-{license_plate} lot={lot_id}: {reason}")
    return violation


def ticket_from_verification(db: Session, result: VerificationResult, lot_id: int,
                             now: Optional[datetime] = None) -> Violation:
    """Issue a ticket for a failed plate verification, using its reason."""
    if result.valid:
        raise ValidationError(f"{result.province}-{result.license_plate} holds a valid pass")
    vehicle_id = result.vehicle.id if result.vehicle is not None else None
    return create_violation(db, result.province, result.license_plate, result.reason,
                            lot_id, vehicle_id=vehicle_id, now=now)


def get_violation(db: Session, ticket_id: int) -> Violation:
    violation = db.query(Violation).filter(Violation.ticket_id == ticket_id).first()
    if not violation:
        raise NotFound(f"No violation found with ID {ticket_id}")
    return violation


def update_violation_status(db: Session, ticket_id: int, new_status: Optional[str]) -> Violation:
    if new_status not in VIOLATION_STATUSES:
        raise ValidationError("Invalid status value")
    violation = get_violation(db, ticket_id)

    if violation.status == new_status:
        return violation
    if new_status not in ALLOWED_TRANSITIONS.get(violation.status, set()):
        raise ValidationError(f"Cannot change status from {violation.status} to {new_status}")

    old_status = violation.status
    violation.status = new_status
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[TICKET] Status update failed for #{ticket_id}: {e}", exc_info=True)
        raise PersistenceError("Database error while updating violation status") from e

    logger.info(f"[TICKET] #{ticket_id} {old_status} → {new_status}")
    return violation


def _day_start(d: date) -> datetime:
    return datetime.combine(d, dtime.min)


def _day_end(d: date) -> datetime:
    return datetime.combine(d, dtime.max)


def list_violations(db: Session, lot_id: Optional[int] = None, start_date: Optional[date] = None,
                    end_date: Optional[date] = None, limit: int = 200) -> list[Violation]:
    """All tickets, newest first. Date bounds are inclusive whole days."""
    q = db.query(Violation)
    if lot_id is not None:
        q = q.filter(Violation.lot_id == lot_id)
    if start_date:
        q = q.filter(Violation.time >= _day_start(start_date))
    if end_date:
        q = q.filter(Violation.time <= _day_end(end_date))
    return q.order_by(Violation.time.desc()).limit(limit).all()


def list_user_violations(db: Session, user_id: int, start_date: Optional[date] = None,
                         end_date: Optional[date] = None) -> list[Violation]:
    """Tickets written against any vehicle registered to the user."""
    q = (
        db.query(Violation)
        .join(Vehicle, (Vehicle.province == Violation.province)
              & (Vehicle.license_plate == Violation.license_plate))
        .filter(Vehicle.user_id == user_id)
    )
    if start_date:
        q = q.filter(Violation.time >= _day_start(start_date))
    if end_date:
        q = q.filter(Violation.time <= _day_end(end_date))
    return q.order_by(Violation.time.desc()).all()


def find_violations_by_plate(db: Session, license_plate: Optional[str],
                             province: Optional[str]) -> list[Violation]:
    license_plate = normalize_plate(license_plate)
    province = normalize_plate(province)
    if not license_plate or not province:
        raise ValidationError("Province and license plate are required")
    return (
        db.query(Violation)
        .filter(Violation.license_plate == license_plate, Violation.province == province)
        .order_by(Violation.time.desc())
        .all()
    )
