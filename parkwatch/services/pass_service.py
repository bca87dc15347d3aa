# parkwatch/services/pass_service.py
"""
Visitor pass issuance and quota.

Tiers come from settings.PASS_TIERS (8 hour ×5, 24 hour ×3, Weekend ×1 by default).
A tier slot is "in use" while a pass of that tier has valid_until in the future;
remaining = total - in use, never below zero.

Issuance locks the resident's user row, then inserts through a single
conditional INSERT ... SELECT ... WHERE (live count) < total so that two
concurrent requests cannot both take the last slot.
"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func, insert, literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parkwatch.config import settings
from parkwatch.errors import InvalidPassType, NotFound, PersistenceError, QuotaExceeded
from parkwatch.models.user import User
from parkwatch.models.visitor_pass import VisitorPass
from parkwatch.schemas.visitor_pass import PassQuotaOut, VisitorPassOut
from parkwatch.services.pass_status import (
    STATUS_ACTIVE, derive_status, format_time_remaining, pass_type_label, resolve_valid_until,
)
from parkwatch.services.plate_service import split_visitor_plate
from parkwatch.utils.logger import get_logger

logger = get_logger(__name__)


def _live_pass_count(user_id: int, hours: int, now: datetime):
    return (
        select(func.count(VisitorPass.id))
        .where(
            VisitorPass.user_id == user_id,
            VisitorPass.hours == hours,
            VisitorPass.valid_until > now,
        )
        .correlate(None)
        .scalar_subquery()
    )


def issue_visitor_pass(db: Session, user_id: Optional[int], hours, visitor_plate: Optional[str],
                       now: Optional[datetime] = None) -> VisitorPass:
    """Validate, check quota and insert one pass. Returns the new row."""
    tier = settings.tier_for_hours(hours)
    if hours is None or tier is None:
        raise InvalidPassType(f"Invalid pass duration: {hours}")
    region, plate = split_visitor_plate(visitor_plate)
    plate_text = f"{region}-{plate}"
    now = now or datetime.utcnow()
    valid_until = now + timedelta(hours=tier["hours"])

    try:
        user = db.query(User).filter(User.id == user_id).with_for_update().first()
        if not user:
            db.rollback()
            raise NotFound("User not found")

        stmt = (
            insert(VisitorPass)
            .from_select(
                ["user_id", "hours", "visitor_plate", "status", "created_at", "valid_until"],
                select(
                    literal(user_id),
                    literal(tier["hours"]),
                    literal(plate_text),
                    literal(STATUS_ACTIVE),
                    literal(now),
                    literal(valid_until),
                ).where(_live_pass_count(user_id, tier["hours"], now) < tier["total"]),
            )
            .returning(VisitorPass.id)
        )
        pass_id = db.execute(stmt).scalar_one_or_none()
        if pass_id is None:
            db.rollback()
            logger.info(f"[PASS] Quota exhausted: user={user_id} tier={tier['type']}")
            raise QuotaExceeded(f"No available {tier['type']} passes")
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[PASS] Issuance failed for user={user_id}: {e}", exc_info=True)
        raise PersistenceError("Database error while issuing visitor pass") from e

    visitor_pass = db.get(VisitorPass, pass_id)
    logger.info(f"[PASS] Issued #{pass_id} {tier['type']} for {plate_text} "
                f"(user={user_id}, until {valid_until:%Y-%m-%d %H:%M})")
    return visitor_pass


def list_user_passes(db: Session, user_id: int) -> list[VisitorPass]:
    return (
        db.query(VisitorPass)
        .filter(VisitorPass.user_id == user_id)
        .order_by(VisitorPass.created_at.desc(), VisitorPass.id.desc())
        .all()
    )


def get_pass_quota(db: Session, user_id: int, now: Optional[datetime] = None) -> list[PassQuotaOut]:
    """Remaining slots per tier. Only residents hold a quota."""
    now = now or datetime.utcnow()
    user = db.query(User).filter(User.id == user_id, User.user_type == "resident").first()
    if not user:
        raise NotFound("User does not exist or is not a resident")

    rows = (
        db.query(VisitorPass.hours, func.count(VisitorPass.id))
        .filter(VisitorPass.user_id == user_id, VisitorPass.valid_until > now)
        .group_by(VisitorPass.hours)
        .all()
    )
    in_use = {hours: count for hours, count in rows}
    return [
        PassQuotaOut(
            type=tier["type"],
            hours=tier["hours"],
            total=tier["total"],
            remaining=max(0, tier["total"] - in_use.get(tier["hours"], 0)),
        )
        for tier in settings.PASS_TIERS
    ]


def serialize_pass(visitor_pass: VisitorPass, now: Optional[datetime] = None) -> VisitorPassOut:
    """Attach derived status and time remaining. Never writes to the row."""
    now = now or datetime.utcnow()
    try:
        valid_until = resolve_valid_until(visitor_pass)
        remaining = format_time_remaining(valid_until, now)
    except (ValueError, TypeError):
        valid_until, remaining = None, "Unknown"
    return VisitorPassOut(
        visitor_pass_id=visitor_pass.id,
        user_id=visitor_pass.user_id,
        hours=visitor_pass.hours,
        pass_type=pass_type_label(visitor_pass.hours),
        visitor_plate=visitor_pass.visitor_plate,
        created_at=visitor_pass.created_at,
        valid_time=valid_until,
        status=derive_status(visitor_pass, now),
        time_remaining=remaining,
    )
