# parkwatch/services/plate_service.py
"""
License-plate normalization and verification.

verify_plate() answers "may this car park here right now?":
  - registered vehicle (province + plate, optionally in the given lot) → its parking_until
  - newest visitor pass issued for REGION-PLATE                       → its valid_until
  The later of the two decides. No window at all (no pass, and no vehicle or a
  vehicle without parking_until) → "No Valid Visitor Pass"; windows that all
  ended → "Expired Pass".
The result is advisory; ticketing is a separate call (violation_service).
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parkwatch.errors import PersistenceError, ValidationError
from parkwatch.models.vehicle import Vehicle
from parkwatch.models.visitor_pass import VisitorPass
from parkwatch.services.pass_status import resolve_valid_until
from parkwatch.utils.logger import get_logger

logger = get_logger(__name__)

REASON_NO_PASS = "No Valid Visitor Pass"
REASON_EXPIRED = "Expired Pass"

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class VerificationResult:
    valid: bool
    province: str
    license_plate: str
    reason: Optional[str] = None
    valid_until: Optional[datetime] = None
    vehicle: Optional[Vehicle] = None
    visitor_pass: Optional[VisitorPass] = None
    source: Optional[str] = None      # vehicle | visitor_pass | None

    def as_dict(self) -> dict:
        result = {"valid": self.valid}
        if self.reason:
            result["reason"] = self.reason
        return result


def normalize_plate(value: Optional[str]) -> str:
    """Strip all whitespace and uppercase. normalize_plate(normalize_plate(x)) == normalize_plate(x)."""
    if value is None:
        return ""
    return _WHITESPACE_RE.sub("", value).upper()


def format_visitor_plate(region: str, plate: str) -> str:
    return f"{normalize_plate(region)}-{normalize_plate(plate)}"


def split_visitor_plate(visitor_plate: Optional[str]) -> tuple[str, str]:
    """
    Parse "REGION-PLATE" into its normalized parts.
    Only the first dash separates; plates may contain dashes themselves.
    """
    normalized = normalize_plate(visitor_plate)
    region, _, plate = normalized.partition("-")
    if not region or not plate:
        raise ValidationError("Visitor plate must be in REGION-PLATE format")
    return region, plate


def verify_plate(db: Session, plate: Optional[str], region: Optional[str],
                 lot_id: Optional[int] = None, now: Optional[datetime] = None) -> VerificationResult:
    plate = normalize_plate(plate)
    region = normalize_plate(region)
    if not plate or not region:
        raise ValidationError("Plate and region are required")
    now = now or datetime.utcnow()

    try:
        q = db.query(Vehicle).filter(Vehicle.province == region, Vehicle.license_plate == plate)
        if lot_id is not None:
            q = q.filter(Vehicle.current_lot_id == lot_id)
        vehicle = q.first()

        visitor_pass = (
            db.query(VisitorPass)
            .filter(VisitorPass.visitor_plate == format_visitor_plate(region, plate))
            .order_by(VisitorPass.created_at.desc())
            .first()
        )
    except SQLAlchemyError as e:
        logger.error(f"Plate verification failed for {region}-{plate}: {e}", exc_info=True)
        raise PersistenceError("Database error while verifying vehicle") from e

    candidates = []
    if vehicle is not None and vehicle.parking_until is not None:
        candidates.append((vehicle.parking_until, "vehicle"))
    if visitor_pass is not None:
        candidates.append((resolve_valid_until(visitor_pass), "visitor_pass"))

    if not candidates:
        logger.info(f"[VERIFY] {region}-{plate} lot={lot_id}: no parking window or pass on record")
        return VerificationResult(valid=False, province=region, license_plate=plate,
                                  reason=REASON_NO_PASS, vehicle=vehicle,
                                  source="vehicle" if vehicle is not None else None)

    valid_until, source = max(candidates)
    valid = valid_until > now
    logger.info(f"[VERIFY] {region}-{plate} lot={lot_id}: {source} until {valid_until} → "
                f"{'valid' if valid else 'expired'}")
    return VerificationResult(
        valid=valid,
        province=region,
        license_plate=plate,
        reason=None if valid else REASON_EXPIRED,
        valid_until=valid_until,
        vehicle=vehicle,
        visitor_pass=visitor_pass,
        source=source,
    )
