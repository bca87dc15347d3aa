# parkwatch/services/auth_service.py
"""
Accounts: registration, login, profile updates, visitor self-registration
and staff login. Passwords are bcrypt-hashed; plaintext is never stored.
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from parkwatch.config import settings
from parkwatch.errors import NotFound, PersistenceError, Unauthorized, ValidationError
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.staff import Staff
from parkwatch.models.user import User
from parkwatch.models.vehicle import Vehicle
from parkwatch.services.plate_service import normalize_plate
from parkwatch.utils.logger import get_logger

logger = get_logger(__name__)

USER_TYPES = ("resident", "visitor")
ROLES = ("admin", "resident", "visitor", "user")
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hashes a password using bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies if a given password matches the stored hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def _check_password(password: Optional[str]):
    if not password:
        raise ValidationError("Password is required")
    if len(password.encode("utf-8")) > _BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {_BCRYPT_MAX_BYTES} bytes")


def _commit(db: Session, what: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"[AUTH] {what} rejected by constraint: {e.orig}")
        raise ValidationError("This phone number is already registered") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[AUTH] {what} failed: {e}", exc_info=True)
        raise PersistenceError("Server error") from e


def register_user(db: Session, name: Optional[str], phone: Optional[str], password: Optional[str],
                  user_type: Optional[str], unit_number: Optional[str] = None,
                  host_information: Optional[str] = None, role: str = "user") -> User:
    if not name or not phone:
        raise ValidationError("Name and phone are required")
    _check_password(password)
    if user_type not in USER_TYPES:
        raise ValidationError("Invalid userType")
    if role not in ROLES:
        raise ValidationError("Invalid role")
    if user_type == "resident" and not unit_number:
        raise ValidationError("Resident should have unitNumber")
    if user_type == "resident" and host_information:
        raise ValidationError("Resident should not have hostInformation")
    if user_type == "visitor" and unit_number:
        raise ValidationError("Visitor should not have unitNumber")
    if user_type == "visitor" and not host_information:
        raise ValidationError("Visitor should have hostInformation")

    if db.query(User).filter(User.phone == phone).first():
        raise ValidationError("This phone number is already registered")

    user = User(
        name=name,
        phone=phone,
        password_hash=hash_password(password),
        role=role,
        user_type=user_type,
        unit_number=unit_number,
        host_information=host_information,
        created_at=datetime.utcnow(),
    )
    db.add(user)
    _commit(db, f"Registration of {phone}")
    logger.info(f"[AUTH] Registered {user_type} #{user.id}")
    return user


def authenticate(db: Session, phone: Optional[str], password: Optional[str]) -> User:
    user = db.query(User).filter(User.phone == phone).first() if phone else None
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"[AUTH] Failed login for phone={phone}")
        raise Unauthorized("Invalid phone number or password")
    return user


def authenticate_staff(db: Session, staff_id: Optional[str], password: Optional[str]) -> tuple[Staff, User]:
    row = (
        db.query(Staff, User)
        .join(User, Staff.user_id == User.id)
        .filter(Staff.staff_id == staff_id)
        .first()
    ) if staff_id else None
    if not row or not verify_password(password, row[1].password_hash):
        logger.info(f"[AUTH] Failed staff login for staff_id={staff_id}")
        raise Unauthorized("Invalid staff ID or password")
    return row


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User does not exist")
    return user


def update_profile(db: Session, user_id: int, name: Optional[str] = None, phone: Optional[str] = None,
                   password: Optional[str] = None) -> User:
    """Only name, phone and password can change after registration."""
    user = get_user(db, user_id)
    if phone and phone != user.phone:
        if db.query(User).filter(User.phone == phone, User.id != user_id).first():
            raise ValidationError("This phone number is already registered")
        user.phone = phone
    if name:
        user.name = name
    if password:
        _check_password(password)
        user.password_hash = hash_password(password)
    _commit(db, f"Profile update of user #{user_id}")
    return user


def register_visitor(db: Session, full_name: Optional[str], phone: Optional[str],
                     unit_to_visit: Optional[str], region: Optional[str], license_plate: Optional[str],
                     parking_lot_id: Optional[int], now: Optional[datetime] = None) -> tuple[User, Vehicle]:
    """
    Walk-up visitor: creates a visitor account with a random password plus the
    visitor's vehicle, parked for VISITOR_DEFAULT_HOURS.
    """
    region = normalize_plate(region)
    license_plate = normalize_plate(license_plate)
    if not full_name or not phone or not unit_to_visit:
        raise ValidationError("Name, phone and unit to visit are required")
    if not region or not license_plate:
        raise ValidationError("Region and license plate are required")
    if parking_lot_id is None or not db.query(ParkingLot).filter(ParkingLot.id == parking_lot_id).first():
        raise NotFound("Parking lot not found")
    if db.query(User).filter(User.phone == phone).first():
        raise ValidationError("This phone number is already registered")
    if db.query(Vehicle).filter(Vehicle.province == region, Vehicle.license_plate == license_plate).first():
        raise ValidationError("(licensePlate, province) should be unique")

    now = now or datetime.utcnow()
    user = User(
        name=full_name,
        phone=phone,
        password_hash=hash_password(secrets.token_urlsafe(12)),
        role="user",
        user_type="visitor",
        host_information=f"Visiting Unit {unit_to_visit}",
        created_at=now,
    )
    db.add(user)
    try:
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[AUTH] Visitor registration failed for {phone}: {e}", exc_info=True)
        raise PersistenceError("Server error, visitor registration failed") from e

    vehicle = Vehicle(
        user_id=user.id,
        province=region,
        license_plate=license_plate,
        current_lot_id=parking_lot_id,
        parking_until=now + timedelta(hours=settings.VISITOR_DEFAULT_HOURS),
    )
    db.add(vehicle)
    _commit(db, f"Visitor registration of {phone}")
    logger.info(f"[AUTH] Visitor #{user.id} registered with {region}-{license_plate} in lot {parking_lot_id}")
    return user, vehicle
