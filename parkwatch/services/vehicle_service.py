# parkwatch/services/vehicle_service.py
"""
Vehicle registry helpers.
Used by the vehicles and parking-lots routers.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parkwatch.errors import NotFound, PersistenceError, ValidationError
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.user import User
from parkwatch.models.vehicle import Vehicle
from parkwatch.schemas.vehicle import VehicleOut
from parkwatch.services.pass_status import format_time_remaining
from parkwatch.services.plate_service import normalize_plate
from parkwatch.utils.logger import get_logger

logger = get_logger(__name__)


def lookup_vehicle_by_plate(db: Session, province: str, license_plate: str) -> Optional[Vehicle]:
    """Find a registered vehicle by province + plate. Returns None if not found."""
    return db.query(Vehicle).filter(
        Vehicle.province == normalize_plate(province),
        Vehicle.license_plate == normalize_plate(license_plate),
    ).first()


def is_registered(db: Session, province: str, license_plate: str) -> bool:
    return lookup_vehicle_by_plate(db, province, license_plate) is not None


def register_vehicle(db: Session, user_id: Optional[int], province: Optional[str],
                     license_plate: Optional[str], lot_id: Optional[int],
                     parking_until: Optional[datetime]) -> Vehicle:
    province = normalize_plate(province)
    license_plate = normalize_plate(license_plate)
    if not province or not license_plate:
        raise ValidationError("Province and license plate are required")
    if not db.query(User).filter(User.id == user_id).first():
        raise NotFound("User does not exist")
    if lot_id is not None and not db.query(ParkingLot).filter(ParkingLot.id == lot_id).first():
        raise NotFound(f"Parking lot {lot_id} not found")
    if is_registered(db, province, license_plate):
        raise ValidationError("(licensePlate, province) should be unique")

    vehicle = Vehicle(user_id=user_id, province=province, license_plate=license_plate,
                      current_lot_id=lot_id, parking_until=parking_until)
    try:
        db.add(vehicle)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Vehicle registration failed for {province}-{license_plate}: {e}", exc_info=True)
        raise PersistenceError("Server error") from e

    logger.info(f"Registered vehicle {province}-{license_plate} for user {user_id}")
    return vehicle


def delete_vehicle(db: Session, province: str, license_plate: str) -> None:
    vehicle = lookup_vehicle_by_plate(db, province, license_plate)
    if not vehicle:
        raise NotFound("Vehicle not found")
    try:
        db.delete(vehicle)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Vehicle delete failed for {province}-{license_plate}: {e}", exc_info=True)
        raise PersistenceError("Server error") from e
    logger.info(f"Removed vehicle {vehicle.province}-{vehicle.license_plate}")


def list_user_vehicles(db: Session, user_id: int) -> list[Vehicle]:
    if not db.query(User).filter(User.id == user_id).first():
        raise NotFound("User does not exist")
    return db.query(Vehicle).filter(Vehicle.user_id == user_id).order_by(Vehicle.id).all()


def list_vehicles(db: Session) -> list[Vehicle]:
    return db.query(Vehicle).order_by(Vehicle.id).all()


def active_vehicles_in_lot(db: Session, lot_id: int, now: Optional[datetime] = None) -> list[tuple[Vehicle, User]]:
    """Vehicles in the lot whose parking window is still open, soonest to expire first."""
    now = now or datetime.utcnow()
    return (
        db.query(Vehicle, User)
        .join(User, Vehicle.user_id == User.id)
        .filter(Vehicle.current_lot_id == lot_id, Vehicle.parking_until > now)
        .order_by(Vehicle.parking_until.asc())
        .all()
    )


def serialize_vehicle(vehicle: Vehicle, now: Optional[datetime] = None, owner: Optional[User] = None) -> VehicleOut:
    now = now or datetime.utcnow()
    return VehicleOut(
        vehicle_id=vehicle.id,
        user_id=vehicle.user_id,
        province=vehicle.province,
        license_plate=vehicle.license_plate,
        current_lot_id=vehicle.current_lot_id,
        parking_until=vehicle.parking_until,
        time_remaining=format_time_remaining(vehicle.parking_until, now) if vehicle.parking_until else None,
        owner_name=owner.name if owner else None,
        unit_number=owner.unit_number if owner else None,
        user_type=owner.user_type if owner else None,
    )
