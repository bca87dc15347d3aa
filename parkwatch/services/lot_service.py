# parkwatch/services/lot_service.py
"""
Parking lot occupancy.
Nothing is counted incrementally: occupied = vehicles in the lot whose
parking_until is still in the future, available = total - occupied (floored at 0).
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from parkwatch.errors import NotFound
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.vehicle import Vehicle
from parkwatch.schemas.parking_lot import ParkingLotDetailOut, ParkingLotOut
from parkwatch.services.vehicle_service import serialize_vehicle


def _occupancy(lot: ParkingLot, occupied: int) -> dict:
    total = lot.total_spaces or 0
    return {
        "lot_id": lot.id,
        "lot_name": lot.lot_name,
        "address": lot.address,
        "capacity": total,
        "current_occupancy": occupied,
        "current_remain": max(0, total - occupied),
        "occupancy_percent": round(occupied / total * 100, 1) if total else 0,
    }


def list_lots(db: Session, now: Optional[datetime] = None) -> list[ParkingLotOut]:
    now = now or datetime.utcnow()
    rows = (
        db.query(ParkingLot, func.count(Vehicle.id))
        .outerjoin(Vehicle, and_(Vehicle.current_lot_id == ParkingLot.id, Vehicle.parking_until > now))
        .group_by(ParkingLot.id)
        .order_by(ParkingLot.id)
        .all()
    )
    return [ParkingLotOut(**_occupancy(lot, occupied)) for lot, occupied in rows]


def get_lot(db: Session, lot_id: int, now: Optional[datetime] = None) -> ParkingLotDetailOut:
    now = now or datetime.utcnow()
    lot = db.query(ParkingLot).filter(ParkingLot.id == lot_id).first()
    if not lot:
        raise NotFound("Parking lot not found")
    parked = (
        db.query(Vehicle)
        .filter(Vehicle.current_lot_id == lot_id, Vehicle.parking_until > now)
        .order_by(Vehicle.parking_until.asc())
        .all()
    )
    return ParkingLotDetailOut(
        **_occupancy(lot, len(parked)),
        vehicles=[serialize_vehicle(v, now) for v in parked],
    )
