# parkwatch/routers/parking_lots.py
"""Parking lots — derived occupancy and the vehicles currently parked."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.errors import NotFound
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.services import lot_service, vehicle_service

router = APIRouter()


@router.get("/parking-lots", summary="All lots with current occupancy")
def get_all_parking_lots(db: Session = Depends(get_db)):
    return {"success": True, "parkingLots": lot_service.list_lots(db)}


@router.get("/parking-lots/{lot_id}", summary="One lot with its parked vehicles")
def get_parking_lot(lot_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": lot_service.get_lot(db, lot_id)}


@router.get("/parking-lots/{lot_id}/active-vehicles", summary="Vehicles with an open parking window")
def get_active_vehicles(lot_id: int, db: Session = Depends(get_db)):
    if not db.query(ParkingLot).filter(ParkingLot.id == lot_id).first():
        raise NotFound("Parking lot not found")
    rows = vehicle_service.active_vehicles_in_lot(db, lot_id)
    return {"success": True,
            "vehicles": [vehicle_service.serialize_vehicle(v, owner=u) for v, u in rows]}
