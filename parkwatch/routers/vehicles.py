# parkwatch/routers/vehicles.py
"""Registered vehicles — list, register, remove."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.schemas.vehicle import VehicleCreate
from parkwatch.services import vehicle_service

router = APIRouter()


@router.get("/vehicles", summary="List all registered vehicles")
def list_vehicles(db: Session = Depends(get_db)):
    return {"success": True,
            "vehicles": [vehicle_service.serialize_vehicle(v) for v in vehicle_service.list_vehicles(db)]}


@router.get("/vehicles/user/{user_id}", summary="A user's vehicles")
def list_user_vehicles(user_id: int, db: Session = Depends(get_db)):
    vehicles = vehicle_service.list_user_vehicles(db, user_id)
    return {"success": True, "vehicles": [vehicle_service.serialize_vehicle(v) for v in vehicles]}


@router.post("/vehicles", summary="Register a vehicle")
def register_vehicle(body: VehicleCreate, db: Session = Depends(get_db)):
    vehicle = vehicle_service.register_vehicle(
        db, body.user_id, body.province, body.license_plate, body.lot_id, body.parking_until,
    )
    return {"success": True, "vehicle": vehicle_service.serialize_vehicle(vehicle)}


@router.delete("/vehicles/{province}/{license_plate}", summary="Remove a vehicle")
def remove_vehicle(province: str, license_plate: str, db: Session = Depends(get_db)):
    vehicle_service.delete_vehicle(db, province, license_plate)
    return {"success": True, "message": "Vehicle deleted successfully"}
