# parkwatch/routers/users.py
"""User registration, profile, and walk-up visitor registration."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.errors import Unauthorized
from parkwatch.routers.auth import current_user_id
from parkwatch.schemas.user import UserOut, UserRegister, UserUpdate, VisitorRegister
from parkwatch.services import auth_service, vehicle_service

router = APIRouter()


@router.post("/users/register", summary="Register a resident or visitor account")
def register_user(body: UserRegister, db: Session = Depends(get_db)):
    user = auth_service.register_user(
        db, body.name, body.phone, body.password, body.user_type,
        body.unit_number, body.host_information, body.role,
    )
    return {"success": True, "user": UserOut.model_validate(user)}


@router.get("/users/{user_id}", summary="User profile with registered vehicles")
def get_user_information(user_id: int, db: Session = Depends(get_db)):
    user = auth_service.get_user(db, user_id)
    vehicles = vehicle_service.list_user_vehicles(db, user_id)
    return {
        "success": True,
        "userInfo": UserOut.model_validate(user),
        "vehicles": [vehicle_service.serialize_vehicle(v) for v in vehicles],
    }


@router.put("/users/{user_id}", summary="Update name, phone or password")
def update_user(user_id: int, body: UserUpdate, caller_id: int = Depends(current_user_id),
                db: Session = Depends(get_db)):
    if caller_id != user_id:
        raise Unauthorized("You can only update your own profile")
    user = auth_service.update_profile(db, user_id, body.name, body.phone, body.password)
    return {"success": True, "user": UserOut.model_validate(user)}


@router.post("/visitors/register", summary="Walk-up visitor registration")
def register_visitor(body: VisitorRegister, db: Session = Depends(get_db)):
    user, vehicle = auth_service.register_visitor(
        db, body.full_name, body.phone, body.unit_to_visit,
        body.region, body.license_plate, body.parking_lot_id,
    )
    return {
        "success": True,
        "message": "Visitor information recorded successfully",
        "user": UserOut.model_validate(user),
        "vehicle": vehicle_service.serialize_vehicle(vehicle, owner=user),
    }
