# parkwatch/routers/verification.py
"""
Plate verification for enforcement staff.
GET /verify-vehicle is advisory and writes nothing; POST /verify-vehicle/ticket
also writes a pending ticket when the plate fails.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.errors import ValidationError
from parkwatch.services import pass_service, vehicle_service
from parkwatch.services.plate_service import verify_plate
from parkwatch.services.violation_service import ticket_from_verification

router = APIRouter()


@router.get("/verify-vehicle", summary="Check whether a plate may park in a lot right now")
def verify_vehicle(
    plate: Optional[str] = None,
    region: Optional[str] = None,
    lot_id: Optional[int] = Query(None, alias="lotId"),
    db: Session = Depends(get_db),
):
    result = verify_plate(db, plate, region, lot_id)
    label = f"{result.province}-{result.license_plate}"

    if result.vehicle is None and result.visitor_pass is None:
        where = f" in lot ID {lot_id}" if lot_id is not None else ""
        return {
            **result.as_dict(),
            "success": False,
            "message": f"No vehicle found with license plate {label}{where}",
        }

    return {
        **result.as_dict(),
        "success": True,
        "message": "Vehicle found",
        "validUntil": result.valid_until,
        "vehicle": vehicle_service.serialize_vehicle(result.vehicle) if result.vehicle else None,
        "visitorPass": pass_service.serialize_pass(result.visitor_pass) if result.visitor_pass else None,
    }


@router.post("/verify-vehicle/ticket", summary="Verify a plate and ticket it if it may not park")
def verify_and_ticket(
    plate: Optional[str] = None,
    region: Optional[str] = None,
    lot_id: Optional[int] = Query(None, alias="lotId"),
    db: Session = Depends(get_db),
):
    if lot_id is None:
        raise ValidationError("Parking lot is required")
    result = verify_plate(db, plate, region, lot_id)
    if result.valid:
        return {**result.as_dict(), "success": True, "ticketed": False,
                "message": f"{result.province}-{result.license_plate} may park until {result.valid_until}"}

    violation = ticket_from_verification(db, result, lot_id)
    return {**result.as_dict(), "success": True, "ticketed": True, "ticketId": violation.ticket_id,
            "message": f"Ticket #{violation.ticket_id} issued: {violation.reason}"}
