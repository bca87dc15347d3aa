# parkwatch/routers/violations.py
"""Violation tickets — create, list, look up, change status."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.schemas.violation import ViolationCreate, ViolationOut, ViolationStatusUpdate
from parkwatch.services import violation_service

router = APIRouter()


def _out(violations):
    return [ViolationOut.model_validate(v) for v in violations]


@router.post("/violations", summary="Issue a violation ticket")
def create_violation(body: ViolationCreate, db: Session = Depends(get_db)):
    violation = violation_service.create_violation(
        db, body.province, body.license_plate, body.reason, body.lot_id, body.vehicle_id,
    )
    return {"success": True, "message": "Violation record created successfully",
            "ticketId": violation.ticket_id}


@router.get("/violations", summary="All violations — filter by lot and date range")
def list_violations(
    lot_id: Optional[int] = Query(None, alias="lotId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    limit: int = 200,
    db: Session = Depends(get_db),
):
    return {"success": True,
            "violations": _out(violation_service.list_violations(db, lot_id, start_date, end_date, limit))}


@router.get("/violations/plate", summary="Violations for one plate")
def find_by_plate(
    license_plate: Optional[str] = Query(None, alias="licensePlate"),
    province: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return {"success": True,
            "violations": _out(violation_service.find_violations_by_plate(db, license_plate, province))}


@router.get("/violations/user/{user_id}", summary="Violations against a user's vehicles")
def list_user_violations(
    user_id: int,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    return {"success": True,
            "violations": _out(violation_service.list_user_violations(db, user_id, start_date, end_date))}


@router.get("/violations/{ticket_id}", summary="One violation by ticket ID")
def get_violation(ticket_id: int, db: Session = Depends(get_db)):
    return {"success": True,
            "violation": ViolationOut.model_validate(violation_service.get_violation(db, ticket_id))}


@router.put("/violations/{ticket_id}/status", summary="Change a violation's status")
def update_violation_status(ticket_id: int, body: ViolationStatusUpdate, db: Session = Depends(get_db)):
    violation = violation_service.update_violation_status(db, ticket_id, body.status)
    return {"success": True, "message": f"Status updated to {violation.status}"}
