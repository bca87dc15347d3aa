# parkwatch/routers/visitor_passes.py
"""Visitor pass issuance, history and quota."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.schemas.visitor_pass import VisitorPassCreate
from parkwatch.services import pass_service

router = APIRouter()


@router.post("/visitorPasses", summary="Issue a visitor pass")
def apply_visitor_pass(body: VisitorPassCreate, db: Session = Depends(get_db)):
    visitor_pass = pass_service.issue_visitor_pass(db, body.user_id, body.hours, body.visitor_plate)
    return {
        "success": True,
        "message": "Visitor pass issued",
        "visitorPass": pass_service.serialize_pass(visitor_pass),
    }


@router.get("/visitorPasses/user/{user_id}", summary="A user's visitor passes, newest first")
def get_user_visitor_passes(user_id: int, db: Session = Depends(get_db)):
    passes = pass_service.list_user_passes(db, user_id)
    return {"success": True, "visitorPasses": [pass_service.serialize_pass(p) for p in passes]}


@router.get("/visitorPasses/quota/{user_id}", summary="Remaining passes per tier + history")
def get_visitor_pass_quota(user_id: int, db: Session = Depends(get_db)):
    quota = pass_service.get_pass_quota(db, user_id)
    history = pass_service.list_user_passes(db, user_id)
    return {
        "success": True,
        "quota": quota,
        "passHistory": [pass_service.serialize_pass(p) for p in history],
    }
