# parkwatch/routers/reports.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.schemas.report import ReportCreate, ReportOut
from parkwatch.services.report_service import generate_report

router = APIRouter()


@router.post("/admin/reports", status_code=status.HTTP_201_CREATED, summary="Generate a lot report")
def create_report(body: ReportCreate, db: Session = Depends(get_db)):
    report = generate_report(db, body.lot_id, body.description, body.type)
    return {"success": True, "data": ReportOut.model_validate(report)}
