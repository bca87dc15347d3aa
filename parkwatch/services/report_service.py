# parkwatch/services/report_service.py
"""Staff-generated lot reports."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parkwatch.errors import NotFound, PersistenceError, ValidationError
from parkwatch.models.parking_lot import ParkingLot
from parkwatch.models.report import Report
from parkwatch.utils.logger import get_logger

logger = get_logger(__name__)


def generate_report(db: Session, lot_id: Optional[int], description: Optional[str],
                    report_type: Optional[str]) -> Report:
    if lot_id is None or not report_type:
        raise ValidationError("Lot and report type are required")
    if not db.query(ParkingLot).filter(ParkingLot.id == lot_id).first():
        raise NotFound("Parking lot not found")

    report = Report(lot_id=lot_id, description=description, type=report_type,
                    date_generated=datetime.utcnow())
    try:
        db.add(report)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Report generation failed for lot {lot_id}: {e}", exc_info=True)
        raise PersistenceError("Failed to generate report") from e

    logger.info(f"Report #{report.report_id} ({report_type}) generated for lot {lot_id}")
    return report
