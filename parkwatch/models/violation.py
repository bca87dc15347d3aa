# parkwatch/models/violation.py
"""
Parking violation tickets.
Status: pending → paid | appealed | resolved (see violation_service).
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from parkwatch.database import Base


class Violation(Base):
    __tablename__ = "violations"

    ticket_id = Column(Integer, primary_key=True, autoincrement=True)
    province = Column(String(20), nullable=False)
    license_plate = Column(String(20), nullable=False, index=True)
    reason = Column(String(200), nullable=False)
    time = Column(DateTime, nullable=False, index=True)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"))
    status = Column(String(20), default="pending", nullable=False)

    def __repr__(self):
        return f"<Violation {self.ticket_id} {self.province}-{self.license_plate} status={self.status}>"
