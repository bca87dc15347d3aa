# parkwatch/models/visitor_pass.py
"""
Visitor passes issued by residents.
valid_until is written once at issuance; the effective active/expired status
is derived on read by services/pass_status.py and never written back.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from parkwatch.database import Base


class VisitorPass(Base):
    __tablename__ = "visitor_passes"
    __table_args__ = (Index("ix_visitor_passes_quota", "user_id", "hours", "valid_until"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    hours = Column(Integer, nullable=False)                 # tier: 8 | 24 | 48
    visitor_plate = Column(String(50), nullable=False, index=True)  # REGION-PLATE
    status = Column(String(20), default="active", nullable=False)
    created_at = Column(DateTime, nullable=False)
    valid_until = Column(DateTime)

    def __repr__(self):
        return f"<VisitorPass {self.id} plate={self.visitor_plate} hours={self.hours}>"
