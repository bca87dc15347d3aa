# parkwatch/models/staff.py
"""Staff assignments — links an admin user account to the lot they manage."""

from sqlalchemy import Column, Integer, String, ForeignKey
from parkwatch.database import Base


class Staff(Base):
    __tablename__ = "staff"

    staff_id = Column(String(50), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"))

    def __repr__(self):
        return f"<Staff {self.staff_id} lot={self.lot_id}>"
