# parkwatch/models/parking_lot.py
"""
Parking lots. Occupancy is not stored: lot_service counts vehicles whose
parking_until is still in the future.
"""

from sqlalchemy import Column, Integer, String
from parkwatch.database import Base


class ParkingLot(Base):
    __tablename__ = "parking_lots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lot_name = Column(String(100), nullable=False)
    address = Column(String(200))
    total_spaces = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<ParkingLot {self.id} {self.lot_name} spaces={self.total_spaces}>"
