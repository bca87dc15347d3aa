# parkwatch/models/vehicle.py
"""
Registered vehicles table.
(province, license_plate) is the natural key. A vehicle counts as parked
while parking_until is in the future; there is no check-in/check-out event.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from parkwatch.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = (UniqueConstraint("province", "license_plate", name="uq_vehicle_plate"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    province = Column(String(20), nullable=False)
    license_plate = Column(String(20), nullable=False, index=True)
    current_lot_id = Column(Integer, ForeignKey("parking_lots.id"), index=True)
    parking_until = Column(DateTime)

    def __repr__(self):
        return f"<Vehicle {self.province}-{self.license_plate} lot={self.current_lot_id}>"
