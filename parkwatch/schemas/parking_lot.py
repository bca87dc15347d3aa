# parkwatch/schemas/parking_lot.py
from typing import Optional
from parkwatch.schemas.base import CamelModel
from parkwatch.schemas.vehicle import VehicleOut


class ParkingLotOut(CamelModel):
    lot_id: int
    lot_name: str
    address: Optional[str] = None
    capacity: int
    current_occupancy: int
    current_remain: int
    occupancy_percent: float


class ParkingLotDetailOut(ParkingLotOut):
    vehicles: list[VehicleOut] = []
