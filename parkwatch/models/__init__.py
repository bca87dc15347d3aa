# ParkWatch — Database Models
# Import all models here for SQLAlchemy discovery

from parkwatch.models.user import User                   # noqa
from parkwatch.models.parking_lot import ParkingLot      # noqa
from parkwatch.models.vehicle import Vehicle             # noqa
from parkwatch.models.visitor_pass import VisitorPass    # noqa
from parkwatch.models.violation import Violation         # noqa
from parkwatch.models.payment import Payment             # noqa
from parkwatch.models.staff import Staff                 # noqa
from parkwatch.models.report import Report               # noqa
