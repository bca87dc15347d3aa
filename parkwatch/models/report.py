# parkwatch/models/report.py
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from parkwatch.database import Base


class Report(Base):
    __tablename__ = "reports"

    report_id = Column(Integer, primary_key=True, autoincrement=True)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"), nullable=False)
    description = Column(Text)
    type = Column(String(50), nullable=False)
    date_generated = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Report {self.report_id} lot={self.lot_id} type={self.type}>"
