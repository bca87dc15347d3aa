# parkwatch/models/payment.py
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from parkwatch.database import Base


class Payment(Base):
    __tablename__ = "payments"

    pay_id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    card_number = Column(String(32))          # masked, last four digits only
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    lot_id = Column(Integer, ForeignKey("parking_lots.id"))
    ticket_id = Column(Integer, ForeignKey("violations.ticket_id"), index=True)
    status = Column(String(20), default="completed", nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Payment {self.pay_id} amount={self.amount} ticket={self.ticket_id}>"
