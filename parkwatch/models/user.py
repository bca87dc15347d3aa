# parkwatch/models/user.py
"""
Users table — residents, visitors and staff accounts.
Passwords are stored as bcrypt hashes only (see auth_service).
"""

from sqlalchemy import Column, Integer, String, DateTime
from parkwatch.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(200), nullable=False)
    role = Column(String(20), default="user", nullable=False)        # admin | resident | visitor | user
    user_type = Column(String(20), nullable=False)                   # resident | visitor
    unit_number = Column(String(50))                                 # residents only
    host_information = Column(String(200))                           # visitors only
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<User {self.id} phone={self.phone} type={self.user_type}>"
