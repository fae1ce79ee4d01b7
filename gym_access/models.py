from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Text
from sqlalchemy.sql import func
from .db import Base

class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True)
    name = Column(String)
    email = Column(String, unique=True, nullable=False)
    hashed_password = Column(String)
    role = Column(String, nullable=False, default="member")
    rfid_card_number = Column(String, unique=True)
    membership_type = Column(String)
    membership_expiry = Column(TIMESTAMP)
    membership_status = Column(String)
    last_check_in = Column(TIMESTAMP)
    created_at = Column(TIMESTAMP, server_default=func.now())

class AccessLog(Base):
    __tablename__ = "access_logs"
    id = Column(String, primary_key=True)
    # user id, or "unknown" for unregistered cards
    user_id = Column(String, nullable=False, index=True)
    timestamp = Column(TIMESTAMP, nullable=False, index=True)
    status = Column(String, nullable=False)
    reason = Column(Text)
    device_id = Column(String)
    processed_by = Column(String, ForeignKey("users.id"))
