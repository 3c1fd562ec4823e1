from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime
from app.database import Base


class ActivityLog(Base):
    """
    Append-only audit trail. Written by the app, only read for display.
    """

    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    ip_address = Column(String, nullable=True)
    user_id = Column(String, nullable=True)
    user_name = Column(String, nullable=True)

    # VISIT, LOGIN_SUCCESS, CREATE_PERSON, ...
    action = Column(String, nullable=False, index=True)
    details = Column(Text, nullable=True)

    city = Column(String, nullable=True)
    browser = Column(String, nullable=True)
