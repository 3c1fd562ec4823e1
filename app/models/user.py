import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime

from app.database import Base


class Role(str, enum.Enum):
    OWNER = "OWNER"
    CONTRIBUTOR = "CONTRIBUTOR"
    OBSERVER = "OBSERVER"


class User(Base):
    __tablename__ = "users"

    id = Column(
        String,
        primary_key=True,
        default=lambda: f"user-{uuid.uuid4().hex}",
        index=True
    )

    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.CONTRIBUTOR.value)

    # Nullable: a contributor can be created before a password is set
    hashed_password = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
