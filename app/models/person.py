import enum
from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, ForeignKey

from app.database import Base


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class Placement(str, enum.Enum):
    """
    Where a person hangs in the hierarchy.

    ROOT   -> no hierarchical parent (root candidate)
    CHILD  -> parent_id points at the parent
    SPOUSE -> attached only through a spouse link; never a child, never a root
    """

    ROOT = "ROOT"
    CHILD = "CHILD"
    SPOUSE = "SPOUSE"


class Person(Base):
    __tablename__ = "persons"

    id = Column(String, primary_key=True, index=True)

    name = Column(String, nullable=False)
    gender = Column(String, nullable=False)
    birth_date = Column(String, nullable=False)
    death_date = Column(String, nullable=True)

    photo_url = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)

    # ------------------------------------
    # Hierarchy + pairing
    # ------------------------------------
    placement = Column(String, default=Placement.ROOT.value, nullable=False)

    parent_id = Column(String, ForeignKey("persons.id"), nullable=True, index=True)
    spouse_id = Column(String, ForeignKey("persons.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# Columns a caller may overwrite through an update
DESCRIPTIVE_FIELDS = (
    "name",
    "gender",
    "birth_date",
    "death_date",
    "photo_url",
    "bio",
    "location",
)


class RelationshipType(str, enum.Enum):
    """How a newly added person relates to the person it is added to."""

    CHILD = "CHILD"
    SPOUSE = "SPOUSE"
    SIBLING = "SIBLING"
    PARENT = "PARENT"
