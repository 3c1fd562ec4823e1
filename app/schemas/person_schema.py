from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal

from app.models.person import Gender, Placement, RelationshipType


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input too."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True


# --------------------------------------------------
# PERSON INPUT
# --------------------------------------------------
class PersonCreate(CamelModel):
    name: str
    gender: Gender
    birth_date: str
    death_date: Optional[str] = None
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None


class SpouseUpdate(CamelModel):
    id: str
    name: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None


class PersonUpdate(CamelModel):
    name: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None

    # edited together with the person in one save
    spouse: Optional[SpouseUpdate] = None


class AddPersonRequest(CamelModel):
    relative_to_id: str
    relationship: RelationshipType
    person_data: PersonCreate


# --------------------------------------------------
# PERSON OUTPUT
# --------------------------------------------------
class PersonFlatOut(CamelModel):
    """Descriptive fields only, no relationship columns."""

    id: str
    name: str
    gender: str
    birth_date: str
    death_date: Optional[str] = None
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None


class PersonOut(PersonFlatOut):
    parent_id: Optional[str] = None
    spouse_id: Optional[str] = None
    placement: Placement = Placement.ROOT


class TreeNodeOut(PersonOut):
    spouse: Optional[PersonFlatOut] = None
    children: List[TreeNodeOut] = []
    collapsed: bool = False


TreeNodeOut.model_rebuild()


class DeletePersonOut(CamelModel):
    message: str
    person_name: str


# --------------------------------------------------
# RELATIONSHIP PATH
# --------------------------------------------------
class RelationshipPathRequest(CamelModel):
    person1_id: str
    person2_id: str
    language: Optional[str] = None


class PathSegmentOut(CamelModel):
    person_id: str
    person_name: str
    relationship: Literal["start", "parent", "child", "spouse"]


class RelationshipPathOut(CamelModel):
    path: Optional[List[PathSegmentOut]] = None
    description: Optional[str] = None
