from datetime import datetime
from typing import Optional

from app.schemas.person_schema import CamelModel


class ActivityLogOut(CamelModel):
    id: int
    timestamp: datetime
    ip_address: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    action: str
    details: Optional[str] = None
    city: Optional[str] = None
    browser: Optional[str] = None


class VisitorCountOut(CamelModel):
    count: int


# --------------------------------------------------
# LOCATIONS
# --------------------------------------------------
class GeocodeRequest(CamelModel):
    location: str


class CoordsOut(CamelModel):
    lat: float
    lng: float


class LocationSuggestionRequest(CamelModel):
    query: str
