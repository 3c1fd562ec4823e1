from fastapi import APIRouter, HTTPException

from app.core import genai_client
from app.schemas.log_schema import (
    CoordsOut,
    GeocodeRequest,
    LocationSuggestionRequest,
)


router = APIRouter(prefix="/api", tags=["Locations"])


@router.post("/geocode", response_model=CoordsOut)
def geocode(payload: GeocodeRequest):
    location = payload.location.strip()
    if not location:
        raise HTTPException(400, "Location is required.")

    coords = genai_client.geocode(location)
    if coords is None:
        raise HTTPException(502, f"Failed to geocode location: {location}")
    return coords


@router.post("/location-suggestions", response_model=list[str])
def location_suggestions(payload: LocationSuggestionRequest):
    query = payload.query.strip()
    if not query:
        raise HTTPException(400, "Query is required.")

    return genai_client.location_suggestions(query)
