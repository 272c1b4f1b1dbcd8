"""Pydantic schemas for place search responses."""

from typing import Optional

from pydantic import BaseModel, Field


class PlaceResponse(BaseModel):
    source: str = Field(..., description="google_autocomplete|google_text|google_nearby|mapmyindia|nominatim")
    place_id: str
    name: str = ""
    address: str = ""
    formatted: str = ""
    locality: str = ""
    city: str = ""
    state: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    confidence: float = Field(..., ge=0.0, le=1.0)


class ReverseGeocodeResponse(BaseModel):
    address: str
    lat: float
    lng: float


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    providers: dict[str, bool] = Field(default_factory=dict, description="source -> credentials present")
