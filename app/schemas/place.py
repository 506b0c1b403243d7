from pydantic import BaseModel, Field
from typing import Optional, List
from app.schemas.common import Location


class PlaceCreate(BaseModel):
    """Schema for creating a place."""
    store_code: Optional[str] = Field(None, max_length=64)
    business_name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None
    location: Location


class PlaceResponse(BaseModel):
    """Schema for a place returned by the radius lookup."""
    id: int
    store_code: Optional[str] = None
    business_name: str
    latitude: float
    longitude: float
    address: Optional[str] = None


class PlaceSearchQuery(BaseModel):
    latitude: float
    longitude: float
    radius: int
    radius_meters: float


class PlaceSearchResponse(BaseModel):
    """Schema for the radius lookup response."""
    success: bool = True
    data: List[PlaceResponse]
    count: int
    query: PlaceSearchQuery
