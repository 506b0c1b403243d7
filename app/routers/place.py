from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.config import settings
from app.database import get_db
from app.schemas.place import PlaceSearchResponse
from app.services.place import place_service
from app.core.logging_config import logger

router = APIRouter()


@router.get("", response_model=PlaceSearchResponse)
def search_places(
    lat: float = Query(..., ge=-90, le=90, description="Center latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Center longitude"),
    radius: int = Query(
        settings.DEFAULT_SEARCH_RADIUS_MILES,
        ge=settings.MIN_SEARCH_RADIUS_MILES,
        le=settings.MAX_SEARCH_RADIUS_MILES,
        description="Search radius in miles"
    ),
    db: Session = Depends(get_db)
):
    """
    Find places within a radius of a point, nearest first.
    
    Args:
        lat: Center latitude
        lng: Center longitude
        radius: Search radius in whole miles (1-50)
        db: Database session
    
    Returns:
        Matching places with the echoed query
    """
    logger.info(f"Searching places: lat={lat}, lng={lng}, radius={radius}mi")
    return place_service.search(db=db, lat=lat, lng=lng, radius_miles=radius)
