from typing import Any, List
from fastapi import HTTPException, status
from geoalchemy2.shape import to_shape
from shapely.geometry import Point
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.logging_config import logger
from app.crud import place as place_crud
from app.models.place import Place
from app.schemas.place import PlaceResponse, PlaceSearchQuery, PlaceSearchResponse
from app.services.routing_engine.types import GeoPoint, Waypoint
from app.utils.units import miles_to_meters


class PlaceService:
    """
    Service layer for the nearby-place lookup.

    Finds places within a radius and converts them into response schemas
    or routing waypoints.
    """

    def __init__(self):
        self.crud = place_crud

    def get_nearby_places(
        self,
        db: Session,
        lat: float,
        lng: float,
        radius_miles: int
    ) -> List[Place]:
        """
        Get places within `radius_miles` of (lat, lng), nearest first.

        Raises:
            HTTPException 503: If the database query fails
        """
        try:
            places = self.crud.get_within_radius(
                db=db,
                lat=lat,
                lng=lng,
                radius_miles=radius_miles
            )
        except SQLAlchemyError as e:
            logger.error(f"Place lookup failed: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Place lookup is currently unavailable"
            )

        logger.info(f"Found {len(places)} places within {radius_miles}mi of ({lat}, {lng})")
        return places

    def search(
        self,
        db: Session,
        lat: float,
        lng: float,
        radius_miles: int
    ) -> PlaceSearchResponse:
        """
        Radius search formatted for the API.

        Args:
            db: Database session
            lat: Center latitude
            lng: Center longitude
            radius_miles: Search radius in miles

        Returns:
            PlaceSearchResponse with the places and the echoed query
        """
        places = self.get_nearby_places(db, lat, lng, radius_miles)
        data = [self.to_response(place) for place in places]

        return PlaceSearchResponse(
            data=data,
            count=len(data),
            query=PlaceSearchQuery(
                latitude=lat,
                longitude=lng,
                radius=radius_miles,
                radius_meters=miles_to_meters(radius_miles)
            )
        )

    def to_response(self, place: Place) -> PlaceResponse:
        point = self.geometry_to_point(place.location)
        return PlaceResponse(
            id=place.id,
            store_code=place.store_code,
            business_name=place.business_name,
            latitude=point.lat,
            longitude=point.lng,
            address=place.address
        )

    def to_waypoint(self, place: Place) -> Waypoint:
        return Waypoint(
            id=place.id,
            point=self.geometry_to_point(place.location),
            name=place.business_name,
            code=place.store_code,
            address=place.address
        )

    def geometry_to_point(self, geometry: Any) -> GeoPoint:
        """
        Convert a PostGIS point to a GeoPoint.

        Args:
            geometry: GeoAlchemy2 WKBElement or WKTElement

        Returns:
            GeoPoint (latitude-first)
        """
        if geometry is None:
            raise ValueError("Geometry is None")

        # Convert WKBElement to shapely shape
        shape = to_shape(geometry)

        if not isinstance(shape, Point):
            raise ValueError(f"Expected Point geometry, got {type(shape)}")

        return GeoPoint(lat=shape.y, lng=shape.x)


place_service = PlaceService()
