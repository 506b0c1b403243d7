from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, cast, func
from geoalchemy2 import Geography
from app.models.place import Place
from app.schemas.place import PlaceCreate
from app.utils.units import miles_to_meters


class CRUDPlace:
    """CRUD operations for Place model."""

    def __init__(self, model=Place):
        self.model = model

    def get_by_store_code(self, db: Session, store_code: str) -> Optional[Place]:
        stmt = select(self.model).where(self.model.store_code == store_code)
        result = db.execute(stmt)
        return result.scalars().first()

    def create(self, db: Session, *, obj_in: PlaceCreate) -> Place:
        """
        Create a new place with location conversion.
        """
        obj_data = obj_in.model_dump()
        loc = obj_data.pop("location")
        # GeoAlchemy2 expects WKT format: POINT(x y) -> POINT(lng lat)
        obj_data["location"] = f"SRID=4326;POINT({loc['lng']} {loc['lat']})"

        db_obj = self.model(**obj_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_within_radius(
        self,
        db: Session,
        *,
        lat: float,
        lng: float,
        radius_miles: float,
        limit: Optional[int] = None
    ) -> List[Place]:
        """
        Retrieve places within a radius of a point, nearest first.

        Distances are measured on the geography type, so the radius is in
        meters on the ground rather than degrees.

        Args:
            db: Database session
            lat: Center latitude
            lng: Center longitude
            radius_miles: Search radius in miles
            limit: Optional maximum number of places

        Returns:
            List of Place instances ordered by distance from the center
        """
        center = cast(func.ST_SetSRID(func.ST_MakePoint(lng, lat), 4326), Geography)
        location = cast(self.model.location, Geography)

        stmt = select(self.model).where(
            func.ST_DWithin(location, center, miles_to_meters(radius_miles))
        ).order_by(
            func.ST_Distance(location, center)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        result = db.execute(stmt)
        return list(result.scalars().all())


place = CRUDPlace(Place)
