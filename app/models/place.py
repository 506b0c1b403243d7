from sqlalchemy import Column, Integer, String
from geoalchemy2 import Geometry
from app.database import Base, TimestampMixin

class Place(Base, TimestampMixin):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, index=True)
    store_code = Column(String, nullable=True, index=True)
    business_name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    # POINT(lng lat) in WGS84
    location = Column(Geometry("POINT", srid=4326), nullable=False)
