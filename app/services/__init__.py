from app.services.place import place_service
from .route_planning import route_planning_service

__all__ = ["place_service", "route_planning_service"]
