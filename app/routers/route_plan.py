from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_optional_db
from app.schemas.route_plan import RoutePlanRequest, RoutePlanResponse
from app.services.route_planning import route_planning_service
from app.core.logging_config import logger

router = APIRouter()


@router.post("/plan", response_model=RoutePlanResponse)
def plan_route(
    request_data: RoutePlanRequest,
    db: Optional[Session] = Depends(get_optional_db)
):
    """
    Plan a visit order and drivable path from a start point.
    
    Stops come from `waypoints` when supplied, otherwise from the places within
    `radius` miles of `start`. Remote failures do not fail the request: the
    response carries `notes` and, when no path could be fetched,
    `straight_line=true` with `display_geometry` drawn through the stops.
    
    Args:
        request_data: Route planning parameters
        db: Database session (None when no database is configured)
    
    Returns:
        Planned route
    
    Example:
        ```json
        {
            "start": {"lat": 30.3944, "lng": -88.8853},
            "radius": 10
        }
        ```
    """
    try:
        logger.info(
            f"Route plan requested: start=({request_data.start.lat}, {request_data.start.lng}), "
            f"waypoints={'lookup' if request_data.waypoints is None else len(request_data.waypoints)}"
        )
        result = route_planning_service.plan_route(db=db, request=request_data)
        logger.info(f"Route planned: stops={len(result.stops)}, notes={len(result.notes)}")
        return result
    except Exception as e:
        logger.error(f"Error planning route: {type(e).__name__}: {str(e)}")
        raise
