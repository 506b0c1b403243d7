from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.core.config import settings
from app.database import get_optional_db
from app.routers import place, route_plan
from app.core.logging_config import logger

app = FastAPI(
    title="Waffle Route API", 
    version="1.0.0",
    redirect_slashes=False  # Disable automatic redirects to prevent POST data loss
)

# Configure CORS for the map frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(place.router, prefix="/api/places", tags=["Places"])
app.include_router(route_plan.router, prefix="/api/routes", tags=["Routes"])


@app.get("/health")
def health_check(db: Session = Depends(get_optional_db)):
    if db is None:
        return {
            "status": "healthy",
            "database": "not_configured",
            "routing": "configured" if settings.ORS_API_KEY else "not_configured"
        }
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected",
            "routing": "configured" if settings.ORS_API_KEY else "not_configured"
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy"
        )
