from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    DATABASE_URL: Optional[str] = None

    # OpenRouteService (optimization + directions)
    ORS_API_KEY: Optional[str] = None
    ORS_BASE_URL: str = "https://api.openrouteservice.org"
    ORS_PROFILE: str = "driving-car"
    ORS_OPTIMIZATION_TIMEOUT_SECONDS: float = 15.0
    ORS_DIRECTIONS_TIMEOUT_SECONDS: float = 10.0

    # Encoded polyline settings for optimizer geometry
    POLYLINE_PRECISION: float = 1e5
    OPTIMIZER_GEOMETRY_AXIS_ORDER: str = "latlng"  # "latlng" or "lnglat"

    DEFAULT_SEARCH_RADIUS_MILES: int = 10
    MIN_SEARCH_RADIUS_MILES: int = 1
    MAX_SEARCH_RADIUS_MILES: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
