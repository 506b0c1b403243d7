"""
Route planning package.

This package provides modular components for:
- Visit ordering via the OpenRouteService optimizer
- Path geometry via OpenRouteService directions
- A local nearest-neighbor fallback solver
- Reconciling all of the above into one RouteArtifact per request
"""

from .exceptions import (
    OptimizationUnavailable,
    PathUnavailable,
    RoutingConfigurationError,
    RoutingError,
)
from .types import (
    DiagnosticNote,
    GeometrySource,
    GeoPoint,
    NoteCode,
    OrderSource,
    RouteArtifact,
    RouteStatistics,
    Waypoint,
)
from .nearest_neighbor import NearestNeighborSolver
from .optimization_client import ORSOptimizationClient, OptimizationResult
from .directions_client import ORSDirectionsClient, PathResult
from .planner import RoutePlanner

__all__ = [
    "RoutingError",
    "RoutingConfigurationError",
    "OptimizationUnavailable",
    "PathUnavailable",
    "GeoPoint",
    "Waypoint",
    "RouteStatistics",
    "RouteArtifact",
    "DiagnosticNote",
    "NoteCode",
    "OrderSource",
    "GeometrySource",
    "NearestNeighborSolver",
    "ORSOptimizationClient",
    "OptimizationResult",
    "ORSDirectionsClient",
    "PathResult",
    "RoutePlanner",
]
