"""
Exceptions raised by the routing engine.

Only RoutingConfigurationError is meant to reach API callers. The
*Unavailable errors are raised by the remote clients and absorbed by
RoutePlanner, which turns them into fallbacks and diagnostic notes.
"""


class RoutingError(Exception):
    """Base class for routing engine errors."""
    pass


class RoutingConfigurationError(RoutingError):
    """A required setting (e.g. the ORS API key) is missing."""
    pass


class OptimizationUnavailable(RoutingError):
    """The remote optimizer failed or returned an unusable response."""
    pass


class PathUnavailable(RoutingError):
    """The remote directions service failed or returned an unusable response."""
    pass
