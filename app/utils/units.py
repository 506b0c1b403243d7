"""Unit conversions between provider units (meters, seconds) and display units."""

METERS_PER_MILE = 1609.34
FEET_PER_METER = 3.28084
SECONDS_PER_MINUTE = 60.0


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE


def miles_to_meters(miles: float) -> float:
    return miles * METERS_PER_MILE


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def seconds_to_minutes(seconds: float) -> float:
    return seconds / SECONDS_PER_MINUTE


def format_distance(meters: float) -> str:
    """
    Format a distance for display.

    Uses miles from one mile up, feet below that.
    """
    miles = meters_to_miles(meters)
    if miles >= 1:
        return f"{miles:.1f} mile{'' if miles == 1 else 's'}"
    return f"{round(meters_to_feet(meters))} feet"


def format_duration(minutes: float) -> str:
    total = int(round(minutes))
    if total < 60:
        return f"{total} min"
    hours, rest = divmod(total, 60)
    return f"{hours} h {rest} min" if rest else f"{hours} h"
