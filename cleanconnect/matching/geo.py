"""Great-circle distance between two coordinates, in miles."""

import math

EARTH_RADIUS_MILES = 3959.0


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance rounded to one decimal place.

    Coordinates are decimal degrees and are not range-checked.

    Examples:
        >>> calculate_distance(40.7128, -74.0060, 40.7128, -74.0060)
        0.0
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    a = min(a, 1.0)  # float error near antipodal points
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(EARTH_RADIUS_MILES * c, 1)
