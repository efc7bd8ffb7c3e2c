import math

EARTH_RADIUS_KM = 6371.0  # mean Earth radius


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmbda = math.radians(lon2 - lon1)
    a = math.sin(dphi/2)**2 + math.cos(p1) * math.cos(p2) * math.sin(dlmbda/2)**2
    # rounding can push a slightly above 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def distance_km(start, end) -> float:
    """Great-circle distance between two objects exposing latitude/longitude."""
    return haversine_km(start.latitude, start.longitude, end.latitude, end.longitude)
