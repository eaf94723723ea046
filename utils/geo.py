import math

from config import EARTH_RADIUS_M


def haversine_distance(coord1, coord2):
    """Return distance in meters between two (lat, lon) coordinates."""
    lat1, lon1 = map(math.radians, coord1)
    lat2, lon2 = map(math.radians, coord2)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # clamp floating noise so antipodal points stay inside sqrt's domain
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance_km(p1, p2):
    return haversine_distance(p1, p2) / 1000
