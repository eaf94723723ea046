import os

DEFAULT_CANDIDATE_COUNT = int(os.environ.get("ROUTE_CANDIDATE_COUNT", "10"))  # nearest nodes tried per endpoint
MAX_CANDIDATE_COUNT = int(os.environ.get("ROUTE_MAX_CANDIDATE_COUNT", "50"))  # upper bound accepted by the API (N^2 solver calls)
EARTH_RADIUS_M = 6371000  # mean earth radius used by the haversine distance

GRAPH_CACHE_SIZE = int(os.environ.get("GRAPH_CACHE_SIZE", "8"))  # number of built networks kept in memory
NETWORK_GEOJSON_PATH = os.environ.get("NETWORK_GEOJSON_PATH")  # default network served by the API
GEOJSON_LON_LAT = True  # GeoJSON positions are [lon, lat]; swap them to (lat, lon) on load
NETWORK_TYPE = "walk"  # walk, bike, or drive (OpenStreetMap download)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
