from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Tuple
import logging

from config import DEFAULT_CANDIDATE_COUNT, LOG_LEVEL, MAX_CANDIDATE_COUNT, NETWORK_GEOJSON_PATH
from route_planner import load_network, route_on_network
from routing.postprocessing import route_length_m
from routing.router import PathReconstructionError

logging.basicConfig(level=LOG_LEVEL, format="[%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# --- FastAPI setup ---
app = FastAPI(title="Shortest Route API", version="1.0")

# Allow requests from the map frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # change to your app domain(s) in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Network served when a request does not carry its own
DEFAULT_NETWORK = load_network(NETWORK_GEOJSON_PATH) if NETWORK_GEOJSON_PATH else None

# --- Data Models ---
LatLon = Tuple[float, float]


class RouteRequest(BaseModel):
    points: List[LatLon] = Field(..., min_length=2, max_length=2,
                                 description="Start and end as [latitude, longitude]")
    network: Optional[Dict[str, Any]] = Field(None, description="GeoJSON FeatureCollection of LineStrings "
                                                                "([lon, lat] positions); server network if omitted")
    candidate_count: int = Field(DEFAULT_CANDIDATE_COUNT, ge=1, le=MAX_CANDIDATE_COUNT,
                                 description="Nearest nodes tried per endpoint")


class RouteResponse(BaseModel):
    route: List[LatLon] = Field(..., description="Route coordinates as (lat, lon), empty if no route")
    distance_m: float = Field(..., description="Total length of the route in meters")
    found: bool = Field(..., description="Whether a route was found")


# --- API Endpoints ---
@app.post("/route", response_model=RouteResponse)
def route_endpoint(req: RouteRequest):
    """
    Shortest route along the network between the two requested points.
    """
    network = req.network if req.network is not None else DEFAULT_NETWORK
    if network is None:
        raise HTTPException(status_code=400, detail="No network supplied and no default network configured")

    try:
        G, route = route_on_network(network, req.points, candidate_count=req.candidate_count)
    except PathReconstructionError as e:
        logger.error("Route reconstruction failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Route reconstruction failed: {e}")

    distance_m = route_length_m(G, route) if route else 0.0
    return RouteResponse(route=route, distance_m=distance_m, found=bool(route))


@app.get("/health")
def health():
    return {"status": "ok"}
