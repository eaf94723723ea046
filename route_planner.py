import argparse
import logging
from typing import List, Optional, Sequence, Tuple

import networkx as nx

from config import DEFAULT_CANDIDATE_COUNT, LOG_LEVEL, NETWORK_GEOJSON_PATH, NETWORK_TYPE
from network.graph_loader import (
    build_graph_cached,
    geometries_from_geojson,
    load_geojson,
    load_network_from_osm,
)
from network.snapping import nearest_nodes, snap_to_road
from routing.postprocessing import route_length_km
from routing.router import shortest_path
from utils.geo import distance_km

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


def plan(
    G: nx.Graph,
    start: LatLon,
    end: LatLon,
    candidate_count: int = DEFAULT_CANDIDATE_COUNT,
) -> List[LatLon]:
    """
    Route between two arbitrary coordinates on a built graph.

    The nearest node of an endpoint may sit on a disconnected stub, so up to
    ``candidate_count`` nearest nodes are taken for each endpoint and pairs are
    tried closest-source first, then closest-target. The first connected pair
    wins; [] means no pair is connected.
    """
    if candidate_count < 1:
        raise ValueError("candidate_count must be at least 1.")

    sources = nearest_nodes(G, start, candidate_count)
    targets = nearest_nodes(G, end, candidate_count)

    for i, source in enumerate(sources):
        for j, target in enumerate(targets):
            path = shortest_path(G, source, target)
            if path:
                logger.debug("Route found with source candidate %d and target candidate %d", i, j)
                return path

    logger.info("No route between %s and %s (%d x %d candidates)", start, end, len(sources), len(targets))
    return []



def route_on_network(
    network,
    points: Sequence[Sequence[float]],
    candidate_count: int = DEFAULT_CANDIDATE_COUNT,
) -> Tuple[Optional[nx.Graph], List[LatLon]]:
    """
    Graph and route for a network plus two clicked points.

    ``network`` is either a GeoJSON FeatureCollection ([lon, lat] positions) or a
    list of geometries already in (lat, lon). Without a network, or with anything
    other than exactly two distinct points, the result is (None, []).
    """
    if not network or len(points) != 2:
        return None, []

    start, end = (tuple(float(v) for v in p[:2]) for p in points)
    if start == end:
        return None, []

    G = network_graph(network)
    return G, plan(G, start, end, candidate_count=candidate_count)


def plan_route(
    network,
    points: Sequence[Sequence[float]],
    candidate_count: int = DEFAULT_CANDIDATE_COUNT,
) -> List[LatLon]:
    """Entry point for the map client: network geometry plus two clicked points in, route out."""
    return route_on_network(network, points, candidate_count=candidate_count)[1]


def network_graph(network) -> nx.Graph:
    """Graph for a GeoJSON FeatureCollection or a list of (lat, lon) geometries, built once per content."""
    geometries = geometries_from_geojson(network) if isinstance(network, dict) else list(network)
    return build_graph_cached(geometries)


def load_network(path: str) -> Optional[dict]:
    """GeoJSON network from disk, or None (logged) if it cannot be read."""
    try:
        return load_geojson(path)
    except (OSError, ValueError) as e:
        logger.error("Could not read network %s: %s", path, e)
        return None


def main(argv=None):
    parser = argparse.ArgumentParser(description="Shortest route between two points on a GeoJSON line network.")
    parser.add_argument("start", nargs=2, type=float, metavar=("LAT", "LON"))
    parser.add_argument("end", nargs=2, type=float, metavar=("LAT", "LON"))
    parser.add_argument("--network", default=NETWORK_GEOJSON_PATH, help="GeoJSON FeatureCollection of LineStrings")
    parser.add_argument("--osm-radius-km", type=float,
                        help="Download the network from OpenStreetMap around the start point instead")
    parser.add_argument("--network-type", default=NETWORK_TYPE, choices=["walk", "bike", "drive"])
    parser.add_argument("-n", "--candidates", type=int, default=DEFAULT_CANDIDATE_COUNT,
                        help="Nearest nodes tried per endpoint")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="[%(levelname)s] %(name)s: %(message)s")

    if args.osm_radius_km:
        network = load_network_from_osm(tuple(args.start), args.osm_radius_km, network_type=args.network_type)
    elif args.network:
        network = load_network(args.network)
    else:
        parser.error("either --network or --osm-radius-km is required")
    if network is None:
        return 1

    G, route = route_on_network(network, [args.start, args.end], candidate_count=args.candidates)
    if not route:
        print("No route found.")
        return 1

    for label, point in (("Start", args.start), ("End", args.end)):
        _, snapped = snap_to_road(G, point)
        print(f"{label}: nearest network node {snapped[0]:.7f},{snapped[1]:.7f} ({distance_km(point, snapped):.3f} km away)")

    print(f"Route with {len(route)} points, {route_length_km(G, route):.2f} km:")
    for lat, lon in route:
        print(f"{lat:.7f},{lon:.7f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
