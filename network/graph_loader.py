import json
import logging
from functools import lru_cache
from numbers import Real

import networkx as nx
import osmnx as ox
from shapely.geometry import LineString, mapping

from config import GEOJSON_LON_LAT, GRAPH_CACHE_SIZE
from utils.geo import haversine_distance

logger = logging.getLogger(__name__)


def node_id(coord):
    """
    Canonical node key of a vertex: its exact (lat, lon) value.

    Two vertices are the same node only if their coordinates are bit-identical,
    there is no snapping tolerance.
    """
    return float(coord[0]), float(coord[1])


def is_position(p):
    """True for a position with at least two numeric members."""
    return (
        isinstance(p, (list, tuple))
        and len(p) >= 2
        and all(isinstance(v, Real) and not isinstance(v, bool) for v in p[:2])
    )


def _as_geometry_mapping(geom):
    if hasattr(geom, "geom_type"):
        return mapping(geom)
    if not isinstance(geom, dict):
        return None
    if geom.get("type") == "Feature":
        geom = geom.get("geometry")
    return geom if isinstance(geom, dict) else None


def _line_parts(geometry):
    if not geometry:
        return []
    coords = geometry.get("coordinates")
    if not isinstance(coords, (list, tuple)):
        return []
    if geometry.get("type") == "LineString":
        return [coords]
    if geometry.get("type") == "MultiLineString":
        return [part for part in coords if isinstance(part, (list, tuple))]
    return []


def _valid_runs(coords):
    """Split a line at malformed positions; consecutive valid vertices stay together."""
    run = []
    for c in coords:
        if is_position(c):
            run.append(node_id(c))
        elif run:
            yield run
            run = []
    if run:
        yield run


def _iter_lines(geometries):
    skipped = malformed = 0
    for geom in geometries:
        parts = _line_parts(_as_geometry_mapping(geom))
        if not parts:
            skipped += 1
        for coords in parts:
            malformed += sum(1 for c in coords if not is_position(c))
            yield from _valid_runs(coords)
    if skipped:
        logger.debug("Ignored %d non-line geometries", skipped)
    if malformed:
        logger.debug("Ignored %d malformed positions", malformed)


def _graph_from_lines(lines):
    G = nx.Graph()
    for nodes in lines:
        for n in nodes:
            if not G.has_node(n):
                G.add_node(n, y=n[0], x=n[1])
        for a, b in zip(nodes[:-1], nodes[1:]):
            if a == b:
                continue  # repeated vertex, no segment
            G.add_edge(a, b, length=haversine_distance(a, b))

    logger.info("Graph built: %d nodes, %d edges", G.number_of_nodes(), G.number_of_edges())
    return G


def build_graph(geometries):
    """
    Build a weighted undirected routing graph from line geometries.

    Parameters
    ----------
    geometries : iterable
        Shapely geometries, GeoJSON geometry mappings or GeoJSON features whose
        positions are (lat, lon). Only LineString and MultiLineString contribute;
        everything else is ignored.

    Returns
    -------
    G : networkx.Graph
        Nodes keyed by (lat, lon) with ``y``/``x`` attributes, edges carrying
        their haversine ``length`` in meters.
    """
    return _graph_from_lines(list(_iter_lines(geometries)))


@lru_cache(maxsize=GRAPH_CACHE_SIZE)
def _cached_graph(lines_key):
    return nx.freeze(_graph_from_lines(lines_key))


def build_graph_cached(geometries):
    """Same graph as ``build_graph``, memoised by geometry content and frozen."""
    lines_key = tuple(tuple(nodes) for nodes in _iter_lines(geometries))
    return _cached_graph(lines_key)


def load_geojson(path):
    with open(path, "r", encoding="utf-8") as f:
        geojson = json.load(f)
    logger.info("Loaded GeoJSON from %s", path)
    return geojson


def _swap(p):
    # malformed positions become None so the builder still breaks the line there
    return (p[1], p[0]) if is_position(p) else None


def _swap_positions(geometry):
    parts = _line_parts(geometry)
    if not parts:
        return geometry
    swapped = [[_swap(p) for p in part] for part in parts]
    if geometry.get("type") == "LineString":
        return {"type": "LineString", "coordinates": swapped[0]}
    return {"type": "MultiLineString", "coordinates": swapped}


def geometries_from_geojson(geojson, lon_lat=GEOJSON_LON_LAT):
    """
    Extract geometry mappings from a FeatureCollection, a single feature or a list.

    GeoJSON positions are [lon, lat]; with ``lon_lat`` they are swapped to the
    (lat, lon) order the graph builder expects. Elevation members are dropped.
    Items without a geometry object are skipped; malformed positions become None
    so the builder splits the line there.
    """
    if isinstance(geojson, dict):
        if geojson.get("type") == "FeatureCollection":
            items = geojson.get("features")
        else:
            items = [geojson]
    else:
        items = geojson
    if not isinstance(items, (list, tuple)):
        items = []

    geometries = []
    for item in items:
        geometry = item.get("geometry") if isinstance(item, dict) and item.get("type") == "Feature" else item
        if not isinstance(geometry, dict):
            logger.debug("Ignored feature without a geometry object: %r", item)
            continue
        geometries.append(_swap_positions(geometry) if lon_lat else geometry)
    return geometries


def load_network_from_osm(center_point, radius_km, network_type="walk"):
    """
    Download a street network around a point and return its edges as line geometries.

    Parameters
    ----------
    center_point : tuple
        (lat, lon)
    radius_km : float
        Network distance around the point (in kilometers)
    network_type : str
        One of {'walk', 'bike', 'drive'}

    Returns
    -------
    lines : list of shapely LineString
        Edge geometries with (lat, lon) positions
    """
    ox.settings.use_cache = True

    G = ox.graph_from_point(
        center_point,
        dist=radius_km * 1000,
        network_type=network_type,
        dist_type='network',
        simplify=False
    )
    logger.info("OSM graph loaded: %d nodes, %d edges", len(G.nodes), len(G.edges))

    lines = []
    for u, v, data in G.edges(data=True):
        if "geometry" in data:
            coords = [(lat, lon) for lon, lat in data["geometry"].coords]
        else:
            coords = [(G.nodes[u]['y'], G.nodes[u]['x']), (G.nodes[v]['y'], G.nodes[v]['x'])]
        lines.append(LineString(coords))
    return lines
