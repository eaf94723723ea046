import pytest

from network.graph_loader import build_graph

# ---------- Shared coordinates (lat, lon)

A, B, C, D = (0.0, 0.0), (0.0, 1.0), (0.0, 2.0), (0.0, 3.0)


def line(*coords):
    return {"type": "LineString", "coordinates": [list(c) for c in coords]}


@pytest.fixture
def chain_graph():
    return build_graph([line(A, B, C, D)])


@pytest.fixture
def disconnected_geometries():
    """
    Two endpoints whose nearest nodes are isolated, while their second-nearest
    nodes lie on one connected line.
    """
    return [
        line((0.0, 0.001)),                          # isolated, nearest to the start
        line((0.002, 0.0), (0.002, 0.05), (0.002, 0.1)),
        line((0.0, 0.101)),                          # isolated, nearest to the end
    ]


@pytest.fixture
def chain_geojson():
    # GeoJSON positions are [lon, lat]
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"name": "equator road"},
                "geometry": {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]]},
            },
            {
                "type": "Feature",
                "properties": {"name": "marker"},
                "geometry": {"type": "Point", "coordinates": [5.0, 5.0]},
            },
        ],
    }
