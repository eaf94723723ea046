import json

import pytest

from conftest import A, B, C, D, line
from network.graph_loader import build_graph
from route_planner import main, plan, plan_route
from routing.postprocessing import route_edges_exist, route_length_km, route_length_m
from utils.geo import haversine_distance

START, END = (0.0, 0.0), (0.0, 0.1)


def test_single_candidate_fails_on_isolated_nearest_nodes(disconnected_geometries):
    G = build_graph(disconnected_geometries)
    assert plan(G, START, END, candidate_count=1) == []


def test_second_candidates_recover_a_route(disconnected_geometries):
    G = build_graph(disconnected_geometries)
    expected = [(0.002, 0.0), (0.002, 0.05), (0.002, 0.1)]

    assert plan(G, START, END, candidate_count=2) == expected
    assert plan(G, START, END) == expected


def test_route_between_off_network_points(chain_graph):
    assert plan(chain_graph, (0.01, -0.1), (-0.01, 2.1)) == [A, B, C]


def test_candidate_count_must_be_positive(chain_graph):
    with pytest.raises(ValueError):
        plan(chain_graph, A, D, candidate_count=0)


def test_empty_graph_gives_no_route():
    assert plan(build_graph([]), START, END) == []


def test_planning_is_deterministic(disconnected_geometries):
    first = plan(build_graph(disconnected_geometries), START, END, candidate_count=3)
    second = plan(build_graph(disconnected_geometries), START, END, candidate_count=3)
    assert first == second
    assert first


def test_every_hop_is_a_graph_edge():
    G = build_graph([
        line(A, B, C, D),
        line(B, (1.0, 1.0), (1.0, 2.0), C),
        line((1.0, 2.0), (2.0, 2.0)),
    ])
    route = plan(G, (0.1, 0.1), (2.0, 2.1))

    assert len(route) >= 2
    assert route_edges_exist(G, route)
    assert route_length_m(G, route) == pytest.approx(
        sum(haversine_distance(a, b) for a, b in zip(route[:-1], route[1:]))
    )


def test_route_length_helpers(chain_graph):
    route = [A, B, C, D]
    assert route_length_km(chain_graph, route) == pytest.approx(3 * haversine_distance(A, B) / 1000)
    assert route_length_m(chain_graph, []) == 0
    assert not route_edges_exist(chain_graph, [A, C])


# ---------- plan_route (map client entry point)


def test_plan_route_from_geojson(chain_geojson):
    assert plan_route(chain_geojson, [[0.0, 0.0], [0.0, 2.0]]) == [(0.0, 0.0), (0.0, 1.0), (0.0, 2.0)]


def test_plan_route_from_lat_lon_geometries():
    assert plan_route([line(A, B, C)], [A, C], candidate_count=1) == [A, B, C]


@pytest.mark.parametrize("points", [
    [],
    [[0.0, 0.0]],
    [[0.0, 0.0], [0.0, 1.0], [0.0, 2.0]],
    [[0.0, 1.0], [0.0, 1.0]],
])
def test_plan_route_needs_two_distinct_points(chain_geojson, points):
    assert plan_route(chain_geojson, points) == []


def test_plan_route_without_network():
    assert plan_route(None, [A, B]) == []
    assert plan_route([], [A, B]) == []


def test_plan_route_skips_malformed_lines(chain_geojson):
    chain_geojson["features"].append(
        {"type": "Feature", "properties": {}, "geometry": {"type": "LineString", "coordinates": [[5.0]]}}
    )
    assert plan_route(chain_geojson, [[0.0, 0.0], [0.0, 1.0]]) == [(0.0, 0.0), (0.0, 1.0)]


# ---------- Command line


def test_cli_prints_route_and_length(tmp_path, capsys, chain_geojson):
    path = tmp_path / "network.geojson"
    path.write_text(json.dumps(chain_geojson), encoding="utf-8")

    assert main(["0.0", "0.0", "0.0", "2.0", "--network", str(path)]) == 0

    out = capsys.readouterr().out
    assert "Start: nearest network node 0.0000000,0.0000000 (0.000 km away)" in out
    assert f"Route with 3 points, {2 * haversine_distance(A, B) / 1000:.2f} km:" in out
    assert out.strip().endswith("0.0000000,2.0000000")


def test_cli_without_route(tmp_path, capsys):
    path = tmp_path / "network.geojson"
    path.write_text(json.dumps({"type": "FeatureCollection", "features": []}), encoding="utf-8")

    assert main(["0.0", "0.0", "0.0", "2.0", "--network", str(path)]) == 1
    assert "No route found." in capsys.readouterr().out


def test_cli_with_unreadable_network(tmp_path):
    assert main(["0.0", "0.0", "0.0", "2.0", "--network", str(tmp_path / "missing.geojson")]) == 1
