from network.graph_loader import node_id


def route_length_m(graph, route):
    """Sum of edge lengths along a route of (lat, lon) coordinates."""
    nodes = [node_id(c) for c in route]
    return sum(graph[u][v]['length'] for u, v in zip(nodes[:-1], nodes[1:]))


def route_length_km(graph, route):
    return route_length_m(graph, route) / 1000


def route_edges_exist(graph, route):
    nodes = [node_id(c) for c in route]
    return all(graph.has_edge(u, v) for u, v in zip(nodes[:-1], nodes[1:]))
