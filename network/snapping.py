from utils.geo import haversine_distance


def _node_coord(G, node):
    return G.nodes[node]['y'], G.nodes[node]['x']


def nearest_node(G, point):
    """
    Return the graph node closest to a (lat, lon) point, or None for an empty graph.

    Nodes are scanned in graph order and only a strictly smaller distance
    replaces the current best, so ties go to the node inserted first.
    """
    best, best_dist = None, float("inf")
    for node in G.nodes:
        dist = haversine_distance(_node_coord(G, node), point)
        if dist < best_dist:
            best, best_dist = node, dist
    return best


def nearest_nodes(G, point, n):
    """Return up to n nodes ordered by distance to point (stable on ties)."""
    if n <= 0:
        return []
    ranked = sorted(G.nodes, key=lambda node: haversine_distance(_node_coord(G, node), point))
    return ranked[:n]


def snap_to_road(G, point):
    node = nearest_node(G, point)
    if node is None:
        return None, None
    return node, _node_coord(G, node)
