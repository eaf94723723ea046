import logging

import networkx as nx

logger = logging.getLogger(__name__)


class PathReconstructionError(RuntimeError):
    """Predecessor chain did not lead back to the source despite a recorded distance."""


def shortest_path(G, source, target, weight="length"):
    """
    Minimum-weight path between two graph nodes.

    Parameters:
        G: networkx graph built by network.graph_loader.build_graph
        source: node id of the start
        target: node id of the end
        weight: edge attribute used as cost

    Returns:
        list of (lat, lon) from source to target, or [] if source == target,
        either node is missing, or target is unreachable.
    """
    if source == target or source not in G or target not in G:
        return []

    # equal-cost ties keep the first predecessor reached, so results follow graph order
    pred, dist = nx.dijkstra_predecessor_and_distance(G, source, weight=weight)
    if target not in dist:
        return []

    route_nodes = [target]
    visited = {target}
    node = target
    while node != source:
        preds = pred.get(node)
        if not preds:
            raise PathReconstructionError(f"No predecessor for {node} on path {source} -> {target}")
        node = preds[0]
        if node in visited:
            raise PathReconstructionError(f"Predecessor cycle at {node} on path {source} -> {target}")
        visited.add(node)
        route_nodes.append(node)

    route_nodes.reverse()
    logger.debug("Shortest path %s -> %s: %d nodes, %.1f m", source, target, len(route_nodes), dist[target])
    return [(G.nodes[n]['y'], G.nodes[n]['x']) for n in route_nodes]
