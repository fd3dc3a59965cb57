"""
Graph Analysis — reachability, connectivity, and cycle detection.

Structural facts about a node/edge graph used by the validation engine:

* ``has_path``                — BFS path existence between two node ids
* ``find_disconnected_nodes`` — nodes that no edge touches
* ``find_cycle``              — one directed cycle, via iterative DFS
* ``find_dangling_edges``     — edges whose endpoints are not in the graph

All functions are pure and work on anything with ``source`` / ``target``
attributes (edges) and ``id`` attributes (nodes).
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from onaim_flow.workflow.workflow_model import FlowEdge, FlowNode


def build_adjacency_list(edges: Iterable[FlowEdge]) -> Dict[str, List[str]]:
    """Map each source id to its targets, in edge order."""
    adjacency: Dict[str, List[str]] = {}
    for edge in edges:
        adjacency.setdefault(edge.source, []).append(edge.target)
    return adjacency


def has_path(start_id: str, end_id: str, edges: Sequence[FlowEdge]) -> bool:
    """Return True if ``end_id`` is reachable from ``start_id``.

    A node always reaches itself, whatever the edges are.
    """
    if start_id == end_id:
        return True

    adjacency = build_adjacency_list(edges)
    queue = deque([start_id])
    visited: Set[str] = {start_id}

    while queue:
        current = queue.popleft()
        for neighbor in adjacency.get(current, []):
            if neighbor == end_id:
                return True
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    return False


def has_any_path(
    start_ids: Iterable[str],
    end_ids: Iterable[str],
    edges: Sequence[FlowEdge],
) -> bool:
    """True if at least one (start, end) pair is connected."""
    ends = list(end_ids)
    return any(
        has_path(start, end, edges)
        for start in start_ids
        for end in ends
    )


def find_connected_node_ids(edges: Iterable[FlowEdge]) -> Set[str]:
    """Ids that appear as the source or target of any edge."""
    connected: Set[str] = set()
    for edge in edges:
        connected.add(edge.source)
        connected.add(edge.target)
    return connected


def find_disconnected_nodes(
    nodes: Sequence[FlowNode],
    edges: Iterable[FlowEdge],
) -> List[FlowNode]:
    """Nodes not referenced by any edge, in node order."""
    connected = find_connected_node_ids(edges)
    return [n for n in nodes if n.id not in connected]


def find_cycle(
    node_ids: Iterable[str],
    edges: Sequence[FlowEdge],
) -> Optional[List[str]]:
    """Return one directed cycle as a closed id list (``[a, b, a]``), or None.

    Every node id is a DFS root candidate, followed by edge sources that
    are not graph nodes, so disconnected components are all covered.
    The walk uses an explicit stack instead of recursion.
    """
    graph: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    for edge in edges:
        graph.setdefault(edge.source, []).append(edge.target)

    visited: Set[str] = set()
    on_stack: Set[str] = set()

    for root in list(graph):
        if root in visited:
            continue

        visited.add(root)
        on_stack.add(root)
        path: List[str] = [root]
        stack: List[Tuple[str, int]] = [(root, 0)]

        while stack:
            node_id, index = stack[-1]
            neighbors = graph.get(node_id, [])

            if index >= len(neighbors):
                stack.pop()
                path.pop()
                on_stack.discard(node_id)
                continue

            stack[-1] = (node_id, index + 1)
            neighbor = neighbors[index]

            if neighbor in on_stack:
                start = path.index(neighbor)
                return path[start:] + [neighbor]
            if neighbor not in visited:
                visited.add(neighbor)
                on_stack.add(neighbor)
                path.append(neighbor)
                stack.append((neighbor, 0))

    return None


def detect_cycles(node_ids: Iterable[str], edges: Sequence[FlowEdge]) -> bool:
    """True if the directed graph contains at least one cycle."""
    return find_cycle(node_ids, edges) is not None


def find_dangling_edges(
    nodes: Sequence[FlowNode],
    edges: Iterable[FlowEdge],
) -> List[Tuple[FlowEdge, str]]:
    """``(edge, missing_id)`` for each endpoint that is not a graph node.

    An edge with both endpoints missing yields two entries.
    """
    node_ids = {n.id for n in nodes}
    dangling: List[Tuple[FlowEdge, str]] = []
    for edge in edges:
        if edge.source not in node_ids:
            dangling.append((edge, edge.source))
        if edge.target not in node_ids:
            dangling.append((edge, edge.target))
    return dangling
