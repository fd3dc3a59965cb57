"""
Tests for reachability, connectivity and cycle detection.
"""
from onaim_flow.workflow.graph_analysis import (
    build_adjacency_list,
    detect_cycles,
    find_connected_node_ids,
    find_cycle,
    find_dangling_edges,
    find_disconnected_nodes,
    has_any_path,
    has_path,
)

from conftest import edge, event_node, filter_node, output_node


class TestHasPath:
    def test_reflexive_path_without_edges(self):
        assert has_path("x", "x", [])

    def test_reflexive_path_ignores_edges(self):
        edges = [edge("a", "b"), edge("b", "c")]
        assert has_path("z", "z", edges)

    def test_direct_edge(self):
        assert has_path("a", "b", [edge("a", "b")])

    def test_transitive_path(self):
        edges = [edge("a", "b"), edge("b", "c"), edge("c", "d")]
        assert has_path("a", "d", edges)

    def test_direction_matters(self):
        assert not has_path("b", "a", [edge("a", "b")])

    def test_no_path_between_components(self):
        edges = [edge("a", "b"), edge("c", "d")]
        assert not has_path("a", "d", edges)

    def test_terminates_on_cycle(self):
        edges = [edge("a", "b"), edge("b", "a")]
        assert not has_path("a", "c", edges)

    def test_any_pair_is_enough(self):
        edges = [edge("e2", "o1")]
        assert has_any_path(["e1", "e2"], ["o1", "o2"], edges)
        assert not has_any_path(["e1"], ["o1", "o2"], edges)


def test_adjacency_list_keeps_edge_order():
    edges = [edge("a", "c"), edge("a", "b"), edge("b", "c")]
    assert build_adjacency_list(edges) == {"a": ["c", "b"], "b": ["c"]}


class TestConnectivity:
    def test_connected_ids(self):
        assert find_connected_node_ids([edge("a", "b")]) == {"a", "b"}

    def test_isolated_node_is_disconnected(self):
        nodes = [event_node(), output_node(), filter_node()]
        edges = [edge("event-1", "output-1")]
        disconnected = find_disconnected_nodes(nodes, edges)
        assert [n.id for n in disconnected] == ["filter-1"]

    def test_no_edges_means_everything_disconnected(self):
        nodes = [event_node(), output_node()]
        assert len(find_disconnected_nodes(nodes, [])) == 2


class TestCycles:
    def test_acyclic_chain(self):
        edges = [edge("a", "b"), edge("b", "c")]
        assert find_cycle(["a", "b", "c"], edges) is None
        assert not detect_cycles(["a", "b", "c"], edges)

    def test_two_node_cycle(self):
        cycle = find_cycle(["a", "b"], [edge("a", "b"), edge("b", "a")])
        assert cycle == ["a", "b", "a"]

    def test_self_loop(self):
        assert find_cycle(["a"], [edge("a", "a")]) == ["a", "a"]

    def test_cycle_in_second_component(self):
        edges = [edge("a", "b"), edge("c", "d"), edge("d", "e"), edge("e", "c")]
        cycle = find_cycle(["a", "b", "c", "d", "e"], edges)
        assert cycle == ["c", "d", "e", "c"]

    def test_diamond_is_not_a_cycle(self):
        edges = [edge("a", "b"), edge("a", "c"), edge("b", "d"), edge("c", "d")]
        assert not detect_cycles(["a", "b", "c", "d"], edges)

    def test_deep_chain_does_not_recurse(self):
        ids = [f"n{i}" for i in range(5000)]
        edges = [edge(ids[i], ids[i + 1]) for i in range(len(ids) - 1)]
        assert not detect_cycles(ids, edges)
        edges.append(edge(ids[-1], ids[0]))
        assert detect_cycles(ids, edges)


def test_dangling_edges():
    nodes = [event_node(), output_node()]
    edges = [
        edge("event-1", "output-1", "ok"),
        edge("event-1", "ghost", "bad-target"),
        edge("phantom", "ghost", "both-bad"),
    ]
    dangling = [(e.id, missing) for e, missing in find_dangling_edges(nodes, edges)]
    assert dangling == [
        ("bad-target", "ghost"),
        ("both-bad", "phantom"),
        ("both-bad", "ghost"),
    ]
