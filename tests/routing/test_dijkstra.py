# tests/routing/test_dijkstra.py
import math
import random

import pytest
from graph_factories import make_graph

from raider_route.domain.entities.graph import Edge, Graph
from raider_route.domain.entities.profile import CostProfile
from raider_route.domain.routing.routing_dijkstra import (
    DijkstraEngine,
    effective_cost,
    shortest_path,
    shortest_paths_from,
)

# ---------- helpers


def _edge_cost(graph, profile, u, v, floor=0.0):
    e = next(e for e in graph.edges if e.from_id == u and e.to_id == v)
    return effective_cost(e, profile, floor)


def _brute_force_min(graph, profile, start, goal):
    best = math.inf
    adj = graph.adjacency

    def dfs(u, seen, acc):
        nonlocal best
        if u == goal:
            best = min(best, acc)
            return
        for e in adj.get(u, ()):
            if e.to_id not in seen:
                dfs(e.to_id, seen | {e.to_id}, acc + effective_cost(e, profile))

    dfs(start, {start}, 0.0)
    return best


def _random_graph(seed: int, n: int = 7, p: float = 0.35):
    rng = random.Random(seed)
    ids = [f"v{i}" for i in range(n)]
    edges = [
        (u, v, float(rng.randint(1, 9)))
        for u in ids
        for v in ids
        if u != v and rng.random() < p
    ]
    return make_graph(edges, extra_nodes=ids)


# ---------- scenarios


def test_cheapest_detour_beats_direct_edge(abcd_graph):
    res = shortest_path(abcd_graph, "A", "D")
    assert res.node_ids == ("A", "B", "C", "D")
    assert res.cost == pytest.approx(3.0)


def test_edge_penalty_makes_direct_edge_cheaper(abcd_graph):
    profile = CostProfile(edge_penalties={("B", "C"): 10.0})
    res = shortest_path(abcd_graph, "A", "D", profile)
    assert res.node_ids == ("A", "C", "D")
    assert res.cost == pytest.approx(6.0)


def test_node_penalty_and_bonus_apply_on_arrival(abcd_graph):
    # B is penalized on arrival, so A->C directly (5) beats A->B->C (1 + 9 + 1)
    profile = CostProfile(node_penalties={"B": 9.0}, node_bonuses={"D": 0.5})
    res = shortest_path(abcd_graph, "A", "D", profile)
    assert res.node_ids == ("A", "C", "D")
    assert res.cost == pytest.approx(5.0 + 0.5)


def test_start_equals_goal_is_single_node_zero_cost(abcd_graph):
    res = shortest_path(abcd_graph, "B", "B")
    assert res.node_ids == ("B",)
    assert res.cost == 0.0


def test_edges_are_directed(abcd_graph):
    # no D->A edge is implied by A->...->D
    assert shortest_path(abcd_graph, "D", "A") is None


def test_unknown_endpoints_are_not_found(abcd_graph):
    assert shortest_path(abcd_graph, "Z", "A") is None
    assert shortest_path(abcd_graph, "A", "Z") is None


def test_dangling_edges_are_ignored():
    g = make_graph([("A", "B", 1.0)])
    g2 = Graph(nodes=g.nodes, edges=[*g.edges, Edge("B", "ghost", 1.0), Edge("ghost", "A", 1.0)])
    assert "ghost" not in g2
    assert shortest_path(g2, "B", "A") is None
    assert shortest_path(g2, "A", "B").node_ids == ("A", "B")


def test_equal_cost_alternatives_resolve_to_lowest_id():
    g = make_graph(
        [("S", "Y", 1.0), ("S", "X", 1.0), ("X", "T", 1.0), ("Y", "T", 1.0)]
    )
    for _ in range(3):
        assert shortest_path(g, "S", "T").node_ids == ("S", "X", "T")


# ---------- negative modifiers are clamped


def test_bonus_larger_than_weight_is_clamped_to_floor(abcd_graph):
    profile = CostProfile(node_bonuses={"C": 100.0})
    for e in abcd_graph.edges:
        assert effective_cost(e, profile) >= 0.0
    res = shortest_path(abcd_graph, "A", "D", profile)
    # A->C clamps to 0, so the direct edge wins
    assert res.node_ids == ("A", "C", "D")
    assert res.cost == pytest.approx(1.0)


def test_positive_floor_is_applied_uniformly(abcd_graph):
    profile = CostProfile(node_bonuses={"B": 5.0, "C": 5.0})
    engine = DijkstraEngine(cost_floor=0.25)
    res = engine.path(abcd_graph, "A", "D", profile)
    assert res.cost == pytest.approx(
        sum(
            _edge_cost(abcd_graph, profile, u, v, floor=0.25)
            for u, v in zip(res.node_ids, res.node_ids[1:])
        )
    )
    assert all(effective_cost(e, profile, 0.25) >= 0.25 for e in abcd_graph.edges)


def test_negative_floor_is_rejected():
    with pytest.raises(ValueError):
        DijkstraEngine(cost_floor=-1.0)


# ---------- properties on random graphs


@pytest.mark.parametrize("seed", range(12))
def test_cost_matches_path_and_is_optimal(seed):
    g = _random_graph(seed)
    profile = CostProfile(
        node_penalties={"v1": 2.0}, node_bonuses={"v2": 3.0}, edge_penalties={("v0", "v3"): 4.0}
    )
    for goal in [n.id for n in g.nodes]:
        res = shortest_path(g, "v0", goal, profile)
        best = _brute_force_min(g, profile, "v0", goal)
        if res is None:
            assert best == math.inf
            continue
        assert res.node_ids[0] == "v0" and res.node_ids[-1] == goal
        walked = sum(_edge_cost(g, profile, u, v) for u, v in zip(res.node_ids, res.node_ids[1:]))
        assert res.cost == pytest.approx(walked)
        assert res.cost == pytest.approx(best)


def test_single_source_tables_agree_with_point_queries(abcd_graph):
    costs, parent = shortest_paths_from(abcd_graph, "A")
    assert costs == {"A": 0.0, "B": 1.0, "C": 2.0, "D": 3.0}
    assert parent["D"] == "C" and parent["C"] == "B"
    assert shortest_paths_from(abcd_graph, "nope") == ({}, {})
