import maxflow
import networkx as nx
import numpy as np
import pytest

from grabcut_segmentation.graphcut.dinic import FlowGraph


def build_graph(nb_nodes, edges):
    g = FlowGraph(nb_nodes)
    for u, v, cap in edges:
        g.add_edge(u, v, cap)
    return g


def networkx_max_flow(nb_nodes, edges, source, sink):
    G = nx.DiGraph()
    G.add_nodes_from(range(nb_nodes))
    for u, v, cap in edges:
        if G.has_edge(u, v):
            G[u][v]["capacity"] += cap
        else:
            G.add_edge(u, v, capacity=cap)
    return nx.maximum_flow_value(G, source, sink)


def random_edges(rng, nb_nodes, nb_edges, max_cap=20):
    edges = []
    for _ in range(nb_edges):
        u, v = rng.choice(nb_nodes, size=2, replace=False)
        edges.append((int(u), int(v), int(rng.randint(0, max_cap + 1))))
    return edges


def test_textbook_graph() -> None:
    # source 0, A 1, B 2, sink 3
    edges = [(0, 1, 3), (1, 3, 2), (0, 2, 2), (2, 3, 3), (1, 2, 1)]
    g = build_graph(4, edges)

    assert g.max_flow(0, 3) == 5
    assert networkx_max_flow(4, edges, 0, 3) == 5


def test_paired_reverse_edges() -> None:
    g = FlowGraph(3)
    first = g.add_edge(0, 1, 4)
    second = g.add_edge(1, 2, 7)

    assert (first, second) == (0, 2)
    assert g.nb_edges == 4
    assert g.edge_target[first ^ 1] == 0
    assert g.residual_capacity(first ^ 1) == 0

    assert g.max_flow(0, 2) == 4
    assert g.residual_capacity(first) == 0
    assert g.residual_capacity(first ^ 1) == 4
    assert g.residual_capacity(second) == 3


def test_min_cut_side() -> None:
    g = build_graph(4, [(0, 1, 3), (1, 3, 2), (0, 2, 2), (2, 3, 3), (1, 2, 1)])
    g.max_flow(0, 3)
    # Both source edges are saturated
    np.testing.assert_array_equal(g.min_cut_source_side(), [True, False, False, False])

    g = build_graph(4, [(0, 1, 10), (1, 2, 1), (2, 3, 10)])
    assert g.max_flow(0, 3) == 1
    np.testing.assert_array_equal(g.min_cut_source_side(), [True, True, False, False])


def test_disconnected_sink() -> None:
    g = build_graph(3, [(0, 1, 5)])
    assert g.max_flow(0, 2) == 0
    np.testing.assert_array_equal(g.min_cut_source_side(), [True, True, False])


def test_zero_capacity_edges() -> None:
    g = build_graph(3, [(0, 1, 0), (1, 2, 9)])
    assert g.max_flow(0, 2) == 0


@pytest.mark.parametrize("seed", range(5))
def test_matches_networkx(seed) -> None:
    rng = np.random.RandomState(seed)
    nb_nodes = 12
    edges = random_edges(rng, nb_nodes, 40)
    g = build_graph(nb_nodes, edges)

    assert g.max_flow(0, nb_nodes - 1) == networkx_max_flow(nb_nodes, edges, 0, nb_nodes - 1)


@pytest.mark.parametrize("seed", range(3))
def test_grid_matches_pymaxflow(seed) -> None:
    rng = np.random.RandomState(seed)
    h, w = 7, 9
    n = h * w
    source, sink = n, n + 1

    ours = FlowGraph(n + 2)
    ref = maxflow.Graph[int](n, 4 * n)
    nodes = ref.add_nodes(n)
    original = []

    for y in range(h):
        for x in range(w):
            i = y * w + x
            cap_s, cap_t = (int(c) for c in rng.randint(0, 100, size=2))
            ours.add_edge(source, i, cap_s)
            ours.add_edge(i, sink, cap_t)
            ref.add_tedge(nodes[i], cap_s, cap_t)
            original += [(source, i, cap_s), (i, sink, cap_t)]

            for j in ([i + 1] if x < w - 1 else []) + ([i + w] if y < h - 1 else []):
                cap = int(rng.randint(0, 50))
                ours.add_edge(i, j, cap)
                ours.add_edge(j, i, cap)
                ref.add_edge(nodes[i], nodes[j], cap, cap)
                original += [(i, j, cap), (j, i, cap)]

    flow = ours.max_flow(source, sink)
    assert flow == ref.maxflow()

    # The extracted cut has the capacity of the flow
    side = ours.min_cut_source_side()
    assert side[source] and not side[sink]
    assert sum(cap for u, v, cap in original if side[u] and not side[v]) == flow


def test_long_path_does_not_recurse() -> None:
    n = 20000
    g = FlowGraph(n)
    for i in range(n - 1):
        g.add_edge(i, i + 1, 3 if i == n // 2 else 10)
    assert g.max_flow(0, n - 1) == 3


def test_invalid_arguments() -> None:
    g = FlowGraph(2)
    with pytest.raises(ValueError):
        g.add_edge(0, 1, -1)
    with pytest.raises(ValueError):
        g.max_flow(1, 1)
