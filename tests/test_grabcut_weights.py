import numpy as np
import pytest

from grabcut_segmentation.image_processing.gmm import ColorModel
from grabcut_segmentation.image_processing.grabcut_weights import GrabCutWeights, saturating_capacity, color_distance, MAX_CAPACITY
from grabcut_segmentation.utils import GC_BGD, GC_FGD, GC_PR_BGD, GC_PR_FGD

# -ln(1e-10 + 1e-10) * 50, rounded
UNTRAINED_CAPACITY = 1117


def test_saturating_capacity() -> None:
    caps = saturating_capacity([-3.0, 0.4, 0.5, 1.49, 1e20, np.nan, np.inf])
    np.testing.assert_array_equal(caps, [0, 0, 1, 1, MAX_CAPACITY, 0, MAX_CAPACITY])
    assert caps.dtype == np.int64


def test_color_distance() -> None:
    a = np.array([[0, 0, 0]], dtype=np.uint8)
    b = np.array([[3, 4, 0]], dtype=np.uint8)
    np.testing.assert_allclose(color_distance(a, b), [5.0])
    # No uint8 wrap-around
    np.testing.assert_allclose(color_distance(b, a), [5.0])


def test_terminal_links_follow_trimap() -> None:
    img = np.zeros((1, 4, 3), dtype=np.uint8)
    trimap = np.array([[GC_BGD, GC_FGD, GC_PR_BGD, GC_PR_FGD]], dtype=np.uint8)
    weights = GrabCutWeights()
    weights.compute_weights(img, trimap, ColorModel(), ColorModel())

    np.testing.assert_array_equal(weights.has_source_edge, [[True, False, True, True]])
    np.testing.assert_array_equal(weights.has_sink_edge, [[False, True, True, True]])
    np.testing.assert_array_equal(weights.source_caps, np.full((1, 4), UNTRAINED_CAPACITY))
    np.testing.assert_array_equal(weights.sink_caps, np.full((1, 4), UNTRAINED_CAPACITY))

    g, source, sink = weights.build_flow_graph()
    assert (len(g), source, sink) == (6, 4, 5)
    # 6 terminal edges + 3 neighbour pairs in both directions, each with a reverse edge
    assert g.nb_edges == 2 * (6 + 3 * 2)
    assert [g.edge_target[e] for e in g.starting_edges[source]] == [0, 2, 3]
    assert all(g.edge_target[e] != sink for e in g.starting_edges[0])


def test_terminal_costs_use_models() -> None:
    fg_model = ColorModel()
    fg_model.train(np.tile([[0, 0, 255]], (4, 1)))
    img = np.array([[[0, 0, 255]]], dtype=np.uint8)
    weights = GrabCutWeights()
    weights.compute_weights(img, np.array([[GC_PR_FGD]]), fg_model, ColorModel())

    expected = int(np.floor(50 * -np.log(fg_model.probability([0, 0, 255]) + 1e-10) + 0.5))
    assert weights.source_caps[0, 0] == expected
    assert weights.sink_caps[0, 0] == UNTRAINED_CAPACITY


def test_neighbour_capacities() -> None:
    img = np.array([[[0, 0, 0], [0, 0, 0], [1, 0, 0]],
                    [[255, 0, 0], [0, 0, 255], [1, 0, 0]]], dtype=np.uint8)
    weights = GrabCutWeights()
    weights.compute_weights(img, np.full((2, 3), GC_PR_FGD), ColorModel(), ColorModel())

    # 50 for equal colors, 50 * exp(-0.5) for a distance of 1, nothing across red / blue
    np.testing.assert_array_equal(weights.hori_caps, [[50, 30], [0, 0]])
    np.testing.assert_array_equal(weights.vert_caps, [[0, 0, 50]])

    g, source, sink = weights.build_flow_graph()
    edges = {(u, g.edge_target[e]): g.edge_capacity[e]
             for u in range(6) for e in g.starting_edges[u] if e % 2 == 0}
    assert edges[(0, 1)] == edges[(1, 0)] == 50
    assert edges[(1, 2)] == edges[(2, 1)] == 30
    assert edges[(2, 5)] == edges[(5, 2)] == 50
    assert edges[(3, 4)] == 0


@pytest.mark.parametrize("scale,beta", [(10, 0.5), (50, 0.1)])
def test_parameters(scale, beta) -> None:
    img = np.array([[[0, 0, 0], [2, 0, 0]]], dtype=np.uint8)
    weights = GrabCutWeights(capacity_scale=scale, smoothness_beta=beta)
    weights.compute_weights(img, np.full((1, 2), GC_PR_FGD), ColorModel(), ColorModel())
    assert weights.hori_caps[0, 0] == int(np.floor(scale * np.exp(-beta * 2) + 0.5))
