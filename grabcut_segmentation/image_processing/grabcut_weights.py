import logging

import numpy as np

from grabcut_segmentation.graphcut.dinic import FlowGraph
from grabcut_segmentation.utils import GC_BGD, GC_FGD

logger = logging.getLogger(__name__)

COST_EPSILON = 1e-10
MAX_TERMINAL_COST = 1e6
MAX_CAPACITY = 2 ** 31 - 1


def saturating_capacity(values):
    """
    Converts float edge weights to integer capacities: values are clipped to [0, MAX_CAPACITY]
    and rounded half up.
    :param values: numpy array of float weights
    :return: numpy array of int64 capacities
    """
    values = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0, posinf=MAX_CAPACITY, neginf=0.0)
    return np.floor(np.clip(values, 0, MAX_CAPACITY) + 0.5).astype(np.int64)


def color_distance(colors_a, colors_b):
    """
    :return: euclidean RGB distance between two arrays of colors of the same shape
    """
    diff = colors_a.astype(np.float64) - colors_b.astype(np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


class GrabCutWeights:
    def __init__(self, capacity_scale=50, smoothness_beta=0.5):
        self.capacity_scale = capacity_scale
        self.smoothness_beta = smoothness_beta

        self.h = None
        self.w = None

        self.source_caps = None
        self.sink_caps = None
        self.has_source_edge = None
        self.has_sink_edge = None
        self.hori_caps = None
        self.vert_caps = None

    def terminal_costs(self, colors, model):
        """
        :param colors: numpy array of shape (n, 3)
        :param model: trained ColorModel
        :return: -ln(p + eps) for every color, clipped to [0, MAX_TERMINAL_COST]
        """
        cost = -np.log(model.probabilities(colors) + COST_EPSILON)
        return np.clip(cost, 0, MAX_TERMINAL_COST)

    def non_terminal_weights(self, distance):
        """
        :param distance: color distance between neighbouring pixels
        :return: the weight of the edge between two pixels.
        weight is large if pixels are similar and low if not
        """
        return self.capacity_scale * np.exp(-self.smoothness_beta * distance)

    def compute_weights(self, img_rgb, trimap, fg_model, bg_model):
        """
        :param img_rgb: numpy array of shape (h, w, 3) containing the RGB image
        :param trimap: numpy array of shape (h, w) with GC_* labels
        :param fg_model: ColorModel trained on foreground samples
        :param bg_model: ColorModel trained on background samples
        """
        self.h, self.w = trimap.shape
        colors = img_rgb.reshape(-1, 3)

        # Terminal edges: source links carry the foreground cost, sink links the background cost
        fg_cost = self.terminal_costs(colors, fg_model).reshape(self.h, self.w)
        bg_cost = self.terminal_costs(colors, bg_model).reshape(self.h, self.w)

        self.source_caps = saturating_capacity(self.capacity_scale * fg_cost)
        self.sink_caps = saturating_capacity(self.capacity_scale * bg_cost)

        # Definite background is only linked to the source, definite foreground only to the sink
        self.has_source_edge = trimap != GC_FGD
        self.has_sink_edge = trimap != GC_BGD

        # Non-terminal edges: pixel to right neighbour and pixel to bottom neighbour
        hori_dist = color_distance(img_rgb[:, :-1], img_rgb[:, 1:])
        vert_dist = color_distance(img_rgb[:-1, :], img_rgb[1:, :])
        self.hori_caps = saturating_capacity(self.non_terminal_weights(hori_dist))
        self.vert_caps = saturating_capacity(self.non_terminal_weights(vert_dist))

    def build_flow_graph(self):
        """
        :return: (graph, source, sink), pixel (x, y) is node y * w + x
        """
        w, h = self.w, self.h
        n_nodes = w * h
        source = n_nodes
        sink = n_nodes + 1
        g = FlowGraph(n_nodes + 2)

        source_caps = self.source_caps.ravel().tolist()
        sink_caps = self.sink_caps.ravel().tolist()
        has_source_edge = self.has_source_edge.ravel().tolist()
        has_sink_edge = self.has_sink_edge.ravel().tolist()

        for node_id in range(n_nodes):
            if has_source_edge[node_id]:
                g.add_edge(source, node_id, source_caps[node_id])
            if has_sink_edge[node_id]:
                g.add_edge(node_id, sink, sink_caps[node_id])

        hori_caps = self.hori_caps.tolist()
        vert_caps = self.vert_caps.tolist()
        for y in range(h):
            for x in range(w):
                node_id = y * w + x

                # Both directions get the same capacity to model an undirected link
                if x < w - 1:
                    cap = hori_caps[y][x]
                    g.add_edge(node_id, node_id + 1, cap)
                    g.add_edge(node_id + 1, node_id, cap)

                if y < h - 1:
                    cap = vert_caps[y][x]
                    g.add_edge(node_id, node_id + w, cap)
                    g.add_edge(node_id + w, node_id, cap)

        logger.debug("Built flow graph with %d nodes and %d edges", g.nb_nodes, g.nb_edges)
        return g, source, sink
