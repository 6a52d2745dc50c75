from grabcut_segmentation.utils import *
from grabcut_segmentation.errors import InvalidInputError
from grabcut_segmentation.image_processing.clustering import farthest_point_centroids, assign_to_nearest
from grabcut_segmentation.image_processing.gmm import ColorModel, GaussianComponent
from grabcut_segmentation.image_processing.training import refine_model
from grabcut_segmentation.image_processing.grabcut_weights import GrabCutWeights
from grabcut_segmentation.graphcut.dinic import FlowGraph
from grabcut_segmentation.grabcut import segment, grabcut_segment, clamp_iterations
