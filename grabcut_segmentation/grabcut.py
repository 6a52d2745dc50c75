import logging

import numpy as np
from tqdm import tqdm

from grabcut_segmentation.errors import InvalidInputError
from grabcut_segmentation.image_processing.gmm import ColorModel
from grabcut_segmentation.image_processing.grabcut_weights import GrabCutWeights
from grabcut_segmentation.utils import *

logger = logging.getLogger(__name__)

HYSTERESIS = 2.0


def clamp_iterations(iterations):
    return max(MIN_ITERATIONS, min(int(iterations), MAX_ITERATIONS))


def validate_rect(width, height, rect):
    """
    :param rect: (x, y, w, h) in pixel coordinates
    :raise InvalidInputError: if the rectangle is empty or not fully inside the image
    """
    rect_x, rect_y, rect_w, rect_h = rect
    if rect_w <= 0 or rect_h <= 0:
        raise InvalidInputError("Invalid rectangle: width and height must be positive")
    if rect_x < 0 or rect_y < 0 or rect_x + rect_w > width or rect_y + rect_h > height:
        raise InvalidInputError("Invalid rectangle: {} exceeds image bounds {}x{}".format(tuple(rect), width, height))


def initialize_trimap(width, height, rect):
    """
    :return: numpy array of shape (height, width), probable foreground inside the rectangle,
    definite background everywhere else
    """
    rect_x, rect_y, rect_w, rect_h = rect
    trimap = np.full((height, width), GC_BGD, dtype=np.uint8)
    trimap[rect_y:rect_y + rect_h, rect_x:rect_x + rect_w] = GC_PR_FGD
    return trimap


def collect_samples(img_rgb, trimap):
    """
    :return: (fg_samples, bg_samples), colors of the pixels labeled foreground and background
    (definite or probable), in row-major order
    """
    background = is_background(trimap)
    return img_rgb[~background], img_rgb[background]


def train_models(img_rgb, trimap, fg_model, bg_model):
    fg_samples, bg_samples = collect_samples(img_rgb, trimap)
    logger.debug("Training on %d foreground and %d background samples", len(fg_samples), len(bg_samples))
    fg_model.train(fg_samples)
    bg_model.train(bg_samples)


def reclassify_pixels(img_rgb, trimap, fg_model, bg_model):
    """
    Relabels probable pixels whose density under one model is more than twice the other one.
    Pixels in between keep their label, definite labels are never touched.
    :return: number of pixels whose label changed
    """
    probable = is_probable(trimap)
    colors = img_rgb[probable]
    fg_prob = fg_model.probabilities(colors)
    bg_prob = bg_model.probabilities(colors)

    labels = trimap[probable]
    new_labels = labels.copy()
    new_labels[fg_prob > HYSTERESIS * bg_prob] = GC_PR_FGD
    new_labels[bg_prob > HYSTERESIS * fg_prob] = GC_PR_BGD
    trimap[probable] = new_labels

    return int(np.count_nonzero(new_labels != labels))


def segment(image, rect, iterations=MAX_ITERATIONS, verbose=False, capacity_scale=50, smoothness_beta=0.5):
    """
    Rectangle-seeded GrabCut segmentation.
    :param image: numpy array of shape (h, w, 4) (RGBA) or (h, w, 3) (RGB), uint8. Alpha is ignored
    :param rect: (x, y, w, h) seed rectangle, everything outside is background
    :param iterations: number of reclassification rounds, clamped to [1, 5]
    :param verbose: True to display a progress bar over the rounds
    :return: numpy array of shape (h, w), uint8, 255 for foreground and 0 for background
    """
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] not in (3, 4) or image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidInputError("Invalid input dimensions: expected an (h, w, 4) image, got {}".format(image.shape))

    height, width = image.shape[:2]
    validate_rect(width, height, rect)
    n_iter = clamp_iterations(iterations)

    img_rgb = np.ascontiguousarray(image[:, :, :3], dtype=np.uint8)

    # All working state belongs to this call
    trimap = initialize_trimap(width, height, rect)
    fg_model = ColorModel()
    bg_model = ColorModel()
    train_models(img_rgb, trimap, fg_model, bg_model)

    for it in tqdm(range(n_iter), desc="GrabCut", disable=not verbose):
        changed = reclassify_pixels(img_rgb, trimap, fg_model, bg_model)
        logger.debug("Round %d: %d pixels relabeled", it + 1, changed)
        train_models(img_rgb, trimap, fg_model, bg_model)

    weights = GrabCutWeights(capacity_scale=capacity_scale, smoothness_beta=smoothness_beta)
    weights.compute_weights(img_rgb, trimap, fg_model, bg_model)
    graph, source, sink = weights.build_flow_graph()
    flow = graph.max_flow(source, sink)

    # The source is the background terminal: nodes it still reaches are background
    background = graph.min_cut_source_side()[:width * height].reshape(height, width)
    mask = np.where(background, MASK_BACKGROUND, MASK_FOREGROUND).astype(np.uint8)

    logger.info("Segmented %dx%d image: flow %d, %d foreground pixels",
                width, height, flow, int(np.count_nonzero(mask)))
    return mask


def _flat_bytes(buffer):
    if isinstance(buffer, np.ndarray):
        return buffer.astype(np.uint8, copy=False).reshape(-1)
    return np.frombuffer(buffer, dtype=np.uint8)


def grabcut_segment(rgba, width, height, rect_x, rect_y, rect_width, rect_height, iterations, mask_output):
    """
    Buffer interface to segment().
    :param rgba: row-major RGBA bytes, 4 per pixel (bytes-like object or uint8 numpy array)
    :param mask_output: writable buffer of at least width * height bytes, receives 0 or 255 per pixel
    :return: number of pixels written
    :raise InvalidInputError: before anything is written to mask_output
    """
    if rgba is None or width <= 0 or height <= 0:
        raise InvalidInputError("Invalid input dimensions")
    data = _flat_bytes(rgba)
    if data.size == 0:
        raise InvalidInputError("Invalid input dimensions")

    pixel_count = width * height
    output_size = mask_output.size if isinstance(mask_output, np.ndarray) else memoryview(mask_output).nbytes
    if data.size != pixel_count * 4 or output_size < pixel_count:
        raise InvalidInputError("Buffer length mismatch")
    if not isinstance(mask_output, np.ndarray) and memoryview(mask_output).readonly:
        raise InvalidInputError("Output buffer is read-only")

    mask = segment(data.reshape(height, width, 4), (rect_x, rect_y, rect_width, rect_height), iterations)

    if isinstance(mask_output, np.ndarray):
        mask_output.flat[:pixel_count] = mask.ravel()
    else:
        np.frombuffer(mask_output, dtype=np.uint8)[:pixel_count] = mask.ravel()
    return pixel_count
