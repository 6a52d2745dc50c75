import logging

import numpy as np

logger = logging.getLogger(__name__)

REFINE_ITERATIONS = 5
MIN_VARIANCE = 1.0


def refine_model(model, samples, assignment, n_iter=REFINE_ITERATIONS):
    """
    Fits each component of the model to the samples hard-assigned to it.
    The assignment is the one computed at seeding time and is not revised between passes;
    components that did not receive any sample keep their current parameters.
    :param model: ColorModel to update in place
    :param samples: numpy array of shape (n, 3)
    :param assignment: integer array of shape (n,), component index of every sample
    :param n_iter: number of refinement passes
    """
    samples = np.asarray(samples, dtype=np.float64)
    n = len(samples)
    if n == 0:
        return

    for _ in range(n_iter):
        for k, component in enumerate(model.components):
            assigned = samples[assignment == k]
            count = len(assigned)
            if count == 0:
                continue

            mean = assigned.mean(axis=0)
            variance = np.mean((assigned - mean) ** 2, axis=0)

            component.weight = count / n
            component.mean = mean
            component.variance = np.maximum(variance, MIN_VARIANCE)

    logger.debug("Refined model on %d samples, component sizes %s",
                 n, np.bincount(assignment, minlength=len(model.components)).tolist())
