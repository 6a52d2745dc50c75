import numpy as np

from grabcut_segmentation.image_processing.clustering import N_COMPONENTS, farthest_point_centroids, assign_to_nearest
from grabcut_segmentation.image_processing.training import refine_model

MIN_WEIGHT = 1e-10
MIN_PROBABILITY = 1e-10
TWO_PI_CUBED = (2 * np.pi) ** 3


class GaussianComponent:
    def __init__(self):
        self.mean = np.zeros(3)
        self.variance = np.ones(3)
        self.weight = 0.0

    def __repr__(self):
        return "GaussianComponent(mean={}, variance={}, weight={:.4f})".format(
            self.mean.tolist(), self.variance.tolist(), self.weight)

    def density(self, colors):
        """
        :param colors: numpy array of shape (n, 3)
        :return: unweighted density of each color under this axis-aligned gaussian
        """
        variance = np.maximum(self.variance, 1e-10)
        diff = colors - self.mean[np.newaxis, :]
        exp_part = -0.5 * np.sum(diff * diff / variance[np.newaxis, :], axis=1)
        norm = TWO_PI_CUBED * np.sqrt(np.prod(variance))
        return np.exp(exp_part) / norm


class ColorModel:
    """
    Mixture of five independent-channel gaussians describing the colors of one class
    (foreground or background). A fresh model has zero weights and evaluates to the
    probability floor everywhere until it is trained.
    """
    def __init__(self):
        self.components = tuple(GaussianComponent() for _ in range(N_COMPONENTS))

    def __repr__(self):
        return "ColorModel(" + ", ".join(repr(c) for c in self.components) + ")"

    @property
    def weights(self):
        return np.array([c.weight for c in self.components])

    @property
    def means(self):
        return np.array([c.mean for c in self.components])

    @property
    def variances(self):
        return np.array([c.variance for c in self.components])

    def probabilities(self, colors):
        """
        :param colors: numpy array of shape (n, 3) with RGB values
        :return: numpy array of shape (n,), mixture density of each color, floored at 1e-10
        """
        colors = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
        prob = np.zeros(len(colors))
        for component in self.components:
            if component.weight < MIN_WEIGHT:
                continue
            prob += component.weight * component.density(colors)
        return np.maximum(prob, MIN_PROBABILITY)

    def probability(self, color):
        """
        :param color: RGB triplet
        :return: mixture density of the color, floored at 1e-10
        """
        return float(self.probabilities(np.asarray(color)[np.newaxis, :3])[0])

    def seed(self, samples):
        """
        Places every component on a farthest-point centroid with a uniform weight.
        Variances are kept as they are.
        :param samples: numpy array of shape (n, 3), n >= 1
        :return: the assignment of every sample to its nearest centroid
        """
        centroids = farthest_point_centroids(samples, len(self.components))
        for component, centroid in zip(self.components, centroids):
            component.mean = centroid.copy()
            component.weight = 1 / len(self.components)
        return assign_to_nearest(samples, centroids)

    def train(self, samples):
        """
        :param samples: numpy array of shape (n, 3) with the colors of the class.
        An empty sample set leaves the model untouched.
        """
        samples = np.asarray(samples, dtype=np.float64).reshape(-1, 3)
        if len(samples) == 0:
            return

        assignment = self.seed(samples)
        refine_model(self, samples, assignment)
