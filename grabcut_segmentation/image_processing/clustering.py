import numpy as np

N_COMPONENTS = 5


def squared_distances(samples, centroids):
    """
    :param samples: numpy array of shape (n, 3)
    :param centroids: numpy array of shape (k, 3)
    :return: numpy array of shape (n, k), squared RGB distance of every sample to every centroid
    """
    diff = samples[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.sum(diff * diff, axis=2)


def farthest_point_centroids(samples, n_centroids=N_COMPONENTS):
    """
    Deterministic seeding: the first centroid is the first sample, every following one is the
    sample whose distance to its closest already chosen centroid is the largest.
    When several samples are equally far, the first one in the set is taken.
    :param samples: numpy array of shape (n, 3), n >= 1
    :param n_centroids: number of centroids to choose
    :return: numpy array of shape (n_centroids, 3)
    """
    samples = np.asarray(samples, dtype=np.float64)
    if len(samples) == 0:
        raise ValueError("cannot seed centroids from an empty sample set")

    centroids = np.zeros((n_centroids, 3), dtype=np.float64)
    centroids[0] = samples[0]

    # Distance of each sample to its nearest chosen centroid, updated as centroids are added
    min_dist = squared_distances(samples, centroids[:1])[:, 0]
    for k in range(1, n_centroids):
        # argmax keeps the first index among equal distances
        centroids[k] = samples[np.argmax(min_dist)]
        min_dist = np.minimum(min_dist, squared_distances(samples, centroids[k:k + 1])[:, 0])

    return centroids


def assign_to_nearest(samples, centroids):
    """
    :param samples: numpy array of shape (n, 3)
    :param centroids: numpy array of shape (k, 3)
    :return: integer array of shape (n,), index of the nearest centroid (lowest index on ties)
    """
    samples = np.asarray(samples, dtype=np.float64)
    if len(samples) == 0:
        return np.zeros(0, dtype=int)
    return np.argmin(squared_distances(samples, centroids), axis=1)
