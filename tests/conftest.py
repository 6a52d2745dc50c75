import numpy as np
import pytest

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def red_blue_rgba():
    """4x4 image, left half red, right half blue."""
    image = np.zeros((4, 4, 4), dtype=np.uint8)
    image[:, :2] = RED
    image[:, 2:] = BLUE
    return image


@pytest.fixture
def noisy_rgba():
    """Deterministic textured image: a bright square on a dark noisy background."""
    rng = np.random.RandomState(0)
    image = rng.randint(0, 60, size=(10, 12, 4)).astype(np.uint8)
    image[3:7, 4:9, :3] = rng.randint(180, 255, size=(4, 5, 3))
    image[:, :, 3] = 255
    return image
