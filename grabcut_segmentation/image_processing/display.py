import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from grabcut_segmentation.utils import FOREGROUND, BACKGROUND, MASK_FOREGROUND


def overlay_mask(image, mask, alpha=0.5):
    """
    :param image: numpy array of shape (h, w, 3) or (h, w, 4)
    :param mask: numpy array of shape (h, w) with values 0 / 255
    :param alpha: opacity of the label colors
    :return: RGB image where foreground is tinted blue and background red
    """
    rgb = image[:, :, :3].astype(np.float64)
    colors = np.where((mask == MASK_FOREGROUND)[:, :, np.newaxis], FOREGROUND, BACKGROUND)
    return ((1 - alpha) * rgb + alpha * colors).astype(np.uint8)


def plot_segmentation(image, mask, rect=None, pause=False):
    """
    Plot the source image next to the labeled overlay
    :param rect: optional (x, y, w, h) seed rectangle drawn on both panels
    :param pause: True = only displays for 0.01 seconds, False = blocks execution
    :return: the matplotlib figure
    """
    fig, axs = plt.subplots(1, 2, sharex=True, sharey=True)
    axs[0].imshow(image[:, :, :3])
    axs[0].set_title("Source")
    axs[1].imshow(overlay_mask(image, mask))
    axs[1].set_title("Segmentation")

    if rect is not None:
        x, y, w, h = rect
        for ax in axs:
            ax.add_patch(Rectangle((x - 0.5, y - 0.5), w, h, fill=False, edgecolor="#00ff00", linewidth=1.5))

    for ax in axs:
        ax.axis("off")

    if pause:
        plt.pause(0.01)
    else:
        plt.show()
    return fig
