import cv2
import numpy as np


def to_rgba(img):
    """
    :param img: numpy array as returned by cv2.imread with IMREAD_UNCHANGED (grey, BGR or BGRA)
    :return: numpy array of shape (h, w, 4), RGBA order, uint8
    """
    if img.dtype != np.uint8:
        img = cv2.convertScaleAbs(img, alpha=255.0 / max(float(img.max()), 1.0))

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)


def load_rgba(path):
    """
    :param path: image file readable by OpenCV
    :return: numpy array of shape (h, w, 4) with the RGBA pixels of the image
    """
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise FileNotFoundError("Could not read image: {}".format(path))
    return to_rgba(img)


def save_mask(path, mask):
    """
    :param path: output file, the extension selects the format (png recommended)
    :param mask: numpy array of shape (h, w) with values 0 / 255
    """
    if not cv2.imwrite(str(path), np.ascontiguousarray(mask, dtype=np.uint8)):
        raise IOError("Could not write mask: {}".format(path))
