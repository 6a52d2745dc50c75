"""Constants shared by the segmentation modules."""

# Trimap labels
GC_BGD = 0      # definite background
GC_FGD = 1      # definite foreground
GC_PR_BGD = 2   # probable background
GC_PR_FGD = 3   # probable foreground

# Values written to the output mask
MASK_BACKGROUND = 0
MASK_FOREGROUND = 255

# Colours used to display results and the seed rectangle
FOREGROUND = (0, 0, 255)  # blue
BACKGROUND = (255, 0, 0)  # red
FOREGROUND_RGBA = (0, 0, 255, 255)
BACKGROUND_RGBA = (255, 0, 0, 255)
RECT_RGBA = (0, 255, 0, 255)

MIN_ITERATIONS = 1
MAX_ITERATIONS = 5


def is_probable(trimap):
    """
    :param trimap: numpy array of trimap labels
    :return: boolean array, True where the label may still change
    """
    return (trimap == GC_PR_BGD) | (trimap == GC_PR_FGD)


def is_background(trimap):
    """
    :param trimap: numpy array of trimap labels
    :return: boolean array, True for definite and probable background
    """
    return (trimap == GC_BGD) | (trimap == GC_PR_BGD)
