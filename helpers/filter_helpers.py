import logging
from enum import Enum
import numpy as np
from helpers.pixel_buffer import BLUE, GREEN, RED

NEIGHBORHOOD_SIZE = 9
BLUR_TIMES = 3
SCALE = 8192


def scale_up(coefficient):
    return int(coefficient * SCALE + 0.5)


# Rows are output channels, columns are the red, green, blue inputs
SEPIA_COEFFICIENTS = np.array([
    [scale_up(0.393), scale_up(0.769), scale_up(0.189)],
    [scale_up(0.349), scale_up(0.686), scale_up(0.168)],
    [scale_up(0.272), scale_up(0.534), scale_up(0.131)]
], dtype=np.int64)


def grayscale(buffer):
    """
    Set every channel of every pixel to the average of its red, green and blue values.

    The sum is bumped by one more when it is odd before dividing by three, so results differ from plain
    rounding for some inputs.
    """
    pixels = buffer.pixels
    total = pixels.sum(axis=2, dtype=np.uint16)
    average = (total + (total & 1) + 1) // 3
    pixels[...] = average.astype(np.uint8)[:, :, np.newaxis]
    return buffer


def sepia(buffer):
    """
    Give the image a sepia tone using integer fixed-point weights, saturating at 255.
    """
    pixels = buffer.pixels
    rgb = pixels[:, :, [RED, GREEN, BLUE]].astype(np.int64)

    toned = (rgb @ SEPIA_COEFFICIENTS.T + SCALE // 2) // SCALE
    toned = np.minimum(toned, 255).astype(np.uint8)

    pixels[:, :, RED] = toned[:, :, 0]
    pixels[:, :, GREEN] = toned[:, :, 1]
    pixels[:, :, BLUE] = toned[:, :, 2]
    return buffer


def reflect(buffer):
    """
    Mirror every row horizontally.
    """
    pixels = buffer.pixels
    pixels[...] = pixels[:, ::-1].copy()
    return buffer


def box_blur(buffer):
    """
    One pass of a 3x3 mean filter.

    The whole image is snapshotted with its edge rows and columns replicated before any output pixel is written,
    so every pixel is averaged over values from the previous pass only.
    """
    pixels = buffer.pixels
    height, width = pixels.shape[:2]
    padded = np.pad(pixels, ((1, 1), (1, 1), (0, 0)), mode="edge").astype(np.uint32)

    total = np.zeros((height, width, 3), dtype=np.uint32)
    for dy in range(3):
        for dx in range(3):
            total += padded[dy:dy + height, dx:dx + width]

    pixels[...] = ((total + NEIGHBORHOOD_SIZE // 2) // NEIGHBORHOOD_SIZE).astype(np.uint8)
    return buffer


def blur(buffer):
    """
    Approximate a Gaussian blur with repeated box blurs.
    """
    for _ in range(BLUR_TIMES):
        box_blur(buffer)
    return buffer


class Filter(Enum):
    # Declaration order is the order filters run in when several are selected
    SEPIA = "sepia"
    REFLECT = "reflect"
    GRAYSCALE = "grayscale"
    BLUR = "blur"

    @classmethod
    def from_name(cls, name):
        name = FILTER_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError("Unknown filter {!r}, expected one of {}".format(
                name, ", ".join(f.value for f in cls))) from None

    def apply(self, buffer):
        logging.debug("Applying {} filter to a {}x{} image".format(self.value, buffer.height, buffer.width))
        return FILTER_FUNCTIONS[self](buffer)


FILTER_FUNCTIONS = {
    Filter.SEPIA: sepia,
    Filter.REFLECT: reflect,
    Filter.GRAYSCALE: grayscale,
    Filter.BLUR: blur
}

FILTER_ALIASES = {
    "reverse": "reflect",
    "greyscale": "grayscale"
}


def apply_filter(name, buffer):
    """
    Apply a filter selected by name to a pixel buffer in place.

    :param name: One of grayscale, sepia, reflect or blur (or a Filter member)
    :param buffer: PixelBuffer
    :return: The same PixelBuffer
    """
    if not isinstance(name, Filter):
        name = Filter.from_name(name)
    return name.apply(buffer)
