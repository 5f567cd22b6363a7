from collections import namedtuple
import numpy as np

# Channel order matches the wire: blue, green, red.
PixelTriple = namedtuple("PixelTriple", ["blue", "green", "red"])

BLUE, GREEN, RED = 0, 1, 2


class PixelBuffer(object):
    """
    Row-major height x width matrix of PixelTriples.

    Row 0 is the first scanline encountered in the file. The backing store is a
    numpy uint8 array of shape (height, width, 3) which the filters work on
    directly through the ``pixels`` attribute.
    """

    def __init__(self, height, width):
        if height <= 0 or width <= 0:
            raise ValueError("Pixel buffer dimensions must be non-zero, got {}x{}".format(height, width))

        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)

    @classmethod
    def from_array(cls, array):
        """
        Wrap an existing (height, width, 3) uint8 array without copying it.

        :param array: numpy array in B, G, R channel order
        :return: PixelBuffer
        """
        array = np.asarray(array)

        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError("Expected an array of shape (height, width, 3), got {}".format(array.shape))
        if array.dtype != np.uint8:
            raise ValueError("Expected uint8 dtype, got {}".format(array.dtype))
        if array.shape[0] == 0 or array.shape[1] == 0:
            raise ValueError("Pixel buffer dimensions must be non-zero, got {}x{}".format(*array.shape[:2]))

        buffer = cls.__new__(cls)
        buffer.pixels = array
        return buffer

    @property
    def height(self):
        return self.pixels.shape[0]

    @property
    def width(self):
        return self.pixels.shape[1]

    def _check_bounds(self, row, col):
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError("Pixel ({}, {}) is outside a {}x{} image".format(row, col, self.height, self.width))

    def __getitem__(self, position):
        row, col = position
        self._check_bounds(row, col)
        blue, green, red = self.pixels[row, col]
        return PixelTriple(int(blue), int(green), int(red))

    def __setitem__(self, position, triple):
        row, col = position
        self._check_bounds(row, col)
        self.pixels[row, col] = PixelTriple(*triple)

    def row(self, index):
        if not 0 <= index < self.height:
            raise IndexError("Row {} is outside an image of height {}".format(index, self.height))
        return self.pixels[index]

    def copy(self):
        return PixelBuffer.from_array(self.pixels.copy())

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    __hash__ = None

    def __repr__(self):
        return "PixelBuffer(height={}, width={})".format(self.height, self.width)
