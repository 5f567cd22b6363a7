import unittest
import numpy as np
from helpers.pixel_buffer import PixelBuffer, PixelTriple


class TestPixelBuffer(unittest.TestCase):

    def test_zero_initialised(self):
        buffer = PixelBuffer(2, 3)
        self.assertEqual(buffer.height, 2)
        self.assertEqual(buffer.width, 3)
        self.assertEqual(buffer[1, 2], PixelTriple(0, 0, 0))

    def test_zero_dimensions_rejected(self):
        with self.assertRaises(ValueError):
            PixelBuffer(0, 3)
        with self.assertRaises(ValueError):
            PixelBuffer(3, 0)

    def test_get_and_set(self):
        buffer = PixelBuffer(2, 2)
        buffer[0, 1] = PixelTriple(blue=1, green=2, red=3)

        self.assertEqual(buffer[0, 1], PixelTriple(1, 2, 3))
        self.assertEqual(buffer.pixels[0, 1].tolist(), [1, 2, 3])
        self.assertEqual(buffer[0, 0], PixelTriple(0, 0, 0))

    def test_bounds_checked(self):
        buffer = PixelBuffer(2, 2)
        for position in [(2, 0), (0, 2), (-1, 0), (0, -1)]:
            with self.assertRaises(IndexError):
                buffer[position]
            with self.assertRaises(IndexError):
                buffer[position] = (1, 1, 1)

        with self.assertRaises(IndexError):
            buffer.row(2)

    def test_from_array(self):
        array = np.arange(12, dtype=np.uint8).reshape(2, 2, 3)
        buffer = PixelBuffer.from_array(array)

        self.assertIs(buffer.pixels, array)
        self.assertEqual(buffer[1, 0], PixelTriple(6, 7, 8))

    def test_from_array_rejects_bad_arrays(self):
        for array in [np.zeros((2, 2), dtype=np.uint8),
                      np.zeros((2, 2, 4), dtype=np.uint8),
                      np.zeros((2, 2, 3), dtype=np.float32),
                      np.zeros((0, 2, 3), dtype=np.uint8)]:
            with self.assertRaises(ValueError):
                PixelBuffer.from_array(array)

    def test_copy_and_equality(self):
        buffer = PixelBuffer(1, 2)
        buffer[0, 0] = (5, 6, 7)
        duplicate = buffer.copy()

        self.assertEqual(buffer, duplicate)
        duplicate[0, 0] = (0, 0, 0)
        self.assertNotEqual(buffer, duplicate)
        self.assertNotEqual(buffer, PixelBuffer(2, 1))


if __name__ == '__main__':
    unittest.main()
