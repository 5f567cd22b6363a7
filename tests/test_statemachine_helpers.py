import io
import unittest
from helpers import image_helpers, statemachine_helpers
from helpers.pixel_buffer import PixelBuffer
from bmp_samples import make_bmp


class TestStatemachineHelpers(unittest.TestCase):

    def setUp(self):
        rows = [[(1, 2, 3)] * 3 for _ in range(2)]
        self.header, self.buffer = image_helpers.decode(io.BytesIO(make_bmp(rows, top_down=True)))

    def test_buffer_matches_its_own_header(self):
        self.assertTrue(statemachine_helpers.buffer_matches_header(self.header, self.buffer))

    def test_resized_buffer(self):
        self.assertFalse(statemachine_helpers.buffer_matches_header(self.header, PixelBuffer(3, 2)))
        self.assertFalse(statemachine_helpers.buffer_matches_header(self.header, PixelBuffer(2, 4)))

    def test_missing_buffer(self):
        self.assertFalse(statemachine_helpers.buffer_matches_header(self.header, None))


if __name__ == '__main__':
    unittest.main()
