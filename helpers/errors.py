class BMPError(Exception):
    """
    Base class for everything that can go wrong while converting an image.
    """

    message = "Error - failed to process image."

    def __init__(self, message=None):
        super(BMPError, self).__init__(message or self.message)


class DecodeError(BMPError):
    message = "Error - failed to read input file."


class TruncatedHeader(DecodeError):
    message = "Error - failed to read input file: header is truncated."


class UnsupportedFormat(DecodeError):
    message = "Error - unsupported file format."


class CorruptDimensions(DecodeError):
    message = "Error - corrupted BMP file: width or height is zero."


class DimensionOverflow(DecodeError):
    message = "Error - image dimensions are too large for this system to process."


class AllocationFailure(DecodeError):
    message = "Error - not enough memory to store image."


class TruncatedScanline(DecodeError):
    message = "Error - failed to read input file: pixel data is truncated."


class EncodeError(BMPError):
    message = "Error - failed to write to output file."


class WriteFailure(EncodeError):
    pass
