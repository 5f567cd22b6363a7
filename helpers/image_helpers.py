import logging
import sys
from collections import namedtuple
import numpy as np
from construct import Container, ConstructError, StreamError
from helpers import bmp_codecs, errors
from helpers.pixel_buffer import PixelBuffer

SUPPORTED_SIGNATURE = 0x4D42
SUPPORTED_DATA_OFFSET = 54
SUPPORTED_INFO_HEADER_SIZE = 40
SUPPORTED_BITS_PER_PIXEL = 24
SUPPORTED_COMPRESSION = 0

SCANLINE_ALIGNMENT = 4
MAX_FILE_SIZE = 0xFFFFFFFF

BMPHeader = namedtuple("BMPHeader", ["file_header", "info_header"])


def is_supported(file_header, info_header):
    """
    Return true or false depending on if the headers describe an uncompressed 24-bit BMP
    :param file_header: Parsed bmp_codecs.file_header
    :param info_header: Parsed bmp_codecs.info_header
    :return: boolean (True or False)
    """

    return file_header["signature"] == SUPPORTED_SIGNATURE \
        and file_header["data_offset"] == SUPPORTED_DATA_OFFSET \
        and info_header["header_size"] == SUPPORTED_INFO_HEADER_SIZE \
        and info_header["bits_per_pixel"] == SUPPORTED_BITS_PER_PIXEL \
        and info_header["compression"] == SUPPORTED_COMPRESSION


def determine_padding(width):
    """
    Number of zero bytes that follow each scanline so that its length is a multiple of 4.
    """
    return (SCANLINE_ALIGNMENT - (width * bmp_codecs.PIXEL_TRIPLE_SIZE) % SCANLINE_ALIGNMENT) % SCANLINE_ALIGNMENT


def read_headers(stream):
    try:
        file_header = bmp_codecs.file_header.parse_stream(stream)
        info_header = bmp_codecs.info_header.parse_stream(stream)
    except (StreamError, OSError) as e:
        raise errors.TruncatedHeader() from e

    return file_header, info_header


def image_dimensions(info_header):
    """
    Validate and return the (height, width) of the pixel matrix described by an info header.

    Height is taken as a magnitude and width is reinterpreted as unsigned, so a top-down image keeps the row
    order it has in the file.

    :param info_header: Parsed bmp_codecs.info_header
    :return: (height, width) tuple
    """

    height = abs(info_header["height"])
    if height > sys.maxsize:
        raise errors.DimensionOverflow()

    width = info_header["width"] & 0xFFFFFFFF
    if not height or not width:
        raise errors.CorruptDimensions()

    if width > (sys.maxsize - bmp_codecs.PIXEL_TRIPLE_SIZE) // bmp_codecs.PIXEL_TRIPLE_SIZE:
        raise errors.DimensionOverflow("Error - image width is too large for this system to process.")

    stride = width * bmp_codecs.PIXEL_TRIPLE_SIZE + determine_padding(width)
    if height * stride > MAX_FILE_SIZE - SUPPORTED_DATA_OFFSET:
        raise errors.DimensionOverflow()

    return height, width


def read_image(stream):
    """
    Decode a BMP image from a binary stream.

    :param stream: Readable binary file-like object positioned at the start of the file
    :return: (file_header, info_header, PixelBuffer) with the headers exactly as read
    """

    file_header, info_header = read_headers(stream)
    logging.debug("File header: {}".format(file_header))
    logging.debug("Info header: {}".format(info_header))

    if not is_supported(file_header, info_header):
        raise errors.UnsupportedFormat()

    height, width = image_dimensions(info_header)

    try:
        buffer = PixelBuffer(height, width)
    except MemoryError as e:
        raise errors.AllocationFailure() from e

    padding = determine_padding(width)
    logging.debug("Reading {} scanlines of {} pixels with {} padding bytes".format(height, width, padding))

    row_codec = bmp_codecs.scanline(width, padding)
    for row in range(height):
        try:
            parsed_row = row_codec.parse_stream(stream)
        except (StreamError, OSError) as e:
            raise errors.TruncatedScanline() from e

        buffer.pixels[row] = np.frombuffer(parsed_row["pixels"], dtype=np.uint8).reshape(width, 3)

    return file_header, info_header, buffer


def _write(stream, data):
    try:
        written = stream.write(data)
    except OSError as e:
        raise errors.WriteFailure() from e

    # Raw streams report how much they took, buffered ones return None or len(data)
    if written is not None and written != len(data):
        raise errors.WriteFailure("Error - failed to write to output file: wrote {} of {} bytes.".format(
            written, len(data)))


def write_image(file_header, info_header, buffer, stream):
    """
    Encode a BMP image to a binary stream.

    The headers are written exactly as given. Size and offset fields are never recomputed, so they must come
    from the decode that produced this buffer.

    :param file_header: bmp_codecs.file_header Container
    :param info_header: bmp_codecs.info_header Container
    :param buffer: PixelBuffer to write, rows in stored order
    :param stream: Writable binary file-like object
    """

    try:
        headers = bmp_codecs.file_header.build(file_header) + bmp_codecs.info_header.build(info_header)
    except ConstructError as e:
        raise errors.WriteFailure("Error - failed to write to output file: invalid header.") from e

    _write(stream, headers)

    # Padding always follows the buffer's own width, never a header field
    padding = determine_padding(buffer.width)
    logging.debug("Writing {} scanlines of {} pixels with {} padding bytes".format(
        buffer.height, buffer.width, padding))

    row_codec = bmp_codecs.scanline(buffer.width, padding)
    for row in range(buffer.height):
        _write(stream, row_codec.build(Container(pixels=buffer.row(row).tobytes())))


def decode(stream):
    file_header, info_header, buffer = read_image(stream)
    return BMPHeader(file_header, info_header), buffer


def encode(header, buffer, stream):
    write_image(header.file_header, header.info_header, buffer, stream)
