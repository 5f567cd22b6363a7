from construct import \
    Struct, Padding, Bytes, Byte, Int16ul, Int32ul, Int32sl

# Little-endian throughout, no alignment gaps between fields.

file_header = Struct(
    # "BM" read as a little-endian u16 is 0x4D42
    "signature" / Int16ul,
    "file_size" / Int32ul,
    "reserved1" / Int16ul,
    "reserved2" / Int16ul,
    "data_offset" / Int32ul
)

info_header = Struct(
    "header_size" / Int32ul,
    "width" / Int32sl,
    # Positive is bottom-up, negative is top-down. Rows are kept in file order either way.
    "height" / Int32sl,
    "planes" / Int16ul,
    "bits_per_pixel" / Int16ul,
    "compression" / Int32ul,
    "image_size" / Int32ul,
    "x_resolution" / Int32sl,
    "y_resolution" / Int32sl,
    "colors_used" / Int32ul,
    "important_colors" / Int32ul
)

pixel_triple = Struct(
    "blue" / Byte,
    "green" / Byte,
    "red" / Byte
)

FILE_HEADER_SIZE = file_header.sizeof()
INFO_HEADER_SIZE = info_header.sizeof()
PIXEL_TRIPLE_SIZE = pixel_triple.sizeof()


def scanline(width, padding):
    """
    One row of pixel data as it appears on the wire.

    :param width: Number of pixels in the row
    :param padding: Number of zero bytes after the pixels (0-3)
    :return: A Struct whose "pixels" field holds the raw B, G, R bytes of the row
    """
    return Struct(
        "pixels" / Bytes(width * PIXEL_TRIPLE_SIZE),
        Padding(padding)
    )
