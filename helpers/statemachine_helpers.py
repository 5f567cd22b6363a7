from helpers import image_helpers


def buffer_matches_header(header, buffer):
    """
    Headers are written back unchanged, so they are only valid for a buffer of the dimensions they were read with.
    """
    return buffer is not None \
        and (buffer.height, buffer.width) == image_helpers.image_dimensions(header.info_header)
