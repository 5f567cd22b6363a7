from transitions import Machine
from contextlib import nullcontext
import argparse
import logging
import sys
import coloredlogs
from helpers import errors, image_helpers, statemachine_helpers
from helpers.filter_helpers import Filter

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class BMPFilter(object):
    """
    Runs one image through decode, filters and encode, tracking progress with a state machine.

    The driver owns the decoded header and pixel buffer until it is reset.
    """

    def __init__(self, log_level=logging.INFO):
        self._initialiseLogging(log_level)

        self.header = None
        self.buffer = None

        states = ['init', 'ready', 'decoding', 'image_decoded', 'image_filtered', 'encoding', 'image_encoded',
                  'failed']

        transitions = [
            {'trigger': 'initialised', 'source': 'init', 'dest': 'ready'},
            {'trigger': 'start_read', 'source': 'ready', 'dest': 'decoding'},
            {'trigger': 'image_read', 'source': 'decoding', 'dest': 'image_decoded'},
            {'trigger': 'filter_applied', 'source': ['image_decoded', 'image_filtered'], 'dest': 'image_filtered'},
            {'trigger': 'start_write', 'conditions': statemachine_helpers.buffer_matches_header,
             'source': ['image_decoded', 'image_filtered'], 'dest': 'encoding'},
            {'trigger': 'image_written', 'source': 'encoding', 'dest': 'image_encoded'},
            {'trigger': 'error_raised', 'source': '*', 'dest': 'failed'},
            {'trigger': 'released', 'source': ['image_encoded', 'failed'], 'dest': 'ready'}
        ]

        self._fsm = Machine(states=states, transitions=transitions, initial='init')
        self._fsm.initialised()

    @property
    def state(self):
        return self._fsm.state

    def _initialiseLogging(self, log_level):
        logging.basicConfig(format='%(asctime)s.%(msecs)03d %(name)s %(levelname)s %(message)s', datefmt='%F %H:%M:%S',
                            level=log_level)
        self.logger = logging.getLogger("bmpfilter")
        coloredlogs.install(level=log_level, logger=self.logger)
        self.logger.propagate = False
        self.logger.debug("Initialising the BMP filter object.")

    def _fail(self, message):
        self.logger.error(message)
        self._fsm.error_raised()

    def read(self, in_stream):
        """
        Decode an image from a binary stream and take ownership of it.

        :param in_stream: Readable binary file-like object
        :return: (BMPHeader, PixelBuffer)
        """

        self._fsm.start_read()

        try:
            header, buffer = image_helpers.decode(in_stream)
        except errors.DecodeError as e:
            self._fail(str(e))
            raise

        self._fsm.image_read()
        self.header, self.buffer = header, buffer

        self.logger.info("Read a {}x{} image".format(buffer.width, buffer.height))
        return header, buffer

    def apply(self, filters):
        """
        Apply the selected filters to the owned buffer.

        Each filter runs at most once, in the order sepia, reflect, grayscale, blur, whatever order they were
        given in.

        :param filters: Iterable of Filter members or filter names
        :return: The mutated PixelBuffer
        """

        for image_filter in ordered_filters(filters):
            self._fsm.filter_applied()
            image_filter.apply(self.buffer)
            self.logger.info("Applied the {} filter".format(image_filter.value))

        return self.buffer

    def write(self, out_stream):
        """
        Encode the owned image, with its original headers, to a binary stream.

        :param out_stream: Writable binary file-like object
        """

        if not self._fsm.start_write(header=self.header, buffer=self.buffer):
            error = errors.WriteFailure("Error - image dimensions no longer match its header.")
            self._fail(str(error))
            raise error

        try:
            image_helpers.encode(self.header, self.buffer, out_stream)
        except errors.EncodeError as e:
            self._fail(str(e))
            raise

        self._fsm.image_written()
        self.logger.info("Wrote a {}x{} image".format(self.buffer.width, self.buffer.height))

    def process(self, in_stream, out_stream, filters=()):
        self.read(in_stream)
        self.apply(filters)
        self.write(out_stream)

    def reset(self):
        self._fsm.released()
        self.header = None
        self.buffer = None


def ordered_filters(filters):
    selected = set(f if isinstance(f, Filter) else Filter.from_name(f) for f in filters)
    return [f for f in Filter if f in selected]


def _parse_arguments(argv):
    parser = argparse.ArgumentParser(prog="bmpfilter",
                                     description="Transform your BMP images with powerful filters.")
    parser.add_argument("-s", "--sepia", dest="filters", action="append_const", const=Filter.SEPIA,
                        help="Apply a sepia filter for a warm, vintage look.")
    parser.add_argument("-r", "--reverse", dest="filters", action="append_const", const=Filter.REFLECT,
                        help="Create a horizontal reflection for a mirror effect.")
    parser.add_argument("-g", "--grayscale", dest="filters", action="append_const", const=Filter.GRAYSCALE,
                        help="Convert the image to classic greyscale.")
    parser.add_argument("-b", "--blur", dest="filters", action="append_const", const=Filter.BLUR,
                        help="Add a soft blur to the image.")
    parser.add_argument("-o", "--output", metavar="FILE",
                        help="Write the output to FILE instead of standard output.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every step of the conversion.")
    parser.add_argument("file", nargs="?", metavar="FILE",
                        help="BMP image to read. Standard input is used when omitted.")
    return parser.parse_args(argv)


def _open(path, mode, standard_stream):
    if path is None:
        return nullcontext(standard_stream.buffer)
    return open(path, mode)


def main(argv=None):
    args = _parse_arguments(argv)
    bmp_filter = BMPFilter(log_level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        with _open(args.file, "rb", sys.stdin) as in_stream:
            bmp_filter.read(in_stream)

        bmp_filter.apply(args.filters or ())

        # Opened only now so the input file can also be the output file
        with _open(args.output, "wb", sys.stdout) as out_stream:
            bmp_filter.write(out_stream)
            out_stream.flush()

    except OSError as e:
        bmp_filter._fail("{}: {}".format(e.filename or "", e.strerror or e))
        return EXIT_FAILURE
    except errors.BMPError:
        return EXIT_FAILURE

    return EXIT_SUCCESS


if __name__ == '__main__':
    sys.exit(main())
