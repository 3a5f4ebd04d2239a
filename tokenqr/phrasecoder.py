#
# Handle encoding of phrases in 8-bit byte mode and selecting the
# smallest QR-code version the phrase fits in.
#

import logging

from . import rsblock
from .bitbuffer import bitbuffer
from .errors import CapacityError, InvalidVersionLevelError

logger = logging.getLogger(__name__)


class encode(object):
    """
    This class implements encoding of arbitrary phrases using the
    8-bit byte QR-code encoding mode.
    """

    # Modes..
    QR_MODE_BYTE = 0b0100

    # Width of the length field in byte mode per version range
    QR_BYTE_LEN_1_9 = 8
    QR_BYTE_LEN_10_40 = 16

    # Padding codewords
    QR_PAD0 = 0b11101100
    QR_PAD1 = 0b00010001

    #
    def __init__(self, level : str=rsblock.QR_ECC_Q, version : int=None, encoding : str="utf-8"):
        """
        Parameters:
        -----------
        level : str
            Error correction level 'L', 'M', 'Q' or 'H'.
        version : int
            QR-code version between 1 and 40. None selects the smallest
            version the phrase fits in.
        encoding : str
            Text encoding used when the phrase is a str.
        """
        self.level = rsblock.normalize_level(level)
        self.encoding = encoding

        if (version is not None and (version < 1 or version > rsblock.QR_MAX_VERSION)):
            raise InvalidVersionLevelError(f"Invalid QR-code version {version}")

        self.forced_version = version
        self.version = version

    #
    @staticmethod
    def get_length_bits(version : int) -> int:
        if (version < 1 or version > rsblock.QR_MAX_VERSION):
            raise InvalidVersionLevelError(f"Invalid QR-code version {version}")

        if (version < 10):
            return encode.QR_BYTE_LEN_1_9

        return encode.QR_BYTE_LEN_10_40

    #
    @staticmethod
    def get_encoded_bits(length : int, version : int) -> int:
        # mode indicator + length field + payload, no terminator
        return 4 + encode.get_length_bits(version) + 8 * length

    #
    @staticmethod
    def get_max_length(version : int, level : str) -> int:
        """Largest number of bytes that fits into version/level."""
        capacity = rsblock.get_data_capacity(version, level) * 8
        return max(0, (capacity - encode.get_encoded_bits(0, version)) // 8)

    #
    @staticmethod
    def find_version(length : int, level : str=rsblock.QR_ECC_Q) -> int:
        """Find the smallest version that holds length bytes.

            Raises:
            -------
            CapacityError
                If not even version 40 is large enough.
        """
        # brute force search.. 40 versions at most
        for version in range(1, rsblock.QR_MAX_VERSION + 1):
            capacity = rsblock.get_data_capacity(version, level) * 8

            if (encode.get_encoded_bits(length, version) <= capacity):
                return version

        raise CapacityError(f"Phrase of {length} bytes does not fit into any QR-code version at level {level}")

    #
    def to_bytes_(self, phrase) -> bytes:
        if (isinstance(phrase, str)):
            return phrase.encode(self.encoding)

        if (isinstance(phrase, (bytes, bytearray, memoryview))):
            return bytes(phrase)

        raise TypeError(f"Input phrase must be str or bytes got '{type(phrase)}'")

    #
    def encode_with_trailer_(self, buffer : bitbuffer, max_len : int) -> bitbuffer:
        """Internal method for adding terminating zeros and padding.

            Parameters:
            -----------
            buffer : bitbuffer
                Mode, length and payload so far.
            max_len : int
                Maximum length of the encoded phrase (in octets).

            Raises:
            -------
            CapacityError
                If the encoded phrase is longer than the data codewords of the version.

            Return:
            -------
                the same bitbuffer, exactly max_len octets long.
        """
        capacity = max_len * 8

        if (buffer.length_in_bits() > capacity):
            raise CapacityError(f"Code length overflow ({buffer.length_in_bits()} > {capacity})")

        # terminating zeroes
        if (buffer.length_in_bits() + 4 <= capacity):
            buffer.put(0, 4)

        # align to 8 bits
        while (buffer.length_in_bits() % 8 != 0):
            buffer.put_bit(False)

        pad = encode.QR_PAD0

        while (buffer.length_in_bits() < capacity):
            buffer.put(pad, 8)
            pad = encode.QR_PAD1 if pad == encode.QR_PAD0 else encode.QR_PAD0

        return buffer

    #
    def encode_phrase(self, phrase) -> bitbuffer:
        """Encode a phrase in byte mode.

            Parameters:
            -----------
            phrase : str or bytes
                Input phrase to be encoded.

            Return:
            -------
                bitbuffer containing the entire encoded phrase with preamble,
                terminator and padding. self.version holds the version used.
        """
        data = self.to_bytes_(phrase)

        if (self.forced_version is None):
            self.version = encode.find_version(len(data), self.level)
            logger.debug("Selected version %d for %d bytes at level %s",
                         self.version, len(data), self.level)

        buffer = bitbuffer()
        buffer.put(encode.QR_MODE_BYTE, 4)
        buffer.put(len(data), encode.get_length_bits(self.version))

        for byte in data:
            buffer.put(byte, 8)

        return self.encode_with_trailer_(buffer, rsblock.get_data_capacity(self.version, self.level))
