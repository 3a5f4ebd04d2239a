#
# BCH codes protecting the format (level + mask) and version information.
#

from . import rsblock
from .errors import InvalidVersionLevelError

G15 = 0b10100110111
G18 = 0b1111100100101
G15_MASK = 0b101010000010010

# 2 bit level indicator in the format information
ecc_format_bits_ = {rsblock.QR_ECC_L:0b01, rsblock.QR_ECC_M:0b00,
                    rsblock.QR_ECC_Q:0b11, rsblock.QR_ECC_H:0b10}
format_bits_ecc_ = {v: k for k, v in ecc_format_bits_.items()}


#
def bch_remainder_(data : int, gen : int) -> int:
    d = data

    while (d.bit_length() >= gen.bit_length()):
        d ^= gen << (d.bit_length() - gen.bit_length())

    return d


#
def bch_format_info(data : int) -> int:
    """15 bit format information for the 5 bit level + mask value."""
    return ((data << 10) | bch_remainder_(data << 10, G15)) ^ G15_MASK


#
def bch_version_info(version : int) -> int:
    """18 bit version information, only used by versions 7 and above."""
    return (version << 12) | bch_remainder_(version << 12, G18)


#
def get_format_data(level : str, mask : int) -> int:
    return (ecc_format_bits_[rsblock.normalize_level(level)] << 3) | mask


#
def decode_format_info(bits : int):
    """Find the level and mask of the nearest valid format information.

        Up to 3 flipped bits are corrected.

        Raises:
        -------
        ValueError
            If no codeword is within 3 bits.

        Return:
        -------
            (level, mask)
    """
    best = None
    best_dist = 16

    for data in range(32):
        dist = bin(bch_format_info(data) ^ bits).count("1")

        if (dist < best_dist):
            best = data
            best_dist = dist

    if (best_dist > 3):
        raise ValueError(f"Undecodable format information {bits:015b}")

    return format_bits_ecc_[best >> 3], best & 0b111


#
def get_format_positions(dimension : int):
    """Coordinates of format bits 0..14 for both copies.

        Return:
        -------
            (vertical, horizontal) lists of (row, col). The vertical copy
            runs along column 8, the horizontal one along row 8.
    """
    vertical = []
    horizontal = []

    for i in range(15):
        if (i < 6):
            vertical.append((i, 8))
        elif (i < 8):
            vertical.append((i + 1, 8))
        else:
            vertical.append((dimension - 15 + i, 8))

        if (i < 8):
            horizontal.append((8, dimension - i - 1))
        elif (i < 9):
            horizontal.append((8, 15 - i))
        else:
            horizontal.append((8, 15 - i - 1))

    return vertical, horizontal


#
def get_version_positions(dimension : int):
    """Coordinates of version bits 0..17, upper right then lower left."""
    upper_rght = [(i // 3, i % 3 + dimension - 11) for i in range(18)]
    lower_left = [(i % 3 + dimension - 11, i // 3) for i in range(18)]
    return upper_rght, lower_left


#
def read_format_info(dark, copy : int=0):
    """Read back the format information of a symbol.

        Parameters:
        -----------
        dark : 2-dimensional array of bool
            The symbol, True for a dark module.
        copy : int
            0 reads the strip along column 8, 1 the strip along row 8.

        Return:
        -------
            (level, mask)
    """
    positions = get_format_positions(len(dark))[copy]
    bits = 0

    for i, (row, col) in enumerate(positions):
        if (dark[row][col]):
            bits |= 1 << i

    return decode_format_info(bits)


#
def read_version_info(dark, copy : int=0) -> int:
    dimension = len(dark)

    if (dimension < 45):
        raise InvalidVersionLevelError("Versions below 7 carry no version information")

    bits = 0

    for i, (row, col) in enumerate(get_version_positions(dimension)[copy]):
        if (dark[row][col]):
            bits |= 1 << i

    return bits
