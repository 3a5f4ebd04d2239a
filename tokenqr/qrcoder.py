#
# Build a QR-code symbol: function patterns, data placement and masking.
#

import logging
import sys

import numpy as np

from . import bch
from . import ecccoder
from . import phrasecoder
from . import qrpenalty
from . import rsblock
from .errors import InvalidMaskPatternError

logger = logging.getLogger(__name__)

# mask functions over (row, column). Work on ints as well as numpy index arrays.
mask_functions_ = (
    lambda i, j: (i + j) % 2 == 0,
    lambda i, j: i % 2 == 0,
    lambda i, j: j % 3 == 0,
    lambda i, j: (i + j) % 3 == 0,
    lambda i, j: (i // 2 + j // 3) % 2 == 0,
    lambda i, j: (i * j) % 2 + (i * j) % 3 == 0,
    lambda i, j: ((i * j) % 2 + (i * j) % 3) % 2 == 0,
    lambda i, j: ((i * j) % 3 + (i + j) % 2) % 2 == 0)


#
def get_mask_function(mask : int):
    if (not isinstance(mask, (int, np.integer)) or mask < 0 or mask >= len(mask_functions_)):
        raise InvalidMaskPatternError(f"Bad mask pattern {mask!r}")

    return mask_functions_[mask]


class encode(object):
    #
    QR_BLACK = 0        # final pixel in black
    QR_WHITE = 255      # final pixel in white
    QR_UNUSED = 64      # not yet set, free for data

    QR_NUM_MASKS = 8

    # finder pattern
    finder_ =   np.array(
                [QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_WHITE,QR_WHITE,QR_WHITE,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_BLACK,QR_BLACK,QR_BLACK,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_BLACK,QR_BLACK,QR_BLACK,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_BLACK,QR_BLACK,QR_BLACK,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_WHITE,QR_WHITE,QR_WHITE,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK],
                 np.uint8).reshape(7,7)

    # alignment pattern
    alignment_ =np.array(
                [QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_WHITE,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_BLACK,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_WHITE,QR_WHITE,QR_WHITE,QR_BLACK,
                 QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK,QR_BLACK],np.uint8).reshape(5,5)

    # Alignment pattern centre coordinates, starting from version 2
    alignment_loc_ = (
            (6, 18),  #2
            (6, 22),
            (6, 26),
            (6, 30),
            (6, 34),
            (6, 22, 38),  #7
            (6, 24, 42),
            (6, 26, 46),
            (6, 28, 50),
            (6, 30, 54),
            (6, 32, 58),
            (6, 34, 62),
            (6, 26, 46, 66),  #14
            (6, 26, 48, 70),
            (6, 26, 50, 74),
            (6, 30, 54, 78),
            (6, 30, 56, 82),
            (6, 30, 58, 86),
            (6, 34, 62, 90),
            (6, 28, 50, 72, 94),  #21
            (6, 26, 50, 74, 98),
            (6, 30, 54, 78, 102),
            (6, 28, 54, 80, 106),
            (6, 32, 58, 84, 110),
            (6, 30, 58, 86, 114),
            (6, 34, 62, 90, 118),
            (6, 26, 50, 74, 98, 122),  #28
            (6, 30, 54, 78, 102, 126),
            (6, 26, 52, 78, 104, 130),
            (6, 30, 56, 82, 108, 134),
            (6, 34, 60, 86, 112, 138),
            (6, 30, 58, 86, 114, 142),
            (6, 34, 62, 90, 118, 146),
            (6, 30, 54, 78, 102, 126, 150),  #35
            (6, 24, 50, 76, 102, 128, 154),
            (6, 28, 54, 80, 106, 132, 158),
            (6, 32, 58, 84, 110, 136, 162),
            (6, 26, 54, 82, 110, 138, 166),
            (6, 30, 58, 86, 114, 142, 170))  #40

    @staticmethod
    def get_dimension_by_version(version:int)->int:
        if (version < 1 or version > rsblock.QR_MAX_VERSION):
            raise ValueError("Version can be between 1 to 40")

        return 17 + version * 4

    @staticmethod
    def get_alignment_positions(version:int)->tuple:
        if (version < 2):
            return ()

        return encode.alignment_loc_[version-2]

    #
    def __init__(self, level : str=rsblock.QR_ECC_Q, version : int=None, encoding : str="utf-8"):
        """
        Parameters:
        -----------
        level : str
            Error correction level 'L', 'M', 'Q' or 'H'.
        version : int
            QR-code version between 1 and 40, None picks the smallest one
            that fits the phrase.
        encoding : str
            Text encoding for str phrases.
        """
        self.pc = phrasecoder.encode(level, version, encoding)
        self.level = self.pc.level
        self.version = version
        self.dimension = 0
        self.mask = -1
        self.penalties = []
        self.qr = None
        self.qr_msk = None
        self.positions = None

    #
    def prep_finder_patterns(self):
        # the separators come with the light border around each pattern
        d = self.dimension

        self.qr[0:8,0:8] = encode.QR_WHITE
        self.qr[0:8,d-8:d] = encode.QR_WHITE
        self.qr[d-8:d,0:8] = encode.QR_WHITE

        # upper left
        self.qr[0:7,0:7]   = encode.finder_
        # upper right
        self.qr[0:7,d-7:d] = encode.finder_
        # lower left
        self.qr[d-7:d,0:7] = encode.finder_

    #
    def prep_alignment_patterns(self):
        loc = encode.get_alignment_positions(self.version)

        for row in loc:
            for col in loc:
                # overlaps a finder
                if (self.qr[row,col] != encode.QR_UNUSED):
                    continue

                self.qr[row-2:row+3,col-2:col+3] = encode.alignment_

    #
    def prep_timing_patterns(self):
        d = self.dimension

        for n in range(8, d-8):
            pixel = encode.QR_BLACK if n % 2 == 0 else encode.QR_WHITE

            # seventh column
            if (self.qr[n,6] == encode.QR_UNUSED):
                self.qr[n,6] = pixel

            # seventh row
            if (self.qr[6,n] == encode.QR_UNUSED):
                self.qr[6,n] = pixel

    # version information
    def insert_version(self):
        # For QR code versions greater or equal to 7
        if (self.version < 7):
            return

        bits = bch.bch_version_info(self.version)

        for positions in bch.get_version_positions(self.dimension):
            for i, (row, col) in enumerate(positions):
                self.qr[row,col] = encode.QR_BLACK if (bits >> i) & 1 else encode.QR_WHITE

    #
    def insert_level_mask(self, qr, mask=None):
        """Write the format information, or just reserve it when mask is None."""
        if (mask is None):
            bits = 0
        else:
            bits = bch.bch_format_info(bch.get_format_data(self.level, mask))

        for positions in bch.get_format_positions(self.dimension):
            for i, (row, col) in enumerate(positions):
                qr[row,col] = encode.QR_BLACK if (bits >> i) & 1 else encode.QR_WHITE

        # dark module
        qr[self.dimension-8,8] = encode.QR_BLACK

    #
    def prep_layout(self):
        # Reserve 2-dimensional space for QR code "graphics"
        d = encode.get_dimension_by_version(self.version)
        self.dimension = d
        self.qr = np.full((d,d),encode.QR_UNUSED,dtype=np.uint8,order='C')

        # Build basic layout..
        self.prep_finder_patterns()
        self.prep_alignment_patterns()
        self.prep_timing_patterns()
        self.insert_version()
        self.insert_level_mask(self.qr)     # just reserve

        # Going to be static..
        self.qr_msk = self.qr.copy()
        self.positions = self.get_layout_positions()

    #
    def get_layout_positions(self):
        """Data module coordinates in placement order.

            Two columns at a time from the right, upwards then downwards,
            skipping the vertical timing pattern.

            Return:
            -------
                (rows, cols) numpy arrays.
        """
        d = self.dimension
        unused = self.qr_msk == encode.QR_UNUSED
        rows = []
        cols = []
        inc = -1
        row = d - 1
        col = d - 1

        while (col > 0):
            if (col == 6):
                col -= 1

            while (0 <= row < d):
                for c in (col, col-1):
                    if (unused[row,c]):
                        rows.append(row)
                        cols.append(c)

                row += inc

            row -= inc
            inc = -inc
            col -= 2

        return np.array(rows, dtype=np.intp), np.array(cols, dtype=np.intp)

    #
    def encode_layout(self, codewords : bytes, mask : int) -> np.ndarray:
        """Place the codewords with the given mask on a copy of the layout.

            Return:
            -------
                numpy uint8 array, QR_BLACK or QR_WHITE only.
        """
        mask_func = get_mask_function(mask)
        rows, cols = self.positions

        # bits beyond the codewords stay light
        bits = np.unpackbits(np.frombuffer(bytes(codewords), dtype=np.uint8)).astype(bool)
        dark = np.zeros(len(rows), dtype=bool)
        n = min(len(bits), len(rows))
        dark[:n] = bits[:n]
        dark ^= mask_func(rows, cols)

        qr = self.qr_msk.copy()
        qr[rows,cols] = np.where(dark, encode.QR_BLACK, encode.QR_WHITE)
        self.insert_level_mask(qr, mask)
        return qr

    #
    def select_mask(self, codewords : bytes):
        """Try every mask and keep the one with the lowest penalty.

            Ties go to the lower mask number.

            Return:
            -------
                (mask, qr) of the winner.
        """
        lowest_mask = -1
        lowest_penalty = sys.maxsize
        lowest_qr = None
        self.penalties = []

        for mask in range(encode.QR_NUM_MASKS):
            qr = self.encode_layout(codewords, mask)
            pen = qrpenalty.penalty(qr == encode.QR_BLACK).calc_penalty()
            self.penalties.append(pen)

            if (pen < lowest_penalty):
                lowest_mask = mask
                lowest_penalty = pen
                lowest_qr = qr

        logger.debug("Mask penalties %s, selected mask %d", self.penalties, lowest_mask)
        return lowest_mask, lowest_qr

    #
    def generate_qr_code(self, phrase) -> np.ndarray:
        """Encode phrase into a complete symbol.

            Parameters:
            -----------
            phrase : str or bytes
                Data to be encoded in byte mode.

            Raises:
            -------
            CapacityError
                If the phrase does not fit.

            Return:
            -------
                numpy uint8 array of QR_BLACK and QR_WHITE pixels.
        """
        buffer = self.pc.encode_phrase(phrase)
        self.version = self.pc.version

        codewords = ecccoder.create_codewords(buffer, self.version, self.level)

        self.prep_layout()
        self.mask, self.qr = self.select_mask(codewords)
        return self.qr

    def get_dimension(self):
        return self.dimension

    #
    def get_qr(self):
        return self.qr

    #
    def get_matrix(self) -> np.ndarray:
        # True for a dark module
        return self.qr == encode.QR_BLACK

    #
    def get_mask(self):
        return self.mask

    #
    def get_penalties(self):
        return list(self.penalties)

    #
    def get_version_level(self):
        return self.version,self.level


#
def make_qr(phrase, level : str=rsblock.QR_ECC_Q, version : int=None, encoding : str="utf-8") -> encode:
    qr = encode(level, version, encoding)
    qr.generate_qr_code(phrase)
    return qr
