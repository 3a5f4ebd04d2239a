#
# Mask penalty scoring. Lower is better.
#

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


class penalty(object):
    # dark-light-dark-dark-dark-light-dark, a finder look-alike
    rule3_pat = np.array([True, False, True, True, True, False, True])

    # 8-neighbourhood of a module
    neighbours_ = ((-1,-1), (-1,0), (-1,1), (0,-1), (0,1), (1,-1), (1,0), (1,1))

    def __init__(self, dark):
        """
        Parameters:
        -----------
        dark : 2-dimensional array of bool
            The fully placed symbol, True for a dark module.
        """
        self.qr = np.asarray(dark, dtype=bool)
        # size of the qr code
        self.d = self.qr.shape[0]

    #
    def calc_rule1(self) -> int:
        # Count same coloured modules among the 8 neighbours of each module.
        # More than 5 adds 3 + (count - 5) points.
        d = self.d
        padded = np.full((d + 2, d + 2), -1, dtype=np.int8)
        padded[1:-1,1:-1] = self.qr
        center = self.qr.astype(np.int8)
        same = np.zeros((d, d), dtype=np.int32)

        for dy, dx in penalty.neighbours_:
            same += padded[1+dy:d+1+dy,1+dx:d+1+dx] == center

        over = same[same > 5]
        return int(np.sum(3 + over - 5))

    #
    def calc_rule2(self) -> int:
        # 3 points for every uniformly coloured 2x2 block, overlaps included
        q = self.qr
        count = (q[:-1,:-1].astype(np.int8) + q[1:,:-1] + q[:-1,1:] + q[1:,1:])
        return 3 * int(np.count_nonzero((count == 0) | (count == 4)))

    #
    def calc_rule3(self) -> int:
        # 40 points for each 1:1:3:1:1 run, rows and columns separately
        if (self.d < 7):
            return 0

        horiz = sliding_window_view(self.qr, 7, axis=1)
        vert = sliding_window_view(self.qr, 7, axis=0)

        found = np.count_nonzero(np.all(horiz == penalty.rule3_pat, axis=-1))
        found += np.count_nonzero(np.all(vert == penalty.rule3_pat, axis=-1))
        return 40 * int(found)

    #
    def calc_rule4(self) -> int:
        total = self.d * self.d
        black = int(np.count_nonzero(self.qr))

        percent = 100 * black / total
        return 10 * int(abs(percent - 50) // 5)

    #
    def calc_penalty(self) -> int:
        return self.calc_rule1() + self.calc_rule2() + self.calc_rule3() + self.calc_rule4()
