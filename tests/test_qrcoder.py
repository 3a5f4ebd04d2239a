"""Tests for symbol construction and mask selection."""

import numpy as np
import pytest

from tokenqr import bch, ecccoder, phrasecoder, qrcoder, rsblock
from tokenqr.errors import CapacityError, InvalidMaskPatternError, TableLookupError
from tokenqr.qrpenalty import penalty

TOKEN = "0123456789abcdef0123456789abcdef"

FINDER = np.array([
    [1, 1, 1, 1, 1, 1, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 1, 1, 1, 1, 1, 1]], dtype=bool)

# Remainder bits after the last codeword, indexed by version
REMAINDER_BITS = (
    None, 0, 7, 7, 7, 7, 7, 0, 0, 0, 0, 0, 0, 0, 3, 3, 3, 3, 3, 3, 3,
    4, 4, 4, 4, 4, 4, 4, 3, 3, 3, 3, 3, 3, 3, 0, 0, 0, 0, 0, 0)


@pytest.fixture(scope="module")
def token_qr():
    return qrcoder.make_qr(TOKEN, "Q")


def assert_finders(dark):
    d = dark.shape[0]
    for r, c in ((0, 0), (0, d - 7), (d - 7, 0)):
        assert np.array_equal(dark[r:r+7, c:c+7], FINDER)

    # light separators
    assert not dark[7, 0:8].any()
    assert not dark[0:8, 7].any()
    assert not dark[7, d-8:d].any()
    assert not dark[0:8, d-8].any()
    assert not dark[d-8, 0:8].any()
    assert not dark[d-8:d, 7].any()


class TestDimension:
    @pytest.mark.parametrize("version", range(1, 41))
    def test_side(self, version):
        assert qrcoder.encode.get_dimension_by_version(version) == 4 * version + 17

    @pytest.mark.parametrize("version", [0, 41])
    def test_invalid(self, version):
        with pytest.raises(ValueError):
            qrcoder.encode.get_dimension_by_version(version)


class TestLayout:
    @pytest.mark.parametrize("version", range(1, 41))
    def test_data_module_count(self, version):
        qr = qrcoder.encode("L", version)
        qr.prep_layout()
        rows, cols = qr.positions

        assert len(rows) == rsblock.get_total_codewords(version) * 8 + REMAINDER_BITS[version]
        assert len(set(zip(rows.tolist(), cols.tolist()))) == len(rows)

    def test_placement_starts_bottom_right(self):
        qr = qrcoder.encode("L", 1)
        qr.prep_layout()
        rows, cols = qr.positions
        assert list(zip(rows[:4].tolist(), cols[:4].tolist())) == [(20, 20), (20, 19), (19, 20), (19, 19)]
        # column 6 is never used for data
        assert 6 not in set(cols.tolist())

    def test_alignment_pattern_version_2(self):
        qr = qrcoder.make_qr(b"x", "L", 2)
        dark = qr.get_matrix()
        assert dark[18, 18]
        assert dark[16, 16:21].all() and dark[20, 16:21].all()
        assert dark[16:21, 16].all() and dark[16:21, 20].all()
        assert not dark[17, 17:20].any() and not dark[19, 17:20].any()

    def test_alignment_skips_finders(self):
        qr = qrcoder.make_qr(b"x", "L", 7)
        assert_finders(qr.get_matrix())

    def test_timing_patterns(self, token_qr):
        dark = token_qr.get_matrix()
        d = token_qr.get_dimension()
        for n in range(8, d - 8):
            assert dark[6, n] == (n % 2 == 0)
            assert dark[n, 6] == (n % 2 == 0)

    def test_dark_module(self, token_qr):
        d = token_qr.get_dimension()
        assert token_qr.get_matrix()[d - 8, 8]

    def test_no_unset_modules(self, token_qr):
        assert not np.any(token_qr.get_qr() == qrcoder.encode.QR_UNUSED)


class TestEncode:
    def test_token(self, token_qr):
        version, level = token_qr.get_version_level()
        assert (version, level) == (3, "Q")
        assert token_qr.get_matrix().shape == (29, 29)
        assert_finders(token_qr.get_matrix())

    def test_empty(self):
        qr = qrcoder.make_qr(b"", "L")
        assert qr.get_version_level() == (1, "L")
        assert qr.get_matrix().shape == (21, 21)
        assert_finders(qr.get_matrix())

    def test_too_large(self):
        with pytest.raises(CapacityError):
            qrcoder.make_qr(b"x" * 1274, "H")

    def test_forced_version_too_small(self):
        with pytest.raises(CapacityError):
            qrcoder.make_qr(TOKEN, "Q", 2)

    def test_forced_version(self):
        qr = qrcoder.make_qr(b"abc", "M", 5)
        assert qr.get_version_level() == (5, "M")
        assert qr.get_matrix().shape == (37, 37)

    def test_idempotent(self):
        a = qrcoder.make_qr(TOKEN, "H", 6).get_matrix()
        b = qrcoder.make_qr(TOKEN, "H", 6).get_matrix()
        assert np.array_equal(a, b)

    def test_str_and_bytes_agree(self):
        a = qrcoder.make_qr(TOKEN, "Q").get_matrix()
        b = qrcoder.make_qr(TOKEN.encode("ascii"), "Q").get_matrix()
        assert np.array_equal(a, b)

    def test_matrix_matches_image(self, token_qr):
        img = token_qr.get_qr()
        assert np.array_equal(token_qr.get_matrix(), img == 0)
        assert set(np.unique(img).tolist()) == {0, 255}

    def test_largest_symbol(self):
        qr = qrcoder.make_qr(b"x" * 1273, "H")
        assert qr.get_version_level() == (40, "H")
        assert qr.get_matrix().shape == (177, 177)
        assert bch.read_format_info(qr.get_matrix()) == ("H", qr.get_mask())


class TestFormatAndVersionInfo:
    @pytest.mark.parametrize("level", ["L", "M", "Q", "H"])
    def test_format_read_back(self, level):
        qr = qrcoder.make_qr(TOKEN, level)
        dark = qr.get_matrix()
        assert bch.read_format_info(dark, 0) == (level, qr.get_mask())
        assert bch.read_format_info(dark, 1) == (level, qr.get_mask())

    @pytest.mark.parametrize("version", [7, 12, 40])
    def test_version_read_back(self, version):
        qr = qrcoder.make_qr(b"hello", "L", version)
        dark = qr.get_matrix()
        assert bch.read_version_info(dark, 0) == bch.bch_version_info(version)
        assert bch.read_version_info(dark, 1) == bch.bch_version_info(version)

    def test_no_version_info_below_7(self):
        # the version 6 area right of the lower left finder carries data
        qr = qrcoder.encode("L", 6)
        qr.prep_layout()
        d = qr.get_dimension()
        assert (qr.qr_msk[d-11:d-8, 0:6] == qrcoder.encode.QR_UNUSED).all()


class TestMaskSelection:
    def codewords(self, phrase, level, version):
        buf = phrasecoder.encode(level, version).encode_phrase(phrase)
        return ecccoder.create_codewords(buf, version, level)

    def test_argmin_with_lowest_index(self, token_qr):
        codewords = self.codewords(TOKEN, "Q", 3)
        scores = [penalty(token_qr.encode_layout(codewords, mask) == 0).calc_penalty()
                  for mask in range(8)]

        assert token_qr.get_penalties() == scores
        assert token_qr.get_mask() == min(range(8), key=lambda m: (scores[m], m))

    def test_final_matrix_uses_selected_mask(self, token_qr):
        codewords = self.codewords(TOKEN, "Q", 3)
        expected = token_qr.encode_layout(codewords, token_qr.get_mask())
        assert np.array_equal(token_qr.get_qr(), expected)

    def test_each_candidate_carries_its_mask(self, token_qr):
        codewords = self.codewords(TOKEN, "Q", 3)
        for mask in range(8):
            dark = token_qr.encode_layout(codewords, mask) == 0
            assert bch.read_format_info(dark) == ("Q", mask)

    def test_masks_only_touch_data_modules(self, token_qr):
        codewords = self.codewords(TOKEN, "Q", 3)
        fixed = token_qr.qr_msk != qrcoder.encode.QR_UNUSED
        # the format strips differ per mask, every other function module agrees
        vertical, horizontal = bch.get_format_positions(token_qr.get_dimension())
        for row, col in vertical + horizontal:
            fixed[row, col] = False

        a = token_qr.encode_layout(codewords, 0)
        b = token_qr.encode_layout(codewords, 5)
        assert np.array_equal(a[fixed], b[fixed])


class TestMaskFunctions:
    def test_pattern_0(self):
        func = qrcoder.get_mask_function(0)
        assert func(0, 0)
        assert not func(0, 1)

    def test_numpy_and_int_agree(self):
        rows, cols = np.indices((12, 12))
        for mask in range(8):
            func = qrcoder.get_mask_function(mask)
            grid = func(rows, cols)
            for r in range(12):
                for c in range(12):
                    assert bool(grid[r, c]) == bool(func(r, c))

    @pytest.mark.parametrize("mask", [-1, 8, "1", None])
    def test_invalid(self, mask):
        with pytest.raises(InvalidMaskPatternError):
            qrcoder.get_mask_function(mask)

    def test_invalid_is_table_lookup_error(self):
        with pytest.raises(TableLookupError):
            qrcoder.get_mask_function(9)
