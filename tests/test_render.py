"""Tests for text, HTML and image rendering."""

import numpy as np
import pytest

from tokenqr import qrcoder, render


@pytest.fixture(scope="module")
def matrix():
    return qrcoder.make_qr(b"render me", "M").get_matrix()


class TestText:
    def test_size_with_border(self, matrix):
        lines = render.to_text(matrix, border=4).split("\n")
        assert len(lines) == 21 + 8
        assert all(len(line) == (21 + 8) * 2 for line in lines)
        assert lines[0].strip() == ""

    def test_modules(self, matrix):
        lines = render.to_text(matrix, border=0, black="#", white=".").split("\n")
        assert lines[0].startswith("#######.")
        assert sum(line.count("#") for line in lines) == int(matrix.sum())


class TestHTML:
    def test_table(self, matrix):
        html = render.to_html_table(matrix)
        assert html.startswith("<table")
        assert html.endswith("</table>")
        assert html.count("<tr>") == 21
        assert html.count("<td ") == 21 * 21
        assert html.count("background:black") == int(matrix.sum())


class TestImage:
    def test_size_and_mode(self, matrix):
        img = render.to_image(matrix, cell_px=2, border=1)
        assert img.mode == "L"
        assert img.size == (46, 46)

    def test_pixels(self, matrix):
        img = render.to_image(matrix, cell_px=2, border=1)
        # quiet zone, then the top left finder corner
        assert img.getpixel((0, 0)) == 255
        assert img.getpixel((2, 2)) == 0
        assert img.getpixel((3, 3)) == 0

    def test_pixel_array(self):
        dark = np.array([[True, False], [False, True]])
        pixels = render.to_pixels(dark, cell_px=2, border=0)
        assert pixels.tolist() == [
            [0, 0, 255, 255],
            [0, 0, 255, 255],
            [255, 255, 0, 0],
            [255, 255, 0, 0]]

    def test_save_png(self, matrix, tmp_path):
        path = tmp_path / "qr.png"
        render.to_image(matrix).save(path)
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

    @pytest.mark.parametrize("cell_px,border", [(0, 4), (1, -1)])
    def test_invalid(self, matrix, cell_px, border):
        with pytest.raises(ValueError):
            render.to_pixels(matrix, cell_px, border)
