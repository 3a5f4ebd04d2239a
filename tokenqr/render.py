#
# Turn a module matrix into something a person (or a camera) can look at.
#

import numpy as np
from PIL import Image

QR_BLACK = 0
QR_WHITE = 255


#
def to_pixels(dark, cell_px : int=1, border : int=4) -> np.ndarray:
    """Scale the matrix to a uint8 pixel array with a light quiet zone."""
    if (cell_px < 1 or border < 0):
        raise ValueError(f"Invalid cell size {cell_px} or border {border}")

    dark = np.asarray(dark, dtype=bool)
    pixels = np.where(dark, QR_BLACK, QR_WHITE).astype(np.uint8)
    pixels = np.pad(pixels, border, mode="constant", constant_values=QR_WHITE)
    return np.repeat(np.repeat(pixels, cell_px, axis=0), cell_px, axis=1)


#
def to_image(dark, cell_px : int=8, border : int=4) -> Image.Image:
    """Grayscale Pillow image of the symbol, ready for save() or show()."""
    return Image.fromarray(to_pixels(dark, cell_px, border))


#
def to_text(dark, border : int=4, black : str="██", white : str="  ") -> str:
    # two characters per module keeps the modules roughly square in a terminal
    dark = np.asarray(dark, dtype=bool)
    dark = np.pad(dark, border, mode="constant", constant_values=False)

    lines = []

    for row in dark:
        lines.append("".join(black if module else white for module in row))

    return "\n".join(lines)


#
def to_html_table(dark) -> str:
    """HTML table with one cell per module, stretched to its container."""
    dark = np.asarray(dark, dtype=bool)

    html = ['<table style="width: 100%;height: 100%;border-collapse: collapse;'
            'border-spacing: 0;table-layout: fixed;">', '<tbody>']

    for row in dark:
        html.append('<tr>')

        for module in row:
            html.append('<td style="background:' + ('black' if module else 'white') + '"/>')

        html.append('</tr>')

    html.append('</tbody>')
    html.append('</table>')
    return "".join(html)
