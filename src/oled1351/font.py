"""Glyph sources for the text helpers.

A glyph source turns a character into a list of 8-bit column masks, one
per pixel column, with bit 0 as the top row. SSD1351.draw_text() walks the
masks and sets framebuffer pixels bit by bit.
"""

from __future__ import annotations

from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from oled1351.errors import InvalidArgument
from oled1351.framebuffer import Framebuffer

# Pixel rows per glyph column mask
GLYPH_ROWS = 8


class GlyphSource(Protocol):
    cols: int

    def glyph_columns(self, char: str) -> list[int]: ...


class PillowGlyphSource:
    """Rasterizes glyphs from a Pillow font into 8-row column masks.

    Glyphs are rendered into a fixed cols x 8 cell; anything wider or
    taller is cropped. Results are cached per character.
    """

    def __init__(self, font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None, cols: int = 5) -> None:
        """Prepare the glyph cell.

        Args:
            font: Any Pillow font. Defaults to Pillow's built-in font at 8px.
            cols: Cell width in pixels.
        """
        self.font = font if font is not None else ImageFont.load_default(size=GLYPH_ROWS)
        self.cols = cols
        # Align every glyph on the cap line of "A" so the baseline stays put
        self._top = self.font.getbbox("A")[1]
        self._cache: dict[str, list[int]] = {}

    def glyph_columns(self, char: str) -> list[int]:
        cached = self._cache.get(char)
        if cached is not None:
            return cached

        cell = Image.new("1", (self.cols, GLYPH_ROWS), 0)
        draw = ImageDraw.Draw(cell)
        draw.text((0, -self._top), char, fill=1, font=self.font)

        columns = []
        for x in range(self.cols):
            mask = 0
            for y in range(GLYPH_ROWS):
                if cell.getpixel((x, y)):
                    mask |= 1 << y
            columns.append(mask)
        self._cache[char] = columns
        return columns


def render_text(
    framebuffer: Framebuffer,
    glyphs: GlyphSource,
    x: int,
    y: int,
    string: str,
    color: int,
    size: int = 1,
    space: int = 1,
    background: int | None = 0,
) -> int:
    """Draw a string into a framebuffer, one glyph column mask at a time.

    Each font pixel becomes a size x size block. Unset glyph pixels are
    painted with background so text can be redrawn in place; pass None to
    leave them untouched. Pixels off the framebuffer are clipped.

    Returns:
        The x coordinate just past the last glyph and its trailing space.
    """
    if size < 1:
        raise InvalidArgument(f"text size must be at least 1, got {size}")
    set_pixel = framebuffer.set_pixel
    for c in string:
        for mask in glyphs.glyph_columns(c):
            py = y
            for _ in range(GLYPH_ROWS):
                value = color if mask & 1 else background
                if value is not None:
                    for sy in range(size):
                        for sx in range(size):
                            set_pixel(x + sx, py + sy, value)
                py += size
                mask >>= 1
            x += size
        x += space
    return x
