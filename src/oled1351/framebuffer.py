"""In-memory pixel buffer for the SSD1351.

The buffer is a plain row-major grid of 16-bit color words. It knows
nothing about the SPI bus; SSD1351.flush() streams it to the panel.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from oled1351.errors import InvalidArgument


def clip_rect(x: int, y: int, w: int, h: int, width: int, height: int) -> tuple[int, int, int, int] | None:
    """Clip the rectangle (x, y, w, h) to a width x height area.

    A negative origin is moved to 0 (shrinking the rectangle), then the far
    edges are clamped with min(w, width - x) and min(h, height - y).
    Returns None when nothing of the rectangle remains.
    """
    if x < 0:
        w += x
        x = 0
    if y < 0:
        h += y
        y = 0
    w = min(w, width - x)
    h = min(h, height - y)
    if w <= 0 or h <= 0:
        return None
    return x, y, w, h


class Framebuffer:
    """A rows x cols grid of 16-bit color words, initialised to black.

    Drawing is clipped: writes outside the grid are ignored and reads
    outside it return 0. Partially off-grid rectangles and bitmaps are
    trimmed to the visible part.
    """

    def __init__(self, cols: int, rows: int) -> None:
        """Allocate a cleared buffer.

        Args:
            cols: Width in pixels.
            rows: Height in pixels.
        """
        if cols <= 0 or rows <= 0:
            raise InvalidArgument(f"framebuffer size must be positive, got {cols}x{rows}")
        self.cols = cols
        self.rows = rows
        self.data = [[0] * cols for _ in range(rows)]

    @property
    def width(self) -> int:
        return self.cols

    @property
    def height(self) -> int:
        return self.rows

    def clear(self) -> None:
        """Set every pixel to 0."""
        for row in self.data:
            row[:] = [0] * self.cols

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def set_pixel(self, x: int, y: int, color: int) -> None:
        if not self.in_bounds(x, y):
            return
        self.data[y][x] = color & 0xFFFF

    def get_pixel(self, x: int, y: int) -> int:
        """Return the color at (x, y), or 0 when the point is off-grid."""
        if not self.in_bounds(x, y):
            return 0
        return self.data[y][x]

    def clip(self, x: int, y: int, w: int, h: int) -> tuple[int, int, int, int] | None:
        """Clip a rectangle to the grid. See clip_rect()."""
        return clip_rect(x, y, w, h, self.cols, self.rows)

    def clear_block(self, x0: int, y0: int, dx: int, dy: int) -> None:
        """Zero a rectangle, clipped like set_pixel."""
        self.fill_rect(x0, y0, dx, dy, 0)

    def fill_rect(self, x: int, y: int, w: int, h: int, color: int) -> None:
        rect = self.clip(x, y, w, h)
        if rect is None:
            return
        x, y, w, h = rect
        color &= 0xFFFF
        for r in range(y, y + h):
            self.data[r][x:x + w] = [color] * w

    def blit(self, x: int, y: int, bitmap: Sequence[Sequence[int]]) -> None:
        """Copy rows of color words into the buffer with their top-left at (x, y)."""
        for dy, line in enumerate(bitmap):
            py = y + dy
            if py < 0:
                continue
            if py >= self.rows:
                break
            for dx, color in enumerate(line):
                self.set_pixel(x + dx, py, color)

    def row(self, y: int, x0: int = 0, x1: int | None = None) -> list[int]:
        """Return a copy of row y from x0 up to (not including) x1.

        Columns are clamped to the buffer. A row outside the buffer reads as
        an empty list.
        """
        if not 0 <= y < self.rows:
            return []
        if x1 is None:
            x1 = self.cols
        return self.data[y][max(x0, 0):min(x1, self.cols)]

    def dump(self) -> Iterator[str]:
        """Yield one line per row, 'X' for lit pixels and '.' for black."""
        for row in self.data:
            yield "".join("X" if col else "." for col in row)
