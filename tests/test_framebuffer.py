"""Tests for oled1351.framebuffer."""

import pytest

from oled1351.color import encode_color
from oled1351.errors import InvalidArgument
from oled1351.framebuffer import Framebuffer, clip_rect


class TestFramebufferBasics:
    """Tests for allocation, pixel access and clearing."""

    def test_new_buffer_is_black(self):
        """Verify that a new buffer has the requested size and every pixel is 0."""
        fb = Framebuffer(16, 8)
        assert fb.width == 16
        assert fb.height == 8
        assert all(fb.get_pixel(x, y) == 0 for y in range(8) for x in range(16))

    def test_invalid_size(self):
        """Verify that a zero-sized buffer is rejected."""
        with pytest.raises(InvalidArgument):
            Framebuffer(0, 10)

    def test_set_then_get(self):
        """Verify that set_pixel() followed by get_pixel() returns the same color."""
        fb = Framebuffer(10, 10)
        for x, y, c in [(0, 0, 1), (9, 9, 0xFFFF), (3, 7, 0x1234)]:
            fb.set_pixel(x, y, c)
            assert fb.get_pixel(x, y) == c

    def test_out_of_range_write_is_ignored(self):
        """Verify that writes outside the grid leave the buffer unchanged."""
        fb = Framebuffer(4, 4)
        for x, y in [(-1, 0), (0, -1), (4, 0), (0, 4), (100, 100)]:
            fb.set_pixel(x, y, 0xFFFF)
        assert fb.data == [[0] * 4 for _ in range(4)]

    def test_out_of_range_read_returns_zero(self):
        """Verify that reads outside the grid return the default 0."""
        fb = Framebuffer(4, 4)
        fb.fill_rect(0, 0, 4, 4, 0xFFFF)
        assert fb.get_pixel(-1, 0) == 0
        assert fb.get_pixel(4, 3) == 0
        assert fb.get_pixel(0, 99) == 0

    def test_clear(self):
        """Verify that clear() zeroes every pixel."""
        fb = Framebuffer(5, 3)
        fb.fill_rect(0, 0, 5, 3, 7)
        fb.clear()
        assert all(v == 0 for row in fb.data for v in row)


class TestFillRect:
    """Tests for fill_rect() and clear_block() clipping."""

    def test_full_screen_red(self):
        """Verify that filling 128x128 with encoded red sets every pixel to 0xF800."""
        fb = Framebuffer(128, 128)
        fb.fill_rect(0, 0, 128, 128, encode_color(0xFF0000))
        assert all(v == 0xF800 for row in fb.data for v in row)

    def test_interior_and_exterior(self):
        """Verify that only pixels inside the rectangle change."""
        fb = Framebuffer(10, 10)
        fb.fill_rect(2, 3, 4, 5, 0xAAAA)
        for y in range(10):
            for x in range(10):
                inside = 2 <= x < 6 and 3 <= y < 8
                assert fb.get_pixel(x, y) == (0xAAAA if inside else 0)

    def test_clips_to_far_edge(self):
        """Verify that an oversize rectangle fills up to and including the last row and column."""
        fb = Framebuffer(8, 8)
        fb.fill_rect(5, 6, 100, 100, 1)
        assert fb.get_pixel(7, 7) == 1
        assert fb.get_pixel(5, 6) == 1
        assert fb.get_pixel(4, 6) == 0

    def test_negative_origin(self):
        """Verify that a rectangle starting off-grid is trimmed to its visible part."""
        fb = Framebuffer(8, 8)
        fb.fill_rect(-2, -2, 4, 4, 1)
        assert fb.get_pixel(0, 0) == 1
        assert fb.get_pixel(1, 1) == 1
        assert fb.get_pixel(2, 2) == 0

    def test_entirely_outside_is_noop(self):
        """Verify that a rectangle fully off-grid changes nothing."""
        fb = Framebuffer(8, 8)
        fb.fill_rect(8, 0, 3, 3, 1)
        fb.fill_rect(0, -5, 3, 3, 1)
        assert all(v == 0 for row in fb.data for v in row)

    def test_clear_block(self):
        """Verify that clear_block() zeroes a rectangle and keeps its surroundings."""
        fb = Framebuffer(6, 6)
        fb.fill_rect(0, 0, 6, 6, 9)
        fb.clear_block(1, 1, 2, 2)
        assert fb.get_pixel(1, 1) == 0
        assert fb.get_pixel(2, 2) == 0
        assert fb.get_pixel(3, 3) == 9
        assert fb.get_pixel(0, 0) == 9


class TestClipRect:
    """Tests for the clip_rect() helper."""

    def test_inside(self):
        """Verify that a fully visible rectangle is returned unchanged."""
        assert clip_rect(1, 2, 3, 4, 10, 10) == (1, 2, 3, 4)

    def test_clamps_far_edges(self):
        """Verify the min(w, width - x) / min(h, height - y) rule."""
        assert clip_rect(120, 100, 20, 50, 128, 128) == (120, 100, 8, 28)

    def test_empty(self):
        """Verify that zero-sized or fully outside rectangles yield None."""
        assert clip_rect(0, 0, 0, 5, 10, 10) is None
        assert clip_rect(10, 0, 5, 5, 10, 10) is None
        assert clip_rect(-5, 0, 5, 5, 10, 10) is None


class TestBlitAndRow:
    """Tests for blit() and row()."""

    def test_blit_clips(self):
        """Verify that a bitmap overlapping the corner is copied only where visible."""
        fb = Framebuffer(4, 4)
        fb.blit(2, -1, [[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        assert fb.row(0) == [0, 0, 4, 5]
        assert fb.row(1) == [0, 0, 7, 8]
        assert fb.row(2) == [0, 0, 0, 0]

    def test_row_is_a_copy(self):
        """Verify that row() returns a copy that does not alias the buffer."""
        fb = Framebuffer(4, 1)
        r = fb.row(0, 1, 3)
        r[0] = 99
        assert fb.get_pixel(1, 0) == 0
        assert len(r) == 2

    def test_row_out_of_range(self):
        """Verify that rows outside the buffer read as empty and columns are clamped."""
        fb = Framebuffer(4, 2)
        fb.set_pixel(3, 1, 7)
        assert fb.row(500) == []
        assert fb.row(-1) == []
        assert fb.row(1, -2, 10) == [0, 0, 0, 7]


class TestDump:
    """Tests for the text dump."""

    def test_cleared_dump_is_all_dots(self):
        """Verify that a cleared buffer dumps rows x cols of '.'."""
        fb = Framebuffer(7, 3)
        fb.fill_rect(0, 0, 7, 3, 5)
        fb.clear()
        lines = list(fb.dump())
        assert lines == ["......."] * 3

    def test_marks_lit_pixels(self):
        """Verify that nonzero pixels dump as 'X'."""
        fb = Framebuffer(3, 2)
        fb.set_pixel(1, 0, 0x0001)
        assert list(fb.dump()) == [".X.", "..."]

    def test_dump_is_lazy_and_restartable(self):
        """Verify that dump() returns a generator that can be recreated with the same result."""
        fb = Framebuffer(2, 2)
        fb.set_pixel(0, 1, 1)
        first = fb.dump()
        assert next(first) == ".."
        assert list(fb.dump()) == list(fb.dump()) == ["..", "X."]
