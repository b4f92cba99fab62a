"""Color conversion between 24-bit RGB and the SSD1351 16-bit 5/6/5 word."""

from __future__ import annotations

# Bit depth maxima of the packed color word
RED_MAX = 0x1F
GREEN_MAX = 0x3F
BLUE_MAX = 0x1F

BLACK = 0x0000
WHITE = 0xFFFF


def _scale(channel: int, out_max: int) -> int:
    """Linearly rescale an 8-bit channel to 0..out_max."""
    return round(channel / 0xFF * out_max)


def pack(red: int, green: int, blue: int) -> int:
    """Pack already-scaled channels as (((R5 << 6) | G6) << 5) | B5."""
    red = min(max(red, 0), RED_MAX)
    green = min(max(green, 0), GREEN_MAX)
    blue = min(max(blue, 0), BLUE_MAX)
    return (((red << 6) | green) << 5) | blue


def encode_color(rgb: int) -> int:
    """Convert a 0xRRGGBB value to a 16-bit color word.

    Each channel is masked to 8 bits, so oversized inputs never spill into
    a neighbouring channel.
    """
    red = (rgb >> 16) & 0xFF
    green = (rgb >> 8) & 0xFF
    blue = rgb & 0xFF
    return pack(_scale(red, RED_MAX), _scale(green, GREEN_MAX), _scale(blue, BLUE_MAX))


def color565(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels by truncation (drops the low bits, no rounding)."""
    c = (r & 0xFF) >> 3
    c <<= 6
    c |= (g & 0xFF) >> 2
    c <<= 5
    c |= (b & 0xFF) >> 3
    return c


def decode_color(color: int) -> tuple[int, int, int]:
    """Expand a 16-bit color word back to an 8-bit (r, g, b) tuple."""
    red = (color >> 11) & RED_MAX
    green = (color >> 5) & GREEN_MAX
    blue = color & BLUE_MAX
    return (
        _scale_up(red, RED_MAX),
        _scale_up(green, GREEN_MAX),
        _scale_up(blue, BLUE_MAX),
    )


def _scale_up(value: int, in_max: int) -> int:
    return round(value / in_max * 0xFF)
