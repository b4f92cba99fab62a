"""Demo scene drawn by the command line entry point."""

from __future__ import annotations

import logging

from PIL import Image

from oled1351.color import encode_color
from oled1351.config import DemoConfig
from oled1351.font import GlyphSource, render_text
from oled1351.framebuffer import Framebuffer
from oled1351.imaging import image_to_bitmap

logger = logging.getLogger(__name__)

# Circle bitmap size in pixels
CIRCLE_SIZE = 20


def circle_bitmap(cx: int, cy: int, r: int, color: int, size: int = CIRCLE_SIZE, background: int = 0) -> list[list[int]]:
    """Return a size x size bitmap with a one-pixel circle outline of radius r."""
    rows = []
    for yy in range(size):
        row = []
        for xx in range(size):
            # Points whose squared distance is within a band around r^2
            if abs((cx - xx) ** 2 + (cy - yy) ** 2 - r ** 2) < r:
                row.append(color)
            else:
                row.append(background)
        rows.append(row)
    return rows


def draw_scene(framebuffer: Framebuffer, demo: DemoConfig, glyphs: GlyphSource) -> None:
    """Paint the demo into a framebuffer: background, optional image, circle, text."""
    background = encode_color(demo.background)
    text_color = encode_color(demo.text_color)

    framebuffer.fill_rect(0, 0, framebuffer.cols, framebuffer.rows, background)

    if demo.image:
        with Image.open(demo.image) as img:
            framebuffer.blit(0, 0, image_to_bitmap(img, (framebuffer.cols, framebuffer.rows)))
        logger.info("Drew image %s", demo.image)

    # RGB bars along the bottom edge
    bar_h = max(framebuffer.rows // 16, 1)
    bar_w = framebuffer.cols // 3
    for i, rgb in enumerate((0xFF0000, 0x00FF00, 0x0000FF)):
        framebuffer.fill_rect(i * bar_w, framebuffer.rows - bar_h, bar_w, bar_h, encode_color(rgb))

    half = CIRCLE_SIZE // 2
    framebuffer.blit(
        framebuffer.cols - CIRCLE_SIZE - 2,
        2,
        circle_bitmap(half, half, half - 1, text_color, background=background),
    )

    if demo.text:
        render_text(
            framebuffer, glyphs, 2, 2, demo.text, text_color,
            size=demo.text_size, background=None,
        )
