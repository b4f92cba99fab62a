"""Pillow conversions between images and 16-bit color bitmaps."""

from __future__ import annotations

from PIL import Image

from oled1351.color import decode_color, encode_color
from oled1351.framebuffer import Framebuffer


def image_to_bitmap(image: Image.Image, size: tuple[int, int] | None = None) -> list[list[int]]:
    """Convert a PIL image to rows of 16-bit color words.

    Args:
        image: Any PIL image; it is converted to RGB first.
        size: Optional (width, height) to resize to before conversion.
    """
    rgb = image.convert("RGB")
    if size is not None and rgb.size != size:
        rgb = rgb.resize(size)
    width, height = rgb.size
    pixels = rgb.load()
    bitmap = []
    for y in range(height):
        row = []
        for x in range(width):
            red, green, blue = pixels[x, y]
            row.append(encode_color((red << 16) | (green << 8) | blue))
        bitmap.append(row)
    return bitmap


def framebuffer_to_image(framebuffer: Framebuffer, scale: int = 1) -> Image.Image:
    """Render a framebuffer as an RGB image, optionally enlarged by an integer scale."""
    img = Image.new("RGB", (framebuffer.cols, framebuffer.rows))
    img.putdata([decode_color(c) for row in framebuffer.data for c in row])
    if scale > 1:
        # Nearest neighbour keeps pixels crisp
        img = img.resize((framebuffer.cols * scale, framebuffer.rows * scale), Image.NEAREST)
    return img
