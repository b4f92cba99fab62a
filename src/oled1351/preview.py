"""Pygame window that previews the framebuffer on a desktop.

Requires the 'preview' extra: pip install -e ".[preview]"
"""

from __future__ import annotations

import logging

import pygame
from PIL import Image

logger = logging.getLogger(__name__)


class PreviewWindow:
    """Shows framebuffer renders in a Pygame window, scaled up for visibility."""

    def __init__(self, width: int = 128, height: int = 128, scale: int = 4) -> None:
        """Open the Pygame window.

        Args:
            width: Panel width in pixels.
            height: Panel height in pixels.
            scale: Integer zoom factor; a 128x128 panel is tiny on a
                desktop monitor.
        """
        pygame.init()
        self.width = width * scale
        self.height = height * scale
        self.scale = scale
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption("SSD1351 preview")
        logger.info("Pygame preview initialized (%dx%d, x%d)", width, height, scale)

    def update(self, pil_image: Image.Image) -> None:
        """Blit a PIL image, resized to the window, and flip the display."""
        if pil_image.size != (self.width, self.height):
            pil_image = pil_image.resize((self.width, self.height), Image.NEAREST)
        raw = pil_image.convert("RGB").tobytes()
        surface = pygame.image.frombytes(raw, pil_image.size, "RGB")
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def handle_events(self) -> bool:
        """Process Pygame events. Returns False if the window should close."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logger.info("Received QUIT event")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logger.info("Received ESC keypress")
                return False
        return True

    def close(self) -> None:
        logger.info("Closing Pygame preview")
        pygame.quit()
