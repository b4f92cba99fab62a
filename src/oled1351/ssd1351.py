"""SSD1351 128x128 RGB OLED controller.

The datasheet is available at
    https://cdn-shop.adafruit.com/datasheets/SSD1351-Revision+1.3.pdf

Pin connections on a Raspberry Pi (BCM numbering, SPI0):

    Pi       SSD1351
    GPIO8  -> CS
    GPIO11 -> CLK
    GPIO10 -> DATA (MOSI)
    GPIO24 -> D/C   (any free GPIO, see PinConfig)
    GPIO25 -> RST   (any free GPIO, see PinConfig)

The panel is write-only: there is no MISO connection and nothing is ever
read back. All drawing either goes to the in-memory framebuffer (see
display() to push it) or straight to display RAM (fill_rect, draw_pixel,
draw_bitmap).
"""

from __future__ import annotations

import enum
import logging
import sys
import time
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, TextIO

from oled1351.channel import CommandChannel, Lines
from oled1351.color import WHITE, encode_color
from oled1351.errors import InvalidArgument
from oled1351.font import GlyphSource, PillowGlyphSource, render_text
from oled1351.framebuffer import Framebuffer, clip_rect

if TYPE_CHECKING:
    from oled1351.config import Config

logger = logging.getLogger(__name__)

# SSD1351 commands
CMD_SETCOLUMN = 0x15
CMD_SETROW = 0x75
CMD_WRITERAM = 0x5C
CMD_READRAM = 0x5D
CMD_SETREMAP = 0xA0
CMD_STARTLINE = 0xA1
CMD_DISPLAYOFFSET = 0xA2
CMD_DISPLAYALLOFF = 0xA4
CMD_DISPLAYALLON = 0xA5
CMD_NORMALDISPLAY = 0xA6
CMD_INVERTDISPLAY = 0xA7
CMD_FUNCTIONSELECT = 0xAB
CMD_DISPLAYOFF = 0xAE
CMD_DISPLAYON = 0xAF
CMD_PRECHARGE = 0xB1
CMD_DISPLAYENHANCE = 0xB2
CMD_CLOCKDIV = 0xB3
CMD_SETVSL = 0xB4
CMD_SETGPIO = 0xB5
CMD_PRECHARGE2 = 0xB6
CMD_SETGRAY = 0xB8
CMD_USELUT = 0xB9
CMD_PRECHARGELEVEL = 0xBB
CMD_VCOMH = 0xBE
CMD_CONTRASTABC = 0xC1
CMD_CONTRASTMASTER = 0xC7
CMD_MUXRATIO = 0xCA
CMD_COMMANDLOCK = 0xFD
CMD_HORIZSCROLL = 0x96
CMD_STOPSCROLL = 0x9E
CMD_STARTSCROLL = 0x9F

SSD1351_WIDTH = 128
SSD1351_HEIGHT = 128

# Peak bytes held in memory while streaming pixels to display RAM
DEFAULT_FLUSH_CHUNK = 1024

# Power-up initialisation, in datasheet order. Each entry is
# (command-path bytes, argument bytes or None). Three commands carry
# their argument on the command path together with the opcode.
INIT_SEQUENCE: tuple[tuple[tuple[int, ...], tuple[int, ...] | None], ...] = (
    ((CMD_COMMANDLOCK,), (0x12,)),  # unlock the MCU interface
    ((CMD_COMMANDLOCK,), (0xB1,)),  # make A2,B1,B3,BB,BE,C1 accessible
    ((CMD_DISPLAYOFF,), None),
    ((CMD_CLOCKDIV, 0xF1), None),  # 7:4 oscillator frequency, 3:0 divide ratio
    ((CMD_MUXRATIO,), (127,)),
    ((CMD_SETREMAP,), (0x74,)),
    ((CMD_SETCOLUMN,), (0x00, 0x7F)),
    ((CMD_SETROW,), (0x00, 0x7F)),
    ((CMD_STARTLINE,), (0x00,)),
    ((CMD_DISPLAYOFFSET,), (0x00,)),
    ((CMD_SETGPIO,), (0x00,)),
    ((CMD_FUNCTIONSELECT,), (0x01,)),
    ((CMD_PRECHARGE, 0x32), None),
    ((CMD_VCOMH, 0x05), None),
    ((CMD_NORMALDISPLAY,), None),
    ((CMD_CONTRASTABC,), (0xC8, 0x80, 0xC8)),
    ((CMD_CONTRASTMASTER,), (0x0F,)),
    ((CMD_SETVSL,), (0xA0, 0xB5, 0x55)),
    ((CMD_PRECHARGE2,), (0x01,)),
    ((CMD_DISPLAYON,), None),
)


class DisplayState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    OFF = "off"
    NORMAL = "normal"
    INVERTED = "inverted"


class SSD1351:
    """Drive an SSD1351 RGB OLED through a CommandChannel.

    Owns one Framebuffer (``bitmap``) for off-screen drawing. Colors are
    16-bit words throughout; use encode_color() to convert 0xRRGGBB.
    Everything is clipped to the panel: shapes entirely off-screen are
    ignored, partially visible ones are trimmed.
    """

    def __init__(
        self,
        channel: CommandChannel,
        gpio: Lines,
        reset_pin: int,
        width: int = SSD1351_WIDTH,
        height: int = SSD1351_HEIGHT,
        buffer_cols: int | None = None,
        buffer_rows: int | None = None,
        flush_chunk_bytes: int = DEFAULT_FLUSH_CHUNK,
        font: GlyphSource | None = None,
    ) -> None:
        """Set up the reset line and allocate the framebuffer.

        The reset line idles HIGH; begin() pulses it LOW.

        Args:
            channel: Command/data channel to the panel.
            gpio: GPIO lines, used for the reset pin.
            reset_pin: Pin number of the RST line.
            width: Addressable panel width in pixels.
            height: Addressable panel height in pixels.
            buffer_cols: Framebuffer width. Defaults to the panel width.
            buffer_rows: Framebuffer height. Defaults to the panel height.
            flush_chunk_bytes: Largest pixel payload handed to the channel
                at once while streaming. Bounds peak memory; independent of
                the bus transfer limit.
            font: Glyph source for the text helpers. Defaults to a
                PillowGlyphSource, created on first use.
        """
        if flush_chunk_bytes < 2:
            raise InvalidArgument(f"flush_chunk_bytes must be at least 2, got {flush_chunk_bytes}")
        self.channel = channel
        self.gpio = gpio
        self.reset_pin = reset_pin
        self.width = width
        self.height = height
        self.flush_chunk_bytes = flush_chunk_bytes
        self._font = font
        self.bitmap = Framebuffer(
            width if buffer_cols is None else buffer_cols,
            height if buffer_rows is None else buffer_rows,
        )
        self.state = DisplayState.UNINITIALIZED
        self._mode_before_off = DisplayState.NORMAL
        self.gpio.setup(self.reset_pin, self.gpio.OUT)
        self.gpio.output(self.reset_pin, self.gpio.HIGH)

    @property
    def font(self) -> GlyphSource:
        if self._font is None:
            self._font = PillowGlyphSource()
        return self._font

    # -- lifecycle ---------------------------------------------------------

    def reset(self) -> None:
        """Pulse the reset line LOW for 10 ms."""
        self.gpio.output(self.reset_pin, self.gpio.LOW)
        time.sleep(0.010)
        self.gpio.output(self.reset_pin, self.gpio.HIGH)

    def begin(self) -> None:
        """Reset the panel and run the power-up command sequence."""
        time.sleep(0.001)
        self.reset()
        self.state = DisplayState.OFF
        for codes, args in INIT_SEQUENCE:
            self.channel.send_command_bytes(codes, args)
        self.state = DisplayState.NORMAL
        logger.info("SSD1351 display initialized (%dx%d)", self.width, self.height)

    def close(self) -> None:
        """Release the bus and GPIO lines. The panel keeps showing its last image."""
        self.channel.bus.close()
        self.gpio.cleanup()
        logger.info("SSD1351 display closed")

    # -- display modes -----------------------------------------------------

    def invert_display(self) -> None:
        self.channel.send_command(CMD_INVERTDISPLAY)
        self._set_mode(DisplayState.INVERTED)

    def normal_display(self) -> None:
        self.channel.send_command(CMD_NORMALDISPLAY)
        self._set_mode(DisplayState.NORMAL)

    def _set_mode(self, mode: DisplayState) -> None:
        # While the panel is off the new mode shows once it is switched on
        if self.state is DisplayState.OFF:
            self._mode_before_off = mode
        else:
            self.state = mode

    def display_off(self) -> None:
        """Put the panel to sleep. Display RAM is retained."""
        self.channel.send_command(CMD_DISPLAYOFF)
        if self.state in (DisplayState.NORMAL, DisplayState.INVERTED):
            self._mode_before_off = self.state
        self.state = DisplayState.OFF

    def display_on(self) -> None:
        """Wake the panel, restoring the normal or inverted mode it had."""
        self.channel.send_command(CMD_DISPLAYON)
        self.state = self._mode_before_off

    def set_contrast(self, level: int = 0x0F) -> None:
        """Set the master contrast, 0 (dimmest) to 15 (full)."""
        if not 0 <= level <= 0x0F:
            raise InvalidArgument(f"contrast must be 0..15, got {level}")
        self.channel.send_command(CMD_CONTRASTMASTER, (level,))

    # -- addressing --------------------------------------------------------

    def set_window(self, x0: int, y0: int, x1: int, y1: int) -> bool:
        """Arm display RAM for a write to the inclusive rectangle (x0, y0)-(x1, y1).

        The window is clipped to the panel. Returns False, sending nothing,
        if no part of it is on the panel.
        """
        x0 = max(x0, 0)
        y0 = max(y0, 0)
        x1 = min(x1, self.width - 1)
        y1 = min(y1, self.height - 1)
        if x0 > x1 or y0 > y1:
            return False
        self.channel.send_command(CMD_SETCOLUMN, (x0, x1))
        self.channel.send_command(CMD_SETROW, (y0, y1))
        self.channel.send_command(CMD_WRITERAM)
        return True

    def _stream(self, rows: Iterable[Sequence[int]]) -> None:
        """Send rows of color words high byte first, flush_chunk_bytes at a time."""
        limit = self.flush_chunk_bytes
        buf = bytearray()
        for row in rows:
            for color in row:
                buf.append((color >> 8) & 0xFF)
                buf.append(color & 0xFF)
            while len(buf) >= limit:
                self.channel.send_data(buf[:limit])
                del buf[:limit]
        if buf:
            self.channel.send_data(buf)

    # -- framebuffer -------------------------------------------------------

    def flush(self, framebuffer: Framebuffer, x: int = 0, y: int = 0, w: int | None = None, h: int | None = None) -> None:
        """Copy a rectangle of a framebuffer to the same position on the panel.

        Defaults to the whole framebuffer. The rectangle is clipped to both
        the framebuffer and the panel.
        """
        if w is None:
            w = framebuffer.cols
        if h is None:
            h = framebuffer.rows
        rect = framebuffer.clip(x, y, w, h)
        if rect is not None:
            rect = clip_rect(*rect, self.width, self.height)
        if rect is None:
            return
        x, y, w, h = rect
        if not self.set_window(x, y, x + w - 1, y + h - 1):
            return
        self._stream(framebuffer.row(r, x, x + w) for r in range(y, y + h))

    def display(self) -> None:
        """Push the owned framebuffer to the panel."""
        self.flush(self.bitmap)

    def clear_display(self) -> None:
        """Clear the framebuffer. Call display() to blank the panel."""
        self.bitmap.clear()

    def clear_block(self, x0: int, y0: int, dx: int, dy: int) -> None:
        self.bitmap.clear_block(x0, y0, dx, dy)

    def dump_buffer(self, out: TextIO | None = None) -> None:
        """Diagnostic print of the framebuffer, one line per row."""
        out = out or sys.stdout
        for line in self.bitmap.dump():
            out.write(line + "\n")

    # -- direct drawing ----------------------------------------------------

    def fill_screen(self, color: int) -> None:
        self.fill_rect(0, 0, self.width, self.height, color)

    def fill_rect(self, x: int, y: int, w: int, h: int, color: int) -> None:
        """Fill a rectangle of display RAM with one color, bypassing the framebuffer."""
        rect = clip_rect(x, y, w, h, self.width, self.height)
        if rect is None:
            return
        x, y, w, h = rect
        self.set_window(x, y, x + w - 1, y + h - 1)
        row = [color & 0xFFFF] * w
        self._stream(row for _ in range(h))

    def draw_pixel(self, x: int, y: int, color: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        self.set_window(x, y, x, y)
        self.channel.send_data(((color >> 8) & 0xFF, color & 0xFF))

    def draw_bitmap(self, x: int, y: int, bitmap: Sequence[Sequence[int]]) -> None:
        """Write rows of color words straight to display RAM with their top-left at (x, y)."""
        if not bitmap:
            return
        h = len(bitmap)
        w = len(bitmap[0])
        if any(len(row) != w for row in bitmap):
            raise InvalidArgument("bitmap rows must all have the same length")
        if w == 0:
            return
        rect = clip_rect(x, y, w, h, self.width, self.height)
        if rect is None:
            return
        cx, cy, cw, ch = rect
        self.set_window(cx, cy, cx + cw - 1, cy + ch - 1)
        left = cx - x
        top = cy - y
        self._stream(bitmap[r][left:left + cw] for r in range(top, top + ch))

    # -- text into the framebuffer -----------------------------------------

    def draw_text(self, x: int, y: int, string: str, color: int = WHITE, space: int = 1) -> int:
        """Draw text into the framebuffer at 1:1 scale. Returns the x after the last glyph."""
        return self.draw_text2(x, y, string, color, size=1, space=space)

    def draw_text2(self, x: int, y: int, string: str, color: int = WHITE, size: int = 2, space: int = 1) -> int:
        """Draw text into the framebuffer with each font pixel scaled to size x size.

        Returns the x after the last glyph.
        """
        return render_text(self.bitmap, self.font, x, y, string, color, size=size, space=space)

    def text_width(self, string: str, size: int = 1, space: int = 1) -> int:
        """Width in pixels that draw_text2() advances for this string."""
        return len(string) * (self.font.cols * size + space)

    encode_color = staticmethod(encode_color)


def open_display(config: Config) -> SSD1351:
    """Open SPI and GPIO from config and return an SSD1351 ready for begin().

    Imports the hardware adapters lazily so that machines without the
    hardware extra (spidev, RPi.GPIO) can still use the framebuffer and
    render-test paths.
    """
    from oled1351.hardware import GPIO, SPI, SPIDEV_MAX_TRANSFER

    if config.spi.max_transfer_bytes > SPIDEV_MAX_TRANSFER:
        raise InvalidArgument(
            f"spi.max_transfer_bytes must be at most {SPIDEV_MAX_TRANSFER}, got {config.spi.max_transfer_bytes}"
        )

    spi = SPI(
        bus=config.spi.bus,
        device=config.spi.device,
        mode=config.spi.mode,
        max_speed_hz=config.spi.max_speed_hz,
    )
    try:
        gpio = GPIO()
        channel = CommandChannel(spi, gpio, config.pins.dc_pin, config.spi.max_transfer_bytes)
        return SSD1351(
            channel,
            gpio,
            config.pins.reset_pin,
            width=config.display.width,
            height=config.display.height,
            flush_chunk_bytes=config.display.flush_chunk_bytes,
        )
    except Exception:
        spi.close()
        raise
