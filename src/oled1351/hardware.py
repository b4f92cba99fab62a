"""SPI bus and GPIO line adapters for the Raspberry Pi.

Requires the 'hardware' extra: pip install -e ".[hardware]"
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from oled1351.errors import TransportError

logger = logging.getLogger(__name__)

# Largest single write spidev accepts (its default bufsiz)
SPIDEV_MAX_TRANSFER = 4096


class SPI:
    """Write-only SPI bus on /dev/spidev{bus}.{device} using spidev.

    The SSD1351 has no MISO line, so only writebytes is exposed. spidev's
    xfer calls overwrite the caller's buffer with read-back bytes and are
    not used.
    """

    def __init__(self, bus: int = 0, device: int = 0, mode: int = 3, max_speed_hz: int = 8_000_000) -> None:
        """Open the SPI device.

        spidev is imported lazily so that machines without the hardware
        extra can still import the rest of the package.

        Args:
            bus: SPI bus number (0 on the Pi's primary header pins).
            device: Chip-select index on that bus.
            mode: SPI clock mode. The SSD1351 needs mode 3.
            max_speed_hz: Bus clock in Hz.
        """
        import spidev

        self.bus = bus
        self.device = device
        self._spi = spidev.SpiDev()
        try:
            self._spi.open(bus, device)
        except OSError as e:
            raise TransportError(f"cannot open /dev/spidev{bus}.{device}: {e}") from e
        self._spi.mode = mode
        self._spi.max_speed_hz = max_speed_hz
        logger.info("SPI opened on /dev/spidev%d.%d (mode %d, %d Hz)", bus, device, mode, max_speed_hz)

    def writebytes(self, data: Sequence[int]) -> None:
        """Write bytes to the bus. Raises TransportError if the kernel rejects the transfer."""
        try:
            self._spi.writebytes(list(data))
        except (OSError, OverflowError) as e:
            raise TransportError(f"SPI write of {len(data)} bytes failed: {e}") from e

    def close(self) -> None:
        self._spi.close()
        logger.info("SPI closed on /dev/spidev%d.%d", self.bus, self.device)


class GPIO:
    """Digital GPIO lines in BCM numbering using RPi.GPIO."""

    OUT = "out"
    IN = "in"
    HIGH = 1
    LOW = 0
    PUD_UP = "up"
    PUD_DOWN = "down"

    def __init__(self) -> None:
        import RPi.GPIO as rpi_gpio

        self._gpio = rpi_gpio
        self._gpio.setwarnings(False)
        self._gpio.setmode(rpi_gpio.BCM)

    def setup(self, pin: int, direction: str, pull: str | None = None) -> None:
        """Configure a pin as input or output, optionally with a pull resistor."""
        g = self._gpio
        if direction == self.OUT:
            g.setup(pin, g.OUT)
            return
        if pull == self.PUD_UP:
            g.setup(pin, g.IN, pull_up_down=g.PUD_UP)
        elif pull == self.PUD_DOWN:
            g.setup(pin, g.IN, pull_up_down=g.PUD_DOWN)
        else:
            g.setup(pin, g.IN)

    def output(self, pin: int, level: int) -> None:
        self._gpio.output(pin, self._gpio.HIGH if level else self._gpio.LOW)

    def input(self, pin: int) -> int:
        return 1 if self._gpio.input(pin) else 0

    def cleanup(self) -> None:
        self._gpio.cleanup()
