"""Command/data channel over a write-only SPI bus.

The D/C (data/command) line tells the controller how to interpret each
byte: LOW for command bytes, HIGH for display RAM data. The line rests
LOW between transfers and is raised only for the duration of a data
payload.

Command argument bytes are sent through the data path (D/C HIGH). The
SSD1351 accepts its arguments that way and the init sequence relies on
it, so send_command() hands arguments to send_data().
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from oled1351.errors import InvalidArgument

logger = logging.getLogger(__name__)

# spidev accepts up to 4096 bytes per write; Adafruit_BBIO on the
# BeagleBone is limited to 255.
DEFAULT_MAX_TRANSFER = 1024


class Bus(Protocol):
    def writebytes(self, data: Sequence[int]) -> None: ...

    def close(self) -> None: ...


class Lines(Protocol):
    OUT: str
    HIGH: int
    LOW: int

    def setup(self, pin: int, direction: str, pull: str | None = None) -> None: ...

    def output(self, pin: int, level: int) -> None: ...

    def cleanup(self) -> None: ...


def _as_bytes(values: Sequence[int], what: str) -> bytes:
    """Validate a sequence of byte values, raising InvalidArgument on anything else."""
    # bytes(n) would silently build n zero bytes
    if isinstance(values, int):
        raise InvalidArgument(f"{what} must be a sequence, not a single integer")
    try:
        return bytes(values)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"{what} must be a sequence of integers 0..255: {e}") from e


class CommandChannel:
    """Sends command and data bytes to the display, gated by the D/C line."""

    def __init__(self, bus: Bus, gpio: Lines, dc_pin: int, max_transfer_bytes: int = DEFAULT_MAX_TRANSFER) -> None:
        """Take ownership of the D/C line and drive it LOW.

        Args:
            bus: Write-only transport with a writebytes() method.
            gpio: GPIO lines used for the D/C selector.
            dc_pin: Pin number of the D/C line.
            max_transfer_bytes: Largest payload the bus accepts in a single
                write. Longer payloads are split.
        """
        if max_transfer_bytes <= 0:
            raise InvalidArgument(f"max_transfer_bytes must be positive, got {max_transfer_bytes}")
        self.bus = bus
        self.gpio = gpio
        self.dc_pin = dc_pin
        self.max_transfer_bytes = max_transfer_bytes
        self.gpio.setup(self.dc_pin, self.gpio.OUT)
        self.gpio.output(self.dc_pin, self.gpio.LOW)

    def send_command(self, opcode: int, args: Sequence[int] | None = None) -> None:
        """Send a single opcode byte, followed by its argument bytes if given."""
        self.send_command_bytes((opcode,), args)

    def send_command_bytes(self, codes: Sequence[int], args: Sequence[int] | None = None) -> None:
        """Send several bytes on the command path in one transfer.

        A few init commands put their argument on the command path
        together with the opcode; this is how they are sent.
        """
        payload = _as_bytes(codes, "command bytes")
        data = _as_bytes(args, "command arguments") if args is not None else None
        if not payload:
            raise InvalidArgument("command must contain at least one byte")
        self.gpio.output(self.dc_pin, self.gpio.LOW)
        self.bus.writebytes(payload)
        if data is not None:
            self.send_data(data)

    def send_data(self, data: Sequence[int]) -> None:
        """Write a data payload with D/C HIGH, chunked to max_transfer_bytes.

        The D/C line is returned to LOW after the last chunk, and also when
        the bus raises part way through.
        """
        payload = _as_bytes(data, "data")
        self.gpio.output(self.dc_pin, self.gpio.HIGH)
        try:
            limit = self.max_transfer_bytes
            for start in range(0, len(payload), limit):
                self.bus.writebytes(payload[start:start + limit])
        finally:
            self.gpio.output(self.dc_pin, self.gpio.LOW)
        logger.debug("Sent %d data bytes", len(payload))
