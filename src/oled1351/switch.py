"""Momentary switch on a GPIO input line."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from oled1351.hardware import GPIO

logger = logging.getLogger(__name__)


class Switch:
    """A push button wired between a GPIO pin and ground (or VCC).

    With pull_up=True the pin is pulled HIGH and the switch shorts it to
    ground, so the raw level is 1 when open and 0 when closed. get_state()
    inverts this to the conventional 0 = open, 1 = closed.
    """

    def __init__(self, gpio: GPIO, pin: int, pull_up: bool = True) -> None:
        self.gpio = gpio
        self.pin = pin
        self.pull_up = pull_up
        pull = gpio.PUD_UP if pull_up else gpio.PUD_DOWN
        self.gpio.setup(self.pin, gpio.IN, pull)
        logger.debug("Switch on pin %d (pull-%s)", pin, "up" if pull_up else "down")

    def get_state(self) -> int:
        """Return 1 while the switch is closed, 0 while it is open."""
        state = self.gpio.input(self.pin)
        if self.pull_up:
            return 1 - state
        return state
