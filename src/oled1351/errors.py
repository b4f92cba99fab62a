"""Exception hierarchy for the SSD1351 driver.

All exceptions inherit from OLEDError so callers can catch everything the
driver raises with a single except clause. Out-of-range drawing is clipped
rather than raised; OutOfRange exists for callers that want to validate
coordinates up front.
"""

from __future__ import annotations


class OLEDError(Exception):
    """Base exception for all driver errors."""


class TransportError(OLEDError):
    """A write to the SPI bus failed."""


class InvalidArgument(OLEDError, ValueError):
    """A command argument or size is malformed (e.g. a byte outside 0..255)."""


class OutOfRange(OLEDError):
    """A coordinate lies outside the addressable area."""
