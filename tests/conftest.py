"""Shared fixtures: recording fakes for the SPI bus and GPIO lines."""

import pytest

from oled1351.channel import CommandChannel
from oled1351.errors import TransportError
from oled1351.ssd1351 import SSD1351

DC_PIN = 24
RESET_PIN = 25


class RecordingBus:
    """Write-only bus that appends ("write", bytes) to a shared event log."""

    def __init__(self, events):
        self.events = events
        self.closed = False
        self.fail_after = None

    def writebytes(self, data):
        if self.fail_after is not None:
            if self.fail_after == 0:
                raise TransportError("bus went away")
            self.fail_after -= 1
        self.events.append(("write", bytes(data)))

    def close(self):
        self.closed = True

    @property
    def writes(self):
        return [e[1] for e in self.events if e[0] == "write"]


class RecordingGPIO:
    """GPIO lines that append ("gpio", pin, level) for every output call."""

    OUT = "out"
    IN = "in"
    HIGH = 1
    LOW = 0
    PUD_UP = "up"
    PUD_DOWN = "down"

    def __init__(self, events):
        self.events = events
        self.levels = {}
        self.modes = {}
        self.inputs = {}
        self.cleaned_up = False

    def setup(self, pin, direction, pull=None):
        self.modes[pin] = (direction, pull)

    def output(self, pin, level):
        self.levels[pin] = level
        self.events.append(("gpio", pin, level))

    def input(self, pin):
        return self.inputs.get(pin, 0)

    def cleanup(self):
        self.cleaned_up = True


class FakeGlyphs:
    """Glyph source with a 3-column cell: every glyph is a solid 3x2 block."""

    cols = 3

    def glyph_columns(self, char):
        if char == " ":
            return [0, 0, 0]
        return [0b11, 0b11, 0b11]


@pytest.fixture
def events():
    return []


@pytest.fixture
def bus(events):
    return RecordingBus(events)


@pytest.fixture
def gpio(events):
    return RecordingGPIO(events)


@pytest.fixture
def channel(bus, gpio):
    """Channel with the BeagleBone-sized 255 byte transfer limit."""
    return CommandChannel(bus, gpio, DC_PIN, max_transfer_bytes=255)


@pytest.fixture
def oled(bus, gpio, events):
    """SSD1351 on recording fakes with a 1024 byte bus limit; setup events are discarded."""
    ch = CommandChannel(bus, gpio, DC_PIN, max_transfer_bytes=1024)
    display = SSD1351(ch, gpio, RESET_PIN, font=FakeGlyphs())
    events.clear()
    return display


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Create a temporary YAML config file."""
    yaml_content = """spi:
  bus: 1
  device: 2
  max_transfer_bytes: 255

pins:
  dc_pin: 5
  reset_pin: 6
  switch_pin: 17
  switch_pull_up: false

display:
  width: 96
  height: 64
  flush_chunk_bytes: 512
  contrast: 8

demo:
  text: "Hi there"
  text_color: "#00FF00"
  background: 0x102030
  text_size: 2
  image: "logo.png"
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml_content)
    return str(config_file)


@pytest.fixture
def glyphs():
    return FakeGlyphs()
