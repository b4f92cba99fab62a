"""Tests for oled1351.channel."""

import pytest

from conftest import DC_PIN
from oled1351.channel import CommandChannel
from oled1351.errors import InvalidArgument, TransportError


class TestConstruction:
    """Tests for CommandChannel setup of the D/C line."""

    def test_dc_configured_low(self, bus, gpio, events):
        """Verify that the D/C pin is set up as an output and driven LOW."""
        CommandChannel(bus, gpio, DC_PIN)
        assert gpio.modes[DC_PIN] == (gpio.OUT, None)
        assert events == [("gpio", DC_PIN, 0)]

    def test_rejects_non_positive_limit(self, bus, gpio):
        """Verify that a zero transfer limit is refused."""
        with pytest.raises(InvalidArgument):
            CommandChannel(bus, gpio, DC_PIN, max_transfer_bytes=0)


class TestSendData:
    """Tests for send_data() chunking and D/C handling."""

    def test_300_bytes_with_255_limit(self, channel, bus, events):
        """Verify that 300 bytes become exactly two writes (255 + 45) inside one D/C HIGH span."""
        events.clear()
        payload = [0xAB, 0xCD] + [i & 0xFF for i in range(298)]
        channel.send_data(payload)

        assert [len(w) for w in bus.writes] == [255, 45]
        assert bus.writes[0] + bus.writes[1] == bytes(payload)
        assert events[0] == ("gpio", DC_PIN, 1)
        assert events[1][0] == "write"
        assert events[2][0] == "write"
        assert events[3] == ("gpio", DC_PIN, 0)
        assert len(events) == 4

    def test_exact_multiple_of_limit(self, channel, bus):
        """Verify that 510 bytes split into two full chunks with no empty trailing write."""
        channel.send_data(bytes(510))
        assert [len(w) for w in bus.writes] == [255, 255]

    def test_dc_restored_when_bus_fails(self, channel, bus, gpio, events):
        """Verify that the D/C line goes back LOW and the transport error propagates."""
        bus.fail_after = 1
        with pytest.raises(TransportError):
            channel.send_data(bytes(600))
        assert gpio.levels[DC_PIN] == 0
        assert events[-1] == ("gpio", DC_PIN, 0)

    def test_rejects_bad_byte(self, channel, bus, gpio, events):
        """Verify that a value above 255 raises before any line is touched."""
        events.clear()
        with pytest.raises(InvalidArgument):
            channel.send_data([1, 256])
        assert events == []

    def test_rejects_scalar(self, channel):
        """Verify that a bare integer is not mistaken for a byte count."""
        with pytest.raises(InvalidArgument):
            channel.send_data(5)


class TestSendCommand:
    """Tests for send_command() and send_command_bytes()."""

    def test_opcode_only(self, channel, bus, events):
        """Verify that an opcode alone is written with D/C LOW and no data phase."""
        events.clear()
        channel.send_command(0xAF)
        assert events == [("gpio", DC_PIN, 0), ("write", b"\xaf")]

    def test_arguments_use_data_path(self, channel, events):
        """Verify that argument bytes are sent with D/C HIGH after the opcode."""
        events.clear()
        channel.send_command(0x15, [0x00, 0x7F])
        assert events == [
            ("gpio", DC_PIN, 0),
            ("write", b"\x15"),
            ("gpio", DC_PIN, 1),
            ("write", b"\x00\x7f"),
            ("gpio", DC_PIN, 0),
        ]

    def test_command_bytes_single_transfer(self, channel, events):
        """Verify that send_command_bytes() writes opcode and inline argument together on the command path."""
        events.clear()
        channel.send_command_bytes((0xB3, 0xF1))
        assert events == [("gpio", DC_PIN, 0), ("write", b"\xb3\xf1")]

    def test_empty_command_rejected(self, channel):
        """Verify that a command with no bytes is refused."""
        with pytest.raises(InvalidArgument):
            channel.send_command_bytes(())

    def test_bad_argument_sends_nothing(self, channel, bus):
        """Verify that a malformed argument list aborts before the opcode is written."""
        with pytest.raises(InvalidArgument):
            channel.send_command(0xC1, [0xC8, "x"])
        assert bus.writes == []

    def test_transport_error_from_opcode_propagates(self, channel, bus):
        """Verify that a failing opcode write surfaces unchanged."""
        bus.fail_after = 0
        with pytest.raises(TransportError, match="bus went away"):
            channel.send_command(0xAE)
