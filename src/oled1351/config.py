"""Configuration loading: defaults → YAML overlay → argparse overlay."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class SpiConfig:
    """SPI bus settings.

    Attributes:
        bus: SPI bus number; the device node is /dev/spidev{bus}.{device}.
        device: Chip-select index on the bus.
        mode: SPI clock mode. The SSD1351 requires mode 3.
        max_speed_hz: Bus clock in Hz.
        max_transfer_bytes: Largest payload written in one bus call. 1024
            suits spidev on the Raspberry Pi; use 255 with Adafruit_BBIO on
            a BeagleBone.
    """

    bus: int = 0
    device: int = 0
    # SSD1351 samples on the rising edge with an idle-high clock
    mode: int = 3
    max_speed_hz: int = 8_000_000
    max_transfer_bytes: int = 1024


@dataclass
class PinConfig:
    """GPIO pin assignments in BCM numbering.

    Attributes:
        dc_pin: Data/command select line (HIGH for data, LOW for commands).
        reset_pin: Reset line, idles HIGH and is pulsed LOW by begin().
        switch_pin: Optional push button input. None disables it.
        switch_pull_up: Pull the switch pin up (switch to ground) rather
            than down.
    """

    dc_pin: int = 24
    reset_pin: int = 25
    switch_pin: int | None = None
    switch_pull_up: bool = True


@dataclass
class DisplayConfig:
    """Panel geometry and streaming settings.

    Attributes:
        width: Addressable panel width in pixels.
        height: Addressable panel height in pixels.
        flush_chunk_bytes: Largest pixel payload buffered before it is
            handed to the bus. Bounds peak memory during flushes.
        contrast: Master contrast 0..15 applied after begin().
    """

    width: int = 128
    height: int = 128
    flush_chunk_bytes: int = 1024
    contrast: int = 0x0F


@dataclass
class DemoConfig:
    """What the demo draws.

    Attributes:
        text: Text line drawn near the top of the panel.
        text_color: Text color as 0xRRGGBB.
        background: Background color as 0xRRGGBB.
        text_size: Pixel scale for the text (1 = native 5x8 glyphs).
        image: Optional image file drawn under the text, resized to the panel.
    """

    text: str = "Hello"
    text_color: int = 0xFFFFFF
    background: int = 0x000000
    text_size: int = 1
    image: str | None = None


@dataclass
class Config:
    """Top-level application configuration.

    Assembled from three layers with increasing priority:
      1. Hardcoded defaults (dataclass field values)
      2. YAML file overlay (config.yaml or --config path)
      3. CLI argument overlay (--text, --image, etc.)

    Attributes:
        spi: SPI bus settings.
        pins: GPIO pin assignments.
        display: Panel geometry and streaming settings.
        demo: Demo scene settings.
        render_test: CLI-only: render the scene to a PNG and exit.
        preview: CLI-only: show the scene in a Pygame window.
        dump: CLI-only: print the framebuffer as text.
        output: CLI-only: PNG path for --render-test.
        debug: CLI-only: enable debug-level logging.
    """

    spi: SpiConfig = field(default_factory=SpiConfig)
    pins: PinConfig = field(default_factory=PinConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    demo: DemoConfig = field(default_factory=DemoConfig)
    # CLI-only flags (not persisted in YAML)
    render_test: bool = False
    preview: bool = False
    dump: bool = False
    output: str = "oled1351_render.png"
    debug: bool = False


def _parse_color(value: int | str) -> int:
    """Accept 0xRRGGBB as an int, "#RRGGBB", "0xRRGGBB" or a plain hex string."""
    if isinstance(value, int):
        return value & 0xFFFFFF
    text = value.strip().lower()
    if text.startswith("#"):
        text = text[1:]
    elif text.startswith("0x"):
        text = text[2:]
    return int(text, 16) & 0xFFFFFF


def _apply_yaml(config: Config, yaml_path: str) -> None:
    """Overlay YAML config values onto the Config object."""
    if not os.path.exists(yaml_path):
        return

    with open(yaml_path, "r") as f:
        data = yaml.safe_load(f)

    if not data:
        return

    if "spi" in data:
        s = data["spi"]
        for key in ("bus", "device", "mode", "max_speed_hz", "max_transfer_bytes"):
            if key in s:
                setattr(config.spi, key, s[key])

    if "pins" in data:
        p = data["pins"]
        for key in ("dc_pin", "reset_pin", "switch_pin", "switch_pull_up"):
            if key in p:
                setattr(config.pins, key, p[key])

    if "display" in data:
        d = data["display"]
        for key in ("width", "height", "flush_chunk_bytes", "contrast"):
            if key in d:
                setattr(config.display, key, d[key])

    if "demo" in data:
        demo = data["demo"]
        for key in ("text", "text_size", "image"):
            if key in demo:
                setattr(config.demo, key, demo[key])
        for key in ("text_color", "background"):
            if key in demo:
                setattr(config.demo, key, _parse_color(demo[key]))


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    All arguments are optional overlays on top of YAML config.
    """
    parser = argparse.ArgumentParser(
        prog="oled1351",
        description="SSD1351 OLED demo",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--text",
        type=str,
        help="Text to draw",
    )
    parser.add_argument(
        "--color",
        type=_parse_color,
        help="Text color as RRGGBB hex",
    )
    parser.add_argument(
        "--background",
        type=_parse_color,
        help="Background color as RRGGBB hex",
    )
    parser.add_argument(
        "--image",
        type=str,
        help="Image file to draw, resized to the panel",
    )
    parser.add_argument(
        "--max-transfer",
        type=int,
        help="Largest SPI write in bytes (255 on BeagleBone)",
    )
    parser.add_argument(
        "--render-test",
        action="store_true",
        default=False,
        help="Render the demo scene to a PNG instead of the panel",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="PNG path for --render-test",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        default=False,
        help="Show the demo scene in a Pygame window",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        default=False,
        help="Print the framebuffer as text",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    return parser


def _apply_args(config: Config, args: argparse.Namespace) -> None:
    """Overlay CLI arguments onto the Config object."""
    if args.text is not None:
        config.demo.text = args.text

    if args.color is not None:
        config.demo.text_color = args.color

    if args.background is not None:
        config.demo.background = args.background

    if args.image:
        config.demo.image = args.image

    if args.max_transfer is not None:
        config.spi.max_transfer_bytes = args.max_transfer

    if args.output:
        config.output = args.output

    config.render_test = args.render_test
    config.preview = args.preview
    config.dump = args.dump
    config.debug = args.debug


def load_config(
    yaml_path: str | None = None,
    cli_args: list[str] | None = None,
) -> Config:
    """Load config: defaults → YAML overlay → argparse overlay.

    Args:
        yaml_path: Path to YAML config file. Defaults to config.yaml in project root.
        cli_args: CLI arguments list. None means use sys.argv.
    """
    config = Config()

    parser = _build_parser()
    args = parser.parse_args(cli_args if cli_args is not None else None)

    # Default YAML path: config.yaml in project root (three levels up from
    # this file). CLI --config overrides.
    if yaml_path is None:
        if args.config:
            yaml_path = args.config
        else:
            yaml_path = os.path.join(
                Path(__file__).resolve().parent.parent.parent, "config.yaml"
            )

    _apply_yaml(config, yaml_path)
    _apply_args(config, args)

    return config
