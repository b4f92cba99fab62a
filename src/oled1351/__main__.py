"""Entry point for oled1351."""

import logging
import sys

from oled1351.config import load_config
from oled1351.errors import OLEDError


def run_render_test(config):
    """Draw the demo scene into a framebuffer and save it as a PNG."""
    from oled1351.demo import draw_scene
    from oled1351.font import PillowGlyphSource
    from oled1351.framebuffer import Framebuffer
    from oled1351.imaging import framebuffer_to_image

    fb = Framebuffer(config.display.width, config.display.height)
    draw_scene(fb, config.demo, PillowGlyphSource())
    framebuffer_to_image(fb, scale=4).save(config.output)
    print(f"Rendered test output to: {config.output}")
    if config.dump:
        for line in fb.dump():
            print(line)


def run_preview(config):
    """Show the demo scene in a Pygame window until it is closed."""
    import time

    from oled1351.demo import draw_scene
    from oled1351.font import PillowGlyphSource
    from oled1351.framebuffer import Framebuffer
    from oled1351.imaging import framebuffer_to_image
    from oled1351.preview import PreviewWindow

    fb = Framebuffer(config.display.width, config.display.height)
    draw_scene(fb, config.demo, PillowGlyphSource())
    window = PreviewWindow(config.display.width, config.display.height)
    try:
        window.update(framebuffer_to_image(fb))
        while window.handle_events():
            time.sleep(0.05)
    finally:
        window.close()


def run_hardware(config):
    """Initialise the panel, draw the demo scene and push it over SPI.

    If a switch pin is configured, pressing the switch toggles inverted
    display until Ctrl-C.
    """
    import time

    from oled1351.demo import draw_scene
    from oled1351.ssd1351 import open_display
    from oled1351.switch import Switch

    oled = open_display(config)
    try:
        oled.begin()
        oled.set_contrast(config.display.contrast)
        draw_scene(oled.bitmap, config.demo, oled.font)
        oled.display()
        if config.dump:
            oled.dump_buffer()

        if config.pins.switch_pin is None:
            return
        switch = Switch(oled.gpio, config.pins.switch_pin, config.pins.switch_pull_up)
        inverted = False
        last = 0
        while True:
            state = switch.get_state()
            if state and not last:
                inverted = not inverted
                if inverted:
                    oled.invert_display()
                else:
                    oled.normal_display()
            last = state
            time.sleep(0.02)
    finally:
        oled.close()


def main():
    """CLI entry point for the oled1351 demo.

    Loads configuration (defaults -> YAML -> CLI args), sets up logging
    to stderr, then dispatches to one of three modes based on CLI flags:
      --render-test: save the demo scene as a PNG and exit
      --preview:     show the demo scene in a Pygame window
      (default):     draw the demo scene on the SSD1351 over SPI
    """
    config = load_config()

    # Log to stderr so stdout is clean for --dump output.
    level = logging.DEBUG if config.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    logger = logging.getLogger(__name__)
    logger.debug(
        "Config loaded: %dx%d, spi%d.%d, dc=%d reset=%d",
        config.display.width, config.display.height,
        config.spi.bus, config.spi.device,
        config.pins.dc_pin, config.pins.reset_pin,
    )

    try:
        if config.render_test:
            logger.info("Running render test")
            run_render_test(config)
        elif config.preview:
            logger.info("Starting preview window")
            run_preview(config)
        else:
            logger.info("Starting display demo")
            run_hardware(config)
    except KeyboardInterrupt:
        print("\nShutting down.")
        sys.exit(0)
    except OLEDError as e:
        logger.error("Display error: %s", e)
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
