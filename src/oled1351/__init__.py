"""oled1351 - SSD1351 SPI OLED driver."""

__version__ = "0.1.0"
