"""
Segment Clock - Hardware Module
Hardware initialization and device adapters (Blinka / CircuitPython)
"""

import socket

import board
import busio
import analogio
import displayio
import fourwire
import adafruit_ds3231
import adafruit_ntp
import adafruit_ssd1322

import config
import logger
from network import HttpClient

# ============================================================================
# DISPLAY
# ============================================================================

class BitmapCanvas:
    """
    PixelCanvas drawing into a displayio Bitmap shown on the panel.

    The panel runs with auto_refresh off; end_frame() pushes the finished
    frame in one refresh so a half drawn clock is never visible.
    """

    def __init__(self, panel, width=config.Display.WIDTH, height=config.Display.HEIGHT):
        self.panel = panel
        self.width = width
        self.height = height

        self.bitmap = displayio.Bitmap(width, height, 2)
        palette = displayio.Palette(2)
        palette[0] = 0x000000
        palette[1] = 0xFFFFFF

        group = displayio.Group()
        group.append(displayio.TileGrid(self.bitmap, pixel_shader=palette))
        panel.root_group = group

        self._contrast_supported = True

    def begin_frame(self):
        self.bitmap.fill(0)

    def end_frame(self):
        self.panel.refresh()

    def set_pixel(self, x, y):
        if 0 <= x < self.width and 0 <= y < self.height:
            self.bitmap[x, y] = 1

    def clear_pixel(self, x, y):
        if 0 <= x < self.width and 0 <= y < self.height:
            self.bitmap[x, y] = 0

    def set_contrast(self, value):
        """Contrast in CONTRAST_MIN..CONTRAST_MAX, applied as panel brightness"""
        if not self._contrast_supported:
            return
        try:
            self.panel.brightness = max(0.0, min(1.0, value / config.Env.CONTRAST_MAX))
        except (AttributeError, RuntimeError, ValueError) as e:
            logger.log(f"Panel does not accept brightness changes: {e}", config.LogLevel.WARNING)
            self._contrast_supported = False


def init_display():
    """
    Initialize the SSD1322 panel over SPI.

    Returns:
        BitmapCanvas: Canvas bound to the panel
    """
    logger.log("Initializing display...")

    # Release any existing displays
    displayio.release_displays()

    try:
        spi = board.SPI()
        bus = fourwire.FourWire(
            spi,
            command=getattr(board, config.Hardware.DISPLAY_COMMAND),
            chip_select=getattr(board, config.Hardware.DISPLAY_CHIP_SELECT),
            reset=getattr(board, config.Hardware.DISPLAY_RESET),
            baudrate=config.Hardware.DISPLAY_BAUDRATE,
        )
        panel = adafruit_ssd1322.SSD1322(
            bus,
            width=config.Display.WIDTH,
            height=config.Display.PANEL_HEIGHT,
            rotation=config.Display.ROTATION,
            auto_refresh=False,
        )
    except (AttributeError, OSError, RuntimeError, ValueError) as e:
        logger.log(f"Display initialization failed: {e}", config.LogLevel.ERROR)
        raise

    logger.log(f"Display initialized: {config.Display.WIDTH}x{config.Display.HEIGHT}")
    return BitmapCanvas(panel)

# ============================================================================
# LIGHT SENSOR
# ============================================================================

class LightSensor:
    """LDR on an analog pin, read on the 12 bit calibration scale"""

    def __init__(self, pin):
        self.analog = analogio.AnalogIn(pin)

    def read(self):
        return self.analog.value >> config.Hardware.SENSOR_SHIFT


def init_light_sensor():
    """Initialize the ambient light sensor"""
    logger.log("Initializing light sensor...")

    try:
        sensor = LightSensor(getattr(board, config.Hardware.LIGHT_SENSOR))
    except (AttributeError, OSError, RuntimeError, ValueError) as e:
        logger.log(f"Light sensor initialization failed: {e}", config.LogLevel.ERROR)
        raise

    logger.log(f"Light sensor ready - first reading {sensor.read()}", config.LogLevel.DEBUG)
    return sensor

# ============================================================================
# RTC INITIALIZATION
# ============================================================================

def init_rtc():
    """Initialize DS3231 RTC module"""
    logger.log("Initializing RTC...")

    try:
        i2c = busio.I2C(board.SCL, board.SDA)
        rtc = adafruit_ds3231.DS3231(i2c)
    except (OSError, RuntimeError, ValueError) as e:
        logger.log(f"RTC initialization failed: {e}", config.LogLevel.ERROR)
        raise

    logger.log(f"RTC initialized - Current time: {rtc.datetime}")
    return rtc

# ============================================================================
# NETWORK
# ============================================================================

def connect_network():
    """
    Build the HTTP client used for timezone lookups.

    Link management belongs to the operating system; this only prepares
    the session on top of it.

    Returns:
        HttpClient: Client with the configured timeout
    """
    client = HttpClient()
    logger.log(f"HTTP client ready (timeout {client.timeout}s)")
    return client

# ============================================================================
# TIME SYNCHRONIZATION
# ============================================================================

def sync_time(rtc):
    """
    Set the RTC to UTC from NTP.

    Args:
        rtc: DS3231 instance

    Returns:
        bool: True when the RTC was updated
    """
    logger.log(f"Syncing time with {config.API.NTP_SERVER}...")

    try:
        ntp = adafruit_ntp.NTP(socket, server=config.API.NTP_SERVER, tz_offset=0,
                               socket_timeout=config.Env.HTTP_TIMEOUT)
        rtc.datetime = ntp.datetime
    except (OSError, RuntimeError, ValueError) as e:
        logger.log(f"NTP sync failed: {e}", config.LogLevel.WARNING)
        logger.log("Continuing with RTC time (may be incorrect)", config.LogLevel.WARNING)
        return False

    logger.log(f"Time synced successfully: {rtc.datetime}")
    return True
