"""
Segment Clock - Configuration Module
All constants and configuration - loaded once at import
"""

import os

# ============================================================================
# DISPLAY HARDWARE
# ============================================================================

class Display:
    """Monochrome panel dimensions"""
    WIDTH = 256
    HEIGHT = 50
    PANEL_HEIGHT = 64   # SSD1322 is 64 rows, the clock uses the top 50
    ROTATION = 0

# ============================================================================
# LAYOUT & POSITIONING
# ============================================================================

class Layout:
    """Display positioning constants"""
    TIME_X = 0
    TIME_Y = 10

    TIMEZONE_LABEL_X = 154
    TIMEZONE_LABEL_Y = 4

    WEEKDAY_LABEL_X = 154
    WEEKDAY_LABEL_Y = 14

    DATE_X = 154
    DATE_Y = 24

    COLON_SIZE = 2
    LABEL_SPACING = 1

# ============================================================================
# SEGMENT GEOMETRY
# ============================================================================

class Geometry:
    """Segment sizes for the two digit scales"""
    # Large time digits
    TIME_SEGMENT_WIDTH = 14
    TIME_SEGMENT_WIDTH_GAP = 1
    TIME_SEGMENT_HEIGHT = 12
    TIME_SEGMENT_HEIGHT_GAP = 1

    # Small date digits
    DATE_SEGMENT_WIDTH = 5
    DATE_SEGMENT_WIDTH_GAP = 1
    DATE_SEGMENT_HEIGHT = 5
    DATE_SEGMENT_HEIGHT_GAP = 1

    # Below this length a segment is a single line
    THICK_SEGMENT_THRESHOLD = 5

# ============================================================================
# BRIGHTNESS
# ============================================================================

class Brightness:
    """Ambient light to contrast mapping"""
    SENSOR_MIN = 0
    SENSOR_MAX = 1500
    CONTRAST_MIN = 1
    CONTRAST_MAX = 40
    INVERTED = True   # more light -> lower contrast value

# ============================================================================
# TIMING
# ============================================================================

class Timing:
    """Timing constants in seconds"""
    TICK_INTERVAL = 0.01
    BRIGHTNESS_INTERVAL = 0.15
    HTTP_TIMEOUT = 10
    UPTIME_LOG_INTERVAL = 600
    STARTUP_ERROR_DELAY = 10
    TICK_ERROR_DELAY = 1

# ============================================================================
# API CONFIGURATION
# ============================================================================

class API:
    """Timezone lookup endpoints"""
    EXTERNAL_IP_URL = "http://api.ipify.org/?format=text"
    TIMEZONE_BY_IP_URL = "https://timeapi.io/api/TimeZone/ip?ipAddress={address}"
    POSIX_ZONES_CSV_URL = "https://raw.githubusercontent.com/nayarsystems/posix_tz_db/master/zones.csv"

    NTP_SERVER = "pool.ntp.org"

    HTTP_OK_MIN = 200
    HTTP_OK_MAX = 299

# ============================================================================
# PERSISTENT STORAGE
# ============================================================================

class Storage:
    """Key-value store settings"""
    # POSIX definition is stored instead of the IANA name, keys are short
    TIMEZONE_KEY = "tz_posix"
    DEFAULT_PATH = "/clock_store.json"

# ============================================================================
# STRINGS
# ============================================================================

class Strings:
    """Fixed strings and label tables"""
    DEFAULT_POSIX_TZ = "UTC0"
    TIMEZONE_JSON_FIELD = "timeZone"

    # Indexed by tm_wday (0 = Monday)
    WEEKDAYS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")
    UNKNOWN_WEEKDAY = "---"

# ============================================================================
# HARDWARE
# ============================================================================

class Hardware:
    """Pin names (resolved against board at init)"""
    DISPLAY_CHIP_SELECT = "D5"
    DISPLAY_COMMAND = "D25"
    DISPLAY_RESET = "D26"
    LIGHT_SENSOR = "A0"

    DISPLAY_BAUDRATE = 10000000

    # AnalogIn is 16 bit, calibration is on the 12 bit scale
    SENSOR_SHIFT = 4

# ============================================================================
# LOGGING
# ============================================================================

class LogLevel:
    """Logging levels"""
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    VERBOSE = 5

    NAMES = {
        "ERROR": ERROR,
        "WARNING": WARNING,
        "INFO": INFO,
        "DEBUG": DEBUG,
        "VERBOSE": VERBOSE,
    }

# Current log level
CURRENT_LOG_LEVEL = LogLevel.INFO

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

def _parse_bool(value, default):
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    return default

def _parse_int(value, default):
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default

def _parse_float(value, default):
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except ValueError:
        return default

class Env:
    """Environment variables from settings.toml / process environment"""

    @staticmethod
    def get(key, default=None):
        """Get environment variable with fallback"""
        return os.getenv(key, default)

    LOG_LEVEL = None
    STORE_PATH = None
    BRIGHTNESS_INVERTED = None
    CONTRAST_MIN = None
    CONTRAST_MAX = None
    HTTP_TIMEOUT = None
    CLOCK_SOURCE = None

    @classmethod
    def load(cls):
        """Load all environment variables"""
        global CURRENT_LOG_LEVEL

        level_name = (cls.get("CLOCK_LOG_LEVEL") or "INFO").strip().upper()
        cls.LOG_LEVEL = LogLevel.NAMES.get(level_name, LogLevel.INFO)
        CURRENT_LOG_LEVEL = cls.LOG_LEVEL

        # Empty string means "do not persist"
        cls.STORE_PATH = cls.get("CLOCK_STORE_PATH", Storage.DEFAULT_PATH)

        cls.BRIGHTNESS_INVERTED = _parse_bool(cls.get("CLOCK_BRIGHTNESS_INVERTED"), Brightness.INVERTED)
        cls.CONTRAST_MIN = _parse_int(cls.get("CLOCK_CONTRAST_MIN"), Brightness.CONTRAST_MIN)
        cls.CONTRAST_MAX = _parse_int(cls.get("CLOCK_CONTRAST_MAX"), Brightness.CONTRAST_MAX)
        cls.HTTP_TIMEOUT = _parse_float(cls.get("CLOCK_HTTP_TIMEOUT"), Timing.HTTP_TIMEOUT)
        cls.CLOCK_SOURCE = (cls.get("CLOCK_SOURCE") or "system").strip().lower()

# ============================================================================
# VALIDATION
# ============================================================================

def validate_configuration():
    """
    Validate configuration values and log warnings for potential issues.

    Returns:
        tuple: (issues, warnings) lists of human readable strings
    """
    import logger

    issues = []
    warnings = []

    # Brightness validations
    if Env.CONTRAST_MIN < 0:
        issues.append(f"CONTRAST_MIN ({Env.CONTRAST_MIN}) must not be negative")

    if Env.CONTRAST_MIN > Env.CONTRAST_MAX:
        issues.append(f"CONTRAST_MIN ({Env.CONTRAST_MIN}) exceeds CONTRAST_MAX ({Env.CONTRAST_MAX})")

    if Env.CONTRAST_MAX > 255:
        warnings.append(f"CONTRAST_MAX ({Env.CONTRAST_MAX}) is above the panel range of 255")

    if Brightness.SENSOR_MAX <= Brightness.SENSOR_MIN:
        issues.append(f"SENSOR_MAX ({Brightness.SENSOR_MAX}) must exceed SENSOR_MIN ({Brightness.SENSOR_MIN})")

    # Timing validations
    if Timing.BRIGHTNESS_INTERVAL >= 1:
        warnings.append(f"BRIGHTNESS_INTERVAL ({Timing.BRIGHTNESS_INTERVAL}s) is not sub-second - fades will be slow")

    if Env.HTTP_TIMEOUT <= 0:
        issues.append(f"HTTP_TIMEOUT ({Env.HTTP_TIMEOUT}s) must be positive - lookups could stall the display")
    elif Env.HTTP_TIMEOUT > 30:
        warnings.append(f"HTTP_TIMEOUT ({Env.HTTP_TIMEOUT}s) is long - display freezes during slow lookups")

    if Env.CLOCK_SOURCE not in ("system", "rtc"):
        issues.append(f"CLOCK_SOURCE ({Env.CLOCK_SOURCE}) must be 'system' or 'rtc'")

    # Display validations
    if Display.WIDTH < 256 or Display.HEIGHT < 50:
        warnings.append(f"Display smaller than layout: {Display.WIDTH}x{Display.HEIGHT}")

    # Report issues
    if issues:
        logger.log("=== CONFIGURATION ERRORS ===", LogLevel.ERROR)
        for issue in issues:
            logger.log(f"  - {issue}", LogLevel.ERROR)

    if warnings:
        logger.log("=== CONFIGURATION WARNINGS ===", LogLevel.WARNING)
        for warning in warnings:
            logger.log(f"  - {warning}", LogLevel.WARNING)

    return issues, warnings

# Load environment variables at import
Env.load()
