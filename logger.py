"""
Segment Clock - Centralized Logging Module
Log format with timestamps: [2025-12-07 03:04:08] INFO: message
"""

import config

# Clock used for timestamps (attached by main once hardware is up)
_clock = None

# ============================================================================
# TIMESTAMP FORMATTING
# ============================================================================

def attach_clock(clock):
    """
    Use clock.now() for log timestamps.

    Args:
        clock: Any object with now() returning a WallClockSnapshot, or None
    """
    global _clock
    _clock = clock

def get_timestamp():
    """
    Get current timestamp from the attached clock: [2025-12-07 03:04:08]

    Returns:
        str: Formatted timestamp or placeholder if no clock is attached
    """
    if _clock is None:
        return "[-------- --:--:--]"

    try:
        now = _clock.now()
    except (OSError, RuntimeError, ValueError):
        return "[-------- --:--:--]"

    return (f"[{now.year:04d}-{now.month:02d}-{now.day:02d} "
            f"{now.hour:02d}:{now.minute:02d}:{now.second:02d}]")

# ============================================================================
# LOGGING FUNCTIONS
# ============================================================================

_LEVEL_NAMES = {
    config.LogLevel.ERROR: "ERROR",
    config.LogLevel.WARNING: "WARNING",
    config.LogLevel.INFO: "INFO",
    config.LogLevel.DEBUG: "DEBUG",
    config.LogLevel.VERBOSE: "VERBOSE",
}

def log(message, level=config.LogLevel.INFO):
    """
    Log message with timestamp.

    Format: [2025-12-07 03:04:08] INFO: message

    Args:
        message: The message to log
        level: Log level (ERROR, WARNING, INFO, DEBUG, VERBOSE)
    """
    if level <= config.CURRENT_LOG_LEVEL:
        level_name = _LEVEL_NAMES.get(level, "INFO")
        print(f"{get_timestamp()} {level_name}: {message}")

# ============================================================================
# FORMATTING HELPERS
# ============================================================================

def format_uptime(seconds):
    """
    Format uptime as HH:MM:SS.

    Args:
        seconds: Uptime in seconds (from time.monotonic())

    Returns:
        str: Formatted uptime like "08:15:42"
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"

# ============================================================================
# STATUS LOGGING
# ============================================================================

def log_uptime(start_time, current_time):
    """
    Log uptime in HH:MM:SS format.

    Args:
        start_time: Start time from time.monotonic()
        current_time: Current time from time.monotonic()
    """
    log(f"Uptime: {format_uptime(current_time - start_time)}", config.LogLevel.INFO)

def log_resolution(timezone_state):
    """Log the applied timezone in one line"""
    name = timezone_state.iana_name or "(unknown zone)"
    log(f"Timezone: {name} -> {timezone_state.posix_definition}", config.LogLevel.INFO)
