"""
Segment Clock - State Module
State records shared between the clock components.

Everything that changes at runtime lives on a ClockContext instance that
main builds once and hands to the components, so tests can build their own.
"""

import config

# ============================================================================
# WALL CLOCK
# ============================================================================

class WallClockSnapshot:
    """Read-only wall clock reading, refreshed once per tick"""

    __slots__ = ("hour", "minute", "second", "weekday", "day", "month", "year")

    def __init__(self, hour=0, minute=0, second=0, weekday=0, day=1, month=1, year=1970):
        self.hour = hour
        self.minute = minute
        self.second = second
        self.weekday = weekday
        self.day = day
        self.month = month
        self.year = year

    @classmethod
    def from_struct_time(cls, t):
        """Build from a time.struct_time (tm_wday 0 = Monday)"""
        return cls(
            hour=t.tm_hour,
            minute=t.tm_min,
            second=t.tm_sec,
            weekday=t.tm_wday,
            day=t.tm_mday,
            month=t.tm_mon,
            year=t.tm_year,
        )

    def __eq__(self, other):
        if not isinstance(other, WallClockSnapshot):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __repr__(self):
        return (f"WallClockSnapshot({self.year:04d}-{self.month:02d}-{self.day:02d} "
                f"{self.hour:02d}:{self.minute:02d}:{self.second:02d} wd={self.weekday})")

# ============================================================================
# BRIGHTNESS STATE
# ============================================================================

class BrightnessState:
    """Contrast levels; current walks toward target one unit at a time"""

    def __init__(self, minimum=None, maximum=None, current=None):
        self.minimum = config.Env.CONTRAST_MIN if minimum is None else minimum
        self.maximum = config.Env.CONTRAST_MAX if maximum is None else maximum
        if self.minimum > self.maximum:
            raise ValueError(f"contrast minimum {self.minimum} exceeds maximum {self.maximum}")

        # Start bright so the display is readable at boot
        start = self.maximum if current is None else current
        self.current = max(self.minimum, min(self.maximum, start))
        self.target = self.current

    def __repr__(self):
        return (f"BrightnessState(current={self.current}, target={self.target}, "
                f"range=[{self.minimum}, {self.maximum}])")

# ============================================================================
# TIMEZONE STATE
# ============================================================================

class TimezoneStatus:
    """Resolver states"""
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


class TimezoneState:
    """Applied timezone; posix_definition is UTC0 until something is known"""

    def __init__(self):
        self.iana_name = ""
        self.posix_definition = config.Strings.DEFAULT_POSIX_TZ
        self.status = TimezoneStatus.UNRESOLVED

    @property
    def resolved(self):
        return self.status == TimezoneStatus.RESOLVED

    @property
    def label(self):
        """Text shown on the display for the current zone"""
        return self.iana_name or self.posix_definition

    def __repr__(self):
        return (f"TimezoneState(status={self.status}, name={self.iana_name!r}, "
                f"posix={self.posix_definition!r})")

# ============================================================================
# ORCHESTRATOR CONTEXT
# ============================================================================

class ClockContext:
    """All mutable runtime state of one clock"""

    def __init__(self, brightness=None, timezone=None):
        self.brightness = brightness if brightness is not None else BrightnessState()
        self.timezone = timezone if timezone is not None else TimezoneState()

        # Render tracking
        self.last_rendered_second = None
        self.last_resolve_check_second = None
        self.snapshot = None

        # Brightness polling (time.monotonic() of the last evaluation)
        self.last_brightness_poll = None

        # Counters
        self.tick_count = 0
        self.frame_count = 0
        self.resolve_attempts = 0
        self.tick_errors = 0

        # Uptime tracking
        self.start_time = 0
        self.last_uptime_log = 0
