"""
Segment Clock - Wall Clock Sources
Clock.now() implementations returning WallClockSnapshot.
"""

import calendar
import time

from state import WallClockSnapshot


class SystemClock:
    """Operating system clock; local time follows the process TZ"""

    def now(self):
        return WallClockSnapshot.from_struct_time(time.localtime())


class RtcClock:
    """
    Battery backed RTC (DS3231) holding UTC.

    The RTC has no notion of zones, so its UTC reading is converted with the
    process TZ, the same way the system clock is.

    Args:
        rtc: Object with a datetime attribute (time.struct_time in UTC)
    """

    def __init__(self, rtc):
        self.rtc = rtc

    def now(self):
        utc = self.rtc.datetime
        return WallClockSnapshot.from_struct_time(time.localtime(calendar.timegm(utc)))
