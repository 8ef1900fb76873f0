"""
Shared fakes for the Segment Clock tests.
"""

import pytest

import config
from canvas import FrameBuffer
from state import WallClockSnapshot


class FakeHttp:
    """http_get stand-in: url -> (status, body), records every call"""

    def __init__(self, responses=None, error=None):
        self.responses = dict(responses or {})
        self.error = error
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.responses.get(url, (404, ""))


class FakeStore:
    def __init__(self, values=None, fail_put=False):
        self.values = dict(values or {})
        self.fail_put = fail_put
        self.puts = []

    def get(self, key, default=None):
        return self.values.get(key, default)

    def put(self, key, value):
        self.puts.append((key, value))
        if self.fail_put:
            raise OSError(30, "Read-only file system")
        self.values[key] = value


class FakeClock:
    def __init__(self, second=0, minute=0, hour=12):
        self.snapshot = WallClockSnapshot(hour=hour, minute=minute, second=second,
                                          weekday=2, day=17, month=9, year=2025)

    def set_second(self, second):
        self.snapshot.second = second

    def now(self):
        return WallClockSnapshot(self.snapshot.hour, self.snapshot.minute, self.snapshot.second,
                                 self.snapshot.weekday, self.snapshot.day, self.snapshot.month,
                                 self.snapshot.year)


class FakeSensor:
    def __init__(self, value=0):
        self.value = value
        self.reads = 0

    def read(self):
        self.reads += 1
        return self.value


class ApplyRecorder:
    """Records timezone applications instead of touching the process TZ"""

    def __init__(self):
        self.applied = []

    def __call__(self, posix_definition):
        self.applied.append(posix_definition)


BERLIN_POSIX = "CET-1CEST,M3.5.0,M10.5.0/3"
ZONES_CSV = (
    '"Africa/Abidjan","GMT0"\n'
    '"America/Chicago","CST6CDT,M3.2.0,M11.1.0"\n'
    f'"Europe/Berlin","{BERLIN_POSIX}"\n'
    '"Europe/Busingen","CET-1CEST,M3.5.0,M10.5.0/3"\n'
)


def lookup_responses(address="203.0.113.7", zone_body='{"timeZone":"Europe/Berlin"}', csv_body=ZONES_CSV):
    """Responses for a successful three step lookup"""
    return {
        config.API.EXTERNAL_IP_URL: (200, address),
        config.API.TIMEZONE_BY_IP_URL.format(address=address.strip()): (200, zone_body),
        config.API.POSIX_ZONES_CSV_URL: (200, csv_body),
    }


@pytest.fixture
def frame_buffer():
    return FrameBuffer()


@pytest.fixture
def apply_recorder():
    return ApplyRecorder()


@pytest.fixture
def restore_env():
    """Put config.Env and the log level back after a test reloads them"""
    names = ("LOG_LEVEL", "STORE_PATH", "BRIGHTNESS_INVERTED", "CONTRAST_MIN",
             "CONTRAST_MAX", "HTTP_TIMEOUT", "CLOCK_SOURCE")
    saved = {name: getattr(config.Env, name) for name in names}
    saved_level = config.CURRENT_LOG_LEVEL
    yield
    for name, value in saved.items():
        setattr(config.Env, name, value)
    config.CURRENT_LOG_LEVEL = saved_level
