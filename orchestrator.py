"""
Segment Clock - Orchestrator
Single threaded tick loop tying rendering, brightness and timezone together.

Per tick:
1. Read the wall clock.
2. Feed the light sensor to the brightness controller every BRIGHTNESS_INTERVAL.
3. Redraw the frame when the wall clock second changed.
4. When the second changed (even if the redraw failed), if it is 0 and the
   timezone is still unresolved, try resolving it (at most once per minute).
"""

import time

import config
import display
import logger
from state import ClockContext


class ClockOrchestrator:
    """
    Drives one clock.

    Args:
        context (ClockContext): Runtime state
        canvas: PixelCanvas
        sensor: Object with read() -> raw light reading
        clock: Object with now() -> WallClockSnapshot
        brightness_controller (BrightnessController): Uses context.brightness
        timezone_resolver (TimezoneResolver): Uses context.timezone
        monotonic: Callable returning seconds, for brightness cadence
    """

    def __init__(self, context, canvas, sensor, clock, brightness_controller, timezone_resolver,
                 monotonic=time.monotonic):
        self.context = context if context is not None else ClockContext()
        self.canvas = canvas
        self.sensor = sensor
        self.clock = clock
        self.brightness = brightness_controller
        self.resolver = timezone_resolver
        self.monotonic = monotonic

        self.time_geometry = display.time_geometry()
        self.date_geometry = display.date_geometry()

    # ------------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------------

    def tick(self, now=None):
        """
        Run one loop iteration.

        Args:
            now (float): Monotonic time of this tick (default: self.monotonic())

        Returns:
            bool: True when a new frame was drawn
        """
        ctx = self.context
        now = self.monotonic() if now is None else now
        ctx.tick_count += 1

        snapshot = self.clock.now()
        ctx.snapshot = snapshot
        current_second = snapshot.second

        self.poll_brightness(now)

        if current_second == ctx.last_rendered_second:
            return False

        try:
            self.redraw(snapshot)
            ctx.last_rendered_second = current_second
        finally:
            self.check_timezone(current_second)

        return True

    def poll_brightness(self, now):
        """Evaluate the light sensor when the brightness interval has elapsed"""
        ctx = self.context
        if ctx.last_brightness_poll is not None and now - ctx.last_brightness_poll < config.Timing.BRIGHTNESS_INTERVAL:
            return None

        ctx.last_brightness_poll = now
        try:
            contrast = self.brightness.tick(self.sensor.read())
            if contrast is not None:
                self.canvas.set_contrast(contrast)
        except (OSError, RuntimeError, ValueError) as e:
            # Keep the last contrast, the redraw still runs this tick
            logger.log(f"Brightness update failed: {type(e).__name__}: {e}", config.LogLevel.WARNING)
            return None
        return contrast

    def check_timezone(self, current_second):
        """Retry the timezone lookup once at each minute boundary while unresolved"""
        ctx = self.context
        if current_second == ctx.last_resolve_check_second:
            return
        ctx.last_resolve_check_second = current_second

        if current_second == 0 and not self.resolver.resolved:
            ctx.resolve_attempts += 1
            self.resolver.attempt_resolve()

    def redraw(self, snapshot):
        display.render_frame(self.canvas, snapshot, self.context.timezone,
                             self.time_geometry, self.date_geometry)
        self.context.frame_count += 1

    # ------------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------------

    def run(self, should_stop=None, sleep=time.sleep):
        """
        Tick until should_stop() returns True (forever by default).

        A failing collaborator costs one tick, not the clock: the error is
        logged and the loop carries on.
        """
        ctx = self.context
        ctx.start_time = self.monotonic()
        ctx.last_uptime_log = ctx.start_time

        while should_stop is None or not should_stop():
            try:
                self.tick()
            except KeyboardInterrupt:
                raise
            except Exception as e:
                ctx.tick_errors += 1
                logger.log(f"Tick error: {type(e).__name__}: {e}", config.LogLevel.ERROR)
                sleep(config.Timing.TICK_ERROR_DELAY)
                continue

            now = self.monotonic()
            if now - ctx.last_uptime_log >= config.Timing.UPTIME_LOG_INTERVAL:
                ctx.last_uptime_log = now
                logger.log_uptime(ctx.start_time, now)

            sleep(config.Timing.TICK_INTERVAL)
