"""
Segment Clock - Main
Seven segment clock with ambient brightness and automatic timezone.
"""

import time
import traceback

import config
import hardware
import logger
import storage
from brightness import BrightnessController
from orchestrator import ClockOrchestrator
from state import ClockContext
from timezone import TimezoneResolver
from utils import interruptible_sleep
from wallclock import RtcClock, SystemClock

# ============================================================================
# INITIALIZATION
# ============================================================================

def build_clock_source():
    """Pick the wall clock named by CLOCK_SOURCE"""
    if config.Env.CLOCK_SOURCE == "rtc":
        rtc = hardware.init_rtc()
        hardware.sync_time(rtc)
        return RtcClock(rtc)
    return SystemClock()


def initialize():
    """
    Initialize all hardware and services.

    Returns:
        ClockOrchestrator: Ready to run, or None if initialization failed
    """
    logger.log("=== Segment Clock starting ===")

    issues, _ = config.validate_configuration()
    if issues:
        logger.log("Cannot start with configuration errors", config.LogLevel.ERROR)
        return None

    try:
        clock = build_clock_source()
        logger.attach_clock(clock)

        canvas = hardware.init_display()
        sensor = hardware.init_light_sensor()
        http = hardware.connect_network()
    except Exception as e:
        logger.log(f"Initialization failed: {e}", config.LogLevel.ERROR)
        traceback.print_exception(e)
        return None

    context = ClockContext()
    controller = BrightnessController(context.brightness)
    resolver = TimezoneResolver(http, storage.open_store(), context.timezone)

    # Stored zone wins; otherwise try the network once right away
    if resolver.load_persisted() is None:
        resolver.attempt_resolve()

    canvas.set_contrast(context.brightness.current)

    logger.log("=== Initialization complete ===")
    return ClockOrchestrator(context, canvas, sensor, clock, controller, resolver)

# ============================================================================
# MAIN FUNCTION
# ============================================================================

def main():
    """Main entry point"""
    orchestrator = initialize()
    if orchestrator is None:
        logger.log("Cannot continue - initialization failed", config.LogLevel.ERROR)
        interruptible_sleep(config.Timing.STARTUP_ERROR_DELAY)
        return 1

    ctx = orchestrator.context
    try:
        orchestrator.run()
    except KeyboardInterrupt:
        logger.log("=== Clock stopped ===")

    # Final statistics
    logger.log_uptime(ctx.start_time, time.monotonic())
    logger.log(f"Frames drawn: {ctx.frame_count}")
    logger.log(f"Tick errors: {ctx.tick_errors}")
    logger.log(f"Timezone attempts: {ctx.resolve_attempts} at minute boundaries")
    logger.log(orchestrator.resolver.http_get.get_stats())
    logger.log_resolution(ctx.timezone)
    return 0

# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    raise SystemExit(main())
