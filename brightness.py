"""
Segment Clock - Brightness Module
Maps the ambient light sensor to panel contrast without flicker.

The target follows the sensor instantly, but the applied contrast only
moves one step per evaluation, so noise in single readings never shows up
as a visible jump.
"""

import config
import logger
from state import BrightnessState
from utils import clamp, map_range


class BrightnessController:
    """
    Rate limited sensor to contrast mapping.

    Args:
        brightness_state (BrightnessState): State to update (shared with the context)
        inverted (bool): True maps bright rooms to low contrast values
        sensor_min (int): Raw reading mapped to one end of the contrast range
        sensor_max (int): Raw reading mapped to the other end
    """

    def __init__(self, brightness_state=None, inverted=None,
                 sensor_min=config.Brightness.SENSOR_MIN, sensor_max=config.Brightness.SENSOR_MAX):
        self.state = brightness_state if brightness_state is not None else BrightnessState()
        self.inverted = config.Env.BRIGHTNESS_INVERTED if inverted is None else inverted
        self.sensor_min = sensor_min
        self.sensor_max = sensor_max

    def target_for(self, raw_reading):
        """
        Contrast target for a raw sensor reading, clamped to the state range.

        Args:
            raw_reading: Sensor value, non numeric readings count as sensor_min

        Returns:
            int: Target contrast
        """
        try:
            reading = int(raw_reading)
        except (TypeError, ValueError, OverflowError):
            reading = self.sensor_min

        if self.inverted:
            low, high = self.state.maximum, self.state.minimum
        else:
            low, high = self.state.minimum, self.state.maximum

        mapped = map_range(reading, self.sensor_min, self.sensor_max, low, high)
        return clamp(mapped, self.state.minimum, self.state.maximum)

    def tick(self, raw_reading):
        """
        Evaluate one sensor reading.

        Args:
            raw_reading: Raw ambient light sensor value

        Returns:
            int: New contrast value if it changed this tick
            None: Contrast unchanged, nothing to write
        """
        state = self.state
        state.target = self.target_for(raw_reading)

        if state.current < state.target:
            state.current += 1
        elif state.current > state.target:
            state.current -= 1
        else:
            return None

        logger.log(f"Contrast {state.current} (target {state.target}, raw {raw_reading})",
                   config.LogLevel.VERBOSE)
        return state.current
