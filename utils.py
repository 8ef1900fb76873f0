"""
Utilities Module for Segment Clock
==================================

Integer helpers shared by the brightness and rendering code.
Depends on: nothing
"""

import time


def clamp(value, low, high):
	"""Clamp value into [low, high]"""
	if value < low:
		return low
	if value > high:
		return high
	return value


def trunc_div(numerator, denominator):
	"""Integer division rounding toward zero"""
	quotient = abs(numerator) // abs(denominator)
	if (numerator < 0) != (denominator < 0):
		return -quotient
	return quotient


def trunc_mod(numerator, denominator):
	"""Remainder matching trunc_div (sign follows the numerator)"""
	return numerator - trunc_div(numerator, denominator) * denominator


def map_range(value, in_min, in_max, out_min, out_max):
	"""
	Linearly map value from one integer range to another.

	Uses integer arithmetic truncating toward zero and does not clamp,
	so values outside the input range map outside the output range.

	Args:
		value (int): Input value
		in_min (int): Input range start
		in_max (int): Input range end
		out_min (int): Output value for in_min
		out_max (int): Output value for in_max

	Returns:
		int: Mapped value
	"""
	if in_max == in_min:
		return out_min
	return trunc_div((value - in_min) * (out_max - out_min), in_max - in_min) + out_min


def interruptible_sleep(duration, interval=0.1):
	"""Sleep in short slices so KeyboardInterrupt is handled promptly"""
	end_time = time.monotonic() + duration
	while time.monotonic() < end_time:
		time.sleep(min(interval, max(0, end_time - time.monotonic())))
