"""
Display module for Segment Clock
Seven segment digit rendering and frame composition on a PixelCanvas.

A PixelCanvas is any object with:
- begin_frame() / end_frame()
- set_pixel(x, y) / clear_pixel(x, y)
- set_contrast(value)

Nothing in here keeps state between calls; every function draws from its
arguments only and never raises for odd digit values.
"""

import config
import glyphs
from utils import trunc_div, trunc_mod


# ===========================
# GEOMETRY
# ===========================

class SegmentGeometry:
	"""
	Size and spacing of seven segment digits.

	Args:
		segment_width (int): Length of horizontal segments (A, D, G)
		segment_width_gap (int): Horizontal gap between segments
		segment_height (int): Length of vertical segments (B, C, E, F)
		segment_height_gap (int): Vertical gap between segments
	"""

	def __init__(self, segment_width, segment_width_gap, segment_height, segment_height_gap):
		self.segment_width = segment_width
		self.segment_width_gap = segment_width_gap
		self.segment_height = segment_height
		self.segment_height_gap = segment_height_gap

	@property
	def digit_pitch(self):
		"""Horizontal distance between two digits of a number"""
		return self.segment_width + 4 * self.segment_width_gap + 2

	@property
	def digit_height(self):
		return 2 * self.segment_height + 4 * self.segment_height_gap

	@property
	def group_pitch(self):
		"""Horizontal distance between HH, MM and SS groups"""
		return int(self.segment_width * 2.5 + 4 * self.segment_width_gap + self.segment_width / 2)

	def __repr__(self):
		return (f"SegmentGeometry(w={self.segment_width}, wg={self.segment_width_gap}, "
				f"h={self.segment_height}, hg={self.segment_height_gap})")


def time_geometry():
	"""Geometry of the large time digits"""
	return SegmentGeometry(
		config.Geometry.TIME_SEGMENT_WIDTH, config.Geometry.TIME_SEGMENT_WIDTH_GAP,
		config.Geometry.TIME_SEGMENT_HEIGHT, config.Geometry.TIME_SEGMENT_HEIGHT_GAP,
	)


def date_geometry():
	"""Geometry of the small date digits"""
	return SegmentGeometry(
		config.Geometry.DATE_SEGMENT_WIDTH, config.Geometry.DATE_SEGMENT_WIDTH_GAP,
		config.Geometry.DATE_SEGMENT_HEIGHT, config.Geometry.DATE_SEGMENT_HEIGHT_GAP,
	)


# ===========================
# PRIMITIVES
# ===========================

def draw_hline(canvas, x, y, width):
	for dx in range(width):
		canvas.set_pixel(x + dx, y)


def draw_vline(canvas, x, y, height):
	for dy in range(height):
		canvas.set_pixel(x, y + dy)


def draw_box(canvas, x, y, width, height):
	"""Filled rectangle"""
	for dy in range(height):
		draw_hline(canvas, x, y + dy, width)


def draw_horizontal_segment(canvas, x, y, width):
	"""Horizontal stroke, thickened by two shorter lines when long enough"""
	draw_hline(canvas, x, y, width)
	if width > config.Geometry.THICK_SEGMENT_THRESHOLD:
		draw_hline(canvas, x + 1, y - 1, width - 2)
		draw_hline(canvas, x + 1, y + 1, width - 2)


def draw_vertical_segment(canvas, x, y, height):
	"""Vertical stroke, thickened by two shorter lines when long enough"""
	draw_vline(canvas, x, y, height)
	if height > config.Geometry.THICK_SEGMENT_THRESHOLD:
		draw_vline(canvas, x - 1, y + 1, height - 2)
		draw_vline(canvas, x + 1, y + 1, height - 2)


# ===========================
# SEGMENTS & DIGITS
# ===========================

def draw_segment(canvas, x, y, segment, geometry):
	"""
	Draw one segment of a digit whose origin is (x, y).

	Args:
		canvas: PixelCanvas to draw on
		x (int): Digit origin x
		y (int): Digit origin y
		segment (str): Segment letter A-G
		geometry (SegmentGeometry): Digit size
	"""
	dw = geometry.segment_width
	dwv = geometry.segment_width_gap
	dh = geometry.segment_height
	dhv = geometry.segment_height_gap

	x += dwv + 1
	y += 1

	if segment == "A":
		draw_horizontal_segment(canvas, x, y, dw)
	elif segment == "B":
		draw_vertical_segment(canvas, x + dw + dwv - 1, y + dhv, dh)
	elif segment == "C":
		draw_vertical_segment(canvas, x + dw + dwv - 1, y + dh + 3 * dhv - 1, dh)
	elif segment == "D":
		draw_horizontal_segment(canvas, x, y + 2 * dh + 4 * dhv - 2, dw)
	elif segment == "E":
		draw_vertical_segment(canvas, x - dwv, y + dh + 3 * dhv - 1, dh)
	elif segment == "F":
		draw_vertical_segment(canvas, x - dwv, y + dhv, dh)
	elif segment == "G":
		draw_horizontal_segment(canvas, x, y + dh + 2 * dhv - 1, dw)


def render_digit(canvas, x, y, digit, geometry):
	"""Draw a digit; anything outside 0-9 draws the fallback bars"""
	for segment in glyphs.SEGMENTS:
		if segment in glyphs.pattern_for(digit):
			draw_segment(canvas, x, y, segment, geometry)


def render_two_digit_number(canvas, x, y, value, geometry):
	"""
	Draw value as tens digit then ones digit.

	Values outside 0-99 keep C style truncating division, so the digit that
	falls outside 0-9 shows the fallback pattern.
	"""
	render_digit(canvas, x, y, trunc_div(value, 10), geometry)
	render_digit(canvas, x + geometry.digit_pitch, y, trunc_mod(value, 10), geometry)


# ===========================
# LABELS
# ===========================

def label_width(text, spacing=config.Layout.LABEL_SPACING):
	"""Width in pixels of text in the label font"""
	if not text:
		return 0
	return len(text) * (glyphs.LABEL_WIDTH + spacing) - spacing


def fit_label(text, x, width=config.Display.WIDTH, spacing=config.Layout.LABEL_SPACING):
	"""Cut text to the characters that fit between x and the right edge"""
	max_chars = max(0, (width - x) // (glyphs.LABEL_WIDTH + spacing))
	return text[:max_chars]


def render_label(canvas, x, y, text, spacing=config.Layout.LABEL_SPACING):
	"""Draw text in the 3x5 label font, unknown characters are blank"""
	cursor = x
	for char in text:
		for row_index, row in enumerate(glyphs.label_glyph(char)):
			for col_index, bit in enumerate(row):
				if bit == "1":
					canvas.set_pixel(cursor + col_index, y + row_index)
		cursor += glyphs.LABEL_WIDTH + spacing
	return cursor - x


# ===========================
# TIME & DATE
# ===========================

def _draw_colon(canvas, x, y, geometry):
	size = config.Layout.COLON_SIZE
	colon_x = x + int(geometry.group_pitch - geometry.segment_width * 0.30)
	middle = y + geometry.digit_height // 2
	offset = int(geometry.digit_height * 0.2)
	draw_box(canvas, colon_x, middle - offset, size, size)
	draw_box(canvas, colon_x, middle + offset, size, size)


def render_time(canvas, x, y, hour, minute, second, geometry):
	"""Draw HH:MM:SS with colon boxes between the groups"""
	render_two_digit_number(canvas, x, y, hour, geometry)
	_draw_colon(canvas, x, y, geometry)
	x += geometry.group_pitch

	render_two_digit_number(canvas, x, y, minute, geometry)
	_draw_colon(canvas, x, y, geometry)
	x += geometry.group_pitch

	render_two_digit_number(canvas, x, y, second, geometry)


def render_date(canvas, x, y, day, month, year, geometry):
	"""
	Draw DD.MM.YYYY with separator dots.

	Args:
		canvas: PixelCanvas to draw on
		x (int): Left edge
		y (int): Top edge
		day (int): Day of month
		month (int): Month 1-12
		year (int): Four digit year
		geometry (SegmentGeometry): Digit size

	Returns:
		int: Width drawn in pixels
	"""
	size = config.Layout.COLON_SIZE
	pair = 2 * geometry.digit_pitch
	dot_y = y + geometry.digit_height - 1
	start = x

	render_two_digit_number(canvas, x, y, day, geometry)
	x += pair
	draw_box(canvas, x, dot_y, size, size)
	x += size + 1

	render_two_digit_number(canvas, x, y, month, geometry)
	x += pair
	draw_box(canvas, x, dot_y, size, size)
	x += size + 1

	render_two_digit_number(canvas, x, y, trunc_div(year, 100), geometry)
	x += pair
	render_two_digit_number(canvas, x, y, trunc_mod(year, 100), geometry)
	x += pair

	return x - start


def weekday_label(weekday):
	if 0 <= weekday < len(config.Strings.WEEKDAYS):
		return config.Strings.WEEKDAYS[weekday]
	return config.Strings.UNKNOWN_WEEKDAY


# ===========================
# FULL FRAME
# ===========================

def render_frame(canvas, snapshot, timezone_state, time_geo=None, date_geo=None):
	"""
	Redraw the whole clock face.

	Args:
		canvas: PixelCanvas to draw on
		snapshot (WallClockSnapshot): Time to show
		timezone_state (TimezoneState): Zone shown in the corner label
		time_geo (SegmentGeometry): Large digit geometry (default from config)
		date_geo (SegmentGeometry): Small digit geometry (default from config)
	"""
	time_geo = time_geo or time_geometry()
	date_geo = date_geo or date_geometry()

	canvas.begin_frame()
	try:
		render_time(canvas, config.Layout.TIME_X, config.Layout.TIME_Y,
					snapshot.hour, snapshot.minute, snapshot.second, time_geo)

		render_label(canvas, config.Layout.TIMEZONE_LABEL_X, config.Layout.TIMEZONE_LABEL_Y,
					 fit_label(timezone_state.label, config.Layout.TIMEZONE_LABEL_X))
		render_label(canvas, config.Layout.WEEKDAY_LABEL_X, config.Layout.WEEKDAY_LABEL_Y,
					 weekday_label(snapshot.weekday))

		render_date(canvas, config.Layout.DATE_X, config.Layout.DATE_Y,
					snapshot.day, snapshot.month, snapshot.year, date_geo)
	finally:
		canvas.end_frame()
