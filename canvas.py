"""
Segment Clock - In-memory canvas
A PixelCanvas backed by a bytearray. Used for headless runs and tests;
the panel itself is driven by hardware.BitmapCanvas.
"""

import config


class FrameBuffer:
    """
    Monochrome pixel buffer with frame and contrast bookkeeping.

    Out-of-bounds pixels are ignored so callers never need to clip.
    """

    def __init__(self, width=config.Display.WIDTH, height=config.Display.HEIGHT):
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)
        self.contrast = None
        self.frames_committed = 0
        self.in_frame = False

    def begin_frame(self):
        """Start a new frame from a blank buffer"""
        for index in range(len(self.pixels)):
            self.pixels[index] = 0
        self.in_frame = True

    def end_frame(self):
        self.in_frame = False
        self.frames_committed += 1

    def _index(self, x, y):
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        return None

    def set_pixel(self, x, y):
        index = self._index(x, y)
        if index is not None:
            self.pixels[index] = 1

    def clear_pixel(self, x, y):
        index = self._index(x, y)
        if index is not None:
            self.pixels[index] = 0

    def get_pixel(self, x, y):
        index = self._index(x, y)
        return index is not None and self.pixels[index] == 1

    def set_contrast(self, value):
        self.contrast = value

    def lit_pixels(self):
        """Set of (x, y) for every lit pixel"""
        return {
            (index % self.width, index // self.width)
            for index, value in enumerate(self.pixels)
            if value
        }

    def to_text(self, on="#", off="."):
        """Render the buffer as lines of text, one per row"""
        rows = []
        for y in range(self.height):
            start = y * self.width
            rows.append("".join(on if value else off for value in self.pixels[start:start + self.width]))
        return "\n".join(rows)
