"""
Color-cycling animation over a fluere drawing.

The drawing itself never changes while it is on screen. Each frame only
moves the offset at which the 256-color window is read from the doubled
color table. A drawing lives through four states:

    CALC      compute a new drawing (shown as black)
    FADE_IN   fade up from black
    NORMAL    cycle colors until the counter passes RESET_VALUE
    FADE_OUT  fade to black, then back to CALC
"""

import logging
from enum import Enum

import numpy as np
from PIL import Image

from .colortable import build_color_table
from .drawing import DrawingEngine
from .errors import ConfigurationError
from .fields import Style

logger = logging.getLogger(__name__)

FPS = 30
FADE_STEP = 0.05
COUNTER_STEP = 2                         # tics per frame
RESET_VALUE = 12 * FPS * COUNTER_STEP    # about 12 seconds on screen

MIN_KNOTS = 1
MAX_KNOTS = 50
DEFAULT_KNOTS = 4


class ViewState(Enum):
    CALC = "calc"
    FADE_IN = "fade_in"
    NORMAL = "normal"
    FADE_OUT = "fade_out"


def clamp_knots(value):
    return max(MIN_KNOTS, min(MAX_KNOTS, int(value)))


class Animator:
    """Owns the current drawing, its color table, and the view state.

    rng feeds drawings and color tables through two separate child
    streams, so asking for a new palette never changes the next drawing.
    """

    def __init__(self, palettes, width, height, rng, num_knots=DEFAULT_KNOTS):
        if not palettes.usable():
            raise ConfigurationError("No palette with colors to animate")
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Bad frame size {width}x{height}")
        self.palettes = palettes
        self.width = width
        self.height = height
        self.num_knots = clamp_knots(num_knots)

        self._drawing_rng = rng.spawn()
        self._color_rng = rng.spawn()

        self.state = ViewState.CALC
        self.fade = 0.0
        self.counter = 0
        self.drawing = None
        self.pixels = None
        self.color_table = None
        self.palette = None
        self.randomize = False
        self.stripes = False
        self._done_calculating = False

    @property
    def offset(self):
        return self.counter % 256

    def set_num_knots(self, value):
        """Knot count for the next drawing, clamped to 1..50"""
        self.num_knots = clamp_knots(value)
        return self.num_knots

    def new_drawing(self):
        """Compute a drawing with random styles and give it a fresh color table"""
        rng = self._drawing_rng
        style_a = Style(rng.integer(len(Style)))
        style_b = Style(rng.integer(len(Style)))

        if self.drawing is not None:
            self.drawing.close()
        self.drawing = DrawingEngine(self.width, self.height, self.num_knots,
                                     style_a, style_b, rng)
        self.pixels = self.drawing.fill()
        self.new_color_table()

        logger.info("New drawing: %s/%s with %d knots, palette %s",
                    style_a.name.lower(), style_b.name.lower(), self.num_knots,
                    self.palette.name)
        self.state = ViewState.FADE_IN

    def new_color_table(self):
        """Pick a palette and table options at random; restarts the cycle"""
        rng = self._color_rng
        self.randomize = rng.coin()
        self.stripes = rng.coin()
        usable = self.palettes.usable()
        self.palette = usable[rng.integer(len(usable))]
        self.color_table = build_color_table(self.palette, self.randomize,
                                             self.stripes, rng)
        self.counter = 0

    def request_new_drawing(self):
        """Drop the current drawing; the next step computes another"""
        self.state = ViewState.CALC
        self._done_calculating = False
        self.fade = 0.0

    def step(self):
        """Advance one frame"""
        if self.state is ViewState.CALC:
            if not self._done_calculating:
                self._done_calculating = True
                self.new_drawing()
            return self.state

        if self.state is ViewState.FADE_IN:
            self.fade += FADE_STEP
            if self.fade >= 1:
                self.fade = 1.0
                self.state = ViewState.NORMAL
        elif self.state is ViewState.FADE_OUT:
            self.fade -= FADE_STEP
            if self.fade <= 0:
                self.fade = 0.0
                self.state = ViewState.CALC
                self._done_calculating = True
                self.new_drawing()
        elif self.state is ViewState.NORMAL:
            if self.counter > RESET_VALUE:
                self.state = ViewState.FADE_OUT

        self.counter += COUNTER_STEP
        return self.state

    def indexed_image(self):
        """The drawing as a Pillow "P" image using the current color window"""
        img = Image.frombytes("P", (self.width, self.height), self.pixels.tobytes())
        img.putpalette(self.color_table.window(self.offset))
        return img

    def frame(self):
        """The current frame as an RGB image, faded over black"""
        if self.state is ViewState.CALC or self.pixels is None:
            return Image.new("RGB", (self.width, self.height), (0, 0, 0))

        rgb = self.indexed_image().convert("RGB")
        if self.state in (ViewState.FADE_IN, ViewState.FADE_OUT):
            black = Image.new("RGB", rgb.size, (0, 0, 0))
            rgb = Image.blend(black, rgb, self.fade)
        return rgb

    def frame_array(self):
        """The undimmed current frame as an (height, width, 3) uint8 array.

        A lookup helper for inspecting colors; the viewer uses frame().
        """
        window = np.frombuffer(self.color_table.window(self.offset), dtype=np.uint8)
        return window.reshape(256, 3)[self.pixels].reshape(self.height, self.width, 3)
