"""
Fluere viewer engine - runs the color-cycling animation for the web viewer
"""

import base64
import logging
import threading
import traceback
from io import BytesIO

from fluere import Animator, RandomSource, ViewState, load_palettes, save_png
from fluere.animation import DEFAULT_KNOTS
from fluere.errors import FluereError

logger = logging.getLogger(__name__)


class FluereEngine:
    """Everything the viewer needs between frames.

    Socket handlers and the render thread both call in here, so every
    public method takes the engine lock.
    """

    def __init__(self, width=1280, height=720, num_knots=DEFAULT_KNOTS,
                 palette_file=None, seed=None, screenshot_dir=None):
        self.width = width
        self.height = height
        self.palette_file = palette_file
        self.screenshot_dir = screenshot_dir
        self.rng = RandomSource(seed)
        self.palettes = load_palettes(palette_file)
        self.animator = Animator(self.palettes, width, height, self.rng, num_knots)
        self.frame_count = 0
        self.next_screenshot = 1
        self._lock = threading.Lock()

        logger.info("Loaded %d palettes from %s", len(self.palettes),
                    palette_file or "the bundled palette file")

    @property
    def num_knots(self):
        return self.animator.num_knots

    def set_num_knots(self, value):
        """Set the knot count (1-50); used from the next drawing on"""
        with self._lock:
            return self.animator.set_num_knots(value)

    def new_drawing(self):
        """Throw away the current drawing (only while it is showing or fading in)"""
        with self._lock:
            if self.animator.state in (ViewState.NORMAL, ViewState.FADE_IN):
                self.animator.request_new_drawing()
                return True
            return False

    def new_palette(self):
        """Pick a new color table for the current drawing (only in the normal state)"""
        with self._lock:
            if self.animator.state is ViewState.NORMAL:
                self.animator.new_color_table()
                return self.animator.palette.name
            return None

    def render_frame(self):
        """Advance one frame and return it as a base64 image"""
        try:
            with self._lock:
                self.animator.step()
                self.frame_count += 1
                img = self.animator.frame()

            # JPEG is much faster to encode than PNG at full size
            buffer = BytesIO()
            img.save(buffer, format='JPEG', quality=85)
            img_base64 = base64.b64encode(buffer.getvalue()).decode('utf-8')

            return f"data:image/jpeg;base64,{img_base64}", None

        except FluereError as e:
            logger.error("Render failed: %s", e)
            return None, f"Error rendering frame: {e}"
        except Exception as e:
            error_msg = f"Error rendering frame: {str(e)}\n{traceback.format_exc()}"
            logger.error(error_msg)
            return None, error_msg

    def save_screenshot(self):
        """Save the undimmed current frame as PNG, returns the file path"""
        with self._lock:
            if self.animator.pixels is None:
                raise FluereError("Nothing has been drawn yet")
            img = self.animator.indexed_image().convert('RGB')
            path, n = save_png(img, self.screenshot_dir, start=self.next_screenshot)
            self.next_screenshot = n + 1
            return path

    def get_palettes(self):
        return [{'name': p.name, 'colors': [str(c) for c in p]} for p in self.palettes]

    def get_status(self):
        """Get current engine status"""
        with self._lock:
            anim = self.animator
            drawing = anim.drawing
            return {
                'state': anim.state.value,
                'fade': round(anim.fade, 2),
                'offset': anim.offset,
                'num_knots': anim.num_knots,
                'styles': ([drawing.request.style_a.name.lower(),
                            drawing.request.style_b.name.lower()]
                           if drawing is not None else None),
                'palette': anim.palette.name if anim.palette is not None else None,
                'randomize': anim.randomize,
                'stripes': anim.stripes,
                'frame_count': self.frame_count,
                'resolution': [self.width, self.height]
            }
