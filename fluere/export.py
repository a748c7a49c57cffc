"""
Screenshot export
"""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "Fluere"


def default_screenshot_dir():
    """FLUERE_SCREENSHOT_DIR, else ~/Desktop, else the home directory"""
    configured = os.environ.get("FLUERE_SCREENSHOT_DIR")
    if configured:
        return configured
    desktop = os.path.join(os.path.expanduser("~"), "Desktop")
    if os.path.isdir(desktop):
        return desktop
    return os.path.expanduser("~")


def next_free_path(directory, prefix=DEFAULT_PREFIX, start=1):
    """First "<prefix> <n>.png" in directory that does not exist yet, n >= start"""
    n = start
    while True:
        path = os.path.join(directory, f"{prefix} {n}.png")
        if not os.path.exists(path):
            return path, n
        n += 1


def save_png(image, directory=None, prefix=DEFAULT_PREFIX, start=1):
    """Write a Pillow image as PNG without overwriting earlier screenshots.

    Returns (path, number) so callers can resume numbering after it.
    """
    if directory is None:
        directory = default_screenshot_dir()
    os.makedirs(directory, exist_ok=True)
    path, n = next_free_path(directory, prefix, start)
    image.save(path, format="PNG")
    logger.info("Saved screenshot %s", path)
    return path, n
