"""
Exception types raised by the fluere core
"""


class FluereError(Exception):
    """Base class for all fluere errors"""


class ConfigurationError(FluereError, ValueError):
    """A drawing or color table was requested with unusable parameters"""


class PaletteParseError(FluereError, ValueError):
    """A palette description could not be parsed.

    `position` is the zero-based index of the offending token (or the
    token count when the stream ended early).
    """

    def __init__(self, message, position=None):
        if position is not None:
            message = f"{message} (token {position})"
        super().__init__(message)
        self.position = position
