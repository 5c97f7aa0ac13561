"""
Error types raised by the stripe tool.

Pointer positions outside the canvas are clamped, never raised.
"""


class StripesError(Exception):
    """Base class for failures reported to the user"""


class InputError(StripesError):
    """No image loaded, or the image could not be decoded"""


class EncodingError(StripesError):
    """The output raster could not be encoded or saved"""
