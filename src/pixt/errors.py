class PixtError(Exception):
    """Base class for every error raised by the rendering pipeline."""


class EmptyRampError(PixtError):
    """A glyph ramp resolved to zero characters."""


class MissingRampSourceError(PixtError):
    """A from-file glyph ramp could not be read."""


class InvalidDimensionError(PixtError):
    """A requested grid dimension is zero, or the source image has zero area."""


class UnsupportedPixelFormatError(PixtError):
    """The image has a channel layout the reducer cannot average."""
