class NEBError(Exception):
    """Base class of all errors raised by nebfire."""


class ShapeMismatchError(NEBError, ValueError):
    """Arrays of a band (images, forces, steps) do not share the same shape."""


class IndexOutOfRangeError(NEBError, IndexError):
    """An image index lies outside the valid range of the band."""


class ConfigurationError(NEBError, ValueError):
    """An option of the band or of an optimizer has an unsupported value."""
