# src/textrange/errors.py


class TextRangeError(Exception):
    """Base class for every error raised by the text range core."""


class StyleCapabilityError(TextRangeError):
    """
    Raised at initialization when no usable style resolver is available.
    Without resolved display/white-space/visibility values the rendered text
    cannot be computed, so the engine refuses to construct.
    """


class StructuralInconsistencyError(TextRangeError):
    """
    Raised when a step expects a child at a given index and finds none.
    This means the tree was mutated during iteration or the position is corrupt.
    """


class InvalidPositionError(TextRangeError, ValueError):
    """Raised for an out-of-range offset or a position without a node."""
