"""Matrijs error categories.

Every error is a precondition violation raised at the call that made it.
The categories also derive from the matching built-in exception so callers
that catch ``ValueError``/``IndexError`` keep working.
"""


class MatrijsError(Exception):
    """Base class for all matrijs errors."""


class InvalidShape(MatrijsError, ValueError):
    """Flat data does not describe the requested (rows, cols) shape."""


class OutOfBounds(MatrijsError, IndexError):
    """A row, column or element index is outside the matrix extents."""


class ShapeMismatch(MatrijsError, ValueError):
    """Two operands (or an operand and appended data) have incompatible shapes."""
