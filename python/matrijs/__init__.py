"""Dense row-major float32 matrices.

``Matrix`` is the only data type; everything else exported here is its
error/warning taxonomy and the process-wide settings.
"""
from __future__ import annotations

try:
    from ._version import version as __version__
except ImportError:
    __version__ = "unknown"

from ._internal import interop as _interop
from ._internal.errors import (
    InvalidShape,
    MatrijsError,
    OutOfBounds,
    ShapeMismatch,
)
from ._internal.matrix import Matrix
from ._internal.runtime import configure, settings
from ._internal.warnings import (
    MatrijsDTypeWarning,
    MatrijsPerformanceWarning,
    MatrijsWarning,
)

_interop.patch_interop(Matrix)

__all__ = [
    "InvalidShape",
    "MatrijsDTypeWarning",
    "MatrijsError",
    "MatrijsPerformanceWarning",
    "MatrijsWarning",
    "Matrix",
    "OutOfBounds",
    "ShapeMismatch",
    "configure",
    "settings",
]
