from __future__ import annotations

import numbers
import warnings
from collections.abc import Sequence as _SequenceABC
from typing import Any

import numpy as np

from .errors import InvalidShape
from .warnings import MatrijsDTypeWarning


DTYPE = np.float32

_narrowing_warned: bool = False


def is_sequence_like(value: Any) -> bool:
    return isinstance(value, _SequenceABC) and not isinstance(value, (str, bytes, bytearray))


def is_real_scalar(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return False
    return isinstance(value, (numbers.Real, np.integer, np.floating))


def coerce_scalar(value: Any) -> np.float32 | None:
    """Return ``value`` as a float32 scalar, or None when it is not a real number."""
    if not is_real_scalar(value):
        return None
    # Finite values beyond float32 range become inf, as the kernels do.
    with np.errstate(over="ignore"):
        return DTYPE(value)


def coerce_extent(value: Any, name: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    n = int(value)
    if n < 0:
        raise InvalidShape(f"{name} must be non-negative, got {n}")
    return n


def coerce_index(value: Any, name: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} index must be an integer, got {type(value).__name__}")
    return int(value)


def _warn_narrowing(source_dtype: Any, stacklevel: int) -> None:
    global _narrowing_warned
    if _narrowing_warned:
        return
    _narrowing_warned = True
    warnings.warn(
        f"Input array of dtype {source_dtype} is narrowed to float32 storage; "
        "values may be rounded.",
        MatrijsDTypeWarning,
        stacklevel=stacklevel,
    )


def _from_ndarray(array: np.ndarray, stacklevel: int) -> np.ndarray:
    if array.dtype.kind not in "biuf":
        raise TypeError(f"Matrix data must be real numbers, got an array of dtype {array.dtype}")
    if array.dtype != DTYPE:
        _warn_narrowing(array.dtype, stacklevel + 1)
    with np.errstate(over="ignore"):
        return np.array(array, dtype=DTYPE, order="C", copy=True)


def coerce_flat(data: Any, *, stacklevel: int = 2) -> np.ndarray:
    """Copy flat row-major input into a fresh 1-D float32 array.

    ``stacklevel`` is passed on to the narrowing warning, counted from the
    caller of this function as in ``warnings.warn``.
    """
    if isinstance(data, np.ndarray):
        if data.ndim != 1:
            raise InvalidShape(
                f"Matrix data must be a flat sequence, got an array with {data.ndim} dimensions"
            )
        return _from_ndarray(data, stacklevel + 1)

    if not is_sequence_like(data):
        raise TypeError(
            f"Matrix data must be a flat sequence of numbers, got {type(data).__name__}"
        )
    values = list(data)
    for value in values:
        if not is_real_scalar(value):
            raise TypeError(
                f"Matrix data must contain real numbers, got {type(value).__name__}"
            )
    with np.errstate(over="ignore"):
        return np.array(values, dtype=DTYPE)


def coerce_rows(candidate: Any, *, stacklevel: int = 2) -> tuple[int, int, np.ndarray]:
    """Flatten a nested row sequence (or 2-D array) into ``(rows, cols, flat)``."""
    if isinstance(candidate, np.ndarray):
        if candidate.ndim != 2:
            raise InvalidShape(
                f"Matrix rows must form a 2D structure, got {candidate.ndim} dimensions"
            )
        rows, cols = candidate.shape
        return int(rows), int(cols), _from_ndarray(candidate, stacklevel + 1).reshape(-1)

    if not is_sequence_like(candidate):
        raise TypeError(
            "Matrix rows must be provided as a nested sequence or a 2D NumPy array."
        )
    rows_data = list(candidate)
    if not rows_data:
        return 0, 0, np.empty(0, dtype=DTYPE)

    flat: list[np.ndarray] = []
    for index, row in enumerate(rows_data):
        if isinstance(row, np.ndarray) and row.ndim != 1:
            raise InvalidShape(f"row {index} must be one-dimensional")
        if not isinstance(row, np.ndarray) and not is_sequence_like(row):
            raise TypeError("Each matrix row must be a sequence of entries.")
        values = coerce_flat(row, stacklevel=stacklevel + 1)
        if flat and len(values) != len(flat[0]):
            raise InvalidShape(
                f"Matrix rows must all have the same length: row 0 has {len(flat[0])} "
                f"entries, row {index} has {len(values)}"
            )
        flat.append(values)
    return len(rows_data), len(flat[0]), np.concatenate(flat)

