from __future__ import annotations

from typing import Any

import numpy as np

from .coercion import is_real_scalar


def _to_numpy(self: Any) -> np.ndarray:
    """Return a 2-D float32 copy of the matrix; the copy never aliases the matrix."""
    rows, cols = self.shape
    return self.array().reshape(rows, cols).copy()


def _array(self: Any, dtype: Any = None, copy: Any = None) -> np.ndarray:
    if copy is False:
        raise ValueError("Matrix storage cannot be exported to NumPy without a copy")
    out = _to_numpy(self)
    if dtype is not None:
        out = out.astype(dtype, copy=False)
    return out


def _array_ufunc(self: Any, ufunc: Any, method: str, *inputs: Any, **kwargs: Any) -> Any:
    """
    NumPy ufunc protocol implementation for matrijs matrices.
    Routes np.add(A, B) and friends back to the Matrix operators so shape
    checks apply. Anything else (ndarray operands, out=, reductions) is refused.
    """
    if method != "__call__" or kwargs:
        return NotImplemented

    cls = type(self)

    # `m == arr` reaches here through ndarray.__eq__; a Matrix only equals a Matrix.
    if ufunc in (np.equal, np.not_equal) and len(inputs) == 2:
        a, b = inputs
        same = isinstance(a, cls) and isinstance(b, cls) and a == b
        return same if ufunc == np.equal else not same

    if not all(isinstance(x, cls) or is_real_scalar(x) for x in inputs):
        return NotImplemented

    # Unary operations
    if len(inputs) == 1:
        if ufunc == np.negative:
            return -inputs[0]
        return NotImplemented

    # Binary operations
    if len(inputs) == 2:
        a, b = inputs
        if isinstance(a, cls):
            if ufunc == np.add:
                return a + b
            if ufunc == np.subtract:
                return a - b
            if ufunc == np.multiply:
                return a * b
            if ufunc == np.divide:
                return a / b
            if ufunc == np.matmul and isinstance(b, cls):
                return a.dot(b)
            return NotImplemented
        # Scalar on the left: only the commutative ops are defined.
        if ufunc == np.add:
            return b.add_scalar(a)
        if ufunc == np.multiply:
            return b.mul_scalar(a)

    return NotImplemented


def patch_interop(cls: Any) -> None:
    """Patch the NumPy protocols onto the given class."""
    cls.__array__ = _array
    cls.__array_ufunc__ = _array_ufunc
    cls.to_numpy = _to_numpy
