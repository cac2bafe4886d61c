from __future__ import annotations

import warnings
from typing import Any, Callable, Iterator

import numpy as np

from . import runtime as _runtime
from .coercion import (
    DTYPE,
    coerce_extent,
    coerce_flat,
    coerce_index,
    coerce_rows,
    coerce_scalar,
)
from .errors import InvalidShape, OutOfBounds, ShapeMismatch
from .formatting import MatrixMixin
from .warnings import MatrijsPerformanceWarning


_Kernel = Callable[..., Any]


class Matrix(MatrixMixin):
    """A dense two-dimensional matrix of float32 values.

    Storage is a single flat row-major buffer: element ``(r, c)`` lives at
    offset ``r * cols + c`` and the buffer always holds exactly
    ``rows * cols`` live values. The layout makes rows cheap and columns
    expensive:

    - ``row(i)`` is a view into the buffer, ``col(j)`` is a strided copy.
    - ``append_row`` extends the buffer (amortized O(cols)),
      ``append_column`` rebuilds it (O(rows * cols)).

    Operators accept either a real scalar or another ``Matrix``. Between two
    matrices ``*`` is the elementwise (Hadamard) product; the matrix product
    is ``dot`` / ``@``.

    Example::

        m = Matrix(2, 2, [0.0, 1.0, -1.0, 0.0])
        m += 1.0
        assert m == Matrix(2, 2, [1.0, 2.0, 0.0, 1.0])
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, rows: int, cols: int, data: Any):
        n_rows = coerce_extent(rows, "rows")
        n_cols = coerce_extent(cols, "cols")
        flat = coerce_flat(data, stacklevel=3)
        if flat.size != n_rows * n_cols:
            raise InvalidShape(
                f"data has {flat.size} elements, but a {n_rows}x{n_cols} matrix "
                f"needs rows * cols = {n_rows * n_cols}"
            )
        self._adopt(n_rows, n_cols, flat)

    def _adopt(self, rows: int, cols: int, flat: np.ndarray) -> None:
        # Takes ownership of `flat`; callers must not keep other references.
        self._rows = rows
        self._cols = cols
        self._buffer = flat

    @classmethod
    def _from_buffer(cls, rows: int, cols: int, flat: np.ndarray) -> "Matrix":
        out = cls.__new__(cls)
        out._adopt(rows, cols, flat)
        return out

    def _live(self) -> np.ndarray:
        return self._buffer[: self._rows * self._cols]

    def _grid(self) -> np.ndarray:
        return self._live().reshape(self._rows, self._cols)

    # --- constructors ---

    @classmethod
    def with_value(cls, rows: int, cols: int, value: float) -> "Matrix":
        """Matrix of shape ``(rows, cols)`` with every cell set to ``value``."""
        n_rows = coerce_extent(rows, "rows")
        n_cols = coerce_extent(cols, "cols")
        fill = coerce_scalar(value)
        if fill is None:
            raise TypeError(f"fill value must be a real number, got {type(value).__name__}")
        return cls._from_buffer(n_rows, n_cols, np.full(n_rows * n_cols, fill, dtype=DTYPE))

    @classmethod
    def zero(cls, rows: int, cols: int) -> "Matrix":
        return cls.with_value(rows, cols, 0.0)

    @classmethod
    def one(cls, rows: int, cols: int) -> "Matrix":
        return cls.with_value(rows, cols, 1.0)

    @classmethod
    def identity(cls, size: int) -> "Matrix":
        out = cls.zero(size, size)
        # Offsets i * size + i are a stride of size + 1 through the flat buffer.
        out._live()[:: size + 1] = 1.0
        return out

    @classmethod
    def diagonal(cls, values: Any) -> "Matrix":
        """Square matrix with ``values[i]`` at ``(i, i)`` and zeros elsewhere."""
        diag = coerce_flat(values, stacklevel=3)
        size = int(diag.size)
        out = cls.zero(size, size)
        out._live()[:: size + 1] = diag
        return out

    @classmethod
    def from_rows(cls, rows: Any) -> "Matrix":
        """Build a matrix from a nested sequence of equal-length rows (or a 2-D array).

        ``Matrix.from_rows([[0, 1], [2, 3]])`` is ``Matrix(2, 2, [0, 1, 2, 3])``.
        An empty sequence gives a 0x0 matrix.
        """
        n_rows, n_cols, flat = coerce_rows(rows, stacklevel=3)
        return cls._from_buffer(n_rows, n_cols, flat)

    def copy(self) -> "Matrix":
        """Independent duplicate; the copy shares no storage with ``self``."""
        return self._from_buffer(self._rows, self._cols, self._live().copy())

    def __copy__(self) -> "Matrix":
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> "Matrix":
        return self.copy()

    # --- shape queries ---

    def rows(self) -> int:
        return self._rows

    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    def array(self) -> np.ndarray:
        """Read-only view of the flat row-major storage (length ``rows * cols``)."""
        view = self._live().view()
        view.flags.writeable = False
        return view

    # --- rows, columns, elements ---

    def _check_row(self, index: Any) -> int:
        i = coerce_index(index, "row")
        if i < 0 or i >= self._rows:
            raise OutOfBounds(f"row index {i} is out of bounds for {self._rows} rows")
        return i

    def _check_col(self, index: Any) -> int:
        j = coerce_index(index, "column")
        if j < 0 or j >= self._cols:
            raise OutOfBounds(f"column index {j} is out of bounds for {self._cols} columns")
        return j

    def _row_slice(self, i: int) -> np.ndarray:
        start = i * self._cols
        return self._buffer[start : start + self._cols]

    def row(self, index: int) -> np.ndarray:
        """Read-only view of row ``index``.

        The view aliases the matrix storage (no copy) and stays valid until the
        next structural mutation (append or in-place transpose).

        Raises:
            OutOfBounds: if ``index >= rows``.
        """
        view = self._row_slice(self._check_row(index))
        view.flags.writeable = False
        return view

    def row_mut(self, index: int) -> np.ndarray:
        """Writable view of row ``index``; writes land directly in the matrix.

        Raises:
            OutOfBounds: if ``index >= rows``.
        """
        return self._row_slice(self._check_row(index))

    def col(self, index: int) -> np.ndarray:
        """Newly allocated copy of column ``index``.

        A column is not contiguous in row-major storage, so unlike ``row`` this
        gathers ``rows`` values at offsets ``index, index + cols, ...``.

        Raises:
            OutOfBounds: if ``index >= cols``.
        """
        j = self._check_col(index)
        return self._live()[j :: self._cols].copy()

    def iter_rows(self) -> Iterator[np.ndarray]:
        for i in range(self._rows):
            yield self.row(i)

    def _split_key(self, key: Any) -> tuple[int, int]:
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("matrix indices must be provided as [row, col]")
        row, col = key
        return self._check_row(row), self._check_col(col)

    def __getitem__(self, key: Any) -> float:
        i, j = self._split_key(key)
        return float(self.row(i)[j])

    def __setitem__(self, key: Any, value: Any) -> None:
        i, j = self._split_key(key)
        scalar = coerce_scalar(value)
        if scalar is None:
            raise TypeError(f"matrix values must be real numbers, got {type(value).__name__}")
        self.row_mut(i)[j] = scalar

    # --- structural mutation ---

    def transpose_in_place(self) -> None:
        """Transpose this matrix, replacing its storage.

        Each column of the current layout becomes a row of the new one, so the
        new buffer is the concatenation of the gathered columns. This always
        allocates a full new buffer.
        """
        new_buffer = np.ascontiguousarray(self._grid().T).reshape(-1)
        self._rows, self._cols = self._cols, self._rows
        self._buffer = new_buffer

    def transposed(self) -> "Matrix":
        """Transposed copy; ``self`` is left unchanged."""
        out = self.copy()
        out.transpose_in_place()
        return out

    @property
    def T(self) -> "Matrix":
        return self.transposed()

    def append_row(self, values: Any) -> None:
        """Append a row of ``cols`` values at the bottom.

        Row-major storage makes this a plain buffer extension. Spare capacity
        grows geometrically, so repeated appends are amortized O(cols).
        """
        row = coerce_flat(values, stacklevel=3)
        if row.size != self._cols:
            raise ShapeMismatch(
                f"appended row has {row.size} values, but the matrix has {self._cols} columns"
            )
        size = self._rows * self._cols
        needed = size + self._cols
        if needed > self._buffer.size:
            capacity = max(needed, self._buffer.size * 2)
            grown = np.empty(capacity, dtype=DTYPE)
            grown[:size] = self._buffer[:size]
            self._buffer = grown
        self._buffer[size:needed] = row
        self._rows += 1

    def append_column(self, values: Any) -> None:
        """Append a column of ``rows`` values on the right.

        Unlike ``append_row`` this re-interleaves every existing row: the whole
        buffer is rebuilt with one new trailing value per row, O(rows * cols).
        Growing a matrix column by column is better done by appending rows to
        its transpose.
        """
        column = coerce_flat(values, stacklevel=3)
        if column.size != self._rows:
            raise ShapeMismatch(
                f"appended column has {column.size} values, but the matrix has {self._rows} rows"
            )
        new_cols = self._cols + 1
        cells = self._rows * new_cols
        threshold = _runtime.settings.relayout_warn_cells
        if threshold and cells > threshold:
            warnings.warn(
                f"append_column rebuilds all {cells} cells of a {self._rows}x{self._cols} "
                "matrix; append rows to the transpose for repeated column growth.",
                MatrijsPerformanceWarning,
                stacklevel=2,
            )
        rebuilt = np.empty(cells, dtype=DTYPE)
        grid = rebuilt.reshape(self._rows, new_cols)
        grid[:, : self._cols] = self._grid()
        grid[:, self._cols] = column
        self._buffer = rebuilt
        self._cols = new_cols

    # --- arithmetic kernels ---

    def _scalar_op(self, value: Any, kernel: _Kernel, *, in_place: bool) -> Any:
        scalar = coerce_scalar(value)
        if scalar is None:
            return NotImplemented
        live = self._live()
        # IEEE semantics: x / 0 is inf or nan, never an error or a RuntimeWarning.
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            if in_place:
                kernel(live, scalar, out=live)
                return self
            return self._from_buffer(self._rows, self._cols, kernel(live, scalar))

    def _check_same_shape(self, other: "Matrix", op: str) -> None:
        if self.shape != other.shape:
            raise ShapeMismatch(
                f"{op} requires equal shapes, got {self.shape} and {other.shape}"
            )

    def _matrix_op(self, other: "Matrix", kernel: _Kernel, op: str, *, in_place: bool) -> "Matrix":
        self._check_same_shape(other, op)
        live = self._live()
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            if in_place:
                kernel(live, other._live(), out=live)
                return self
            return self._from_buffer(self._rows, self._cols, kernel(live, other._live()))

    def _binary(self, other: Any, kernel: _Kernel, op: str, *, in_place: bool = False) -> Any:
        if isinstance(other, Matrix):
            return self._matrix_op(other, kernel, op, in_place=in_place)
        return self._scalar_op(other, kernel, in_place=in_place)

    # --- scalar arithmetic (named) ---

    def _require_scalar_result(self, value: Any, kernel: _Kernel) -> "Matrix":
        out = self._scalar_op(value, kernel, in_place=False)
        if out is NotImplemented:
            raise TypeError(f"expected a real scalar, got {type(value).__name__}")
        return out

    def add_scalar(self, value: float) -> "Matrix":
        return self._require_scalar_result(value, np.add)

    def sub_scalar(self, value: float) -> "Matrix":
        return self._require_scalar_result(value, np.subtract)

    def mul_scalar(self, value: float) -> "Matrix":
        return self._require_scalar_result(value, np.multiply)

    def div_scalar(self, value: float) -> "Matrix":
        return self._require_scalar_result(value, np.divide)

    # --- elementwise arithmetic (named) ---

    def _require_matrix(self, other: Any, op: str) -> "Matrix":
        if not isinstance(other, Matrix):
            raise TypeError(f"{op} expects a Matrix operand, got {type(other).__name__}")
        return other

    def add_matrix(self, other: "Matrix") -> "Matrix":
        return self._matrix_op(self._require_matrix(other, "add"), np.add, "add", in_place=False)

    def sub_matrix(self, other: "Matrix") -> "Matrix":
        return self._matrix_op(
            self._require_matrix(other, "subtract"), np.subtract, "subtract", in_place=False
        )

    def hadamard(self, other: "Matrix") -> "Matrix":
        """Elementwise product of two equally shaped matrices.

        This is what ``a * b`` computes for two matrices. It is not the matrix
        product; see :meth:`dot`.
        """
        return self._matrix_op(
            self._require_matrix(other, "hadamard"), np.multiply, "hadamard", in_place=False
        )

    def div_matrix(self, other: "Matrix") -> "Matrix":
        return self._matrix_op(
            self._require_matrix(other, "divide"), np.divide, "divide", in_place=False
        )

    # --- operators ---

    def __add__(self, other: Any) -> Any:
        return self._binary(other, np.add, "add")

    def __radd__(self, other: Any) -> Any:
        return self._scalar_op(other, np.add, in_place=False)

    def __sub__(self, other: Any) -> Any:
        return self._binary(other, np.subtract, "subtract")

    def __mul__(self, other: Any) -> Any:
        return self._binary(other, np.multiply, "hadamard")

    def __rmul__(self, other: Any) -> Any:
        return self._scalar_op(other, np.multiply, in_place=False)

    def __truediv__(self, other: Any) -> Any:
        return self._binary(other, np.divide, "divide")

    def __iadd__(self, other: Any) -> Any:
        return self._binary(other, np.add, "add", in_place=True)

    def __isub__(self, other: Any) -> Any:
        return self._binary(other, np.subtract, "subtract", in_place=True)

    def __imul__(self, other: Any) -> Any:
        return self._binary(other, np.multiply, "hadamard", in_place=True)

    def __itruediv__(self, other: Any) -> Any:
        return self._binary(other, np.divide, "divide", in_place=True)

    def __neg__(self) -> "Matrix":
        return self._from_buffer(self._rows, self._cols, np.negative(self._live()))

    def __matmul__(self, other: Any) -> Any:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.dot(other)

    # --- matrix product ---

    def dot(self, other: "Matrix") -> "Matrix":
        """The matrix product of ``self`` (m x n) and ``other`` (n x p), an m x p matrix.

        ::

                    n
            c_ij =  Σ  a_ik * b_kj
                   k=1

        Accumulation stays in float32: starting from 0, each product
        ``a_ik * b_kj`` is rounded to float32 and added to ``c_ij`` in
        ascending ``k``, rounding again. No wider accumulator is used, so
        results are reproducible against a plain triple loop.

        Raises:
            ShapeMismatch: if ``self.cols() != other.rows()``.
        """
        other = self._require_matrix(other, "dot")
        if self._cols != other._rows:
            raise ShapeMismatch(
                f"cannot multiply {self._rows}x{self._cols} by {other._rows}x{other._cols}: "
                f"inner dimensions differ ({self._cols} != {other._rows})"
            )
        m, n, p = self._rows, self._cols, other._cols
        a = self._grid()
        b = other._grid()
        c = np.zeros((m, p), dtype=DTYPE)
        # One rank-1 update per k applies, to every c_ij at once, the same
        # rounded multiply then add that the triple loop does for that k.
        with np.errstate(over="ignore", invalid="ignore"):
            for k in range(n):
                c += np.multiply.outer(a[:, k], b[k, :])
        return self._from_buffer(m, p, c.reshape(-1))

    # --- comparison ---

    def __eq__(self, other: object) -> Any:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._live(), other._live()))
