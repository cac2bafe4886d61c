import numpy as np
import pytest

from matrijs import Matrix, ShapeMismatch


def test_asarray_is_a_2d_float32_copy():
    m = Matrix(2, 3, [0, 1, 2, 3, 4, 5])
    arr = np.asarray(m)
    assert arr.shape == (2, 3)
    assert arr.dtype == np.float32
    assert arr.tolist() == [[0, 1, 2], [3, 4, 5]]
    arr[0, 0] = 100.0
    assert m[0, 0] == 0.0


def test_to_numpy_and_dtype_request():
    m = Matrix(1, 2, [0.5, 1.5])
    assert m.to_numpy().tolist() == [[0.5, 1.5]]
    assert np.asarray(m, dtype=np.float64).dtype == np.float64


def test_round_trip_through_numpy():
    m = Matrix(3, 2, [1, 2, 3, 4, 5, 6])
    assert Matrix.from_rows(np.asarray(m)) == m


def test_ufuncs_dispatch_to_matrix_operators():
    a = Matrix(2, 2, [1.0, 2.0, 3.0, 4.0])
    b = Matrix.one(2, 2)
    assert np.add(a, b) == a + b
    assert np.subtract(a, b) == a - b
    assert np.multiply(a, b) == a * b
    assert np.divide(a, b) == a / b
    assert np.matmul(a, b) == a.dot(b)
    assert np.negative(a) == -a
    assert np.multiply(2.0, a) == a * 2.0
    assert np.add(np.float32(1.0), a) == a + 1.0


def test_ufuncs_keep_shape_checks():
    with pytest.raises(ShapeMismatch):
        np.add(Matrix.one(2, 2), Matrix.one(2, 3))


def test_mixing_with_ndarray_is_refused():
    m = Matrix.one(2, 2)
    with pytest.raises(TypeError):
        np.add(m, np.ones((2, 2), dtype=np.float32))
    with pytest.raises(TypeError):
        np.sin(m)


def test_equality_with_ndarray_is_false():
    m = Matrix.one(2, 2)
    arr = np.ones((2, 2), dtype=np.float32)
    assert (m == arr) is False
    assert (m != arr) is True
    assert (arr == m) is False
    assert (arr != m) is True


def test_containment_with_ndarray_neighbours():
    m = Matrix.one(2, 2)
    arr = np.ones((2, 2), dtype=np.float32)
    assert m in [arr, m]
    assert [arr, m].index(m) == 1
