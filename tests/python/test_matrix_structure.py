import unittest

import numpy as np

from matrijs import Matrix, ShapeMismatch


class TestTranspose(unittest.TestCase):
    def setUp(self):
        # fmt: off
        self.m = Matrix(3, 3, [
            0., 1., 2.,
            3., 4., 5.,
            6., 7., 8.,
        ])
        self.m_t = Matrix(3, 3, [
            0., 3., 6.,
            1., 4., 7.,
            2., 5., 8.,
        ])
        # fmt: on

    def test_transposed(self):
        self.assertEqual(self.m.transposed(), self.m_t)
        # The receiver is unchanged.
        self.assertNotEqual(self.m, self.m_t)
        self.assertEqual(self.m.T, self.m_t)

    def test_transpose_in_place(self):
        self.m.transpose_in_place()
        self.assertEqual(self.m, self.m_t)

    def test_rectangular_transpose(self):
        m = Matrix(2, 3, [0, 1, 2, 3, 4, 5])
        t = m.transposed()
        self.assertEqual(t.shape, (3, 2))
        self.assertEqual(t, Matrix(3, 2, [0, 3, 1, 4, 2, 5]))
        for i in range(2):
            for j in range(3):
                self.assertEqual(t[j, i], m[i, j])

    def test_round_trip(self):
        m = Matrix(2, 4, list(range(8)))
        self.assertEqual(m.transposed().transposed(), m)
        m.transpose_in_place()
        self.assertEqual(m.shape, (4, 2))
        m.transpose_in_place()
        self.assertEqual(m, Matrix(2, 4, list(range(8))))

    def test_transposed_does_not_share_storage(self):
        t = self.m.transposed()
        t[0, 0] = 99.0
        self.assertEqual(self.m[0, 0], 0.0)

    def test_transpose_zero_sized(self):
        m = Matrix.zero(0, 3)
        m.transpose_in_place()
        self.assertEqual(m.shape, (3, 0))
        self.assertEqual(len(m.array()), 0)


class TestGrow(unittest.TestCase):
    def test_grow_col(self):
        m = Matrix.one(3, 2)
        m.append_column([0.0] * 3)
        # fmt: off
        expected = Matrix(3, 3, [
            1., 1., 0.,
            1., 1., 0.,
            1., 1., 0.,
        ])
        # fmt: on
        self.assertEqual(m, expected)

    def test_grow_col_interleaves_rows(self):
        m = Matrix(2, 2, [0, 1, 2, 3])
        m.append_column([10, 20])
        self.assertEqual(m.array().tolist(), [0, 1, 10, 2, 3, 20])
        self.assertEqual(m.col(2).tolist(), [10.0, 20.0])

    def test_grow_row(self):
        m = Matrix.one(2, 3)
        m.append_row([0.0] * 3)
        # fmt: off
        expected = Matrix(3, 3, [
            1., 1., 1.,
            1., 1., 1.,
            0., 0., 0.,
        ])
        # fmt: on
        self.assertEqual(m, expected)

    def test_grow_row_preserves_leading_rows(self):
        m = Matrix(2, 2, [0, 1, 2, 3])
        for step in range(20):
            m.append_row([step, -step])
            self.assertEqual(m.shape, (3 + step, 2))
            self.assertEqual(len(m.array()), m.rows() * m.cols())
        self.assertEqual(m.row(0).tolist(), [0.0, 1.0])
        self.assertEqual(m.row(1).tolist(), [2.0, 3.0])
        self.assertEqual(m.row(21).tolist(), [19.0, -19.0])

    def test_grow_col_transposed(self):
        m = Matrix.one(3, 2)
        m.transpose_in_place()
        m.append_row([0.0] * 3)
        m.transpose_in_place()

        direct = Matrix.one(3, 2)
        direct.append_column([0.0] * 3)
        self.assertEqual(m, direct)

    def test_append_row_wrong_length(self):
        m = Matrix.one(2, 3)
        with self.assertRaises(ShapeMismatch):
            m.append_row([0.0, 0.0])
        # Failed appends leave the matrix untouched.
        self.assertEqual(m, Matrix.one(2, 3))

    def test_append_column_wrong_length(self):
        m = Matrix.one(2, 3)
        with self.assertRaises(ShapeMismatch):
            m.append_column([0.0, 0.0, 0.0])
        self.assertEqual(m, Matrix.one(2, 3))

    def test_append_accepts_numpy(self):
        m = Matrix.zero(1, 2)
        m.append_row(np.array([1.0, 2.0], dtype=np.float32))
        m.append_column(np.array([3.0, 4.0], dtype=np.float32))
        self.assertEqual(m, Matrix(2, 3, [0, 0, 3, 1, 2, 4]))

    def test_append_to_zero_sized(self):
        m = Matrix.zero(0, 2)
        m.append_row([1.0, 2.0])
        self.assertEqual(m, Matrix(1, 2, [1.0, 2.0]))

        n = Matrix.zero(2, 0)
        n.append_column([1.0, 2.0])
        self.assertEqual(n, Matrix(2, 1, [1.0, 2.0]))

    def test_row_views_do_not_see_later_appends(self):
        m = Matrix(1, 2, [1.0, 2.0])
        flat = m.array()
        m.append_row([3.0, 4.0])
        self.assertEqual(len(flat), 2)
        self.assertEqual(len(m.array()), 4)

    def test_copy_drops_spare_capacity(self):
        m = Matrix.zero(1, 2)
        m.append_row([1.0, 1.0])
        dup = m.copy()
        dup.append_row([2.0, 2.0])
        self.assertEqual(m.shape, (2, 2))
        self.assertEqual(dup.shape, (3, 2))


if __name__ == "__main__":
    unittest.main()
