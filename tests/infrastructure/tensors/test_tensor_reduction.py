import unittest

import numpy as np

from tapegrad import (
    Axes,
    Axis,
    AxisError,
    Cpu,
    Dyn,
    Rank0,
    Rank1,
    Rank2,
    Rank3,
    Shape,
    ShapeMismatchError,
    StaticShapeError,
)


class TestMean(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)

    def test_vector_mean_and_gradient(self) -> None:
        a = self.dev.tensor([1.0, 2.0, 3.0])
        r = a.trace().mean()
        self.assertEqual(r.shape, Rank0())
        self.assertAlmostEqual(r.item(), 2.0, places=6)
        grads = r.backward()
        np.testing.assert_allclose(grads.to_numpy(a), np.full(3, 1.0 / 3.0), rtol=1e-6)

    def test_matrix_mean(self) -> None:
        a = self.dev.tensor([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        r = a.trace().mean()
        self.assertAlmostEqual(r.item(), 3.5, places=6)
        grads = r.backward()
        np.testing.assert_allclose(grads.to_numpy(a), np.full((2, 3), 1.0 / 6.0), rtol=1e-6)

    def test_rank3_mean(self) -> None:
        a = self.dev.ones(Rank3(4, 2, 3))
        r = a.trace().mean()
        self.assertAlmostEqual(r.item(), 1.0, places=6)
        grads = r.backward()
        np.testing.assert_allclose(grads.to_numpy(a), np.full((4, 2, 3), 1.0 / 24.0), rtol=1e-6)

    def test_rank0_mean_is_identity(self) -> None:
        a = self.dev.tensor(7.0)
        r = a.trace().mean()
        self.assertEqual(r.item(), 7.0)
        self.assertEqual(float(r.backward().to_numpy(a)), 1.0)

    def test_upstream_gradient_is_scaled(self) -> None:
        a = self.dev.tensor([2.0, 4.0])
        grads = (a.trace().mean() * 4.0).backward()
        np.testing.assert_allclose(grads.to_numpy(a), [2.0, 2.0], rtol=1e-6)

    def test_mean_of_broadcast_view(self) -> None:
        a = self.dev.tensor([1.0, 3.0])
        b = a.trace().broadcast_to(Rank2(3, 2), Axis(0))
        r = b.mean()
        self.assertAlmostEqual(r.item(), 2.0, places=6)
        np.testing.assert_allclose(r.backward().to_numpy(a), [0.5, 0.5], rtol=1e-6)

    def test_empty_tensor_is_rejected(self) -> None:
        a = self.dev.zeros(Rank2(0, 3))
        with self.assertRaises(ValueError):
            a.mean()
        with self.assertRaises(ValueError):
            a.trace().try_mean()

    def test_untraced_mean_records_nothing(self) -> None:
        a = self.dev.tensor([1.0, 2.0])
        r = a.mean()
        self.assertFalse(r.has_tape)
        self.assertEqual(len(r.tape), 0)


class TestSumTo(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)
        self.a = self.dev.tensor([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

    def test_sum_over_rows(self) -> None:
        r = self.a.sum_to(Rank1(3))
        np.testing.assert_array_equal(r.to_numpy(), [5.0, 7.0, 9.0])

    def test_sum_over_columns_explicit_axes(self) -> None:
        r = self.a.sum_to(Rank1(2), Axis(1))
        np.testing.assert_array_equal(r.to_numpy(), [6.0, 15.0])

    def test_sum_gradient_is_ones(self) -> None:
        grads = self.a.trace().sum_to(Rank1(3)).sum().backward()
        np.testing.assert_array_equal(grads.to_numpy(self.a), np.ones((2, 3)))

    def test_sum_errors(self) -> None:
        with self.assertRaises(StaticShapeError):
            self.a.sum_to(Rank1(4), Axis(0))
        with self.assertRaises(ShapeMismatchError):
            self.a.try_sum_to(Shape.of(Dyn(4)), Axis(0))
        with self.assertRaises(AxisError):
            self.a.sum_to(Rank1(3), Axis(2))
        with self.assertRaises(ValueError):
            self.dev.ones(Rank2(2, 2)).sum_to(Rank1(2))


class TestMinMax(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)
        self.a = self.dev.tensor([[1.0, 1.0, 2.0], [3.0, 0.0, 5.0]])

    def test_min_along_axis(self) -> None:
        r = self.a.min_to(Rank1(2), Axis(1))
        np.testing.assert_array_equal(r.to_numpy(), [1.0, 0.0])

    def test_ties_each_receive_full_gradient(self) -> None:
        r = self.a.trace().min_to(Rank1(2), Axis(1))
        grads = r.sum().backward()
        np.testing.assert_array_equal(
            grads.to_numpy(self.a), [[1.0, 1.0, 0.0], [0.0, 1.0, 0.0]]
        )

    def test_global_min(self) -> None:
        r = self.a.trace().min_to(Rank0())
        self.assertEqual(r.item(), 0.0)
        grads = r.backward()
        np.testing.assert_array_equal(
            grads.to_numpy(self.a), [[0.0, 0.0, 0.0], [0.0, 1.0, 0.0]]
        )

    def test_upstream_gradient_is_propagated(self) -> None:
        r = self.a.trace().min_to(Rank1(3), Axis(0))
        np.testing.assert_array_equal(r.to_numpy(), [1.0, 0.0, 2.0])
        grads = (r * 3.0).sum().backward()
        np.testing.assert_array_equal(
            grads.to_numpy(self.a), [[3.0, 0.0, 3.0], [0.0, 3.0, 0.0]]
        )

    def test_min_of_broadcast_scalar(self) -> None:
        s = self.dev.tensor(3.0)
        b = s.trace().broadcast_to(Rank2(2, 3))
        r = b.min_to(Rank1(2))
        np.testing.assert_array_equal(r.to_numpy(), [3.0, 3.0])
        grads = r.sum().backward()
        self.assertEqual(float(grads.to_numpy(s)), 6.0)

    def test_min_on_transposed_strides(self) -> None:
        base = self.dev.tensor([[4.0, 2.0], [1.0, 3.0]])
        t = type(base)(base.shape, base.data, self.dev, strides=(1, 2))
        r = t.min_to(Rank1(2), Axis(1))
        np.testing.assert_array_equal(r.to_numpy(), [1.0, 2.0])

    def test_max_mirrors_min(self) -> None:
        r = self.a.trace().max_to(Rank1(2), Axis(1))
        np.testing.assert_array_equal(r.to_numpy(), [2.0, 5.0])
        grads = r.sum().backward()
        np.testing.assert_array_equal(
            grads.to_numpy(self.a), [[0.0, 0.0, 1.0], [0.0, 0.0, 1.0]]
        )

    def test_reduction_is_deterministic(self) -> None:
        x = self.dev.sample_normal(Rank3(3, 4, 5))
        first = x.min_to(Rank2(3, 5), Axis(1)).to_numpy()
        second = x.min_to(Rank2(3, 5), Axis(1)).to_numpy()
        self.assertEqual(first.tobytes(), second.tobytes())
        np.testing.assert_array_equal(first, x.to_numpy().min(axis=1))

    def test_multiple_axes(self) -> None:
        x = self.dev.sample_normal(Rank3(2, 3, 4))
        r = x.min_to(Rank1(3), Axes(0, 2))
        np.testing.assert_array_equal(r.to_numpy(), x.to_numpy().min(axis=(0, 2)))

    def test_errors(self) -> None:
        with self.assertRaises(AxisError):
            self.a.min_to(Rank1(2), Axis(3))
        with self.assertRaises(StaticShapeError):
            self.a.try_min_to(Rank1(4), Axis(1))
        with self.assertRaises(ValueError):
            self.dev.ones(Rank2(2, 2)).min_to(Rank1(2))
        with self.assertRaises(AxisError):
            self.a.min_to(Rank1(2), 2)

    def test_plain_int_axis(self) -> None:
        np.testing.assert_array_equal(
            self.a.min_to(Rank1(2), 1).to_numpy(),
            self.a.min_to(Rank1(2), Axis(1)).to_numpy(),
        )
        np.testing.assert_array_equal(self.a.max_to(Rank1(3), 0).to_numpy(), [3.0, 1.0, 5.0])
        np.testing.assert_array_equal(self.a.sum_to(Rank1(2), 1).to_numpy(), [4.0, 8.0])
        v = self.dev.tensor([1.0, 2.0])
        np.testing.assert_array_equal(
            v.broadcast_to(Rank2(3, 2), 0).to_numpy(), [[1, 2], [1, 2], [1, 2]]
        )


if __name__ == "__main__":
    unittest.main()
