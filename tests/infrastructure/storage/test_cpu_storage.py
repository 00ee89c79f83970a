import unittest

import numpy as np

from tapegrad import (
    Cpu,
    DeviceAllocationError,
    Dyn,
    Normal,
    Rank2,
    Shape,
    ShapeMismatchError,
    TapegradConfig,
    Tensor,
    Uniform,
    float32,
    float64,
)


class TestCpuFactories(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(TapegradConfig(seed=0))

    def test_zeros_ones(self) -> None:
        z = self.dev.zeros((2, 3))
        o = self.dev.ones(Rank2(2, 3))
        self.assertEqual(z.shape, Rank2(2, 3))
        np.testing.assert_array_equal(z.to_numpy(), np.zeros((2, 3)))
        np.testing.assert_array_equal(o.to_numpy(), np.ones((2, 3)))
        self.assertIs(z.dtype, float32)

    def test_zeros_like(self) -> None:
        t = self.dev.ones((4,), dtype="float64")
        z = self.dev.zeros_like(t)
        self.assertEqual(z.shape, t.shape)
        self.assertIs(z.dtype, float64)

    def test_tensor_infers_static_shape(self) -> None:
        t = self.dev.tensor([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        self.assertEqual(t.shape, Rank2(2, 3))
        self.assertEqual(t.numel(), 6)

    def test_tensor_with_dynamic_shape(self) -> None:
        t = self.dev.tensor(np.zeros((2, 3)), Shape.of(Dyn(2), 3))
        self.assertFalse(t.shape[0].static)

    def test_tensor_shape_must_match(self) -> None:
        with self.assertRaises(ShapeMismatchError):
            self.dev.tensor(np.zeros((2, 3)), (3, 2))
        with self.assertRaises(ShapeMismatchError):
            self.dev.tensor(np.zeros((2, 3)), (6,))

    def test_scalar_tensor(self) -> None:
        t = self.dev.tensor(3.0)
        self.assertEqual(t.shape.num_dims, 0)
        self.assertEqual(t.item(), 3.0)

    def test_captured_buffers_are_frozen(self) -> None:
        t = self.dev.tensor([1.0, 2.0])
        self.assertFalse(t.data.writeable)
        with self.assertRaises(ValueError):
            t.view()[0] = 5.0

    def test_default_dtype_from_config(self) -> None:
        dev = Cpu(TapegradConfig(default_dtype=float64))
        self.assertIs(dev.zeros((2,)).dtype, float64)
        self.assertIs(Cpu(default_dtype="float64").default_dtype, float64)


class TestCpuRandom(unittest.TestCase):
    def test_seeded_sampling_is_reproducible(self) -> None:
        a = Cpu(seed=3).sample_uniform((2, 3), -1.0, 1.0)
        b = Cpu(seed=3).sample_uniform((2, 3), -1.0, 1.0)
        np.testing.assert_array_equal(a.to_numpy(), b.to_numpy())
        self.assertTrue(np.all(a.to_numpy() >= -1.0))
        self.assertTrue(np.all(a.to_numpy() < 1.0))

    def test_manual_seed(self) -> None:
        dev = Cpu(seed=1)
        first = dev.sample_normal((5,)).to_numpy()
        dev.manual_seed(1)
        np.testing.assert_array_equal(dev.sample_normal((5,)).to_numpy(), first)

    def test_sample_with_distribution(self) -> None:
        dev = Cpu(seed=0)
        t = dev.sample((100,), Normal(5.0, 0.1))
        self.assertAlmostEqual(float(t.to_numpy().mean()), 5.0, delta=0.1)
        with self.assertRaises(ValueError):
            Uniform(1.0, 1.0)


class TestCpuPrimitives(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)

    def test_map_and_add_assign(self) -> None:
        buf = self.dev.try_alloc_ones(4, float32)
        doubled = self.dev.map(buf, lambda v: v * 2)
        self.dev.add_assign(buf, doubled)
        np.testing.assert_array_equal(buf.array, np.full(4, 3.0))

    def test_strided_view_and_sum(self) -> None:
        buf = self.dev.from_array([1.0, 2.0, 3.0], float32)
        view = self.dev.view(buf, (2, 3), (0, 1))
        np.testing.assert_array_equal(view, [[1, 2, 3], [1, 2, 3]])
        self.assertEqual(self.dev.sum(buf, (2, 3), (0, 1)), 12.0)

    def test_explicit_strides_must_stay_in_buffer(self) -> None:
        buf = self.dev.from_array([1.0], float32)
        with self.assertRaises(ValueError):
            Tensor(Shape.of(4), buf, self.dev, strides=(1000,))
        with self.assertRaises(ValueError):
            Tensor(Shape.of(4), buf, self.dev, strides=(1,))
        four = self.dev.from_array([1.0, 2.0, 3.0, 4.0], float32)
        with self.assertRaises(ValueError):
            Tensor(Shape.of(2, 2), four, self.dev, strides=(-2, 1))
        with self.assertRaises(ValueError):
            Tensor(Shape.of(2, 2), four, self.dev, strides=(1,))

    def test_valid_explicit_strides_are_accepted(self) -> None:
        buf = self.dev.from_array([2.0], float32)
        t = Tensor(Shape.of(4), buf, self.dev, strides=(0,))
        np.testing.assert_array_equal(t.to_numpy(), [2.0, 2.0, 2.0, 2.0])
        empty = Tensor(Shape.of(0, 3), self.dev.from_array([], float32), self.dev, strides=(3, 1))
        self.assertEqual(empty.num_elements, 0)


class TestAllocationFailure(unittest.TestCase):
    def test_limit_is_enforced(self) -> None:
        dev = Cpu(max_alloc_elements=10)
        dev.try_alloc_zeros(10, float32)
        with self.assertRaises(DeviceAllocationError) as cm:
            dev.try_alloc_zeros(11, float32)
        self.assertEqual(cm.exception.requested, 11)
        with self.assertRaises(DeviceAllocationError):
            dev.zeros((4, 4))
        with self.assertRaises(DeviceAllocationError):
            dev.sample_uniform((4, 4))

    def test_failure_propagates_through_operations(self) -> None:
        dev = Cpu(max_alloc_elements=6)
        a = dev.ones((2, 3))
        with self.assertRaises(DeviceAllocationError):
            a.concat_along(a, 0)

    def test_failure_propagates_through_backward(self) -> None:
        dev = Cpu(max_alloc_elements=6)
        loss = dev.ones((2, 3)).trace().exp().mean()
        dev.config = dev.config.with_overrides(max_alloc_elements=0)
        with self.assertRaises(DeviceAllocationError):
            loss.backward()


class TestConfig(unittest.TestCase):
    def test_from_env(self) -> None:
        cfg = TapegradConfig.from_env(
            {
                "TAPEGRAD_DEFAULT_DTYPE": "float64",
                "TAPEGRAD_MAX_ALLOC_ELEMENTS": "5",
                "TAPEGRAD_SEED": "7",
                "TAPEGRAD_LOG_LEVEL": "DEBUG",
            }
        )
        self.assertIs(cfg.default_dtype, float64)
        self.assertEqual(cfg.max_alloc_elements, 5)
        self.assertEqual(cfg.seed, 7)
        self.assertEqual(cfg.log_level, "DEBUG")

    def test_from_empty_env(self) -> None:
        cfg = TapegradConfig.from_env({})
        self.assertIs(cfg.default_dtype, float32)
        self.assertIsNone(cfg.max_alloc_elements)
        self.assertIsNone(cfg.seed)

    def test_invalid_values(self) -> None:
        with self.assertRaises(ValueError):
            TapegradConfig.from_env({"TAPEGRAD_SEED": "abc"})
        with self.assertRaises(ValueError):
            TapegradConfig(max_alloc_elements=-1)

    def test_keyword_overrides(self) -> None:
        dev = Cpu(TapegradConfig(seed=1, max_alloc_elements=3), max_alloc_elements=8)
        self.assertEqual(dev.config.max_alloc_elements, 8)
        self.assertEqual(dev.config.seed, 1)


if __name__ == "__main__":
    unittest.main()
