import math
import unittest

import numpy as np

from tapegrad import Device, DeviceType, Dtype, float32, float64
from tapegrad.domain import (
    DeviceAllocationError,
    DeviceNotSupportedError,
    ShapeMismatchError,
)


class TestDtype(unittest.TestCase):
    def test_resolution(self) -> None:
        self.assertIs(Dtype.of("float32"), float32)
        self.assertIs(Dtype.of(np.dtype("float64")), float64)
        self.assertIs(Dtype.of(float64), float64)

    def test_unsupported_dtype_lists_available(self) -> None:
        with self.assertRaises(ValueError) as cm:
            Dtype.of("int32")
        self.assertIn("Available", str(cm.exception))

    def test_reduction_constants(self) -> None:
        self.assertEqual(float32.zero, 0.0)
        self.assertEqual(float32.one, 1.0)
        self.assertTrue(math.isinf(float32.infinity) and float32.infinity > 0)
        self.assertTrue(float64.neg_infinity < 0)
        self.assertEqual(float32.itemsize, 4)


class TestDevice(unittest.TestCase):
    def test_cpu_and_cuda(self) -> None:
        self.assertTrue(Device("cpu").is_cpu())
        d = Device("cuda:1")
        self.assertTrue(d.is_cuda())
        self.assertEqual(d.index, 1)
        self.assertIs(d.type, DeviceType.CUDA)
        self.assertEqual(str(d), "cuda:1")
        self.assertEqual(Device("cpu"), Device("cpu"))
        self.assertNotEqual(Device("cuda:0"), Device("cuda:1"))

    def test_invalid_string(self) -> None:
        with self.assertRaises(ValueError):
            Device("gpu")


class TestErrors(unittest.TestCase):
    def test_messages_carry_details(self) -> None:
        e = DeviceAllocationError(12, "cpu", "exceeds limit of 10 elements")
        self.assertEqual(e.requested, 12)
        self.assertIn("12", str(e))
        self.assertIn("min_to", str(DeviceNotSupportedError("min_to", "cuda")))
        self.assertEqual(
            str(ShapeMismatchError(10, 7, 1)),
            "Shape mismatch on axis 1: left: 10, right: 7",
        )


if __name__ == "__main__":
    unittest.main()
