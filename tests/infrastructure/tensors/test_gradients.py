import unittest

import numpy as np

from tapegrad import Cpu, DeviceAllocationError, Gradients, Rank1, Rank2, Tensor


class TestGradients(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)
        self.a = self.dev.tensor([[1.0, 2.0], [3.0, 4.0]])
        self.grads = Gradients()

    def test_entries_are_allocated_lazily_as_zeros(self) -> None:
        self.assertNotIn(self.a, self.grads)
        buf = self.grads.get_mut(self.a.ghost())
        self.assertIn(self.a, self.grads)
        self.assertIn(self.a.id, self.grads)
        self.assertEqual(len(buf), 4)
        np.testing.assert_array_equal(buf.array, np.zeros(4))
        self.assertIs(self.grads.get_ref(self.a.ghost()), buf)
        self.assertEqual(len(self.grads), 1)

    def test_shared_identity_shares_one_buffer(self) -> None:
        g = self.a.ghost()
        (first, second), out = self.grads.muts_and_ref([g, g], self.a.exp().ghost())
        self.assertIs(first, second)
        self.assertIsNot(first, out)

    def test_output_may_not_alias_an_input(self) -> None:
        g = self.a.ghost()
        with self.assertRaises(ValueError):
            self.grads.muts_and_ref([g], g)

    def test_get_returns_tensor_shaped_like_owner(self) -> None:
        buf = self.grads.get_mut(self.a.ghost())
        self.dev.add_assign(buf, self.dev.from_array([1.0, 2.0, 3.0, 4.0], self.a.dtype))
        g = self.grads.get(self.a)
        self.assertIsInstance(g, Tensor)
        self.assertEqual(g.shape, Rank2(2, 2))
        self.assertNotEqual(g.id, self.a.id)
        self.assertFalse(g.has_tape)
        np.testing.assert_array_equal(g.to_numpy(), [[1.0, 2.0], [3.0, 4.0]])

    def test_missing_entries(self) -> None:
        with self.assertRaises(KeyError):
            self.grads.get(self.a)
        self.assertIsNone(self.grads.get_or_none(self.a))
        self.assertIsNone(self.grads.to_numpy(self.a))
        self.assertIsNone(self.grads.remove(self.a))

    def test_remove_detaches_entry(self) -> None:
        buf = self.grads.get_mut(self.a.ghost())
        self.assertIs(self.grads.remove(self.a), buf)
        self.assertEqual(len(self.grads), 0)

    def test_ids_follow_allocation_order(self) -> None:
        b = self.dev.zeros(Rank1(3))
        self.grads.get_mut(b.ghost())
        self.grads.get_mut(self.a.ghost())
        self.assertEqual(self.grads.ids(), (b.id, self.a.id))
        self.assertEqual(list(self.grads), [b.id, self.a.id])

    def test_gradient_of_strided_tensor_is_dense(self) -> None:
        b = self.dev.tensor([1.0, 2.0]).broadcast_to(Rank2(3, 2))
        buf = self.grads.get_mut(b.ghost())
        self.assertEqual(len(buf), 6)

    def test_allocation_failure_propagates(self) -> None:
        small = Cpu(seed=0, max_alloc_elements=2)
        t = small.zeros(Rank1(2))
        self.grads.get_mut(t.ghost())
        wide = Tensor(Rank2(2, 2), t.data, small, strides=(0, 1))
        with self.assertRaises(DeviceAllocationError):
            self.grads.get_mut(wide.ghost())
        self.assertNotIn(wide, self.grads)


if __name__ == "__main__":
    unittest.main()
