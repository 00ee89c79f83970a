import unittest
import warnings

import numpy as np

from tapegrad import (
    Cpu,
    Gradients,
    NoTape,
    NoTapeError,
    OwnedTape,
    TapeConsumedError,
    TapeKind,
    merge_tapes,
)


def _recorder(log, name):
    def op(grads) -> None:
        log.append(name)

    return op


class TestTapeHandoff(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)
        self.a = self.dev.tensor([1.0, 2.0, 3.0])

    def test_trace_keeps_identity_and_buffer(self) -> None:
        x = self.a.trace()
        self.assertTrue(x.has_tape)
        self.assertFalse(self.a.has_tape)
        self.assertEqual(x.id, self.a.id)
        self.assertIs(x.data, self.a.data)
        self.assertIs(x.tape.kind, TapeKind.TRACING)

    def test_split_and_put_tape(self) -> None:
        x = self.a.trace()
        t, tape = x.split_tape()
        self.assertFalse(t.has_tape)
        self.assertIs(tape, x.tape)
        self.assertIs(t.put_tape(tape).tape, tape)

    def test_duplicate_shares_value_without_tape(self) -> None:
        x = self.a.trace()
        d = x.duplicate()
        self.assertEqual(d.id, x.id)
        self.assertIs(d.data, x.data)
        self.assertIsInstance(d.tape, NoTape)

    def test_with_empty_tape(self) -> None:
        x = self.a.trace().exp()
        fresh = x.with_empty_tape()
        self.assertTrue(fresh.has_tape)
        self.assertEqual(len(fresh.tape), 0)
        self.assertIsNot(fresh.tape, x.tape)
        self.assertIsInstance(self.a.with_empty_tape().tape, NoTape)

    def test_new_tensors_get_new_ids(self) -> None:
        b = self.dev.tensor([1.0, 2.0, 3.0])
        self.assertNotEqual(self.a.id, b.id)
        self.assertNotEqual(self.a.exp().id, self.a.id)


class TestRecording(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)
        self.a = self.dev.tensor([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

    def test_one_closure_per_operation(self) -> None:
        x = self.a.trace()
        y = x.exp()
        self.assertEqual(len(y.tape), 1)
        z = y.sum()
        self.assertIs(z.tape, y.tape)
        self.assertEqual(len(z.tape), 2)

    def test_no_tape_idempotence(self) -> None:
        y1 = self.a.exp().square().mean()
        y2 = self.a.exp().square().mean()
        self.assertIsInstance(y1.tape, NoTape)
        self.assertEqual(len(y1.tape), 0)
        self.assertEqual(y1.to_numpy().tobytes(), y2.to_numpy().tobytes())

    def test_backward_requires_tape(self) -> None:
        with self.assertRaises(NoTapeError):
            self.a.sum().backward()

    def test_tape_drains_once(self) -> None:
        loss = self.a.trace().sum()
        loss.backward()
        with self.assertRaises(TapeConsumedError):
            loss.backward()
        with self.assertRaises(TapeConsumedError):
            loss.exp()

    def test_scalar_root_is_seeded_with_one(self) -> None:
        loss = self.a.trace().sum()
        grads = loss.backward()
        self.assertEqual(float(grads.to_numpy(loss)), 1.0)
        np.testing.assert_array_equal(grads.to_numpy(self.a), np.ones((2, 3)))

    def test_non_scalar_root_warns(self) -> None:
        y = self.a.trace().exp()
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            grads = y.backward()
        self.assertTrue(any(issubclass(w.category, RuntimeWarning) for w in caught))
        np.testing.assert_allclose(
            grads.to_numpy(self.a), np.exp(self.a.to_numpy()), rtol=1e-6
        )

    def test_chain_rule_runs_newest_first(self) -> None:
        grads = self.a.trace().exp().square().sum().backward()
        x = self.a.to_numpy().astype(np.float64)
        np.testing.assert_allclose(
            grads.to_numpy(self.a), 2 * np.exp(2 * x), rtol=1e-5
        )

    def test_existing_store_accumulates(self) -> None:
        store = Gradients()
        (self.a.trace(store) * 2.0).sum().backward()
        grads = (self.a.trace(store) * 2.0).sum().backward()
        self.assertIs(grads, store)
        np.testing.assert_array_equal(grads.to_numpy(self.a), np.full((2, 3), 4.0))


class TestMergeTapes(unittest.TestCase):
    def test_no_tape_pairs(self) -> None:
        left, right = NoTape(), NoTape()
        self.assertIsInstance(merge_tapes(left, right), NoTape)

    def test_tracing_side_wins_in_either_order(self) -> None:
        t = OwnedTape()
        self.assertIs(merge_tapes(t, NoTape()), t)
        self.assertIs(merge_tapes(NoTape(), t), t)
        self.assertIs(merge_tapes(t, t), t)

    def test_two_tapes_concatenate_and_replay_newest_first(self) -> None:
        log = []
        left, right = OwnedTape(), OwnedTape()
        left.add_backward_op(_recorder(log, "l1"))
        right.add_backward_op(_recorder(log, "r1"))
        left.add_backward_op(_recorder(log, "l2"))

        merged = merge_tapes(left, right)
        self.assertEqual(len(merged), 3)
        self.assertEqual(len(merge_tapes(merged, left)), 3)

        for op in merged.drain():
            op(None)
        self.assertEqual(log, ["l2", "r1", "l1"])
        self.assertTrue(merged.consumed)

    def test_merge_keeps_existing_store(self) -> None:
        store = Gradients()
        merged = merge_tapes(OwnedTape(), OwnedTape(store))
        self.assertIs(merged.gradients, store)

    def test_merging_a_drained_tape_fails(self) -> None:
        t = OwnedTape()
        t.drain()
        with self.assertRaises(TapeConsumedError):
            merge_tapes(t, OwnedTape())


if __name__ == "__main__":
    unittest.main()
