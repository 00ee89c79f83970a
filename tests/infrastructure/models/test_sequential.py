import unittest

import numpy as np

from tapegrad import Cpu, Linear, Rank2, ReLU, Sequential, Sgd, Tanh, mse_loss


class TestSequential(unittest.TestCase):
    def setUp(self) -> None:
        self.dev = Cpu(seed=0)
        self.model = Sequential(
            Linear(2, 8, device=self.dev),
            Tanh(),
            Linear(8, 1, device=self.dev),
        )

    def test_children_are_indexed(self) -> None:
        self.assertEqual(len(self.model), 3)
        self.assertIsInstance(self.model[1], Tanh)
        self.assertEqual(
            [name for name, _ in self.model.named_parameters()],
            ["0.weight", "0.bias", "2.weight", "2.bias"],
        )

    def test_add_appends(self) -> None:
        self.model.add(ReLU())
        self.assertEqual(len(self.model), 4)
        self.assertIsInstance(list(self.model)[-1], ReLU)

    def test_forward_chains_layers(self) -> None:
        x = self.dev.sample_normal((4, 2))
        manual = x
        for layer in self.model.layers:
            manual = layer(manual)
        np.testing.assert_array_equal(self.model(x).to_numpy(), manual.to_numpy())
        self.assertEqual(self.model(x).shape, Rank2(4, 1))

    def test_xor_training(self) -> None:
        x = self.dev.tensor([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
        y = self.dev.tensor([[0.0], [1.0], [1.0], [0.0]])
        sgd = Sgd(lr=0.1)
        losses = []
        for _ in range(300):
            loss = mse_loss(self.model(x.trace()), y)
            losses.append(loss.item())
            unused = sgd.update(self.model, loss.backward())
            self.assertEqual(unused, [])
        self.assertLess(losses[-1], losses[0])


if __name__ == "__main__":
    unittest.main()
