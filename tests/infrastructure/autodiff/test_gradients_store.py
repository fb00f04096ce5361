import unittest
import numpy as np

from tapegrad import NoGradientError, Tensor
from tapegrad.infrastructure.autodiff import Gradients, GraphNode
from tapegrad.infrastructure.backends import NumpyTensor


class TestGradientsStore(unittest.TestCase):
    def setUp(self) -> None:
        self.grads = Gradients()
        self.one = NumpyTensor.from_data([1.0, 1.0])
        self.two = NumpyTensor.from_data([2.0, 2.0])

    def test_first_contribution_is_stored_as_is(self) -> None:
        self.grads.accumulate(5, self.one)
        self.assertIs(self.grads[5], self.one)
        self.assertEqual(len(self.grads), 1)

    def test_contributions_are_summed_into_new_value(self) -> None:
        self.grads.accumulate(5, self.one)
        self.grads.accumulate(5, self.two)
        np.testing.assert_array_equal(self.grads[5].to_numpy(), [3.0, 3.0])
        np.testing.assert_array_equal(self.one.to_numpy(), [1.0, 1.0])

    def test_missing_entry(self) -> None:
        self.assertIsNone(self.grads.get(42))
        self.assertNotIn(42, self.grads)
        with self.assertRaises(NoGradientError) as cm:
            _ = self.grads[42]
        self.assertEqual(cm.exception.node_id, 42)
        with self.assertRaises(KeyError):
            _ = self.grads[42]

    def test_keys_by_tensor_node_or_id(self) -> None:
        t = Tensor.from_data([1.0, 1.0], requires_grad=True)
        self.grads.accumulate(t.node_id, self.one)
        self.assertIs(self.grads[t], self.one)
        self.assertIs(self.grads[t.node], self.one)
        self.assertIs(self.grads[t.node_id], self.one)
        self.assertIn(t, self.grads)

    def test_invalid_key_type(self) -> None:
        with self.assertRaises(TypeError):
            self.grads.get("x")
        self.assertNotIn("x", self.grads)

    def test_pop_removes_entry(self) -> None:
        node = GraphNode(self.one, requires_grad=True)
        self.grads.accumulate(node.id, self.two)
        self.assertIs(self.grads.pop(node), self.two)
        self.assertNotIn(node, self.grads)
        with self.assertRaises(NoGradientError):
            self.grads.pop(node)

    def test_iteration_and_ids(self) -> None:
        self.grads.accumulate(1, self.one)
        self.grads.accumulate(2, self.two)
        self.assertEqual(sorted(self.grads), [1, 2])
        self.assertEqual(sorted(self.grads.node_ids()), [1, 2])
        self.assertIn("entries=2", repr(self.grads))


if __name__ == "__main__":
    unittest.main()
