import sys
import unittest
import numpy as np

from tapegrad import Tensor
from tapegrad.infrastructure.autodiff import (
    GraphNode,
    OperationDescriptor,
    OpKind,
    build_tape,
    next_node_id,
    record,
)
from tapegrad.infrastructure.backends import NumpyTensor


def leaf(values, *, requires_grad: bool = True) -> Tensor:
    return Tensor.from_data(values, dtype="float64", requires_grad=requires_grad)


class TestGraphNode(unittest.TestCase):
    def test_ids_are_strictly_increasing(self) -> None:
        a = GraphNode(NumpyTensor.from_data([1.0]))
        b = GraphNode(NumpyTensor.from_data([1.0]))
        self.assertLess(a.id, b.id)
        self.assertGreater(next_node_id(), b.id)

    def test_node_is_immutable(self) -> None:
        node = GraphNode(NumpyTensor.from_data([1.0]))
        with self.assertRaises(AttributeError):
            node.requires_grad = True  # type: ignore[misc]
        with self.assertRaises(AttributeError):
            node._value = None  # type: ignore[misc]

    def test_leaf_has_no_parents(self) -> None:
        node = GraphNode(NumpyTensor.from_data([1.0]), requires_grad=True)
        self.assertTrue(node.is_leaf)
        self.assertEqual(node.parents, ())
        self.assertIsNone(node.descriptor)

    def test_record_without_tracked_parent_skips_descriptor(self) -> None:
        p = GraphNode(NumpyTensor.from_data([1.0]))
        node = record(OpKind.NEG, p.value.neg(), [p], lambda g: (g.neg(),))
        self.assertFalse(node.requires_grad)
        self.assertIsNone(node.descriptor)

    def test_record_with_tracked_parent_keeps_metadata(self) -> None:
        p = GraphNode(NumpyTensor.from_data([1.0]), requires_grad=True)
        node = record(
            OpKind.MUL_SCALAR, p.value.mul_scalar(2.0), [p], lambda g: (g,), scalar=2.0
        )
        self.assertTrue(node.requires_grad)
        self.assertIsInstance(node.descriptor, OperationDescriptor)
        self.assertEqual(node.descriptor.kind, OpKind.MUL_SCALAR)
        self.assertEqual(node.parents, (p,))
        self.assertEqual(node.descriptor.saved_meta["scalar"], 2.0)
        with self.assertRaises(TypeError):
            node.descriptor.saved_meta["scalar"] = 3.0  # type: ignore[index]

    def test_tensor_op_records_kind(self) -> None:
        x = leaf([1.0, 2.0])
        y = leaf([3.0, 4.0])
        self.assertEqual((x + y).op, OpKind.ADD)
        self.assertEqual(x.reshape((1, 2)).matmul(y.reshape((2, 1))).op, OpKind.MATMUL)
        self.assertIsNone(x.op)


class TestTape(unittest.TestCase):
    def test_parents_precede_children_root_last(self) -> None:
        x = leaf([1.0, 2.0])
        y = leaf([3.0, 4.0])
        a = x * y
        b = a + x
        c = b.sum()

        tape = build_tape(c.node)
        ids = tape.node_ids
        pos = {nid: i for i, nid in enumerate(ids)}

        self.assertEqual(tape.root.id, c.node_id)
        self.assertEqual(ids[-1], c.node_id)
        self.assertLess(pos[x.node_id], pos[a.node_id])
        self.assertLess(pos[y.node_id], pos[a.node_id])
        self.assertLess(pos[a.node_id], pos[b.node_id])
        self.assertLess(pos[b.node_id], pos[c.node_id])

    def test_diamond_nodes_appear_once(self) -> None:
        x = leaf([1.0])
        left = x * 2.0
        right = x * 3.0
        top = left + right

        tape = build_tape(top.node)

        self.assertEqual(len(tape), 4)
        self.assertEqual(len(set(tape.node_ids)), 4)
        self.assertEqual(tape.node_ids.count(x.node_id), 1)

    def test_untracked_parents_are_not_followed(self) -> None:
        x = leaf([1.0])
        c = leaf([2.0], requires_grad=False)
        z = x * c

        ids = build_tape(z.node).node_ids

        self.assertIn(x.node_id, ids)
        self.assertNotIn(c.node_id, ids)

    def test_long_chain_does_not_hit_recursion_limit(self) -> None:
        x = leaf([1.0])
        y = x
        depth = sys.getrecursionlimit() + 100
        for _ in range(depth):
            y = y.add_scalar(1.0)

        tape = build_tape(y.node)
        self.assertEqual(len(tape), depth + 1)

        grads = y.backward()
        np.testing.assert_allclose(grads[x].to_numpy(), [1.0])

    def test_tape_iterates_in_order_and_reverse(self) -> None:
        x = leaf([1.0])
        z = x.exp()
        tape = build_tape(z.node)
        self.assertEqual([n.id for n in tape], [x.node_id, z.node_id])
        self.assertEqual([n.id for n in reversed(tape)], [z.node_id, x.node_id])


if __name__ == "__main__":
    unittest.main()
