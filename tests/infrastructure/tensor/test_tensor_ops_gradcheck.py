"""
Finite-difference checks of every differentiable `Tensor` operation.

Each case evaluates ``L = sum(f(x) * w)`` for a fixed random weight `w`, so
the seed reaching `f` is non-uniform, and compares the analytic gradient with
central differences in float64.
"""

import unittest
from typing import Callable, Sequence

import numpy as np

from tapegrad import Tensor


def make_tensor(arr: np.ndarray, *, requires_grad: bool = False) -> Tensor:
    return Tensor.from_data(np.asarray(arr, dtype=np.float64), dtype="float64", requires_grad=requires_grad)


def numeric_grads(
    fn: Callable[..., Tensor], inputs: Sequence[np.ndarray], weight: np.ndarray, eps: float = 1e-6
) -> list[np.ndarray]:
    def loss(arrays) -> float:
        out = fn(*[make_tensor(a) for a in arrays]).to_numpy()
        return float(np.sum(out * weight))

    grads = []
    for i, x in enumerate(inputs):
        g = np.zeros_like(x)
        it = np.nditer(x, flags=["multi_index"])
        for _ in it:
            idx = it.multi_index
            plus = [a.copy() for a in inputs]
            minus = [a.copy() for a in inputs]
            plus[i][idx] += eps
            minus[i][idx] -= eps
            g[idx] = (loss(plus) - loss(minus)) / (2 * eps)
        grads.append(g)
    return grads


class GradCheckMixin:
    rtol = 1e-5
    atol = 1e-7

    def assert_gradcheck(self, fn: Callable[..., Tensor], *inputs: np.ndarray) -> None:
        inputs = [np.asarray(x, dtype=np.float64) for x in inputs]
        tensors = [make_tensor(x, requires_grad=True) for x in inputs]
        out = fn(*tensors)

        rng = np.random.default_rng(1234)
        weight = rng.uniform(0.5, 1.5, size=out.shape)
        loss = (out * make_tensor(weight)).sum()
        grads = loss.backward()

        expected = numeric_grads(fn, inputs, weight)
        for t, x, exp in zip(tensors, inputs, expected):
            got = grads[t].to_numpy()
            self.assertEqual(got.shape, x.shape)
            np.testing.assert_allclose(got, exp, rtol=self.rtol, atol=self.atol)


class TestArithmeticGradients(GradCheckMixin, unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(0)

    def test_add_sub_mul_div_same_shape(self) -> None:
        a = self.rng.standard_normal((2, 3))
        b = self.rng.uniform(0.5, 2.0, (2, 3))
        self.assert_gradcheck(lambda x, y: x + y, a, b)
        self.assert_gradcheck(lambda x, y: x - y, a, b)
        self.assert_gradcheck(lambda x, y: x * y, a, b)
        self.assert_gradcheck(lambda x, y: x / y, a, b)

    def test_broadcast_operands(self) -> None:
        a = self.rng.standard_normal((2, 3, 4))
        b = self.rng.uniform(0.5, 2.0, (3, 1))
        self.assert_gradcheck(lambda x, y: x + y, a, b)
        self.assert_gradcheck(lambda x, y: x * y, a, b)
        self.assert_gradcheck(lambda x, y: y / x.abs().add_scalar(1.0), a, b)

    def test_scalar_operands(self) -> None:
        a = self.rng.uniform(0.5, 2.0, (3,))
        self.assert_gradcheck(lambda x: x + 2.5, a)
        self.assert_gradcheck(lambda x: 2.5 - x, a)
        self.assert_gradcheck(lambda x: x * -3.0, a)
        self.assert_gradcheck(lambda x: 1.0 / x, a)
        self.assert_gradcheck(lambda x: x / 4.0, a)
        self.assert_gradcheck(lambda x: -x, a)

    def test_powf_scalar(self) -> None:
        a = self.rng.uniform(0.5, 2.0, (4,))
        self.assert_gradcheck(lambda x: x**3, a)
        self.assert_gradcheck(lambda x: x.powf_scalar(0.5), a)
        self.assert_gradcheck(lambda x: x.powf_scalar(-1.5), a)

    def test_numpy_array_on_left(self) -> None:
        a = self.rng.standard_normal((3,))
        c = np.array([1.0, -2.0, 0.5])
        self.assert_gradcheck(lambda x: c * x, a)
        self.assert_gradcheck(lambda x: c - x, a)


class TestUnaryGradients(GradCheckMixin, unittest.TestCase):
    def setUp(self) -> None:
        rng = np.random.default_rng(1)
        # keep away from kinks of abs/relu/clamp
        self.x = np.array([-1.7, -0.6, 0.4, 0.9, 1.8, -0.25])
        self.pos = rng.uniform(0.3, 2.0, (6,))

    def test_exp_log_sqrt(self) -> None:
        self.assert_gradcheck(lambda x: x.exp(), self.x)
        self.assert_gradcheck(lambda x: x.log(), self.pos)
        self.assert_gradcheck(lambda x: x.sqrt(), self.pos)

    def test_abs_tanh_sigmoid(self) -> None:
        self.assert_gradcheck(lambda x: x.abs(), self.x)
        self.assert_gradcheck(lambda x: x.tanh(), self.x)
        self.assert_gradcheck(lambda x: x.sigmoid(), self.x)

    def test_relu(self) -> None:
        self.assert_gradcheck(lambda x: x.relu(), self.x)

    def test_clamp(self) -> None:
        self.assert_gradcheck(lambda x: x.clamp(-1.0, 1.0), self.x)
        self.assert_gradcheck(lambda x: x.clamp(min=0.0), self.x)
        self.assert_gradcheck(lambda x: x.clamp(max=0.5), self.x)

    def test_clamp_requires_a_bound(self) -> None:
        with self.assertRaises(ValueError):
            make_tensor(self.x).clamp()


class TestLayoutGradients(GradCheckMixin, unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(2)

    def test_matmul(self) -> None:
        a = self.rng.standard_normal((3, 4))
        b = self.rng.standard_normal((4, 2))
        self.assert_gradcheck(lambda x, y: x @ y, a, b)

    def test_batched_matmul_with_broadcast_rhs(self) -> None:
        a = self.rng.standard_normal((2, 3, 4))
        b = self.rng.standard_normal((4, 5))
        self.assert_gradcheck(lambda x, y: x.matmul(y), a, b)

    def test_swap_dims_and_transpose(self) -> None:
        a = self.rng.standard_normal((2, 3, 4))
        self.assert_gradcheck(lambda x: x.swap_dims(0, 2), a)
        self.assert_gradcheck(lambda x: x.transpose(), a)
        self.assert_gradcheck(lambda x: x.T, a)

    def test_reshape(self) -> None:
        a = self.rng.standard_normal((2, 6))
        self.assert_gradcheck(lambda x: x.reshape((3, 4)), a)
        self.assert_gradcheck(lambda x: x.reshape((-1, 2)), a)

    def test_broadcast_to(self) -> None:
        a = self.rng.standard_normal((3, 1))
        self.assert_gradcheck(lambda x: x.broadcast_to((2, 3, 4)), a)


class TestReductionGradients(GradCheckMixin, unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(3)
        self.a = self.rng.standard_normal((2, 3, 4))

    def test_sum(self) -> None:
        self.assert_gradcheck(lambda x: x.sum(), self.a)
        self.assert_gradcheck(lambda x: x.sum(axis=1), self.a)
        self.assert_gradcheck(lambda x: x.sum(axis=(0, 2), keepdims=True), self.a)
        self.assert_gradcheck(lambda x: x.sum(axis=-1), self.a)

    def test_mean(self) -> None:
        self.assert_gradcheck(lambda x: x.mean(), self.a)
        self.assert_gradcheck(lambda x: x.mean(axis=0), self.a)
        self.assert_gradcheck(lambda x: x.mean(axis=(1, 2), keepdims=True), self.a)

    def test_max_without_ties(self) -> None:
        self.assert_gradcheck(lambda x: x.max(), self.a)
        self.assert_gradcheck(lambda x: x.max(axis=2), self.a)
        self.assert_gradcheck(lambda x: x.max(axis=1, keepdims=True), self.a)

    def test_max_ties_share_gradient(self) -> None:
        x = make_tensor([[1.0, 3.0, 3.0], [2.0, 0.0, 2.0]], requires_grad=True)
        grads = x.max(axis=1).sum().backward()
        np.testing.assert_allclose(
            grads[x].to_numpy(), [[0.0, 0.5, 0.5], [0.5, 0.0, 0.5]]
        )

    def test_min(self) -> None:
        self.assert_gradcheck(lambda x: x.min(), self.a)
        self.assert_gradcheck(lambda x: x.min(axis=0), self.a)
        self.assert_gradcheck(lambda x: x.min(axis=(1, 2), keepdims=True), self.a)

    def test_min_ties_share_gradient(self) -> None:
        x = make_tensor([[0.0, 0.0, 4.0, 0.0]], requires_grad=True)
        grads = x.min().backward()
        np.testing.assert_allclose(grads[x].to_numpy(), [[1 / 3, 1 / 3, 0.0, 1 / 3]])

    def test_max_dim_and_min_dim(self) -> None:
        self.assert_gradcheck(lambda x: x.max_dim(1), self.a)
        self.assert_gradcheck(lambda x: x.min_dim(-1), self.a)
        self.assert_gradcheck(lambda x: x.max_dim_with_indices(0)[0], self.a)

    def test_dim_extremum_routes_to_first_winner(self) -> None:
        x = make_tensor([[2.0, 5.0, 5.0], [1.0, 1.0, 0.0]], requires_grad=True)
        values, indices = x.max_dim_with_indices(1)
        np.testing.assert_array_equal(values.to_numpy(), [[5.0], [1.0]])
        np.testing.assert_array_equal(indices.to_numpy(), [[1], [0]])
        self.assertFalse(indices.requires_grad)

        grads = values.sum().backward()
        np.testing.assert_array_equal(
            grads[x].to_numpy(), [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0]]
        )


class TestZeroDimGradients(GradCheckMixin, unittest.TestCase):
    """
    Reductions and broadcasts whose input already has shape ().
    """

    def setUp(self) -> None:
        self.a = np.random.default_rng(7).standard_normal((2, 3))

    def test_reduction_of_full_reduction(self) -> None:
        self.assert_gradcheck(lambda x: x.sum().mean(), self.a)
        self.assert_gradcheck(lambda x: x.mean().sum(), self.a)
        self.assert_gradcheck(lambda x: x.sum().max(), self.a)
        self.assert_gradcheck(lambda x: x.max().min(), self.a)

    def test_sum_mean_max_min_of_scalar_leaf(self) -> None:
        s = np.array(1.25)
        self.assert_gradcheck(lambda x: x.sum(), s)
        self.assert_gradcheck(lambda x: x.mean(keepdims=True), s)
        self.assert_gradcheck(lambda x: x.max(), s)
        self.assert_gradcheck(lambda x: x.min(), s)

    def test_broadcast_scalar(self) -> None:
        s = np.array(-0.5)
        self.assert_gradcheck(lambda x: x.broadcast_to(()), s)
        self.assert_gradcheck(lambda x: x.broadcast_to((2, 3)), s)
        self.assert_gradcheck(lambda x: x.sum().broadcast_to((4,)), self.a)

    def test_backward_through_chained_reductions(self) -> None:
        x = make_tensor([1.0, 2.0, 3.0], requires_grad=True)
        grads = x.sum().mean().backward()
        self.assertEqual(grads[x].shape, (3,))
        np.testing.assert_array_equal(grads[x].to_numpy(), [1.0, 1.0, 1.0])

        grads = x.sum().max().backward()
        np.testing.assert_array_equal(grads[x].to_numpy(), [1.0, 1.0, 1.0])


class TestIndexingGradients(GradCheckMixin, unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(8)
        self.a = self.rng.standard_normal((3, 4))

    def test_gather(self) -> None:
        idx = np.array([[3, 0], [1, 1], [2, 0]])
        self.assert_gradcheck(lambda x: x.gather(1, idx), self.a)
        idx0 = np.array([[2, 0, 1, 2]])
        self.assert_gradcheck(lambda x: x.gather(0, idx0), self.a)

    def test_scatter(self) -> None:
        idx = np.array([[0, 0, 2], [1, 3, 3], [2, 2, 2]])
        v = self.rng.standard_normal((3, 3))
        self.assert_gradcheck(lambda x, y: x.scatter(1, idx, y), self.a, v)

    def test_select(self) -> None:
        self.assert_gradcheck(lambda x: x.select(0, [2, 0, 2]), self.a)
        self.assert_gradcheck(lambda x: x.select(-1, [1, 3]), self.a)

    def test_select_assign(self) -> None:
        v = self.rng.standard_normal((3, 2))
        self.assert_gradcheck(lambda x, y: x.select_assign(1, [0, 0], y), self.a, v)


class TestSliceAndCatGradients(GradCheckMixin, unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(9)
        self.a = self.rng.standard_normal((3, 4, 2))

    def test_slice(self) -> None:
        self.assert_gradcheck(lambda x: x.slice([(1, 3)]), self.a)
        self.assert_gradcheck(lambda x: x.slice([(0, 2), slice(1, 4)]), self.a)

    def test_slice_assign(self) -> None:
        v = self.rng.standard_normal((1, 2, 2))
        self.assert_gradcheck(
            lambda x, y: x.slice_assign([(2, 3), (1, 3)], y), self.a, v
        )

    def test_cat(self) -> None:
        b = self.rng.standard_normal((3, 1, 2))
        self.assert_gradcheck(lambda x, y: Tensor.cat([x, y, x], dim=1), self.a, b)
        c = self.rng.standard_normal((2, 4, 2))
        self.assert_gradcheck(lambda x, y: Tensor.cat([x, y]), self.a, c)

    def test_squeeze_unsqueeze(self) -> None:
        b = self.rng.standard_normal((3, 1, 2))
        self.assert_gradcheck(lambda x: x.squeeze(1), b)
        self.assert_gradcheck(lambda x: x.unsqueeze(0), b)
        self.assert_gradcheck(lambda x: x.unsqueeze(-1), b)


class TestMaskingGradients(GradCheckMixin, unittest.TestCase):
    def setUp(self) -> None:
        self.rng = np.random.default_rng(4)

    def test_mask_where(self) -> None:
        a = self.rng.standard_normal((2, 3))
        b = self.rng.standard_normal((2, 3))
        mask_np = np.array([[True, False, True], [False, False, True]])

        def fn(x, y):
            mask = Tensor.from_data(mask_np)
            return x.mask_where(mask, y)

        self.assert_gradcheck(fn, a, b)

    def test_mask_where_broadcast_value(self) -> None:
        a = self.rng.standard_normal((2, 3))
        b = self.rng.standard_normal((1, 3))
        mask_np = np.array([[True, False, True], [True, True, False]])

        def fn(x, y):
            return x.mask_where(Tensor.from_data(mask_np), y)

        self.assert_gradcheck(fn, a, b)

    def test_mask_fill(self) -> None:
        a = self.rng.standard_normal((2, 3))

        def fn(x):
            return x.mask_fill(x.greater(0.0), -1.0)

        self.assert_gradcheck(fn, a)


class TestComposite(GradCheckMixin, unittest.TestCase):
    def test_two_layer_network(self) -> None:
        rng = np.random.default_rng(5)
        x = rng.standard_normal((4, 3))
        w1 = rng.standard_normal((3, 5))
        b1 = rng.standard_normal((5,))
        w2 = rng.standard_normal((5, 1))

        def fn(x, w1, b1, w2):
            h = (x @ w1 + b1).tanh()
            return (h @ w2).sigmoid()

        self.assert_gradcheck(fn, x, w1, b1, w2)

    def test_mean_squared_error(self) -> None:
        rng = np.random.default_rng(6)
        pred = rng.standard_normal((5,))
        target = rng.standard_normal((5,))

        def fn(p, t):
            return ((p - t) ** 2).mean()

        self.assert_gradcheck(fn, pred, target)


if __name__ == "__main__":
    unittest.main()
