import unittest
import numpy as np

from tapegrad import OpKind, ShapeMismatchError, Tensor, functional as F


COMPLEX_INPUT = [
    0.5388, 0.0676, 0.7122, 0.8316, 0.0653, 0.9154, 0.1536, 0.9089, 0.8016,
    0.7518, 0.2073, 0.0501, 0.8811, 0.5604, 0.5075, 0.4384, 0.9963, 0.9698,
    0.4988, 0.2609, 0.3391, 0.2230, 0.4610, 0.5365, 0.6880,
]


def make_input(values) -> Tensor:
    arr = np.asarray(values, dtype=np.float32).reshape(1, 1, -1)
    return Tensor.from_data(arr, requires_grad=True)


def reference_max_pool1d(x: np.ndarray, k: int, s: int, p: int) -> np.ndarray:
    padded = np.pad(x, ((0, 0), (0, 0), (p, p)), constant_values=-np.inf)
    length_out = (padded.shape[2] - k) // s + 1
    return np.stack(
        [padded[:, :, i * s : i * s + k].max(axis=2) for i in range(length_out)], axis=2
    )


class TestMaxPool1dBackward(unittest.TestCase):
    def _grad_of_sum(self, x: Tensor, **kwargs) -> np.ndarray:
        y = F.max_pool1d(x, **kwargs)
        grads = y.backward(seed=np.ones(y.shape, dtype=np.float32))
        return grads[x].to_numpy()

    def test_simple_overlapping_windows(self) -> None:
        x = make_input([0.9861, 0.5474, 0.4477, 0.0732, 0.3548, 0.8221])
        g = self._grad_of_sum(x, kernel_size=4, stride=1, padding=0)
        np.testing.assert_array_equal(g, [[[1.0, 1.0, 0.0, 0.0, 0.0, 1.0]]])

    def test_complex_without_padding(self) -> None:
        x = make_input(COMPLEX_INPUT)
        g = self._grad_of_sum(x, kernel_size=4, stride=1, padding=0)
        expected = [
            0, 0, 0, 2, 0, 4, 0, 2, 1, 0, 0, 0, 4, 0, 0, 0, 4, 1, 1, 0, 0, 0, 1, 1, 1
        ]
        np.testing.assert_array_equal(g, np.asarray(expected, dtype=np.float32).reshape(1, 1, -1))

    def test_complex_with_padding(self) -> None:
        x = make_input(COMPLEX_INPUT)
        g = self._grad_of_sum(x, kernel_size=4, stride=1, padding=2)
        expected = [
            1, 0, 1, 2, 0, 4, 0, 2, 1, 0, 0, 0, 4, 0, 0, 0, 4, 1, 1, 0, 0, 0, 1, 1, 3
        ]
        np.testing.assert_array_equal(g, np.asarray(expected, dtype=np.float32).reshape(1, 1, -1))


class TestMaxPool1dForward(unittest.TestCase):
    def test_matches_reference(self) -> None:
        rng = np.random.default_rng(0)
        x_np = rng.standard_normal((2, 3, 11)).astype(np.float32)
        x = Tensor.from_data(x_np)
        for k, s, p in [(2, 2, 0), (3, 1, 1), (4, 3, 2), (5, 2, 0)]:
            with self.subTest(kernel_size=k, stride=s, padding=p):
                y = F.max_pool1d(x, kernel_size=k, stride=s, padding=p)
                np.testing.assert_array_equal(
                    y.to_numpy(), reference_max_pool1d(x_np, k, s, p)
                )

    def test_known_outputs(self) -> None:
        cases = [
            (
                [[0.9861, 0.5474, 0.4477, 0.0732, 0.3548, 0.8221],
                 [0.8148, 0.5474, 0.9490, 0.7890, 0.5537, 0.5689]],
                (3, 1, 1),
                [[0.9861, 0.9861, 0.5474, 0.4477, 0.8221, 0.8221],
                 [0.8148, 0.9490, 0.9490, 0.9490, 0.7890, 0.5689]],
            ),
            ([[0.6309, 0.6112, 0.6998, 0.4708]], (3, 2, 1), [[0.6309, 0.6998]]),
            (
                [[-0.6309, -0.6112, -0.6998, -0.4708]],
                (3, 1, 1),
                [[-0.6112, -0.6112, -0.4708, -0.4708]],
            ),
        ]
        for values, (k, s, p), expected in cases:
            with self.subTest(kernel_size=k, stride=s, padding=p):
                x = Tensor.from_data(np.asarray([values], dtype=np.float32))
                y = F.max_pool1d(x, kernel_size=k, stride=s, padding=p)
                np.testing.assert_allclose(y.to_numpy(), [expected], atol=1e-4)

    def test_winner_indices(self) -> None:
        x = Tensor.from_data([[[0.2479, 0.6386, 0.3166, 0.5742]]])
        values, indices = x.value.max_pool1d_with_indices(2, 1, 1)
        np.testing.assert_array_equal(indices.to_numpy(), [[[0, 1, 1, 3, 3]]])
        np.testing.assert_allclose(
            values.to_numpy(), [[[0.2479, 0.6386, 0.6386, 0.5742, 0.5742]]], atol=1e-6
        )

        x = Tensor.from_data([[[0.5388, 0.0676, 0.7122, 0.8316, 0.0653]]])
        _, indices = x.value.max_pool1d_with_indices(4, 1, 2)
        np.testing.assert_array_equal(indices.to_numpy(), [[[0, 2, 3, 3, 3, 3]]])

    def test_stride_defaults_to_kernel_size(self) -> None:
        x = make_input([1.0, 3.0, 2.0, 5.0, 4.0, 0.0])
        y = F.max_pool1d(x, kernel_size=2)
        np.testing.assert_array_equal(y.to_numpy(), [[[3.0, 5.0, 4.0]]])
        self.assertEqual(y.op, OpKind.MAX_POOL1D)
        self.assertEqual(y.descriptor.saved_meta["stride"], 2)

    def test_gradient_routes_through_batch_and_channels(self) -> None:
        x_np = np.array(
            [[[1.0, 2.0, 0.0, 4.0], [5.0, 0.0, 0.0, 1.0]],
             [[0.0, 0.0, 3.0, 0.0], [2.0, 2.5, 1.0, 7.0]]],
            dtype=np.float32,
        )
        x = Tensor.from_data(x_np, requires_grad=True)
        y = F.max_pool1d(x, kernel_size=2, stride=2)
        seed = np.arange(1, 9, dtype=np.float32).reshape(2, 2, 2)
        g = y.backward(seed=seed)[x].to_numpy()
        expected = np.array(
            [[[0, 1, 0, 2], [3, 0, 0, 4]],
             [[5, 0, 6, 0], [0, 7, 0, 8]]],
            dtype=np.float32,
        )
        np.testing.assert_array_equal(g, expected)

    def test_invalid_arguments(self) -> None:
        x = make_input([1.0, 2.0, 3.0])
        with self.assertRaises(ShapeMismatchError):
            F.max_pool1d(Tensor.from_data([1.0, 2.0]), kernel_size=2)
        with self.assertRaises(ShapeMismatchError):
            F.max_pool1d(x, kernel_size=2, padding=2)
        with self.assertRaises(ShapeMismatchError):
            F.max_pool1d(x, kernel_size=4)
        with self.assertRaises(ShapeMismatchError):
            F.max_pool1d(x, kernel_size=2, stride=0)


class TestFunctionalWrappers(unittest.TestCase):
    def test_wrappers_match_methods(self) -> None:
        x_np = np.array([-1.0, 0.5, 2.0])
        x = Tensor.from_data(x_np, dtype="float64")
        np.testing.assert_allclose(F.relu(x).to_numpy(), np.maximum(x_np, 0))
        np.testing.assert_allclose(F.tanh(x).to_numpy(), np.tanh(x_np))
        np.testing.assert_allclose(F.sigmoid(x).to_numpy(), 1 / (1 + np.exp(-x_np)))
        np.testing.assert_allclose(F.clamp(x, 0.0, 1.0).to_numpy(), np.clip(x_np, 0, 1))
        m = Tensor.from_data([[1.0, 2.0]], dtype="float64")
        np.testing.assert_allclose(F.matmul(m, m.T).to_numpy(), [[5.0]])


if __name__ == "__main__":
    unittest.main()
