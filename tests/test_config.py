import threading
import unittest

from tapegrad import (
    BackendNotAvailableError,
    Tensor,
    default_backend,
    default_dtype,
    get_default_backend,
    get_default_dtype,
    set_default_backend,
    set_default_dtype,
)


class TestDefaultDtype(unittest.TestCase):
    def test_initial_default(self) -> None:
        self.assertEqual(get_default_dtype(), "float32")

    def test_context_manager_restores(self) -> None:
        with default_dtype("float64") as dt:
            self.assertEqual(dt, "float64")
            self.assertEqual(get_default_dtype(), "float64")
            self.assertEqual(Tensor.zeros((1,)).dtype, "float64")
        self.assertEqual(get_default_dtype(), "float32")

    def test_context_manager_restores_on_exception(self) -> None:
        with self.assertRaises(RuntimeError):
            with default_dtype("float16"):
                raise RuntimeError("boom")
        self.assertEqual(get_default_dtype(), "float32")

    def test_nested_overrides(self) -> None:
        with default_dtype("float64"):
            with default_dtype("float16"):
                self.assertEqual(get_default_dtype(), "float16")
            self.assertEqual(get_default_dtype(), "float64")

    def test_accepts_numpy_spellings(self) -> None:
        with default_dtype("f8"):
            self.assertEqual(get_default_dtype(), "float64")

    def test_rejects_non_float_dtypes(self) -> None:
        for bad in ("int32", "bool", "not-a-dtype"):
            with self.subTest(dtype=bad):
                with self.assertRaises(ValueError):
                    set_default_dtype(bad)
                with self.assertRaises(ValueError):
                    with default_dtype(bad):
                        pass
        self.assertEqual(get_default_dtype(), "float32")

    def test_override_is_local_to_thread(self) -> None:
        seen = []

        def worker() -> None:
            seen.append(get_default_dtype())

        with default_dtype("float64"):
            t = threading.Thread(target=worker)
            t.start()
            t.join()
        self.assertEqual(seen, ["float32"])

    def test_set_in_thread_does_not_leak(self) -> None:
        def worker() -> None:
            set_default_dtype("float16")

        t = threading.Thread(target=worker)
        t.start()
        t.join()
        self.assertEqual(get_default_dtype(), "float32")


class TestDefaultBackend(unittest.TestCase):
    def test_initial_default(self) -> None:
        self.assertEqual(get_default_backend(), "numpy")

    def test_alias_is_canonicalized(self) -> None:
        with default_backend("np") as name:
            self.assertEqual(name, "numpy")
            self.assertEqual(get_default_backend(), "numpy")

    def test_unknown_backend_rejected(self) -> None:
        with self.assertRaises(BackendNotAvailableError):
            set_default_backend("nope")
        with self.assertRaises(BackendNotAvailableError):
            with default_backend("nope"):
                pass
        self.assertEqual(get_default_backend(), "numpy")


if __name__ == "__main__":
    unittest.main()
