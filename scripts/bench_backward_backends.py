"""
scripts/bench_backward_backends.py

Forward + backward microbenchmark (NOT a unit test) across tapegrad backends.

Benchmarks a two-layer perceptron loss:

    loss = mean(sigmoid(tanh(x @ W1 + b1) @ W2))

and times, per backend:
- forward only (graph recording included)
- forward + backward (tape build, rule replay, gradient accumulation)

Timing policy
-------------
- Host-to-device copies of the inputs happen once per case, outside the timed
  region.
- Each timed call reads one scalar back to the host, which synchronizes
  asynchronous engines (CuPy, CUDA PyTorch).
- Backends whose library is missing are skipped.

Usage
-----
python scripts/bench_backward_backends.py --presets
python scripts/bench_backward_backends.py --batch 256 --features 512 --hidden 1024
python scripts/bench_backward_backends.py --backends numpy torch --dtype float64 --repeats 20
"""

from __future__ import annotations

import argparse
import os
import statistics
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

# -------------------------
# Make repo_root/src importable
# -------------------------
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from tapegrad import Tensor, available_backends


def _time_one(fn: Callable[[], None], *, warmup: int, repeats: int) -> list[float]:
    for _ in range(warmup):
        fn()
    ts: list[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        ts.append(t1 - t0)
    return ts


def _fmt_seconds(x: float) -> str:
    if x < 1e-6:
        return f"{x*1e9:.2f} ns"
    if x < 1e-3:
        return f"{x*1e6:.2f} µs"
    if x < 1:
        return f"{x*1e3:.2f} ms"
    return f"{x:.3f} s"


@dataclass(frozen=True)
class Case:
    name: str
    batch: int
    features: int
    hidden: int


PRESETS = (
    Case("tiny", 8, 16, 32),
    Case("small", 64, 128, 256),
    Case("medium", 256, 512, 1024),
)


def _make_params(case: Case, *, dtype: str, seed: int) -> dict[str, np.ndarray]:
    rng = np.random.default_rng(seed)
    return {
        "x": rng.standard_normal((case.batch, case.features)).astype(dtype),
        "w1": (rng.standard_normal((case.features, case.hidden)) * 0.05).astype(dtype),
        "b1": np.zeros((case.hidden,), dtype=dtype),
        "w2": (rng.standard_normal((case.hidden, 1)) * 0.05).astype(dtype),
    }


def _bench_backend(
    backend: str,
    host: dict[str, np.ndarray],
    *,
    dtype: str,
    device: Optional[str],
    warmup: int,
    repeats: int,
) -> tuple[float, float, float]:
    kw = {"backend": backend, "dtype": dtype}
    if device is not None:
        kw["device"] = device
    x = Tensor.from_data(host["x"], **kw)
    w1 = Tensor.from_data(host["w1"], requires_grad=True, **kw)
    b1 = Tensor.from_data(host["b1"], requires_grad=True, **kw)
    w2 = Tensor.from_data(host["w2"], requires_grad=True, **kw)

    def forward() -> Tensor:
        return ((x @ w1 + b1).tanh() @ w2).sigmoid().mean()

    def run_forward() -> None:
        forward().item()

    def run_backward() -> None:
        grads = forward().backward()
        grads[w1].sum().item()

    t_fwd = statistics.median(_time_one(run_forward, warmup=warmup, repeats=repeats))
    t_bwd = statistics.median(_time_one(run_backward, warmup=warmup, repeats=repeats))
    return forward().item(), t_fwd, t_bwd


def main() -> None:
    p = argparse.ArgumentParser(description=__doc__.split("\n\n")[1])
    p.add_argument("--presets", action="store_true", help="Run the preset cases.")
    p.add_argument("--batch", type=int, default=64)
    p.add_argument("--features", type=int, default=128)
    p.add_argument("--hidden", type=int, default=256)
    p.add_argument("--dtype", choices=("float32", "float64"), default="float32")
    p.add_argument("--backends", nargs="*", default=None, help="Default: all available.")
    p.add_argument("--cuda-device", type=int, default=0)
    p.add_argument("--warmup", type=int, default=3)
    p.add_argument("--repeats", type=int, default=10)
    p.add_argument("--seed", type=int, default=0)
    args = p.parse_args()

    available = available_backends()
    backends = args.backends or available
    skipped = [b for b in backends if b not in available]
    backends = [b for b in backends if b in available]
    if skipped:
        print(f"Skipping unavailable backends: {', '.join(skipped)}")

    cases = (
        PRESETS
        if args.presets
        else (Case("custom", args.batch, args.features, args.hidden),)
    )

    for case in cases:
        host = _make_params(case, dtype=args.dtype, seed=args.seed)
        print(
            f"\n== {case.name}: batch={case.batch} features={case.features} "
            f"hidden={case.hidden} dtype={args.dtype}"
        )
        ref_loss = None
        for backend in backends:
            device = f"cuda:{args.cuda_device}" if backend == "cupy" else None
            loss, t_fwd, t_bwd = _bench_backend(
                backend,
                host,
                dtype=args.dtype,
                device=device,
                warmup=args.warmup,
                repeats=args.repeats,
            )
            if ref_loss is None:
                ref_loss = loss
            print(
                f"  {backend:<6} forward {_fmt_seconds(t_fwd):>10}  "
                f"forward+backward {_fmt_seconds(t_bwd):>10}  "
                f"loss={loss:.6f} (|Δ|={abs(loss - ref_loss):.2e})"
            )


if __name__ == "__main__":
    main()
