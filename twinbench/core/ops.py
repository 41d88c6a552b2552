"""
Public kernel and sort entry points.

Each function validates its parameters, marshals the inputs, runs the kernel
on the selected backend and returns plain Python values. ``backend`` is
``"native"`` (numba), ``"jit"`` (JAX) or ``None`` to follow
``Config().use_jit``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

import numpy as np

from twinbench.core import boundary, jitted, kernels, meta, rng, sorting
from twinbench.core.comparator import Comparator
from twinbench.exceptions import InvalidParameterError
from twinbench.twinbench import Config

logger = logging.getLogger(__name__)

BACKENDS = ("native", "jit")


def resolve_backend(backend: str | None) -> str:
    if backend is None:
        return Config().backend
    if backend not in BACKENDS:
        raise InvalidParameterError(
            f"Unknown backend {backend!r}; expected one of {BACKENDS}"
        )
    return backend


def _log_call(kernel: str, backend: str, params: Any) -> None:
    logger.debug(
        "Running %s on %s backend with %s",
        kernel,
        backend,
        params,
        extra={"kernel": kernel, "backend": backend, "params": params},
    )


def sort(
    elements: Iterable[Any], comparator: Comparator, *, strategy: str = "merge"
) -> List[Any]:
    return sorting.sort(elements, comparator, strategy=strategy)


def sort_numbers(
    values: Iterable[Any], ascending: bool = True, *, backend: str | None = None
) -> List[float]:
    selected = resolve_backend(backend)
    return sorting.sort_numbers(values, ascending, use_jit=selected == "jit")


def sort_strings(values: Iterable[Any], ascending: bool = True) -> List[str]:
    return sorting.sort_strings(values, ascending)


def monte_carlo_pi(
    iterations: int, *, seed: int | None = None, backend: str | None = None
) -> float:
    """
    Monte Carlo estimate of pi.

    Parameters
    ----------
    iterations : int
        Number of trials, at least 1.
    seed : int | None
        32-bit seed. A fresh one is drawn from the session key when omitted;
        a fixed seed makes the estimate reproducible per backend.
    backend : str | None
        Execution backend.
    """
    selected = resolve_backend(backend)
    params = meta.make_monte_carlo(
        iterations, Config().next_seed if seed is None else seed
    )
    _log_call("monte_carlo_pi", selected, params)
    if selected == "jit":
        estimate = jitted.monte_carlo_pi(rng.key_from_seed(params.seed), params.iterations)
        return float(boundary.scalar_from_buffer(estimate))
    return float(kernels.monte_carlo_pi(params.iterations, np.uint64(params.seed)))


def mandelbrot_set(
    width: int,
    height: int,
    max_iterations: int,
    zoom: float = 1.0,
    center_x: float = 0.0,
    center_y: float = 0.0,
    *,
    backend: str | None = None,
) -> List[int]:
    """
    Escape-iteration counts, row-major, ``width * height`` values each in
    ``[0, max_iterations]``.
    """
    selected = resolve_backend(backend)
    params = meta.make_mandelbrot(width, height, max_iterations, zoom, center_x, center_y)
    _log_call("mandelbrot_set", selected, params)
    if selected == "jit":
        counts = jitted.mandelbrot_set(
            params.width,
            params.height,
            params.max_iterations,
            params.zoom,
            params.center_x,
            params.center_y,
        )
    else:
        counts = kernels.mandelbrot_set(
            params.width,
            params.height,
            params.max_iterations,
            params.zoom,
            params.center_x,
            params.center_y,
        )
    return boundary.from_buffer(counts)


def prime_sieve(limit: int, *, backend: str | None = None) -> List[int]:
    """
    Ascending primes ``<= limit``; empty when ``limit < 2``.
    """
    selected = resolve_backend(backend)
    params = meta.make_sieve(limit)
    _log_call("prime_sieve", selected, params)
    if params.limit < 2:
        return []
    if selected == "jit":
        mask = np.asarray(jitted.prime_mask(params.limit))
        primes = np.flatnonzero(mask).astype(np.uint32)
    else:
        primes = kernels.prime_sieve(params.limit)
    return boundary.from_buffer(primes)


def matrix_multiply(
    a: Iterable[Any],
    b: Iterable[Any],
    rows_a: int,
    cols_a: int,
    cols_b: int,
    *,
    backend: str | None = None,
) -> List[float]:
    """
    Product of row-major ``a`` (rows_a x cols_a) and ``b`` (cols_a x cols_b),
    flattened row-major.

    Raises
    ------
    InvalidParameterError
        If a buffer length does not match its shape.
    """
    selected = resolve_backend(backend)
    params = meta.make_matrix(rows_a, cols_a, cols_b)
    lhs = boundary.to_float64_buffer(a)
    rhs = boundary.to_float64_buffer(b)
    if lhs.shape[0] != params.size_a:
        raise InvalidParameterError(
            f"a has {lhs.shape[0]} values, expected {params.rows_a}x{params.cols_a}"
        )
    if rhs.shape[0] != params.size_b:
        raise InvalidParameterError(
            f"b has {rhs.shape[0]} values, expected {params.cols_a}x{params.cols_b}"
        )
    _log_call("matrix_multiply", selected, params)
    if selected == "jit":
        out = jitted.matrix_multiply(
            lhs, rhs, params.rows_a, params.cols_a, params.cols_b
        )
    else:
        out = kernels.matrix_multiply(
            lhs, rhs, params.rows_a, params.cols_a, params.cols_b
        )
    return boundary.from_buffer(out)


def fibonacci_sequence(n: int, *, backend: str | None = None) -> List[int]:
    """
    First ``n`` Fibonacci terms, starting ``0, 1, 1, 2``.

    Terms are ``uint64``; ``n`` above 94 raises
    :class:`~twinbench.exceptions.ArithmeticOverflowError`.
    """
    selected = resolve_backend(backend)
    params = meta.make_fibonacci(n)
    _log_call("fibonacci_sequence", selected, params)
    if selected == "jit":
        terms = jitted.fibonacci_sequence(params.n)
    else:
        terms = kernels.fibonacci_sequence(params.n)
    return boundary.from_buffer(terms)


def hash_computation(data: str, iterations: int, *, backend: str | None = None) -> int:
    """
    32-bit mixing hash of the UTF-8 bytes of ``data``, folded
    ``iterations`` times. A workload, not a security primitive.
    """
    selected = resolve_backend(backend)
    params = meta.make_hash(iterations)
    payload = boundary.text_to_bytes(data)
    _log_call("hash_computation", selected, params)
    if selected == "jit":
        digest = jitted.hash_computation(payload, params.iterations)
    else:
        digest = kernels.hash_computation(payload, params.iterations)
    return int(boundary.scalar_from_buffer(digest))
