"""
Native benchmark kernels compiled with numba in nopython mode.

Design notes
------------
- Kernels operate purely on numpy buffers plus scalar parameters and never
  touch configuration or global state.
- Callers are responsible for validation (see `twinbench.core.meta`) and for
  marshaling Python values into fixed-width buffers
  (see `twinbench.core.boundary`).
- Integer kernels keep their arithmetic in ``uint64`` and mask back to the
  output width; numba would otherwise promote mixed-width operands to
  ``float64``.
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit

from twinbench.core.rng import uniform_signed

_MASK_32 = np.uint64(0xFFFFFFFF)
_HASH_MUL = np.uint64(31)
_HASH_C1 = np.uint64(0x85EBCA6B)
_HASH_C2 = np.uint64(0xC2B2AE35)
_SHIFT_16 = np.uint64(16)
_SHIFT_13 = np.uint64(13)


@njit(cache=False)
def monte_carlo_pi(iterations: int, seed: np.uint64) -> float:
    """
    Estimate pi from ``iterations`` uniform points in the square [-1, 1)^2.

    Parameters
    ----------
    iterations : int
        Number of trials, at least 1.
    seed : np.uint64
        Initial splitmix64 state.

    Returns
    -------
    float
        ``4 * hits / iterations``.
    """
    state = seed
    hits = 0
    for _ in range(iterations):
        state, x = uniform_signed(state)
        state, y = uniform_signed(state)
        if x * x + y * y <= 1.0:
            hits += 1
    return 4.0 * hits / iterations


@njit(cache=False)
def mandelbrot_iterations(c_real: float, c_imag: float, max_iterations: int) -> int:
    z_real = 0.0
    z_imag = 0.0
    iteration = 0
    while z_real * z_real + z_imag * z_imag <= 4.0 and iteration < max_iterations:
        temp = z_real * z_real - z_imag * z_imag + c_real
        z_imag = 2.0 * z_real * z_imag + c_imag
        z_real = temp
        iteration += 1
    return iteration


@njit(cache=False)
def mandelbrot_set(
    width: int,
    height: int,
    max_iterations: int,
    zoom: float,
    center_x: float,
    center_y: float,
) -> np.ndarray:
    """
    Escape-iteration counts for a ``width`` x ``height`` grid, row-major.

    Pixel ``(x, y)`` maps to
    ``c = ((x - W/2) / (W/4) / zoom + cx, (y - H/2) / (H/4) / zoom + cy)``.
    """
    out = np.empty(width * height, dtype=np.uint32)
    half_w = width / 2.0
    half_h = height / 2.0
    quarter_w = width / 4.0
    quarter_h = height / 4.0
    for y in range(height):
        c_imag = (y - half_h) / quarter_h / zoom + center_y
        for x in range(width):
            c_real = (x - half_w) / quarter_w / zoom + center_x
            out[y * width + x] = mandelbrot_iterations(c_real, c_imag, max_iterations)
    return out


@njit(cache=False)
def prime_sieve(limit: int) -> np.ndarray:
    """
    Primes up to and including ``limit`` by the sieve of Eratosthenes.
    """
    if limit < 2:
        return np.empty(0, dtype=np.uint32)
    is_prime = np.ones(limit + 1, dtype=np.bool_)
    is_prime[0] = False
    is_prime[1] = False
    sqrt_limit = int(math.sqrt(limit))
    while sqrt_limit * sqrt_limit > limit:
        sqrt_limit -= 1
    while (sqrt_limit + 1) * (sqrt_limit + 1) <= limit:
        sqrt_limit += 1
    for i in range(2, sqrt_limit + 1):
        if is_prime[i]:
            for j in range(i * i, limit + 1, i):
                is_prime[j] = False
    count = 0
    for i in range(limit + 1):
        if is_prime[i]:
            count += 1
    primes = np.empty(count, dtype=np.uint32)
    k = 0
    for i in range(limit + 1):
        if is_prime[i]:
            primes[k] = i
            k += 1
    return primes


@njit(cache=False)
def matrix_multiply(
    a: np.ndarray, b: np.ndarray, rows_a: int, cols_a: int, cols_b: int
) -> np.ndarray:
    """
    Dense triple-loop product of row-major ``a`` (rows_a x cols_a) and
    ``b`` (cols_a x cols_b).
    """
    out = np.zeros(rows_a * cols_b, dtype=np.float64)
    for i in range(rows_a):
        for j in range(cols_b):
            acc = 0.0
            for k in range(cols_a):
                acc += a[i * cols_a + k] * b[k * cols_b + j]
            out[i * cols_b + j] = acc
    return out


@njit(cache=False)
def fibonacci_sequence(n: int) -> np.ndarray:
    """
    First ``n`` Fibonacci terms as ``uint64``.

    ``n`` must not exceed 94; larger values wrap and are rejected upstream.
    """
    out = np.zeros(n, dtype=np.uint64)
    if n >= 2:
        out[1] = 1
    for i in range(2, n):
        out[i] = out[i - 1] + out[i - 2]
    return out


@njit(cache=False)
def mix_byte(h: np.uint64, byte: np.uint64) -> np.uint64:
    h = (h * _HASH_MUL + byte) & _MASK_32
    h ^= h >> _SHIFT_16
    h = (h * _HASH_C1) & _MASK_32
    h ^= h >> _SHIFT_13
    h = (h * _HASH_C2) & _MASK_32
    h ^= h >> _SHIFT_16
    return h


@njit(cache=False)
def hash_computation(data: np.ndarray, iterations: int) -> np.uint32:
    """
    Fold the ``uint8`` buffer ``data`` into a 32-bit accumulator,
    ``iterations`` times over.
    """
    h = np.uint64(0)
    for _ in range(iterations):
        for i in range(data.shape[0]):
            h = mix_byte(h, np.uint64(data[i]))
    return np.uint32(h)
