"""
JAX entry points for the benchmark kernels.

Shapes are static per compiled instance: every argument that determines an
output shape is a static argument, so a new size triggers a recompilation and
repeated calls with the same parameters hit the XLA cache. ``jax_enable_x64``
must be on (the package enables it on import) for ``float64`` and ``uint64``
results.
"""

from __future__ import annotations

from functools import partial

import jax
import jax.numpy as jnp
from jax import lax

from twinbench.core.rng import borrow_key

_HASH_MUL = jnp.uint32(31)
_HASH_C1 = jnp.uint32(0x85EBCA6B)
_HASH_C2 = jnp.uint32(0xC2B2AE35)

# Points drawn per batch; memory stays bounded by this, not by ``iterations``.
MONTE_CARLO_BATCH = 1 << 18


def _batch_hits(key: jnp.ndarray, size: int) -> jnp.ndarray:
    key_x, key_y = borrow_key(key)
    x = jax.random.uniform(key_x, (size,), dtype=jnp.float64, minval=-1.0, maxval=1.0)
    y = jax.random.uniform(key_y, (size,), dtype=jnp.float64, minval=-1.0, maxval=1.0)
    return jnp.sum(x * x + y * y <= 1.0, dtype=jnp.int64)


@partial(jax.jit, static_argnames=("iterations",))
def monte_carlo_pi(key: jnp.ndarray, iterations: int) -> jnp.ndarray:
    """
    Estimate pi from ``iterations`` uniform points in [-1, 1)^2.

    Points are drawn in batches of ``MONTE_CARLO_BATCH``; batch ``i`` uses
    ``fold_in(key, i)`` and the trailing partial batch uses the next index.

    Parameters
    ----------
    key : jnp.ndarray
        PRNG key; each batch key is split so the x and y draws are
        independent.
    iterations : int
        Number of trials, at least 1.

    Returns
    -------
    jnp.ndarray
        Scalar ``float64`` estimate.
    """
    full_batches, remainder = divmod(iterations, MONTE_CARLO_BATCH)

    def body(i, hits):
        return hits + _batch_hits(jax.random.fold_in(key, i), MONTE_CARLO_BATCH)

    hits = lax.fori_loop(0, full_batches, body, jnp.int64(0))
    if remainder:
        hits = hits + _batch_hits(jax.random.fold_in(key, full_batches), remainder)
    return 4.0 * hits / iterations


@partial(jax.jit, static_argnames=("width", "height", "max_iterations"))
def mandelbrot_set(
    width: int,
    height: int,
    max_iterations: int,
    zoom: float,
    center_x: float,
    center_y: float,
) -> jnp.ndarray:
    """
    Escape-iteration counts for the whole grid at once.

    Every pixel advances in lockstep; a pixel stops updating (and counting)
    the first time ``|z|^2 > 4``, which reproduces the per-pixel loop.
    """
    xs = jnp.arange(width, dtype=jnp.float64)
    ys = jnp.arange(height, dtype=jnp.float64)
    c_real = (xs - width / 2.0) / (width / 4.0) / zoom + center_x
    c_imag = (ys - height / 2.0) / (height / 4.0) / zoom + center_y
    c_real, c_imag = jnp.meshgrid(c_real, c_imag)

    def body(_, carry):
        z_real, z_imag, counts = carry
        active = z_real * z_real + z_imag * z_imag <= 4.0
        next_real = z_real * z_real - z_imag * z_imag + c_real
        next_imag = 2.0 * z_real * z_imag + c_imag
        z_real = jnp.where(active, next_real, z_real)
        z_imag = jnp.where(active, next_imag, z_imag)
        return z_real, z_imag, counts + active.astype(jnp.uint32)

    init = (
        jnp.zeros_like(c_real),
        jnp.zeros_like(c_imag),
        jnp.zeros(c_real.shape, dtype=jnp.uint32),
    )
    _, _, counts = lax.fori_loop(0, max_iterations, body, init)
    return counts.reshape(-1)


@partial(jax.jit, static_argnames=("limit",))
def prime_mask(limit: int) -> jnp.ndarray:
    """
    Sieve of Eratosthenes over ``[0, limit]`` as a boolean mask.

    Only indices still marked prime strike their multiples, starting at
    ``i * i``. Compaction to the list of primes has a data-dependent length
    and happens outside the jitted region. ``limit`` must be at least 2.
    """
    is_prime = jnp.arange(limit + 1, dtype=jnp.int64) >= 2
    sqrt_limit = int(limit**0.5)
    while sqrt_limit * sqrt_limit > limit:
        sqrt_limit -= 1
    while (sqrt_limit + 1) * (sqrt_limit + 1) <= limit:
        sqrt_limit += 1

    def strike(i, mask):
        def not_done(state):
            return state[0] <= limit

        def clear(state):
            j, mask = state
            return j + i, mask.at[j].set(False)

        _, mask = lax.while_loop(not_done, clear, (i * i, mask))
        return mask

    def body(i, mask):
        return lax.cond(mask[i], partial(strike, i), lambda m: m, mask)

    return lax.fori_loop(jnp.int64(2), jnp.int64(sqrt_limit + 1), body, is_prime)


@partial(jax.jit, static_argnames=("rows_a", "cols_a", "cols_b"))
def matrix_multiply(
    a: jnp.ndarray, b: jnp.ndarray, rows_a: int, cols_a: int, cols_b: int
) -> jnp.ndarray:
    lhs = a.reshape((rows_a, cols_a))
    rhs = b.reshape((cols_a, cols_b))
    out = jnp.matmul(lhs, rhs, precision=lax.Precision.HIGHEST)
    return out.reshape(-1)


@partial(jax.jit, static_argnames=("n",))
def fibonacci_sequence(n: int) -> jnp.ndarray:
    """
    First ``n`` Fibonacci terms as ``uint64`` via a linear scan.

    ``n`` must not exceed 94; the caller rejects larger values before tracing.
    """

    def step(carry, _):
        prev, curr = carry
        return (curr, prev + curr), prev

    init = (jnp.uint64(0), jnp.uint64(1))
    _, terms = lax.scan(step, init, xs=None, length=n)
    return terms


@partial(jax.jit, static_argnames=("iterations",))
def hash_computation(data: jnp.ndarray, iterations: int) -> jnp.ndarray:
    """
    32-bit multiply-xor-shift fold over the ``uint8`` buffer ``data``.

    ``uint32`` multiplication wraps modulo 2**32 in XLA, which is exactly the
    accumulator semantics.
    """
    data = data.astype(jnp.uint32)

    def mix(h, byte):
        h = h * _HASH_MUL + byte
        h = h ^ lax.shift_right_logical(h, jnp.uint32(16))
        h = h * _HASH_C1
        h = h ^ lax.shift_right_logical(h, jnp.uint32(13))
        h = h * _HASH_C2
        h = h ^ lax.shift_right_logical(h, jnp.uint32(16))
        return h, None

    def one_pass(_, h):
        h, _ = lax.scan(mix, h, data)
        return h

    return lax.fori_loop(0, iterations, one_pass, jnp.uint32(0))
