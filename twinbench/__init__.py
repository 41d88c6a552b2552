"""Top-level twinbench helpers."""

# float64 and uint64 kernel outputs need 64-bit JAX types. This has to run
# before any module creates arrays.

import jax

jax.config.update("jax_enable_x64", True)

from twinbench import core, exceptions, extra  # noqa: E402
from twinbench.core.ops import (  # noqa: E402
    fibonacci_sequence,
    hash_computation,
    mandelbrot_set,
    matrix_multiply,
    monte_carlo_pi,
    prime_sieve,
    sort,
    sort_numbers,
    sort_strings,
)
from twinbench.twinbench import Config, Session, init  # noqa: E402

__all__ = [
    "core",
    "exceptions",
    "extra",
    "Config",
    "Session",
    "init",
    "sort",
    "sort_numbers",
    "sort_strings",
    "monte_carlo_pi",
    "mandelbrot_set",
    "prime_sieve",
    "matrix_multiply",
    "fibonacci_sequence",
    "hash_computation",
]
