"""
Benchmark kernels, the generic sort engine and the marshaling layer.

Kernels come in two flavours with identical contracts: `kernels` (numba,
compiled to native code) and `jitted` (JAX, traced and compiled by XLA).
`ops` is the public entry point that validates, marshals and dispatches.
"""

from twinbench.core import (
    boundary,
    comparator,
    jitted,
    kernels,
    meta,
    ops,
    rng,
    sorting,
)

__all__ = [
    "boundary",
    "comparator",
    "jitted",
    "kernels",
    "meta",
    "ops",
    "rng",
    "sorting",
]
