"""
PRNG helpers for the Monte Carlo kernels.

The jit backend threads JAX keys explicitly; the native backend runs a
splitmix64 stream whose whole state is a single ``uint64`` passed in and out,
so no process-wide generator is touched.
"""

from __future__ import annotations

from typing import Optional, Tuple

import jax
import jax.numpy as jnp
import numpy as np
from numba import njit

_GOLDEN_GAMMA = np.uint64(0x9E3779B97F4A7C15)
_MIX_1 = np.uint64(0xBF58476D1CE4E5B9)
_MIX_2 = np.uint64(0x94D049BB133111EB)
_SHIFT_30 = np.uint64(30)
_SHIFT_27 = np.uint64(27)
_SHIFT_31 = np.uint64(31)
_SHIFT_11 = np.uint64(11)
_INV_2_53 = 1.0 / 9007199254740992.0


def borrow_key(
    key: Optional[jnp.ndarray],
) -> Tuple[jnp.ndarray, Optional[jnp.ndarray]]:
    """
    Return a split key pair. Requires an explicit key.

    Parameters
    ----------
    key : jnp.ndarray
        PRNG key to split.

    Returns
    -------
    Tuple[jnp.ndarray, Optional[jnp.ndarray]]
        (use_key, next_key) where use_key is suitable for a single draw and
        next_key is the remainder of the split.

    Raises
    ------
    ValueError
        If `key` is None.
    """
    if key is None:
        raise ValueError("PRNG key is required; got None")
    use_key, next_key = jax.random.split(key)
    return use_key, next_key


def key_from_seed(seed: int) -> jnp.ndarray:
    return jax.random.PRNGKey(seed)


@njit(cache=False)
def splitmix64_next(state: np.uint64) -> Tuple[np.uint64, np.uint64]:
    """
    Advance a splitmix64 stream.

    Returns ``(new_state, output)``; both are ``uint64``.
    """
    state = state + _GOLDEN_GAMMA
    z = state
    z = (z ^ (z >> _SHIFT_30)) * _MIX_1
    z = (z ^ (z >> _SHIFT_27)) * _MIX_2
    return state, z ^ (z >> _SHIFT_31)


@njit(cache=False)
def uniform_signed(state: np.uint64) -> Tuple[np.uint64, float]:
    """Draw a float in [-1, 1) from the top 53 bits of the next output."""
    state, bits = splitmix64_next(state)
    unit = float(bits >> _SHIFT_11) * _INV_2_53
    return state, unit * 2.0 - 1.0
