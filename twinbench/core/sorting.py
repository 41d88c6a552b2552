"""
Generic sort engine.

`merge_sort_handles` orders integer handles into caller-owned storage using a
comparator bridge. It is a plain top-down merge sort: stable, O(N log N), and
with no run detection, so the number of comparator calls depends only on the
input order and not on shortcuts.

The numeric and textual fast paths take a direction flag instead of a
comparator and sort with the native ordering of the value type.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Iterable, List, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from twinbench.core import boundary
from twinbench.core.comparator import Comparator, ComparatorBridge

logger = logging.getLogger(__name__)

SORT_STRATEGIES = ("merge", "builtin")


def merge_sort_handles(
    storage: Sequence[Any], handles: Sequence[int], compare: ComparatorBridge
) -> List[int]:
    """
    Return ``handles`` reordered so that the referenced elements are ordered
    by ``compare``.

    Parameters
    ----------
    storage : Sequence[Any]
        Elements addressed by the handles; never modified.
    handles : Sequence[int]
        Indices into ``storage``.
    compare : ComparatorBridge
        Normalised comparator, called once per comparison.
    """
    items = [int(h) for h in handles]
    if len(items) < 2:
        return items
    scratch = list(items)
    _merge_sort(storage, items, scratch, 0, len(items), compare)
    return items


def _merge_sort(
    storage: Sequence[Any],
    items: List[int],
    scratch: List[int],
    lo: int,
    hi: int,
    compare: ComparatorBridge,
) -> None:
    if hi - lo < 2:
        return
    mid = (lo + hi) // 2
    _merge_sort(storage, items, scratch, lo, mid, compare)
    _merge_sort(storage, items, scratch, mid, hi, compare)
    scratch[lo:hi] = items[lo:hi]
    i, j, k = lo, mid, lo
    while i < mid and j < hi:
        # Take from the left run on ties to stay stable
        if compare(storage[scratch[i]], storage[scratch[j]]) <= 0:
            items[k] = scratch[i]
            i += 1
        else:
            items[k] = scratch[j]
            j += 1
        k += 1
    while i < mid:
        items[k] = scratch[i]
        i += 1
        k += 1
    while j < hi:
        items[k] = scratch[j]
        j += 1
        k += 1


def builtin_sort_handles(
    storage: Sequence[Any], handles: Sequence[int], compare: ComparatorBridge
) -> List[int]:
    key = functools.cmp_to_key(lambda a, b: compare(storage[a], storage[b]))
    return sorted((int(h) for h in handles), key=key)


def sort(
    elements: Iterable[Any], comparator: Comparator, *, strategy: str = "merge"
) -> List[Any]:
    """
    Sort arbitrary elements with a caller-supplied comparator.

    Parameters
    ----------
    elements : Iterable[Any]
        Elements of any type; passed to the comparator untouched.
    comparator : Callable[[Any, Any], real]
        Negative, zero or positive result for less, equal, greater.
    strategy : str
        ``"merge"`` for the engine's merge sort, ``"builtin"`` for the
        interpreter's sort driven by the same comparator.

    Returns
    -------
    List[Any]
        A new list holding the same elements in comparator order. Elements
        that compare equal keep their input order.
    """
    if strategy not in SORT_STRATEGIES:
        raise ValueError(
            f"Unknown sort strategy {strategy!r}; expected one of {SORT_STRATEGIES}"
        )
    bridge = ComparatorBridge(comparator)
    storage, handles = boundary.box_elements(elements)
    if strategy == "merge":
        order = merge_sort_handles(storage, handles, bridge)
    else:
        order = builtin_sort_handles(storage, handles, bridge)
    logger.debug(
        "Sorted %s elements with %s comparator calls",
        len(storage),
        bridge.calls,
        extra={"length": len(storage), "comparisons": bridge.calls},
    )
    return boundary.unbox_elements(storage, order)


@jax.jit
def _jnp_sort(values: jnp.ndarray) -> jnp.ndarray:
    return jnp.sort(values, stable=True)


def sort_numbers(
    values: Iterable[Any], ascending: bool = True, *, use_jit: bool = False
) -> List[float]:
    """
    Sort numbers without a comparator.

    Values are marshaled to ``float64`` and come back as floats, so integer
    input such as ``[3, 1, 2]`` returns ``[1.0, 2.0, 3.0]``. NaN sorts after
    every number when ascending and before every number when descending.
    """
    buffer = boundary.to_float64_buffer(values)
    if use_jit:
        ordered = np.asarray(_jnp_sort(jnp.asarray(buffer)))
    else:
        ordered = np.sort(buffer, kind="stable")
    if not ascending:
        ordered = ordered[::-1]
    return boundary.from_buffer(ordered)


def sort_strings(values: Iterable[Any], ascending: bool = True) -> List[str]:
    """
    Sort strings by code point without a comparator.
    """
    items = boundary.require_strings(values)
    return sorted(items, reverse=not ascending)
