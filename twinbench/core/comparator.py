"""
Bridge between caller-supplied comparators and the sort engine.

A comparator is any callable ``(a, b) -> real``; the sign of the result
orders ``a`` relative to ``b``. The bridge normalises the result to
``-1 / 0 / 1`` and counts invocations, since the number of boundary calls is
part of what a comparator benchmark measures.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Callable

import numpy as np

from twinbench.exceptions import ConversionError

Comparator = Callable[[Any, Any], Any]


def ordering(result: Any) -> int:
    """
    Map a comparator result to -1, 0 or 1.

    Raises
    ------
    ConversionError
        If the result is not a real number or is NaN.
    """
    if isinstance(result, (bool, np.bool_)) or not isinstance(result, numbers.Real):
        raise ConversionError(
            f"comparator must return a real number, got {type(result).__name__}"
        )
    value = float(result)
    if math.isnan(value):
        raise ConversionError("comparator returned NaN")
    if value < 0.0:
        return -1
    if value > 0.0:
        return 1
    return 0


class ComparatorBridge:
    """
    Callable wrapper applied once per comparison.

    Exceptions raised by the wrapped comparator propagate untouched.
    """

    __slots__ = ("_comparator", "calls")

    def __init__(self, comparator: Comparator) -> None:
        if not callable(comparator):
            raise TypeError(f"comparator must be callable, got {comparator!r}")
        self._comparator = comparator
        self.calls = 0

    def __call__(self, a: Any, b: Any) -> int:
        self.calls += 1
        return ordering(self._comparator(a, b))
