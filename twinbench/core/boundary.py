r"""
Marshaling between Python values and the fixed-width buffers of the kernels.

Conversions are lossless for in-range values. Anything that would be
truncated, wrapped or rounded on the way into a buffer raises
:class:`~twinbench.exceptions.ConversionError` instead.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Iterable, List, Sequence, Tuple

import jax
import numpy as np

from twinbench.exceptions import ConversionError

_FLOAT64_EXACT_INT = 2**53


def _as_integer(value: Any, low: int, high: int, dtype_name: str) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise ConversionError(f"{value!r} is a boolean, not a {dtype_name} value")
    if isinstance(value, numbers.Integral):
        result = int(value)
    elif isinstance(value, numbers.Real):
        as_float = float(value)
        if not math.isfinite(as_float) or not as_float.is_integer():
            raise ConversionError(f"{value!r} is not an integral {dtype_name} value")
        result = int(as_float)
    else:
        raise ConversionError(f"{value!r} is not a number")
    if result < low or result > high:
        raise ConversionError(f"{result} does not fit in {dtype_name}")
    return result


def _as_float(value: Any) -> float:
    if isinstance(value, (bool, np.bool_)):
        raise ConversionError(f"{value!r} is a boolean, not a float64 value")
    if isinstance(value, numbers.Integral):
        as_int = int(value)
        if abs(as_int) <= _FLOAT64_EXACT_INT:
            return float(as_int)
        try:
            as_float = float(as_int)
        except OverflowError as exc:
            raise ConversionError(f"{as_int} overflows float64") from exc
        if as_float != as_int:
            raise ConversionError(f"{as_int} is not exactly representable in float64")
        return as_float
    if isinstance(value, numbers.Real):
        return float(value)
    raise ConversionError(f"{value!r} is not a number")


def _flat(arr: np.ndarray) -> np.ndarray:
    arr = np.ascontiguousarray(arr)
    return arr if arr.ndim == 1 else arr.reshape(-1)


def _integer_buffer(
    values: Iterable[Any], dtype: type, bits: int
) -> np.ndarray:
    name = np.dtype(dtype).name
    if isinstance(values, (np.ndarray, jax.Array)):
        arr = np.asarray(values)
        if arr.dtype == dtype:
            return _flat(arr)
        values = arr.reshape(-1).tolist()
    high = 2**bits - 1
    items = [_as_integer(v, 0, high, name) for v in values]
    return np.array(items, dtype=dtype)


def to_uint32_buffer(values: Iterable[Any]) -> np.ndarray:
    """
    Pack values into a ``uint32`` buffer.

    Raises
    ------
    ConversionError
        If a value is negative, above ``2**32 - 1``, non-integral or not a
        number.
    """
    return _integer_buffer(values, np.uint32, 32)


def to_uint64_buffer(values: Iterable[Any]) -> np.ndarray:
    return _integer_buffer(values, np.uint64, 64)


def to_float64_buffer(values: Iterable[Any]) -> np.ndarray:
    """
    Pack values into a ``float64`` buffer.

    Python ints beyond ``2**53`` are accepted only when the nearest double is
    the same integer.
    """
    if isinstance(values, (np.ndarray, jax.Array)):
        arr = np.asarray(values)
        if arr.dtype == np.float64:
            return _flat(arr)
        if arr.dtype.kind == "f":
            return arr.astype(np.float64).reshape(-1)
        values = arr.reshape(-1).tolist()
    return np.array([_as_float(v) for v in values], dtype=np.float64)


def from_buffer(buffer: Any) -> List[Any]:
    """
    Convert a numpy or JAX array back into a list of Python numbers.
    """
    return np.asarray(buffer).reshape(-1).tolist()


def scalar_from_buffer(value: Any) -> Any:
    return np.asarray(value).item()


def text_to_bytes(data: Any) -> np.ndarray:
    """
    Encode text as a ``uint8`` UTF-8 buffer.
    """
    if not isinstance(data, str):
        raise ConversionError(f"expected text, got {type(data).__name__}")
    return np.frombuffer(data.encode("utf-8"), dtype=np.uint8)


def require_strings(values: Iterable[Any]) -> List[str]:
    items = list(values)
    for item in items:
        if not isinstance(item, str):
            raise ConversionError(f"{item!r} is not a string")
    return items


def box_elements(elements: Iterable[Any]) -> Tuple[Tuple[Any, ...], np.ndarray]:
    """
    Take ownership of an element sequence for the sort engine.

    Returns the storage tuple and an ``int64`` array of handles (indices into
    the storage). The engine reorders handles only; elements are neither
    copied nor inspected.
    """
    storage = tuple(elements)
    return storage, np.arange(len(storage), dtype=np.int64)


def unbox_elements(storage: Sequence[Any], handles: Iterable[int]) -> List[Any]:
    return [storage[h] for h in handles]
