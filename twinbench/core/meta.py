"""
Parameter records for the benchmark kernels.

Each kernel receives one frozen record built by a ``make_*`` factory. The
factories reject arguments that would make a kernel compute garbage, so the
kernels themselves can assume well-formed input. Records are hashable, which
lets the jit backend pass them as static arguments.
"""

from __future__ import annotations

import math
import numbers
import sys
from dataclasses import dataclass

from twinbench.exceptions import ArithmeticOverflowError, InvalidParameterError

UINT32_MAX = 2**32 - 1

# F(93) is the largest Fibonacci term below 2**64, so a sequence holds at
# most 94 terms (F(0) .. F(93)).
FIBONACCI_MAX_TERMS = 94


@dataclass(frozen=True)
class MonteCarloParams:
    iterations: int
    seed: int


@dataclass(frozen=True)
class MandelbrotParams:
    width: int
    height: int
    max_iterations: int
    zoom: float
    center_x: float
    center_y: float

    @property
    def size(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class SieveParams:
    limit: int


@dataclass(frozen=True)
class MatrixParams:
    rows_a: int
    cols_a: int
    cols_b: int

    @property
    def size_a(self) -> int:
        return self.rows_a * self.cols_a

    @property
    def size_b(self) -> int:
        return self.cols_a * self.cols_b

    @property
    def size_out(self) -> int:
        return self.rows_a * self.cols_b


@dataclass(frozen=True)
class FibonacciParams:
    n: int


@dataclass(frozen=True)
class HashParams:
    iterations: int


def require_count(
    name: str, value: object, minimum: int = 0, maximum: int | None = None
) -> int:
    """
    Validate a size or iteration count and return it as a plain ``int``.

    Parameters
    ----------
    name : str
        Argument name used in the error message.
    value : object
        Candidate value. Integral floats (``5.0``) are accepted, booleans are
        not.
    minimum : int
        Smallest accepted value.
    maximum : int | None
        Largest accepted value, unbounded when ``None``.

    Raises
    ------
    InvalidParameterError
        If the value is not integral or lies outside ``[minimum, maximum]``.
    """
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be an integer, got bool")
    if isinstance(value, numbers.Integral):
        count = int(value)
    elif isinstance(value, numbers.Real) and float(value).is_integer():
        count = int(value)
    else:
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if count < minimum:
        raise InvalidParameterError(f"{name} must be >= {minimum}, got {count}")
    if maximum is not None and count > maximum:
        raise InvalidParameterError(f"{name} must be <= {maximum}, got {count}")
    return count


def require_finite(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}")
    result = float(value)
    if not math.isfinite(result):
        raise InvalidParameterError(f"{name} must be finite, got {result}")
    return result


def require_buffer(name: str, size: int, itemsize: int) -> int:
    """
    Reject a buffer whose byte size or flat indices would overflow the
    platform's signed index type.
    """
    limit = sys.maxsize // itemsize
    if size > limit:
        raise InvalidParameterError(
            f"{name} needs {size} elements, more than the {limit} a buffer can address"
        )
    return size


def make_monte_carlo(iterations: object, seed: object) -> MonteCarloParams:
    return MonteCarloParams(
        iterations=require_count("iterations", iterations, minimum=1),
        seed=require_count("seed", seed, maximum=UINT32_MAX),
    )


def make_mandelbrot(
    width: object,
    height: object,
    max_iterations: object,
    zoom: object = 1.0,
    center_x: object = 0.0,
    center_y: object = 0.0,
) -> MandelbrotParams:
    zoom_value = require_finite("zoom", zoom)
    if zoom_value == 0.0:
        raise InvalidParameterError("zoom must be non-zero")
    params = MandelbrotParams(
        width=require_count("width", width, maximum=UINT32_MAX),
        height=require_count("height", height, maximum=UINT32_MAX),
        max_iterations=require_count(
            "max_iterations", max_iterations, maximum=UINT32_MAX
        ),
        zoom=zoom_value,
        center_x=require_finite("center_x", center_x),
        center_y=require_finite("center_y", center_y),
    )
    require_buffer("mandelbrot grid", params.size, 4)
    return params


def make_sieve(limit: object) -> SieveParams:
    return SieveParams(limit=require_count("limit", limit, maximum=UINT32_MAX))


def make_matrix(rows_a: object, cols_a: object, cols_b: object) -> MatrixParams:
    params = MatrixParams(
        rows_a=require_count("rows_a", rows_a),
        cols_a=require_count("cols_a", cols_a),
        cols_b=require_count("cols_b", cols_b),
    )
    require_buffer("a", params.size_a, 8)
    require_buffer("b", params.size_b, 8)
    require_buffer("product", params.size_out, 8)
    return params


def make_fibonacci(n: object) -> FibonacciParams:
    count = require_count("n", n)
    if count > FIBONACCI_MAX_TERMS:
        raise ArithmeticOverflowError(
            f"fibonacci_sequence({count}) exceeds uint64; "
            f"at most {FIBONACCI_MAX_TERMS} terms fit"
        )
    return FibonacciParams(n=count)


def make_hash(iterations: object) -> HashParams:
    return HashParams(iterations=require_count("iterations", iterations))
