import math

import pytest

from twinbench.core import jitted, ops, rng
from twinbench.exceptions import ArithmeticOverflowError, InvalidParameterError

BACKENDS = ("native", "jit")


def _reference_hash(data: str, iterations: int) -> int:
    h = 0
    payload = data.encode("utf-8")
    for _ in range(iterations):
        for byte in payload:
            h = (h * 31 + byte) & 0xFFFFFFFF
            h ^= h >> 16
            h = (h * 0x85EBCA6B) & 0xFFFFFFFF
            h ^= h >> 13
            h = (h * 0xC2B2AE35) & 0xFFFFFFFF
            h ^= h >> 16
    return h


@pytest.mark.parametrize("backend", BACKENDS)
def test_prime_sieve_small_limits(backend):
    assert ops.prime_sieve(10, backend=backend) == [2, 3, 5, 7]
    assert ops.prime_sieve(1, backend=backend) == []
    assert ops.prime_sieve(0, backend=backend) == []
    assert ops.prime_sieve(2, backend=backend) == [2]


@pytest.mark.parametrize("backend", BACKENDS)
def test_prime_sieve_includes_square_limits(backend):
    # limit is a prime square, the last marking pass must run
    primes = ops.prime_sieve(49, backend=backend)
    assert 49 not in primes
    assert primes[-1] == 47
    assert len(ops.prime_sieve(1000, backend=backend)) == 168


@pytest.mark.parametrize("backend", BACKENDS)
def test_fibonacci_sequence(backend):
    assert ops.fibonacci_sequence(7, backend=backend) == [0, 1, 1, 2, 3, 5, 8]
    assert ops.fibonacci_sequence(0, backend=backend) == []
    assert ops.fibonacci_sequence(1, backend=backend) == [0]
    assert ops.fibonacci_sequence(2, backend=backend) == [0, 1]


@pytest.mark.parametrize("backend", BACKENDS)
def test_fibonacci_uint64_boundary(backend):
    terms = ops.fibonacci_sequence(94, backend=backend)
    assert len(terms) == 94
    assert terms[-1] == 12200160415121876738
    assert terms[-1] < 2**64
    with pytest.raises(ArithmeticOverflowError):
        ops.fibonacci_sequence(95, backend=backend)


@pytest.mark.parametrize("backend", BACKENDS)
def test_matrix_multiply_2x2(backend):
    out = ops.matrix_multiply([1, 2, 3, 4], [5, 6, 7, 8], 2, 2, 2, backend=backend)
    assert out == [19.0, 22.0, 43.0, 50.0]


@pytest.mark.parametrize("backend", BACKENDS)
def test_matrix_multiply_rectangular(backend):
    a = [1, 2, 3, 4, 5, 6]  # 2x3
    b = [7, 8, 9, 10, 11, 12]  # 3x2
    out = ops.matrix_multiply(a, b, 2, 3, 2, backend=backend)
    assert out == [58.0, 64.0, 139.0, 154.0]


@pytest.mark.parametrize("backend", BACKENDS)
def test_matrix_multiply_rejects_shape_mismatch(backend):
    with pytest.raises(InvalidParameterError):
        ops.matrix_multiply([1, 2, 3], [1, 2, 3, 4], 2, 2, 2, backend=backend)


@pytest.mark.parametrize("backend", BACKENDS)
@pytest.mark.parametrize("width,height", [(16, 12), (7, 3), (1, 1), (0, 5)])
def test_mandelbrot_shape_and_range(backend, width, height):
    max_iterations = 50
    counts = ops.mandelbrot_set(width, height, max_iterations, backend=backend)
    assert len(counts) == width * height
    assert all(0 <= c <= max_iterations for c in counts)


@pytest.mark.parametrize("backend", BACKENDS)
def test_mandelbrot_known_points(backend):
    # 4x4 grid, zoom 1: pixel (2, 2) maps to c = 0, which never escapes;
    # pixel (0, 0) maps to c = -2 - 2i, which escapes after one step.
    counts = ops.mandelbrot_set(4, 4, 30, 1.0, 0.0, 0.0, backend=backend)
    assert counts[2 * 4 + 2] == 30
    assert counts[0] == 1


@pytest.mark.parametrize("backend", BACKENDS)
def test_mandelbrot_zero_iterations(backend):
    assert ops.mandelbrot_set(3, 2, 0, backend=backend) == [0] * 6


@pytest.mark.parametrize("backend", BACKENDS)
def test_mandelbrot_rejects_zero_zoom(backend):
    with pytest.raises(InvalidParameterError):
        ops.mandelbrot_set(4, 4, 10, 0.0, backend=backend)


@pytest.mark.parametrize("backend", BACKENDS)
def test_hash_matches_reference_and_is_deterministic(backend):
    text = "Hello, World! This is a test string for hash computation."
    first = ops.hash_computation(text, 25, backend=backend)
    second = ops.hash_computation(text, 25, backend=backend)
    assert first == second == _reference_hash(text, 25)
    assert 0 <= first < 2**32


@pytest.mark.parametrize("backend", BACKENDS)
def test_hash_edge_cases(backend):
    assert ops.hash_computation("", 10, backend=backend) == 0
    assert ops.hash_computation("abc", 0, backend=backend) == 0
    assert ops.hash_computation("é✓", 3, backend=backend) == _reference_hash("é✓", 3)
    assert ops.hash_computation("a", 1, backend=backend) != ops.hash_computation(
        "b", 1, backend=backend
    )


@pytest.mark.parametrize("backend", BACKENDS)
def test_monte_carlo_pi_converges(backend):
    estimate = ops.monte_carlo_pi(1_000_000, seed=2024, backend=backend)
    assert abs(estimate - math.pi) < 0.05


@pytest.mark.parametrize("backend", BACKENDS)
def test_monte_carlo_pi_reproducible_for_seed(backend):
    a = ops.monte_carlo_pi(10_000, seed=7, backend=backend)
    b = ops.monte_carlo_pi(10_000, seed=7, backend=backend)
    assert a == b
    assert 0.0 <= a <= 4.0


@pytest.mark.parametrize(
    "iterations",
    [jitted.MONTE_CARLO_BATCH, 2 * jitted.MONTE_CARLO_BATCH + 17],
)
def test_jit_monte_carlo_pi_converges_across_batches(iterations):
    estimate = float(jitted.monte_carlo_pi(rng.key_from_seed(11), iterations))
    assert abs(estimate - math.pi) < 0.05


def test_jit_monte_carlo_pi_partial_batch_counts_every_point():
    # a single point lands in the circle or not, so the estimate is 0 or 4
    assert float(jitted.monte_carlo_pi(rng.key_from_seed(3), 1)) in (0.0, 4.0)


@pytest.mark.parametrize("limit", [2, 3, 4, 30, 121])
def test_jit_prime_mask_matches_trial_division(limit):
    mask = [bool(v) for v in jitted.prime_mask(limit)]
    expected = [
        n >= 2 and all(n % d for d in range(2, math.isqrt(n) + 1))
        for n in range(limit + 1)
    ]
    assert mask == expected


@pytest.mark.parametrize("backend", BACKENDS)
@pytest.mark.parametrize(
    "call",
    [
        lambda b: ops.monte_carlo_pi(0, seed=1, backend=b),
        lambda b: ops.monte_carlo_pi(-5, seed=1, backend=b),
        lambda b: ops.prime_sieve(-1, backend=b),
        lambda b: ops.prime_sieve(2.5, backend=b),
        lambda b: ops.mandelbrot_set(-1, 4, 10, backend=b),
        lambda b: ops.fibonacci_sequence(-1, backend=b),
        lambda b: ops.hash_computation("x", -1, backend=b),
        lambda b: ops.matrix_multiply([], [], -1, 0, 0, backend=b),
    ],
)
def test_invalid_parameters_fail_fast(backend, call):
    with pytest.raises(InvalidParameterError):
        call(backend)


def test_unknown_backend_is_rejected():
    with pytest.raises(InvalidParameterError):
        ops.prime_sieve(10, backend="wasm")
