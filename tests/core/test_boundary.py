import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, strategies as st

from twinbench.core import boundary
from twinbench.exceptions import ConversionError


@given(st.lists(st.integers(min_value=0, max_value=2**32 - 1)))
def test_uint32_round_trip(values):
    buf = boundary.to_uint32_buffer(values)
    assert buf.dtype == np.uint32
    assert boundary.from_buffer(buf) == values


@given(st.lists(st.integers(min_value=0, max_value=2**64 - 1)))
def test_uint64_round_trip(values):
    buf = boundary.to_uint64_buffer(values)
    assert buf.dtype == np.uint64
    assert boundary.from_buffer(buf) == values


@given(st.lists(st.floats(allow_nan=False)))
def test_float64_round_trip(values):
    buf = boundary.to_float64_buffer(values)
    assert buf.dtype == np.float64
    assert boundary.from_buffer(buf) == values


@pytest.mark.parametrize("value", [-1, 2**32, 1.5, "7", None, True, float("nan")])
def test_uint32_rejects_out_of_range_and_non_integral(value):
    with pytest.raises(ConversionError):
        boundary.to_uint32_buffer([1, value])


def test_uint64_rejects_overflow():
    with pytest.raises(ConversionError):
        boundary.to_uint64_buffer([2**64])


def test_integral_floats_and_numpy_scalars_are_accepted():
    buf = boundary.to_uint32_buffer([3.0, np.int16(4), np.uint64(5)])
    assert buf.tolist() == [3, 4, 5]


def test_float64_rejects_inexact_large_ints():
    assert boundary.to_float64_buffer([2**60]).tolist() == [float(2**60)]
    with pytest.raises(ConversionError):
        boundary.to_float64_buffer([2**53 + 1])
    with pytest.raises(ConversionError):
        boundary.to_float64_buffer([10**400])
    with pytest.raises(ConversionError):
        boundary.to_float64_buffer(["1.0"])


def test_arrays_pass_through_without_copy_when_dtype_matches():
    arr = np.arange(4, dtype=np.uint32)
    assert boundary.to_uint32_buffer(arr) is arr
    floats = np.linspace(0, 1, 5)
    assert boundary.to_float64_buffer(floats) is floats


def test_arrays_of_other_dtypes_are_checked():
    assert boundary.to_uint32_buffer(np.array([1, 2], dtype=np.int64)).tolist() == [
        1,
        2,
    ]
    with pytest.raises(ConversionError):
        boundary.to_uint32_buffer(np.array([-1], dtype=np.int64))
    assert boundary.to_float64_buffer(np.array([1, 2], dtype=np.int32)).tolist() == [
        1.0,
        2.0,
    ]


def test_jax_arrays_are_unmarshaled():
    out = boundary.from_buffer(jnp.arange(3, dtype=jnp.uint32))
    assert out == [0, 1, 2]
    assert all(isinstance(v, int) for v in out)
    assert boundary.scalar_from_buffer(jnp.float64(2.5)) == 2.5


def test_text_to_bytes_is_utf8():
    assert boundary.text_to_bytes("aé").tolist() == [0x61, 0xC3, 0xA9]
    assert boundary.text_to_bytes("").shape == (0,)
    with pytest.raises(ConversionError):
        boundary.text_to_bytes(b"bytes")


def test_box_and_unbox_elements():
    items = [{"a": 1}, "x", None]
    storage, handles = boundary.box_elements(items)
    assert storage == tuple(items)
    assert handles.tolist() == [0, 1, 2]
    out = boundary.unbox_elements(storage, [2, 0, 1])
    assert out[0] is None
    assert out[1] is items[0]
