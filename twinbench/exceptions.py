"""
Error taxonomy shared by the kernels, the sort engine and the marshaling layer.

Comparator failures are not wrapped: whatever the comparator raises reaches
the caller unchanged.
"""


class TwinbenchError(Exception):
    pass


class InvalidParameterError(TwinbenchError, ValueError):
    """Size, count or scale argument rejected before computation starts."""


class ConversionError(TwinbenchError, ValueError):
    """A value cannot be represented in the requested fixed-width type."""


class ArithmeticOverflowError(TwinbenchError, OverflowError):
    """Result would exceed the accumulator width of the kernel."""
