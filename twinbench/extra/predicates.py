"""
Pre-registered comparator strategies.

Callers that cannot ship a Python callable (for example a configuration file
or a command line) pick a comparator by name instead of supplying source code
to compile.
"""

from __future__ import annotations

from typing import Any, Callable, Dict

Comparator = Callable[[Any, Any], int]


def _sign(x: Any, y: Any) -> int:
    return (x > y) - (x < y)


def ascending(a: Any, b: Any) -> int:
    return _sign(a, b)


def descending(a: Any, b: Any) -> int:
    return _sign(b, a)


def by_length(a: Any, b: Any) -> int:
    return _sign(len(a), len(b))


def case_insensitive(a: str, b: str) -> int:
    return _sign(a.casefold(), b.casefold())


def by_key(key: Callable[[Any], Any], reverse: bool = False) -> Comparator:
    """
    Comparator ordering elements by ``key(element)``.
    """

    def compare(a: Any, b: Any) -> int:
        result = _sign(key(a), key(b))
        return -result if reverse else result

    return compare


def by_field(name: str, reverse: bool = False) -> Comparator:
    """
    Comparator on a mapping key or attribute, e.g. ``by_field("title")``.
    """

    def lookup(element: Any) -> Any:
        if isinstance(element, dict):
            return element[name]
        return getattr(element, name)

    return by_key(lookup, reverse=reverse)


_REGISTRY: Dict[str, Comparator] = {
    "ascending": ascending,
    "descending": descending,
    "length": by_length,
    "case_insensitive": case_insensitive,
}


def register(name: str, comparator: Comparator) -> None:
    if not callable(comparator):
        raise TypeError(f"comparator must be callable, got {comparator!r}")
    _REGISTRY[name] = comparator


def get_comparator(name: str) -> Comparator:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"No comparator registered as {name!r}; known: {sorted(_REGISTRY)}"
        ) from None


def available() -> list[str]:
    return sorted(_REGISTRY)
