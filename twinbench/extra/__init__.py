"""
Comparator helpers: named strategies and lisp-style comparison expressions.
"""

from twinbench.extra import expression_interpreter, predicates
from twinbench.extra.expression_interpreter import comparator_from_expression
from twinbench.extra.predicates import by_field, by_key, get_comparator

__all__ = [
    "expression_interpreter",
    "predicates",
    "comparator_from_expression",
    "by_field",
    "by_key",
    "get_comparator",
]
