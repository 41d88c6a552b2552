from typing import Any, Callable, Dict, Optional

Resolver = Callable[[Any, Any], Any]

DEFAULT_CONTEXT: Dict[str, Resolver] = {
    "a": lambda a, b: a,
    "b": lambda a, b: b,
}


def _sign(x: Any, y: Any) -> int:
    return (x > y) - (x < y)


def _lookup(value: Any, name: Any) -> Any:
    if isinstance(value, dict):
        return value[name]
    if isinstance(name, int):
        return value[name]
    return getattr(value, name)


def interpreter(expr: Any, context: Dict[str, Resolver], a: Any, b: Any) -> Any:
    """
    Recursively evaluate a lisp-style comparison expression for the pair
    ``(a, b)``.

    Parameters
    ----------
    expr : Any
        Expression in the form ``("command", arg1, arg2, ...)``.
    context : Dict[str, Callable[[Any, Any], Any]]
        Mapping from names to callables that produce a value from the pair
        being compared. ``"a"`` and ``"b"`` resolve to the elements.
    a, b : Any
        The elements being compared.

    Returns
    -------
    Any
        The value of the expression; at the top level a number whose sign
        orders ``a`` against ``b``.

    Notes
    -----
    Supported commands:

    - ``cmp``: -1, 0 or 1 from the natural ordering of two arguments.
    - ``sub``: subtracts the second argument from the first.
    - ``add``: sums all arguments.
    - ``neg``: negates a single argument.
    - ``s_mult``: multiplies all arguments.
    - ``field``: looks up a key, index or attribute, ``("field", "a", "age")``.
    - ``len``: length of a single argument.
    - ``lower``: lower-cases a single string argument.
    - ``then``: first non-zero argument, for tie-breaking chains.
    - ``quote``: returns its argument unevaluated (literal strings).

    Strings are looked up in ``context``; every other non-tuple value is a
    literal.
    """
    if isinstance(expr, tuple):
        op, *args = expr
        if op == "cmp":
            return _sign(
                interpreter(args[0], context, a, b),
                interpreter(args[1], context, a, b),
            )
        if op == "sub":
            return interpreter(args[0], context, a, b) - interpreter(
                args[1], context, a, b
            )
        elif op == "add":
            result = interpreter(args[0], context, a, b)
            for arg in args[1:]:
                result = result + interpreter(arg, context, a, b)
            return result
        elif op == "neg":
            return -interpreter(args[0], context, a, b)
        elif op == "s_mult":
            result = interpreter(args[0], context, a, b)
            for arg in args[1:]:
                result = result * interpreter(arg, context, a, b)
            return result
        elif op == "field":
            value = interpreter(args[0], context, a, b)
            name = args[1][1] if isinstance(args[1], tuple) else args[1]
            return _lookup(value, name)
        elif op == "len":
            return len(interpreter(args[0], context, a, b))
        elif op == "lower":
            return interpreter(args[0], context, a, b).lower()
        elif op == "then":
            for arg in args:
                result = interpreter(arg, context, a, b)
                if result != 0:
                    return result
            return 0
        elif op == "quote":
            return args[0]
    elif isinstance(expr, str):
        # Grab a value from the context
        return context[expr](a, b)
    else:
        # Grab literal value
        return expr
    raise ValueError("Unknown command in comparison expression", expr)


def comparator_from_expression(
    expr: tuple, context: Optional[Dict[str, Resolver]] = None
) -> Callable[[Any, Any], Any]:
    """
    Build a comparator from an expression, e.g. oldest first, then by name::

        ("then",
            ("cmp", ("field", "b", "age"), ("field", "a", "age")),
            ("cmp", ("field", "a", "name"), ("field", "b", "name")))
    """
    if not isinstance(expr, tuple) or not expr:
        raise ValueError("Comparison expression must be a non-empty tuple", expr)
    merged = dict(DEFAULT_CONTEXT)
    if context:
        merged.update(context)

    def compare(a: Any, b: Any) -> Any:
        return interpreter(expr, merged, a, b)

    return compare
