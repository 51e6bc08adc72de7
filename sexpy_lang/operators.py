import builtins
import keyword
import operator
from functools import reduce
from typing import Any, Callable, Dict, Mapping, Optional

# Surface symbol -> Python binary operator, used when a form has exactly two operands.
INFIX_OPERATORS: Dict[str, str] = {
    "+": "+",
    "-": "-",
    "*": "*",
    "/": "/",
    "//": "//",
    "%": "%",
    "**": "**",
    "<": "<",
    ">": ">",
    "<=": "<=",
    ">=": ">=",
    "==": "==",
    "=": "==",
    "!=": "!=",
    "&": "&",
    "|": "|",
    "^": "^",
    "<<": "<<",
    ">>": ">>",
    "and": "and",
    "or": "or",
    "is": "is",
    "in": "in",
}

CONSTANTS: Dict[str, str] = {
    "nil": "None",
    "true": "True",
    "false": "False",
}

_PY_CONSTANTS = frozenset(CONSTANTS.values())

OPERATOR_NAMESPACE = "__ops__"


def is_operator_like(symbol: str) -> bool:
    if not symbol:
        return False
    return any(not (ch.isalnum() or ch == "_") for ch in symbol)


def py_ident(name: str) -> str:
    # Avoid generating invalid Python (e.g., lambda if: ...)
    if keyword.iskeyword(name) and name not in _PY_CONSTANTS:
        return f"{name}_"
    return name


def _fold(func: Callable[[Any, Any], Any], identity: Any = None, unary: Optional[Callable] = None):
    def apply(*args):
        if not args:
            if identity is None:
                raise TypeError("operator requires at least one argument")
            return identity
        if len(args) == 1:
            return unary(args[0]) if unary is not None else args[0]
        return reduce(func, args)

    return apply


def _chain(func: Callable[[Any, Any], bool]):
    def apply(*args):
        return all(func(a, b) for a, b in zip(args, args[1:]))

    return apply


def _and(*args):
    result = True
    for result in args:
        if not result:
            return result
    return result


def _or(*args):
    result = False
    for result in args:
        if result:
            return result
    return result


# Variadic callables for operators used with an arity other than two.
OPERATORS: Dict[str, Callable[..., Any]] = {
    "+": _fold(operator.add, identity=0),
    "-": _fold(operator.sub, unary=operator.neg),
    "*": _fold(operator.mul, identity=1),
    "/": _fold(operator.truediv, unary=lambda x: 1 / x),
    "//": _fold(operator.floordiv),
    "%": _fold(operator.mod),
    "**": _fold(operator.pow),
    "&": _fold(operator.and_),
    "|": _fold(operator.or_),
    "^": _fold(operator.xor),
    "<<": _fold(operator.lshift),
    ">>": _fold(operator.rshift),
    "<": _chain(operator.lt),
    ">": _chain(operator.gt),
    "<=": _chain(operator.le),
    ">=": _chain(operator.ge),
    "==": _chain(operator.eq),
    "=": _chain(operator.eq),
    "!=": _chain(operator.ne),
    "is": _chain(operator.is_),
    "in": _chain(lambda a, b: a in b),
    "and": _and,
    "or": _or,
    "not": operator.not_,
}


def runtime_namespace(env: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Globals for evaluating generated code."""
    namespace: Dict[str, Any] = {
        "__builtins__": builtins,
        OPERATOR_NAMESPACE: OPERATORS,
    }
    if env:
        namespace.update(env)
    return namespace
