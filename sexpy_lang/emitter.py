import keyword
import logging
import math
from typing import List, Optional

from .exceptions import EmitError
from .models import Sexp, SexpFloat, SexpInt, SexpList, SexpString, SexpSymbol
from .operators import (
    CONSTANTS,
    INFIX_OPERATORS,
    OPERATOR_NAMESPACE,
    OPERATORS,
    is_operator_like,
    py_ident,
)

logger = logging.getLogger(__name__)

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def quote_str(value: str) -> str:
    """Quote a string literal safely for emitted Python source."""
    out = ['"']
    for ch in value:
        if ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 0x20 or ch == "\x7f":
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def float_literal(value: float) -> str:
    if math.isnan(value):
        return "float('nan')"
    if math.isinf(value):
        return "float('inf')" if value > 0 else "-float('inf')"
    return repr(value)


class PythonEmitter:
    """Translates an s-expression tree into a single Python expression.

    Every special form is rendered as an expression so forms nest freely:
    ``let`` and ``do`` become immediately-invoked lambdas, ``if`` becomes a
    conditional expression. Malformed forms raise :class:`EmitError` and
    nothing is returned.
    """

    SPECIAL_FORMS = {
        "if": "emit_if",
        "let": "emit_let",
        "lambda": "emit_lambda",
        "do": "emit_do",
        "car": "emit_car",
        "cdr": "emit_cdr",
        "cons": "emit_cons",
        "quote": "emit_quote",
    }

    def emit(self, node: Optional[Sexp]) -> str:
        try:
            return self._emit(node)
        except RecursionError as e:
            raise EmitError("expression nested too deeply") from e

    def _emit(self, node: Optional[Sexp]) -> str:
        if node is None:
            return "None"
        if isinstance(node, SexpSymbol):
            return self._symbol(node.name)
        if isinstance(node, SexpString):
            return quote_str(node.value)
        if isinstance(node, SexpInt):
            return str(node.value)
        if isinstance(node, SexpFloat):
            return float_literal(node.value)
        if isinstance(node, SexpList):
            return self._emit_list(node)
        raise EmitError(f"cannot emit {type(node).__name__}")

    @staticmethod
    def _symbol(name: str) -> str:
        if name in CONSTANTS:
            return CONSTANTS[name]
        if name in OPERATORS:
            return f"{OPERATOR_NAMESPACE}[{quote_str(name)}]"
        return py_ident(name)

    def _emit_list(self, node: SexpList) -> str:
        if not node.items:
            return "None"
        head = node.head
        if not isinstance(head, SexpSymbol):
            raise EmitError("operator must be a symbol")
        method = self.SPECIAL_FORMS.get(head.name)
        if method is not None:
            return getattr(self, method)(node)
        return self._emit_call(head.name, node)

    def _emit_call(self, op: str, node: SexpList) -> str:
        args = [self._emit(arg) for arg in node.operands]
        if op in INFIX_OPERATORS and len(args) == 2:
            left, right = (self._operand(a) for a in args)
            return f"({left} {INFIX_OPERATORS[op]} {right})"
        if is_operator_like(op) and op not in OPERATORS:
            logger.debug("no Python operator for %r, emitting a call", op)
            callee = f"({op})"
        else:
            callee = self._symbol(op)
        return f"{callee}({', '.join(args)})"

    @staticmethod
    def _operand(text: str) -> str:
        # Keep "-1 ** 2" from binding as "-(1 ** 2)", and "-1[0]" as "-(1[0])".
        return f"({text})" if text.startswith("-") else text

    @staticmethod
    def _expect_arity(node: SexpList, count: int, message: str) -> None:
        if len(node.operands) != count:
            raise EmitError(message)

    @staticmethod
    def _binding_name(name: str, role: str) -> str:
        if name in CONSTANTS or name in OPERATORS or name == OPERATOR_NAMESPACE:
            raise EmitError(f"{role} name {name!r} is reserved")
        ident = py_ident(name)
        if not ident.isidentifier() or keyword.iskeyword(ident):
            raise EmitError(f"{role} name {name!r} is not a valid Python identifier")
        return ident

    # --- Special Forms ---

    def emit_if(self, node: SexpList) -> str:
        self._expect_arity(node, 3, "if requires 3 arguments: condition, then, else")
        cond, then, other = (self._emit(n) for n in node.operands)
        return f"({then} if {cond} else {other})"

    def emit_let(self, node: SexpList) -> str:
        self._expect_arity(node, 2, "let requires 2 arguments: bindings and body")
        bindings, body = node.operands
        if not isinstance(bindings, SexpList):
            raise EmitError("let bindings must be a list")
        pairs = []
        for binding in bindings.items:
            if not isinstance(binding, SexpList) or len(binding.items) != 2:
                raise EmitError("each binding must be (name value)")
            name, value = binding.items
            if not isinstance(name, SexpSymbol):
                raise EmitError("binding name must be a symbol")
            pairs.append((self._binding_name(name.name, "binding"), self._emit(value)))
        result = self._emit(body)
        if not pairs:
            return f"(lambda: {result})()"
        # One scope per binding so later values see earlier names.
        for name, value in reversed(pairs):
            result = f"(lambda {name}: {result})({value})"
        return result

    def emit_lambda(self, node: SexpList) -> str:
        self._expect_arity(node, 2, "lambda requires 2 arguments: params and body")
        params, body = node.operands
        if not isinstance(params, SexpList):
            raise EmitError("lambda params must be a list")
        names: List[str] = []
        for param in params.items:
            if not isinstance(param, SexpList) or len(param.items) != 2:
                raise EmitError("lambda param must be (name type)")
            name, typ = param.items
            if not isinstance(name, SexpSymbol) or not isinstance(typ, SexpSymbol):
                raise EmitError("lambda param name and type must be symbols")
            ident = self._binding_name(name.name, "parameter")
            if ident in names:
                raise EmitError(f"duplicate parameter name {name.name!r}")
            names.append(ident)
        result = self._emit(body)
        if not names:
            return f"(lambda: {result})"
        return f"(lambda {', '.join(names)}: {result})"

    def emit_do(self, node: SexpList) -> str:
        if not node.operands:
            return "None"
        exprs = [self._emit(n) for n in node.operands]
        return f"(lambda: ({', '.join(exprs)},)[-1])()"

    def emit_car(self, node: SexpList) -> str:
        self._expect_arity(node, 1, "car requires 1 argument: a list")
        return f"{self._operand(self._emit(node.operands[0]))}[0]"

    def emit_cdr(self, node: SexpList) -> str:
        self._expect_arity(node, 1, "cdr requires 1 argument: a list")
        return f"{self._operand(self._emit(node.operands[0]))}[1:]"

    def emit_cons(self, node: SexpList) -> str:
        self._expect_arity(node, 2, "cons requires 2 arguments: an element and a list")
        elem, seq = (self._emit(n) for n in node.operands)
        # Each cons adds a single bracket level.
        return f"[{elem}, *{seq}]"

    def emit_quote(self, node: SexpList) -> str:
        self._expect_arity(node, 1, "quote requires 1 argument")
        return self._datum(node.operands[0])

    def _datum(self, node: Sexp) -> str:
        if isinstance(node, SexpList):
            return f"[{', '.join(self._datum(item) for item in node.items)}]"
        if isinstance(node, SexpSymbol):
            return quote_str(node.name)
        return self._emit(node)


_EMITTER = PythonEmitter()


def emit(node: Optional[Sexp]) -> str:
    return _EMITTER.emit(node)
