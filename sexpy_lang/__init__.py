from .grammar import SEXP_GRAMMAR
from .exceptions import (
    SexpyError,
    ParseError,
    UnbalancedParenthesesError,
    UnterminatedStringError,
    EmitError,
)
from .interfaces import IOHandler, ConsoleIO
from .models import (
    Sexp,
    SexpList,
    SexpSymbol,
    SexpString,
    SexpInt,
    SexpFloat,
    RunnerConfig,
)
from .parser import SexpParser, parse
from .operators import OPERATORS, INFIX_OPERATORS, runtime_namespace
from .emitter import PythonEmitter, emit
from .compiler import SexpCompiler, compile_source, lisp, sidecar_path

__all__ = [
    "SEXP_GRAMMAR",
    "SexpyError",
    "ParseError",
    "UnbalancedParenthesesError",
    "UnterminatedStringError",
    "EmitError",
    "IOHandler",
    "ConsoleIO",
    "Sexp",
    "SexpList",
    "SexpSymbol",
    "SexpString",
    "SexpInt",
    "SexpFloat",
    "RunnerConfig",
    "SexpParser",
    "parse",
    "OPERATORS",
    "INFIX_OPERATORS",
    "runtime_namespace",
    "PythonEmitter",
    "emit",
    "SexpCompiler",
    "compile_source",
    "lisp",
    "sidecar_path",
]
