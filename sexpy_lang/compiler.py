import ast
import builtins
import logging
import os
from typing import Any, Mapping, Optional

from .emitter import PythonEmitter
from .operators import OPERATOR_NAMESPACE, runtime_namespace
from .parser import SexpParser, get_parser

logger = logging.getLogger(__name__)

SIDECAR_TEMPLATE = """\
# Generated by sexpy from {origin}
from sexpy_lang.operators import OPERATORS as {namespace}

result = {expr}

if __name__ == "__main__" and result is not None:
    print(result)
"""


def sidecar_path(path: str, extension: str = ".py") -> str:
    """Same base name as ``path`` with the Python source extension."""
    return os.path.splitext(path)[0] + extension


class SexpCompiler:
    def __init__(
        self,
        parser: Optional[SexpParser] = None,
        emitter: Optional[PythonEmitter] = None,
    ):
        self.parser = parser if parser is not None else get_parser()
        self.emitter = emitter if emitter is not None else PythonEmitter()

    def compile(self, source: str) -> str:
        """Translate the first form of ``source`` into Python expression text."""
        tree = self.parser.parse(source)
        code = self.emitter.emit(tree)
        logger.debug("compiled %d chars of source into %d chars of Python", len(source), len(code))
        return code

    def compile_ast(self, source: str) -> ast.Expression:
        return ast.parse(self.compile(source), mode="eval")

    def evaluate(self, source: str, env: Optional[Mapping[str, Any]] = None) -> Any:
        code = builtins.compile(self.compile(source), "<sexpy>", "eval")
        return eval(code, runtime_namespace(env))

    def render_module(self, source: str, origin: str = "<string>") -> str:
        return SIDECAR_TEMPLATE.format(
            origin=os.path.basename(origin),
            namespace=OPERATOR_NAMESPACE,
            expr=self.compile(source),
        )


_COMPILER: Optional[SexpCompiler] = None


def _default_compiler() -> SexpCompiler:
    global _COMPILER
    if _COMPILER is None:
        _COMPILER = SexpCompiler()
    return _COMPILER


def compile_source(source: str) -> str:
    return _default_compiler().compile(source)


def lisp(source: str, env: Optional[Mapping[str, Any]] = None) -> Any:
    """Compile ``source`` and evaluate it, returning the resulting value."""
    return _default_compiler().evaluate(source, env)
