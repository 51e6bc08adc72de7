import os
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import SexpyError


class Sexp:
    """Common base of the s-expression node family."""

    __slots__ = ()


@dataclass(frozen=True)
class SexpList(Sexp):
    items: Tuple[Sexp, ...] = ()

    @property
    def head(self) -> Optional[Sexp]:
        return self.items[0] if self.items else None

    @property
    def operands(self) -> Tuple[Sexp, ...]:
        return self.items[1:]


@dataclass(frozen=True)
class SexpSymbol(Sexp):
    name: str


@dataclass(frozen=True)
class SexpString(Sexp):
    value: str


@dataclass(frozen=True)
class SexpInt(Sexp):
    value: int


@dataclass(frozen=True)
class SexpFloat(Sexp):
    value: float


@dataclass
class RunnerConfig:
    python: str = sys.executable
    extension: str = ".py"
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "RunnerConfig":
        timeout = os.environ.get("SEXPY_RUN_TIMEOUT")
        try:
            seconds = float(timeout) if timeout else None
        except ValueError as e:
            raise SexpyError(f"SEXPY_RUN_TIMEOUT must be a number, got {timeout!r}") from e
        return cls(
            python=os.environ.get("SEXPY_PYTHON", sys.executable),
            timeout=seconds,
        )
