from abc import ABC, abstractmethod
from typing import Optional


class IOHandler(ABC):
    """Abstracts I/O so the REPL can be hosted in different frontends."""

    @abstractmethod
    def emit(self, message: str) -> None: ...

    @abstractmethod
    def read_input(self, prompt: str) -> Optional[str]: ...


class ConsoleIO(IOHandler):
    """Console-backed I/O used by the CLI and REPL."""

    def emit(self, message: str) -> None:
        print(message)

    def read_input(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt)
        except EOFError:
            return None
