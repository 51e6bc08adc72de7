class SexpyError(Exception):
    """Base exception for the compiler."""

    pass


class ParseError(SexpyError):
    """Raised when source text is not a well-formed s-expression."""

    pass


class UnbalancedParenthesesError(ParseError):
    pass


class UnterminatedStringError(ParseError):
    def __init__(self, line: int, column: int):
        super().__init__(f"unterminated string literal at line {line}, column {column}")
        self.line = line
        self.column = column


class EmitError(SexpyError):
    """Raised when a form cannot be translated to Python."""

    pass
