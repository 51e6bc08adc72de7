import re
from typing import Optional

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, VisitError

from .exceptions import ParseError, UnbalancedParenthesesError, UnterminatedStringError
from .grammar import SEXP_GRAMMAR
from .models import Sexp, SexpFloat, SexpInt, SexpList, SexpString, SexpSymbol

_INTEGER = re.compile(r"[+-]?\d+(_\d+)*")

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


def unescape(body: str) -> str:
    # Unknown escapes keep the escaped character and drop the backslash.
    out = []
    chars = iter(body)
    for ch in chars:
        if ch == "\\":
            ch = next(chars)
            out.append(_ESCAPES.get(ch, ch))
        else:
            out.append(ch)
    return "".join(out)


def classify(token: str) -> Sexp:
    """Turn a bare token into an integer, a float, or a symbol, in that order."""
    try:
        return SexpInt(int(token))
    except ValueError as e:
        # int() refuses digit strings past the host conversion limit.
        if _INTEGER.fullmatch(token):
            raise ParseError(f"integer literal too large: {token[:20]}...") from e
    try:
        return SexpFloat(float(token))
    except ValueError:
        return SexpSymbol(token)


class SexpBuilder(Transformer):
    def start(self, items):
        return items[0]

    def list(self, items):
        # items: [LPAR, form*, RPAR]
        return SexpList(tuple(items[1:-1]))

    def quoted(self, items):
        return SexpList((SexpSymbol("quote"), items[1]))

    @v_args(inline=True)
    def string(self, token):
        return SexpString(unescape(str(token)[1:-1]))

    @v_args(inline=True)
    def token(self, token):
        return classify(str(token))


class SexpParser:
    """Reads the first s-expression of a source text.

    Anything after the first complete form is ignored and never lexed, so
    ``(+ 1 2) )))`` parses the same as ``(+ 1 2)``. Empty input, or input
    whose first token is a stray ``)``, reads as ``None``.
    """

    def __init__(self):
        self._lark = Lark(SEXP_GRAMMAR, parser="lalr", lexer="basic")
        self._builder = SexpBuilder()

    def parse(self, text: str) -> Optional[Sexp]:
        end = self._first_form_end(text)
        if end is None:
            return None
        try:
            tree = self._lark.parse(text[:end])
        except UnexpectedInput as e:
            raise ParseError(
                f"malformed expression at line {e.line}, column {e.column}"
            ) from e
        try:
            return self._builder.transform(tree)
        except RecursionError as e:
            raise ParseError("expression nested too deeply") from e
        except VisitError as e:
            if isinstance(e.orig_exc, RecursionError):
                raise ParseError("expression nested too deeply") from e
            if isinstance(e.orig_exc, ParseError):
                raise e.orig_exc from None
            raise

    def _first_form_end(self, text: str) -> Optional[int]:
        depth = 0
        quoted = False
        try:
            for token in self._lark.lex(text):
                if token.type == "QUOTE":
                    quoted = True
                    continue
                if token.type == "LPAR":
                    depth += 1
                elif token.type == "RPAR":
                    if depth == 0:
                        if quoted:
                            raise ParseError("quote must be followed by a form")
                        return None
                    depth -= 1
                quoted = False
                if depth == 0:
                    return token.end_pos
        except UnexpectedCharacters as e:
            if text[e.pos_in_stream] == '"':
                raise UnterminatedStringError(e.line, e.column) from e
            raise ParseError(
                f"unexpected character {e.char!r} at line {e.line}, column {e.column}"
            ) from e
        if depth:
            raise UnbalancedParenthesesError("unbalanced parentheses")
        if quoted:
            raise ParseError("quote must be followed by a form")
        return None


_PARSER: Optional[SexpParser] = None


def get_parser() -> SexpParser:
    global _PARSER
    if _PARSER is None:
        _PARSER = SexpParser()
    return _PARSER


def parse(text: str) -> Optional[Sexp]:
    return get_parser().parse(text)
