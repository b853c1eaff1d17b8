import os
from typing import List

from lark import Lark
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters

from ..config import DEFAULT_CONFIG, LanguageConfig
from ..exceptions import BaikoLexicalError, ErrorCode
from .tokens import Token, TokenKind

try:
    # Use importlib.resources for robust package data access
    from importlib.resources import files as pkg_files

    baiko_grammar = (pkg_files("baiko.lexer") / "baiko.lark").read_text()
except (ImportError, FileNotFoundError):
    # Fallback for development environments running from a source checkout
    grammar_path = os.path.join(os.path.dirname(__file__), "baiko.lark")
    with open(grammar_path, "r", encoding="utf-8") as f:
        baiko_grammar = f.read()

# Only the basic lexer is driven (through Lark.lex); the LALR tables are
# never used to parse. The recursive-descent parser consumes the tokens.
LARK_LEXER = Lark(baiko_grammar, start="start", parser="lalr", lexer="basic")

_ESCAPES = {"n": "\n", "t": "\t"}


def _unescape(body: str) -> str:
    """Resolves \\n and \\t; any other escaped character passes through literally."""
    chars = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            escaped = body[i + 1]
            chars.append(_ESCAPES.get(escaped, escaped))
            i += 2
            continue
        chars.append(ch)
        i += 1
    return "".join(chars)


def _translate_lark_error(err: UnexpectedCharacters) -> BaikoLexicalError:
    """Translates Lark's lexing failure into a positioned BaikoLexicalError."""
    # The STRING terminal only fails to match when no closing quote follows.
    if err.char == '"':
        return BaikoLexicalError(ErrorCode.LEX_UNTERMINATED_STRING, line=err.line, column=err.column)
    return BaikoLexicalError(ErrorCode.LEX_UNEXPECTED_CHARACTER, line=err.line, column=err.column, char=err.char)


class Lexer:
    """
    Converts Baiko source text into a flat list of positioned tokens.

    The list always ends with an EOF token placed at the final line and
    column reached in the source.
    """

    def __init__(self, source: str, config: LanguageConfig = DEFAULT_CONFIG):
        self.source = source
        self.config = config

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        try:
            for raw in LARK_LEXER.lex(self.source):
                tokens.append(self._convert(raw))
        except UnexpectedCharacters as e:
            raise _translate_lark_error(e) from e

        tokens.append(self._eof_token())
        return tokens

    def _convert(self, raw: LarkToken) -> Token:
        kind = self.config.terminal_kinds[raw.type]
        value = str(raw)

        if kind is TokenKind.IDENTIFIER:
            kind = self.config.keywords.get(value, TokenKind.IDENTIFIER)
        elif kind is TokenKind.STRING:
            value = _unescape(value[1:-1])

        return Token(type=kind, value=value, line=raw.line, column=raw.column)

    def _eof_token(self) -> Token:
        lines = self.source.split("\n")
        return Token(type=TokenKind.EOF, value="", line=len(lines), column=len(lines[-1]) + 1)


def tokenize(source: str, config: LanguageConfig = DEFAULT_CONFIG) -> List[Token]:
    """High-level entry point for the lexing stage."""
    return Lexer(source, config).tokenize()
