"""
Static configuration data for the Baiko language.
This includes the keyword table, the lexer terminal map, the type and operator
sets used by the parser, the rendered literal words and the diagnostic format.

The recursion limit is the ceiling the parser and interpreter raise
Python's own limit to while they run.

Everything here is immutable and built once at import time; the lexer, parser,
interpreter and generator receive a LanguageConfig by reference.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Pattern

from .lexer.tokens import TokenKind

K = TokenKind

KEYWORDS = MappingProxyType(
    {
        "asa": K.ASA,
        "andrasana": K.ANDRASANA,
        "miandry": K.MIANDRY,
        "raha": K.RAHA,
        "ankoatra": K.ANKOATRA,
        "avereno": K.AVERENO,
        "dia": K.DIA,
        "farany": K.FARANY,
        "mamoaka": K.MAMOAKA,
        "asehoy": K.ASEHOY,
        "ampidiro": K.AMPIDIRO,
        "avoaka": K.AVOAKA,
        "marina": K.TRUE,
        "diso": K.FALSE,
        "tsisy": K.TSISY,
        "ary": K.AND,
        "na": K.OR,
        "tsy": K.NOT,
        "Isa": K.ISA,
        "Soratra": K.SORATRA,
        "Marina": K.MARINA,
        "Mety": K.METY,
        "Lisitra": K.LISITRA,
    }
)

# Maps the terminal names declared in baiko.lark to token kinds.
# NAME is resolved against KEYWORDS before falling back to IDENTIFIER.
TERMINAL_KINDS = MappingProxyType(
    {
        "NUMBER": K.NUMBER,
        "STRING": K.STRING,
        "NAME": K.IDENTIFIER,
        "EQEQ": K.EQUAL_EQUAL,
        "NOTEQ": K.BANG_EQUAL,
        "LE": K.LESS_EQUAL,
        "GE": K.GREATER_EQUAL,
        "PLUS": K.PLUS,
        "MINUS": K.MINUS,
        "STAR": K.STAR,
        "SLASH": K.SLASH,
        "EQUAL": K.EQUAL,
        "LT": K.LESS,
        "GT": K.GREATER,
        "LPAR": K.LEFT_PAREN,
        "RPAR": K.RIGHT_PAREN,
        "LSQB": K.LEFT_BRACKET,
        "RSQB": K.RIGHT_BRACKET,
        "COLON": K.COLON,
        "COMMA": K.COMMA,
        "SEMICOLON": K.SEMICOLON,
        "DOT": K.DOT,
    }
)

# Human-readable names used in "expected X but found Y" syntax errors.
TOKEN_FRIENDLY_NAMES = MappingProxyType(
    {
        K.NUMBER: "isa",
        K.STRING: "soratra",
        K.IDENTIFIER: "anarana",
        K.PLUS: "'+'",
        K.MINUS: "'-'",
        K.STAR: "'*'",
        K.SLASH: "'/'",
        K.EQUAL_EQUAL: "'=='",
        K.BANG_EQUAL: "'!='",
        K.LESS: "'<'",
        K.LESS_EQUAL: "'<='",
        K.GREATER: "'>'",
        K.GREATER_EQUAL: "'>='",
        K.EQUAL: "'='",
        K.LEFT_PAREN: "'('",
        K.RIGHT_PAREN: "')'",
        K.LEFT_BRACKET: "'['",
        K.RIGHT_BRACKET: "']'",
        K.COLON: "':'",
        K.COMMA: "','",
        K.SEMICOLON: "';'",
        K.DOT: "'.'",
        K.EOF: "fiafaran'ny rakitra",
        **{kind: f"'{word}'" for word, kind in KEYWORDS.items()},
    }
)


@dataclass(frozen=True)
class LanguageConfig:
    keywords: Mapping[str, TokenKind]
    terminal_kinds: Mapping[str, TokenKind]
    friendly_names: Mapping[TokenKind, str]
    base_types: FrozenSet[TokenKind]
    type_start: FrozenSet[TokenKind]
    block_end: FrozenSet[TokenKind]
    comparison_ops: FrozenSet[TokenKind]
    additive_ops: FrozenSet[TokenKind]
    multiplicative_ops: FrozenSet[TokenKind]
    and_word: str
    or_word: str
    not_word: str
    null_word: str
    true_word: str
    false_word: str
    function_word: str
    package_prefix: str
    position_pattern: Pattern
    recursion_limit: int

    def friendly(self, kind: TokenKind) -> str:
        return self.friendly_names.get(kind, kind.value)


DEFAULT_CONFIG = LanguageConfig(
    keywords=KEYWORDS,
    terminal_kinds=TERMINAL_KINDS,
    friendly_names=TOKEN_FRIENDLY_NAMES,
    base_types=frozenset({K.ISA, K.SORATRA, K.MARINA}),
    type_start=frozenset({K.ISA, K.SORATRA, K.MARINA, K.METY, K.LISITRA}),
    block_end=frozenset({K.FARANY, K.ANKOATRA, K.EOF}),
    comparison_ops=frozenset({K.EQUAL_EQUAL, K.BANG_EQUAL, K.LESS, K.LESS_EQUAL, K.GREATER, K.GREATER_EQUAL}),
    additive_ops=frozenset({K.PLUS, K.MINUS}),
    multiplicative_ops=frozenset({K.STAR, K.SLASH}),
    and_word="ary",
    or_word="na",
    not_word="tsy",
    null_word="tsisy",
    true_word="marina",
    false_word="diso",
    function_word="asa",
    package_prefix="package:",
    position_pattern=re.compile(r"\(andalana (\d+), toerana (\d+)\)"),
    recursion_limit=20000,
)
