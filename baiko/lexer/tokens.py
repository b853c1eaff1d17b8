"""
Token contract shared by the lexer and the parser.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class TokenKind(Enum):
    # Literals
    NUMBER = "Number"
    STRING = "String"
    IDENTIFIER = "Identifier"

    # Keywords
    ASA = "Asa"  # function
    ANDRASANA = "Andrasana"  # async
    MIANDRY = "Miandry"  # await
    RAHA = "Raha"  # if
    ANKOATRA = "Ankoatra"  # else
    AVERENO = "Avereno"  # while, first half of "avereno raha"
    DIA = "Dia"  # block open
    FARANY = "Farany"  # block close
    MAMOAKA = "Mamoaka"  # return
    ASEHOY = "Asehoy"  # print
    AMPIDIRO = "Ampidiro"  # import
    AVOAKA = "Avoaka"  # export

    TRUE = "True"
    FALSE = "False"
    TSISY = "Tsisy"  # null

    AND = "And"
    OR = "Or"
    NOT = "Not"

    # Types
    ISA = "Isa"
    SORATRA = "Soratra"
    MARINA = "Marina"
    METY = "Mety"
    LISITRA = "Lisitra"

    # Operators
    PLUS = "Plus"
    MINUS = "Minus"
    STAR = "Star"
    SLASH = "Slash"
    EQUAL_EQUAL = "EqualEqual"
    BANG_EQUAL = "BangEqual"
    LESS = "Less"
    LESS_EQUAL = "LessEqual"
    GREATER = "Greater"
    GREATER_EQUAL = "GreaterEqual"
    EQUAL = "Equal"

    # Delimiters
    LEFT_PAREN = "LeftParen"
    RIGHT_PAREN = "RightParen"
    LEFT_BRACKET = "LeftBracket"
    RIGHT_BRACKET = "RightBracket"
    COLON = "Colon"
    COMMA = "Comma"
    SEMICOLON = "Semicolon"
    DOT = "Dot"

    EOF = "EOF"


class Token(BaseModel):
    """A single positioned token. Line and column are 1-based."""

    model_config = ConfigDict(frozen=True)

    type: TokenKind
    value: str
    line: int
    column: int
