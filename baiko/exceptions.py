"""
Custom exception types for the Baiko toolchain.

Messages are written in the language's own vocabulary. Whenever a position is
known it is appended as "(andalana <line>, toerana <col>)", the marker that
editor tooling extracts with DEFAULT_CONFIG.position_pattern.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from baiko.parser.core.classes import Span


class ErrorCode(Enum):

    # --- Lexical Errors ---
    LEX_UNEXPECTED_CHARACTER = "Litera tsy fantatra '{char}'"
    LEX_UNTERMINATED_STRING = "Soratra tsy voafarana: tsy hita ny '\"' famaranana"

    # --- Syntax Errors ---
    SYNTAX_UNEXPECTED_TOKEN = "Nanantena {expected} fa nahita {found}"
    SYNTAX_EXPECTED_TYPE = "Tokony ho karazana ({types}) fa nahita {found}"
    SYNTAX_EXPECTED_EXPRESSION = "Tsy nampoizina ny {found}: nanantena sanda na fomba fiteny"
    SYNTAX_MISSING_INITIALIZER = 'Tsy maintsy omena sanda ny "{name}": {type_name} dia karazana tsy azo tsisy'
    SYNTAX_INVALID_EXPORT = "Ny 'avoaka' dia tsy maintsy arahin'ny asa na fanambarana fari-piadidiana, fa nahita {found}"

    # --- Name & Scope Errors ---
    UNDEFINED_NAME = 'Tsy fantatra ny "{name}": ilaina ny fanambarana azy aloha'
    UNDEFINED_ASSIGNMENT = 'Tsy azo ovaina ny "{name}": tsy mbola nofaritana'

    # --- Type Errors ---
    TYPE_MISMATCH = "Tsy mety ny karazana ho an'ny \"{name}\": niriny {expected} fa {provided} no noraisina"
    NULL_OPERAND = "Tsy azo ampiasaina amin'ny \"{op}\" ny tsisy"
    PLUS_TYPE_MISMATCH = "Tsy azo ampiasaina ny \"+\" eo amin'ny {left} sy {right}"
    NUMERIC_OPERAND = '"{op}" mitaky isa fa noraisina {left} sy {right}'
    DIVISION_BY_ZERO = "Tsy azo zaraina amin'ny aotra (0)"

    # --- Limits ---
    STACK_OVERFLOW = "Lalina loatra ny fiantsoana asa: tafahoatra ny stack"
    SYNTAX_NESTING_TOO_DEEP = "Lalina loatra ny fitambaran'ny fomba fiteny eo amin'ny {found}"

    # --- Call Errors ---
    NOT_CALLABLE = '"{name}" tsy asa: {provided} no noraisina'
    ARGUMENT_COUNT_MISMATCH = '"{name}" mitaky tohan-teny {expected} fa {provided} no nomena'

    # --- Native Interop Errors ---
    MEMBER_ON_NON_NATIVE = 'Tsy azo idirana ny ".{member}" ao amin\'ny "{name}": {provided} izy fa tsy natif'
    UNKNOWN_NATIVE_MEMBER = 'Tsy misy ".{member}" ao amin\'ny "{name}"'
    NATIVE_CALL_FAILED = 'Nisy olana tamin\'ny fiantsoana natif "{name}": {details}'

    # --- List & Index Errors ---
    NOT_INDEXABLE = "Tsy azo asiana laharana ny {provided}"
    INVALID_INDEX = "Tokony ho isa tsy misy faingo ny laharana fa {provided} no noraisina"
    INDEX_OUT_OF_RANGE = "Tsy ao anatin'ny lisitra ny laharana {index} (halavany {length})"

    # --- Import Errors ---
    IMPORT_FAILED = 'Tsy azo ampidirina ny "{path}": {details}'
    PACKAGE_NOT_FOUND = 'Tsy hita ny package "{package}"'


class BaikoError(Exception):
    """Base class of every positioned error raised by the lexer, parser and interpreter."""

    def __init__(
        self,
        code: ErrorCode,
        span: Optional["Span"] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        **kwargs,
    ):
        self.code = code
        self.span = span
        self.details = kwargs

        # A span always wins over loose coordinates.
        if span is not None:
            line, column = span.s_line, span.s_col
        self.line = line
        self.column = column

        core_message = code.value.format(**kwargs)
        if line is not None and column is not None:
            self.message = f"{core_message} (andalana {line}, toerana {column})"
        else:
            self.message = core_message

        super().__init__(self.message)


class BaikoLexicalError(BaikoError):
    """Unrecognized character or unterminated string literal."""


class BaikoSyntaxError(BaikoError):
    """Grammar violation; aborts the entire parse."""


class BaikoRuntimeError(BaikoError):
    """Failure while evaluating a program (names, types, calls, imports)."""


class InternalCompilerError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
