"""
Baiko: a small language with Malagasy keywords, a tree-walking interpreter
and a JavaScript code generator.
"""

from .check import Diagnostic, check_baiko
from .compiler import CompilationPipeline, DirectoryFileResolver, compile_baiko, interpret_baiko
from .config import DEFAULT_CONFIG, LanguageConfig
from .exceptions import BaikoError, BaikoLexicalError, BaikoRuntimeError, BaikoSyntaxError, ErrorCode
from .interpreter.core.interpreter import Interpreter
from .interpreter.core.native import NativeBridge
from .lexer.lexer import tokenize
from .parser.core.parser import parse_baiko
