import logging
from typing import Any, Callable, Dict, Optional

from baiko.config import DEFAULT_CONFIG, LanguageConfig
from baiko.exceptions import BaikoLexicalError, BaikoRuntimeError, BaikoSyntaxError, ErrorCode
from baiko.parser.core.classes import Program, Span
from baiko.parser.core.parser import parse_baiko
from baiko.utils import package_binding_name

from .native import import_package

logger = logging.getLogger(__name__)

FileResolver = Callable[[str], str]
PackageResolver = Callable[[str], Any]

_NO_FILE_RESOLVER = "tsy misy fomba hamakiana rakitra"


class ModuleLoader:
    """
    Responsible for loading and parsing imported Baiko modules and resolving
    native packages. This class is the boundary between the interpreter's pure
    logic and the host's resolver capabilities.
    """

    def __init__(
        self,
        file_resolver: Optional[FileResolver] = None,
        package_resolver: Optional[PackageResolver] = None,
        config: LanguageConfig = DEFAULT_CONFIG,
    ):
        self.file_resolver = file_resolver
        self.package_resolver = package_resolver or import_package
        self.config = config
        # The cache ensures a module's source is only ever parsed once.
        self._ast_cache: Dict[str, Program] = {}

    def is_package(self, path: str) -> bool:
        return path.startswith(self.config.package_prefix)

    def binding_name(self, path: str) -> str:
        return package_binding_name(path[len(self.config.package_prefix) :])

    def load(self, path: str, span: Optional[Span] = None) -> Program:
        """
        Resolves a module path to source text and parses it.
        Returns a cached AST if the path has already been loaded.
        """
        if path in self._ast_cache:
            return self._ast_cache[path]

        if self.file_resolver is None:
            raise BaikoRuntimeError(ErrorCode.IMPORT_FAILED, span=span, path=path, details=_NO_FILE_RESOLVER)

        logger.debug("Resolving module '%s'", path)
        try:
            source = self.file_resolver(path)
        except Exception as e:
            raise BaikoRuntimeError(ErrorCode.IMPORT_FAILED, span=span, path=path, details=str(e)) from e

        try:
            program = parse_baiko(source, self.config)
        except (BaikoLexicalError, BaikoSyntaxError) as e:
            raise BaikoRuntimeError(ErrorCode.IMPORT_FAILED, span=span, path=path, details=e.message) from e

        self._ast_cache[path] = program
        return program

    def load_package(self, path: str, span: Optional[Span] = None) -> Any:
        """Resolves a 'package:'-prefixed import to the host object it names."""
        identifier = path[len(self.config.package_prefix) :]
        logger.debug("Resolving package '%s'", identifier)
        try:
            return self.package_resolver(identifier)
        except Exception as e:
            raise BaikoRuntimeError(ErrorCode.PACKAGE_NOT_FOUND, span=span, package=identifier) from e
