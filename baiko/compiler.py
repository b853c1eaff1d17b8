import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Sequence

from baiko.generator.generator import generate_javascript
from baiko.interpreter.core.interpreter import Interpreter
from baiko.lexer.lexer import tokenize
from baiko.parser.core.parser import Parser, parse_baiko

from .config import DEFAULT_CONFIG, LanguageConfig
from .exceptions import BaikoError, InternalCompilerError
from .utils import CompilerArtifactEncoder

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".baiko"


class DirectoryFileResolver:
    """
    Resolves import paths against a base directory, typically the directory of
    the file being run. A path without an extension also matches `<path>.baiko`.
    """

    def __init__(self, base_dir: str):
        self.base_dir = os.path.abspath(base_dir)

    def __call__(self, path: str) -> str:
        candidate = os.path.join(self.base_dir, path)
        if not os.path.isfile(candidate) and not os.path.splitext(candidate)[1]:
            candidate += SOURCE_EXTENSION

        try:
            with open(candidate, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            raise FileNotFoundError(f"tsy hita ny rakitra '{candidate}'")


class CompilationPipeline:
    """
    Orchestrates the compilation from Baiko source to JavaScript.
    Stages run in order (tokens, ast, javascript) and each stage's artifact is
    the input of the next.
    """

    STAGES = ("tokens", "ast", "javascript")

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str],
        dump_stages: Sequence[str] = (),
        stop_after_stage: Optional[str] = None,
        file_resolver: Optional[Callable[[str], str]] = None,
        config: LanguageConfig = DEFAULT_CONFIG,
    ):
        self.source_content = source_content
        self.file_path = os.path.abspath(file_path) if file_path else "<stdin>"
        self.dump_stages = dump_stages
        self.stop_after_stage = stop_after_stage
        self.file_resolver = file_resolver
        self.config = config
        self.artifacts: Dict[str, Any] = {}
        self.results: List[Any] = []

    def run(self) -> Any:
        try:
            # --- Stage 1: Lexing ---
            self._run_simple_stage("tokens", tokenize, self.source_content, self.config)
            if self.stop_after_stage == "tokens":
                return self.results[-1]

            # --- Stage 2: Parsing ---
            self._run_simple_stage("ast", self._parse, self.results[-1])
            if self.stop_after_stage == "ast":
                return self.results[-1]

            # --- Stage 3: Code Generation ---
            self._run_simple_stage("javascript", generate_javascript, self.results[-1], self.file_resolver, self.config)
            return self.results[-1]

        except BaikoError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure while compiling %s", self.file_path)
            raise InternalCompilerError(f"An unexpected internal error occurred: {e}") from e

    def _parse(self, tokens):
        return Parser(tokens, self.config).parse()

    def _run_simple_stage(self, name: str, func, *args, **kwargs) -> Any:
        """Runs a single function as a stage, storing and returning its result."""
        result = func(*args, **kwargs)
        self.artifacts[name] = result
        self.results.append(result)
        if name in self.dump_stages:
            self.save_artifact(name, result)
        return result

    def artifact_path(self, name: str) -> str:
        if self.file_path == "<stdin>":
            base_name = "stdin_output"
        else:
            base_name = os.path.splitext(self.file_path)[0]
        return f"{base_name}.{name}.json"

    def save_artifact(self, name: str, data: Any):
        """Saves an intermediate artifact to a JSON file next to the source."""
        output_path = self.artifact_path(name)
        logger.info("Saving artifact '%s' to %s", name, output_path)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=False, cls=CompilerArtifactEncoder)


def compile_baiko(
    script_content: str,
    file_path: Optional[str] = None,
    dump_stages: Sequence[str] = (),
    stop_after_stage: Optional[str] = None,
    file_resolver: Optional[Callable[[str], str]] = None,
):
    """High-level entry point for the compilation pipeline."""
    pipeline = CompilationPipeline(script_content, file_path, dump_stages, stop_after_stage, file_resolver)
    return pipeline.run()


def interpret_baiko(
    script_content: str,
    print_sink: Optional[Callable[[str], None]] = None,
    file_resolver: Optional[Callable[[str], str]] = None,
    package_resolver: Optional[Callable[[str], Any]] = None,
) -> Interpreter:
    """Parses and runs a script to completion, returning the interpreter for inspection."""
    program = parse_baiko(script_content)
    interpreter = Interpreter(print_sink=print_sink, file_resolver=file_resolver, package_resolver=package_resolver)
    interpreter.run_sync(program)
    return interpreter
