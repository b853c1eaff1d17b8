import argparse
import logging
import os
import subprocess
import sys

from .compiler import CompilationPipeline, DirectoryFileResolver, interpret_baiko
from .exceptions import BaikoError, BaikoRuntimeError
from .utils import TerminalColors, find_node_executable

RUNTIME_ERROR_PREFIX = "Hadisoana mandritra ny fanatanterahana:"
ERROR_PREFIX = "Hadisoana:"

# Stage names and their descriptions for the -c/--compile flag.
STAGE_MAP = {
    "tokens": "Token stream",
    "ast": "Abstract Syntax Tree",
}


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1 like every other failure."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"{TerminalColors.RED}{ERROR_PREFIX} {message}{TerminalColors.RESET}", file=sys.stderr)
        sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    stage_help_text = "Stop after a stage and save its artifact as JSON next to the source (compile mode only). "
    for name, desc in STAGE_MAP.items():
        stage_help_text += f"'{name}' for {desc}. "

    parser = _ArgumentParser(prog="baiko", description="Compile, run or interpret a Baiko program.")
    parser.add_argument("input_file", help="The path to the input .baiko file.")
    parser.add_argument(
        "-m",
        "--mode",
        choices=["compile", "run", "interpret"],
        default="compile",
        help="'compile' prints JavaScript, 'run' executes it with node, 'interpret' evaluates the program directly.",
    )
    parser.add_argument("-c", "--compile", dest="stage", choices=STAGE_MAP.keys(), help=stage_help_text)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _fail(message: str, runtime: bool = False):
    prefix = RUNTIME_ERROR_PREFIX if runtime else ERROR_PREFIX
    print(f"{TerminalColors.RED}{prefix} {message}{TerminalColors.RESET}", file=sys.stderr)
    sys.exit(1)


def _run_javascript(js: str) -> int:
    node = find_node_executable()
    if node is None:
        _fail("tsy hita ny 'node' hanatanterahana ny JavaScript")

    # Wrapped so that top-level `await` is valid.
    program = f"(async () => {{\n{js}\n}})().catch((e) => {{ console.error(e); process.exit(1); }});\n"
    completed = subprocess.run([node, "-e", program])
    return completed.returncode


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.stage and args.mode != "compile":
        parser.error(f"ny -c/--compile dia tsy miaraka amin'ny -m {args.mode}")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    input_path = os.path.abspath(args.input_file)
    resolver = DirectoryFileResolver(os.path.dirname(input_path))

    try:
        with open(input_path, "r", encoding="utf-8") as f:
            script_content = f.read()
    except OSError:
        _fail(f"tsy azo vakiana ny rakitra '{args.input_file}'")

    try:
        if args.mode == "interpret":
            interpret_baiko(script_content, file_resolver=resolver)
            return

        pipeline = CompilationPipeline(
            script_content,
            file_path=input_path,
            dump_stages=[args.stage] if args.stage else [],
            stop_after_stage=args.stage,
            file_resolver=resolver,
        )
        js = pipeline.run()

        if args.stage:
            print(f"{TerminalColors.GREEN}--- Artifact '{args.stage}' ({STAGE_MAP[args.stage]}) saved to {pipeline.artifact_path(args.stage)} ---{TerminalColors.RESET}")
            return

        if args.mode == "compile":
            print(js)
            return

        returncode = _run_javascript(js)
        if returncode != 0:
            sys.exit(1)

    # --- Error Handling ---
    except BaikoRuntimeError as e:
        _fail(e.message, runtime=True)
    except BaikoError as e:
        _fail(e.message)
    except Exception as e:
        _fail(f"{type(e).__name__}: {e}")


if __name__ == "__main__":
    main()
