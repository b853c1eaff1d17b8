import json
from typing import Callable, List, Optional, Set

from baiko.config import DEFAULT_CONFIG, LanguageConfig
from baiko.exceptions import BaikoError, BaikoLexicalError, BaikoSyntaxError, ErrorCode, InternalCompilerError
from baiko.parser.core.classes import *
from baiko.parser.core.parser import parse_baiko
from baiko.utils import package_binding_name, raised_recursion_limit

_OPERATOR_MAP = {"==": "===", "!=": "!=="}

_NO_FILE_RESOLVER = "tsy misy fomba hamakiana rakitra"


class JavaScriptGenerator:
    """
    Performs a direct, structural translation of a Baiko AST into JavaScript.

    Every statement maps to one JavaScript construct. Declared types survive
    only as JSDoc annotations. Module imports are inlined, once each, as an
    isolated IIFE exposing only the module's exported names.
    """

    def __init__(self, file_resolver: Optional[Callable[[str], str]] = None, config: LanguageConfig = DEFAULT_CONFIG):
        self.file_resolver = file_resolver
        self.config = config
        self.indent = 0
        self._inlined: Set[str] = set()

    def generate(self, program: Program) -> str:
        with raised_recursion_limit(self.config.recursion_limit):
            return self._gen_block(program.body)

    # --- Statements ---

    def _gen_block(self, statements: list) -> str:
        return "\n".join(self._gen_statement(s) for s in statements)

    def _gen_indented(self, statements: list) -> List[str]:
        self.indent += 1
        lines = [self._gen_statement(s) for s in statements]
        self.indent -= 1
        return lines

    def _gen_statement(self, stmt) -> str:
        if isinstance(stmt, FunctionDeclaration):
            return self._gen_function(stmt)
        if isinstance(stmt, VariableDeclaration):
            return self._gen_variable(stmt)
        if isinstance(stmt, ImportStatement):
            return self._gen_import(stmt)
        if isinstance(stmt, IfStatement):
            return self._gen_if(stmt)
        if isinstance(stmt, WhileStatement):
            return self._gen_while(stmt)
        if isinstance(stmt, ReturnStatement):
            if stmt.value is None:
                return f"{self._pad()}return;"
            return f"{self._pad()}return {self._gen_expression(stmt.value)};"
        if isinstance(stmt, PrintStatement):
            return f"{self._pad()}console.log({self._gen_expression(stmt.value)});"
        if isinstance(stmt, ExpressionStatement):
            return f"{self._pad()}{self._gen_expression(stmt.expression)};"
        if isinstance(stmt, IndexAssignmentStatement):
            return f"{self._pad()}{stmt.target}[{self._gen_expression(stmt.index)}] = {self._gen_expression(stmt.value)};"
        raise InternalCompilerError(f"No JavaScript translation for statement type '{type(stmt).__name__}'.")

    def _gen_function(self, node: FunctionDeclaration) -> str:
        keyword = "async function" if node.is_async else "function"
        params = ", ".join(p.name for p in node.params)
        header = f"{self._pad()}{keyword} {node.name}({params}) {{"
        return "\n".join([header, *self._gen_indented(node.body), f"{self._pad()}}}"])

    def _gen_variable(self, node: VariableDeclaration) -> str:
        prefix = f"{self._pad()}let /** @type {{{self._jsdoc_type(node.var_type)}}} */ {node.name}"
        if node.value is None:
            return f"{prefix};"
        return f"{prefix} = {self._gen_expression(node.value)};"

    def _jsdoc_type(self, annotation: TypeAnnotation) -> str:
        if isinstance(annotation, OptionalType):
            return f"{self._jsdoc_type(annotation.inner)} | null"
        if isinstance(annotation, ListType):
            return f"Array<{self._jsdoc_type(annotation.inner)}>"
        return annotation.value

    def _gen_if(self, node: IfStatement) -> str:
        lines = [f"{self._pad()}if ({self._gen_condition(node.condition)}) {{", *self._gen_indented(node.consequent)]
        if node.alternate is not None:
            lines.append(f"{self._pad()}}} else {{")
            lines.extend(self._gen_indented(node.alternate))
        lines.append(f"{self._pad()}}}")
        return "\n".join(lines)

    def _gen_while(self, node: WhileStatement) -> str:
        header = f"{self._pad()}while ({self._gen_condition(node.condition)}) {{"
        return "\n".join([header, *self._gen_indented(node.body), f"{self._pad()}}}"])

    def _gen_import(self, node: ImportStatement) -> str:
        prefix = self.config.package_prefix
        if node.path.startswith(prefix):
            identifier = node.path[len(prefix) :]
            return f"{self._pad()}const {package_binding_name(identifier)} = require('{identifier}');"

        if node.path in self._inlined:
            return f"{self._pad()}// {node.path}"
        self._inlined.add(node.path)

        module = self._load_module(node)
        exported = [s.name for s in module.body if isinstance(s, (FunctionDeclaration, VariableDeclaration)) and s.exported]

        body = self._gen_indented(module.body)
        if exported:
            names = ", ".join(exported)
            self.indent += 1
            body.append(f"{self._pad()}return {{ {names} }};")
            self.indent -= 1
            opening = f"{self._pad()}const {{ {names} }} = (() => {{"
        else:
            opening = f"{self._pad()}(() => {{"
        return "\n".join([opening, *body, f"{self._pad()}}})();"])

    def _load_module(self, node: ImportStatement) -> Program:
        if self.file_resolver is None:
            raise BaikoError(ErrorCode.IMPORT_FAILED, span=node.span, path=node.path, details=_NO_FILE_RESOLVER)
        try:
            source = self.file_resolver(node.path)
        except Exception as e:
            raise BaikoError(ErrorCode.IMPORT_FAILED, span=node.span, path=node.path, details=str(e)) from e
        try:
            return parse_baiko(source, self.config)
        except (BaikoLexicalError, BaikoSyntaxError) as e:
            raise BaikoError(ErrorCode.IMPORT_FAILED, span=node.span, path=node.path, details=e.message) from e

    # --- Expressions ---

    def _gen_expression(self, expr) -> str:
        if isinstance(expr, NumericLiteral):
            return str(expr.value)
        if isinstance(expr, StringLiteral):
            return json.dumps(expr.value, ensure_ascii=False)
        if isinstance(expr, BooleanLiteral):
            return "true" if expr.value else "false"
        if isinstance(expr, NullLiteral):
            return "null"
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, ListLiteral):
            return "[" + ", ".join(self._gen_expression(e) for e in expr.elements) + "]"
        if isinstance(expr, AssignmentExpression):
            return f"{expr.name} = {self._gen_expression(expr.value)}"
        if isinstance(expr, BinaryExpression):
            return f"({self._gen_binary(expr)})"
        if isinstance(expr, UnaryExpression):
            return f"!({self._gen_expression(expr.operand)})"
        if isinstance(expr, AwaitExpression):
            return f"await {self._gen_expression(expr.argument)}"
        if isinstance(expr, CallExpression):
            return f"{expr.callee}({self._gen_args(expr.args)})"
        if isinstance(expr, MemberExpression):
            return f"{self._gen_expression(expr.target)}.{expr.member}"
        if isinstance(expr, MemberCallExpression):
            return f"{self._gen_expression(expr.target)}.{expr.method}({self._gen_args(expr.args)})"
        if isinstance(expr, IndexExpression):
            return f"{self._gen_expression(expr.target)}[{self._gen_expression(expr.index)}]"
        raise InternalCompilerError(f"No JavaScript translation for expression type '{type(expr).__name__}'.")

    def _gen_binary(self, expr: BinaryExpression) -> str:
        return f"{self._gen_expression(expr.left)} {self._js_operator(expr.operator)} {self._gen_expression(expr.right)}"

    def _gen_condition(self, expr) -> str:
        """Conditions of if/while are not wrapped in a second pair of parentheses."""
        if isinstance(expr, BinaryExpression):
            return self._gen_binary(expr)
        return self._gen_expression(expr)

    def _gen_args(self, args: list) -> str:
        return ", ".join(self._gen_expression(a) for a in args)

    def _js_operator(self, op: str) -> str:
        if op == self.config.and_word:
            return "&&"
        if op == self.config.or_word:
            return "||"
        return _OPERATOR_MAP.get(op, op)

    def _pad(self) -> str:
        return "  " * self.indent


def generate_javascript(program: Program, file_resolver: Optional[Callable[[str], str]] = None, config: LanguageConfig = DEFAULT_CONFIG) -> str:
    """High-level entry point for the code generation stage."""
    return JavaScriptGenerator(file_resolver, config).generate(program)
