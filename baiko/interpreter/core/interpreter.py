import asyncio
import logging
import math
import operator
from typing import Any, Callable, List, Optional, Set

from baiko.config import DEFAULT_CONFIG, LanguageConfig
from baiko.exceptions import BaikoError, BaikoRuntimeError, ErrorCode, InternalCompilerError
from baiko.parser.core.classes import *
from baiko.utils import raised_recursion_limit

from .environment import Environment
from .module_loader import FileResolver, ModuleLoader, PackageResolver
from .native import NativeBridge
from .type_checker import check_type
from .values import (
    BaikoFunction,
    NativeValue,
    ReturnSignal,
    describe_value,
    format_number,
    is_number,
    is_truthy,
    stringify,
    unwrap_signal,
    values_equal,
)

logger = logging.getLogger(__name__)

PrintSink = Callable[[str], None]

_NUMERIC_OPERATORS = {
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

# Numbers follow double semantics: integers past 2**53 become floats, past the float range infinite.
_MAX_SAFE_INTEGER = 2**53


def _as_double(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > _MAX_SAFE_INTEGER:
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    return value


class Interpreter:
    """
    Tree-walking evaluator for Baiko programs.

    Evaluation is asynchronous so that `miandry` can suspend on host awaitables
    without blocking the event loop. Statement executors return either None
    (continue with the next statement) or a ReturnSignal, which every block
    forwards unchanged until a function call unwraps it.

    One instance owns one global environment and one import seen-set; a fresh
    instance re-runs every import from scratch.
    """

    def __init__(
        self,
        print_sink: Optional[PrintSink] = None,
        file_resolver: Optional[FileResolver] = None,
        package_resolver: Optional[PackageResolver] = None,
        native_bridge: Optional[NativeBridge] = None,
        config: LanguageConfig = DEFAULT_CONFIG,
    ):
        self.print_sink = print_sink or print
        self.loader = ModuleLoader(file_resolver, package_resolver, config)
        self.bridge = native_bridge or NativeBridge()
        self.config = config
        self.globals = Environment()
        self._imported: Set[str] = set()

        self._statement_handlers = {
            FunctionDeclaration: self._execute_function_declaration,
            VariableDeclaration: self._execute_variable_declaration,
            ImportStatement: self._execute_import,
            IfStatement: self._execute_if,
            WhileStatement: self._execute_while,
            ReturnStatement: self._execute_return,
            PrintStatement: self._execute_print,
            ExpressionStatement: self._execute_expression_statement,
            IndexAssignmentStatement: self._execute_index_assignment,
        }
        self._expression_handlers = {
            NumericLiteral: self._evaluate_literal,
            StringLiteral: self._evaluate_literal,
            BooleanLiteral: self._evaluate_literal,
            NullLiteral: self._evaluate_null,
            Identifier: self._evaluate_identifier,
            ListLiteral: self._evaluate_list,
            AssignmentExpression: self._evaluate_assignment,
            BinaryExpression: self._evaluate_binary,
            UnaryExpression: self._evaluate_unary,
            AwaitExpression: self._evaluate_await,
            CallExpression: self._evaluate_call,
            MemberExpression: self._evaluate_member,
            MemberCallExpression: self._evaluate_member_call,
            IndexExpression: self._evaluate_index,
        }

    async def run(self, program: Program):
        """Executes a program in the global environment. A top-level `mamoaka` ends it early."""
        logger.debug("Running program with %d top-level statements", len(program.body))
        with raised_recursion_limit(self.config.recursion_limit):
            try:
                await self._execute_block(program.body, self.globals)
            except RecursionError as e:
                raise BaikoRuntimeError(ErrorCode.STACK_OVERFLOW, span=program.span) from e
        logger.debug("Program finished")

    def run_sync(self, program: Program):
        asyncio.run(self.run(program))

    # --- Statements ---

    async def _execute_block(self, statements: list, env: Environment) -> Optional[ReturnSignal]:
        for statement in statements:
            signal = await self._execute(statement, env)
            if signal is not None:
                return signal
        return None

    async def _execute(self, statement, env: Environment) -> Optional[ReturnSignal]:
        handler = self._statement_handlers.get(type(statement))
        if handler is None:
            raise InternalCompilerError(f"No executor registered for statement type '{type(statement).__name__}'.")
        return await handler(statement, env)

    async def _execute_function_declaration(self, node: FunctionDeclaration, env: Environment):
        env.define(node.name, BaikoFunction(node.name, node.params, node.body, env, node.is_async))

    async def _execute_variable_declaration(self, node: VariableDeclaration, env: Environment):
        value = await self._evaluate(node.value, env) if node.value is not None else None
        check_type(node.name, value, node.var_type, node.span)
        env.define(node.name, value)

    async def _execute_import(self, node: ImportStatement, env: Environment):
        path = node.path
        if path in self._imported:
            logger.debug("Skipping already imported '%s'", path)
            return None
        # Marked before running so a circular import stops here.
        self._imported.add(path)

        if self.loader.is_package(path):
            package = self.loader.load_package(path, node.span)
            env.define(self.loader.binding_name(path), self.bridge.from_host(package))
            return None

        program = self.loader.load(path, node.span)
        module_env = Environment()
        await self._execute_block(program.body, module_env)

        for statement in program.body:
            if isinstance(statement, (FunctionDeclaration, VariableDeclaration)) and statement.exported:
                env.define(statement.name, module_env.get(statement.name, node.span))
        return None

    async def _execute_if(self, node: IfStatement, env: Environment):
        if is_truthy(await self._evaluate(node.condition, env)):
            return await self._execute_block(node.consequent, env.child())
        if node.alternate is not None:
            return await self._execute_block(node.alternate, env.child())
        return None

    async def _execute_while(self, node: WhileStatement, env: Environment):
        while is_truthy(await self._evaluate(node.condition, env)):
            signal = await self._execute_block(node.body, env.child())
            if signal is not None:
                return signal
        return None

    async def _execute_return(self, node: ReturnStatement, env: Environment):
        value = await self._evaluate(node.value, env) if node.value is not None else None
        return ReturnSignal(value)

    async def _execute_print(self, node: PrintStatement, env: Environment):
        value = await self._evaluate(node.value, env)
        self.print_sink(stringify(value, self.config))

    async def _execute_expression_statement(self, node: ExpressionStatement, env: Environment):
        await self._evaluate(node.expression, env)

    async def _execute_index_assignment(self, node: IndexAssignmentStatement, env: Environment):
        target = env.get(node.target, node.span)
        index = await self._evaluate(node.index, env)
        value = await self._evaluate(node.value, env)

        if isinstance(target, list):
            target[self._list_index(index, len(target), node.span)] = value
        elif isinstance(target, NativeValue):
            self._native_op(node.target, node.span, self.bridge.set_item, target.value, self.bridge.to_host(index), self.bridge.to_host(value))
        else:
            raise BaikoRuntimeError(ErrorCode.NOT_INDEXABLE, span=node.span, provided=describe_value(target))

    # --- Expressions ---

    async def _evaluate(self, node, env: Environment) -> Any:
        handler = self._expression_handlers.get(type(node))
        if handler is None:
            raise InternalCompilerError(f"No evaluator registered for expression type '{type(node).__name__}'.")
        return await handler(node, env)

    async def _evaluate_literal(self, node, env: Environment):
        return node.value

    async def _evaluate_null(self, node: NullLiteral, env: Environment):
        return None

    async def _evaluate_identifier(self, node: Identifier, env: Environment):
        return env.get(node.name, node.span)

    async def _evaluate_list(self, node: ListLiteral, env: Environment):
        return [await self._evaluate(element, env) for element in node.elements]

    async def _evaluate_assignment(self, node: AssignmentExpression, env: Environment):
        value = await self._evaluate(node.value, env)
        env.assign(node.name, value, node.span)
        return value

    async def _evaluate_binary(self, node: BinaryExpression, env: Environment):
        op = node.operator
        if op == self.config.and_word or op == self.config.or_word:
            return await self._evaluate_logical(node, env)

        left = await self._evaluate(node.left, env)
        right = await self._evaluate(node.right, env)
        return self._apply_binary(op, left, right, node.span)

    async def _evaluate_logical(self, node: BinaryExpression, env: Environment) -> bool:
        """`ary` / `na` with short-circuit: the right operand may never be evaluated."""
        op = node.operator
        left = await self._evaluate(node.left, env)
        self._require_non_null(op, left, node.span)

        if op == self.config.and_word and not is_truthy(left):
            return False
        if op == self.config.or_word and is_truthy(left):
            return True

        right = await self._evaluate(node.right, env)
        self._require_non_null(op, right, node.span)
        return is_truthy(right)

    def _apply_binary(self, op: str, left: Any, right: Any, span: Optional[Span]) -> Any:
        if op == "==":
            return values_equal(left, right)
        if op == "!=":
            return not values_equal(left, right)

        self._require_non_null(op, left, span)
        self._require_non_null(op, right, span)

        if op == "/" and is_number(right) and right == 0:
            raise BaikoRuntimeError(ErrorCode.DIVISION_BY_ZERO, span=span)

        if isinstance(left, NativeValue) or isinstance(right, NativeValue):
            # Arithmetic on host objects is left undefined: the result is an empty Native.
            return NativeValue(None)

        if op == "+":
            if is_number(left) and is_number(right):
                return _as_double(_as_double(left) + _as_double(right))
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left, self.config) + stringify(right, self.config)
            raise BaikoRuntimeError(ErrorCode.PLUS_TYPE_MISMATCH, span=span, left=describe_value(left), right=describe_value(right))

        operation = _NUMERIC_OPERATORS.get(op)
        if operation is None:
            raise InternalCompilerError(f"Unknown binary operator '{op}'.")
        if not (is_number(left) and is_number(right)):
            raise BaikoRuntimeError(ErrorCode.NUMERIC_OPERAND, span=span, op=op, left=describe_value(left), right=describe_value(right))
        return _as_double(operation(_as_double(left), _as_double(right)))

    async def _evaluate_unary(self, node: UnaryExpression, env: Environment):
        operand = await self._evaluate(node.operand, env)
        if node.operator != self.config.not_word:
            raise InternalCompilerError(f"Unknown unary operator '{node.operator}'.")
        self._require_non_null(node.operator, operand, node.span)
        return not is_truthy(operand)

    async def _evaluate_await(self, node: AwaitExpression, env: Environment):
        value = await self._evaluate(node.argument, env)
        if isinstance(value, NativeValue) and self.bridge.is_awaitable(value.value):
            resolved = await self.bridge.resolve(value.value)
            return self.bridge.from_host(resolved)
        return value

    async def _evaluate_call(self, node: CallExpression, env: Environment):
        callee = env.get(node.callee, node.span)

        if isinstance(callee, BaikoFunction):
            if len(node.args) != len(callee.params):
                raise BaikoRuntimeError(
                    ErrorCode.ARGUMENT_COUNT_MISMATCH,
                    span=node.span,
                    name=node.callee,
                    expected=len(callee.params),
                    provided=len(node.args),
                )
            try:
                return await self._call_function(callee, node.args, env, node.span)
            except RecursionError as e:
                raise BaikoRuntimeError(ErrorCode.STACK_OVERFLOW, span=node.span) from e

        if isinstance(callee, NativeValue) and self.bridge.is_callable(callee.value):
            args = await self._evaluate_args(node.args, env)
            host_args = [self.bridge.to_host(a) for a in args]
            return self._native_op(node.callee, node.span, self.bridge.call, callee.value, host_args)

        raise BaikoRuntimeError(ErrorCode.NOT_CALLABLE, span=node.span, name=node.callee, provided=describe_value(callee))

    async def _evaluate_args(self, args: list, env: Environment) -> List[Any]:
        return [await self._evaluate(arg, env) for arg in args]

    async def _call_function(self, function: BaikoFunction, arg_nodes: list, env: Environment, span: Optional[Span]) -> Any:
        """
        Binds arguments in a child of the closure and runs the body. Each argument
        is evaluated, type-checked and bound before the next one is evaluated.
        """
        call_env = Environment(parent=function.closure)
        for param, arg_node in zip(function.params, arg_nodes):
            arg = await self._evaluate(arg_node, env)
            check_type(param.name, arg, param.param_type, span)
            call_env.define(param.name, arg)

        result = unwrap_signal(await self._execute_block(function.body, call_env))
        if not function.is_async:
            return result

        future = asyncio.get_running_loop().create_future()
        future.set_result(result)
        return NativeValue(future)

    async def _evaluate_member(self, node: MemberExpression, env: Environment):
        target = await self._evaluate(node.target, env)
        host = self._native_target(node.target, node.member, target, node.span)
        return self.bridge.from_host(self._lookup_member(node.target, node.member, host, node.span))

    async def _evaluate_member_call(self, node: MemberCallExpression, env: Environment):
        target = await self._evaluate(node.target, env)
        host = self._native_target(node.target, node.method, target, node.span)
        method = self._lookup_member(node.target, node.method, host, node.span)

        label = f"{self._label(node.target)}.{node.method}"
        if not self.bridge.is_callable(method):
            raise BaikoRuntimeError(ErrorCode.NOT_CALLABLE, span=node.span, name=label, provided=describe_value(self.bridge.from_host(method)))

        args = await self._evaluate_args(node.args, env)
        host_args = [self.bridge.to_host(a) for a in args]
        return self._native_op(label, node.span, self.bridge.call_member, host, node.method, host_args)

    async def _evaluate_index(self, node: IndexExpression, env: Environment):
        target = await self._evaluate(node.target, env)
        index = await self._evaluate(node.index, env)

        if isinstance(target, (list, str)):
            return target[self._list_index(index, len(target), node.span)]
        if isinstance(target, NativeValue):
            return self._native_op(self._label(node.target), node.span, self.bridge.get_item, target.value, self.bridge.to_host(index))
        raise BaikoRuntimeError(ErrorCode.NOT_INDEXABLE, span=node.span, provided=describe_value(target))

    # --- Helpers ---

    def _require_non_null(self, op: str, value: Any, span: Optional[Span]):
        if value is None:
            raise BaikoRuntimeError(ErrorCode.NULL_OPERAND, span=span, op=op)

    def _list_index(self, index: Any, length: int, span: Optional[Span]) -> int:
        if not is_number(index):
            raise BaikoRuntimeError(ErrorCode.INVALID_INDEX, span=span, provided=describe_value(index))
        if isinstance(index, float) and not index.is_integer():
            raise BaikoRuntimeError(ErrorCode.INVALID_INDEX, span=span, provided=format_number(index))
        position = int(index)
        if not 0 <= position < length:
            raise BaikoRuntimeError(ErrorCode.INDEX_OUT_OF_RANGE, span=span, index=position, length=length)
        return position

    def _native_target(self, target_node, member: str, target: Any, span: Optional[Span]) -> Any:
        if not isinstance(target, NativeValue):
            raise BaikoRuntimeError(
                ErrorCode.MEMBER_ON_NON_NATIVE,
                span=span,
                member=member,
                name=self._label(target_node),
                provided=describe_value(target),
            )
        return target.value

    def _lookup_member(self, target_node, member: str, host: Any, span: Optional[Span]) -> Any:
        try:
            return self.bridge.get_member(host, member)
        except (AttributeError, KeyError) as e:
            raise BaikoRuntimeError(ErrorCode.UNKNOWN_NATIVE_MEMBER, span=span, member=member, name=self._label(target_node)) from e

    def _native_op(self, label: str, span: Optional[Span], operation, *args) -> Any:
        """Runs a host operation, wrapping its result and translating host failures."""
        try:
            result = operation(*args)
        except BaikoError:
            raise
        except Exception as e:
            raise BaikoRuntimeError(ErrorCode.NATIVE_CALL_FAILED, span=span, name=label, details=str(e) or type(e).__name__) from e
        return self.bridge.from_host(result)

    def _label(self, node) -> str:
        """A short source-like name for an expression, used in error messages."""
        if isinstance(node, Identifier):
            return node.name
        if isinstance(node, CallExpression):
            return f"{node.callee}()"
        if isinstance(node, MemberExpression):
            return f"{self._label(node.target)}.{node.member}"
        if isinstance(node, MemberCallExpression):
            return f"{self._label(node.target)}.{node.method}()"
        if isinstance(node, IndexExpression):
            return f"{self._label(node.target)}[]"
        return "sanda"
