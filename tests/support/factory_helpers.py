from typing import List, Optional

from baiko.parser.core.classes import *


def get_span(s_line: int = 1, s_col: int = 1, e_line: int = 1, e_col: int = 1):
    return Span(s_line=s_line, s_col=s_col, e_line=e_line, e_col=e_col)


def get_identifier(name: str):
    return Identifier(span=get_span(), name=name)


def get_number_literal(value):
    return NumericLiteral(span=get_span(), value=value)


def get_string_literal(value: str):
    return StringLiteral(span=get_span(), value=value)


def get_boolean_literal(value: bool):
    return BooleanLiteral(span=get_span(), value=value)


def get_null_literal():
    return NullLiteral(span=get_span())


def get_list_literal(elements: List[Expression]):
    return ListLiteral(span=get_span(), elements=elements)


def get_binary(operator: str, left, right):
    return BinaryExpression(span=get_span(), operator=operator, left=left, right=right)


def get_unary(operand, operator: str = "tsy"):
    return UnaryExpression(span=get_span(), operator=operator, operand=operand)


def get_call(callee: str, args: List[Expression]):
    return CallExpression(span=get_span(), callee=callee, args=args)


def get_member(target, member: str):
    return MemberExpression(span=get_span(), target=target, member=member)


def get_member_call(target, method: str, args: List[Expression]):
    return MemberCallExpression(span=get_span(), target=target, method=method, args=args)


def get_index(target, index):
    return IndexExpression(span=get_span(), target=target, index=index)


def get_param(name: str, param_type: BaseType):
    return Parameter(span=get_span(), name=name, param_type=param_type)


def get_variable(name: str, var_type, value=None, exported: bool = False):
    return VariableDeclaration(span=get_span(), name=name, var_type=var_type, value=value, exported=exported)


def get_function(name: str, params: List[Parameter], body: list, return_type=None, is_async: bool = False, exported: bool = False):
    return FunctionDeclaration(
        span=get_span(),
        name=name,
        params=params,
        return_type=return_type,
        body=body,
        is_async=is_async,
        exported=exported,
    )


def get_expression_statement(expression):
    return ExpressionStatement(span=get_span(), expression=expression)


def get_print(value):
    return PrintStatement(span=get_span(), value=value)


def get_return(value: Optional[Expression] = None):
    return ReturnStatement(span=get_span(), value=value)
