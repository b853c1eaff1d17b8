"""
Defines the formal data structures (contracts) for the Abstract Syntax Tree (AST)
produced by the parser stage and consumed by the interpreter and the generator.

Every node is a frozen pydantic model carrying a `type` discriminant and an
optional `Span` locating it in the source for precise error reporting.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# --- Core Data Structures ---


class Span(BaseModel):
    """Represents a location in the source code for precise error reporting."""

    model_config = ConfigDict(frozen=True)

    s_line: int
    s_col: int
    e_line: int
    e_col: int


class ASTNode(BaseModel):
    """A base class for all AST nodes."""

    model_config = ConfigDict(frozen=True)

    span: Optional[Span] = None


# --- Type Annotations ---


class BaseType(str, Enum):
    NUMBER = "Isa"
    STRING = "Soratra"
    BOOLEAN = "Marina"


class OptionalType(BaseModel):
    """Mety(T): the value may be tsisy or a T."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["Mety"] = "Mety"
    inner: "TypeAnnotation"


class ListType(BaseModel):
    """Lisitra(T): a list whose elements are T."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["Lisitra"] = "Lisitra"
    inner: "TypeAnnotation"


TypeAnnotation = Union[BaseType, OptionalType, ListType]


def describe_type(annotation: TypeAnnotation) -> str:
    """Renders an annotation the way it is written in source, e.g. 'Mety(Lisitra(Isa))'."""
    if isinstance(annotation, OptionalType):
        return f"Mety({describe_type(annotation.inner)})"
    if isinstance(annotation, ListType):
        return f"Lisitra({describe_type(annotation.inner)})"
    return annotation.value


# --- Literals and Identifiers ---


class NumericLiteral(ASTNode):
    type: Literal["NumericLiteral"] = "NumericLiteral"
    value: Union[int, float]


class StringLiteral(ASTNode):
    type: Literal["StringLiteral"] = "StringLiteral"
    value: str


class BooleanLiteral(ASTNode):
    type: Literal["BooleanLiteral"] = "BooleanLiteral"
    value: bool


class NullLiteral(ASTNode):
    type: Literal["NullLiteral"] = "NullLiteral"


class Identifier(ASTNode):
    type: Literal["Identifier"] = "Identifier"
    name: str


class ListLiteral(ASTNode):
    type: Literal["ListLiteral"] = "ListLiteral"
    elements: List["Expression"]


# --- Expressions ---


class AssignmentExpression(ASTNode):
    type: Literal["AssignmentExpression"] = "AssignmentExpression"
    name: str
    value: "Expression"


class BinaryExpression(ASTNode):
    type: Literal["BinaryExpression"] = "BinaryExpression"
    operator: str
    left: "Expression"
    right: "Expression"


class UnaryExpression(ASTNode):
    type: Literal["UnaryExpression"] = "UnaryExpression"
    operator: str
    operand: "Expression"


class AwaitExpression(ASTNode):
    type: Literal["AwaitExpression"] = "AwaitExpression"
    argument: "Expression"


class CallExpression(ASTNode):
    type: Literal["CallExpression"] = "CallExpression"
    callee: str
    args: List["Expression"]


class MemberExpression(ASTNode):
    type: Literal["MemberExpression"] = "MemberExpression"
    target: "Expression"
    member: str


class MemberCallExpression(ASTNode):
    type: Literal["MemberCallExpression"] = "MemberCallExpression"
    target: "Expression"
    method: str
    args: List["Expression"]


class IndexExpression(ASTNode):
    type: Literal["IndexExpression"] = "IndexExpression"
    target: "Expression"
    index: "Expression"


Expression = Annotated[
    Union[
        NumericLiteral,
        StringLiteral,
        BooleanLiteral,
        NullLiteral,
        Identifier,
        ListLiteral,
        AssignmentExpression,
        BinaryExpression,
        UnaryExpression,
        AwaitExpression,
        CallExpression,
        MemberExpression,
        MemberCallExpression,
        IndexExpression,
    ],
    Field(discriminator="type"),
]


# --- Statements ---


class Parameter(ASTNode):
    type: Literal["Parameter"] = "Parameter"
    name: str
    param_type: BaseType


class FunctionDeclaration(ASTNode):
    type: Literal["FunctionDeclaration"] = "FunctionDeclaration"
    name: str
    params: List[Parameter]
    return_type: Optional[TypeAnnotation] = None
    body: List["Statement"]
    is_async: bool = False
    exported: bool = False


class VariableDeclaration(ASTNode):
    type: Literal["VariableDeclaration"] = "VariableDeclaration"
    name: str
    var_type: TypeAnnotation
    value: Optional["Expression"] = None
    exported: bool = False


class ImportStatement(ASTNode):
    type: Literal["ImportStatement"] = "ImportStatement"
    path: str


class IfStatement(ASTNode):
    type: Literal["IfStatement"] = "IfStatement"
    condition: "Expression"
    consequent: List["Statement"]
    alternate: Optional[List["Statement"]] = None


class WhileStatement(ASTNode):
    type: Literal["WhileStatement"] = "WhileStatement"
    condition: "Expression"
    body: List["Statement"]


class ReturnStatement(ASTNode):
    type: Literal["ReturnStatement"] = "ReturnStatement"
    value: Optional["Expression"] = None


class PrintStatement(ASTNode):
    type: Literal["PrintStatement"] = "PrintStatement"
    value: "Expression"


class ExpressionStatement(ASTNode):
    type: Literal["ExpressionStatement"] = "ExpressionStatement"
    expression: "Expression"


class IndexAssignmentStatement(ASTNode):
    type: Literal["IndexAssignmentStatement"] = "IndexAssignmentStatement"
    target: str
    index: "Expression"
    value: "Expression"


Statement = Annotated[
    Union[
        FunctionDeclaration,
        VariableDeclaration,
        ImportStatement,
        IfStatement,
        WhileStatement,
        ReturnStatement,
        PrintStatement,
        ExpressionStatement,
        IndexAssignmentStatement,
    ],
    Field(discriminator="type"),
]


# --- Top-level Structure ---


class Program(ASTNode):
    """The root of the AST, representing a single source file."""

    type: Literal["Program"] = "Program"
    body: List[Statement]


# Forward references ("Expression", "Statement", "TypeAnnotation") resolve now
# that every member of the unions exists.
for _model in (
    OptionalType,
    ListType,
    ListLiteral,
    AssignmentExpression,
    BinaryExpression,
    UnaryExpression,
    AwaitExpression,
    CallExpression,
    MemberExpression,
    MemberCallExpression,
    IndexExpression,
    FunctionDeclaration,
    VariableDeclaration,
    IfStatement,
    WhileStatement,
    ReturnStatement,
    PrintStatement,
    ExpressionStatement,
    IndexAssignmentStatement,
    Program,
):
    _model.model_rebuild()


# A generic type hint for any node in the AST
Node = Union[ASTNode, Program]
