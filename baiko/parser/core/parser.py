from typing import List, Optional

from ...config import DEFAULT_CONFIG, LanguageConfig
from ...exceptions import BaikoSyntaxError, ErrorCode
from ...lexer.lexer import Lexer
from ...lexer.tokens import Token, TokenKind
from ...utils import raised_recursion_limit
from .classes import *

K = TokenKind

_BASE_TYPES = {K.ISA: BaseType.NUMBER, K.SORATRA: BaseType.STRING, K.MARINA: BaseType.BOOLEAN}


class Parser:
    """
    Recursive-descent parser turning a token list into a Program AST.

    One token of lookahead drives every decision, except the statement-level
    `name [ index ] =` form, which is tried speculatively and abandoned by
    restoring the cursor when the tokens turn out to be an index read.
    Any grammar violation raises a BaikoSyntaxError and aborts the parse.
    """

    def __init__(self, tokens: List[Token], config: LanguageConfig = DEFAULT_CONFIG):
        self.tokens = tokens
        self.config = config
        self.pos = 0

    def parse(self) -> Program:
        start = self._peek()
        body = []
        with raised_recursion_limit(self.config.recursion_limit):
            try:
                while not self._is_eof():
                    body.append(self._parse_statement())
            except RecursionError as e:
                tok = self._peek()
                raise BaikoSyntaxError(ErrorCode.SYNTAX_NESTING_TOO_DEEP, line=tok.line, column=tok.column, found=self._describe(tok)) from e
        return Program(body=body, span=self._span_from(start))

    # --- Statements ---

    def _parse_statement(self):
        if self._check(K.AVOAKA):
            return self._parse_export()
        if self._check(K.AVERENO) and self._peek_kind(1) is K.RAHA:
            return self._parse_while_statement()
        if self._starts_variable_declaration():
            return self._parse_variable_declaration()
        if self._check(K.IDENTIFIER) and self._peek_kind(1) is K.LEFT_BRACKET:
            statement = self._try_parse_index_assignment()
            if statement is not None:
                return statement

        kind = self._peek().type
        if kind is K.ASA or kind is K.ANDRASANA:
            return self._parse_function_declaration()
        if kind is K.RAHA:
            return self._parse_if_statement()
        if kind is K.MAMOAKA:
            return self._parse_return_statement()
        if kind is K.ASEHOY:
            return self._parse_print_statement()
        if kind is K.AMPIDIRO:
            return self._parse_import_statement()
        return self._parse_expression_statement()

    def _starts_variable_declaration(self) -> bool:
        return self._check(K.IDENTIFIER) and self._peek_kind(1) is K.COLON and self._peek_kind(2) in self.config.type_start

    def _parse_export(self):
        """avoaka (asa ... | andrasana asa ... | name: Type = value;)"""
        avoaka = self._advance()
        if self._check(K.ASA) or self._check(K.ANDRASANA):
            return self._parse_function_declaration(exported=True, start=avoaka)
        if self._starts_variable_declaration():
            return self._parse_variable_declaration(exported=True, start=avoaka)
        raise BaikoSyntaxError(ErrorCode.SYNTAX_INVALID_EXPORT, line=self._peek().line, column=self._peek().column, found=self._describe(self._peek()))

    def _parse_function_declaration(self, exported: bool = False, start: Optional[Token] = None) -> FunctionDeclaration:
        """[andrasana] asa name(param: Type, ...)[: ReturnType] dia ... farany"""
        start = start or self._peek()
        is_async = self._match(K.ANDRASANA)
        self._expect(K.ASA)
        name = self._expect(K.IDENTIFIER).value
        self._expect(K.LEFT_PAREN)
        params = self._parse_params()
        self._expect(K.RIGHT_PAREN)

        return_type = None
        if self._match(K.COLON):
            return_type = self._parse_type()

        self._expect(K.DIA)
        body = self._parse_block()
        self._expect(K.FARANY)

        return FunctionDeclaration(
            name=name,
            params=params,
            return_type=return_type,
            body=body,
            is_async=is_async,
            exported=exported,
            span=self._span_from(start),
        )

    def _parse_params(self) -> List[Parameter]:
        params: List[Parameter] = []
        if self._check(K.RIGHT_PAREN):
            return params

        while True:
            name_tok = self._expect(K.IDENTIFIER)
            self._expect(K.COLON)
            param_type = self._parse_base_type()
            params.append(Parameter(name=name_tok.value, param_type=param_type, span=self._span_from(name_tok)))
            if not self._match(K.COMMA):
                return params

    def _parse_variable_declaration(self, exported: bool = False, start: Optional[Token] = None) -> VariableDeclaration:
        """name: Type [= value];  (the initializer is mandatory unless Type is Mety(...))"""
        name_tok = self._expect(K.IDENTIFIER)
        start = start or name_tok
        self._expect(K.COLON)
        var_type = self._parse_type()

        value = None
        if self._match(K.EQUAL):
            value = self._parse_expression()
        elif not isinstance(var_type, OptionalType):
            raise BaikoSyntaxError(
                ErrorCode.SYNTAX_MISSING_INITIALIZER,
                line=name_tok.line,
                column=name_tok.column,
                name=name_tok.value,
                type_name=describe_type(var_type),
            )

        self._expect(K.SEMICOLON)
        return VariableDeclaration(name=name_tok.value, var_type=var_type, value=value, exported=exported, span=self._span_from(start))

    def _parse_type(self) -> TypeAnnotation:
        tok = self._peek()
        if tok.type is K.METY:
            self._advance()
            self._expect(K.LEFT_PAREN)
            if self._check(K.LISITRA):
                inner = self._parse_type()
            else:
                inner = self._parse_base_type(allowed="Isa, Soratra, Marina, Lisitra")
            self._expect(K.RIGHT_PAREN)
            return OptionalType(inner=inner)
        if tok.type is K.LISITRA:
            self._advance()
            self._expect(K.LEFT_PAREN)
            inner = self._parse_type()
            self._expect(K.RIGHT_PAREN)
            return ListType(inner=inner)
        return self._parse_base_type(allowed="Isa, Soratra, Marina, Mety, Lisitra")

    def _parse_base_type(self, allowed: str = "Isa, Soratra, Marina") -> BaseType:
        tok = self._peek()
        if tok.type not in self.config.base_types:
            raise BaikoSyntaxError(ErrorCode.SYNTAX_EXPECTED_TYPE, line=tok.line, column=tok.column, types=allowed, found=self._describe(tok))
        self._advance()
        return _BASE_TYPES[tok.type]

    def _parse_if_statement(self) -> IfStatement:
        """raha cond dia ... [ankoatra dia ...] farany"""
        start = self._expect(K.RAHA)
        condition = self._parse_expression()
        self._expect(K.DIA)
        consequent = self._parse_block()

        alternate = None
        if self._match(K.ANKOATRA):
            self._expect(K.DIA)
            alternate = self._parse_block()

        self._expect(K.FARANY)
        return IfStatement(condition=condition, consequent=consequent, alternate=alternate, span=self._span_from(start))

    def _parse_while_statement(self) -> WhileStatement:
        """avereno raha cond dia ... farany"""
        start = self._expect(K.AVERENO)
        self._expect(K.RAHA)
        condition = self._parse_expression()
        self._expect(K.DIA)
        body = self._parse_block()
        self._expect(K.FARANY)
        return WhileStatement(condition=condition, body=body, span=self._span_from(start))

    def _parse_return_statement(self) -> ReturnStatement:
        start = self._expect(K.MAMOAKA)
        value = None
        if not self._check(K.SEMICOLON):
            value = self._parse_expression()
        self._expect(K.SEMICOLON)
        return ReturnStatement(value=value, span=self._span_from(start))

    def _parse_print_statement(self) -> PrintStatement:
        start = self._expect(K.ASEHOY)
        value = self._parse_expression()
        self._expect(K.SEMICOLON)
        return PrintStatement(value=value, span=self._span_from(start))

    def _parse_import_statement(self) -> ImportStatement:
        start = self._expect(K.AMPIDIRO)
        path = self._expect(K.STRING).value
        self._expect(K.SEMICOLON)
        return ImportStatement(path=path, span=self._span_from(start))

    def _try_parse_index_assignment(self) -> Optional[IndexAssignmentStatement]:
        """Speculatively parses `name[index] = value;`, restoring the cursor on failure."""
        saved = self.pos
        try:
            name_tok = self._expect(K.IDENTIFIER)
            self._expect(K.LEFT_BRACKET)
            index = self._parse_expression()
            self._expect(K.RIGHT_BRACKET)
        except BaikoSyntaxError:
            self.pos = saved
            return None

        if not self._match(K.EQUAL):
            self.pos = saved
            return None

        value = self._parse_expression()
        self._expect(K.SEMICOLON)
        return IndexAssignmentStatement(target=name_tok.value, index=index, value=value, span=self._span_from(name_tok))

    def _parse_expression_statement(self) -> ExpressionStatement:
        start = self._peek()
        expression = self._parse_expression()
        self._expect(K.SEMICOLON)
        return ExpressionStatement(expression=expression, span=self._span_from(start))

    def _parse_block(self) -> list:
        """Parses statements until a block-closing token is reached."""
        statements = []
        while self._peek().type not in self.config.block_end:
            statements.append(self._parse_statement())
        return statements

    # --- Expressions ---

    def _parse_expression(self):
        return self._parse_assignment()

    def _parse_assignment(self):
        """name = value, only when the token after the name is a single '='."""
        if self._check(K.IDENTIFIER) and self._peek_kind(1) is K.EQUAL:
            name_tok = self._advance()
            self._advance()
            value = self._parse_assignment()
            return AssignmentExpression(name=name_tok.value, value=value, span=self._span_from(name_tok))
        return self._parse_logical_or()

    def _parse_logical_or(self):
        start = self._peek()
        left = self._parse_logical_and()
        while self._check(K.OR):
            operator = self._advance().value
            right = self._parse_logical_and()
            left = BinaryExpression(operator=operator, left=left, right=right, span=self._span_from(start))
        return left

    def _parse_logical_and(self):
        start = self._peek()
        left = self._parse_comparison()
        while self._check(K.AND):
            operator = self._advance().value
            right = self._parse_comparison()
            left = BinaryExpression(operator=operator, left=left, right=right, span=self._span_from(start))
        return left

    def _parse_comparison(self):
        return self._parse_binary_level(self.config.comparison_ops, self._parse_additive)

    def _parse_additive(self):
        return self._parse_binary_level(self.config.additive_ops, self._parse_multiplicative)

    def _parse_multiplicative(self):
        return self._parse_binary_level(self.config.multiplicative_ops, self._parse_unary)

    def _parse_binary_level(self, operators, parse_operand):
        """Helper to build a left-associative tree for one precedence level."""
        start = self._peek()
        left = parse_operand()
        while self._peek().type in operators:
            operator = self._advance().value
            right = parse_operand()
            left = BinaryExpression(operator=operator, left=left, right=right, span=self._span_from(start))
        return left

    def _parse_unary(self):
        start = self._peek()
        if self._match(K.NOT):
            operand = self._parse_unary()
            return UnaryExpression(operator=self.config.not_word, operand=operand, span=self._span_from(start))
        if self._match(K.MINUS):
            # -x is rewritten as 0 - x
            operand = self._parse_unary()
            zero = NumericLiteral(value=0, span=self._span_from(start))
            return BinaryExpression(operator="-", left=zero, right=operand, span=self._span_from(start))
        if self._match(K.MIANDRY):
            argument = self._parse_unary()
            return AwaitExpression(argument=argument, span=self._span_from(start))
        return self._parse_primary()

    def _parse_primary(self):
        tok = self._peek()

        if tok.type is K.NUMBER:
            self._advance()
            value = float(tok.value) if "." in tok.value else int(tok.value)
            return NumericLiteral(value=value, span=self._span_from(tok))

        if tok.type is K.STRING:
            self._advance()
            return StringLiteral(value=tok.value, span=self._span_from(tok))

        if tok.type is K.TRUE or tok.type is K.FALSE:
            self._advance()
            return BooleanLiteral(value=tok.type is K.TRUE, span=self._span_from(tok))

        if tok.type is K.TSISY:
            self._advance()
            return NullLiteral(span=self._span_from(tok))

        if tok.type is K.IDENTIFIER:
            self._advance()
            if self._match(K.LEFT_PAREN):
                args = self._parse_args()
                self._expect(K.RIGHT_PAREN)
                node = CallExpression(callee=tok.value, args=args, span=self._span_from(tok))
            else:
                node = Identifier(name=tok.value, span=self._span_from(tok))
            return self._parse_postfix(node, tok)

        if tok.type is K.LEFT_BRACKET:
            return self._parse_postfix(self._parse_list_literal(), tok)

        if tok.type is K.LEFT_PAREN:
            self._advance()
            expression = self._parse_expression()
            self._expect(K.RIGHT_PAREN)
            return expression

        raise BaikoSyntaxError(ErrorCode.SYNTAX_EXPECTED_EXPRESSION, line=tok.line, column=tok.column, found=self._describe(tok))

    def _parse_list_literal(self) -> ListLiteral:
        start = self._expect(K.LEFT_BRACKET)
        elements = []
        if not self._check(K.RIGHT_BRACKET):
            elements.append(self._parse_expression())
            while self._match(K.COMMA):
                elements.append(self._parse_expression())
        self._expect(K.RIGHT_BRACKET)
        return ListLiteral(elements=elements, span=self._span_from(start))

    def _parse_postfix(self, node, start: Token):
        """Composes `.name`, `.name(args)` and `[index]` suffixes left to right."""
        while True:
            if self._match(K.DOT):
                member = self._expect(K.IDENTIFIER).value
                if self._match(K.LEFT_PAREN):
                    args = self._parse_args()
                    self._expect(K.RIGHT_PAREN)
                    node = MemberCallExpression(target=node, method=member, args=args, span=self._span_from(start))
                else:
                    node = MemberExpression(target=node, member=member, span=self._span_from(start))
            elif self._match(K.LEFT_BRACKET):
                index = self._parse_expression()
                self._expect(K.RIGHT_BRACKET)
                node = IndexExpression(target=node, index=index, span=self._span_from(start))
            else:
                return node

    def _parse_args(self) -> list:
        args = []
        if self._check(K.RIGHT_PAREN):
            return args
        args.append(self._parse_expression())
        while self._match(K.COMMA):
            args.append(self._parse_expression())
        return args

    # --- Helpers ---

    def _span_from(self, start: Token) -> Span:
        """Builds a span from `start` to the end of the last consumed token."""
        last = self.tokens[self.pos - 1] if self.pos > 0 else start
        width = len(last.value) + 2 if last.type is K.STRING else len(last.value)
        return Span(s_line=start.line, s_col=start.column, e_line=last.line, e_col=last.column + width)

    def _describe(self, tok: Token) -> str:
        if tok.type is K.EOF:
            return self.config.friendly(K.EOF)
        if tok.type is K.STRING:
            return f'"{tok.value}"'
        return f"'{tok.value}'"

    def _match(self, kind: TokenKind) -> bool:
        if self._check(kind):
            self._advance()
            return True
        return False

    def _expect(self, kind: TokenKind) -> Token:
        if not self._check(kind):
            tok = self._peek()
            raise BaikoSyntaxError(
                ErrorCode.SYNTAX_UNEXPECTED_TOKEN,
                line=tok.line,
                column=tok.column,
                expected=self.config.friendly(kind),
                found=self._describe(tok),
            )
        return self._advance()

    def _check(self, kind: TokenKind) -> bool:
        return self._peek().type is kind

    def _advance(self) -> Token:
        tok = self._peek()
        if not self._is_eof():
            self.pos += 1
        return tok

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _peek_kind(self, offset: int) -> Optional[TokenKind]:
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index].type
        return None

    def _is_eof(self) -> bool:
        return self._peek().type is K.EOF


def parse_baiko(script_content: str, config: LanguageConfig = DEFAULT_CONFIG) -> Program:
    """Lexes and parses the script content into a Program AST."""
    tokens = Lexer(script_content, config).tokenize()
    return Parser(tokens, config).parse()
