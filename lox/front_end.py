"""
Recursive-descent parser with one token of look-ahead.
Each precedence level gets its own method, lowest first.

A syntax error raises LoxParseError, which the declaration loop catches.
The parser then discards tokens up to a likely statement boundary and
carries on, so a single pass can report several independent problems.
"""
from typing import Callable, Optional
from boozetools.parsing.interface import ParseError
from .ontology import Token, TokenType, synthetic
from .diagnostics import Report
from .scanner import scan_text
from . import syntax

T = TokenType
MAX_ARGUMENTS = 255

# Tokens which begin a statement. After an error, parsing resumes before one of these.
STATEMENT_STARTERS = frozenset([T.CLASS, T.FUN, T.VAR, T.FOR, T.IF, T.WHILE, T.PRINT, T.RETURN])

EQUALITY = (T.BANG_EQUAL, T.EQUAL_EQUAL)
COMPARISON = (T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL)
ADDITIVE = (T.MINUS, T.PLUS)
MULTIPLICATIVE = (T.SLASH, T.STAR)

LITERAL_KEYWORDS = {T.FALSE: False, T.TRUE: True, T.NIL: None}

class LoxParseError(ParseError):
	pass

class Parser:
	def __init__(self, tokens:list[Token], report:Report):
		assert tokens and tokens[-1].kind is T.EOF
		self._tokens = tokens
		self._report = report
		self._current = 0

	def parse(self) -> list[syntax.Stmt]:
		statements = []
		try:
			while not self._at_end():
				stmt = self._declaration()
				if stmt is not None: statements.append(stmt)
		except RecursionError:
			self._report.too_deep(self._peek())
		return statements

	# Token-stream primitives

	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]
	def _at_end(self): return self._peek().kind is T.EOF
	def _check(self, kind:TokenType): return self._peek().kind is kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _match(self, *kinds:TokenType) -> bool:
		if self._peek().kind in kinds:
			self._advance()
			return True
		return False

	def _consume(self, kind:TokenType, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.parse_error(token, message)
		return LoxParseError(token, message)

	def _synchronize(self):
		self._advance()
		while not self._at_end():
			if self._previous().kind is T.SEMICOLON: return
			if self._peek().kind in STATEMENT_STARTERS: return
			self._advance()

	# Declarations and statements

	def _declaration(self) -> Optional[syntax.Stmt]:
		try:
			if self._match(T.CLASS): return self._class_declaration()
			if self._match(T.FUN): return self._function("function")
			if self._match(T.VAR): return self._var_declaration()
			return self._statement()
		except LoxParseError:
			self._synchronize()
			return None

	def _class_declaration(self) -> syntax.Class:
		name = self._consume(T.IDENTIFIER, "Expect class name.")
		superclass = None
		if self._match(T.LESS):
			superclass = syntax.Variable(self._consume(T.IDENTIFIER, "Expect superclass name."))
		self._consume(T.LEFT_BRACE, "Expect '{' before class body.")
		methods = []
		while not self._check(T.RIGHT_BRACE) and not self._at_end():
			methods.append(self._function("method"))
		self._consume(T.RIGHT_BRACE, "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)

	def _function(self, kind:str) -> syntax.Function:
		name = self._consume(T.IDENTIFIER, "Expect %s name." % kind)
		self._consume(T.LEFT_PAREN, "Expect '(' after %s name." % kind)
		params = []
		if not self._check(T.RIGHT_PAREN):
			while True:
				if len(params) >= MAX_ARGUMENTS:
					self._report.too_many(self._peek(), "parameters")
				params.append(self._consume(T.IDENTIFIER, "Expect parameter name."))
				if not self._match(T.COMMA): break
		self._consume(T.RIGHT_PAREN, "Expect ')' after parameters.")
		self._consume(T.LEFT_BRACE, "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self._block())

	def _var_declaration(self) -> syntax.Var:
		name = self._consume(T.IDENTIFIER, "Expect variable name.")
		initializer = self._expression() if self._match(T.EQUAL) else None
		self._consume(T.SEMICOLON, "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)

	def _statement(self) -> syntax.Stmt:
		if self._match(T.FOR): return self._for_statement()
		if self._match(T.IF): return self._if_statement()
		if self._match(T.PRINT): return self._print_statement()
		if self._match(T.RETURN): return self._return_statement()
		if self._match(T.WHILE): return self._while_statement()
		if self._match(T.LEFT_BRACE):
			opening = self._previous()
			return syntax.Block(opening, self._block())
		return self._expression_statement()

	def _for_statement(self) -> syntax.Stmt:
		"""
		There is no for-loop node. The loop becomes a while-loop here,
		wrapped in a block if there's an initializer to keep in scope.
		"""
		keyword = self._previous()
		self._consume(T.LEFT_PAREN, "Expect '(' after 'for'.")
		if self._match(T.SEMICOLON): initializer = None
		elif self._match(T.VAR): initializer = self._var_declaration()
		else: initializer = self._expression_statement()

		condition = None if self._check(T.SEMICOLON) else self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after loop condition.")
		increment = None if self._check(T.RIGHT_PAREN) else self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")
		body = self._statement()

		if increment is not None:
			body = syntax.Block(keyword, [body, syntax.Expression(increment)])
		if condition is None:
			condition = syntax.Literal(True, synthetic(T.TRUE, "true", keyword))
		body = syntax.While(keyword, condition, body)
		if initializer is not None:
			body = syntax.Block(keyword, [initializer, body])
		return body

	def _if_statement(self) -> syntax.If:
		keyword = self._previous()
		self._consume(T.LEFT_PAREN, "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after if condition.")
		then_branch = self._statement()
		else_branch = self._statement() if self._match(T.ELSE) else None
		return syntax.If(keyword, condition, then_branch, else_branch)

	def _print_statement(self) -> syntax.Print:
		keyword = self._previous()
		value = self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after value.")
		return syntax.Print(keyword, value)

	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(T.SEMICOLON) else self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after return value.")
		return syntax.Return(keyword, value)

	def _while_statement(self) -> syntax.While:
		keyword = self._previous()
		self._consume(T.LEFT_PAREN, "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after condition.")
		return syntax.While(keyword, condition, self._statement())

	def _block(self) -> list[syntax.Stmt]:
		statements = []
		while not self._check(T.RIGHT_BRACE) and not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		self._consume(T.RIGHT_BRACE, "Expect '}' after block.")
		return statements

	def _expression_statement(self) -> syntax.Expression:
		expr = self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after expression.")
		return syntax.Expression(expr)

	# Expressions, by increasing precedence

	def _expression(self) -> syntax.Expr:
		return self._assignment()

	def _assignment(self) -> syntax.Expr:
		expr = self._or()
		if self._match(T.EQUAL):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.subject, expr.name, value)
			# Not worth a re-synchronization: The parser is not confused.
			self._report.invalid_assignment_target(equals, expr)
		return expr

	def _or(self) -> syntax.Expr:
		return self._left_associative(self._and, (T.OR,), syntax.Logical)

	def _and(self) -> syntax.Expr:
		return self._left_associative(self._equality, (T.AND,), syntax.Logical)

	def _equality(self) -> syntax.Expr:
		return self._left_associative(self._comparison, EQUALITY)

	def _comparison(self) -> syntax.Expr:
		return self._left_associative(self._term, COMPARISON)

	def _term(self) -> syntax.Expr:
		return self._left_associative(self._factor, ADDITIVE)

	def _factor(self) -> syntax.Expr:
		return self._left_associative(self._unary, MULTIPLICATIVE)

	def _left_associative(self, operand:Callable[[], syntax.Expr], operators, node=syntax.Binary) -> syntax.Expr:
		expr = operand()
		while self._match(*operators):
			op = self._previous()
			expr = node(expr, op, operand())
		return expr

	def _unary(self) -> syntax.Expr:
		if self._match(T.BANG, T.MINUS):
			op = self._previous()
			return syntax.Unary(op, self._unary())
		return self._call()

	def _call(self) -> syntax.Expr:
		expr = self._primary()
		while True:
			if self._match(T.LEFT_PAREN):
				expr = self._finish_call(expr)
			elif self._match(T.DOT):
				name = self._consume(T.IDENTIFIER, "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr

	def _finish_call(self, callee:syntax.Expr) -> syntax.Call:
		arguments = []
		if not self._check(T.RIGHT_PAREN):
			while True:
				if len(arguments) >= MAX_ARGUMENTS:
					self._report.too_many(self._peek(), "arguments")
				arguments.append(self._expression())
				if not self._match(T.COMMA): break
		paren = self._consume(T.RIGHT_PAREN, "Expect ')' after arguments.")
		return syntax.Call(callee, paren, arguments)

	def _primary(self) -> syntax.Expr:
		token = self._peek()
		if token.kind in LITERAL_KEYWORDS:
			self._advance()
			return syntax.Literal(LITERAL_KEYWORDS[token.kind], token)
		if self._match(T.NUMBER, T.STRING):
			return syntax.Literal(token.literal, token)
		if self._match(T.SUPER):
			self._consume(T.DOT, "Expect '.' after 'super'.")
			method = self._consume(T.IDENTIFIER, "Expect superclass method name.")
			return syntax.Super(token, method)
		if self._match(T.THIS):
			return syntax.This(token)
		if self._match(T.IDENTIFIER):
			return syntax.Variable(token)
		if self._match(T.LEFT_PAREN):
			expr = self._expression()
			closing = self._consume(T.RIGHT_PAREN, "Expect ')' after expression.")
			return syntax.Grouping(token, expr, closing)
		raise self._error(token, "Expect expression.")

def parse_tokens(tokens:list[Token], report:Report) -> list[syntax.Stmt]:
	statements = Parser(tokens, report).parse()
	report.info("Parsed", len(statements), "top-level statements")
	return statements

def parse_text(text:str, report:Report) -> list[syntax.Stmt]:
	"""
	Scan and parse in one go. The report says whether the result can be trusted:
	After any issue, the statement list is only as complete as recovery allowed.
	"""
	report.set_source(text)
	return parse_tokens(scan_text(text, report), report)
