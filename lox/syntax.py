"""
The set of parse-nodes in simple form.
The parser calls these constructors with subordinate parts already built.
Nodes carry no behavior beyond knowing where they sit in the source;
each later pass has its own dispatch table over the closed sets
EXPRESSIONS and STATEMENTS at the bottom of this module.

Expression nodes hash by identity, which is how the resolver's
side-table tells apart two occurrences of the same name.
"""
from typing import Any, Optional, Sequence
from .ontology import Phrase, Token

class Expr(Phrase):
	pass

class Stmt(Phrase):
	pass

class Literal(Expr):
	def __init__(self, value: Any, token: Token):
		self.value, self._token = value, token
	def __repr__(self): return "<Literal %r>" % (self.value,)
	def left(self): return self._token
	def right(self): return self._token

class Grouping(Expr):
	def __init__(self, opening: Token, expression: Expr, closing: Token):
		self._opening, self.expression, self._closing = opening, expression, closing
	def left(self): return self._opening
	def right(self): return self._closing

class Unary(Expr):
	def __init__(self, op: Token, right: Expr):
		self.op, self.operand = op, right
	def left(self): return self.op
	def right(self): return self.operand.right()

class Binary(Expr):
	def __init__(self, lhs: Expr, op: Token, rhs: Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def left(self): return self.lhs.left()
	def right(self): return self.rhs.right()

class Logical(Binary):
	# Same shape, different evaluation: The right side may never run.
	pass

class Variable(Expr):
	def __init__(self, name: Token): self.name = name
	def __repr__(self): return "<ref:%s>" % self.name.lexeme
	def left(self): return self.name
	def right(self): return self.name

class Assign(Expr):
	def __init__(self, name: Token, value: Expr):
		self.name, self.value = name, value
	def left(self): return self.name
	def right(self): return self.value.right()

class Call(Expr):
	def __init__(self, callee: Expr, paren: Token, arguments: Sequence[Expr]):
		# paren is the closing parenthesis: Run-time errors point there.
		self.callee, self.paren, self.arguments = callee, paren, arguments
	def left(self): return self.callee.left()
	def right(self): return self.paren

class Get(Expr):
	def __init__(self, subject: Expr, name: Token):
		self.subject, self.name = subject, name
	def left(self): return self.subject.left()
	def right(self): return self.name

class Set(Expr):
	def __init__(self, subject: Expr, name: Token, value: Expr):
		self.subject, self.name, self.value = subject, name, value
	def left(self): return self.subject.left()
	def right(self): return self.value.right()

class This(Expr):
	def __init__(self, keyword: Token): self.keyword = keyword
	def left(self): return self.keyword
	def right(self): return self.keyword

class Super(Expr):
	def __init__(self, keyword: Token, method: Token):
		self.keyword, self.method = keyword, method
	def left(self): return self.keyword
	def right(self): return self.method

###############################################################################

class Expression(Stmt):
	def __init__(self, expression: Expr): self.expression = expression
	def left(self): return self.expression.left()
	def right(self): return self.expression.right()

class Print(Stmt):
	def __init__(self, keyword: Token, expression: Expr):
		self.keyword, self.expression = keyword, expression
	def left(self): return self.keyword
	def right(self): return self.expression.right()

class Var(Stmt):
	def __init__(self, name: Token, initializer: Optional[Expr]):
		self.name, self.initializer = name, initializer
	def left(self): return self.name
	def right(self): return (self.initializer or self.name).right()

class Block(Stmt):
	def __init__(self, opening: Token, statements: Sequence[Stmt]):
		self._opening, self.statements = opening, statements
	def left(self): return self._opening
	def right(self): return self.statements[-1].right() if self.statements else self._opening

class If(Stmt):
	def __init__(self, keyword: Token, condition: Expr, then_branch: Stmt, else_branch: Optional[Stmt]):
		self._keyword = keyword
		self.condition, self.then_branch, self.else_branch = condition, then_branch, else_branch
	def left(self): return self._keyword
	def right(self): return self.condition.right()

class While(Stmt):
	def __init__(self, keyword: Token, condition: Expr, body: Stmt):
		self._keyword, self.condition, self.body = keyword, condition, body
	def left(self): return self._keyword
	def right(self): return self.condition.right()

class Function(Stmt):
	def __init__(self, name: Token, params: Sequence[Token], body: Sequence[Stmt]):
		self.name, self.params, self.body = name, params, body
	def __repr__(self): return "{fn|%s(%s)}" % (self.name.lexeme, ", ".join(p.lexeme for p in self.params))
	def left(self): return self.name
	def right(self): return self.params[-1] if self.params else self.name

class Return(Stmt):
	def __init__(self, keyword: Token, value: Optional[Expr]):
		self.keyword, self.value = keyword, value
	def left(self): return self.keyword
	def right(self): return (self.value or self.keyword).right()

class Class(Stmt):
	def __init__(self, name: Token, superclass: Optional[Variable], methods: Sequence[Function]):
		self.name, self.superclass, self.methods = name, superclass, methods
	def left(self): return self.name
	def right(self): return (self.superclass or self.name).right()

EXPRESSIONS = (Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call, Get, Set, This, Super)
STATEMENTS = (Expression, Print, Var, Block, If, While, Function, Return, Class)
