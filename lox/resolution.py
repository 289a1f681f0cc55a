"""
All the scope resolution stuff goes here.

A single static pass over the whole program, before anything runs.
For each reference to a local variable (including 'this' and 'super'),
it records how many scopes outward the binding lives. The evaluator
trusts these distances completely, so the scopes pushed here must mirror
exactly the environments the evaluator creates at run-time:

* A block gets one scope.
* A function gets one scope for parameters and body together.
* A class with a superclass gets a scope for 'super',
  then every class gets a scope for 'this' around its methods.

Global names get no entry: They are looked up by name at run-time.
"""
from typing import Iterable
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import Token, INIT, THIS, SUPER
from .diagnostics import Report
from .scanner import scan_text
from .front_end import parse_tokens
from .space import AlreadyExists, ResolutionContext, FunctionKind, ClassKind

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

class Resolver(Visitor):
	"""
	Every visit method takes the node and the resolution context in force there.
	Nested constructs visit their parts with a derived context;
	the only thing this object accumulates is the side-table of distances.
	"""
	distances: dict[syntax.Expr, int]

	def __init__(self, report:Report):
		self.report = report
		self.distances = {}

	def tour(self, items:Iterable, ctx:ResolutionContext):
		for i in items:
			self.visit(i, ctx)

	def _declare(self, name:Token, ctx:ResolutionContext):
		scope = ctx.scope()
		if scope is None: return
		try: scope.declare(name)
		except AlreadyExists: self.report.redefined(scope.locate(name.lexeme), name)

	@staticmethod
	def _define(name:Token, ctx:ResolutionContext):
		scope = ctx.scope()
		if scope is not None: scope.define(name)

	def _resolve_local(self, expr:syntax.Expr, key:str, ctx:ResolutionContext):
		distance = ctx.space.distance(key)
		if distance is not None:
			assert expr not in self.distances, expr
			self.distances[expr] = distance

	def _resolve_function(self, fn:syntax.Function, kind:FunctionKind, ctx:ResolutionContext):
		inner = ctx.nested()._replace(function=kind)
		for param in fn.params:
			self._declare(param, inner)
			self._define(param, inner)
		self.tour(fn.body, inner)

	# Statements

	def visit_Block(self, stmt:syntax.Block, ctx:ResolutionContext):
		self.tour(stmt.statements, ctx.nested())

	def visit_Var(self, stmt:syntax.Var, ctx:ResolutionContext):
		self._declare(stmt.name, ctx)
		if stmt.initializer is not None:
			self.visit(stmt.initializer, ctx)
		self._define(stmt.name, ctx)

	def visit_Function(self, stmt:syntax.Function, ctx:ResolutionContext):
		# Defined before the body, so the function may call itself.
		self._declare(stmt.name, ctx)
		self._define(stmt.name, ctx)
		self._resolve_function(stmt, FunctionKind.FUNCTION, ctx)

	def visit_Class(self, stmt:syntax.Class, ctx:ResolutionContext):
		self._declare(stmt.name, ctx)
		self._define(stmt.name, ctx)
		inner = ctx._replace(klass=ClassKind.CLASS)
		if stmt.superclass is not None:
			if stmt.superclass.name.lexeme == stmt.name.lexeme:
				self.report.inherits_from_itself(stmt.superclass.name)
			self.visit(stmt.superclass, ctx)
			inner = inner._replace(klass=ClassKind.SUBCLASS).nested()
			inner.scope().implicit(SUPER, stmt.superclass.name)
		inner = inner.nested()
		inner.scope().implicit(THIS, stmt.name)
		for method in stmt.methods:
			kind = FunctionKind.INITIALIZER if method.name.lexeme == INIT else FunctionKind.METHOD
			self._resolve_function(method, kind, inner)

	def visit_Expression(self, stmt:syntax.Expression, ctx:ResolutionContext):
		self.visit(stmt.expression, ctx)

	def visit_Print(self, stmt:syntax.Print, ctx:ResolutionContext):
		self.visit(stmt.expression, ctx)

	def visit_If(self, stmt:syntax.If, ctx:ResolutionContext):
		self.visit(stmt.condition, ctx)
		self.visit(stmt.then_branch, ctx)
		if stmt.else_branch is not None:
			self.visit(stmt.else_branch, ctx)

	def visit_While(self, stmt:syntax.While, ctx:ResolutionContext):
		self.visit(stmt.condition, ctx)
		self.visit(stmt.body, ctx)

	def visit_Return(self, stmt:syntax.Return, ctx:ResolutionContext):
		if ctx.function is FunctionKind.NONE:
			self.report.return_at_top_level(stmt.keyword)
		if stmt.value is not None:
			if ctx.function is FunctionKind.INITIALIZER:
				self.report.return_value_from_initializer(stmt.keyword, stmt.value)
			self.visit(stmt.value, ctx)

	# Expressions

	def visit_Variable(self, expr:syntax.Variable, ctx:ResolutionContext):
		scope = ctx.scope()
		if scope is not None and scope.is_pending(expr.name.lexeme):
			self.report.own_initializer(expr.name)
		self._resolve_local(expr, expr.name.lexeme, ctx)

	def visit_Assign(self, expr:syntax.Assign, ctx:ResolutionContext):
		self.visit(expr.value, ctx)
		self._resolve_local(expr, expr.name.lexeme, ctx)

	def visit_This(self, expr:syntax.This, ctx:ResolutionContext):
		if ctx.klass is ClassKind.NONE:
			self.report.this_outside_class(expr.keyword)
		else:
			self._resolve_local(expr, THIS, ctx)

	def visit_Super(self, expr:syntax.Super, ctx:ResolutionContext):
		if ctx.klass is ClassKind.NONE:
			self.report.super_outside_class(expr.keyword)
		elif ctx.klass is ClassKind.CLASS:
			self.report.super_without_superclass(expr.keyword)
		else:
			self._resolve_local(expr, SUPER, ctx)

	def visit_Literal(self, expr:syntax.Literal, ctx:ResolutionContext): pass

	def visit_Grouping(self, expr:syntax.Grouping, ctx:ResolutionContext):
		self.visit(expr.expression, ctx)

	def visit_Unary(self, expr:syntax.Unary, ctx:ResolutionContext):
		self.visit(expr.operand, ctx)

	def visit_Binary(self, expr:syntax.Binary, ctx:ResolutionContext):
		self.visit(expr.lhs, ctx)
		self.visit(expr.rhs, ctx)

	def visit_Logical(self, expr:syntax.Logical, ctx:ResolutionContext):
		self.visit(expr.lhs, ctx)
		self.visit(expr.rhs, ctx)

	def visit_Call(self, expr:syntax.Call, ctx:ResolutionContext):
		self.visit(expr.callee, ctx)
		self.tour(expr.arguments, ctx)

	def visit_Get(self, expr:syntax.Get, ctx:ResolutionContext):
		# Property names are dynamic; only the subject has scope.
		self.visit(expr.subject, ctx)

	def visit_Set(self, expr:syntax.Set, ctx:ResolutionContext):
		self.visit(expr.value, ctx)
		self.visit(expr.subject, ctx)

def _check_coverage(visitor:type, variants):
	missing = [v.__name__ for v in variants if not hasattr(visitor, "visit_"+v.__name__)]
	assert not missing, (visitor.__name__, missing)

_check_coverage(Resolver, syntax.EXPRESSIONS + syntax.STATEMENTS)

def resolve_statements(statements:list[syntax.Stmt], report:Report) -> dict[syntax.Expr, int]:
	""" Run the pass; return the side-table. The report says whether to trust it. """
	resolver = Resolver(report)
	ctx = ResolutionContext.fresh()
	for stmt in statements:
		try: resolver.visit(stmt, ctx)
		except RecursionError: report.too_deep(stmt.left())
	report.info("Resolved", len(resolver.distances), "local references")
	return resolver.distances

class RoadMap:
	"""
	Everything the evaluator needs to know about a program, once the static
	passes approve: The statements, and the distance to every local binding.
	Construction raises Yuck(phase) if any phase finds a problem;
	the report then holds the particulars.
	"""
	statements: list[syntax.Stmt]
	distances: dict[syntax.Expr, int]

	def __init__(self, text:str, report:Report):
		report.set_source(text)
		tokens = scan_text(text, report)
		scanned_ok = report.ok()
		# Parse even after a scanning error, to report any syntax errors also.
		self.statements = parse_tokens(tokens, report)
		if report.sick(): raise Yuck("parse" if scanned_ok else "scan")
		self.distances = resolve_statements(self.statements, report)
		if report.sick(): raise Yuck("resolve")
