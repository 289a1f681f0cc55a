"""
One evaluation method per kind of syntax node.
Expressions answer a value; statements answer an outcome (see evaluator.py).

The current environment is a parameter to every method,
so leaving a scope (normally, by error, or by return)
restores the enclosing one without further ado.
"""
import math
import operator
from typing import Optional
from .. import syntax
from ..ontology import Token, TokenType, INIT, THIS, SUPER
from ..stacking import Environment, UndefinedVariable
from ..primitive import root_environment
from .types import VALUE, ENV
from .evaluator import (
	evaluate, execute, execute_block, attach_evaluation_methods,
	LoxRuntimeError, Returned, OUTCOME,
)
from .values import Function, Closure, LoxClass, Instance

T = TokenType

def _divide(a:float, b:float) -> float:
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

PRIMITIVE_BINARY = {
	T.MINUS : operator.sub,
	T.STAR : operator.mul,
	T.SLASH : _divide,
	T.GREATER : operator.gt,
	T.GREATER_EQUAL : operator.ge,
	T.LESS : operator.lt,
	T.LESS_EQUAL : operator.le,
}

# The global environment and the resolver's side-table for the program now running.
GLOBALS: ENV = Environment()
DISTANCES: dict[syntax.Expr, int] = {}

def reset_runtime(distances:dict[syntax.Expr, int]) -> ENV:
	global GLOBALS, DISTANCES
	GLOBALS = root_environment()
	DISTANCES = distances
	return GLOBALS

###############################################################################

def is_truthy(value:VALUE) -> bool:
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	# Python would have True == 1.0, but these are different kinds of value.
	# Numbers compare as IEEE doubles: NaN is unequal to itself, and 0 == -0.
	if a is None: return b is None
	return type(a) is type(b) and a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, float):
		if math.isnan(value): return "NaN"
		if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
		text = repr(value)
		return text[:-2] if text.endswith(".0") else text
	return str(value)

def _check_number(op:Token, operand:VALUE):
	if not isinstance(operand, float):
		raise LoxRuntimeError(op, "Operand of '%s' must be a number." % op.lexeme)

def _check_numbers(op:Token, a:VALUE, b:VALUE):
	if not (isinstance(a, float) and isinstance(b, float)):
		raise LoxRuntimeError(op, "Operands of '%s' must be numbers." % op.lexeme)

def _undefined(name:Token):
	return LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)

def _lookup(expr:syntax.Expr, name:Token, env:ENV) -> VALUE:
	distance = DISTANCES.get(expr)
	if distance is not None: return env.fetch_at(distance, name.lexeme)
	try: return GLOBALS.fetch(name)
	except UndefinedVariable: raise _undefined(name) from None

###############################################################################

def _eval_literal(expr:syntax.Literal, env:ENV):
	return expr.value

def _eval_grouping(expr:syntax.Grouping, env:ENV):
	return evaluate(expr.expression, env)

def _eval_unary(expr:syntax.Unary, env:ENV):
	operand = evaluate(expr.operand, env)
	if expr.op.kind is T.BANG: return not is_truthy(operand)
	_check_number(expr.op, operand)
	return -operand

def _eval_binary(expr:syntax.Binary, env:ENV):
	a = evaluate(expr.lhs, env)
	b = evaluate(expr.rhs, env)
	kind = expr.op.kind
	if kind is T.EQUAL_EQUAL: return is_equal(a, b)
	if kind is T.BANG_EQUAL: return not is_equal(a, b)
	if kind is T.PLUS:
		if isinstance(a, float) and isinstance(b, float): return a + b
		if isinstance(a, str) and isinstance(b, str): return a + b
		raise LoxRuntimeError(expr.op, "Operands of '+' must be two numbers or two strings.")
	_check_numbers(expr.op, a, b)
	return PRIMITIVE_BINARY[kind](a, b)

def _eval_logical(expr:syntax.Logical, env:ENV):
	lhs = evaluate(expr.lhs, env)
	if expr.op.kind is T.OR:
		if is_truthy(lhs): return lhs
	elif not is_truthy(lhs): return lhs
	return evaluate(expr.rhs, env)

def _eval_variable(expr:syntax.Variable, env:ENV):
	return _lookup(expr, expr.name, env)

def _eval_assign(expr:syntax.Assign, env:ENV):
	value = evaluate(expr.value, env)
	distance = DISTANCES.get(expr)
	if distance is not None: return env.assign_at(distance, expr.name.lexeme, value)
	try: return GLOBALS.assign(expr.name, value)
	except UndefinedVariable: raise _undefined(expr.name) from None

def _eval_call(expr:syntax.Call, env:ENV):
	callee = evaluate(expr.callee, env)
	arguments = [evaluate(a, env) for a in expr.arguments]
	if not isinstance(callee, Function):
		raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
	if len(arguments) != callee.arity():
		pattern = "Expected %d arguments but got %d."
		raise LoxRuntimeError(expr.paren, pattern % (callee.arity(), len(arguments)))
	try: return callee.call(arguments)
	except RecursionError:
		raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

def _eval_get(expr:syntax.Get, env:ENV):
	subject = evaluate(expr.subject, env)
	if isinstance(subject, Instance): return subject.get(expr.name)
	raise LoxRuntimeError(expr.name, "Only instances have properties.")

def _eval_set(expr:syntax.Set, env:ENV):
	subject = evaluate(expr.subject, env)
	if not isinstance(subject, Instance):
		raise LoxRuntimeError(expr.name, "Only instances have fields.")
	return subject.set(expr.name, evaluate(expr.value, env))

def _eval_this(expr:syntax.This, env:ENV):
	return _lookup(expr, expr.keyword, env)

def _eval_super(expr:syntax.Super, env:ENV):
	# 'super' is where the method was defined; 'this' is one scope closer.
	distance = DISTANCES[expr]
	superclass = env.fetch_at(distance, SUPER)
	receiver = env.fetch_at(distance - 1, THIS)
	method = superclass.find_method(expr.method.lexeme)
	if method is None:
		raise LoxRuntimeError(expr.method, "Undefined property '%s'." % expr.method.lexeme)
	return method.bind(receiver)

###############################################################################

def _exec_expression(stmt:syntax.Expression, env:ENV) -> OUTCOME:
	evaluate(stmt.expression, env)

def _exec_print(stmt:syntax.Print, env:ENV) -> OUTCOME:
	print(stringify(evaluate(stmt.expression, env)))

def _exec_var(stmt:syntax.Var, env:ENV) -> OUTCOME:
	value = None if stmt.initializer is None else evaluate(stmt.initializer, env)
	env.define(stmt.name.lexeme, value)

def _exec_block(stmt:syntax.Block, env:ENV) -> OUTCOME:
	return execute_block(stmt.statements, Environment(env))

def _exec_if(stmt:syntax.If, env:ENV) -> OUTCOME:
	if is_truthy(evaluate(stmt.condition, env)):
		return execute(stmt.then_branch, env)
	elif stmt.else_branch is not None:
		return execute(stmt.else_branch, env)

def _exec_while(stmt:syntax.While, env:ENV) -> OUTCOME:
	while is_truthy(evaluate(stmt.condition, env)):
		outcome = execute(stmt.body, env)
		if outcome is not None: return outcome

def _exec_function(stmt:syntax.Function, env:ENV) -> OUTCOME:
	env.define(stmt.name.lexeme, Closure(stmt, env, False))

def _exec_return(stmt:syntax.Return, env:ENV) -> OUTCOME:
	value = None if stmt.value is None else evaluate(stmt.value, env)
	return Returned(value)

def _exec_class(stmt:syntax.Class, env:ENV) -> OUTCOME:
	superclass: Optional[LoxClass] = None
	if stmt.superclass is not None:
		superclass = evaluate(stmt.superclass, env)
		if not isinstance(superclass, LoxClass):
			raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

	# Bound first to nil, so methods may refer to the class by name.
	env.define(stmt.name.lexeme, None)
	method_env = env
	if superclass is not None:
		method_env = Environment(env)
		method_env.define(SUPER, superclass)
	methods = {
		fn.name.lexeme: Closure(fn, method_env, fn.name.lexeme == INIT)
		for fn in stmt.methods
	}
	env.assign(stmt.name, LoxClass(stmt.name.lexeme, superclass, methods))

attach_evaluation_methods(globals())
