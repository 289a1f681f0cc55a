"""
The generic machinery that everything needs,
without the specific methods corresponding to particular syntax.

Statements complete in one of two ways: Normally, which is None,
or by a return-statement, which is a Returned record carrying the value.
Whatever executes a sequence of statements must stop at the first
Returned and hand it upward. Only a function call consumes one.
"""

from typing import NamedTuple, Optional, Sequence
from .. import syntax
from ..ontology import Token
from .types import VALUE, ENV

class LoxRuntimeError(Exception):
	def __init__(self, token:Token, message:str):
		super().__init__(token, message)
		self.token, self.message = token, message

class Returned(NamedTuple):
	value: VALUE

OUTCOME = Optional[Returned]

EVALUATE = {}
EXECUTE = {}

def evaluate(expr:syntax.Expr, env:ENV) -> VALUE:
	try: fn = EVALUATE[type(expr)]
	except KeyError: raise NotImplementedError(type(expr), expr)
	return fn(expr, env)

def execute(stmt:syntax.Stmt, env:ENV) -> OUTCOME:
	try: fn = EXECUTE[type(stmt)]
	except KeyError: raise NotImplementedError(type(stmt), stmt)
	return fn(stmt, env)

def execute_block(statements:Sequence[syntax.Stmt], env:ENV) -> OUTCOME:
	for stmt in statements:
		outcome = execute(stmt, env)
		if outcome is not None: return outcome

def attach_evaluation_methods(python_scope):
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_eval_"):
			_t = _v.__annotations__["expr"]
			assert isinstance(_t, type), (_k, _t)
			EVALUATE[_t] = _v
		elif _k.startswith("_exec_"):
			_t = _v.__annotations__["stmt"]
			assert isinstance(_t, type), (_k, _t)
			EXECUTE[_t] = _v
	# Every node type must have its method. A new kind of node means a new method.
	missing = [t.__name__ for t in syntax.EXPRESSIONS if t not in EVALUATE]
	missing += [t.__name__ for t in syntax.STATEMENTS if t not in EXECUTE]
	assert not missing, missing
