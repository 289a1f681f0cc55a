"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but special things like closures need more help.
"""
from abc import abstractmethod
from inspect import signature
from typing import Callable, Optional
from .. import syntax
from ..ontology import Token, INIT, THIS
from ..stacking import Environment
from .types import LoxValue, VALUE, ARGS, ENV
from .evaluator import LoxRuntimeError, execute_block

class Function(LoxValue):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, args: ARGS) -> VALUE:
		""" The caller has already checked the number of arguments. """

class Primitive(Function):
	""" A function implemented in Python. All its parameters are positional. """
	def __init__(self, fn: Callable):
		self._fn = fn
		self._arity = len(signature(fn).parameters)

	def __str__(self): return "<native fn>"

	def arity(self) -> int: return self._arity

	def call(self, args: ARGS) -> VALUE:
		return self._fn(*args)

class Closure(Function):
	""" The run-time manifestation of a function declaration: tied to its natal environment. """
	def __init__(self, declaration: syntax.Function, closure: ENV, is_initializer: bool):
		self._declaration = declaration
		self._closure = closure
		self._is_initializer = is_initializer

	def __str__(self): return "<fn %s>" % self._declaration.name.lexeme

	def arity(self) -> int: return len(self._declaration.params)

	def bind(self, instance: "Instance") -> "Closure":
		env = Environment(self._closure)
		env.define(THIS, instance)
		return Closure(self._declaration, env, self._is_initializer)

	def call(self, args: ARGS) -> VALUE:
		# Chained to the closure, never to the caller.
		env = Environment(self._closure)
		for param, arg in zip(self._declaration.params, args):
			env.define(param.lexeme, arg)
		outcome = execute_block(self._declaration.body, env)
		if self._is_initializer:
			# However the initializer ends, it answers the instance.
			return self._closure.fetch_at(0, THIS)
		if outcome is None: return None
		return outcome.value

class LoxClass(Function):
	def __init__(self, name: str, superclass: Optional["LoxClass"], methods: dict[str, Closure]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def __str__(self): return "<class %s>" % self.name

	def find_method(self, name: str) -> Optional[Closure]:
		klass = self
		while klass is not None:
			if name in klass._methods: return klass._methods[name]
			klass = klass.superclass

	def arity(self) -> int:
		initializer = self.find_method(INIT)
		return 0 if initializer is None else initializer.arity()

	def call(self, args: ARGS) -> "Instance":
		instance = Instance(self)
		initializer = self.find_method(INIT)
		if initializer is not None:
			initializer.bind(instance).call(args)
		return instance

class Instance(LoxValue):
	def __init__(self, klass: LoxClass):
		self.klass = klass
		self._fields = {}

	def __str__(self): return self.klass.name

	def get(self, name: Token) -> VALUE:
		key = name.lexeme
		if key in self._fields: return self._fields[key]
		method = self.klass.find_method(key)
		if method is not None: return method.bind(self)
		raise LoxRuntimeError(name, "Undefined property '%s'." % key)

	def set(self, name: Token, value: VALUE) -> VALUE:
		self._fields[name.lexeme] = value
		return value
