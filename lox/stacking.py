"""
Run-time environments: Bindings from names to values, plus a link
to the enclosing environment. Closures and nested scopes share these
by reference; nothing ever copies one.
"""
import sys
from contextlib import contextmanager
from typing import Generic, Optional, TypeVar
from .ontology import Token

T = TypeVar("T")

# Each level of Lox nesting costs the host about ten Python frames.
RECURSION_LIMIT = 50_000

@contextmanager
def deep_recursion():
	""" Raise the host recursion limit for the duration, then put it back. """
	prior = sys.getrecursionlimit()
	sys.setrecursionlimit(max(prior, RECURSION_LIMIT))
	try: yield
	finally: sys.setrecursionlimit(prior)

class UndefinedVariable(KeyError):
	""" The evaluator turns this into a proper run-time error, with a line number. """

class Environment(Generic[T]):
	_bindings : dict[str, T]
	enclosing : Optional["Environment[T]"]

	def __init__(self, enclosing: Optional["Environment[T]"] = None):
		self._bindings = {}
		self.enclosing = enclosing

	def __repr__(self):
		return "<Environment %s%s>" % (sorted(self._bindings), " ..." if self.enclosing else "")

	def define(self, key: str, value: T) -> T:
		""" Bind in this very environment. Re-definition is fine, as at global scope. """
		self._bindings[key] = value
		return value

	def fetch(self, name: Token) -> T:
		""" Search outward by name: The global environment works this way. """
		env = self
		while env is not None:
			if name.lexeme in env._bindings: return env._bindings[name.lexeme]
			env = env.enclosing
		raise UndefinedVariable(name)

	def assign(self, name: Token, value: T) -> T:
		env = self
		while env is not None:
			if name.lexeme in env._bindings:
				env._bindings[name.lexeme] = value
				return value
			env = env.enclosing
		raise UndefinedVariable(name)

	def ancestor(self, distance: int) -> "Environment[T]":
		env = self
		for _ in range(distance):
			env = env.enclosing
		# A missing link here means the resolver and the evaluator disagree.
		assert env is not None, distance
		return env

	def fetch_at(self, distance: int, key: str) -> T:
		return self.ancestor(distance)._bindings[key]

	def assign_at(self, distance: int, key: str, value: T) -> T:
		self.ancestor(distance)._bindings[key] = value
		return value
