"""
Static name-spaces with support for nested scopes, as the resolver sees them.

A chain of layers is persistent: Entering a scope makes a new chain atop
the old one, and leaving is simply going back to the old one. The resolver
threads its whole situation through each visit as a ResolutionContext,
so nothing needs popping and the pass carries no mutable stack.
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import NamedTuple, Optional
from .ontology import Token

class AlreadyExists(KeyError): pass

class Layer:
	"""
	One lexical scope. A name is first declared, then defined:
	In between, reading the name is an error.
	"""
	_locate: dict[str, Token]
	_defined: set[str]

	def __init__(self):
		self._locate, self._defined = {}, set()

	def __contains__(self, key: str) -> bool:
		return key in self._locate

	def locate(self, key: str) -> Token:
		return self._locate[key]

	def declare(self, name: Token):
		key = name.lexeme
		if key in self._locate:
			raise AlreadyExists(key)
		self._locate[key] = name

	def define(self, name: Token):
		self.implicit(name.lexeme, name)

	def implicit(self, key: str, where: Token):
		""" For 'this' and 'super', which no declaration ever names. """
		self._locate.setdefault(key, where)
		self._defined.add(key)

	def is_pending(self, key: str) -> bool:
		""" Declared, but not yet defined """
		return key in self._locate and key not in self._defined


class Space(ABC):
	@abstractmethod
	def innermost(self) -> Optional[Layer]: pass

	@abstractmethod
	def distance(self, key: str) -> Optional[int]:
		""" How many scopes out is the nearest binding for key, if any? """

	def child(self) -> "Chain":
		return Chain(Layer(), self)


class GlobalSpace(Space):
	""" Global names are resolved dynamically, so this space knows nothing. """
	def innermost(self) -> Optional[Layer]: return None
	def distance(self, key: str) -> Optional[int]: return None


class Chain(Space):
	def __init__(self, top: Layer, rest: Space):
		self.top = top
		self._rest = rest

	def innermost(self) -> Optional[Layer]: return self.top

	def distance(self, key: str) -> Optional[int]:
		if key in self.top: return 0
		further = self._rest.distance(key)
		return None if further is None else further + 1


class FunctionKind(Enum):
	NONE = auto()
	FUNCTION = auto()
	METHOD = auto()
	INITIALIZER = auto()

class ClassKind(Enum):
	NONE = auto()
	CLASS = auto()
	SUBCLASS = auto()


class ResolutionContext(NamedTuple):
	space: Space
	function: FunctionKind
	klass: ClassKind

	@staticmethod
	def fresh() -> "ResolutionContext":
		return ResolutionContext(GlobalSpace(), FunctionKind.NONE, ClassKind.NONE)

	def nested(self) -> "ResolutionContext":
		return self._replace(space=self.space.child())

	def scope(self) -> Optional[Layer]:
		return self.space.innermost()
