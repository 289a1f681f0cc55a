"""
These most-fundamental classes are separate from the rest
to avoid various circular-import scenarios.
Tokens are phrases too, so that diagnostics can underline
a single token just as easily as a whole expression.
"""
from enum import Enum, auto
from typing import Any, NamedTuple

class Phrase:
	def left(self) -> "Token":
		""" Return the leftmost token of this phrase """
		raise NotImplementedError(type(self))
	def right(self) -> "Token":
		""" Return the rightmost token of this phrase """
		raise NotImplementedError(type(self))
	def span(self) -> tuple[int, int]:
		""" Source offsets, suitable for slicing the text """
		return self.left().start, self.right().stop

class TokenType(Enum):
	# Single-character punctuation.
	LEFT_PAREN = auto()
	RIGHT_PAREN = auto()
	LEFT_BRACE = auto()
	RIGHT_BRACE = auto()
	COMMA = auto()
	DOT = auto()
	MINUS = auto()
	PLUS = auto()
	SEMICOLON = auto()
	SLASH = auto()
	STAR = auto()

	# One or two character operators.
	BANG = auto()
	BANG_EQUAL = auto()
	EQUAL = auto()
	EQUAL_EQUAL = auto()
	GREATER = auto()
	GREATER_EQUAL = auto()
	LESS = auto()
	LESS_EQUAL = auto()

	# Literals.
	IDENTIFIER = auto()
	STRING = auto()
	NUMBER = auto()

	# Keywords.
	AND = auto()
	CLASS = auto()
	ELSE = auto()
	FALSE = auto()
	FUN = auto()
	FOR = auto()
	IF = auto()
	NIL = auto()
	OR = auto()
	PRINT = auto()
	RETURN = auto()
	SUPER = auto()
	THIS = auto()
	TRUE = auto()
	VAR = auto()
	WHILE = auto()

	EOF = auto()

RESERVED = {
	kind.name.lower(): kind
	for kind in TokenType
	if TokenType.AND.value <= kind.value <= TokenType.WHILE.value
}

class Token(NamedTuple):
	kind: TokenType
	lexeme: str
	literal: Any
	line: int
	start: int  # Offsets into the source text
	stop: int

	def __repr__(self): return "<%s %r>" % (self.kind.name, self.lexeme)

	# NamedTuple cannot inherit Phrase, so these are spelled out here.
	def left(self): return self
	def right(self): return self
	def span(self) -> tuple[int, int]: return self.start, self.stop

def synthetic(kind:TokenType, lexeme:str, like:Token) -> Token:
	""" For tokens the parser invents, such as the implicit 'true' of a for-loop. """
	return Token(kind, lexeme, None, like.line, like.start, like.start)

INIT = "init"
THIS = "this"
SUPER = "super"
