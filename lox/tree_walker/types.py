"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
Nil, booleans, numbers, and strings play themselves
(as None, bool, float, and str) while callables and
instances need more help.
"""

from abc import ABC
from typing import Optional, Sequence, Union
from ..stacking import Environment

class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """
	pass

NATIVE_DATA = Optional[Union[bool, float, str]]
VALUE = Union[NATIVE_DATA, LoxValue]
ARGS = Sequence[VALUE]
ENV = Environment[VALUE]
