"""
Build the primitive namespace: The global environment as it stands
before the program defines anything.
"""

import time
from .stacking import Environment
from .tree_walker.types import ENV
from .tree_walker.values import Primitive

def clock() -> float:
	""" Seconds since the epoch, as a number. """
	return time.time()

NATIVES = {
	"clock": clock,
}

def root_environment() -> ENV:
	env = Environment()
	for name, fn in NATIVES.items():
		env.define(name, Primitive(fn))
	return env
