"""
This is the overall control for the run-time.
"""
from ..diagnostics import Report, TooManyIssues
from ..resolution import RoadMap, Yuck
from ..stacking import deep_recursion
from .evaluator import execute, LoxRuntimeError
from .runtime import reset_runtime

def run_program(roadmap:RoadMap, report:Report) -> bool:
	"""
	Execute the top-level statements in order. The first run-time error
	goes to the report and abandons whatever remains. Output that came
	before the error stays printed.
	"""
	global_env = reset_runtime(roadmap.distances)
	with deep_recursion():
		for stmt in roadmap.statements:
			try:
				outcome = execute(stmt, global_env)
			except LoxRuntimeError as ex:
				report.runtime_error(ex.token, ex.message)
				return False
			except RecursionError:
				report.runtime_error(stmt.left(), "Stack overflow.")
				return False
			assert outcome is None, "The resolver should forbid return at top level."
	return True

def run_text(text:str, report:Report) -> bool:
	"""
	The whole pipeline: Nothing runs unless every static pass approves.
	A report with an issue limit stops at the limit and runs nothing.
	"""
	try:
		with deep_recursion():
			roadmap = RoadMap(text, report)
	except Yuck as ex:
		report.info("Not running: trouble in the", ex.args[0], "phase")
		return False
	except TooManyIssues:
		report.info("Not running: too many issues")
		return False
	return run_program(roadmap, report)
