import sys, random
from typing import Optional, Sequence
from boozetools.support.failureprone import SourceText, illustration

from .ontology import Phrase, Token, TokenType

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]

	minced_oaths = [
		'Ack', 'Blargh', 'Confound it', 'Crud', 'Curses', 'Drat',
		'Fiddlesticks', 'Good Grief', 'Great Scott', 'Jeepers',
		'Nuts', 'Rats', 'Woe is me',
	]

	resignations = [
		'I cannot continue.',
		'The path before me fades into darkness.',
		'I need to ask for help.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Annotation:
	""" Underline some stretch of the source text, with an optional caption. """
	def __init__(self, source:SourceText, span:tuple[int, int], caption:str=""):
		self._source = source
		self.start, self.stop = span
		self.caption = caption

	def illustrate(self):
		row, col = self._source.find_row_col(self.start)
		single_line = self._source.line_of_text(row)
		width = max(self.stop - self.start, 1)
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	"""
	One issue: A headline in the classic one-line format,
	plus whatever illustrations help to explain it.
	"""
	def __init__(self, headline:str, anns:list[Annotation], footer=()):
		self.headline, self._anns, self._footer = headline, anns, footer
	def as_text(self):
		lines = [self.headline, ""]
		lines.extend(ann.illustrate() for ann in self._anns)
		lines.extend(self._footer)
		return '\n'.join(lines)

def _where(token:Token):
	if token.kind is TokenType.EOF: return " at end"
	else: return " at '%s'" % token.lexeme

class Report:
	"""
	Collects the issues found by each pass, in the order found.
	Static issues (scanner, parser, resolver) and the (at most one)
	run-time issue are kept apart, because they mean different things
	to whoever invokes the interpreter.
	"""
	_issues : list[Pic]
	_crash : Optional[Pic]

	def __init__(self, *, verbose:int=0, max_issues:Optional[int]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._crash = None
		self._max_issues = max_issues
		self._source = SourceText("")

	def set_source(self, text:str, filename:Optional[str]=None):
		self._source = SourceText(text, filename=filename)

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	def crashed(self): return self._crash is not None

	def issue(self, it:Pic):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def messages(self) -> list[str]:
		""" Headlines of every issue, static ones first. """
		pics = list(self._issues)
		if self._crash is not None: pics.append(self._crash)
		return [p.headline for p in pics]

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		issues = list(self._issues)
		if self._crash is not None: issues.append(self._crash)
		_bemoan(issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues or self._crash:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	def _annotate(self, phrase:Phrase, caption:str="") -> Annotation:
		return Annotation(self._source, phrase.span(), caption)

	def error(self, token:Token, msg:str, guilty:Sequence[Phrase]=()):
		""" The general form of a static issue pinned to a token """
		headline = "[line %d] Error%s: %s" % (token.line, _where(token), msg)
		problem = [self._annotate(g) for g in guilty] or [self._annotate(token)]
		self.issue(Pic(headline, problem))

	# Methods the scanner calls:
	def _lexical_error(self, line:int, span:tuple[int, int], msg:str):
		headline = "[line %d] Error: %s" % (line, msg)
		self.issue(Pic(headline, [Annotation(self._source, span)]))

	def unexpected_character(self, line:int, offset:int):
		self._lexical_error(line, (offset, offset+1), "Unexpected character.")

	def unterminated_string(self, line:int, start:int, stop:int):
		self._lexical_error(line, (start, stop), "Unterminated string.")

	# Methods the parser calls:
	def parse_error(self, token:Token, msg:str):
		self.error(token, msg)

	def too_many(self, token:Token, what:str):
		self.error(token, "Can't have more than 255 %s." % what)

	def invalid_assignment_target(self, equals:Token, target:Phrase):
		self.error(equals, "Invalid assignment target.", [target, equals])

	def too_deep(self, token:Token):
		self.error(token, "Too much nesting.")

	# Methods the resolver calls:
	def redefined(self, first:Token, guilty:Token):
		headline = "[line %d] Error%s: Already a variable with this name in this scope." % (guilty.line, _where(guilty))
		problem = [self._annotate(first, "Earliest definition"), self._annotate(guilty, "Again here")]
		self.issue(Pic(headline, problem))

	def own_initializer(self, name:Token):
		self.error(name, "Can't read local variable in its own initializer.")

	def return_at_top_level(self, keyword:Token):
		self.error(keyword, "Can't return from top-level code.")

	def return_value_from_initializer(self, keyword:Token, value:Phrase):
		self.error(keyword, "Can't return a value from an initializer.", [keyword, value])

	def this_outside_class(self, keyword:Token):
		self.error(keyword, "Can't use 'this' outside of a class.")

	def super_outside_class(self, keyword:Token):
		self.error(keyword, "Can't use 'super' outside of a class.")

	def super_without_superclass(self, keyword:Token):
		self.error(keyword, "Can't use 'super' in a class with no superclass.")

	def inherits_from_itself(self, name:Token):
		self.error(name, "A class can't inherit from itself.")

	# The evaluator calls this one at most once:
	def runtime_error(self, token:Token, msg:str):
		assert self._crash is None
		headline = "%s\n[line %d]" % (msg, token.line)
		self._crash = Pic(headline, [self._annotate(token)])

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
