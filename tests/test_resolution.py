import unittest

from lox import syntax
from lox.diagnostics import Report
from lox.front_end import parse_text
from lox.resolution import resolve_statements
from lox.scanner import scan_text

def _resolve(text:str):
	report = Report(verbose=False)
	statements = parse_text(text, report)
	distances = resolve_statements(statements, report)
	report.assert_no_issues("Ostensibly-good example failed to resolve.")
	return statements, distances

def _find(node, kind, name:str):
	""" Every node of the given kind, with the given name, anywhere under node. """
	found = []
	def walk(item):
		if isinstance(item, (list, tuple)):
			for x in item: walk(x)
		elif isinstance(item, syntax.Phrase):
			if isinstance(item, kind):
				label = item.keyword if isinstance(item, (syntax.This, syntax.Super)) else item.name
				if label.lexeme == name: found.append(item)
			for x in vars(item).values(): walk(x)
	walk(node)
	return found

class ResolutionTests(unittest.TestCase):

	def test_globals_get_no_entry(self):
		statements, distances = _resolve("var a = 1; print a; a = 2; fun f() { return a; }")
		for ref in _find(statements, (syntax.Variable, syntax.Assign), "a"):
			self.assertNotIn(ref, distances)

	def test_nested_block_distance(self):
		statements, distances = _resolve("{ var a = 1; { print a; a = 3; } }")
		refs = _find(statements, (syntax.Variable, syntax.Assign), "a")
		self.assertEqual(2, len(refs))
		for ref in refs:
			self.assertEqual(1, distances[ref])

	def test_parameters_share_scope_with_body(self):
		statements, distances = _resolve("fun f(x) { var y = x; print y; }")
		[x] = _find(statements, syntax.Variable, "x")
		[y] = _find(statements, syntax.Variable, "y")
		self.assertEqual(0, distances[x])
		self.assertEqual(0, distances[y])

	def test_closure_reaches_outward(self):
		statements, distances = _resolve("fun outer() { var i = 0; fun inner() { { return i; } } }")
		[i] = _find(statements, syntax.Variable, "i")
		self.assertEqual(2, distances[i])

	def test_each_occurrence_resolves_separately(self):
		source = "{ var a = 1; { var a = 2; print a; } print a; { { print a; } } }"
		statements, distances = _resolve(source)
		inner, outer, nested = _find(statements, syntax.Variable, "a")
		self.assertEqual(0, distances[inner])
		self.assertEqual(0, distances[outer])
		self.assertEqual(2, distances[nested])

	def test_this_and_super_in_method(self):
		source = "class A { m() {} } class B < A { m() { print this; return super.m(); } }"
		statements, distances = _resolve(source)
		[this] = _find(statements, syntax.This, "this")
		[sup] = _find(statements, syntax.Super, "super")
		self.assertEqual(1, distances[this])
		self.assertEqual(2, distances[sup])

	def test_this_in_plain_class(self):
		statements, distances = _resolve("class A { m() { return this; } }")
		[this] = _find(statements, syntax.This, "this")
		self.assertEqual(1, distances[this])

	def test_resolving_again_gives_the_same_table(self):
		report = Report(verbose=False)
		statements = parse_text("fun f(a) { { var b = a; return b; } } class C < D { m() { super.m(); } }", report)
		first = resolve_statements(statements, report)
		second = resolve_statements(statements, report)
		self.assertTrue(report.ok())
		self.assertEqual(first, second)

	def test_excessive_nesting_is_reported(self):
		report = Report(verbose=False)
		brace = scan_text("{", report)[0]
		nest = syntax.Block(brace, [])
		for _ in range(50_000): nest = syntax.Block(brace, [nest])
		resolve_statements([nest], report)
		self.assertEqual(["[line 1] Error at '{': Too much nesting."], report.messages())

	def test_problems_do_not_stop_the_pass(self):
		report = Report(verbose=False)
		statements = parse_text("{ var a = a; print a; }", report)
		distances = resolve_statements(statements, report)
		self.assertTrue(report.sick())
		self.assertEqual(2, len(distances))

if __name__ == '__main__':
	unittest.main()
