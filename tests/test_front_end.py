import unittest

from lox import syntax
from lox.ontology import TokenType as T
from lox.diagnostics import Report
from lox.scanner import scan_text
from lox.front_end import parse_text

def _kinds(text:str):
	report = Report(verbose=False)
	return [t.kind for t in scan_text(text, report)], report

def _parse(text:str) -> list[syntax.Stmt]:
	report = Report(verbose=False)
	statements = parse_text(text, report)
	report.assert_no_issues("Ostensibly-good example failed to parse.")
	return statements

class ScannerTests(unittest.TestCase):

	def test_declaration(self):
		report = Report(verbose=False)
		tokens = scan_text("var x = 1.5; // the rest is comment", report)
		self.assertEqual([T.VAR, T.IDENTIFIER, T.EQUAL, T.NUMBER, T.SEMICOLON, T.EOF], [t.kind for t in tokens])
		self.assertEqual(1.5, tokens[3].literal)
		self.assertEqual("x", tokens[1].lexeme)
		self.assertTrue(report.ok())

	def test_operators(self):
		kinds, _ = _kinds("!= == <= >= ! = < > / * - + . , ; ( ) { }")
		self.assertEqual([
			T.BANG_EQUAL, T.EQUAL_EQUAL, T.LESS_EQUAL, T.GREATER_EQUAL,
			T.BANG, T.EQUAL, T.LESS, T.GREATER, T.SLASH, T.STAR, T.MINUS, T.PLUS,
			T.DOT, T.COMMA, T.SEMICOLON, T.LEFT_PAREN, T.RIGHT_PAREN, T.LEFT_BRACE, T.RIGHT_BRACE,
			T.EOF,
		], kinds)

	def test_trailing_dot_is_not_part_of_number(self):
		report = Report(verbose=False)
		tokens = scan_text("123.", report)
		self.assertEqual([T.NUMBER, T.DOT, T.EOF], [t.kind for t in tokens])
		self.assertEqual(123.0, tokens[0].literal)
		self.assertEqual("123", tokens[0].lexeme)

	def test_reserved_words_by_maximal_munch(self):
		kinds, _ = _kinds("orchid or classy class _this this")
		self.assertEqual([T.IDENTIFIER, T.OR, T.IDENTIFIER, T.CLASS, T.IDENTIFIER, T.THIS, T.EOF], kinds)

	def test_lines_count_inside_strings(self):
		report = Report(verbose=False)
		tokens = scan_text('"one\ntwo"\nx', report)
		self.assertEqual("one\ntwo", tokens[0].literal)
		self.assertEqual(3, tokens[1].line)

	def test_errors_do_not_stop_the_scan(self):
		kinds, report = _kinds("a $ b")
		self.assertEqual([T.IDENTIFIER, T.IDENTIFIER, T.EOF], kinds)
		self.assertTrue(report.sick())

	def test_comments_run_to_end_of_line(self):
		report = Report(verbose=False)
		tokens = scan_text("a // b / c\nd / e", report)
		self.assertEqual([T.IDENTIFIER, T.IDENTIFIER, T.SLASH, T.IDENTIFIER, T.EOF], [t.kind for t in tokens])
		self.assertEqual([1, 2, 2, 2, 2], [t.line for t in tokens])

	def test_unterminated_string_is_reported_where_it_starts(self):
		report = Report(verbose=False)
		tokens = scan_text('x\n"abc\n\ndef', report)
		self.assertEqual([T.IDENTIFIER, T.EOF], [t.kind for t in tokens])
		self.assertEqual(["[line 2] Error: Unterminated string."], report.messages())
		self.assertEqual(4, tokens[-1].line)

	def test_always_ends_with_eof(self):
		for text in ["", "  \n\t", "// nothing", '"unterminated']:
			with self.subTest(text):
				kinds, _ = _kinds(text)
				self.assertEqual(T.EOF, kinds[-1])

class ParserTests(unittest.TestCase):

	def test_precedence(self):
		[stmt] = _parse("1 + 2 * 3;")
		expr = stmt.expression
		self.assertIsInstance(expr, syntax.Binary)
		self.assertIs(T.PLUS, expr.op.kind)
		self.assertIsInstance(expr.rhs, syntax.Binary)
		self.assertIs(T.STAR, expr.rhs.op.kind)

	def test_comparison_binds_tighter_than_equality(self):
		[stmt] = _parse("2 > 1 == true;")
		expr = stmt.expression
		self.assertIs(T.EQUAL_EQUAL, expr.op.kind)
		self.assertIs(T.GREATER, expr.lhs.op.kind)

	def test_logical_nodes(self):
		[stmt] = _parse("a or b and c;")
		expr = stmt.expression
		self.assertIsInstance(expr, syntax.Logical)
		self.assertIs(T.OR, expr.op.kind)
		self.assertIsInstance(expr.rhs, syntax.Logical)
		self.assertIs(T.AND, expr.rhs.op.kind)

	def test_assignment_is_right_associative(self):
		[stmt] = _parse("a = b = c;")
		expr = stmt.expression
		self.assertIsInstance(expr, syntax.Assign)
		self.assertIsInstance(expr.value, syntax.Assign)

	def test_property_assignment(self):
		[stmt] = _parse("a.b.c = 1;")
		expr = stmt.expression
		self.assertIsInstance(expr, syntax.Set)
		self.assertEqual("c", expr.name.lexeme)
		self.assertIsInstance(expr.subject, syntax.Get)

	def test_call_chain(self):
		[stmt] = _parse("a.b(c)(d).e;")
		expr = stmt.expression
		self.assertIsInstance(expr, syntax.Get)
		self.assertEqual("e", expr.name.lexeme)
		outer_call = expr.subject
		self.assertIsInstance(outer_call, syntax.Call)
		inner_call = outer_call.callee
		self.assertIsInstance(inner_call, syntax.Call)
		self.assertIsInstance(inner_call.callee, syntax.Get)
		self.assertEqual("b", inner_call.callee.name.lexeme)

	def test_for_loop_becomes_while_loop(self):
		[stmt] = _parse("for (var i = 0; i < 3; i = i + 1) print i;")
		self.assertIsInstance(stmt, syntax.Block)
		init, loop = stmt.statements
		self.assertIsInstance(init, syntax.Var)
		self.assertIsInstance(loop, syntax.While)
		self.assertIsInstance(loop.condition, syntax.Binary)
		body, increment = loop.body.statements
		self.assertIsInstance(body, syntax.Print)
		self.assertIsInstance(increment, syntax.Expression)
		self.assertIsInstance(increment.expression, syntax.Assign)

	def test_bare_for_loop(self):
		[stmt] = _parse("for (;;) print 1;")
		self.assertIsInstance(stmt, syntax.While)
		self.assertIsInstance(stmt.condition, syntax.Literal)
		self.assertIs(True, stmt.condition.value)
		self.assertIsInstance(stmt.body, syntax.Print)

	def test_class_declaration(self):
		[stmt] = _parse("class B < A { init(x) { this.x = x; } get() { return super.get(); } }")
		self.assertIsInstance(stmt, syntax.Class)
		self.assertEqual("A", stmt.superclass.name.lexeme)
		self.assertEqual(["init", "get"], [m.name.lexeme for m in stmt.methods])
		self.assertEqual(["x"], [p.lexeme for p in stmt.methods[0].params])

	def test_dangling_else_goes_with_nearest_if(self):
		[stmt] = _parse("if (a) if (b) print 1; else print 2;")
		self.assertIsNone(stmt.else_branch)
		self.assertIsNotNone(stmt.then_branch.else_branch)

	def test_recovery_keeps_good_statements(self):
		report = Report(verbose=False)
		statements = parse_text("print ;\nprint 1;\nvar x = ;\nprint 2;", report)
		self.assertEqual(2, len(report.messages()))
		self.assertEqual(2, len(statements))
		self.assertTrue(all(isinstance(s, syntax.Print) for s in statements))

if __name__ == '__main__':
	unittest.main()
