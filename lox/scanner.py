"""
Lexical analysis with a finite-automaton scanner from booze-tools.
Each rule is a regular pattern with an action. The longest match wins;
between equally long matches, the rule declared first wins.

Errors (unexpected characters, unterminated strings) go to the report
and scanning carries on, so the caller always gets a token list ending
in EOF. Whoever calls this must check the report before trusting the tokens.
"""
import sys
from boozetools.scanning import miniscan
from boozetools.scanning.engine import IterableScanner
from .ontology import Token, TokenType, RESERVED
from .diagnostics import Report

T = TokenType

PUNCTUATION = {
	'(': T.LEFT_PAREN,
	')': T.RIGHT_PAREN,
	'{': T.LEFT_BRACE,
	'}': T.RIGHT_BRACE,
	',': T.COMMA,
	'.': T.DOT,
	'-': T.MINUS,
	'+': T.PLUS,
	';': T.SEMICOLON,
	'*': T.STAR,
	'/': T.SLASH,
	'!': T.BANG,
	'!=': T.BANG_EQUAL,
	'=': T.EQUAL,
	'==': T.EQUAL_EQUAL,
	'<': T.LESS,
	'<=': T.LESS_EQUAL,
	'>': T.GREATER,
	'>=': T.GREATER_EQUAL,
}

class LoxScanner(IterableScanner):
	""" The usual scanner, plus a line counter and somewhere to complain. """
	def __init__(self, text:str, report:Report):
		super().__init__(text, LEX.get_dfa(), LEX, start=None)
		self.line = 1
		self.report = report

	def emit(self, kind:TokenType, literal=None, lexeme:str=None):
		if lexeme is None: lexeme = self.match()
		self.token(kind, Token(kind, lexeme, literal, self.line, self.left, self.right))

LEX = miniscan.Definition("Lox")
LEX.ignore(r'[{SP}\t\r]+')
LEX.ignore(r'\/\/.*')

@LEX.on(r'\n')
def scan_newline(yy:LoxScanner): yy.line += 1

@LEX.on(r'[\(\)\{\}\,\.\-\+\;\*\/]|[!=<>]=?')
def scan_punctuation(yy:LoxScanner): yy.emit(PUNCTUATION[yy.match()])

# A trailing dot stays behind unless a digit follows it.
@LEX.on(r'\d+(\.\d+)?')
def scan_number(yy:LoxScanner): yy.emit(T.NUMBER, float(yy.match()))

@LEX.on(r'[\l_]\w*')
def scan_word(yy:LoxScanner):
	text = yy.match()
	if text in RESERVED: yy.emit(RESERVED[text])
	else: yy.emit(T.IDENTIFIER, lexeme=sys.intern(text))

@LEX.on(r'"[^"]*"')
def scan_string(yy:LoxScanner):
	text = yy.match()
	yy.line += text.count('\n')
	yy.emit(T.STRING, text[1:-1])

@LEX.on(r'"[^"]*')
def scan_unterminated_string(yy:LoxScanner):
	yy.report.unterminated_string(yy.line, yy.left, yy.right)
	yy.line += yy.match().count('\n')

@LEX.on(r'{ANY}')
def scan_stray(yy:LoxScanner):
	yy.report.unexpected_character(yy.line, yy.left)

def scan_text(text:str, report:Report) -> list[Token]:
	""" Scan the whole text at once. """
	yy = LoxScanner(text, report)
	tokens = [token for kind, token in yy]
	tokens.append(Token(T.EOF, "", None, yy.line, len(text), len(text)))
	report.info("Scanned", len(tokens), "tokens")
	return tokens
