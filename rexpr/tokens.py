"""
Token trees, more or less the way a Rust procedural macro sees source text.

Punctuation comes one character at a time. A multi-character operator is a run
of puncts where every member but the last is `joint`, meaning the next source
character was punctuation too. Delimited groups nest, so a parser over these
never has to worry about balancing brackets.

The `spot` on each token is a slice into the source text, or None for tokens
that something other than the scanner invented.
"""
from typing import NamedTuple, Optional

PAREN, BRACKET, BRACE = "()", "[]", "{}"

class Ident(NamedTuple):
	text: str
	spot: Optional[slice] = None
	def __str__(self): return self.text

class Punct(NamedTuple):
	char: str
	joint: bool = False
	spot: Optional[slice] = None
	def __str__(self): return self.char

class Literal(NamedTuple):
	text: str
	spot: Optional[slice] = None
	def __str__(self): return self.text

class Lifetime(NamedTuple):
	text: str  # Includes the leading apostrophe.
	spot: Optional[slice] = None
	def __str__(self): return self.text
	def name(self): return self.text[1:]

class Group(NamedTuple):
	delimiter: str
	stream: tuple
	spot: Optional[slice] = None
	close: Optional[slice] = None
	def __str__(self): return self.delimiter

# Longest first, so greedy matching finds `<<=` before `<<`.
MULTI_CHAR_OPS = (
	"<<=", ">>=", "...", "..=",
	"::", "->", "=>", "==", "!=", "<=", ">=", "&&", "||",
	"+=", "-=", "*=", "/=", "%=", "^=", "&=", "|=",
	"<<", ">>", "..",
)

PUNCT_CHARS = frozenset("=<>!~+-*/%^&|@.,;:#$?")

STRICT_KEYWORDS = frozenset("""
	as break const continue crate else enum extern false fn for if impl in let loop match mod
	move mut pub ref return self Self static struct super trait true type unsafe use where while
	async await dyn abstract become box do final macro override priv typeof unsized virtual yield try
""".split())

def punct(op:str) -> tuple:
	""" Synthesize the puncts of one operator, joint within and alone at the end. """
	return tuple(Punct(c, i < len(op) - 1) for i, c in enumerate(op))
