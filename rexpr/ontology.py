"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. The scanner, the parser, and the syntax module all
need them, and none of those should need each other to get them.
"""
from typing import Optional
from boozetools.parsing.interface import ParseError

class RustParseError(ParseError):
	"""
	Arguments are (message, spot) where spot is a slice into the source text,
	or None if the trouble is with the input as a whole.
	"""
	@property
	def message(self) -> str: return self.args[0]

	@property
	def spot(self) -> Optional[slice]: return self.args[1]

	def __str__(self): return self.message

class Phrase:
	"""
	Anything in the tree. Subclasses name their fields in FIELDS, in source order.
	The generic renderer walks those to print a node it has never heard of.
	"""
	FIELDS: tuple = ()

	def __repr__(self):
		inner = ", ".join("%s=%r" % (f, getattr(self, f)) for f in self.FIELDS)
		return "%s(%s)" % (type(self).__name__, inner)

class Expr(Phrase):
	""" Every expression variant wears a (possibly empty) list of attributes. """
	attrs: list
	FIELDS = ("attrs",)
