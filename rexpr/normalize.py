"""
Stable spellings for operators and stable values for literals.

Operators have a closed table of symbols. An operator whose name is not in the
table is spelled with its own tokens instead, so a newer parser never causes
a failure here. Literals keep their digits exactly as written, never passing
through a binary float.
"""
from . import syntax
from .render import render

BINARY_SYMBOLS = {
	"Add": "+", "Sub": "-", "Mul": "*", "Div": "/", "Rem": "%",
	"And": "&&", "Or": "||",
	"BitXor": "^", "BitAnd": "&", "BitOr": "|", "Shl": "<<", "Shr": ">>",
	"Eq": "==", "Lt": "<", "Le": "<=", "Ne": "!=", "Ge": ">=", "Gt": ">",
	"AddAssign": "+=", "SubAssign": "-=", "MulAssign": "*=", "DivAssign": "/=", "RemAssign": "%=",
	"BitXorAssign": "^=", "BitAndAssign": "&=", "BitOrAssign": "|=", "ShlAssign": "<<=", "ShrAssign": ">>=",
}

UNARY_SYMBOLS = {"Deref": "*", "Not": "!", "Neg": "-"}

RANGE_LIMITS = ("HalfOpen", "Closed")

def binop_symbol(op:syntax.BinOp) -> str:
	return BINARY_SYMBOLS.get(op.name) or render(op)

def unop_symbol(op:syntax.UnOp) -> str:
	return UNARY_SYMBOLS.get(op.name) or render(op)

def range_limits(limits:syntax.RangeLimits) -> str:
	return limits.name if limits.name in RANGE_LIMITS else render(limits)

def _bytes_as_text(data:bytes) -> str:
	""" Each byte becomes the code point of the same number, so nothing is lost. """
	return data.decode("latin-1")

def lit_to_value(lit:syntax.LitKind) -> dict:
	"""
	{kind, value, suffix} for the known kinds; booleans have no suffix.
	A literal that would not decode comes out as {kind: "Verbatim", tokens}.
	"""
	if isinstance(lit, syntax.LitBool):
		return {"kind": "Bool", "value": lit.value()}
	if isinstance(lit, syntax.LitStr): kind, value = "Str", lit.value()
	elif isinstance(lit, syntax.LitByteStr): kind, value = "ByteStr", _bytes_as_text(lit.value())
	elif isinstance(lit, syntax.LitCStr): kind, value = "CStr", lit.value().decode("utf-8", errors="replace")
	elif isinstance(lit, syntax.LitByte): kind, value = "Byte", lit.value()
	elif isinstance(lit, syntax.LitChar): kind, value = "Char", lit.value()
	elif isinstance(lit, syntax.LitInt): kind, value = "Int", lit.base10_digits()
	elif isinstance(lit, syntax.LitFloat): kind, value = "Float", lit.base10_digits()
	elif isinstance(lit, syntax.LitVerbatim): return {"kind": "Verbatim", "tokens": render(lit)}
	else: return {"kind": "Unknown", "tokens": render(lit)}
	return {"kind": kind, "value": value, "suffix": lit.suffix()}
