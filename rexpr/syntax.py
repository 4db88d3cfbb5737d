"""
The set of parse-nodes in simple form.

Expression variants carry the names the Rust reference uses for them, and each
one begins with its list of attributes. Supporting structures (arms, field
values, members, statements) come first; the expression variants follow in
alphabetical order.

Syntax that this project deliberately does not model in detail (patterns,
types, paths, macro bodies, generic arguments) is kept as the token trees the
parser consumed for it: the subclasses of `Opaque`, `PathSpec` and `MacroCall`.
"""
from typing import Optional, Sequence
from .ontology import Phrase, Expr
from .tokens import Ident, Literal, Lifetime, Group
from . import literals

class Attribute(Phrase):
	""" `#[...]` or, when inner, `#![...]`, spelled by its tokens. """
	FIELDS = ("inner", "tokens")
	def __init__(self, inner:bool, tokens:tuple):
		self.inner, self.tokens = inner, tokens

class Label(Phrase):
	""" A loop or block label, or the target of break/continue. """
	FIELDS = ("lifetime",)
	def __init__(self, lifetime:Lifetime): self.lifetime = lifetime
	def name(self) -> str: return self.lifetime.name()

class Member(Phrase):
	""" Either a named field or a tuple index; exactly one of these is not None. """
	FIELDS = ("name", "index")
	def __init__(self, name:Optional[str]=None, index:Optional[int]=None):
		assert (name is None) != (index is None)
		self.name, self.index = name, index
	def is_named(self) -> bool: return self.name is not None

class Opaque(Phrase):
	""" Syntax kept as nothing more than the tokens which spell it. """
	FIELDS = ("tokens",)
	def __init__(self, tokens:tuple): self.tokens = tuple(tokens)

class Pat(Opaque): pass
class Ty(Opaque): pass
class GenericArgs(Opaque): pass  # Includes the `::` of a turbofish.
class ReturnType(Opaque): pass  # Empty, or `-> T`.
class BoundLifetimes(Opaque): pass  # `for<'a, ...>`

class PathSpec(Phrase):
	"""
	Segments are token-tuples, each an identifier perhaps followed by generic arguments.
	A segment of length one has no generic arguments.
	"""
	FIELDS = ("leading_colon", "segments")
	def __init__(self, leading_colon:bool, segments:Sequence[tuple]):
		assert segments
		self.leading_colon, self.segments = leading_colon, list(segments)
	def is_mod_style(self) -> bool: return all(len(s) == 1 for s in self.segments)

class QSelf(Phrase):
	""" The `<T as Trait>` part of a qualified path; `position` segments of the path belong inside the brackets. """
	FIELDS = ("ty", "position")
	def __init__(self, ty:Ty, position:int):
		self.ty, self.position = ty, position

class MacroCall(Phrase):
	FIELDS = ("path", "group")
	def __init__(self, path:PathSpec, group:Group):
		self.path, self.group = path, group
	def is_braced(self) -> bool: return self.group.delimiter == "{}"

class BinOp(Phrase):
	""" Name is the operator's proper name (e.g. "AddAssign"); tokens spell it. """
	FIELDS = ("name", "tokens")
	def __init__(self, name:str, tokens:tuple):
		self.name, self.tokens = name, tuple(tokens)

class UnOp(BinOp):
	pass

class RangeLimits(BinOp):
	""" Name is "HalfOpen" for `..` or "Closed" for `..=` """
	pass

#######################################################################
#
#  Literals decode lazily, from the exact token text.
#

class LitKind(Phrase):
	FIELDS = ("token",)
	def __init__(self, token:Literal): self.token = token
	def suffix(self) -> str: return literals.suffix(self.token.text)

class LitStr(LitKind):
	def value(self) -> str: return literals.str_value(self.token.text)

class LitByteStr(LitKind):
	def value(self) -> bytes: return literals.byte_str_value(self.token.text)

class LitCStr(LitKind):
	def value(self) -> bytes: return literals.c_str_value(self.token.text)

class LitByte(LitKind):
	def value(self) -> int: return literals.byte_value(self.token.text)

class LitChar(LitKind):
	def value(self) -> str: return literals.char_value(self.token.text)

class LitInt(LitKind):
	def base10_digits(self) -> str: return literals.int_digits(self.token.text)

class LitFloat(LitKind):
	def base10_digits(self) -> str: return literals.float_digits(self.token.text)

class LitBool(LitKind):
	def value(self) -> bool: return self.token.text == "true"
	def suffix(self) -> str: return ""

class LitVerbatim(LitKind):
	""" A literal token that does not decode as any kind we know. """
	def suffix(self) -> str: return ""

_LIT_KINDS = {
	"Str": LitStr, "ByteStr": LitByteStr, "CStr": LitCStr, "Byte": LitByte,
	"Char": LitChar, "Int": LitInt, "Float": LitFloat,
}

def lit_from_token(token) -> LitKind:
	if isinstance(token, Ident):
		assert token.text in ("true", "false"), token
		return LitBool(token)
	cls = _LIT_KINDS[literals.kind_of(token.text)]
	if cls is LitInt:
		try: literals.int_digits(token.text)
		except literals.BadLiteral: return LitVerbatim(token)
	return cls(token)

#######################################################################
#
#  Blocks and statements
#

class Body(Phrase):
	""" The braces of a block and the statements within them. """
	FIELDS = ("stmts",)
	def __init__(self, stmts:list):
		self.stmts = stmts

	def sole_expression(self) -> Optional[Expr]:
		""" The tail expression, if it is the whole content of the block """
		if len(self.stmts) == 1:
			stmt = self.stmts[0]
			if isinstance(stmt, StmtExpr) and not stmt.semi:
				return stmt.expr

class Local(Phrase):
	""" `let pat: ty = init else { diverge };` """
	FIELDS = ("attrs", "pat", "ty", "init", "diverge")
	def __init__(self, attrs:list, pat:Pat, ty:Optional[Ty], init:Optional[Expr], diverge:Optional[Body]):
		self.attrs, self.pat, self.ty, self.init, self.diverge = attrs, pat, ty, init, diverge

class StmtExpr(Phrase):
	FIELDS = ("expr", "semi")
	def __init__(self, expr:Expr, semi:bool):
		self.expr, self.semi = expr, semi

class Item(Opaque):
	""" Functions, structs, uses, and so forth, declared within a block """
	pass

class Arm(Phrase):
	FIELDS = ("attrs", "pat", "guard", "body", "comma")
	def __init__(self, attrs:list, pat:Pat, guard:Optional[Expr], body:Expr, comma:bool):
		self.attrs, self.pat, self.guard, self.body, self.comma = attrs, pat, guard, body, comma

class FieldValue(Phrase):
	""" One field of a struct literal. Without a colon, it's the `Point { x, y }` shorthand. """
	FIELDS = ("attrs", "member", "colon", "expr")
	def __init__(self, attrs:list, member:Member, colon:bool, expr:Expr):
		self.attrs, self.member, self.colon, self.expr = attrs, member, colon, expr

#######################################################################
#
#  Expression variants
#

class Array(Expr):
	FIELDS = ("attrs", "elems")
	def __init__(self, attrs:list, elems:list[Expr]):
		self.attrs, self.elems = attrs, elems

class Assign(Expr):
	FIELDS = ("attrs", "left", "right")
	def __init__(self, attrs:list, left:Expr, right:Expr):
		self.attrs, self.left, self.right = attrs, left, right

class Async(Expr):
	FIELDS = ("attrs", "capture", "block")
	def __init__(self, attrs:list, capture:bool, block:Body):
		self.attrs, self.capture, self.block = attrs, capture, block

class Await(Expr):
	FIELDS = ("attrs", "base")
	def __init__(self, attrs:list, base:Expr):
		self.attrs, self.base = attrs, base

class Binary(Expr):
	FIELDS = ("attrs", "left", "op", "right")
	def __init__(self, attrs:list, left:Expr, op:BinOp, right:Expr):
		self.attrs, self.left, self.op, self.right = attrs, left, op, right

class Block(Expr):
	FIELDS = ("attrs", "label", "block")
	def __init__(self, attrs:list, label:Optional[Label], block:Body):
		self.attrs, self.label, self.block = attrs, label, block

class Break(Expr):
	FIELDS = ("attrs", "label", "expr")
	def __init__(self, attrs:list, label:Optional[Label], expr:Optional[Expr]):
		self.attrs, self.label, self.expr = attrs, label, expr

class Call(Expr):
	FIELDS = ("attrs", "func", "args")
	def __init__(self, attrs:list, func:Expr, args:list[Expr]):
		self.attrs, self.func, self.args = attrs, func, args

class Cast(Expr):
	FIELDS = ("attrs", "expr", "ty")
	def __init__(self, attrs:list, expr:Expr, ty:Ty):
		self.attrs, self.expr, self.ty = attrs, expr, ty

class Closure(Expr):
	FIELDS = ("attrs", "lifetimes", "constness", "movability", "asyncness", "capture", "inputs", "output", "body")
	def __init__(
		self,
		attrs:list,
		lifetimes:Optional[BoundLifetimes],
		constness:bool,
		movability:bool,
		asyncness:bool,
		capture:bool,
		inputs:list[Pat],
		output:ReturnType,
		body:Expr,
	):
		self.attrs, self.lifetimes = attrs, lifetimes
		self.constness, self.movability, self.asyncness, self.capture = constness, movability, asyncness, capture
		self.inputs, self.output, self.body = inputs, output, body

class Const(Expr):
	FIELDS = ("attrs", "block")
	def __init__(self, attrs:list, block:Body):
		self.attrs, self.block = attrs, block

class Continue(Expr):
	FIELDS = ("attrs", "label")
	def __init__(self, attrs:list, label:Optional[Label]):
		self.attrs, self.label = attrs, label

class Field(Expr):
	FIELDS = ("attrs", "base", "member")
	def __init__(self, attrs:list, base:Expr, member:Member):
		self.attrs, self.base, self.member = attrs, base, member

class ForLoop(Expr):
	FIELDS = ("attrs", "label", "pat", "expr", "body")
	def __init__(self, attrs:list, label:Optional[Label], pat:Pat, expr:Expr, body:Body):
		self.attrs, self.label, self.pat, self.expr, self.body = attrs, label, pat, expr, body

class Group(Expr):
	""" An expression in invisible delimiters. Macro expansion makes these; plain text never does. """
	FIELDS = ("attrs", "expr")
	def __init__(self, attrs:list, expr:Expr):
		self.attrs, self.expr = attrs, expr

class If(Expr):
	FIELDS = ("attrs", "cond", "then_branch", "else_branch")
	def __init__(self, attrs:list, cond:Expr, then_branch:Body, else_branch:Optional[Expr]):
		self.attrs, self.cond, self.then_branch, self.else_branch = attrs, cond, then_branch, else_branch

class Index(Expr):
	FIELDS = ("attrs", "expr", "index")
	def __init__(self, attrs:list, expr:Expr, index:Expr):
		self.attrs, self.expr, self.index = attrs, expr, index

class Infer(Expr):
	def __init__(self, attrs:list): self.attrs = attrs

class Let(Expr):
	FIELDS = ("attrs", "pat", "expr")
	def __init__(self, attrs:list, pat:Pat, expr:Expr):
		self.attrs, self.pat, self.expr = attrs, pat, expr

class Lit(Expr):
	FIELDS = ("attrs", "lit")
	def __init__(self, attrs:list, lit:LitKind):
		self.attrs, self.lit = attrs, lit

class Loop(Expr):
	FIELDS = ("attrs", "label", "body")
	def __init__(self, attrs:list, label:Optional[Label], body:Body):
		self.attrs, self.label, self.body = attrs, label, body

class Macro(Expr):
	FIELDS = ("attrs", "mac")
	def __init__(self, attrs:list, mac:MacroCall):
		self.attrs, self.mac = attrs, mac

class Match(Expr):
	FIELDS = ("attrs", "expr", "arms")
	def __init__(self, attrs:list, expr:Expr, arms:list[Arm]):
		self.attrs, self.expr, self.arms = attrs, expr, arms

class MethodCall(Expr):
	FIELDS = ("attrs", "receiver", "method", "turbofish", "args")
	def __init__(self, attrs:list, receiver:Expr, method:str, turbofish:Optional[GenericArgs], args:list[Expr]):
		self.attrs, self.receiver, self.method, self.turbofish, self.args = attrs, receiver, method, turbofish, args

class Paren(Expr):
	FIELDS = ("attrs", "expr")
	def __init__(self, attrs:list, expr:Expr):
		self.attrs, self.expr = attrs, expr

class Path(Expr):
	FIELDS = ("attrs", "qself", "path")
	def __init__(self, attrs:list, qself:Optional[QSelf], path:PathSpec):
		self.attrs, self.qself, self.path = attrs, qself, path

class Range(Expr):
	FIELDS = ("attrs", "start", "limits", "end")
	def __init__(self, attrs:list, start:Optional[Expr], limits:RangeLimits, end:Optional[Expr]):
		self.attrs, self.start, self.limits, self.end = attrs, start, limits, end

class RawAddr(Expr):
	FIELDS = ("attrs", "mutability", "expr")
	def __init__(self, attrs:list, mutability:bool, expr:Expr):
		self.attrs, self.mutability, self.expr = attrs, mutability, expr

class Reference(Expr):
	FIELDS = ("attrs", "mutability", "expr")
	def __init__(self, attrs:list, mutability:bool, expr:Expr):
		self.attrs, self.mutability, self.expr = attrs, mutability, expr

class Repeat(Expr):
	FIELDS = ("attrs", "expr", "len")
	def __init__(self, attrs:list, expr:Expr, len:Expr):
		self.attrs, self.expr, self.len = attrs, expr, len

class Return(Expr):
	FIELDS = ("attrs", "expr")
	def __init__(self, attrs:list, expr:Optional[Expr]):
		self.attrs, self.expr = attrs, expr

class Struct(Expr):
	FIELDS = ("attrs", "qself", "path", "fields", "dot2", "rest")
	def __init__(self, attrs:list, qself:Optional[QSelf], path:PathSpec, fields:list[FieldValue], dot2:bool, rest:Optional[Expr]):
		assert dot2 or rest is None
		self.attrs, self.qself, self.path = attrs, qself, path
		self.fields, self.dot2, self.rest = fields, dot2, rest

class Try(Expr):
	FIELDS = ("attrs", "expr")
	def __init__(self, attrs:list, expr:Expr):
		self.attrs, self.expr = attrs, expr

class TryBlock(Expr):
	FIELDS = ("attrs", "block")
	def __init__(self, attrs:list, block:Body):
		self.attrs, self.block = attrs, block

class Tuple(Expr):
	FIELDS = ("attrs", "elems")
	def __init__(self, attrs:list, elems:list[Expr]):
		self.attrs, self.elems = attrs, elems

class Unary(Expr):
	FIELDS = ("attrs", "op", "expr")
	def __init__(self, attrs:list, op:UnOp, expr:Expr):
		self.attrs, self.op, self.expr = attrs, op, expr

class Unsafe(Expr):
	FIELDS = ("attrs", "block")
	def __init__(self, attrs:list, block:Body):
		self.attrs, self.block = attrs, block

class Verbatim(Expr):
	"""
	Expression syntax that is recognized but not modeled, such as `become f()`.
	Any attributes are part of the tokens, so `attrs` stays empty.
	"""
	FIELDS = ("tokens",)
	def __init__(self, tokens:tuple):
		self.attrs = []
		self.tokens = tuple(tokens)

class While(Expr):
	FIELDS = ("attrs", "label", "cond", "body")
	def __init__(self, attrs:list, label:Optional[Label], cond:Expr, body:Body):
		self.attrs, self.label, self.cond, self.body = attrs, label, cond, body

class Yield(Expr):
	FIELDS = ("attrs", "expr")
	def __init__(self, attrs:list, expr:Optional[Expr]):
		self.attrs, self.expr = attrs, expr

def attach(expr:Expr, attrs:list) -> Expr:
	""" Outer attributes go in front of whatever the expression already wears. """
	if attrs and not isinstance(expr, Verbatim):
		expr.attrs = attrs + expr.attrs
	return expr

BLOCK_LIKE = (If, Match, Block, Unsafe, While, Loop, ForLoop, TryBlock, Const)

def is_block_like(expr:Expr) -> bool:
	""" True of expressions that end a statement without needing a semicolon """
	if isinstance(expr, BLOCK_LIKE): return True
	return isinstance(expr, Macro) and expr.mac.is_braced()
