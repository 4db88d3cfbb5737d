"""
The parser for Rust expressions, working over token trees.

Operators and their precedence are the business of a MacroParse grammar,
`Rust.md`, which this module feeds one operand or operator at a time. The
operands themselves, and the patterns, types, and generic arguments within
them, are parsed here by recursive descent, because where one ends depends
on context the grammar cannot see: whether a struct literal may appear (not
in a condition like `if x == y { ... }`), whether a `..` has an end, and
whether a block has already finished a statement.

Patterns, types, and generic arguments are parsed only far enough to know
where they end. What comes out for them is the run of tokens they occupy.
"""
import re
from functools import partial
from pathlib import Path
from typing import Optional
from boozetools.macroparse.runtime import TypicalApplication, make_tables, upgrade_tables_in_place
from boozetools.macroparse import expansion
from boozetools.parsing import shift_reduce
from .ontology import RustParseError, Expr
from .tokens import Ident, Punct, Literal, Lifetime, Group, PAREN, BRACKET, BRACE, STRICT_KEYWORDS
from .scanner import scan
from . import literals, syntax

# (spelling, name, terminal), with longer spellings before their prefixes.
BINARY_OPERATORS = (
	("<<=", "ShlAssign", "assign_op"), (">>=", "ShrAssign", "assign_op"),
	("&&", "And", "&&"), ("||", "Or", "||"),
	("==", "Eq", "relop"), ("!=", "Ne", "relop"), ("<=", "Le", "relop"), (">=", "Ge", "relop"),
	("+=", "AddAssign", "assign_op"), ("-=", "SubAssign", "assign_op"), ("*=", "MulAssign", "assign_op"),
	("/=", "DivAssign", "assign_op"), ("%=", "RemAssign", "assign_op"), ("^=", "BitXorAssign", "assign_op"),
	("&=", "BitAndAssign", "assign_op"), ("|=", "BitOrAssign", "assign_op"),
	("<<", "Shl", "shift"), (">>", "Shr", "shift"),
	("+", "Add", "sum"), ("-", "Sub", "sum"),
	("*", "Mul", "product"), ("/", "Div", "product"), ("%", "Rem", "product"),
	("^", "BitXor", "^"), ("&", "BitAnd", "&"), ("|", "BitOr", "|"),
	("<", "Lt", "relop"), (">", "Gt", "relop"),
)

UNARY_OPERATORS = (("*", "Deref"), ("!", "Not"), ("-", "Neg"))

PATH_KEYWORDS = frozenset(["self", "Self", "super", "crate"])
_TUPLE_INDEX_PAIR = re.compile(r"([0-9]+)\.([0-9]+)")
_TUPLE_INDEX = re.compile(r"[0-9]+")

_tables = make_tables(Path(__file__).parent/"Rust.md")

class OperatorParser(TypicalApplication):
	"""
	Drives the operator grammar over the terminals a `Parser` hands it.
	There is no scanner table: the terminals come already formed.
	"""

	def __init__(self, tables):
		upgrade_tables_in_place(tables)
		self.hfa = expansion.CompactHFA(tables['parser'])
		self.combine = self.bind_parse_actions(self.hfa.each_constructor())

	def parse(self, terminals) -> Expr:
		return shift_reduce.parse(self.hfa, self.combine, terminals, on_error=self)

	@staticmethod
	def parse_prefix(build, operand): return build(operand)

	@staticmethod
	def parse_cast(expr, ty): return syntax.Cast([], expr, ty)

	@staticmethod
	def parse_binary(lhs, op, rhs):
		if op.name.endswith("Assign"): _not_a_range(lhs, op.tokens[0])
		return syntax.Binary([], lhs, op, rhs)

	@staticmethod
	def parse_assign(lhs, eq, rhs):
		_not_a_range(lhs, eq)
		return syntax.Assign([], lhs, rhs)

	@staticmethod
	def parse_range(start, limits, end):
		_not_a_range(start, limits.tokens[0])
		return syntax.Range([], start, limits, end)

	@staticmethod
	def parse_range_from(start, limits):
		_not_a_range(start, limits.tokens[0])
		return syntax.Range([], start, limits, None)

	def unexpected_token(self, kind, semantic, pds):
		if kind == "relop": raise RustParseError("comparison operators cannot be chained", semantic.tokens[0].spot)
		raise RustParseError("unexpected token", _spot_of(semantic))

	def unexpected_eof(self, pds):
		raise RustParseError("unexpected end of input", None)

	def exception_parsing(self, ex: Exception, constructor_id:int, args):
		raise ex from None

def _not_a_range(lhs:Expr, tt):
	""" A range does not take another range, nor an assignment, after it. """
	if isinstance(lhs, syntax.Range): raise RustParseError("unexpected token", tt.spot)

def _spot_of(semantic) -> Optional[slice]:
	if isinstance(semantic, Punct): return semantic.spot
	tokens = getattr(semantic, "tokens", ())
	if tokens: return tokens[0].spot

operator_parser = OperatorParser(_tables)

def parse_expr(text:str) -> Expr:
	"""
	Parse exactly one expression, and nothing else, from the text.
	Raises RustParseError if that's not what the text holds.
	"""
	return _parse_whole(text, Parser.expr, "an expression")

def parse_type(text:str) -> syntax.Ty:
	return _parse_whole(text, Parser.ty_spec, "type")

def parse_path(text:str) -> syntax.PathSpec:
	""" A path the way it appears in a type, with generic arguments but no turbofish """
	return _parse_whole(text, Parser.type_style_path, "path")

def parse_lit(text:str) -> syntax.LitKind:
	return _parse_whole(text, Parser.lone_literal, "literal")

def _parse_whole(text:str, method, what:str):
	try:
		p = Parser(text, scan(text))
		if p.cur.at_end(): p.error("expected " + what)
		result = method(p)
		p.expect_end()
		return result
	except RecursionError:
		raise RustParseError("expression nested too deeply", None) from None

class Cursor:
	""" A position within one token stream, which ends at `end` in the source text. """
	def __init__(self, stream:tuple, end:slice):
		self.stream, self.pos, self.end = stream, 0, end

	def peek(self, n:int=0):
		i = self.pos + n
		if i < len(self.stream): return self.stream[i]

	def at_end(self) -> bool: return self.pos >= len(self.stream)

	def bump(self, n:int=1) -> tuple:
		taken = self.stream[self.pos:self.pos+n]
		self.pos += n
		return taken

	def since(self, start:int) -> tuple:
		return self.stream[start:self.pos]

	def spot(self) -> slice:
		tt = self.peek()
		return self.end if tt is None else tt.spot

class Parser:
	def __init__(self, text:str, stream:tuple):
		self.cur = Cursor(stream, slice(len(text), len(text)))

	#######################################################################
	#
	#  Looking at tokens, and taking them
	#

	def error(self, message:str):
		if self.cur.at_end(): message = "unexpected end of input, " + message
		raise RustParseError(message, self.cur.spot())

	def peek_op(self, op:str, n:int=0) -> bool:
		""" Does the operator spelled `op` begin n token-trees ahead? """
		for i, c in enumerate(op):
			tt = self.cur.peek(n+i)
			if not isinstance(tt, Punct) or tt.char != c: return False
			if i < len(op) - 1 and not tt.joint: return False
		return True

	def peek_colon(self, n:int=0) -> bool:
		""" A lone `:`, as opposed to the first half of `::` """
		return self.peek_op(":", n) and not self.peek_op("::", n)

	def peek_assign(self) -> bool:
		return self.peek_op("=") and not (self.peek_op("==") or self.peek_op("=>"))

	def peek_keyword(self, word:str, n:int=0) -> bool:
		tt = self.cur.peek(n)
		return isinstance(tt, Ident) and tt.text == word

	def peek_ident(self, n:int=0) -> bool:
		""" An identifier proper: not a keyword, and not the underscore """
		tt = self.cur.peek(n)
		return isinstance(tt, Ident) and tt.text not in STRICT_KEYWORDS and tt.text != "_"

	def peek_group(self, delimiter:str, n:int=0) -> bool:
		tt = self.cur.peek(n)
		return isinstance(tt, Group) and tt.delimiter == delimiter

	def peek_lifetime(self, n:int=0) -> bool:
		return isinstance(self.cur.peek(n), Lifetime)

	def peek_literal(self, n:int=0) -> bool:
		tt = self.cur.peek(n)
		return isinstance(tt, Literal) or self.peek_keyword("true", n) or self.peek_keyword("false", n)

	def peek_path_start(self, n:int=0) -> bool:
		if self.peek_ident(n) or self.peek_op("::", n) or self.peek_op("<", n): return True
		tt = self.cur.peek(n)
		return isinstance(tt, Ident) and tt.text in PATH_KEYWORDS

	def eat_op(self, op:str) -> bool:
		if self.peek_op(op):
			self.cur.bump(len(op))
			return True
		return False

	def eat_keyword(self, word:str) -> bool:
		if self.peek_keyword(word):
			self.cur.bump()
			return True
		return False

	def expect_op(self, op:str):
		if not self.eat_op(op): self.error("expected `%s`" % op)

	def expect_keyword(self, word:str):
		if not self.eat_keyword(word): self.error("expected `%s`" % word)

	def expect_group(self, delimiter:str) -> Group:
		if not self.peek_group(delimiter):
			self.error("expected %s" % {PAREN: "parentheses", BRACKET: "square brackets", BRACE: "curly braces"}[delimiter])
		return self.cur.bump()[0]

	def expect_end(self):
		if not self.cur.at_end(): self.error("unexpected token")

	def inside(self, group:Group, method, *args):
		""" Apply method to the contents of group, which it must consume completely. """
		outer = self.cur
		self.cur = Cursor(group.stream, group.close)
		try:
			result = method(*args)
			self.expect_end()
		finally:
			self.cur = outer
		return result

	def can_begin_expr(self) -> bool:
		tt = self.cur.peek()
		if tt is None: return False
		if isinstance(tt, (Ident, Literal, Lifetime, Group)): return True
		if self.peek_op("!"): return not self.peek_op("!=")
		if self.peek_op("-"): return not (self.peek_op("-=") or self.peek_op("->"))
		if self.peek_op("*"): return not self.peek_op("*=")
		if self.peek_op("|"): return not self.peek_op("|=")
		if self.peek_op("&"): return not (self.peek_op("&=") or self.peek_op("&&="))
		if self.peek_op("<"): return not (self.peek_op("<=") or self.peek_op("<<="))
		return self.peek_op("..") or self.peek_op("::") or self.peek_op("#")

	#######################################################################
	#
	#  Expressions
	#

	def lone_literal(self) -> syntax.LitKind:
		if not self.peek_literal(): self.error("expected literal")
		return syntax.lit_from_token(self.cur.bump()[0])

	def expr(self, allow_struct:bool=True, attrs:Optional[list]=None, first:Optional[Expr]=None) -> Expr:
		return operator_parser.parse(self.terminals(allow_struct, attrs or [], first))

	def terminals(self, allow_struct:bool, attrs:list, first:Optional[Expr]):
		"""
		Yield operands and operators for the operator grammar until the next
		token cannot continue the expression. If `first` is given, it is an
		operand already parsed. Otherwise `attrs` go with the first operand.
		"""
		if first is not None: yield "atom", first
		want_operand = first is None
		while True:
			if want_operand:
				begin = self.cur.pos
				kind, semantic = self.operand(begin, attrs + self.outer_attrs(), allow_struct)
				attrs = []
				want_operand = kind != "atom"
			else:
				step = self.operator(allow_struct)
				if step is None: return
				kind, semantic = step
				want_operand = kind not in ("AS", "RANGE_FROM")
			yield kind, semantic

	def operand(self, begin:int, attrs:list, allow_struct:bool) -> tuple:
		""" A prefix operator awaiting its operand, or else a whole operand """
		if self.peek_op("&"):
			self.cur.bump()
			raw = self.peek_keyword("raw") and (self.peek_keyword("const", 1) or self.peek_keyword("mut", 1))
			if raw: self.cur.bump()
			mutability = self.eat_keyword("mut")
			if raw and not mutability: self.expect_keyword("const")
			return "PREFIX", partial(syntax.RawAddr if raw else syntax.Reference, attrs, mutability)
		for spelling, name in UNARY_OPERATORS:
			if self.peek_op(spelling):
				return "PREFIX", partial(syntax.Unary, attrs, syntax.UnOp(name, self.cur.bump()))
		if self.peek_keyword("let"):
			return "LET", partial(syntax.Let, attrs, self.let_head())
		if self.peek_op(".."):
			limits = self.range_limits()
			if self.range_has_end(limits, allow_struct):
				return "RANGE_TO", partial(syntax.Range, attrs, None, limits)
			return "atom", syntax.Range(attrs, None, limits, None)
		return "atom", self.trailer(begin, attrs, allow_struct)

	def operator(self, allow_struct:bool) -> Optional[tuple]:
		for spelling, name, kind in BINARY_OPERATORS:
			if self.peek_op(spelling): return kind, syntax.BinOp(name, self.cur.bump(len(spelling)))
		if self.peek_assign(): return "=", self.cur.bump()[0]
		if self.peek_op(".."):
			limits = self.range_limits()
			return ("RANGE" if self.range_has_end(limits, allow_struct) else "RANGE_FROM"), limits
		if self.eat_keyword("as"): return "AS", self.ty_spec(allow_plus=False)

	def range_limits(self) -> syntax.RangeLimits:
		for spelling, name in (("..=", "Closed"), ("...", "Closed"), ("..", "HalfOpen")):
			if self.peek_op(spelling): return syntax.RangeLimits(name, self.cur.bump(len(spelling)))
		self.error("expected range operator")

	def range_has_end(self, limits:syntax.RangeLimits, allow_struct:bool) -> bool:
		if limits.name == "Closed": return True
		return self.can_begin_expr() and not self.peek_keyword("as") and (allow_struct or not self.peek_group(BRACE))

	def let_head(self) -> syntax.Pat:
		""" The `let PAT =` that begins a `let` in a condition """
		self.expect_keyword("let")
		pat = self.pat_spec(syntax.Pat, self.pat_multi)
		if not self.peek_assign(): self.error("expected `=`")
		self.cur.bump()
		return pat

	def trailer(self, begin:int, attrs:list, allow_struct:bool) -> Expr:
		expr = self.postfix(self.atom(allow_struct))
		if isinstance(expr, syntax.Verbatim):
			return syntax.Verbatim(self.cur.since(begin))
		return syntax.attach(expr, attrs)

	def postfix(self, expr:Expr) -> Expr:
		while True:
			if self.peek_group(PAREN):
				args = self.inside(self.cur.bump()[0], self.comma_exprs)
				expr = syntax.Call([], expr, args)
			elif self.peek_op(".") and not self.peek_op(".."):
				self.cur.bump()
				expr = self.dot(expr)
			elif self.peek_group(BRACKET):
				index = self.inside(self.cur.bump()[0], self.expr)
				expr = syntax.Index([], expr, index)
			elif self.peek_op("?"):
				self.cur.bump()
				expr = syntax.Try([], expr)
			else:
				return expr

	def dot(self, receiver:Expr) -> Expr:
		""" Whatever follows a dot: await, a field, a tuple index, or a method call """
		if self.eat_keyword("await"): return syntax.Await([], receiver)
		tt = self.cur.peek()
		if isinstance(tt, Literal) and literals.kind_of(tt.text) == "Float":
			# `x.0.1` scans as `x` `.` `0.1`, which is two tuple indices.
			m = _TUPLE_INDEX_PAIR.fullmatch(tt.text)
			if not m: self.error("unexpected token")
			self.cur.bump()
			inner = syntax.Field([], receiver, syntax.Member(index=int(m.group(1))))
			return syntax.Field([], inner, syntax.Member(index=int(m.group(2))))
		member = self.member()
		if member.is_named() and (self.peek_op("::") or self.peek_group(PAREN)):
			turbofish = self.turbofish() if self.peek_op("::") else None
			args = self.inside(self.expect_group(PAREN), self.comma_exprs)
			return syntax.MethodCall([], receiver, member.name, turbofish, args)
		return syntax.Field([], receiver, member)

	def member(self) -> syntax.Member:
		tt = self.cur.peek()
		if self.peek_ident():
			self.cur.bump()
			return syntax.Member(name=tt.text)
		if isinstance(tt, Literal) and _TUPLE_INDEX.fullmatch(tt.text):
			self.cur.bump()
			return syntax.Member(index=int(tt.text))
		self.error("expected identifier or integer")

	def comma_exprs(self) -> list:
		""" Comma-separated expressions up to the end of a group; a trailing comma is fine. """
		exprs = []
		while not self.cur.at_end():
			exprs.append(self.expr())
			if self.cur.at_end(): break
			self.expect_op(",")
		return exprs

	def atom(self, allow_struct:bool) -> Expr:
		if self.cur.at_end(): self.error("expected an expression")
		if self.peek_literal():
			return syntax.Lit([], self.lone_literal())
		if self.peek_keyword("async") and (self.peek_group(BRACE, 1) or (self.peek_keyword("move", 1) and self.peek_group(BRACE, 2))):
			return self.async_block()
		if self.peek_keyword("try") and self.peek_group(BRACE, 1):
			self.cur.bump()
			return syntax.TryBlock([], self.body())
		if self.peek_closure():
			return self.closure(allow_struct)
		if self.peek_keyword("builtin") and self.peek_op("#", 1):
			self.cur.bump(2)
			if not self.peek_ident(): self.error("expected identifier")
			self.cur.bump()
			self.expect_group(PAREN)
			return syntax.Verbatim(())
		if self.peek_path_start() or (self.peek_keyword("try") and (self.peek_op("!", 1) or self.peek_op("::", 1))):
			return self.path_expr(allow_struct)
		if self.peek_group(PAREN):
			return self.inside(self.cur.bump()[0], self.paren_or_tuple)
		if self.peek_keyword("break"): return self.expr_break(allow_struct)
		if self.eat_keyword("continue"):
			return syntax.Continue([], self.maybe_label())
		if self.eat_keyword("return"):
			return syntax.Return([], self.maybe_operand(allow_struct))
		if self.eat_keyword("become"):
			self.expr(allow_struct)
			return syntax.Verbatim(())
		if self.peek_group(BRACKET):
			return self.inside(self.cur.bump()[0], self.array_or_repeat)
		if self.eat_keyword("yield"):
			return syntax.Yield([], self.maybe_operand(allow_struct))
		if self.peek_block_like(): return self.block_like()
		if self.eat_keyword("_"): return syntax.Infer([])
		self.error("expected an expression")

	def maybe_label(self) -> Optional[syntax.Label]:
		if self.peek_lifetime(): return syntax.Label(self.cur.bump()[0])

	def maybe_operand(self, allow_struct:bool) -> Optional[Expr]:
		if self.can_begin_expr(): return self.expr(allow_struct)

	def expr_break(self, allow_struct:bool) -> syntax.Break:
		self.expect_keyword("break")
		label = self.maybe_label()
		value = None
		if self.can_begin_expr() and (allow_struct or not self.peek_group(BRACE)):
			value = self.expr(allow_struct)
		return syntax.Break([], label, value)

	def paren_or_tuple(self) -> Expr:
		if self.cur.at_end(): return syntax.Tuple([], [])
		first = self.expr()
		if self.cur.at_end(): return syntax.Paren([], first)
		self.expect_op(",")
		return syntax.Tuple([], [first] + self.comma_exprs())

	def array_or_repeat(self) -> Expr:
		if self.cur.at_end(): return syntax.Array([], [])
		first = self.expr()
		if self.eat_op(";"):
			return syntax.Repeat([], first, self.expr())
		if self.cur.at_end(): return syntax.Array([], [first])
		self.expect_op(",")
		return syntax.Array([], [first] + self.comma_exprs())

	def path_expr(self, allow_struct:bool) -> Expr:
		""" A path on its own, or the path of a macro invocation or struct literal """
		qself, path = self.qpath()
		if qself is None and path.is_mod_style() and self.peek_op("!") and not self.peek_op("!="):
			self.cur.bump()
			tt = self.cur.peek()
			if not isinstance(tt, Group): self.error("expected delimiter")
			self.cur.bump()
			return syntax.Macro([], syntax.MacroCall(path, tt))
		if allow_struct and self.peek_group(BRACE):
			return self.struct_literal(qself, path)
		return syntax.Path([], qself, path)

	def struct_literal(self, qself, path) -> syntax.Struct:
		def contents():
			fields, dot2, rest = [], False, None
			while not self.cur.at_end():
				if self.peek_op("..") and not self.peek_op("..=") and not self.peek_op("..."):
					self.cur.bump(2)
					dot2 = True
					if not self.cur.at_end(): rest = self.expr()
					break
				attrs = self.outer_attrs()
				tt = self.cur.peek()
				member = self.member()
				if member.is_named() and not self.peek_colon():
					value = syntax.Path([], None, syntax.PathSpec(False, [(tt,)]))
					fields.append(syntax.FieldValue(attrs, member, False, value))
				else:
					self.expect_op(":")
					fields.append(syntax.FieldValue(attrs, member, True, self.expr()))
				if self.cur.at_end(): break
				self.expect_op(",")
			return fields, dot2, rest
		fields, dot2, rest = self.inside(self.cur.bump()[0], contents)
		return syntax.Struct([], qself, path, fields, dot2, rest)

	def peek_closure(self) -> bool:
		if self.peek_op("|") or self.peek_keyword("move") or self.peek_keyword("static"): return True
		if self.peek_keyword("for") and self.peek_op("<", 1): return True
		if self.peek_keyword("const"): return not self.peek_group(BRACE, 1)
		if self.peek_keyword("async"): return self.peek_op("|", 1) or self.peek_keyword("move", 1)
		return False

	def closure(self, allow_struct:bool) -> syntax.Closure:
		lifetimes = None
		if self.peek_keyword("for"):
			start = self.cur.pos
			self.cur.bump()
			self.lifetime_params()
			lifetimes = syntax.BoundLifetimes(self.cur.since(start))
		constness = self.eat_keyword("const")
		movability = self.eat_keyword("static")
		asyncness = self.eat_keyword("async")
		capture = self.eat_keyword("move")
		inputs = []
		if not self.eat_op("||"):
			self.expect_op("|")
			while not self.peek_op("|"):
				inputs.append(self.pat_spec(syntax.Pat, self.closure_param))
				if not self.eat_op(","): break
			self.expect_op("|")
		if self.peek_op("->"):
			start = self.cur.pos
			self.cur.bump(2)
			self.ty(allow_plus=False)
			output = syntax.ReturnType(self.cur.since(start))
			body = syntax.Block([], None, self.body())
		else:
			output = syntax.ReturnType(())
			body = self.expr(allow_struct)
		return syntax.Closure([], lifetimes, constness, movability, asyncness, capture, inputs, output, body)

	def closure_param(self):
		self.outer_attrs()
		self.pat_single()
		if self.peek_colon():
			self.cur.bump()
			self.ty()

	def async_block(self) -> syntax.Async:
		self.expect_keyword("async")
		capture = self.eat_keyword("move")
		return syntax.Async([], capture, self.body())

	#######################################################################
	#
	#  Block-like expressions, statements, and attributes
	#

	def peek_block_like(self) -> bool:
		for word in ("if", "while", "for", "loop", "match"):
			if self.peek_keyword(word): return True
		for word in ("try", "unsafe", "const"):
			if self.peek_keyword(word) and self.peek_group(BRACE, 1): return True
		if self.peek_group(BRACE): return True
		return self.peek_lifetime() and self.peek_colon(1)

	def block_like(self) -> Expr:
		if self.peek_keyword("if"): return self.expr_if()
		if self.peek_keyword("match"): return self.expr_match()
		if self.eat_keyword("try"): return syntax.TryBlock([], self.body())
		if self.eat_keyword("unsafe"):
			attrs = []
			return syntax.Unsafe(attrs, self.body_with_inner(attrs))
		if self.eat_keyword("const"):
			attrs = []
			return syntax.Const(attrs, self.body_with_inner(attrs))
		label = None
		if self.peek_lifetime():
			label = syntax.Label(self.cur.bump()[0])
			self.expect_op(":")
		if self.peek_keyword("while"): return self.expr_while(label)
		if self.peek_keyword("for"): return self.expr_for(label)
		if self.peek_keyword("loop"):
			self.cur.bump()
			attrs = []
			return syntax.Loop(attrs, label, self.body_with_inner(attrs))
		if self.peek_group(BRACE):
			attrs = []
			return syntax.Block(attrs, label, self.body_with_inner(attrs))
		self.error("expected loop or block expression")

	def expr_if(self) -> syntax.If:
		self.expect_keyword("if")
		cond = self.expr(allow_struct=False)
		then_branch = self.body()
		else_branch = None
		if self.eat_keyword("else"):
			if self.peek_keyword("if"): else_branch = self.expr_if()
			elif self.peek_group(BRACE): else_branch = syntax.Block([], None, self.body())
			else: self.error("expected `if` or curly braces")
		return syntax.If([], cond, then_branch, else_branch)

	def expr_while(self, label) -> syntax.While:
		self.expect_keyword("while")
		cond = self.expr(allow_struct=False)
		attrs = []
		return syntax.While(attrs, label, cond, self.body_with_inner(attrs))

	def expr_for(self, label) -> syntax.ForLoop:
		self.expect_keyword("for")
		pat = self.pat_spec(syntax.Pat, self.pat_multi)
		self.expect_keyword("in")
		iterable = self.expr(allow_struct=False)
		attrs = []
		return syntax.ForLoop(attrs, label, pat, iterable, self.body_with_inner(attrs))

	def expr_match(self) -> syntax.Match:
		self.expect_keyword("match")
		scrutinee = self.expr(allow_struct=False)
		attrs = []
		def contents():
			attrs.extend(self.inner_attrs())
			return self.arms()
		arms = self.inside(self.expect_group(BRACE), contents)
		return syntax.Match(attrs, scrutinee, arms)

	def arms(self) -> list:
		arms = []
		while not self.cur.at_end():
			attrs = self.outer_attrs()
			pat = self.pat_spec(syntax.Pat, self.pat_multi)
			guard = self.expr() if self.eat_keyword("if") else None
			self.expect_op("=>")
			body = self.expr_early([])
			comma = self.eat_op(",")
			if not comma and not syntax.is_block_like(body) and not self.cur.at_end():
				self.error("expected `,` following `match` arm")
			arms.append(syntax.Arm(attrs, pat, guard, body, comma))
		return arms

	def body(self) -> syntax.Body:
		return self.inside(self.expect_group(BRACE), self.statements)

	def body_with_inner(self, attrs:list) -> syntax.Body:
		""" A block whose inner attributes belong to the expression that owns it """
		def contents():
			attrs.extend(self.inner_attrs())
			return self.statements()
		return self.inside(self.expect_group(BRACE), contents)

	def statements(self) -> syntax.Body:
		stmts = []
		while True:
			while self.eat_op(";"):
				stmts.append(syntax.StmtExpr(syntax.Verbatim(()), True))
			if self.cur.at_end(): break
			stmt = self.statement()
			stmts.append(stmt)
			if self.cur.at_end(): break
			if isinstance(stmt, syntax.StmtExpr) and not stmt.semi and not syntax.is_block_like(stmt.expr):
				self.error("expected `;`")
		return syntax.Body(stmts)

	def statement(self):
		begin = self.cur.pos
		attrs = self.outer_attrs()
		if self.peek_keyword("let"): return self.local(attrs)
		if self.peek_item(): return self.item(begin)
		expr = self.expr_early(attrs)
		return syntax.StmtExpr(expr, self.eat_op(";"))

	def local(self, attrs:list) -> syntax.Local:
		self.expect_keyword("let")
		pat = self.pat_spec(syntax.Pat, self.pat_single)
		ty = init = diverge = None
		if self.peek_colon():
			self.cur.bump()
			ty = self.ty_spec()
		if self.peek_assign():
			self.cur.bump()
			init = self.expr()
			if self.eat_keyword("else"): diverge = self.body()
		self.expect_op(";")
		return syntax.Local(attrs, pat, ty, init, diverge)

	def expr_early(self, attrs:list) -> Expr:
		""" An expression in statement position, where a block-like expression ends the statement. """
		if self.peek_block_like():
			expr = self.block_like()
			if (self.peek_op(".") and not self.peek_op("..")) or self.peek_op("?"):
				return self.expr(first=syntax.attach(self.postfix(expr), attrs))
			return syntax.attach(expr, attrs)
		return self.expr(attrs=attrs)

	def peek_item(self) -> bool:
		n = 0
		if self.peek_keyword("pub"):
			n = 2 if self.peek_group(PAREN, 1) else 1
		for word in ("fn", "struct", "enum", "impl", "trait", "mod", "use", "type", "extern"):
			if self.peek_keyword(word, n): return True
		if n and self.cur.peek(n) is not None: return True
		if self.peek_keyword("unsafe", n) or self.peek_keyword("async", n):
			return any(self.peek_keyword(word, n+1) for word in ("fn", "impl", "trait", "extern", "unsafe", "auto"))
		if self.peek_keyword("const", n):
			return not (self.peek_group(BRACE, n+1) or self.peek_op("|", n+1) or self.peek_keyword("move", n+1) or self.peek_keyword("async", n+1))
		if self.peek_keyword("static", n):
			return not (self.peek_op("|", n+1) or self.peek_keyword("move", n+1) or self.peek_keyword("async", n+1))
		if self.peek_keyword("union", n) or self.peek_keyword("auto", n): return self.peek_ident(n+1) or self.peek_keyword("trait", n+1)
		return self.peek_keyword("macro_rules", n) and self.peek_op("!", n+1) and self.peek_ident(n+2)

	def item(self, begin:int) -> syntax.Item:
		"""
		Items in a block are kept as their tokens. Those that end in a semicolon
		never contain braces at the top level; the rest end at their first brace group.
		"""
		words = [tt.text for tt in self.cur.stream[self.cur.pos:self.cur.pos+4] if isinstance(tt, Ident)]
		first = [w for w in words if w not in ("pub", "unsafe", "async", "extern")]
		semicolon_only = (
			words[:2] == ["extern", "crate"]
			or (first and first[0] in ("use", "type", "static"))
			or (first[:1] == ["const"] and first[1:2] != ["fn"])
		)
		while True:
			if self.cur.at_end(): self.error("expected item")
			if self.eat_op(";"): break
			tt = self.cur.bump()[0]
			if not semicolon_only and isinstance(tt, Group) and tt.delimiter == BRACE: break
		return syntax.Item(self.cur.since(begin))

	def outer_attrs(self) -> list:
		attrs = []
		while self.peek_op("#") and self.peek_group(BRACKET, 1):
			attrs.append(syntax.Attribute(False, self.cur.bump(2)))
		return attrs

	def inner_attrs(self) -> list:
		attrs = []
		while self.peek_op("#") and self.peek_op("!", 1) and self.peek_group(BRACKET, 2):
			attrs.append(syntax.Attribute(True, self.cur.bump(3)))
		return attrs

	#######################################################################
	#
	#  Paths and generic arguments
	#

	def qpath(self):
		""" (qself, path) where qself is None for an unqualified path """
		if not self.peek_op("<"): return None, self.path(expr_style=True)
		self.cur.bump()
		ty = self.ty_spec()
		trait = None
		if self.eat_keyword("as"): trait = self.path(expr_style=False)
		self.expect_op(">")
		self.expect_op("::")
		rest = [self.segment(expr_style=True)]
		while self.peek_op("::") and not self.peek_op("<", 2):
			self.cur.bump(2)
			rest.append(self.segment(expr_style=True))
		if trait is None:
			return syntax.QSelf(ty, 0), syntax.PathSpec(True, rest)
		qself = syntax.QSelf(ty, len(trait.segments))
		return qself, syntax.PathSpec(trait.leading_colon, trait.segments + rest)

	def path(self, expr_style:bool) -> syntax.PathSpec:
		leading_colon = self.eat_op("::")
		segments = [self.segment(expr_style)]
		while self.peek_op("::") and not self.peek_op("<", 2):
			self.cur.bump(2)
			segments.append(self.segment(expr_style))
		return syntax.PathSpec(leading_colon, segments)

	def type_style_path(self) -> syntax.PathSpec:
		return self.path(expr_style=False)

	def segment(self, expr_style:bool) -> tuple:
		start = self.cur.pos
		tt = self.cur.peek()
		if not (self.peek_ident() or (isinstance(tt, Ident) and tt.text in PATH_KEYWORDS | {"try"})):
			self.error("expected identifier")
		self.cur.bump()
		if self.peek_op("::") and self.peek_op("<", 2):
			self.cur.bump(2)
			self.generic_args()
		elif not expr_style:
			if self.peek_op("<") and not self.peek_op("<="):
				self.generic_args()
			elif self.peek_group(PAREN):
				self.inside(self.cur.bump()[0], self.type_list)
				if self.peek_op("->"):
					self.cur.bump(2)
					self.ty(allow_plus=False)
		return self.cur.since(start)

	def turbofish(self) -> syntax.GenericArgs:
		start = self.cur.pos
		self.expect_op("::")
		self.generic_args()
		return syntax.GenericArgs(self.cur.since(start))

	def generic_args(self):
		self.expect_op("<")
		while not self.peek_op(">"):
			self.generic_arg()
			if not self.eat_op(","): break
		self.expect_op(">")

	def generic_arg(self):
		if self.peek_lifetime():
			self.cur.bump()
		elif self.peek_ident() and (self.peek_assign_at(1) or self.peek_colon(1) or self.peek_op("<", 1)) and self.binding_follows():
			self.cur.bump()
			if self.peek_op("<"): self.generic_args()
			if self.eat_op(":"): self.bounds(allow_plus=True)
			else:
				self.expect_op("=")
				self.generic_arg()
		elif self.peek_literal() or (self.peek_op("-") and self.peek_literal(1)):
			self.cur.bump(1 if self.peek_literal() else 2)
		elif self.peek_group(BRACE):
			self.cur.bump()
		else:
			self.ty()

	def peek_assign_at(self, n:int) -> bool:
		return self.peek_op("=", n) and not self.peek_op("==", n)

	def binding_follows(self) -> bool:
		""" Tell `Item = T` and `Item: Bound` apart from a type like `Vec<T>` """
		if not self.peek_op("<", 1): return True
		depth, n = 0, 1
		while True:
			tt = self.cur.peek(n)
			if tt is None: return False
			if isinstance(tt, Punct):
				if tt.char == "<": depth += 1
				elif tt.char == ">":
					depth -= 1
					if not depth: return self.peek_assign_at(n+1) or self.peek_colon(n+1)
			n += 1

	#######################################################################
	#
	#  Types
	#

	def ty_spec(self, allow_plus:bool=True) -> syntax.Ty:
		start = self.cur.pos
		self.ty(allow_plus)
		return syntax.Ty(self.cur.since(start))

	def ty(self, allow_plus:bool=True):
		if self.cur.at_end(): self.error("expected type")
		if self.peek_group(PAREN):
			self.inside(self.cur.bump()[0], self.type_list)
		elif self.peek_group(BRACKET):
			self.inside(self.cur.bump()[0], self.array_type)
		elif self.eat_op("!"):
			pass
		elif self.eat_op("*"):
			if not (self.eat_keyword("const") or self.eat_keyword("mut")):
				self.error("expected `mut` or `const` keyword in raw pointer type")
			self.ty(allow_plus=False)
		elif self.eat_op("&"):
			if self.peek_lifetime(): self.cur.bump()
			self.eat_keyword("mut")
			self.ty(allow_plus=False)
		elif self.eat_keyword("_"):
			pass
		elif self.peek_keyword("impl") or self.peek_keyword("dyn"):
			self.cur.bump()
			self.bounds(allow_plus)
		elif self.peek_keyword("for") and self.peek_op("<", 1):
			self.cur.bump()
			self.lifetime_params()
			if self.peek_keyword("fn") or self.peek_keyword("unsafe") or self.peek_keyword("extern"): self.bare_fn()
			else: self.trait_object(allow_plus)
		elif self.peek_keyword("fn") or self.peek_keyword("unsafe") or self.peek_keyword("extern"):
			self.bare_fn()
		elif self.peek_path_start():
			self.trait_object(allow_plus)
		else:
			self.error("expected type")

	def trait_object(self, allow_plus:bool):
		""" A type path, a macro in type position, or a bare trait object with bounds """
		self.type_path()
		if self.peek_op("!") and not self.peek_op("!="):
			self.cur.bump()
			if not isinstance(self.cur.peek(), Group): self.error("expected delimiter")
			self.cur.bump()
		elif allow_plus and self.eat_op("+"):
			if self.can_begin_bound(): self.bounds(allow_plus=True)

	def type_path(self):
		if self.peek_op("<"):
			self.cur.bump()
			self.ty()
			if self.eat_keyword("as"): self.path(expr_style=False)
			self.expect_op(">")
			self.expect_op("::")
			self.segment(expr_style=False)
			while self.peek_op("::"):
				self.cur.bump(2)
				self.segment(expr_style=False)
		else:
			self.path(expr_style=False)

	def type_list(self):
		""" Parenthesized types: a tuple, a parenthesized type, or arguments of `Fn(...)` """
		while not self.cur.at_end():
			self.ty()
			if self.cur.at_end(): break
			self.expect_op(",")

	def array_type(self):
		self.ty()
		if self.eat_op(";"): self.expr()

	def bare_fn(self):
		self.eat_keyword("unsafe")
		if self.eat_keyword("extern") and isinstance(self.cur.peek(), Literal): self.cur.bump()
		self.expect_keyword("fn")
		def params():
			while not self.cur.at_end():
				self.outer_attrs()
				if self.eat_op("..."): break
				if (self.peek_ident() or self.peek_keyword("_")) and self.peek_colon(1): self.cur.bump(2)
				self.ty()
				if self.cur.at_end(): break
				self.expect_op(",")
		self.inside(self.expect_group(PAREN), params)
		if self.eat_op("->"): self.ty(allow_plus=False)

	def lifetime_params(self):
		""" The `<'a, 'b: 'a>` of `for<...>` """
		self.expect_op("<")
		while self.peek_lifetime():
			self.cur.bump()
			if self.peek_colon():
				self.cur.bump()
				while self.peek_lifetime():
					self.cur.bump()
					if not self.eat_op("+"): break
			if not self.eat_op(","): break
		self.expect_op(">")

	def can_begin_bound(self) -> bool:
		return (
			self.peek_lifetime() or self.peek_op("?") or self.peek_op("~") or self.peek_group(PAREN)
			or self.peek_keyword("for") or self.peek_keyword("use") or self.peek_path_start()
		)

	def bounds(self, allow_plus:bool):
		self.bound()
		while allow_plus and self.eat_op("+"):
			if not self.can_begin_bound(): break
			self.bound()

	def bound(self):
		if self.peek_lifetime():
			self.cur.bump()
		elif self.peek_group(PAREN):
			self.inside(self.cur.bump()[0], self.bound)
		elif self.eat_keyword("use"):
			self.generic_args()
		else:
			if self.eat_op("~"): self.expect_keyword("const")
			self.eat_op("?")
			if self.eat_keyword("for"): self.lifetime_params()
			self.type_path()

	#######################################################################
	#
	#  Patterns
	#

	def pat_spec(self, cls, method):
		start = self.cur.pos
		method()
		return cls(self.cur.since(start))

	def peek_vert(self) -> bool:
		return self.peek_op("|") and not (self.peek_op("||") or self.peek_op("|="))

	def pat_multi(self):
		""" Alternatives separated by `|`, with an optional leading `|` """
		if self.peek_vert(): self.cur.bump()
		self.pat_single()
		while self.peek_vert():
			self.cur.bump()
			self.pat_single()

	def pat_single(self):
		if self.cur.at_end(): self.error("expected pattern")
		if self.eat_op("&"):
			self.eat_keyword("mut")
			self.pat_single()
		elif self.peek_group(PAREN) or self.peek_group(BRACKET):
			self.inside(self.cur.bump()[0], self.pat_list)
		elif self.peek_op("..="):
			self.cur.bump(3)
			self.range_bound()
		elif self.eat_op(".."):
			pass
		elif self.eat_keyword("_"):
			pass
		elif self.eat_keyword("box"):
			self.pat_single()
		elif self.peek_keyword("const") and self.peek_group(BRACE, 1):
			self.cur.bump(2)
		elif self.peek_keyword("ref") or self.peek_keyword("mut"):
			self.pat_binding()
		elif self.peek_literal() or (self.peek_op("-") and self.peek_literal(1)):
			self.range_bound()
			self.range_pattern_tail()
		elif self.peek_ident() and not self.path_pattern_follows():
			self.pat_binding()
		elif self.peek_path_start():
			self.pat_path()
		else:
			self.error("expected pattern")

	def path_pattern_follows(self) -> bool:
		""" After an identifier, these make it a path rather than a new binding. """
		return (
			self.peek_op("::", 1) or self.peek_op("!", 1) or self.peek_op("..", 1)
			or self.peek_group(PAREN, 1) or self.peek_group(BRACE, 1)
		)

	def pat_binding(self):
		self.eat_keyword("ref")
		self.eat_keyword("mut")
		if not self.peek_ident(): self.error("expected identifier")
		self.cur.bump()
		if self.eat_op("@"): self.pat_single()

	def pat_path(self):
		self.qpath()
		if self.peek_op("!") and not self.peek_op("!="):
			self.cur.bump()
			if not isinstance(self.cur.peek(), Group): self.error("expected delimiter")
			self.cur.bump()
		elif self.peek_group(PAREN):
			self.inside(self.cur.bump()[0], self.pat_list)
		elif self.peek_group(BRACE):
			self.inside(self.cur.bump()[0], self.field_pats)
		else:
			self.range_pattern_tail()

	def range_pattern_tail(self):
		if self.peek_op("..=") or self.peek_op("..."):
			self.cur.bump(3)
			self.range_bound()
		elif self.eat_op(".."):
			if self.peek_literal() or self.peek_op("-") or self.peek_path_start(): self.range_bound()

	def range_bound(self):
		if self.peek_literal():
			self.cur.bump()
		elif self.peek_op("-") and self.peek_literal(1):
			self.cur.bump(2)
		elif self.peek_path_start():
			self.qpath()
		else:
			self.error("expected range pattern bound")

	def pat_list(self):
		""" The insides of a tuple, tuple-struct, or slice pattern """
		while not self.cur.at_end():
			self.pat_multi()
			if self.cur.at_end(): break
			self.expect_op(",")

	def field_pats(self):
		while not self.cur.at_end():
			self.outer_attrs()
			if self.eat_op(".."): break
			tt = self.cur.peek()
			if isinstance(tt, Literal) or self.peek_colon(1):
				self.member()
				self.expect_op(":")
				self.pat_multi()
			else:
				self.eat_keyword("box")
				self.pat_binding()
			if self.cur.at_end(): break
			self.expect_op(",")
