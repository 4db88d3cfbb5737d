"""
Opaque text: whatever the converter does not take apart, it prints.

Printing happens in two steps. First the Printer turns a node back into token
trees, rebuilding the punctuation and keywords from the structure. Then to_text
spells the token trees with a single space between tokens. Neither step looks at
the input text, so two inputs that differ only in layout or comments
come out the same.
"""
from boozetools.support.foundation import Visitor
from .ontology import Phrase
from .tokens import Ident, Punct, Literal, Lifetime, Group, PAREN, BRACKET, BRACE, MULTI_CHAR_OPS, punct
from . import syntax

TOKEN_TYPES = (Ident, Punct, Literal, Lifetime, Group)

def render(x) -> str:
	""" Canonical text for a node, statement, block, attribute, or token stream """
	return to_text(tokens_of(x))

def tokens_of(x) -> list:
	return PRINTER.emit(x)

def to_text(stream) -> str:
	words = []
	i = 0
	while i < len(stream):
		tt = stream[i]
		if isinstance(tt, Punct):
			op = _glued(stream, i)
			words.append(op)
			i += len(op)
			continue
		if isinstance(tt, Group): words.append(_group_text(tt))
		else: words.append(str(tt))
		i += 1
	return " ".join(words)

def _glued(stream, i) -> str:
	"""
	Adjacent punctuation becomes one word only when the puncts were joint in
	the first place and together they spell an operator.
	"""
	for op in MULTI_CHAR_OPS:
		if i + len(op) > len(stream): continue
		run = stream[i:i+len(op)]
		if all(isinstance(tt, Punct) and tt.char == c for tt, c in zip(run, op)) and all(tt.joint for tt in run[:-1]):
			return op
	return stream[i].char

def _group_text(group:Group) -> str:
	inner = to_text(group.stream)
	if group.delimiter == BRACE: return "{ %s }" % inner if inner else "{ }"
	return group.delimiter[0] + inner + group.delimiter[1]

def _op(tokens) -> list:
	""" Operator tokens afresh, so that source spacing around them cannot leak through. """
	return list(punct("".join(tt.char for tt in tokens)))

def _kw(word:str) -> list:
	return [Ident(word)]

def _group(delimiter:str, items) -> Group:
	return Group(delimiter, tuple(items))

class Printer(Visitor):
	""" Each visit method answers a list of token trees. """

	def emit(self, x) -> list:
		if x is None: return []
		if isinstance(x, TOKEN_TYPES): return [x]
		if isinstance(x, (tuple, list)): return self.each(x)
		if hasattr(self, "visit_" + type(x).__name__): return self.visit(x)
		if isinstance(x, syntax.Opaque): return list(x.tokens)
		if isinstance(x, Phrase): return self.generic(x)
		if isinstance(x, bool): return []
		if isinstance(x, int): return [Literal(str(x))]
		return [Ident(str(x))]

	def each(self, items) -> list:
		out = []
		for item in items: out.extend(self.emit(item))
		return out

	def generic(self, node:Phrase) -> list:
		""" For node classes without a visit method: print the fields in order. """
		return self.each(getattr(node, f, None) for f in node.FIELDS)

	def comma_separated(self, items) -> list:
		out = []
		for i, item in enumerate(items):
			if i: out.append(Punct(","))
			out.extend(self.emit(item))
		return out

	def outer(self, attrs) -> list:
		return self.each(a for a in attrs if not a.inner)

	def inner(self, attrs) -> list:
		return self.each(a for a in attrs if a.inner)

	def braced(self, attrs, body:syntax.Body) -> list:
		""" A block whose inner attributes are kept by the node that owns it """
		return [_group(BRACE, self.inner(attrs) + self.each(body.stmts))]

	def label(self, label) -> list:
		return [] if label is None else [label.lifetime, Punct(":")]

	def path(self, qself, path:syntax.PathSpec) -> list:
		if qself is None: return self.visit_PathSpec(path)
		out = [Punct("<")] + self.emit(qself.ty)
		segments = path.segments
		if qself.position:
			out += _kw("as")
			if path.leading_colon: out += list(punct("::"))
			out += self.segments(segments[:qself.position])
		out += [Punct(">")] + list(punct("::")) + self.segments(segments[qself.position:])
		return out

	def segments(self, segments) -> list:
		out = []
		for i, segment in enumerate(segments):
			if i: out.extend(punct("::"))
			out.extend(segment)
		return out

	#######################################################################
	#
	#  Supporting structures
	#

	@staticmethod
	def visit_Attribute(attr:syntax.Attribute) -> list:
		bang = [Punct("!")] if attr.inner else []
		return [Punct("#")] + bang + [attr.tokens[-1]]

	@staticmethod
	def visit_Label(label:syntax.Label) -> list:
		return [label.lifetime]

	@staticmethod
	def visit_Member(member:syntax.Member) -> list:
		return [Ident(member.name)] if member.is_named() else [Literal(str(member.index))]

	def visit_PathSpec(self, path:syntax.PathSpec) -> list:
		lead = list(punct("::")) if path.leading_colon else []
		return lead + self.segments(path.segments)

	def visit_QSelf(self, qself:syntax.QSelf) -> list:
		return [Punct("<")] + self.emit(qself.ty) + [Punct(">")]

	def visit_MacroCall(self, mac:syntax.MacroCall) -> list:
		return self.visit_PathSpec(mac.path) + [Punct("!"), mac.group]

	@staticmethod
	def visit_BinOp(op:syntax.BinOp) -> list: return _op(op.tokens)

	@staticmethod
	def visit_UnOp(op:syntax.UnOp) -> list: return _op(op.tokens)

	@staticmethod
	def visit_RangeLimits(op:syntax.RangeLimits) -> list: return _op(op.tokens)

	def visit_Body(self, body:syntax.Body) -> list:
		return [_group(BRACE, self.each(body.stmts))]

	def visit_Local(self, local:syntax.Local) -> list:
		out = self.outer(local.attrs) + _kw("let") + self.emit(local.pat)
		if local.ty is not None: out += [Punct(":")] + self.emit(local.ty)
		if local.init is not None:
			out += [Punct("=")] + self.emit(local.init)
			if local.diverge is not None: out += _kw("else") + self.emit(local.diverge)
		return out + [Punct(";")]

	def visit_StmtExpr(self, stmt:syntax.StmtExpr) -> list:
		return self.emit(stmt.expr) + ([Punct(";")] if stmt.semi else [])

	def visit_Arm(self, arm:syntax.Arm) -> list:
		out = self.outer(arm.attrs) + self.emit(arm.pat)
		if arm.guard is not None: out += _kw("if") + self.emit(arm.guard)
		out += list(punct("=>")) + self.emit(arm.body)
		return out + ([Punct(",")] if arm.comma else [])

	def visit_FieldValue(self, fv:syntax.FieldValue) -> list:
		out = self.outer(fv.attrs) + self.emit(fv.member)
		if fv.colon: out += [Punct(":")] + self.emit(fv.expr)
		return out

	def visit_LitKind(self, lit:syntax.LitKind) -> list:
		return [lit.token]

	visit_LitStr = visit_LitByteStr = visit_LitCStr = visit_LitByte = visit_LitChar = visit_LitKind
	visit_LitInt = visit_LitFloat = visit_LitBool = visit_LitVerbatim = visit_LitKind

	#######################################################################
	#
	#  Expressions
	#

	def visit_Array(self, e:syntax.Array) -> list:
		return self.outer(e.attrs) + [_group(BRACKET, self.comma_separated(e.elems))]

	def visit_Assign(self, e:syntax.Assign) -> list:
		return self.outer(e.attrs) + self.emit(e.left) + [Punct("=")] + self.emit(e.right)

	def visit_Async(self, e:syntax.Async) -> list:
		move = _kw("move") if e.capture else []
		return self.outer(e.attrs) + _kw("async") + move + self.emit(e.block)

	def visit_Await(self, e:syntax.Await) -> list:
		return self.outer(e.attrs) + self.emit(e.base) + [Punct(".")] + _kw("await")

	def visit_Binary(self, e:syntax.Binary) -> list:
		return self.outer(e.attrs) + self.emit(e.left) + self.emit(e.op) + self.emit(e.right)

	def visit_Block(self, e:syntax.Block) -> list:
		return self.outer(e.attrs) + self.label(e.label) + self.braced(e.attrs, e.block)

	def visit_Break(self, e:syntax.Break) -> list:
		return self.outer(e.attrs) + _kw("break") + self.emit(e.label) + self.emit(e.expr)

	def visit_Call(self, e:syntax.Call) -> list:
		return self.outer(e.attrs) + self.emit(e.func) + [_group(PAREN, self.comma_separated(e.args))]

	def visit_Cast(self, e:syntax.Cast) -> list:
		return self.outer(e.attrs) + self.emit(e.expr) + _kw("as") + self.emit(e.ty)

	def visit_Closure(self, e:syntax.Closure) -> list:
		out = self.outer(e.attrs) + self.emit(e.lifetimes)
		for flag, word in ((e.constness, "const"), (e.movability, "static"), (e.asyncness, "async"), (e.capture, "move")):
			if flag: out += _kw(word)
		out += [Punct("|")] + self.comma_separated(e.inputs) + [Punct("|")]
		return out + self.emit(e.output) + self.emit(e.body)

	def visit_Const(self, e:syntax.Const) -> list:
		return self.outer(e.attrs) + _kw("const") + self.braced(e.attrs, e.block)

	def visit_Continue(self, e:syntax.Continue) -> list:
		return self.outer(e.attrs) + _kw("continue") + self.emit(e.label)

	def visit_Field(self, e:syntax.Field) -> list:
		return self.outer(e.attrs) + self.emit(e.base) + [Punct(".")] + self.emit(e.member)

	def visit_ForLoop(self, e:syntax.ForLoop) -> list:
		head = _kw("for") + self.emit(e.pat) + _kw("in") + self.emit(e.expr)
		return self.outer(e.attrs) + self.label(e.label) + head + self.braced(e.attrs, e.body)

	def visit_Group(self, e:syntax.Group) -> list:
		return self.outer(e.attrs) + self.emit(e.expr)

	def visit_If(self, e:syntax.If) -> list:
		out = self.outer(e.attrs) + _kw("if") + self.emit(e.cond) + self.emit(e.then_branch)
		if e.else_branch is not None: out += _kw("else") + self.emit(e.else_branch)
		return out

	def visit_Index(self, e:syntax.Index) -> list:
		return self.outer(e.attrs) + self.emit(e.expr) + [_group(BRACKET, self.emit(e.index))]

	def visit_Infer(self, e:syntax.Infer) -> list:
		return self.outer(e.attrs) + _kw("_")

	def visit_Let(self, e:syntax.Let) -> list:
		return self.outer(e.attrs) + _kw("let") + self.emit(e.pat) + [Punct("=")] + self.emit(e.expr)

	def visit_Lit(self, e:syntax.Lit) -> list:
		return self.outer(e.attrs) + self.emit(e.lit)

	def visit_Loop(self, e:syntax.Loop) -> list:
		return self.outer(e.attrs) + self.label(e.label) + _kw("loop") + self.braced(e.attrs, e.body)

	def visit_Macro(self, e:syntax.Macro) -> list:
		return self.outer(e.attrs) + self.emit(e.mac)

	def visit_Match(self, e:syntax.Match) -> list:
		arms = _group(BRACE, self.inner(e.attrs) + self.each(e.arms))
		return self.outer(e.attrs) + _kw("match") + self.emit(e.expr) + [arms]

	def visit_MethodCall(self, e:syntax.MethodCall) -> list:
		out = self.outer(e.attrs) + self.emit(e.receiver) + [Punct("."), Ident(e.method)]
		return out + self.emit(e.turbofish) + [_group(PAREN, self.comma_separated(e.args))]

	def visit_Paren(self, e:syntax.Paren) -> list:
		return self.outer(e.attrs) + [_group(PAREN, self.emit(e.expr))]

	def visit_Path(self, e:syntax.Path) -> list:
		return self.outer(e.attrs) + self.path(e.qself, e.path)

	def visit_Range(self, e:syntax.Range) -> list:
		return self.outer(e.attrs) + self.emit(e.start) + self.emit(e.limits) + self.emit(e.end)

	def visit_RawAddr(self, e:syntax.RawAddr) -> list:
		which = _kw("mut" if e.mutability else "const")
		return self.outer(e.attrs) + [Punct("&")] + _kw("raw") + which + self.emit(e.expr)

	def visit_Reference(self, e:syntax.Reference) -> list:
		which = _kw("mut") if e.mutability else []
		return self.outer(e.attrs) + [Punct("&")] + which + self.emit(e.expr)

	def visit_Repeat(self, e:syntax.Repeat) -> list:
		inside = self.emit(e.expr) + [Punct(";")] + self.emit(e.len)
		return self.outer(e.attrs) + [_group(BRACKET, inside)]

	def visit_Return(self, e:syntax.Return) -> list:
		return self.outer(e.attrs) + _kw("return") + self.emit(e.expr)

	def visit_Struct(self, e:syntax.Struct) -> list:
		inside = self.comma_separated(e.fields)
		if e.dot2:
			if e.fields: inside.append(Punct(","))
			inside += list(punct("..")) + self.emit(e.rest)
		return self.outer(e.attrs) + self.path(e.qself, e.path) + [_group(BRACE, inside)]

	def visit_Try(self, e:syntax.Try) -> list:
		return self.outer(e.attrs) + self.emit(e.expr) + [Punct("?")]

	def visit_TryBlock(self, e:syntax.TryBlock) -> list:
		return self.outer(e.attrs) + _kw("try") + self.emit(e.block)

	def visit_Tuple(self, e:syntax.Tuple) -> list:
		inside = self.comma_separated(e.elems)
		if len(e.elems) == 1: inside.append(Punct(","))
		return self.outer(e.attrs) + [_group(PAREN, inside)]

	def visit_Unary(self, e:syntax.Unary) -> list:
		return self.outer(e.attrs) + self.emit(e.op) + self.emit(e.expr)

	def visit_Unsafe(self, e:syntax.Unsafe) -> list:
		return self.outer(e.attrs) + _kw("unsafe") + self.braced(e.attrs, e.block)

	@staticmethod
	def visit_Verbatim(e:syntax.Verbatim) -> list:
		return list(e.tokens)

	def visit_While(self, e:syntax.While) -> list:
		head = _kw("while") + self.emit(e.cond)
		return self.outer(e.attrs) + self.label(e.label) + head + self.braced(e.attrs, e.body)

	def visit_Yield(self, e:syntax.Yield) -> list:
		return self.outer(e.attrs) + _kw("yield") + self.emit(e.expr)

PRINTER = Printer()
