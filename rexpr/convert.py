"""
The converter from expression trees to canonical values.

Every object it makes begins with "kind" and then "attrs", followed by the
variant's own fields in a fixed order. Optional fields are always present
and None when absent, so one variant always has one key set. Parts of the
tree that are not taken apart (patterns, types, blocks, macro bodies)
appear as their canonical text; see the render module.

An expression class this module has never heard of is not an error.
It comes out as {"kind": "Unknown", "tokens": <its text>}.
"""
from typing import Optional
from boozetools.support.foundation import Visitor
from .ontology import Expr
from .normalize import lit_to_value, binop_symbol, unop_symbol, range_limits
from .render import render
from .value import Value
from . import syntax

def expr_to_value(expr:Expr) -> Value:
	return CONVERTER.convert(expr)

def attrs_value(attrs) -> list:
	return [render(a) for a in attrs]

def label_value(label:Optional[syntax.Label]) -> Optional[str]:
	return None if label is None else label.name()

def member_value(member:syntax.Member) -> dict:
	if member.is_named(): return {"kind": "Named", "name": member.name}
	return {"kind": "Unnamed", "index": member.index}

def opaque(x) -> Optional[str]:
	return None if x is None else render(x)

def qself_value(qself:Optional[syntax.QSelf]) -> Optional[str]:
	return None if qself is None else render(qself.ty)

class Converter(Visitor):

	def convert(self, expr:Expr) -> Value:
		if hasattr(self, "visit_" + type(expr).__name__):
			return self.visit(expr)
		# A node with nothing to print still says what it is.
		return {"kind": "Unknown", "tokens": render(expr) or type(expr).__name__}

	def optional(self, expr:Optional[Expr]) -> Value:
		return None if expr is None else self.convert(expr)

	def each(self, exprs) -> list:
		return [self.convert(e) for e in exprs]

	@staticmethod
	def tagged(kind:str, e:Expr, **fields) -> dict:
		return {"kind": kind, "attrs": attrs_value(e.attrs), **fields}

	def arm(self, arm:syntax.Arm) -> dict:
		return {
			"attrs": attrs_value(arm.attrs),
			"pat": render(arm.pat),
			"guard": self.optional(arm.guard),
			"body": self.convert(arm.body),
		}

	def field_value(self, fv:syntax.FieldValue) -> dict:
		return {
			"attrs": attrs_value(fv.attrs),
			"member": member_value(fv.member),
			"expr": self.convert(fv.expr),
		}

	def else_branch(self, e:Optional[Expr]) -> Value:
		"""
		A bare `else { x }` converts as the x within. Blocks with more to them
		(statements, attributes, a label) convert as blocks, and `else if` as the If.
		"""
		if isinstance(e, syntax.Block) and not e.attrs and e.label is None:
			tail = e.block.sole_expression()
			if tail is not None: return self.convert(tail)
		return self.optional(e)

	def visit_Array(self, e:syntax.Array):
		return self.tagged("Array", e, elems=self.each(e.elems))

	def visit_Assign(self, e:syntax.Assign):
		return self.tagged("Assign", e, left=self.convert(e.left), right=self.convert(e.right))

	def visit_Async(self, e:syntax.Async):
		return self.tagged("Async", e, capture=e.capture, block=render(e.block))

	def visit_Await(self, e:syntax.Await):
		return self.tagged("Await", e, base=self.convert(e.base))

	def visit_Binary(self, e:syntax.Binary):
		return self.tagged("Binary", e, left=self.convert(e.left), op=binop_symbol(e.op), right=self.convert(e.right))

	def visit_Block(self, e:syntax.Block):
		return self.tagged("Block", e, label=label_value(e.label), block=render(e.block))

	def visit_Break(self, e:syntax.Break):
		return self.tagged("Break", e, label=label_value(e.label), expr=self.optional(e.expr))

	def visit_Call(self, e:syntax.Call):
		return self.tagged("Call", e, func=self.convert(e.func), args=self.each(e.args))

	def visit_Cast(self, e:syntax.Cast):
		return self.tagged("Cast", e, expr=self.convert(e.expr), ty=render(e.ty))

	def visit_Closure(self, e:syntax.Closure):
		return self.tagged(
			"Closure", e,
			lifetimes=opaque(e.lifetimes),
			constness=e.constness,
			movability=e.movability,
			asyncness=e.asyncness,
			capture=e.capture,
			inputs=[render(p) for p in e.inputs],
			output=render(e.output),
			body=self.convert(e.body),
		)

	def visit_Const(self, e:syntax.Const):
		return self.tagged("Const", e, block=render(e.block))

	def visit_Continue(self, e:syntax.Continue):
		return self.tagged("Continue", e, label=label_value(e.label))

	def visit_Field(self, e:syntax.Field):
		return self.tagged("Field", e, base=self.convert(e.base), member=member_value(e.member))

	def visit_ForLoop(self, e:syntax.ForLoop):
		return self.tagged(
			"ForLoop", e,
			label=label_value(e.label),
			pat=render(e.pat),
			expr=self.convert(e.expr),
			body=render(e.body),
		)

	def visit_Group(self, e:syntax.Group):
		return self.tagged("Group", e, expr=self.convert(e.expr))

	def visit_If(self, e:syntax.If):
		return self.tagged(
			"If", e,
			cond=self.convert(e.cond),
			then_branch=render(e.then_branch),
			else_branch=self.else_branch(e.else_branch),
		)

	def visit_Index(self, e:syntax.Index):
		return self.tagged("Index", e, expr=self.convert(e.expr), index=self.convert(e.index))

	def visit_Infer(self, e:syntax.Infer):
		return self.tagged("Infer", e)

	def visit_Let(self, e:syntax.Let):
		return self.tagged("Let", e, pat=render(e.pat), expr=self.convert(e.expr))

	def visit_Lit(self, e:syntax.Lit):
		return self.tagged("Lit", e, lit=lit_to_value(e.lit))

	def visit_Loop(self, e:syntax.Loop):
		return self.tagged("Loop", e, label=label_value(e.label), body=render(e.body))

	def visit_Macro(self, e:syntax.Macro):
		return self.tagged("Macro", e, mac=render(e.mac))

	def visit_Match(self, e:syntax.Match):
		return self.tagged("Match", e, expr=self.convert(e.expr), arms=[self.arm(a) for a in e.arms])

	def visit_MethodCall(self, e:syntax.MethodCall):
		return self.tagged(
			"MethodCall", e,
			receiver=self.convert(e.receiver),
			method=e.method,
			turbofish=opaque(e.turbofish),
			args=self.each(e.args),
		)

	def visit_Paren(self, e:syntax.Paren):
		return self.tagged("Paren", e, expr=self.convert(e.expr))

	def visit_Path(self, e:syntax.Path):
		return self.tagged("Path", e, qself=qself_value(e.qself), path=render(e.path))

	def visit_Range(self, e:syntax.Range):
		return self.tagged(
			"Range", e,
			start=self.optional(e.start),
			limits=range_limits(e.limits),
			end=self.optional(e.end),
		)

	def visit_RawAddr(self, e:syntax.RawAddr):
		return self.tagged("RawAddr", e, mutability=e.mutability, expr=self.convert(e.expr))

	def visit_Reference(self, e:syntax.Reference):
		return self.tagged("Reference", e, mutability=e.mutability, expr=self.convert(e.expr))

	def visit_Repeat(self, e:syntax.Repeat):
		return self.tagged("Repeat", e, expr=self.convert(e.expr), len=self.convert(e.len))

	def visit_Return(self, e:syntax.Return):
		return self.tagged("Return", e, expr=self.optional(e.expr))

	def visit_Struct(self, e:syntax.Struct):
		return self.tagged(
			"Struct", e,
			qself=qself_value(e.qself),
			path=render(e.path),
			fields=[self.field_value(fv) for fv in e.fields],
			dot2_token=e.dot2,
			rest=self.optional(e.rest),
		)

	def visit_Try(self, e:syntax.Try):
		return self.tagged("Try", e, expr=self.convert(e.expr))

	def visit_TryBlock(self, e:syntax.TryBlock):
		return self.tagged("TryBlock", e, block=render(e.block))

	def visit_Tuple(self, e:syntax.Tuple):
		return self.tagged("Tuple", e, elems=self.each(e.elems))

	def visit_Unary(self, e:syntax.Unary):
		return self.tagged("Unary", e, op=unop_symbol(e.op), expr=self.convert(e.expr))

	def visit_Unsafe(self, e:syntax.Unsafe):
		return self.tagged("Unsafe", e, block=render(e.block))

	@staticmethod
	def visit_Verbatim(e:syntax.Verbatim):
		return {"kind": "Verbatim", "tokens": render(e)}

	def visit_While(self, e:syntax.While):
		return self.tagged(
			"While", e,
			label=label_value(e.label),
			cond=self.convert(e.cond),
			body=render(e.body),
		)

	def visit_Yield(self, e:syntax.Yield):
		return self.tagged("Yield", e, expr=self.optional(e.expr))

CONVERTER = Converter()
