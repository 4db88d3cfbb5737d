import unittest

from rexpr.parser import parse_expr, parse_type, parse_path, parse_lit, operator_parser
from rexpr.ontology import RustParseError
from rexpr.render import render
from rexpr import syntax

class PrecedenceTests(unittest.TestCase):

	def test_product_binds_tighter_than_sum(self):
		e = parse_expr("1 + 2 * 3")
		self.assertEqual("Add", e.op.name)
		self.assertEqual("Mul", e.right.op.name)

	def test_left_associative(self):
		e = parse_expr("a - b - c")
		self.assertIsInstance(e.left, syntax.Binary)
		self.assertIsInstance(e.right, syntax.Path)

	def test_assignment_is_right_associative(self):
		e = parse_expr("a = b = c")
		self.assertIsInstance(e, syntax.Assign)
		self.assertIsInstance(e.right, syntax.Assign)

	def test_logical(self):
		e = parse_expr("a || b && c")
		self.assertEqual("Or", e.op.name)
		self.assertEqual("And", e.right.op.name)

	def test_comparison_below_arithmetic(self):
		e = parse_expr("a + 1 == b * 2 && c")
		self.assertEqual("And", e.op.name)
		self.assertEqual("Eq", e.left.op.name)

	def test_cast_binds_tighter_than_product(self):
		e = parse_expr("a * b as u8 as u16")
		self.assertEqual("Mul", e.op.name)
		self.assertIsInstance(e.right, syntax.Cast)
		self.assertIsInstance(e.right.expr, syntax.Cast)

	def test_prefix_binds_looser_than_postfix(self):
		e = parse_expr("-a.b()")
		self.assertIsInstance(e, syntax.Unary)
		self.assertIsInstance(e.expr, syntax.MethodCall)
		e = parse_expr("&&x")
		self.assertIsInstance(e, syntax.Reference)
		self.assertIsInstance(e.expr, syntax.Reference)

	def test_range_is_loose(self):
		e = parse_expr("x = 1..2")
		self.assertIsInstance(e, syntax.Assign)
		self.assertIsInstance(e.right, syntax.Range)
		e = parse_expr("a + 1..b")
		self.assertIsInstance(e, syntax.Range)
		self.assertIsInstance(e.start, syntax.Binary)

	def test_comparison_cannot_chain(self):
		for text in ["a < b < c", "a == b == c", "a && b == c != d"]:
			with self.subTest(text):
				with self.assertRaises(RustParseError) as cm:
					parse_expr(text)
				self.assertEqual("comparison operators cannot be chained", cm.exception.message)

	def test_let_scrutinee_takes_comparison_but_not_conjunction(self):
		e = parse_expr("let Some(x) = a == b && c")
		self.assertEqual("And", e.op.name)
		self.assertIsInstance(e.left, syntax.Let)
		self.assertEqual("Eq", e.left.expr.op.name)
		self.assertIsInstance(e.right, syntax.Path)

	def test_cast_applies_after_prefix(self):
		e = parse_expr("-x as u8")
		self.assertIsInstance(e, syntax.Cast)
		self.assertIsInstance(e.expr, syntax.Unary)
		e = parse_expr("&raw const x as *const u8")
		self.assertIsInstance(e, syntax.Cast)
		self.assertIsInstance(e.expr, syntax.RawAddr)

	def test_range_forms(self):
		for text, start, end in [
			("..", False, False),
			("a..", True, False),
			("..b", False, True),
			("a..b", True, True),
			("..=b", False, True),
		]:
			with self.subTest(text):
				e = parse_expr(text)
				self.assertIsInstance(e, syntax.Range)
				self.assertEqual(start, e.start is not None)
				self.assertEqual(end, e.end is not None)

	def test_open_range_before_a_loop_body(self):
		e = parse_expr("for i in 0.. {}")
		self.assertIsInstance(e.expr, syntax.Range)
		self.assertIsNone(e.expr.end)

	def test_ranges_do_not_chain(self):
		with self.assertRaises(RustParseError) as cm:
			parse_expr("a..b..c")
		self.assertEqual("unexpected token", cm.exception.message)
		self.assertEqual(slice(4, 5), cm.exception.spot)

	def test_range_cannot_be_assigned(self):
		for text in ["a..b = c", "a..b += c"]:
			with self.subTest(text):
				with self.assertRaises(RustParseError) as cm:
					parse_expr(text)
				self.assertEqual("unexpected token", cm.exception.message)
				self.assertEqual(slice(5, 6), cm.exception.spot)

	def test_try_and_await(self):
		e = parse_expr("x.await?")
		self.assertIsInstance(e, syntax.Try)
		self.assertIsInstance(e.expr, syntax.Await)

	def test_tuple_index_pairs(self):
		e = parse_expr("x.0.1")
		self.assertEqual(1, e.member.index)
		self.assertEqual(0, e.base.member.index)
		e = parse_expr("x.0.1.2")
		self.assertEqual(2, e.member.index)

class OperatorGrammarTests(unittest.TestCase):
	""" The operator grammar takes operands and operators already formed. """

	def setUp(self):
		self.a, self.b, self.c = parse_expr("a"), parse_expr("b"), parse_expr("c")

	def test_preformed_terminals(self):
		e = operator_parser.parse(iter([
			("atom", self.a), ("sum", syntax.BinOp("Add", ())),
			("atom", self.b), ("product", syntax.BinOp("Mul", ())), ("atom", self.c),
		]))
		self.assertEqual("Add", e.op.name)
		self.assertIs(self.a, e.left)
		self.assertEqual("Mul", e.right.op.name)

	def test_ends_after_an_operator(self):
		with self.assertRaises(RustParseError) as cm:
			operator_parser.parse(iter([("atom", self.a), ("sum", syntax.BinOp("Add", ()))]))
		self.assertEqual("unexpected end of input", cm.exception.message)

class StructLiteralTests(unittest.TestCase):
	""" Braces after a path are a struct literal, except where they must be a block. """

	def test_condition_stops_at_brace(self):
		e = parse_expr("if x == y {}")
		self.assertIsInstance(e.cond.right, syntax.Path)
		self.assertEqual([], e.then_branch.stmts)

	def test_match_scrutinee(self):
		e = parse_expr("match S { _ => 1 }")
		self.assertIsInstance(e.expr, syntax.Path)
		self.assertEqual(1, len(e.arms))

	def test_for_and_while(self):
		self.assertIsInstance(parse_expr("for x in xs {}").expr, syntax.Path)
		self.assertIsInstance(parse_expr("while go {}").cond, syntax.Path)

	def test_parentheses_allow_it_again(self):
		e = parse_expr("if x == (S { a: 1 }) {}")
		self.assertIsInstance(e.cond.right.expr, syntax.Struct)

	def test_unnamed_members(self):
		e = parse_expr("S { 0: a, 1: b }")
		self.assertEqual([0, 1], [f.member.index for f in e.fields])

	def test_qualified_struct(self):
		e = parse_expr("<S as T>::U { a }")
		self.assertIsInstance(e, syntax.Struct)
		self.assertEqual(1, e.qself.position)

class BlockTests(unittest.TestCase):

	def test_statements(self):
		e = parse_expr("{ let x: Vec<u8> = vec![]; x.len() }")
		local, tail = e.block.stmts
		self.assertIsInstance(local, syntax.Local)
		self.assertEqual("Vec < u8 >", render(local.ty))
		self.assertIsNone(local.diverge)
		self.assertIsInstance(tail.expr, syntax.MethodCall)
		self.assertFalse(tail.semi)

	def test_let_else(self):
		local = parse_expr("{ let Some(x) = y else { return; }; }").block.stmts[0]
		self.assertEqual("{ return ; }", render(local.diverge))

	def test_block_like_statement_needs_no_semicolon(self):
		e = parse_expr("{ if a { b() } c }")
		self.assertEqual(2, len(e.block.stmts))
		e = parse_expr("{ match x {} loop {} 1 }")
		self.assertEqual(3, len(e.block.stmts))

	def test_block_like_statement_ends_the_expression(self):
		e = parse_expr("{ {1} - 1 }")
		first, second = e.block.stmts
		self.assertIsInstance(first.expr, syntax.Block)
		self.assertIsInstance(second.expr, syntax.Unary)

	def test_method_call_on_block_like_statement(self):
		e = parse_expr("{ match x {}.unwrap() }")
		self.assertIsInstance(e.block.stmts[0].expr, syntax.MethodCall)

	def test_block_like_statement_continues_after_postfix(self):
		e = parse_expr("{ if c { a } else { b }.len() + 1 }")
		self.assertEqual(1, len(e.block.stmts))
		total = e.block.stmts[0].expr
		self.assertEqual("Add", total.op.name)
		self.assertIsInstance(total.left, syntax.MethodCall)

	def test_missing_semicolon(self):
		with self.assertRaises(RustParseError) as cm:
			parse_expr("{ 1 2 }")
		self.assertEqual("expected `;`", cm.exception.message)

	def test_empty_statements(self):
		e = parse_expr("{ ;; 1 }")
		self.assertEqual(3, len(e.block.stmts))

	def test_items(self):
		e = parse_expr("{ fn f() -> u8 { 1 } struct P; use std::io; f() }")
		stmts = e.block.stmts
		self.assertEqual(4, len(stmts))
		self.assertEqual("fn f () -> u8 { 1 }", render(stmts[0]))
		self.assertEqual("struct P ;", render(stmts[1]))
		self.assertEqual("use std :: io ;", render(stmts[2]))
		self.assertIsInstance(stmts[3].expr, syntax.Call)

	def test_match_arms(self):
		e = parse_expr("match x { 1 | 2 => a, 3..=9 => {} _ if y => b }")
		self.assertEqual(["1 | 2", "3 ..= 9", "_"], [render(arm.pat) for arm in e.arms])
		self.assertEqual([True, False, False], [arm.comma for arm in e.arms])

	def test_match_arm_needs_comma(self):
		with self.assertRaises(RustParseError) as cm:
			parse_expr("match x { 1 => a 2 => b }")
		self.assertEqual("expected `,` following `match` arm", cm.exception.message)

	def test_labelled(self):
		for text, cls in [
			("'a: loop {}", syntax.Loop),
			("'a: while x {}", syntax.While),
			("'a: for x in y {}", syntax.ForLoop),
			("'a: {}", syntax.Block),
		]:
			with self.subTest(text):
				e = parse_expr(text)
				self.assertIsInstance(e, cls)
				self.assertEqual("a", e.label.name())

class ClosureTests(unittest.TestCase):

	def test_no_parameters(self):
		e = parse_expr("|| 1")
		self.assertEqual([], e.inputs)

	def test_typed_parameters(self):
		e = parse_expr("|a: i32, (b, c): (u8, u8)| a")
		self.assertEqual(["a : i32", "(b , c) : (u8 , u8)"], [render(p) for p in e.inputs])

	def test_flags(self):
		e = parse_expr("static async move || 1")
		self.assertTrue(e.movability and e.asyncness and e.capture)
		self.assertFalse(e.constness)

	def test_higher_ranked(self):
		e = parse_expr("for<'a> |x: &'a u8| x")
		self.assertEqual("for < 'a >", render(e.lifetimes))

class PathTests(unittest.TestCase):

	def test_turbofish_path(self):
		e = parse_expr("foo::<T>")
		self.assertIsInstance(e, syntax.Path)
		self.assertEqual("foo :: < T >", render(e.path))

	def test_qself_without_trait(self):
		e = parse_expr("<T>::f")
		self.assertEqual(0, e.qself.position)
		self.assertEqual("T", render(e.qself.ty))

	def test_keyword_segments(self):
		self.assertEqual("self :: a", render(parse_expr("self::a").path))
		self.assertEqual("crate :: a", render(parse_expr("crate::a").path))
		self.assertEqual("r#type", render(parse_expr("r#type").path))

	def test_macro_needs_plain_path(self):
		e = parse_expr("a::b!{ x }")
		self.assertIsInstance(e, syntax.Macro)
		self.assertTrue(e.mac.is_braced())

class OtherEntryPoints(unittest.TestCase):

	def test_parse_type(self):
		for text, expect in [
			("Vec<i32>", "Vec < i32 >"),
			("&'a mut [u8]", "& 'a mut [u8]"),
			("(u8, String)", "(u8 , String)"),
			("[u8; 4]", "[u8 ; 4]"),
			("impl Fn(u8) -> u8 + Send", "impl Fn (u8) -> u8 + Send"),
			("HashMap<K, Vec<V>>", "HashMap < K , Vec < V >>"),
			("Box<dyn Iterator<Item = u8>>", "Box < dyn Iterator < Item = u8 >>"),
		]:
			with self.subTest(text):
				self.assertEqual(expect, render(parse_type(text)))

	def test_parse_path(self):
		path = parse_path("std::vec::Vec<T>")
		self.assertEqual(3, len(path.segments))
		self.assertFalse(path.is_mod_style())
		self.assertEqual("std :: vec :: Vec < T >", render(path))
		self.assertTrue(parse_path("::a::b").leading_colon)

	def test_parse_lit(self):
		lit = parse_lit("42u8")
		self.assertIsInstance(lit, syntax.LitInt)
		self.assertEqual("u8", lit.suffix())
		self.assertIsInstance(parse_lit("true"), syntax.LitBool)
		for text in ["x", "-1", "1 2"]:
			with self.subTest(text):
				self.assertRaises(RustParseError, parse_lit, text)

class ErrorTests(unittest.TestCase):

	def expect_error(self, text, message, spot):
		with self.assertRaises(RustParseError) as cm:
			parse_expr(text)
		self.assertEqual(message, cm.exception.message)
		self.assertEqual(spot, cm.exception.spot)

	def test_empty(self):
		self.expect_error("", "unexpected end of input, expected an expression", slice(0, 0))
		self.expect_error("  // nothing", "unexpected end of input, expected an expression", slice(12, 12))

	def test_trailing_operator(self):
		self.expect_error("1 +", "unexpected end of input, expected an expression", slice(3, 3))

	def test_extra_token(self):
		self.expect_error("1 2", "unexpected token", slice(2, 3))

	def test_unbalanced(self):
		self.expect_error("(1", "this file contains an unclosed delimiter", slice(0, 1))
		self.expect_error("1)", "unexpected closing delimiter: `)`", slice(1, 2))

	def test_inside_group(self):
		self.expect_error("f(1 2)", "expected `,`", slice(4, 5))
		self.expect_error("f(1,", "this file contains an unclosed delimiter", slice(1, 2))

	def test_error_at_end_of_group(self):
		self.expect_error("f(a.)", "unexpected end of input, expected identifier or integer", slice(4, 5))

	def test_too_deep(self):
		text = "(" * 3000 + "x" + ")" * 3000
		self.expect_error(text, "expression nested too deeply", None)

	def test_str_is_the_message(self):
		with self.assertRaises(RustParseError) as cm:
			parse_expr("1 +")
		self.assertEqual(cm.exception.message, str(cm.exception))

if __name__ == '__main__':
	unittest.main()
