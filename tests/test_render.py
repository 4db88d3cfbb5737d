import unittest

from rexpr.parser import parse_expr, parse_type
from rexpr.render import render, to_text, tokens_of
from rexpr.scanner import scan
from rexpr.tokens import Punct, Ident, punct
from rexpr import syntax

class TokenTextTests(unittest.TestCase):

	def test_single_spaces(self):
		self.assertEqual("a + b", to_text(scan("a+b")))
		self.assertEqual("f (x , y)", to_text(scan("f( x,y )")))

	def test_braces_get_inner_spaces(self):
		self.assertEqual("{ x }", to_text(scan("{x}")))
		self.assertEqual("{ }", to_text(scan("{}")))
		self.assertEqual("[]", to_text(scan("[ ]")))

	def test_operators_glue_only_when_joint(self):
		self.assertEqual("a && b", to_text(scan("a&&b")))
		self.assertEqual("a & & b", to_text(scan("a& &b")))
		self.assertEqual("x <<= 1", to_text(scan("x<<=1")))
		self.assertEqual("..= b", to_text(scan("..=b")))

	def test_joint_punctuation_that_is_no_operator(self):
		self.assertEqual("! ! x", to_text(scan("!!x")))
		self.assertEqual("& - x", to_text(scan("&-x")))

	def test_synthesized_operators(self):
		self.assertEqual("<<=", to_text(punct("<<=")))
		self.assertEqual("# [x]", to_text([Punct("#")] + list(scan("[x]"))))

	def test_idents_and_literals_as_is(self):
		self.assertEqual("r#type 'a b'x' 1_000u8", to_text(scan("r#type 'a b'x' 1_000u8")))

class RenderTests(unittest.TestCase):

	def test_paths_and_macros(self):
		self.assertEqual("std :: collections :: HashMap", render(parse_expr("std::collections::HashMap")))
		self.assertEqual('println ! ("hello")', render(parse_expr('println!("hello")')))

	def test_attributes(self):
		e = parse_expr("#[allow(unused)] #[inline] { 1 }")
		self.assertEqual(["# [allow (unused)]", "# [inline]"], [render(a) for a in e.attrs])
		self.assertEqual("# [allow (unused)] # [inline] { 1 }", render(e))

	def test_inner_attributes_print_inside_braces(self):
		e = parse_expr("loop { #![allow(x)] f() }")
		self.assertEqual("loop { # ! [allow (x)] f () }", render(e))
		self.assertEqual("{ f () }", render(e.body))

	def test_layout_and_comments_do_not_matter(self):
		for left, right in [
			("{ let x = 1; x }", "{let x=1;x}"),
			("match a { Some(b) => b, None => 0 }", "match a {\n\tSome( b ) => b, // first\n\tNone => 0\n}"),
			("|x: Vec<u8>| x.len()", "| x : Vec < u8 > | x . len ( )"),
			("a + b * c", "a /* times */ + b*c"),
		]:
			with self.subTest(left):
				self.assertEqual(render(parse_expr(left)), render(parse_expr(right)))

	def test_rendering_is_repeatable(self):
		e = parse_expr("if let Some(x) = y { x } else { 0 }")
		self.assertEqual(render(e), render(e))

	def test_rendered_text_parses_the_same(self):
		for code in [
			"a.b::<T>(c)?",
			"S { x, y: 2, ..z }",
			"&raw mut x as *mut u8",
			"'a: for i in 0..n { continue 'a; }",
			"<T as Tr>::f(x)",
			"async move { x.await }",
			"[0u8; 4]",
			"(1,)",
			"x.0.1",
		]:
			with self.subTest(code):
				once = render(parse_expr(code))
				self.assertEqual(once, render(parse_expr(once)))

	def test_closures(self):
		self.assertEqual("move | x | x + 1", render(parse_expr("move |x| x + 1")))
		self.assertEqual("| | 1", render(parse_expr("|| 1")))

	def test_struct_literal(self):
		self.assertEqual("S { x , y : 2 , .. z }", render(parse_expr("S{x,y:2,..z}")))
		self.assertEqual("S { .. }", render(parse_expr("S { .. }")))

	def test_qualified_paths(self):
		self.assertEqual("< T as Tr > :: f", render(parse_expr("<T as Tr>::f")))
		self.assertEqual("< T > :: f", render(parse_expr("<T>::f")))

	def test_opaque_parts(self):
		self.assertEqual("Vec < i32 >", render(parse_type("Vec<i32>")))
		self.assertEqual([], tokens_of(syntax.ReturnType(())))

	def test_unknown_phrase_prints_its_fields(self):
		class Pair(syntax.Expr):
			FIELDS = ("attrs", "a", "b")
			def __init__(self):
				self.attrs, self.a, self.b = [], parse_expr("x"), parse_expr("y + 1")
		self.assertEqual("x y + 1", render(Pair()))

	def test_token_stream_passes_through(self):
		stream = (Ident("a"), Punct(","), Ident("b"))
		self.assertEqual("a , b", render(stream))

if __name__ == '__main__':
	unittest.main()
