import unittest

from rexpr.scanner import scan
from rexpr.ontology import RustParseError
from rexpr.tokens import Ident, Punct, Literal, Lifetime, Group, PAREN, BRACKET, BRACE

def _shapes(stream) -> list:
	""" Tokens without their spots, so tests can compare them directly """
	out = []
	for tt in stream:
		if isinstance(tt, Group): out.append((tt.delimiter, _shapes(tt.stream)))
		elif isinstance(tt, Punct): out.append((tt.char, tt.joint))
		else: out.append((type(tt).__name__, tt.text))
	return out

class ScannerTests(unittest.TestCase):

	def test_words_and_numbers(self):
		self.assertEqual([("Ident", "a"), ("+", False), ("Literal", "1_000u32")], _shapes(scan("a + 1_000u32")))

	def test_joint_punctuation(self):
		self.assertEqual([("Ident", "x"), ("<", True), ("<", True), ("=", False), ("Literal", "1")], _shapes(scan("x <<= 1")))
		self.assertEqual([("&", False), ("&", False), ("Ident", "b")], _shapes(scan("& &b")))

	def test_groups_nest(self):
		self.assertEqual(
			[("Ident", "f"), (PAREN, [("Ident", "a"), (BRACKET, [("Literal", "1")])]), (BRACE, [])],
			_shapes(scan("f(a[1]) {}")),
		)

	def test_group_spots(self):
		g = scan("  (x)")[0]
		self.assertEqual(slice(2, 3), g.spot)
		self.assertEqual(slice(4, 5), g.close)

	def test_comments_vanish(self):
		self.assertEqual(_shapes(scan("a + b")), _shapes(scan("a /* one /* two */ */ + // three\n b")))

	def test_doc_comments_become_attributes(self):
		for text, inner in [("/// hi", False), ("/** hi*/", False), ("//! hi", True), ("/*! hi*/", True)]:
			with self.subTest(text):
				stream = scan(text)
				self.assertEqual("#", stream[0].char)
				bang = [("!", False)] if inner else []
				doc = (BRACKET, [("Ident", "doc"), ("=", False), ("Literal", '" hi"')])
				self.assertEqual([("#", inner)] + bang + [doc], _shapes(stream))

	def test_not_quite_doc_comments(self):
		self.assertEqual([], _shapes(scan("//// four")))
		self.assertEqual([], _shapes(scan("/**/")))
		self.assertEqual([], _shapes(scan("/*** three */")))

	def test_lifetimes_and_chars(self):
		self.assertEqual([("Literal", "'a'")], _shapes(scan("'a'")))
		self.assertEqual([("Lifetime", "'a")], _shapes(scan("'a")))
		self.assertEqual([("Lifetime", "'static"), (":", False)], _shapes(scan("'static:")))
		self.assertEqual([("Literal", r"'\n'")], _shapes(scan(r"'\n'")))
		self.assertEqual([("Literal", r"'\u{1F600}'")], _shapes(scan(r"'\u{1F600}'")))
		lt = scan("'outer")[0]
		self.assertIsInstance(lt, Lifetime)
		self.assertEqual("outer", lt.name())

	def test_quoted_literals(self):
		for text in ['"a b"', r'"\"q\""', 'b"x"', "b'x'", 'c"x"', 'r"x"', 'r#"a"b"#', 'br##"x"##', '"s"suffix']:
			with self.subTest(text):
				self.assertEqual([("Literal", text)], _shapes(scan(text)))

	def test_numbers(self):
		for text in ["0", "1_000", "0x_fF", "0o17", "0b1", "1.5", "1e10", "1.5E-3f64", "2.", "7usize"]:
			with self.subTest(text):
				self.assertEqual([("Literal", text)], _shapes(scan(text)))

	def test_number_before_range_or_method(self):
		self.assertEqual([("Literal", "1"), (".", True), (".", False), ("Literal", "2")], _shapes(scan("1..2")))
		self.assertEqual([("Literal", "1"), (".", False), ("Ident", "max")], _shapes(scan("1.max")))

	def test_raw_identifiers(self):
		self.assertEqual([("Ident", "r#match")], _shapes(scan("r#match")))
		self.assertEqual([("Ident", "rust")], _shapes(scan("rust")))

	def test_unicode_identifiers(self):
		self.assertEqual([("Ident", "café")], _shapes(scan("café")))

class ScannerErrorTests(unittest.TestCase):

	def expect_error(self, text, message, spot):
		with self.assertRaises(RustParseError) as cm:
			scan(text)
		self.assertEqual(message, cm.exception.message)
		self.assertEqual(spot, cm.exception.spot)

	def test_delimiters(self):
		self.expect_error("(]", "unexpected closing delimiter: `]`", slice(1, 2))
		self.expect_error("a {", "this file contains an unclosed delimiter", slice(2, 3))

	def test_strings(self):
		self.expect_error('x "abc', "unterminated double quote string", slice(2, 3))
		self.expect_error(r'"\q"', r"unknown character escape: \q", slice(0, 4))
		self.expect_error('r#"abc"', "unterminated raw string", slice(0, 3))

	def test_bad_characters(self):
		self.expect_error("a § b", "unknown start of token: '§'", slice(2, 3))
		self.expect_error("'", "unterminated character literal", slice(0, 1))

	def test_comments(self):
		self.expect_error("a /* b", "unterminated block comment", slice(2, 4))

	def test_raw_identifier_restrictions(self):
		self.expect_error("r#self", "`self` cannot be a raw identifier", slice(0, 6))

	def test_literal_contents(self):
		self.expect_error(r"'ab'", "unterminated character literal", slice(0, 1))
		self.expect_error(r'b"\u{41}"', "unicode escape in a byte literal", slice(0, 9))
		self.expect_error(r'"\x80"', r"\x escape out of range", slice(0, 6))

if __name__ == '__main__':
	unittest.main()
