import unittest

from rexpr import literals
from rexpr.literals import BadLiteral

class KindTests(unittest.TestCase):

	def test_kind_of(self):
		for text, kind in [
			('"s"', "Str"), ('r#"s"#', "Str"),
			('b"s"', "ByteStr"), ('br"s"', "ByteStr"),
			('c"s"', "CStr"), ('cr"s"', "CStr"),
			("b's'", "Byte"), ("'s'", "Char"),
			("1", "Int"), ("0x1F", "Int"), ("1u8", "Int"), ("1f32", "Int"),
			("1.0", "Float"), ("1e3", "Float"), ("1.", "Float"), ("1.0f32", "Float"),
		]:
			with self.subTest(text):
				self.assertEqual(kind, literals.kind_of(text))

	def test_not_a_literal(self):
		self.assertRaises(BadLiteral, literals.kind_of, "x")

	def test_suffix(self):
		for text, suffix in [
			("1u8", "u8"), ("0xFFu16", "u16"), ("1.5f64", "f64"), ("1e3f32", "f32"),
			('"s"x', "x"), ("'c'y", "y"), ('r#"s"#z', "z"), ("42", ""),
		]:
			with self.subTest(text):
				self.assertEqual(suffix, literals.suffix(text))

class NumberTests(unittest.TestCase):

	def test_int_digits(self):
		for text, digits in [
			("0", "0"), ("1_000", "1000"), ("0x2A", "42"), ("0xff_ffu32", "65535"),
			("0o17", "15"), ("0b1010", "10"), ("007", "7"),
			("18446744073709551616", "18446744073709551616"),
		]:
			with self.subTest(text):
				self.assertEqual(digits, literals.int_digits(text))

	def test_bad_ints(self):
		for text in ["0x", "0b2", "0o8", "0b_"]:
			with self.subTest(text):
				self.assertRaises(BadLiteral, literals.int_digits, text)

	def test_float_digits(self):
		for text, digits in [
			("3.14", "3.14"), ("1_000.000_1", "1000.0001"), ("1e-7", "1e-7"),
			("2.5E+3f64", "2.5E+3"), ("1.", "1."), ("0.10", "0.10"),
		]:
			with self.subTest(text):
				self.assertEqual(digits, literals.float_digits(text))

class TextTests(unittest.TestCase):

	def test_str_value(self):
		for text, value in [
			('"plain"', "plain"),
			(r'"tab\there"', "tab\there"),
			(r'"\x41\u{42}\0"', "AB\0"),
			(r'"\\"', "\\"),
			('"one\\\n    two"', "onetwo"),
			('"crlf\r\n"', "crlf\n"),
			('r"\\n"', "\\n"),
			('r##"a "# b"##', 'a "# b'),
			('"ünï"', "ünï"),
		]:
			with self.subTest(text):
				self.assertEqual(value, literals.str_value(text))

	def test_byte_values(self):
		self.assertEqual(b"\xff\n", literals.byte_str_value(r'b"\xff\n"'))
		self.assertEqual(b"\\x", literals.byte_str_value(r'br"\x"'))
		self.assertEqual(0x7F, literals.byte_value(r"b'\x7f'"))
		self.assertEqual(ord("'"), literals.byte_value(r"b'\''"))

	def test_c_string_is_utf8(self):
		self.assertEqual("é".encode("utf-8"), literals.c_str_value('c"é"'))
		self.assertEqual("é".encode("utf-8"), literals.c_str_value(r'c"\u{e9}"'))
		self.assertEqual(b"\xff", literals.c_str_value(r'c"\xff"'))

	def test_char_value(self):
		self.assertEqual("'", literals.char_value(r"'\''"))
		self.assertEqual("\U0001F600", literals.char_value(r"'\u{1F600}'"))
		self.assertEqual("ß", literals.char_value("'ß'"))

	def test_rejects(self):
		for fn, text in [
			(literals.str_value, r'"\q"'),
			(literals.str_value, r'"\x80"'),
			(literals.str_value, r'"\u{D800}"'),
			(literals.str_value, r'"\u{110000}"'),
			(literals.str_value, '"bare\rreturn"'),
			(literals.byte_str_value, 'b"ü"'),
			(literals.byte_str_value, r'b"\u{41}"'),
			(literals.c_str_value, r'c"\0"'),
			(literals.c_str_value, r'c"\x00"'),
			(literals.char_value, "'ab'"),
			(literals.byte_value, "b''"),
		]:
			with self.subTest(text):
				self.assertRaises(BadLiteral, fn, text)

	def test_check(self):
		literals.check('"fine"')
		literals.check("1.5")
		self.assertRaises(BadLiteral, literals.check, r'"\q"')

if __name__ == '__main__':
	unittest.main()
