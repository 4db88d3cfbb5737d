"""
What literal tokens mean.

The scanner only decides where a literal ends. Everything here works from
the literal's exact source text, so nothing ever passes through a float and
no digit gets lost or reformatted along the way.
"""
import re

class BadLiteral(ValueError):
	pass

_ESCAPE = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}
_UNICODE = re.compile(r"\{([0-9a-fA-F_]{1,8})\}")
_HEX_PAIR = re.compile(r"[0-9a-fA-F]{2}")
_CONTINUATION_WHITESPACE = " \t\n\r"

_HEX = re.compile(r"0x(?P<digits>[0-9a-fA-F_]*)(?P<suffix>(?:[^\W\d]\w*)?)\Z")
_OCT = re.compile(r"0o(?P<digits>[0-9_]*)(?P<suffix>(?:[^\W\d]\w*)?)\Z")
_BIN = re.compile(r"0b(?P<digits>[0-9_]*)(?P<suffix>(?:[^\W\d]\w*)?)\Z")
_DEC = re.compile(r"""
	(?P<digits>[0-9][0-9_]*)
	(?P<fraction>\.(?:[0-9][0-9_]*)?)?
	(?P<exponent>[eE][+-]?_*[0-9][0-9_]*)?
	(?P<suffix>(?:[^\W\d]\w*)?)\Z
""", re.VERBOSE)
_RADIX = {"0x": (_HEX, 16), "0o": (_OCT, 8), "0b": (_BIN, 2)}

def kind_of(text:str) -> str:
	""" Which family of literal this token text belongs to """
	head = text[:2]
	if head in ('b"', "br"): return "ByteStr"
	if head in ('c"', "cr"): return "CStr"
	if head == "b'": return "Byte"
	if text[0] == "'": return "Char"
	if text[0] == '"' or text[0] == "r": return "Str"
	if text[0].isdigit():
		if head in _RADIX: return "Int"
		m = _DEC.match(text)
		if m and (m.group("fraction") or m.group("exponent")): return "Float"
		return "Int"
	raise BadLiteral("not a literal: %r" % text)

def _anatomy(text:str):
	""" Split a quoted literal into (prefix, raw, body, suffix). """
	i = 0
	prefix = ""
	if text[i] in "bc":
		prefix = text[i]
		i += 1
	raw = text[i] == "r"
	if raw:
		j = i + 1
		while text[j] == "#": j += 1
		closer = '"' + text[i+1:j]
		close = text.rindex(closer)
		return prefix, True, text[j+1:close], text[close+len(closer):]
	quote = text[i]
	close = text.rindex(quote)
	if close <= i: raise BadLiteral("unterminated literal")
	return prefix, False, text[i+1:close], text[close+1:]

def suffix(text:str) -> str:
	""" The suffix, or the empty string if there is none """
	kind = kind_of(text)
	if kind == "Int": return _int_parts(text)[2]
	if kind == "Float": return _DEC.match(text).group("suffix")
	return _anatomy(text)[3]

def _decode(body:str, mode:str) -> list:
	"""
	Interpret escapes. Mode is "str", "byte", or "c". The result is
	a list of code points; bytes-ish modes keep every item below 256.
	"""
	out = []
	i, n = 0, len(body)
	while i < n:
		c = body[i]
		if c == "\\":
			i += 1
			if i >= n: raise BadLiteral("dangling backslash")
			e = body[i]
			if e in _ESCAPE:
				if mode == "c" and e == "0": raise BadLiteral("C strings cannot contain a nul")
				out.append(ord(_ESCAPE[e]))
				i += 1
			elif e == "x":
				pair = body[i+1:i+3]
				if not _HEX_PAIR.fullmatch(pair): raise BadLiteral("invalid \\x escape")
				code = int(pair, 16)
				if mode == "str" and code > 0x7F: raise BadLiteral("\\x escape out of range")
				if mode == "c" and code == 0: raise BadLiteral("C strings cannot contain a nul")
				out.append(code)
				i += 3
			elif e == "u":
				if mode == "byte": raise BadLiteral("unicode escape in a byte literal")
				m = _UNICODE.match(body, i+1)
				if not m: raise BadLiteral("invalid unicode escape")
				code = int(m.group(1).replace("_", ""), 16) if m.group(1).strip("_") else -1
				if code < 0 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
					raise BadLiteral("invalid unicode escape")
				if mode == "c": out.extend(chr(code).encode("utf-8"))
				else: out.append(code)
				i = m.end()
			elif e == "\n" or (e == "\r" and body[i+1:i+2] == "\n"):
				while i < n and body[i] in _CONTINUATION_WHITESPACE: i += 1
			else:
				raise BadLiteral("unknown character escape: \\%s" % e)
		elif c == "\r":
			if body[i+1:i+2] != "\n": raise BadLiteral("bare carriage return")
			out.append(10)
			i += 2
		else:
			if mode == "byte" and ord(c) > 0x7F: raise BadLiteral("non-ASCII character in a byte literal")
			if mode == "c": out.extend(c.encode("utf-8"))
			else: out.append(ord(c))
			i += 1
	return out

def _raw(body:str, mode:str) -> list:
	body = body.replace("\r\n", "\n")
	if "\r" in body: raise BadLiteral("bare carriage return")
	if mode == "byte":
		if any(ord(c) > 0x7F for c in body): raise BadLiteral("non-ASCII character in a raw byte string")
		return [ord(c) for c in body]
	if mode == "c":
		data = body.encode("utf-8")
		if 0 in data: raise BadLiteral("C strings cannot contain a nul")
		return list(data)
	return [ord(c) for c in body]

def _quoted(text:str, mode:str) -> list:
	prefix, raw, body, _ = _anatomy(text)
	return _raw(body, mode) if raw else _decode(body, mode)

def str_value(text:str) -> str:
	return "".join(map(chr, _quoted(text, "str")))

def byte_str_value(text:str) -> bytes:
	return bytes(_quoted(text, "byte"))

def c_str_value(text:str) -> bytes:
	return bytes(_quoted(text, "c"))

def char_value(text:str) -> str:
	points = _quoted(text, "str")
	if len(points) != 1: raise BadLiteral("character literal must hold exactly one character")
	return chr(points[0])

def byte_value(text:str) -> int:
	points = _quoted(text, "byte")
	if len(points) != 1: raise BadLiteral("byte literal must hold exactly one byte")
	return points[0]

def _int_parts(text:str):
	""" (radix, digits, suffix) without interpreting the digits yet """
	pattern, radix = _RADIX.get(text[:2], (_DEC, 10))
	m = pattern.match(text)
	if not m or (radix == 10 and (m.group("fraction") or m.group("exponent"))):
		raise BadLiteral("not an integer literal: %r" % text)
	return radix, m.group("digits"), m.group("suffix")

def int_digits(text:str) -> str:
	"""
	The value in base ten. Python integers have no upper bound,
	so this is exact for any digit string at all.
	"""
	radix, digits, _ = _int_parts(text)
	digits = digits.replace("_", "")
	if not digits: raise BadLiteral("no digits in integer literal")
	try: return str(int(digits, radix))
	except ValueError: raise BadLiteral("invalid digit for a base %d literal" % radix)

def float_digits(text:str) -> str:
	""" The digits as written, less the underscores and the suffix """
	m = _DEC.match(text)
	if not m: raise BadLiteral("not a float literal: %r" % text)
	return text[:m.start("suffix")].replace("_", "")

def check(text:str) -> None:
	""" Raise BadLiteral if this literal token text cannot be decoded at all. """
	kind = kind_of(text)
	if kind == "Str": str_value(text)
	elif kind == "ByteStr": byte_str_value(text)
	elif kind == "CStr": c_str_value(text)
	elif kind == "Char": char_value(text)
	elif kind == "Byte": byte_value(text)
	elif kind == "Float": float_digits(text)
