"""
Scan Rust source text into token trees.

Whitespace and ordinary comments vanish. Doc comments turn into the
attributes they stand for, so `/// hi` arrives as `#[doc = " hi"]`.
Literals are checked for sensible escapes here, because a bad escape
is a lexical problem and should be reported as one.
"""
import re
from typing import Optional
from .ontology import RustParseError
from .tokens import Ident, Punct, Literal, Lifetime, Group, PUNCT_CHARS, PAREN, BRACKET, BRACE
from . import literals

_WHITESPACE = re.compile(r"\s+")
_IDENT = re.compile(r"(?:r#)?[^\W\d]\w*")
_LIFETIME = re.compile(r"'(?:r#)?[^\W\d]\w*")
_SUFFIX = re.compile(r"[^\W\d]\w*")
_NUMBER = re.compile(r"""
	0x[0-9a-fA-F_]*
	| 0[ob][0-9_]*
	| [0-9][0-9_]*
""", re.VERBOSE)
_FRACTION = re.compile(r"\.(?![.\w])|\.[0-9][0-9_]*")
_EXPONENT = re.compile(r"[eE][+-]?_*[0-9][0-9_]*")
_QUOTED_STRING = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_CHAR = re.compile(r"'(?:[^'\\\n\r\t]|\\(?:x[0-9a-fA-F]{2}|u\{[0-9a-fA-F_]*\}|.))'", re.DOTALL)
_RAW_OPENER = re.compile(r"r(#*)\"")

_OPENERS = {"(": PAREN, "[": BRACKET, "{": BRACE}
_CLOSERS = {")": PAREN, "]": BRACKET, "}": BRACE}

def scan(text:str) -> tuple:
	""" The whole text becomes one token stream, or else RustParseError. """
	return _Scanner(text).run()

def _doc_literal(text:str) -> str:
	escaped = text.replace("\\", "\\\\").replace('"', '\\"')
	escaped = escaped.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
	return '"' + escaped + '"'

class _Scanner:
	def __init__(self, text:str):
		self.text = text
		self.pos = 0
		# Each frame is (delimiter, opening spot, tokens so far).
		self.stack = [(None, None, [])]

	def error(self, message:str, start:int, stop:Optional[int]=None):
		raise RustParseError(message, slice(start, start+1 if stop is None else stop))

	def emit(self, token):
		self.stack[-1][2].append(token)

	def run(self) -> tuple:
		text = self.text
		while True:
			m = _WHITESPACE.match(text, self.pos)
			if m: self.pos = m.end()
			if self.pos >= len(text): break
			self.scan_one()
		if len(self.stack) > 1:
			delimiter, spot, _ = self.stack[-1]
			raise RustParseError("this file contains an unclosed delimiter", spot)
		return tuple(self.stack[0][2])

	def scan_one(self):
		text, pos = self.text, self.pos
		c = text[pos]
		if text.startswith("//", pos): return self.line_comment()
		if text.startswith("/*", pos): return self.block_comment()
		if c in _OPENERS:
			self.stack.append((_OPENERS[c], slice(pos, pos+1), []))
			self.pos += 1
			return
		if c in _CLOSERS:
			delimiter, spot, tokens = self.stack[-1]
			if delimiter != _CLOSERS[c]:
				self.error("unexpected closing delimiter: `%s`" % c, pos)
			self.stack.pop()
			self.emit(Group(delimiter, tuple(tokens), spot, slice(pos, pos+1)))
			self.pos += 1
			return
		if c == '"' or _RAW_OPENER.match(text, pos) or text.startswith(("b\"", "c\"", "br\"", "cr\"", "br#", "cr#", "b'"), pos):
			return self.quoted()
		if c == "'": return self.apostrophe()
		if c.isdigit(): return self.number()
		m = _IDENT.match(text, pos)
		if m:
			if m.group() == "r#_" or m.group() in ("r#crate", "r#self", "r#super", "r#Self"):
				self.error("`%s` cannot be a raw identifier" % m.group()[2:], pos, m.end())
			self.pos = m.end()
			self.emit(Ident(m.group(), slice(pos, m.end())))
			return
		if c in PUNCT_CHARS:
			joint = pos + 1 < len(text) and text[pos+1] in PUNCT_CHARS
			self.pos += 1
			self.emit(Punct(c, joint, slice(pos, pos+1)))
			return
		self.error("unknown start of token: %r" % c, pos)

	def line_comment(self):
		text, pos = self.text, self.pos
		end = text.find("\n", pos)
		if end < 0: end = len(text)
		body = text[pos:end]
		self.pos = end
		if body.startswith("///") and not body.startswith("////"):
			self.doc(body[3:], False, pos, end)
		elif body.startswith("//!"):
			self.doc(body[3:], True, pos, end)

	def block_comment(self):
		text, start = self.text, self.pos
		depth, pos = 0, start
		while pos < len(text):
			if text.startswith("/*", pos):
				depth += 1
				pos += 2
			elif text.startswith("*/", pos):
				depth -= 1
				pos += 2
				if not depth: break
			else:
				pos += 1
		if depth: self.error("unterminated block comment", start, start+2)
		self.pos = pos
		body = text[start:pos]
		if body.startswith("/**") and not body.startswith("/***") and body != "/**/":
			self.doc(body[3:-2], False, start, pos)
		elif body.startswith("/*!"):
			self.doc(body[3:-2], True, start, pos)

	def doc(self, content:str, inner:bool, start:int, stop:int):
		spot = slice(start, stop)
		self.emit(Punct("#", inner, spot))
		if inner: self.emit(Punct("!", False, spot))
		inside = (Ident("doc", spot), Punct("=", False, spot), Literal(_doc_literal(content), spot))
		self.emit(Group(BRACKET, inside, spot, spot))

	def literal(self, start:int, stop:int):
		""" Absorb any suffix, check the literal, and emit it. """
		m = _SUFFIX.match(self.text, stop)
		if m: stop = m.end()
		text = self.text[start:stop]
		kind = literals.kind_of(text)
		if kind not in ("Int", "Float"):
			try: literals.check(text)
			except literals.BadLiteral as ex: self.error(str(ex), start, stop)
		self.pos = stop
		self.emit(Literal(text, slice(start, stop)))

	def quoted(self):
		text, start = self.text, self.pos
		pos = start
		if text[pos] in "bc": pos += 1
		if text[pos] == "r":
			m = _RAW_OPENER.match(text, pos)
			if not m: self.error("found invalid character; only `#` is allowed in raw string delimitation", pos)
			hashes = m.group(1)
			if len(hashes) > 255: self.error("too many `#` symbols: raw strings may be delimited by up to 255 `#` symbols", pos, m.end())
			close = text.find('"' + hashes, m.end())
			if close < 0: self.error("unterminated raw string", start, m.end())
			return self.literal(start, close + 1 + len(hashes))
		if text[pos] == "'":
			m = _CHAR.match(text, pos)
			if not m: self.error("unterminated byte constant", start, pos+1)
			return self.literal(start, m.end())
		m = _QUOTED_STRING.match(text, pos)
		if not m: self.error("unterminated double quote string", start, pos+1)
		self.literal(start, m.end())

	def apostrophe(self):
		text, pos = self.text, self.pos
		m = _CHAR.match(text, pos)
		if m: return self.literal(pos, m.end())
		m = _LIFETIME.match(text, pos)
		if m and not text.startswith("'", m.end()):
			self.pos = m.end()
			self.emit(Lifetime(m.group(), slice(pos, m.end())))
			return
		self.error("unterminated character literal", pos)

	def number(self):
		text, start = self.text, self.pos
		m = _NUMBER.match(text, start)
		stop = m.end()
		if m.group()[:2] not in ("0x", "0o", "0b"):
			f = _FRACTION.match(text, stop)
			if f: stop = f.end()
			e = _EXPONENT.match(text, stop)
			if e: stop = e.end()
		self.literal(start, stop)
