"""
Canonical values out to JSON text.
"""
import json
from . import value

class EncodingError(Exception):
	""" The value cannot be written as JSON text. This is never a parse problem. """
	pass

def to_json(v:value.Value, *, indent=2, sort_keys=False) -> str:
	"""
	Pretty by default; pass indent=None for one line. Non-ASCII text stays as
	itself rather than turning into escapes, so the result must also survive
	encoding as UTF-8. (Text from a command line can carry lone surrogates.)
	"""
	try:
		value.check(v)
		separators = (",", ":") if indent is None else None
		text = json.dumps(v, indent=indent, sort_keys=sort_keys, ensure_ascii=False, allow_nan=False, separators=separators)
		text.encode("utf-8")
	except (value.NotAValue, ValueError) as ex:
		raise EncodingError(str(ex)) from ex
	return text
