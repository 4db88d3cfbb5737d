"""
The canonical value: what JSON can say, and nothing more.
Objects are plain dicts, so keys keep the order they were inserted in.
"""
import math
from typing import Union

Value = Union[None, bool, int, float, str, list, dict]

class NotAValue(TypeError):
	pass

def check(v, where:str="value") -> None:
	""" Raise NotAValue, naming the place, if anything within v is not a proper value. """
	if v is None or isinstance(v, (bool, int, str)): return
	if isinstance(v, float):
		if not math.isfinite(v): raise NotAValue("%s: %r is not a finite number" % (where, v))
	elif isinstance(v, list):
		for i, item in enumerate(v): check(item, "%s[%d]" % (where, i))
	elif isinstance(v, dict):
		for key, item in v.items():
			if not isinstance(key, str): raise NotAValue("%s: key %r is not a string" % (where, key))
			check(item, "%s.%s" % (where, key))
	else:
		raise NotAValue("%s: %s is not a canonical value" % (where, type(v).__name__))
