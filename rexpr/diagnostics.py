"""
Everything the user gets told about, other than the answer, goes through here.
"""
import sys
from boozetools.support.failureprone import SourceText, illustration
from .ontology import RustParseError

class Report:
	""" Collects issues until someone asks to hear about them. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def issues_as_text(self) -> list[str]:
		return [pic.as_text() for pic in self._issues]

	def parse_error(self, text:str, ex:RustParseError, filename:str="<expression>"):
		intro = "Parse error: %s" % ex.message
		if ex.spot is None: problem = []
		else: problem = [Annotation(SourceText(text, filename=filename), ex.spot, "here")]
		self.issue(Pic(intro, problem))

	def encoding_error(self, ex:Exception):
		self.issue(Pic("Error serializing JSON: %s" % ex, []))

class Annotation:
	source: SourceText
	slice: slice
	caption: str
	def __init__(self, source:SourceText, spot:slice, caption:str=""):
		self.source = source
		self.slice = spot
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.slice.start)
		single_line = self.source.line_of_text(row)
		# Spans that run onto later lines get cut off at the end of the first one.
		width = max(0, min(self.slice.stop - self.slice.start, len(single_line.rstrip("\r\n")) - col))
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	def as_text(self):
		lines = [self._intro]
		lines.extend(ann.illustrate() for ann in self._anns)
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	for i in issues:
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
