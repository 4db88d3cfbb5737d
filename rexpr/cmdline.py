"""
Parse a Rust expression and output structured JSON.

{0}

For example:

    rexpr "1 + 2 * 3"
    rexpr "foo.bar(baz)"
    rexpr "if x > 0 {{ x }} else {{ -x }}"

Give - as the expression to read it from standard input instead.
An expression that begins with a dash needs -- in front of it:

    rexpr -- -x

And of course,

    rexpr -h

will explain all the arguments.
"""
import sys, argparse

class _ArgumentParser(argparse.ArgumentParser):
	""" Wrong arguments get the whole usage text with examples, and exit status 1. """
	def error(self, message):
		print(__doc__.strip().format(self.format_usage().strip()), file=sys.stderr)
		print("", file=sys.stderr)
		print("%s: error: %s" % (self.prog, message), file=sys.stderr)
		sys.exit(1)

parser = _ArgumentParser(
	prog="rexpr",
	description="Parse a Rust expression and output structured JSON.",
)
parser.add_argument("expression", help="the Rust expression, or - to read it from standard input")
parser.add_argument("--compact", action="store_true", help="Print the JSON on one line instead of indented.")
parser.add_argument("--sort-keys", action="store_true", help="Sort the keys of every JSON object.")
parser.add_argument('-v', "--verbose", action="count", help="Say what is happening on standard error.")

def run(args):
	from .diagnostics import Report
	from .ontology import RustParseError
	from .parser import parse_expr
	from .convert import expr_to_value
	from .emit import to_json, EncodingError
	report = Report(verbose=args.verbose)
	if args.expression == "-":
		text, filename = sys.stdin.read(), "<stdin>"
	else:
		text, filename = args.expression, "<expression>"
	report.info("Parsing %d characters from %s." % (len(text), filename))
	try: expr = parse_expr(text)
	except RustParseError as ex:
		report.parse_error(text, ex, filename)
	else:
		assert report.ok()
		report.info("Parsed a %s expression." % type(expr).__name__)
		try: document = to_json(expr_to_value(expr), indent=None if args.compact else 2, sort_keys=args.sort_keys)
		except EncodingError as ex: report.encoding_error(ex)
	if report.sick():
		report.complain_to_console()
		return 1
	print(document)
	return 0

def main(argv=None):
	sys.exit(run(parser.parse_args(argv)))
