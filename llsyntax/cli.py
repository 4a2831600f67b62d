import argparse
import logging
import sys

from . import demo
from .catalog import GrammarError
from .definition import Syntax, SyntaxDefinition
from .parser import PredictiveParser


def describe_fault(parser: PredictiveParser) -> str:
    fault = parser.fault()
    assert fault is not None

    if fault.kind == parser.grammar.catalog.epsilon:
        what = "end of input"
    else:
        what = f"{fault.kind} {fault.text!r}"

    acceptable = sorted(parser.acceptable())
    return f"{fault.start}: unexpected {what}; expected one of {', '.join(acceptable)}"


def main(args: list[str] | None = None) -> int:
    if args is None:
        args = sys.argv

    parser = argparse.ArgumentParser(
        prog="llsyntax",
        description="Tokenize and parse some text with an LL(1) grammar",
    )
    parser.add_argument("text", nargs="?", help="The text to parse")
    parser.add_argument("--input", help="Path to a file to parse instead of TEXT")
    parser.add_argument(
        "--grammar",
        help="Path to a JSON grammar definition. The default is the built-in expression grammar.",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="The symbol to parse. The default is EXPR for the built-in grammar, and the "
        "first non-terminal of a loaded one.",
    )
    parser.add_argument("--tokens", action="store_true", help="Print the tokens as they are lexed")
    parser.add_argument("--table", action="store_true", help="Print the prediction table")
    parser.add_argument(
        "--no-filter",
        action="store_true",
        help="Don't strip whitespace and comments before parsing (built-in grammar only)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log more; repeat for even more")

    parsed = parser.parse_args(args[1:])

    if parsed.verbose >= 2:
        level = logging.DEBUG
    elif parsed.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(name)s: %(message)s")

    if (parsed.text is None) == (parsed.input is None):
        parser.error("Give exactly one of TEXT or --input")

    try:
        if parsed.grammar is not None:
            definition = SyntaxDefinition.load(parsed.grammar)
            token_filter = None
        else:
            definition = demo.EXPRESSION
            token_filter = None if parsed.no_filter else demo.CommentEliminator
        syntax: Syntax = definition.build()
    except (GrammarError, OSError) as e:
        print(f"Invalid grammar: {e}", file=sys.stderr)
        return 2

    root = parsed.root
    if root is None:
        if parsed.grammar is None:
            root = "EXPR"
        elif len(syntax.grammar.catalog.nonterminals) > 0:
            root = syntax.grammar.catalog.nonterminals[0]
        else:
            parser.error("The grammar has no non-terminals; give --root")

    if parsed.table:
        print(syntax.grammar.format())
        print()

    if parsed.input is not None:
        with open(parsed.input, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    else:
        text = parsed.text

    if parsed.tokens:
        for token in syntax.lexicon.iter_text(text):
            print(token)
        print()

    try:
        result = syntax.parse(text, root, filter=token_filter)
    except GrammarError as e:
        print(f"Invalid root: {e}", file=sys.stderr)
        return 2

    if result.fault() is not None:
        print(describe_fault(result), file=sys.stderr)
        return 1

    tree = result.root()
    if tree is None:
        print("Input ended before the parse was complete", file=sys.stderr)
        return 1
    print(tree.format())
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
