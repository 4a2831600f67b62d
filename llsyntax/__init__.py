"""A lexer generator and LL(1) predictive parser generator.

Describe a language as an ordered list of terminals (each with the regular
expressions that match it) plus, for each non-terminal, its alternatives.
From that you get a streaming lexer, which turns characters into tokens, and
a compiled grammar, which makes parsers that turn those tokens into a tree.

    definition = SyntaxDefinition(
        terminals=(
            Terminal("EPSILON", epsilon=True),
            Terminal("UNMATCHED", unmatched=True),
            Terminal("PLUS", r"\\+"),
            Terminal("NUMBER", r"[0-9]+"),
        ),
        productions={
            "SUM": (("NUMBER", "SUM_TAIL"),),
            "SUM_TAIL": (("PLUS", "NUMBER", "SUM_TAIL"), ()),
        },
    )
    syntax = definition.build()
    parser = syntax.parse("1+2+3", "SUM")
    if parser.fault() is None:
        print(parser.root().format())

Only grammars where one token of lookahead is always enough are supported:
no left recursion, no backtracking. Anything else is rejected when the
grammar is built.
"""

from .catalog import Catalog, GrammarError, Terminal
from .definition import DefinitionError, Syntax, SyntaxDefinition
from .grammar import Ambiguity, AmbiguityError, Grammar, Lead, UnknownSymbolError
from .lexer import CharacterSource, Lexicon, TokenSink
from .parser import Parser, PredictiveParser
from .position import PositionTracker, TextPosition
from .tree import Node, NonTerminal, Token

__all__ = [
    "Ambiguity",
    "AmbiguityError",
    "Catalog",
    "CharacterSource",
    "DefinitionError",
    "Grammar",
    "GrammarError",
    "Lead",
    "Lexicon",
    "Node",
    "NonTerminal",
    "Parser",
    "PositionTracker",
    "PredictiveParser",
    "Syntax",
    "SyntaxDefinition",
    "Terminal",
    "TextPosition",
    "Token",
    "TokenSink",
    "UnknownSymbolError",
]
