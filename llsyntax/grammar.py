"""Compiles productions into the prediction index of an LL(1) parser.

The parser only ever looks at one token, and it does not compute FIRST or
FOLLOW sets. Instead, each non-terminal's alternatives are sorted by how they
begin:

- An alternative that begins with a terminal is filed under that terminal.
  When the parser is expecting the non-terminal and sees that terminal, it
  picks that alternative. Two alternatives of one non-terminal may not begin
  with the same terminal.

- At most one alternative may begin with a non-terminal. The parser falls back
  to it whenever no terminal-led alternative fits the lookahead.

- At most one alternative may be empty. The parser falls back to it when
  nothing else applies. (An alternative consisting of nothing but the epsilon
  terminal counts as empty.)

Anything that breaks these rules is rejected here, when the grammar is built,
rather than being discovered halfway through a parse.

    catalog = Catalog(
        [
            Terminal("EPSILON", epsilon=True),
            Terminal("UNMATCHED", unmatched=True),
            Terminal("PLUS", r"\\+"),
            Terminal("NUMBER", r"[0-9]+"),
        ],
        ["SUM", "SUM_TAIL"],
    )
    grammar = Grammar(
        catalog,
        {
            "SUM": [["NUMBER", "SUM_TAIL"]],
            "SUM_TAIL": [["PLUS", "NUMBER", "SUM_TAIL"], []],
        },
    )
"""

import dataclasses
import enum
import logging
import types
import typing

from .catalog import Catalog, GrammarError
from .parser import PredictiveParser


grammar_log = logging.getLogger("llsyntax.grammar")


Body = tuple[str, ...]
Productions = typing.Mapping[str, typing.Iterable[typing.Iterable[str]]]


class UnknownSymbolError(GrammarError):
    """A production (or a parser root) names a symbol the catalog lacks."""


class Lead(enum.Enum):
    """How an alternative begins."""

    TERMINAL = "terminal"
    NONTERMINAL = "non-terminal"
    EMPTY = "empty"


@dataclasses.dataclass(frozen=True)
class Ambiguity:
    nonterminal: str
    lead: Lead
    terminal: str | None
    alternatives: tuple[Body, Body]

    def __str__(self):
        def format_body(body: Body) -> str:
            return " ".join(body) if len(body) > 0 else "<empty>"

        if self.lead == Lead.TERMINAL:
            what = f"both begin with the terminal {self.terminal}"
        elif self.lead == Lead.NONTERMINAL:
            what = "both begin with a non-terminal"
        else:
            what = "are both empty"

        first, second = self.alternatives
        return (
            f"{self.nonterminal}: the alternatives `{format_body(first)}` "
            f"and `{format_body(second)}` {what}"
        )


class AmbiguityError(GrammarError):
    ambiguities: list[Ambiguity]

    def __init__(self, ambiguities: list[Ambiguity]):
        super().__init__(ambiguities)
        self.ambiguities = ambiguities

    def __str__(self):
        return f"{len(self.ambiguities)} ambiguities:\n" + "\n".join(
            f"- {ambiguity}" for ambiguity in self.ambiguities
        )


class Grammar:
    """An immutable, validated LL(1) grammar over a catalog.

    One grammar can be shared by any number of parsers, including ones running
    at the same time; each call to `parser` makes a fresh, single-use parser.
    """

    catalog: Catalog
    empty: frozenset[str]
    terminal_leads: typing.Mapping[str, typing.Mapping[str, Body]]
    nonterminal_leads: typing.Mapping[str, Body]

    def __init__(self, catalog: Catalog, productions: Productions):
        epsilon = catalog.epsilon

        bodies: dict[str, list[Body]] = {}
        for lhs, alternatives in productions.items():
            if not catalog.is_nonterminal(lhs):
                if catalog.is_terminal(lhs):
                    raise GrammarError(f"{lhs} is a terminal and cannot have productions")
                raise UnknownSymbolError(f"Productions given for unknown non-terminal {lhs}")

            rules = []
            for alternative in alternatives:
                body = tuple(alternative)
                for symbol in body:
                    if symbol not in catalog:
                        raise UnknownSymbolError(
                            f"{lhs}: the alternative `{' '.join(body)}` refers to unknown symbol {symbol}"
                        )
                if body == (epsilon,):
                    body = ()
                rules.append(body)
            bodies[lhs] = rules

        for nt in catalog.nonterminals:
            if len(bodies.get(nt, [])) == 0:
                raise GrammarError(f"Non-terminal {nt} has no productions")

        empty: set[str] = set()
        empty_bodies: dict[str, Body] = {}
        terminal_leads: dict[str, dict[str, Body]] = {}
        nonterminal_leads: dict[str, Body] = {}
        ambiguities: list[Ambiguity] = []

        for lhs, rules in bodies.items():
            for body in rules:
                if len(body) == 0:
                    if lhs in empty:
                        ambiguities.append(Ambiguity(lhs, Lead.EMPTY, None, (empty_bodies[lhs], body)))
                        continue
                    empty.add(lhs)
                    empty_bodies[lhs] = body

                elif catalog.is_nonterminal(body[0]):
                    existing = nonterminal_leads.get(lhs)
                    if existing is not None:
                        ambiguities.append(Ambiguity(lhs, Lead.NONTERMINAL, None, (existing, body)))
                        continue
                    nonterminal_leads[lhs] = body

                else:
                    leads = terminal_leads.setdefault(lhs, {})
                    existing = leads.get(body[0])
                    if existing is not None:
                        ambiguities.append(Ambiguity(lhs, Lead.TERMINAL, body[0], (existing, body)))
                        continue
                    leads[body[0]] = body

        if len(ambiguities) > 0:
            raise AmbiguityError(ambiguities)

        # Non-terminal-led alternatives are expanded without consuming
        # anything, so a cycle through them would never terminate.
        safe: set[str] = set()
        for nt in nonterminal_leads:
            path: list[str] = []
            current = nt
            while current in nonterminal_leads and current not in safe:
                if current in path:
                    cycle = path[path.index(current) :] + [current]
                    raise GrammarError(f"Left recursion: {' -> '.join(cycle)}")
                path.append(current)
                current = nonterminal_leads[current][0]
            safe.update(path)

        self.catalog = catalog
        self.empty = frozenset(empty)
        self.terminal_leads = types.MappingProxyType(
            {lhs: types.MappingProxyType(leads) for lhs, leads in terminal_leads.items()}
        )
        self.nonterminal_leads = types.MappingProxyType(nonterminal_leads)

        if grammar_log.isEnabledFor(logging.DEBUG):
            grammar_log.debug(
                "Compiled %d non-terminals (%d with empty alternatives)",
                len(bodies),
                len(self.empty),
            )

    def is_nonterminal(self, kind: str) -> bool:
        return self.catalog.is_nonterminal(kind)

    def parser(self, root: str) -> PredictiveParser:
        """Make a new parser which will parse a single `root` from a token stream."""
        if root not in self.catalog:
            raise UnknownSymbolError(f"Unknown root symbol {root}")
        return PredictiveParser(self, root)

    def format(self) -> str:
        """Format the prediction table so pretty."""

        def format_body(body: Body) -> str:
            return " ".join(body) if len(body) > 0 else "<empty>"

        lines = []
        for nt in self.catalog.nonterminals:
            lines.append(f"{nt}:")
            for terminal, body in self.terminal_leads.get(nt, {}).items():
                lines.append(f"  {terminal: <12} -> {format_body(body)}")
            body = self.nonterminal_leads.get(nt)
            if body is not None:
                lines.append(f"  {'(otherwise)': <12} -> {format_body(body)}")
            if nt in self.empty:
                lines.append(f"  {'(empty)': <12} -> <empty>")
        return "\n".join(lines)
