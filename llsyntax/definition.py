"""Describing a language as data, and building it.

A `SyntaxDefinition` is the whole description of a language: the ordered
terminals (with their patterns) and, for each non-terminal, its alternatives.
It can be written directly in Python or loaded from a JSON document shaped
like this:

    {
      "terminals": [
        {"name": "EPSILON", "epsilon": true},
        {"name": "UNMATCHED", "unmatched": true},
        {"name": "PLUS", "pattern": "\\\\+"},
        {"name": "NUMBER", "pattern": "[0-9]+"},
        {"name": "NEWLINE", "patterns": ["\\\\r\\\\n", "\\\\r", "\\\\n"]}
      ],
      "productions": {
        "SUM": [["NUMBER", "SUM_TAIL"]],
        "SUM_TAIL": [["PLUS", "NUMBER", "SUM_TAIL"], []]
      }
    }

Calling `build` checks everything and produces a `Syntax`: the lexer and the
compiled grammar, ready to parse with.
"""

import dataclasses
import io
import json
import os
import typing

from .catalog import Catalog, GrammarError, Terminal
from .grammar import Body, Grammar
from .lexer import DEFAULT_CHUNK_SIZE, CharacterSource, Lexicon, TokenSink
from .parser import PredictiveParser


class DefinitionError(GrammarError):
    """A definition document is not the right shape."""


TokenFilter = typing.Callable[[TokenSink], TokenSink]


@dataclasses.dataclass(frozen=True)
class SyntaxDefinition:
    terminals: tuple[Terminal, ...]
    productions: typing.Mapping[str, tuple[Body, ...]]

    @classmethod
    def from_dict(cls, data: typing.Any) -> "SyntaxDefinition":
        if not isinstance(data, dict):
            raise DefinitionError("A definition must be an object")

        raw_terminals = data.get("terminals")
        if not isinstance(raw_terminals, list):
            raise DefinitionError("'terminals' must be a list")

        terminals = []
        for i, raw in enumerate(raw_terminals):
            if not isinstance(raw, dict):
                raise DefinitionError(f"terminals[{i}] must be an object")

            name = raw.get("name")
            if not isinstance(name, str) or name == "":
                raise DefinitionError(f"terminals[{i}] needs a name")

            patterns = raw.get("patterns", [])
            if not isinstance(patterns, list):
                raise DefinitionError(f"{name}: 'patterns' must be a list")
            if "pattern" in raw:
                patterns = [raw["pattern"]] + patterns
            if not all(isinstance(p, str) for p in patterns):
                raise DefinitionError(f"{name}: patterns must be strings")

            unknown = set(raw.keys()) - {"name", "pattern", "patterns", "epsilon", "unmatched"}
            if len(unknown) > 0:
                raise DefinitionError(f"{name}: unknown keys {', '.join(sorted(unknown))}")

            epsilon = raw.get("epsilon", False)
            unmatched = raw.get("unmatched", False)
            if not isinstance(epsilon, bool) or not isinstance(unmatched, bool):
                raise DefinitionError(f"{name}: 'epsilon' and 'unmatched' must be true or false")

            terminals.append(Terminal(name, *patterns, epsilon=epsilon, unmatched=unmatched))

        raw_productions = data.get("productions", {})
        if not isinstance(raw_productions, dict):
            raise DefinitionError("'productions' must be an object")

        productions: dict[str, tuple[Body, ...]] = {}
        for lhs, alternatives in raw_productions.items():
            if not isinstance(alternatives, list):
                raise DefinitionError(f"{lhs}: alternatives must be a list")
            bodies = []
            for alternative in alternatives:
                if not isinstance(alternative, list) or not all(isinstance(s, str) for s in alternative):
                    raise DefinitionError(f"{lhs}: each alternative must be a list of symbol names")
                bodies.append(tuple(alternative))
            productions[lhs] = tuple(bodies)

        return cls(terminals=tuple(terminals), productions=productions)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "SyntaxDefinition":
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise DefinitionError(f"{path}: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, typing.Any]:
        terminals = []
        for t in self.terminals:
            entry: dict[str, typing.Any] = {"name": t.name}
            if len(t.patterns) > 0:
                entry["patterns"] = list(t.patterns)
            if t.epsilon:
                entry["epsilon"] = True
            if t.unmatched:
                entry["unmatched"] = True
            terminals.append(entry)

        return {
            "terminals": terminals,
            "productions": {
                lhs: [list(body) for body in bodies] for lhs, bodies in self.productions.items()
            },
        }

    def catalog(self) -> Catalog:
        return Catalog(self.terminals, self.productions.keys())

    def build(self, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "Syntax":
        catalog = self.catalog()
        return Syntax(
            lexicon=Lexicon(catalog, chunk_size=chunk_size),
            grammar=Grammar(catalog, self.productions),
        )


@dataclasses.dataclass(frozen=True)
class Syntax:
    lexicon: Lexicon
    grammar: Grammar

    def parser(self, root: str) -> PredictiveParser:
        return self.grammar.parser(root)

    def parse(
        self,
        source: str | CharacterSource,
        root: str,
        filter: TokenFilter | None = None,
    ) -> PredictiveParser:
        """Tokenize `source` and parse it as a `root`, returning the finished
        parser so the caller can look at its root or its fault.

        `filter`, if given, is called with the parser and returns the sink
        that the lexer should feed instead.
        """
        if isinstance(source, str):
            source = io.StringIO(source)

        parser = self.parser(root)
        sink: TokenSink = parser if filter is None else filter(parser)
        self.lexicon.tokenize(source, sink)
        return parser
