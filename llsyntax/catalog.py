"""The vocabulary of a language: its terminals and non-terminals.

A catalog is the fixed set of symbol kinds that both the lexer and the grammar
talk about. Terminals are declared in order, with the patterns that match
them; that order matters, because the first declared pattern wins when two
could match at the same place. Two terminals are special:

- The *epsilon* terminal has no pattern. The lexer emits one, zero characters
  wide, at the very end of the input, and the parser treats it as the end of
  the stream.

- The *unmatched* terminal has no pattern either. The lexer uses it for any
  run of input that none of the other patterns match.

Non-terminals are just names here; the grammar gives them their productions.
"""

import typing


class GrammarError(ValueError):
    """Raised when a catalog or grammar is malformed.

    These are always raised when the thing is constructed, never later while
    parsing.
    """


class Terminal:
    """A token kind, and the patterns (regular expressions) that match it."""

    name: str
    patterns: tuple[str, ...]
    epsilon: bool
    unmatched: bool

    def __init__(self, name: str, *patterns: str, epsilon: bool = False, unmatched: bool = False):
        self.name = name
        self.patterns = patterns
        self.epsilon = epsilon
        self.unmatched = unmatched

    def __eq__(self, other) -> bool:
        if not isinstance(other, Terminal):
            return NotImplemented
        return (self.name, self.patterns, self.epsilon, self.unmatched) == (
            other.name,
            other.patterns,
            other.epsilon,
            other.unmatched,
        )

    def __hash__(self) -> int:
        return hash((self.name, self.patterns, self.epsilon, self.unmatched))

    def __repr__(self) -> str:
        flags = ""
        if self.epsilon:
            flags += ", epsilon=True"
        if self.unmatched:
            flags += ", unmatched=True"
        patterns = "".join(f", {p!r}" for p in self.patterns)
        return f"Terminal({self.name!r}{patterns}{flags})"


class Catalog:
    terminals: tuple[Terminal, ...]
    nonterminals: tuple[str, ...]
    epsilon: str
    unmatched: str
    _terminal_names: frozenset[str]
    _nonterminal_names: frozenset[str]

    def __init__(self, terminals: typing.Iterable[Terminal], nonterminals: typing.Iterable[str] = ()):
        terminals = tuple(terminals)
        nonterminals = tuple(nonterminals)

        seen: set[str] = set()
        for name in [t.name for t in terminals] + list(nonterminals):
            if name in seen:
                raise GrammarError(f"Found more than one symbol named {name}")
            seen.add(name)

        epsilons = [t.name for t in terminals if t.epsilon]
        unmatcheds = [t.name for t in terminals if t.unmatched]
        if len(epsilons) == 0:
            raise GrammarError("No terminal is marked as epsilon")
        if len(epsilons) > 1:
            raise GrammarError(f"Two epsilon terminals: {epsilons[0]} and {epsilons[1]}")
        if len(unmatcheds) == 0:
            raise GrammarError("No terminal is marked as unmatched")
        if len(unmatcheds) > 1:
            raise GrammarError(f"Two unmatched terminals: {unmatcheds[0]} and {unmatcheds[1]}")
        if epsilons[0] == unmatcheds[0]:
            raise GrammarError(f"{epsilons[0]} cannot be both epsilon and unmatched")

        for t in terminals:
            if (t.epsilon or t.unmatched) and len(t.patterns) > 0:
                raise GrammarError(f"Reserved terminal {t.name} cannot have a pattern")

        self.terminals = terminals
        self.nonterminals = nonterminals
        self.epsilon = epsilons[0]
        self.unmatched = unmatcheds[0]
        self._terminal_names = frozenset(t.name for t in terminals)
        self._nonterminal_names = frozenset(nonterminals)

    def is_terminal(self, name: str) -> bool:
        return name in self._terminal_names

    def is_nonterminal(self, name: str) -> bool:
        return name in self._nonterminal_names

    def __contains__(self, name: str) -> bool:
        return name in self._terminal_names or name in self._nonterminal_names

    def patterns(self) -> list[tuple[str, str]]:
        """The (terminal name, pattern) bindings, in declaration order."""
        return [(t.name, pattern) for t in self.terminals for pattern in t.patterns]
