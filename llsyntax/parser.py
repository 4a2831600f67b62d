"""The predictive parser: a token sink that builds a syntax tree as it goes.

The parser keeps two pieces of state:

- `expected` is the list of symbols still to be matched. It starts out as
  just the root symbol. When a non-terminal reaches the front it is replaced
  by the body of one of its alternatives, chosen by looking at the current
  token; when a terminal reaches the front the current token must be that
  terminal.

- `builders` is a stack of non-terminals under construction. Every time a
  non-terminal is expanded a builder is pushed, knowing how many children it
  needs. Matched tokens are handed to the innermost builder; a builder that
  has all its children turns into a `NonTerminal` and is handed, in turn, to
  the builder outside it. When the outermost builder completes, that's the
  root of the tree.

The parser is driven entirely by `accept`, one token at a time, so it can sit
directly downstream of `Lexicon.tokenize`, or downstream of any filter that
sits downstream of that.

Syntax errors are not exceptions. The first token that can't be accepted is
recorded as the fault, and everything after it is ignored; there's no attempt
at recovery. `fault()` and `expected()` (or `acceptable()`) are enough to
build an error message.
"""

import dataclasses
import logging
import typing

from .lexer import TokenSink
from .position import TextPosition
from .tree import Node, NonTerminal, Token

if typing.TYPE_CHECKING:
    from .grammar import Grammar


parse_log = logging.getLogger("llsyntax.parser")


class Parser(TokenSink, typing.Protocol):
    def root(self) -> Node | None:
        """The root of the syntax tree, once the whole stream has been accepted."""
        ...

    def fault(self) -> Token | None:
        """The first token that could not be parsed, if there was one."""
        ...

    def expected(self) -> list[str]:
        """The symbols still expected, next one first."""
        ...


@dataclasses.dataclass
class _Builder:
    kind: str
    expect: int
    parts: list[Node] = dataclasses.field(default_factory=list)

    def submit(self, part: Node) -> bool:
        """Add the next child, returning True if that completes the node."""
        self.parts.append(part)
        return len(self.parts) >= self.expect

    def complete(self, default: TextPosition) -> NonTerminal:
        return NonTerminal.of(self.kind, self.parts, default)

    def __repr__(self):
        return f"[{self.kind}, {len(self.parts)}/{self.expect}]"


class PredictiveParser:
    """A single-use parser for one token stream.

    Get one from `Grammar.parser`.
    """

    grammar: "Grammar"
    _expected: list[str]
    _builders: list[_Builder]
    _fault: Token | None
    _fault_expected: list[str] | None
    _result: Node | None
    _accepted: bool

    def __init__(self, grammar: "Grammar", root: str):
        self.grammar = grammar

        # Both stacks keep their top at the end: the next expected symbol is
        # _expected[-1], and the innermost builder is _builders[-1].
        self._expected = [root]
        self._builders = []
        self._fault = None
        self._fault_expected = None
        self._result = None
        self._accepted = False

    def accept(self, token: Token):
        if self._fault is not None or self._accepted:
            return

        grammar = self.grammar
        expected = self._expected
        before = list(expected)

        pl = parse_log
        if pl.isEnabledFor(logging.DEBUG):
            pl.debug("Accepting %s", token)

        while True:
            if pl.isEnabledFor(logging.DEBUG):
                pl.debug(
                    "{expected: <40} {builders}".format(
                        expected=repr(expected[::-1]),
                        builders=repr(self._builders[::-1]),
                    )
                )

            if len(expected) == 0:
                # Everything has been parsed; only the end of the stream may
                # follow.
                if token.kind == grammar.catalog.epsilon:
                    self._accepted = True
                else:
                    self._set_fault(token, before)
                return

            top = expected[-1]
            if top == token.kind:
                expected.pop()
                self._complete(token, token.start)
                if token.kind == grammar.catalog.epsilon and len(expected) == 0:
                    # The grammar matched the end of the stream itself, so no
                    # other token is coming.
                    self._accepted = True
                return

            if not grammar.is_nonterminal(top):
                pl.debug("Token mismatch: wanted %s", top)
                self._set_fault(token, before)
                return

            body = grammar.terminal_leads.get(top, {}).get(token.kind)
            if body is None:
                body = grammar.nonterminal_leads.get(top)

            if body is not None:
                pl.debug("%s -> %s", top, body)
                expected[-1:] = reversed(body)
                self._builders.append(_Builder(top, len(body)))
                continue

            if top not in grammar.empty:
                pl.debug("No expansion for %s", top)
                self._set_fault(token, before)
                return

            pl.debug("%s -> <empty>", top)
            expected.pop()
            self._complete(NonTerminal.of(top, (), token.start), token.start)

    def _complete(self, node: Node, default: TextPosition):
        """Hand a finished node to the innermost builder, and keep finishing
        builders outward for as long as that completes them.
        """
        builders = self._builders
        while len(builders) > 0:
            if not builders[-1].submit(node):
                return
            node = builders.pop().complete(default)

        self._result = node

    def _set_fault(self, token: Token, before: list[str]):
        self._fault = token
        self._fault_expected = before

    @property
    def accepted(self) -> bool:
        """True once the parse has successfully reached the end of the stream."""
        return self._accepted

    def root(self) -> Node | None:
        if not self._accepted:
            return None
        return self._result

    def fault(self) -> Token | None:
        return self._fault

    def expected(self) -> list[str]:
        return self._expected[::-1]

    def acceptable(self) -> frozenset[str]:
        """The terminal kinds that the next token could be.

        After a fault this describes the parser just before the faulting token
        arrived, so it answers "what would have been accepted there?". Once
        the parse has been accepted, nothing more is acceptable.
        """
        if self._accepted:
            return frozenset()

        grammar = self.grammar
        stack = list(self._fault_expected if self._fault_expected is not None else self._expected)
        result: set[str] = set()
        while True:
            if len(stack) == 0:
                result.add(grammar.catalog.epsilon)
                break

            top = stack.pop()
            if not grammar.is_nonterminal(top):
                result.add(top)
                break

            result.update(grammar.terminal_leads.get(top, {}))
            body = grammar.nonterminal_leads.get(top)
            if body is not None:
                stack.extend(reversed(body))
            elif top not in grammar.empty:
                break

        return frozenset(result)
