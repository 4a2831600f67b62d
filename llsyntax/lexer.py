"""A streaming regular-expression lexer.

All the patterns of a catalog are glued together into one big alternation,
each one wrapped in its own group, in declaration order. Python's `re` tries
alternatives left to right, so when two patterns could match at the same
offset the one declared first wins.

Input is read in chunks into a look-ahead buffer. A match that runs right up
to the end of the buffer is not trusted until more input has been read,
because the next chunk might extend it; `[0-9]+` fed "12" and then "3" must
produce "123", not "12" and "3". Anything between matches comes out as a
single token of the catalog's unmatched kind, so the lexer never fails on bad
input. The stream always ends with a zero-width epsilon token.

Only a match that reaches the end of the buffer triggers another read. A
pattern declared earlier that would have matched, given more input, is not
noticed: with `abcd` declared before `ab`, the input "abcd" read in chunks of
three comes out as "ab" and then unmatched "cd". Reading in chunks larger
than any token avoids this.

Patterns may use their own groups, including numbered backreferences; those
are renumbered to account for the wrapping groups.
"""

import io
import logging
import re
import typing

from .catalog import Catalog, GrammarError
from .position import PositionTracker
from .tree import Token


lex_log = logging.getLogger("llsyntax.lexer")


class TokenSink(typing.Protocol):
    def accept(self, token: Token):
        """Receive the next token in the stream."""
        ...


class CharacterSource(typing.Protocol):
    def read(self, size: int = -1, /) -> str:
        """Read up to `size` characters, returning "" at the end of the input."""
        ...


DEFAULT_CHUNK_SIZE = 1024

_OCTAL = "01234567"


def _renumber_groups(pattern: str, name: str, offset: int) -> str:
    """Shift the numbered group references in `pattern` up by `offset`.

    Covers backreferences (`\\1`) and conditionals (`(?(1)...)`). An escaped
    digit inside a character class, or three octal digits, is a character and
    not a reference, so those are left alone.
    """

    def digit_at(index: int, digits: str = "0123456789") -> bool:
        return index < len(pattern) and pattern[index] in digits

    result = []
    in_class = False
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            if in_class or not digit_at(i + 1, "123456789"):
                result.append(pattern[i : i + 2])
                i += 2
                continue

            end = i + 2
            if digit_at(end):
                end += 1
                if digit_at(i + 1, _OCTAL) and digit_at(i + 2, _OCTAL) and digit_at(end, _OCTAL):
                    result.append(pattern[i : end + 1])
                    i = end + 1
                    continue

            number = int(pattern[i + 1 : end]) + offset
            if number > 99:
                raise GrammarError(f"Too many groups before the backreference in {name}: {pattern!r}")
            # Grouped so that a digit after the reference can't extend it.
            result.append(f"(?:\\{number})")
            i = end

        elif in_class:
            if c == "]":
                in_class = False
            result.append(c)
            i += 1

        elif c == "[":
            # A `]` straight after the opening bracket (or `[^`) is literal.
            end = i + 1
            if pattern.startswith("^", end):
                end += 1
            if pattern.startswith("]", end):
                end += 1
            result.append(pattern[i:end])
            in_class = True
            i = end

        elif pattern.startswith("(?(", i):
            end = i + 3
            while digit_at(end):
                end += 1
            if end > i + 3 and pattern.startswith(")", end):
                result.append(f"(?({int(pattern[i + 3 : end]) + offset}")
            else:
                result.append(pattern[i:end])
            i = end

        else:
            result.append(c)
            i += 1

    return "".join(result)


class Lexicon:
    catalog: Catalog
    pattern: re.Pattern[str]
    chunk_size: int
    _kinds: dict[int, str]

    def __init__(self, catalog: Catalog, *, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        branches = []
        kinds = {}
        group = 1
        for name, pattern in catalog.patterns():
            try:
                compiled = re.compile(pattern, re.MULTILINE)
            except re.error as e:
                raise GrammarError(f"Bad pattern for {name}: {pattern!r}: {e}") from e

            if compiled.fullmatch("") is not None:
                raise GrammarError(f"Pattern for {name} matches the empty string: {pattern!r}")

            # The wrapping group closes after any groups inside the pattern, so
            # it is what `lastindex` reports when this branch matches.
            kinds[group] = name
            branches.append(f"({_renumber_groups(pattern, name, group)})")
            group += 1 + compiled.groups

        try:
            # An alternation with no branches would match the empty string
            # everywhere; a catalog with no patterns matches nothing.
            self.pattern = re.compile("|".join(branches) or "(?!)", re.MULTILINE)
        except re.error as e:
            raise GrammarError(f"Patterns do not combine: {e}") from e

        self.catalog = catalog
        self.chunk_size = chunk_size
        self._kinds = kinds

    def _search(self, buffer: str) -> re.Match[str] | None:
        for match in self.pattern.finditer(buffer):
            if match.end() > match.start():
                return match
        return None

    def iter_tokens(self, source: CharacterSource) -> typing.Iterator[Token]:
        """Read `source` to the end, generating tokens as they are recognized."""
        tracker = PositionTracker()
        buffer = ""
        ended = False

        def make(kind: str, text: str) -> Token:
            start = tracker.get()
            tracker.advance(text)
            return Token(kind, start, tracker.get(), text)

        ll = lex_log
        while True:
            match = self._search(buffer)
            while (match is None or match.end() == len(buffer)) and not ended:
                # We can't trust this yet: more input could produce a match, or
                # extend the one we have.
                chunk = source.read(self.chunk_size)
                if not chunk:
                    ended = True
                else:
                    buffer += chunk
                match = self._search(buffer)

            if match is None:
                break

            if match.start() > 0:
                yield make(self.catalog.unmatched, buffer[: match.start()])

            assert match.lastindex is not None
            kind = self._kinds[match.lastindex]
            if ll.isEnabledFor(logging.DEBUG):
                ll.debug("%s %r at %s", kind, match.group(), tracker.get())
            yield make(kind, match.group())

            buffer = buffer[match.end() :]

        if len(buffer) > 0:
            yield make(self.catalog.unmatched, buffer)

        end = tracker.get()
        yield Token(self.catalog.epsilon, end, end, "")

    def tokenize(self, source: CharacterSource, sink: TokenSink):
        """Read `source` to the end, pushing each token into `sink`."""
        for token in self.iter_tokens(source):
            sink.accept(token)

    def iter_text(self, text: str) -> typing.Iterator[Token]:
        return self.iter_tokens(io.StringIO(text))

    def tokenize_text(self, text: str, sink: TokenSink):
        self.tokenize(io.StringIO(text), sink)
