"""Line and column bookkeeping for text as it streams past."""

import dataclasses
import typing


class TextPosition(typing.NamedTuple):
    """A position in the input, as a 1-based line and column.

    Positions order the way you would expect: by line first, then column.
    """

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}/{self.column}"


@dataclasses.dataclass
class PositionTracker:
    """Tracks the position of the next character to be consumed.

    `\\n` and `\\r` both start a new line, but a `\\r\\n` pair counts as a
    single line break. The pair may be split across two calls to `advance`,
    which is why the tracker remembers whether the last character it saw was
    a carriage return.
    """

    line: int = 1
    column: int = 1
    after_cr: bool = False

    def get(self) -> TextPosition:
        return TextPosition(self.line, self.column)

    def advance(self, text: str):
        line = self.line
        column = self.column
        after_cr = self.after_cr
        for c in text:
            if c == "\n":
                if not after_cr:
                    line += 1
                    column = 1
                after_cr = False
            elif c == "\r":
                line += 1
                column = 1
                after_cr = True
            else:
                column += 1
                after_cr = False

        self.line = line
        self.column = column
        self.after_cr = after_cr
