"""The syntax tree: tokens at the leaves, non-terminals everywhere else.

Both node types are frozen, so a finished tree can be handed around and shared
freely. Positions are half-open: `start` is where the first character was and
`end` is just past the last one, so a zero-width node has `start == end`.
"""

import dataclasses
import typing

from .position import TextPosition


@dataclasses.dataclass(frozen=True)
class Token:
    kind: str
    start: TextPosition
    end: TextPosition
    text: str

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    @property
    def is_empty(self) -> bool:
        # A token is never an empty production, even one with no text.
        return False

    def child(self, index: int) -> "Node | None":
        del index
        return None

    def format_lines(self) -> list[str]:
        return _format_lines(self)

    def format(self) -> str:
        return "\n".join(self.format_lines())

    def __str__(self) -> str:
        return f"{self.kind}[{self.start}-{self.end}:{self.text}]"


@dataclasses.dataclass(frozen=True)
class NonTerminal:
    kind: str
    start: TextPosition
    end: TextPosition
    children: tuple["Node", ...]

    @classmethod
    def of(cls, kind: str, children: typing.Sequence["Node"], default: TextPosition) -> "NonTerminal":
        """Make a non-terminal spanning its children.

        If there are no children (an empty production) the node sits, zero
        width, at `default`.
        """
        if len(children) > 0:
            return cls(kind, children[0].start, children[-1].end, tuple(children))
        return cls(kind, default, default, ())

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)

    @property
    def is_empty(self) -> bool:
        return len(self.children) == 0

    def child(self, index: int) -> "Node | None":
        """Like indexing, but out-of-range indices give None instead of raising."""
        if index >= len(self.children) or index < -len(self.children):
            return None
        return self.children[index]

    @typing.overload
    def __getitem__(self, index: int) -> "Node": ...

    @typing.overload
    def __getitem__(self, index: slice) -> tuple["Node", ...]: ...

    def __getitem__(self, index):
        return self.children[index]

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> typing.Iterator["Node"]:
        return iter(self.children)

    def format_lines(self) -> list[str]:
        return _format_lines(self)

    def format(self) -> str:
        return "\n".join(self.format_lines())

    def __str__(self) -> str:
        return f"{self.kind}[{', '.join(str(c) for c in self.children)}]"


Node = Token | NonTerminal


def _format_lines(root: Node) -> list[str]:
    lines = []

    def format_node(node: Node, indent: int):
        match node:
            case NonTerminal(kind=kind, start=start, end=end, children=children):
                empty = " (empty)" if len(children) == 0 else ""
                lines.append((" " * indent) + f"{kind} [{start}, {end}){empty}")
                for child in children:
                    format_node(child, indent + 2)

            case Token(kind=kind, start=start, end=end, text=text):
                lines.append((" " * indent) + f"{kind}:{text!r} [{start}, {end})")

            case _:
                typing.assert_never(node)

    format_node(root, 0)
    return lines
