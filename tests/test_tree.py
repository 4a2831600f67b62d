import dataclasses

import pytest

from llsyntax import NonTerminal, TextPosition, Token


def token(kind: str, text: str, column: int) -> Token:
    return Token(kind, TextPosition(1, column), TextPosition(1, column + len(text)), text)


X = token("A", "x", 1)
YZ = token("B", "yz", 2)
INNER = NonTerminal.of("N", [X, YZ], TextPosition(1, 1))
EMPTY = NonTerminal.of("E", [], TextPosition(1, 4))
OUTER = NonTerminal.of("O", [INNER, EMPTY], TextPosition(1, 1))


def test_nonterminal_spans_its_children():
    assert INNER.start == TextPosition(1, 1)
    assert INNER.end == TextPosition(1, 4)
    assert OUTER.start == TextPosition(1, 1)
    assert OUTER.end == TextPosition(1, 4)


def test_text_is_the_concatenation_of_the_tokens():
    assert INNER.text == "xyz"
    assert OUTER.text == "xyz"


def test_empty_nonterminal():
    assert EMPTY.is_empty
    assert EMPTY.start == EMPTY.end == TextPosition(1, 4)
    assert EMPTY.text == ""
    assert len(EMPTY) == 0
    assert EMPTY.child(0) is None


def test_tokens_are_leaves():
    assert X.children == ()
    assert not X.is_empty
    assert X.child(0) is None

    nothing = Token("EOF", TextPosition(2, 1), TextPosition(2, 1), "")
    assert not nothing.is_empty


def test_indexing():
    assert OUTER[0] is INNER
    assert OUTER[-1] is EMPTY
    assert OUTER[0:1] == (INNER,)
    assert list(OUTER) == [INNER, EMPTY]
    assert len(OUTER) == 2

    with pytest.raises(IndexError):
        OUTER[2]


def test_child_is_none_out_of_range():
    assert OUTER.child(0) is INNER
    assert OUTER.child(-2) is INNER
    assert OUTER.child(2) is None
    assert OUTER.child(-3) is None


def test_nodes_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        X.text = "no"  # type: ignore

    with pytest.raises(dataclasses.FrozenInstanceError):
        OUTER.children = ()  # type: ignore


def test_str():
    assert str(X) == "A[1/1-1/2:x]"
    assert str(INNER) == "N[A[1/1-1/2:x], B[1/2-1/4:yz]]"
    assert str(EMPTY) == "E[]"


def test_format():
    assert OUTER.format_lines() == [
        "O [1/1, 1/4)",
        "  N [1/1, 1/4)",
        "    A:'x' [1/1, 1/2)",
        "    B:'yz' [1/2, 1/4)",
        "  E [1/4, 1/4) (empty)",
    ]
    assert X.format() == "A:'x' [1/1, 1/2)"
