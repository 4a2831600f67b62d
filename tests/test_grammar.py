import pytest

from llsyntax import (
    AmbiguityError,
    Catalog,
    Grammar,
    GrammarError,
    Lead,
    Terminal,
    UnknownSymbolError,
)


TERMINALS = [
    Terminal("EOF", epsilon=True),
    Terminal("JUNK", unmatched=True),
    Terminal("a", r"a"),
    Terminal("b", r"b"),
    Terminal("c", r"c"),
]


def grammar(productions: dict[str, list[list[str]]], terminals=TERMINALS) -> Grammar:
    return Grammar(Catalog(terminals, productions.keys()), productions)


def test_two_epsilon_terminals():
    with pytest.raises(GrammarError):
        Catalog(TERMINALS + [Terminal("END", epsilon=True)])


def test_no_epsilon_terminal():
    with pytest.raises(GrammarError):
        Catalog([Terminal("JUNK", unmatched=True), Terminal("a", r"a")])


def test_no_unmatched_terminal():
    with pytest.raises(GrammarError):
        Catalog([Terminal("EOF", epsilon=True), Terminal("a", r"a")])


def test_epsilon_and_unmatched_must_differ():
    with pytest.raises(GrammarError):
        Catalog([Terminal("BOTH", epsilon=True, unmatched=True)])


def test_reserved_terminals_have_no_patterns():
    with pytest.raises(GrammarError):
        Catalog([Terminal("EOF", r"$", epsilon=True), Terminal("JUNK", unmatched=True)])


def test_duplicate_names():
    with pytest.raises(GrammarError):
        Catalog(TERMINALS + [Terminal("a", r"A")])

    with pytest.raises(GrammarError):
        Catalog(TERMINALS, ["a"])

    with pytest.raises(GrammarError):
        Catalog(TERMINALS, ["S", "S"])


def test_catalog_lookups():
    catalog = Catalog(TERMINALS, ["S"])
    assert catalog.epsilon == "EOF"
    assert catalog.unmatched == "JUNK"
    assert catalog.is_terminal("a")
    assert not catalog.is_terminal("S")
    assert catalog.is_nonterminal("S")
    assert "S" in catalog
    assert "EOF" in catalog
    assert "nope" not in catalog
    assert catalog.patterns() == [("a", "a"), ("b", "b"), ("c", "c")]


def test_prediction_index():
    g = grammar(
        {
            "S": [["a", "T"], ["U", "c"]],
            "T": [["b", "T"], []],
            "U": [["c"]],
        }
    )
    assert g.terminal_leads["S"] == {"a": ("a", "T")}
    assert g.nonterminal_leads["S"] == ("U", "c")
    assert g.terminal_leads["T"] == {"b": ("b", "T")}
    assert "T" not in g.nonterminal_leads
    assert g.empty == frozenset({"T"})


def test_index_is_read_only():
    g = grammar({"S": [["a"]]})
    with pytest.raises(TypeError):
        g.terminal_leads["S"] = {}  # type: ignore
    with pytest.raises(TypeError):
        g.terminal_leads["S"]["b"] = ("b",)  # type: ignore


def test_epsilon_body_is_empty():
    g = grammar({"S": [["a"], ["EOF"]]})
    assert "S" in g.empty


def test_two_nonterminal_leads():
    with pytest.raises(AmbiguityError) as e:
        grammar({"S": [["A", "a"], ["B", "b"]], "A": [["a"]], "B": [["b"]]})

    [ambiguity] = e.value.ambiguities
    assert ambiguity.nonterminal == "S"
    assert ambiguity.lead == Lead.NONTERMINAL
    assert ambiguity.alternatives == (("A", "a"), ("B", "b"))


def test_two_terminal_leads():
    with pytest.raises(AmbiguityError) as e:
        grammar({"S": [["a", "b"], ["a", "c"]]})

    [ambiguity] = e.value.ambiguities
    assert ambiguity.lead == Lead.TERMINAL
    assert ambiguity.terminal == "a"
    assert "both begin with the terminal a" in str(ambiguity)


def test_two_empty_alternatives():
    with pytest.raises(AmbiguityError) as e:
        grammar({"S": [["a"], [], ["EOF"]]})

    [ambiguity] = e.value.ambiguities
    assert ambiguity.lead == Lead.EMPTY


def test_all_ambiguities_are_reported():
    with pytest.raises(AmbiguityError) as e:
        grammar({"S": [["a", "b"], ["a", "c"]], "T": [[], []]})

    assert len(e.value.ambiguities) == 2
    assert str(e.value).startswith("2 ambiguities:")


def test_ambiguity_is_a_grammar_error():
    with pytest.raises(GrammarError):
        grammar({"S": [["a", "b"], ["a", "c"]]})

    with pytest.raises(ValueError):
        grammar({"S": [["a", "b"], ["a", "c"]]})


def test_unknown_symbol_in_body():
    with pytest.raises(UnknownSymbolError):
        grammar({"S": [["a", "nope"]]})


def test_productions_for_unknown_nonterminal():
    with pytest.raises(UnknownSymbolError):
        Grammar(Catalog(TERMINALS, ["S"]), {"S": [["a"]], "T": [["b"]]})


def test_productions_for_a_terminal():
    with pytest.raises(GrammarError):
        Grammar(Catalog(TERMINALS, ["S"]), {"S": [["a"]], "a": [["b"]]})


def test_nonterminal_without_productions():
    with pytest.raises(GrammarError):
        Grammar(Catalog(TERMINALS, ["S", "T"]), {"S": [["a"]]})

    with pytest.raises(GrammarError):
        grammar({"S": []})


def test_left_recursion():
    with pytest.raises(GrammarError, match="Left recursion"):
        grammar({"E": [["E", "a"], ["b"]]})

    with pytest.raises(GrammarError, match="A -> B -> A"):
        grammar({"A": [["B", "a"]], "B": [["A", "b"], ["c"]]})


def test_shared_prefixes_are_not_left_recursion():
    g = grammar({"A": [["B", "a"]], "B": [["C", "b"]], "C": [["c"]], "D": [["B"], ["a"]]})
    assert g.nonterminal_leads["D"] == ("B",)


def test_unknown_root():
    g = grammar({"S": [["a"]]})
    with pytest.raises(UnknownSymbolError):
        g.parser("nope")


def test_format():
    g = grammar({"S": [["a", "T"], ["U"]], "T": [["b"], []], "U": [["c"]]})
    assert g.format().splitlines() == [
        "S:",
        "  a            -> a T",
        "  (otherwise)  -> U",
        "T:",
        "  b            -> b",
        "  (empty)      -> <empty>",
        "U:",
        "  c            -> c",
    ]
