import io
import json

import pytest

from llsyntax import (
    AmbiguityError,
    DefinitionError,
    GrammarError,
    NonTerminal,
    SyntaxDefinition,
    Terminal,
)
from llsyntax.demo import EXPRESSION


SUM = {
    "terminals": [
        {"name": "EPSILON", "epsilon": True},
        {"name": "UNMATCHED", "unmatched": True},
        {"name": "PLUS", "pattern": r"\+"},
        {"name": "NUMBER", "pattern": r"[0-9]+"},
        {"name": "NEWLINE", "patterns": [r"\r\n", r"\r", r"\n"]},
    ],
    "productions": {
        "SUM": [["NUMBER", "SUM_TAIL"]],
        "SUM_TAIL": [["PLUS", "NUMBER", "SUM_TAIL"], []],
    },
}


def test_from_dict():
    definition = SyntaxDefinition.from_dict(SUM)
    assert definition.terminals[0] == Terminal("EPSILON", epsilon=True)
    assert definition.terminals[2] == Terminal("PLUS", r"\+")
    assert definition.terminals[4] == Terminal("NEWLINE", r"\r\n", r"\r", r"\n")
    assert definition.productions["SUM_TAIL"] == (("PLUS", "NUMBER", "SUM_TAIL"), ())


def test_pattern_and_patterns_combine():
    definition = SyntaxDefinition.from_dict(
        {
            "terminals": [
                {"name": "EPSILON", "epsilon": True},
                {"name": "UNMATCHED", "unmatched": True},
                {"name": "BOOL", "pattern": "true", "patterns": ["false"]},
            ],
        }
    )
    assert definition.terminals[2].patterns == ("true", "false")
    assert definition.productions == {}


def test_build_and_parse():
    syntax = SyntaxDefinition.from_dict(SUM).build()
    parser = syntax.parse("1+2+3", "SUM")
    assert parser.fault() is None
    root = parser.root()
    assert isinstance(root, NonTerminal)
    assert root.kind == "SUM"
    assert root.text == "1+2+3"


def test_parse_from_a_stream():
    syntax = SyntaxDefinition.from_dict(SUM).build(chunk_size=1)
    parser = syntax.parse(io.StringIO("12+345"), "SUM")
    root = parser.root()
    assert root is not None
    assert root.text == "12+345"


def test_parse_reports_faults():
    syntax = SyntaxDefinition.from_dict(SUM).build()
    parser = syntax.parse("1+", "SUM")
    fault = parser.fault()
    assert fault is not None
    assert fault.kind == "EPSILON"
    assert parser.acceptable() == {"NUMBER"}


def test_load(tmp_path):
    path = tmp_path / "sum.json"
    path.write_text(json.dumps(SUM), encoding="utf-8")
    assert SyntaxDefinition.load(path) == SyntaxDefinition.from_dict(SUM)


def test_load_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{ not json", encoding="utf-8")
    with pytest.raises(DefinitionError):
        SyntaxDefinition.load(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        SyntaxDefinition.load(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "data",
    [
        [],
        {},
        {"terminals": {}},
        {"terminals": ["EPSILON"]},
        {"terminals": [{"pattern": "a"}]},
        {"terminals": [{"name": ""}]},
        {"terminals": [{"name": "A", "patterns": "a"}]},
        {"terminals": [{"name": "A", "pattern": 7}]},
        {"terminals": [{"name": "A", "colour": "red"}]},
        {"terminals": [{"name": "A", "epsilon": "false"}]},
        {"terminals": [{"name": "A", "unmatched": 1}]},
        {"terminals": [{"name": "A", "epsilon": None}]},
        {"terminals": [], "productions": []},
        {"terminals": [], "productions": {"S": "A B"}},
        {"terminals": [], "productions": {"S": ["A B"]}},
        {"terminals": [], "productions": {"S": [["A", 1]]}},
    ],
)
def test_malformed_definitions(data):
    with pytest.raises(DefinitionError):
        SyntaxDefinition.from_dict(data)


def test_definition_errors_are_grammar_errors():
    with pytest.raises(GrammarError):
        SyntaxDefinition.from_dict({})


def test_build_checks_the_grammar():
    data = dict(SUM, productions={"SUM": [["NUMBER"], ["NUMBER", "PLUS"]]})
    with pytest.raises(AmbiguityError):
        SyntaxDefinition.from_dict(data).build()

    data = dict(SUM, productions={"SUM": [["NUMBER", "MINUS"]]})
    with pytest.raises(GrammarError):
        SyntaxDefinition.from_dict(data).build()


def test_build_checks_the_patterns():
    data = dict(SUM, terminals=SUM["terminals"] + [{"name": "BAD", "pattern": "("}])
    with pytest.raises(GrammarError):
        SyntaxDefinition.from_dict(data).build()


def test_to_dict_survives_json():
    text = json.dumps(EXPRESSION.to_dict())
    assert SyntaxDefinition.from_dict(json.loads(text)) == EXPRESSION
