"""An example language: arithmetic expressions with C-style comments.

This is a small but complete example of putting the pieces together. The
definition below declares the tokens and the grammar, and `CommentEliminator`
is a token filter that sits between the lexer and the parser, throwing away
whitespace and comments so that the grammar doesn't need to mention them.

    syntax = EXPRESSION.build()
    parser = syntax.parse("4 * (3 - x)", "EXPR", filter=CommentEliminator)
    print(parser.root().format())
"""

import enum

from .catalog import Terminal
from .definition import SyntaxDefinition
from .lexer import TokenSink
from .tree import Token


NUMBER_PATTERN = r"(?:[0-9]+(?:\.[0-9]+)?|\.[0-9]+)(?:[Ee][+-]?[0-9]+)?"
IDENTIFIER_PATTERN = r"[a-zA-Z_][a-zA-Z_0-9]*"
STRING_PATTERN = r'"(?:[\x20\x21\x23-\x5b\x5d-\x7e]|\\["\'nftba\\]|\\u[0-9a-fA-F]{4})*"'


EXPRESSION = SyntaxDefinition(
    terminals=(
        Terminal("EPSILON", epsilon=True),
        Terminal("WHITESPACE", r"[ \t\x0b\f]+"),
        Terminal("NEWLINE", r"\r\n|\r|\n"),
        Terminal("DOC_COMMENT_OPEN", r"/\*\*"),
        Terminal("COMMENT_OPEN", r"/\*"),
        Terminal("COMMENT_CLOSE", r"\*/"),
        Terminal("COMMENT", r"//"),
        Terminal("PLUSMIN", r"[+-]"),
        Terminal("MULTDIV", r"[*/]"),
        Terminal("OPEN", r"\("),
        Terminal("CLOSE", r"\)"),
        Terminal("NUMBER", NUMBER_PATTERN),
        Terminal("IDENTIFIER", IDENTIFIER_PATTERN),
        Terminal("STRING_LITERAL", STRING_PATTERN),
        Terminal("UNMATCHED", unmatched=True),
        # Never produced by the lexer; the comment filter makes these.
        Terminal("DOC_COMMENT"),
    ),
    productions={
        "EXPR": (("MULT_EXPR", "EXPR_TAIL"),),
        "EXPR_TAIL": (
            ("PLUSMIN", "MULT_EXPR", "EXPR_TAIL"),
            (),
        ),
        "MULT_EXPR": (("UNARY_EXPR", "MULT_EXPR_TAIL"),),
        "MULT_EXPR_TAIL": (
            ("MULTDIV", "UNARY_EXPR", "MULT_EXPR_TAIL"),
            (),
        ),
        "UNARY_EXPR": (
            ("PLUSMIN", "UNARY_EXPR"),
            ("PRIMARY_EXPR",),
        ),
        "PRIMARY_EXPR": (
            ("NUMBER",),
            ("IDENTIFIER",),
            ("OPEN", "EXPR", "CLOSE"),
        ),
    },
)


class CommentMode(enum.Enum):
    NORMAL = 0
    SHORT_COMMENT = 1
    LONG_COMMENT = 2
    DOC_COMMENT = 3


class CommentEliminator:
    """A token filter that drops whitespace and comments.

    - `// ...` runs to the end of the line and is dropped.
    - `/* ... */` is dropped.
    - `/** ... */` becomes a single DOC_COMMENT token holding the text between
      the delimiters.

    It also catches a lexical error the patterns alone can't: a NUMBER
    immediately followed by an IDENTIFIER or another NUMBER (like `435spall`
    or `1.2.3`) is passed on as one UNMATCHED token covering the lot.

    The end-of-stream token is always passed on, even inside an unterminated
    comment, so the parser downstream always sees the end of the input.
    """

    sink: TokenSink
    mode: CommentMode
    _prior: Token | None
    _doc: list[str]
    _doc_start: Token | None

    def __init__(self, sink: TokenSink):
        self.sink = sink
        self.mode = CommentMode.NORMAL
        self._prior = None
        self._doc = []
        self._doc_start = None

    def accept(self, token: Token):
        if self._prior is not None:
            prior = self._prior
            match token.kind:
                case "IDENTIFIER":
                    # The bad run ends here.
                    self._prior = None
                    self.sink.accept(Token("UNMATCHED", prior.start, token.end, prior.text + token.text))
                    return

                case "NUMBER":
                    # The bad run keeps going.
                    self._prior = Token("UNMATCHED", prior.start, token.end, prior.text + token.text)
                    return

                case _:
                    self._prior = None
                    self.sink.accept(prior)

        if token.kind == "EPSILON":
            self.mode = CommentMode.NORMAL
            self.sink.accept(token)
            return

        match self.mode:
            case CommentMode.NORMAL:
                match token.kind:
                    case "NUMBER":
                        # Hold on to it until we know what follows.
                        self._prior = token
                    case "DOC_COMMENT_OPEN":
                        self._doc = []
                        self._doc_start = token
                        self.mode = CommentMode.DOC_COMMENT
                    case "COMMENT_OPEN":
                        self.mode = CommentMode.LONG_COMMENT
                    case "COMMENT":
                        self.mode = CommentMode.SHORT_COMMENT
                    case "WHITESPACE" | "NEWLINE":
                        pass
                    case _:
                        self.sink.accept(token)

            case CommentMode.DOC_COMMENT:
                if token.kind == "COMMENT_CLOSE":
                    assert self._doc_start is not None
                    self.mode = CommentMode.NORMAL
                    self.sink.accept(
                        Token("DOC_COMMENT", self._doc_start.end, token.start, "".join(self._doc))
                    )
                else:
                    self._doc.append(token.text)

            case CommentMode.LONG_COMMENT:
                if token.kind == "COMMENT_CLOSE":
                    self.mode = CommentMode.NORMAL

            case CommentMode.SHORT_COMMENT:
                if token.kind == "NEWLINE":
                    self.mode = CommentMode.NORMAL
