"""Lexer for markup tags embedded in caption text."""

import ply.lex as lex


class CaptionLexer:
    """Lexer splitting a caption into tag and text tokens.

    Two tag forms are recognised: ``[Group:SubType attr=value ...]`` and
    ``<subtype attr=value .../>``. Anything else, including an unterminated
    tag opener, is text.
    """

    tokens = [
        "BRACKET_TAG",
        "ANGLE_TAG",
        "TEXT",
    ]

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    # Function rules are tried in definition order: tags before text.

    def t_BRACKET_TAG(self, t: lex.LexToken) -> lex.LexToken:
        r"\[[A-Za-z_]\w*:[A-Za-z_]\w*[^\[\]]*\]"
        return t

    def t_ANGLE_TAG(self, t: lex.LexToken) -> lex.LexToken:
        r"<[A-Za-z_]\w*(?:\s[^<>]*)?/>"
        return t

    def t_TEXT(self, t: lex.LexToken) -> lex.LexToken:
        r"[^\[<]+|[\[<]"
        t.lexer.lineno += t.value.count("\n")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.lineno = 1
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
