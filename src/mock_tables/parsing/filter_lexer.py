"""Lexer for the ``or`` filter mini-language.

A term has the shape ``column.operator.value``. Everything after the second
dot is the value, so values may themselves contain dots.
"""

import ply.lex as lex


class FilterLexer:
    """Lexer for tokenizing a single ``column.operator.value`` term."""

    tokens = [
        "IDENTIFIER",
        "DOT",
        "VALUE",
    ]

    # After the operator's trailing dot the rest of the term is one VALUE
    states = (("value", "exclusive"),)

    t_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        return t

    def t_DOT(self, t: lex.LexToken) -> lex.LexToken:
        r"\."
        t.lexer.dots += 1
        if t.lexer.dots == 2:
            t.lexer.begin("value")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    # --- Exclusive value state tokens ---

    t_value_ignore = ""

    def t_value_VALUE(self, t: lex.LexToken) -> lex.LexToken:
        r".+"
        t.lexer.begin("INITIAL")
        return t

    def t_value_error(self, t: lex.LexToken) -> None:
        t.lexer.begin("INITIAL")
        raise SyntaxError(f"Unexpected character '{t.value[0]}' in value at position {t.lexpos}")

    # --- Lexer methods ---

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)
        self.lexer.dots = 0

    def input(self, data: str) -> None:
        """Set the input string to tokenize, resetting term state."""
        self.lexer.begin("INITIAL")
        self.lexer.dots = 0
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
