"""
Lexer programów Hornlog.

Reguły (zachłannie, od lewej, białe znaki pomijane):
  mała litera  → IDENTIFIER  (dalej litery/cyfry)
  wielka litera → VARIABLE   (dalej litery/cyfry)
  ( ) , .      → tokeny jednoznakowe
  :-           → RULE_ARROW   (samo ':' to błąd)
  ?-           → QUERY_OPERATOR (samo '?' to błąd)

Całe wejście jest tokenizowane od razu; brak stanu między wywołaniami.
"""
from __future__ import annotations

from contracts import LexError, Token, TokenKind

_SINGLE_CHAR: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    ".": TokenKind.PERIOD,
}

_DASHED: dict[str, TokenKind] = {
    ":": TokenKind.RULE_ARROW,
    "?": TokenKind.QUERY_OPERATOR,
}


def _read_word(text: str, start: int) -> int:
    """Zwraca indeks za ostatnim znakiem alfanumerycznym od `start + 1`."""
    end = start + 1
    while end < len(text) and text[end].isalnum():
        end += 1
    return end


def tokenize(text: str) -> list[Token]:
    """'parent(X).' → [IDENTIFIER parent, LPAREN, VARIABLE X, RPAREN, PERIOD].

    Raises LexError for an unknown character or a ':'/'?' not followed by '-'.
    """
    tokens: list[Token] = []
    i = 0
    n = len(text)

    while i < n:
        c = text[i]

        if c.isspace():
            i += 1
        elif c.islower():
            end = _read_word(text, i)
            tokens.append(Token(kind=TokenKind.IDENTIFIER, text=text[i:end], position=i))
            i = end
        elif c.isupper():
            end = _read_word(text, i)
            tokens.append(Token(kind=TokenKind.VARIABLE, text=text[i:end], position=i))
            i = end
        elif c in _SINGLE_CHAR:
            tokens.append(Token(kind=_SINGLE_CHAR[c], text=c, position=i))
            i += 1
        elif c in _DASHED:
            if i + 1 < n and text[i + 1] == "-":
                tokens.append(Token(kind=_DASHED[c], text=c + "-", position=i))
                i += 2
            else:
                raise LexError(f"Unexpected {c!r} at position {i}", char=c, position=i)
        else:
            raise LexError(f"Unknown character {c!r} at position {i}", char=c, position=i)

    return tokens
