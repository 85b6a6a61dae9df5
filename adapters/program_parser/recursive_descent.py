"""
Adapter: RecursiveDescentParser
Implementuje port ProgramParser.

Gramatyka (LL(1), bez nawrotów):
  program    := statement*
  statement  := '?-' atom (',' atom)* '.'          — zapytanie
              | atom '.'                            — fakt
              | atom ':-' atom (',' atom)* '.'      — reguła
  atom       := IDENTIFIER ( '(' term (',' term)* ')' )?
  term       := atom | VARIABLE

Atom bez argumentów na pozycji termu staje się Constant, z argumentami Compound.
Pierwszy błąd przerywa parsowanie (bez synchronizacji).
Pozycja błędu to offset znaku (jak w LexError), nie numer tokenu.
"""
from __future__ import annotations

from typing import Optional, Sequence

from adapters.program_parser.lexer import tokenize
from contracts import (
    Atom,
    Compound,
    Constant,
    Database,
    Fact,
    ParseError,
    Query,
    Rule,
    Statement,
    Term,
    Token,
    TokenKind,
    Variable,
)

_END = "end of input"

_DESCRIBE: dict[TokenKind, str] = {
    TokenKind.LPAREN: "'('",
    TokenKind.RPAREN: "')'",
    TokenKind.COMMA: "','",
    TokenKind.PERIOD: "'.'",
    TokenKind.RULE_ARROW: "':-'",
    TokenKind.QUERY_OPERATOR: "'?-'",
}


def _describe(tok: Optional[Token]) -> str:
    if tok is None:
        return _END
    if tok.kind == TokenKind.IDENTIFIER:
        return f"identifier {tok.text!r}"
    if tok.kind == TokenKind.VARIABLE:
        return f"variable {tok.text!r}"
    return _DESCRIBE[tok.kind]


class Parser:
    """Kursor po sekwencji tokenów; przesuwa się tylko do przodu."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = list(tokens)
        self._pos = 0

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    @property
    def offset(self) -> int:
        """Offset znaku bieżącego tokenu; na końcu wejścia — tuż za ostatnim tokenem."""
        tok = self._peek()
        if tok is not None:
            return tok.position
        if not self._tokens:
            return 0
        last = self._tokens[-1]
        return last.position + len(last.text)

    def _peek(self) -> Optional[Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _peek_kind(self) -> Optional[TokenKind]:
        tok = self._peek()
        return tok.kind if tok is not None else None

    def _consume(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _error(self, expected: str) -> ParseError:
        return ParseError(expected, _describe(self._peek()), position=self.offset)

    def _expect(self, kind: TokenKind) -> Token:
        if self._peek_kind() != kind:
            raise self._error(_DESCRIBE.get(kind, kind.value))
        return self._consume()

    # -- gramatyka ----------------------------------------------------------

    def parse_statement(self) -> Statement:
        if self._peek_kind() == TokenKind.QUERY_OPERATOR:
            self._consume()
            body = self._conjunction()
            self._expect(TokenKind.PERIOD)
            return Query(body=body)

        head = self.parse_atom()
        kind = self._peek_kind()
        if kind == TokenKind.PERIOD:
            self._consume()
            return Fact(atom=head)
        if kind == TokenKind.RULE_ARROW:
            self._consume()
            body = self._conjunction()
            self._expect(TokenKind.PERIOD)
            return Rule(head=head, body=body)
        raise self._error("'.' or ':-' after atom")

    def parse_program(self) -> list[Statement]:
        statements: list[Statement] = []
        while not self.at_end:
            statements.append(self.parse_statement())
        return statements

    def expect_end(self) -> None:
        if not self.at_end:
            raise self._error(_END)

    def parse_atom(self) -> Atom:
        if self._peek_kind() != TokenKind.IDENTIFIER:
            raise self._error("identifier")
        name = self._consume().text
        if self._peek_kind() != TokenKind.LPAREN:
            return Atom(name=name)
        self._consume()
        return Atom(name=name, args=self._arguments())

    def parse_term(self) -> Term:
        kind = self._peek_kind()
        if kind == TokenKind.IDENTIFIER:
            atom = self.parse_atom()
            if not atom.args:
                return Constant(name=atom.name)
            return Compound(name=atom.name, args=atom.args)
        if kind == TokenKind.VARIABLE:
            return Variable(name=self._consume().text)
        raise self._error("term (identifier or variable)")

    def _arguments(self) -> tuple[Term, ...]:
        """
        Argumenty po '(' aż do pasującego ')'.

        Zagnieżdżone termy złożone idą na jawny stos ramek (funktor, argumenty),
        więc głębokość termu nie jest ograniczona stosem Pythona.
        Ramka na dnie stosu zbiera argumenty samego atomu.
        """
        frames: list[tuple[str, list[Term]]] = [("", [])]
        while True:
            kind = self._peek_kind()
            if kind == TokenKind.VARIABLE:
                frames[-1][1].append(Variable(name=self._consume().text))
            elif kind == TokenKind.IDENTIFIER:
                name = self._consume().text
                if self._peek_kind() == TokenKind.LPAREN:
                    self._consume()
                    frames.append((name, []))
                    continue
                frames[-1][1].append(Constant(name=name))
            else:
                raise self._error("term (identifier or variable)")

            # po termie: ',' otwiera następny argument, ')' zamyka ramkę
            while self._peek_kind() != TokenKind.COMMA:
                self._expect(TokenKind.RPAREN)
                name, args = frames.pop()
                if not frames:
                    return tuple(args)
                frames[-1][1].append(Compound(name=name, args=tuple(args)))
            self._consume()

    def _conjunction(self) -> tuple[Atom, ...]:
        atoms = [self.parse_atom()]
        while self._peek_kind() == TokenKind.COMMA:
            self._consume()
            atoms.append(self.parse_atom())
        return tuple(atoms)


# ──────────────────────────────────────────────────────────────────────────────
# Funkcje na poziomie tokenów
# ──────────────────────────────────────────────────────────────────────────────

def parse_statement(tokens: Sequence[Token]) -> Statement:
    return Parser(tokens).parse_statement()


def parse_program(tokens: Sequence[Token]) -> list[Statement]:
    return Parser(tokens).parse_program()


def parse_query(tokens: Sequence[Token]) -> list[Atom]:
    """
    Parsuje wejście, które MUSI być pojedynczym zapytaniem '?- ... .'.
    Fakt lub reguła w tym miejscu to ParseError; tak samo tokeny po kropce.
    """
    parser = Parser(tokens)
    start = parser.offset
    stmt = parser.parse_statement()
    if not isinstance(stmt, Query):
        raise ParseError("query ('?-')", stmt.statement_type, position=start)
    parser.expect_end()
    return list(stmt.body)


def build_database(statements: Sequence[Statement]) -> Database:
    """Dzieli instrukcje na fakty i reguły; zapytania pomija."""
    db = Database()
    for stmt in statements:
        if isinstance(stmt, Fact):
            db.facts.append(stmt.atom)
        elif isinstance(stmt, Rule):
            db.rules.append(stmt)
    return db


# ──────────────────────────────────────────────────────────────────────────────
# Adapter
# ──────────────────────────────────────────────────────────────────────────────

class RecursiveDescentParser:
    """Parser tekstu programu i zapytań; błędy jako LexError / ParseError."""

    # -- ProgramParser protocol ---------------------------------------------

    def tokenize(self, text: str) -> list[Token]:
        return tokenize(text)

    def parse_program(self, text: str) -> list[Statement]:
        return parse_program(tokenize(text))

    def parse_query(self, text: str) -> list[Atom]:
        return parse_query(tokenize(text))
