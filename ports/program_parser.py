"""
Port: ProgramParser
Odpowiedzialność: tekst programu/zapytania → tokeny → instrukcje.
"""
from typing import Protocol, runtime_checkable

from contracts import Atom, Statement, Token


@runtime_checkable
class ProgramParser(Protocol):
    def tokenize(self, text: str) -> list[Token]:
        """
        Turns raw text into the full token sequence (eager, no shared state).
        Raises LexError on an unknown character or ':' / '?' not followed by '-'.
        """
        ...

    def parse_program(self, text: str) -> list[Statement]:
        """
        Parses every statement (fact, rule or query) of a program text,
        in declaration order. Stops at the first error.
        Raises LexError / ParseError.
        """
        ...

    def parse_query(self, text: str) -> list[Atom]:
        """
        Parses text that must be exactly one query statement '?- g1, g2.'.
        Returns the goal list. A fact or rule here is a ParseError.
        """
        ...
