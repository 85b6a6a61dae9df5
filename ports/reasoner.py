"""
Port: Reasoner
Odpowiedzialność: wykonanie zapytania na programie, wszystkie odpowiedzi.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import ProgramCheck, QueryResult, SearchBudget


@runtime_checkable
class Reasoner(Protocol):
    def evaluate(
        self,
        program: str,
        query: str,
        budget: Optional[SearchBudget] = None,
    ) -> QueryResult:
        """
        Compiles the program text, resolves the query text against it and
        returns every solution in derivation order, each a mapping
        variable name -> fully dereferenced term.
        Never raises for bad input: lex/parse errors come back as
        QueryResult.diagnostic with status="error".
        If the budget runs out, status="exhausted" and the solutions found
        so far are returned.
        """
        ...

    def check(self, program: str) -> ProgramCheck:
        """
        Parses the program text only. Returns statement counts and the
        rendered statements, or a diagnostic.
        """
        ...
