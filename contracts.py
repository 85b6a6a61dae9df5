"""
contracts.py — Jedyne źródło prawdy dla wszystkich typów danych w Hornlog.
Wszystkie moduły importują WYŁĄCZNIE stąd. Nie modyfikować bez versioning.
"""
from __future__ import annotations

import uuid
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CONTRACTS_VERSION = "1.0.0"


# ─────────────────────────── Helpers ─────────────────────────────────────

def _new_id() -> str:
    return str(uuid.uuid4())


# ─────────────────────────── Błędy składni ───────────────────────────────

class HornSyntaxError(ValueError):
    """Wspólna baza dla błędów leksera i parsera."""

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position


class LexError(HornSyntaxError):
    def __init__(self, message: str, char: str, position: int) -> None:
        super().__init__(message, position)
        self.char = char


class ParseError(HornSyntaxError):
    """Parser oczekiwał `expected`, a dostał `found` (tekst tokenu lub koniec wejścia)."""

    def __init__(self, expected: str, found: str, position: Optional[int] = None) -> None:
        super().__init__(f"Expected {expected}, got {found}", position)
        self.expected = expected
        self.found = found


# ─────────────────────────── Lexer ───────────────────────────────────────

class TokenKind(str, Enum):
    IDENTIFIER = "identifier"          # parent, john
    VARIABLE = "variable"              # X, Who
    LPAREN = "lparen"
    RPAREN = "rparen"
    COMMA = "comma"
    PERIOD = "period"
    RULE_ARROW = "rule_arrow"          # :-
    QUERY_OPERATOR = "query_operator"  # ?-


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    position: int = Field(default=0, exclude=True)  # offset znaku; tylko do diagnostyki

    def __eq__(self, other: object) -> bool:
        # Pozycja nie wchodzi do równości — to metadana dla komunikatów błędów.
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self.text == other.text

    def __hash__(self) -> int:
        return hash((self.kind, self.text))


# ─────────────────────────── Termy ───────────────────────────────────────

class Constant(BaseModel):
    model_config = ConfigDict(frozen=True)

    term_type: Literal["constant"] = "constant"
    name: str


class Variable(BaseModel):
    model_config = ConfigDict(frozen=True)

    term_type: Literal["variable"] = "variable"
    name: str


class Compound(BaseModel):
    model_config = ConfigDict(frozen=True)

    term_type: Literal["compound"] = "compound"
    name: str                   # funktor
    args: tuple["Term", ...]    # zawsze >= 1 argument; arność 0 to Constant


Term = Union[Constant, Variable, Compound]
Compound.model_rebuild()


class Atom(BaseModel):
    """Predykat z argumentami: parent(john, X). Atom bez argumentów: done."""
    model_config = ConfigDict(frozen=True)

    name: str
    args: tuple[Term, ...] = ()


# Bieżące wiązania jednej gałęzi wyprowadzenia: nazwa zmiennej -> term
Substitution = dict[str, Term]


# ─────────────────────────── Instrukcje programu ─────────────────────────

class Fact(BaseModel):
    model_config = ConfigDict(frozen=True)

    statement_type: Literal["fact"] = "fact"
    atom: Atom


class Rule(BaseModel):
    model_config = ConfigDict(frozen=True)

    statement_type: Literal["rule"] = "rule"
    head: Atom
    body: tuple[Atom, ...]      # koniunkcja w kolejności deklaracji


class Query(BaseModel):
    model_config = ConfigDict(frozen=True)

    statement_type: Literal["query"] = "query"
    body: tuple[Atom, ...]


Statement = Union[Fact, Rule, Query]


class Database(BaseModel):
    """Fakty i reguły w kolejności z pliku; zapytania są pomijane."""
    facts: list[Atom] = Field(default_factory=list)
    rules: list[Rule] = Field(default_factory=list)


# ─────────────────────────── Drzewo rezolucji ────────────────────────────

class ResolutionNode(BaseModel):
    goal: Optional[Atom] = None          # klauzula użyta do wejścia w węzeł; None w korzeniu
    subs: Substitution = Field(default_factory=dict)
    pending: list[Atom] = Field(default_factory=list)  # cele pozostałe przy wejściu
    children: list["ResolutionNode"] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return not self.children and not self.pending


ResolutionNode.model_rebuild()


class SearchStatus(str, Enum):
    COMPLETE = "complete"
    EXHAUSTED = "exhausted"   # przekroczony budżet — drzewo jest częściowe
    ERROR = "error"           # tylko w QueryResult: błąd leksera/parsera


class SearchBudget(BaseModel):
    max_depth: Optional[int] = Field(default=None, ge=1)
    max_nodes: Optional[int] = Field(default=None, ge=1)
    timeout_ms: Optional[int] = Field(default=None, ge=1)


class SearchResult(BaseModel):
    tree: ResolutionNode
    status: SearchStatus = SearchStatus.COMPLETE
    reason: Optional[Literal["max_depth", "max_nodes", "timeout"]] = None
    nodes_expanded: int = 0
    depth_reached: int = 0


# ─────────────────────────── Reasoner ────────────────────────────────────

class Diagnostic(BaseModel):
    stage: Literal["program", "query"]
    kind: Literal["lex", "parse"]
    message: str
    position: Optional[int] = None
    expected: Optional[str] = None
    found: Optional[str] = None


class QueryResult(BaseModel):
    query_id: str = Field(default_factory=_new_id)
    query: str
    status: SearchStatus
    exhausted_reason: Optional[str] = None
    success: bool = False
    variables: list[str] = Field(default_factory=list)
    solutions: list[dict[str, Term]] = Field(default_factory=list)
    answers: list[dict[str, str]] = Field(default_factory=list)  # wyrenderowane solutions
    diagnostic: Optional[Diagnostic] = None
    nodes_expanded: int = 0
    depth_reached: int = 0
    duration_ms: float = 0.0


class ProgramCheck(BaseModel):
    ok: bool
    facts: int = 0
    rules: int = 0
    queries: int = 0
    statements: list[str] = Field(default_factory=list)  # wyrenderowane instrukcje
    diagnostic: Optional[Diagnostic] = None
