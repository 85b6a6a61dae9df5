"""
schemas.py — Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from contracts import SearchBudget


# ─────────────────────────── /query ──────────────────────────────

class QueryRequest(BaseModel):
    program: str = Field(default="", max_length=1_000_000)
    query: str = Field(..., min_length=1, max_length=10_000)
    max_depth: Optional[int] = Field(default=None, ge=1)
    max_nodes: Optional[int] = Field(default=None, ge=1)
    timeout_ms: Optional[int] = Field(default=None, ge=1)

    def budget(self) -> SearchBudget:
        return SearchBudget(
            max_depth=self.max_depth,
            max_nodes=self.max_nodes,
            timeout_ms=self.timeout_ms,
        )


# ─────────────────────────── /program ────────────────────────────

class CheckRequest(BaseModel):
    program: str = Field(default="", max_length=1_000_000)


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
