"""
Router: POST /query
Kompiluje program z żądania i zwraca wszystkie odpowiedzi na zapytanie.
Błąd leksera/parsera → 422 z pełnym QueryResult (diagnostic).

Bardzo głębokie termy (np. s(s(...)) po długim wyprowadzeniu) mogą przekroczyć
limit zagnieżdżenia serializera pydantic; wtedy odpowiedź traci strukturalne
`solutions`, a zostaje tekstowe `answers`.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.dependencies import get_reasoner
from api.schemas import QueryRequest
from contracts import QueryResult

logger = logging.getLogger("hornlog.api.query")

router = APIRouter(prefix="/query", tags=["query"])


def _json(result: QueryResult) -> str:
    try:
        return result.model_dump_json()
    except ValueError as exc:
        logger.warning("Structured solutions dropped from response: %s", exc)
        return result.model_dump_json(exclude={"solutions"})


@router.post("", response_model=QueryResult)
async def run_query(
    body: QueryRequest,
    reasoner=Depends(get_reasoner),
):
    result = reasoner.evaluate(body.program, body.query, body.budget())
    status_code = 422 if result.diagnostic is not None else 200
    return Response(content=_json(result), status_code=status_code, media_type="application/json")
