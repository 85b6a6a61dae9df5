"""
Router: POST /program/check, POST /program/tokens
Walidacja tekstu programu bez wykonywania zapytań.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.dependencies import get_program_parser, get_reasoner
from api.schemas import CheckRequest
from contracts import LexError, ProgramCheck, Token

router = APIRouter(prefix="/program", tags=["program"])


@router.post("/check", response_model=ProgramCheck)
async def check_program(
    body: CheckRequest,
    reasoner=Depends(get_reasoner),
):
    result = reasoner.check(body.program)
    if result.diagnostic is not None:
        return JSONResponse(status_code=422, content=result.model_dump(mode="json"))
    return result


@router.post("/tokens", response_model=list[Token])
async def tokenize_program(
    body: CheckRequest,
    parser=Depends(get_program_parser),
) -> list[Token]:
    try:
        return parser.tokenize(body.program)
    except LexError as exc:
        raise HTTPException(status_code=422, detail=exc.message)
