"""
dependencies.py — FastAPI Dependency Injection.
Każda zależność zwraca odpowiedni adapter przez Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.program_parser.recursive_descent import RecursiveDescentParser
from adapters.reasoner.backward_chainer import BackwardChainer


def get_program_parser(request: Request) -> RecursiveDescentParser:
    return request.app.state.program_parser


def get_reasoner(request: Request) -> BackwardChainer:
    return request.app.state.reasoner
