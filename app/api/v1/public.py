"""Unauthenticated endpoints."""

from typing import Annotated

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.api.deps import guard
from app.core.authorization import SecurityContext

router = APIRouter()


@router.get("/ping", response_class=PlainTextResponse)
def ping(_context: Annotated[SecurityContext, guard("public.ping")]) -> str:
    return "ping"
