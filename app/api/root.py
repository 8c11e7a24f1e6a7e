"""Discovery route served outside the versioned API prefix."""

from typing import Annotated

from fastapi import APIRouter

from app.api.deps import guard
from app.core.authorization import SecurityContext

SERVICE_NAME = "JWT Boilerplate API"

router = APIRouter()


@router.get("/", include_in_schema=False)
def root(_context: Annotated[SecurityContext, guard("root.get")]) -> dict[str, str]:
    return {"message": SERVICE_NAME}
