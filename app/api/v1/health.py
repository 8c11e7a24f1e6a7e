"""Liveness plus the two things registration depends on: the database and seeded roles."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_role_store, guard
from app.core.authorization import SecurityContext
from app.core.config import Settings, get_settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.users import RoleStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    _context: Annotated[SecurityContext, guard("health.get")],
    db: Annotated[Session, Depends(get_db)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    if not check_db_connected(db):
        return HealthResponse(
            status="degraded", environment=settings.APP_ENV, database="disconnected"
        )

    missing = [name.value for name in role_store.missing_roles()]
    if missing:
        logger.warning("Health check: roles not seeded", extra={"missing_roles": missing})
    return HealthResponse(
        status="degraded" if missing else "ok",
        environment=settings.APP_ENV,
        database="connected",
        missing_roles=missing,
    )
