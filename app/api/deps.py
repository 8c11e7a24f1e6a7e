"""
FastAPI dependency wiring: stores, services, the bearer-token filter and route guards.

Each request gets its own SecurityContext (kept on request.state) which is
passed explicitly to the handler; nothing about the caller is stored globally.
"""

import logging
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.authorization import AuthorizationInterceptor, SecurityContext
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import CredentialsInvalidError, UserNotFoundError
from app.core.security import TokenError, verify_token
from app.services.accounts import AccountService
from app.services.authentication import AuthenticationManager
from app.services.users import RoleStore, UserStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Route rules are written while router modules are imported, then only read.
interceptor = AuthorizationInterceptor()


def get_security_context(request: Request) -> SecurityContext:
    context = getattr(request.state, "security_context", None)
    if context is None:
        context = SecurityContext()
        request.state.security_context = context
    return context


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_role_store(db: Annotated[Session, Depends(get_db)]) -> RoleStore:
    return RoleStore(db)


def get_authentication_manager(
    user_store: Annotated[UserStore, Depends(get_user_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthenticationManager:
    return AuthenticationManager(user_store, settings)


def get_account_service(
    user_store: Annotated[UserStore, Depends(get_user_store)],
    role_store: Annotated[RoleStore, Depends(get_role_store)],
    manager: Annotated[AuthenticationManager, Depends(get_authentication_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AccountService:
    return AccountService(user_store, role_store, manager, settings)


def authenticate_request(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    context: Annotated[SecurityContext, Depends(get_security_context)],
    manager: Annotated[AuthenticationManager, Depends(get_authentication_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SecurityContext:
    """
    Bearer-token filter: verify the token and authenticate its subject.

    Never rejects by itself; a missing or bad token leaves the context
    unauthenticated and the route guard decides whether that matters.
    """
    if credentials is None or not credentials.credentials:
        return context
    try:
        claims = verify_token(credentials.credentials, settings=settings)
    except TokenError as e:
        context.failure_reason = e.reason
        logger.warning("Bearer token rejected", extra={"reason": e.reason})
        return context
    try:
        manager.authenticate(context, claims.subject)
    except (UserNotFoundError, CredentialsInvalidError):
        context.failure_reason = "unknown subject"
        logger.warning("Bearer token subject no longer exists", extra={"username": claims.subject})
    return context


def guard(
    operation_id: str,
    *,
    roles: list[str] | None = None,
    query_params: tuple[str, ...] = (),
) -> Any:
    """
    Declare an operation's access rule and return the dependency that enforces it.

    Use as a parameter default/annotation on the route so the rule is
    registered together with the route:
        context: Annotated[SecurityContext, guard("user.me", roles=[ADMIN, USER])]
    """
    interceptor.register(operation_id, roles=roles, query_params=query_params)

    def _enforce(
        request: Request,
        context: Annotated[SecurityContext, Depends(authenticate_request)],
    ) -> SecurityContext:
        interceptor.pre_handle(context, operation_id, request.query_params.keys())
        return context

    return Depends(_enforce)
