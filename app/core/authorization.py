"""
Principal, per-request security context and the role-based authorization interceptor.

Routes declare their required roles and accepted query parameters when they
are registered (see app.api.deps.guard); the interceptor consults that table
before the handler runs.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from app.core.errors import AccessDeniedError, InvalidParameterError, UnauthenticatedError

logger = logging.getLogger(__name__)

ADMIN = "ADMIN"
USER = "USER"

NOT_AUTHENTICATED_MESSAGE = "Authentication error"
ACCESS_DENIED_MESSAGE = "You are not allowed to perform this operation"


def normalize_role(role: str) -> str:
    """'ROLE_ADMIN', 'admin' and 'ADMIN' all compare as 'ADMIN'."""
    return role.strip().upper().removeprefix("ROLE_")


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity for one request."""

    username: str
    roles: frozenset[str]

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(normalize_role(r) for r in roles)

    @property
    def is_admin(self) -> bool:
        return ADMIN in self.roles


@dataclass(slots=True)
class SecurityContext:
    """
    Request-scoped holder for the current principal.

    One instance is created per request and passed explicitly to whatever
    needs it; only AuthenticationManager sets the principal. When a bearer
    token was presented but rejected, failure_reason records why.
    """

    principal: Principal | None = None
    failure_reason: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None


class AccessDecision(enum.Enum):
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class RouteRule:
    """Declared access requirements of one operation. roles=None means public."""

    operation_id: str
    roles: frozenset[str] | None = None
    query_params: frozenset[str] = field(default_factory=frozenset)


class AuthorizationInterceptor:
    """Holds route rules and decides, per request, whether the handler may run."""

    def __init__(self) -> None:
        self._rules: dict[str, RouteRule] = {}

    def register(
        self,
        operation_id: str,
        roles: Iterable[str] | None = None,
        query_params: Iterable[str] = (),
    ) -> RouteRule:
        if operation_id in self._rules:
            raise ValueError(f"Operation '{operation_id}' already has an access rule")
        rule = RouteRule(
            operation_id=operation_id,
            roles=frozenset(normalize_role(r) for r in roles) if roles is not None else None,
            query_params=frozenset(query_params),
        )
        self._rules[operation_id] = rule
        return rule

    def rule_for(self, operation_id: str) -> RouteRule | None:
        return self._rules.get(operation_id)

    @staticmethod
    def decide(principal: Principal | None, required_roles: Iterable[str] | None) -> AccessDecision:
        if required_roles is None:
            return AccessDecision.ALLOWED
        if principal is None:
            return AccessDecision.UNAUTHENTICATED
        if principal.has_any_role(required_roles):
            return AccessDecision.ALLOWED
        return AccessDecision.FORBIDDEN

    def authorize(self, context: SecurityContext, required_roles: Iterable[str] | None) -> bool:
        """Return True if allowed; raise UnauthenticatedError or AccessDeniedError otherwise."""
        if required_roles is not None:
            required_roles = frozenset(required_roles)
        decision = self.decide(context.principal, required_roles)
        if decision is AccessDecision.UNAUTHENTICATED:
            logger.warning(
                "Rejected unauthenticated request",
                extra={"required_roles": sorted(required_roles or ()), "reason": context.failure_reason},
            )
            raise UnauthenticatedError(NOT_AUTHENTICATED_MESSAGE)
        if decision is AccessDecision.FORBIDDEN:
            logger.error(
                "Throwing AccessDeniedError because role is not valid for api",
                extra={
                    "username": context.principal.username,
                    "required_roles": sorted(required_roles or ()),
                },
            )
            raise AccessDeniedError(ACCESS_DENIED_MESSAGE)
        return True

    def validate_query_params(self, operation_id: str, names: Iterable[str]) -> None:
        """Reject query parameters the operation does not declare."""
        rule = self._rules.get(operation_id)
        declared = rule.query_params if rule is not None else frozenset()
        unexpected = sorted(set(names) - declared)
        if unexpected:
            logger.error("Unexpected parameters: %s", unexpected)
            raise InvalidParameterError(f"unexpected parameter: [{', '.join(unexpected)}]")

    def pre_handle(self, context: SecurityContext, operation_id: str, query_names: Iterable[str]) -> bool:
        """Run before a guarded handler: query-parameter hygiene, then the role check."""
        rule = self._rules.get(operation_id)
        if rule is None:
            return True
        self.validate_query_params(operation_id, query_names)
        return self.authorize(context, rule.roles)
