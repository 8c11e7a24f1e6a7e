"""Unit tests for the authorization interceptor: role decisions and query-parameter hygiene."""

import unittest
from typing import Annotated

from app.api.deps import guard
from app.core.authorization import (
    AccessDecision,
    AuthorizationInterceptor,
    Principal,
    SecurityContext,
)
from app.core.errors import AccessDeniedError, InvalidParameterError, UnauthenticatedError
from app.core.security import issue_token
from app.models import RoleName
from tests.factory import USER_USERNAME, bearer, create_user, make_client, make_settings


def _context(*roles: str) -> SecurityContext:
    return SecurityContext(principal=Principal(username="anil1", roles=frozenset(roles)))


class TestSecurityContext(unittest.TestCase):
    def test_fresh_context_is_unauthenticated(self) -> None:
        self.assertFalse(SecurityContext().is_authenticated)

    def test_context_with_principal_is_authenticated(self) -> None:
        self.assertTrue(_context("USER").is_authenticated)


class TestDecide(unittest.TestCase):
    """decide() follows UNCHECKED -> ALLOWED / UNAUTHENTICATED / FORBIDDEN."""

    def test_no_requirement_is_allowed_even_without_principal(self) -> None:
        self.assertIs(AuthorizationInterceptor.decide(None, None), AccessDecision.ALLOWED)

    def test_requirement_without_principal_is_unauthenticated(self) -> None:
        self.assertIs(
            AuthorizationInterceptor.decide(None, {"USER"}), AccessDecision.UNAUTHENTICATED
        )

    def test_no_intersection_is_forbidden(self) -> None:
        principal = Principal(username="anil1", roles=frozenset({"USER"}))
        self.assertIs(AuthorizationInterceptor.decide(principal, {"ADMIN"}), AccessDecision.FORBIDDEN)

    def test_intersection_is_allowed(self) -> None:
        principal = Principal(username="anil1", roles=frozenset({"USER"}))
        self.assertIs(
            AuthorizationInterceptor.decide(principal, {"USER", "ADMIN"}), AccessDecision.ALLOWED
        )

    def test_prefixed_role_names_compare_equal(self) -> None:
        principal = Principal(username="root", roles=frozenset({"ADMIN", "USER"}))
        self.assertIs(
            AuthorizationInterceptor.decide(principal, {"ROLE_ADMIN"}), AccessDecision.ALLOWED
        )

    def test_empty_requirement_denies_everyone(self) -> None:
        principal = Principal(username="root", roles=frozenset({"ADMIN", "USER"}))
        self.assertIs(AuthorizationInterceptor.decide(principal, set()), AccessDecision.FORBIDDEN)


class TestAuthorize(unittest.TestCase):
    """authorize() returns True or raises the typed denial."""

    def setUp(self) -> None:
        self.interceptor = AuthorizationInterceptor()

    def test_admin_required_denies_user(self) -> None:
        with self.assertRaises(AccessDeniedError) as ctx:
            self.interceptor.authorize(_context("USER"), {"ADMIN"})
        self.assertEqual(ctx.exception.status_code, 403)

    def test_user_or_admin_allows_user(self) -> None:
        self.assertTrue(self.interceptor.authorize(_context("USER"), {"USER", "ADMIN"}))

    def test_missing_principal_is_unauthenticated(self) -> None:
        with self.assertRaises(UnauthenticatedError) as ctx:
            self.interceptor.authorize(SecurityContext(), {"USER"})
        self.assertEqual(ctx.exception.status_code, 401)


class TestRouteRules(unittest.TestCase):
    """Rules are declared per operation and consulted by pre_handle."""

    def setUp(self) -> None:
        self.interceptor = AuthorizationInterceptor()

    def test_register_normalizes_roles(self) -> None:
        rule = self.interceptor.register("admin.list", roles=["ROLE_ADMIN"], query_params=["page"])
        self.assertEqual(rule.roles, frozenset({"ADMIN"}))
        self.assertEqual(rule.query_params, frozenset({"page"}))
        self.assertIs(self.interceptor.rule_for("admin.list"), rule)

    def test_duplicate_registration_is_rejected(self) -> None:
        self.interceptor.register("user.me", roles=["USER"])
        with self.assertRaises(ValueError):
            self.interceptor.register("user.me", roles=["ADMIN"])

    def test_undeclared_query_parameter_is_rejected(self) -> None:
        self.interceptor.register("admin.list", roles=["ADMIN"], query_params=["page"])
        with self.assertRaises(InvalidParameterError) as ctx:
            self.interceptor.pre_handle(_context("ADMIN"), "admin.list", ["page", "sort", "debug"])
        self.assertEqual(ctx.exception.variables, ["unexpected parameter: [debug, sort]"])
        self.assertEqual(ctx.exception.status_code, 400)

    def test_query_check_runs_before_role_check(self) -> None:
        self.interceptor.register("admin.list", roles=["ADMIN"])
        with self.assertRaises(InvalidParameterError):
            self.interceptor.pre_handle(SecurityContext(), "admin.list", ["x"])

    def test_public_rule_allows_anonymous(self) -> None:
        self.interceptor.register("public.ping")
        self.assertTrue(self.interceptor.pre_handle(SecurityContext(), "public.ping", []))

    def test_unknown_operation_is_allowed(self) -> None:
        self.assertTrue(self.interceptor.pre_handle(SecurityContext(), "not.declared", ["x"]))


ADMIN_GUARD = guard("tests.admin_report", roles=["ADMIN"], query_params=("period",))


class TestGuardedRoutes(unittest.TestCase):
    """End to end through guard(): 401 without a token, 403 with the wrong role."""

    def setUp(self) -> None:
        self.settings = make_settings()
        self.client, self.session_factory = make_client(self.settings)
        app = self.client.app

        @app.get("/tests/admin-report")
        def admin_report(context: Annotated[SecurityContext, ADMIN_GUARD]) -> dict[str, str]:
            return {"viewer": context.principal.username}

        with self.session_factory() as db:
            create_user(db)
            create_user(
                db,
                username="rootadmin",
                email="root@example.com",
                roles=(RoleName.ROLE_USER, RoleName.ROLE_ADMIN),
            )

    def test_missing_token_is_401(self) -> None:
        response = self.client.get("/tests/admin-report")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")

    def test_user_role_is_403(self) -> None:
        token = issue_token(USER_USERNAME, ["USER"], settings=self.settings)
        response = self.client.get("/tests/admin-report", headers=bearer(token))
        self.assertEqual(response.status_code, 403)
        body = response.json()["exception"]
        self.assertEqual(body["statusCode"], 403)
        self.assertEqual(body["variables"], ["You are not allowed to perform this operation"])

    def test_admin_role_is_allowed(self) -> None:
        token = issue_token("rootadmin", ["USER", "ADMIN"], settings=self.settings)
        response = self.client.get(
            "/tests/admin-report", params={"period": "week"}, headers=bearer(token)
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"viewer": "rootadmin"})

    def test_roles_come_from_store_not_token(self) -> None:
        # A USER-only account cannot grant itself ADMIN by putting it in the token.
        token = issue_token(USER_USERNAME, ["USER", "ADMIN"], settings=self.settings)
        response = self.client.get("/tests/admin-report", headers=bearer(token))
        self.assertEqual(response.status_code, 403)

    def test_undeclared_query_parameter_is_400(self) -> None:
        token = issue_token("rootadmin", ["USER", "ADMIN"], settings=self.settings)
        response = self.client.get(
            "/tests/admin-report", params={"verbose": "1"}, headers=bearer(token)
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["exception"]["variables"], ["unexpected parameter: [verbose]"]
        )


if __name__ == "__main__":
    unittest.main()
