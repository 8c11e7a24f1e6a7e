"""Unit tests for AuthenticationManager and the current-user lookup built on it."""

import unittest
from unittest.mock import MagicMock

from app.core.authorization import Principal, SecurityContext
from app.core.errors import CredentialsInvalidError, UnauthenticatedError, UserNotFoundError
from app.core.security import hash_password
from app.models import Role, RoleName, User
from app.services.accounts import AccountService
from app.services.authentication import AuthenticationManager
from app.services.users import USER_NOT_FOUND_MESSAGE


def _user(*role_names: RoleName, password: str = "secret1") -> User:
    return User(
        id="5b4c1c0e-1111-4a4a-9a9a-000000000001",
        name="Anil",
        username="anil1",
        email="anil1@x.com",
        password_hash=hash_password(password, rounds=4),
        roles=[Role(name=name) for name in role_names],
    )


def _manager(user: User | None, hide_unknown: bool = False) -> tuple[AuthenticationManager, MagicMock]:
    store = MagicMock()
    if user is None:
        store.get_by_username.side_effect = UserNotFoundError(USER_NOT_FOUND_MESSAGE)
    else:
        store.get_by_username.return_value = user
    settings = MagicMock()
    settings.AUTH_HIDE_UNKNOWN_USERS = hide_unknown
    return AuthenticationManager(store, settings), store


class TestAuthenticateSuccess(unittest.TestCase):
    """Valid credentials produce a principal with at least USER and publish it."""

    def test_stored_user_role_yields_user(self) -> None:
        manager, store = _manager(_user(RoleName.ROLE_USER))
        context = SecurityContext()
        principal = manager.authenticate(context, "anil1", "secret1")
        self.assertEqual(principal, Principal(username="anil1", roles=frozenset({"USER"})))
        self.assertIs(context.principal, principal)
        store.get_by_username.assert_called_once_with("anil1")

    def test_user_without_stored_roles_still_has_user(self) -> None:
        manager, _ = _manager(_user())
        principal = manager.authenticate(SecurityContext(), "anil1", "secret1")
        self.assertEqual(principal.roles, frozenset({"USER"}))

    def test_admin_role_is_added(self) -> None:
        manager, _ = _manager(_user(RoleName.ROLE_USER, RoleName.ROLE_ADMIN))
        principal = manager.authenticate(SecurityContext(), "anil1", "secret1")
        self.assertEqual(principal.roles, frozenset({"USER", "ADMIN"}))
        self.assertTrue(principal.is_admin)

    def test_no_password_skips_credential_check(self) -> None:
        manager, _ = _manager(_user(RoleName.ROLE_USER))
        principal = manager.authenticate(SecurityContext(), "anil1")
        self.assertEqual(principal.username, "anil1")

    def test_replaces_prior_principal_and_failure(self) -> None:
        manager, _ = _manager(_user(RoleName.ROLE_USER))
        context = SecurityContext(
            principal=Principal(username="someone-else", roles=frozenset({"ADMIN"})),
            failure_reason="expired",
        )
        manager.authenticate(context, "anil1", "secret1")
        self.assertEqual(context.principal.username, "anil1")
        self.assertIsNone(context.failure_reason)


class TestAuthenticateFailure(unittest.TestCase):
    """Failures raise typed errors and leave the context untouched."""

    def test_wrong_password(self) -> None:
        manager, _ = _manager(_user(RoleName.ROLE_USER))
        context = SecurityContext()
        with self.assertRaises(CredentialsInvalidError) as ctx:
            manager.authenticate(context, "anil1", "wrong-password")
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertIsNone(context.principal)

    def test_user_without_password_hash_cannot_log_in(self) -> None:
        user = _user(RoleName.ROLE_USER)
        user.password_hash = None
        manager, _ = _manager(user)
        with self.assertRaises(CredentialsInvalidError):
            manager.authenticate(SecurityContext(), "anil1", "secret1")

    def test_unknown_user_is_not_found(self) -> None:
        manager, _ = _manager(None)
        context = SecurityContext()
        with self.assertRaises(UserNotFoundError) as ctx:
            manager.authenticate(context, "ghost", "secret1")
        self.assertEqual(ctx.exception.variables, ["User not found with email"])
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIsNone(context.principal)

    def test_unknown_user_hidden_as_invalid_credentials(self) -> None:
        manager, _ = _manager(None, hide_unknown=True)
        with self.assertRaises(CredentialsInvalidError) as ctx:
            manager.authenticate(SecurityContext(), "ghost", "secret1")
        self.assertEqual(ctx.exception.variables, ["Username or password invalid"])


class TestCurrentUser(unittest.TestCase):
    def test_unauthenticated_context_is_rejected(self) -> None:
        manager, store = _manager(_user(RoleName.ROLE_USER))
        service = AccountService(store, MagicMock(), manager, MagicMock())
        with self.assertRaises(UnauthenticatedError):
            service.current_user(SecurityContext())
        store.get_by_username.assert_not_called()

    def test_authenticated_context_loads_the_user(self) -> None:
        user = _user(RoleName.ROLE_USER)
        manager, store = _manager(user)
        service = AccountService(store, MagicMock(), manager, MagicMock())
        context = SecurityContext(principal=Principal(username="anil1", roles=frozenset({"USER"})))
        self.assertIs(service.current_user(context), user)
        store.get_by_username.assert_called_once_with("anil1")


if __name__ == "__main__":
    unittest.main()
