"""
Tests for per-session token storage and the layout guard.
"""

from __future__ import annotations

import auth


class TestTokenStorage:
    def test_set_get_overwrite(self, session) -> None:
        auth.set_auth_token("one")
        auth.set_auth_token("two")
        assert auth.get_auth_token() == "two"
        assert session[auth.TOKEN_KEY] == "two"

    def test_missing_token(self, session) -> None:
        assert auth.get_auth_token() is None
        assert not auth.is_authenticated()

    def test_logout_without_token_is_harmless(self, session) -> None:
        auth.logout()
        assert auth.TOKEN_KEY not in session


class TestGuard:
    def test_unauthenticated_redirects_to_login(self, session) -> None:
        assert auth.resolve_page("Clients") == auth.LOGIN_PAGE

    def test_authenticated_keeps_requested_page(self, session) -> None:
        auth.set_auth_token("abc")
        assert auth.resolve_page("Clients") == "Clients"

    def test_logout_then_guard_redirects(self, session) -> None:
        auth.set_auth_token("abc")
        auth.logout()
        assert auth.get_auth_token() is None
        assert auth.resolve_page("Dashboard") == auth.LOGIN_PAGE

    def test_presence_only_check(self, session) -> None:
        # any stored value counts; expiry is the backend's problem
        auth.set_auth_token("expired.jwt.value")
        assert auth.is_authenticated()

    def test_token_is_scoped_to_its_session(self, monkeypatch) -> None:
        first: dict = {}
        second: dict = {}

        monkeypatch.setattr(auth, "_state", lambda: first)
        auth.set_auth_token("admin-a")

        monkeypatch.setattr(auth, "_state", lambda: second)
        assert auth.resolve_page("Dashboard") == auth.LOGIN_PAGE

        monkeypatch.setattr(auth, "_state", lambda: first)
        assert auth.resolve_page("Dashboard") == "Dashboard"
