"""
auth.py
Auth token storage and the layout guard.

The backend issues the token; we keep it in the visitor's own Streamlit
session and only check that it's there (no expiry or signature checks).
"""

from __future__ import annotations

import logging

import streamlit as st

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
LOGIN_PAGE = "Login"


def _state():
    return st.session_state


def get_auth_token() -> str | None:
    return _state().get(TOKEN_KEY)


def set_auth_token(token: str) -> None:
    _state()[TOKEN_KEY] = token
    logger.info("Auth token stored for this session")


def logout() -> None:
    if _state().pop(TOKEN_KEY, None) is not None:
        logger.info("Auth token removed")


def is_authenticated() -> bool:
    return bool(get_auth_token())


def resolve_page(requested: str) -> str:
    """
    Page to actually render: unauthenticated visitors always land on the login screen.
    """
    if not is_authenticated():
        return LOGIN_PAGE
    return requested
