"""
api.py
Backend REST client: one function per backend operation.

Every call issues exactly one request. Failures (network, bad JSON, non-2xx)
raise ApiError with the backend's `message` or a fixed fallback string.
There are no retries.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

import auth
import config
from models import ClientsPage, Currency, DashboardAnalytics

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when a backend call fails; `message` is safe to show to the user."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _auth_headers() -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    token = auth.get_auth_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _decode(response: requests.Response) -> Any:
    if not response.content:
        return None
    return response.json()


def _request(method: str, path: str, fallback: str, *, json: Any = None,
             params: dict | None = None, authenticated: bool = True) -> Any:
    url = f"{config.API_BASE_URL}{path}"
    headers = _auth_headers() if authenticated else {"Content-Type": "application/json"}
    logger.debug("%s %s", method, url)

    try:
        response = requests.request(
            method,
            url,
            headers=headers,
            json=json,
            params=params,
            timeout=config.REQUEST_TIMEOUT,
        )
    except requests.exceptions.RequestException as exc:
        logger.warning("%s %s failed: %s", method, path, exc)
        raise ApiError(fallback) from exc

    try:
        data = _decode(response)
    except ValueError as exc:
        logger.warning("%s %s returned a non-JSON body (HTTP %s)", method, path, response.status_code)
        raise ApiError(fallback, response.status_code) from exc

    if not response.ok:
        message = data.get("message") if isinstance(data, dict) else None
        logger.warning("%s %s -> HTTP %s: %s", method, path, response.status_code, message or fallback)
        raise ApiError(message or fallback, response.status_code)

    return data


def _build(parse, data: Any, fallback: str):
    # JSON that decodes but has the wrong shape counts as a parse failure
    try:
        return parse(data)
    except (ValueError, TypeError, AttributeError) as exc:
        logger.warning("Unexpected response shape (%s): %s", fallback, exc)
        raise ApiError(fallback) from exc


# ---------- Auth ----------

def admin_login(email: str, password: str) -> dict:
    data = _request(
        "POST",
        "/api/v1/admin/login",
        "Login failed",
        json={"email": email, "password": password},
        authenticated=False,
    )
    if not isinstance(data, dict):
        data = {}

    token = data.get("accessToken") or data.get("token")
    if token:
        auth.set_auth_token(token)
    return data


def logout() -> None:
    auth.logout()


# ---------- Clients ----------

def get_clients(page: int = 1, limit: int = config.PAGE_SIZE) -> ClientsPage:
    data = _request(
        "GET",
        "/api/v1/clients",
        "Failed to fetch clients",
        params={"page": page, "limit": limit},
    )
    return _build(lambda d: ClientsPage.from_dict(d or {}), data, "Failed to fetch clients")


def add_client(client_data: dict) -> dict | None:
    return _request("POST", "/api/v1/clients", "Failed to add client", json=client_data)


def update_client(client_id: str, client_data: dict) -> dict | None:
    return _request("PUT", f"/api/v1/clients/{client_id}", "Failed to update client", json=client_data)


def change_client_status(client_id: str, status: str) -> dict | None:
    return _request(
        "PATCH",
        f"/api/v1/clients/{client_id}/change-status",
        "Failed to change client status",
        json={"status": status},
    )


def change_enquiry_mode(client_id: str, enabled: bool) -> dict | None:
    return _request(
        "PATCH",
        f"/api/v1/clients/{client_id}/change-enquiry-mode",
        "Failed to change enquiry mode",
        json={"enquiry_mode": enabled},
    )


def delete_client(client_id: str) -> None:
    _request("DELETE", f"/api/v1/clients/{client_id}", "Failed to delete client")


# ---------- Currencies ----------

def get_currencies() -> list[Currency]:
    data = _request("GET", "/api/v1/currencies/", "Failed to fetch currencies")
    return _build(lambda d: [Currency.from_dict(c) for c in d or []], data, "Failed to fetch currencies")


def add_currency(currency_data: dict) -> dict | None:
    return _request("POST", "/api/v1/currencies", "Failed to add currency", json=currency_data)


def update_currency(currency_id: str, currency_data: dict) -> dict | None:
    return _request("PUT", f"/api/v1/currencies/{currency_id}", "Failed to update currency", json=currency_data)


def setup_default_currencies() -> None:
    _request("POST", "/api/v1/currencies/setup-defaults", "Failed to setup default currencies")


# ---------- Analytics ----------

def get_dashboard_analytics() -> DashboardAnalytics:
    data = _request("GET", "/api/v1/admin/analytics/dashboard", "Failed to fetch dashboard analytics")
    return _build(lambda d: DashboardAnalytics.from_dict(d or {}), data, "Failed to fetch dashboard analytics")

