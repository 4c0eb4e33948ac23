"""Shared pytest fixtures for the test suite.

Fixture overview
----------------
session        — per-visitor state (a plain dict standing in for st.session_state)
http           — replaces requests.request inside api; queue responses, inspect calls
fake_http      — http plus an isolated session, for api-level tests
client_record  — backend-shaped JSON for one client
fake_api       — recording stand-in for the api module (used by controller tests)
notes          — recording notify(level, message) callback
"""

from __future__ import annotations

import pytest
import requests

import api
import auth
from api import ApiError
from models import Client, ClientsPage, Currency, DashboardAnalytics

# ── Session ──────────────────────────────────────────────────────────────────


@pytest.fixture
def session(monkeypatch) -> dict:
    state: dict = {}
    monkeypatch.setattr(auth, "_state", lambda: state)
    return state


# ── HTTP ─────────────────────────────────────────────────────────────────────


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        if text is not None:
            self.content = text.encode("utf-8")
        elif payload is None:
            self.content = b""
        else:
            self.content = b"{json}"

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeHttp:
    def __init__(self):
        self.calls: list[dict] = []
        self.responses: list = []

    def queue(self, status_code: int = 200, payload=None, text: str | None = None) -> None:
        self.responses.append(FakeResponse(status_code, payload, text))

    def fail_with(self, exc: Exception) -> None:
        self.responses.append(exc)

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0) if self.responses else FakeResponse(200, {})
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def last(self) -> dict:
        return self.calls[-1]


@pytest.fixture
def http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr(api.requests, "request", fake)
    monkeypatch.setattr(api.config, "API_BASE_URL", "http://backend.test")
    return fake


@pytest.fixture
def fake_http(http, session):
    return http


@pytest.fixture
def network_error():
    return requests.exceptions.ConnectionError("connection refused")


# ── Domain ───────────────────────────────────────────────────────────────────


def make_client_record(**overrides) -> dict:
    record = {
        "_id": "c1",
        "client_id": "CL-001",
        "client_name": "Acme Bakery",
        "email": "owner@acme.test",
        "phone_number": "+201000000001",
        "business_name": "Acme",
        "business_type": "Restaurant",
        "start_date": "2026-01-01T00:00:00.000Z",
        "end_date": "2026-12-31T00:00:00.000Z",
        "status": "active",
        "amount_per_month": 50,
        "paid_months": 3,
        "whatsapp_token": "secret-token",
        "enquiry_mode": False,
        "currency_id": {"_id": "cur1", "name": "US Dollar", "symbol": "$", "code": "USD"},
    }
    record.update(overrides)
    return record


@pytest.fixture
def client_record() -> dict:
    return make_client_record()


class FakeApi:
    """Records every call; set `fail` to a method name to make it raise ApiError."""

    def __init__(self, clients: list[Client] | None = None, total: int | None = None, total_pages: int | None = None):
        self.calls: list[tuple] = []
        self.fail: set[str] = set()
        self.clients = clients if clients is not None else [Client.from_dict(make_client_record())]
        self.total = total if total is not None else len(self.clients)
        self.total_pages = total_pages if total_pages is not None else 1
        self.currencies = [Currency.from_dict({"_id": "cur1", "name": "US Dollar", "symbol": "$", "code": "USD"})]

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise ApiError(f"{name} exploded", 500)

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def admin_login(self, email, password):
        self._record("admin_login", email, password)
        return {"accessToken": "tok"}

    def get_clients(self, page=1, limit=25):
        self._record("get_clients", page, limit)
        return ClientsPage(total=self.total, page=page, limit=limit, total_pages=self.total_pages, clients=self.clients)

    def add_client(self, data):
        self._record("add_client", data)

    def update_client(self, client_id, data):
        self._record("update_client", client_id, data)

    def change_client_status(self, client_id, status):
        self._record("change_client_status", client_id, status)

    def change_enquiry_mode(self, client_id, enabled):
        self._record("change_enquiry_mode", client_id, enabled)

    def delete_client(self, client_id):
        self._record("delete_client", client_id)

    def get_currencies(self):
        self._record("get_currencies")
        return self.currencies

    def add_currency(self, data):
        self._record("add_currency", data)

    def update_currency(self, currency_id, data):
        self._record("update_currency", currency_id, data)

    def setup_default_currencies(self):
        self._record("setup_default_currencies")

    def get_dashboard_analytics(self):
        self._record("get_dashboard_analytics")
        return DashboardAnalytics.from_dict({"overview": {"total_clients": 3, "active_clients": 2}})


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


class Notes:
    def __init__(self):
        self.items: list[tuple[str, str]] = []

    def __call__(self, level: str, message: str) -> None:
        self.items.append((level, message))

    @property
    def errors(self) -> list[str]:
        return [m for level, m in self.items if level == "error"]

    @property
    def successes(self) -> list[str]:
        return [m for level, m in self.items if level == "success"]


@pytest.fixture
def notes() -> Notes:
    return Notes()
