"""
utils.py
Validation, payload building, filtering, pagination, table frames and exports.
"""

from __future__ import annotations

import math
import re
from datetime import date

import pandas as pd

from models import CLIENT_STATUSES, Client, ClientSummary, Currency, DashboardAnalytics

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# (field, label, max length) for required client text fields, in form order
_CLIENT_REQUIRED = [
    ("client_name", "Client name", 150),
    ("email", "Email", 100),
    ("phone_number", "Phone number", 20),
    ("business_name", "Business name", 150),
    ("business_type", "Business type", 100),
]

_CLIENT_OPTIONAL_TEXT = ("client_id", "sub_domain_name", "notes")


def parse_iso(d: str) -> date:
    return date.fromisoformat(d)


def _text(form: dict, key: str) -> str:
    value = form.get(key)
    if value is None:
        return ""
    return str(value).strip()


# ---------- Validation ----------

def validate_client_inputs(form: dict) -> list[str]:
    errors: list[str] = []

    for key, label, max_len in _CLIENT_REQUIRED:
        value = _text(form, key)
        if not value:
            errors.append(f"{label} is required.")
        elif len(value) > max_len:
            errors.append(f"{label} must be at most {max_len} characters.")
        elif key == "email" and not EMAIL_RE.match(value):
            errors.append("Invalid email.")

    for key, label in (("start_date", "Start date"), ("end_date", "End date")):
        value = _text(form, key)
        if not value:
            errors.append(f"{label} is required.")
            continue
        try:
            parse_iso(value[:10])
        except ValueError:
            errors.append(f"{label} must be a valid date (YYYY-MM-DD).")

    if _text(form, "status") not in CLIENT_STATUSES:
        errors.append("Status must be active or inactive.")

    amount = _text(form, "amount_per_month")
    if amount:
        try:
            value = float(amount)
            if not math.isfinite(value):
                errors.append("Amount per month must be numeric.")
            elif value < 0:
                errors.append("Amount per month cannot be negative.")
        except ValueError:
            errors.append("Amount per month must be numeric.")

    paid = _text(form, "paid_months")
    if paid:
        try:
            if int(paid) < 0:
                errors.append("Paid months cannot be negative.")
        except ValueError:
            errors.append("Paid months must be a whole number.")

    return errors


def validate_currency_inputs(form: dict) -> list[str]:
    errors: list[str] = []
    for key, label, max_len in (("name", "Currency name", 100), ("symbol", "Symbol", 10), ("code", "Code", 10)):
        value = _text(form, key)
        if not value:
            errors.append(f"{label} is required.")
        elif len(value) > max_len:
            errors.append(f"{label} must be at most {max_len} characters.")
    return errors


# ---------- Payloads ----------

def build_client_payload(form: dict, editing: bool = False, original_token: str | None = None) -> dict:
    """
    Turn validated form values into the JSON body for create/update.

    On edit, whatsapp_token is only sent when it changed so an untouched
    (blank) field never overwrites the stored token.
    """
    payload: dict = {key: _text(form, key) for key, _, _ in _CLIENT_REQUIRED}
    payload["start_date"] = _text(form, "start_date")[:10]
    payload["end_date"] = _text(form, "end_date")[:10]
    payload["status"] = _text(form, "status")

    for key in _CLIENT_OPTIONAL_TEXT:
        value = _text(form, key)
        if value or editing:
            payload[key] = value

    amount = _text(form, "amount_per_month")
    if amount:
        payload["amount_per_month"] = float(amount)
    paid = _text(form, "paid_months")
    if paid:
        payload["paid_months"] = int(paid)

    currency_id = _text(form, "currency_id")
    if currency_id:
        payload["currency_id"] = currency_id
    elif editing:
        payload["currency_id"] = None

    token = _text(form, "whatsapp_token")
    if editing:
        if token != (original_token or ""):
            payload["whatsapp_token"] = token
    elif token:
        payload["whatsapp_token"] = token

    return payload


def build_currency_payload(form: dict) -> dict:
    return {key: _text(form, key) for key in ("name", "symbol", "code")}


def client_to_form(client: Client) -> dict:
    return {
        "client_id": client.client_id or "",
        "client_name": client.client_name,
        "email": client.email,
        "phone_number": client.phone_number,
        "business_name": client.business_name,
        "business_type": client.business_type,
        "sub_domain_name": client.sub_domain_name or "",
        "start_date": client.start_date[:10],
        "end_date": client.end_date[:10],
        "status": client.status,
        "notes": client.notes or "",
        "amount_per_month": "" if client.amount_per_month is None else str(client.amount_per_month),
        "paid_months": "" if client.paid_months is None else str(client.paid_months),
        "currency_id": client.currency.id if client.currency else "",
        "whatsapp_token": client.whatsapp_token or "",
    }


def empty_client_form() -> dict:
    return {
        "client_id": "",
        "client_name": "",
        "email": "",
        "phone_number": "",
        "business_name": "",
        "business_type": "",
        "sub_domain_name": "",
        "start_date": "",
        "end_date": "",
        "status": "active",
        "notes": "",
        "amount_per_month": "",
        "paid_months": "",
        "currency_id": "",
        "whatsapp_token": "",
    }


# ---------- Filtering & pagination ----------

def filter_clients(clients: list[Client], term: str) -> list[Client]:
    """Case-insensitive match on the already-fetched page only."""
    needle = term.strip().lower()
    if not needle:
        return list(clients)
    return [
        c for c in clients
        if any(needle in (v or "").lower() for v in (c.client_name, c.email, c.business_name, c.phone_number, c.client_id))
    ]


def filter_currencies(currencies: list[Currency], term: str) -> list[Currency]:
    needle = term.strip().lower()
    if not needle:
        return list(currencies)
    return [c for c in currencies if any(needle in v.lower() for v in (c.name, c.code, c.symbol))]


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def can_go_prev(page: int) -> bool:
    return page > 1


def can_go_next(page: int, pages: int) -> bool:
    return page < pages


# ---------- Display helpers ----------

def format_date(value: str | None) -> str:
    if not value:
        return "-"
    return str(value)[:10]


def format_money(value: float | None) -> str:
    return f"{float(value or 0):,.2f}"


CLIENT_COLUMNS = [
    "client_id", "client_name", "email", "phone_number", "business_name", "business_type",
    "start_date", "end_date", "status", "enquiry_mode", "amount_per_month", "paid_months", "currency",
]


def clients_to_frame(clients: list[Client]) -> pd.DataFrame:
    if not clients:
        return pd.DataFrame(columns=CLIENT_COLUMNS)
    rows = [
        {
            "client_id": c.client_id or "-",
            "client_name": c.client_name,
            "email": c.email,
            "phone_number": c.phone_number,
            "business_name": c.business_name,
            "business_type": c.business_type,
            "start_date": format_date(c.start_date),
            "end_date": format_date(c.end_date),
            "status": c.status,
            "enquiry_mode": c.enquiry_mode,
            "amount_per_month": c.amount_per_month,
            "paid_months": c.paid_months,
            "currency": c.currency.code if c.currency else "-",
        }
        for c in clients
    ]
    return pd.DataFrame(rows, columns=CLIENT_COLUMNS)


def currencies_to_frame(currencies: list[Currency]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"name": c.name, "symbol": c.symbol, "code": c.code} for c in currencies],
        columns=["name", "symbol", "code"],
    )


def clients_to_csv_bytes(clients: list[Client]) -> bytes:
    return clients_to_frame(clients).to_csv(index=False).encode("utf-8")


def summaries_to_frame(rows: list[ClientSummary]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"client_name": r.client_name, "business_name": r.business_name, "email": r.email,
          "end_date": format_date(r.end_date)} for r in rows],
        columns=["client_name", "business_name", "email", "end_date"],
    )


def top_clients_frame(analytics: DashboardAnalytics) -> pd.DataFrame:
    return pd.DataFrame(
        [{"client_name": c.client_name, "business_name": c.business_name, "status": c.status or "-",
          "total_revenue": float(c.total_revenue or 0)} for c in analytics.top_clients],
        columns=["client_name", "business_name", "status", "total_revenue"],
    )


def revenue_by_month_frame(analytics: DashboardAnalytics) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"month": r.month, "clients_joined": r.clients_joined, "revenue": r.revenue} for r in analytics.revenue_by_month],
        columns=["month", "clients_joined", "revenue"],
    )
    if df.empty:
        return df
    return df.sort_values("month").reset_index(drop=True)


def business_type_frame(analytics: DashboardAnalytics) -> pd.DataFrame:
    return pd.DataFrame(
        [{"business_type": s.business_type, "count": s.count, "active_count": s.active_count,
          "total_revenue": s.total_revenue} for s in analytics.business_type_stats],
        columns=["business_type", "count", "active_count", "total_revenue"],
    )
