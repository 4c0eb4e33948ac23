"""
models.py
Records mirrored from the backend's JSON responses (clients, currencies, analytics).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from config import PAGE_SIZE

CLIENT_STATUSES = ("active", "inactive")


def _opt_float(value) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _opt_int(value) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class Currency:
    id: str
    name: str
    symbol: str
    code: str
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Currency":
        return cls(
            id=str(data.get("_id", "")),
            name=data.get("name") or "",
            symbol=data.get("symbol") or "",
            code=data.get("code") or "",
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass(frozen=True)
class Client:
    id: str
    client_name: str
    email: str
    phone_number: str
    business_name: str
    business_type: str
    start_date: str
    end_date: str
    status: str  # 'active' or 'inactive'
    client_id: str | None = None
    sub_domain_name: str | None = None
    notes: str | None = None
    amount_per_month: float | None = None
    paid_months: int | None = None
    whatsapp_token: str | None = None
    enquiry_mode: bool = False
    currency: Currency | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Client":
        # currency_id is either populated or null
        currency = data.get("currency_id")
        return cls(
            id=str(data.get("_id", "")),
            client_name=data.get("client_name") or "",
            email=data.get("email") or "",
            phone_number=data.get("phone_number") or "",
            business_name=data.get("business_name") or "",
            business_type=data.get("business_type") or "",
            start_date=data.get("start_date") or "",
            end_date=data.get("end_date") or "",
            status=data.get("status") or "inactive",
            client_id=data.get("client_id"),
            sub_domain_name=data.get("sub_domain_name"),
            notes=data.get("notes"),
            amount_per_month=_opt_float(data.get("amount_per_month")),
            paid_months=_opt_int(data.get("paid_months")),
            whatsapp_token=data.get("whatsapp_token"),
            enquiry_mode=bool(data.get("enquiry_mode", False)),
            currency=Currency.from_dict(currency) if isinstance(currency, dict) else None,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    @property
    def is_active(self) -> bool:
        return self.status == "active"


@dataclass(frozen=True)
class ClientsPage:
    total: int
    page: int
    limit: int
    total_pages: int
    clients: list[Client] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ClientsPage":
        total = int(data.get("total") or 0)
        limit = int(data.get("limit") or PAGE_SIZE)
        total_pages = data.get("totalPages")
        if total_pages is None:
            total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            total=total,
            page=int(data.get("page") or 1),
            limit=limit,
            total_pages=int(total_pages),
            clients=[Client.from_dict(c) for c in data.get("clients") or []],
        )


# ---------- Analytics snapshot (read-only) ----------

@dataclass(frozen=True)
class Overview:
    total_clients: int = 0
    active_clients: int = 0
    inactive_clients: int = 0
    total_revenue: float = 0.0
    expiring_soon_count: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "Overview":
        return cls(
            total_clients=int(data.get("total_clients") or 0),
            active_clients=int(data.get("active_clients") or 0),
            inactive_clients=int(data.get("inactive_clients") or 0),
            total_revenue=float(data.get("total_revenue") or 0),
            expiring_soon_count=int(data.get("expiring_soon_count") or 0),
        )


@dataclass(frozen=True)
class ClientSummary:
    """Slim client row used by the expiring/expired/top lists."""

    id: str
    client_name: str
    email: str
    business_name: str
    end_date: str
    client_id: str | None = None
    start_date: str | None = None
    status: str | None = None
    amount_per_month: float | None = None
    paid_months: int | None = None
    total_revenue: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ClientSummary":
        return cls(
            id=str(data.get("_id", "")),
            client_name=data.get("client_name") or "",
            email=data.get("email") or "",
            business_name=data.get("business_name") or "",
            end_date=data.get("end_date") or "",
            client_id=data.get("client_id"),
            start_date=data.get("start_date"),
            status=data.get("status"),
            amount_per_month=_opt_float(data.get("amount_per_month")),
            paid_months=_opt_int(data.get("paid_months")),
            total_revenue=_opt_float(data.get("total_revenue")),
        )


@dataclass(frozen=True)
class RevenueMonth:
    month: str  # backend groups by "YYYY-MM" under _id
    clients_joined: int
    revenue: float

    @classmethod
    def from_dict(cls, data: dict) -> "RevenueMonth":
        return cls(
            month=str(data.get("_id", "")),
            clients_joined=int(data.get("clients_joined") or 0),
            revenue=float(data.get("revenue") or 0),
        )


@dataclass(frozen=True)
class BusinessTypeStat:
    business_type: str
    count: int
    total_revenue: float
    active_count: int

    @classmethod
    def from_dict(cls, data: dict) -> "BusinessTypeStat":
        return cls(
            business_type=str(data.get("_id") or "Unspecified"),
            count=int(data.get("count") or 0),
            total_revenue=float(data.get("total_revenue") or 0),
            active_count=int(data.get("active_count") or 0),
        )


@dataclass(frozen=True)
class DashboardAnalytics:
    overview: Overview
    expiring_soon_clients: list[ClientSummary] = field(default_factory=list)
    recently_expired_clients: list[ClientSummary] = field(default_factory=list)
    revenue_by_month: list[RevenueMonth] = field(default_factory=list)
    business_type_stats: list[BusinessTypeStat] = field(default_factory=list)
    top_clients: list[ClientSummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardAnalytics":
        return cls(
            overview=Overview.from_dict(data.get("overview") or {}),
            expiring_soon_clients=[ClientSummary.from_dict(c) for c in data.get("expiring_soon_clients") or []],
            recently_expired_clients=[ClientSummary.from_dict(c) for c in data.get("recently_expired_clients") or []],
            revenue_by_month=[RevenueMonth.from_dict(r) for r in data.get("revenue_by_month") or []],
            business_type_stats=[BusinessTypeStat.from_dict(s) for s in data.get("business_type_stats") or []],
            top_clients=[ClientSummary.from_dict(c) for c in data.get("top_clients") or []],
        )
