"""
models.py
Lightweight domain helpers (duration presets, dataclasses, JSON mapping).
"""

from __future__ import annotations
from dataclasses import dataclass, field

# Duration presets in days (used by the add / renew forms)
DURATION_OPTIONS = {
    "15 days": 15,
    "1 month": 30,
    "2 months": 60,
    "3 months": 90,
    "6 months": 180,
    "1 year": 365,
}

STATUS_ACTIVE = "active"
STATUS_ENDING_SOON = "ending-soon"
STATUS_EXPIRED = "expired"
STATUSES = (STATUS_ACTIVE, STATUS_ENDING_SOON, STATUS_EXPIRED)

VIEW_ALL = "all"
VIEWS = (VIEW_ALL,) + STATUSES


@dataclass(frozen=True)
class RenewalRecord:
    date: str  # day the renewal was performed
    duration: int
    price: float
    start_date: str
    end_date: str


@dataclass(frozen=True)
class Member:
    id: str
    name: str
    phone_number: str | None
    start_date: str
    end_date: str
    duration: int  # days, including carried-over days after a renewal
    price: float
    renewal_history: tuple[RenewalRecord, ...] = field(default_factory=tuple)


def renewal_to_dict(r: RenewalRecord) -> dict:
    return {
        "date": r.date,
        "duration": r.duration,
        "price": r.price,
        "startDate": r.start_date,
        "endDate": r.end_date,
    }


def renewal_from_dict(d: dict) -> RenewalRecord:
    return RenewalRecord(
        date=d["date"],
        duration=int(d["duration"]),
        price=float(d["price"]),
        start_date=d["startDate"],
        end_date=d["endDate"],
    )


def member_to_dict(m: Member) -> dict:
    """
    JSON shape shared by the HTTP API and the key-value store (camelCase keys).
    """
    return {
        "id": m.id,
        "name": m.name,
        "phoneNumber": m.phone_number,
        "startDate": m.start_date,
        "endDate": m.end_date,
        "duration": m.duration,
        "price": m.price,
        "renewalHistory": [renewal_to_dict(r) for r in m.renewal_history],
    }


def member_from_dict(d: dict) -> Member:
    return Member(
        id=d["id"],
        name=d["name"],
        phone_number=d.get("phoneNumber") or None,
        start_date=d["startDate"],
        end_date=d["endDate"],
        duration=int(d["duration"]),
        price=float(d["price"]),
        renewal_history=tuple(renewal_from_dict(r) for r in d.get("renewalHistory", [])),
    )
