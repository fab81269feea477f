"""
utils.py
Dates, membership period / renewal / status calculators, exports, sample data.
"""

from __future__ import annotations

import dataclasses
import math
import re
import uuid
from datetime import date, datetime, timedelta
from typing import Iterable

import pandas as pd

from config import ENDING_SOON_DAYS
from models import (
    DURATION_OPTIONS,
    Member,
    RenewalRecord,
    STATUS_ACTIVE,
    STATUS_ENDING_SOON,
    STATUS_EXPIRED,
    VIEW_ALL,
    VIEWS,
)


class MembershipInputError(ValueError):
    """Raised when a calculator gets a bad date, duration or price."""


ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def today_iso() -> str:
    return date.today().isoformat()


def parse_iso(d: str | date) -> date:
    if isinstance(d, datetime):
        return d.date()
    if isinstance(d, date):
        return d
    if not isinstance(d, str) or not ISO_DATE_RE.match(d):
        raise MembershipInputError(f"Invalid date {d!r}, expected YYYY-MM-DD.")
    try:
        return date.fromisoformat(d)
    except ValueError:
        raise MembershipInputError(f"Invalid date {d!r}, expected YYYY-MM-DD.") from None


def days_between(later: str | date, earlier: str | date) -> int:
    """
    Signed whole-day difference later - earlier.
    """
    return (parse_iso(later) - parse_iso(earlier)).days


def _check_duration(duration_days) -> int:
    if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days <= 0:
        raise MembershipInputError("Duration must be a whole number of days greater than 0.")
    return duration_days


def _check_price(price) -> float:
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise MembershipInputError("Price must be numeric.") from None
    if not math.isfinite(value) or value < 0:
        raise MembershipInputError("Price must be a finite number, 0 or more.")
    return value


def calc_end_date(start_date_iso: str | date, duration_days: int) -> str:
    start = parse_iso(start_date_iso)
    end = start + timedelta(days=_check_duration(duration_days))
    return end.isoformat()


def remaining_days_on_renewal(member: Member, new_start_date: str | date) -> int:
    """
    Days the current period still has left measured from new_start_date (0 if already over).
    """
    return max(0, days_between(member.end_date, new_start_date))


def renew_member(
    member: Member,
    new_start_date: str | date,
    new_duration: int,
    new_price: float,
    today: date | None = None,
) -> Member:
    """
    Start a new period on new_start_date, carrying over unused days from the current one.

    The returned member has start/end/duration/price replaced and one RenewalRecord
    appended; the input member is left untouched.
    """
    start = parse_iso(new_start_date)
    duration = _check_duration(new_duration)
    price = _check_price(new_price)

    remaining = remaining_days_on_renewal(member, start)
    total_duration = duration + remaining
    new_end = calc_end_date(start, total_duration)

    record = RenewalRecord(
        date=(today or date.today()).isoformat(),
        duration=duration,
        price=price,
        start_date=start.isoformat(),
        end_date=new_end,
    )
    return dataclasses.replace(
        member,
        start_date=start.isoformat(),
        end_date=new_end,
        duration=total_duration,
        price=price,
        renewal_history=member.renewal_history + (record,),
    )


def days_remaining(member: Member, today: date | None = None) -> int:
    return days_between(member.end_date, today or date.today())


def classify(member: Member, today: date | None = None) -> str:
    left = days_remaining(member, today)
    if left > ENDING_SOON_DAYS:
        return STATUS_ACTIVE
    if left > 0:
        return STATUS_ENDING_SOON
    return STATUS_EXPIRED


def filter_members(members: Iterable[Member], view: str = VIEW_ALL, today: date | None = None) -> list[Member]:
    if view not in VIEWS:
        raise MembershipInputError(f"Unknown view {view!r}, expected one of {', '.join(VIEWS)}.")
    today = today or date.today()
    if view == VIEW_ALL:
        return list(members)
    return [m for m in members if classify(m, today) == view]


def new_member_id() -> str:
    return uuid.uuid4().hex


def duration_options(current: int | None = None) -> dict[str, int]:
    """
    Duration presets for a form, with the member's current duration first when it is not
    a preset (renewals carry days over, e.g. 41).
    """
    if current is None or current in DURATION_OPTIONS.values():
        return dict(DURATION_OPTIONS)
    return {f"{current} days (current)": current, **DURATION_OPTIONS}


# ---------- Exports ----------

MEMBER_COLUMNS = [
    "id", "name", "phone_number", "start_date", "end_date", "duration", "price",
    "renewals", "days_remaining", "status",
]


def members_to_frame(members: Iterable[Member], today: date | None = None) -> pd.DataFrame:
    today = today or date.today()
    rows = [
        {
            "id": m.id,
            "name": m.name,
            "phone_number": m.phone_number,
            "start_date": m.start_date,
            "end_date": m.end_date,
            "duration": m.duration,
            "price": m.price,
            "renewals": len(m.renewal_history),
            "days_remaining": days_remaining(m, today),
            "status": classify(m, today),
        }
        for m in members
    ]
    return pd.DataFrame(rows, columns=MEMBER_COLUMNS)


def members_to_csv_bytes(members: Iterable[Member], today: date | None = None) -> bytes:
    df = members_to_frame(members, today)
    return df.to_csv(index=False).encode("utf-8")


def renewal_revenue_by_month(members: Iterable[Member]) -> pd.DataFrame:
    rows = [
        {"month": r.date[:7], "revenue": r.price}
        for m in members
        for r in m.renewal_history
    ]
    df = pd.DataFrame(rows)
    if df.empty:
        return pd.DataFrame(columns=["month", "revenue"])
    df = df.groupby("month", as_index=False)["revenue"].sum()
    return df.sort_values("month", ascending=False).reset_index(drop=True)


def sample_members(today: date | None = None) -> list[Member]:
    """
    Three demo members: one ending soon, one active on a longer plan, one expired.
    """
    today = today or date.today()

    def _member(name: str, phone: str | None, start: date, duration: int, price: float) -> Member:
        return Member(
            id=new_member_id(),
            name=name,
            phone_number=phone,
            start_date=start.isoformat(),
            end_date=calc_end_date(start, duration),
            duration=duration,
            price=price,
        )

    return [
        _member("Ahmed Hassan", "0100000001", today - timedelta(days=25), 30, 3000.0),
        _member("Mona Ali", "0100000002", today - timedelta(days=10), 90, 8000.0),
        _member("Omar Samy", None, today - timedelta(days=60), 30, 3000.0),
    ]
