"""
members.py
Operations over one owner's member list: validate, add, edit, renew, delete, search.
Every function returns a new list and leaves its input as it was.
"""

from __future__ import annotations

import dataclasses
import math
import re
from datetime import date

import utils
from models import Member

PHONE_RE = re.compile(r"^[0-9]{10}$")
NAME_MIN, NAME_MAX = 2, 50

EDITABLE_FIELDS = ("name", "phone_number", "start_date", "duration", "price")


class MemberNotFound(KeyError):
    pass


class InvalidMember(ValueError):
    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def validate_member_inputs(name: str, phone_number: str | None, price, start_date: str, duration) -> list[str]:
    errors: list[str] = []
    name = str(name or "").strip()
    if not NAME_MIN <= len(name) <= NAME_MAX:
        errors.append(f"Name must be {NAME_MIN}-{NAME_MAX} characters.")
    if phone_number and not PHONE_RE.match(str(phone_number)):
        errors.append("Please enter a valid 10-digit phone number.")
    try:
        value = float(price)
        if not math.isfinite(value) or value < 0:
            errors.append("Price must be a finite number, 0 or more.")
    except (TypeError, ValueError):
        errors.append("Price must be numeric.")
    if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
        errors.append("Duration must be a whole number of days greater than 0.")
    try:
        utils.parse_iso(start_date)
    except utils.MembershipInputError:
        errors.append("Start date must be a valid ISO date (YYYY-MM-DD).")
    return errors


def create_member(name: str, start_date: str, duration: int, price: float, phone_number: str | None = None) -> Member:
    name = str(name or "").strip()
    phone_number = str(phone_number or "").strip() or None
    errors = validate_member_inputs(name, phone_number, price, start_date, duration)
    if errors:
        raise InvalidMember(errors)
    start = utils.parse_iso(start_date).isoformat()
    return Member(
        id=utils.new_member_id(),
        name=name,
        phone_number=phone_number,
        start_date=start,
        end_date=utils.calc_end_date(start, duration),
        duration=duration,
        price=float(price),
    )


def _index_of(members: list[Member], member_id: str) -> int:
    for i, m in enumerate(members):
        if m.id == member_id:
            return i
    raise MemberNotFound(member_id)


def get_member(members: list[Member], member_id: str) -> Member:
    return members[_index_of(members, member_id)]


def add_member(members: list[Member], member: Member) -> list[Member]:
    return [*members, member]


def update_member(members: list[Member], member_id: str, **fields) -> list[Member]:
    """
    Edit plain fields; end_date is recomputed, id and renewal history stay.
    """
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidMember([f"Field cannot be edited: {f}" for f in sorted(unknown)])

    i = _index_of(members, member_id)
    current = members[i]
    merged = {f: fields.get(f, getattr(current, f)) for f in EDITABLE_FIELDS}
    merged["phone_number"] = str(merged["phone_number"] or "").strip() or None

    errors = validate_member_inputs(
        merged["name"], merged["phone_number"], merged["price"], merged["start_date"], merged["duration"]
    )
    if errors:
        raise InvalidMember(errors)

    start = utils.parse_iso(merged["start_date"]).isoformat()
    updated = dataclasses.replace(
        current,
        name=str(merged["name"]).strip(),
        phone_number=merged["phone_number"],
        start_date=start,
        duration=merged["duration"],
        end_date=utils.calc_end_date(start, merged["duration"]),
        price=float(merged["price"]),
    )
    return [*members[:i], updated, *members[i + 1:]]


def renew(
    members: list[Member],
    member_id: str,
    start_date: str,
    duration: int,
    price: float,
    today: date | None = None,
) -> list[Member]:
    i = _index_of(members, member_id)
    renewed = utils.renew_member(members[i], start_date, duration, price, today=today)
    return [*members[:i], renewed, *members[i + 1:]]


def delete_member(members: list[Member], member_id: str) -> list[Member]:
    _index_of(members, member_id)
    return [m for m in members if m.id != member_id]


def search_members(members: list[Member], term: str) -> list[Member]:
    term = (term or "").strip().lower()
    if not term:
        return list(members)
    return [
        m for m in members
        if term in m.name.lower() or (m.phone_number and term in m.phone_number)
    ]


def sort_by_end_date(members: list[Member]) -> list[Member]:
    return sorted(members, key=lambda m: m.end_date)


def member_label(m: Member) -> str:
    """Select-box label; the short id keeps look-alike members apart."""
    return f"{m.name} ({m.phone_number or 'no phone'}) - ends {m.end_date} [{m.id[:8]}]"
