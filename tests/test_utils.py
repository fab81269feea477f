# tests/test_utils.py
from datetime import date, datetime, timedelta

import pytest

import utils
from models import Member, RenewalRecord


def _ending(end: date) -> Member:
    return Member(
        id=f"m-{end.isoformat()}",
        name="Test Member",
        phone_number=None,
        start_date=(end - timedelta(days=30)).isoformat(),
        end_date=end.isoformat(),
        duration=30,
        price=100.0,
    )


@pytest.mark.parametrize("start,days", [("2024-01-01", 1), ("2024-02-28", 2), ("2023-12-15", 365)])
def test_end_date_is_start_plus_duration(start, days):
    end = utils.calc_end_date(start, days)
    assert utils.days_between(end, start) == days


def test_end_date_crosses_leap_day():
    assert utils.calc_end_date("2024-02-28", 2) == "2024-03-01"


@pytest.mark.parametrize("bad", [0, -5, 1.5, True])
def test_end_date_rejects_bad_duration(bad):
    with pytest.raises(utils.MembershipInputError):
        utils.calc_end_date("2024-01-01", bad)


@pytest.mark.parametrize("bad", ["2024-13-01", "01/01/2024", "", None])
def test_parse_iso_rejects_bad_dates(bad):
    with pytest.raises(utils.MembershipInputError):
        utils.parse_iso(bad)


def test_renewal_example_carries_remaining_days(january_member, today):
    renewed = utils.renew_member(january_member, "2024-01-20", 30, 500, today=today)

    assert utils.remaining_days_on_renewal(january_member, "2024-01-20") == 11
    assert renewed.duration == 41
    assert renewed.start_date == "2024-01-20"
    assert renewed.end_date == "2024-03-01"
    assert renewed.price == 500
    assert renewed.id == january_member.id
    assert renewed.renewal_history == (
        RenewalRecord(date="2024-01-20", duration=30, price=500.0, start_date="2024-01-20", end_date="2024-03-01"),
    )


@pytest.mark.parametrize("start", ["2024-01-31", "2024-02-10"])
def test_renewal_on_or_after_end_adds_nothing(january_member, start):
    renewed = utils.renew_member(january_member, start, 30, 300)
    assert utils.remaining_days_on_renewal(january_member, start) == 0
    assert renewed.duration == 30
    assert renewed.end_date == utils.calc_end_date(start, 30)


def test_renewal_history_is_append_only(january_member, today):
    first = utils.renew_member(january_member, "2024-01-20", 30, 500, today=today)
    second = utils.renew_member(first, "2024-02-15", 60, 900, today=date(2024, 2, 15))

    assert len(january_member.renewal_history) == 0
    assert len(first.renewal_history) == 1
    assert len(second.renewal_history) == 2
    assert second.renewal_history[0] == first.renewal_history[0]
    # 2024-03-01 - 2024-02-15 = 15 days carried over
    assert second.duration == 75
    assert second.end_date == "2024-04-30"


def test_renewal_leaves_input_untouched(january_member):
    utils.renew_member(january_member, "2024-01-20", 30, 500)
    assert january_member.end_date == "2024-01-31"
    assert january_member.duration == 30


@pytest.mark.parametrize("duration,price", [(0, 100), (30, -1), (30, "abc")])
def test_renewal_rejects_bad_input(january_member, duration, price):
    with pytest.raises(utils.MembershipInputError):
        utils.renew_member(january_member, "2024-01-20", duration, price)


def test_classify_examples(today):
    assert utils.classify(_ending(today + timedelta(days=3)), today) == "ending-soon"
    assert utils.classify(_ending(today - timedelta(days=1)), today) == "expired"
    assert utils.classify(_ending(today + timedelta(days=30)), today) == "active"


@pytest.mark.parametrize(
    "offset,expected",
    [(8, "active"), (7, "ending-soon"), (1, "ending-soon"), (0, "expired"), (-10, "expired")],
)
def test_classify_boundaries(today, offset, expected):
    member = _ending(today + timedelta(days=offset))
    assert utils.days_remaining(member, today) == offset
    assert utils.classify(member, today) == expected


def test_filter_members_partitions(today):
    rows = [_ending(today + timedelta(days=d)) for d in (-3, 0, 2, 7, 8, 40)]
    active = utils.filter_members(rows, "active", today)
    soon = utils.filter_members(rows, "ending-soon", today)
    expired = utils.filter_members(rows, "expired", today)

    assert len(active) == 2 and len(soon) == 2 and len(expired) == 2
    assert {m.id for m in active + soon + expired} == {m.id for m in rows}
    assert utils.filter_members(rows, "all", today) == rows


def test_filter_members_unknown_view(today):
    with pytest.raises(utils.MembershipInputError):
        utils.filter_members([], "frozen", today)


def test_members_frame_and_csv(january_member, today):
    df = utils.members_to_frame([january_member], today)
    assert list(df.columns) == utils.MEMBER_COLUMNS
    assert df.loc[0, "days_remaining"] == 11
    assert df.loc[0, "status"] == "active"

    csv = utils.members_to_csv_bytes([january_member], today).decode("utf-8")
    assert csv.splitlines()[0].startswith("id,name,phone_number")
    assert "Ahmed Hassan" in csv


def test_revenue_by_month(january_member):
    m = utils.renew_member(january_member, "2024-01-20", 30, 500, today=date(2024, 1, 20))
    m = utils.renew_member(m, "2024-01-25", 30, 250, today=date(2024, 1, 25))
    m = utils.renew_member(m, "2024-03-05", 30, 400, today=date(2024, 3, 5))

    df = utils.renewal_revenue_by_month([m])
    assert df["month"].tolist() == ["2024-03", "2024-01"]
    assert df["revenue"].tolist() == [400.0, 750.0]


def test_revenue_by_month_empty(january_member):
    df = utils.renewal_revenue_by_month([january_member])
    assert df.empty
    assert list(df.columns) == ["month", "revenue"]


def test_sample_members_cover_each_status(today):
    statuses = [utils.classify(m, today) for m in utils.sample_members(today)]
    assert statuses == ["ending-soon", "active", "expired"]


@pytest.mark.parametrize("bad", ["2024-1-5", "20240105", "2024-W01-1", "2024-01-05T00:00"])
def test_parse_iso_requires_zero_padded_dates(bad):
    with pytest.raises(utils.MembershipInputError):
        utils.parse_iso(bad)


def test_parse_iso_drops_time_of_day():
    assert utils.parse_iso(datetime(2024, 1, 20, 18, 30)) == date(2024, 1, 20)
    assert utils.days_between("2024-01-31", datetime(2024, 1, 20, 23, 59)) == 11


@pytest.mark.parametrize("price", [float("nan"), float("inf"), "inf", "-inf", "nan"])
def test_renewal_rejects_non_finite_price(january_member, price):
    with pytest.raises(utils.MembershipInputError):
        utils.renew_member(january_member, "2024-01-20", 30, price)


def test_duration_options_keep_carried_over_duration():
    options = utils.duration_options(41)
    assert list(options.items())[0] == ("41 days (current)", 41)
    assert len(options) == len(utils.DURATION_OPTIONS) + 1


@pytest.mark.parametrize("current", [None, 30, 365])
def test_duration_options_presets_only(current):
    assert utils.duration_options(current) == utils.DURATION_OPTIONS
