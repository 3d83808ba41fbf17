"""
Tests for monthly revenue aggregation.

Covers:
- Active-contract window
- Monthly amount derivation
- Developer/recruiter split
- Team and group aggregation
"""

from datetime import datetime, timezone
from decimal import Decimal

from conftest import NOW, make_contract

from salesnet.services.revenue import (
    active_contracts,
    add_months,
    aggregate_revenue,
    is_active,
    month_window,
    personal_revenue,
    user_share,
)


def _months_ago(months: int) -> datetime:
    return add_months(NOW, -months)


class TestAddMonths:
    def test_clamps_day(self):
        value = datetime(2026, 1, 31, tzinfo=timezone.utc)
        assert add_months(value, 1) == datetime(2026, 2, 28, tzinfo=timezone.utc)

    def test_crosses_year(self):
        value = datetime(2025, 11, 10, tzinfo=timezone.utc)
        assert add_months(value, 3) == datetime(2026, 2, 10, tzinfo=timezone.utc)

    def test_negative(self):
        assert add_months(NOW, -2) == datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestActiveWindow:
    def test_month_window(self):
        start, end = month_window(NOW)
        assert start == datetime(2026, 5, 1, tzinfo=timezone.utc)
        assert end == datetime(2026, 6, 1, tzinfo=timezone.utc)

    def test_two_months_ago_duration_three_is_active(self):
        contract = make_contract("c1", "a", "3000", duration=3, date=_months_ago(2))
        assert is_active(contract, NOW)

    def test_two_months_ago_duration_one_is_not_active(self):
        contract = make_contract("c1", "a", "1000", duration=1, date=_months_ago(2))
        assert not is_active(contract, NOW)

    def test_starting_later_this_month_is_active(self):
        contract = make_contract("c1", "a", "1000", date=datetime(2026, 5, 30, tzinfo=timezone.utc))
        assert is_active(contract, NOW)

    def test_starting_next_month_is_not_active(self):
        contract = make_contract("c1", "a", "1000", date=datetime(2026, 6, 1, tzinfo=timezone.utc))
        assert not is_active(contract, NOW)

    def test_zero_duration_counts_as_one_month(self):
        contract = make_contract("c1", "a", "1000", duration=0)
        assert is_active(contract, NOW)
        assert contract.monthly_amount == Decimal("1000")

    def test_active_contracts_filters(self):
        contracts = [
            make_contract("now", "a", "1000"),
            make_contract("old", "a", "1000", date=_months_ago(6)),
        ]
        assert [c.id for c in active_contracts(contracts, NOW)] == ["now"]


class TestMonthlyAmount:
    def test_derived_from_gross(self):
        contract = make_contract("c1", "a", "12000", duration=12)
        assert contract.monthly_amount == Decimal("1000")

    def test_explicit_monthly_margin_wins(self):
        contract = make_contract("c1", "a", "12000", duration=12, monthly="800")
        assert contract.monthly_amount == Decimal("800")

    def test_zero_monthly_margin_is_ignored(self):
        contract = make_contract("c1", "a", "6000", duration=6, monthly="0")
        assert contract.monthly_amount == Decimal("1000")


class TestSplit:
    def test_split_contract_halves(self):
        contract = make_contract("c1", "dev", "1000", recruiter_id="rec")
        assert user_share(contract, "dev") == Decimal("500")
        assert user_share(contract, "rec") == Decimal("500")

    def test_sole_developer_gets_everything(self):
        contract = make_contract("c1", "dev", "1000")
        assert user_share(contract, "dev") == Decimal("1000")

    def test_outsider_gets_nothing(self):
        contract = make_contract("c1", "dev", "1000", recruiter_id="rec")
        assert user_share(contract, "other") == Decimal("0")

    def test_same_user_both_roles_gets_one_share(self):
        contract = make_contract("c1", "dev", "1000", recruiter_id="dev")
        assert personal_revenue("dev", [contract]) == Decimal("500")

    def test_split_is_not_double_counted_in_group(self):
        contract = make_contract("c1", "leader", "1000", recruiter_id="member")
        summary = aggregate_revenue("leader", [contract], NOW, ["member"])
        assert summary.personal == Decimal("500")
        assert summary.team == Decimal("500")
        assert summary.group == Decimal("1000")


class TestAggregateRevenue:
    def test_personal_team_group(self):
        contracts = [
            make_contract("c1", "a", "1000"),
            make_contract("c2", "b", "2000"),
            make_contract("c3", "c", "3000"),
            make_contract("c4", "z", "9000"),
        ]
        summary = aggregate_revenue("a", contracts, NOW, ["b", "c"])
        assert summary.personal == Decimal("1000")
        assert summary.team == Decimal("5000")
        assert summary.group == Decimal("6000")
        assert summary.per_member == {"b": Decimal("2000"), "c": Decimal("3000")}

    def test_self_in_team_ids_is_skipped(self):
        contracts = [make_contract("c1", "a", "1000")]
        summary = aggregate_revenue("a", contracts, NOW, ["a"])
        assert summary.team == Decimal("0")
        assert summary.group == Decimal("1000")

    def test_inactive_contracts_ignored(self):
        contracts = [make_contract("c1", "a", "1000", date=_months_ago(3))]
        summary = aggregate_revenue("a", contracts, NOW)
        assert summary.personal == Decimal("0")
