"""
test_core_rules.py - Unit tests for core validation rules

Tests:
- check_amount / check_account / check_percentage argument validation
- check_balance, check_allowance, check_debt_payment against FakeView
- partial_payment_threshold rounding
- Exception hierarchy
"""

import pytest

from iou_ledger import (
    LedgerView, LedgerError,
    InsufficientBalance, InsufficientAllowance, InsufficientDebtAmount,
    check_amount, check_account, check_percentage,
    check_balance, check_allowance, check_debt_payment,
    partial_payment_threshold,
)
from tests.fake_view import FakeView


class TestCheckAmount:
    """Tests for amount validation."""

    def test_accepts_zero(self):
        assert check_amount(0) == 0

    def test_accepts_positive(self):
        assert check_amount(1_000_000) == 1_000_000

    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="non-negative"):
            check_amount(-1)

    def test_rejects_float(self):
        with pytest.raises(ValueError, match="must be int"):
            check_amount(10.0)

    def test_rejects_bool(self):
        """bool subclasses int but is not a quantity."""
        with pytest.raises(ValueError, match="must be int"):
            check_amount(True)

    def test_message_names_argument(self):
        with pytest.raises(ValueError, match="value"):
            check_amount(-5, "value")


class TestCheckAccount:
    """Tests for account identifier validation."""

    def test_accepts_string(self):
        assert check_account("alice") == "alice"

    def test_accepts_tuple(self):
        assert check_account(("org", 7)) == ("org", 7)

    def test_rejects_none(self):
        with pytest.raises(ValueError, match="cannot be None"):
            check_account(None)

    def test_rejects_unhashable(self):
        with pytest.raises(ValueError, match="hashable"):
            check_account(["alice"])


class TestCheckPercentage:
    """Tests for partial payment percentage validation."""

    @pytest.mark.parametrize("pct", [0, 1, 50, 100])
    def test_accepts_bounds(self, pct):
        assert check_percentage(pct) == pct

    def test_rejects_above_hundred(self):
        with pytest.raises(ValueError, match="<= 100"):
            check_percentage(101)

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            check_percentage(-10)


class TestBalanceRule:
    """check_balance rejects overdrafts only."""

    def test_exact_balance_ok(self):
        view = FakeView(balances={"alice": 100})
        check_balance(view, "alice", 100)

    def test_overdraft_rejected(self):
        view = FakeView(balances={"alice": 100})
        with pytest.raises(InsufficientBalance, match="alice"):
            check_balance(view, "alice", 101)

    def test_unknown_account_has_zero(self):
        view = FakeView()
        check_balance(view, "nobody", 0)
        with pytest.raises(InsufficientBalance):
            check_balance(view, "nobody", 1)


class TestAllowanceRule:
    """check_allowance compares against the (owner, spender) slot."""

    def test_within_allowance_ok(self):
        view = FakeView(allowances={("alice", "carol"): 25})
        check_allowance(view, "alice", "carol", 25)

    def test_above_allowance_rejected(self):
        view = FakeView(allowances={("alice", "carol"): 25})
        with pytest.raises(InsufficientAllowance, match="carol"):
            check_allowance(view, "alice", "carol", 26)

    def test_slot_is_ordered(self):
        """An allowance of carol over alice says nothing about alice over carol."""
        view = FakeView(allowances={("carol", "alice"): 25})
        with pytest.raises(InsufficientAllowance):
            check_allowance(view, "alice", "carol", 1)


class TestDebtPaymentRule:
    """check_debt_payment guards against over-payment."""

    def test_partial_payment_ok(self):
        check_debt_payment(FakeView(owed=70), 30)

    def test_full_payment_ok(self):
        check_debt_payment(FakeView(owed=70), 70)

    def test_over_payment_rejected(self):
        with pytest.raises(InsufficientDebtAmount, match="exceeds amount owed 70"):
            check_debt_payment(FakeView(owed=70), 71)

    def test_paid_debt_rejects_any_positive_payment(self):
        with pytest.raises(InsufficientDebtAmount):
            check_debt_payment(FakeView(owed=0), 1)


class TestPartialPaymentThreshold:
    """Threshold is percentage of face value, rounded up."""

    def test_exact(self):
        assert partial_payment_threshold(1000, 20) == 200

    def test_rounds_up(self):
        assert partial_payment_threshold(10, 15) == 2

    def test_zero_percent(self):
        assert partial_payment_threshold(1000, 0) == 0

    def test_full_percent(self):
        assert partial_payment_threshold(999, 100) == 999


class TestExceptionHierarchy:
    """All domain errors share LedgerError as base."""

    @pytest.mark.parametrize("exc", [
        InsufficientBalance, InsufficientAllowance, InsufficientDebtAmount,
    ])
    def test_subclass_of_ledger_error(self, exc):
        assert issubclass(exc, LedgerError)

    def test_ledger_error_is_not_value_error(self):
        assert not issubclass(LedgerError, ValueError)


class TestLedgerViewProtocol:
    """FakeView and IOU both satisfy the runtime-checkable protocol."""

    def test_fake_view_is_ledger_view(self):
        assert isinstance(FakeView(), LedgerView)

    def test_iou_is_ledger_view(self, issued_iou):
        assert isinstance(issued_iou, LedgerView)
