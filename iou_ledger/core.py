"""
Core types and pure functions for the IOU ledger.

This module provides the foundational pieces the rest of the package builds on:
1. Protocols: LedgerView for read-only ledger access
2. Enums: ExecuteResult for host-facing call outcomes
3. Exceptions: LedgerError and the domain-specific error types
4. Type aliases: Account, Balance
5. Validation rules: Pure functions that reject bad amounts, overdrafts,
   overspent allowances and over-payments of a debt

All functions in this module are pure and operate on read-only views.
No function can mutate ledger state directly.
"""

from __future__ import annotations
from enum import Enum
from typing import Hashable, Optional, Protocol, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# Source of a mint-style Transfer event (issuance has no debited account).
MINT_SOURCE = None

# Upper bound of the partial payment percentage configured at issuance.
MAX_PERCENTAGE = 100


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Opaque participant identifier. Anything hashable works; tests use strings.
Account = Hashable

# Non-negative integer quantity of the fungible unit.
Balance = int


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class LedgerView(Protocol):
    """
    Read-only interface to ledger state.

    Validation rules accept a LedgerView so they can inspect balances,
    allowances and the outstanding debt without the ability to modify them.
    The IOU contract implements this protocol; tests use FakeView.
    """

    def balance_of(self, account: Account) -> Balance:
        """Return the balance held by account (0 if unknown)."""
        ...

    def allowance(self, owner: Account, spender: Account) -> Balance:
        """Return how much spender may move out of owner's balance (0 if unset)."""
        ...

    def amount(self) -> Balance:
        """Return the amount still owed on the IOU."""
        ...


# ============================================================================
# ENUMS
# ============================================================================

class ExecuteResult(Enum):
    """
    Outcome of a call dispatched through the contract host.

    APPLIED: The operation was validated and all of its effects were committed.
    REJECTED: The operation failed validation; no state was changed and no
              event was emitted.
    """
    APPLIED = "applied"
    REJECTED = "rejected"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class InsufficientBalance(LedgerError):
    """Raised when a transfer would drive the source balance below zero."""
    pass


class InsufficientAllowance(LedgerError):
    """Raised when a delegated transfer exceeds the amount the owner authorized."""
    pass


class InsufficientDebtAmount(LedgerError):
    """Raised when a repayment exceeds the amount still owed on the IOU."""
    pass


# ============================================================================
# VALIDATION RULES
# ============================================================================

def check_amount(value: Balance, what: str = "amount") -> Balance:
    """
    Validate that value is a non-negative integer quantity.

    bool is rejected even though it subclasses int.

    Returns:
        The value unchanged, so callers can validate inline.

    Raises:
        ValueError: If value is not an int or is negative.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{what} must be non-negative, got {value}")
    return value


def check_account(account: Optional[Account], what: str = "account") -> Account:
    """Reject None and unhashable account identifiers."""
    if account is None:
        raise ValueError(f"{what} cannot be None")
    try:
        hash(account)
    except TypeError:
        raise ValueError(f"{what} must be hashable, got {type(account).__name__}") from None
    return account


def check_balance(view: LedgerView, source: Account, value: Balance) -> None:
    """
    Enforce that source holds at least value.

    Raises:
        InsufficientBalance: If balance_of(source) < value.
    """
    available = view.balance_of(source)
    if available < value:
        raise InsufficientBalance(
            f"{source!r}: balance {available} < transfer {value}"
        )


def check_allowance(
    view: LedgerView,
    owner: Account,
    spender: Account,
    value: Balance,
) -> None:
    """
    Enforce that spender is authorized to move value out of owner's balance.

    Raises:
        InsufficientAllowance: If allowance(owner, spender) < value.
    """
    authorized = view.allowance(owner, spender)
    if authorized < value:
        raise InsufficientAllowance(
            f"{spender!r} on behalf of {owner!r}: allowance {authorized} < transfer {value}"
        )


def check_debt_payment(view: LedgerView, amount: Balance) -> None:
    """
    Enforce that a repayment does not exceed the outstanding debt.

    Raises:
        InsufficientDebtAmount: If amount > view.amount().
    """
    owed = view.amount()
    if amount > owed:
        raise InsufficientDebtAmount(
            f"payment {amount} exceeds amount owed {owed}"
        )


def check_percentage(percentage: int) -> int:
    """Validate a partial payment percentage (integer in [0, 100])."""
    check_amount(percentage, "partial_payment_percentage")
    if percentage > MAX_PERCENTAGE:
        raise ValueError(
            f"partial_payment_percentage must be <= {MAX_PERCENTAGE}, got {percentage}"
        )
    return percentage


def partial_payment_threshold(face_value: Balance, percentage: int) -> Balance:
    """
    Smallest partial payment implied by a percentage of the face value.

    Rounds up so a threshold is never below the configured share.

    Example:
        partial_payment_threshold(1000, 20) -> 200
        partial_payment_threshold(10, 15)   -> 2
    """
    return -(-face_value * percentage // MAX_PERCENTAGE)
