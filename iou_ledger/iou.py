"""
iou.py - IOU Debt Tracker

=== IOU MODEL ===

An IOU records that an issuer owes a recipient some face value of the
fungible unit. Issuing the IOU mints the face value into the issuer's
balance; the debtor then repays the recipient in one or more payments:

    1. issue:    issuer balance += face value, record Outstanding
    2. pay_debt: debtor -> recipient transfer, amount_owed decreases
    3. final payment brings amount_owed to 0, record Paid (terminal)

=== STATE MACHINE ===

    Outstanding(owed > 0) --pay_debt(a), 0 < a <= owed--> Outstanding(owed - a)
                                                     \\-> Paid(owed == 0)

Over-payment is rejected with InsufficientDebtAmount; nothing leaves Paid.

=== INVARIANTS ===

    amount_paid + amount_owed == face_value
    paid  <=>  amount_owed == 0
    sum(balances) == minted  (issuance + deposits)

=== ATOMICITY ===

Every public mutating operation holds the contract's lock for its duration
and runs in an atomic section: stores and record are snapshotted, events are
buffered, and any exception restores the snapshot and drops the buffer.
Events reach the sink at commit; a sink failure rolls the operation back.
Reads take the same lock, so no reader sees a half-applied operation.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple
import threading

from .core import (
    Account, Balance, MINT_SOURCE, LedgerError,
    check_account, check_amount, check_debt_payment, check_percentage,
    partial_payment_threshold,
)
from .events import Deposit, EventSink, IssuanceRecord, LedgerEvent, NullSink, Transfer
from .stores import AllowanceStore, BalanceStore
from .transfer import TransferEngine


# =============================================================================
# ENUMS
# =============================================================================

class IouStatus(str, Enum):
    """Settlement state of an IOU record."""
    OUTSTANDING = "outstanding"     # Some amount still owed
    PAID = "paid"                   # Fully repaid, terminal


# =============================================================================
# RECORD
# =============================================================================

@dataclass(frozen=True, slots=True)
class IouRecord:
    """
    Immutable snapshot of a single debt instrument.

    Attributes:
        issuer: Account that issued the IOU and received its face value.
        recipient: Account the debt is repaid to.
        face_value: Cumulative face value issued. Fixed at issuance.
        amount_owed: Amount still outstanding.
        amount_paid: Cumulative amount repaid.
        paid: True once amount_owed reaches zero.
        partial_payment_percentage: Configured partial payment share, in percent.
    """
    issuer: Account
    recipient: Account
    face_value: Balance
    amount_owed: Balance
    amount_paid: Balance
    paid: bool
    partial_payment_percentage: int

    def __post_init__(self):
        if self.amount_owed < 0:
            raise ValueError(f"amount_owed cannot be negative, got {self.amount_owed}")
        if self.amount_paid + self.amount_owed != self.face_value:
            raise ValueError(
                f"amount_paid ({self.amount_paid}) + amount_owed ({self.amount_owed}) "
                f"!= face_value ({self.face_value})"
            )
        if self.paid != (self.amount_owed == 0):
            raise ValueError(f"paid={self.paid} inconsistent with amount_owed={self.amount_owed}")

    @classmethod
    def new(
        cls,
        issuer: Account,
        recipient: Account,
        amount_owed: Balance,
        partial_payment_percentage: int,
    ) -> IouRecord:
        """Record for a freshly issued IOU with nothing repaid yet."""
        return cls(
            issuer=issuer,
            recipient=recipient,
            face_value=amount_owed,
            amount_owed=amount_owed,
            amount_paid=0,
            paid=amount_owed == 0,
            partial_payment_percentage=partial_payment_percentage,
        )

    @property
    def status(self) -> IouStatus:
        return IouStatus.PAID if self.paid else IouStatus.OUTSTANDING

    def apply_payment(self, amount: Balance) -> IouRecord:
        """Return the record after a repayment of amount."""
        owed = self.amount_owed - amount
        return replace(
            self,
            amount_owed=owed,
            amount_paid=self.amount_paid + amount,
            paid=owed == 0,
        )


# =============================================================================
# CONTRACT
# =============================================================================

class IOU:
    """
    Ledger instance owning the balances, allowances and debt record of one IOU.

    Implements the LedgerView protocol (balance_of, allowance, amount).

    Every mutating method takes the calling account explicitly; the host
    supplies it. Rejected operations raise a LedgerError subclass (or
    ValueError for malformed arguments) and leave all state unchanged.

    Thread Safety:
        Mutating operations and reads are serialized by a per-instance lock.
        Separate IOU instances share no state.

    Example:
        log = EventLog()
        iou = IOU.issue("alice", 100, "bob", 20, sink=log)
        iou.pay_debt("alice", 30)
        iou.amount()            # 70
        iou.balance_of("bob")   # 30
    """

    def __init__(
        self,
        issuer: Account,
        amount_owed: Balance,
        recipient: Account,
        partial_payment_percentage: int,
        sink: Optional[EventSink] = None,
        name: str = "iou",
        verbose: bool = False,
        test_mode: bool = False,
    ):
        """
        Issue a new IOU.

        Args:
            issuer: Calling account; receives the minted face value
            amount_owed: Face value of the debt
            recipient: Account the debt is repaid to
            partial_payment_percentage: Partial payment share, 0-100
            sink: Receiver of committed events (default: discard)
            name: Label used in diagnostics
            verbose: Print a status line for every applied or rejected operation
            test_mode: Allow set_balance() calls
        """
        check_account(issuer, "issuer")
        check_account(recipient, "recipient")
        check_amount(amount_owed, "amount_owed")
        check_percentage(partial_payment_percentage)

        self.name = name
        self.verbose = verbose
        self._test_mode = test_mode
        self._sink: EventSink = sink if sink is not None else NullSink()
        self._lock = threading.RLock()
        self._pending: Optional[List[LedgerEvent]] = None

        self._balances = BalanceStore()
        self._allowances = AllowanceStore()
        self._engine = TransferEngine(self._balances, self._allowances, self._emit)
        self._minted: Balance = 0
        self._record = IouRecord.new(
            issuer, recipient, amount_owed, partial_payment_percentage
        )

        with self._atomic(f"issue {amount_owed} {issuer!r}→{recipient!r}"):
            self._engine.mint(issuer, amount_owed)
            self._minted += amount_owed
            self._emit(Transfer(MINT_SOURCE, issuer, amount_owed))
            self._emit(IssuanceRecord(issuer, recipient, amount_owed))

    @classmethod
    def issue(
        cls,
        issuer: Account,
        amount_owed: Balance,
        recipient: Account,
        partial_payment_percentage: int,
        **kwargs: Any,
    ) -> IOU:
        """Issue an IOU; keyword arguments are passed to the constructor."""
        return cls(issuer, amount_owed, recipient, partial_payment_percentage, **kwargs)

    # ========================================================================
    # LedgerView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    # Reads take the lock so they never observe a half-applied operation.
    # The lock is reentrant, so validation inside an atomic section can read too.

    def balance_of(self, account: Account) -> Balance:
        """Balance held by account (0 if it never held any)."""
        with self._lock:
            return self._balances.get(account)

    def allowance(self, owner: Account, spender: Account) -> Balance:
        """Amount spender may currently move out of owner's balance."""
        with self._lock:
            return self._allowances.get(owner, spender)

    def amount(self) -> Balance:
        """Amount still owed on the IOU."""
        return self.record.amount_owed

    # ========================================================================
    # OTHER READ ACCESSORS
    # ========================================================================

    def public_account_balance(self, caller: Account) -> Balance:
        """Balance of the calling account."""
        return self.balance_of(caller)

    @property
    def record(self) -> IouRecord:
        with self._lock:
            return self._record

    @property
    def issuer(self) -> Account:
        return self.record.issuer

    @property
    def recipient(self) -> Account:
        return self.record.recipient

    @property
    def paid(self) -> bool:
        return self.record.paid

    @property
    def amount_paid(self) -> Balance:
        return self.record.amount_paid

    @property
    def face_value(self) -> Balance:
        return self.record.face_value

    @property
    def partial_payment_percentage(self) -> int:
        return self.record.partial_payment_percentage

    def partial_payment_threshold(self) -> Balance:
        """Smallest partial payment the configured percentage implies (informational)."""
        record = self.record
        return partial_payment_threshold(
            record.face_value, record.partial_payment_percentage
        )

    @property
    def minted(self) -> Balance:
        """Cumulative quantity minted by issuance and deposits."""
        with self._lock:
            return self._minted

    def total_supply(self) -> Balance:
        """Sum of all balances."""
        with self._lock:
            return self._balances.total()

    def balances(self) -> Dict[Account, Balance]:
        """Copy of every recorded balance."""
        with self._lock:
            return self._balances.snapshot()

    def allowances(self) -> Dict[Tuple[Account, Account], Balance]:
        """Copy of every recorded allowance, keyed by (owner, spender)."""
        with self._lock:
            return self._allowances.snapshot()

    def verify_conservation(self) -> Dict[str, Any]:
        """
        Verify the conservation law and the debt record invariants.

        Returns:
            Dict with keys:
            - 'valid': bool - True if every check holds
            - 'supply': total of all balances
            - 'minted': cumulative issuance plus deposits
            - 'difference': supply - minted
            - 'debt_consistent': bool - amount_paid + amount_owed == face_value
              and paid agrees with amount_owed

        Example:
            result = iou.verify_conservation()
            assert result['valid'], result
        """
        with self._lock:
            supply = self._balances.total()
            minted = self._minted
            record = self._record
        debt_consistent = (
            record.amount_paid + record.amount_owed == record.face_value
            and record.paid == (record.amount_owed == 0)
        )
        return {
            'valid': supply == minted and debt_consistent,
            'supply': supply,
            'minted': minted,
            'difference': supply - minted,
            'debt_consistent': debt_consistent,
        }

    # ========================================================================
    # OPERATIONS (Mutating)
    # ========================================================================

    def deposit(self, caller: Account, amount: Balance) -> None:
        """
        Mint amount into the caller's balance.

        Deposits increase supply explicitly; no other balance changes.
        Emits Deposit(caller, amount).
        """
        with self._atomic(f"deposit {amount} → {caller!r}"):
            self._engine.mint(caller, amount)
            self._minted += amount
            self._emit(Deposit(caller, amount))

    def pay_debt(self, caller: Account, amount: Balance) -> IouRecord:
        """
        Repay amount of the debt from the caller's balance to the recipient.

        The debt counters and the balance transfer are applied together or
        not at all.

        Returns:
            The updated IouRecord

        Raises:
            ValueError: If amount is malformed or zero
            InsufficientDebtAmount: If amount exceeds the amount owed
            InsufficientBalance: If the caller cannot cover amount
        """
        with self._atomic(f"pay_debt {amount} {caller!r}→{self._record.recipient!r}"):
            check_amount(amount, "amount")
            if amount == 0:
                raise ValueError("Payment amount must be positive")
            check_debt_payment(self, amount)
            self._engine.transfer(caller, self._record.recipient, amount)
            self._record = self._record.apply_payment(amount)
        return self._record

    def transfer_with_allowance(
        self,
        source: Account,
        dest: Account,
        value: Balance,
        spender: Account,
    ) -> None:
        """
        Move value from source to dest, spending spender's allowance over source.

        Raises:
            InsufficientAllowance: If allowance(source, spender) < value
            InsufficientBalance: If source holds less than value
        """
        with self._atomic(f"transfer_with_allowance {value} {source!r}→{dest!r} by {spender!r}"):
            self._engine.transfer_with_allowance(source, dest, value, spender)

    def approve(self, owner: Account, spender: Account, value: Balance) -> None:
        """Authorize spender to move up to value out of owner's balance."""
        with self._atomic(f"approve {value} {owner!r}→{spender!r}"):
            check_account(owner, "owner")
            check_account(spender, "spender")
            self._allowances.set(owner, spender, value)

    def set_balance(self, account: Account, value: Balance) -> None:
        """
        Set an account balance directly.

        WARNING: Bypasses the transfer engine and is only available in test
        mode. The minted total is adjusted so conservation still holds.

        Raises:
            LedgerError: If called when test_mode is False
        """
        if not self._test_mode:
            raise LedgerError(
                "set_balance() is disabled in production mode. "
                "Use deposit() or pay_debt() to modify balances. "
                "Set test_mode=True when creating the IOU for testing."
            )
        with self._atomic(f"set_balance {account!r} = {value}"):
            check_account(account)
            delta = check_amount(value, "balance") - self._balances.get(account)
            self._balances.set(account, value)
            self._minted += delta

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _emit(self, event: LedgerEvent) -> None:
        if self._pending is None:
            self._sink.emit(event)
        else:
            self._pending.append(event)

    @contextmanager
    def _atomic(self, description: str) -> Iterator[None]:
        """
        Run the enclosed block as one indivisible operation.

        Holds the lock, snapshots every store, buffers events. On any
        exception the snapshot is restored, buffered events are dropped and
        the exception propagates. On success buffered events are flushed to
        the sink; a sink failure during the flush rolls the operation back
        like any other failure. Events the sink accepted before it failed
        are not retracted.
        """
        with self._lock:
            balances = self._balances.snapshot()
            allowances = self._allowances.snapshot()
            record = self._record
            minted = self._minted
            pending: List[LedgerEvent] = []
            self._pending = pending
            try:
                yield
                self._pending = None
                for event in pending:
                    self._sink.emit(event)
            except Exception as exc:
                self._balances.restore(balances)
                self._allowances.restore(allowances)
                self._record = record
                self._minted = minted
                if self.verbose:
                    print(f"✗ REJECTED [{self.name}]: {description}: {exc}")
                raise
            finally:
                self._pending = None

            if self.verbose:
                print(f"✓ APPLIED [{self.name}]: {description}")

    def clone(self, sink: Optional[EventSink] = None) -> IOU:
        """
        Create a fully independent copy of this IOU.

        The clone gets its own stores, lock and sink (default: discard), so
        operations on either instance never affect the other.
        """
        with self._lock:
            cloned = IOU.__new__(IOU)
            cloned.name = self.name
            cloned.verbose = self.verbose
            cloned._test_mode = self._test_mode
            cloned._sink = sink if sink is not None else NullSink()
            cloned._lock = threading.RLock()
            cloned._pending = None
            cloned._balances = BalanceStore()
            cloned._balances.restore(self._balances.snapshot())
            cloned._allowances = AllowanceStore()
            cloned._allowances.restore(self._allowances.snapshot())
            cloned._engine = TransferEngine(cloned._balances, cloned._allowances, cloned._emit)
            cloned._minted = self._minted
            cloned._record = self._record
            return cloned

    def __repr__(self) -> str:
        r = self.record
        return (
            f"IOU({self.name}: {r.issuer!r}→{r.recipient!r}, "
            f"owed={r.amount_owed}, paid={r.amount_paid}/{r.face_value}, {r.status.value})"
        )
