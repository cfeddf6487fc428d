"""
host.py - Inbound call dispatch

The hosting environment identifies the calling account and names the message
to run. ContractHost looks the message up in a dict of handler functions,
runs it against the IOU and reports the outcome as a CallResult instead of
raising, so a rejected call never escapes as an exception. Arguments are
bound against the handler signature first; a wrong argument count is a
rejected call, not a crash.

Handlers are plain functions: (iou, caller, *args) -> value.
"""

from __future__ import annotations
from dataclasses import dataclass
import inspect
from typing import Any, Callable, Dict, Optional

from .core import Account, Balance, ExecuteResult, LedgerError
from .iou import IOU


class UnknownMessage(KeyError):
    """Raised when a call names a message no handler is registered for."""
    pass


@dataclass(frozen=True, slots=True)
class CallResult:
    """
    Outcome of one dispatched call.

    Attributes:
        status: APPLIED or REJECTED
        value: Return value of the handler (None when rejected)
        error: The exception that rejected the call (LedgerError, ValueError,
            or TypeError for a wrong number of arguments)
    """
    status: ExecuteResult
    value: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == ExecuteResult.APPLIED


# ============================================================================
# HANDLER FUNCTIONS
# ============================================================================

def handle_deposit(iou: IOU, caller: Account, amount: Balance) -> None:
    """Deposit into the caller's own balance."""
    return iou.deposit(caller, amount)


def handle_pay_debt(iou: IOU, caller: Account, amount: Balance):
    """Repay part of the debt from the caller's balance."""
    return iou.pay_debt(caller, amount)


def handle_approve(iou: IOU, caller: Account, spender: Account, value: Balance) -> None:
    """Authorize spender over the caller's balance."""
    return iou.approve(caller, spender, value)


def handle_transfer_from(
    iou: IOU,
    caller: Account,
    source: Account,
    dest: Account,
    value: Balance,
) -> None:
    """Delegated transfer; the caller spends its allowance over source."""
    return iou.transfer_with_allowance(source, dest, value, caller)


def handle_amount(iou: IOU, caller: Account) -> Balance:
    return iou.amount()


def handle_balance_of(iou: IOU, caller: Account, account: Account) -> Balance:
    return iou.balance_of(account)


def handle_public_account_balance(iou: IOU, caller: Account) -> Balance:
    return iou.public_account_balance(caller)


def handle_allowance(iou: IOU, caller: Account, owner: Account, spender: Account) -> Balance:
    return iou.allowance(owner, spender)


# ============================================================================
# HANDLER REGISTRY
# ============================================================================

DEFAULT_HANDLERS: Dict[str, Callable[..., Any]] = {
    "deposit": handle_deposit,
    "pay_debt": handle_pay_debt,
    "approve": handle_approve,
    "transfer_from": handle_transfer_from,
    "amount": handle_amount,
    "balance_of": handle_balance_of,
    "public_account_balance": handle_public_account_balance,
    "allowance": handle_allowance,
}


class ContractHost:
    """
    Dispatches caller-identified messages to an IOU.

    Example:
        host = ContractHost(iou)
        result = host.call("alice", "pay_debt", 30)
        if not result.ok:
            print(result.error)
    """

    def __init__(self, iou: IOU, verbose: bool = False):
        self.iou = iou
        self.verbose = verbose
        self._handlers: Dict[str, Callable[..., Any]] = dict(DEFAULT_HANDLERS)

    def register(self, message: str, handler: Callable[..., Any]) -> None:
        """Register or replace the handler for a message name."""
        self._handlers[message] = handler

    def messages(self):
        return sorted(self._handlers)

    def call(self, caller: Account, message: str, *args: Any) -> CallResult:
        """
        Run message on behalf of caller.

        Returns:
            CallResult with status APPLIED and the handler's return value, or
            status REJECTED and the error that rejected the call

        Raises:
            UnknownMessage: If no handler is registered for message
        """
        handler = self._handlers.get(message)
        if handler is None:
            raise UnknownMessage(message)
        try:
            inspect.signature(handler).bind(self.iou, caller, *args)
        except TypeError as exc:
            return self._reject(message, caller, exc)
        try:
            value = handler(self.iou, caller, *args)
        except (LedgerError, ValueError) as exc:
            return self._reject(message, caller, exc)
        if self.verbose:
            print(f"✓ APPLIED: {message} from {caller!r}")
        return CallResult(ExecuteResult.APPLIED, value=value)

    def _reject(self, message: str, caller: Account, exc: Exception) -> CallResult:
        if self.verbose:
            print(f"✗ REJECTED: {message} from {caller!r}: {exc}")
        return CallResult(ExecuteResult.REJECTED, error=exc)
