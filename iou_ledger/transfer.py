"""
transfer.py - Validated balance movements

The TransferEngine is the only writer of the balance and allowance stores
while value moves. Every operation follows the same protocol:

    1. Validate with the pure rules from core (no mutation)
    2. Apply all writes
    3. Emit the resulting event

Because validation completes before the first write, a rejected transfer
leaves both stores untouched. Serialization across operations is provided
by the owning IOU contract, not by the engine.
"""

from __future__ import annotations
from typing import Callable

from .core import (
    Account, Balance,
    check_account, check_allowance, check_amount, check_balance,
)
from .events import LedgerEvent, Transfer
from .stores import AllowanceStore, BalanceStore


class TransferEngine:
    """
    Moves value between accounts held in a BalanceStore.

    Args:
        balances: Store debited and credited by transfers
        allowances: Store checked and rewritten by transfers
        emit: Callable receiving each event produced by a successful operation
    """

    def __init__(
        self,
        balances: BalanceStore,
        allowances: AllowanceStore,
        emit: Callable[[LedgerEvent], None],
    ):
        self.balances = balances
        self.allowances = allowances
        self._emit = emit

    # Read access used by the validation rules.

    def balance_of(self, account: Account) -> Balance:
        return self.balances.get(account)

    def allowance(self, owner: Account, spender: Account) -> Balance:
        return self.allowances.get(owner, spender)

    def transfer(self, source: Account, dest: Account, value: Balance) -> None:
        """
        Move value from source to dest.

        On success the allowance slot (source, dest) is overwritten with value,
        recording the latest amount paid from source to dest, and a
        Transfer(source, dest, value) event is emitted.

        Raises:
            ValueError: If an account or value is malformed
            InsufficientBalance: If source holds less than value
        """
        check_account(source, "source")
        check_account(dest, "dest")
        check_amount(value, "value")
        check_balance(self, source, value)

        self.balances._debit(source, value)
        self.balances._credit(dest, value)
        self.allowances.set(source, dest, value)
        self._emit(Transfer(source, dest, value))

    def transfer_with_allowance(
        self,
        source: Account,
        dest: Account,
        value: Balance,
        spender: Account,
    ) -> None:
        """
        Move value from source to dest on behalf of spender.

        The allowance (source, spender) is read before the transfer and
        rewritten to prior - value afterwards, superseding the payment
        record written by transfer().

        Raises:
            ValueError: If an account or value is malformed
            InsufficientAllowance: If spender is authorized for less than value
            InsufficientBalance: If source holds less than value
        """
        check_account(spender, "spender")
        check_amount(value, "value")
        check_allowance(self, source, spender, value)
        prior = self.allowances.get(source, spender)

        self.transfer(source, dest, value)
        self.allowances.set(source, spender, prior - value)

    def mint(self, dest: Account, value: Balance) -> None:
        """
        Credit value to dest with no matching debit.

        The only supply-increasing path. Callers emit the event that
        describes why supply grew (issuance or deposit).
        """
        check_account(dest, "dest")
        check_amount(value, "value")
        self.balances._credit(dest, value)
