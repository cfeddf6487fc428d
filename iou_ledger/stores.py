"""
stores.py - Balance and allowance storage

Plain keyed storage with zero defaults. Neither store enforces any business
rule beyond non-negativity of what is written; arithmetic and validation are
the transfer engine's job.

BalanceStore:    account -> balance
AllowanceStore:  (owner, spender) -> authorized amount
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Tuple

from .core import Account, Balance, check_amount


class BalanceStore:
    """
    Per-account balances of the fungible unit.

    Lookups never fail: an account with no entry has balance 0.
    _credit() and _debit() are reserved for the transfer engine, since
    unchecked external mutation would break the conservation law.
    """

    def __init__(self):
        self._balances: Dict[Account, Balance] = {}

    def get(self, account: Account) -> Balance:
        return self._balances.get(account, 0)

    def set(self, account: Account, value: Balance) -> None:
        """Replace the balance of account."""
        self._balances[account] = check_amount(value, "balance")

    def total(self) -> Balance:
        """Sum of all balances."""
        return sum(self._balances.values())

    def items(self) -> List[Tuple[Account, Balance]]:
        """(account, balance) pairs for every account with an entry."""
        return list(self._balances.items())

    def _credit(self, account: Account, value: Balance) -> None:
        self._balances[account] = self.get(account) + value

    def _debit(self, account: Account, value: Balance) -> None:
        current = self.get(account)
        if current < value:
            raise ValueError(f"Debit of {value} would overdraw {account!r} ({current})")
        self._balances[account] = current - value

    def snapshot(self) -> Dict[Account, Balance]:
        return dict(self._balances)

    def restore(self, snapshot: Dict[Account, Balance]) -> None:
        self._balances = dict(snapshot)

    def __contains__(self, account: Account) -> bool:
        return account in self._balances

    def __len__(self) -> int:
        return len(self._balances)

    def __iter__(self) -> Iterator[Account]:
        return iter(list(self._balances))

    def __repr__(self) -> str:
        return f"BalanceStore({len(self._balances)} accounts, total={self.total()})"


class AllowanceStore:
    """
    Delegated spending limits keyed by (owner, spender).

    The same slot serves two writers: approve-style authorization and the
    payment record overwritten by every core transfer. No decrement-only
    semantics are enforced here.
    """

    def __init__(self):
        self._allowances: Dict[Tuple[Account, Account], Balance] = {}

    def get(self, owner: Account, spender: Account) -> Balance:
        return self._allowances.get((owner, spender), 0)

    def set(self, owner: Account, spender: Account, value: Balance) -> None:
        """Replace the allowance of spender over owner's balance."""
        self._allowances[(owner, spender)] = check_amount(value, "allowance")

    def items(self) -> List[Tuple[Tuple[Account, Account], Balance]]:
        return list(self._allowances.items())

    def snapshot(self) -> Dict[Tuple[Account, Account], Balance]:
        return dict(self._allowances)

    def restore(self, snapshot: Dict[Tuple[Account, Account], Balance]) -> None:
        self._allowances = dict(snapshot)

    def __len__(self) -> int:
        return len(self._allowances)

    def __repr__(self) -> str:
        return f"AllowanceStore({len(self._allowances)} entries)"
