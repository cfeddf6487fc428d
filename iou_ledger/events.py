"""
events.py - Domain events and event sinks

Every successful ledger mutation produces one or more immutable event records.
Events are handed to an injected EventSink rather than written to a backend
directly, so the ledger core can be exercised without a live event log.

Event types:
    Transfer        value moved between accounts (source=None for a mint)
    Deposit         supply added to an account outside of issuance
    IssuanceRecord  an IOU was created between an issuer and a recipient
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Type, TypeVar, Union, runtime_checkable

from .core import Account, Balance


# ============================================================================
# EVENT RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Transfer:
    """
    Value moved from source to dest.

    Attributes:
        source: Debited account, or None when value is minted at issuance.
        dest: Credited account.
        value: Quantity moved.
    """
    source: Optional[Account]
    dest: Optional[Account]
    value: Balance

    def __repr__(self) -> str:
        return f"Transfer({self.value}: {self.source!r}→{self.dest!r})"


@dataclass(frozen=True, slots=True)
class Deposit:
    """Supply credited to dest by a deposit."""
    dest: Account
    value: Balance

    def __repr__(self) -> str:
        return f"Deposit({self.value} → {self.dest!r})"


@dataclass(frozen=True, slots=True)
class IssuanceRecord:
    """An IOU with face value amount_owed was issued by issuer to recipient."""
    issuer: Account
    recipient: Account
    amount_owed: Balance

    def __repr__(self) -> str:
        return f"IssuanceRecord({self.amount_owed}: {self.issuer!r}→{self.recipient!r})"


LedgerEvent = Union[Transfer, Deposit, IssuanceRecord]

E = TypeVar("E", Transfer, Deposit, IssuanceRecord)


# ============================================================================
# SINKS
# ============================================================================

@runtime_checkable
class EventSink(Protocol):
    """Receiver of committed ledger events, supplied by the host."""

    def emit(self, event: LedgerEvent) -> None:
        ...


class NullSink:
    """Sink that discards everything. Default when no sink is injected."""

    def emit(self, event: LedgerEvent) -> None:
        pass


class EventLog:
    """
    Append-only in-memory event log.

    Events are kept in emission order. Readers get copies, so the log
    can only grow through emit().

    Example:
        log = EventLog()
        iou = IOU.issue("alice", 100, "bob", 20, sink=log)
        log.of_type(Transfer)  # [Transfer(100: None→'alice')]
    """

    def __init__(self):
        self._events: List[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> List[LedgerEvent]:
        """All events in emission order (a copy)."""
        return list(self._events)

    def of_type(self, event_type: Type[E]) -> List[E]:
        """Events of a single type, in emission order."""
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self) -> Optional[LedgerEvent]:
        return self._events[-1] if self._events else None

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(list(self._events))
