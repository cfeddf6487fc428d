"""
iou_ledger - IOU Debt-Note Ledger

Balances of a fungible unit, delegated-spending allowances and the repayment
state of a single issued IOU, with atomic all-or-nothing operations.

Usage:
    from iou_ledger import IOU, EventLog

    log = EventLog()
    iou = IOU.issue("alice", 100, "bob", 20, sink=log)

    iou.pay_debt("alice", 30)
    iou.amount()             # 70
    iou.balance_of("bob")    # 30

    iou.approve("bob", "carol", 10)
    iou.transfer_with_allowance("bob", "dave", 10, "carol")
"""

# Core types
from .core import (
    LedgerView,
    ExecuteResult,
    LedgerError,
    InsufficientBalance,
    InsufficientAllowance,
    InsufficientDebtAmount,
    Account,
    Balance,
    MINT_SOURCE,
    MAX_PERCENTAGE,
    check_amount,
    check_account,
    check_balance,
    check_allowance,
    check_debt_payment,
    check_percentage,
    partial_payment_threshold,
)

# Events
from .events import (
    Transfer,
    Deposit,
    IssuanceRecord,
    LedgerEvent,
    EventSink,
    EventLog,
    NullSink,
)

# Stores and transfer engine
from .stores import BalanceStore, AllowanceStore
from .transfer import TransferEngine

# Debt tracker
from .iou import IOU, IouRecord, IouStatus

# Host dispatch
from .host import (
    ContractHost,
    CallResult,
    UnknownMessage,
    DEFAULT_HANDLERS,
)
