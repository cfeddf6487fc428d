#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: An IOU From Issue to Paid

Walks through the life of a single IOU. Each step builds on the previous one.
Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Issuance      - Minting the face value, the debt record, events
  4-6:  Repayment     - Installments, rejected over-payment, reaching Paid
  7-8:  Delegation    - Allowances and delegated transfers
  9-10: Host & Proofs - Message dispatch and the conservation check

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass, field
from typing import List
import sys

from iou_ledger import (
    IOU, EventLog, ContractHost,
    InsufficientBalance, InsufficientDebtAmount,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    issuer: str = "alice"
    recipient: str = "bob"
    face_value: int = 100
    partial_payment_percentage: int = 20

    # Repayment schedule, must sum to face_value
    installments: List[int] = field(default_factory=lambda: [30, 30, 40])

    # Delegation
    spender: str = "carol"
    delegated_dest: str = "dave"
    allowance: int = 25


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    print(f"\n--- {text} ---\n")


def show_state(iou: IOU):
    print(f"    {iou!r}")
    for account, balance in sorted(iou.balances().items(), key=lambda kv: repr(kv[0])):
        print(f"    balance[{account!r}] = {balance}")


# ============================================================================
# PHASE 1: ISSUANCE (Steps 1-3)
# ============================================================================

def step_01_issue(log: EventLog) -> IOU:
    """Issue the IOU and mint its face value to the issuer."""
    step_header(1, "Issuing the IOU",
        "See that issuance mints the face value to the issuer.")

    print(f">>> iou = IOU.issue({CONFIG.issuer!r}, {CONFIG.face_value}, "
          f"{CONFIG.recipient!r}, {CONFIG.partial_payment_percentage}, sink=log)")
    iou = IOU.issue(
        CONFIG.issuer, CONFIG.face_value, CONFIG.recipient,
        CONFIG.partial_payment_percentage, sink=log, name="tutorial", verbose=True,
    )

    section_header("State")
    show_state(iou)
    print(f"\n    total supply: {iou.total_supply()}  minted: {iou.minted}")
    return iou


def step_02_record(iou: IOU) -> IOU:
    """Inspect the debt record."""
    step_header(2, "The Debt Record",
        "Understand amount_owed, amount_paid and the paid flag.")

    record = iou.record
    print(f"    issuer:          {record.issuer!r}")
    print(f"    recipient:       {record.recipient!r}")
    print(f"    face value:      {record.face_value}")
    print(f"    amount owed:     {record.amount_owed}")
    print(f"    amount paid:     {record.amount_paid}")
    print(f"    status:          {record.status.value}")
    print(f"    partial payment: {record.partial_payment_percentage}% "
          f"(threshold {iou.partial_payment_threshold()})")

    section_header("Key Insight")
    print("""
    amount_paid + amount_owed == face_value at all times.
    The IOU is paid exactly when nothing is owed.
    """)
    return iou


def step_03_events(log: EventLog) -> None:
    """Show what issuance emitted."""
    step_header(3, "Issuance Events",
        "See the mint transfer and the issuance record.")

    for event in log:
        print(f"    {event!r}")


# ============================================================================
# PHASE 2: REPAYMENT (Steps 4-6)
# ============================================================================

def step_04_installment(iou: IOU) -> IOU:
    """Pay the first installment."""
    step_header(4, "A Partial Payment",
        "Paying reduces the debt and moves units to the recipient.")

    first = CONFIG.installments[0]
    print(f">>> iou.pay_debt({CONFIG.issuer!r}, {first})")
    iou.pay_debt(CONFIG.issuer, first)
    show_state(iou)
    return iou


def step_05_over_payment(iou: IOU) -> IOU:
    """Try to pay more than is owed."""
    step_header(5, "A Rejected Over-Payment",
        "Paying more than the amount owed changes nothing.")

    too_much = iou.amount() + 1
    print(f">>> iou.pay_debt({CONFIG.issuer!r}, {too_much})")
    try:
        iou.pay_debt(CONFIG.issuer, too_much)
    except InsufficientDebtAmount as exc:
        print(f"    raised InsufficientDebtAmount: {exc}")
    show_state(iou)
    return iou


def step_06_settle(iou: IOU) -> IOU:
    """Pay the remaining installments."""
    step_header(6, "Settling the Debt",
        "The final installment brings the IOU to Paid.")

    for amount in CONFIG.installments[1:]:
        print(f">>> iou.pay_debt({CONFIG.issuer!r}, {amount})")
        iou.pay_debt(CONFIG.issuer, amount)
    show_state(iou)
    print(f"\n    paid: {iou.paid}")
    return iou


# ============================================================================
# PHASE 3: DELEGATION (Steps 7-8)
# ============================================================================

def step_07_approve(iou: IOU) -> IOU:
    """Grant an allowance."""
    step_header(7, "Approving a Spender",
        "An owner lets a spender move units on their behalf.")

    owner = CONFIG.recipient
    print(f">>> iou.approve({owner!r}, {CONFIG.spender!r}, {CONFIG.allowance})")
    iou.approve(owner, CONFIG.spender, CONFIG.allowance)
    print(f"    allowance[{owner!r}, {CONFIG.spender!r}] = "
          f"{iou.allowance(owner, CONFIG.spender)}")
    return iou


def step_08_delegated_transfer(iou: IOU) -> IOU:
    """Spend from the allowance, then overspend."""
    step_header(8, "Delegated Transfers",
        "Spending consumes the allowance; overspending is rejected.")

    owner = CONFIG.recipient
    value = CONFIG.allowance
    print(f">>> iou.transfer_with_allowance({owner!r}, {CONFIG.delegated_dest!r}, "
          f"{value}, {CONFIG.spender!r})")
    iou.transfer_with_allowance(owner, CONFIG.delegated_dest, value, CONFIG.spender)
    print(f"    allowance left: {iou.allowance(owner, CONFIG.spender)}")

    print(f">>> iou.pay_debt({CONFIG.delegated_dest!r}, 1)   # nothing owed")
    try:
        iou.pay_debt(CONFIG.delegated_dest, 1)
    except InsufficientDebtAmount as exc:
        print(f"    raised InsufficientDebtAmount: {exc}")
    show_state(iou)
    return iou


# ============================================================================
# PHASE 4: HOST & PROOFS (Steps 9-10)
# ============================================================================

def step_09_host(iou: IOU) -> IOU:
    """Drive the IOU through message dispatch."""
    step_header(9, "The Contract Host",
        "Messages are routed by name; failures come back as results.")

    host = ContractHost(iou, verbose=True)
    print(f"    messages: {host.messages()}")

    result = host.call("erin", "deposit", 15)
    print(f"    deposit -> {result.status.value}")
    result = host.call("erin", "public_account_balance")
    print(f"    public_account_balance -> {result.value}")
    result = host.call("erin", "transfer_from", "alice", "erin", 5)
    print(f"    transfer_from -> {result.status.value}: {result.error!r}")
    return iou


def step_10_conservation(iou: IOU, log: EventLog) -> None:
    """Prove supply equals everything ever minted."""
    step_header(10, "Conservation Proof",
        "Transfers redistribute value; only issuance and deposits create it.")

    check = iou.verify_conservation()
    for key, value in check.items():
        print(f"    {key:16} {value}")
    print(f"\n    events emitted: {len(log)}")

    # A top-up that fails mid-payment leaves nothing behind
    fresh = IOU.issue("frank", 50, "grace", 0)
    fresh.approve("frank", "heidi", 50)
    fresh.transfer_with_allowance("frank", "ivan", 50, "heidi")
    try:
        fresh.pay_debt("frank", 10)
    except InsufficientBalance as exc:
        print(f"\n    frank cannot pay: {exc}")
    print(f"    frank still owes {fresh.amount()}")


def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       IOU LEDGER - INTERACTIVE TUTORIAL")
    print("=" * 70)

    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    else:
        print("Running in INTERACTIVE mode (press Enter to advance)")

    log = EventLog()

    iou = step_01_issue(log)
    wait_for_enter()
    iou = step_02_record(iou)
    wait_for_enter()
    step_03_events(log)
    wait_for_enter()

    iou = step_04_installment(iou)
    wait_for_enter()
    iou = step_05_over_payment(iou)
    wait_for_enter()
    iou = step_06_settle(iou)
    wait_for_enter()

    iou = step_07_approve(iou)
    wait_for_enter()
    iou = step_08_delegated_transfer(iou)
    wait_for_enter()

    iou = step_09_host(iou)
    wait_for_enter()
    step_10_conservation(iou, log)

    print("\nNext steps:\n  - Run tests: pytest tests/")


if __name__ == "__main__":
    main()
