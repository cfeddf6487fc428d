"""
Conservation Law Conformance Tests

INVARIANT: At all times:
    Σ_{a ∈ accounts} balance(a) = Σ issuance + Σ deposits
    balance(a) >= 0 and allowance(o, s) >= 0 for every key

Transfers redistribute but never create or destroy value. Issuance and
deposits are the only supply-increasing operations.
"""

from hypothesis import given, settings, note
from hypothesis import strategies as st

from iou_ledger import IOU, EventLog, Transfer, Deposit, IssuanceRecord

from .strategies import account, operations, apply_op, quantity


class TestConservationProperties:
    """Property-based conservation tests."""

    @given(st.integers(min_value=0, max_value=10_000), operations)
    @settings(max_examples=200)
    def test_supply_equals_minted(self, face_value, ops):
        """
        PROPERTY: After any operation sequence, supply == issuance + deposits.
        """
        iou = IOU.issue("alice", face_value, "bob", 20)
        deposited = 0
        for op in ops:
            applied = apply_op(iou, op)
            if applied and op[0] == "deposit":
                deposited += op[2]
            note(f"{op} -> {applied}")
            assert iou.total_supply() == face_value + deposited
            assert iou.verify_conservation()["valid"]

    @given(operations)
    @settings(max_examples=200)
    def test_no_negative_entries(self, ops):
        """
        PROPERTY: No balance or allowance is ever negative.
        """
        iou = IOU.issue("alice", 100, "bob", 20)
        for op in ops:
            apply_op(iou, op)
            assert all(v >= 0 for v in iou.balances().values())
            assert all(v >= 0 for v in iou.allowances().values())

    @given(operations)
    @settings(max_examples=100)
    def test_events_account_for_supply(self, ops):
        """
        PROPERTY: Replaying emitted events reproduces every balance.
        """
        log = EventLog()
        iou = IOU.issue("alice", 100, "bob", 20, sink=log)
        for op in ops:
            apply_op(iou, op)

        replayed = {}
        for event in log:
            if isinstance(event, Transfer):
                if event.source is not None:
                    replayed[event.source] = replayed.get(event.source, 0) - event.value
                replayed[event.dest] = replayed.get(event.dest, 0) + event.value
            elif isinstance(event, Deposit):
                replayed[event.dest] = replayed.get(event.dest, 0) + event.value
            else:
                assert isinstance(event, IssuanceRecord)

        for acct, bal in iou.balances().items():
            assert replayed.get(acct, 0) == bal


class TestTransferConservation:
    """Single transfers move exactly value between two accounts."""

    @given(account, account, quantity, quantity)
    @settings(max_examples=200)
    def test_delegated_transfer_deltas(self, dest, spender, funds, value):
        iou = IOU.issue("alice", funds, "bob", 20)
        iou.approve("alice", spender, value)
        supply = iou.total_supply()
        before_src = iou.balance_of("alice")
        before_dst = iou.balance_of(dest)

        applied = apply_op(iou, ("transfer_with_allowance", "alice", dest, value, spender))

        assert iou.total_supply() == supply
        if not applied:
            assert value > funds
            assert iou.balance_of("alice") == before_src
            assert iou.balance_of(dest) == before_dst
        elif dest == "alice":
            assert iou.balance_of("alice") == before_src
        else:
            assert iou.balance_of("alice") == before_src - value
            assert iou.balance_of(dest) == before_dst + value
            assert iou.allowance("alice", spender) == 0

    @given(quantity)
    @settings(max_examples=100)
    def test_deposit_adds_exactly(self, amount):
        log = EventLog()
        iou = IOU.issue("alice", 100, "bob", 20, sink=log)
        log.clear()
        before = iou.balances()
        iou.deposit("carol", amount)
        after = iou.balances()
        assert after.get("carol", 0) == before.get("carol", 0) + amount
        assert {k: v for k, v in after.items() if k != "carol"} == before
        assert log.events == [Deposit("carol", amount)]
