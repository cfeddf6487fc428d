"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the IOU ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation - Supply equals everything minted; balances never negative
2. atomicity - Rejected operations change nothing and emit nothing
3. debt_state_machine - Outstanding/Paid transitions and debt counters
4. isolation - Separate IOUs share no state; concurrent calls serialize

These tests use hypothesis for property-based testing.
"""
