"""
conftest.py - Shared pytest fixtures for IOU ledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Event logs
- Issued IOUs (fresh, partially repaid, fully repaid)
- Test-mode IOUs with pre-funded accounts
- Host dispatcher
"""

import pytest
from iou_ledger import (
    IOU, EventLog, ContractHost,
)


# =============================================================================
# BASIC FIXTURES
# =============================================================================

@pytest.fixture
def event_log():
    """Empty append-only event log."""
    return EventLog()


@pytest.fixture
def issued_iou(event_log):
    """alice owes bob 100, nothing repaid yet."""
    return IOU.issue("alice", 100, "bob", 20, sink=event_log)


@pytest.fixture
def partially_paid_iou(issued_iou):
    """alice has repaid 30 of 100."""
    issued_iou.pay_debt("alice", 30)
    return issued_iou


@pytest.fixture
def paid_iou(issued_iou):
    """alice has repaid the whole 100."""
    issued_iou.pay_debt("alice", 100)
    return issued_iou


@pytest.fixture
def funded_iou(event_log):
    """Test-mode IOU with carol and dave funded directly."""
    iou = IOU.issue("alice", 100, "bob", 20, sink=event_log, test_mode=True)
    iou.set_balance("carol", 500)
    iou.set_balance("dave", 50)
    return iou


@pytest.fixture
def host(issued_iou):
    """Dispatcher in front of issued_iou."""
    return ContractHost(issued_iou)
