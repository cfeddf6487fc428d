"""
helpers.py - Shared assertions for IOU ledger tests
"""

from typing import Any, Dict

from iou_ledger import IOU


def snapshot_state(iou: IOU) -> Dict[str, Any]:
    """Capture everything a rejected operation must leave unchanged."""
    return {
        "balances": iou.balances(),
        "allowances": iou.allowances(),
        "record": iou.record,
        "minted": iou.minted,
    }


def verify_conservation(iou: IOU) -> bool:
    """Total balance equals everything minted, and the debt record is consistent."""
    return iou.verify_conservation()["valid"]
