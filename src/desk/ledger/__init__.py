"""Ledger boundary -- chain reads, transaction assembly and broadcast."""

from desk.ledger.client import LedgerClient
from desk.ledger.snapshot import SnapshotLedgerClient
from desk.ledger.types import BroadcastFailed, BroadcastOk, BroadcastResult, BroadcastTimedOut

__all__ = [
    "BroadcastFailed",
    "BroadcastOk",
    "BroadcastResult",
    "BroadcastTimedOut",
    "LedgerClient",
    "SnapshotLedgerClient",
]
