"""Ledger boundary result types.

Broadcast outcomes form a closed tagged union; callers branch on the concrete
type instead of probing nested, possibly-absent fields of an RPC response.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BroadcastOk:
    """Transaction landed and confirmed without error."""

    signature: str


@dataclass(frozen=True)
class BroadcastFailed:
    """Transaction was rejected or confirmed with a program error."""

    reason: str
    signature: str | None = None


@dataclass(frozen=True)
class BroadcastTimedOut:
    """No confirmation before the blockhash expired. The tx may still land."""

    signature: str


BroadcastResult = BroadcastOk | BroadcastFailed | BroadcastTimedOut
