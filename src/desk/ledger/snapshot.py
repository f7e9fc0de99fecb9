"""Dry-run ledger client backed by a JSON snapshot file.

Serves account state and subaccount listings from a snapshot instead of RPC,
and "assembles" transactions as base64-encoded canonical JSON bundles of the
specs. Broadcasts never touch a chain: a decodable payload is acknowledged
with a deterministic ``dryrun_`` signature derived from its bytes.

Snapshot layout::

    {
      "accounts": {"<user account key>": {<RawAccountState fields>}},
      "subaccounts": {"<authority>": [{<RawSubaccount fields>}, ...]}
    }
"""

import asyncio
import base64
import binascii
import hashlib
import json
from collections import deque
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from desk.account.models import RawAccountState, RawSubaccount
from desk.exceptions import AccountNotFound, LedgerError
from desk.ledger.client import LedgerClient
from desk.ledger.types import BroadcastFailed, BroadcastOk, BroadcastResult
from desk.logging import get_logger
from desk.orders.models import OrderSpec, TransferSpec

logger = get_logger(__name__)


def encode_bundle(bundle: Mapping[str, Any]) -> str:
    """Canonical JSON (sorted keys, no whitespace) -> base64."""
    payload = json.dumps(bundle, sort_keys=True, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


class SnapshotLedgerClient(LedgerClient):
    """Ledger client that reads a snapshot and simulates broadcast.

    Args:
        snapshot_path: JSON snapshot to load on connect(). A missing file
            yields an empty ledger.
        snapshot: In-memory snapshot; takes precedence over snapshot_path.
        sent_history: How many acknowledged signatures sent_signatures keeps.
    """

    def __init__(
        self,
        snapshot_path: str | Path | None = None,
        snapshot: Mapping[str, Any] | None = None,
        sent_history: int = 256,
    ) -> None:
        self._snapshot_path = Path(snapshot_path) if snapshot_path is not None else None
        self._snapshot = snapshot
        self._accounts: dict[str, RawAccountState] = {}
        self._subaccounts: dict[str, list[RawSubaccount]] = {}
        self._sent: deque[str] = deque(maxlen=sent_history)
        self._connected = False

    async def connect(self) -> None:
        data = self._snapshot
        if data is None and self._snapshot_path is not None:
            data = await asyncio.to_thread(self._read_snapshot, self._snapshot_path)
        self._load(data or {})
        self._connected = True
        logger.info(
            "snapshot_ledger_connected",
            accounts=len(self._accounts),
            authorities=len(self._subaccounts),
        )

    async def close(self) -> None:
        self._connected = False

    async def fetch_account_state(self, user_account: str) -> RawAccountState:
        self._require_connected()
        state = self._accounts.get(user_account)
        if state is None:
            raise AccountNotFound(f"user account {user_account} not found")
        return state

    async def list_subaccounts(self, authority: str) -> list[RawSubaccount]:
        self._require_connected()
        return list(self._subaccounts.get(authority, []))

    async def assemble_order_transaction(
        self, authority: str, sub_account_id: int, specs: Sequence[OrderSpec]
    ) -> str:
        self._require_connected()
        if not specs:
            raise LedgerError("refusing to assemble a transaction with no orders")
        return encode_bundle({
            "fee_payer": authority,
            "sub_account_id": sub_account_id,
            "instructions": [
                {"instruction": "place_order", **spec.to_dict()} for spec in specs
            ],
        })

    async def assemble_transfer_transaction(self, authority: str, spec: TransferSpec) -> str:
        self._require_connected()
        return encode_bundle({
            "fee_payer": authority,
            "sub_account_id": spec.sub_account_id,
            "instructions": [{"instruction": spec.kind.value.lower(), **spec.to_dict()}],
        })

    async def send_transaction(self, signed_transaction: str) -> BroadcastResult:
        self._require_connected()
        try:
            raw = base64.b64decode(signed_transaction, validate=True)
        except (binascii.Error, ValueError):
            return BroadcastFailed(reason="transaction is not valid base64")
        if not raw:
            return BroadcastFailed(reason="transaction is empty")

        signature = "dryrun_" + hashlib.sha256(raw).hexdigest()[:32]
        self._sent.append(signature)
        logger.info("dryrun_transaction_acknowledged", signature=signature, size=len(raw))
        return BroadcastOk(signature=signature)

    @property
    def sent_signatures(self) -> list[str]:
        """Most recent acknowledged signatures, oldest first."""
        return list(self._sent)

    @staticmethod
    def _read_snapshot(path: Path) -> dict[str, Any]:
        if not path.exists():
            logger.warning("snapshot_missing", path=str(path))
            return {}
        with path.open(encoding="utf-8") as fh:
            try:
                return json.load(fh)
            except json.JSONDecodeError as e:
                raise LedgerError(f"snapshot {path} is not valid JSON: {e}") from e

    def _load(self, data: Mapping[str, Any]) -> None:
        if not isinstance(data, Mapping):
            raise LedgerError("malformed ledger snapshot: top level must be an object")
        try:
            self._accounts = {
                key: RawAccountState.from_dict(value)
                for key, value in data.get("accounts", {}).items()
            }
            self._subaccounts = {
                authority: [RawSubaccount.from_dict(entry) for entry in entries]
                for authority, entries in data.get("subaccounts", {}).items()
            }
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise LedgerError(f"malformed ledger snapshot: {e}") from e

    def _require_connected(self) -> None:
        if not self._connected:
            raise LedgerError("ledger client is not connected")
