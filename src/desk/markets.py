"""Market reference data: decimals and symbols per (kind, market index).

The table is read-only once built. Callers supply it to the order builder and
the account projector; neither ever mutates it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from desk.exceptions import MarketNotFound
from desk.models import MarketKind
from desk.precision import BASE_DECIMALS


@dataclass(frozen=True)
class MarketRef:
    """Reference data for a single spot or perp market."""

    market_index: int
    kind: MarketKind
    decimals: int
    symbol: str | None = None

    @property
    def label(self) -> str:
        """Symbol, or a ``SPOT-3`` / ``PERP-0`` style fallback."""
        return self.symbol or fallback_symbol(self.kind, self.market_index)


def fallback_symbol(kind: MarketKind, market_index: int) -> str:
    return f"{kind.value}-{market_index}"


class MarketReference:
    """Immutable lookup table keyed by (kind, market index).

    Args:
        markets: Market refs to index. A later ref for the same key wins.
    """

    def __init__(self, markets: Iterable[MarketRef] = ()) -> None:
        self._markets: dict[tuple[MarketKind, int], MarketRef] = {
            (m.kind, m.market_index): m for m in markets
        }

    def get(self, kind: MarketKind, market_index: int) -> MarketRef | None:
        return self._markets.get((kind, market_index))

    def require(self, kind: MarketKind, market_index: int) -> MarketRef:
        """Like get(), but raises MarketNotFound instead of returning None."""
        market = self.get(kind, market_index)
        if market is None:
            raise MarketNotFound(kind, market_index)
        return market

    def markets(self, kind: MarketKind | None = None) -> list[MarketRef]:
        """All refs (optionally of one kind), ordered by kind then index."""
        refs = [m for m in self._markets.values() if kind is None or m.kind == kind]
        return sorted(refs, key=lambda m: (m.kind.value, m.market_index))

    def __len__(self) -> int:
        return len(self._markets)


# Mainnet listings used when no other table is supplied.
MAINNET_SPOT_MARKETS: tuple[MarketRef, ...] = (
    MarketRef(0, MarketKind.SPOT, 6, "USDC"),
    MarketRef(1, MarketKind.SPOT, 9, "SOL"),
    MarketRef(2, MarketKind.SPOT, 9, "mSOL"),
    MarketRef(3, MarketKind.SPOT, 8, "wBTC"),
    MarketRef(4, MarketKind.SPOT, 8, "wETH"),
    MarketRef(5, MarketKind.SPOT, 6, "USDT"),
    MarketRef(6, MarketKind.SPOT, 9, "jitoSOL"),
)

MAINNET_PERP_MARKETS: tuple[MarketRef, ...] = (
    MarketRef(0, MarketKind.PERP, BASE_DECIMALS, "SOL-PERP"),
    MarketRef(1, MarketKind.PERP, BASE_DECIMALS, "BTC-PERP"),
    MarketRef(2, MarketKind.PERP, BASE_DECIMALS, "ETH-PERP"),
    MarketRef(3, MarketKind.PERP, BASE_DECIMALS, "APT-PERP"),
    MarketRef(4, MarketKind.PERP, BASE_DECIMALS, "1MBONK-PERP"),
)

_NETWORK_TABLES: dict[str, tuple[MarketRef, ...]] = {
    "mainnet-beta": MAINNET_SPOT_MARKETS + MAINNET_PERP_MARKETS,
}


def default_market_reference(network: str = "mainnet-beta") -> MarketReference:
    """Build the bundled market table for a network (empty if unknown)."""
    return MarketReference(_NETWORK_TABLES.get(network, ()))
