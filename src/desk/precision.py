"""Fixed-point conversion between human decimals and on-chain integers.

All conversions to integers truncate toward zero (never round to nearest),
so a scaled amount never exceeds what the user asked for or holds.

Precisions:
  - Perp base asset amounts: 1e9
  - Quote quantities (prices, quote asset amounts, oracle prices, USD): 1e6
  - Spot token amounts: 10 ** market.decimals, looked up per market
"""

from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_DOWN, Context, Decimal

BASE_DECIMALS = 9
QUOTE_DECIMALS = 6

# On-chain amounts and prices are u64
MAX_ONCHAIN_AMOUNT = 2**64 - 1

# Inputs at or above 1e31 are rejected before scaling; no u64 amount comes close
MAX_INPUT_EXPONENT = 30

# Shifting must not round the coefficient to the default 28 digits
_EXACT = Context(prec=MAX_PREC, rounding=ROUND_DOWN, Emax=MAX_EMAX, Emin=MIN_EMIN)


def scale(value: Decimal, decimals: int) -> int:
    """Convert a decimal amount to an integer with ``decimals`` implied places.

    Uses Decimal shifting under an unbounded-precision context so that no
    digits are rounded away, then truncates toward zero.

    Args:
        value: Human-readable amount (e.g. Decimal("1.5") SOL).
        decimals: Number of implied decimal places of the target integer.

    Returns:
        The truncated integer amount.
    """
    shifted = value.scaleb(decimals, context=_EXACT)
    return int(shifted.to_integral_value(rounding=ROUND_DOWN, context=_EXACT))


def unscale(value: int, decimals: int) -> Decimal:
    """Convert an on-chain integer back to an exact Decimal."""
    return Decimal(value).scaleb(-decimals, context=_EXACT)


def scale_base(size: Decimal) -> int:
    """Perp base asset size to 1e9 precision."""
    return scale(size, BASE_DECIMALS)


def scale_quote(price: Decimal) -> int:
    """Quote-denominated value (price, USD) to 1e6 precision."""
    return scale(price, QUOTE_DECIMALS)


def fits_onchain(amount: int) -> bool:
    """True if a scaled amount or price fits the ledger's u64 fields."""
    return 0 <= amount <= MAX_ONCHAIN_AMOUNT


def within_input_range(value: Decimal) -> bool:
    """False for magnitudes too large to ever scale into an on-chain amount."""
    return not value or value.adjusted() <= MAX_INPUT_EXPONENT


def to_decimal(value: object) -> Decimal | None:
    """Leniently parse a JSON scalar into a Decimal.

    Floats go through ``str`` first so 0.1 stays 0.1. Blank strings, bools,
    non-finite or absurdly large values and anything unparseable become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except ArithmeticError:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    if not within_input_range(result):
        return None
    return result
