import logging
import os
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

HOLES_PER_ROUND = 18
MIN_ROUND_PLAYERS = 6
MAX_ROUND_PLAYERS = 30
MIN_TEAM_SIZE = 2
MAX_TEAM_SIZE = 3

DEFAULT_PAYOUT_TOLERANCE = Decimal("0.01")


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _parse_tolerance(raw_value: str | None) -> Decimal:
    if raw_value is None or not raw_value.strip():
        return DEFAULT_PAYOUT_TOLERANCE
    try:
        value = Decimal(raw_value.strip())
    except InvalidOperation:
        logger.warning(
            "PAYOUT_TOLERANCE is not a valid decimal (got %r); defaulting to %s",
            raw_value,
            DEFAULT_PAYOUT_TOLERANCE,
        )
        return DEFAULT_PAYOUT_TOLERANCE
    if not value.is_finite() or value < 0:
        logger.warning(
            "PAYOUT_TOLERANCE must be a non-negative number; defaulting to %s",
            DEFAULT_PAYOUT_TOLERANCE,
        )
        return DEFAULT_PAYOUT_TOLERANCE
    return value


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

# Largest gap between the pot and the distributed total that still counts as
# balanced once per-golfer shares have been rounded to cents.
PAYOUT_TOLERANCE = _parse_tolerance(os.getenv("PAYOUT_TOLERANCE"))
