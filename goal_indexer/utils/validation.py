"""
Validation and best-effort parsing utilities.

Query parameters are never validated strictly: a value that cannot be
parsed falls back to its default instead of failing the request.
"""

from loguru import logger
from web3 import Web3

from goal_indexer.config.constants import (
    DEFAULT_ACTIVITY_LIMIT,
    VAULT_FILTER_SEPARATOR,
)


def canonicalize_address(address: str | None) -> str | None:
    """
    Convert address to its EIP-55 checksummed form.

    Mixed-case input must carry a valid checksum; all-lowercase and
    all-uppercase hex are accepted as is.

    Args:
        address: Address string (with 0x prefix)

    Returns:
        Checksummed address, or None if the address is invalid

    Examples:
        >>> canonicalize_address("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed'
        >>> canonicalize_address("not-an-address") is None
        True
    """
    if not address or not isinstance(address, str):
        return None

    candidate = address.strip()
    if not Web3.is_address(candidate):
        return None

    return Web3.to_checksum_address(candidate)


def parse_limit(
    raw: str | None,
    default: int = DEFAULT_ACTIVITY_LIMIT,
    maximum: int | None = None,
) -> int:
    """
    Parse result-count limit, defaulting on failure.

    Args:
        raw: Raw query parameter value
        default: Value used when raw is missing, not an integer, or < 1
        maximum: Optional upper bound

    Returns:
        Positive integer limit
    """
    if raw is None or not str(raw).strip():
        limit = default
    else:
        try:
            limit = int(str(raw).strip())
        except ValueError:
            logger.debug(f"[API] Unparseable limit {raw!r}, using {default}")
            limit = default

    if limit < 1:
        limit = default

    if maximum is not None:
        limit = min(limit, maximum)

    return limit


def parse_vault_filter(raw: str | None) -> set[str] | None:
    """
    Parse comma-separated vault filter.

    Addresses that cannot be canonicalized are dropped silently; they
    could not match any entry anyway.

    Args:
        raw: Raw query parameter value

    Returns:
        None when no filter was requested (missing, blank, or only
        separators), otherwise the set of canonical addresses (possibly
        empty)
    """
    if raw is None:
        return None

    parts = [p.strip() for p in raw.split(VAULT_FILTER_SEPARATOR) if p.strip()]
    if not parts:
        return None

    result = set()
    for part in parts:
        canonical = canonicalize_address(part)
        if canonical is None:
            logger.debug(f"[API] Ignoring invalid vault filter {part!r}")
            continue
        result.add(canonical)

    return result
