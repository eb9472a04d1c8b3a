"""
Log masking helpers.

Shortens vault addresses, transaction hashes and activity ids so log
lines stay readable and do not carry full on-chain identifiers.
"""

from goal_indexer.config.constants import ACTIVITY_ID_SEPARATOR


def mask_address(address: str | None) -> str:
    """
    Mask contract or wallet address: 0x1234...5678

    Examples:
        >>> mask_address("0x1234567890abcdef1234567890abcdef12345678")
        '0x1234...5678'
        >>> mask_address(None)
        '***'
    """
    if not address or len(address) < 10:
        return "***"
    return f"{address[:6]}...{address[-4:]}"


def mask_tx_hash(tx_hash: str | None) -> str:
    """
    Mask transaction hash, keeping the 0x prefix, 8 leading and 6
    trailing hex digits.
    """
    if not tx_hash or len(tx_hash) < 16:
        return "***"
    return f"{tx_hash[:10]}...{tx_hash[-6:]}"


def mask_activity_id(activity_id: str) -> str:
    """
    Mask the transaction part of an activity id, keeping the log index.

    Examples:
        >>> mask_activity_id("0x" + "ab" * 32 + "-3")
        '0xabababab...ababab-3'
    """
    tx_hash, sep, log_index = activity_id.rpartition(ACTIVITY_ID_SEPARATOR)
    if not sep:
        return mask_tx_hash(activity_id)
    return f"{mask_tx_hash(tx_hash)}{sep}{log_index}"
