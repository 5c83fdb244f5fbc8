"""Utility functions for formatting ledger and content-store values."""

from decimal import Decimal

# Wei to ETH conversion factor (10^18)
WEI_TO_ETH = Decimal('1000000000000000000')

IPFS_SCHEME = 'ipfs://'


def wei_to_eth(wei: int) -> Decimal:
    """Convert wei to ETH.

    Args:
        wei: Amount in wei (smallest unit of ETH)

    Returns:
        Decimal: Amount in ETH
    """
    if wei is None:
        return Decimal('0')
    return Decimal(wei) / WEI_TO_ETH


def format_ether(wei: int) -> str:
    """Format a wei amount as an ETH display string.

    Trailing zeros are dropped but at least one decimal place is kept,
    so 0 renders as "0.0" and 1.5 ETH as "1.5".

    Args:
        wei: Amount in wei

    Returns:
        ETH amount as a string
    """
    text = format(wei_to_eth(wei), 'f')
    if '.' not in text:
        return f"{text}.0"
    text = text.rstrip('0')
    if text.endswith('.'):
        text += '0'
    return text


def strip_ipfs_scheme(uri: str) -> str:
    """Return the bare content hash of an ipfs:// URI or hash.

    Args:
        uri: Either "ipfs://<hash>" or "<hash>"

    Returns:
        The bare hash
    """
    uri = uri.strip()
    if uri.startswith(IPFS_SCHEME):
        return uri[len(IPFS_SCHEME):]
    return uri


def to_ipfs_uri(ipfs_hash: str) -> str:
    """Build the ipfs:// URI for a content hash."""
    return f"{IPFS_SCHEME}{strip_ipfs_scheme(ipfs_hash)}"
