"""Campaign aggregator: ledger records + IPFS metadata -> campaign views."""

__version__ = "0.1.0"
