"""Ledger access for the CrowdFunding contract."""
