"""IPFS and Pinata clients for campaign metadata."""

from aggregator.ipfs.gateway import IPFSGatewayClient
from aggregator.ipfs.pinata import PinataClient

__all__ = ['IPFSGatewayClient', 'PinataClient']
