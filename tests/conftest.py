"""Shared fixtures and in-memory collaborators for aggregator tests."""

import asyncio
import json
import os
from typing import Any, Callable, Optional

import django
import httpx
import pytest
from eth_abi import encode
from hexbytes import HexBytes
from web3 import Web3

from aggregator.config import Config
from aggregator.errors import ContractReadError, NetworkError
from aggregator.ipfs.gateway import IPFSGatewayClient
from aggregator.ipfs.pinata import PinataClient
from aggregator.models import CampaignMetadata, CampaignRecord
from aggregator.services.metadata_store import MetadataStore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "aggregator.api.settings")
django.setup()

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
CREATOR = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"

NOW = 1_735_000_000
FUTURE = NOW + 86_400
PAST = NOW - 86_400

ONE_ETH = 10 ** 18


@pytest.fixture
def test_config() -> Config:
    """Test configuration with a Pinata credential."""
    return Config(
        contract_address=CONTRACT_ADDRESS,
        pinata_jwt="test-jwt",
        pinata_api_url="https://pinata.test",
        ipfs_gateway_url="https://gateway.test/ipfs/",
    )


@pytest.fixture
def unconfigured_config() -> Config:
    """Test configuration without a Pinata credential."""
    return Config(
        contract_address=CONTRACT_ADDRESS,
        pinata_api_url="https://pinata.test",
        ipfs_gateway_url="https://gateway.test/ipfs/",
    )


def make_record(campaign_id: int, **overrides: Any) -> CampaignRecord:
    values = {
        "id": campaign_id,
        "creator": CREATOR,
        "title": f"Ledger title {campaign_id}",
        "description": f"Ledger description {campaign_id}",
        "goal": 10 * ONE_ETH,
        "raised": 5 * ONE_ETH,
        "deadline": FUTURE,
    }
    values.update(overrides)
    return CampaignRecord(**values)


def make_metadata(campaign_id: int, **overrides: Any) -> CampaignMetadata:
    values = {
        "campaign_id": str(campaign_id),
        "title": f"Stored title {campaign_id}",
        "description": f"Stored description {campaign_id}",
        "image_url": f"https://img.test/{campaign_id}.png",
        "video_url": f"https://video.test/{campaign_id}",
        "goal": "10",
        "deadline": FUTURE,
        "created_at": NOW * 1000,
    }
    values.update(overrides)
    return CampaignMetadata(**values)


class FakeLedger:
    """In-memory ledger. Ids listed in ``failing`` raise ContractReadError."""

    def __init__(
        self,
        records: dict[int, CampaignRecord],
        donor_counts: Optional[dict[int, int]] = None,
        failing: tuple[int, ...] = (),
        failing_donors: tuple[int, ...] = (),
        count_fails: bool = False,
    ):
        self.records = records
        self.donor_counts = donor_counts or {}
        self.failing = set(failing)
        self.failing_donors = set(failing_donors)
        self.count_fails = count_fails

    async def get_campaign(self, campaign_id: int) -> CampaignRecord:
        await asyncio.sleep(0)
        if campaign_id in self.failing or campaign_id not in self.records:
            raise ContractReadError(f"Failed to read campaign {campaign_id}")
        return self.records[campaign_id]

    async def get_donor_count(self, campaign_id: int) -> int:
        await asyncio.sleep(0)
        if campaign_id in self.failing_donors:
            raise ContractReadError(f"Failed to read donor count for campaign {campaign_id}")
        return self.donor_counts.get(campaign_id, 0)

    async def campaign_count(self) -> int:
        if self.count_fails:
            raise ContractReadError("Failed to read campaign count")
        return len(self.records)


class FakeStore:
    """In-memory metadata store that records calls and in-flight lookups."""

    def __init__(
        self,
        by_id: Optional[dict[int, CampaignMetadata]] = None,
        by_address: Optional[dict[str, CampaignMetadata]] = None,
        failing: tuple[Any, ...] = (),
        delay: float = 0,
    ):
        self.by_id = by_id or {}
        self.by_address = by_address or {}
        self.failing = set(failing)
        self.delay = delay
        self.calls: list[tuple[str, Any]] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def _enter(self, kind: str, key: Any) -> None:
        self.calls.append((kind, key))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if key in self.failing:
            raise NetworkError(f"Failed to fetch {key}")

    async def fetch_by_campaign_id(self, campaign_id: int) -> Optional[CampaignMetadata]:
        await self._enter("id", campaign_id)
        return self.by_id.get(campaign_id)

    async def fetch_by_address(self, uri: str) -> CampaignMetadata:
        await self._enter("address", uri)
        if uri not in self.by_address:
            raise NetworkError(f"HTTP 404 fetching CID: {uri}")
        return self.by_address[uri]


class RecordingTransport:
    """httpx MockTransport wrapper that keeps every request it saw."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.transport = httpx.MockTransport(record)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def make_store(config: Config, handler: Callable[[httpx.Request], httpx.Response]) -> tuple[MetadataStore, RecordingTransport]:
    """Build a real MetadataStore backed by a mock HTTP transport."""
    recording = RecordingTransport(handler)
    store = MetadataStore(
        config,
        ipfs_client=IPFSGatewayClient(config, transport=recording.transport),
        pinata_client=PinataClient(config, transport=recording.transport),
    )
    return store, recording


def pin_list_response(*hashes: str) -> httpx.Response:
    return httpx.Response(200, json={
        "count": len(hashes),
        "rows": [{"ipfs_pin_hash": h} for h in hashes],
    })


def pinned_campaign_id(request: httpx.Request) -> str:
    """Campaign id a pinList request filters on."""
    metadata = json.loads(request.url.params["metadata"])
    return metadata["keyvalues"]["campaignId"]["value"]


def make_creation_receipt(campaign_id: int, title: str = "Save the reef") -> dict[str, Any]:
    """Receipt holding one encoded CampaignCreated log."""
    signature = "CampaignCreated(uint256,address,string,uint256,uint256)"
    creator_topic = bytes(12) + bytes.fromhex(CREATOR[2:])
    return {
        "status": 1,
        "logs": [
            {
                "address": CONTRACT_ADDRESS,
                "topics": [
                    HexBytes(Web3.keccak(text=signature)),
                    HexBytes(campaign_id.to_bytes(32, "big")),
                    HexBytes(creator_topic),
                ],
                "data": HexBytes(encode(["string", "uint256", "uint256"], [title, 10 * ONE_ETH, FUTURE])),
                "blockNumber": 1,
                "blockHash": HexBytes(b"\x01" * 32),
                "transactionHash": HexBytes(b"\x02" * 32),
                "transactionIndex": 0,
                "logIndex": 0,
                "removed": False,
            }
        ],
    }
