"""Read-only ledger client for the CrowdFunding contract."""

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

from web3 import AsyncWeb3, Web3

from aggregator.config import Config
from aggregator.errors import ContractReadError
from aggregator.eth.abi_loader import get_crowdfunding_abi, get_output_names
from aggregator.log import get_logger
from aggregator.models import CampaignRecord

logger = get_logger(__name__)

T = TypeVar("T")


class LedgerClient:
    """Async accessor for campaign state on the ledger.

    Every read is bounded by ``config.read_timeout_seconds`` and any
    failure (RPC error, revert, timeout) surfaces as ContractReadError.
    There are no retries at this layer.

    Example usage:
        ledger = LedgerClient(config)
        record = await ledger.get_campaign(3)
    """

    def __init__(self, config: Config, contract: Optional[Any] = None):
        """Initialize the ledger client.

        Args:
            config: Configuration object with RPC URL and contract address
            contract: Pre-built contract object. Created from config if not provided.
        """
        self.config = config
        self.abi = get_crowdfunding_abi()
        self.campaign_fields = get_output_names(self.abi, "getCampaign")
        self.web3: Optional[AsyncWeb3] = None

        if contract is None:
            self.web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(config.rpc_url))
            contract = self.web3.eth.contract(
                address=Web3.to_checksum_address(config.contract_address),
                abi=self.abi,
            )
        self.contract = contract

    async def _read(self, description: str, call: Callable[[], Awaitable[T]]) -> T:
        """Await a contract call with the configured bound.

        Raises:
            ContractReadError: If the call fails or times out
        """
        try:
            return await asyncio.wait_for(call(), timeout=self.config.read_timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout reading {description}")
            raise ContractReadError(f"Timeout reading {description}") from e
        except Exception as e:
            logger.error(f"Error reading {description}: {e}")
            raise ContractReadError(f"Failed to read {description}: {e}") from e

    async def get_campaign(self, campaign_id: int) -> CampaignRecord:
        """Read a campaign record.

        Args:
            campaign_id: Campaign id on the contract

        Returns:
            CampaignRecord

        Raises:
            ContractReadError: If the read fails
        """
        raw = await self._read(
            f"campaign {campaign_id}",
            lambda: self.contract.functions.getCampaign(campaign_id).call(),
        )
        try:
            return CampaignRecord.from_contract(campaign_id, raw, self.campaign_fields)
        except (TypeError, ValueError) as e:
            raise ContractReadError(f"Malformed record for campaign {campaign_id}: {e}") from e

    async def get_donor_count(self, campaign_id: int) -> int:
        """Read the number of donations recorded for a campaign.

        Raises:
            ContractReadError: If the read fails
        """
        count = await self._read(
            f"donor count for campaign {campaign_id}",
            lambda: self.contract.functions.getDonorCount(campaign_id).call(),
        )
        return int(count)

    async def campaign_count(self) -> int:
        """Read the total number of campaigns.

        Raises:
            ContractReadError: If the read fails
        """
        count = await self._read(
            "campaign count",
            lambda: self.contract.functions.campaignCount().call(),
        )
        return int(count)

    async def get_transaction_receipt(self, tx_hash: str) -> dict[str, Any]:
        """Read a transaction receipt.

        Args:
            tx_hash: Transaction hash (0x-prefixed)

        Raises:
            ContractReadError: If the receipt can't be read
        """
        if self.web3 is None:
            raise ContractReadError("No RPC connection configured for receipt lookup")
        receipt = await self._read(
            f"receipt {tx_hash}",
            lambda: self.web3.eth.get_transaction_receipt(tx_hash),
        )
        return dict(receipt)

    async def is_connected(self) -> bool:
        """Check RPC connectivity."""
        if self.web3 is None:
            return False
        try:
            return await self.web3.is_connected()
        except Exception as e:
            logger.warning(f"RPC connectivity check failed: {e}")
            return False
