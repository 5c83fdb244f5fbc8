"""Metadata store: both retrieval strategies and the write path on one interface."""

from typing import Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from aggregator.config import Config
from aggregator.errors import NetworkError
from aggregator.ipfs.gateway import IPFSGatewayClient
from aggregator.ipfs.pinata import METADATA_TYPE, PinataClient
from aggregator.log import get_logger
from aggregator.models import CampaignMetadata, MetadataUpload, StoredMetadata
from aggregator.utils.formatting import strip_ipfs_scheme, to_ipfs_uri

logger = get_logger(__name__)


class StoredAddress(BaseModel):
    """Content address of a freshly written metadata document."""
    ipfs_hash: str

    @property
    def ipfs_uri(self) -> str:
        return to_ipfs_uri(self.ipfs_hash)


class MetadataStore:
    """Reads and writes campaign metadata in the content-addressed store.

    Two lookups are supported:
    - by content address: public gateway read, no credential
    - by campaign id: credentialed Pinata query; ``None`` when nothing was
      ever pinned for the id (campaigns that predate metadata uploads)

    Example usage:
        store = MetadataStore(config)
        metadata = await store.fetch_by_address("ipfs://Qm...")
        metadata = await store.fetch_by_campaign_id(7)  # may be None
    """

    def __init__(
        self,
        config: Config,
        ipfs_client: Optional[IPFSGatewayClient] = None,
        pinata_client: Optional[PinataClient] = None,
    ):
        """Initialize the metadata store.

        Args:
            config: Configuration object
            ipfs_client: IPFS gateway client. Created if not provided.
            pinata_client: Pinata client. Created if not provided.
        """
        self.config = config
        self.ipfs_client = ipfs_client or IPFSGatewayClient(config)
        self.pinata_client = pinata_client or PinataClient(config)

    @staticmethod
    def _parse(ipfs_hash: str, raw: dict) -> CampaignMetadata:
        try:
            return CampaignMetadata.from_raw(raw)
        except PydanticValidationError as e:
            raise NetworkError(f"Malformed metadata at {ipfs_hash}", details=str(e)) from e

    async def fetch_by_address(self, uri: str) -> CampaignMetadata:
        """Fetch metadata by content address.

        Args:
            uri: "ipfs://<hash>" or a bare hash

        Returns:
            CampaignMetadata

        Raises:
            NetworkError: If the fetch fails or the document is malformed
            RequestTimeoutError: If the fetch times out
        """
        ipfs_hash = strip_ipfs_scheme(uri)
        raw = await self.ipfs_client.fetch_json(ipfs_hash)
        return self._parse(ipfs_hash, raw)

    async def lookup_by_campaign_id(self, campaign_id: int | str) -> Optional[StoredMetadata]:
        """Find and fetch the raw metadata pinned for a campaign id.

        Args:
            campaign_id: Campaign id

        Returns:
            StoredMetadata, or None if no metadata was pinned for the id

        Raises:
            ConfigurationError: If PINATA_JWT is not configured
            NetworkError: If the query or the fetch fails
            RequestTimeoutError: If either call times out
        """
        ipfs_hash = await self.pinata_client.find_pin(str(campaign_id))
        if ipfs_hash is None:
            return None

        raw = await self.ipfs_client.fetch_json(ipfs_hash)
        return StoredMetadata(ipfs_hash=ipfs_hash, raw=raw)

    async def fetch_by_campaign_id(self, campaign_id: int | str) -> Optional[CampaignMetadata]:
        """Fetch parsed metadata for a campaign id.

        Returns:
            CampaignMetadata, or None if not found

        Raises:
            ConfigurationError: If PINATA_JWT is not configured
            NetworkError: If the lookup fails
        """
        stored = await self.lookup_by_campaign_id(campaign_id)
        if stored is None:
            return None
        return self._parse(stored.ipfs_hash, stored.raw)

    async def save(self, upload: MetadataUpload, created_at: int) -> StoredAddress:
        """Pin a new metadata document.

        The store is write-once: saving again produces a new, unrelated
        content address.

        Args:
            upload: Validated upload payload
            created_at: Server-side timestamp in milliseconds

        Returns:
            StoredAddress of the new document

        Raises:
            ConfigurationError: If PINATA_JWT is not configured
            NetworkError: If the upload fails
            RequestTimeoutError: If the upload times out
        """
        ipfs_hash = await self.pinata_client.pin_json(
            upload.to_content(created_at),
            name=f"campaign-{upload.campaign_id}",
            keyvalues={
                "campaignId": upload.campaign_id,
                "type": METADATA_TYPE,
            },
        )
        return StoredAddress(ipfs_hash=ipfs_hash)
