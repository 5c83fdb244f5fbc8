"""Publishes metadata for a campaign that was just created on the ledger."""

import time
from typing import Any, Callable, Dict, Optional

from aggregator.errors import AggregatorError
from aggregator.eth.decoder import extract_campaign_id
from aggregator.log import get_logger
from aggregator.services.metadata_store import MetadataStore
from aggregator.services.upload_gateway import validate_upload

logger = get_logger(__name__)


class MetadataPublisher:
    """Uploads metadata keyed by the id found in a creation receipt.

    The ledger creation has already happened by the time this runs, so a
    failure here is logged and reported as None rather than raised.
    """

    def __init__(self, store: MetadataStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    async def publish(self, receipt: Dict[str, Any], fields: Dict[str, Any]) -> Optional[str]:
        """Upload metadata for the campaign created in ``receipt``.

        Args:
            receipt: Transaction receipt of the createCampaign call
            fields: title, description, imageUrl, videoUrl, goal, deadline

        Returns:
            ipfs:// URI of the uploaded metadata, or None
        """
        campaign_id = extract_campaign_id(receipt)
        if campaign_id is None:
            logger.warning("Could not extract campaignId from receipt, skipping metadata upload")
            return None

        try:
            upload = validate_upload({**fields, "campaignId": str(campaign_id)})
            address = await self.store.save(upload, int(self.clock() * 1000))
        except AggregatorError as e:
            logger.error(f"Failed to save metadata for campaign {campaign_id}: {e.message}")
            return None

        logger.info(f"Metadata uploaded for campaign {campaign_id}: {address.ipfs_uri}")
        return address.ipfs_uri
