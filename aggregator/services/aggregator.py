"""Campaign aggregation: ledger record + optional metadata -> CampaignView."""

import asyncio
import time
from typing import Callable, Optional

from aggregator.errors import AggregatorError, ContractReadError
from aggregator.eth.client import LedgerClient
from aggregator.log import get_logger
from aggregator.models import CampaignMetadata, CampaignRecord, CampaignView
from aggregator.services.batch import BatchMetadataFetcher
from aggregator.services.metadata_store import MetadataStore
from aggregator.services.status import resolve
from aggregator.utils.formatting import format_ether

logger = get_logger(__name__)

DEFAULT_TITLE = "Untitled Campaign"
DEFAULT_DESCRIPTION = "No description available"


def build_view(
    record: CampaignRecord,
    metadata: Optional[CampaignMetadata],
    donor_count: int,
    now: float,
) -> CampaignView:
    """Merge a ledger record and optional metadata into a view.

    Financial fields always come from the ledger. Title and description come
    from metadata when present and non-empty, otherwise from the ledger copy.
    Media links are empty without metadata.

    Args:
        record: Authoritative ledger record
        metadata: Stored metadata, or None
        donor_count: Number of donations
        now: Current unix time

    Returns:
        CampaignView
    """
    result = resolve(record.goal, record.raised, record.deadline, now)

    title = (metadata.title if metadata else "") or record.title or DEFAULT_TITLE
    description = (
        (metadata.description if metadata else "")
        or record.description
        or DEFAULT_DESCRIPTION
    )

    return CampaignView(
        id=record.id,
        creator=record.creator,
        title=title,
        description=description,
        image_url=metadata.image_url if metadata else "",
        video_url=metadata.video_url if metadata else "",
        goal=format_ether(record.goal),
        raised=format_ether(record.raised),
        deadline=record.deadline,
        donor_count=donor_count,
        progress=result.progress,
        is_active=result.is_active,
        status=result.status,
    )


class CampaignAggregator:
    """Builds campaign views from the ledger and the metadata store.

    Ledger record reads are fatal for the view being built; donor counts and
    metadata degrade gracefully. The aggregator never writes to either side.

    Example usage:
        aggregator = CampaignAggregator(ledger, store)
        view = await aggregator.aggregate(3)
        views = await aggregator.list_campaigns()
    """

    def __init__(
        self,
        ledger: LedgerClient,
        store: MetadataStore,
        batch_fetcher: Optional[BatchMetadataFetcher] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the aggregator.

        Args:
            ledger: Ledger client
            store: Metadata store
            batch_fetcher: Fetcher for list views. Created from store if not provided.
            clock: Wall-clock source, in unix seconds
        """
        self.ledger = ledger
        self.store = store
        self.batch_fetcher = batch_fetcher or BatchMetadataFetcher(store)
        self.clock = clock

    async def _donor_count(self, campaign_id: int) -> int:
        try:
            return await self.ledger.get_donor_count(campaign_id)
        except ContractReadError as e:
            logger.warning(f"Donor count unavailable for campaign {campaign_id}, using 0: {e}")
            return 0

    async def _metadata(
        self,
        campaign_id: int,
        metadata_uri: Optional[str],
    ) -> Optional[CampaignMetadata]:
        try:
            if metadata_uri:
                return await self.store.fetch_by_address(metadata_uri)
            return await self.store.fetch_by_campaign_id(campaign_id)
        except AggregatorError as e:
            logger.warning(
                f"Metadata unavailable for campaign {campaign_id} "
                f"({e.kind.value}), using ledger fallback: {e.message}"
            )
            return None

    async def aggregate(self, campaign_id: int, metadata_uri: Optional[str] = None) -> CampaignView:
        """Build the view for one campaign.

        Args:
            campaign_id: Campaign id on the ledger
            metadata_uri: Content address of the metadata, if the caller has one.
                Without it, metadata is looked up by campaign id.

        Returns:
            CampaignView

        Raises:
            ContractReadError: If the ledger record can't be read
        """
        record = await self.ledger.get_campaign(campaign_id)

        donor_count, metadata = await asyncio.gather(
            self._donor_count(campaign_id),
            self._metadata(campaign_id, metadata_uri),
        )
        if metadata is None:
            logger.info(f"Campaign {campaign_id} has no metadata, using ledger copies")

        return build_view(record, metadata, donor_count, self.clock())

    async def _read_listing(self, campaign_id: int) -> Optional[tuple[CampaignRecord, int]]:
        try:
            record = await self.ledger.get_campaign(campaign_id)
        except ContractReadError as e:
            logger.warning(f"Skipping campaign {campaign_id}: {e}")
            return None
        return record, await self._donor_count(campaign_id)

    async def list_campaigns(self) -> list[CampaignView]:
        """Build views for every campaign on the ledger, newest first.

        Campaigns whose record can't be read are left out.

        Returns:
            List of CampaignView

        Raises:
            ContractReadError: If the campaign count can't be read
        """
        total = await self.ledger.campaign_count()
        if total == 0:
            return []

        listings = await asyncio.gather(*(self._read_listing(i) for i in range(total)))
        readable = [listing for listing in listings if listing is not None]

        metadata = await self.batch_fetcher.fetch_many(
            [record.id for record, _ in readable]
        )

        now = self.clock()
        views = [
            build_view(record, metadata.get(record.id), donor_count, now)
            for record, donor_count in readable
        ]
        views.reverse()

        logger.info(f"Listed {len(views)}/{total} campaigns")
        return views
