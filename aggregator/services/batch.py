"""Concurrent metadata retrieval for many campaigns."""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from aggregator.errors import AggregatorError
from aggregator.log import get_logger
from aggregator.models import CampaignMetadata
from aggregator.services.metadata_store import MetadataStore

logger = get_logger(__name__)

# Either campaign ids (lookup by id) or id -> content address
BatchTargets = Union[Iterable[int], Mapping[int, str]]


class BatchMetadataFetcher:
    """Fetches metadata for many campaigns at once.

    All lookups are dispatched together and the call returns once every one
    of them has settled. A lookup that fails or finds nothing is logged and
    left out of the result; it never fails the batch or affects other
    entries. Nothing is cached between calls.

    ``max_concurrency`` caps in-flight lookups. The default ``None`` keeps
    the fan-out unbounded, which is fine for small id lists; set a cap
    once lists grow large.
    """

    def __init__(self, store: MetadataStore, max_concurrency: Optional[int] = None):
        self.store = store
        self.max_concurrency = max_concurrency

    async def fetch_many(self, targets: BatchTargets) -> dict[int, CampaignMetadata]:
        """Fetch metadata for every target.

        Args:
            targets: Campaign ids, or a mapping of campaign id to content address.
                An empty address falls back to lookup by id.

        Returns:
            Mapping of campaign id to metadata for the lookups that succeeded
        """
        if isinstance(targets, Mapping):
            entries = [(campaign_id, uri) for campaign_id, uri in targets.items()]
        else:
            entries = [(campaign_id, None) for campaign_id in dict.fromkeys(targets)]

        results: dict[int, CampaignMetadata] = {}
        if not entries:
            return results

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def fetch_one(campaign_id: int, uri: Optional[str]) -> None:
            try:
                if semaphore is None:
                    metadata = await self._lookup(campaign_id, uri)
                else:
                    async with semaphore:
                        metadata = await self._lookup(campaign_id, uri)
            except AggregatorError as e:
                logger.warning(
                    f"Failed to fetch metadata for campaign {campaign_id} "
                    f"({e.kind.value}): {e.message}"
                )
                return
            except Exception as e:
                logger.error(f"Unexpected error fetching metadata for campaign {campaign_id}: {e}", exc_info=True)
                return

            if metadata is None:
                logger.debug(f"No metadata for campaign {campaign_id}")
                return
            results[campaign_id] = metadata

        await asyncio.gather(*(fetch_one(cid, uri) for cid, uri in entries))

        logger.info(f"Fetched metadata for {len(results)}/{len(entries)} campaigns")
        return results

    async def _lookup(self, campaign_id: int, uri: Optional[str]) -> Optional[CampaignMetadata]:
        if uri:
            return await self.store.fetch_by_address(uri)
        return await self.store.fetch_by_campaign_id(campaign_id)
