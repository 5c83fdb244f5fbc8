"""Services package: aggregation, status resolution and store access."""

from aggregator.config import Config
from aggregator.eth.client import LedgerClient
from aggregator.services.aggregator import CampaignAggregator
from aggregator.services.batch import BatchMetadataFetcher
from aggregator.services.metadata_store import MetadataStore
from aggregator.services.publisher import MetadataPublisher
from aggregator.services.status import StatusResult, resolve
from aggregator.services.upload_gateway import GatewayResponse, MetadataUploadGateway


def build_aggregator(config: Config) -> CampaignAggregator:
    """Wire a CampaignAggregator from configuration."""
    store = MetadataStore(config)
    return CampaignAggregator(
        ledger=LedgerClient(config),
        store=store,
        batch_fetcher=BatchMetadataFetcher(store, config.batch_max_concurrency),
    )


def build_gateway(config: Config) -> MetadataUploadGateway:
    """Wire a MetadataUploadGateway from configuration."""
    return MetadataUploadGateway(config, MetadataStore(config))


__all__ = [
    'BatchMetadataFetcher',
    'CampaignAggregator',
    'GatewayResponse',
    'MetadataPublisher',
    'MetadataStore',
    'MetadataUploadGateway',
    'StatusResult',
    'build_aggregator',
    'build_gateway',
    'resolve',
]
