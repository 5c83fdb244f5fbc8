"""API URL configuration.

Configuration is loaded once here, at process start, and handed to the
views through ``as_view``.
"""

from django.urls import path, re_path

from aggregator.api.views import (
    CampaignDetailView,
    CampaignListView,
    MetadataLookupView,
    MetadataUploadView,
)
from aggregator.config import Config
from aggregator.services import build_aggregator, build_gateway

config = Config.from_env()
config.validate()

aggregator = build_aggregator(config)
gateway = build_gateway(config)

urlpatterns = [
    path('api/campaigns/', CampaignListView.as_view(aggregator=aggregator), name='campaign-list'),
    path(
        'api/campaigns/<int:campaign_id>/',
        CampaignDetailView.as_view(aggregator=aggregator),
        name='campaign-detail',
    ),
    # Trailing slash optional on the metadata routes
    re_path(r'^api/upload-metadata/?$', MetadataUploadView.as_view(gateway=gateway), name='upload-metadata'),
    re_path(r'^api/fetch-metadata/?$', MetadataLookupView.as_view(gateway=gateway), name='fetch-metadata'),
]
