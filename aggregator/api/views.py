"""API views for campaign views and metadata upload/lookup."""

import logging

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from aggregator.errors import ContractReadError
from aggregator.services.aggregator import CampaignAggregator
from aggregator.services.upload_gateway import GatewayResponse, MetadataUploadGateway

logger = logging.getLogger(__name__)


def gateway_response(result: GatewayResponse) -> Response:
    return Response(result.body, status=result.status_code)


class CampaignListView(APIView):
    """API view for all campaigns, newest first."""

    aggregator: CampaignAggregator = None

    def get(self, request):
        """List campaign views."""
        try:
            views = async_to_sync(self.aggregator.list_campaigns)()
        except ContractReadError as e:
            logger.error(f"Failed to list campaigns: {e}")
            return Response(
                {'detail': 'Failed to read campaigns from the ledger.'},
                status=status.HTTP_502_BAD_GATEWAY
            )
        return Response([view.to_json_dict() for view in views])


class CampaignDetailView(APIView):
    """API view for a single campaign.

    Pass ``?uri=ipfs://...`` to read metadata by content address instead
    of looking it up by campaign id.
    """

    aggregator: CampaignAggregator = None

    def get(self, request, campaign_id):
        """Get one campaign view."""
        metadata_uri = request.query_params.get('uri') or None

        try:
            view = async_to_sync(self.aggregator.aggregate)(campaign_id, metadata_uri)
        except ContractReadError as e:
            logger.error(f"Failed to read campaign {campaign_id}: {e}")
            return Response(
                {'detail': f'Failed to read campaign {campaign_id} from the ledger.'},
                status=status.HTTP_502_BAD_GATEWAY
            )
        return Response(view.to_json_dict())


class MetadataUploadView(APIView):
    """POST endpoint that pins campaign metadata to IPFS."""

    gateway: MetadataUploadGateway = None

    def post(self, request):
        return gateway_response(async_to_sync(self.gateway.upload)(request.data))


class MetadataLookupView(APIView):
    """GET endpoint that finds pinned metadata by ``?campaignId=``."""

    gateway: MetadataUploadGateway = None

    def get(self, request):
        campaign_id = request.query_params.get('campaignId')
        return gateway_response(async_to_sync(self.gateway.lookup)(campaign_id))
