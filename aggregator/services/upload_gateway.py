"""Server-side gateway for metadata uploads and lookups by campaign id.

Keeps the Pinata credential on the server. Each handler returns a
``GatewayResponse`` (status code + JSON body) so it can be mounted behind
any HTTP layer; ``aggregator.api.views`` is the one we ship.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from aggregator.config import Config
from aggregator.errors import ConfigurationError, NetworkError, ValidationError
from aggregator.log import get_logger
from aggregator.models import MetadataUpload
from aggregator.services.metadata_store import MetadataStore
from aggregator.utils.formatting import to_ipfs_uri

logger = get_logger(__name__)

REQUIRED_FIELDS = ("campaignId", "title")


@dataclass
class GatewayResponse:
    """HTTP-agnostic handler result."""
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def validate_upload(body: Any) -> MetadataUpload:
    """Validate an upload request body.

    Args:
        body: Decoded JSON request body

    Returns:
        MetadataUpload

    Raises:
        ValidationError: If the body isn't an object or required fields are missing
    """
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", missing=list(REQUIRED_FIELDS))

    missing = [
        name for name in REQUIRED_FIELDS
        if body.get(name) is None or not str(body.get(name)).strip()
    ]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(REQUIRED_FIELDS)}",
            missing=missing,
        )

    try:
        return MetadataUpload.model_validate(body)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ValidationError(f"Invalid fields: {', '.join(fields)}", missing=fields) from e


class MetadataUploadGateway:
    """Validates and persists metadata uploads; serves lookups by campaign id.

    The credential check runs first on every call, then request validation;
    the store is only touched once both pass.
    """

    def __init__(
        self,
        config: Config,
        store: MetadataStore,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.store = store
        self.clock = clock

    def _configuration_error(self, e: ConfigurationError) -> GatewayResponse:
        logger.error(f"Gateway misconfigured: {e.message}")
        return GatewayResponse(500, {"error": "Server configuration error"})

    async def upload(self, body: Any) -> GatewayResponse:
        """Handle a metadata upload request.

        Args:
            body: Decoded JSON body with campaignId, title, description,
                imageUrl, videoUrl, goal, deadline

        Returns:
            200 {success, ipfsHash, ipfsUri}, 400 {error, details} on
            validation failure, 500 {error[, details]} otherwise
        """
        try:
            self.config.require_pinata_jwt()
        except ConfigurationError as e:
            return self._configuration_error(e)

        try:
            upload = validate_upload(body)
        except ValidationError as e:
            logger.info(f"Rejected metadata upload: {e.message}")
            return GatewayResponse(400, {
                "error": e.message,
                "details": f"Missing or invalid: {', '.join(e.missing)}",
            })

        created_at = int(self.clock() * 1000)

        try:
            address = await self.store.save(upload, created_at)
        except ConfigurationError as e:
            return self._configuration_error(e)
        except NetworkError as e:
            logger.error(f"Metadata upload failed for campaign {upload.campaign_id}: {e.message}")
            return GatewayResponse(500, {
                "error": "Failed to upload to IPFS",
                "details": e.details,
            })

        logger.info(f"Uploaded metadata for campaign {upload.campaign_id}: {address.ipfs_uri}")
        return GatewayResponse(200, {
            "success": True,
            "ipfsHash": address.ipfs_hash,
            "ipfsUri": address.ipfs_uri,
        })

    async def lookup(self, campaign_id: Any) -> GatewayResponse:
        """Handle a metadata lookup by campaign id.

        Returns:
            200 {success, ipfsHash, ipfsUri, metadata}, 400 if the id is
            missing, 404 {error} if nothing was pinned for it,
            500 {error[, details]} otherwise
        """
        try:
            self.config.require_pinata_jwt()
        except ConfigurationError as e:
            return self._configuration_error(e)

        if campaign_id is None or not str(campaign_id).strip():
            return GatewayResponse(400, {"error": "campaignId query parameter required"})

        try:
            stored = await self.store.lookup_by_campaign_id(str(campaign_id).strip())
        except ConfigurationError as e:
            return self._configuration_error(e)
        except NetworkError as e:
            logger.error(f"Metadata lookup failed for campaign {campaign_id}: {e.message}")
            return GatewayResponse(500, {
                "error": "Failed to fetch metadata",
                "details": e.details,
            })

        if stored is None:
            return GatewayResponse(404, {"error": "Metadata not found"})

        return GatewayResponse(200, {
            "success": True,
            "ipfsHash": stored.ipfs_hash,
            "ipfsUri": to_ipfs_uri(stored.ipfs_hash),
            "metadata": stored.raw,
        })
