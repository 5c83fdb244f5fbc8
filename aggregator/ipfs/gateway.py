"""IPFS gateway client for public, unauthenticated metadata reads."""

from typing import Any, Optional

import httpx

from aggregator.config import Config
from aggregator.errors import NetworkError, RequestTimeoutError
from aggregator.log import get_logger
from aggregator.utils.formatting import strip_ipfs_scheme

logger = get_logger(__name__)


class IPFSGatewayClient:
    """Client for reading content through an IPFS HTTP gateway.

    Example usage:
        client = IPFSGatewayClient(config)
        data = await client.fetch_json("ipfs://QmXxx...")
    """

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the IPFS gateway client.

        Args:
            config: Configuration with gateway URL and read timeout
            transport: Optional httpx transport (used by tests)
        """
        self.gateway_url = config.ipfs_gateway_url
        self.timeout = config.read_timeout_seconds
        self.transport = transport

        # Ensure gateway URL ends with /
        if not self.gateway_url.endswith('/'):
            self.gateway_url += '/'

    def get_gateway_url(self, cid: str) -> str:
        """Get the public gateway URL for a CID.

        Accepts both ipfs:// URIs and bare hashes.

        Args:
            cid: The IPFS content identifier

        Returns:
            Full gateway URL for the CID
        """
        return f"{self.gateway_url}{strip_ipfs_scheme(cid)}"

    async def fetch_json(self, cid: str) -> dict[str, Any]:
        """Fetch JSON content from IPFS.

        Args:
            cid: The IPFS content identifier or ipfs:// URI

        Returns:
            Parsed JSON data as a dictionary

        Raises:
            NetworkError: If the request fails or the body isn't a JSON object
            RequestTimeoutError: If the request times out
        """
        url = self.get_gateway_url(cid)
        logger.debug(f"Fetching IPFS content from: {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Timeout fetching IPFS content: {cid}")
            raise RequestTimeoutError(f"Timeout fetching CID: {cid}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching IPFS content: {e.response.status_code}")
            raise NetworkError(
                f"HTTP {e.response.status_code} fetching CID: {cid}"
            ) from e
        except Exception as e:
            logger.error(f"Error fetching IPFS content: {e}")
            raise NetworkError(f"Failed to fetch CID: {cid}", details=str(e)) from e

        if not isinstance(data, dict):
            raise NetworkError(f"Unexpected content for CID: {cid}")
        return data
