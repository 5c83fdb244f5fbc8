"""Pinata client for credentialed pinning and key-value pin queries."""

import json
from typing import Any, Optional

import httpx

from aggregator.config import Config
from aggregator.errors import NetworkError, RequestTimeoutError
from aggregator.log import get_logger

logger = get_logger(__name__)

METADATA_TYPE = "campaign-metadata"


def _error_details(e: httpx.HTTPStatusError) -> str:
    """Pull Pinata's short error message out of a failed response."""
    try:
        body = e.response.json()
    except ValueError:
        return f"HTTP {e.response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        error = error.get("reason") or error.get("details")
    return str(error) if error else f"HTTP {e.response.status_code}"


class PinataClient:
    """Client for the Pinata pinning API.

    Every call needs the PINATA_JWT credential; it is checked before any
    request is built, so a missing credential never reaches the network.

    Example usage:
        pinata = PinataClient(config)
        ipfs_hash = await pinata.pin_json(content, name="campaign-1", keyvalues={...})
        ipfs_hash = await pinata.find_pin("1")
    """

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the Pinata client.

        Args:
            config: Configuration with API URL, credential and timeouts
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.api_url = config.pinata_api_url.rstrip('/')
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        # Raises ConfigurationError if the JWT is missing
        jwt = self.config.require_pinata_jwt()
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {jwt}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        timeout: float,
        **kwargs: Any,
    ) -> dict[str, Any]:
        headers = self._headers()
        url = f"{self.api_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await client.request(method, url, headers=headers, **kwargs)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling Pinata {path}")
            raise RequestTimeoutError(f"Timeout calling Pinata {path}", details="timeout") from e
        except httpx.HTTPStatusError as e:
            details = _error_details(e)
            logger.error(f"Pinata {path} returned HTTP {e.response.status_code}: {details}")
            raise NetworkError(f"Pinata {path} failed", details=details) from e
        except Exception as e:
            logger.error(f"Error calling Pinata {path}: {e}")
            raise NetworkError(f"Pinata {path} failed", details=str(e)) from e

        if not isinstance(data, dict):
            logger.error(f"Pinata {path} returned a non-object body")
            raise NetworkError(f"Pinata {path} failed", details="Unexpected response body")
        return data

    async def pin_json(
        self,
        content: dict[str, Any],
        name: str,
        keyvalues: dict[str, str],
    ) -> str:
        """Pin a JSON document.

        Args:
            content: Document to pin
            name: Pin name shown in Pinata
            keyvalues: Queryable key-values attached to the pin

        Returns:
            The content hash (CID) of the pinned document

        Raises:
            ConfigurationError: If PINATA_JWT is not configured
            NetworkError: If the upload fails
            RequestTimeoutError: If the upload times out
        """
        data = await self._request(
            "POST",
            "/pinning/pinJSONToIPFS",
            timeout=self.config.write_timeout_seconds,
            json={
                "pinataContent": content,
                "pinataMetadata": {"name": name, "keyvalues": keyvalues},
            },
        )
        ipfs_hash = data.get("IpfsHash")
        if not ipfs_hash or not isinstance(ipfs_hash, str):
            raise NetworkError("Pinata response missing IpfsHash")

        logger.info(f"Pinned {name} as {ipfs_hash}")
        return ipfs_hash

    async def find_pin(self, campaign_id: str) -> Optional[str]:
        """Find the pinned metadata hash for a campaign id.

        Args:
            campaign_id: Campaign id the pin was tagged with

        Returns:
            Content hash of the first matching pin, or None if nothing is pinned

        Raises:
            ConfigurationError: If PINATA_JWT is not configured
            NetworkError: If the query fails
            RequestTimeoutError: If the query times out
        """
        data = await self._request(
            "GET",
            "/data/pinList",
            timeout=self.config.read_timeout_seconds,
            params={
                "status": "pinned",
                "metadata": json.dumps({
                    "keyvalues": {
                        "campaignId": {"value": str(campaign_id), "op": "eq"},
                    },
                }),
            },
        )

        rows = data.get("rows") or []
        if not isinstance(rows, list):
            raise NetworkError("Pinata /data/pinList failed", details="Unexpected rows in response")
        if not data.get("count") or not rows:
            logger.debug(f"No pinned metadata for campaign {campaign_id}")
            return None

        first = rows[0]
        pin_hash = first.get("ipfs_pin_hash") if isinstance(first, dict) else None
        if not pin_hash or not isinstance(pin_hash, str):
            raise NetworkError("Pinata /data/pinList failed", details="Unexpected row in response")
        return pin_hash
