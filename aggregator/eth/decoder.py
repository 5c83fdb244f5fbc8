"""Event log decoder for CrowdFunding receipts."""

from typing import Any, Dict, Iterable, Optional

from hexbytes import HexBytes
from web3 import Web3

from aggregator.eth.abi_loader import get_crowdfunding_abi
from aggregator.log import get_logger

logger = get_logger(__name__)

# Contract instance for decoding
_contract = None


def _get_contract() -> Any:
    """Get address-less Web3 contract instance for CrowdFunding.

    Returns:
        Web3 contract instance
    """
    global _contract
    if _contract is None:
        _contract = Web3().eth.contract(abi=get_crowdfunding_abi())
    return _contract


def event_topic(event_name: str) -> Optional[HexBytes]:
    """Compute the topic0 hash of an event in the contract ABI.

    Args:
        event_name: Event name, e.g. "CampaignCreated"

    Returns:
        Topic hash, or None if the event isn't in the ABI
    """
    for event_abi in _get_contract().abi:
        if event_abi.get("type") == "event" and event_abi["name"] == event_name:
            input_types = [inp["type"] for inp in event_abi.get("inputs", [])]
            signature = f"{event_name}({','.join(input_types)})"
            return HexBytes(Web3.keccak(text=signature))
    return None


def decode_logs(logs: Iterable[Dict[str, Any]], event_name: str) -> list[Dict[str, Any]]:
    """Decode every log of one event type.

    Logs from other events (or that fail to decode) are skipped.

    Args:
        logs: Raw logs from a transaction receipt
        event_name: Event to decode

    Returns:
        List of decoded args dictionaries
    """
    topic = event_topic(event_name)
    if topic is None:
        logger.error(f"Unknown event: {event_name}")
        return []

    event_handler = getattr(_get_contract().events, event_name)
    decoded = []

    for log in logs:
        topics = log.get("topics") or []
        if not topics or HexBytes(topics[0]) != topic:
            continue
        try:
            processed = event_handler().process_log(log)
            decoded.append(dict(processed["args"]))
        except Exception as decode_error:
            logger.debug(f"Error decoding {event_name}: {decode_error}")
            continue

    return decoded


def extract_campaign_id(receipt: Dict[str, Any]) -> Optional[int]:
    """Extract the new campaign id from a creation receipt.

    Args:
        receipt: Transaction receipt of a createCampaign call

    Returns:
        Campaign id from the first CampaignCreated event, or None
    """
    for args in decode_logs(receipt.get("logs") or [], "CampaignCreated"):
        campaign_id = args.get("campaignId")
        if campaign_id is not None:
            return int(campaign_id)

    logger.warning("No CampaignCreated event found in receipt")
    return None
