"""Contract ABI bundled with the package."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from aggregator.log import get_logger

logger = get_logger(__name__)

# Shipped as package data next to the eth/ package
ABI_DIR = Path(__file__).parent.parent / "abi"

CONTRACT_NAME = "CrowdFunding"


@lru_cache(maxsize=None)
def _read_abi(contract_name: str) -> tuple[Dict[str, Any], ...]:
    abi_path = ABI_DIR / f"{contract_name}.json"
    try:
        entries = json.loads(abi_path.read_text())
    except FileNotFoundError as e:
        raise FileNotFoundError(f"No bundled ABI for {contract_name} at {abi_path}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Bundled ABI for {contract_name} is not valid JSON: {e}") from e

    # Hardhat artifacts wrap the ABI in {"abi": [...]}
    if isinstance(entries, dict):
        entries = entries.get("abi")
    if not isinstance(entries, list):
        raise ValueError(f"Bundled ABI for {contract_name} must be a list of entries")

    logger.debug(f"Loaded {contract_name} ABI with {len(entries)} entries")
    return tuple(entries)


def load_abi(contract_name: str) -> list[Dict[str, Any]]:
    """Load a bundled contract ABI.

    The file is parsed once per process; every call returns a fresh list.

    Args:
        contract_name: Contract name, e.g. "CrowdFunding"

    Raises:
        FileNotFoundError: If no ABI is bundled for the contract
        ValueError: If the file isn't a valid ABI
    """
    return list(_read_abi(contract_name))


def get_crowdfunding_abi() -> list[Dict[str, Any]]:
    return load_abi(CONTRACT_NAME)


def get_output_names(abi: list[Dict[str, Any]], function_name: str) -> list[str]:
    """Get the output field names of a contract function.

    A single tuple output is flattened to its component names, which is
    how struct-returning getters are laid out.

    Args:
        abi: Contract ABI
        function_name: Function to look up

    Returns:
        List of output names (empty if the function isn't in the ABI)
    """
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            outputs = entry.get("outputs", [])
            if len(outputs) == 1 and outputs[0].get("type") == "tuple":
                return [c["name"] for c in outputs[0].get("components", [])]
            return [o.get("name", "") for o in outputs]
    return []
