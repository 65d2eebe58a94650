"""Network registry and network-name resolution for contract-deployer library."""

import json
import logging
import re
from difflib import SequenceMatcher
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .constants import FUZZY_CONTAINMENT_SCORE, FUZZY_MIN_SCORE
from .exceptions import NetworkResolutionError
from .types import NetworkDescriptor

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PATH = Path(__file__).parent / "data" / "chains.json"

_SEPARATORS = re.compile(r"[\s_-]+")

# Descriptor attributes compared verbatim, in priority order
_EXACT_MATCH_FIELDS = ("name", "short_name", "chain")


def _parse_chain_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value, 0)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def parse_network_entry(entry: Dict[str, Any]) -> NetworkDescriptor:
    """
    Convert a chains.json entry into a NetworkDescriptor.

    Args:
        entry: Dict with name, chainId, rpc and explorers keys
               (ethereum-lists/chains layout)

    Returns:
        NetworkDescriptor; chain_id is None when missing or not a positive integer
    """
    explorers: List[str] = []
    for explorer in entry.get("explorers") or []:
        if isinstance(explorer, dict) and explorer.get("url"):
            explorers.append(explorer["url"].rstrip("/"))
        elif isinstance(explorer, str) and explorer:
            explorers.append(explorer.rstrip("/"))

    return NetworkDescriptor(
        name=entry["name"],
        chain_id=_parse_chain_id(entry.get("chainId")),
        rpc=tuple(url for url in entry.get("rpc") or [] if isinstance(url, str) and url),
        explorers=tuple(explorers),
        short_name=entry.get("shortName"),
        chain=entry.get("chain"),
    )


def load_network_registry(path: Optional[Union[Path, str]] = None) -> Tuple[NetworkDescriptor, ...]:
    """
    Load a static network registry from JSON.

    Args:
        path: Registry file (defaults to the bundled chains.json)

    Returns:
        Tuple of NetworkDescriptor in file order

    Raises:
        FileNotFoundError: If the registry file does not exist
        ValueError: If the file is not a JSON list of entries
    """
    registry_path = DEFAULT_REGISTRY_PATH if path is None else Path(path)
    with open(registry_path) as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Network registry must be a JSON list: {registry_path}")

    return tuple(parse_network_entry(entry) for entry in data if entry.get("name"))


@lru_cache(maxsize=1)
def get_network_registry() -> Tuple[NetworkDescriptor, ...]:
    """Return the bundled network registry, loaded once per process."""
    return load_network_registry()


def normalize_network_name(name: str) -> str:
    """Lower-case and delete hyphens, underscores and whitespace."""
    return _SEPARATORS.sub("", name.lower())


def _similarity(query: str, candidate: str) -> float:
    score = SequenceMatcher(None, query, candidate).ratio()
    if query and query in candidate:
        score = max(score, FUZZY_CONTAINMENT_SCORE)
    return score


def best_fuzzy_match(query: str, candidates: Sequence[str]) -> Tuple[Optional[str], float]:
    """
    Find the candidate most similar to the query.

    Args:
        query: Normalized input
        candidates: Normalized registry names

    Returns:
        Tuple of (best candidate or None, score); ties keep the earliest candidate
    """
    best: Optional[str] = None
    best_score = 0.0
    for candidate in candidates:
        score = _similarity(query, candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best, best_score


def resolve_network(
    name: str,
    registry: Optional[Sequence[NetworkDescriptor]] = None,
    min_score: float = FUZZY_MIN_SCORE,
) -> NetworkDescriptor:
    """
    Resolve a free-text network name to a registry entry.

    An exact case-insensitive match with a chain id always wins, checked against
    names first, then EIP-3770 short names, then chain tickers (e.g. "bsc").
    Otherwise the closest normalized name is selected.

    Args:
        name: Network name as supplied by the user, e.g. "base-goerli"
        registry: Descriptors to search (defaults to the bundled registry)
        min_score: Minimum fuzzy similarity accepted

    Returns:
        NetworkDescriptor with a chain id

    Raises:
        NetworkResolutionError: If no entry with a chain id matches
    """
    if registry is None:
        registry = get_network_registry()

    wanted = name.strip().lower()
    for field in _EXACT_MATCH_FIELDS:
        for descriptor in registry:
            value = getattr(descriptor, field)
            if value and value.lower() == wanted and descriptor.chain_id:
                if field != "name":
                    logger.info("Resolved network '%s' to '%s' by %s", name, descriptor.name, field)
                return descriptor

    query = normalize_network_name(name)
    normalized_names = [normalize_network_name(d.name) for d in registry]
    target, score = best_fuzzy_match(query, normalized_names)

    if target is None or score < min_score:
        raise NetworkResolutionError(f"Chain '{name}' not found")

    descriptor = registry[normalized_names.index(target)]
    if not descriptor.chain_id:
        raise NetworkResolutionError(
            f"Chain '{name}' matched '{descriptor.name}', which has no chain id"
        )

    logger.info("Resolved network '%s' to '%s' (score %.2f)", name, descriptor.name, score)
    return descriptor
