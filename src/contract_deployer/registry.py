"""In-memory registry of deployed contracts."""

import threading
from typing import List, Optional

from .types import ContractRegistryEntry


class ContractRegistry:
    """
    Process-lifetime store of deployed contracts.

    Nothing is persisted. All reads and writes go through one lock, so
    concurrent deployments can append while other threads list.
    """

    def __init__(self, entries: Optional[List[ContractRegistryEntry]] = None):
        self._lock = threading.RLock()
        self._entries: List[ContractRegistryEntry] = list(entries or [])

    def list(self) -> List[ContractRegistryEntry]:
        """Return a snapshot of registered contracts, oldest first."""
        with self._lock:
            return list(self._entries)

    def add(self, entry: ContractRegistryEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def remove(self, address: str) -> bool:
        """
        Remove the first entry with the given address.

        Args:
            address: Contract address (compared case-insensitively)

        Returns:
            True if an entry was removed, False otherwise
        """
        wanted = address.lower()
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.address.lower() == wanted:
                    del self._entries[index]
                    return True
        return False

    def find(self, address: str) -> Optional[ContractRegistryEntry]:
        wanted = address.lower()
        with self._lock:
            for entry in self._entries:
                if entry.address.lower() == wanted:
                    return entry
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
