"""Data types and dataclasses for contract-deployer library."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class SourceUnit:
    """A single Solidity source module keyed by its logical path."""

    path: str  # Mirror-absolute logical path, e.g. "@openzeppelin/contracts/access/Ownable.sol"
    content: str


class SourceSet:
    """
    Closed set of source units for one compilation.

    Logical paths are unique. The set is mutable while imports are being
    resolved and becomes read-only once frozen for the compiler.
    """

    def __init__(self) -> None:
        self._units: Dict[str, SourceUnit] = {}
        self._frozen = False

    def add(self, unit: SourceUnit) -> None:
        """
        Insert a source unit.

        Raises:
            RuntimeError: If the set is frozen
            ValueError: If a unit with the same logical path is already present
        """
        if self._frozen:
            raise RuntimeError("SourceSet is frozen")
        if unit.path in self._units:
            raise ValueError(f"Duplicate logical path: {unit.path}")
        self._units[unit.path] = unit

    def freeze(self) -> "SourceSet":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, path: str) -> Optional[SourceUnit]:
        return self._units.get(path)

    def paths(self) -> List[str]:
        return list(self._units.keys())

    def to_compiler_sources(self) -> Dict[str, Dict[str, str]]:
        """Return the standard-JSON `sources` mapping: {path: {"content": text}}."""
        return {path: {"content": unit.content} for path, unit in self._units.items()}

    def __contains__(self, path: object) -> bool:
        return path in self._units

    def __iter__(self) -> Iterator[SourceUnit]:
        return iter(list(self._units.values()))

    def __len__(self) -> int:
        return len(self._units)


@dataclass(frozen=True)
class NetworkDescriptor:
    """Canonical description of one deployable EVM network."""

    name: str  # Canonical name, e.g. "Base Goerli Testnet"
    chain_id: Optional[int]  # None when the registry entry carries no usable id
    rpc: Tuple[str, ...] = ()  # RPC URL templates, may contain ${INFURA_API_KEY}
    explorers: Tuple[str, ...] = ()  # Block explorer base URLs
    short_name: Optional[str] = None  # EIP-3770 short name
    chain: Optional[str] = None  # Chain family ticker, e.g. "ETH", "BSC"


@dataclass(frozen=True)
class CompiledArtifact:
    """ABI and creation bytecode of one compiled contract."""

    contract_name: str
    abi: List[Dict[str, Any]]
    bytecode: str  # Hex-encoded creation code (no 0x prefix, as emitted by solc)
    source_path: str


@dataclass(frozen=True)
class DeploymentRecord:
    """Result of a successful deployment."""

    name: str
    chain: str  # Resolved canonical network name
    contract_address: str  # Checksummed address
    explorer_url: str

    chain_id: Optional[int] = None
    transaction_hash: Optional[str] = None


@dataclass(frozen=True)
class ContractRegistryEntry:
    """A deployed contract tracked by the in-memory registry."""

    name: str
    address: str
    chain: str  # Network name as requested by the caller
    source_code: str


@dataclass
class DeployRequest:
    """A deployment request as received from the deploy_contract tool."""

    contract_name: str
    chain_name: str
    source_code: str
    constructor_args: List[Any] = field(default_factory=list)
