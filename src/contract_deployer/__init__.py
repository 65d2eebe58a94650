"""
contract-deployer: Python library for compiling and deploying single-file Solidity contracts
"""

from importlib.metadata import PackageNotFoundError, version

from .config import Settings
from .exceptions import (
    CompileError,
    ConstructorArgumentError,
    ContractNotFoundError,
    DeploymentCancelledError,
    DeploymentError,
    ImportFetchError,
    ImportLimitError,
    NetworkResolutionError,
    ProviderUnavailableError,
    SignerUnavailableError,
    SubmissionError,
    ToolArgumentError,
)
from .pipeline import DeploymentPipeline, deploy_contract
from .registry import ContractRegistry
from .types import (
    CompiledArtifact,
    ContractRegistryEntry,
    DeploymentRecord,
    DeployRequest,
    NetworkDescriptor,
    SourceSet,
    SourceUnit,
)

try:
    __version__ = version("contract-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "DeploymentPipeline",
    "deploy_contract",
    "ContractRegistry",
    "Settings",
    "CompiledArtifact",
    "ContractRegistryEntry",
    "DeploymentRecord",
    "DeployRequest",
    "NetworkDescriptor",
    "SourceSet",
    "SourceUnit",
    "DeploymentError",
    "NetworkResolutionError",
    "ImportFetchError",
    "ImportLimitError",
    "CompileError",
    "ContractNotFoundError",
    "ConstructorArgumentError",
    "ProviderUnavailableError",
    "SignerUnavailableError",
    "SubmissionError",
    "DeploymentCancelledError",
    "ToolArgumentError",
]
