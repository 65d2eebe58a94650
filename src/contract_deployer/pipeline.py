"""Main API for contract-deployer library."""

import logging
import re
import threading
from typing import Any, Optional, Sequence

import requests
from eth_account.signers.local import LocalAccount

from .compiler import CompileFn, compile_contract, solc_compile_fn
from .config import Settings
from .constants import DEFAULT_SOURCE_FILE_NAME
from .deployer import Web3Factory, deploy_artifact
from .exceptions import DeploymentCancelledError
from .imports import ImportResolver
from .networks import resolve_network
from .registry import ContractRegistry
from .types import ContractRegistryEntry, DeploymentRecord, DeployRequest, NetworkDescriptor

logger = logging.getLogger(__name__)


def source_file_name(name: Optional[str]) -> str:
    """
    Derive the logical path of the root source file from a contract name.

    Args:
        name: Contract name as supplied by the caller

    Returns:
        e.g. "My Token" -> "my_token.sol"; empty name -> "contract.sol"
    """
    if not name:
        return f"{DEFAULT_SOURCE_FILE_NAME}.sol"
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE).lower() + ".sol"


def _check_cancelled(cancel_event: Optional[threading.Event], stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise DeploymentCancelledError(f"Deployment cancelled before {stage}")


class DeploymentPipeline:
    """Resolves, compiles and deploys single-file Solidity contracts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[ContractRegistry] = None,
        networks: Optional[Sequence[NetworkDescriptor]] = None,
        session: Optional[requests.Session] = None,
        compile_fn: Optional[CompileFn] = None,
        web3_factory: Optional[Web3Factory] = None,
        signer: Optional[LocalAccount] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Runtime settings (defaults to Settings.from_env())
            registry: Contract registry that receives successful deployments
            networks: Network registry (defaults to the bundled chains.json)
            session: HTTP session used for mirror fetches
            compile_fn: Standard-JSON compile function (defaults to the pinned solc release)
            web3_factory: Builds a Web3 instance from (url, timeout)
            signer: Pre-built signing account (defaults to settings.private_key)
        """
        self.settings = settings if settings is not None else Settings.from_env()
        self.registry = registry if registry is not None else ContractRegistry()
        self.networks = networks
        self.session = session
        self.compile_fn = compile_fn
        self.web3_factory = web3_factory
        self.signer = signer

    def deploy(
        self,
        request: DeployRequest,
        cancel_event: Optional[threading.Event] = None,
    ) -> DeploymentRecord:
        """
        Run the full pipeline for one request.

        Nothing is registered unless every stage succeeds.

        Args:
            request: Contract name, chain name, source code and constructor args
            cancel_event: Set to abort at the next stage boundary or import fetch

        Returns:
            DeploymentRecord

        Raises:
            NetworkResolutionError: If the chain name cannot be resolved
            ImportFetchError: If an import cannot be fetched
            CompileError: If compilation fails or no contract can be selected
            ConstructorArgumentError: If constructor arguments do not fit the ABI
            ProviderUnavailableError: If the network cannot be reached
            SignerUnavailableError: If no signer can be built
            SubmissionError: If the transaction fails
            DeploymentCancelledError: If cancel_event is set
        """
        settings = self.settings

        _check_cancelled(cancel_event, "network resolution")
        descriptor = resolve_network(request.chain_name, self.networks)

        _check_cancelled(cancel_event, "import resolution")
        entry_path = source_file_name(request.contract_name)
        resolver = ImportResolver(
            mirror_base_url=settings.mirror_base_url,
            session=self.session,
            fetch_timeout=settings.fetch_timeout,
            max_depth=settings.max_import_depth,
            max_fetches=settings.max_import_fetches,
            budget_seconds=settings.import_budget,
            cancel_event=cancel_event,
        )
        sources = resolver.resolve(request.source_code, entry_path)

        _check_cancelled(cancel_event, "compilation")
        artifact = compile_contract(
            sources,
            entry_path,
            contract_name=request.contract_name,
            evm_version=settings.evm_version,
            compile_fn=self.compile_fn or solc_compile_fn(settings.solc_version, settings.compile_timeout),
        )

        _check_cancelled(cancel_event, "deployment")
        record = deploy_artifact(
            descriptor,
            artifact,
            settings.private_key,
            name=request.contract_name,
            signer=self.signer,
            api_key=settings.rpc_api_key,
            constructor_args=request.constructor_args,
            web3_factory=self.web3_factory,
            rpc_timeout=settings.rpc_timeout,
            confirmation_timeout=settings.confirmation_timeout,
        )

        self.registry.add(
            ContractRegistryEntry(
                name=request.contract_name,
                address=record.contract_address,
                chain=request.chain_name,
                source_code=request.source_code,
            )
        )
        logger.info("Deployment data: %s", record)
        return record


def deploy_contract(
    name: str,
    chain: str,
    source_code: str,
    constructor_args: Optional[Sequence[Any]] = None,
    pipeline: Optional[DeploymentPipeline] = None,
) -> DeploymentRecord:
    """
    Resolve, compile and deploy a single Solidity source file.

    Args:
        name: Contract name
        chain: Network name, matched exactly or fuzzily against the registry
        source_code: Solidity source text
        constructor_args: Constructor arguments (strings or lists of strings)
        pipeline: Pipeline to run (defaults to one configured from the environment)

    Returns:
        DeploymentRecord
    """
    if pipeline is None:
        pipeline = DeploymentPipeline()
    request = DeployRequest(
        contract_name=name,
        chain_name=chain,
        source_code=source_code,
        constructor_args=list(constructor_args or []),
    )
    return pipeline.deploy(request)
