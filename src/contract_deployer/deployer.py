"""Contract deployment to EVM networks for contract-deployer library."""

import logging
from typing import Any, Callable, Optional, Sequence

import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import Web3Exception

from .abi import coerce_constructor_args
from .constants import DEFAULT_CONFIRMATION_TIMEOUT, DEFAULT_RPC_TIMEOUT, RPC_API_KEY_PLACEHOLDER
from .exceptions import ProviderUnavailableError, SignerUnavailableError, SubmissionError
from .types import CompiledArtifact, DeploymentRecord, NetworkDescriptor

logger = logging.getLogger(__name__)

Web3Factory = Callable[[str, float], Web3]

# Errors raised by web3 and its HTTP transport during RPC round trips
_RPC_ERRORS = (Web3Exception, ValueError, requests.RequestException)


def select_rpc_url(descriptor: NetworkDescriptor, api_key: str = "") -> Optional[str]:
    """
    Pick an RPC endpoint from the descriptor's templates.

    The first template is used with the API key substituted. Without an API
    key, the first template that needs none is preferred.

    Args:
        descriptor: Target network
        api_key: Value for the ${INFURA_API_KEY} placeholder

    Returns:
        RPC URL, or None if the descriptor lists no endpoints
    """
    if not descriptor.rpc:
        return None

    template = descriptor.rpc[0]
    if not api_key:
        keyless = [t for t in descriptor.rpc if RPC_API_KEY_PLACEHOLDER not in t]
        if keyless:
            template = keyless[0]

    return template.replace(RPC_API_KEY_PLACEHOLDER, api_key or "")


def http_web3(rpc_url: str, timeout: float = DEFAULT_RPC_TIMEOUT) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


def connect(
    descriptor: NetworkDescriptor,
    rpc_url: Optional[str],
    timeout: float = DEFAULT_RPC_TIMEOUT,
    web3_factory: Optional[Web3Factory] = None,
) -> Web3:
    """
    Open an RPC connection and confirm it serves the descriptor's chain.

    Args:
        descriptor: Target network (must carry a chain id)
        rpc_url: Endpoint URL from select_rpc_url()
        timeout: HTTP request timeout in seconds
        web3_factory: Builds a Web3 instance from (url, timeout)

    Returns:
        Connected Web3 instance

    Raises:
        ProviderUnavailableError: If no endpoint is known, the chain id cannot be
                                  queried, or it differs from the descriptor's
    """
    if not rpc_url or not descriptor.chain_id:
        raise ProviderUnavailableError(f"Provider for chain {descriptor.name} not available")

    factory = web3_factory or http_web3
    w3 = factory(rpc_url, timeout)

    try:
        reported_chain_id = w3.eth.chain_id
    except _RPC_ERRORS as e:
        raise ProviderUnavailableError(
            f"Provider for chain {descriptor.name} not available: {e}"
        ) from e

    if not reported_chain_id:
        raise ProviderUnavailableError(f"Provider for chain {descriptor.name} not available")
    if reported_chain_id != descriptor.chain_id:
        raise ProviderUnavailableError(
            f"Provider for chain {descriptor.name} reports chain id {reported_chain_id}, "
            f"expected {descriptor.chain_id}"
        )
    return w3


def load_signer(private_key: Optional[str]) -> LocalAccount:
    """
    Build a local signing account from a hex private key.

    Args:
        private_key: 32-byte hex key, with or without 0x prefix

    Returns:
        LocalAccount

    Raises:
        SignerUnavailableError: If the key is missing or invalid
    """
    if not private_key or not private_key.strip():
        raise SignerUnavailableError("Signer not available: no private key configured")

    key = private_key.strip()
    if not key.startswith("0x"):
        key = "0x" + key

    try:
        account = Account.from_key(key)
    except (ValueError, TypeError) as e:
        # Never include the key in the message
        raise SignerUnavailableError("Signer not available: invalid private key") from e

    if not account.address:
        raise SignerUnavailableError("Signer not available: no address derived")
    return account


def explorer_address_url(descriptor: NetworkDescriptor, address: str) -> str:
    if not descriptor.explorers:
        return ""
    return f"{descriptor.explorers[0]}/address/{address}"


def submit_deployment(
    w3: Web3,
    descriptor: NetworkDescriptor,
    artifact: CompiledArtifact,
    signer: LocalAccount,
    constructor_args: Sequence[Any] = (),
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
) -> tuple[str, str]:
    """
    Sign and send the contract-creation transaction and wait for its receipt.

    Args:
        w3: Connected Web3 instance
        descriptor: Target network
        artifact: Compiled contract
        signer: Local signing account
        constructor_args: Typed constructor arguments
        confirmation_timeout: Seconds to wait for the receipt

    Returns:
        Tuple of (contract_address, transaction_hash)

    Raises:
        SubmissionError: If building, sending or confirming the transaction fails
    """
    try:
        factory = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        transaction = factory.constructor(*constructor_args).build_transaction(
            {
                "from": signer.address,
                "nonce": w3.eth.get_transaction_count(signer.address, "pending"),
                "chainId": descriptor.chain_id,
            }
        )
        signed = signer.sign_transaction(transaction)
        tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info("Sent deployment of %s on %s: %s", artifact.contract_name, descriptor.name, tx_hash_hex)

        receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=confirmation_timeout)
    except _RPC_ERRORS as e:
        raise SubmissionError(f"Deployment of {artifact.contract_name} failed: {e}") from e

    if receipt.get("status") == 0:
        raise SubmissionError(f"Deployment transaction {tx_hash_hex} reverted")

    contract_address = receipt.get("contractAddress")
    if not contract_address:
        raise SubmissionError(f"Receipt for {tx_hash_hex} carries no contract address")

    return contract_address, tx_hash_hex


def deploy_artifact(
    descriptor: NetworkDescriptor,
    artifact: CompiledArtifact,
    private_key: Optional[str] = None,
    *,
    name: Optional[str] = None,
    signer: Optional[LocalAccount] = None,
    api_key: str = "",
    constructor_args: Optional[Sequence[Any]] = None,
    web3_factory: Optional[Web3Factory] = None,
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT,
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
) -> DeploymentRecord:
    """
    Deploy a compiled contract to a resolved network.

    Args:
        descriptor: Target network
        artifact: Compiled contract
        private_key: Deployer key (ignored when signer is given)
        name: Name recorded in the result (defaults to the contract name)
        signer: Pre-built signing account
        api_key: Value for ${INFURA_API_KEY} in RPC templates
        constructor_args: Raw constructor arguments, coerced against the ABI
        web3_factory: Builds a Web3 instance from (url, timeout)
        rpc_timeout: HTTP request timeout in seconds
        confirmation_timeout: Seconds to wait for the receipt

    Returns:
        DeploymentRecord

    Raises:
        ConstructorArgumentError: If constructor arguments do not fit the ABI
        ProviderUnavailableError: If the network cannot be reached
        SignerUnavailableError: If no signer can be built
        SubmissionError: If the transaction fails
    """
    typed_args = coerce_constructor_args(artifact.abi, constructor_args)

    rpc_url = select_rpc_url(descriptor, api_key)
    w3 = connect(descriptor, rpc_url, rpc_timeout, web3_factory)

    if signer is None:
        signer = load_signer(private_key)

    contract_address, tx_hash = submit_deployment(
        w3, descriptor, artifact, signer, typed_args, confirmation_timeout
    )

    explorer_url = explorer_address_url(descriptor, contract_address)
    if not explorer_url:
        logger.warning("No block explorer known for %s", descriptor.name)

    record = DeploymentRecord(
        name=name or artifact.contract_name,
        chain=descriptor.name,
        contract_address=contract_address,
        explorer_url=explorer_url,
        chain_id=descriptor.chain_id,
        transaction_hash=tx_hash,
    )
    logger.info("Deployed %s at %s on %s", record.name, contract_address, descriptor.name)
    return record
