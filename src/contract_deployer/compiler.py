"""Solidity compiler driver for contract-deployer library."""

import json
import logging
import re
import subprocess
from typing import Any, Callable, Dict, List, Optional

import requests
import solcx
import solcx.install
from solcx.exceptions import DownloadError, SolcInstallationError, SolcNotInstalled, UnsupportedVersionError

from .constants import (
    COMPILER_LANGUAGE,
    DEFAULT_COMPILE_TIMEOUT,
    DEFAULT_EVM_VERSION,
    DEFAULT_SOLC_VERSION,
    OUTPUT_SELECTION,
)
from .exceptions import CompileError, ContractNotFoundError
from .types import CompiledArtifact, SourceSet

logger = logging.getLogger(__name__)

CompileFn = Callable[[Dict[str, Any]], Dict[str, Any]]

_SOLC_UNAVAILABLE = (
    SolcInstallationError,
    SolcNotInstalled,
    DownloadError,
    UnsupportedVersionError,
    requests.RequestException,
    OSError,
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def build_compiler_input(
    source_set: SourceSet,
    entry_path: str,
    evm_version: str = DEFAULT_EVM_VERSION,
) -> Dict[str, Any]:
    """
    Build a solc standard-JSON input document.

    Args:
        source_set: Resolved sources; must contain entry_path
        entry_path: Logical path of the file being deployed
        evm_version: EVM target version

    Returns:
        Standard-JSON input requesting ABI and bytecode for every contract

    Raises:
        ValueError: If the entry file is not part of the source set
    """
    if entry_path not in source_set:
        raise ValueError(f"Entry file '{entry_path}' is not in the source set")

    sources = source_set.to_compiler_sources()
    return {
        "language": COMPILER_LANGUAGE,
        "sources": {entry_path: sources.pop(entry_path), **sources},
        "settings": {
            "evmVersion": evm_version,
            "outputSelection": OUTPUT_SELECTION,
        },
    }


def ensure_solc(version: str) -> str:
    """
    Install the requested solc release unless it is already present.

    Args:
        version: solc release, e.g. "0.8.23"

    Returns:
        Path of the solc executable

    Raises:
        CompileError: If the release cannot be installed or located
    """
    try:
        installed = {str(v) for v in solcx.get_installed_solc_versions()}
        if version not in installed:
            logger.info("Installing solc %s", version)
            solcx.install_solc(version)
        return str(solcx.install.get_executable(version))
    except _SOLC_UNAVAILABLE as e:
        raise CompileError(f"solc {version} is not available: {e}") from e


def solc_compile_fn(
    solc_version: str = DEFAULT_SOLC_VERSION,
    timeout: float = DEFAULT_COMPILE_TIMEOUT,
) -> CompileFn:
    """
    Return a compile function that runs `solc --standard-json`.

    The release is installed through py-solc-x on first use. Source errors come
    back as diagnostics in the JSON output and are left to triage_diagnostics.
    """

    def _compile(input_data: Dict[str, Any]) -> Dict[str, Any]:
        executable = ensure_solc(solc_version)
        try:
            result = subprocess.run(
                [executable, "--standard-json"],
                input=json.dumps(input_data),
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CompileError(f"solc {solc_version} timed out after {timeout}s") from e
        except OSError as e:
            raise CompileError(f"Failed to run solc {solc_version}: {e}") from e

        try:
            output = json.loads(result.stdout)
        except ValueError as e:
            raise CompileError(
                f"solc {solc_version} exited with code {result.returncode}: {result.stderr.strip()}"
            ) from e
        if not isinstance(output, dict):
            raise CompileError(f"solc {solc_version} returned unexpected output")
        return output

    return _compile


def triage_diagnostics(output: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Check compiler diagnostics.

    Args:
        output: solc standard-JSON output

    Returns:
        Warning-severity diagnostics (not surfaced further)

    Raises:
        CompileError: With the first error-severity diagnostic's formatted message
    """
    diagnostics = output.get("errors") or []
    errors = [d for d in diagnostics if d.get("severity") == "error"]
    if errors:
        first = errors[0]
        raise CompileError(first.get("formattedMessage") or first.get("message") or "Compilation failed")

    warnings = [d for d in diagnostics if d.get("severity") != "error"]
    for warning in warnings:
        logger.debug("solc %s: %s", warning.get("severity"), warning.get("message"))
    return warnings


def _contract_key(name: str) -> str:
    return _NON_ALNUM.sub("", name.lower())


def select_contract(
    output: Dict[str, Any],
    entry_path: str,
    contract_name: Optional[str] = None,
) -> CompiledArtifact:
    """
    Extract one deployable contract from the entry file's compiler output.

    Interfaces, libraries and abstract contracts (empty bytecode) are ignored.

    Args:
        output: solc standard-JSON output
        entry_path: Logical path of the file being deployed
        contract_name: Preferred contract name; matched exactly, then ignoring
                       case and non-alphanumerics ("My Token" picks MyToken)

    Returns:
        CompiledArtifact for the selected contract

    Raises:
        ContractNotFoundError: If no contract is deployable, or several are and
                               contract_name does not pick one
    """
    file_contracts = (output.get("contracts") or {}).get(entry_path) or {}

    deployable: Dict[str, Dict[str, Any]] = {}
    for name, data in file_contracts.items():
        bytecode = ((data.get("evm") or {}).get("bytecode") or {}).get("object") or ""
        if bytecode:
            deployable[name] = data

    if not deployable:
        raise ContractNotFoundError(f"No deployable contract found in '{entry_path}'")

    wanted = _contract_key(contract_name or "")
    loose = [name for name in deployable if wanted and _contract_key(name) == wanted]

    if contract_name is not None and contract_name in deployable:
        selected = contract_name
    elif len(loose) == 1:
        selected = loose[0]
    elif len(deployable) == 1:
        selected = next(iter(deployable))
    else:
        raise ContractNotFoundError(
            f"'{entry_path}' defines several deployable contracts "
            f"({', '.join(sorted(deployable))}); none is named '{contract_name}'"
        )

    data = deployable[selected]
    return CompiledArtifact(
        contract_name=selected,
        abi=data.get("abi") or [],
        bytecode=data["evm"]["bytecode"]["object"],
        source_path=entry_path,
    )


def compile_contract(
    source_set: SourceSet,
    entry_path: str,
    contract_name: Optional[str] = None,
    evm_version: str = DEFAULT_EVM_VERSION,
    compile_fn: Optional[CompileFn] = None,
) -> CompiledArtifact:
    """
    Compile a resolved source set and extract the entry contract.

    Args:
        source_set: Resolved sources (frozen on entry)
        entry_path: Logical path of the file being deployed
        contract_name: Preferred contract name
        evm_version: EVM target version
        compile_fn: Standard-JSON compile function (defaults to the pinned solc release)

    Returns:
        CompiledArtifact

    Raises:
        CompileError: If the compiler reports an error
        ContractNotFoundError: If no single deployable contract can be selected
    """
    source_set.freeze()
    if compile_fn is None:
        compile_fn = solc_compile_fn()

    input_data = build_compiler_input(source_set, entry_path, evm_version)
    output = compile_fn(input_data)

    triage_diagnostics(output)
    artifact = select_contract(output, entry_path, contract_name)
    logger.info("Compiled %s from %s", artifact.contract_name, entry_path)
    return artifact
