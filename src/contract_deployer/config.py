"""Runtime settings for contract-deployer library."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    DEFAULT_COMPILE_TIMEOUT,
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_EVM_VERSION,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_IMPORT_BUDGET,
    DEFAULT_MAX_IMPORT_DEPTH,
    DEFAULT_MAX_IMPORT_FETCHES,
    DEFAULT_MIRROR_BASE_URL,
    DEFAULT_RPC_TIMEOUT,
    DEFAULT_SOLC_VERSION,
    ENV_PREFIX,
    PRIVATE_KEY_ENV,
    RPC_API_KEY_ENV,
)


@dataclass
class Settings:
    """
    Process-scoped configuration for the deployment pipeline.

    Secrets (private_key, rpc_api_key) are consumed opaquely and never logged.
    """

    private_key: str = ""
    rpc_api_key: str = ""
    mirror_base_url: str = DEFAULT_MIRROR_BASE_URL
    solc_version: str = DEFAULT_SOLC_VERSION
    evm_version: str = DEFAULT_EVM_VERSION
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    compile_timeout: float = DEFAULT_COMPILE_TIMEOUT
    import_budget: float = DEFAULT_IMPORT_BUDGET
    max_import_depth: int = DEFAULT_MAX_IMPORT_DEPTH
    max_import_fetches: int = DEFAULT_MAX_IMPORT_FETCHES

    def __repr__(self) -> str:
        return (
            f"Settings(private_key={'***' if self.private_key else ''!r}, "
            f"rpc_api_key={'***' if self.rpc_api_key else ''!r}, "
            f"mirror_base_url={self.mirror_base_url!r}, "
            f"solc_version={self.solc_version!r}, evm_version={self.evm_version!r})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """
        Load settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings populated from PRIVATE_KEY, INFURA_API_KEY and the
            CONTRACT_DEPLOYER_* variables, falling back to defaults

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        def _get(name: str, default: str) -> str:
            return env.get(f"{ENV_PREFIX}{name}") or default

        def _number(name: str, default: float, kind: type = float):
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw is None or raw.strip() == "":
                return default
            try:
                return kind(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from e

        return cls(
            private_key=env.get(PRIVATE_KEY_ENV, ""),
            rpc_api_key=env.get(RPC_API_KEY_ENV, ""),
            mirror_base_url=_get("MIRROR_URL", DEFAULT_MIRROR_BASE_URL),
            solc_version=_get("SOLC_VERSION", DEFAULT_SOLC_VERSION),
            evm_version=_get("EVM_VERSION", DEFAULT_EVM_VERSION),
            fetch_timeout=_number("FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
            rpc_timeout=_number("RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT),
            confirmation_timeout=_number("CONFIRMATION_TIMEOUT", DEFAULT_CONFIRMATION_TIMEOUT),
            compile_timeout=_number("COMPILE_TIMEOUT", DEFAULT_COMPILE_TIMEOUT),
            import_budget=_number("IMPORT_BUDGET", DEFAULT_IMPORT_BUDGET),
            max_import_depth=_number("MAX_IMPORT_DEPTH", DEFAULT_MAX_IMPORT_DEPTH, int),
            max_import_fetches=_number("MAX_IMPORT_FETCHES", DEFAULT_MAX_IMPORT_FETCHES, int),
        )
