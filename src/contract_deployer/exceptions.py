"""Custom exception classes for contract-deployer library."""


class DeploymentError(Exception):
    """Base exception for deployment pipeline errors."""

    pass


class NetworkResolutionError(DeploymentError, ValueError):
    """Raised when a network name has no resolvable chain identifier."""

    pass


class ImportFetchError(DeploymentError, RuntimeError):
    """Raised when an imported source module cannot be fetched from the mirror."""

    pass


class ImportLimitError(ImportFetchError):
    """Raised when import resolution exceeds its depth, fetch-count or time budget."""

    pass


class CompileError(DeploymentError, ValueError):
    """Raised when the compiler reports at least one error diagnostic."""

    pass


class ContractNotFoundError(CompileError):
    """Raised when no single deployable contract can be selected from compiler output."""

    pass


class ConstructorArgumentError(DeploymentError, ValueError):
    """Raised when constructor arguments do not match the contract ABI."""

    pass


class ProviderUnavailableError(DeploymentError, ConnectionError):
    """Raised when the RPC connection does not report the expected chain identifier."""

    pass


class SignerUnavailableError(DeploymentError, ValueError):
    """Raised when no signing account can be derived from the configured key."""

    pass


class SubmissionError(DeploymentError, RuntimeError):
    """Raised when the creation transaction fails to submit or confirm."""

    pass


class DeploymentCancelledError(DeploymentError):
    """Raised when a deployment is cancelled between pipeline stages."""

    pass


class ToolArgumentError(DeploymentError, ValueError):
    """Raised when deploy_contract tool arguments are missing or malformed."""

    pass
