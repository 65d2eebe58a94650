"""Configuration constants for contract-deployer library."""

# Public npm mirror that serves package files at /<package>/<path>
DEFAULT_MIRROR_BASE_URL = "https://unpkg.com"

# Compiler settings
COMPILER_LANGUAGE = "Solidity"
DEFAULT_SOLC_VERSION = "0.8.23"
DEFAULT_EVM_VERSION = "shanghai"
OUTPUT_SELECTION = {"*": {"*": ["abi", "evm.bytecode"]}}

# Placeholder used by chains.json RPC templates (ethereum-lists/chains convention)
RPC_API_KEY_PLACEHOLDER = "${INFURA_API_KEY}"

# Environment variables
PRIVATE_KEY_ENV = "PRIVATE_KEY"
RPC_API_KEY_ENV = "INFURA_API_KEY"
ENV_PREFIX = "CONTRACT_DEPLOYER_"

# Timeouts in seconds
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_CONFIRMATION_TIMEOUT = 180.0
DEFAULT_COMPILE_TIMEOUT = 120.0
DEFAULT_IMPORT_BUDGET = 120.0

# Import graph guards
DEFAULT_MAX_IMPORT_DEPTH = 32
DEFAULT_MAX_IMPORT_FETCHES = 256

# Fuzzy network matching
FUZZY_MIN_SCORE = 0.6
FUZZY_CONTAINMENT_SCORE = 0.9

DEFAULT_CHAIN_NAME = "Base Goerli Testnet"
DEFAULT_SOURCE_FILE_NAME = "contract"
