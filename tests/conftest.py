"""Shared pytest fixtures for contract-deployer tests."""

import json
import re
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, Optional
from unittest.mock import MagicMock

import pytest

from contract_deployer.config import Settings
from contract_deployer.networks import load_network_registry

# Hardhat's first default account; never holds real funds
TEST_PRIVATE_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

DEPLOYED_ADDRESS = "0xAbC0000000000000000000000000000000000123"
TX_HASH = b"\x11" * 32

SIMPLE_SOURCE = "contract C { function f() public pure returns (uint) { return 1; } }"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_solc_output(fixtures_dir: Path) -> Dict[str, Any]:
    """Load and return a sample solc standard-JSON output."""
    with open(fixtures_dir / "sample_solc_output.json") as f:
        return json.load(f)


@pytest.fixture
def sample_networks(fixtures_dir: Path):
    """Load the small test network registry."""
    return load_network_registry(fixtures_dir / "test_chains.json")


@pytest.fixture
def settings() -> Settings:
    """Settings with no secrets and short timeouts."""
    return Settings(fetch_timeout=5, rpc_timeout=5, confirmation_timeout=5, import_budget=10)


@pytest.fixture
def fake_compile_fn() -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """
    Stand-in for solc: every `contract X` in the entry file compiles to a
    trivial artifact. The entry file is the first source in the input.
    """
    calls = []

    def _compile(input_data: Dict[str, Any]) -> Dict[str, Any]:
        calls.append(input_data)
        entry_path = next(iter(input_data["sources"]))
        content = input_data["sources"][entry_path]["content"]
        contracts = {
            name: {
                "abi": [{"type": "function", "name": "f", "inputs": [], "outputs": []}],
                "evm": {"bytecode": {"object": "6080604052"}},
            }
            for name in re.findall(r"\bcontract\s+(\w+)", content)
        }
        return {"contracts": {entry_path: contracts}}

    _compile.calls = calls
    return _compile


def make_fake_web3(
    chain_id: int = 84531,
    addresses: Optional[Iterable[str]] = None,
    receipt_status: int = 1,
) -> MagicMock:
    """Build a MagicMock standing in for a connected Web3 instance."""
    w3 = MagicMock()
    w3.eth.chain_id = chain_id
    w3.eth.get_transaction_count.return_value = 0
    w3.eth.contract.return_value.constructor.return_value.build_transaction.return_value = {
        "data": "0x6080604052",
        "nonce": 0,
        "gas": 100000,
        "gasPrice": 1,
        "chainId": chain_id,
    }
    w3.eth.send_raw_transaction.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.side_effect = [
        {"status": receipt_status, "contractAddress": address}
        for address in (addresses or [DEPLOYED_ADDRESS])
    ]
    return w3


@pytest.fixture
def fake_web3() -> MagicMock:
    return make_fake_web3()


@pytest.fixture
def fake_signer() -> MagicMock:
    """A signer double that returns fixed raw transaction bytes."""
    signer = MagicMock()
    signer.address = TEST_ADDRESS
    signer.sign_transaction.return_value = SimpleNamespace(raw_transaction=b"\x02\xf8")
    return signer


@pytest.fixture
def make_web3() -> Callable[..., MagicMock]:
    """Factory fixture for fake Web3 instances."""
    return make_fake_web3


@pytest.fixture
def deployed_address() -> str:
    return DEPLOYED_ADDRESS


@pytest.fixture
def deployer_key() -> str:
    return TEST_PRIVATE_KEY


@pytest.fixture
def deployer_address() -> str:
    return TEST_ADDRESS


@pytest.fixture
def simple_source() -> str:
    return SIMPLE_SOURCE
