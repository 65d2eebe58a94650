"""Unit tests for the deploy_contract tool declaration."""

import json

import pytest

from contract_deployer.exceptions import ToolArgumentError
from contract_deployer.tools import DEPLOY_CONTRACT_FUNCTION, FUNCTION_SCHEMAS, parse_deploy_arguments

VALID_ARGUMENTS = {
    "contractName": "Token",
    "chainName": "Base Goerli Testnet",
    "sourceCode": "contract Token { constructor(string memory n, uint256 s) {} }",
    "constructorArgs": ["Gold", "1000"],
}


class TestDeployContractSchema:
    """Test the function declaration."""

    def test_required_fields(self):
        """Test that all four arguments are required."""
        assert DEPLOY_CONTRACT_FUNCTION["parameters"]["required"] == [
            "contractName",
            "chainName",
            "sourceCode",
            "constructorArgs",
        ]

    def test_default_chain_hint(self):
        """Test that the chain description names the default chain."""
        description = DEPLOY_CONTRACT_FUNCTION["parameters"]["properties"]["chainName"]["description"]
        assert "Base Goerli Testnet" in description

    def test_schema_is_json_serializable(self):
        """Test that the declaration can be sent to a chat API."""
        assert json.loads(json.dumps(FUNCTION_SCHEMAS))[0]["name"] == "deploy_contract"


class TestParseDeployArguments:
    """Test the parse_deploy_arguments function."""

    def test_parses_dict(self):
        """Test parsing a dict of arguments."""
        request = parse_deploy_arguments(VALID_ARGUMENTS)

        assert request.contract_name == "Token"
        assert request.chain_name == "Base Goerli Testnet"
        assert request.constructor_args == ["Gold", "1000"]

    def test_parses_json_string(self):
        """Test parsing arguments delivered as a JSON string."""
        request = parse_deploy_arguments(json.dumps(VALID_ARGUMENTS))
        assert request.source_code == VALID_ARGUMENTS["sourceCode"]

    def test_nested_array_arguments(self):
        """Test that array arguments are kept as lists."""
        arguments = dict(VALID_ARGUMENTS, constructorArgs=[["0x01", "0x02"], "5"])
        assert parse_deploy_arguments(arguments).constructor_args == [["0x01", "0x02"], "5"]

    def test_empty_chain_uses_default(self):
        """Test that an empty chain name falls back to the default chain."""
        request = parse_deploy_arguments(dict(VALID_ARGUMENTS, chainName=""))
        assert request.chain_name == "Base Goerli Testnet"

    def test_invalid_json(self):
        """Test that malformed JSON is rejected."""
        with pytest.raises(ToolArgumentError, match="valid JSON"):
            parse_deploy_arguments("{not json")

    def test_non_object(self):
        """Test that a JSON array is rejected."""
        with pytest.raises(ToolArgumentError):
            parse_deploy_arguments("[]")

    def test_missing_fields(self):
        """Test that missing required fields are listed."""
        arguments = {k: v for k, v in VALID_ARGUMENTS.items() if k != "sourceCode"}
        with pytest.raises(ToolArgumentError, match="sourceCode"):
            parse_deploy_arguments(arguments)

    def test_wrong_types(self):
        """Test that ill-typed fields are rejected."""
        with pytest.raises(ToolArgumentError, match="contractName"):
            parse_deploy_arguments(dict(VALID_ARGUMENTS, contractName=5))
        with pytest.raises(ToolArgumentError, match="constructorArgs"):
            parse_deploy_arguments(dict(VALID_ARGUMENTS, constructorArgs=[1, 2]))
