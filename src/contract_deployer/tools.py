"""Chat-tool declaration for the deploy_contract function."""

import json
from typing import Any, Dict, List, Union

from .constants import DEFAULT_CHAIN_NAME
from .exceptions import ToolArgumentError
from .types import DeployRequest

DEPLOY_CONTRACT_FUNCTION: Dict[str, Any] = {
    "name": "deploy_contract",
    "description": "Deploy a smart contract",
    "parameters": {
        "type": "object",
        "description": (
            "This function deploys a smart contract to an EVM compatible chain. "
            "It returns the address of the deployed contract and a block explorer url. "
            "Only call this function in a separate chat message, not from a message with other text. "
            "Share the explorer url with the user."
        ),
        "properties": {
            "contractName": {"type": "string"},
            "chainName": {
                "type": "string",
                "description": (
                    "Name of the EVM compatible chain we are deploying to. "
                    f"If the user does not suggest a chain, use {DEFAULT_CHAIN_NAME}."
                ),
            },
            "sourceCode": {
                "type": "string",
                "description": (
                    "Source code of the smart contract. Use Solidity ^0.8.23 and ensure "
                    "that the source code will compile."
                ),
            },
            "constructorArgs": {
                "type": "array",
                "items": {
                    "oneOf": [
                        {"type": "string"},
                        {"type": "array", "items": {"type": "string"}},
                    ]
                },
                "description": (
                    "Arguments for the contract's constructor. Each argument can be a string "
                    "or an array of strings. Can be an empty array if the constructor has no "
                    "arguments."
                ),
            },
        },
        "required": ["contractName", "chainName", "sourceCode", "constructorArgs"],
    },
}

FUNCTION_SCHEMAS: List[Dict[str, Any]] = [DEPLOY_CONTRACT_FUNCTION]


def _is_constructor_arg(value: Any) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def parse_deploy_arguments(arguments: Union[str, Dict[str, Any]]) -> DeployRequest:
    """
    Validate deploy_contract tool arguments.

    Args:
        arguments: Arguments as a dict or a JSON-encoded string

    Returns:
        DeployRequest

    Raises:
        ToolArgumentError: If arguments are not valid JSON, required fields are
                           missing, or fields have the wrong type
    """
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise ToolArgumentError(f"deploy_contract arguments are not valid JSON: {e}") from e

    if not isinstance(arguments, dict):
        raise ToolArgumentError("deploy_contract arguments must be an object")

    required = DEPLOY_CONTRACT_FUNCTION["parameters"]["required"]
    missing = [key for key in required if key not in arguments]
    if missing:
        raise ToolArgumentError(f"Missing deploy_contract argument(s): {', '.join(missing)}")

    for key in ("contractName", "chainName", "sourceCode"):
        if not isinstance(arguments[key], str):
            raise ToolArgumentError(f"'{key}' must be a string")

    constructor_args = arguments["constructorArgs"]
    if not isinstance(constructor_args, list) or not all(
        _is_constructor_arg(arg) for arg in constructor_args
    ):
        raise ToolArgumentError("'constructorArgs' must be a list of strings or lists of strings")

    return DeployRequest(
        contract_name=arguments["contractName"],
        chain_name=arguments["chainName"] or DEFAULT_CHAIN_NAME,
        source_code=arguments["sourceCode"],
        constructor_args=list(constructor_args),
    )
