"""Constructor argument handling for contract-deployer library."""

import re
from typing import Any, Dict, List, Optional, Sequence

from eth_abi import is_encodable
from web3 import Web3

from .exceptions import ConstructorArgumentError

_ARRAY_TYPE = re.compile(r"^(?P<base>.+)\[(?P<size>\d*)\]$")

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


def constructor_inputs(abi: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Return the constructor's input descriptors.

    Args:
        abi: Contract ABI

    Returns:
        List of input dicts (empty when the contract has no explicit constructor)
    """
    for item in abi:
        if item.get("type") == "constructor":
            return list(item.get("inputs") or [])
    return []


def coerce_value(abi_type: str, value: Any) -> Any:
    """
    Convert a tool-supplied value (usually a string) to the Python value
    eth-abi expects for `abi_type`.

    Raises:
        ConstructorArgumentError: If the value cannot represent the type
    """
    array_match = _ARRAY_TYPE.match(abi_type)
    if array_match:
        if not isinstance(value, (list, tuple)):
            raise ConstructorArgumentError(f"Expected a list for {abi_type}, got {value!r}")
        size = array_match.group("size")
        if size and len(value) != int(size):
            raise ConstructorArgumentError(
                f"Expected {size} element(s) for {abi_type}, got {len(value)}"
            )
        return [coerce_value(array_match.group("base"), item) for item in value]

    if abi_type.startswith("tuple"):
        raise ConstructorArgumentError("Tuple constructor arguments are not supported")

    if not isinstance(value, str):
        return value

    text = value.strip()
    try:
        if abi_type.startswith("uint") or abi_type.startswith("int"):
            return int(text, 0)
        if abi_type == "bool":
            lowered = text.lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean: {value!r}")
        if abi_type == "address":
            return Web3.to_checksum_address(text)
        if abi_type.startswith("bytes"):
            if text.startswith("0x"):
                return Web3.to_bytes(hexstr=text)
            return value.encode("utf-8")
    except ValueError as e:
        raise ConstructorArgumentError(f"Cannot convert {value!r} to {abi_type}: {e}") from e

    return value


def coerce_constructor_args(
    abi: Sequence[Dict[str, Any]],
    args: Optional[Sequence[Any]],
) -> List[Any]:
    """
    Coerce and validate constructor arguments against the contract ABI.

    Args:
        abi: Contract ABI
        args: Positional constructor arguments (strings, lists of strings or
              already-typed Python values)

    Returns:
        Typed values ready for ABI encoding

    Raises:
        ConstructorArgumentError: On arity mismatch or an unencodable value
    """
    args = list(args or [])
    inputs = constructor_inputs(abi)
    if len(args) != len(inputs):
        raise ConstructorArgumentError(
            f"Constructor expects {len(inputs)} argument(s), got {len(args)}"
        )

    coerced = []
    for position, (param, value) in enumerate(zip(inputs, args)):
        abi_type = param.get("type", "")
        typed = coerce_value(abi_type, value)
        if not is_encodable(abi_type, typed):
            name = param.get("name") or f"#{position}"
            raise ConstructorArgumentError(
                f"Argument {name} ({abi_type}) is not encodable: {value!r}"
            )
        coerced.append(typed)
    return coerced
