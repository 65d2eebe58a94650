"""Unit tests for constructor argument coercion."""

import pytest

from contract_deployer.abi import coerce_constructor_args, coerce_value, constructor_inputs
from contract_deployer.exceptions import ConstructorArgumentError

TOKEN_ABI = [
    {
        "type": "constructor",
        "inputs": [
            {"name": "name_", "type": "string"},
            {"name": "supply", "type": "uint256"},
            {"name": "owner", "type": "address"},
        ],
        "stateMutability": "nonpayable",
    },
    {"type": "function", "name": "totalSupply", "inputs": [], "outputs": [{"name": "", "type": "uint256"}]},
]


class TestConstructorInputs:
    """Test the constructor_inputs function."""

    def test_returns_inputs(self):
        """Test that constructor inputs are extracted from the ABI."""
        assert [i["name"] for i in constructor_inputs(TOKEN_ABI)] == ["name_", "supply", "owner"]

    def test_no_constructor(self):
        """Test that an ABI without a constructor has no inputs."""
        assert constructor_inputs([{"type": "function", "name": "f", "inputs": []}]) == []


class TestCoerceValue:
    """Test the coerce_value function."""

    @pytest.mark.parametrize(
        "abi_type, raw, expected",
        [
            ("uint256", "1000", 1000),
            ("uint8", "0x10", 16),
            ("int256", "-5", -5),
            ("bool", "true", True),
            ("bool", "False", False),
            ("string", "hello", "hello"),
            ("bytes", "0x0102", b"\x01\x02"),
            ("bytes32", "abc", b"abc"),
            ("uint256[]", ["1", "2"], [1, 2]),
            ("bool[2]", ["1", "0"], [True, False]),
        ],
    )
    def test_string_coercion(self, abi_type, raw, expected):
        """Test conversion of tool-supplied strings to typed values."""
        assert coerce_value(abi_type, raw) == expected

    def test_address_is_checksummed(self):
        """Test that lower-case addresses are checksummed."""
        assert (
            coerce_value("address", "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266")
            == "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
        )

    def test_typed_values_pass_through(self):
        """Test that non-string values are returned unchanged."""
        assert coerce_value("uint256", 7) == 7

    @pytest.mark.parametrize(
        "abi_type, raw",
        [
            ("uint256", "ten"),
            ("bool", "maybe"),
            ("address", "0x1234"),
            ("uint256[]", "1,2"),
            ("uint256[3]", ["1"]),
            ("tuple", ["1"]),
        ],
    )
    def test_invalid_values(self, abi_type, raw):
        """Test that unconvertible values raise ConstructorArgumentError."""
        with pytest.raises(ConstructorArgumentError):
            coerce_value(abi_type, raw)


class TestCoerceConstructorArgs:
    """Test the coerce_constructor_args function."""

    def test_coerces_all_arguments(self):
        """Test a full constructor argument list."""
        args = coerce_constructor_args(
            TOKEN_ABI, ["Gold", "1000000", "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"]
        )
        assert args == ["Gold", 1000000, "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"]

    def test_no_constructor_no_args(self):
        """Test that contracts without a constructor accept no arguments."""
        assert coerce_constructor_args([], None) == []
        assert coerce_constructor_args([], []) == []

    def test_arity_mismatch(self):
        """Test that the argument count must match the constructor."""
        with pytest.raises(ConstructorArgumentError, match="expects 3"):
            coerce_constructor_args(TOKEN_ABI, ["Gold"])

    def test_unexpected_arguments(self):
        """Test that arguments for a constructor-less contract are rejected."""
        with pytest.raises(ConstructorArgumentError):
            coerce_constructor_args([], ["1"])

    def test_out_of_range_value(self):
        """Test that values that do not fit the ABI type are rejected."""
        abi = [{"type": "constructor", "inputs": [{"name": "small", "type": "uint8"}]}]
        with pytest.raises(ConstructorArgumentError, match="small"):
            coerce_constructor_args(abi, ["300"])

    def test_negative_unsigned(self):
        """Test that negative values are not encodable as unsigned integers."""
        abi = [{"type": "constructor", "inputs": [{"name": "amount", "type": "uint256"}]}]
        with pytest.raises(ConstructorArgumentError):
            coerce_constructor_args(abi, ["-1"])
