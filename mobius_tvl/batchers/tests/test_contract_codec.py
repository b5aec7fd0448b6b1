"""
Tests for the stateless contract codec.
"""

import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector

from mobius_tvl.batchers.abi import (
    LP_TOKEN_ABI,
    MULTICALL2_ABI,
    SWAP_ABI,
    ContractCodec,
)
from mobius_tvl.batchers.errors import BatchError, DecodeError


class TestEncoding:

    def test_total_supply_is_bare_selector(self):
        codec = ContractCodec(LP_TOKEN_ABI)
        assert codec.encode_function_data("totalSupply") == bytes.fromhex("18160ddd")

    def test_get_token_balance_encodes_index(self):
        codec = ContractCodec(SWAP_ABI)
        data = codec.encode_function_data("getTokenBalance", [1])
        assert data[:4] == function_signature_to_4byte_selector("getTokenBalance(uint8)")
        assert data[4:] == encode(["uint8"], [1])

    def test_tuple_array_signature(self):
        codec = ContractCodec(MULTICALL2_ABI)
        assert codec.signature("aggregate") == "aggregate((address,bytes)[])"
        assert codec.encode_function_data("aggregate", [[]])[:4] == bytes.fromhex("252dba42")

    def test_wrong_argument_count(self):
        codec = ContractCodec(SWAP_ABI)
        with pytest.raises(BatchError, match="takes 1 arguments"):
            codec.encode_function_data("getTokenBalance")

    def test_unknown_function(self):
        with pytest.raises(BatchError, match="not in the ABI"):
            ContractCodec(SWAP_ABI).encode_function_data("swap", [])

    def test_out_of_range_argument(self):
        with pytest.raises(BatchError, match="Failed to encode"):
            ContractCodec(SWAP_ABI).encode_function_data("getTokenBalance", [256])


class TestDecoding:

    def test_decode_uint(self):
        codec = ContractCodec(LP_TOKEN_ABI)
        assert codec.decode_function_result("totalSupply", encode(["uint256"], [42])) == (42,)

    def test_decode_hex_string(self):
        codec = ContractCodec(LP_TOKEN_ABI)
        data = "0x" + encode(["uint256"], [7]).hex()
        assert codec.decode_function_result("totalSupply", data) == (7,)

    def test_decode_multicall_result(self):
        codec = ContractCodec(MULTICALL2_ABI)
        payload = encode(["uint256", "bytes[]"], [99, [b"\x01", b"\x02\x03"]])
        block, data = codec.decode_function_result("aggregate", payload)
        assert block == 99
        assert list(data) == [b"\x01", b"\x02\x03"]

    def test_empty_data_fails(self):
        with pytest.raises(DecodeError, match="totalSupply"):
            ContractCodec(LP_TOKEN_ABI).decode_function_result("totalSupply", b"")

    def test_short_data_fails(self):
        with pytest.raises(DecodeError):
            ContractCodec(LP_TOKEN_ABI).decode_function_result("totalSupply", b"\x00" * 16)

    def test_missing_data_fails(self):
        with pytest.raises(DecodeError, match="return data not found"):
            ContractCodec(LP_TOKEN_ABI).decode_function_result("totalSupply", None)

    def test_invalid_hex_fails(self):
        with pytest.raises(DecodeError, match="not valid hex"):
            ContractCodec(LP_TOKEN_ABI).decode_function_result("totalSupply", "0xzz")
