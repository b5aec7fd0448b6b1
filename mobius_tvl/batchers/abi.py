"""
Stateless contract call encoding and return-data decoding.

A ContractCodec is built from an ABI description only; it is never bound to
an address or a provider. Callers pair its output with a target address.
"""

from typing import Any, Dict, List, Sequence, Tuple, Union

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import function_signature_to_4byte_selector
from hexbytes import HexBytes

from .errors import BatchError, DecodeError


def _canonical_type(param: Dict[str, Any]) -> str:
    """Expand tuple parameters into their canonical '(t1,t2)[]' form."""
    abi_type = param["type"]
    if not abi_type.startswith("tuple"):
        return abi_type
    inner = ",".join(_canonical_type(c) for c in param.get("components", []))
    return f"({inner}){abi_type[len('tuple'):]}"


class ContractCodec:
    """Encode calls to and decode results from functions of one ABI."""

    def __init__(self, abi: List[Dict[str, Any]]):
        self._functions: Dict[str, Dict[str, Any]] = {}
        for item in abi:
            if item.get("type", "function") != "function":
                continue
            name = item["name"]
            input_types = [_canonical_type(p) for p in item.get("inputs", [])]
            output_types = [_canonical_type(p) for p in item.get("outputs", [])]
            signature = f"{name}({','.join(input_types)})"
            self._functions[name] = {
                "signature": signature,
                "selector": function_signature_to_4byte_selector(signature),
                "inputs": input_types,
                "outputs": output_types,
            }

    def _get_function(self, name: str) -> Dict[str, Any]:
        try:
            return self._functions[name]
        except KeyError:
            raise BatchError(f"Function '{name}' is not in the ABI") from None

    def signature(self, name: str) -> str:
        return self._get_function(name)["signature"]

    def encode_function_data(self, name: str, args: Sequence[Any] = ()) -> bytes:
        """
        Build call data: 4-byte selector followed by the ABI-encoded arguments.

        Raises:
            BatchError: If the function is unknown or the arguments do not fit
        """
        fn = self._get_function(name)
        if len(args) != len(fn["inputs"]):
            raise BatchError(
                f"{fn['signature']} takes {len(fn['inputs'])} arguments, got {len(args)}"
            )
        try:
            return fn["selector"] + encode(fn["inputs"], list(args))
        except (EncodingError, TypeError, ValueError) as e:
            raise BatchError(f"Failed to encode {fn['signature']}: {e}") from e

    def decode_function_result(self, name: str, data: Union[bytes, str, None]) -> Tuple[Any, ...]:
        """
        Decode the return data of a call.

        Raises:
            DecodeError: If data is missing or does not match the output types
        """
        fn = self._get_function(name)
        if isinstance(data, str):
            try:
                data = bytes(HexBytes(data))
            except ValueError as e:
                raise DecodeError(f"{name}: return data is not valid hex") from e
        if not isinstance(data, (bytes, bytearray)):
            raise DecodeError(f"{name}: return data not found")
        try:
            return tuple(decode(fn["outputs"], bytes(data)))
        except (DecodingError, TypeError, ValueError) as e:
            raise DecodeError(
                f"{name}: {len(data)} bytes do not decode as ({','.join(fn['outputs'])}): {e}"
            ) from e


LP_TOKEN_ABI: List[Dict[str, Any]] = [
    {
        "name": "totalSupply",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

SWAP_ABI: List[Dict[str, Any]] = [
    {
        "name": "getTokenBalance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "index", "type": "uint8"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

MULTICALL2_ABI: List[Dict[str, Any]] = [
    {
        "name": "aggregate",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {
                "name": "calls",
                "type": "tuple[]",
                "components": [
                    {"name": "target", "type": "address"},
                    {"name": "callData", "type": "bytes"},
                ],
            }
        ],
        "outputs": [
            {"name": "blockNumber", "type": "uint256"},
            {"name": "returnData", "type": "bytes[]"},
        ],
    },
]
