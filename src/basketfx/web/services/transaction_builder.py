"""Transaction builder for preparing unsigned transactions.

This service builds unsigned transactions for client-side signing.
NO signing or broadcasting happens here - this is non-custodial.
"""

import logging
from typing import Any, Optional, Sequence

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import is_address, keccak, to_checksum_address

from basketfx.chain.abi import APP_ABI
from basketfx.exceptions import EncodingFailure
from basketfx.oracle.codec import from_onchain_bytes
from basketfx.web.contracts.transactions import TransactionDescriptor

logger = logging.getLogger(__name__)


def _canonical_type(param: dict) -> str:
    """ABI type string as used in function signatures (tuples expanded)."""
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


def _coerce(abi_type: str, value: Any) -> Any:
    """Accept 0x hex strings wherever the ABI expects bytes."""
    if abi_type.endswith("[]") and isinstance(value, (list, tuple)):
        return [_coerce(abi_type[:-2], v) for v in value]
    if abi_type.startswith("bytes") and isinstance(value, str):
        return from_onchain_bytes(value)
    return value


def find_function(abi: Sequence[dict], function_name: str, arg_count: int) -> dict:
    """Find a function ABI entry by name and arity."""
    for entry in abi:
        if (
            entry.get("type") == "function"
            and entry.get("name") == function_name
            and len(entry.get("inputs", [])) == arg_count
        ):
            return entry
    raise EncodingFailure(
        f"Function {function_name} with {arg_count} argument(s) not found in contract interface"
    )


def function_signature(entry: dict) -> str:
    """Canonical signature, e.g. removeLiquidity(string,string,uint256)."""
    types = ",".join(_canonical_type(p) for p in entry.get("inputs", []))
    return f"{entry['name']}({types})"


class TransactionBuilder:
    """Builds unsigned transactions for client-side signing.

    This service NEVER:
    - Accesses private keys
    - Signs transactions
    - Broadcasts transactions

    It ONLY prepares transaction data for the client to sign locally.
    """

    def __init__(self, abi: Optional[Sequence[dict]] = None):
        self.abi = list(abi) if abi is not None else APP_ABI

    def encode_call(
        self,
        function_name: str,
        args: Sequence[Any],
        abi: Optional[Sequence[dict]] = None,
    ) -> str:
        """ABI-encode a contract call.

        Args:
            function_name: Contract function name
            args: Positional arguments in ABI order
            abi: Contract interface (defaults to the App contract)

        Returns:
            0x-prefixed call data (selector + encoded arguments)

        Raises:
            EncodingFailure: Unknown function or arguments that do not fit the ABI
        """
        entry = find_function(abi if abi is not None else self.abi, function_name, len(args))
        types = [_canonical_type(p) for p in entry["inputs"]]
        signature = function_signature(entry)

        try:
            values = [_coerce(t, v) for t, v in zip(types, args)]
            encoded = abi_encode(types, values)
        except (EncodingError, TypeError, ValueError, OverflowError) as e:
            logger.error(f"Failed to encode {signature}: {e}")
            raise EncodingFailure(f"Failed to encode {function_name}: {e}") from e

        selector = keccak(text=signature)[:4]
        return "0x" + (selector + encoded).hex()

    def decode_call(
        self,
        data: str,
        function_name: str,
        abi: Optional[Sequence[dict]] = None,
    ) -> tuple:
        """Decode call data produced by encode_call back into arguments."""
        contract_abi = abi if abi is not None else self.abi
        raw = from_onchain_bytes(data)

        for entry in contract_abi:
            if entry.get("type") != "function" or entry.get("name") != function_name:
                continue
            if keccak(text=function_signature(entry))[:4] != raw[:4]:
                continue
            types = [_canonical_type(p) for p in entry["inputs"]]
            try:
                return tuple(abi_decode(types, raw[4:]))
            except DecodingError as e:
                raise EncodingFailure(f"Failed to decode {function_name}: {e}") from e

        raise EncodingFailure(f"Call data does not match {function_name}")

    def assemble_descriptor(self, to: str, value: int, data: str) -> TransactionDescriptor:
        """Build the {to, value, data} triple handed to the signer.

        Args:
            to: Contract address
            value: Native value in wei
            data: 0x call data

        Returns:
            Immutable TransactionDescriptor
        """
        if not is_address(to):
            raise EncodingFailure(f"Invalid contract address: {to}")
        if value < 0:
            raise EncodingFailure("Transaction value must not be negative")

        return TransactionDescriptor(
            to=to_checksum_address(to),
            value=str(value),
            data=data,
        )

    def build_buy(
        self,
        contract: str,
        token_name: str,
        update_data: list[str],
        value: int,
    ) -> TransactionDescriptor:
        """Build buyTokensFromFlow(tokenName, priceUpdateData)."""
        data = self.encode_call("buyTokensFromFlow", [token_name, update_data])
        return self.assemble_descriptor(contract, value, data)

    def build_add_liquidity(
        self,
        contract: str,
        token_name_a: str,
        token_name_b: str,
        amount_a_wei: int,
        update_data: list[str],
        value: int,
    ) -> TransactionDescriptor:
        """Build addLiquidity(tokenNameA, tokenNameB, amountA, priceUpdateData)."""
        data = self.encode_call(
            "addLiquidity", [token_name_a, token_name_b, amount_a_wei, update_data]
        )
        return self.assemble_descriptor(contract, value, data)

    def build_remove_liquidity(
        self,
        contract: str,
        token_name_a: str,
        token_name_b: str,
        lp_amount_wei: int,
    ) -> TransactionDescriptor:
        """Build removeLiquidity(tokenNameA, tokenNameB, lpAmount).

        removeLiquidity is not payable, so value is always 0.
        """
        data = self.encode_call("removeLiquidity", [token_name_a, token_name_b, lp_amount_wei])
        return self.assemble_descriptor(contract, 0, data)
