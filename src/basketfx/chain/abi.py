"""Contract interface fragments.

Only the functions this service reads or encodes are listed. If the deployed
App contract changes any of these signatures, encoding fails loudly instead of
producing call data for a function that no longer exists.
"""

APP_ABI = [
    {
        "name": "nameToId",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "name", "type": "string"}],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "name": "getNormalizedPrice",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "priceId", "type": "bytes32"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "FLOW_USD_PRICE_ID",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "name": "pyth",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "addLiquidity",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "tokenNameA", "type": "string"},
            {"name": "tokenNameB", "type": "string"},
            {"name": "amountA", "type": "uint256"},
            {"name": "priceUpdateData", "type": "bytes[]"},
        ],
        "outputs": [],
    },
    {
        "name": "buyTokensFromFlow",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "tokenName", "type": "string"},
            {"name": "priceUpdateData", "type": "bytes[]"},
        ],
        "outputs": [],
    },
    {
        "name": "removeLiquidity",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "tokenNameA", "type": "string"},
            {"name": "tokenNameB", "type": "string"},
            {"name": "lpAmount", "type": "uint256"},
        ],
        "outputs": [],
    },
]

PYTH_ABI = [
    {
        "name": "getUpdateFee",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "updateData", "type": "bytes[]"}],
        "outputs": [{"name": "feeAmount", "type": "uint256"}],
    },
]


def with_reference_accessor(abi: list[dict], function_name: str) -> list[dict]:
    """Return the ABI with the reference feed accessor renamed if needed."""
    if function_name == "FLOW_USD_PRICE_ID":
        return abi
    accessor = {
        "name": function_name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bytes32"}],
    }
    return [entry for entry in abi if entry.get("name") != "FLOW_USD_PRICE_ID"] + [accessor]
