"""Shared route builders and constants for the splitter tests."""
from stargate_splitter.core.utils import NATIVE_TOKEN_ADDRESS, ZERO_ADDRESS

LIFI_DIAMOND = "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE"
SPLITTER = "0x19Fc4D72A9D400A19540f41D3728027B89f5Ccd0"
RECEIVER = "0xb2cc224c1c9feE385f8ad6a55b4d94E92359DC59"
SIGNER = "0x4444444444444444444444444444444444444444"
USDC = "0x04068DA6C83AFCFA0e13ba15A6696662335D5B75"
SWAP_OUT_TOKEN = "0x5555555555555555555555555555555555555555"
APPROVAL = "0x3333333333333333333333333333333333333333"
DEST_CONTRACT = "0x2222222222222222222222222222222222222222"
ROUTE_ID = "0x" + "ab" * 32
TEST_PRIV_KEY = "0x" + "11" * 32

CONFIG_DATA = {
    "mode": "single",
    "network": {"name": "ftm", "chain_id": 250, "rpc_url": "https://rpc.example.com"},
    "contracts": {"bridge_splitter_address": SPLITTER, "lifi_diamond_address": LIFI_DIAMOND},
    "defaults": {"api_timeout": 10, "gas_buffer_multiplier": 1.1, "fallback_gas": 1000000},
    "api_urls": {"lifi_routes": "https://li.example.com/v1/advanced/routes"},
    "route_request": {
        "from_chain": 250,
        "to_chain": 56,
        "from_token": USDC,
        "to_token": SWAP_OUT_TOKEN,
        "from_amount": "1000",
        "to_address": RECEIVER,
    },
}


def make_route(
    *,
    swap=True,
    native=False,
    swap_from_token=None,
    call_to=RECEIVER,
    referrer="",
    lz_fee="100",
    from_amount="50",
    to_token_amount="45",
):
    """Build a Li.Fi route document with one top-level step."""
    if swap_from_token is None:
        swap_from_token = NATIVE_TOKEN_ADDRESS if native else USDC
    cross_step = {
        "type": "cross",
        "tool": "stargate",
        "estimate": {
            "data": {
                "stargateData": {
                    "dstPoolId": "2",
                    "minAmountLD": "40",
                    "dstGasForCall": "0",
                    "lzFee": lz_fee,
                    "callTo": call_to,
                    "callData": "0x",
                }
            }
        },
    }
    included = [cross_step]
    if swap:
        included.insert(
            0,
            {
                "type": "swap",
                "tool": "1inch",
                "estimate": {
                    "approvalAddress": APPROVAL,
                    "data": {"fromToken": {"address": swap_from_token}},
                },
                "action": {"toToken": {"address": SWAP_OUT_TOKEN}, "fromAmount": from_amount},
                "transactionRequest": {"data": "0xdeadbeef"},
            },
        )
    return {
        "id": ROUTE_ID,
        "fromChainId": 250,
        "toChainId": 56,
        "fromAmount": from_amount,
        "fromToken": {"address": ZERO_ADDRESS if native else USDC},
        "toAddress": RECEIVER,
        "steps": [
            {
                "tool": "stargate",
                "integrator": "hector",
                "referrer": referrer,
                "estimate": {"data": {"toToken": {"address": SWAP_OUT_TOKEN}, "toTokenAmount": to_token_amount}},
                "includedSteps": included,
            }
        ],
    }


