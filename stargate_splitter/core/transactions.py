"""Signing and broadcasting of contract calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import ContractLogicError

from stargate_splitter.core.utils import get_logger

LOGGER = get_logger("stargate_splitter.transactions")


class TransactionFailedError(RuntimeError):
    """Raised when a mined transaction reports a failed status."""

    def __init__(self, tx_hash: str, receipt: Any) -> None:
        super().__init__(f"Transaction {tx_hash} failed with status {receipt['status']}")
        self.tx_hash = tx_hash
        self.receipt = receipt


@dataclass(frozen=True)
class GasParameters:
    """EIP-1559 gas parameters."""

    gas: int
    gas_price: int
    max_priority_fee: int
    max_fee: int
    estimated_cost: int


def _fee_caps(web3: Web3) -> tuple:
    gas_price = web3.eth.gas_price
    max_priority_fee = getattr(web3.eth, "max_priority_fee", gas_price)
    return gas_price, max_priority_fee, gas_price + max_priority_fee


def estimate_gas(web3: Web3, call: Any, *, sender: str, value: int = 0) -> GasParameters:
    """Estimate gas for ``call`` sent from ``sender`` with ``value`` attached."""
    try:
        gas_estimate = call.estimate_gas({"from": sender, "value": value})
    except ContractLogicError as exc:
        raise ValueError(f"Contract would revert: {exc}") from exc

    gas_price, max_priority_fee, max_fee = _fee_caps(web3)
    return GasParameters(
        gas=gas_estimate,
        gas_price=gas_price,
        max_priority_fee=max_priority_fee,
        max_fee=max_fee,
        estimated_cost=gas_estimate * gas_price,
    )


def fallback_gas(web3: Web3, gas: int) -> GasParameters:
    gas_price, max_priority_fee, max_fee = _fee_caps(web3)
    return GasParameters(
        gas=gas,
        gas_price=gas_price,
        max_priority_fee=max_priority_fee,
        max_fee=max_fee,
        estimated_cost=gas * gas_price,
    )


def log_gas(gas: GasParameters, *, label: str = "Estimate") -> None:
    LOGGER.info(
        "%s gas=%s maxFee=%.2f gwei priority=%.2f gwei estimatedCost=%.6f",
        label,
        gas.gas,
        gas.max_fee / 10**9,
        gas.max_priority_fee / 10**9,
        gas.estimated_cost / 10**18,
    )


def build_transaction(
    web3: Web3,
    call: Any,
    *,
    sender: str,
    value: int,
    chain_id: int,
    gas: GasParameters,
    gas_buffer_multiplier: float = 1.1,
) -> Dict[str, int]:
    """Build the 1559 transaction payload."""
    nonce = web3.eth.get_transaction_count(sender)
    return call.build_transaction(
        {
            "from": sender,
            "gas": int(gas.gas * gas_buffer_multiplier),
            "maxFeePerGas": gas.max_fee,
            "maxPriorityFeePerGas": gas.max_priority_fee,
            "nonce": nonce,
            "chainId": chain_id,
            "value": value,
        }
    )


def send_contract_transaction(
    web3: Web3,
    account: LocalAccount,
    call: Any,
    *,
    chain_id: int,
    value: int = 0,
    gas_buffer_multiplier: float = 1.1,
    fallback_gas_limit: Optional[int] = None,
    label: str = "transaction",
) -> str:
    """Sign, broadcast and wait for ``call``; return the transaction hash.

    Raises ``TransactionFailedError`` when the receipt status is not 1.
    """
    try:
        gas = estimate_gas(web3, call, sender=account.address, value=value)
        log_gas(gas)
    except Exception as exc:
        if fallback_gas_limit is None:
            raise
        LOGGER.warning("Gas estimation for %s failed: %s", label, exc)
        gas = fallback_gas(web3, fallback_gas_limit)
        log_gas(gas, label="Fallback")

    tx = build_transaction(
        web3,
        call,
        sender=account.address,
        value=value,
        chain_id=chain_id,
        gas=gas,
        gas_buffer_multiplier=gas_buffer_multiplier,
    )
    LOGGER.info("Signing %s", label)
    signed = account.sign_transaction(tx)

    LOGGER.info("Broadcasting %s", label)
    tx_hash = web3.eth.send_raw_transaction(signed.raw_transaction)
    tx_hex = tx_hash.hex()
    LOGGER.info("%s hash: %s", label.capitalize(), tx_hex)

    LOGGER.info("Awaiting confirmation")
    receipt = web3.eth.wait_for_transaction_receipt(tx_hash)
    if receipt["status"] != 1:
        raise TransactionFailedError(tx_hex, receipt)
    LOGGER.info("%s confirmed in block %s (gasUsed=%s)", label.capitalize(), receipt["blockNumber"], receipt["gasUsed"])
    return tx_hex


__all__ = [
    "GasParameters",
    "TransactionFailedError",
    "build_transaction",
    "estimate_gas",
    "fallback_gas",
    "log_gas",
    "send_contract_transaction",
]
