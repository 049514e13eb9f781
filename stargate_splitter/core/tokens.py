"""ERC20 balance, allowance and approval helpers."""

from __future__ import annotations

from typing import Dict, Tuple

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract

from stargate_splitter.core.transactions import send_contract_transaction
from stargate_splitter.core.utils import get_logger

LOGGER = get_logger("stargate_splitter.tokens")

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}, {"name": "_spender", "type": "address"}],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [{"name": "_spender", "type": "address"}, {"name": "_value", "type": "uint256"}],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
]


class AllowanceError(RuntimeError):
    """Raised when a token approval cannot be confirmed on-chain."""


_CONTRACT_CACHE: Dict[Tuple[int, str], Contract] = {}


def get_contract(web3: Web3, token_address: str) -> Contract:
    """Return a cached ERC20 contract instance for ``token_address``."""
    checksum_address = Web3.to_checksum_address(token_address)
    key = (id(web3), checksum_address)
    contract = _CONTRACT_CACHE.get(key)
    if contract is None:
        contract = web3.eth.contract(address=checksum_address, abi=ERC20_ABI)
        _CONTRACT_CACHE[key] = contract
    return contract


def balance_of(web3: Web3, token_address: str, owner: str) -> int:
    """Fetch the ERC20 balance."""
    contract = get_contract(web3, token_address)
    return contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()


def allowance_of(web3: Web3, token_address: str, owner: str, spender: str) -> int:
    """Fetch the ERC20 allowance."""
    contract = get_contract(web3, token_address)
    return contract.functions.allowance(
        Web3.to_checksum_address(owner),
        Web3.to_checksum_address(spender),
    ).call()


def approve(
    web3: Web3,
    account: LocalAccount,
    *,
    token_address: str,
    spender: str,
    amount: int,
    chain_id: int,
    gas_buffer_multiplier: float = 1.1,
) -> str:
    """Approve ``spender`` for ``amount`` and wait for the receipt.

    Any failure, including a reverted receipt, is raised as ``AllowanceError``.
    """
    contract = get_contract(web3, token_address)
    LOGGER.info("Approving %s of %s to %s", amount, token_address, spender)
    call = contract.functions.approve(Web3.to_checksum_address(spender), amount)
    try:
        tx_hash = send_contract_transaction(
            web3,
            account,
            call,
            chain_id=chain_id,
            gas_buffer_multiplier=gas_buffer_multiplier,
            label="approval",
        )
    except Exception as exc:
        raise AllowanceError(f"Approval of {token_address} to {spender} failed: {exc}") from exc
    LOGGER.info("Done token allowance setting")
    return tx_hash


__all__ = ["ERC20_ABI", "AllowanceError", "allowance_of", "approve", "balance_of", "get_contract"]
