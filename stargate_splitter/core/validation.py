"""Preflight checks for splitter bridge calls."""

from __future__ import annotations

from dataclasses import dataclass

from web3 import Web3

from stargate_splitter.core.payload import LegSet
from stargate_splitter.core.tokens import balance_of
from stargate_splitter.core.utils import ZERO_ADDRESS, get_logger, same_address

LOGGER = get_logger("stargate_splitter.validation")

# 1M gas at 1 gwei
GAS_BUFFER_WEI = 1_000_000 * 10**9


def validate_leg_set(legs: LegSet) -> None:
    """Ensure the parallel leg sequences are consistent."""
    count = len(legs.bridge_datas)
    if count == 0:
        raise ValueError("leg set is empty")
    if len(legs.stargate_datas) != count or len(legs.fees) != count:
        raise ValueError(
            f"leg sequences differ in length: bridge={count} stargate={len(legs.stargate_datas)} fees={len(legs.fees)}"
        )
    if legs.has_source_swaps:
        if legs.swap_datas is None or len(legs.swap_datas) != count:
            raise ValueError("source swaps flagged but swap datas do not cover every leg")
    elif legs.swap_datas is not None:
        raise ValueError("swap datas present on a route without source swaps")
    for index, leg in enumerate(legs.bridge_datas, start=1):
        if leg.min_amount <= 0:
            raise ValueError(f"Leg #{index} has non-positive minAmount {leg.min_amount}")


@dataclass(frozen=True)
class NativeFundingResult:
    """Outcome of the native balance preflight."""

    native_balance: int
    required_native: int
    has_sufficient_native: bool


def validate_native_funding(*, native_balance: int, total_fee: int) -> NativeFundingResult:
    """Warn when the signer cannot cover the attached value plus gas."""
    required_native = total_fee + GAS_BUFFER_WEI
    has_balance = native_balance >= required_native
    if not has_balance:
        LOGGER.warning(
            "Low native balance %.6f, requires at least %.6f",
            native_balance / 10**18,
            required_native / 10**18,
        )
    return NativeFundingResult(
        native_balance=native_balance,
        required_native=required_native,
        has_sufficient_native=has_balance,
    )


def validate_token_funding(web3: Web3, *, token_address: str, holder: str, required_amount: int) -> int:
    """Raise when ``holder`` holds less than ``required_amount`` of the token."""
    if same_address(token_address, ZERO_ADDRESS):
        raise ValueError("token funding check requested for the native asset")
    balance = balance_of(web3, token_address, holder)
    if balance < required_amount:
        raise ValueError(
            f"Balance of {token_address} for {holder} is {balance}, but the bridge requires {required_amount}"
        )
    return balance


__all__ = [
    "GAS_BUFFER_WEI",
    "NativeFundingResult",
    "validate_leg_set",
    "validate_native_funding",
    "validate_token_funding",
]
