"""Contract-ready descriptors for the bridge splitter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from web3 import Web3

from stargate_splitter.config import MODES
from stargate_splitter.core.fees import leg_fees, total_fee
from stargate_splitter.core.route import RouteInterpretation
from stargate_splitter.core.utils import (
    NATIVE_TOKEN_ADDRESS,
    ONE_ADDRESS,
    ZERO_ADDRESS,
    get_logger,
    hex_to_bytes,
    same_address,
    sum_ints,
)

LOGGER = get_logger("stargate_splitter.payload")

_BYTES32_HEX = re.compile(r"^0x[0-9a-fA-F]{64}$")


def transaction_id_to_bytes32(transaction_id: str) -> bytes:
    """Encode a route id as ``bytes32``; non-hex ids are hashed."""
    if _BYTES32_HEX.match(transaction_id):
        return hex_to_bytes(transaction_id)
    return bytes(Web3.keccak(text=transaction_id))


@dataclass(frozen=True)
class BridgeData:
    """``ILiFi.BridgeData`` for one leg."""

    transaction_id: str
    bridge: str
    integrator: str
    referrer: str
    sending_asset_id: str
    receiver: str
    min_amount: int
    destination_chain_id: int
    has_source_swaps: bool
    has_destination_call: bool

    def as_tuple(self) -> tuple:
        return (
            transaction_id_to_bytes32(self.transaction_id),
            self.bridge,
            self.integrator,
            Web3.to_checksum_address(self.referrer),
            Web3.to_checksum_address(self.sending_asset_id),
            Web3.to_checksum_address(self.receiver),
            self.min_amount,
            self.destination_chain_id,
            self.has_source_swaps,
            self.has_destination_call,
        )


@dataclass(frozen=True)
class SwapData:
    """``LibSwap.SwapData`` for the source-chain swap."""

    call_to: str
    approve_to: str
    sending_asset_id: str
    receiving_asset_id: str
    from_amount: int
    call_data: str
    requires_deposit: bool = True

    def as_tuple(self) -> tuple:
        return (
            Web3.to_checksum_address(self.call_to),
            Web3.to_checksum_address(self.approve_to),
            Web3.to_checksum_address(self.sending_asset_id),
            Web3.to_checksum_address(self.receiving_asset_id),
            self.from_amount,
            hex_to_bytes(self.call_data),
            self.requires_deposit,
        )


@dataclass(frozen=True)
class StargateData:
    """``StargateFacet.StargateData`` for the cross-chain transfer."""

    dst_pool_id: int
    min_amount_ld: int
    dst_gas_for_call: int
    lz_fee: int
    refund_address: str
    call_to: str
    call_data: str

    def as_tuple(self) -> tuple:
        return (
            self.dst_pool_id,
            self.min_amount_ld,
            self.dst_gas_for_call,
            self.lz_fee,
            Web3.to_checksum_address(self.refund_address),
            hex_to_bytes(self.call_to),
            hex_to_bytes(self.call_data),
        )


@dataclass(frozen=True)
class LegSet:
    """Positionally-correlated descriptors; index ``i`` is one bridging leg."""

    mode: str
    bridge_datas: Tuple[BridgeData, ...]
    swap_datas: Optional[Tuple[Tuple[SwapData, ...], ...]]
    stargate_datas: Tuple[StargateData, ...]
    fees: Tuple[int, ...]
    is_native_from: bool

    @property
    def has_source_swaps(self) -> bool:
        return self.bridge_datas[0].has_source_swaps

    @property
    def total_fee(self) -> int:
        return total_fee(self.fees)

    @property
    def approve_amount(self) -> int:
        return sum_ints(leg.min_amount for leg in self.bridge_datas)

    @property
    def sending_asset_id(self) -> str:
        return self.bridge_datas[0].sending_asset_id

    @property
    def funding_asset_id(self) -> str:
        """Token the signer must hold: the swap input when swapping, else the bridged token."""
        if self.swap_datas is not None:
            return self.swap_datas[0][0].sending_asset_id
        return self.sending_asset_id

    @property
    def funding_amount(self) -> int:
        if self.swap_datas is not None:
            return sum_ints(swaps[0].from_amount for swaps in self.swap_datas)
        return self.approve_amount

    def __len__(self) -> int:
        return len(self.bridge_datas)

    def bridge_args(self) -> List[tuple]:
        return [leg.as_tuple() for leg in self.bridge_datas]

    def swap_args(self) -> List[List[tuple]]:
        if self.swap_datas is None:
            return []
        return [[swap.as_tuple() for swap in swaps] for swaps in self.swap_datas]

    def stargate_args(self) -> List[tuple]:
        return [leg.as_tuple() for leg in self.stargate_datas]


def build_bridge_data(interpretation: RouteInterpretation) -> BridgeData:
    leg = interpretation.bridge_leg
    swapped = interpretation.has_source_swaps
    return BridgeData(
        transaction_id=leg.transaction_id,
        bridge=leg.bridge,
        integrator=leg.integrator,
        referrer=ZERO_ADDRESS if leg.referrer == "" else ONE_ADDRESS,
        sending_asset_id=leg.swap_output_token if swapped else leg.from_token,
        receiver=leg.receiver,
        min_amount=leg.swap_output_amount if swapped else leg.from_amount,
        destination_chain_id=leg.destination_chain_id,
        has_source_swaps=swapped,
        has_destination_call=interpretation.has_destination_call,
    )


def build_swap_data(interpretation: RouteInterpretation) -> Optional[SwapData]:
    swap = interpretation.swap_leg
    if not interpretation.has_source_swaps or swap is None:
        return None
    native = same_address(swap.from_token, NATIVE_TOKEN_ADDRESS) or interpretation.is_native_from
    return SwapData(
        call_to=swap.approval_address,
        approve_to=swap.approval_address,
        sending_asset_id=ZERO_ADDRESS if native else swap.from_token,
        receiving_asset_id=swap.to_token,
        from_amount=swap.from_amount,
        call_data=swap.call_data,
        requires_deposit=True,
    )


def build_stargate_data(interpretation: RouteInterpretation, *, refund_address: str) -> StargateData:
    stargate = interpretation.stargate_leg
    call_to = stargate.call_to if interpretation.has_destination_call else interpretation.bridge_leg.receiver
    return StargateData(
        dst_pool_id=stargate.dst_pool_id,
        min_amount_ld=stargate.min_amount_ld,
        dst_gas_for_call=stargate.dst_gas_for_call,
        lz_fee=stargate.lz_fee,
        refund_address=refund_address,
        call_to=call_to,
        call_data=stargate.call_data,
    )


def build_leg_set(interpretation: RouteInterpretation, *, mode: str, refund_address: str) -> LegSet:
    """Replicate the interpreted leg once per leg of ``mode``."""
    if mode not in MODES:
        raise ValueError(f"Unknown mode {mode!r}")
    count = MODES[mode]

    bridge_data = build_bridge_data(interpretation)
    swap_data = build_swap_data(interpretation)
    stargate_data = build_stargate_data(interpretation, refund_address=refund_address)

    swap_datas = None
    if swap_data is not None:
        swap_datas = tuple((swap_data,) for _ in range(count))

    # Without a source swap the native amount sent in is the bridged amount itself.
    native_amount = swap_data.from_amount if swap_data is not None else bridge_data.min_amount
    fees = leg_fees(
        lz_fees=[stargate_data.lz_fee] * count,
        is_native_from=interpretation.is_native_from,
        native_amount=native_amount,
    )

    LOGGER.info("Mode: %s (%s legs)", mode, count)
    LOGGER.info("BridgeData: %s", bridge_data)
    LOGGER.info("StargateData: %s", stargate_data)
    LOGGER.info("SwapData: %s", swap_data)

    return LegSet(
        mode=mode,
        bridge_datas=tuple(bridge_data for _ in range(count)),
        swap_datas=swap_datas,
        stargate_datas=tuple(stargate_data for _ in range(count)),
        fees=tuple(fees),
        is_native_from=interpretation.is_native_from,
    )


__all__ = [
    "BridgeData",
    "LegSet",
    "StargateData",
    "SwapData",
    "build_bridge_data",
    "build_leg_set",
    "build_stargate_data",
    "build_swap_data",
    "transaction_id_to_bytes32",
]
