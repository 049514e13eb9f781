"""Entry point selection and submission of splitter bridge calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract

from stargate_splitter.core import tokens
from stargate_splitter.core.payload import LegSet
from stargate_splitter.core.transactions import GasParameters, estimate_gas, send_contract_transaction
from stargate_splitter.core.utils import get_logger

LOGGER = get_logger("stargate_splitter.dispatch")

BRIDGE_ONLY = "startBridgeTokensViaStargate"
SWAP_AND_BRIDGE = "swapAndStartBridgeTokensViaStargate"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a single bridge dispatch."""

    entry_point: str
    value: int
    approval_tx: Optional[str]
    bridge_tx: Optional[str]
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.bridge_tx is not None


def entry_point_for(legs: LegSet) -> str:
    return SWAP_AND_BRIDGE if legs.has_source_swaps else BRIDGE_ONLY


def build_bridge_call(contract: Contract, legs: LegSet) -> Any:
    """Return the bound contract function for ``legs``."""
    if legs.has_source_swaps:
        return contract.functions.swapAndStartBridgeTokensViaStargate(
            legs.bridge_args(),
            legs.swap_args(),
            legs.stargate_args(),
            list(legs.fees),
        )
    return contract.functions.startBridgeTokensViaStargate(
        legs.bridge_args(),
        legs.stargate_args(),
    )


class BridgeDispatcher:
    """Approve the source token when needed, then submit the bridge call."""

    def __init__(
        self,
        *,
        web3: Web3,
        account: LocalAccount,
        contract: Contract,
        chain_id: int,
        gas_buffer_multiplier: float = 1.1,
        fallback_gas_limit: Optional[int] = None,
    ) -> None:
        self.web3 = web3
        self.account = account
        self.contract = contract
        self.chain_id = chain_id
        self.gas_buffer_multiplier = gas_buffer_multiplier
        self.fallback_gas_limit = fallback_gas_limit

    def ensure_allowance(self, legs: LegSet) -> Optional[str]:
        """Approve the splitter for the summed leg amounts; native sources skip this."""
        if legs.is_native_from:
            return None
        LOGGER.info("Approve the ERC20 token to the bridge splitter...")
        return tokens.approve(
            self.web3,
            self.account,
            token_address=legs.sending_asset_id,
            spender=self.contract.address,
            amount=legs.approve_amount,
            chain_id=self.chain_id,
            gas_buffer_multiplier=self.gas_buffer_multiplier,
        )

    def simulate(self, legs: LegSet) -> GasParameters:
        """Estimate gas for the selected entry point without sending anything."""
        call = build_bridge_call(self.contract, legs)
        return estimate_gas(self.web3, call, sender=self.account.address, value=legs.total_fee)

    def dispatch(self, legs: LegSet) -> DispatchResult:
        """Run the allowance step and the bridge call once.

        Allowance failures propagate as ``tokens.AllowanceError``. Bridge call
        failures are logged and reported on the result; they are not retried.
        """
        entry_point = entry_point_for(legs)
        value = legs.total_fee
        approval_tx = self.ensure_allowance(legs)

        LOGGER.info("Executing %s with value %s", entry_point, value)
        try:
            call = build_bridge_call(self.contract, legs)
            bridge_tx = send_contract_transaction(
                self.web3,
                self.account,
                call,
                chain_id=self.chain_id,
                value=value,
                gas_buffer_multiplier=self.gas_buffer_multiplier,
                fallback_gas_limit=self.fallback_gas_limit,
                label="bridge transaction",
            )
        except Exception as exc:
            LOGGER.error("Bridge call %s failed: %r", entry_point, exc)
            return DispatchResult(
                entry_point=entry_point,
                value=value,
                approval_tx=approval_tx,
                bridge_tx=None,
                error=exc,
            )

        LOGGER.info("Done bridge Tx: %s", bridge_tx)
        return DispatchResult(entry_point=entry_point, value=value, approval_tx=approval_tx, bridge_tx=bridge_tx)


__all__ = [
    "BRIDGE_ONLY",
    "BridgeDispatcher",
    "DispatchResult",
    "SWAP_AND_BRIDGE",
    "build_bridge_call",
    "entry_point_for",
]
