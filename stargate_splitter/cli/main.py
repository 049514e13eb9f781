"""CLI entrypoint for bridging through the HecBridgeSplitter contract."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from eth_account import Account
from dotenv import load_dotenv
from web3 import Web3
from web3.contract import Contract

from stargate_splitter.config import MODES, SplitterConfig, load_config
from stargate_splitter.contracts import BRIDGE_SPLITTER_ABI_FILE, load_contract_abi
from stargate_splitter.core.dispatch import BridgeDispatcher, DispatchResult, entry_point_for
from stargate_splitter.core.payload import LegSet, build_leg_set
from stargate_splitter.core.quotes import load_route_file, request_route
from stargate_splitter.core.route import RouteInterpretation, describe_route, interpret_route
from stargate_splitter.core.tokens import allowance_of
from stargate_splitter.core.transactions import GasParameters, log_gas
from stargate_splitter.core.utils import ensure_web3_connected, get_logger
from stargate_splitter.core.validation import (
    NativeFundingResult,
    validate_leg_set,
    validate_native_funding,
    validate_token_funding,
)

LOGGER = get_logger("stargate_splitter.cli")

load_dotenv()


@dataclass(frozen=True)
class ExecutionPlan:
    """Full context required to dispatch one bridge call."""

    route: Mapping[str, Any]
    interpretation: RouteInterpretation
    legs: LegSet
    native_funding: NativeFundingResult
    current_allowance: Optional[int] = None

    @property
    def has_allowance(self) -> bool:
        if self.legs.is_native_from:
            return True
        return (self.current_allowance or 0) >= self.legs.approve_amount

    @property
    def entry_point(self) -> str:
        return entry_point_for(self.legs)

    @property
    def value(self) -> int:
        return self.legs.total_fee


class SplitterExecutor:
    """High-level orchestrator for the interpret, normalize and dispatch workflow."""

    def __init__(
        self,
        *,
        rpc_url: Optional[str],
        private_key: str,
        config: Optional[SplitterConfig] = None,
        web3_factory: Callable[[str], Web3] = lambda url: Web3(Web3.HTTPProvider(url)),
    ) -> None:
        self.config = config or load_config()

        resolved_rpc = rpc_url or self.config.network.ensure_rpc_url()
        self.web3 = web3_factory(resolved_rpc)
        ensure_web3_connected(self.web3, expected_chain_id=self.config.network.chain_id)

        self.account = Account.from_key(private_key)
        self.address = self.account.address
        LOGGER.info("Connected to %s (chain %s) as %s", self.config.network.name, self.config.network.chain_id, self.address)

        self.contract: Contract = self.web3.eth.contract(
            address=self.config.bridge_contract_address,
            abi=load_contract_abi(BRIDGE_SPLITTER_ABI_FILE),
        )
        self.dispatcher = BridgeDispatcher(
            web3=self.web3,
            account=self.account,
            contract=self.contract,
            chain_id=self.config.network.chain_id,
            gas_buffer_multiplier=self.config.defaults.gas_buffer_multiplier,
            fallback_gas_limit=self.config.defaults.fallback_gas,
        )

    def load_route(self, route_path: Optional[Path] = None) -> Dict[str, Any]:
        if route_path is not None:
            return load_route_file(route_path)
        return request_route(config=self.config, from_address=self.address)

    def prepare_plan(self, route: Mapping[str, Any]) -> ExecutionPlan:
        """Interpret ``route`` and build the leg set with preflight checks."""
        interpretation = interpret_route(route, lifi_diamond_address=self.config.contracts.lifi_diamond_address)
        legs = build_leg_set(interpretation, mode=self.config.mode, refund_address=self.address)
        validate_leg_set(legs)

        current_allowance = None
        if not legs.is_native_from:
            validate_token_funding(
                self.web3,
                token_address=legs.funding_asset_id,
                holder=self.address,
                required_amount=legs.funding_amount,
            )
            current_allowance = allowance_of(
                self.web3,
                legs.sending_asset_id,
                self.address,
                self.config.bridge_contract_address,
            )
        native_funding = validate_native_funding(
            native_balance=self.web3.eth.get_balance(self.address),
            total_fee=legs.total_fee,
        )
        return ExecutionPlan(
            route=route,
            interpretation=interpretation,
            legs=legs,
            native_funding=native_funding,
            current_allowance=current_allowance,
        )

    def execute_dry_run(self, route_path: Optional[Path] = None) -> GasParameters:
        """Estimate gas for the bridge call without approving or sending."""
        plan = self.prepare_plan(self.load_route(route_path))
        self._log_plan(plan)
        gas = self.dispatcher.simulate(plan.legs)
        log_gas(gas)
        return gas

    def execute_send(self, route_path: Optional[Path] = None) -> DispatchResult:
        """Approve when needed and broadcast the bridge call."""
        plan = self.prepare_plan(self.load_route(route_path))
        self._log_plan(plan)
        return self.dispatcher.dispatch(plan.legs)

    def _log_plan(self, plan: ExecutionPlan) -> None:
        LOGGER.info("Route: %s", describe_route(plan.route))
        LOGGER.info("Mode: %s (%s legs)", plan.legs.mode, self.config.leg_count)
        LOGGER.info("SwapEnable: %s", plan.interpretation.has_source_swaps)
        LOGGER.info("DestinationCall: %s", plan.interpretation.has_destination_call)
        LOGGER.info("Entry point: %s", plan.entry_point)
        LOGGER.info("Per-leg fees: %s total=%s", list(plan.legs.fees), plan.value)
        if not plan.legs.is_native_from:
            LOGGER.info("Approve amount: %s of %s", plan.legs.approve_amount, plan.legs.sending_asset_id)
            if not plan.has_allowance:
                LOGGER.warning(
                    "Allowance for %s is insufficient (allowance=%s required=%s); "
                    "gas estimation reverts until the approval is sent",
                    plan.legs.sending_asset_id,
                    plan.current_allowance,
                    plan.legs.approve_amount,
                )

        if not plan.native_funding.has_sufficient_native:
            LOGGER.warning(
                "Signer native balance %.6f below required %.6f",
                plan.native_funding.native_balance / 10**18,
                plan.native_funding.required_native / 10**18,
            )


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bridge through the HecBridgeSplitter via Stargate")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--dry-run", action="store_true", help="Estimate the bridge call without sending")
    group.add_argument("--send", action="store_true", help="Approve (if needed) and send the bridge call")
    parser.add_argument("--route", type=Path, help="Saved Li.Fi route JSON; fetched from Li.Fi when omitted")
    parser.add_argument("--mode", choices=sorted(MODES), help="Override the configured leg mode")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    rpc_url_env = os.getenv("RPC_URL") or ""
    rpc_url = rpc_url_env.strip() or None

    private_key_env = os.getenv("PRIVATE_KEY") or ""
    private_key = private_key_env.strip()

    if not private_key:
        print("❌ Error: PRIVATE_KEY environment variable not set")
        sys.exit(1)

    try:
        config = load_config(args.config)
        if args.mode:
            config = config.with_mode(args.mode)
        executor = SplitterExecutor(rpc_url=rpc_url, private_key=private_key, config=config)
        if args.dry_run:
            executor.execute_dry_run(args.route)
            return
        result = executor.execute_send(args.route)
    except Exception as exc:
        print(f"\n❌ Error: {exc}")
        sys.exit(1)

    if not result.succeeded:
        print(f"\n❌ Bridge call failed: {result.error!r}")
        sys.exit(1)
    print(f"✅ Done bridge Tx: {result.bridge_tx}")


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
