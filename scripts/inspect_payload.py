#!/usr/bin/env python3
"""Print the splitter payload built from a saved route, without any RPC access."""

import argparse
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from stargate_splitter.config import MODES, load_config
from stargate_splitter.core.dispatch import entry_point_for
from stargate_splitter.core.payload import build_leg_set
from stargate_splitter.core.quotes import load_route_file
from stargate_splitter.core.route import interpret_route
from stargate_splitter.core.utils import ZERO_ADDRESS


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("route", type=Path, help="Saved Li.Fi route JSON")
    parser.add_argument("--mode", choices=sorted(MODES))
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--refund-address", default=ZERO_ADDRESS)
    args = parser.parse_args()

    config = load_config(args.config)
    if args.mode:
        config = config.with_mode(args.mode)

    try:
        interpretation = interpret_route(
            load_route_file(args.route),
            lifi_diamond_address=config.contracts.lifi_diamond_address,
        )
        legs = build_leg_set(interpretation, mode=config.mode, refund_address=args.refund_address)
    except Exception as exc:  # pragma: no cover - debugging script
        print(f"\n❌ Error building payload: {exc}")
        sys.exit(1)

    print("=" * 60)
    print("PAYLOAD")
    print("=" * 60)
    print(f"\n🧭 Mode: {legs.mode} ({len(legs)} legs)")
    print(f"🔁 SwapEnable: {interpretation.has_source_swaps}")
    print(f"📞 DestinationCall: {interpretation.has_destination_call}")
    print(f"⛽ NativeFrom: {legs.is_native_from}")
    print(f"🎯 Entry point: {entry_point_for(legs)}")

    for index, bridge in enumerate(legs.bridge_datas):
        print(f"\n--- Leg {index} ---")
        print(f"BridgeData: {bridge}")
        print(f"StargateData: {legs.stargate_datas[index]}")
        if legs.swap_datas is not None:
            print(f"SwapData: {list(legs.swap_datas[index])}")
        print(f"Fee: {legs.fees[index]}")

    print(f"\n💰 Total value: {legs.total_fee}")
    if not legs.is_native_from:
        print(f"🔐 Approve {legs.approve_amount} of {legs.sending_asset_id} to {config.bridge_contract_address}")


if __name__ == "__main__":
    main()
