"""Interpretation of Li.Fi route documents into a canonical bridge leg."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from stargate_splitter.core.utils import ZERO_ADDRESS, dig, get_logger, same_address

LOGGER = get_logger("stargate_splitter.route")

STEP_TYPE_SWAP = "swap"
STEP_TYPE_CROSS = "cross"

_ROUTE_KEYS = ("id", "fromToken.address", "fromAmount", "toAddress", "toChainId")
_STEP_KEYS = ("tool", "integrator", "estimate.data.toToken.address", "estimate.data.toTokenAmount")
_STARGATE_KEYS = ("dstPoolId", "minAmountLD", "dstGasForCall", "lzFee", "callTo", "callData")
_SWAP_KEYS = (
    "estimate.approvalAddress",
    "estimate.data.fromToken.address",
    "action.toToken.address",
    "action.fromAmount",
)


class MalformedRouteError(ValueError):
    """Raised when a route document cannot be turned into a bridge leg."""


@dataclass(frozen=True)
class RouteLeg:
    """Route-level fields feeding the bridge descriptor."""

    transaction_id: str
    bridge: str
    integrator: str
    referrer: str
    from_token: str
    from_amount: int
    swap_output_token: str
    swap_output_amount: int
    receiver: str
    destination_chain_id: int


@dataclass(frozen=True)
class SwapLeg:
    """The source-chain swap preceding the cross-chain transfer."""

    approval_address: str
    from_token: str
    to_token: str
    from_amount: int
    call_data: str


@dataclass(frozen=True)
class StargateLeg:
    """Stargate parameters quoted for the cross step."""

    dst_pool_id: int
    min_amount_ld: int
    dst_gas_for_call: int
    lz_fee: int
    call_to: str
    call_data: str


@dataclass(frozen=True)
class RouteInterpretation:
    """Everything the payload normalizer needs from a route."""

    bridge_leg: RouteLeg
    swap_leg: Optional[SwapLeg]
    stargate_leg: StargateLeg
    has_source_swaps: bool
    has_destination_call: bool
    is_native_from: bool


def _require_paths(data: Mapping[str, Any], paths, context: str) -> None:
    missing = []
    for path in paths:
        try:
            dig(data, path)
        except KeyError:
            missing.append(path)
    if missing:
        raise MalformedRouteError(f"{context} missing required fields: {', '.join(missing)}")


def _to_int(value: Any, *, field_name: str) -> int:
    try:
        if isinstance(value, str) and value.lower().startswith("0x"):
            return int(value, 16)
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedRouteError(f"{field_name} is not an integer amount: {value!r}") from exc


def _first_step(route: Mapping[str, Any]) -> Mapping[str, Any]:
    steps = route.get("steps")
    if not isinstance(steps, list) or not steps:
        raise MalformedRouteError("route has no steps")
    step = steps[0]
    included = step.get("includedSteps") if isinstance(step, Mapping) else None
    if not isinstance(included, list) or not included:
        raise MalformedRouteError("route step has no includedSteps")
    return step


def _find_cross_step(step: Mapping[str, Any]) -> Mapping[str, Any]:
    for included in step["includedSteps"]:
        if isinstance(included, Mapping) and included.get("type") == STEP_TYPE_CROSS:
            return included
    raise MalformedRouteError("route step has no included step of type 'cross'")


def _parse_stargate(cross_step: Mapping[str, Any]) -> StargateLeg:
    try:
        stargate = dig(cross_step, "estimate.data.stargateData")
    except KeyError as exc:
        raise MalformedRouteError("cross step is missing estimate.data.stargateData") from exc
    _require_paths(stargate, _STARGATE_KEYS, "stargateData")
    return StargateLeg(
        dst_pool_id=_to_int(stargate["dstPoolId"], field_name="dstPoolId"),
        min_amount_ld=_to_int(stargate["minAmountLD"], field_name="minAmountLD"),
        dst_gas_for_call=_to_int(stargate["dstGasForCall"], field_name="dstGasForCall"),
        lz_fee=_to_int(stargate["lzFee"], field_name="lzFee"),
        call_to=str(stargate["callTo"]),
        call_data=str(stargate["callData"] or "0x"),
    )


def _parse_swap(swap_step: Mapping[str, Any]) -> SwapLeg:
    _require_paths(swap_step, _SWAP_KEYS, "swap step")
    transaction_request = swap_step.get("transactionRequest") or {}
    return SwapLeg(
        approval_address=str(dig(swap_step, "estimate.approvalAddress")),
        from_token=str(dig(swap_step, "estimate.data.fromToken.address")),
        to_token=str(dig(swap_step, "action.toToken.address")),
        from_amount=_to_int(dig(swap_step, "action.fromAmount"), field_name="action.fromAmount"),
        call_data=transaction_request.get("data") or "0x",
    )


def interpret_route(route: Mapping[str, Any], *, lifi_diamond_address: str) -> RouteInterpretation:
    """Validate ``route`` and extract the bridge, swap and Stargate legs.

    Only the first top-level step is interpreted. A source swap exists when the
    first included step is a swap; a destination call exists when the quoted
    Stargate ``callTo`` is neither the Li.Fi diamond nor the route receiver.
    """
    if not isinstance(route, Mapping):
        raise MalformedRouteError("route document must be a mapping")

    _require_paths(route, _ROUTE_KEYS, "route")
    step = _first_step(route)
    _require_paths(step, _STEP_KEYS, "route step")

    stargate_leg = _parse_stargate(_find_cross_step(step))

    first_included = step["includedSteps"][0]
    if not isinstance(first_included, Mapping):
        raise MalformedRouteError("first included step must be a mapping")
    has_source_swaps = first_included.get("type") == STEP_TYPE_SWAP
    swap_leg = _parse_swap(first_included) if has_source_swaps else None

    receiver = str(route["toAddress"])
    has_destination_call = not same_address(stargate_leg.call_to, lifi_diamond_address) and not same_address(
        stargate_leg.call_to, receiver
    )

    from_token = str(dig(route, "fromToken.address"))
    is_native_from = same_address(from_token, ZERO_ADDRESS)

    bridge_leg = RouteLeg(
        transaction_id=str(route["id"]),
        bridge=str(step["tool"]),
        integrator=str(step["integrator"]),
        referrer=str(step.get("referrer") or ""),
        from_token=from_token,
        from_amount=_to_int(route["fromAmount"], field_name="fromAmount"),
        swap_output_token=str(dig(step, "estimate.data.toToken.address")),
        swap_output_amount=_to_int(dig(step, "estimate.data.toTokenAmount"), field_name="toTokenAmount"),
        receiver=receiver,
        destination_chain_id=_to_int(route["toChainId"], field_name="toChainId"),
    )

    LOGGER.info(
        "Interpreted route %s: swap=%s destinationCall=%s nativeFrom=%s",
        bridge_leg.transaction_id,
        has_source_swaps,
        has_destination_call,
        is_native_from,
    )

    return RouteInterpretation(
        bridge_leg=bridge_leg,
        swap_leg=swap_leg,
        stargate_leg=stargate_leg,
        has_source_swaps=has_source_swaps,
        has_destination_call=has_destination_call,
        is_native_from=is_native_from,
    )


def describe_route(route: Mapping[str, Any]) -> Dict[str, Any]:
    """Summarise a route for logging without interpreting it."""
    steps = route.get("steps") or []
    included = steps[0].get("includedSteps", []) if steps else []
    return {
        "id": route.get("id"),
        "fromChainId": route.get("fromChainId"),
        "toChainId": route.get("toChainId"),
        "steps": len(steps),
        "includedSteps": [item.get("type") for item in included],
    }


__all__ = [
    "MalformedRouteError",
    "RouteInterpretation",
    "RouteLeg",
    "StargateLeg",
    "SwapLeg",
    "describe_route",
    "interpret_route",
]
