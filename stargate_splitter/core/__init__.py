"""Core domain logic for the bridge splitter."""

from .dispatch import BridgeDispatcher, DispatchResult, build_bridge_call
from .fees import leg_fees, total_fee
from .payload import BridgeData, LegSet, StargateData, SwapData, build_leg_set
from .quotes import load_route_file, request_route
from .route import MalformedRouteError, RouteInterpretation, interpret_route
from .tokens import AllowanceError
from .transactions import TransactionFailedError
from .validation import validate_leg_set, validate_native_funding, validate_token_funding

__all__ = [
    "AllowanceError",
    "BridgeData",
    "BridgeDispatcher",
    "DispatchResult",
    "LegSet",
    "MalformedRouteError",
    "RouteInterpretation",
    "StargateData",
    "SwapData",
    "TransactionFailedError",
    "build_bridge_call",
    "build_leg_set",
    "interpret_route",
    "leg_fees",
    "load_route_file",
    "request_route",
    "total_fee",
    "validate_leg_set",
    "validate_native_funding",
    "validate_token_funding",
]
