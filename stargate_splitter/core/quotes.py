"""Route acquisition from Li.Fi or from a saved route document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from web3 import Web3

from stargate_splitter.config import SplitterConfig
from stargate_splitter.core.utils import get_logger, load_json_file

LOGGER = get_logger("stargate_splitter.quotes")

STARGATE_BRIDGE = "stargate"


def load_route_file(path: Path) -> Dict[str, Any]:
    """Load a saved route; accepts a bare route or a ``{"routes": [...]}`` response."""
    try:
        data = load_json_file(path)
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Route file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Route file contains invalid JSON: {path}") from exc

    if isinstance(data, dict) and "routes" in data:
        return _first_route(data)
    return data


def _first_route(payload: Dict[str, Any]) -> Dict[str, Any]:
    routes = payload.get("routes") or []
    if not routes:
        raise ValueError("Li.Fi returned no routes for the request")
    return routes[0]


def request_route(
    *,
    config: SplitterConfig,
    from_address: str,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """Request Stargate routes from Li.Fi and return the first one."""
    request = config.route_request
    if request is None:
        raise ValueError("route_request is not configured; pass a saved route file instead")

    body = {
        "fromChainId": request.from_chain,
        "toChainId": request.to_chain,
        "fromTokenAddress": request.from_token,
        "toTokenAddress": request.to_token,
        "fromAmount": str(request.from_amount),
        "fromAddress": Web3.to_checksum_address(from_address),
        "toAddress": request.to_address,
        "options": {"bridges": {"allow": [STARGATE_BRIDGE]}},
    }
    http = session or requests
    try:
        response = http.post(
            config.api_urls.lifi_routes,
            json=body,
            timeout=config.defaults.api_timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise ConnectionError(f"Failed to fetch Li.Fi routes from {config.api_urls.lifi_routes}: {exc}") from exc

    route = _first_route(response.json())
    LOGGER.info("Fetched route %s via %s", route.get("id"), config.api_urls.lifi_routes)
    return route


__all__ = ["load_route_file", "request_route"]
