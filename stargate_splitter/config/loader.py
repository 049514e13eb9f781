"""Config loader for the bridge splitter tooling."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Iterable, Mapping, MutableMapping, Optional

from web3 import Web3

MODES = {"single": 1, "multi": 2}


class ConfigError(ValueError):
    """Raised when configuration data is invalid or missing."""


def _require_keys(data: Mapping[str, Any], keys: Iterable[str], context: str) -> None:
    missing = [key for key in keys if key not in data]
    if missing:
        raise ConfigError(f"{context} missing required keys: {', '.join(missing)}")


def _to_checksum(value: str, *, field_name: str) -> str:
    try:
        return Web3.to_checksum_address(value)
    except Exception as exc:  # web3 raises ValueError for malformed inputs
        raise ConfigError(f"Invalid address for {field_name}: {value}") from exc


def _validate_mode(value: Any) -> str:
    mode = str(value).strip().lower()
    if mode not in MODES:
        raise ConfigError(f"mode must be one of {', '.join(sorted(MODES))}, got {value!r}")
    return mode


@dataclass(frozen=True)
class NetworkConfig:
    """Source network the bridge transaction is sent on."""

    name: str
    chain_id: int
    rpc_url: Optional[str] = None

    def ensure_rpc_url(self) -> str:
        """Return the RPC URL or raise if it is missing."""
        if not self.rpc_url:
            raise ConfigError("RPC URL required but not configured")
        return self.rpc_url


@dataclass(frozen=True)
class ContractsConfig:
    """Deployed contract addresses on the source network."""

    bridge_splitter_address: str
    lifi_diamond_address: str


@dataclass(frozen=True)
class DefaultsConfig:
    """Default operational parameters."""

    api_timeout: int
    gas_buffer_multiplier: float
    fallback_gas: int


@dataclass(frozen=True)
class ApiUrlsConfig:
    """API endpoints used to fetch routes."""

    lifi_routes: str


@dataclass(frozen=True)
class RouteRequestConfig:
    """Parameters for requesting a fresh route from Li.Fi."""

    from_chain: int
    to_chain: int
    from_token: str
    to_token: str
    from_amount: int
    to_address: str


@dataclass(frozen=True)
class SplitterConfig:
    """Typed wrapper around the splitter configuration."""

    mode: str
    network: NetworkConfig
    contracts: ContractsConfig
    defaults: DefaultsConfig
    api_urls: ApiUrlsConfig
    route_request: Optional[RouteRequestConfig] = None

    @property
    def bridge_contract_address(self) -> str:
        return self.contracts.bridge_splitter_address

    @property
    def leg_count(self) -> int:
        return MODES[self.mode]

    def with_mode(self, mode: str) -> "SplitterConfig":
        """Return a copy with ``mode`` overridden."""
        return replace(self, mode=_validate_mode(mode))


def _load_json(path: Path) -> MutableMapping[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file contains invalid JSON: {path}") from exc


def _parse_route_request(data: Mapping[str, Any]) -> RouteRequestConfig:
    _require_keys(
        data,
        ["from_chain", "to_chain", "from_token", "to_token", "from_amount", "to_address"],
        "route_request",
    )
    request = RouteRequestConfig(
        from_chain=int(data["from_chain"]),
        to_chain=int(data["to_chain"]),
        from_token=_to_checksum(data["from_token"], field_name="route_request.from_token"),
        to_token=_to_checksum(data["to_token"], field_name="route_request.to_token"),
        from_amount=int(data["from_amount"]),
        to_address=_to_checksum(data["to_address"], field_name="route_request.to_address"),
    )
    if request.from_amount <= 0:
        raise ConfigError("route_request.from_amount must be positive")
    return request


def parse_config(data: Mapping[str, Any]) -> SplitterConfig:
    """Validate an already-decoded configuration mapping."""
    _require_keys(data, ["mode", "network", "contracts", "defaults", "api_urls"], "config")

    network_data = data["network"]
    _require_keys(network_data, ["name", "chain_id"], "network")
    network = NetworkConfig(
        name=str(network_data["name"]),
        chain_id=int(network_data["chain_id"]),
        rpc_url=network_data.get("rpc_url"),
    )

    contracts_data = data["contracts"]
    _require_keys(contracts_data, ["bridge_splitter_address", "lifi_diamond_address"], "contracts")
    contracts = ContractsConfig(
        bridge_splitter_address=_to_checksum(
            contracts_data["bridge_splitter_address"], field_name="bridge_splitter_address"
        ),
        lifi_diamond_address=_to_checksum(contracts_data["lifi_diamond_address"], field_name="lifi_diamond_address"),
    )

    defaults = data["defaults"]
    _require_keys(defaults, ["api_timeout"], "defaults")
    defaults_config = DefaultsConfig(
        api_timeout=int(defaults["api_timeout"]),
        gas_buffer_multiplier=float(defaults.get("gas_buffer_multiplier", 1.1)),
        fallback_gas=int(defaults.get("fallback_gas", 1_000_000)),
    )
    if defaults_config.api_timeout <= 0:
        raise ConfigError("defaults.api_timeout must be positive")
    if defaults_config.gas_buffer_multiplier < 1:
        raise ConfigError("defaults.gas_buffer_multiplier must be at least 1")
    if defaults_config.fallback_gas <= 0:
        raise ConfigError("defaults.fallback_gas must be positive")

    api_urls = data["api_urls"]
    _require_keys(api_urls, ["lifi_routes"], "api_urls")
    api_config = ApiUrlsConfig(lifi_routes=str(api_urls["lifi_routes"]))

    route_request = None
    if data.get("route_request"):
        route_request = _parse_route_request(data["route_request"])

    return SplitterConfig(
        mode=_validate_mode(data["mode"]),
        network=network,
        contracts=contracts,
        defaults=defaults_config,
        api_urls=api_config,
        route_request=route_request,
    )


def load_config(config_path: Optional[Path] = None) -> SplitterConfig:
    """Load and validate splitter configuration data."""
    config_path = config_path or Path("config.json")
    return parse_config(_load_json(config_path))


__all__ = [
    "ApiUrlsConfig",
    "ConfigError",
    "ContractsConfig",
    "DefaultsConfig",
    "MODES",
    "NetworkConfig",
    "RouteRequestConfig",
    "SplitterConfig",
    "load_config",
    "parse_config",
]
