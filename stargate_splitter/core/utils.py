"""Utility helpers shared across splitter core modules."""

from __future__ import annotations

import functools
import json
import logging
import operator
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from web3 import Web3

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ONE_ADDRESS = "0x0000000000000000000000000000000000000001"
NATIVE_TOKEN_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"


def get_logger(name: str = "stargate_splitter") -> logging.Logger:
    """Return a configured logger that prints to stdout."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def load_json_file(path: Path) -> Dict[str, Any]:
    """Load JSON data from ``path``."""
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def ensure_web3_connected(web3: Web3, *, expected_chain_id: Optional[int] = None) -> None:
    """Validate that ``web3`` is connected and optionally matches the expected chain id."""
    if not web3.is_connected():
        raise ConnectionError("Failed to connect to the configured RPC endpoint")
    if expected_chain_id is not None and web3.eth.chain_id != expected_chain_id:
        raise ValueError(f"RPC chain ID mismatch: expected {expected_chain_id}, got {web3.eth.chain_id}")


def hex_to_bytes(data: str) -> bytes:
    """Convert a hex string (with or without ``0x``) to bytes."""
    data = data[2:] if data.startswith("0x") else data
    return bytes.fromhex(data)


def same_address(left: Optional[str], right: Optional[str]) -> bool:
    """Compare two hex addresses ignoring checksum casing."""
    if left is None or right is None:
        return False
    return left.lower() == right.lower()


def sum_ints(values: Iterable[Any]) -> int:
    """Fold an iterable of integer-like values into a single integer."""
    return functools.reduce(operator.add, (int(value) for value in values), 0)


def dig(data: Mapping[str, Any], path: str) -> Any:
    """Return the value at a dotted ``path`` inside nested mappings.

    Raises ``KeyError`` naming the full path when any segment is missing.
    """
    current: Any = data
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            raise KeyError(path)
        current = current[segment]
    return current


__all__ = [
    "NATIVE_TOKEN_ADDRESS",
    "ONE_ADDRESS",
    "ZERO_ADDRESS",
    "dig",
    "ensure_web3_connected",
    "get_logger",
    "hex_to_bytes",
    "load_json_file",
    "same_address",
    "sum_ints",
]
