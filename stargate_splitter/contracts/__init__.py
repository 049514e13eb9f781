"""Contract ABIs shipped with the splitter tooling."""

from importlib import resources
from typing import Any, List
import json

BRIDGE_SPLITTER_ABI_FILE = "hec_bridge_splitter.json"


def load_contract_abi(filename: str) -> List[Any]:
    """Load an ABI JSON file from the contracts package."""
    with resources.files(__package__).joinpath(filename).open("r", encoding="utf-8") as fh:
        return json.load(fh)


__all__ = ["BRIDGE_SPLITTER_ABI_FILE", "load_contract_abi"]
