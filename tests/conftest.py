"""
Pytest fixtures for the bridge splitter tests.
"""
import copy
import json
from unittest.mock import MagicMock

import pytest

from stargate_splitter.config import parse_config
from stargate_splitter.core import tokens
from tests.helpers import CONFIG_DATA, SIGNER, SPLITTER, make_route


@pytest.fixture
def config():
    return parse_config(copy.deepcopy(CONFIG_DATA))


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG_DATA))
    return path


@pytest.fixture
def route_file(tmp_path):
    path = tmp_path / "route.json"
    path.write_text(json.dumps(make_route()))
    return path


@pytest.fixture
def mock_w3():
    """A Web3 stand-in with receipts that always succeed."""
    w3 = MagicMock()
    w3.is_connected.return_value = True
    w3.eth.chain_id = 250
    w3.eth.gas_price = 10
    w3.eth.max_priority_fee = 2
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.get_balance.return_value = 10**21
    w3.eth.send_raw_transaction.return_value.hex.return_value = "0xfeed"
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "blockNumber": 12, "gasUsed": 21000}
    return w3


@pytest.fixture
def mock_account():
    account = MagicMock()
    account.address = SIGNER
    return account


@pytest.fixture
def mock_contract():
    contract = MagicMock()
    contract.address = SPLITTER
    return contract


@pytest.fixture(autouse=True)
def _clear_token_contract_cache():
    """Mock Web3 instances can reuse ids across tests."""
    tokens._CONTRACT_CACHE.clear()
    yield
    tokens._CONTRACT_CACHE.clear()
