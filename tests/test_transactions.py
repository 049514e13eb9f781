"""
Tests for transaction signing and submission.
"""
from unittest.mock import MagicMock, patch

import pytest
from web3.exceptions import ContractLogicError

from stargate_splitter.core import tokens
from stargate_splitter.core.tokens import AllowanceError, approve
from stargate_splitter.core.transactions import (
    TransactionFailedError,
    estimate_gas,
    send_contract_transaction,
)
from tests.helpers import SIGNER, SPLITTER, USDC


def test_send_builds_signs_and_waits(mock_w3, mock_account):
    call = MagicMock()
    call.estimate_gas.return_value = 100000

    tx_hash = send_contract_transaction(mock_w3, mock_account, call, chain_id=250, value=150)

    call.estimate_gas.assert_called_once_with({"from": SIGNER, "value": 150})
    call.build_transaction.assert_called_once_with(
        {
            "from": SIGNER,
            "gas": 110000,
            "maxFeePerGas": 12,
            "maxPriorityFeePerGas": 2,
            "nonce": 7,
            "chainId": 250,
            "value": 150,
        }
    )
    mock_account.sign_transaction.assert_called_once_with(call.build_transaction.return_value)
    mock_w3.eth.send_raw_transaction.assert_called_once_with(
        mock_account.sign_transaction.return_value.raw_transaction
    )
    assert tx_hash == "0xfeed"


def test_reverted_receipt_raises(mock_w3, mock_account):
    call = MagicMock()
    call.estimate_gas.return_value = 100000
    mock_w3.eth.wait_for_transaction_receipt.return_value = {"status": 0, "blockNumber": 12, "gasUsed": 21000}

    with pytest.raises(TransactionFailedError) as excinfo:
        send_contract_transaction(mock_w3, mock_account, call, chain_id=250)
    assert excinfo.value.tx_hash == "0xfeed"


def test_estimation_revert_without_fallback_raises(mock_w3, mock_account):
    call = MagicMock()
    call.estimate_gas.side_effect = ContractLogicError("execution reverted")

    with pytest.raises(ValueError, match="Contract would revert"):
        send_contract_transaction(mock_w3, mock_account, call, chain_id=250)
    mock_w3.eth.send_raw_transaction.assert_not_called()


def test_estimation_failure_uses_fallback_gas(mock_w3, mock_account):
    call = MagicMock()
    call.estimate_gas.side_effect = ContractLogicError("execution reverted")

    send_contract_transaction(mock_w3, mock_account, call, chain_id=250, fallback_gas_limit=1000000)

    tx_params = call.build_transaction.call_args.args[0]
    assert tx_params["gas"] == 1100000


def test_estimate_gas_costs(mock_w3):
    call = MagicMock()
    call.estimate_gas.return_value = 21000
    gas = estimate_gas(mock_w3, call, sender=SIGNER)
    assert gas.estimated_cost == 21000 * 10
    assert gas.max_priority_fee == 2


def test_approve_wraps_failures_in_allowance_error(mock_w3, mock_account):
    failure = TransactionFailedError("0xbad", {"status": 0})
    with patch.object(tokens, "send_contract_transaction", side_effect=failure):
        with pytest.raises(AllowanceError) as excinfo:
            approve(mock_w3, mock_account, token_address=USDC, spender=SPLITTER, amount=10, chain_id=250)
    assert excinfo.value.__cause__ is failure


def test_approve_returns_transaction_hash(mock_w3, mock_account):
    with patch.object(tokens, "send_contract_transaction", return_value="0xapprove") as mock_send:
        tx_hash = approve(mock_w3, mock_account, token_address=USDC, spender=SPLITTER, amount=10, chain_id=250)
    assert tx_hash == "0xapprove"
    assert mock_send.call_args.kwargs["chain_id"] == 250


def test_token_contract_is_cached_per_web3(mock_w3):
    first = tokens.get_contract(mock_w3, USDC)
    second = tokens.get_contract(mock_w3, USDC.lower())
    assert first is second
    assert mock_w3.eth.contract.call_count == 1


def test_balance_and_allowance_reads(mock_w3):
    contract = mock_w3.eth.contract.return_value
    contract.functions.balanceOf.return_value.call.return_value = 500
    contract.functions.allowance.return_value.call.return_value = 20

    assert tokens.balance_of(mock_w3, USDC, SIGNER) == 500
    assert tokens.allowance_of(mock_w3, USDC, SIGNER, SPLITTER) == 20
