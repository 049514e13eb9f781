"""
Tests for allowance handling and entry-point dispatch.
"""
from unittest.mock import MagicMock, patch

import pytest
from web3 import Web3

from stargate_splitter.core import dispatch as dispatch_module
from stargate_splitter.core.dispatch import BRIDGE_ONLY, SWAP_AND_BRIDGE, BridgeDispatcher
from stargate_splitter.core.payload import build_leg_set
from stargate_splitter.core.route import interpret_route
from stargate_splitter.core.tokens import AllowanceError
from stargate_splitter.core.transactions import TransactionFailedError
from tests.helpers import LIFI_DIAMOND, SIGNER, SPLITTER, SWAP_OUT_TOKEN, USDC, make_route


def _legs(mode="single", **route_kwargs):
    interpretation = interpret_route(make_route(**route_kwargs), lifi_diamond_address=LIFI_DIAMOND)
    return build_leg_set(interpretation, mode=mode, refund_address=SIGNER)


@pytest.fixture
def dispatcher(mock_w3, mock_account, mock_contract):
    return BridgeDispatcher(web3=mock_w3, account=mock_account, contract=mock_contract, chain_id=250)


def test_swap_route_uses_swap_and_bridge_entry_point(dispatcher, mock_contract):
    legs = _legs(swap=True, native=True)
    with patch.object(dispatch_module, "send_contract_transaction", return_value="0xbridge") as mock_send:
        result = dispatcher.dispatch(legs)

    swap_fn = mock_contract.functions.swapAndStartBridgeTokensViaStargate
    swap_fn.assert_called_once_with(legs.bridge_args(), legs.swap_args(), legs.stargate_args(), [150])
    mock_contract.functions.startBridgeTokensViaStargate.assert_not_called()
    assert mock_send.call_args.args[2] is swap_fn.return_value
    assert mock_send.call_args.kwargs["value"] == 150
    assert result.entry_point == SWAP_AND_BRIDGE
    assert result.bridge_tx == "0xbridge"
    assert result.succeeded


def test_plain_route_uses_bridge_only_entry_point(dispatcher, mock_contract):
    legs = _legs(swap=False, native=True)
    with patch.object(dispatch_module, "send_contract_transaction", return_value="0xbridge") as mock_send:
        result = dispatcher.dispatch(legs)

    bridge_fn = mock_contract.functions.startBridgeTokensViaStargate
    bridge_fn.assert_called_once_with(legs.bridge_args(), legs.stargate_args())
    mock_contract.functions.swapAndStartBridgeTokensViaStargate.assert_not_called()
    assert mock_send.call_args.args[2] is bridge_fn.return_value
    assert mock_send.call_args.kwargs["value"] == legs.total_fee
    assert result.entry_point == BRIDGE_ONLY


def test_native_source_skips_allowance(dispatcher):
    legs = _legs(native=True)
    with patch.object(dispatch_module.tokens, "approve") as mock_approve, patch.object(
        dispatch_module, "send_contract_transaction", return_value="0xbridge"
    ):
        result = dispatcher.dispatch(legs)

    mock_approve.assert_not_called()
    assert result.approval_tx is None


def test_allowance_confirmed_before_bridge_call(dispatcher, mock_contract):
    """The approval for the summed leg amounts completes before the bridge call is sent"""
    legs = _legs("multi", swap=False, native=False, from_amount="50")
    events = []

    def _approve(web3, account, **kwargs):
        events.append(("approve", kwargs))
        return "0xapprove"

    def _send(web3, account, call, **kwargs):
        events.append(("bridge", kwargs))
        return "0xbridge"

    with patch.object(dispatch_module.tokens, "approve", side_effect=_approve), patch.object(
        dispatch_module, "send_contract_transaction", side_effect=_send
    ):
        result = dispatcher.dispatch(legs)

    assert [name for name, _ in events] == ["approve", "bridge"]
    approve_kwargs = events[0][1]
    assert approve_kwargs["token_address"] == USDC
    assert approve_kwargs["spender"] == SPLITTER
    assert approve_kwargs["amount"] == 100
    assert result.approval_tx == "0xapprove"
    assert result.bridge_tx == "0xbridge"


def test_swap_route_approves_swap_output_token(dispatcher):
    legs = _legs(swap=True, native=False, to_token_amount="45")
    with patch.object(dispatch_module.tokens, "approve", return_value="0xapprove") as mock_approve, patch.object(
        dispatch_module, "send_contract_transaction", return_value="0xbridge"
    ):
        dispatcher.dispatch(legs)

    assert mock_approve.call_args.kwargs["token_address"] == SWAP_OUT_TOKEN
    assert mock_approve.call_args.kwargs["amount"] == 45


def test_allowance_failure_aborts_before_bridge_call(dispatcher, mock_contract):
    legs = _legs(swap=False, native=False)
    with patch.object(
        dispatch_module.tokens, "approve", side_effect=AllowanceError("reverted")
    ), patch.object(dispatch_module, "send_contract_transaction") as mock_send:
        with pytest.raises(AllowanceError):
            dispatcher.dispatch(legs)

    mock_send.assert_not_called()
    mock_contract.functions.startBridgeTokensViaStargate.assert_not_called()


def test_bridge_failure_is_logged_not_raised(dispatcher):
    legs = _legs(native=True)
    failure = TransactionFailedError("0xbad", {"status": 0})
    with patch.object(dispatch_module, "send_contract_transaction", side_effect=failure) as mock_send:
        result = dispatcher.dispatch(legs)

    assert mock_send.call_count == 1
    assert result.bridge_tx is None
    assert result.error is failure
    assert not result.succeeded


def test_simulate_estimates_selected_entry_point(dispatcher, mock_contract):
    legs = _legs(swap=True, native=True)
    swap_fn = mock_contract.functions.swapAndStartBridgeTokensViaStargate
    swap_fn.return_value.estimate_gas.return_value = 300000

    gas = dispatcher.simulate(legs)

    swap_fn.return_value.estimate_gas.assert_called_once_with({"from": SIGNER, "value": 150})
    assert gas.gas == 300000
    assert gas.max_fee == 12


def test_end_to_end_token_bridge_uses_signed_transactions(mock_w3, mock_account, mock_contract):
    """Approval and bridge both go through signing and receipt waiting"""
    token_contract = MagicMock()
    token_contract.functions.approve.return_value.estimate_gas.return_value = 50000
    mock_contract.functions.startBridgeTokensViaStargate.return_value.estimate_gas.return_value = 200000
    mock_w3.eth.contract.return_value = token_contract

    dispatcher = BridgeDispatcher(web3=mock_w3, account=mock_account, contract=mock_contract, chain_id=250)
    result = dispatcher.dispatch(_legs(swap=False, native=False, from_amount="50"))

    token_contract.functions.approve.assert_called_once_with(Web3.to_checksum_address(SPLITTER), 50)
    assert mock_account.sign_transaction.call_count == 2
    assert mock_w3.eth.wait_for_transaction_receipt.call_count == 2
    assert result.approval_tx == "0xfeed"
    assert result.bridge_tx == "0xfeed"
