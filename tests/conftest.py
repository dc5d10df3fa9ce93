"""
Pytest fixtures for the Token Layer SDK tests.
"""
import pytest
from unittest.mock import MagicMock
from hexbytes import HexBytes
from web3 import Web3
from web3.providers.rpc import HTTPProvider

from tokenlayer_sdk import ApiKeyAuth, JwtAuth, WalletAuth, LocalSigner
from tests.test_helpers import (
    RecordingSigner, create_test_client, TEST_API_KEY, TEST_JWT, TEST_PRIV_KEY, TEST_CHAIN_ID
)


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    def _dummy(self, method, params=None, _=None):      # signature match
        if method in {"eth_chainId"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x2105"}      # base
        if method in {"eth_gasPrice"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        # everything else – return something harmless
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture
def mock_w3():
    """Mock Web3 instance with deterministic chain state"""
    mock = MagicMock(spec=Web3)
    eth = MagicMock()
    eth.chain_id = TEST_CHAIN_ID
    eth.gas_price = 1000000000  # 1 gwei
    eth.get_transaction_count = MagicMock(return_value=12)
    eth.estimate_gas = MagicMock(return_value=100000)
    eth.send_raw_transaction = MagicMock(return_value=HexBytes(b"\x11" * 32))
    mock.eth = eth
    return mock


@pytest.fixture
def recording_signer():
    """Signer bound to the test chain"""
    return RecordingSigner(chain_id=TEST_CHAIN_ID)


@pytest.fixture
def local_signer():
    return LocalSigner(TEST_PRIV_KEY, chain_id=TEST_CHAIN_ID)


@pytest.fixture
def api_key_client():
    return create_test_client(auth=ApiKeyAuth(TEST_API_KEY))


@pytest.fixture
def jwt_client():
    return create_test_client(auth=JwtAuth(TEST_JWT))


@pytest.fixture
def wallet_client(recording_signer):
    return create_test_client(auth=WalletAuth(signer=recording_signer))


@pytest.fixture
def anonymous_client():
    return create_test_client()
