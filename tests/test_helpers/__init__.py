"""
Shared constants and helpers for the Token Layer SDK tests.
"""
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data
from web3 import Web3

from tokenlayer_sdk import TokenLayerClient

# Test constants used throughout tests
TEST_BASE_URL = "https://api.tokenlayer.test/functions/v1"
TEST_ACTION_URL = f"{TEST_BASE_URL}/token-layer"
TEST_INFO_URL = f"{TEST_BASE_URL}/info"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_ADDRESS = Account.from_key(TEST_PRIV_KEY).address
TEST_API_KEY = "tl_test_api_key_123"
TEST_JWT = "eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiJ0ZXN0In0.signature"
TEST_BUILDER_CODE = "0xBEEF000000000000000000000000000000BEEF"
# Valid 40-hex address for flows that checksum the builder code
TEST_SIGNED_BUILDER_CODE = "0xbeef" + "00" * 16 + "beef"
TEST_CHAIN_ID = 8453
TEST_CHAIN_SLUG = "base"
TEST_TOKEN_FACTORY = "0x1234567890123456789012345678901234567890"
TEST_NONCE = 1700000000000


class RecordingSigner:
    """
    In-memory signer that signs for real but records transactions instead
    of broadcasting them.

    Args:
        chain_id: Chain the signer reports as bound (None for unbound)
        can_switch: Expose a ``switch_chain`` method
        fail_on_send: Zero-based send attempt that raises
    """
    account_type = "external"

    def __init__(
        self,
        private_key: str = TEST_PRIV_KEY,
        chain_id: Optional[int] = None,
        can_switch: bool = False,
        fail_on_send: Optional[int] = None
    ):
        self._account = Account.from_key(private_key)
        self.address = self._account.address
        self._chain_id = chain_id
        self.fail_on_send = fail_on_send
        self.sent: List[Dict[str, Any]] = []
        self.switched: List[int] = []
        self.signed_messages: List[str] = []
        self.signed_typed_data: List[Dict[str, Any]] = []
        if can_switch:
            self.switch_chain = self._switch_chain

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    def sign_message(self, text: str) -> str:
        self.signed_messages.append(text)
        signed = self._account.sign_message(encode_defunct(text=text))
        return Web3.to_hex(signed.signature)

    def sign_typed_data(self, full_message: Dict[str, Any]) -> str:
        self.signed_typed_data.append(full_message)
        signed = self._account.sign_message(encode_typed_data(full_message=full_message))
        return Web3.to_hex(signed.signature)

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        if self.fail_on_send is not None and len(self.sent) == self.fail_on_send:
            raise RuntimeError("nonce too low")
        self.sent.append(transaction)
        return "0x" + f"{len(self.sent):064x}"

    def _switch_chain(self, chain_id: int) -> None:
        self.switched.append(chain_id)
        self._chain_id = chain_id


def make_create_token_action(**overrides) -> Dict[str, Any]:
    """Minimal valid createToken action"""
    action = {
        "name": "Example Token",
        "symbol": "EXMPL",
        "description": "An example token",
        "image": "https://example.com/token.png",
        "chainSlug": TEST_CHAIN_SLUG,
    }
    action.update(overrides)
    return action


def make_transaction(chain_id: Any = TEST_CHAIN_ID, chain_slug: Optional[str] = TEST_CHAIN_SLUG,
                     **extra) -> Dict[str, Any]:
    """Transaction as returned by the createToken endpoint"""
    tx = {
        "to": TEST_TOKEN_FACTORY,
        "data": "0xabcdef",
        "value": "0",
        "chainId": chain_id,
        "chainSlug": chain_slug,
    }
    tx.update(extra)
    return tx


def create_test_client(base_url: str = TEST_BASE_URL, **kwargs) -> TokenLayerClient:
    """
    Create a client instance for testing with consistent defaults.

    Args:
        base_url: API base URL
        **kwargs: Additional TokenLayerClient parameters

    Returns:
        Configured TokenLayerClient instance
    """
    return TokenLayerClient(base_url=base_url, **kwargs)
