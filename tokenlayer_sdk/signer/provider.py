"""
Signer for accounts managed by a node or wallet behind a web3 provider.
"""
import logging
from typing import Any, Dict, Optional

from web3 import Web3

from . import ACCOUNT_TYPE_EXTERNAL
from ..exceptions import SigningError


def _jsonable(value: Any) -> Any:
    """Convert bytes inside typed data to hex strings for JSON-RPC"""
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


class ProviderSigner:
    """
    Signer delegating to an externally managed account over JSON-RPC.

    The private key never leaves the provider, so the SDK cannot rebind this
    signer to another RPC endpoint. It can ask the wallet to switch chains.
    """

    account_type = ACCOUNT_TYPE_EXTERNAL

    def __init__(
        self,
        w3: Web3,
        address: str,
        chain_id: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self._chain_id = chain_id
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_web3(cls, w3: Web3, address: Optional[str] = None) -> "ProviderSigner":
        """
        Build a signer from a connected Web3 instance

        Args:
            w3: Connected Web3 instance
            address: Account to use (defaults to the provider's first account)

        Raises:
            SigningError: If no address is given and the provider exposes no accounts
        """
        if address is None:
            accounts = w3.eth.accounts
            if not accounts:
                raise SigningError("Provider exposes no accounts")
            address = accounts[0]
        return cls(w3, address, chain_id=w3.eth.chain_id)

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    def sign_message(self, text: str) -> str:
        return Web3.to_hex(self.w3.eth.sign(self.address, text=text))

    def sign_typed_data(self, full_message: Dict[str, Any]) -> str:
        return Web3.to_hex(self.w3.eth.sign_typed_data(self.address, _jsonable(full_message)))

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        params: Dict[str, Any] = {
            "from": self.address,
            "to": transaction["to"],
            "data": transaction.get("data", "0x"),
            "value": transaction.get("value", 0),
        }
        if transaction.get("gas") is not None:
            params["gas"] = transaction["gas"]
        if transaction.get("chainId") is not None:
            params["chainId"] = transaction["chainId"]

        tx_hash = Web3.to_hex(self.w3.eth.send_transaction(params))
        self.logger.info(f"Transaction sent: {tx_hash}")
        return tx_hash

    def switch_chain(self, chain_id: int) -> None:
        """
        Ask the wallet to switch to ``chain_id``

        Raises:
            SigningError: If the wallet rejects the request
        """
        response = self.w3.provider.make_request(
            "wallet_switchEthereumChain", [{"chainId": Web3.to_hex(chain_id)}]
        )
        if isinstance(response, dict) and response.get("error"):
            raise SigningError(f"Wallet refused to switch to chain {chain_id}: {response['error']}")
        self.logger.debug(f"Switched wallet to chain {chain_id}")
        self._chain_id = chain_id
