"""
Raw private key signer backed by eth_account and web3.
"""
import logging
from typing import Any, Dict, Optional, Union

from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data
from eth_account.signers.local import LocalAccount
from web3 import Web3

from . import ACCOUNT_TYPE_LOCAL
from ..utils import to_int


class LocalSigner:
    """
    Signer holding a raw private key.

    Signing never touches the network. Sending transactions requires an
    RPC endpoint, either given here or bound later with ``connect``.
    """

    account_type = ACCOUNT_TYPE_LOCAL

    def __init__(
        self,
        private_key: Union[str, bytes],
        rpc_url: Optional[str] = None,
        chain_id: Optional[Union[int, str]] = None,
        w3: Optional[Web3] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the LocalSigner

        Args:
            private_key: Ethereum private key (hex string or bytes)
            rpc_url: JSON-RPC endpoint used to send transactions
            chain_id: Chain the signer is bound to (optional)
            w3: Preconfigured Web3 instance (overrides rpc_url)
            logger: Optional logger instance
        """
        self.account: LocalAccount = Account.from_key(private_key)
        self.rpc_url = rpc_url
        self._chain_id = to_int(chain_id) if chain_id is not None else None
        self.w3 = w3
        if self.w3 is None and rpc_url:
            self.w3 = Web3(Web3.HTTPProvider(rpc_url))
        self.logger = logger or logging.getLogger(__name__)

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    def sign_message(self, text: str) -> str:
        signed = self.account.sign_message(encode_defunct(text=text))
        return Web3.to_hex(signed.signature)

    def sign_typed_data(self, full_message: Dict[str, Any]) -> str:
        signable = encode_typed_data(full_message=full_message)
        signed = self.account.sign_message(signable)
        return Web3.to_hex(signed.signature)

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """
        Sign and broadcast a transaction

        Args:
            transaction: Dict with ``to``, ``data``, ``value`` and optionally
                ``gas`` and ``chainId``

        Returns:
            Transaction hash as 0x-hex string

        Raises:
            ValueError: If the signer has no RPC endpoint
        """
        if self.w3 is None:
            raise ValueError("LocalSigner has no RPC endpoint. Pass rpc_url or use connect().")

        chain_id = transaction.get("chainId") or self._chain_id or self.w3.eth.chain_id
        tx: Dict[str, Any] = {
            "to": transaction["to"],
            "data": transaction.get("data", "0x"),
            "value": transaction.get("value", 0),
            "chainId": chain_id,
            "nonce": self.w3.eth.get_transaction_count(self.address, "pending"),
        }

        gas = transaction.get("gas")
        if gas is None:
            estimate = self.w3.eth.estimate_gas({
                "from": self.address,
                "to": tx["to"],
                "data": tx["data"],
                "value": tx["value"],
            })
            # Add 10% buffer to gas estimate
            gas = int(estimate * 1.1)
            self.logger.debug(f"Estimated gas: {gas}")
        tx["gas"] = gas
        tx["gasPrice"] = self.w3.eth.gas_price

        signed = self.account.sign_transaction(tx)
        tx_hash = Web3.to_hex(self.w3.eth.send_raw_transaction(signed.raw_transaction))
        self.logger.info(f"Transaction sent on chain {chain_id}: {tx_hash}")
        return tx_hash

    def connect(self, rpc_url: str, chain_id: Optional[int] = None) -> "LocalSigner":
        """Return a signer for the same key bound to another RPC endpoint"""
        return LocalSigner(self.account.key, rpc_url=rpc_url, chain_id=chain_id, logger=self.logger)
