"""
Wallet signers for the Token Layer SDK.
"""
from typing import Any, Dict, Optional, Protocol

ACCOUNT_TYPE_LOCAL = "local"
ACCOUNT_TYPE_EXTERNAL = "external"


class Signer(Protocol):
    """
    Protocol for wallet signers.

    ``account_type`` is "local" for raw-key accounts the SDK may rebind to
    other RPC endpoints, and "external" for accounts managed by a node or
    wallet. Signers may additionally implement ``switch_chain(chain_id)``,
    and local signers ``connect(rpc_url)``.
    """
    address: str
    account_type: str

    @property
    def chain_id(self) -> Optional[int]:
        """Chain the signer is bound to, or None if unbound"""
        ...

    def sign_message(self, text: str) -> str:
        """Sign an EIP-191 plaintext message and return the 0x-hex signature"""
        ...

    def sign_typed_data(self, full_message: Dict[str, Any]) -> str:
        """Sign EIP-712 typed data and return the 0x-hex signature"""
        ...

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """Sign and broadcast a transaction and return its 0x-hex hash"""
        ...


from .local import LocalSigner  # noqa: E402
from .provider import ProviderSigner  # noqa: E402

__all__ = [
    "Signer",
    "LocalSigner",
    "ProviderSigner",
    "ACCOUNT_TYPE_LOCAL",
    "ACCOUNT_TYPE_EXTERNAL",
]
