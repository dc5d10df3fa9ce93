"""
Token Layer SDK - Python client for the Token Layer API.
"""
from .version import __version__
from .client import TokenLayerClient, TokenLayer
from .auth import WalletAuth, JwtAuth, ApiKeyAuth, AuthResolver
from .config import TokenLayerConfig, DEFAULT_BASE_URL
from .defaults import with_builder_defaults, with_builder_code_default
from .executor import TransactionExecutor
from .models import (
    ActionEnvelope, ActionResponse, RegisterResponse, CreateTokenResponse, CreateTokenResult,
    CreateTokenTransaction, ExecutedTransaction, InfoResponse, BuilderDefaults, TokenLayerDefaults
)
from .signer import Signer, LocalSigner, ProviderSigner
from .exceptions import (
    TokenLayerError, AuthError, MissingAuthError, InvalidTokenError, AuthTypeMismatchError,
    SigningError, AddressMismatchError, InvalidActionError, ProtocolError, ProtocolMismatchError,
    ChainValidationError, StaleOrMismatchedChainError, UnsupportedChainTypeError, MissingChainIdError,
    TransactionExecutionError, ChainMismatchError, TransportError, TokenLayerApiError
)


def as_wallet(signer: Signer, wallet_address=None, signature_chain_id=None) -> WalletAuth:
    """Build a wallet credential for a per-call ``auth`` override"""
    return WalletAuth(signer=signer, wallet_address=wallet_address, signature_chain_id=signature_chain_id)


def as_jwt(token: str) -> JwtAuth:
    """Build a JWT credential for a per-call ``auth`` override"""
    return JwtAuth(token)


def as_api_key(token: str) -> ApiKeyAuth:
    """Build an API key credential for a per-call ``auth`` override"""
    return ApiKeyAuth(token)


__all__ = [
    "TokenLayerClient",
    "TokenLayer",
    "TokenLayerConfig",
    "DEFAULT_BASE_URL",
    "WalletAuth",
    "JwtAuth",
    "ApiKeyAuth",
    "AuthResolver",
    "as_wallet",
    "as_jwt",
    "as_api_key",
    "with_builder_defaults",
    "with_builder_code_default",
    "TransactionExecutor",
    "ActionEnvelope",
    "ActionResponse",
    "RegisterResponse",
    "CreateTokenResponse",
    "CreateTokenResult",
    "CreateTokenTransaction",
    "ExecutedTransaction",
    "InfoResponse",
    "BuilderDefaults",
    "TokenLayerDefaults",
    "Signer",
    "LocalSigner",
    "ProviderSigner",
    "TokenLayerError",
    "AuthError",
    "MissingAuthError",
    "InvalidTokenError",
    "AuthTypeMismatchError",
    "SigningError",
    "AddressMismatchError",
    "InvalidActionError",
    "ProtocolError",
    "ProtocolMismatchError",
    "ChainValidationError",
    "StaleOrMismatchedChainError",
    "UnsupportedChainTypeError",
    "MissingChainIdError",
    "TransactionExecutionError",
    "ChainMismatchError",
    "TransportError",
    "TokenLayerApiError",
    "__version__",
]
