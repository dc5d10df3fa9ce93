"""
Credential selection for Token Layer calls.

A call is authenticated by exactly one of three credential kinds:

- ``WalletAuth``: requests are signed by a wallet (register, createToken)
- ``JwtAuth``: ``Authorization: Bearer <jwt>``
- ``ApiKeyAuth``: ``Authorization: Bearer <api key>``

A per-call override takes precedence over the client's default credential.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from .exceptions import MissingAuthError, InvalidTokenError, AuthTypeMismatchError
from .jwt_util import is_token_expired
from .signer import Signer

logger = logging.getLogger(__name__)

AUTH_TYPE_WALLET = "wallet"
AUTH_TYPE_JWT = "jwt"
AUTH_TYPE_API_KEY = "apiKey"

_PLACEHOLDER_TOKENS = ("undefined", "null")


@dataclass
class WalletAuth:
    """
    Wallet signature credential.

    Attributes:
        signer: Signer used for messages, typed data and transactions
        wallet_address: Expected wallet address (must match the signer)
        signature_chain_id: Default EIP-712 domain chain id
    """
    signer: Signer
    wallet_address: Optional[str] = None
    signature_chain_id: Optional[Union[int, str]] = None

    type = AUTH_TYPE_WALLET


@dataclass
class JwtAuth:
    token: str

    type = AUTH_TYPE_JWT


@dataclass
class ApiKeyAuth:
    token: str

    type = AUTH_TYPE_API_KEY


Auth = Union[WalletAuth, JwtAuth, ApiKeyAuth]
BearerAuth = Union[JwtAuth, ApiKeyAuth]


def is_invalid_bearer_token(token: Optional[str]) -> bool:
    """True for empty tokens and the literal strings 'undefined'/'null'"""
    if token is None:
        return True
    normalized = token.strip().lower()
    return len(normalized) == 0 or normalized in _PLACEHOLDER_TOKENS


class AuthResolver:
    """Resolves the credential for a call from an override and a configured default"""

    def __init__(self, default: Optional[Auth] = None):
        self.default = default

    def resolve(self, override: Optional[Auth] = None) -> Auth:
        """
        Return the active credential.

        Raises:
            MissingAuthError: If neither an override nor a default is configured
            InvalidTokenError: If a bearer credential carries an invalid token
        """
        auth = override or self.default
        if auth is None:
            raise MissingAuthError()
        if isinstance(auth, (JwtAuth, ApiKeyAuth)):
            self._check_bearer(auth)
        return auth

    def resolve_bearer(self, override: Optional[Auth], operation: str) -> str:
        """
        Return the bearer token for an operation that only accepts JWT/API key auth.

        Raises:
            MissingAuthError: If no credential is configured
            InvalidTokenError: If the token is invalid
            AuthTypeMismatchError: If the active credential is a wallet
        """
        auth = self.resolve(override)
        if isinstance(auth, WalletAuth):
            raise AuthTypeMismatchError(
                operation,
                auth.type,
                f"{operation} requires JWT or API key auth. "
                "Wallet-signature auth currently supports register/createToken only.",
            )
        return auth.token

    def resolve_optional_bearer(self, override: Optional[Auth], operation: str) -> Optional[str]:
        """
        Like resolve_bearer, but returns None when no credential is configured.

        Used for public endpoints where auth only enhances the response.
        """
        auth = override or self.default
        if auth is None:
            return None
        if isinstance(auth, WalletAuth):
            raise AuthTypeMismatchError(
                operation,
                auth.type,
                f"{operation} info request does not support wallet auth. Use JWT/API key auth or no auth.",
            )
        self._check_bearer(auth)
        return auth.token

    def resolve_wallet(self, override: Optional[Auth], operation: str) -> WalletAuth:
        """
        Return the wallet credential for an operation that requires signatures.

        Raises:
            AuthTypeMismatchError: If the active credential is a bearer token
        """
        auth = self.resolve(override)
        if not isinstance(auth, WalletAuth):
            raise AuthTypeMismatchError(
                operation,
                auth.type,
                f"{operation} requires wallet auth. Use a wallet credential or pass a wallet auth override.",
            )
        return auth

    def _check_bearer(self, auth: BearerAuth) -> None:
        if is_invalid_bearer_token(auth.token):
            raise InvalidTokenError(auth.type)
        if isinstance(auth, JwtAuth) and is_token_expired(auth.token):
            logger.warning("JWT bearer token has expired; the API will likely reject it")
