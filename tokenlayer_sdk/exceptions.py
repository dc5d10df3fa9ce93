"""
Exceptions for the Token Layer SDK.
"""
from typing import Any, List, Optional


class TokenLayerError(Exception):
    """Base exception for all Token Layer SDK errors."""
    pass


class AuthError(TokenLayerError):
    """Raised when the credential for a call is missing, empty or of the wrong kind."""
    pass


class MissingAuthError(AuthError):
    """Raised when neither an override nor a default credential is configured."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "No auth configured. Initialize TokenLayerClient with auth or use as_wallet/as_jwt/as_api_key."
        )


class InvalidTokenError(AuthError):
    """Raised when a bearer token is empty or a placeholder like 'undefined'."""

    def __init__(self, auth_type: str):
        self.auth_type = auth_type
        super().__init__(f"Invalid {auth_type} token. Provide a non-empty token value.")


class AuthTypeMismatchError(AuthError):
    """Raised when an operation is called with a credential kind it does not accept."""

    def __init__(self, operation: str, auth_type: str, message: Optional[str] = None):
        self.operation = operation
        self.auth_type = auth_type
        super().__init__(message or f"{operation} does not support {auth_type} auth")


class SigningError(TokenLayerError):
    """Raised when a request cannot be signed."""
    pass


class AddressMismatchError(SigningError):
    """Raised when an explicit wallet address differs from the signing account."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"wallet_address {actual} must match the signer address {expected} for register signatures"
        )


class InvalidActionError(TokenLayerError, ValueError):
    """Raised when a caller-supplied action payload is malformed."""
    pass


class ProtocolError(TokenLayerError):
    """Raised when a response does not have the shape the request implies."""
    pass


class ProtocolMismatchError(ProtocolError):
    """Raised when a response's actionType/type tag differs from the requested one."""

    def __init__(self, operation: str, expected: str, actual: Any):
        self.operation = operation
        self.expected = expected
        self.actual = actual
        super().__init__(f"Unexpected type for {operation}: expected {expected}, got {actual}")


class ChainValidationError(TokenLayerError):
    """Raised when transaction chain metadata fails validation before signing."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class StaleOrMismatchedChainError(ChainValidationError):
    """Raised when a transaction's chainSlug is missing or differs from the action's."""

    def __init__(self, index: int, expected: str, actual: Optional[str]):
        self.expected = expected
        self.actual = actual
        if not actual:
            message = f"Refusing to execute transaction #{index}: missing chainSlug in API response."
        else:
            message = (
                f"Refusing to execute transaction #{index}: chainSlug mismatch "
                f"(expected {expected}, got {actual})."
            )
        super().__init__(message, index=index)


class UnsupportedChainTypeError(ChainValidationError):
    """Raised when a transaction targets a non-EVM chain."""

    def __init__(self, index: int, chain_type: str):
        self.chain_type = chain_type
        super().__init__(
            f"Refusing to execute transaction #{index}: unsupported chainType {chain_type}.",
            index=index,
        )


class MissingChainIdError(ChainValidationError):
    """
    Raised when a chain id is required but cannot be resolved.

    ``index`` is set when the chain id is missing from a transaction in an
    API response, and is None when no signature chain id could be resolved.
    """

    def __init__(self, message: Optional[str] = None, index: Optional[int] = None):
        if message is None:
            if index is None:
                message = "signature_chain_id is required when the signer is not bound to a chain"
            else:
                message = f"Refusing to execute transaction #{index}: missing/invalid chainId in API response."
        super().__init__(message, index=index)


class TransactionExecutionError(TokenLayerError):
    """
    Raised when a transaction batch aborts during submission.

    Attributes:
        index: Position of the transaction that failed
        executed: Records of the transactions submitted before the failure.
            These are already broadcast and cannot be rolled back.
    """

    def __init__(self, message: str, index: int, executed: Optional[List[Any]] = None):
        self.index = index
        self.executed = list(executed or [])
        super().__init__(message)


class ChainMismatchError(TransactionExecutionError):
    """Raised when the signer is bound to another chain and cannot switch."""

    def __init__(self, index: int, chain_id: int, bound_chain_id: Optional[int],
                 executed: Optional[List[Any]] = None):
        self.chain_id = chain_id
        self.bound_chain_id = bound_chain_id
        super().__init__(
            f"Transaction chain mismatch for chainId {chain_id} (signer bound to {bound_chain_id}). "
            "Configure rpc_by_chain_slug/rpc_by_chain_id for this chain or use a signer that can switch chains.",
            index=index,
            executed=executed,
        )


class TransportError(TokenLayerError):
    """Raised when a request to the Token Layer API cannot be completed."""
    pass


class TokenLayerApiError(TransportError):
    """Raised when the Token Layer API answers with a non-2xx status."""

    def __init__(self, status: int, payload: Optional[dict] = None):
        payload = payload or {}
        self.status = status
        self.error = payload.get("error")
        self.code = payload.get("code")
        self.details = payload.get("details")
        super().__init__(self.error or "Token Layer API request failed")
