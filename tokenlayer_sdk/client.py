"""
TokenLayerClient - Main client for the Token Layer API.
"""
import logging
import urllib.parse
from typing import Dict, Any, Optional, Mapping, Union

import requests
from web3 import Web3

from .auth import Auth, AuthResolver, WalletAuth, JwtAuth, ApiKeyAuth
from .config import (
    TokenLayerConfig, DEFAULT_BASE_URL, DEFAULT_SOURCE, DEFAULT_EXPIRES_AFTER_MS,
    normalize_api_base_url, action_url, info_url
)
from .defaults import with_builder_defaults, with_builder_code_default
from .exceptions import AuthTypeMismatchError
from .executor import TransactionExecutor
from .models import (
    ActionEnvelope, ActionResponse, CreateTokenResult, InfoResponse, RegisterResponse,
    TokenLayerDefaults, parse_action_response, parse_info_response
)
from .signer import Signer, LocalSigner
from .signing import sign_create_token_request, sign_register_request
from .transport import HttpTransport
from .utils import now_nonce


class TokenLayerClient:
    """
    Client for the Token Layer action and info endpoints.

    This client handles:
    1. Wallet-signed actions (register, createToken)
    2. Bearer-authenticated actions (trade, transfer, rewards, referrals, mint)
    3. Info queries, anonymous or bearer-authenticated
    4. Executing the transactions returned by createToken

    Credentials are given as ``auth`` (the default for every call) and can be
    overridden per call with the ``auth`` argument of each method.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        source: str = DEFAULT_SOURCE,
        expires_after_ms: int = DEFAULT_EXPIRES_AFTER_MS,
        auth: Optional[Auth] = None,
        defaults: Optional[Union[TokenLayerDefaults, Dict[str, Any]]] = None,
        rpc_by_chain_id: Optional[Mapping[int, str]] = None,
        rpc_by_chain_slug: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the TokenLayerClient

        Args:
            base_url: API base URL; a trailing /token-layer or /info is stripped
            source: "Mainnet" or "Testnet"
            expires_after_ms: Default signature validity in milliseconds
            auth: Default credential (WalletAuth, JwtAuth or ApiKeyAuth)
            defaults: Builder defaults injected into requests that omit them
            rpc_by_chain_id: RPC endpoints for transaction execution, by chain id
            rpc_by_chain_slug: RPC endpoints for transaction execution, by chain slug
            session: requests.Session to use for HTTP calls
            timeout: Timeout for HTTP requests in seconds
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        parsed = urllib.parse.urlparse(base_url)
        host = parsed.netloc.split(':')[0]
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"base_url must use https:// for security (got: {parsed.scheme}://)")

        self.base_url = normalize_api_base_url(base_url)
        self.action_url = action_url(self.base_url)
        self.info_url = info_url(self.base_url)
        self.source = source
        self.expires_after_ms = expires_after_ms
        self.auth = auth
        if isinstance(defaults, dict):
            defaults = TokenLayerDefaults.model_validate(defaults)
        self.defaults = defaults or TokenLayerDefaults()
        self.rpc_by_chain_id = dict(rpc_by_chain_id or {})
        self.rpc_by_chain_slug = dict(rpc_by_chain_slug or {})
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        self.transport = HttpTransport(session=session, timeout=timeout, logger=self.logger)
        self.session = self.transport.session
        self.auth_resolver = AuthResolver(auth)
        self.executor = TransactionExecutor(
            rpc_by_chain_slug=self.rpc_by_chain_slug,
            rpc_by_chain_id=self.rpc_by_chain_id,
            logger=self.logger,
        )

    @classmethod
    def from_config(cls, config: TokenLayerConfig, **kwargs) -> "TokenLayerClient":
        """
        Create a client from a TokenLayerConfig

        The credential is chosen by ``config.auth_mode``; without a mode the
        client is anonymous. Extra keyword arguments are passed to __init__.

        Raises:
            ValueError: If the selected auth mode is missing its secret
        """
        auth: Optional[Auth] = None
        if config.auth_mode == "wallet":
            if not config.private_key:
                raise ValueError("Missing wallet private key (TL_PRIVATE_KEY)")
            signer = LocalSigner(config.private_key)
            auth = WalletAuth(signer=signer, signature_chain_id=config.signature_chain_id)
        elif config.auth_mode == "jwt":
            if not config.jwt:
                raise ValueError("Missing JWT token (TL_JWT)")
            auth = JwtAuth(config.jwt)
        elif config.auth_mode == "apiKey":
            if not config.api_key:
                raise ValueError("Missing API key token (TL_API_KEY)")
            auth = ApiKeyAuth(config.api_key)

        return cls(
            base_url=config.base_url,
            source=config.source,
            expires_after_ms=config.expires_after_ms,
            auth=auth,
            defaults=config.defaults,
            rpc_by_chain_id=config.rpc_by_chain_id,
            rpc_by_chain_slug=config.rpc_by_chain_slug,
            **kwargs
        )

    @classmethod
    def from_env(cls, **kwargs) -> "TokenLayerClient":
        """Create a client from ``TL_*`` environment variables"""
        return cls.from_config(TokenLayerConfig.from_env(), **kwargs)

    def _with_auth(self, auth: Auth) -> "TokenLayerClient":
        return type(self)(
            base_url=self.base_url,
            source=self.source,
            expires_after_ms=self.expires_after_ms,
            auth=auth,
            defaults=self.defaults,
            rpc_by_chain_id=self.rpc_by_chain_id,
            rpc_by_chain_slug=self.rpc_by_chain_slug,
            session=self.session,
            timeout=self.timeout,
            logger=self.logger,
        )

    def as_wallet(
        self,
        signer: Signer,
        wallet_address: Optional[str] = None,
        signature_chain_id: Optional[Union[int, str]] = None
    ) -> "TokenLayerClient":
        """Return a copy of this client using wallet auth"""
        return self._with_auth(WalletAuth(
            signer=signer,
            wallet_address=wallet_address,
            signature_chain_id=signature_chain_id,
        ))

    def as_jwt(self, token: str) -> "TokenLayerClient":
        """Return a copy of this client using JWT bearer auth"""
        return self._with_auth(JwtAuth(token))

    def as_api_key(self, token: str) -> "TokenLayerClient":
        """Return a copy of this client using API key bearer auth"""
        return self._with_auth(ApiKeyAuth(token))

    def prepare_create_token(self, action: Dict[str, Any]) -> Dict[str, Any]:
        """Return a createToken draft; builder defaults are applied when it is sent"""
        return dict(action)

    # ------------------------------------------------------------------
    # Wallet-signed actions
    # ------------------------------------------------------------------

    def register(
        self,
        wallet_address: Optional[str] = None,
        source: Optional[str] = None,
        nonce: Optional[int] = None,
        expires_after: Optional[int] = None,
        signature_chain_id: Optional[Union[int, str]] = None,
        message: Optional[str] = None,
        auth: Optional[Auth] = None
    ) -> RegisterResponse:
        """
        Register the wallet with Token Layer

        Args:
            wallet_address: Expected wallet address (must match the signer)
            source: "Mainnet" or "Testnet" (defaults to the client's)
            nonce: Timestamp nonce (defaults to now, in milliseconds)
            expires_after: Signature validity in milliseconds
            signature_chain_id: EIP-712 domain chain id override
            message: Custom message to sign instead of the generated SIWE text
            auth: Per-call credential override

        Returns:
            Parsed register response

        Raises:
            AuthTypeMismatchError: If the credential is not a wallet
            AddressMismatchError: If wallet_address differs from the signer
            MissingChainIdError: If no signature chain id can be resolved
            InvalidActionError: If signature_chain_id is not a valid chain id
            ProtocolMismatchError: If the response is not a register response
            ProtocolError: If the response body is malformed
            TokenLayerApiError: If the API returns an error
        """
        wallet = self.auth_resolver.resolve_wallet(auth, "register")

        envelope = sign_register_request(
            wallet.signer,
            source=source or self.source,
            nonce=nonce if nonce is not None else now_nonce(),
            expires_after=expires_after if expires_after is not None else self.expires_after_ms,
            signature_chain_id=signature_chain_id if signature_chain_id is not None else wallet.signature_chain_id,
            wallet_address=wallet_address or wallet.wallet_address,
            message=message,
        )

        bearer = Web3.to_checksum_address(
            wallet_address or wallet.wallet_address or wallet.signer.address
        )
        payload = self.transport.post(self.action_url, envelope.to_wire(), bearer)
        return parse_action_response(payload, "register", RegisterResponse)

    def create_token(
        self,
        action: Dict[str, Any],
        source: Optional[str] = None,
        expires_after: Optional[int] = None,
        nonce: Optional[int] = None,
        signature_chain_id: Optional[Union[int, str]] = None,
        execute: bool = False,
        auth: Optional[Auth] = None
    ) -> CreateTokenResult:
        """
        Create a token, optionally executing the returned transactions

        With wallet auth the request is EIP-712 signed; with JWT/API key auth
        it is sent as a bearer request.

        Args:
            action: createToken action payload (without ``type``)
            source: "Mainnet" or "Testnet" (defaults to the client's)
            expires_after: Signature validity in milliseconds
            nonce: Timestamp nonce (wallet auth only)
            signature_chain_id: EIP-712 domain chain id override (wallet auth only)
            execute: Sign and send the returned transactions (wallet auth only)
            auth: Per-call credential override

        Returns:
            The createToken response, with ``executions`` when execute=True

        Raises:
            AuthTypeMismatchError: If execute=True without wallet auth
            ChainValidationError: If returned transactions fail validation
            TransactionExecutionError: If sending a transaction fails
            ProtocolMismatchError: If the response is not a createToken response
            ProtocolError: If the response body is malformed
            TokenLayerApiError: If the API returns an error
        """
        resolved = self.auth_resolver.resolve(auth)
        if execute and not isinstance(resolved, WalletAuth):
            raise AuthTypeMismatchError(
                "createToken with execute=True",
                resolved.type,
                "createToken with execute=True requires wallet auth.",
            )

        source = source or self.source
        expires_after = expires_after if expires_after is not None else self.expires_after_ms
        action_with_defaults = with_builder_defaults(action, self.defaults)

        if isinstance(resolved, WalletAuth):
            envelope = sign_create_token_request(
                resolved.signer,
                source=source,
                action=action_with_defaults,
                nonce=nonce if nonce is not None else now_nonce(),
                expires_after=expires_after,
                signature_chain_id=(
                    signature_chain_id if signature_chain_id is not None else resolved.signature_chain_id
                ),
            )
            bearer = Web3.to_checksum_address(resolved.wallet_address or resolved.signer.address)
        else:
            envelope = ActionEnvelope(
                source=source,
                expires_after=expires_after,
                action={**action_with_defaults, "type": "createToken"},
            )
            bearer = resolved.token

        payload = self.transport.post(self.action_url, envelope.to_wire(), bearer)
        response = parse_action_response(payload, "createToken", CreateTokenResult)

        if not execute:
            return response

        response.executions = self.executor.execute(
            resolved,
            response,
            action_with_defaults.get("chainSlug"),
        )
        return response

    # ------------------------------------------------------------------
    # Bearer-authenticated actions
    # ------------------------------------------------------------------

    def trade_token(self, action: Dict[str, Any], source: Optional[str] = None,
                    expires_after: Optional[int] = None, auth: Optional[Auth] = None) -> ActionResponse:
        return self._post_authenticated_action("tradeToken", action, source, expires_after, auth)

    def send_transaction(self, action: Dict[str, Any], source: Optional[str] = None,
                         expires_after: Optional[int] = None, auth: Optional[Auth] = None) -> ActionResponse:
        return self._post_authenticated_action("sendTransaction", action, source, expires_after, auth)

    def transfer_token(self, action: Dict[str, Any], source: Optional[str] = None,
                       expires_after: Optional[int] = None, auth: Optional[Auth] = None) -> ActionResponse:
        return self._post_authenticated_action("transferToken", action, source, expires_after, auth)

    def claim_rewards(self, action: Dict[str, Any], source: Optional[str] = None,
                      expires_after: Optional[int] = None, auth: Optional[Auth] = None) -> ActionResponse:
        return self._post_authenticated_action("claimRewards", action, source, expires_after, auth)

    def create_referral_code(self, action: Dict[str, Any], source: Optional[str] = None,
                             expires_after: Optional[int] = None, auth: Optional[Auth] = None) -> ActionResponse:
        return self._post_authenticated_action("createReferralCode", action, source, expires_after, auth)

    def enter_referral_code(self, action: Dict[str, Any], source: Optional[str] = None,
                            expires_after: Optional[int] = None, auth: Optional[Auth] = None) -> ActionResponse:
        return self._post_authenticated_action("enterReferralCode", action, source, expires_after, auth)

    def mint_usd(self, action: Dict[str, Any], source: Optional[str] = None,
                 expires_after: Optional[int] = None, auth: Optional[Auth] = None) -> ActionResponse:
        return self._post_authenticated_action("mintUsd", action, source, expires_after, auth)

    def _post_authenticated_action(
        self,
        action_type: str,
        action: Dict[str, Any],
        source: Optional[str],
        expires_after: Optional[int],
        auth: Optional[Auth]
    ) -> ActionResponse:
        """
        Send a bearer-authenticated action and check the response tag

        Raises:
            AuthTypeMismatchError: If the credential is a wallet
            ProtocolMismatchError: If the response actionType differs
        """
        bearer = self.auth_resolver.resolve_bearer(auth, action_type)
        envelope = ActionEnvelope(
            source=source or self.source,
            expires_after=expires_after if expires_after is not None else self.expires_after_ms,
            action={**action, "type": action_type},
        )
        payload = self.transport.post(self.action_url, envelope.to_wire(), bearer)
        return parse_action_response(payload, action_type)

    # ------------------------------------------------------------------
    # Info queries
    # ------------------------------------------------------------------

    def get_tokens_v2(self, params: Optional[Dict[str, Any]] = None, auth: Optional[Auth] = None) -> InfoResponse:
        query = with_builder_code_default({"type": "getTokensV2", **(params or {})}, self.defaults)
        bearer = self.auth_resolver.resolve_optional_bearer(auth, "getTokensV2")
        return parse_info_response(self.transport.post(self.info_url, query, bearer), "getTokensV2")

    def quote_token(self, params: Optional[Dict[str, Any]] = None) -> InfoResponse:
        payload = self.transport.post(self.info_url, {"type": "quoteToken", **(params or {})})
        return parse_info_response(payload, "quoteToken")

    def me(self, params: Optional[Dict[str, Any]] = None, auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_auth("me", params, auth)

    def get_pool_data(self, params: Optional[Dict[str, Any]] = None, auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_optional_auth("getPoolData", params, auth)

    def get_user_balance(self, params: Optional[Dict[str, Any]] = None, auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_auth("getUserBalance", params, auth)

    def search_token(self, params: Optional[Dict[str, Any]] = None, auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_optional_auth("searchToken", params, auth)

    def check_token_ownership(self, params: Optional[Dict[str, Any]] = None,
                              auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_optional_auth("checkTokenOwnership", params, auth)

    def get_user_fees(self, params: Optional[Dict[str, Any]] = None, auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_auth("getUserFees", params, auth)

    def get_user_fee_history(self, params: Optional[Dict[str, Any]] = None,
                             auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_auth("getUserFeeHistory", params, auth)

    def get_leaderboard(self, params: Optional[Dict[str, Any]] = None, auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_optional_auth("getLeaderboard", params, auth)

    def get_user_portfolio(self, params: Optional[Dict[str, Any]] = None,
                           auth: Optional[Auth] = None) -> InfoResponse:
        return self._post_info_auth("getUserPortfolio", params, auth)

    def _post_info_auth(self, query_type: str, params: Optional[Dict[str, Any]],
                        auth: Optional[Auth]) -> InfoResponse:
        bearer = self.auth_resolver.resolve_bearer(auth, query_type)
        payload = self.transport.post(self.info_url, {"type": query_type, **(params or {})}, bearer)
        return parse_info_response(payload)

    def _post_info_optional_auth(self, query_type: str, params: Optional[Dict[str, Any]],
                                 auth: Optional[Auth]) -> InfoResponse:
        bearer = self.auth_resolver.resolve_optional_bearer(auth, query_type)
        payload = self.transport.post(self.info_url, {"type": query_type, **(params or {})}, bearer)
        return parse_info_response(payload)


class TokenLayer(TokenLayerClient):
    """Alias of TokenLayerClient"""
    pass
