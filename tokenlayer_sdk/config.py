"""
Configuration for the Token Layer SDK.

Values can be passed explicitly to ``TokenLayerClient`` or loaded from
``TL_*`` environment variables with ``TokenLayerConfig.from_env``.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .models import BuilderDefaults, TokenLayerDefaults, SOURCES

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.tokenlayer.network/functions/v1"
DEFAULT_SOURCE = "Mainnet"
DEFAULT_EXPIRES_AFTER_MS = 300_000

MAX_BUILDER_FEE = 10_000

AUTH_MODES = ("wallet", "jwt", "apiKey")

_TOKEN_LAYER_SUFFIX = "/token-layer"
_INFO_SUFFIX = "/info"


def normalize_api_base_url(base_url: str) -> str:
    """Strip trailing slashes and a trailing /token-layer or /info segment"""
    clean = base_url.rstrip("/")
    if clean.endswith(_TOKEN_LAYER_SUFFIX):
        return clean[: -len(_TOKEN_LAYER_SUFFIX)]
    if clean.endswith(_INFO_SUFFIX):
        return clean[: -len(_INFO_SUFFIX)]
    return clean


def action_url(base_url: str) -> str:
    return f"{normalize_api_base_url(base_url)}{_TOKEN_LAYER_SUFFIX}"


def info_url(base_url: str) -> str:
    return f"{normalize_api_base_url(base_url)}{_INFO_SUFFIX}"


def parse_rpc_map(raw: Optional[str]) -> Dict[str, str]:
    """
    Parse ``key=url,key=url`` into a dict.

    Entries without a key or a URL are ignored.
    """
    result: Dict[str, str] = {}
    if not raw:
        return result
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry or "=" not in entry:
            continue
        key, url = (part.strip() for part in entry.split("=", 1))
        if key and url:
            result[key] = url
    return result


def parse_rpc_by_chain_id(raw: Optional[str]) -> Dict[int, str]:
    """
    Parse ``8453=url,1=url`` into a dict keyed by chain id.

    Raises:
        ValueError: If a key is not an integer
    """
    result: Dict[int, str] = {}
    for key, url in parse_rpc_map(raw).items():
        try:
            result[int(key, 0)] = url
        except ValueError:
            raise ValueError(f"Invalid chain id in TL_RPC_BY_CHAIN_ID: {key}")
    return result


@dataclass
class TokenLayerConfig:
    """
    Settings for a TokenLayerClient.

    Credentials are kept as raw strings here; the client turns them into
    auth objects.
    """
    base_url: str = DEFAULT_BASE_URL
    source: str = DEFAULT_SOURCE
    expires_after_ms: int = DEFAULT_EXPIRES_AFTER_MS
    defaults: TokenLayerDefaults = field(default_factory=TokenLayerDefaults)
    rpc_by_chain_slug: Dict[str, str] = field(default_factory=dict)
    rpc_by_chain_id: Dict[int, str] = field(default_factory=dict)
    auth_mode: Optional[str] = None
    jwt: Optional[str] = None
    api_key: Optional[str] = None
    private_key: Optional[str] = None
    signature_chain_id: Optional[str] = None

    def __post_init__(self):
        if self.source not in SOURCES:
            raise ValueError(f"source must be one of {', '.join(SOURCES)} (got: {self.source})")
        if self.auth_mode is not None and self.auth_mode not in AUTH_MODES:
            raise ValueError(f"Invalid auth mode: {self.auth_mode}. Use wallet, jwt, or apiKey.")
        if self.expires_after_ms <= 0:
            raise ValueError("expires_after_ms must be positive")

    @property
    def action_url(self) -> str:
        return action_url(self.base_url)

    @property
    def info_url(self) -> str:
        return info_url(self.base_url)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TokenLayerConfig":
        """
        Load configuration from ``TL_*`` environment variables

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            TokenLayerConfig instance

        Raises:
            ValueError: If a variable has an invalid value
        """
        env = os.environ if environ is None else environ

        builder_code = env.get("TL_BUILDER_CODE")
        defaults = TokenLayerDefaults()
        if builder_code:
            fee_raw = env.get("TL_BUILDER_FEE")
            try:
                fee = int(fee_raw) if fee_raw not in (None, "") else 0
            except ValueError:
                raise ValueError(f"TL_BUILDER_FEE must be an integer (got: {fee_raw})")
            if fee < 0 or fee > MAX_BUILDER_FEE:
                raise ValueError(f"TL_BUILDER_FEE must be an integer between 0 and {MAX_BUILDER_FEE}.")
            defaults = TokenLayerDefaults(builder=BuilderDefaults(code=builder_code, fee=fee))

        expires_raw = env.get("TL_EXPIRES_AFTER_MS")
        try:
            expires_after_ms = int(expires_raw) if expires_raw else DEFAULT_EXPIRES_AFTER_MS
        except ValueError:
            raise ValueError(f"TL_EXPIRES_AFTER_MS must be an integer (got: {expires_raw})")

        config = cls(
            base_url=env.get("TL_API_BASE_URL") or DEFAULT_BASE_URL,
            source=env.get("TL_SOURCE") or DEFAULT_SOURCE,
            expires_after_ms=expires_after_ms,
            defaults=defaults,
            rpc_by_chain_slug=parse_rpc_map(env.get("TL_RPC_BY_CHAIN_SLUG")),
            rpc_by_chain_id=parse_rpc_by_chain_id(env.get("TL_RPC_BY_CHAIN_ID")),
            auth_mode=env.get("TL_AUTH_MODE") or None,
            jwt=env.get("TL_JWT") or None,
            api_key=env.get("TL_API_KEY") or None,
            private_key=env.get("TL_PRIVATE_KEY") or None,
            signature_chain_id=env.get("TL_SIGNATURE_CHAIN_ID") or None,
        )
        logger.debug(f"Loaded Token Layer config for {config.source} at {config.base_url}")
        return config
