"""
Canonical request signing for wallet-authenticated Token Layer actions.

Two actions are signed by the wallet itself:

- ``register``: a SIWE (EIP-4361) plaintext message plus an EIP-712
  ``RegisterAction`` signature
- ``createToken``: an EIP-712 ``CreateTokenAction`` signature over a
  fixed-size struct. Variable-length fields (chains, tags, links) are
  joined with ``|`` and hashed with keccak256 into bytes32 slots.

Both typed-data signatures use the ``TokenLayerSignTransaction`` domain with
the zero address as verifying contract.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

from hexbytes import HexBytes
from web3 import Web3

from .exceptions import AddressMismatchError, InvalidActionError, MissingChainIdError, SigningError
from .models import ActionEnvelope, SOURCES
from .signer import Signer
from .utils import to_chain_id_hex, to_non_negative_int

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

DOMAIN_NAME = "TokenLayerSignTransaction"
DOMAIN_VERSION = "1"

REGISTER_DOMAIN = "app.tokenlayer.network"
REGISTER_URI = "https://app.tokenlayer.network"

DEFAULT_POOL_TYPE = "meme"
TOKEN_TYPE = "coin"

LINK_ORDER = ("website", "twitter", "youtube", "discord", "telegram")

CREATE_TOKEN_REQUIRED_FIELDS = ("name", "symbol", "description", "image", "chainSlug")

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

CREATE_TOKEN_TYPES = {
    "CreateTokenAction": [
        {"name": "type", "type": "string"},
        {"name": "source", "type": "string"},
        {"name": "name", "type": "string"},
        {"name": "symbol", "type": "string"},
        {"name": "description", "type": "string"},
        {"name": "image", "type": "string"},
        {"name": "banner", "type": "string"},
        {"name": "video", "type": "string"},
        {"name": "chainSlug", "type": "string"},
        {"name": "destinationChainsHash", "type": "bytes32"},
        {"name": "poolType", "type": "string"},
        {"name": "userAddress", "type": "address"},
        {"name": "builderCode", "type": "address"},
        {"name": "builderFee", "type": "uint256"},
        {"name": "tokenReferral", "type": "address"},
        {"name": "tagsHash", "type": "bytes32"},
        {"name": "linksHash", "type": "bytes32"},
        {"name": "tokenType", "type": "string"},
        {"name": "amountIn", "type": "string"},
        {"name": "tokensOut", "type": "string"},
        {"name": "maxAmountIn", "type": "string"},
        {"name": "nonce", "type": "uint64"},
        {"name": "expiresAfter", "type": "uint64"},
    ],
}

REGISTER_TYPES = {
    "RegisterAction": [
        {"name": "type", "type": "string"},
        {"name": "method", "type": "string"},
        {"name": "source", "type": "string"},
        {"name": "nonce", "type": "uint64"},
        {"name": "expiresAfter", "type": "uint64"},
    ],
}


def hash_string_array(values: Optional[List[str]]) -> HexBytes:
    """
    keccak256 of the values joined with ``|``.

    An empty or absent list hashes the empty string, never 32 zero bytes.
    """
    if not values:
        return Web3.keccak(text="")
    return Web3.keccak(text="|".join(values))


def hash_links(links: Optional[Dict[str, Optional[str]]]) -> HexBytes:
    """
    keccak256 of the social links in fixed order, missing ones as empty strings.

    An absent links object hashes the empty string; an empty one hashes "||||".
    """
    if links is None:
        return Web3.keccak(text="")
    canonical = "|".join(links.get(key) or "" for key in LINK_ORDER)
    return Web3.keccak(text=canonical)


def _checksum(value: str, field: str) -> str:
    try:
        return Web3.to_checksum_address(value)
    except (ValueError, TypeError) as e:
        raise InvalidActionError(f"{field} is not a valid address: {value!r}") from e


def _checksum_or_zero(value: Optional[str], field: str) -> str:
    return _checksum(value, field) if value else ZERO_ADDRESS


def _signer_address(signer: Signer) -> str:
    address = getattr(signer, "address", None)
    if not address:
        raise SigningError("Signer has no account address. Pass a signer with an account bound.")
    return Web3.to_checksum_address(address)


def _check_source(source: str) -> None:
    if source not in SOURCES:
        raise InvalidActionError(f"source must be one of {', '.join(SOURCES)}, got {source!r}")


def _iso_timestamp(timestamp_ms: int) -> str:
    moment = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=timestamp_ms)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def resolve_signature_chain_id(signer: Signer, explicit: Optional[Union[int, str]] = None) -> str:
    """
    Resolve the EIP-712 domain chain id as a 0x-hex string.

    Args:
        signer: Wallet signer, consulted when no explicit value is given
        explicit: Per-call or credential-level chain id

    Raises:
        MissingChainIdError: If neither an explicit value nor a bound chain exists
        InvalidActionError: If the explicit value is not an integer chain id
    """
    if explicit is not None and explicit != "":
        try:
            return to_chain_id_hex(explicit)
        except ValueError as e:
            raise InvalidActionError(f"signature_chain_id is not a valid chain id: {explicit!r}") from e

    chain_id = getattr(signer, "chain_id", None)
    if not chain_id:
        raise MissingChainIdError()
    return to_chain_id_hex(chain_id)


def get_typed_domain(signature_chain_id: str) -> Dict[str, Any]:
    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": int(signature_chain_id, 16),
        "verifyingContract": ZERO_ADDRESS,
    }


def build_typed_data(
    types: Dict[str, List[Dict[str, str]]],
    primary_type: str,
    signature_chain_id: str,
    message: Dict[str, Any],
) -> Dict[str, Any]:
    """Assemble a full EIP-712 message under the Token Layer domain"""
    return {
        "types": {"EIP712Domain": EIP712_DOMAIN_TYPE, **types},
        "primaryType": primary_type,
        "domain": get_typed_domain(signature_chain_id),
        "message": message,
    }


def build_register_message(
    address: str,
    nonce_ms: int,
    chain_id: Optional[int] = None,
    expires_after_ms: Optional[int] = None,
    domain: Optional[str] = None,
    uri: Optional[str] = None,
) -> str:
    """
    Build the SIWE message signed during registration.

    Args:
        address: Wallet address (checksummed in the message)
        nonce_ms: Timestamp nonce, also used as the issued-at time
        chain_id: Chain id shown in the message (defaults to 1)
        expires_after_ms: Validity window; adds an expiration time when set
        domain: Requesting domain
        uri: Requesting URI

    Returns:
        EIP-4361 formatted message
    """
    checksum = Web3.to_checksum_address(address)
    lines = [
        f"{domain or REGISTER_DOMAIN} wants you to sign in with your Ethereum account:",
        checksum,
        "",
        f"TokenLayer register timestamp: {nonce_ms}",
        "",
        f"URI: {uri or REGISTER_URI}",
        "Version: 1",
        f"Chain ID: {chain_id if chain_id is not None else 1}",
        f"Nonce: {nonce_ms}",
        f"Issued At: {_iso_timestamp(nonce_ms)}",
    ]
    if expires_after_ms:
        lines.append(f"Expiration Time: {_iso_timestamp(nonce_ms + expires_after_ms)}")
    return "\n".join(lines)


def build_create_token_typed_message(
    source: str,
    action: Dict[str, Any],
    nonce: int,
    expires_after: int,
) -> Dict[str, Any]:
    """
    Canonicalize a createToken action into the CreateTokenAction struct.

    Raises:
        InvalidActionError: If required fields are missing or values are malformed
    """
    missing = [field for field in CREATE_TOKEN_REQUIRED_FIELDS if action.get(field) is None]
    if missing:
        raise InvalidActionError(f"createToken action missing required fields: {', '.join(missing)}")

    builder = action.get("builder") or {}
    try:
        builder_fee = to_non_negative_int(builder.get("fee") or 0, "builder.fee")
        nonce = to_non_negative_int(nonce, "nonce")
        expires_after = to_non_negative_int(expires_after, "expiresAfter")
    except ValueError as e:
        raise InvalidActionError(str(e)) from e

    return {
        "type": "createToken",
        "source": source,
        "name": action["name"],
        "symbol": action["symbol"],
        "description": action["description"],
        "image": action["image"],
        "banner": action.get("banner") or "",
        "video": action.get("video") or "",
        "chainSlug": action["chainSlug"],
        "destinationChainsHash": hash_string_array(action.get("destinationChains")),
        "poolType": action.get("poolType") or DEFAULT_POOL_TYPE,
        "userAddress": _checksum_or_zero(action.get("userAddress"), "userAddress"),
        "builderCode": _checksum_or_zero(builder.get("code"), "builder.code"),
        "builderFee": builder_fee,
        "tokenReferral": _checksum_or_zero(action.get("token_referral"), "token_referral"),
        "tagsHash": hash_string_array(action.get("tags")),
        "linksHash": hash_links(action.get("links")),
        "tokenType": TOKEN_TYPE,
        # Decimal strings: never cast, amounts may exceed float precision
        "amountIn": str(action.get("amountIn") or 0),
        "tokensOut": str(action.get("tokensOut") or 0),
        "maxAmountIn": str(action.get("maxAmountIn") or 0),
        "nonce": nonce,
        "expiresAfter": expires_after,
    }


def sign_create_token_request(
    signer: Signer,
    source: str,
    action: Dict[str, Any],
    nonce: int,
    expires_after: int,
    signature_chain_id: Optional[Union[int, str]] = None,
) -> ActionEnvelope:
    """
    Sign a createToken request with the wallet.

    Args:
        signer: Wallet signer
        source: "Mainnet" or "Testnet"
        action: createToken action payload (without ``type``)
        nonce: Timestamp nonce
        expires_after: Signature validity in milliseconds
        signature_chain_id: Explicit domain chain id (falls back to the signer's chain)

    Returns:
        Signed envelope ready to POST

    Raises:
        MissingChainIdError: If no signature chain id can be resolved
        InvalidActionError: If the action is malformed
    """
    _check_source(source)
    chain_id_hex = resolve_signature_chain_id(signer, signature_chain_id)
    account_address = _signer_address(signer)

    user_address = action.get("userAddress")
    wire_action = {
        **action,
        "type": "createToken",
        "userAddress": _checksum(user_address, "userAddress") if user_address else account_address,
    }

    message = build_create_token_typed_message(source, wire_action, nonce, expires_after)
    typed_data = build_typed_data(CREATE_TOKEN_TYPES, "CreateTokenAction", chain_id_hex, message)
    signature = signer.sign_typed_data(typed_data)
    logger.debug(f"Signed createToken request for {account_address} (nonce={nonce}, chain={chain_id_hex})")

    return ActionEnvelope(
        source=source,
        nonce=nonce,
        expires_after=expires_after,
        action=wire_action,
        signature=signature,
        signature_chain_id=chain_id_hex,
    )


def sign_register_request(
    signer: Signer,
    source: str,
    nonce: int,
    expires_after: int,
    signature_chain_id: Optional[Union[int, str]] = None,
    wallet_address: Optional[str] = None,
    message: Optional[str] = None,
) -> ActionEnvelope:
    """
    Sign a register request with the wallet.

    Produces a plain message signature over the SIWE text (carried inside the
    action) and an EIP-712 RegisterAction signature (carried on the envelope).

    Raises:
        AddressMismatchError: If ``wallet_address`` differs from the signer's address
        MissingChainIdError: If no signature chain id can be resolved
    """
    _check_source(source)
    chain_id_hex = resolve_signature_chain_id(signer, signature_chain_id)
    account_address = _signer_address(signer)

    address = Web3.to_checksum_address(wallet_address) if wallet_address else account_address
    if address != account_address:
        raise AddressMismatchError(account_address, address)

    text = message or build_register_message(
        address,
        nonce,
        chain_id=int(chain_id_hex, 16),
        expires_after_ms=expires_after,
    )
    action_signature = signer.sign_message(text)

    typed_data = build_typed_data(REGISTER_TYPES, "RegisterAction", chain_id_hex, {
        "type": "register",
        "method": "web3",
        "source": source,
        "nonce": nonce,
        "expiresAfter": expires_after,
    })
    typed_signature = signer.sign_typed_data(typed_data)
    logger.debug(f"Signed register request for {address} (nonce={nonce}, chain={chain_id_hex})")

    return ActionEnvelope(
        source=source,
        nonce=nonce,
        expires_after=expires_after,
        action={
            "type": "register",
            "method": "web3",
            "message": text,
            "signature": action_signature,
        },
        signature=typed_signature,
        signature_chain_id=chain_id_hex,
    )
