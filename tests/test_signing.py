"""
Tests for createToken and register request signing.
"""
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data
from hypothesis import given, settings, strategies as st
from web3 import Web3

from tokenlayer_sdk.exceptions import AddressMismatchError, InvalidActionError, MissingChainIdError
from tokenlayer_sdk.signing import (
    ZERO_ADDRESS, CREATE_TOKEN_TYPES, REGISTER_TYPES,
    hash_string_array, hash_links, resolve_signature_chain_id, build_typed_data,
    build_register_message, build_create_token_typed_message,
    sign_create_token_request, sign_register_request, _iso_timestamp
)
from tests.test_helpers import (
    RecordingSigner, make_create_token_action, TEST_ADDRESS, TEST_SIGNED_BUILDER_CODE, TEST_NONCE
)

OTHER_KEY = "0x" + "22" * 32
EXPIRES_AFTER = 300000

tag_strategy = st.text(
    min_size=1,
    max_size=12,
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="-_ "),
)


def _recover_typed(envelope, types, primary_type, message):
    typed = build_typed_data(types, primary_type, envelope.signature_chain_id, message)
    return Account.recover_message(encode_typed_data(full_message=typed), signature=envelope.signature)


def test_empty_array_hashes_empty_string():
    empty = Web3.keccak(text="")
    assert hash_string_array([]) == empty
    assert hash_string_array(None) == empty
    assert hash_string_array([]) != b"\x00" * 32


def test_array_hash_joins_with_pipe():
    assert hash_string_array(["base", "ethereum"]) == Web3.keccak(text="base|ethereum")


@settings(max_examples=50)
@given(st.lists(tag_strategy, min_size=2, max_size=6, unique=True))
def test_array_hash_is_order_sensitive(tags):
    assert hash_string_array(tags) != hash_string_array(list(reversed(tags)))


def test_links_hash_fixed_order():
    links = {"telegram": "t.me/x", "website": "https://x.io"}
    assert hash_links(links) == Web3.keccak(text="https://x.io||||t.me/x")


def test_links_hash_absent_vs_empty():
    assert hash_links(None) == Web3.keccak(text="")
    assert hash_links({}) == Web3.keccak(text="||||")


def test_links_hash_ignores_unknown_keys():
    assert hash_links({"twitter": "@x", "github": "x"}) == hash_links({"twitter": "@x"})


def test_iso_timestamp():
    assert _iso_timestamp(TEST_NONCE) == "2023-11-14T22:13:20.000Z"
    assert _iso_timestamp(TEST_NONCE + 1234) == "2023-11-14T22:13:21.234Z"


def test_resolve_signature_chain_id_explicit_wins():
    signer = RecordingSigner(chain_id=1)
    assert resolve_signature_chain_id(signer, 8453) == "0x2105"
    assert resolve_signature_chain_id(signer, "8453") == "0x2105"
    assert resolve_signature_chain_id(signer, "0x2105") == "0x2105"


def test_resolve_signature_chain_id_from_signer():
    assert resolve_signature_chain_id(RecordingSigner(chain_id=1)) == "0x1"


def test_resolve_signature_chain_id_missing():
    with pytest.raises(MissingChainIdError) as excinfo:
        resolve_signature_chain_id(RecordingSigner())
    assert excinfo.value.index is None


@pytest.mark.parametrize("explicit", ["0xzz", "base", 1.5])
def test_resolve_signature_chain_id_rejects_non_integer(explicit):
    with pytest.raises(InvalidActionError) as excinfo:
        resolve_signature_chain_id(RecordingSigner(chain_id=1), explicit)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_typed_message_defaults():
    message = build_create_token_typed_message("Mainnet", make_create_token_action(), TEST_NONCE, EXPIRES_AFTER)

    assert [field["name"] for field in CREATE_TOKEN_TYPES["CreateTokenAction"]] == list(message.keys())
    assert message["type"] == "createToken"
    assert message["banner"] == ""
    assert message["video"] == ""
    assert message["poolType"] == "meme"
    assert message["tokenType"] == "coin"
    assert message["userAddress"] == ZERO_ADDRESS
    assert message["builderCode"] == ZERO_ADDRESS
    assert message["builderFee"] == 0
    assert message["tokenReferral"] == ZERO_ADDRESS
    assert message["amountIn"] == "0"
    assert message["tokensOut"] == "0"
    assert message["maxAmountIn"] == "0"
    assert message["destinationChainsHash"] == Web3.keccak(text="")
    assert message["tagsHash"] == Web3.keccak(text="")
    assert message["linksHash"] == Web3.keccak(text="")


def test_typed_message_keeps_amounts_as_strings():
    action = make_create_token_action(amountIn="123456789012345678901234567890", poolType="blue-chip")
    message = build_create_token_typed_message("Testnet", action, TEST_NONCE, EXPIRES_AFTER)
    assert message["amountIn"] == "123456789012345678901234567890"
    assert message["poolType"] == "blue-chip"
    assert message["source"] == "Testnet"


def test_typed_message_checksums_addresses():
    action = make_create_token_action(builder={"code": TEST_SIGNED_BUILDER_CODE.lower(), "fee": "250"})
    message = build_create_token_typed_message("Mainnet", action, TEST_NONCE, EXPIRES_AFTER)
    assert message["builderCode"] == Web3.to_checksum_address(TEST_SIGNED_BUILDER_CODE)
    assert message["builderFee"] == 250


@pytest.mark.parametrize("field", ["name", "symbol", "description", "image", "chainSlug"])
def test_typed_message_missing_required_field(field):
    action = make_create_token_action()
    del action[field]
    with pytest.raises(InvalidActionError) as excinfo:
        build_create_token_typed_message("Mainnet", action, TEST_NONCE, EXPIRES_AFTER)
    assert field in str(excinfo.value)


def test_typed_message_rejects_negative_fee():
    action = make_create_token_action(builder={"code": TEST_SIGNED_BUILDER_CODE, "fee": -1})
    with pytest.raises(InvalidActionError):
        build_create_token_typed_message("Mainnet", action, TEST_NONCE, EXPIRES_AFTER)


def test_typed_message_rejects_bad_address():
    action = make_create_token_action(token_referral="0xnot-an-address")
    with pytest.raises(InvalidActionError):
        build_create_token_typed_message("Mainnet", action, TEST_NONCE, EXPIRES_AFTER)


def test_sign_create_token_defaults_user_address():
    signer = RecordingSigner(chain_id=8453)
    envelope = sign_create_token_request(signer, "Mainnet", make_create_token_action(), TEST_NONCE, EXPIRES_AFTER)

    assert envelope.action["type"] == "createToken"
    assert envelope.action["userAddress"] == TEST_ADDRESS
    assert envelope.signature_chain_id == "0x2105"
    assert envelope.nonce == TEST_NONCE
    assert envelope.expires_after == EXPIRES_AFTER

    message = build_create_token_typed_message("Mainnet", envelope.action, TEST_NONCE, EXPIRES_AFTER)
    assert message["userAddress"] == TEST_ADDRESS
    assert _recover_typed(envelope, CREATE_TOKEN_TYPES, "CreateTokenAction", message) == TEST_ADDRESS


def test_sign_create_token_keeps_explicit_user_address():
    other = Account.from_key(OTHER_KEY).address
    signer = RecordingSigner(chain_id=8453)
    action = make_create_token_action(userAddress=other.lower())
    envelope = sign_create_token_request(signer, "Mainnet", action, TEST_NONCE, EXPIRES_AFTER)
    assert envelope.action["userAddress"] == other


def test_sign_create_token_is_deterministic():
    signer = RecordingSigner(chain_id=8453)
    action = make_create_token_action(tags=["meme", "base"], links={"website": "https://x.io"})
    first = sign_create_token_request(signer, "Mainnet", action, TEST_NONCE, EXPIRES_AFTER)
    second = sign_create_token_request(signer, "Mainnet", action, TEST_NONCE, EXPIRES_AFTER)
    assert first.signature == second.signature


def test_sign_create_token_tag_order_changes_signature():
    signer = RecordingSigner(chain_id=8453)
    first = sign_create_token_request(
        signer, "Mainnet", make_create_token_action(tags=["a", "b"]), TEST_NONCE, EXPIRES_AFTER
    )
    second = sign_create_token_request(
        signer, "Mainnet", make_create_token_action(tags=["b", "a"]), TEST_NONCE, EXPIRES_AFTER
    )
    assert first.signature != second.signature


def test_sign_create_token_does_not_mutate_action():
    action = make_create_token_action()
    sign_create_token_request(RecordingSigner(chain_id=1), "Mainnet", action, TEST_NONCE, EXPIRES_AFTER)
    assert "type" not in action
    assert "userAddress" not in action


def test_sign_create_token_requires_chain_id():
    signer = RecordingSigner()
    with pytest.raises(MissingChainIdError):
        sign_create_token_request(signer, "Mainnet", make_create_token_action(), TEST_NONCE, EXPIRES_AFTER)
    assert signer.signed_typed_data == []


def test_sign_create_token_rejects_unknown_source():
    with pytest.raises(InvalidActionError):
        sign_create_token_request(
            RecordingSigner(chain_id=1), "Devnet", make_create_token_action(), TEST_NONCE, EXPIRES_AFTER
        )


def test_register_message_format():
    message = build_register_message(TEST_ADDRESS.lower(), TEST_NONCE, chain_id=8453, expires_after_ms=60000)
    lines = message.split("\n")
    assert lines[0] == "app.tokenlayer.network wants you to sign in with your Ethereum account:"
    assert lines[1] == TEST_ADDRESS
    assert lines[3] == f"TokenLayer register timestamp: {TEST_NONCE}"
    assert "URI: https://app.tokenlayer.network" in lines
    assert "Chain ID: 8453" in lines
    assert f"Nonce: {TEST_NONCE}" in lines
    assert "Issued At: 2023-11-14T22:13:20.000Z" in lines
    assert lines[-1] == "Expiration Time: 2023-11-14T22:14:20.000Z"


def test_register_message_without_expiry():
    message = build_register_message(TEST_ADDRESS, TEST_NONCE)
    assert "Chain ID: 1" in message
    assert "Expiration Time" not in message


def test_sign_register_request():
    signer = RecordingSigner(chain_id=8453)
    envelope = sign_register_request(signer, "Mainnet", TEST_NONCE, EXPIRES_AFTER)

    action = envelope.action
    assert action["type"] == "register"
    assert action["method"] == "web3"
    assert "Chain ID: 8453" in action["message"]
    recovered = Account.recover_message(encode_defunct(text=action["message"]), signature=action["signature"])
    assert recovered == TEST_ADDRESS

    typed_message = {
        "type": "register",
        "method": "web3",
        "source": "Mainnet",
        "nonce": TEST_NONCE,
        "expiresAfter": EXPIRES_AFTER,
    }
    assert _recover_typed(envelope, REGISTER_TYPES, "RegisterAction", typed_message) == TEST_ADDRESS


def test_sign_register_custom_message():
    signer = RecordingSigner(chain_id=1)
    envelope = sign_register_request(signer, "Mainnet", TEST_NONCE, EXPIRES_AFTER, message="hello")
    assert envelope.action["message"] == "hello"
    assert signer.signed_messages == ["hello"]


def test_sign_register_address_mismatch():
    signer = RecordingSigner(chain_id=1)
    other = Account.from_key(OTHER_KEY).address
    with pytest.raises(AddressMismatchError) as excinfo:
        sign_register_request(signer, "Mainnet", TEST_NONCE, EXPIRES_AFTER, wallet_address=other)
    assert excinfo.value.expected == TEST_ADDRESS
    assert excinfo.value.actual == other
    assert signer.signed_messages == []


def test_sign_register_accepts_lowercase_matching_address():
    signer = RecordingSigner(chain_id=1)
    envelope = sign_register_request(
        signer, "Mainnet", TEST_NONCE, EXPIRES_AFTER, wallet_address=TEST_ADDRESS.lower()
    )
    assert TEST_ADDRESS in envelope.action["message"]
