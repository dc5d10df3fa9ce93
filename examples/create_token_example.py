#!/usr/bin/env python3
"""
Create a token with the Token Layer SDK.

Configuration is read from TL_* environment variables (see TokenLayerConfig):

    TL_AUTH_MODE=wallet TL_PRIVATE_KEY=0x... TL_SIGNATURE_CHAIN_ID=8453 \
    TL_RPC_BY_CHAIN_SLUG=base=https://mainnet.base.org \
    TL_EXECUTE=true python examples/create_token_example.py
"""
import logging
import os
import time

from tokenlayer_sdk import TokenLayerClient, TokenLayerError, TransactionExecutionError


def main():
    """
    Demonstrate token creation.

    This example shows how to:
    1. Build a client from the environment
    2. Register the wallet (wallet auth only)
    3. Create a token and optionally execute the returned transactions
    """
    logging.basicConfig(level=logging.INFO)

    client = TokenLayerClient.from_env()
    execute = os.environ.get("TL_EXECUTE", "false").lower() == "true"

    action = client.prepare_create_token({
        "name": os.environ.get("TL_TOKEN_NAME") or f"SDK Token {int(time.time() * 1000)}",
        "symbol": os.environ.get("TL_TOKEN_SYMBOL", "SDK"),
        "description": os.environ.get("TL_TOKEN_DESCRIPTION", "Token created from the Python SDK example"),
        "image": os.environ.get("TL_TOKEN_IMAGE", "https://placehold.co/512x512/png"),
        "chainSlug": os.environ.get("TL_CHAIN_SLUG", "base"),
    })

    if client.auth is None:
        print("ERROR: TL_AUTH_MODE must be set to wallet, jwt or apiKey")
        return

    if client.auth.type == "wallet":
        print("Using wallet auth. Running register() before create_token()...")
        print(f"register response: {client.register()}")
    else:
        print(f"Using {client.auth.type} auth")
        if execute:
            print("TL_EXECUTE=true requires wallet auth; creating without execution")
            execute = False

    if client.defaults.builder:
        print(f"Builder defaults will be applied: {client.defaults.builder}")

    try:
        result = client.create_token(action, execute=execute)
    except TransactionExecutionError as e:
        print(f"Execution failed at transaction #{e.index}: {e}")
        for record in e.executed:
            print(f"  already broadcast: #{record.index} {record.hash}")
        return
    except TokenLayerError as e:
        print(f"createToken failed: {e}")
        return

    print(f"createToken response: {result.model_dump(by_alias=True, exclude_none=True)}")
    for record in result.executions or []:
        print(f"Executed #{record.index} on chain {record.chain_id}: {record.hash}")


if __name__ == "__main__":
    main()
