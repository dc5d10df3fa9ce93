#!/usr/bin/env python3
"""
Bearer-authenticated actions with the Token Layer SDK.

    TL_AUTH_MODE=apiKey TL_API_KEY=... TL_TOKEN_ID=... python examples/actions_example.py
"""
import os

from tokenlayer_sdk import TokenLayerClient, TokenLayerApiError


def main():
    client = TokenLayerClient.from_env()
    if client.auth is None or client.auth.type == "wallet":
        print("ERROR: set TL_AUTH_MODE to jwt or apiKey (with TL_JWT or TL_API_KEY)")
        return

    token_id = os.environ.get("TL_TOKEN_ID")
    if not token_id:
        print("ERROR: TL_TOKEN_ID environment variable is required")
        return

    try:
        trade = client.trade_token({
            "tokenId": token_id,
            "chainSlug": os.environ.get("TL_CHAIN_SLUG", "base"),
            "direction": "buy",
            "buyAmountUSD": 1,
        })
        print(f"tradeToken response: {trade}")

        rewards = client.claim_rewards({"chains": [os.environ.get("TL_CHAIN_SLUG", "base")]})
        print(f"claimRewards response: {rewards}")
    except TokenLayerApiError as e:
        print(f"API error {e.status} ({e.code}): {e.error}")


if __name__ == "__main__":
    main()
