#!/usr/bin/env python3
"""
Read-only info queries with the Token Layer SDK.

Public queries work without auth; user queries need TL_AUTH_MODE=jwt or apiKey.
"""
import os

from tokenlayer_sdk import TokenLayerClient, AuthError


def main():
    client = TokenLayerClient.from_env()

    tokens = client.get_tokens_v2({"limit": 5, "order_by": "volume_24h", "order_direction": "DESC"})
    print(f"getTokensV2: {tokens}")

    query = os.environ.get("TL_SEARCH_INPUT", "base")
    print(f"searchToken: {client.search_token({'input': query})}")
    print(f"getLeaderboard: {client.get_leaderboard({'limit': 10})}")

    try:
        print(f"me: {client.me()}")
        print(f"getUserBalance: {client.get_user_balance()}")
    except AuthError as e:
        print(f"Skipping user queries: {e}")


if __name__ == "__main__":
    main()
