"""Example: Authorizing a Discogs application with OAuth 1.0a."""

import asyncio
import os

from spinshelf import AuthContext, DiscogsClient


async def main():
    """Run the three-step OAuth flow and call the identity endpoint."""

    print("Discogs OAuth Example")
    print("=" * 50)

    consumer_key = os.environ.get("DISCOGS_CONSUMER_KEY")
    consumer_secret = os.environ.get("DISCOGS_CONSUMER_SECRET")

    if not consumer_key or not consumer_secret:
        print("\nError: Missing credentials!")
        print("\nPlease set environment variables:")
        print("  export DISCOGS_CONSUMER_KEY='your_consumer_key'")
        print("  export DISCOGS_CONSUMER_SECRET='your_consumer_secret'")
        print("\nRegister an application at: https://www.discogs.com/settings/developers")
        return

    consumer = AuthContext(consumer_key=consumer_key, consumer_secret=consumer_secret)
    oauth = DiscogsClient(auth=consumer).oauth()

    print("\nRequesting a request token...")
    request_token = await oauth.get_request_token("oob")
    print(f"✓ Open this URL and authorize the application:\n  {request_token.authorize_url}")

    verifier = input("\nVerification code: ").strip()

    print("\nExchanging for an access token...")
    access = await oauth.get_access_token(
        request_token.token, request_token.token_secret, verifier
    )
    print(f"✓ Access token obtained: {access.access_token[:6]}...")

    async with DiscogsClient(auth=access.to_auth(consumer_key, consumer_secret)) as client:
        identity = await client.get_identity()
        print(f"\n✓ Authenticated as: {identity.data['username']}")
        if identity.rate_limit:
            print(f"  Requests remaining this minute: {identity.rate_limit.remaining}")

    print("\n" + "=" * 50)
    print("Store the access token and secret; they do not expire.")


if __name__ == "__main__":
    asyncio.run(main())
