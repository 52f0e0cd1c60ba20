"""
Example usage of the Discogs API client.

This example demonstrates how to:
1. Search the database for a master release
2. Get master release details
3. Get the main release with prices in a given currency
4. Page through an artist's releases
5. Read the rate-limit snapshot returned with every response

Before running:
1. Set a personal user token in the environment:
   export DISCOGS_USER_TOKEN="your_token_here"
   OR
2. Put your credentials in the ``auth`` section of config.yaml:
   auth:
     user_token: your_token_here

Run with:
    python examples/discogs_usage_example.py
"""

import asyncio
from pathlib import Path
from typing import Optional

import spinshelf
from spinshelf import DiscogsClient, DiscogsError, RateLimitedResponse


def print_rate_limit(response: RateLimitedResponse) -> None:
    if response.rate_limit:
        print(
            f"     (rate limit: {response.rate_limit.used}/{response.rate_limit.limit} used, "
            f"{response.rate_limit.remaining} remaining)"
        )


async def search_master(client: DiscogsClient, artist: str, title: str) -> Optional[dict]:
    """
    Search for a master release by artist and title.

    Returns:
        The first master result, or None
    """
    print(f"\n{'='*60}")
    print(f"Searching for: {artist} - {title}")
    print(f"{'='*60}")

    results = await client.database().search(artist=artist, release_title=title, type="master")
    print_rate_limit(results)

    items = results.data.get("results", [])
    if not items:
        print("No results found!")
        return None

    print(f"\nTop {min(5, len(items))} results:")
    for i, result in enumerate(items[:5], 1):
        print(f"  {i}. {result.get('title', 'Unknown Title')} ({result.get('year', 'Unknown')})")
        print(f"     ID: {result.get('id')}")

    return items[0]


async def show_master(client: DiscogsClient, master_id: int) -> dict:
    master = await client.database().get_master(master_id)
    data = master.data

    print(f"\nMaster {master_id}: {data['title']} ({data.get('year', '?')})")
    print(f"  Genres: {', '.join(data.get('genres', []))}")
    print(f"  Styles: {', '.join(data.get('styles', []))}")
    for track in data.get("tracklist", [])[:5]:
        print(f"  {track.get('position', '')}. {track.get('title')} [{track.get('duration', '')}]")
    print_rate_limit(master)
    return data


async def show_release(client: DiscogsClient, release_id: int) -> None:
    release = await client.database().get_release(release_id, currency="EUR")
    data = release.data

    print(f"\nRelease {release_id}: {data['title']}")
    print(f"  Country: {data.get('country', 'Unknown')}")
    print(f"  Lowest price: {data.get('lowest_price')} EUR")
    print_rate_limit(release)


async def show_artist_releases(client: DiscogsClient, artist_id: int, max_pages: int = 2) -> None:
    for page in range(1, max_pages + 1):
        response = await client.database().get_artist_releases(
            artist_id, {"page": page, "per_page": 10, "sort": "year"}
        )
        pagination = response.data["pagination"]
        print(f"\nArtist releases, page {pagination['page']} of {pagination['pages']}:")
        for release in response.data["releases"]:
            print(f"  {release.get('year', '????')}  {release['title']}")
        if pagination["page"] >= pagination["pages"]:
            break


async def main():
    config_path = Path(__file__).parent.parent / "config.yaml"
    if config_path.exists():
        spinshelf.configure(config_path=config_path)
    else:
        spinshelf.configure()

    async with spinshelf.create_client() as client:
        try:
            about = await client.about()
            print(f"Connected: {about.data.get('hello')}")
            print(f"Client: {about.data['client_info']}")

            master_result = await search_master(client, "Nirvana", "Nevermind")
            if master_result:
                master = await show_master(client, master_result["id"])
                if "main_release" in master:
                    await show_release(client, master["main_release"])
                if master.get("artists"):
                    await show_artist_releases(client, master["artists"][0]["id"])

            print("\n" + "=" * 60)
            print("Example completed successfully!")
            print("=" * 60)

        except DiscogsError as e:
            print(f"\nError: {e}")


if __name__ == "__main__":
    asyncio.run(main())
