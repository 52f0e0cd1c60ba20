"""Tests for the user, collection, wantlist, lists and inventory accessors."""

import json

import httpx
import pytest
import respx

from spinshelf.api.collection import CollectionAPI
from spinshelf.api.lists import ListsAPI
from spinshelf.api.wantlist import WantlistAPI
from spinshelf.core.exceptions import AuthError

API = "https://api.discogs.com"
USER = f"{API}/users/rodneyfool"


class TestUserAPI:
    """Test suite for UserAPI."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_profile(self, make_client, user_auth):
        get = respx.get(USER).mock(return_value=httpx.Response(200, json={"username": "rodneyfool"}))
        edit = respx.post(USER).mock(return_value=httpx.Response(200, json={"location": "Portland"}))

        async with make_client(auth=user_auth) as client:
            profile = await client.user().get_profile("rodneyfool")
            await client.user().edit_profile("rodneyfool", {"location": "Portland"})

        assert profile.data["username"] == "rodneyfool"
        assert get.called
        assert json.loads(edit.calls.last.request.content) == {"location": "Portland"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_username_is_escaped(self, make_client):
        route = respx.get(f"{API}/users/rodney%20fool").mock(
            return_value=httpx.Response(200, json={})
        )

        async with make_client() as client:
            await client.user().get_profile("rodney fool")

        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_listings_and_contributions(self, make_client):
        inventory = respx.get(f"{USER}/inventory").mock(return_value=httpx.Response(200, json={}))
        contributions = respx.get(f"{USER}/contributions").mock(
            return_value=httpx.Response(200, json={})
        )
        submissions = respx.get(f"{USER}/submissions").mock(
            return_value=httpx.Response(200, json={})
        )
        lists = respx.get(f"{USER}/lists").mock(return_value=httpx.Response(200, json={}))

        async with make_client() as client:
            user = client.user()
            await user.get_inventory("rodneyfool", {"sort": "price"})
            await user.get_contributions("rodneyfool", {"page": 2})
            await user.get_submissions("rodneyfool")
            await user.get_lists("rodneyfool", {"per_page": 10})

        assert inventory.calls.last.request.url.params["sort"] == "price"
        assert contributions.calls.last.request.url.params["page"] == "2"
        assert submissions.called
        assert lists.calls.last.request.url.params["per_page"] == "10"

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_identity(self, make_client, user_auth):
        respx.get(f"{API}/oauth/identity").mock(
            return_value=httpx.Response(200, json={"username": "rodneyfool"})
        )

        async with make_client(auth=user_auth) as client:
            identity = await client.user().get_identity()

        assert identity.data["username"] == "rodneyfool"

    def test_sub_accessors(self, make_client):
        client = make_client()
        user = client.user()
        assert isinstance(user.collection(), CollectionAPI)
        assert isinstance(user.wantlist(), WantlistAPI)
        assert isinstance(user.lists(), ListsAPI)
        assert user.collection().client is client


class TestCollectionAPI:
    """Test suite for CollectionAPI."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_public_folder_readable_anonymously(self, make_client):
        folder = respx.get(f"{USER}/collection/folders/0").mock(
            return_value=httpx.Response(200, json={"id": 0, "name": "All"})
        )
        releases = respx.get(f"{USER}/collection/folders/0/releases").mock(
            return_value=httpx.Response(200, json={"releases": []})
        )

        async with make_client() as client:
            collection = client.user().collection()
            await collection.get_folder("rodneyfool", 0)
            await collection.get_releases("rodneyfool", "0", {"sort": "artist", "per_page": 50})

        assert folder.called
        params = releases.calls.last.request.url.params
        assert params["sort"] == "artist"
        assert params["per_page"] == "50"

    @pytest.mark.asyncio
    async def test_private_folder_requires_user_auth(self, make_client, consumer_auth):
        async with make_client(auth=consumer_auth) as client:
            collection = client.user().collection()
            with pytest.raises(AuthError):
                await collection.get_folder("rodneyfool", 1)
            with pytest.raises(AuthError):
                await collection.get_releases("rodneyfool", 3)

    @pytest.mark.asyncio
    @respx.mock
    async def test_private_folder_with_user_auth(self, make_client, user_auth):
        route = respx.get(f"{USER}/collection/folders/3/releases").mock(
            return_value=httpx.Response(200, json={"releases": []})
        )

        async with make_client(auth=user_auth) as client:
            await client.user().collection().get_releases("rodneyfool", 3)

        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_folder_management(self, make_client, user_auth):
        folders = respx.get(f"{USER}/collection/folders").mock(
            return_value=httpx.Response(200, json={"folders": []})
        )
        add = respx.post(f"{USER}/collection/folders").mock(
            return_value=httpx.Response(201, json={"id": 3, "name": "Jazz"})
        )
        rename = respx.post(f"{USER}/collection/folders/3").mock(
            return_value=httpx.Response(200, json={"id": 3, "name": "Free Jazz"})
        )
        delete = respx.delete(f"{USER}/collection/folders/3").mock(
            return_value=httpx.Response(204)
        )

        async with make_client(auth=user_auth) as client:
            collection = client.user().collection()
            await collection.get_folders("rodneyfool")
            created = await collection.add_folder("rodneyfool", "Jazz")
            await collection.set_folder_name("rodneyfool", 3, "Free Jazz")
            await collection.delete_folder("rodneyfool", 3)

        assert folders.called
        assert created.data["id"] == 3
        assert json.loads(add.calls.last.request.content) == {"name": "Jazz"}
        assert json.loads(rename.calls.last.request.content) == {"name": "Free Jazz"}
        assert delete.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_release_instances(self, make_client, user_auth):
        instances = respx.get(f"{USER}/collection/releases/249504").mock(
            return_value=httpx.Response(200, json={"releases": []})
        )
        add = respx.post(f"{USER}/collection/folders/1/releases/249504").mock(
            return_value=httpx.Response(201, json={"instance_id": 7})
        )
        edit = respx.post(f"{USER}/collection/folders/1/releases/249504/instances/7").mock(
            return_value=httpx.Response(204)
        )
        remove = respx.delete(f"{USER}/collection/folders/1/releases/249504/instances/7").mock(
            return_value=httpx.Response(204)
        )

        async with make_client(auth=user_auth) as client:
            collection = client.user().collection()
            await collection.get_release_instances("rodneyfool", 249504)
            added = await collection.add_release("rodneyfool", 249504)
            await collection.edit_release("rodneyfool", 1, 249504, 7, {"rating": 4})
            await collection.remove_release("rodneyfool", 1, 249504, 7)

        assert instances.called
        assert added.data["instance_id"] == 7
        assert add.calls.last.request.content == b""
        assert json.loads(edit.calls.last.request.content) == {"rating": 4}
        assert remove.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_fields_notes_and_value(self, make_client, user_auth):
        fields = respx.get(f"{USER}/collection/fields").mock(
            return_value=httpx.Response(200, json={"fields": []})
        )
        note = respx.post(
            f"{USER}/collection/folders/1/releases/249504/instances/7/fields/3"
        ).mock(return_value=httpx.Response(204))
        value = respx.get(f"{USER}/collection/value").mock(
            return_value=httpx.Response(200, json={"median": "$10.00"})
        )

        async with make_client(auth=user_auth) as client:
            collection = client.user().collection()
            await collection.get_fields("rodneyfool")
            await collection.edit_instance_note("rodneyfool", 1, 249504, 7, 3, "Near mint")
            worth = await collection.get_value("rodneyfool")

        assert fields.called
        assert note.calls.last.request.url.params["value"] == "Near mint"
        assert worth.data["median"] == "$10.00"
        assert value.called

    @pytest.mark.asyncio
    async def test_value_requires_user_auth(self, make_client):
        async with make_client() as client:
            with pytest.raises(AuthError):
                await client.user().collection().get_value("rodneyfool")


class TestWantlistAPI:
    """Test suite for WantlistAPI."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_wantlist(self, make_client, user_auth):
        wants = respx.get(f"{USER}/wants").mock(return_value=httpx.Response(200, json={"wants": []}))
        add = respx.put(f"{USER}/wants/130076").mock(
            return_value=httpx.Response(201, json={"id": 130076})
        )
        edit = respx.post(f"{USER}/wants/130076").mock(
            return_value=httpx.Response(200, json={"id": 130076})
        )
        remove = respx.delete(f"{USER}/wants/130076").mock(return_value=httpx.Response(204))

        async with make_client(auth=user_auth) as client:
            wantlist = client.user().wantlist()
            await wantlist.get_releases("rodneyfool", {"page": 2})
            await wantlist.add_release("rodneyfool", 130076, {"notes": "Need this", "rating": 4})
            await wantlist.edit_notes("rodneyfool", 130076, {"notes": "Really need this"})
            await wantlist.remove_release("rodneyfool", 130076)

        assert wants.calls.last.request.url.params["page"] == "2"
        assert json.loads(add.calls.last.request.content) == {"notes": "Need this", "rating": 4}
        assert json.loads(edit.calls.last.request.content) == {"notes": "Really need this"}
        assert remove.called

    @pytest.mark.asyncio
    async def test_wantlist_writes_require_user_auth(self, make_client, consumer_auth):
        async with make_client(auth=consumer_auth) as client:
            with pytest.raises(AuthError):
                await client.user().wantlist().add_release("rodneyfool", 130076)


class TestListsAPI:
    @pytest.mark.asyncio
    @respx.mock
    async def test_get_items(self, make_client):
        route = respx.get(f"{API}/lists/328046").mock(
            return_value=httpx.Response(200, json={"items": [{"id": 1}]})
        )

        async with make_client() as client:
            items = await client.user().lists().get_items(328046)

        assert route.called
        assert items.data["items"] == [{"id": 1}]


class TestInventoryAPI:
    """Test suite for InventoryAPI."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_export_inventory_returns_rate_limit_only(self, make_client, rate_limit_headers):
        route = respx.post(f"{API}/inventory/export").mock(
            return_value=httpx.Response(200, json={"ok": True}, headers=rate_limit_headers)
        )

        async with make_client() as client:
            response = await client.inventory().export_inventory()

        assert response.data is None
        assert response.rate_limit.remaining == 37
        assert route.calls.last.request.content == b"{}"

    @pytest.mark.asyncio
    @respx.mock
    async def test_exports(self, make_client):
        exports = respx.get(f"{API}/inventory/export").mock(
            return_value=httpx.Response(200, json={"items": [{"id": 599632}]})
        )
        export = respx.get(f"{API}/inventory/export/599632").mock(
            return_value=httpx.Response(200, json={"id": 599632, "status": "success"})
        )

        async with make_client() as client:
            inventory = client.inventory()
            listed = await inventory.get_exports({"page": 1})
            single = await inventory.get_export(599632)

        assert listed.data["items"][0]["id"] == 599632
        assert exports.calls.last.request.url.params["page"] == "1"
        assert single.data["status"] == "success"
        assert export.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_download_export_returns_raw_text(self, make_client):
        csv = "listing_id,artist,title\n123,Nirvana,Nevermind\n"
        respx.get(f"{API}/inventory/export/599632/download").mock(
            return_value=httpx.Response(200, text=csv, headers={"Content-Type": "text/csv"})
        )

        async with make_client() as client:
            response = await client.inventory().download_export(599632)

        assert response.data == csv
