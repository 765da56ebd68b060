"""
Tests for the REST store client against a local aiohttp server.
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as BackendServer

from conftest import run_async
from realty_site.config import StoreConfig
from realty_site.error_handling import StoreError
from realty_site.store import (
    Condition,
    InMemoryDataStore,
    Query,
    RestDataStore,
    create_store,
)


ANON_KEY = "anon-key"


def fake_backend(requests):
    """A minimal hosted-backend stand-in that records what it receives."""

    async def table(request):
        requests.append({
            "method": request.method,
            "path": request.path,
            "query": list(request.query.items()),
            "headers": dict(request.headers),
            "body": await request.text(),
        })
        if request.match_info["table"] == "broken":
            return web.json_response({"message": "relation does not exist"}, status=404)
        if request.match_info["table"] == "slow":
            await asyncio.sleep(0.5)
        return web.json_response([{"id": "p-1", "title": "Casa"}])

    async def token(request):
        body = await request.json()
        if body["password"] != "secret":
            return web.json_response({"error": "invalid_grant"}, status=400)
        return web.json_response({
            "access_token": "user-token",
            "expires_in": 3600,
            "user": {"id": "admin-1", "email": body["email"]},
        })

    async def logout(request):
        requests.append({"path": request.path, "headers": dict(request.headers)})
        return web.Response(status=204)

    async def upload(request):
        requests.append({
            "path": request.path,
            "headers": dict(request.headers),
            "body": await request.read(),
        })
        return web.json_response({"Key": request.path})

    app = web.Application()
    app.router.add_route("*", "/rest/v1/{table}", table)
    app.router.add_post("/auth/v1/token", token)
    app.router.add_post("/auth/v1/logout", logout)
    app.router.add_post("/storage/v1/object/{bucket}/{path}", upload)
    return app


async def with_backend(scenario, timeout_seconds=15.0):
    requests = []
    server = BackendServer(fake_backend(requests))
    await server.start_server()
    store = RestDataStore(str(server.make_url("/")), ANON_KEY, timeout_seconds=timeout_seconds)
    try:
        result = await scenario(store)
    finally:
        await store.close()
        await server.close()
    return result, requests


def test_select_sends_filters_and_anon_key():
    async def scenario(store):
        query = (
            Query()
            .or_(Condition.contains("location", "Jardins"))
            .gte("bedrooms", 3)
            .order("created_at", descending=True)
        )
        return await store.select("properties", query)

    rows, requests = run_async(with_backend(scenario))

    assert rows == [{"id": "p-1", "title": "Casa"}]
    sent = requests[0]
    assert sent["method"] == "GET"
    assert sent["path"] == "/rest/v1/properties"
    assert ("bedrooms", "gte.3") in sent["query"]
    assert ("or", "(location.ilike.*Jardins*)") in sent["query"]
    assert sent["headers"]["apikey"] == ANON_KEY
    assert sent["headers"]["Authorization"] == f"Bearer {ANON_KEY}"


def test_error_status_raises_store_error():
    async def scenario(store):
        return await store.select("broken")

    with pytest.raises(StoreError) as excinfo:
        run_async(with_backend(scenario))
    assert excinfo.value.status == 404


def test_insert_asks_for_representation():
    async def scenario(store):
        return await store.insert("property_search", {"location": "Jardins"})

    rows, requests = run_async(with_backend(scenario))
    assert rows
    assert requests[0]["method"] == "POST"
    assert requests[0]["headers"]["Prefer"] == "return=representation"
    assert '"location": "Jardins"' in requests[0]["body"]


def test_sign_in_switches_bearer_token_and_sign_out_clears_it():
    async def scenario(store):
        session = await store.sign_in("admin@example.com", "secret")
        await store.update("properties", {"title": "Nova"}, Query().eq("id", "p-1"))
        await store.sign_out()
        return session, store.session

    (session, after), requests = run_async(with_backend(scenario))

    assert session.user_id == "admin-1"
    assert session.access_token == "user-token"
    assert after is None
    patch = requests[0]
    assert patch["method"] == "PATCH"
    assert ("id", "eq.p-1") in patch["query"]
    assert all(name != "select" for name, _ in patch["query"])
    assert patch["headers"]["Authorization"] == "Bearer user-token"
    assert requests[1]["path"] == "/auth/v1/logout"


def test_bad_credentials_raise_store_error():
    async def scenario(store):
        return await store.sign_in("admin@example.com", "wrong")

    with pytest.raises(StoreError):
        run_async(with_backend(scenario))


def test_timeout_raises_store_error():
    async def scenario(store):
        return await store.select("slow")

    with pytest.raises(StoreError):
        run_async(with_backend(scenario, timeout_seconds=0.05))


def test_forked_sign_in_leaves_anonymous_requests_alone():
    async def scenario(store):
        admin = store.fork()
        try:
            await admin.sign_in("admin@example.com", "secret")
            await admin.select("profiles")
            await store.select("properties")
            return store.session, admin.session
        finally:
            await admin.close()

    (public, admin), requests = run_async(with_backend(scenario))

    assert public is None
    assert admin.access_token == "user-token"
    assert requests[0]["path"] == "/rest/v1/profiles"
    assert requests[0]["headers"]["Authorization"] == "Bearer user-token"
    assert requests[1]["path"] == "/rest/v1/properties"
    assert requests[1]["headers"]["Authorization"] == f"Bearer {ANON_KEY}"


def test_upload_sends_bytes():
    async def scenario(store):
        return await store.upload("properties", "123-abc.jpg", b"jpeg", "image/jpeg")

    path, requests = run_async(with_backend(scenario))
    assert path == "123-abc.jpg"
    assert requests[0]["path"] == "/storage/v1/object/properties/123-abc.jpg"
    assert requests[0]["body"] == b"jpeg"
    assert requests[0]["headers"]["Content-Type"] == "image/jpeg"


def test_unfiltered_writes_are_refused():
    store = RestDataStore("https://project.example.co", ANON_KEY)
    with pytest.raises(StoreError):
        run_async(store.update("properties", {"title": "x"}, Query()))
    with pytest.raises(StoreError):
        run_async(store.delete("properties", Query()))


def test_missing_key_is_rejected():
    with pytest.raises(ValueError):
        RestDataStore("https://project.example.co", "")


def test_public_url():
    store = RestDataStore("https://project.example.co/", ANON_KEY)
    assert store.public_url("properties", "a.jpg") == \
        "https://project.example.co/storage/v1/object/public/properties/a.jpg"


def test_factory_backends(tmp_path):
    assert isinstance(create_store(StoreConfig(backend="memory")), InMemoryDataStore)
    assert isinstance(create_store(StoreConfig(backend="rest", anon_key=ANON_KEY)), RestDataStore)

    seed = tmp_path / "seed.json"
    seed.write_text(
        '{"properties": [{"id": "p-1", "title": "Casa"}],'
        ' "users": [{"email": "a@example.com", "password": "pw", "id": "u-1"}]}',
        encoding="utf-8",
    )
    store = create_store(StoreConfig(backend="memory", seed_file=str(seed)))
    assert [row["id"] for row in store.tables["properties"]] == ["p-1"]
    assert store.users["a@example.com"]["id"] == "u-1"

    with pytest.raises(ValueError):
        create_store(StoreConfig(backend="sqlite"))
