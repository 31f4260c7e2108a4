"""Tests for the game data API catalog fetcher."""

import httpx
import pytest

from petscript.core.catalog_fetch import CatalogFetcher
from petscript.core.errors import FetchError


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "oauth.battle.net":
        assert request.headers["authorization"].startswith("Basic ")
        return httpx.Response(200, json={"access_token": "tok", "token_type": "bearer"})

    assert request.headers["authorization"] == "Bearer tok"
    assert request.url.params["namespace"] == "static-eu"
    assert request.url.params["locale"] == "en_GB"
    if request.url.path == "/data/wow/pet/index":
        return httpx.Response(200, json={"pets": [{"id": 1532, "name": "Ikky"}]})
    if request.url.path == "/data/wow/pet-ability/index":
        return httpx.Response(
            200,
            json={"abilities": [{"id": 595, "name": "Moonfire"}, {"id": 218, "name": "Rampage"}]},
        )
    return httpx.Response(404, text="not found")


class TestCatalogFetcher:
    @pytest.mark.asyncio
    async def test_fetch_catalog(self) -> None:
        async with httpx.AsyncClient(transport=httpx.MockTransport(_handler)) as client:
            fetcher = CatalogFetcher("id", "secret", region="eu", locale="en_GB", client=client)
            catalog = await fetcher.fetch_catalog()
        assert catalog.pets == {"1532": "Ikky"}
        assert catalog.abilities == {"595": "Moonfire", "218": "Rampage"}

    def test_api_url(self) -> None:
        assert CatalogFetcher("id", "secret", region="kr").api_url == "https://kr.api.blizzard.com"

    @pytest.mark.asyncio
    async def test_auth_failure(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="bad client"))
        async with httpx.AsyncClient(transport=transport) as client:
            fetcher = CatalogFetcher("id", "wrong", client=client)
            with pytest.raises(FetchError, match="Auth failed") as exc_info:
                await fetcher.fetch_catalog()
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            fetcher = CatalogFetcher("id", "secret", client=client)
            with pytest.raises(FetchError, match="offline"):
                await fetcher.fetch_catalog()

    @pytest.mark.asyncio
    async def test_unexpected_payload(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "oauth.battle.net":
                return httpx.Response(200, json={"access_token": "tok"})
            return httpx.Response(200, json={"results": []})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            fetcher = CatalogFetcher("id", "secret", client=client)
            with pytest.raises(FetchError, match="missing 'pets'"):
                await fetcher.fetch_catalog()

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html>maintenance</html>")
        )
        async with httpx.AsyncClient(transport=transport) as client:
            fetcher = CatalogFetcher("id", "secret", client=client)
            with pytest.raises(FetchError, match="not JSON") as exc_info:
                await fetcher.fetch_catalog()
        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_token_missing(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"error": "unsupported_grant_type"})
        )
        async with httpx.AsyncClient(transport=transport) as client:
            fetcher = CatalogFetcher("id", "secret", client=client)
            with pytest.raises(FetchError, match="no access_token"):
                await fetcher.fetch_catalog()

    @pytest.mark.asyncio
    async def test_entry_without_name(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "oauth.battle.net":
                return httpx.Response(200, json={"access_token": "tok"})
            return httpx.Response(200, json={"pets": [{"id": 1532}]})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            fetcher = CatalogFetcher("id", "secret", client=client)
            with pytest.raises(FetchError, match="entry without id and name"):
                await fetcher.fetch_catalog()
