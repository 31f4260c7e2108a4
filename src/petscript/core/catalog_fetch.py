"""
Fetch the name catalog from the Blizzard game data API.

Uses the OAuth client-credentials flow, then reads the pet index and the pet
ability index and keeps only ``id -> name``.

Example::

    async with httpx.AsyncClient() as client:
        fetcher = CatalogFetcher(client_id, client_secret, client=client)
        catalog = await fetcher.fetch_catalog()
    write_catalog(catalog, Path("pet-abilities.json"), Path("pet-list.json"))
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import FetchError
from .names import NameCatalog

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth.battle.net/token"
API_URL_TEMPLATE = "https://{region}.api.blizzard.com"


class CatalogFetcher:
    """Reads pet and pet-ability indexes from the game data API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        region: str = "us",
        locale: str = "en_US",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.region = region
        self.locale = locale
        self._client = client
        self.timeout = timeout

    @property
    def api_url(self) -> str:
        return API_URL_TEMPLATE.format(region=self.region)

    async def _request(
        self, client: httpx.AsyncClient, method: str, url: str, what: str, **kwargs: Any
    ) -> Any:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise FetchError(f"{what} failed: {e}") from e

        if response.status_code != 200:
            raise FetchError(
                f"{what} failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                f"{what} failed: response is not JSON", status_code=response.status_code
            ) from e

    async def get_access_token(self, client: httpx.AsyncClient) -> str:
        payload = await self._request(
            client,
            "POST",
            TOKEN_URL,
            "Auth",
            data={"grant_type": "client_credentials"},
            auth=httpx.BasicAuth(self.client_id, self.client_secret),
        )
        if not isinstance(payload, dict) or "access_token" not in payload:
            raise FetchError("Auth failed: response has no access_token")
        return str(payload["access_token"])

    async def _fetch_index(self, client: httpx.AsyncClient, token: str, path: str, what: str) -> Any:
        return await self._request(
            client,
            "GET",
            f"{self.api_url}{path}",
            what,
            params={"namespace": f"static-{self.region}", "locale": self.locale},
            headers={"Authorization": f"Bearer {token}"},
        )

    async def fetch_pet_index(self, client: httpx.AsyncClient, token: str) -> dict[str, Any]:
        return await self._fetch_index(client, token, "/data/wow/pet/index", "Pet index fetch")

    async def fetch_ability_index(self, client: httpx.AsyncClient, token: str) -> dict[str, Any]:
        return await self._fetch_index(
            client, token, "/data/wow/pet-ability/index", "Pet ability index fetch"
        )

    async def fetch_catalog(self) -> NameCatalog:
        """
        Fetch both indexes and build a NameCatalog.

        Raises:
            FetchError: On transport errors or any non-200 response
        """
        if self._client is not None:
            return await self._fetch_catalog(self._client)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._fetch_catalog(client)

    async def _fetch_catalog(self, client: httpx.AsyncClient) -> NameCatalog:
        logger.info("Getting access token...")
        token = await self.get_access_token(client)

        logger.info("Fetching pet index...")
        pet_index = await self.fetch_pet_index(client, token)
        pets = _id_name_map(pet_index, "pets")
        logger.info("Found %d pets", len(pets))

        logger.info("Fetching pet ability index...")
        ability_index = await self.fetch_ability_index(client, token)
        abilities = _id_name_map(ability_index, "abilities")
        logger.info("Found %d abilities", len(abilities))

        return NameCatalog(abilities=abilities, pets=pets)


def _id_name_map(index: dict[str, Any], key: str) -> dict[str, str]:
    entries = index.get(key) if isinstance(index, dict) else None
    if not isinstance(entries, list):
        raise FetchError(f"Unexpected index payload: missing '{key}' list")
    names: dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, dict) or "id" not in entry or "name" not in entry:
            raise FetchError(f"Unexpected index payload: '{key}' entry without id and name")
        names[str(entry["id"])] = str(entry["name"])
    return names
