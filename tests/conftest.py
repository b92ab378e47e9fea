import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import httpx
import pytest


# Add project root to path
root = Path(__file__).resolve().parents[1]
project_root = str(root)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from catalog_browser.core.models import CatalogItem  # noqa: E402
from catalog_browser.integrations.catalog_api.client import CatalogClient  # noqa: E402


BASE_URL = "https://catalog.test/api/v2/pokemon"

POKEMON = [
    "bulbasaur", "ivysaur", "venusaur", "charmander", "charmeleon",
    "charizard", "squirtle", "wartortle", "blastoise", "caterpie",
    "metapod", "butterfree", "weedle", "kakuna", "beedrill",
    "pidgey", "pidgeotto", "pidgeot", "rattata", "raticate",
]  # fmt: skip

TYPES = {
    "bulbasaur": ["grass", "poison"],
    "charmander": ["fire"],
    "charizard": ["fire", "flying"],
    "squirtle": ["water"],
    "pidgey": ["normal", "flying"],
}


def item_url(name: str) -> str:
    return f"{BASE_URL}/{name}/"


def make_items(*names: str) -> list[CatalogItem]:
    return [CatalogItem(name=name, url=item_url(name)) for name in names]


@dataclass
class FakeCatalog:
    """In-memory PokeAPI-shaped catalog served through httpx.MockTransport."""

    names: list[str] = field(default_factory=lambda: list(POKEMON))
    limit: int = 10
    failing_urls: set[str] = field(default_factory=set)
    status_on_failure: int = 500
    broken_transport_urls: set[str] = field(default_factory=set)
    requests: Counter = field(default_factory=Counter)

    def page_url(self, offset: int) -> str:
        return f"{BASE_URL}?offset={offset}&limit={self.limit}"

    def list_payload(self, offset: int) -> dict:
        chunk = self.names[offset : offset + self.limit]
        next_offset = offset + self.limit
        return {
            "count": len(self.names),
            "next": self.page_url(next_offset) if next_offset < len(self.names) else None,
            "previous": None,
            "results": [{"name": name, "url": item_url(name)} for name in chunk],
        }

    def detail_payload(self, name: str) -> dict:
        types = TYPES.get(name, ["normal"])
        return {
            "name": name,
            "types": [{"slot": i + 1, "type": {"name": t, "url": "..."}} for i, t in enumerate(types)],
            "sprites": {"front_default": f"https://img.test/{name}.png"},
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests[url] += 1

        if url in self.broken_transport_urls:
            raise httpx.ConnectError("connection refused", request=request)
        if url in self.failing_urls:
            return httpx.Response(self.status_on_failure, json={"detail": "boom"})

        path = request.url.path.rstrip("/")
        if path == urlparse(BASE_URL).path:
            query = parse_qs(request.url.query.decode())
            offset = int(query.get("offset", ["0"])[0])
            return httpx.Response(200, json=self.list_payload(offset))

        name = path.rsplit("/", 1)[-1]
        if name in self.names:
            return httpx.Response(200, json=self.detail_payload(name))
        return httpx.Response(404, json={"detail": "Not found."})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def detail_calls(self, name: str) -> int:
        return self.requests[item_url(name)]

    @property
    def list_calls(self) -> int:
        return sum(count for url, count in self.requests.items() if "/pokemon/" not in url)


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def catalog_client(fake_catalog: FakeCatalog) -> CatalogClient:
    return CatalogClient(BASE_URL, transport=fake_catalog.transport(), max_retries=0)
