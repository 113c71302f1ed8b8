"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_DATA_TYPES = "Foundation,SR Legacy,Branded,Survey (FNDDS)"
NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "carbs": 1005,
    "fat": 1004,
    "fiber": 1079,
    "sugar": 2000,
    "sodium": 1093,
}


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    async def get_food(self, fdc_id: int) -> dict[str, object] | None:
        """Fetch a food by FDC id, or None when it does not exist."""

    async def get_foods(self, fdc_ids: list[int]) -> list[dict[str, object]]:
        """Fetch several foods in one request."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Search foods by query."""
        response = await self.http_client.get(
            f"{self.base_url}/foods/search",
            params={
                "api_key": self.api_key,
                "query": query,
                "pageSize": page_size,
                "dataType": SEARCH_DATA_TYPES,
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def get_food(self, fdc_id: int) -> dict[str, object] | None:
        """Fetch a food by FDC id."""
        response = await self.http_client.get(
            f"{self.base_url}/food/{fdc_id}",
            params={"api_key": self.api_key, "nutrients": _nutrient_param()},
            timeout=15,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return response.json()

    async def get_foods(self, fdc_ids: list[int]) -> list[dict[str, object]]:
        """Fetch several foods by FDC id."""
        if not fdc_ids:
            return []
        response = await self.http_client.post(
            f"{self.base_url}/foods",
            params={"api_key": self.api_key, "nutrients": _nutrient_param()},
            json={"fdcIds": fdc_ids},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _nutrient_param() -> str:
    return ",".join(str(nutrient_id) for nutrient_id in NUTRIENT_IDS.values())
