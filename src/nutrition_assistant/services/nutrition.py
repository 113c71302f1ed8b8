"""Nutrition service integrating USDA FDC."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from nutrition_assistant.adapters.fdc_client import NUTRIENT_IDS, FdcClient
from nutrition_assistant.domain.nutrition import FoodItem, NutrientVector
from nutrition_assistant.services.aggregation import round_field
from nutrition_assistant.services.cache import Cache

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class NutritionService:
    """Service for food database lookups with caching."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[FoodItem]:
        """Search FDC foods with caching."""
        cache_key = f"fdc:search:{query.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = [parse_food(food) for food in payload.get("foods", [])]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Nutrition search FDC: query=%s results=%s", query, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> FoodItem | None:
        """Retrieve a food by FDC id, or None when it is unknown."""
        cached = self.cache.get(_food_key(fdc_id))
        if isinstance(cached, FoodItem):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        if payload is None:
            return None
        food = parse_food(payload)
        self.cache.set(_food_key(fdc_id), food, ttl_seconds=self.food_ttl_seconds)
        return food

    async def get_foods(self, fdc_ids: list[int]) -> list[FoodItem]:
        """Retrieve several foods; unknown ids are left out of the result."""
        found: dict[int, FoodItem] = {}
        missing: list[int] = []
        for fdc_id in dict.fromkeys(fdc_ids):
            cached = self.cache.get(_food_key(fdc_id))
            if isinstance(cached, FoodItem):
                found[fdc_id] = cached
            else:
                missing.append(fdc_id)

        if missing:
            payload = await self._call_with_retry(
                lambda: self.fdc_client.get_foods(missing),
                action=f"get_foods:{len(missing)}",
            )
            for raw in payload:
                food = parse_food(raw)
                found[food.fdc_id] = food
                self.cache.set(
                    _food_key(food.fdc_id), food, ttl_seconds=self.food_ttl_seconds
                )
        if self.debug:
            _logger.info(
                "Nutrition foods FDC: requested=%s fetched=%s found=%s",
                len(fdc_ids),
                len(missing),
                len(found),
            )
        return [found[fdc_id] for fdc_id in dict.fromkeys(fdc_ids) if fdc_id in found]

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[Any]]", *, action: str
    ) -> Any:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                _logger.warning(
                    "Nutrition %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    status_code,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def parse_food(payload: dict[str, object]) -> FoodItem:
    """Build a food item from an FDC search hit or food detail payload."""
    return FoodItem(
        fdc_id=int(payload["fdcId"]),
        description=str(payload.get("description", "")),
        brand_name=payload.get("brandName"),
        serving_size=payload.get("servingSize") or 100,
        serving_size_unit=payload.get("servingSizeUnit") or "g",
        nutrition=_extract_nutrition(payload.get("foodNutrients", [])),
    )


def _food_key(fdc_id: int) -> str:
    return f"fdc:food:{fdc_id}"


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _extract_nutrition(food_nutrients: list[dict[str, object]]) -> NutrientVector:
    """Extract calories and macros from FDC nutrients.

    Search hits carry ``nutrientId``/``value`` while food details nest the id
    under ``nutrient`` and use ``amount``. Missing nutrients count as zero.
    """
    amounts: dict[int, float] = {}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        if nutrient_id is not None and amount is not None:
            amounts.setdefault(int(nutrient_id), float(amount))

    values = {
        name: round_field(name, amounts.get(nutrient_id, 0.0))
        for name, nutrient_id in NUTRIENT_IDS.items()
    }
    return NutrientVector(**values)
