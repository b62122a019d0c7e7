"""Deterministic catalog search over the recipe store.

No model calls happen here. A StructuredQuery becomes a RecipeFilter:
- cuisine, difficulty, dietary restrictions (all required) and a
  cooking-time upper bound always constrain the result
- with ingredients: full-text match over ingredient names, ranked by how
  many ingredients matched, then most recent
- without ingredients: case-insensitive substring of the raw text over
  title and description, most recent first
"""

import math
from typing import Any, Optional

from recipe_planner.models.models import Recipe, RecipeFilter, RecipePage, StructuredQuery
from recipe_planner.store.base import RecipeStore
from recipe_planner.utils.config import config
from recipe_planner.utils.errors import StoreError
from recipe_planner.utils.logger import logger


def build_filter(structured_query: StructuredQuery, raw_text: str, limit: Optional[int] = None) -> RecipeFilter:
    """Translate an interpreted query into a store filter."""
    recipe_filter = RecipeFilter(
        cuisine=structured_query.cuisine,
        difficulty=structured_query.difficulty,
        dietary_tags=structured_query.dietary_restrictions,
        max_cooking_time=structured_query.cooking_time,
        limit=limit or config.SEARCH_RESULT_LIMIT,
    )
    if structured_query.ingredients:
        recipe_filter.ingredient_terms = structured_query.ingredients
    elif raw_text.strip():
        recipe_filter.text = raw_text.strip()
    return recipe_filter


class CatalogSearch:
    def __init__(self, store: RecipeStore) -> None:
        self.store = store

    async def search(self, structured_query: StructuredQuery, raw_text: str) -> list[Recipe]:
        """Recipes matching the interpreted query, at most SEARCH_RESULT_LIMIT.

        Raises:
            StoreError: The store failed. Callers decide whether that means zero results.
        """
        recipe_filter = build_filter(structured_query, raw_text)
        try:
            recipes = await self.store.find_recipes(recipe_filter)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Catalog search failed: {e}") from e

        logger.debug(f"Catalog search matched {len(recipes)} recipes", extra={"query": raw_text})
        return recipes[: config.SEARCH_RESULT_LIMIT]

    async def browse(
        self,
        cuisine: Optional[str] = None,
        difficulty: Optional[str] = None,
        dietary_tags: Optional[list[str]] = None,
        max_cooking_time: Optional[int] = None,
        page: int = 1,
        limit: int = 12,
    ) -> RecipePage:
        """Filter-only listing, most recent first, paginated."""
        if page < 1:
            raise ValueError(f"page must be at least 1, got: {page}")
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got: {limit}")

        recipe_filter = RecipeFilter(
            cuisine=cuisine,
            difficulty=difficulty,
            dietary_tags=dietary_tags or [],
            max_cooking_time=max_cooking_time,
        )
        total = await self.store.count_recipes(recipe_filter)

        recipe_filter.limit = limit
        recipe_filter.skip = (page - 1) * limit
        recipes = await self.store.find_recipes(recipe_filter)
        return RecipePage(recipes=recipes, total=total, page=page, pages=math.ceil(total / limit))

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return await self.store.get_recipe(recipe_id)

    async def submit_recipe(self, data: dict[str, Any], creator_id: str) -> Recipe:
        """Validate and store a user-authored recipe.

        Raises:
            pydantic.ValidationError: (a ValueError) when the recipe data is invalid.
        """
        payload = {key: value for key, value in data.items() if key not in ("id", "provenance", "created_at", "createdAt")}
        payload.pop("createdBy", None)
        payload["created_by"] = creator_id
        payload["provenance"] = "user"
        recipe = Recipe.model_validate(payload)
        stored = await self.store.insert_recipe(recipe)
        logger.info(f"Recipe '{stored.title}' submitted", extra={"user_id": creator_id})
        return stored
