"""On-demand recipe synthesis.

synthesize(brief, count) runs one batch:
1. One gateway call asking for `count` recipes as a JSON array
2. Each element validated as a RecipeDraft; invalid elements are dropped
3. Images resolved for all drafts concurrently
4. Each recipe stored with provenance "ai"

Failure handling is per unit for images and inserts (one failure never
affects siblings) and per batch for the model call: no usable draft, or no
successful insert, raises SynthesisError.
"""

import asyncio
from typing import Any, Optional

from pydantic import ValidationError

from recipe_planner.gateway.gemini import LanguageModelGateway, ResponseShape
from recipe_planner.models.models import Recipe, RecipeDraft
from recipe_planner.prompts.prompts import get_recipe_generation_prompt
from recipe_planner.store.base import RecipeStore
from recipe_planner.tools.images import ImageResolver
from recipe_planner.utils.config import config
from recipe_planner.utils.errors import GatewayError, MalformedResponse, SynthesisError
from recipe_planner.utils.logger import logger
from recipe_planner.utils.resilience import safe_execute_async


def parse_drafts(raw_items: list[Any], count: int) -> list[RecipeDraft]:
    """Validate model output elements, keeping at most `count` valid drafts."""
    drafts = []
    for idx, item in enumerate(raw_items):
        if len(drafts) >= count:
            break
        try:
            drafts.append(RecipeDraft.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Discarding invalid generated recipe #{idx + 1}: {e.error_count()} validation errors")
    return drafts


class RecipeSynthesizer:
    def __init__(self, gateway: LanguageModelGateway, image_resolver: ImageResolver, store: RecipeStore) -> None:
        self.gateway = gateway
        self.image_resolver = image_resolver
        self.store = store

    async def _resolve_image(self, draft: RecipeDraft) -> str:
        url = await safe_execute_async(
            self.image_resolver.resolve(draft.title, draft.cuisine),
            f"Resolve image for '{draft.title}'",
            default_return=None,
        )
        return url or config.DEFAULT_RECIPE_IMAGE_URL

    async def _persist(self, recipe: Recipe) -> Optional[Recipe]:
        return await safe_execute_async(
            self.store.insert_recipe(recipe),
            f"Persist generated recipe '{recipe.title}'",
            log_level="error",
            default_return=None,
        )

    async def synthesize(self, brief: str, count: int, creator_id: Optional[str] = None) -> list[Recipe]:
        """Generate, illustrate and store up to `count` recipes for `brief`.

        Returns:
            Stored recipes (1..count), in model output order.

        Raises:
            SynthesisError: Model call failed, no valid draft, or every insert failed.
        """
        if count < 1:
            return []

        prompt = get_recipe_generation_prompt(brief, count)
        try:
            raw_items = await self.gateway.invoke(prompt, ResponseShape.ARRAY)
        except (GatewayError, MalformedResponse) as e:
            raise SynthesisError(f"Recipe generation failed: {e}") from e

        drafts = parse_drafts(raw_items, count)
        if not drafts:
            raise SynthesisError(f"Model returned no valid recipes out of {len(raw_items)}")

        image_urls = await asyncio.gather(*(self._resolve_image(draft) for draft in drafts))

        creator = creator_id or config.SYSTEM_CREATOR_ID
        recipes = [draft.to_recipe(image_url=url, created_by=creator) for draft, url in zip(drafts, image_urls)]
        stored = await asyncio.gather(*(self._persist(recipe) for recipe in recipes))

        saved = [recipe for recipe in stored if recipe is not None]
        if not saved:
            raise SynthesisError(f"Failed to store any of {len(recipes)} generated recipes")

        logger.info(f"Synthesized {len(saved)}/{count} recipes", extra={"query": brief})
        return saved
