"""Optional culinary helpers: substitutions, explanations, dietary checks.

All three are fail-open. A model failure returns a conservative fallback
instead of raising, since none of them gate a search or a plan.
"""

from typing import Sequence

from pydantic import ValidationError

from recipe_planner.gateway.gemini import LanguageModelGateway, ResponseShape
from recipe_planner.models.models import DietaryValidation, Recipe, RecipeExplanation, Substitution
from recipe_planner.prompts.prompts import (
    get_dietary_validation_prompt,
    get_explanation_prompt,
    get_substitution_prompt,
)
from recipe_planner.utils.errors import GatewayError, MalformedResponse
from recipe_planner.utils.logger import logger

MAX_SUBSTITUTIONS = 5


class CulinaryAssistant:
    def __init__(self, gateway: LanguageModelGateway) -> None:
        self.gateway = gateway

    async def suggest_substitutions(
        self, ingredient: str, dietary_restrictions: Sequence[str] = (), recipe_title: str = ""
    ) -> list[Substitution]:
        if not ingredient or not ingredient.strip():
            raise ValueError("Ingredient is required")

        prompt = get_substitution_prompt(ingredient.strip(), list(dietary_restrictions), recipe_title)
        try:
            raw_items = await self.gateway.invoke(prompt, ResponseShape.ARRAY)
        except (GatewayError, MalformedResponse) as e:
            logger.warning(f"Substitution lookup failed for '{ingredient}': {e}")
            return []

        substitutions = []
        for item in raw_items[:MAX_SUBSTITUTIONS]:
            try:
                substitutions.append(Substitution.model_validate(item))
            except ValidationError:
                logger.debug(f"Skipping malformed substitution: {item!r}")
        return substitutions

    async def explain_recipe(self, recipe: Recipe) -> RecipeExplanation:
        """Beginner-friendly walkthrough; falls back to the recipe's own steps."""
        try:
            parsed = await self.gateway.invoke(get_explanation_prompt(recipe), ResponseShape.OBJECT)
            return RecipeExplanation.model_validate(parsed)
        except (GatewayError, MalformedResponse, ValidationError) as e:
            logger.warning(f"Recipe explanation failed for '{recipe.title}': {e}")
            return RecipeExplanation(simplified_steps=list(recipe.instructions), tips=[])

    async def validate_dietary_restrictions(self, recipe: Recipe, restrictions: Sequence[str]) -> DietaryValidation:
        """Check a recipe against restrictions. No restrictions means valid, without a model call."""
        if not restrictions:
            return DietaryValidation(is_valid=True)

        prompt = get_dietary_validation_prompt(recipe, list(restrictions))
        try:
            parsed = await self.gateway.invoke(prompt, ResponseShape.OBJECT)
            return DietaryValidation.model_validate(parsed)
        except (GatewayError, MalformedResponse, ValidationError) as e:
            logger.warning(f"Dietary validation failed for '{recipe.title}': {e}")
            return DietaryValidation(
                is_valid=True,
                warnings=["Unable to validate dietary restrictions"],
                alternatives=[],
            )
