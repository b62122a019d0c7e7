"""In-memory implementations of the store and profile collaborators.

Used for local runs (seeded from store/seed.py) and tests. Records are
deep-copied on the way in and out so callers never mutate stored state.
"""

from typing import Optional

from recipe_planner.models.models import DietaryConstraints, MealPlan, Recipe, RecipeFilter
from recipe_planner.utils.errors import StoreError
from recipe_planner.utils.logger import logger


def _matched_terms(recipe: Recipe, terms: list[str]) -> int:
    """Number of search terms found in the recipe's ingredient names."""
    names = recipe.ingredient_names()
    matched = 0
    for term in terms:
        term = term.lower().strip()
        if term and any(term in name or name in term for name in names):
            matched += 1
    return matched


def _matches(recipe: Recipe, recipe_filter: RecipeFilter) -> bool:
    if recipe_filter.cuisine and recipe.cuisine != recipe_filter.cuisine.lower():
        return False
    if recipe_filter.difficulty and recipe.difficulty != recipe_filter.difficulty.lower():
        return False
    if recipe_filter.max_cooking_time and recipe.cooking_time > recipe_filter.max_cooking_time:
        return False

    tags = set(recipe.dietary_tags)
    if recipe_filter.dietary_tags and not set(t.lower() for t in recipe_filter.dietary_tags) <= tags:
        return False
    if recipe_filter.any_dietary_tags and not tags & set(t.lower() for t in recipe_filter.any_dietary_tags):
        return False

    if recipe_filter.text:
        needle = recipe_filter.text.lower().strip()
        if needle not in recipe.title.lower() and needle not in recipe.description.lower():
            return False
    if recipe_filter.ingredient_terms and _matched_terms(recipe, recipe_filter.ingredient_terms) == 0:
        return False
    return True


class InMemoryRecipeStore:
    """Dict-backed RecipeStore."""

    def __init__(self, recipes: Optional[list[Recipe]] = None) -> None:
        self._recipes: dict[str, Recipe] = {}
        for recipe in recipes or []:
            self._recipes[recipe.id] = recipe.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._recipes)

    def _select(self, recipe_filter: RecipeFilter) -> list[Recipe]:
        matches = [recipe for recipe in self._recipes.values() if _matches(recipe, recipe_filter)]
        # Most recent first; stable sort keeps that order within equal relevance
        matches.sort(key=lambda r: r.created_at, reverse=True)
        if recipe_filter.ingredient_terms:
            matches.sort(key=lambda r: _matched_terms(r, recipe_filter.ingredient_terms), reverse=True)
        return matches

    async def find_recipes(self, recipe_filter: RecipeFilter) -> list[Recipe]:
        matches = self._select(recipe_filter)
        start = recipe_filter.skip
        end = start + recipe_filter.limit if recipe_filter.limit else None
        return [recipe.model_copy(deep=True) for recipe in matches[start:end]]

    async def count_recipes(self, recipe_filter: RecipeFilter) -> int:
        return len(self._select(recipe_filter))

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        recipe = self._recipes.get(recipe_id)
        return recipe.model_copy(deep=True) if recipe else None

    async def insert_recipe(self, recipe: Recipe) -> Recipe:
        if recipe.id in self._recipes:
            raise StoreError(f"Recipe with id {recipe.id} already exists")
        self._recipes[recipe.id] = recipe.model_copy(deep=True)
        logger.debug(f"Stored recipe '{recipe.title}' ({recipe.id}, provenance={recipe.provenance})")
        return recipe.model_copy(deep=True)


class InMemoryMealPlanStore:
    """Dict-backed MealPlanStore."""

    def __init__(self) -> None:
        self._plans: dict[str, MealPlan] = {}

    async def find_plan(self, plan_id: str) -> Optional[MealPlan]:
        plan = self._plans.get(plan_id)
        return plan.model_copy(deep=True) if plan else None

    async def find_plans(self, owner_id: str, generated_by_ai: Optional[bool] = None) -> list[MealPlan]:
        plans = [
            plan
            for plan in self._plans.values()
            if plan.owner_id == owner_id and (generated_by_ai is None or plan.generated_by_ai == generated_by_ai)
        ]
        plans.sort(key=lambda p: p.created_at, reverse=True)
        return [plan.model_copy(deep=True) for plan in plans]

    async def insert_plan(self, plan: MealPlan) -> MealPlan:
        if plan.id in self._plans:
            raise StoreError(f"Meal plan with id {plan.id} already exists")
        self._plans[plan.id] = plan.model_copy(deep=True)
        return plan.model_copy(deep=True)

    async def update_plan(self, plan: MealPlan) -> MealPlan:
        if plan.id not in self._plans:
            raise StoreError(f"Meal plan {plan.id} does not exist")
        self._plans[plan.id] = plan.model_copy(deep=True)
        return plan.model_copy(deep=True)


class InMemoryProfileStore:
    """Dict-backed ProfileProvider."""

    def __init__(self, profiles: Optional[dict[str, DietaryConstraints]] = None) -> None:
        self._profiles: dict[str, DietaryConstraints] = dict(profiles or {})

    def set_profile(self, user_id: str, constraints: DietaryConstraints) -> None:
        self._profiles[user_id] = constraints

    async def get_dietary_constraints(self, user_id: str) -> DietaryConstraints:
        try:
            return self._profiles[user_id].model_copy(deep=True)
        except KeyError:
            raise LookupError(f"User {user_id} not found") from None
