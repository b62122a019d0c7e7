"""Collaborator interfaces: recipe/meal plan persistence and user profiles.

The pipeline only depends on these protocols. Implementations raise
StoreError for persistence failures; ProfileProvider raises LookupError for
unknown users.
"""

from typing import Optional, Protocol, runtime_checkable

from recipe_planner.models.models import DietaryConstraints, MealPlan, Recipe, RecipeFilter


@runtime_checkable
class RecipeStore(Protocol):
    async def find_recipes(self, recipe_filter: RecipeFilter) -> list[Recipe]:
        """Recipes matching the filter, ranked by relevance then most recent first."""
        ...

    async def count_recipes(self, recipe_filter: RecipeFilter) -> int:
        """Number of recipes matching the filter, ignoring limit/skip."""
        ...

    async def get_recipe(self, recipe_id: str) -> Optional[Recipe]: ...

    async def insert_recipe(self, recipe: Recipe) -> Recipe:
        """Persist a recipe and return the stored copy."""
        ...


@runtime_checkable
class MealPlanStore(Protocol):
    async def find_plan(self, plan_id: str) -> Optional[MealPlan]: ...

    async def find_plans(self, owner_id: str, generated_by_ai: Optional[bool] = None) -> list[MealPlan]:
        """Plans owned by `owner_id`, newest first; optionally filtered by AI flag."""
        ...

    async def insert_plan(self, plan: MealPlan) -> MealPlan: ...

    async def update_plan(self, plan: MealPlan) -> MealPlan: ...


@runtime_checkable
class ProfileProvider(Protocol):
    async def get_dietary_constraints(self, user_id: str) -> DietaryConstraints:
        """Constraints for `user_id`. Raises LookupError when the user is unknown."""
        ...
