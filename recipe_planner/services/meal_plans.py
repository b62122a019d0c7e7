"""Meal plan assembly and personal plan operations.

MealPlanAssembler asks the model to place corpus recipes into breakfast,
lunch and dinner slots, then checks every returned id against the corpus.
Ids the model invented are nulled, never replaced, and the plan is forced to
exactly `days` entries.

MealPlanService wires the assembler to the profile and store collaborators
and adds the manual "personal plan" operations.
"""

from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from recipe_planner.gateway.gemini import LanguageModelGateway, ResponseShape
from recipe_planner.models.models import (
    MEAL_SLOTS,
    WEEKDAYS,
    DayMeal,
    DietaryConstraints,
    MealPlan,
    Recipe,
    RecipeFilter,
    utcnow,
)
from recipe_planner.prompts.prompts import get_meal_plan_prompt
from recipe_planner.store.base import MealPlanStore, ProfileProvider, RecipeStore
from recipe_planner.utils.config import config
from recipe_planner.utils.errors import GatewayError, GenerationError, InsufficientCorpus, MalformedResponse
from recipe_planner.utils.logger import logger

AI_PLAN_TITLE = "AI Generated Meal Plan"
PERSONAL_PLAN_TITLE = "My Personal Meal Plan"
SNACK_TYPES = ("snack", "snacks")
PLAN_IDENTITY_FIELDS = ("id", "owner_id", "created_at")


class MealPlanAssembler:
    def __init__(self, gateway: LanguageModelGateway) -> None:
        self.gateway = gateway

    @staticmethod
    def _known_id(value: Any, corpus_ids: set[str]) -> Optional[str]:
        if isinstance(value, str) and value.strip() in corpus_ids:
            return value.strip()
        return None

    def normalize(self, raw_days: list[Any], days: int, corpus_ids: set[str]) -> list[DayMeal]:
        """Coerce model output into exactly `days` DayMeal entries with corpus-only ids."""
        if len(raw_days) != days:
            logger.warning(f"Meal plan returned {len(raw_days)} days, expected {days}; adjusting")

        meals: list[DayMeal] = []
        nulled = 0
        for position in range(days):
            fallback_day = WEEKDAYS[position % len(WEEKDAYS)]
            entry = raw_days[position] if position < len(raw_days) else None
            if not isinstance(entry, dict):
                meals.append(DayMeal(day=fallback_day))
                continue

            label = entry.get("day")
            label = label.strip().capitalize() if isinstance(label, str) else ""
            if label not in WEEKDAYS:
                label = fallback_day

            slots: dict[str, Optional[str]] = {}
            for slot in MEAL_SLOTS:
                raw_id = entry.get(f"{slot}Id", entry.get(slot))
                slots[slot] = self._known_id(raw_id, corpus_ids)
                if raw_id is not None and slots[slot] is None:
                    nulled += 1
            meals.append(DayMeal(day=label, **slots))

        if nulled:
            logger.warning(f"Nulled {nulled} meal slots referencing recipes outside the corpus")
        return meals

    async def assemble(self, constraints: DietaryConstraints, days: int, corpus: Sequence[Recipe]) -> list[DayMeal]:
        """Assign corpus recipes to each day's slots.

        Raises:
            InsufficientCorpus: Corpus is empty (no model call is made).
            GenerationError: Model call failed after retries or returned unusable output.
        """
        if not corpus:
            raise InsufficientCorpus("No recipes available to build a meal plan")

        prompt = get_meal_plan_prompt(constraints, days, corpus)
        try:
            raw_days = await self.gateway.invoke(prompt, ResponseShape.ARRAY)
        except (GatewayError, MalformedResponse) as e:
            raise GenerationError(f"Meal plan generation failed: {e}") from e

        return self.normalize(raw_days, days, {recipe.id for recipe in corpus})


class MealPlanService:
    def __init__(
        self,
        assembler: MealPlanAssembler,
        recipes: RecipeStore,
        plans: MealPlanStore,
        profiles: ProfileProvider,
    ) -> None:
        self.assembler = assembler
        self.recipes = recipes
        self.plans = plans
        self.profiles = profiles

    async def select_corpus(self, constraints: DietaryConstraints) -> list[Recipe]:
        """Recipes tagged with any of the user's restrictions, or the whole catalog if too few."""
        corpus: list[Recipe] = []
        if constraints.dietary_restrictions:
            corpus = await self.recipes.find_recipes(RecipeFilter(any_dietary_tags=constraints.dietary_restrictions))
        if len(corpus) < config.MIN_PLAN_CORPUS:
            logger.debug(f"Only {len(corpus)} recipes match restrictions, planning from the full catalog")
            corpus = await self.recipes.find_recipes(RecipeFilter())
        return corpus

    async def assemble_plan(self, user_id: str, days: int = 7, title: str = AI_PLAN_TITLE) -> MealPlan:
        """Generate and store an AI meal plan for `user_id`.

        Raises:
            ValueError: `days` outside 1..MAX_PLAN_DAYS.
            LookupError: Unknown user.
            InsufficientCorpus / GenerationError: From the assembler.
        """
        if not 1 <= days <= config.MAX_PLAN_DAYS:
            raise ValueError(f"days must be between 1 and {config.MAX_PLAN_DAYS}, got: {days}")

        constraints = await self.profiles.get_dietary_constraints(user_id)
        corpus = await self.select_corpus(constraints)
        if len(corpus) < days * len(MEAL_SLOTS):
            logger.info(f"{len(corpus)} recipes for {days * len(MEAL_SLOTS)} meals, some will repeat")

        meals = await self.assembler.assemble(constraints, days, corpus)

        start = utcnow()
        plan = MealPlan(
            owner_id=user_id,
            title=title,
            start_date=start,
            end_date=start + timedelta(days=days),
            meals=meals,
            generated_by_ai=True,
        )
        stored = await self.plans.insert_plan(plan)
        logger.info(f"Generated {days}-day meal plan", extra={"user_id": user_id, "plan_id": stored.id})
        return stored

    async def get_personal_plan(self, user_id: str) -> Optional[MealPlan]:
        """Latest manually built plan, or None."""
        plans = await self.plans.find_plans(user_id, generated_by_ai=False)
        return plans[0] if plans else None

    async def _create_personal_plan(self, user_id: str) -> MealPlan:
        start = utcnow()
        plan = MealPlan(
            owner_id=user_id,
            title=PERSONAL_PLAN_TITLE,
            start_date=start,
            end_date=start + timedelta(days=len(WEEKDAYS)),
            meals=[DayMeal(day=day) for day in WEEKDAYS],
            generated_by_ai=False,
        )
        return await self.plans.insert_plan(plan)

    async def add_to_personal_plan(self, user_id: str, recipe_id: str, day: str, meal_type: str) -> MealPlan:
        """Put `recipe_id` into one slot of the user's personal plan, creating the plan if needed.

        Raises:
            ValueError: Missing arguments, unknown recipe, day or meal type.
        """
        if not recipe_id or not day or not meal_type:
            raise ValueError("Recipe ID, day, and meal type are required")

        slot = meal_type.strip().lower()
        if slot not in MEAL_SLOTS and slot not in SNACK_TYPES:
            raise ValueError(f"Invalid meal type: {meal_type}")
        if day.strip().capitalize() not in WEEKDAYS:
            raise ValueError(f"Invalid day: {day}")
        if await self.recipes.get_recipe(recipe_id) is None:
            raise ValueError(f"Recipe {recipe_id} not found")

        plan = await self.get_personal_plan(user_id)
        if plan is None:
            plan = await self._create_personal_plan(user_id)

        day_meal = plan.find_day(day)
        if day_meal is None:
            raise ValueError(f"Invalid day: {day}")

        if slot in SNACK_TYPES:
            day_meal.snacks.append(recipe_id)
        else:
            setattr(day_meal, slot, recipe_id)

        updated = await self.plans.update_plan(plan)
        logger.info(f"Added recipe {recipe_id} to {day_meal.day} {slot}", extra={"user_id": user_id, "recipe_id": recipe_id})
        return updated

    async def list_plans(self, user_id: str) -> list[MealPlan]:
        return await self.plans.find_plans(user_id)

    async def get_plan(self, plan_id: str, user_id: str) -> MealPlan:
        """Fetch a plan the user owns.

        Raises:
            LookupError: No such plan.
            PermissionError: Plan belongs to another user.
        """
        plan = await self.plans.find_plan(plan_id)
        if plan is None:
            raise LookupError(f"Meal plan {plan_id} not found")
        if plan.owner_id != user_id:
            raise PermissionError("Not authorized to access this meal plan")
        return plan

    async def create_plan(
        self,
        user_id: str,
        title: str,
        start_date: datetime,
        end_date: datetime,
        meals: Sequence[Union[DayMeal, dict[str, Any]]],
    ) -> MealPlan:
        """Store a manually built plan.

        Raises:
            ValueError: Invalid title, date range or meals.
        """
        try:
            plan = MealPlan(
                owner_id=user_id,
                title=title,
                start_date=start_date,
                end_date=end_date,
                meals=list(meals),
                generated_by_ai=False,
            )
        except ValidationError as e:
            raise ValueError(f"Invalid meal plan: {e}") from e

        stored = await self.plans.insert_plan(plan)
        logger.info("Meal plan created", extra={"user_id": user_id, "plan_id": stored.id})
        return stored

    async def update_plan(self, plan_id: str, user_id: str, changes: Mapping[str, Any]) -> MealPlan:
        """Apply `changes` to a plan the user owns and re-validate it.

        Identity fields (id, owner_id, created_at) are never overwritten.

        Raises:
            LookupError: No such plan.
            PermissionError: Plan belongs to another user.
            ValueError: The changed plan is invalid.
        """
        plan = await self.get_plan(plan_id, user_id)

        merged = plan.model_dump()
        merged.update({key: value for key, value in changes.items() if key not in PLAN_IDENTITY_FIELDS})
        try:
            updated = MealPlan.model_validate(merged)
        except ValidationError as e:
            raise ValueError(f"Invalid meal plan: {e}") from e

        stored = await self.plans.update_plan(updated)
        logger.info("Meal plan updated", extra={"user_id": user_id, "plan_id": plan_id})
        return stored
