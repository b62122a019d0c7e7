"""Unit tests for Pydantic models validation."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from recipe_planner.models.models import (
    PLACEHOLDER_IMAGE_URL,
    DayMeal,
    DietaryConstraints,
    DietaryValidation,
    Ingredient,
    MealPlan,
    Recipe,
    RecipeDraft,
    RecipeExplanation,
    StructuredQuery,
)


class TestIngredient:
    def test_numeric_quantity_coerced_to_text(self):
        ingredient = Ingredient(name="eggs", quantity=2, unit=None)
        assert ingredient.quantity == "2"
        assert ingredient.unit == ""

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Ingredient(name="")


class TestRecipe:
    """Test Recipe domain model."""

    def test_accepts_camel_case_keys(self):
        recipe = Recipe(
            title="Red Lentil Dal",
            ingredients=[{"name": "red lentils", "quantity": "1", "unit": "cup"}],
            instructions=["Simmer lentils"],
            cookingTime=25,
            servings=4,
            dietaryTags=["vegan"],
            imageUrl="https://example.com/dal.jpg",
            createdBy="demo",
        )
        assert recipe.cooking_time == 25
        assert recipe.dietary_tags == ["vegan"]
        assert recipe.image_url == "https://example.com/dal.jpg"
        assert recipe.created_by == "demo"

    def test_defaults(self):
        recipe = Recipe(
            title="Plain Rice",
            ingredients=[{"name": "rice"}],
            instructions=["Boil"],
            cooking_time=15,
            servings=2,
        )
        assert recipe.difficulty == "medium"
        assert recipe.cuisine == "other"
        assert recipe.image_url == PLACEHOLDER_IMAGE_URL
        assert recipe.provenance == "user"
        assert recipe.id
        assert recipe.created_at.tzinfo is not None

    def test_ids_are_unique(self, make_recipe):
        assert make_recipe().id != make_recipe().id

    def test_blank_instruction_steps_dropped(self, make_recipe):
        recipe = make_recipe(instructions=["Chop", "   ", "Cook"])
        assert recipe.instructions == ["Chop", "Cook"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": "ab"},
            {"ingredients": []},
            {"instructions": []},
            {"instructions": ["  "]},
            {"cooking_time": 0},
            {"servings": 0},
            {"cuisine": "martian"},
            {"dietary_tags": ["nut-free"]},
        ],
    )
    def test_invalid_fields_rejected(self, make_recipe, overrides):
        with pytest.raises(ValidationError):
            make_recipe(**overrides)

    def test_ai_provenance_flag(self, make_recipe):
        assert make_recipe(provenance="ai").is_ai_generated is True
        assert make_recipe(provenance="catalog").is_ai_generated is False


class TestRecipeDraft:
    """Untrusted model output: lenient enums, strict structure."""

    def test_normalizes_enums(self, draft_payload):
        draft = RecipeDraft.model_validate(
            draft_payload(difficulty="Medium", cuisine="Italian", dietaryTags=["Vegan", "nut-free", "GLUTEN-FREE"])
        )
        assert draft.difficulty == "medium"
        assert draft.cuisine == "italian"
        assert draft.dietary_tags == ["vegan", "gluten-free"]

    def test_unknown_cuisine_maps_to_other(self, draft_payload):
        draft = RecipeDraft.model_validate(draft_payload(cuisine="Fusion"))
        assert draft.cuisine == "other"

    def test_missing_cuisine_maps_to_other(self, draft_payload):
        payload = draft_payload()
        del payload["cuisine"]
        assert RecipeDraft.model_validate(payload).cuisine == "other"

    def test_quantities_coerced(self, draft_payload):
        draft = RecipeDraft.model_validate(draft_payload())
        assert draft.ingredients[0].quantity == "1"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": "ab"},
            {"ingredients": []},
            {"instructions": []},
            {"difficulty": "extreme"},
            {"cookingTime": 0},
            {"servings": -1},
        ],
    )
    def test_degenerate_drafts_rejected(self, draft_payload, overrides):
        with pytest.raises(ValidationError):
            RecipeDraft.model_validate(draft_payload(**overrides))

    def test_to_recipe_marks_ai_provenance(self, draft_payload):
        recipe = RecipeDraft.model_validate(draft_payload("Chana Masala")).to_recipe(
            image_url="https://example.com/x.jpg", created_by="user-1"
        )
        assert recipe.title == "Chana Masala"
        assert recipe.provenance == "ai"
        assert recipe.created_by == "user-1"
        assert recipe.image_url == "https://example.com/x.jpg"


class TestStructuredQuery:
    """Lenient query model: everything optional, bad values become empty."""

    def test_normalizes_model_output(self):
        query = StructuredQuery.model_validate(
            {
                "ingredients": ["Chickpeas", "chickpeas", "Spinach"],
                "mealType": "Dinner",
                "dietaryRestrictions": "Vegan",
                "cuisine": "null",
                "cookingTime": "30",
                "difficulty": "impossible",
            }
        )
        assert query.ingredients == ["chickpeas", "spinach"]
        assert query.meal_type == "dinner"
        assert query.dietary_restrictions == ["vegan"]
        assert query.cuisine is None
        assert query.cooking_time == 30
        assert query.difficulty is None

    @pytest.mark.parametrize("value", [None, "soon", -5, 0, True])
    def test_invalid_cooking_time_becomes_none(self, value):
        assert StructuredQuery.model_validate({"cookingTime": value}).cooking_time is None

    @pytest.mark.parametrize("value, expected", [("Thai", "thai"), ("Middle Eastern", "middle eastern"), ("asian", None), ("other", None)])
    def test_cuisine_outside_enum_becomes_none(self, value, expected):
        assert StructuredQuery.model_validate({"cuisine": value}).cuisine == expected

    def test_non_list_ingredients_become_empty(self):
        assert StructuredQuery.model_validate({"ingredients": 42}).ingredients == []

    def test_is_empty(self):
        assert StructuredQuery().is_empty() is True
        assert StructuredQuery(cuisine="thai").is_empty() is False


class TestMealPlanModels:
    def test_day_label_normalized(self):
        assert DayMeal(day="monday").day == "Monday"

    def test_invalid_day_rejected(self):
        with pytest.raises(ValidationError):
            DayMeal(day="Someday")

    def test_recipe_ids_skips_empty_slots(self):
        meal = DayMeal(day="Tuesday", breakfast="a", dinner="c", snacks=["d"])
        assert meal.recipe_ids() == ["a", "c", "d"]

    def test_end_date_must_follow_start_date(self):
        start = datetime.now(timezone.utc)
        with pytest.raises(ValidationError) as exc:
            MealPlan(owner_id="demo", start_date=start, end_date=start, meals=[DayMeal(day="Monday")])
        assert "End date must be after start date" in str(exc.value)

    def test_plan_requires_at_least_one_day(self):
        start = datetime.now(timezone.utc)
        with pytest.raises(ValidationError):
            MealPlan(owner_id="demo", start_date=start, end_date=start + timedelta(days=1), meals=[])

    def test_find_day_is_case_insensitive(self):
        start = datetime.now(timezone.utc)
        plan = MealPlan(
            owner_id="demo",
            start_date=start,
            end_date=start + timedelta(days=2),
            meals=[DayMeal(day="Monday"), DayMeal(day="Tuesday")],
        )
        assert plan.find_day("TUESDAY") is plan.meals[1]
        assert plan.find_day("Friday") is None
        assert plan.title == "My Meal Plan"


class TestProfileAndAssistantModels:
    def test_dietary_constraints_normalized(self):
        constraints = DietaryConstraints.model_validate(
            {"dietaryRestrictions": ["Vegan"], "allergies": "Peanuts, Shellfish", "calorieTarget": 2000}
        )
        assert constraints.dietary_restrictions == ["vegan"]
        assert constraints.allergies == ["peanuts", "shellfish"]
        assert constraints.calorie_target == 2000

    def test_dietary_validation_camel_case(self):
        validation = DietaryValidation.model_validate({"isValid": False, "warnings": ["Contains dairy"]})
        assert validation.is_valid is False
        assert validation.alternatives == []

    def test_explanation_defaults(self):
        explanation = RecipeExplanation.model_validate({"simplifiedSteps": ["Boil water"]})
        assert explanation.simplified_steps == ["Boil water"]
        assert explanation.nutritional_highlights == "Nutritional information not available"
