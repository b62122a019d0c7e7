"""Data models and schemas for recipe retrieval, synthesis, and meal planning.

Defines Pydantic models for domain objects and for the untrusted JSON the
language model returns. All models use Pydantic v2.

Model output is schema-validated before it is admitted:
- StructuredQuery: lenient, every field nullable, bad values become empty
- RecipeDraft: strict on structure (non-empty ingredients/instructions, title >= 3),
  lenient on enums (unknown cuisine -> "other", unknown dietary tags dropped)
"""

import uuid
from datetime import datetime, timezone
from typing import Any, List, Literal, Optional, Annotated, get_args

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


Difficulty = Literal["easy", "medium", "hard"]
Cuisine = Literal[
    "italian",
    "chinese",
    "indian",
    "mexican",
    "japanese",
    "thai",
    "mediterranean",
    "american",
    "french",
    "korean",
    "middle eastern",
    "greek",
    "other",
]
DietaryTag = Literal[
    "vegan",
    "vegetarian",
    "gluten-free",
    "dairy-free",
    "keto",
    "paleo",
    "low-carb",
    "halal",
    "kosher",
    "other",
]
Provenance = Literal["catalog", "user", "ai"]
MealSlot = Literal["breakfast", "lunch", "dinner"]

DIFFICULTIES: tuple[str, ...] = get_args(Difficulty)
CUISINES: tuple[str, ...] = get_args(Cuisine)
DIETARY_TAGS: tuple[str, ...] = get_args(DietaryTag)
MEAL_SLOTS: tuple[str, ...] = get_args(MealSlot)
WEEKDAYS: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/400x300?text=Recipe+Image"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _lower_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text or text in ("null", "none", "n/a"):
        return None
    return text


def _lower_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [part for part in value.split(",")]
    if not isinstance(value, (list, tuple, set)):
        return []
    items = []
    for item in value:
        text = _lower_or_none(item)
        if text and text not in items:
            items.append(text)
    return items


# ============================================================================
# Recipes
# ============================================================================


class Ingredient(BaseModel):
    """One ingredient line: name, quantity and unit."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=200, description="Ingredient name")]
    quantity: Annotated[str, Field("", max_length=50, description="Amount, kept as text (e.g. '1/2', '200')")]
    unit: Annotated[str, Field("", max_length=50, description="Measurement unit (cup/tbsp/gram/piece/...)")]

    @field_validator("quantity", "unit", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> str:
        """Models often return numbers for quantities; store them as text."""
        if v is None:
            return ""
        return str(v)


class Recipe(BaseModel):
    """Domain model for a recipe held in the catalog.

    Accepts snake_case or camelCase keys (cookingTime, dietaryTags, imageUrl, createdBy)
    so seed fixtures and model output can be loaded without renaming.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    id: Annotated[str, Field(default_factory=_new_id, description="Opaque recipe key")]
    title: Annotated[str, Field(min_length=3, max_length=200, description="Recipe name (3-200 chars)")]
    description: Annotated[str, Field("", max_length=2000, description="Short appetizing description")]
    ingredients: Annotated[List[Ingredient], Field(min_length=1, description="Ingredient lines (at least one)")]
    instructions: Annotated[List[str], Field(min_length=1, description="Ordered instruction steps (at least one)")]
    cooking_time: Annotated[
        int,
        Field(ge=1, validation_alias=AliasChoices("cooking_time", "cookingTime"), description="Minutes (>= 1)"),
    ]
    servings: Annotated[int, Field(ge=1, description="Number of servings (>= 1)")]
    difficulty: Annotated[Difficulty, Field("medium", description="easy, medium or hard")]
    cuisine: Annotated[Cuisine, Field("other", description="Cuisine enum value")]
    dietary_tags: Annotated[
        List[DietaryTag],
        Field(
            default_factory=list,
            validation_alias=AliasChoices("dietary_tags", "dietaryTags"),
            description="Dietary tags that apply",
        ),
    ]
    image_url: Annotated[
        str,
        Field(
            PLACEHOLDER_IMAGE_URL,
            validation_alias=AliasChoices("image_url", "imageUrl"),
            description="Image URL or data: URI",
        ),
    ]
    provenance: Annotated[Provenance, Field("user", description="catalog, user or ai")]
    created_by: Annotated[
        Optional[str],
        Field(None, validation_alias=AliasChoices("created_by", "createdBy"), description="Creator reference"),
    ]
    created_at: Annotated[
        datetime,
        Field(
            default_factory=utcnow,
            validation_alias=AliasChoices("created_at", "createdAt"),
            description="Creation timestamp (UTC)",
        ),
    ]

    @field_validator("instructions")
    @classmethod
    def validate_instructions(cls, v: list[str]) -> list[str]:
        """Blank steps are dropped; at least one real step must remain."""
        steps = [step.strip() for step in v if step and step.strip()]
        if not steps:
            raise ValueError("Recipe must have at least one instruction step")
        return steps

    @property
    def is_ai_generated(self) -> bool:
        return self.provenance == "ai"

    def ingredient_names(self) -> list[str]:
        return [ingredient.name.lower() for ingredient in self.ingredients]


class RecipeDraft(BaseModel):
    """Untrusted recipe record produced by the language model.

    Normalizes enum-like fields before validation so a stray "Italian" or
    "nut-free" does not discard an otherwise good recipe, but rejects drafts
    that are structurally degenerate.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    title: Annotated[str, Field(min_length=3, max_length=200)]
    description: Annotated[str, Field("", max_length=2000)]
    ingredients: Annotated[List[Ingredient], Field(min_length=1)]
    instructions: Annotated[List[str], Field(min_length=1)]
    cooking_time: Annotated[int, Field(ge=1, validation_alias=AliasChoices("cooking_time", "cookingTime"))]
    servings: Annotated[int, Field(ge=1)]
    difficulty: Difficulty
    cuisine: Annotated[Cuisine, Field("other")]
    dietary_tags: Annotated[
        List[DietaryTag],
        Field(default_factory=list, validation_alias=AliasChoices("dietary_tags", "dietaryTags")),
    ]

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v: Any) -> Any:
        return _lower_or_none(v) or v

    @field_validator("cuisine", mode="before")
    @classmethod
    def normalize_cuisine(cls, v: Any) -> str:
        cuisine = _lower_or_none(v)
        return cuisine if cuisine in CUISINES else "other"

    @field_validator("dietary_tags", mode="before")
    @classmethod
    def normalize_dietary_tags(cls, v: Any) -> list[str]:
        return [tag for tag in _lower_list(v) if tag in DIETARY_TAGS]

    @field_validator("instructions")
    @classmethod
    def validate_instructions(cls, v: list[str]) -> list[str]:
        steps = [step.strip() for step in v if step and step.strip()]
        if not steps:
            raise ValueError("Recipe must have at least one instruction step")
        return steps

    def to_recipe(self, image_url: str, created_by: Optional[str]) -> Recipe:
        """Admit the draft into the catalog as an AI-generated recipe."""
        return Recipe(
            title=self.title,
            description=self.description,
            ingredients=self.ingredients,
            instructions=self.instructions,
            cooking_time=self.cooking_time,
            servings=self.servings,
            difficulty=self.difficulty,
            cuisine=self.cuisine,
            dietary_tags=self.dietary_tags,
            image_url=image_url,
            provenance="ai",
            created_by=created_by,
        )


# ============================================================================
# Search
# ============================================================================


class StructuredQuery(BaseModel):
    """Filter interpreted from a free-text request. Every field may be empty."""

    model_config = ConfigDict(populate_by_name=True)

    ingredients: Annotated[List[str], Field(default_factory=list)]
    meal_type: Annotated[Optional[str], Field(None, validation_alias=AliasChoices("meal_type", "mealType"))]
    dietary_restrictions: Annotated[
        List[str],
        Field(default_factory=list, validation_alias=AliasChoices("dietary_restrictions", "dietaryRestrictions")),
    ]
    cuisine: Optional[Cuisine] = None
    cooking_time: Annotated[
        Optional[int],
        Field(None, validation_alias=AliasChoices("cooking_time", "cookingTime"), description="Max minutes"),
    ]
    difficulty: Optional[Difficulty] = None

    @field_validator("ingredients", "dietary_restrictions", mode="before")
    @classmethod
    def normalize_lists(cls, v: Any) -> list[str]:
        return _lower_list(v)

    @field_validator("meal_type", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Optional[str]:
        return _lower_or_none(v)

    @field_validator("cuisine", mode="before")
    @classmethod
    def normalize_cuisine(cls, v: Any) -> Optional[str]:
        # "other" is a catch-all bucket, not a filter
        cuisine = _lower_or_none(v)
        return cuisine if cuisine in CUISINES and cuisine != "other" else None

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v: Any) -> Optional[str]:
        difficulty = _lower_or_none(v)
        return difficulty if difficulty in DIFFICULTIES else None

    @field_validator("cooking_time", mode="before")
    @classmethod
    def normalize_cooking_time(cls, v: Any) -> Optional[int]:
        if v is None or isinstance(v, bool):
            return None
        try:
            minutes = int(float(v))
        except (TypeError, ValueError):
            return None
        return minutes if minutes > 0 else None

    def is_empty(self) -> bool:
        return not (
            self.ingredients
            or self.meal_type
            or self.dietary_restrictions
            or self.cuisine
            or self.cooking_time
            or self.difficulty
        )


class RecipeFilter(BaseModel):
    """Store-level filter. Empty fields do not constrain."""

    cuisine: Optional[str] = None
    difficulty: Optional[str] = None
    dietary_tags: Annotated[List[str], Field(default_factory=list, description="All must be present")]
    any_dietary_tags: Annotated[List[str], Field(default_factory=list, description="At least one must be present")]
    max_cooking_time: Annotated[Optional[int], Field(None, ge=1)]
    ingredient_terms: Annotated[List[str], Field(default_factory=list, description="Full-text over ingredient names")]
    text: Annotated[Optional[str], Field(None, description="Case-insensitive substring over title/description")]
    limit: Annotated[Optional[int], Field(None, ge=1)]
    skip: Annotated[int, Field(0, ge=0)]


class SearchResult(BaseModel):
    """Response-scoped result of a retrieval: catalog hits first, then synthesized recipes."""

    query: str
    recipes: Annotated[List[Recipe], Field(default_factory=list)]
    catalog_count: Annotated[int, Field(0, ge=0)]
    generated_count: Annotated[int, Field(0, ge=0)]
    interpreted_query: Annotated[StructuredQuery, Field(default_factory=StructuredQuery)]

    @property
    def count(self) -> int:
        return len(self.recipes)


class RecipePage(BaseModel):
    """One page of a filter-only catalog listing."""

    recipes: List[Recipe]
    total: int
    page: int
    pages: int


# ============================================================================
# Meal plans
# ============================================================================


class DietaryConstraints(BaseModel):
    """Per-user constraints read from the profile collaborator."""

    model_config = ConfigDict(populate_by_name=True)

    dietary_restrictions: Annotated[
        List[str],
        Field(default_factory=list, validation_alias=AliasChoices("dietary_restrictions", "dietaryRestrictions")),
    ]
    allergies: Annotated[List[str], Field(default_factory=list)]
    cuisine_preferences: Annotated[
        List[str],
        Field(default_factory=list, validation_alias=AliasChoices("cuisine_preferences", "cuisinePreferences")),
    ]
    calorie_target: Annotated[
        Optional[int],
        Field(None, ge=1, validation_alias=AliasChoices("calorie_target", "calorieTarget")),
    ]

    @field_validator("dietary_restrictions", "allergies", "cuisine_preferences", mode="before")
    @classmethod
    def normalize_lists(cls, v: Any) -> list[str]:
        return _lower_list(v)


class DayMeal(BaseModel):
    """One day of a plan. Slots hold recipe ids or None."""

    day: Annotated[str, Field(description="Weekday label (Monday..Sunday)")]
    breakfast: Optional[str] = None
    lunch: Optional[str] = None
    dinner: Optional[str] = None
    snacks: Annotated[List[str], Field(default_factory=list)]

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: str) -> str:
        label = v.strip().capitalize()
        if label not in WEEKDAYS:
            raise ValueError(f"day must be one of {', '.join(WEEKDAYS)}, got: {v}")
        return label

    def recipe_ids(self) -> list[str]:
        slots = [self.breakfast, self.lunch, self.dinner, *self.snacks]
        return [recipe_id for recipe_id in slots if recipe_id]


class MealPlan(BaseModel):
    """Persisted meal plan owned by a user."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: Annotated[str, Field(default_factory=_new_id)]
    owner_id: Annotated[str, Field(min_length=1)]
    title: Annotated[str, Field("My Meal Plan", min_length=1, max_length=200)]
    start_date: datetime
    end_date: datetime
    meals: Annotated[List[DayMeal], Field(min_length=1, description="At least one day")]
    generated_by_ai: bool = False
    created_at: Annotated[datetime, Field(default_factory=utcnow)]

    @model_validator(mode="after")
    def validate_date_range(self) -> "MealPlan":
        """End date must be strictly after start date."""
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self

    def find_day(self, day: str) -> Optional[DayMeal]:
        for meal in self.meals:
            if meal.day.lower() == day.strip().lower():
                return meal
        return None


# ============================================================================
# Assistant outputs
# ============================================================================


class Substitution(BaseModel):
    """One ingredient substitute suggested by the model."""

    model_config = ConfigDict(str_strip_whitespace=True)

    substitute: Annotated[str, Field(min_length=1, max_length=200)]
    reason: Annotated[str, Field("", max_length=1000)]
    ratio: Annotated[str, Field("1:1", max_length=50)]


class RecipeExplanation(BaseModel):
    """Beginner-friendly explanation of a recipe."""

    model_config = ConfigDict(populate_by_name=True)

    simplified_steps: Annotated[
        List[str], Field(default_factory=list, validation_alias=AliasChoices("simplified_steps", "simplifiedSteps"))
    ]
    nutritional_highlights: Annotated[
        str,
        Field(
            "Nutritional information not available",
            validation_alias=AliasChoices("nutritional_highlights", "nutritionalHighlights"),
        ),
    ]
    tips: Annotated[List[str], Field(default_factory=list)]


class DietaryValidation(BaseModel):
    """Whether a recipe is safe for a set of dietary restrictions."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: Annotated[bool, Field(validation_alias=AliasChoices("is_valid", "isValid"))]
    warnings: Annotated[List[str], Field(default_factory=list)]
    alternatives: Annotated[List[str], Field(default_factory=list)]
