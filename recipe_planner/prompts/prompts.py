"""Prompt builders for every language model call in the pipeline.

Each builder returns a complete prompt string. Prompts ask for JSON only, but
the gateway still extracts the first balanced JSON value from the reply, so
a stray preamble or markdown fence does not break parsing.
"""

from typing import Optional, Sequence

from recipe_planner.models.models import CUISINES, DIETARY_TAGS, DietaryConstraints, Recipe


def get_query_interpretation_prompt(query: str) -> str:
    """Prompt that turns a free-text request into a StructuredQuery object."""
    return f"""You are a recipe search assistant. Parse the following user query and extract structured information.

User query: "{query}"

Extract and return ONLY a valid JSON object with these fields:
{{
  "ingredients": ["list", "of", "ingredients"],
  "mealType": "breakfast/lunch/dinner/snack",
  "dietaryRestrictions": ["vegan", "gluten-free", etc.],
  "cuisine": "italian/chinese/indian/etc.",
  "cookingTime": number in minutes or null,
  "difficulty": "easy/medium/hard" or null
}}

Rules:
- Return ONLY the JSON object, no additional text
- Use null for fields that cannot be determined
- Use lowercase for all values
- dietaryRestrictions must be an array (can be empty)
- ingredients must be an array (can be empty)

JSON:"""


def get_recipe_generation_prompt(brief: str, count: int) -> str:
    """Prompt that asks for `count` complete recipes matching the user's brief."""
    dietary_tags = ", ".join(f'"{tag}"' for tag in DIETARY_TAGS if tag != "other")
    cuisines = "|".join(CUISINES)
    return f"""You are a professional chef and recipe creator. Generate {count} complete, realistic, and authentic recipes based on the user's search query.

User Query: "{brief}"

Generate {count} different recipes that match this query. Return ONLY a valid JSON array with this EXACT structure:
[
  {{
    "title": "Recipe Name",
    "description": "Detailed, appetizing description of the dish (2-3 sentences)",
    "ingredients": [
      {{
        "name": "ingredient name",
        "quantity": "amount",
        "unit": "measurement unit (cup/tbsp/tsp/gram/piece/etc.)"
      }}
    ],
    "instructions": [
      "Step 1: Detailed instruction",
      "Step 2: Detailed instruction",
      "Step 3: Detailed instruction"
    ],
    "cookingTime": number_in_minutes,
    "servings": number_of_servings,
    "difficulty": "easy|medium|hard",
    "dietaryTags": [{dietary_tags}],
    "cuisine": "{cuisines}"
  }}
]

CRITICAL RULES:
1. Generate REAL, AUTHENTIC recipes from world culinary knowledge
2. Each recipe must be DIFFERENT and UNIQUE
3. Include 6-12 ingredients per recipe
4. Include 4-8 detailed instruction steps
5. Cooking time should be realistic (15-90 minutes)
6. Servings typically 2-6
7. Use only the exact values from the enums provided above
8. dietaryTags should be an array (can be empty if none apply)
9. All measurements must be specific and realistic
10. Instructions must be clear, step-by-step, and professional
11. Return ONLY the JSON array, no additional text or markdown

JSON:"""


def get_food_photo_prompt(title: str, cuisine: Optional[str] = None) -> str:
    """Photographic prompt for the generative image tier."""
    style = f", {cuisine} cuisine" if cuisine and cuisine != "other" else ""
    return (
        f"Ultra realistic professional food photography of {title}{style}, rich texture, "
        "detailed garnish, restaurant presentation, shallow depth of field, natural lighting, "
        "high resolution, 4K food photography"
    )


def _constraint_lines(constraints: DietaryConstraints) -> str:
    lines = [
        (
            f"- Dietary restrictions: {', '.join(constraints.dietary_restrictions)}"
            if constraints.dietary_restrictions
            else "- No specific dietary restrictions"
        ),
        (
            f"- Allergies to avoid: {', '.join(constraints.allergies)}"
            if constraints.allergies
            else "- No known allergies"
        ),
        (
            f"- Preferred cuisines: {', '.join(constraints.cuisine_preferences)}"
            if constraints.cuisine_preferences
            else "- Any cuisine"
        ),
        (
            f"- Target calories per day: {constraints.calorie_target}"
            if constraints.calorie_target
            else "- No calorie target"
        ),
    ]
    return "\n".join(lines)


def get_meal_plan_prompt(constraints: DietaryConstraints, days: int, corpus: Sequence[Recipe]) -> str:
    """Prompt that assigns corpus recipes to breakfast/lunch/dinner for `days` days."""
    recipe_list = "\n".join(f"- {recipe.title} (ID: {recipe.id})" for recipe in corpus)
    return f"""You are an expert nutritionist and meal planner. Generate a {days}-day meal plan using ONLY the following available recipes from the database.

Available Recipes:
{recipe_list}

Requirements:
{_constraint_lines(constraints)}

Return ONLY a valid JSON array with this exact structure:
[
  {{
    "day": "Monday",
    "breakfastId": "Recipe ID string",
    "lunchId": "Recipe ID string",
    "dinnerId": "Recipe ID string"
  }}
]

Rules:
- Generate exactly {days} days
- For each meal, provide the "ID" from the Available Recipes list provided above.
- IMPORTANT: Ensure MAXIMUM variety. Use as many different unique recipes as possible from the list.
- Try NOT to repeat the same recipe within the same day or even the same week if enough unique recipes are available.
- Each meal must be safe for the given restrictions and allergies. Never assign a recipe that violates them.
- Return ONLY the JSON array, no additional text.

JSON:"""


def get_substitution_prompt(ingredient: str, dietary_restrictions: Sequence[str], recipe_title: str = "") -> str:
    """Prompt for 3-5 substitutes of one ingredient."""
    context = f' in the context of the recipe "{recipe_title}"' if recipe_title else ""
    restrictions = (
        f"Dietary restrictions: {', '.join(dietary_restrictions)}"
        if dietary_restrictions
        else "No dietary restrictions"
    )
    return f"""You are a culinary expert. Suggest substitutes for the following ingredient{context}.

Ingredient: "{ingredient}"
{restrictions}

Return ONLY a valid JSON array of substitution objects:
[
  {{
    "substitute": "Ingredient name",
    "reason": "Why this is a good substitute",
    "ratio": "Conversion ratio (e.g., 1:1, 2:1)"
  }}
]

Rules:
- Suggest 3-5 practical substitutes
- All substitutes must comply with the dietary restrictions
- Return ONLY the JSON array, no additional text

JSON:"""


def get_explanation_prompt(recipe: Recipe) -> str:
    """Prompt for a simplified, encouraging walkthrough of a recipe."""
    ingredients = ", ".join(
        " ".join(part for part in (i.quantity, i.unit, i.name) if part) for i in recipe.ingredients
    )
    return f"""You are a friendly cooking instructor. Explain this recipe in simple, encouraging terms.

Recipe: {recipe.title}
Ingredients: {ingredients}
Instructions: {' '.join(recipe.instructions)}

Provide a JSON object with:
{{
  "simplifiedSteps": ["Step 1 in simple language", "Step 2...", ...],
  "nutritionalHighlights": "Brief nutritional benefits",
  "tips": ["Helpful tip 1", "Helpful tip 2", ...]
}}

Rules:
- Use simple, encouraging language
- Provide 2-3 helpful cooking tips
- Return ONLY the JSON object, no additional text

JSON:"""


def get_dietary_validation_prompt(recipe: Recipe, restrictions: Sequence[str]) -> str:
    """Prompt asking whether a recipe is safe for the given restrictions."""
    return f"""You are a dietary compliance expert. Analyze if this recipe is safe for the given dietary restrictions.

Recipe: {recipe.title}
Ingredients: {', '.join(i.name for i in recipe.ingredients)}
Dietary Restrictions: {', '.join(restrictions)}

Return ONLY a valid JSON object:
{{
  "isValid": true/false,
  "warnings": ["Warning 1", "Warning 2", ...],
  "alternatives": ["Alternative suggestion 1", ...]
}}

Rules:
- isValid should be false if ANY ingredient violates restrictions
- Provide specific warnings about problematic ingredients
- Suggest alternatives if recipe is not valid
- Return ONLY the JSON object, no additional text

JSON:"""
