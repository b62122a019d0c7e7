"""Sample catalog and demo profile for local runs."""

from datetime import timedelta

from recipe_planner.models.models import DietaryConstraints, Recipe, utcnow
from recipe_planner.store.base import RecipeStore
from recipe_planner.utils.logger import logger

DEMO_USER_ID = "demo"

DEMO_PROFILE = DietaryConstraints(
    dietary_restrictions=["vegetarian"],
    allergies=[],
    cuisine_preferences=["italian", "mexican", "thai"],
)


def _ingredients(*items: tuple[str, str, str]) -> list[dict]:
    return [{"name": name, "quantity": quantity, "unit": unit} for name, quantity, unit in items]


SAMPLE_RECIPES: list[dict] = [
    {
        "title": "Chickpea Buddha Bowl",
        "description": "A healthy, colorful vegan bowl packed with protein and nutrients",
        "ingredients": _ingredients(
            ("chickpeas", "1", "can"),
            ("quinoa", "1", "cup"),
            ("sweet potato", "1", "large"),
            ("spinach", "2", "cups"),
            ("tahini", "2", "tbsp"),
            ("lemon juice", "1", "tbsp"),
        ),
        "instructions": [
            "Cook quinoa according to package directions",
            "Roast diced sweet potato at 400°F for 25 minutes",
            "Sauté chickpeas with spices for 5 minutes",
            "Arrange quinoa, sweet potato, chickpeas, and spinach in a bowl",
            "Drizzle with tahini-lemon dressing",
        ],
        "cookingTime": 35,
        "servings": 2,
        "difficulty": "easy",
        "dietaryTags": ["vegan", "gluten-free"],
        "cuisine": "mediterranean",
        "imageUrl": "https://images.unsplash.com/photo-1512621776951-a57141f2eefd?w=800",
    },
    {
        "title": "Classic Margherita Pizza",
        "description": "Traditional Italian pizza with fresh mozzarella and basil",
        "ingredients": _ingredients(
            ("pizza dough", "1", "lb"),
            ("tomato sauce", "1", "cup"),
            ("fresh mozzarella", "8", "oz"),
            ("fresh basil", "10", "leaves"),
            ("olive oil", "2", "tbsp"),
        ),
        "instructions": [
            "Preheat oven to 475°F",
            "Roll out pizza dough to a 12-inch circle",
            "Spread tomato sauce evenly and top with torn mozzarella",
            "Bake for 12-15 minutes until crust is golden",
            "Garnish with fresh basil and olive oil",
        ],
        "cookingTime": 25,
        "servings": 4,
        "difficulty": "medium",
        "dietaryTags": ["vegetarian"],
        "cuisine": "italian",
        "imageUrl": "https://images.unsplash.com/photo-1574071318508-1cdbab80d002?w=800",
    },
    {
        "title": "Chicken Stir Fry",
        "description": "Quick and easy Asian-inspired chicken with vegetables",
        "ingredients": _ingredients(
            ("chicken breast", "1", "lb"),
            ("broccoli", "2", "cups"),
            ("bell pepper", "1", "large"),
            ("soy sauce", "3", "tbsp"),
            ("ginger", "1", "tbsp"),
            ("garlic", "3", "cloves"),
        ),
        "instructions": [
            "Cut chicken into bite-sized pieces",
            "Cook chicken in a hot wok until golden, then remove",
            "Stir-fry vegetables for 3-4 minutes",
            "Add chicken back with sauce and serve over rice",
        ],
        "cookingTime": 20,
        "servings": 3,
        "difficulty": "easy",
        "dietaryTags": ["gluten-free"],
        "cuisine": "chinese",
        "imageUrl": "https://images.unsplash.com/photo-1603133872878-684f208fb84b?w=800",
    },
    {
        "title": "Red Lentil Dal",
        "description": "Comforting and nutritious Indian lentil stew",
        "ingredients": _ingredients(
            ("red lentils", "1", "cup"),
            ("coconut milk", "1", "can"),
            ("turmeric", "1", "tsp"),
            ("cumin", "1", "tsp"),
            ("onion", "1", "large"),
        ),
        "instructions": [
            "Sauté onions with spices",
            "Add lentils and water, simmer for 15 minutes",
            "Stir in coconut milk",
            "Serve with rice or naan",
        ],
        "cookingTime": 25,
        "servings": 4,
        "difficulty": "easy",
        "dietaryTags": ["vegan", "gluten-free"],
        "cuisine": "indian",
        "imageUrl": "https://images.unsplash.com/photo-1588166524941-3bf61a9c41db?w=800",
    },
    {
        "title": "Greek Salad",
        "description": "Fresh and crunchy Mediterranean salad",
        "ingredients": _ingredients(
            ("cucumber", "1", "large"),
            ("tomatoes", "3", "large"),
            ("feta cheese", "4", "oz"),
            ("olives", "1/2", "cup"),
        ),
        "instructions": [
            "Chop vegetables into large chunks",
            "Toss with olive oil and oregano",
            "Top with feta and olives",
        ],
        "cookingTime": 10,
        "servings": 2,
        "difficulty": "easy",
        "dietaryTags": ["vegetarian", "gluten-free"],
        "cuisine": "greek",
        "imageUrl": "https://images.unsplash.com/photo-1540189549336-e6e99c3679fe?w=800",
    },
    {
        "title": "Beef Broccoli",
        "description": "Classic savory Chinese stir-fry",
        "ingredients": _ingredients(
            ("flank steak", "1", "lb"),
            ("broccoli", "3", "cups"),
            ("oyster sauce", "2", "tbsp"),
        ),
        "instructions": [
            "Thinly slice beef",
            "Stir fry beef until browned",
            "Add broccoli and sauce, cook until tender",
        ],
        "cookingTime": 20,
        "servings": 3,
        "difficulty": "medium",
        "dietaryTags": [],
        "cuisine": "chinese",
        "imageUrl": "https://images.unsplash.com/photo-1599487488170-d11ec9c172f0?w=800",
    },
    {
        "title": "Mushroom Risotto",
        "description": "Creamy Italian rice dish with earthy mushrooms",
        "ingredients": _ingredients(
            ("arborio rice", "1", "cup"),
            ("mushrooms", "8", "oz"),
            ("parmesan", "1/2", "cup"),
            ("vegetable broth", "4", "cups"),
        ),
        "instructions": [
            "Sauté mushrooms until golden",
            "Toast rice, then add warm broth one ladle at a time",
            "Stir until creamy, about 25 minutes",
            "Fold in parmesan and mushrooms",
        ],
        "cookingTime": 40,
        "servings": 2,
        "difficulty": "hard",
        "dietaryTags": ["vegetarian"],
        "cuisine": "italian",
        "imageUrl": "https://images.unsplash.com/photo-1476124369491-e7addf5db371?w=800",
    },
    {
        "title": "Spaghetti Aglio e Olio",
        "description": "Simple Roman pasta with garlic, olive oil and chili",
        "ingredients": _ingredients(
            ("spaghetti", "200", "g"),
            ("garlic", "4", "cloves"),
            ("olive oil", "1/4", "cup"),
            ("red pepper flakes", "1", "tsp"),
        ),
        "instructions": [
            "Boil spaghetti until al dente",
            "Gently fry sliced garlic and chili in olive oil",
            "Toss pasta with the oil and a splash of pasta water",
        ],
        "cookingTime": 15,
        "servings": 2,
        "difficulty": "easy",
        "dietaryTags": ["vegan"],
        "cuisine": "italian",
        "imageUrl": "https://images.unsplash.com/photo-1621996346565-e3dbc646d9a9?w=800",
    },
    {
        "title": "Falafel Wrap",
        "description": "Crispy falafel with fresh vegetables and tahini in a warm wrap",
        "ingredients": _ingredients(
            ("falafel", "6", "pieces"),
            ("pita bread", "2", "large"),
            ("lettuce", "1", "cup"),
            ("tahini", "2", "tbsp"),
        ),
        "instructions": [
            "Warm the falafel and pita",
            "Fill pita with lettuce and falafel",
            "Drizzle with tahini and wrap",
        ],
        "cookingTime": 15,
        "servings": 2,
        "difficulty": "easy",
        "dietaryTags": ["vegan", "vegetarian"],
        "cuisine": "middle eastern",
        "imageUrl": "https://images.unsplash.com/photo-1593001874117-c99c800e3eb7?w=800",
    },
    {
        "title": "Black Bean Soup",
        "description": "Hearty and smoky Mexican-style black bean soup",
        "ingredients": _ingredients(
            ("black beans", "2", "cans"),
            ("onion", "1", "medium"),
            ("cumin", "1", "tsp"),
            ("vegetable broth", "3", "cups"),
        ),
        "instructions": [
            "Sauté onion with cumin",
            "Add beans and broth, simmer for 15 minutes",
            "Blend partially and season to taste",
        ],
        "cookingTime": 20,
        "servings": 4,
        "difficulty": "easy",
        "dietaryTags": ["vegan", "gluten-free"],
        "cuisine": "mexican",
        "imageUrl": "https://images.unsplash.com/photo-1547592166-23ac45744acd?w=800",
    },
    {
        "title": "Banana Pancakes",
        "description": "Fluffy two-ingredient pancakes for a quick breakfast",
        "ingredients": _ingredients(
            ("banana", "2", "ripe"),
            ("eggs", "2", "large"),
            ("cinnamon", "1/2", "tsp"),
        ),
        "instructions": [
            "Mash bananas and whisk in eggs and cinnamon",
            "Cook small pancakes on a buttered pan for 1-2 minutes per side",
        ],
        "cookingTime": 10,
        "servings": 2,
        "difficulty": "easy",
        "dietaryTags": ["vegetarian", "gluten-free"],
        "cuisine": "american",
        "imageUrl": "https://images.unsplash.com/photo-1528207776546-365bb710ee93?w=800",
    },
    {
        "title": "Greek Yogurt Parfait",
        "description": "Layers of creamy yogurt, berries and crunchy nuts",
        "ingredients": _ingredients(
            ("greek yogurt", "1", "cup"),
            ("mixed berries", "1/2", "cup"),
            ("walnuts", "2", "tbsp"),
            ("honey", "1", "tbsp"),
        ),
        "instructions": [
            "Layer yogurt, berries, and nuts in a glass",
            "Drizzle with honey",
        ],
        "cookingTime": 5,
        "servings": 1,
        "difficulty": "easy",
        "dietaryTags": ["vegetarian", "gluten-free"],
        "cuisine": "mediterranean",
        "imageUrl": "https://images.unsplash.com/photo-1488477181946-6428a0291777?w=800",
    },
]


def sample_recipes() -> list[Recipe]:
    """Build catalog recipes, oldest first, one minute apart so recency ordering is stable."""
    base = utcnow() - timedelta(minutes=len(SAMPLE_RECIPES))
    return [
        Recipe(**data, provenance="catalog", created_by=DEMO_USER_ID, created_at=base + timedelta(minutes=idx))
        for idx, data in enumerate(SAMPLE_RECIPES)
    ]


async def seed_catalog(store: RecipeStore) -> int:
    """Insert the sample recipes into `store`. Returns the number inserted."""
    inserted = 0
    for recipe in sample_recipes():
        await store.insert_recipe(recipe)
        inserted += 1
    logger.info(f"Seeded catalog with {inserted} sample recipes")
    return inserted
