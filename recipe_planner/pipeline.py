"""Pipeline factory: wires gateways, stores and services together.

Inbound interfaces:
- RecipePipeline.search(text) -> SearchResult
- RecipePipeline.assemble_plan(user_id, days) -> MealPlan

The remaining services (catalog browsing, personal plans, assistant helpers)
are exposed as attributes.
"""

from typing import Optional

from google import genai

from recipe_planner.gateway.gemini import ImageGateway, LanguageModelGateway
from recipe_planner.models.models import MealPlan, RecipeFilter, SearchResult
from recipe_planner.services.assistant import CulinaryAssistant
from recipe_planner.services.catalog import CatalogSearch
from recipe_planner.services.interpreter import QueryInterpreter
from recipe_planner.services.meal_plans import MealPlanAssembler, MealPlanService
from recipe_planner.services.retrieval import RetrievalOrchestrator
from recipe_planner.services.synthesizer import RecipeSynthesizer
from recipe_planner.store.base import MealPlanStore, ProfileProvider, RecipeStore
from recipe_planner.store.memory import InMemoryMealPlanStore, InMemoryProfileStore, InMemoryRecipeStore
from recipe_planner.store.seed import DEMO_PROFILE, DEMO_USER_ID, seed_catalog
from recipe_planner.tools.images import ImageResolver, build_image_resolver
from recipe_planner.utils.config import config
from recipe_planner.utils.logger import logger


class RecipePipeline:
    def __init__(
        self,
        retrieval: RetrievalOrchestrator,
        catalog: CatalogSearch,
        meal_plans: MealPlanService,
        assistant: CulinaryAssistant,
    ) -> None:
        self.retrieval = retrieval
        self.catalog = catalog
        self.meal_plans = meal_plans
        self.assistant = assistant

    async def search(self, text: str, creator_id: Optional[str] = None) -> SearchResult:
        return await self.retrieval.retrieve(text, creator_id=creator_id)

    async def assemble_plan(self, user_id: str, days: int = 7) -> MealPlan:
        return await self.meal_plans.assemble_plan(user_id, days)


async def initialize_pipeline(
    store: Optional[RecipeStore] = None,
    profiles: Optional[ProfileProvider] = None,
    seed: bool = True,
    plan_store: Optional[MealPlanStore] = None,
    client: Optional[genai.Client] = None,
    image_resolver: Optional[ImageResolver] = None,
) -> RecipePipeline:
    """Build a ready-to-use pipeline.

    Missing collaborators default to in-memory implementations. An empty
    recipe store is seeded with sample recipes when `seed` and SEED_CATALOG
    are both on; a default profile store knows the demo user.

    Args:
        store: Recipe store. Default: InMemoryRecipeStore.
        profiles: Profile provider. Default: InMemoryProfileStore with the demo user.
        seed: Seed an empty store with the sample catalog.
        plan_store: Meal plan store. Default: InMemoryMealPlanStore.
        client: google-genai client shared by the text and image gateways.
        image_resolver: Override the configured image tier chain.

    Returns:
        RecipePipeline.
    """
    logger.info("=== Initializing Recipe Planner pipeline ===")

    store = store if store is not None else InMemoryRecipeStore()
    plan_store = plan_store if plan_store is not None else InMemoryMealPlanStore()
    if profiles is None:
        profiles = InMemoryProfileStore({DEMO_USER_ID: DEMO_PROFILE})

    if seed and config.SEED_CATALOG and await store.count_recipes(RecipeFilter()) == 0:
        await seed_catalog(store)

    client = client if client is not None else genai.Client(api_key=config.GEMINI_API_KEY)
    gateway = LanguageModelGateway(client=client)
    if image_resolver is None:
        image_resolver = build_image_resolver(ImageGateway(client=client))

    catalog = CatalogSearch(store)
    synthesizer = RecipeSynthesizer(gateway, image_resolver, store)
    retrieval = RetrievalOrchestrator(QueryInterpreter(gateway), catalog, synthesizer)
    meal_plans = MealPlanService(MealPlanAssembler(gateway), store, plan_store, profiles)

    logger.info(f"✓ Pipeline ready (model={config.GEMINI_MODEL}, min_results={config.MIN_RESULTS})")
    return RecipePipeline(retrieval, catalog, meal_plans, CulinaryAssistant(gateway))
