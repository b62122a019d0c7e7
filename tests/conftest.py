"""Shared fixtures for unit and integration tests.

recipe_planner.utils.config validates at import time, so a placeholder
GEMINI_API_KEY is set here (after .env is loaded) before any package import.
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from dotenv import load_dotenv

load_dotenv()
TEST_GEMINI_KEY = "test-gemini-key"
os.environ.setdefault("GEMINI_API_KEY", TEST_GEMINI_KEY)

from recipe_planner.models.models import Recipe  # noqa: E402
from recipe_planner.store.memory import InMemoryMealPlanStore, InMemoryProfileStore, InMemoryRecipeStore  # noqa: E402
from recipe_planner.store.seed import sample_recipes  # noqa: E402
from recipe_planner.utils.config import config  # noqa: E402


@pytest.fixture(autouse=True)
def pinned_config(monkeypatch):
    """Pin tunables to their defaults so a local .env cannot change test outcomes."""
    defaults = {
        "MIN_RESULTS": 3,
        "SEARCH_RESULT_LIMIT": 20,
        "MAX_RETRIES": 3,
        "DELAY_BETWEEN_RETRIES": 2,
        "EXPONENTIAL_BACKOFF": True,
        "MIN_PLAN_CORPUS": 5,
        "MAX_PLAN_DAYS": 7,
        "SYSTEM_CREATOR_ID": "system",
        "DEFAULT_RECIPE_IMAGE_URL": "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?w=400&h=300&fit=crop",
        "ENABLE_IMAGE_GENERATION": True,
        "ENABLE_IMAGE_SCRAPING": True,
        "GOOGLE_SEARCH_KEY": None,
        "GOOGLE_SEARCH_CX": None,
        "MAX_IMAGE_SIZE_MB": 5,
        "COMPRESS_IMG": True,
        "COMPRESS_IMG_THRESHOLD_KB": 300,
        "SEED_CATALOG": True,
    }
    for key, value in defaults.items():
        monkeypatch.setattr(config, key, value)
    return config


@pytest.fixture
def no_sleep():
    """Skip retry backoff delays; yields the sleep mock for delay assertions."""
    with patch("recipe_planner.utils.resilience.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def fake_gateway():
    """LanguageModelGateway stand-in; set `fake_gateway.invoke` return values per test."""
    gateway = MagicMock()
    gateway.invoke = AsyncMock()
    return gateway


@pytest.fixture
def make_recipe():
    """Factory for valid catalog recipes with overridable fields."""

    def _make(**overrides) -> Recipe:
        data = {
            "title": "Test Recipe",
            "description": "A recipe used in tests",
            "ingredients": [{"name": "rice", "quantity": "1", "unit": "cup"}],
            "instructions": ["Cook the rice"],
            "cooking_time": 20,
            "servings": 2,
            "difficulty": "easy",
            "cuisine": "other",
            "dietary_tags": [],
            "provenance": "catalog",
        }
        data.update(overrides)
        return Recipe(**data)

    return _make


@pytest.fixture
def draft_payload():
    """Factory for model-shaped (camelCase) recipe dicts."""

    def _make(title: str = "Generated Recipe", **overrides) -> dict:
        data = {
            "title": title,
            "description": "Freshly generated",
            "ingredients": [
                {"name": "chickpeas", "quantity": 1, "unit": "can"},
                {"name": "spinach", "quantity": "2", "unit": "cups"},
            ],
            "instructions": ["Step 1: Prep", "Step 2: Cook"],
            "cookingTime": 25,
            "servings": 2,
            "difficulty": "easy",
            "dietaryTags": ["vegan"],
            "cuisine": "indian",
        }
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def recipe_store():
    return InMemoryRecipeStore()


@pytest.fixture
def seeded_store():
    return InMemoryRecipeStore(sample_recipes())


@pytest.fixture
def plan_store():
    return InMemoryMealPlanStore()


@pytest.fixture
def profile_store():
    return InMemoryProfileStore()
