"""Configuration management for Recipe Planner.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Text model used for query parsing, recipe synthesis and meal planning
        # Default: gemini-2.5-flash-lite (fast, cost-effective for JSON extraction)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")
        # Image-capable model used by the generative image tier
        self.IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image")
        # Per-call timeout (seconds) for a single Gemini request, retries excluded
        self.GEMINI_TIMEOUT_SECONDS: float = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"))
        # LLM Model Parameters
        # Temperature: 0.4 leaves room for recipe variety while keeping JSON well-formed
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.4"))
        # Max Output Tokens: three full recipes with instructions fit comfortably in 8192
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "8192"))

        # Retry Configuration - handles transient API failures (429, 503, transport errors)
        # MAX_RETRIES: Total attempts per gateway call
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: Initial delay in seconds (doubled each retry if EXPONENTIAL_BACKOFF=True)
        self.DELAY_BETWEEN_RETRIES: int = int(os.getenv("DELAY_BETWEEN_RETRIES", "2"))
        # EXPONENTIAL_BACKOFF: 2s -> 4s -> 8s instead of a flat delay
        self.EXPONENTIAL_BACKOFF: bool = _env_bool("EXPONENTIAL_BACKOFF", "true")

        # Retrieval Settings
        # MIN_RESULTS: Below this many catalog matches, synthesize the difference
        self.MIN_RESULTS: int = int(os.getenv("MIN_RESULTS", "3"))
        # SEARCH_RESULT_LIMIT: Maximum catalog matches returned per search
        self.SEARCH_RESULT_LIMIT: int = int(os.getenv("SEARCH_RESULT_LIMIT", "20"))
        # SYSTEM_CREATOR_ID: Creator reference for synthesized recipes when no user is known
        self.SYSTEM_CREATOR_ID: str = os.getenv("SYSTEM_CREATOR_ID", "system")

        # Meal Plan Settings
        # MIN_PLAN_CORPUS: Below this many restriction-matching recipes, plan from the full catalog
        self.MIN_PLAN_CORPUS: int = int(os.getenv("MIN_PLAN_CORPUS", "5"))
        # MAX_PLAN_DAYS: Upper bound on days per generated plan
        self.MAX_PLAN_DAYS: int = int(os.getenv("MAX_PLAN_DAYS", "7"))

        # Image Resolution
        # DEFAULT_RECIPE_IMAGE_URL: Placeholder used when every image tier comes back empty
        self.DEFAULT_RECIPE_IMAGE_URL: str = os.getenv(
            "DEFAULT_RECIPE_IMAGE_URL",
            "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?w=400&h=300&fit=crop",
        )
        # ENABLE_IMAGE_GENERATION: Try the image model before any image search
        self.ENABLE_IMAGE_GENERATION: bool = _env_bool("ENABLE_IMAGE_GENERATION", "true")
        # ENABLE_IMAGE_SCRAPING: Last-resort scrape of the public image search page
        self.ENABLE_IMAGE_SCRAPING: bool = _env_bool("ENABLE_IMAGE_SCRAPING", "true")
        # Google Custom Search: both key and engine id are required to enable the keyed tier
        self.GOOGLE_SEARCH_KEY: Optional[str] = os.getenv("GOOGLE_SEARCH_KEY") or None
        self.GOOGLE_SEARCH_CX: Optional[str] = os.getenv("GOOGLE_SEARCH_CX") or None
        # IMAGE_FETCH_TIMEOUT_SECONDS: Timeout for image search HTTP requests
        self.IMAGE_FETCH_TIMEOUT_SECONDS: int = int(os.getenv("IMAGE_FETCH_TIMEOUT_SECONDS", "10"))
        # Maximum generated image size (in MB) accepted for inlining. Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Image Compression: Re-encode generated images as JPEG before inlining
        self.COMPRESS_IMG: bool = _env_bool("COMPRESS_IMG", "true")
        # Image Compression Threshold: Only compress images larger than this (in KB)
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))

        # SEED_CATALOG: Load sample recipes into an empty in-memory catalog on startup
        self.SEED_CATALOG: bool = _env_bool("SEED_CATALOG", "true")

    @property
    def image_search_configured(self) -> bool:
        """True when both Google Custom Search credentials are present."""
        return bool(self.GOOGLE_SEARCH_KEY and self.GOOGLE_SEARCH_CX)

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If required API keys are missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.GEMINI_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"GEMINI_TIMEOUT_SECONDS must be positive, got: {self.GEMINI_TIMEOUT_SECONDS}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(
                f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES < 1:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must be at least 1 second, got: {self.DELAY_BETWEEN_RETRIES}"
            )
        if self.MIN_RESULTS < 1:
            raise ValueError(
                f"MIN_RESULTS must be at least 1, got: {self.MIN_RESULTS}"
            )
        if self.SEARCH_RESULT_LIMIT < self.MIN_RESULTS:
            raise ValueError(
                f"SEARCH_RESULT_LIMIT must be at least MIN_RESULTS ({self.MIN_RESULTS}), "
                f"got: {self.SEARCH_RESULT_LIMIT}"
            )
        if self.MAX_PLAN_DAYS < 1:
            raise ValueError(
                f"MAX_PLAN_DAYS must be at least 1, got: {self.MAX_PLAN_DAYS}"
            )
        if bool(self.GOOGLE_SEARCH_KEY) != bool(self.GOOGLE_SEARCH_CX):
            raise ValueError(
                "GOOGLE_SEARCH_KEY and GOOGLE_SEARCH_CX must be set together to enable image search"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
