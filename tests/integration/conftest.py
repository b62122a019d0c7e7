"""Pytest configuration and fixtures for integration tests.

These tests call the real Gemini API. They are skipped unless a real
GEMINI_API_KEY is available from the environment or the project .env.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

TEST_GEMINI_KEY = "test-gemini-key"


def pytest_configure(config):
    """Load .env from the project root before collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: integration tests require a valid GEMINI_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(autouse=True)
def check_api_key():
    """Skip when only the unit-test placeholder key is configured."""
    gemini_key = os.getenv("GEMINI_API_KEY")
    if not gemini_key or gemini_key == TEST_GEMINI_KEY:
        pytest.skip("Integration tests skipped. Set GEMINI_API_KEY in your .env file.")
