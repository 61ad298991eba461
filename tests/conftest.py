"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/              # Fast, isolated tests (no database, no HTTP)
    ├── integration/       # SQLite persistence and FastAPI TestClient tests
    └── shared/            # Shared fakes (clock, cookie transport, store)
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from storefront_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.test for tests, if present
ENV_FILE = PROJECT_ROOT / "config" / ".env.test"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Make every test see a freshly loaded configuration."""
    clear_settings_cache()
    yield
    clear_settings_cache()
