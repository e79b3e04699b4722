import pytest
import sys
from datetime import date
from pathlib import Path

# Add backend directory to path so imports work
backend_path = Path(__file__).parent.parent
sys.path.append(str(backend_path))

from knowledge_base import build_knowledge_base


@pytest.fixture(scope="session")
def kb():
    """Built-in knowledge base tables."""
    return build_knowledge_base()


@pytest.fixture
def diwali_season():
    return date(2026, 10, 18)


@pytest.fixture
def off_season():
    # No festival in the built-in calendar falls in June
    return date(2026, 6, 15)


@pytest.fixture
def scenario_a_text():
    return "Diwali ki shubhkamnaye yaar, bhai sab kuch accha hoga"
