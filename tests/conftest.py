"""
Pytest configuration file.

This file is automatically loaded by pytest before any tests run.
It sets up the test environment configuration and shared stubs.
"""
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

# Set APP_ENV to test before any other imports
os.environ['APP_ENV'] = 'test'
os.environ['USE_SECRETS_MANAGER'] = 'false'

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def mock_oracle():
    """Oracle stub; set ``complete.return_value`` or ``side_effect`` per test."""
    oracle = Mock()
    oracle.complete = AsyncMock()
    return oracle


@pytest.fixture
def mock_repository():
    """Repository stub with an async ``aggregate``."""
    repository = Mock()
    repository.aggregate = AsyncMock()
    repository.test_connection = AsyncMock(return_value=0)
    return repository


@pytest.fixture
def make_session():
    """Factory for raw session documents shaped like the stored ones."""
    def _make(index: int, rating: float = 4.0, instructor: str = "Rishi Bollu", domain: str = "SRE") -> dict:
        return {
            "_id": f"id-{index}",
            "topicCode": f"Session {index}",
            "type": "SRE Assignment Review",
            "domain": domain,
            "class": "Cloud Computing & AWS Services",
            "cohorts": ["Cohort A"],
            "instructor": instructor,
            "sessionDate": "2024-03-01T00:00:00.000Z",
            "ratings": {
                "overallAverage": rating,
                "totalResponses": 30,
                "studentsAttended": 40,
                "cohortStrength": 50,
                "percentRated": 75.0,
            },
        }
    return _make
