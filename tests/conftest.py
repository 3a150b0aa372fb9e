"""
Shared fixtures for the test suite.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture()
def api_client():
    """FastAPI ``TestClient`` for the workshop app."""
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def flute_540() -> dict[str, float]:
    """Request body fields for a 1.8 shaku blank: 540 mm, 19 mm bore, 4 mm wall, 10 mm holes."""
    return {
        "length_mm": 540.0,
        "bore_diameter_mm": 19.0,
        "wall_thickness_mm": 4.0,
        "hole_diameter_mm": 10.0,
    }
