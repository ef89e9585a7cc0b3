import os

# Configure before the app modules read the environment
os.environ.setdefault("VALKEY_HOST", "")
os.environ.setdefault("LOG_FILE", "")
os.environ["VALID_TOKENS"] = "fake-client-token"

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from main import app
from config import config
from api.depends import get_pipeline
from models.dataset import Dataset
from services.cache import get_cache_client, get_mock_cache_client
from services.pipeline import ChartPipeline

config.valid_tokens = ["fake-client-token"]

AUTH_HEADERS = {"Authorization": "Bearer fake-client-token"}


def make_dataset(start: date, series: dict, variations=None) -> Dataset:
    """
    Build a dataset from per-variation-key series of (visits, conversions) tuples.
    A None entry leaves the variation out of that day's visits.
    """
    if variations is None:
        variations = [{"id": None if key == "0" else int(key), "name": f"V{key}"} for key in series]
    length = max(len(values) for values in series.values())
    days = []
    for offset in range(length):
        visits, conversions = {}, {}
        for key, values in series.items():
            if offset >= len(values) or values[offset] is None:
                continue
            visits[key], conv = values[offset]
            if conv is not None:
                conversions[key] = conv
        days.append({
            "date": (start + timedelta(days=offset)).isoformat(),
            "visits": visits,
            "conversions": conversions,
        })
    return Dataset.model_validate({"variations": variations, "days": days})


# Used by API tests: Mon 2025-01-06 .. Sun 2025-01-19, Variation A missing mid-week
API_DATASET = make_dataset(
    date(2025, 1, 6),
    {
        "0": [(100, 10)] * 14,
        "1": [(100, 20), (100, 20), None, None, (100, 40)] + [(100, 30)] * 9,
    },
    variations=[{"name": "Original"}, {"id": 1, "name": "Variation A"}],
)

_MOCK_CACHE_CLIENT = get_mock_cache_client()

def override_get_pipeline():
    return ChartPipeline(API_DATASET)

def override_get_cache_client():
    return _MOCK_CACHE_CLIENT

app.dependency_overrides[get_pipeline] = override_get_pipeline
app.dependency_overrides[get_cache_client] = override_get_cache_client


@pytest.fixture
def api_dataset():
    return API_DATASET

@pytest.fixture
def cache_client():
    return _MOCK_CACHE_CLIENT

@pytest.fixture
def client():
    # lifespan loads the bundled data/data.json; routes use the overridden pipeline
    config.dataset_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "data.json")
    with TestClient(app) as c:
        yield c

@pytest.fixture
def headers():
    return AUTH_HEADERS
