from pydantic import ValidationError
from models.dataset import Dataset
from services.errors import DatasetValidationError
from typing import Any
import json
import logging

logger = logging.getLogger(__name__)


def parse_dataset(payload: dict[str, Any]) -> Dataset:
    """Validate a raw {variations, data|days} mapping into a Dataset, rejecting it whole on any error."""
    try:
        dataset = Dataset.model_validate(payload)
    except ValidationError as e:
        logger.error("dataset rejected: %s", e)
        raise DatasetValidationError(str(e)) from e

    logger.info("dataset loaded: %d variations, %d days", len(dataset.variations), len(dataset.days))
    return dataset


def load_dataset(path: str) -> Dataset:
    """Read and validate a dataset JSON file."""
    logger.info("loading dataset from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("dataset file %s is not valid JSON: %s", path, e)
        raise DatasetValidationError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise DatasetValidationError(f"{path} must contain a JSON object")

    return parse_dataset(payload)
