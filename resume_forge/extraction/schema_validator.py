"""
Validation of recovered JSON against a target pydantic schema.

Validation runs at most twice: once on the data as received, and once more after nulls are
normalized away and missing identifiers are backfilled.
"""

import copy
import uuid
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..common.exceptions.resume_exceptions import ValidationError
from ..core.logger import logger

ModelT = TypeVar("ModelT", bound=BaseModel)

ROOT_PATH = "<root>"


def new_identifier() -> str:
    return str(uuid.uuid4())


def normalize_nulls(value: Any) -> Any:
    """Treat explicit ``null`` as absent: drop null-valued keys and null array entries."""
    if isinstance(value, dict):
        return {key: normalize_nulls(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [normalize_nulls(item) for item in value if item is not None]
    return value


def backfill_identifiers(data: dict[str, Any], schema: type[BaseModel]) -> dict[str, Any]:
    """Generate a top-level ``id`` and per-item ids for the schema's identified collections."""
    if "id" in schema.model_fields and not data.get("id"):
        data["id"] = new_identifier()
        logger.debug("Backfilled missing document id")

    for collection in getattr(schema, "IDENTIFIED_COLLECTIONS", ()):
        items = data.get(collection)
        if not isinstance(items, list):
            continue
        for item in items:
            if isinstance(item, dict) and not item.get("id"):
                item["id"] = new_identifier()
                logger.debug(f"Backfilled missing id in '{collection}'")
    return data


def _first_error_path(error: PydanticValidationError) -> tuple[str, str]:
    first = error.errors()[0]
    path = ".".join(str(part) for part in first["loc"]) or ROOT_PATH
    return path, first["msg"]


def validate_payload(data: Any, schema: type[ModelT]) -> ModelT:
    """Validate parsed JSON against ``schema``, backfilling and normalizing once on failure.

    Args:
        data: The untyped JSON tree returned by the response extractor.
        schema: Pydantic model class describing the target document or report.

    Returns:
        A validated model instance.

    Raises:
        ValidationError: Naming the first offending dotted path when the data cannot be made to fit.
    """
    if not isinstance(data, dict):
        raise ValidationError(ROOT_PATH, f"expected a JSON object, got {type(data).__name__}")

    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        path, message = _first_error_path(e)
        logger.debug(f"First validation pass failed at '{path}': {message}. Normalizing and retrying.")

    repaired = backfill_identifiers(normalize_nulls(copy.deepcopy(data)), schema)
    try:
        return schema.model_validate(repaired)
    except PydanticValidationError as e:
        path, message = _first_error_path(e)
        logger.warning(f"{schema.__name__} validation failed at '{path}': {message}")
        raise ValidationError(path, message) from e
