"""
Resolution of an original and a proposed document into one final document.

Policy, applied per field or collection item:

* basics fields take the proposed value only when accepted.
* keyed collection items (``work`` by id, ``skills`` by category name):
    - in both documents: original item, overwritten field by field where the field is accepted,
      or pending under an accepted item. A rejected item stays as in the original, apart from
      fields that were explicitly accepted.
    - only in the original: kept unless the item is rejected (rejecting confirms the removal).
    - only in the proposed: added only when the item is accepted.
    - original order is kept; accepted new items are appended in proposed order.
* ``education``, ``projects`` and the document id always come from the original.

Pending means conservative: nothing changes until it is explicitly accepted.
"""

import copy
from collections.abc import Mapping
from typing import Any

from ..models.resume import ResumeProfile
from .change_path import (
    BASICS_FIELDS,
    REVIEWED_COLLECTIONS,
    ChangePath,
    KeyedCollection,
    ScalarPath,
    keyed_path,
    parse_change_path,
)

Decisions = Mapping[ChangePath, bool] | Mapping[str, bool]


def _normalize_decisions(decisions: Mapping[Any, bool]) -> dict[ChangePath, bool]:
    return {parse_change_path(path): bool(accepted) for path, accepted in decisions.items()}


def _merge_item(
    collection: KeyedCollection,
    key: str,
    old_item: dict[str, Any],
    new_item: dict[str, Any],
    decisions: dict[ChangePath, bool],
) -> dict[str, Any]:
    item_decision = decisions.get(keyed_path(collection.name, key))
    field_decisions = {field: decisions.get(keyed_path(collection.name, key, field)) for field in collection.fields}

    merged = copy.deepcopy(old_item)
    for field, field_decision in field_decisions.items():
        if field_decision is True or (field_decision is None and item_decision is True):
            merged[field] = copy.deepcopy(new_item.get(field))
    return merged


def _merge_collection(
    collection: KeyedCollection,
    old_items: list[dict[str, Any]],
    new_items: list[dict[str, Any]],
    decisions: dict[ChangePath, bool],
) -> list[dict[str, Any]]:
    new_by_key = {str(item[collection.key_field]): item for item in new_items}
    old_keys = {str(item[collection.key_field]) for item in old_items}
    merged: list[dict[str, Any]] = []

    for old_item in old_items:
        key = str(old_item[collection.key_field])
        new_item = new_by_key.get(key)
        if new_item is None:
            if decisions.get(keyed_path(collection.name, key)) is not False:
                merged.append(copy.deepcopy(old_item))
            continue
        merged.append(_merge_item(collection, key, old_item, new_item, decisions))

    for new_item in new_items:
        key = str(new_item[collection.key_field])
        if key not in old_keys and decisions.get(keyed_path(collection.name, key)) is True:
            merged.append(copy.deepcopy(new_item))

    return merged


def resolve(original: ResumeProfile, proposed: ResumeProfile, decisions: Decisions) -> ResumeProfile:
    """Apply ``decisions`` to produce the resolved document.

    Pure and deterministic: the inputs are not modified and the same inputs always give the
    same output. Decision keys may be ChangePath objects or their dotted string form.

    Callers must pass two documents with the same identity and shape.
    """
    normalized = _normalize_decisions(decisions)
    old_data = original.to_json_dict()
    new_data = proposed.to_json_dict()
    result = copy.deepcopy(old_data)

    for field in BASICS_FIELDS:
        if normalized.get(ScalarPath(field=field)) is True:
            result["basics"][field] = copy.deepcopy(new_data["basics"].get(field))

    for collection in REVIEWED_COLLECTIONS:
        result[collection.name] = _merge_collection(
            collection, old_data[collection.name], new_data[collection.name], normalized
        )

    return ResumeProfile.model_validate(result)
