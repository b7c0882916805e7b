from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..models.resume import ResumeProfile
from .change_path import (
    BASICS_FIELDS,
    REVIEWED_COLLECTIONS,
    ChangePath,
    ScalarPath,
    document_paths,
    keyed_path,
    parse_change_path,
)

ChangeKind = Literal["added", "removed", "modified"]


class Change(BaseModel):
    """One reviewable difference between the original and the proposed document."""

    model_config = ConfigDict(frozen=True)

    path: ChangePath = Field(discriminator="kind")
    kind: ChangeKind
    old_value: Any = None
    new_value: Any = None


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _classify(old: Any, new: Any) -> ChangeKind | None:
    if old == new:
        return None
    if _is_empty(old):
        return "added"
    if _is_empty(new):
        return "removed"
    return "modified"


def compute_changes(original: ResumeProfile, proposed: ResumeProfile) -> list[Change]:
    """List the review surface between two documents.

    Items present in both documents contribute field-level changes only; items present on one
    side contribute a single item-level change. Non-reviewed sections are ignored.
    """
    old_data = original.to_json_dict()
    new_data = proposed.to_json_dict()
    changes: list[Change] = []

    for field in BASICS_FIELDS:
        old, new = old_data["basics"].get(field), new_data["basics"].get(field)
        kind = _classify(old, new)
        if kind:
            changes.append(Change(path=ScalarPath(field=field), kind=kind, old_value=old, new_value=new))

    for collection in REVIEWED_COLLECTIONS:
        old_items = {str(item[collection.key_field]): item for item in old_data[collection.name]}
        new_items = {str(item[collection.key_field]): item for item in new_data[collection.name]}

        for key, old_item in old_items.items():
            new_item = new_items.get(key)
            if new_item is None:
                changes.append(
                    Change(path=keyed_path(collection.name, key), kind="removed", old_value=old_item)
                )
                continue
            for field in collection.fields:
                old, new = old_item.get(field), new_item.get(field)
                kind = _classify(old, new)
                if kind:
                    path = keyed_path(collection.name, key, field)
                    changes.append(Change(path=path, kind=kind, old_value=old, new_value=new))

        for key, new_item in new_items.items():
            if key not in old_items:
                changes.append(Change(path=keyed_path(collection.name, key), kind="added", new_value=new_item))

    return changes


class ChangeSet:
    """An original document, a proposed variant, and the user's sparse per-path decisions.

    A missing key in ``decisions`` means the change is still pending.
    """

    def __init__(self, original: ResumeProfile, proposed: ResumeProfile) -> None:
        self.original = original
        self.proposed = proposed
        self.decisions: dict[ChangePath, bool] = {}

    def addressable_paths(self) -> set[ChangePath]:
        return set(document_paths(self.original)) | set(document_paths(self.proposed))

    def changes(self) -> list[Change]:
        return compute_changes(self.original, self.proposed)

    def decision_for(self, path: str | ChangePath) -> bool | None:
        return self.decisions.get(parse_change_path(path))

    def pending_paths(self) -> list[ChangePath]:
        return [change.path for change in self.changes() if change.path not in self.decisions]

    def set_decision(self, path: str | ChangePath, accepted: bool) -> ChangePath:
        parsed = parse_change_path(path)
        if parsed not in self.addressable_paths():
            raise ValueError(f"Change path does not address anything in either document: {parsed}")
        self.decisions[parsed] = accepted
        return parsed

    def clear_decision(self, path: str | ChangePath) -> ChangePath:
        parsed = parse_change_path(path)
        self.decisions.pop(parsed, None)
        return parsed

    def replace_proposed(self, proposed: ResumeProfile) -> None:
        self.proposed = proposed
        self.decisions.clear()

    def serialized_decisions(self) -> dict[str, bool]:
        return {str(path): accepted for path, accepted in self.decisions.items()}
