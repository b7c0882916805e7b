"""
Addressable units of a resume document.

A ChangePath names one field or collection item that can be accepted or rejected on its own.
Paths serialize to dot-delimited strings (``basics.label``, ``work.<id>.highlights``,
``skills.<name>.keywords``) that are safe as map keys and in logs. Parsing matches known field
names; the string is never evaluated as an attribute-access expression.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from ..models.resume import ResumeProfile

BASICS_FIELDS: tuple[str, ...] = ("name", "label", "email", "phone", "url", "location")


class KeyedCollection(BaseModel):
    """How one reviewed collection is keyed and which of its item fields are reviewable."""

    model_config = ConfigDict(frozen=True)

    name: str
    key_field: str
    fields: tuple[str, ...]


WORK = KeyedCollection(
    name="work",
    key_field="id",
    fields=("company", "position", "startDate", "endDate", "highlights"),
)
SKILLS = KeyedCollection(name="skills", key_field="name", fields=("keywords",))

REVIEWED_COLLECTIONS: tuple[KeyedCollection, ...] = (WORK, SKILLS)
COLLECTIONS_BY_NAME: dict[str, KeyedCollection] = {c.name: c for c in REVIEWED_COLLECTIONS}


class ScalarPath(BaseModel):
    """A scalar field of ``basics``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    field: str

    def __str__(self) -> str:
        return f"basics.{self.field}"


class ItemPath(BaseModel):
    """A ``work`` entry (by id), or one field of it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["item"] = "item"
    collection: Literal["work"] = "work"
    key: str
    field: str | None = None

    def __str__(self) -> str:
        base = f"{self.collection}.{self.key}"
        return f"{base}.{self.field}" if self.field else base

    def item(self) -> ItemPath:
        return ItemPath(key=self.key)


class CategoryPath(BaseModel):
    """A ``skills`` category (by name), or its keyword list."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["category"] = "category"
    collection: Literal["skills"] = "skills"
    key: str
    field: str | None = None

    def __str__(self) -> str:
        base = f"{self.collection}.{self.key}"
        return f"{base}.{self.field}" if self.field else base

    def item(self) -> CategoryPath:
        return CategoryPath(key=self.key)


ChangePath = Union[ScalarPath, ItemPath, CategoryPath]
KeyedPath = Union[ItemPath, CategoryPath]


def keyed_path(collection: str, key: str, field: str | None = None) -> KeyedPath:
    """Build the path variant for an item (or item field) of a reviewed collection."""
    if collection == WORK.name:
        return ItemPath(key=key, field=field)
    if collection == SKILLS.name:
        return CategoryPath(key=key, field=field)
    raise ValueError(f"Collection is not reviewed: {collection}")


def parse_change_path(value: str | ChangePath) -> ChangePath:
    """Parse a dotted path string back into its ChangePath variant.

    Item keys may themselves contain dots (a skill category called ``Node.js``); the trailing
    segment is read as a field only when it names a reviewable field of that collection.

    Raises:
        ValueError: If the string does not address a reviewable unit.
    """
    if isinstance(value, (ScalarPath, ItemPath, CategoryPath)):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Change path must be a string, got {type(value).__name__}")

    head, sep, rest = value.partition(".")
    if not sep or not rest:
        raise ValueError(f"Invalid change path: {value!r}")

    if head == "basics":
        if rest not in BASICS_FIELDS:
            raise ValueError(f"Unknown basics field in change path: {value!r}")
        return ScalarPath(field=rest)

    collection = COLLECTIONS_BY_NAME.get(head)
    if collection is None:
        raise ValueError(f"Section is not reviewable: {value!r}")

    key, field = rest, None
    prefix, dot, last = rest.rpartition(".")
    if dot and prefix and last in collection.fields:
        key, field = prefix, last
    return keyed_path(collection.name, key, field)


def document_paths(document: ResumeProfile) -> list[ChangePath]:
    """Every addressable unit of ``document`` in document order.

    The same logical field always yields the same path, so paths derived from the original and
    from a proposed variant line up.
    """
    data = document.to_json_dict()
    paths: list[ChangePath] = [ScalarPath(field=field) for field in BASICS_FIELDS]
    for collection in REVIEWED_COLLECTIONS:
        for item in data[collection.name]:
            key = str(item[collection.key_field])
            paths.append(keyed_path(collection.name, key))
            paths.extend(keyed_path(collection.name, key, field) for field in collection.fields)
    return paths
