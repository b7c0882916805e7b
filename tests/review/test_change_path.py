"""Tests for ChangePath parsing, formatting and derivation."""

import pytest

from resume_forge.models.resume import ResumeProfile
from resume_forge.review.change_path import (
    CategoryPath,
    ItemPath,
    ScalarPath,
    document_paths,
    keyed_path,
    parse_change_path,
)


class TestParseChangePath:
    """Test suite for parse_change_path."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("basics.label", ScalarPath(field="label")),
            ("basics.location", ScalarPath(field="location")),
            ("work.w1", ItemPath(key="w1")),
            ("work.w1.highlights", ItemPath(key="w1", field="highlights")),
            ("work.w1.startDate", ItemPath(key="w1", field="startDate")),
            ("skills.Languages", CategoryPath(key="Languages")),
            ("skills.Languages.keywords", CategoryPath(key="Languages", field="keywords")),
        ],
    )
    def test_parse_and_format(self, value: str, expected: object) -> None:
        parsed = parse_change_path(value)
        assert parsed == expected
        assert str(parsed) == value

    def test_dotted_category_names(self) -> None:
        """A category like ``Node.js`` keeps its dot; only a known field suffix is split off."""
        assert parse_change_path("skills.Node.js") == CategoryPath(key="Node.js")
        assert parse_change_path("skills.Node.js.keywords") == CategoryPath(key="Node.js", field="keywords")
        assert str(CategoryPath(key="Node.js", field="keywords")) == "skills.Node.js.keywords"

    def test_unknown_suffix_is_part_of_the_key(self) -> None:
        assert parse_change_path("work.a.b") == ItemPath(key="a.b")

    def test_path_objects_pass_through(self) -> None:
        path = ItemPath(key="w1", field="position")
        assert parse_change_path(path) is path

    @pytest.mark.parametrize(
        "value",
        ["", "basics", "basics.", "basics.__class__", "education.0", "work", "projects.Notes", "nonsense"],
    )
    def test_invalid_paths_raise(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_change_path(value)

    def test_non_string_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_change_path(42)  # type: ignore[arg-type]


class TestPathsAsKeys:
    def test_equal_paths_hash_equal(self) -> None:
        decisions = {ItemPath(key="w1", field="highlights"): True}
        assert decisions[parse_change_path("work.w1.highlights")] is True

    def test_item_of_field_path(self) -> None:
        assert ItemPath(key="w1", field="position").item() == ItemPath(key="w1")
        assert CategoryPath(key="Cloud", field="keywords").item() == CategoryPath(key="Cloud")

    def test_keyed_path_rejects_unreviewed_collection(self) -> None:
        with pytest.raises(ValueError):
            keyed_path("education", "0")


def test_document_paths_is_deterministic(original_profile: ResumeProfile) -> None:
    paths = document_paths(original_profile)

    assert paths == document_paths(original_profile.model_copy(deep=True))
    assert paths[:6] == [ScalarPath(field=f) for f in ("name", "label", "email", "phone", "url", "location")]
    assert ItemPath(key="w2") in paths
    assert ItemPath(key="w2", field="endDate") in paths
    assert CategoryPath(key="Node.js", field="keywords") in paths
    assert all(parse_change_path(str(path)) == path for path in paths)
