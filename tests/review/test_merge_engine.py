"""Tests for resolving an original and a proposed document into one."""

import copy
from typing import Any

import pytest

from resume_forge.models.resume import ResumeProfile
from resume_forge.review.change_path import ItemPath, ScalarPath, document_paths
from resume_forge.review.changeset import compute_changes
from resume_forge.review.merge_engine import resolve


def _profile(work: list[dict[str, Any]], skills: list[dict[str, Any]] | None = None) -> ResumeProfile:
    return ResumeProfile.model_validate(
        {"id": "doc-1", "basics": {"name": "Ada"}, "work": work, "skills": skills or []}
    )


@pytest.fixture
def scenario() -> tuple[ResumeProfile, ResumeProfile]:
    original = _profile([{"id": "1", "company": "Acme", "highlights": ["x"]}])
    proposed = _profile(
        [
            {"id": "1", "company": "Acme Corp", "highlights": ["x", "y"]},
            {"id": "2", "company": "NewCo", "highlights": []},
        ]
    )
    return original, proposed


class TestResolve:
    """Test suite for resolve."""

    def test_concrete_work_scenario(self, scenario: tuple[ResumeProfile, ResumeProfile]) -> None:
        """Accepted company applies, pending highlights stay original, rejected addition is excluded."""
        original, proposed = scenario
        resolved = resolve(original, proposed, {"work.1.company": True, "work.2": False})

        assert [entry.model_dump() for entry in resolved.work] == [
            original.work[0].model_copy(update={"company": "Acme Corp"}).model_dump()
        ]
        assert resolved.work[0].highlights == ["x"]

    def test_is_idempotent(self, original_profile: ResumeProfile, proposed_profile: ResumeProfile) -> None:
        decisions = {"basics.label": True, "work.w3": True, "skills.Languages.keywords": False}
        first = resolve(original_profile, proposed_profile, decisions)
        second = resolve(original_profile, proposed_profile, decisions)
        assert first == second

    def test_does_not_mutate_inputs(self, original_profile: ResumeProfile, proposed_profile: ResumeProfile) -> None:
        original_before = original_profile.model_copy(deep=True)
        proposed_before = proposed_profile.model_copy(deep=True)
        decisions = {ItemPath(key="w1"): True, ItemPath(key="w3"): True}
        decisions_before = dict(decisions)

        resolved = resolve(original_profile, proposed_profile, decisions)
        resolved.work[0].highlights.append("mutated")

        assert original_profile == original_before
        assert proposed_profile == proposed_before
        assert decisions == decisions_before

    def test_conservative_default(self, original_profile: ResumeProfile, proposed_profile: ResumeProfile) -> None:
        """With no decisions nothing changes: additions excluded, removals not applied."""
        resolved = resolve(original_profile, proposed_profile, {})
        assert resolved == original_profile

    def test_all_accepted_takes_proposed_for_reviewed_sections(self, original_profile: ResumeProfile) -> None:
        data = original_profile.to_json_dict()
        data["basics"]["label"] = "Staff Engineer"
        data["work"][1]["highlights"] = ["Automated the release process"]
        data["work"].append({"id": "w9", "company": "Hooli", "highlights": ["Scaled search"]})
        data["skills"][1]["keywords"] = ["Express", "Fastify"]
        data["projects"] = []
        proposed = ResumeProfile.model_validate(data)

        decisions = {path: True for path in document_paths(proposed)}
        resolved = resolve(original_profile, proposed, decisions)

        assert resolved.basics == proposed.basics
        assert resolved.work == proposed.work
        assert resolved.skills == proposed.skills
        assert resolved.education == original_profile.education
        assert resolved.projects == original_profile.projects

    def test_all_rejected_keeps_original(self, original_profile: ResumeProfile) -> None:
        data = original_profile.to_json_dict()
        data["basics"]["label"] = "Staff Engineer"
        data["work"][0]["position"] = "Lead"
        data["work"].append({"id": "w9", "company": "Hooli"})
        data["skills"].append({"name": "Cloud", "keywords": ["GCP"]})
        proposed = ResumeProfile.model_validate(data)

        decisions = {path: False for path in document_paths(proposed)}
        assert resolve(original_profile, proposed, decisions) == original_profile

    def test_all_rejected_work_scenario(self, scenario: tuple[ResumeProfile, ResumeProfile]) -> None:
        original, proposed = scenario
        decisions = {path: False for path in document_paths(proposed)}

        resolved = resolve(original, proposed, decisions)

        assert resolved == original
        assert [entry.company for entry in resolved.work] == ["Acme"]

    def test_rejecting_changes_keeps_original(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        """Rejecting every change on the review surface leaves everything but confirmed removals."""
        decisions = {change.path: False for change in compute_changes(original_profile, proposed_profile)}
        resolved = resolve(original_profile, proposed_profile, decisions)

        assert resolved.basics == original_profile.basics
        assert resolved.work == [original_profile.work[0]]
        assert resolved.skills == original_profile.skills

    def test_rejecting_a_removed_item_confirms_removal(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        kept = resolve(original_profile, proposed_profile, {"work.w2": True})
        removed = resolve(original_profile, proposed_profile, {"work.w2": False})

        assert [entry.id for entry in kept.work] == ["w1", "w2"]
        assert [entry.id for entry in removed.work] == ["w1"]

    def test_item_accept_applies_changed_fields(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        resolved = resolve(original_profile, proposed_profile, {"work.w1": True})
        assert resolved.work[0] == proposed_profile.work[0]

    def test_field_decision_overrides_item_accept(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        resolved = resolve(original_profile, proposed_profile, {"work.w1": True, "work.w1.highlights": False})

        assert resolved.work[0].position == "Backend Developer"
        assert resolved.work[0].highlights == ["Built internal APIs"]

    def test_item_reject_keeps_original_item(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        resolved = resolve(original_profile, proposed_profile, {"work.w1": False})

        assert [entry.id for entry in resolved.work] == ["w1", "w2"]
        assert resolved.work[0] == original_profile.work[0]

    def test_accepted_field_survives_item_reject(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        """An explicitly accepted field is never discarded by an item-level rejection."""
        resolved = resolve(
            original_profile, proposed_profile, {"work.w1": False, "work.w1.position": True}
        )

        assert [entry.id for entry in resolved.work] == ["w1", "w2"]
        assert resolved.work[0].position == "Backend Developer"
        assert resolved.work[0].highlights == ["Built internal APIs"]

    def test_new_items_are_appended_in_proposed_order(self, original_profile: ResumeProfile) -> None:
        data = original_profile.to_json_dict()
        data["work"] = [
            {"id": "n2", "company": "Second"},
            data["work"][1],
            {"id": "n1", "company": "First"},
            data["work"][0],
        ]
        proposed = ResumeProfile.model_validate(data)

        resolved = resolve(original_profile, proposed, {"work.n1": True, "work.n2": True})
        assert [entry.id for entry in resolved.work] == ["w1", "w2", "n2", "n1"]

    def test_skills_follow_the_same_policy(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        resolved = resolve(
            original_profile,
            proposed_profile,
            {"skills.Languages.keywords": True, "skills.Cloud": True},
        )

        assert [category.name for category in resolved.skills] == ["Languages", "Node.js", "Cloud"]
        assert resolved.skills[0].keywords == ["Python", "Go", "Rust"]

    def test_dotted_category_name(self) -> None:
        original = _profile([], [{"name": "Node.js", "keywords": ["Express"]}])
        proposed = _profile([], [{"name": "Node.js", "keywords": ["Express", "Nest"]}])

        resolved = resolve(original, proposed, {"skills.Node.js.keywords": True})
        assert resolved.skills[0].keywords == ["Express", "Nest"]

    def test_basics_scalar_decisions(self, original_profile: ResumeProfile) -> None:
        basics = original_profile.basics.model_copy(update={"label": "Architect", "email": "new@example.com"})
        proposed = original_profile.model_copy(update={"basics": basics})

        resolved = resolve(
            original_profile, proposed, {ScalarPath(field="label"): True, ScalarPath(field="email"): False}
        )

        assert resolved.basics.label == "Architect"
        assert resolved.basics.email == "ada@example.com"

    def test_identity_and_non_reviewed_sections_come_from_original(
        self, original_profile: ResumeProfile, proposed_profile: ResumeProfile
    ) -> None:
        proposed = proposed_profile.model_copy(update={"id": "other"})
        decisions = {path: True for path in document_paths(proposed)}

        resolved = resolve(original_profile, proposed, decisions)

        assert resolved.id == "doc-1"
        assert resolved.projects == original_profile.projects
        assert resolved.education == original_profile.education

    def test_unknown_decision_key_raises(self, original_profile: ResumeProfile) -> None:
        with pytest.raises(ValueError):
            resolve(original_profile, copy.deepcopy(original_profile), {"projects.Notes": True})
