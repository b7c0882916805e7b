from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SkillStatus = Literal["matched", "missing", "partial"]


class SkillGapModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SkillAssessment(SkillGapModel):
    """One skill or keyword from the job description and how the resume covers it."""

    skill: str
    category: str = Field(default="hard_skills", description="hard_skills, domain_knowledge or seniority.")
    status: SkillStatus
    evidence: str | None = None
    recommendation: str | None = None


class SkillGapSummary(SkillGapModel):
    total_skills: int = 0
    matched_count: int = 0
    missing_count: int = 0
    partial_count: int = 0
    match_percentage: float = 0.0


class SkillGapReport(SkillGapModel):
    """Skill-gap analysis of a resume against a job description."""

    IDENTIFIED_COLLECTIONS: ClassVar[tuple[str, ...]] = ()

    matched: list[SkillAssessment] = Field(default_factory=list)
    missing: list[SkillAssessment] = Field(default_factory=list)
    partial: list[SkillAssessment] = Field(default_factory=list)
    summary: SkillGapSummary = Field(default_factory=SkillGapSummary)

    def with_recomputed_summary(self) -> SkillGapReport:
        """Return a copy whose summary is derived from the lists, ignoring the model's own numbers.

        Matched skills count as full credit, partial as half, missing as none.
        """
        matched_count = len(self.matched)
        missing_count = len(self.missing)
        partial_count = len(self.partial)
        total = matched_count + missing_count + partial_count
        percentage = ((matched_count + partial_count * 0.5) / total) * 100 if total > 0 else 0.0
        summary = SkillGapSummary(
            total_skills=total,
            matched_count=matched_count,
            missing_count=missing_count,
            partial_count=partial_count,
            match_percentage=round(percentage, 2),
        )
        return self.model_copy(update={"summary": summary})
