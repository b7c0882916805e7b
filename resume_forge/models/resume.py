from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ResumeModel(BaseModel):
    """Base for resume models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with wire (camelCase) names, the shape used in prompts, storage and ChangePaths."""
        return self.model_dump(by_alias=True, mode="json")


class Location(ResumeModel):
    city: str = ""
    region: str = ""


class Basics(ResumeModel):
    """Scalar identity and contact fields. Each one is reviewed as a single unit."""

    name: str
    label: str = ""
    email: str = ""
    phone: str = ""
    url: str | None = None
    location: Location | None = None


class WorkEntry(ResumeModel):
    id: str = Field(min_length=1, description="Stable identifier, assigned at creation and never reassigned.")
    company: str
    position: str = ""
    start_date: str = ""
    end_date: str | None = Field(default=None, description="None for the current position.")
    highlights: list[str] = Field(default_factory=list)


class EducationEntry(ResumeModel):
    institution: str
    area: str = ""
    study_type: str = ""
    start_date: str = ""
    end_date: str | None = None


class SkillCategory(ResumeModel):
    name: str = Field(min_length=1, description="Category name, the key used to match categories across versions.")
    keywords: list[str] = Field(default_factory=list)


class Project(ResumeModel):
    name: str
    description: str = ""
    url: str | None = None
    highlights: list[str] = Field(default_factory=list)


class ResumeProfile(ResumeModel):
    """The canonical structured resume document.

    ``IDENTIFIED_COLLECTIONS`` lists the arrays whose items carry a generated ``id``; the schema
    validator backfills missing ids for exactly these collections.
    """

    IDENTIFIED_COLLECTIONS: ClassVar[tuple[str, ...]] = ("work",)

    id: str = Field(min_length=1)
    basics: Basics
    work: list[WorkEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[SkillCategory] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    @field_validator("work")
    @classmethod
    def validate_unique_work_ids(cls, v: list[WorkEntry]) -> list[WorkEntry]:
        seen: set[str] = set()
        for entry in v:
            if entry.id in seen:
                raise ValueError(f"Duplicate work id: {entry.id}")
            seen.add(entry.id)
        return v

    @field_validator("skills")
    @classmethod
    def validate_unique_skill_names(cls, v: list[SkillCategory]) -> list[SkillCategory]:
        seen: set[str] = set()
        for category in v:
            if category.name in seen:
                raise ValueError(f"Duplicate skill category: {category.name}")
            seen.add(category.name)
        return v
