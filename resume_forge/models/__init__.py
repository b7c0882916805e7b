"""Models package for resume documents and reports."""

from .resume import Basics, EducationEntry, Location, Project, ResumeProfile, SkillCategory, WorkEntry
from .skill_gap import SkillAssessment, SkillGapReport, SkillGapSummary

__all__ = [
    "Basics",
    "EducationEntry",
    "Location",
    "Project",
    "ResumeProfile",
    "SkillAssessment",
    "SkillCategory",
    "SkillGapReport",
    "SkillGapSummary",
    "WorkEntry",
]
