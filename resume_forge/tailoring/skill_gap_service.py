import json

from ..core.logger import logger
from ..models.resume import ResumeProfile
from ..models.skill_gap import SkillGapReport
from .base_service import StructuredGenerationService


class SkillGapService(StructuredGenerationService):
    """Audits a resume against a job description."""

    def analyze(self, resume: ResumeProfile, job_description: str) -> SkillGapReport:
        """Return the skill-gap report with its summary recomputed from the classified skills."""
        if not job_description.strip():
            raise ValueError("Job description cannot be empty")

        sys_prompt = self._load_prompt(self.settings.SKILL_GAP_SYSTEM_PROMPT_FILE)
        user_prompt = (
            f"## Resume Profile (JSON)\n```json\n{json.dumps(resume.to_json_dict(), indent=2)}\n```\n\n"
            f"## Job Description\n```\n{job_description.strip()}\n```\n\n"
            "Analyze the skill gaps and return the JSON report."
        )
        report = self._generate(sys_prompt, user_prompt, SkillGapReport).with_recomputed_summary()
        logger.info(
            f"Skill gap analysis: {report.summary.matched_count} matched, "
            f"{report.summary.partial_count} partial, {report.summary.missing_count} missing "
            f"({report.summary.match_percentage}%)"
        )
        return report
