from ..core.logger import logger
from ..models.resume import ResumeProfile
from .base_service import StructuredGenerationService


class IngestService(StructuredGenerationService):
    """Converts plain resume text into a ResumeProfile."""

    def parse_text(self, content: str) -> ResumeProfile:
        """Parse raw resume text (plain or markdown) into a validated document.

        Missing document and work ids are generated during validation.
        """
        if not content.strip():
            raise ValueError("Resume content cannot be empty")

        sys_prompt = self._load_prompt(self.settings.INGEST_SYSTEM_PROMPT_FILE)
        user_prompt = (
            f"## Resume Content\n```\n{content.strip()}\n```\n\n"
            "Parse the above resume and return a valid JSON object matching the ResumeProfile schema."
        )
        profile = self._generate(sys_prompt, user_prompt, ResumeProfile)
        logger.info(
            f"Ingested resume for {profile.basics.name or 'unknown'}: "
            f"{len(profile.work)} work entries, {len(profile.skills)} skill categories"
        )
        return profile
