import asyncio
import json

from ..common.exceptions.resume_exceptions import SessionStateError
from ..core.logger import logger
from ..models.resume import ResumeProfile
from ..review.session import ReviewSession, SessionRegistry
from ..storage.resume_store import ResumeStore
from .base_service import StructuredGenerationService


class TailorService(StructuredGenerationService):
    """Produces job-specific variants of a resume and drives their review."""

    def build_user_prompt(self, original: ResumeProfile, job_description: str) -> str:
        resume_json = json.dumps(original.to_json_dict(), indent=2)
        return (
            f"## Base Resume (JSON)\n```json\n{resume_json}\n```\n\n"
            f"## Job Description\n```\n{job_description.strip()}\n```\n\n"
            "Return the refactored resume as a JSON object following the exact same ResumeProfile schema."
        )

    def tailor_resume(self, original: ResumeProfile, job_description: str) -> ResumeProfile:
        """Ask the model for a variant of ``original`` aligned with ``job_description``.

        The returned document keeps the original's id and its protected basics fields; only the
        fields the model is allowed to rewrite can differ.
        """
        if not job_description.strip():
            raise ValueError("Job description cannot be empty")

        sys_prompt = self._load_prompt(self.settings.TAILOR_SYSTEM_PROMPT_FILE)
        user_prompt = self.build_user_prompt(original, job_description)
        proposed = self._generate(sys_prompt, user_prompt, ResumeProfile)
        return self._restore_protected_fields(original, proposed)

    async def propose(self, original: ResumeProfile, job_description: str) -> ResumeProfile:
        """Async wrapper around tailor_resume; the blocking provider call runs in a worker thread."""
        return await asyncio.to_thread(self.tailor_resume, original, job_description)

    def _restore_protected_fields(self, original: ResumeProfile, proposed: ResumeProfile) -> ResumeProfile:
        basics_update = {
            field: getattr(original.basics, field)
            for field in self.settings.PROTECTED_BASICS_FIELDS
            if field in type(original.basics).model_fields
        }
        changed = [field for field, value in basics_update.items() if getattr(proposed.basics, field) != value]
        if changed:
            logger.info(f"Restored protected basics fields changed by the model: {', '.join(changed)}")
        basics = proposed.basics.model_copy(update=basics_update)
        return proposed.model_copy(update={"id": original.id, "basics": basics})

    def start_review(
        self, registry: SessionRegistry, original: ResumeProfile, job_description: str
    ) -> ReviewSession:
        """Generate a proposal and open a review session on it.

        If generation fails, no session is opened and the error propagates.

        Raises:
            SessionStateError: If the document is already under review; the model is not called.
        """
        active = registry.get(original.id)
        if active is not None and active.is_active:
            raise SessionStateError(f"Document {original.id} already has an active review session")
        proposed = self.tailor_resume(original, job_description)
        return registry.open(original, proposed)

    async def regenerate(self, session: ReviewSession, job_description: str) -> ResumeProfile:
        """Replace the session's proposal with a fresh one for the same job description."""
        if session.changeset is None:
            raise ValueError("Session has not been started")
        original = session.changeset.original
        return await session.regenerate(lambda: self.propose(original, job_description))

    def commit(
        self,
        session: ReviewSession,
        store: ResumeStore,
        owner_id: str,
        folder_path: str | None = None,
        document_id: str | None = None,
    ) -> ResumeProfile:
        """Keep the session and hand the resolved document to the store.

        With no ``folder_path`` the document stays in the folder it is already filed under; pass
        ``"/"`` to move it to the root.
        """
        resolved = session.keep()
        target_id = document_id or resolved.id
        if folder_path is None:
            folder_path = store.get_folder_path(target_id, owner_id)
        store.save(target_id, owner_id, resolved, folder_path=folder_path)
        return resolved
