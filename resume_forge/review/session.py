"""
Review session lifecycle.

    IDLE --start--> REVIEWING --keep--> KEPT
                    REVIEWING --undo--> ABANDONED

While REVIEWING, decisions can be set, reset, and the proposed document replaced (regenerate).
KEPT and ABANDONED are terminal; a new review needs a new session.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

from ..common.exceptions.resume_exceptions import GenerationInProgressError, SessionStateError
from ..core.logger import logger
from ..models.resume import ResumeProfile
from .change_path import ChangePath, ScalarPath
from .changeset import Change, ChangeSet
from .merge_engine import resolve


class SessionState(str, Enum):
    IDLE = "idle"
    REVIEWING = "reviewing"
    KEPT = "kept"
    ABANDONED = "abandoned"


TERMINAL_STATES = frozenset({SessionState.KEPT, SessionState.ABANDONED})


def _under_rejected_item(changeset: ChangeSet, path: ChangePath) -> bool:
    if isinstance(path, ScalarPath) or path.field is None:
        return False
    return changeset.decision_for(type(path)(key=path.key)) is False


class ReviewSession:
    """Owns one ChangeSet from start until it is kept or undone.

    Args:
        on_terminate: Called once with the session when it reaches a terminal state.
    """

    def __init__(self, on_terminate: Callable[[ReviewSession], None] | None = None) -> None:
        self.state = SessionState.IDLE
        self.changeset: ChangeSet | None = None
        self.resolved: ResumeProfile | None = None
        self._on_terminate = on_terminate
        self._generation_in_flight = False

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.REVIEWING

    @property
    def generation_in_flight(self) -> bool:
        return self._generation_in_flight

    @property
    def document_id(self) -> str | None:
        return self.changeset.original.id if self.changeset else None

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(state.value for state in states)
            raise SessionStateError(f"Operation not allowed in state '{self.state.value}' (requires {allowed})")

    def _reviewing(self) -> ChangeSet:
        self._require(SessionState.REVIEWING)
        if self.changeset is None:
            raise SessionStateError("Session is reviewing without a change set")
        return self.changeset

    def start(self, original: ResumeProfile, proposed: ResumeProfile) -> ReviewSession:
        self._require(SessionState.IDLE)
        if original.id != proposed.id:
            logger.warning(f"Proposed document id {proposed.id} differs from original {original.id}")
        self.changeset = ChangeSet(original, proposed)
        self.state = SessionState.REVIEWING
        logger.info(f"Review started for document {original.id} with {len(self.changeset.changes())} change(s)")
        return self

    def changes(self) -> list[Change]:
        return self._reviewing().changes()

    def pending_paths(self) -> list[ChangePath]:
        return self._reviewing().pending_paths()

    @property
    def decisions(self) -> dict[ChangePath, bool]:
        return dict(self._reviewing().decisions)

    def decide(self, path: str | ChangePath, accepted: bool) -> ChangePath:
        """Record (or overwrite) the decision for one path. Does not resolve."""
        parsed = self._reviewing().set_decision(path, accepted)
        logger.debug(f"Decision {'accepted' if accepted else 'rejected'}: {parsed}")
        return parsed

    def accept(self, path: str | ChangePath) -> ChangePath:
        return self.decide(path, True)

    def reject(self, path: str | ChangePath) -> ChangePath:
        return self.decide(path, False)

    def reset(self, path: str | ChangePath) -> ChangePath:
        """Return one path to pending."""
        parsed = self._reviewing().clear_decision(path)
        logger.debug(f"Decision reset: {parsed}")
        return parsed

    def replace_proposed(self, proposed: ResumeProfile) -> None:
        """Install a new proposed document, keeping the original and discarding all decisions."""
        changeset = self._reviewing()
        if proposed.id != changeset.original.id:
            logger.warning(f"Replacement document id {proposed.id} differs from original {changeset.original.id}")
        changeset.replace_proposed(proposed)
        logger.info(f"Proposed document replaced; {len(changeset.changes())} change(s) to review")

    async def regenerate(self, propose: Callable[[], Awaitable[ResumeProfile]]) -> ResumeProfile:
        """Request a fresh proposed document and install it once it arrives.

        Only one request may be outstanding per session. If the request fails or is cancelled,
        the session keeps its current proposed document and decisions.

        Raises:
            GenerationInProgressError: If a previous regeneration has not finished.
            SessionStateError: If the session is not reviewing, or ended while waiting.
        """
        self._reviewing()
        if self._generation_in_flight:
            raise GenerationInProgressError("A regeneration is already in progress for this session")

        self._generation_in_flight = True
        try:
            proposed = await propose()
        finally:
            self._generation_in_flight = False

        if not self.is_active:
            raise SessionStateError(f"Session ended ({self.state.value}) while regeneration was in flight")
        self.replace_proposed(proposed)
        return proposed

    def preview(self) -> ResumeProfile:
        """Resolve with the current decisions, pending changes left out. No state change."""
        changeset = self._reviewing()
        return resolve(changeset.original, changeset.proposed, changeset.decisions)

    def keep(self) -> ResumeProfile:
        """Accept every still-pending change, resolve, and end the session.

        Pending fields of an explicitly rejected item stay pending, so the item keeps its original values.
        """
        changeset = self._reviewing()
        decisions = dict(changeset.decisions)
        pending = [path for path in changeset.pending_paths() if not _under_rejected_item(changeset, path)]
        for path in pending:
            decisions[path] = True
        logger.debug(f"Explicit decisions: {changeset.serialized_decisions()}")
        self.resolved = resolve(changeset.original, changeset.proposed, decisions)
        logger.info(
            f"Review kept for document {changeset.original.id}: "
            f"{len(changeset.decisions)} explicit decision(s), {len(pending)} pending accepted"
        )
        self._terminate(SessionState.KEPT)
        return self.resolved

    def undo(self) -> ResumeProfile:
        """Discard the proposal; the resolved document is the original verbatim."""
        changeset = self._reviewing()
        self.resolved = changeset.original.model_copy(deep=True)
        logger.info(f"Review undone for document {changeset.original.id}")
        self._terminate(SessionState.ABANDONED)
        return self.resolved

    def _terminate(self, state: SessionState) -> None:
        self.state = state
        if self._on_terminate is not None:
            self._on_terminate(self)


class SessionRegistry:
    """Tracks the active review session per document; at most one at a time."""

    def __init__(self) -> None:
        self._active: dict[str, ReviewSession] = {}

    def open(self, original: ResumeProfile, proposed: ResumeProfile) -> ReviewSession:
        """Start a session for ``original``.

        Raises:
            SessionStateError: If the document already has an active session.
        """
        existing = self._active.get(original.id)
        if existing is not None and existing.is_active:
            raise SessionStateError(f"Document {original.id} already has an active review session")
        session = ReviewSession(on_terminate=self._release)
        session.start(original, proposed)
        self._active[original.id] = session
        return session

    def get(self, document_id: str) -> ReviewSession | None:
        return self._active.get(document_id)

    def abandon(self, document_id: str) -> ResumeProfile | None:
        """Undo the active session for ``document_id``, if there is one."""
        session = self._active.get(document_id)
        if session is None or not session.is_active:
            return None
        return session.undo()

    def _release(self, session: ReviewSession) -> None:
        document_id = session.document_id
        if document_id is not None and self._active.get(document_id) is session:
            del self._active[document_id]
