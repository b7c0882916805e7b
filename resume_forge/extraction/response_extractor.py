"""
Recovery of a JSON object from free-text model output.

Generative models do not reliably honour a "JSON only" instruction: replies arrive wrapped in
code fences, preceded by prose, or cut off mid-object. ResponseExtractor tries a fixed ladder of
recovery strategies and returns the first candidate that parses as a JSON object.
"""

import json
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..common.exceptions.resume_exceptions import MalformedResponseError
from ..core.logger import logger

LEADING_FENCE_PAT = re.compile(r"^```(?:json|markdown|md)?[ \t]*\n?", re.IGNORECASE)
TRAILING_FENCE_PAT = re.compile(r"\n?```\s*$")

RecoveryStrategy = Callable[[str], str | None]


@dataclass(frozen=True)
class _BraceScan:
    start: int
    end: int | None  # index of the brace that closes the first object, None if never closed
    open_depth: int


def _scan_first_object(text: str) -> _BraceScan | None:
    """Walk from the first ``{`` tracking brace depth, ignoring braces inside JSON strings."""
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return _BraceScan(start=start, end=idx, open_depth=0)
    return _BraceScan(start=start, end=None, open_depth=depth)


def strip_code_fences(text: str) -> str | None:
    """Tier 1: drop a leading ```json / ```markdown fence and a trailing fence."""
    cleaned = text.strip()
    cleaned = LEADING_FENCE_PAT.sub("", cleaned, count=1)
    cleaned = TRAILING_FENCE_PAT.sub("", cleaned, count=1)
    return cleaned.strip()


def balanced_object(text: str) -> str | None:
    """Tier 2: the first ``{`` up to the brace where depth returns to zero."""
    scan = _scan_first_object(text)
    if scan is None or scan.end is None:
        return None
    return text[scan.start : scan.end + 1]


def close_truncated_object(text: str) -> str | None:
    """Tier 3: for output cut off mid-object, append one ``}`` per unclosed level."""
    scan = _scan_first_object(text)
    if scan is None or scan.end is not None or scan.open_depth <= 0:
        return None
    return text[scan.start :].rstrip() + "}" * scan.open_depth


def first_to_last_brace(text: str) -> str | None:
    """Tier 4: everything from the first ``{`` to the last ``}`` verbatim."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


DEFAULT_STRATEGIES: tuple[RecoveryStrategy, ...] = (
    strip_code_fences,
    balanced_object,
    close_truncated_object,
    first_to_last_brace,
)


class ResponseExtractor:
    """Shared JSON recovery for every consumer of model output.

    Args:
        strategies: Recovery strategies tried in order; each maps the raw text to a candidate
            string or None when it does not apply.
        excerpt_chars: Size of the response prefix attached to MalformedResponseError.
        error_window_chars: Characters shown on each side of the parser's error offset.
    """

    def __init__(
        self,
        strategies: Sequence[RecoveryStrategy] = DEFAULT_STRATEGIES,
        excerpt_chars: int = 500,
        error_window_chars: int = 200,
    ) -> None:
        self.strategies = tuple(strategies)
        self.excerpt_chars = excerpt_chars
        self.error_window_chars = error_window_chars

    def extract(self, text: str) -> str:
        """Return the first recovered candidate that parses as a JSON object.

        Raises:
            MalformedResponseError: If every strategy fails.
        """
        text = text or ""
        last_error: json.JSONDecodeError | None = None
        last_candidate = ""
        last_message: str | None = None

        for strategy in self.strategies:
            candidate = strategy(text)
            if not candidate:
                continue
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError as e:
                last_error, last_candidate, last_message = e, candidate, str(e)
                logger.debug(f"Recovery strategy {strategy.__name__} failed: {e}")
                continue
            if not isinstance(parsed, dict):
                last_error, last_candidate = None, candidate
                last_message = f"expected a JSON object, got {type(parsed).__name__}"
                logger.debug(f"Recovery strategy {strategy.__name__} produced a non-object")
                continue
            if strategy is not self.strategies[0]:
                logger.info(f"Recovered JSON object from model output using {strategy.__name__}")
            return candidate

        raise self._build_error(text, last_error, last_candidate, last_message)

    def extract_object(self, text: str) -> dict[str, Any]:
        """Like extract(), but returns the parsed object."""
        return dict(json.loads(self.extract(text)))

    def _build_error(
        self,
        text: str,
        error: json.JSONDecodeError | None,
        candidate: str,
        message: str | None,
    ) -> MalformedResponseError:
        error_offset: int | None = None
        error_window: str | None = None
        if error is not None and 0 <= error.pos <= len(candidate):
            error_offset = error.pos
            start = max(0, error.pos - self.error_window_chars)
            end = min(len(candidate), error.pos + self.error_window_chars)
            error_window = f"{candidate[start:end]}\n{' ' * (error.pos - start)}^"
        logger.error(f"Could not recover JSON from model output ({len(text)} chars): {message}")
        return MalformedResponseError(
            text_length=len(text),
            excerpt=text[: self.excerpt_chars],
            error_offset=error_offset,
            error_window=error_window,
            parse_error=message,
        )
