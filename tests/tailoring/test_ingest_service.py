"""Tests for IngestService."""

import json
import uuid
from unittest.mock import MagicMock

import pytest

from resume_forge.common.exceptions.resume_exceptions import ValidationError
from resume_forge.core.config import Settings
from resume_forge.tailoring.ingest_service import IngestService

RESUME_TEXT = """Ada Lovelace
ada@example.com

Experience
Analytical Engines Ltd - Developer (2020 - present)
- Built internal APIs
"""


@pytest.fixture
def service(mock_client: MagicMock, settings: Settings) -> IngestService:
    return IngestService(mock_client, settings=settings)


def test_parse_text_backfills_ids(service: IngestService, mock_client: MagicMock) -> None:
    """The model is not asked for ids; they are generated during validation."""
    mock_client.get_response.return_value = json.dumps(
        {
            "basics": {"name": "Ada Lovelace", "email": "ada@example.com", "url": None},
            "work": [
                {
                    "company": "Analytical Engines Ltd",
                    "position": "Developer",
                    "startDate": "2020",
                    "endDate": None,
                    "highlights": ["Built internal APIs"],
                }
            ],
            "skills": [],
        }
    )

    profile = service.parse_text(RESUME_TEXT)

    uuid.UUID(profile.id)
    uuid.UUID(profile.work[0].id)
    assert profile.basics.url is None
    assert profile.work[0].end_date is None

    sys_prompt, user_prompt = mock_client.get_response.call_args[0]
    assert "Built internal APIs" in user_prompt
    assert sys_prompt


def test_parse_text_empty_content(service: IngestService, mock_client: MagicMock) -> None:
    with pytest.raises(ValueError, match="Resume content cannot be empty"):
        service.parse_text("\n  \n")
    mock_client.get_response.assert_not_called()


def test_parse_text_invalid_document(service: IngestService, mock_client: MagicMock) -> None:
    mock_client.get_response.return_value = '{"basics": {"email": "ada@example.com"}}'

    with pytest.raises(ValidationError) as exc_info:
        service.parse_text(RESUME_TEXT)

    assert exc_info.value.path == "basics.name"
