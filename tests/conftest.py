"""Shared fixtures: a small master resume, a tailored variant of it, settings and a mocked model client."""

import copy
from typing import Any
from unittest.mock import MagicMock

import pytest

from resume_forge.core.config import Settings
from resume_forge.models.resume import ResumeProfile

ORIGINAL_DATA: dict[str, Any] = {
    "id": "doc-1",
    "basics": {
        "name": "Ada Lovelace",
        "label": "Software Engineer",
        "email": "ada@example.com",
        "phone": "+44 20 0000 0000",
        "url": "https://ada.dev",
        "location": {"city": "London", "region": "England"},
    },
    "work": [
        {
            "id": "w1",
            "company": "Analytical Engines Ltd",
            "position": "Developer",
            "startDate": "2020-01",
            "endDate": None,
            "highlights": ["Built internal APIs"],
        },
        {
            "id": "w2",
            "company": "Difference Co",
            "position": "Intern",
            "startDate": "2018-06",
            "endDate": "2019-08",
            "highlights": ["Wrote test harnesses"],
        },
    ],
    "education": [
        {"institution": "University of London", "area": "Mathematics", "studyType": "BSc", "startDate": "2014"}
    ],
    "skills": [
        {"name": "Languages", "keywords": ["Python", "Go"]},
        {"name": "Node.js", "keywords": ["Express"]},
    ],
    "projects": [{"name": "Notes", "description": "Annotated translation", "highlights": []}],
}


def build_proposed_data() -> dict[str, Any]:
    data = copy.deepcopy(ORIGINAL_DATA)
    data["basics"]["label"] = "Senior Backend Engineer"
    data["work"][0]["position"] = "Backend Developer"
    data["work"][0]["highlights"] = ["Built REST APIs serving 1M requests a day"]
    del data["work"][1]
    data["work"].append(
        {
            "id": "w3",
            "company": "Initech",
            "position": "Consultant",
            "startDate": "2019-09",
            "endDate": "2019-12",
            "highlights": ["Migrated billing to Python"],
        }
    )
    data["skills"][0]["keywords"] = ["Python", "Go", "Rust"]
    data["skills"].append({"name": "Cloud", "keywords": ["AWS"]})
    # Non-reviewed sections are ignored even if the model touches them
    data["projects"][0]["description"] = "Rewritten by the model"
    return data


@pytest.fixture
def original_profile() -> ResumeProfile:
    return ResumeProfile.model_validate(copy.deepcopy(ORIGINAL_DATA))


@pytest.fixture
def proposed_profile() -> ResumeProfile:
    return ResumeProfile.model_validate(build_proposed_data())


@pytest.fixture
def original_data() -> dict[str, Any]:
    return copy.deepcopy(ORIGINAL_DATA)


@pytest.fixture
def proposed_data() -> dict[str, Any]:
    return build_proposed_data()


@pytest.fixture
def settings() -> Settings:
    return Settings(OPENAI_API_KEY="test_openai_key", DEFAULT_MODEL_NAME="gpt-test")  # type: ignore[call-arg]


@pytest.fixture
def mock_client() -> MagicMock:
    """An OpenAIClient stand-in; set ``get_response.return_value`` per test."""
    client = MagicMock()
    client.get_response.return_value = ""
    return client
