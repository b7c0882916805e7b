from typing import TypeVar

from pydantic import BaseModel

from ..common.llm_clients import OpenAIClient
from ..common.utils import read_file_content, replace_prompt_placeholders
from ..core.config import Settings, get_settings
from ..core.logger import logger
from ..extraction.response_extractor import ResponseExtractor
from ..extraction.schema_validator import validate_payload

ModelT = TypeVar("ModelT", bound=BaseModel)


class StructuredGenerationService:
    """Shared provider call -> JSON recovery -> schema validation pipeline.

    Every service that turns model output into a typed object goes through ``_generate`` so the
    recovery ladder and validation rules are the same everywhere.
    """

    def __init__(
        self,
        openai_client: OpenAIClient,
        settings: Settings | None = None,
        extractor: ResponseExtractor | None = None,
    ) -> None:
        self.openai_client = openai_client
        self.settings = settings or get_settings()
        self.extractor = extractor or ResponseExtractor(
            excerpt_chars=self.settings.EXTRACTION_EXCERPT_CHARS,
            error_window_chars=self.settings.EXTRACTION_ERROR_WINDOW_CHARS,
        )

    def _load_prompt(self, filename: str, **placeholders: str) -> str:
        template = read_file_content(self.settings.PROMPTS_DIRECTORY / filename)
        return replace_prompt_placeholders(template, **placeholders)

    def _generate(self, sys_prompt: str, user_prompt: str, schema: type[ModelT]) -> ModelT:
        """Call the provider and turn its reply into a validated ``schema`` instance.

        Raises:
            UpstreamError: If the provider call fails.
            MalformedResponseError: If no JSON object can be recovered from the reply.
            ValidationError: If the recovered object does not fit ``schema``.
        """
        self.openai_client.reset_conversation()
        raw_response = self.openai_client.get_response(
            sys_prompt, user_prompt, model_name=self.settings.DEFAULT_MODEL_NAME
        )
        logger.debug(f"Received {len(raw_response)} chars from {self.settings.DEFAULT_MODEL_NAME}")
        data = self.extractor.extract_object(raw_response)
        return validate_payload(data, schema)
