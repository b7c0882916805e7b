"""
LLM Clients module for interacting with the generative-text provider.

The provider gives no schema guarantee: callers receive free text and are expected to run it
through the response extraction pipeline.
"""

import openai
from openai import NOT_GIVEN
from openai.types.responses import ResponseInputItemParam, ResponseInputParam

from .exceptions.resume_exceptions import UpstreamError


class OpenAIClient:
    """Client for interacting with OpenAI's Responses API.

    Args:
        api_key: The OpenAI API key for authentication.
        temperature: The temperature for model responses.
        timeout_seconds: Request timeout passed to the SDK.
        max_retries: SDK-level retries. Defaults to 0 since retry is always an explicit user action.
    """

    def __init__(
        self,
        api_key: str,
        temperature: float = 0.7,
        timeout_seconds: float = 60,
        max_retries: int = 0,
    ) -> None:
        self.client = openai.OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=max_retries)
        self.response_id: str | None = None
        self.temperature: float = temperature

    def _create_messages(self, sys_prompt: str | None, user_prompt: str | None) -> ResponseInputParam:
        """Create a list of messages for the OpenAI API.

        Raises:
            ValueError: If both sys_prompt and user_prompt are None.
        """
        if sys_prompt is None and user_prompt is None:
            raise ValueError("At least one of sys_prompt or user_prompt must be provided (not both None).")
        messages: list[ResponseInputItemParam] = []
        if sys_prompt:
            messages.append({"role": "system", "content": sys_prompt})
        if user_prompt:
            messages.append({"role": "user", "content": user_prompt})
        return messages

    def reset_conversation(self) -> None:
        """Forget the previous response so the next call starts a fresh conversation."""
        self.response_id = None

    def get_response(
        self,
        sys_prompt: str | None,
        user_prompt: str | None,
        model_name: str,
        continue_conversation: bool = False,
    ) -> str:
        """Get a free-text response from the specified OpenAI model.

        Args:
            sys_prompt: The system prompt to send to the model.
            user_prompt: The user prompt to send to the model.
            model_name: The name of the OpenAI model to use.
            continue_conversation: Chain onto the previous response instead of starting fresh.

        Returns:
            The model's response as a string.

        Raises:
            ValueError: If both sys_prompt and user_prompt are None.
            UpstreamError: If the API call fails or the API reports an error.
        """
        messages = self._create_messages(sys_prompt, user_prompt)
        previous_response_id = self.response_id if continue_conversation and self.response_id else NOT_GIVEN

        try:
            response = self.client.responses.create(
                input=messages,
                model=model_name,
                temperature=self.temperature,
                previous_response_id=previous_response_id,
            )
        except Exception as e:
            raise UpstreamError(f"Error getting response: {str(e)}") from e

        if not hasattr(response, "id"):
            raise UpstreamError(f"Unexpected response type: {type(response)}")

        self.response_id = response.id

        if response.error:
            error_msg = f"API Error: {getattr(response.error, 'message', 'Unknown error')}"
            error_code = getattr(response.error, "code", None)
            if error_code:
                error_msg += f" (code: {error_code})"
            raise UpstreamError(error_msg)

        return response.output_text.strip() if response.output_text else ""
