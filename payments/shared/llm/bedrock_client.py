"""
Bedrock LLM Client

Invokes a chat-style model on AWS Bedrock through the InvokeModel API
and extracts the generated message text from the response envelope.
"""

import json

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from payments.shared.config import Settings
from payments.shared.exceptions import LLMInvocationError, LLMParsingError

log = structlog.get_logger()


def create_bedrock_runtime_client(settings: Settings):
    """Create a Bedrock runtime client from settings."""
    return boto3.client("bedrock-runtime", **settings.bedrock_config)


class BedrockLLMClient:
    """
    Wrapper for chat-style model invocation on AWS Bedrock.

    The request body follows the OpenAI-compatible messages format
    and the reply is read from ``choices[0].message.content``.

    Usage:
        client = BedrockLLMClient(boto3.client("bedrock-runtime"), settings)
        text = client.invoke_chat("Extract the payment...")
    """

    def __init__(self, runtime_client, settings: Settings):
        """
        Initialize the Bedrock LLM client.

        Args:
            runtime_client: boto3 bedrock-runtime client
            settings: Application settings with model id and parameters
        """
        self._runtime = runtime_client
        self._settings = settings

    @property
    def model_id(self) -> str:
        return self._settings.model_id

    def _build_request_body(self, prompt: str) -> str:
        return json.dumps({
            "messages": [
                {
                    "role": "user",
                    "content": prompt,
                }
            ],
            "max_tokens": self._settings.llm_max_tokens,
            "temperature": self._settings.llm_temperature,
        })

    def _invoke_once(self, body: str) -> str:
        try:
            response = self._runtime.invoke_model(
                modelId=self.model_id,
                contentType="application/json",
                accept="application/json",
                body=body,
            )
            raw = response["body"].read()
        except (ClientError, BotoCoreError) as e:
            log.error(
                "llm_invoke_error",
                model_id=self.model_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise LLMInvocationError(
                f"Failed to invoke Bedrock model: {e}",
                original_error=e,
            ) from e

        # Invalid bytes become U+FFFD and surface later as a parse failure
        return raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw

    def invoke_raw(self, prompt: str) -> str:
        """
        Invoke the model and return the raw response body text.

        Args:
            prompt: Single user-role prompt

        Returns:
            Response body decoded as UTF-8, invalid bytes replaced

        Raises:
            LLMInvocationError: If the Bedrock call fails after all attempts
        """
        body = self._build_request_body(prompt)

        log.info(
            "llm_invoke_start",
            model_id=self.model_id,
            max_tokens=self._settings.llm_max_tokens,
            temperature=self._settings.llm_temperature,
        )

        retrying = Retrying(
            stop=stop_after_attempt(self._settings.llm_max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(LLMInvocationError),
            reraise=True,
        )
        response_body = retrying(self._invoke_once, body)

        log.debug("llm_raw_response", response_body=response_body)
        return response_body

    @staticmethod
    def parse_envelope(response_body: str) -> str:
        """
        Extract the generated message text from a response body.

        Raises:
            LLMInvocationError: If the body is not JSON
            LLMParsingError: If the body has no choices[0].message.content
        """
        try:
            envelope = json.loads(response_body)
        except json.JSONDecodeError as e:
            raise LLMInvocationError(
                f"Bedrock returned a non-JSON response body: {e}",
                original_error=e,
            ) from e

        try:
            content = envelope["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMParsingError(
                f"Response has no choices[0].message.content: {e!r}",
                raw_output=response_body,
            ) from e

        if not isinstance(content, str):
            raise LLMParsingError(
                "Message content is not a string",
                raw_output=response_body,
            )
        return content

    def invoke_chat(self, prompt: str) -> str:
        """
        Invoke the model and return the generated message text.

        Raises:
            LLMInvocationError: If the Bedrock call fails
            LLMParsingError: If the envelope carries no message text
        """
        return self.parse_envelope(self.invoke_raw(prompt))
