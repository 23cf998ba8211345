"""
OpenAI-compatible Chat Completions provider.

Works against any endpoint that accepts the chat/completions request
shape, including the Hugging Face inference router and OpenAI itself.
The endpoint URL is used as-is; no path is appended.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse
from .errors import LLMError, LLMTimeout, LLMUnreachable, LLMStatusError, LLMMalformedResponse

logger = logging.getLogger(__name__)


class ChatCompletionsProvider(LLMProvider):
    """
    Provider for OpenAI-style chat/completions endpoints,
    authenticated with a bearer API key.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        endpoint_url: str,
        default_temperature: float = 0.3,
        default_max_tokens: int = 1024,
        timeout: float = 30.0,
        provider_name: str = "huggingface",
    ):
        super().__init__(api_key, model, endpoint_url, default_temperature, default_max_tokens)
        self.timeout = timeout
        self.provider_name = provider_name

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send one non-streaming request to the completion endpoint."""
        start_time = time.time()
        payload: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": self._format_messages(messages),
            "temperature": temperature if temperature is not None else self.default_temperature,
            "max_tokens": max_tokens or self.default_max_tokens,
            "stream": False,
        }

        if logger.isEnabledFor(logging.DEBUG):
            message_summary = f"{len(messages)} messages"
            if messages:
                message_summary += f", first: {messages[0].content[:200]}"
            logger.debug(
                f"LLM API call starting: provider={self.provider_name}, model={payload['model']}, "
                f"temperature={payload['temperature']}, {message_summary}"
            )

        try:
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.post(self.endpoint_url, json=payload, headers=self._get_headers())
                    resp.raise_for_status()
                    data = resp.json()
            except httpx.TimeoutException as e:
                raise LLMTimeout(f"Completion endpoint timed out after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise LLMStatusError(e.response.status_code, e.response.text[:500]) from e
            except httpx.RequestError as e:
                raise LLMUnreachable(f"Completion endpoint unreachable: {e}") from e
            except ValueError as e:
                raise LLMMalformedResponse(f"Completion endpoint returned invalid JSON: {e}") from e

            try:
                content = data["choices"][0]["message"]["content"]
            except (KeyError, IndexError, TypeError) as e:
                raise LLMMalformedResponse(f"Unexpected completion response shape: {e!r}") from e
            if not isinstance(content, str):
                raise LLMMalformedResponse("Completion response has no text content")

            usage = data.get("usage") or {}
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": self.provider_name,
                    "model": data.get("model", self.model),
                    "prompt_tokens": usage.get("prompt_tokens", 0),
                    "completion_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                    "duration_ms": round(duration_ms, 2),
                }}
            )

            return LLMResponse(
                content=content,
                model=data.get("model", self.model),
                usage=usage,
                raw=data,
            )
        except LLMError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"LLM API call failed: {str(e)}",
                extra={"extra_fields": {
                    "provider": self.provider_name,
                    "model": payload.get("model"),
                    "duration_ms": round(duration_ms, 2),
                    "failure": e.kind,
                    "error": str(e),
                }}
            )
            raise
