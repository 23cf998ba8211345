"""
Base Agent Class - shared plumbing for agents that make one completion call.
"""

import logging
from typing import Dict, List, Optional

from ..llm.base import LLMProvider, LLMMessage

logger = logging.getLogger(__name__)


class BaseAgent:
    """
    Wraps an LLM provider with agent-scoped logging.
    Failures are re-raised as LLMError; each agent decides its own fallback.
    """

    def __init__(self, name: str, llm_provider: LLMProvider):
        """
        Args:
            name: Agent name used in log records
            llm_provider: Provider for the remote completion endpoint
        """
        self.name = name
        self._llm_provider = llm_provider

    async def call_llm(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Make exactly one completion call (no retries).

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature override
            max_tokens: Max tokens override

        Returns:
            Raw response text

        Raises:
            LLMError: propagated from the provider
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Agent {self.name} calling LLM: {len(messages)} messages, "
                f"prompt_chars={sum(len(m['content']) for m in messages)}"
            )

        llm_messages = [LLMMessage(role=m["role"], content=m["content"]) for m in messages]
        response = await self._llm_provider.chat_completion(
            llm_messages, temperature=temperature, max_tokens=max_tokens
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Agent {self.name} received LLM response: length={len(response.content)} chars"
            )
        return response.content
