"""
Answer Generator - produces the final answer text.
"""

import logging
from typing import Optional

from .base_agent import BaseAgent
from ..llm.base import LLMProvider
from ..llm.errors import LLMError

logger = logging.getLogger(__name__)

NOT_ENOUGH_INFORMATION = "I don't have enough information."

FALLBACK_ANSWER = "Sorry, I couldn't reach the answer service right now. Please try again in a moment."

CONTEXT_PROMPT = f"""You are a document assistant. Answer the user's question using ONLY the context provided.

Rules:
- Do not use any knowledge that is not in the context.
- If the answer is not in the context, reply with exactly: {NOT_ENOUGH_INFORMATION}
- Reply in plain text. Do not use markdown, bullet symbols, headings or other formatting."""

GENERAL_PROMPT = """You are a helpful general-purpose assistant.

Answer the user's question clearly and concisely.
Reply in plain text. Do not use markdown, bullet symbols, headings or other formatting."""


class AnswerGenerator(BaseAgent):
    """
    Context-bound and general answering over one completion call each.
    A failed call yields FALLBACK_ANSWER so the client always gets a reply.
    """

    def __init__(self, llm_provider: LLMProvider, temperature: Optional[float] = None):
        super().__init__("AnswerGenerator", llm_provider)
        self.temperature = temperature

    async def answer_from_context(self, question: str, context: str) -> str:
        # Context is already bounded at ingestion time
        return await self._generate([
            {"role": "system", "content": CONTEXT_PROMPT},
            {"role": "user", "content": f"Context:\n{context}\n\nQuestion: {question}"},
        ])

    async def answer_generally(self, question: str) -> str:
        return await self._generate([
            {"role": "system", "content": GENERAL_PROMPT},
            {"role": "user", "content": question},
        ])

    async def _generate(self, messages: list) -> str:
        try:
            reply = await self.call_llm(messages, temperature=self.temperature)
        except LLMError as e:
            logger.error(
                f"Answer generation failed: {e}",
                extra={"extra_fields": {"failure": e.kind, "error": str(e)}}
            )
            return FALLBACK_ANSWER
        return reply.strip()
