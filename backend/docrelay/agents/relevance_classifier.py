"""
Relevance Classifier - decides whether a context can answer a question.
"""

import logging
from enum import Enum

from .base_agent import BaseAgent
from ..llm.base import LLMProvider
from ..llm.errors import LLMError

logger = logging.getLogger(__name__)

CLASSIFIER_PROMPT = """You are a strict relevance classifier.

You will be given a CONTEXT taken from a document and a QUESTION.
Decide whether the CONTEXT contains the information needed to answer the QUESTION.

Reply with exactly one word: YES or NO. Do not explain."""


class Relevance(str, Enum):
    YES = "yes"
    NO = "no"
    UNPARSEABLE = "unparseable"


def parse_verdict(text: str) -> Relevance:
    """
    Read a classifier reply.

    Only the first character of the trimmed, upper-cased reply counts:
    "Y..." is YES, "N..." is NO, anything else is UNPARSEABLE.
    """
    normalized = (text or "").strip().upper()
    if normalized.startswith("Y"):
        return Relevance.YES
    if normalized.startswith("N"):
        return Relevance.NO
    return Relevance.UNPARSEABLE


class RelevanceClassifier(BaseAgent):
    """
    One completion call per classification.
    Only an explicit YES counts as related; NO, unparseable replies and
    failed calls all mean "not related".
    """

    def __init__(self, llm_provider: LLMProvider, context_chars: int = 4000):
        super().__init__("RelevanceClassifier", llm_provider)
        self.system_prompt = CLASSIFIER_PROMPT
        self.context_chars = context_chars

    def build_messages(self, question: str, context: str) -> list:
        # Only the context is cut; the question always goes through whole
        bounded_context = context[:self.context_chars]
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": f"CONTEXT:\n{bounded_context}\n\nQUESTION: {question}\n\nAnswer YES or NO."},
        ]

    async def classify(self, question: str, context: str) -> Relevance:
        """
        Raises:
            LLMError: if the completion call fails
        """
        reply = await self.call_llm(
            self.build_messages(question, context), temperature=0.0, max_tokens=3
        )
        verdict = parse_verdict(reply)
        if verdict is Relevance.UNPARSEABLE:
            logger.warning(f"Unparseable classifier reply: {reply[:100]!r}")
        return verdict

    async def is_related(self, question: str, context: str) -> bool:
        try:
            verdict = await self.classify(question, context)
        except LLMError as e:
            logger.warning(f"Relevance classification failed ({e.kind}), treating as not related")
            return False
        logger.debug(f"Relevance verdict: {verdict.value}")
        return verdict is Relevance.YES
