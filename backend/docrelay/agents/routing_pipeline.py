"""
Routing Pipeline - picks the answer path for each question.

Decision:
1. Session has a private document -> classify against it.
   Related -> context answer (source=document), else general answer.
2. No private document but a shared corpus is loaded -> classify against
   the corpus. Related -> context answer (source=corpus), else general.
3. Neither -> general answer; the classifier is never called.

At most two sequential completion calls per question.
"""

import logging
from typing import Optional

from .answer_generator import AnswerGenerator
from .relevance_classifier import RelevanceClassifier
from ..models.answer import Answer, AnswerSource
from ..models.session import CancellationToken
from ..services.corpus import SharedCorpus
from ..storage.session_store import SessionStore

logger = logging.getLogger(__name__)


class RoutingPipeline:
    """Coordinates the session store, classifier and generator."""

    def __init__(
        self,
        store: SessionStore,
        classifier: RelevanceClassifier,
        generator: AnswerGenerator,
        corpus: Optional[SharedCorpus] = None,
        classifier_context_chars: int = 4000,
    ):
        self.store = store
        self.classifier = classifier
        self.generator = generator
        self.corpus = corpus or SharedCorpus()
        self.classifier_context_chars = classifier_context_chars

    async def route(
        self,
        session_id: Optional[str],
        question: str,
        token: Optional[CancellationToken] = None,
    ) -> Answer:
        """
        Answer one question for a session.

        Args:
            session_id: Session the question arrived on (may be unknown)
            question: Raw question text
            token: Cancelled when the session is torn down

        Returns:
            Answer tagged with the path that produced it

        Raises:
            SessionClosed: if the token was cancelled while a call was in flight
        """
        token = token or CancellationToken()
        # Snapshot: a concurrent upload does not affect this question
        document_text = self.store.get_document(session_id) if session_id else None

        if document_text is not None:
            context, context_source = document_text, AnswerSource.DOCUMENT
            classifier_context = document_text
        elif self.corpus:
            context, context_source = self.corpus.text, AnswerSource.CORPUS
            # Every corpus document gets a slice of the classifier's window
            classifier_context = self.corpus.excerpt(self.classifier_context_chars)
        else:
            context, context_source, classifier_context = None, None, None

        if context is None:
            logger.info(f"Routing question for session {session_id}: no context, answering generally")
            return await self._general(question, token)

        related = await self.classifier.is_related(question, classifier_context)
        token.raise_if_cancelled()

        if not related:
            logger.info(
                f"Routing question for session {session_id}: "
                f"{context_source.value} not related, answering generally"
            )
            return await self._general(question, token)

        logger.info(f"Routing question for session {session_id}: answering from {context_source.value}")
        text = await self.generator.answer_from_context(question, context)
        token.raise_if_cancelled()
        return Answer(text=text, source=context_source)

    async def _general(self, question: str, token: CancellationToken) -> Answer:
        text = await self.generator.answer_generally(question)
        token.raise_if_cancelled()
        return Answer(text=text, source=AnswerSource.GENERAL)
