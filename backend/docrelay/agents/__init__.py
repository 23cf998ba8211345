"""Agents module - relevance classification, answer generation and routing."""

from .base_agent import BaseAgent
from .relevance_classifier import RelevanceClassifier, Relevance, parse_verdict
from .answer_generator import AnswerGenerator, FALLBACK_ANSWER, NOT_ENOUGH_INFORMATION
from .routing_pipeline import RoutingPipeline

__all__ = [
    'BaseAgent',
    'RelevanceClassifier',
    'Relevance',
    'parse_verdict',
    'AnswerGenerator',
    'FALLBACK_ANSWER',
    'NOT_ENOUGH_INFORMATION',
    'RoutingPipeline',
]
