"""LLM module - provides a uniform interface to the remote completion endpoint."""

from .base import LLMProvider, LLMMessage, LLMResponse
from .errors import LLMError, LLMTimeout, LLMUnreachable, LLMStatusError, LLMMalformedResponse
from .chat_completions import ChatCompletionsProvider
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'LLMError',
    'LLMTimeout',
    'LLMUnreachable',
    'LLMStatusError',
    'LLMMalformedResponse',
    'ChatCompletionsProvider',
    'create_llm_provider',
]
