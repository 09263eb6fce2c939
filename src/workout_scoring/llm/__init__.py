"""LLM integration for remote workout scoring."""

from .providers import LLMClient, LLMMetrics, get_llm_client, looks_like_api_key, reset_llm_client

__all__ = [
    "LLMClient",
    "LLMMetrics",
    "get_llm_client",
    "looks_like_api_key",
    "reset_llm_client",
]
