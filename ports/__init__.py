from .llm import LLMClientPort
from .source import PageFetcherPort

__all__ = [
    "LLMClientPort",
    "PageFetcherPort",
]
