"""
Shared utilities for the generation engine.

This package contains reusable components used by every generator:
- llm_client.py: Instructor-wrapped OpenAI/Anthropic client with retry logic
- response_parsing.py: Markdown-fence stripping and JSON decoding
- logging_config.py: Structured JSON logging and stage timing
- usage_tracker.py: Thread-safe LLM usage analytics
- romanization.py / kana.py: Pinyin and Japanese reading helpers
"""

__all__ = [
    "llm_client",
    "response_parsing",
    "logging_config",
    "usage_tracker",
    "romanization",
    "kana",
    "language_utils",
    "string_utils",
]
