"""LLM client with Instructor integration for raw text generation.

This module provides a wrapper around OpenAI's and Anthropic's APIs that
returns the model's raw text together with usage metadata. JSON extraction and
vocabulary validation happen downstream in the generators, so responses are
requested with `response_model=None` (Instructor passthrough).
"""

import hashlib
import logging
import threading
import time
from typing import Optional

import instructor
from anthropic import Anthropic
from langfuse import observe
from openai import OpenAI
from pydantic import BaseModel

from langseed import constants
from langseed.errors import LLMError

logger = logging.getLogger(__name__)


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cached_tokens: int = 0  # Prompt cache hits


class LLMResponse(BaseModel):
    """Raw model text plus the usage metadata forwarded to analytics."""

    text: Optional[str] = None
    model: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class LLMClient:
    """LLM client with Instructor-wrapped OpenAI/Anthropic for raw text responses.

    Features:
    - Raw text generation (JSON parsing is left to the caller)
    - Transport retry with exponential backoff (default: a single attempt)
    - Per-request timeout
    - Token usage tracking
    - Request/response logging (prompt hash, tokens, latency)
    - Optional Langfuse tracing
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: Optional[int] = None,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        timeout: Optional[float] = None,
        enable_langfuse: Optional[bool] = None,
    ):
        """Initialize LLM client with Instructor.

        Args:
            api_key: API key for the provider (if None, the SDK reads its env var)
            model: Model to use (if None, uses LLM_MODEL env var or defaults to gpt-4o-mini)
                   Supports: gpt-*, o*, claude-*
            max_retries: Transport attempts per call (default: LLM_TRANSPORT_RETRIES)
            base_delay: Base delay for exponential backoff in seconds (default: 1.0)
            max_delay: Maximum delay between retries in seconds (default: 60.0)
            timeout: Per-request timeout in seconds (default: LLM_TIMEOUT)
            enable_langfuse: Enable Langfuse tracing (default: ENABLE_LANGFUSE)
        """
        self.model = model or constants.LLM_MODEL
        self.max_retries = max_retries if max_retries is not None else constants.LLM_TRANSPORT_RETRIES
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.timeout = timeout if timeout is not None else constants.LLM_TIMEOUT
        self.enable_langfuse = (
            enable_langfuse if enable_langfuse is not None else constants.ENABLE_LANGFUSE
        )

        # Token tracking, shared by the importer's worker threads
        self.total_usage = TokenUsage()
        self._usage_lock = threading.Lock()

        self.provider = self._detect_provider(self.model)

        if self.provider == "anthropic":
            client = Anthropic(api_key=api_key, timeout=self.timeout)
            self.client = instructor.from_anthropic(client)
        else:
            if self.enable_langfuse:
                # Langfuse-wrapped OpenAI client for automatic tracing
                from langfuse.openai import OpenAI as TracedOpenAI

                client = TracedOpenAI(api_key=api_key, timeout=self.timeout)
                logger.info("Langfuse tracing enabled for OpenAI")
            else:
                client = OpenAI(api_key=api_key, timeout=self.timeout)
            self.client = instructor.from_openai(client)

        logger.info(
            f"LLMClient initialized with provider={self.provider}, model={self.model}, "
            f"max_retries={self.max_retries}, timeout={self.timeout}"
        )

    def _detect_provider(self, model: str) -> str:
        """Detect LLM provider from model name.

        Args:
            model: Model name

        Returns:
            Provider name: 'openai' or 'anthropic'
        """
        model_lower = model.lower()
        if model_lower.startswith("claude"):
            return "anthropic"
        if not model_lower.startswith(("gpt", "o1", "o3", "o4")):
            logger.warning(f"Unknown model prefix '{model}', defaulting to OpenAI provider")
        return "openai"

    @observe(as_type="generation")
    def generate(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        """Generate raw text for a prompt.

        Args:
            prompt: User prompt/instruction
            temperature: Sampling temperature (0.0 - 2.0, default: 0.7)
            max_tokens: Maximum tokens to generate (default: 2048)
            system_prompt: Optional system prompt for context

        Returns:
            LLMResponse with the raw text (possibly None) and token usage

        Raises:
            LLMError: If all transport attempts fail
        """
        prompt_hash = self._hash_prompt(prompt)
        logger.info(
            f"Generating text: model={self.model}, prompt_hash={prompt_hash}, "
            f"temperature={temperature}"
        )

        last_exception = None
        for attempt in range(1, self.max_retries + 1):
            start_time = time.time()
            try:
                raw = self._create(prompt, temperature, max_tokens, system_prompt)
                latency_ms = (time.time() - start_time) * 1000

                usage = self._extract_usage(raw)
                self._update_total_usage(usage)
                self._log_response(
                    prompt_hash=prompt_hash,
                    latency_ms=latency_ms,
                    attempt=attempt,
                    success=True,
                    usage=usage,
                )

                return LLMResponse(
                    text=self._extract_text(raw),
                    model=self.model,
                    input_tokens=usage.prompt_tokens,
                    output_tokens=usage.completion_tokens,
                )

            except Exception as e:
                last_exception = e
                latency_ms = (time.time() - start_time) * 1000

                logger.warning(
                    f"Attempt {attempt}/{self.max_retries} failed: {str(e)[:200]}",
                    exc_info=True,
                )
                self._log_response(
                    prompt_hash=prompt_hash,
                    latency_ms=latency_ms,
                    attempt=attempt,
                    success=False,
                    error=str(e)[:200],
                )

                if attempt < self.max_retries:
                    delay = self._calculate_backoff_delay(attempt)
                    logger.info(f"Retrying in {delay:.2f} seconds...")
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.max_retries} attempts failed for prompt_hash={prompt_hash}"
                    )

        raise LLMError(
            f"Request failed after {self.max_retries} attempts. Last error: {last_exception}"
        ) from last_exception

    def _create(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        system_prompt: Optional[str],
    ):
        """Call the provider once; response_model=None returns the raw completion."""
        if self.provider == "anthropic":
            api_params = {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "response_model": None,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
            if system_prompt:
                api_params["system"] = system_prompt
            return self.client.messages.create(**api_params)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        api_params = {
            "model": self.model,
            "messages": messages,
            "response_model": None,
            "temperature": temperature,
        }

        # GPT-5 and o* models use max_completion_tokens instead of max_tokens
        # and only the default temperature (1) is supported
        if self.model.startswith("gpt-5") or self.model.startswith("o"):
            api_params["max_completion_tokens"] = max_tokens
            api_params["temperature"] = 1.0
        else:
            api_params["max_tokens"] = max_tokens

        return self.client.chat.completions.create(**api_params)

    def _extract_text(self, raw) -> Optional[str]:
        """Pull the text out of a raw provider response."""
        if self.provider == "anthropic":
            parts = [
                block.text
                for block in getattr(raw, "content", None) or []
                if getattr(block, "type", None) == "text"
            ]
            return "".join(parts) or None

        choices = getattr(raw, "choices", None) or []
        if not choices:
            return None
        return choices[0].message.content

    def _extract_usage(self, raw) -> TokenUsage:
        """Extract token usage from a raw provider response.

        Args:
            raw: ChatCompletion (OpenAI) or Message (Anthropic)

        Returns:
            TokenUsage object with token counts
        """
        usage = TokenUsage()
        raw_usage = getattr(raw, "usage", None)
        if raw_usage is None:
            return usage

        if self.provider == "anthropic":
            usage.prompt_tokens = getattr(raw_usage, "input_tokens", 0) or 0
            usage.completion_tokens = getattr(raw_usage, "output_tokens", 0) or 0
            usage.total_tokens = usage.prompt_tokens + usage.completion_tokens
            usage.cached_tokens = getattr(raw_usage, "cache_read_input_tokens", 0) or 0
        else:
            usage.prompt_tokens = getattr(raw_usage, "prompt_tokens", 0) or 0
            usage.completion_tokens = getattr(raw_usage, "completion_tokens", 0) or 0
            usage.total_tokens = getattr(raw_usage, "total_tokens", 0) or 0

            details = getattr(raw_usage, "prompt_tokens_details", None)
            if details is not None:
                usage.cached_tokens = getattr(details, "cached_tokens", 0) or 0

        return usage

    def _update_total_usage(self, usage: TokenUsage) -> None:
        """Update cumulative token usage.

        Args:
            usage: Token usage from current request
        """
        with self._usage_lock:
            self.total_usage.prompt_tokens += usage.prompt_tokens
            self.total_usage.completion_tokens += usage.completion_tokens
            self.total_usage.total_tokens += usage.total_tokens
            self.total_usage.cached_tokens += usage.cached_tokens

    def reset_usage(self) -> None:
        """Reset token usage counters."""
        with self._usage_lock:
            self.total_usage = TokenUsage()

    def _hash_prompt(self, prompt: str) -> str:
        """Generate SHA256 hash of prompt for logging.

        Args:
            prompt: Text prompt to hash

        Returns:
            First 16 characters of SHA256 hash
        """
        return hashlib.sha256(prompt.encode()).hexdigest()[:16]

    def _calculate_backoff_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: Current attempt number (1-indexed)

        Returns:
            Delay in seconds (capped at max_delay)
        """
        delay = self.base_delay * (2 ** (attempt - 1))
        return min(delay, self.max_delay)

    def _log_response(
        self,
        prompt_hash: str,
        latency_ms: float,
        attempt: int,
        success: bool,
        usage: Optional[TokenUsage] = None,
        error: Optional[str] = None,
    ) -> None:
        """Log response metadata.

        Args:
            prompt_hash: Hash of the prompt
            latency_ms: Response latency in milliseconds
            attempt: Attempt number
            success: Whether the request succeeded
            usage: Token usage statistics
            error: Error message if failed
        """
        log_data = {
            "prompt_hash": prompt_hash,
            "model": self.model,
            "latency_ms": round(latency_ms, 2),
            "attempt": attempt,
            "success": success,
        }

        if usage:
            log_data["tokens"] = {
                "prompt": usage.prompt_tokens,
                "completion": usage.completion_tokens,
                "total": usage.total_tokens,
                "cached": usage.cached_tokens,
            }

        if error:
            log_data["error"] = error

        if success:
            logger.info(f"LLM response: {log_data}")
        else:
            logger.warning(f"LLM response failed: {log_data}")
