"""Groq chat-completion client with client-side throttling and retries."""

import time
from collections import deque
from typing import Deque, Dict, List, Optional

from groq import Groq

from app.utils.logger import get_logger

logger = get_logger(__name__)


class RateLimitTracker:
    """Sliding one-minute window of Groq requests sent, failed ones included."""

    WINDOW_SECONDS = 60.0

    def __init__(self, requests_per_minute: int = 30):
        self.requests_per_minute = requests_per_minute
        self._stamps: Deque[float] = deque()

    def _expire(self) -> None:
        cutoff = time.monotonic() - self.WINDOW_SECONDS
        while self._stamps and self._stamps[0] <= cutoff:
            self._stamps.popleft()

    @property
    def used(self) -> int:
        self._expire()
        return len(self._stamps)

    def check_rate_limit(self) -> bool:
        """True when another request fits in the current window."""
        return self.used < self.requests_per_minute

    def record_request(self) -> None:
        self._stamps.append(time.monotonic())

    def get_wait_time(self) -> float:
        """Seconds until the oldest request leaves the window, 0 if not full."""
        if self.check_rate_limit():
            return 0.0
        return max(0.0, self._stamps[0] + self.WINDOW_SECONDS - time.monotonic())


class GroqService:
    """Text generation through the Groq SDK, restricted to an allow-list of models."""

    DEFAULT_MODEL = "llama-3.3-70b-versatile"

    DEFAULT_MAX_TOKENS = 4096
    DEFAULT_TEMPERATURE = 0.8
    DEFAULT_TIMEOUT = 60  # seconds
    DEFAULT_RETRIES = 3

    def __init__(
        self,
        api_key: str,
        allowed_models: Optional[List[str]] = None,
        default_model: str = DEFAULT_MODEL,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_RETRIES,
        requests_per_minute: int = 30,
        client: Optional[Groq] = None,
    ):
        """
        Args:
            api_key: Groq API key, may be empty only when ``client`` is given
            allowed_models: Models callers may request; the default is always allowed
            default_model: Model used when a request names none
            timeout: Per-request timeout in seconds
            max_retries: Attempts per ``generate_text`` call
            requests_per_minute: Client-side throttle before calling the API
            client: Pre-built SDK client
        """
        if not api_key and client is None:
            raise ValueError("API key cannot be empty")

        self.client = client or Groq(api_key=api_key)
        self.default_model = default_model
        self.allowed_models = list(allowed_models or [default_model])
        if default_model not in self.allowed_models:
            self.allowed_models.append(default_model)
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limiter = RateLimitTracker(requests_per_minute)

        logger.info(
            "Groq client ready: default_model=%s allowed=%s retries=%s",
            default_model, ",".join(self.allowed_models), max_retries,
        )

    def resolve_model(self, model: Optional[str]) -> str:
        """Requested model, or the default when none is given. Unknown models raise ValueError."""
        if not model:
            return self.default_model
        if model not in self.allowed_models:
            raise ValueError(f"Invalid model '{model}'. Must be one of {self.allowed_models}")
        return model

    def _throttle(self) -> None:
        wait_time = self.rate_limiter.get_wait_time()
        if wait_time > 0:
            logger.warning("Groq request budget used up, sleeping %.2fs", wait_time)
            time.sleep(wait_time)

    def _complete(self, model: str, messages: List[Dict[str, str]], max_tokens: int, temperature: float) -> str:
        self.rate_limiter.record_request()
        response = self.client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=self.timeout,
        )

        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise RuntimeError("Empty completion returned")

        logger.info("Completion from %s (%s tokens)", model, getattr(response.usage, "total_tokens", None))
        return text

    def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """
        Run one chat completion, retrying failures with exponential backoff.

        Blocking; async callers run it in a worker thread.

        Raises:
            ValueError: Empty prompt, disallowed model or out-of-range parameters
            RuntimeError: Every attempt failed
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")
        model = self.resolve_model(model)
        if not 0.0 <= temperature <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        if max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")

        messages = [{"role": "user", "content": prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            self._throttle()
            try:
                return self._complete(model, messages, max_tokens, temperature)
            except Exception as e:
                last_error = e
                logger.warning("Groq attempt %d/%d on %s failed: %s", attempt, self.max_retries, model, e)
                if attempt < self.max_retries:
                    # 1s, 2s, 4s ...
                    time.sleep(2 ** (attempt - 1))

        message = f"Text generation failed after {self.max_retries} attempts. Last error: {last_error}"
        logger.error(message)
        raise RuntimeError(message) from last_error
