"""
Derived fields for notes: summary and category.

Both derivations are total over any string input (including the empty
string) and hold no state between calls. The summary can alternatively be
produced by an external chat-completion model; that variant falls back to
the deterministic summary whenever the model call fails.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple

import httpx

from src.api.config import Settings
from src.api.models import Category

logger = logging.getLogger(__name__)

SUMMARY_MAX_CHARS = 100
ELLIPSIS = "..."
SENTENCE_TERMINATOR = "."

# Evaluated in order; the first keyword found wins.
CATEGORY_RULES: List[Tuple[str, Category]] = [
    ("meeting", Category.MEETING),
    ("idea", Category.IDEA),
    ("reminder", Category.REMINDER),
    ("task", Category.TASK),
    ("schedule", Category.SCHEDULE),
    ("goal", Category.GOAL),
    ("research", Category.RESEARCH),
]

DEFAULT_CATEGORY = Category.NOTE

CATEGORIES: List[Category] = [category for _, category in CATEGORY_RULES] + [DEFAULT_CATEGORY]

SUMMARY_PROMPT = "Summarize this: {content}"


# PUBLIC_INTERFACE
def summarize(content: str) -> str:
    """Return the first sentence, or a 100-character prefix, of ``content``.

    The first sentence (through the first ".") is used when that terminator
    sits within the first 100 characters. Longer text without such a
    terminator is cut to 100 characters plus "...". Anything else is
    returned unchanged.
    """
    first_period = content.find(SENTENCE_TERMINATOR)
    if first_period != -1 and first_period < SUMMARY_MAX_CHARS:
        return content[: first_period + 1]
    if len(content) > SUMMARY_MAX_CHARS:
        return content[:SUMMARY_MAX_CHARS] + ELLIPSIS
    return content


# PUBLIC_INTERFACE
def categorize(content: str) -> Category:
    """Assign a category by case-insensitive keyword match, defaulting to Note."""
    lowered = content.lower()
    for keyword, category in CATEGORY_RULES:
        if keyword in lowered:
            logger.debug("Categorized note as %s (keyword: %s)", category.value, keyword)
            return category
    return DEFAULT_CATEGORY


class Summarizer(Protocol):
    """Anything that can turn note content into a summary."""

    def summarize(self, content: str) -> str:
        ...


class DeterministicSummarizer:
    """Summarizer backed by the first-sentence/truncation rule."""

    def summarize(self, content: str) -> str:
        return summarize(content)


class ExternalModelSummarizer:
    """Summarizer that asks an OpenAI-compatible chat model for a summary.

    Failures of any kind (transport, HTTP status, unexpected response shape,
    empty reply) are logged and answered with the deterministic summary, so
    deriving a summary never fails.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
        temperature: float = 0.7,
        fallback: Optional[Summarizer] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.temperature = temperature
        self._fallback = fallback or DeterministicSummarizer()
        self._transport = transport

    def summarize(self, content: str) -> str:
        if not content:
            return ""

        try:
            text = self._call_model(SUMMARY_PROMPT.format(content=content))
        except (httpx.HTTPError, KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            logger.warning("Model summarization failed, using deterministic summary: %s", e)
            return self._fallback.summarize(content)

        if not text:
            logger.warning("Model returned an empty summary, using deterministic summary")
            return self._fallback.summarize(content)
        return text

    def _call_model(self, prompt: str) -> str:
        """Call the chat completions endpoint and return the reply text."""
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": self.temperature,
                },
            )
            response.raise_for_status()
            return response.json()["choices"][0]["message"]["content"].strip()


# PUBLIC_INTERFACE
def build_summarizer(settings: Settings) -> Summarizer:
    """Select the summarizer variant named by ``settings.SUMMARIZER``."""
    if settings.SUMMARIZER == "model":
        if not settings.OPENAI_API_KEY:
            raise ValueError(
                "OPENAI_API_KEY is not set. Set it to use SUMMARIZER=model."
            )
        logger.info("Using external model summarizer (%s)", settings.SUMMARY_MODEL)
        return ExternalModelSummarizer(
            api_key=settings.OPENAI_API_KEY,
            model=settings.SUMMARY_MODEL,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.SUMMARY_TIMEOUT,
        )
    return DeterministicSummarizer()
