"""Summary generation with length validation, and the per-post workflow."""

from __future__ import annotations

import math
from typing import Hashable, List, Optional, Protocol, Sequence, Union

from summary_assistant.config import Settings
from summary_assistant.log import SummaryLogger
from summary_assistant.summarizer.errors import (
    INVALID_INPUT_MESSAGE,
    MISSING_CONFIG_MESSAGE,
    RATE_LIMITED_MESSAGE,
    TOO_FEW_WORDS_MESSAGE,
)
from summary_assistant.summarizer.models import (
    ApiMessage,
    ErrorKind,
    PostSummary,
    Summary,
    SummaryError,
    SummaryResult,
)
from summary_assistant.summarizer.prompts import PromptBuilder
from summary_assistant.summarizer.rate_limit import RateLimiter
from summary_assistant.summarizer.store import ContentFieldStore
from summary_assistant.summarizer.text import count_words, prepare_content


class SummaryGateway(Protocol):
    async def send(
        self,
        messages: List[ApiMessage],
        word_limit: int,
        model_id: str,
        api_key: str,
    ) -> SummaryResult:
        ...


class RetryingSummaryGenerator:
    """
    Ask the model for a summary until its length lands inside
    ``[floor(word_limit * min_response_ratio), word_limit]``.

    Only length misses are retried; any gateway failure is returned as is.
    When every attempt misses, the last text is returned as a success so an
    editor can trim it by hand.
    """

    def __init__(
        self,
        gateway: SummaryGateway,
        prompt_builder: PromptBuilder,
        max_attempts: int = 3,
        min_response_ratio: float = 0.2,
        logger: Optional[SummaryLogger] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.gateway = gateway
        self.prompt_builder = prompt_builder
        self.max_attempts = max_attempts
        self.min_response_ratio = min_response_ratio
        self.logger = logger or SummaryLogger()

    @classmethod
    def from_settings(
        cls,
        gateway: SummaryGateway,
        settings: Settings,
        logger: Optional[SummaryLogger] = None,
    ) -> "RetryingSummaryGenerator":
        return cls(
            gateway,
            PromptBuilder(settings.system_prompt),
            max_attempts=settings.max_retry_attempts,
            min_response_ratio=settings.min_response_ratio,
            logger=logger,
        )

    def min_words(self, word_limit: int) -> int:
        return math.floor(word_limit * self.min_response_ratio)

    async def generate_with_retry(
        self, content: str, word_limit: int, model_id: str, api_key: str
    ) -> SummaryResult:
        min_words = self.min_words(word_limit)
        messages = self.prompt_builder.build(content, word_limit)
        last: Optional[Summary] = None

        for attempt in range(1, self.max_attempts + 1):
            result = await self.gateway.send(messages, word_limit, model_id, api_key)
            if not result.ok:
                return result

            word_count = count_words(result.text)
            last = Summary(text=result.text, word_count=word_count, attempts=attempt)

            if min_words <= word_count <= word_limit:
                if attempt > 1:
                    self.logger.debug(f"Summary accepted after {attempt - 1} retries")
                return last

            self.logger.debug(
                "Summary length outside bounds",
                {"attempt": attempt, "word_count": word_count, "min": min_words, "max": word_limit},
            )

        self.logger.debug(
            f"Summary retry limit reached ({self.max_attempts} attempts), returning last attempt"
        )
        return last


def apply_dateline(summary: str, regions: Sequence[str]) -> str:
    """Prefix ``"REGION / OTHER - "`` when regions are given."""
    cleaned = [region.strip().upper() for region in regions if region and region.strip()]
    if not cleaned:
        return summary
    return f"{' / '.join(cleaned)} - {summary}"


class SummaryService:
    """The generate-summary action for one post."""

    def __init__(
        self,
        settings: Settings,
        generator: RetryingSummaryGenerator,
        rate_limiter: RateLimiter,
        store: ContentFieldStore,
        logger: Optional[SummaryLogger] = None,
    ):
        self.settings = settings
        self.generator = generator
        self.rate_limiter = rate_limiter
        self.store = store
        self.logger = logger or SummaryLogger(settings.debug_mode)

    async def generate_for_post(
        self,
        identity: Hashable,
        post_id: int,
        content: str,
        regions: Sequence[str] = (),
    ) -> Union[PostSummary, SummaryError]:
        if not self.settings.api_key:
            return SummaryError(ErrorKind.MISSING_CONFIG, MISSING_CONFIG_MESSAGE)

        if not content or not post_id or self.store.get_post(post_id) is None:
            return SummaryError(ErrorKind.INVALID_INPUT, INVALID_INPUT_MESSAGE)

        clean_content = prepare_content(content)
        word_count = count_words(clean_content)
        if word_count < self.settings.min_word_count:
            return SummaryError(
                ErrorKind.INVALID_INPUT,
                TOO_FEW_WORDS_MESSAGE.format(
                    required=self.settings.min_word_count, found=word_count
                ),
            )

        if not self.rate_limiter.acquire(identity):
            return SummaryError(
                ErrorKind.RATE_LIMITED,
                RATE_LIMITED_MESSAGE.format(max_requests=self.rate_limiter.max_requests),
            )

        result = await self.generator.generate_with_retry(
            clean_content,
            self.settings.word_limit,
            self.settings.model,
            self.settings.api_key,
        )
        if not result.ok:
            return result

        summary = apply_dateline(result.text, regions)
        self.store.save_summary(post_id, summary)
        self.logger.debug(f"Summary generated for post {post_id}", {"attempts": result.attempts})

        return PostSummary(
            post_id=post_id,
            summary=summary,
            word_count=count_words(summary),
            regions=list(regions),
        )
