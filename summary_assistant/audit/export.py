"""
Preference-pair export for fine-tuning.

Every broadcast summary an editor changed is a DPO training example: the
prompt the assistant would send today, the edited text as the preferred
answer and the model text as the rejected one. Entries are serialized as
JSON Lines for upload to the fine-tuning service.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

import orjson

from summary_assistant.audit.classifier import strip_region_prefix
from summary_assistant.constants import Fields
from summary_assistant.summarizer.prompts import PromptBuilder
from summary_assistant.summarizer.store import AuditDataSource, PostRecord
from summary_assistant.summarizer.text import prepare_content

logger = logging.getLogger(__name__)

TrainingEntry = Dict[str, Any]


@dataclass(slots=True)
class ExportError:
    code: str
    message: str

    ok = False


@dataclass(slots=True)
class ExportStats:
    total_posts: int = 0
    processed: int = 0
    skipped: int = 0
    date_start: Optional[date] = None
    date_end: Optional[date] = None

    def track_date(self, value: date) -> None:
        if self.date_start is None or value < self.date_start:
            self.date_start = value
        if self.date_end is None or value > self.date_end:
            self.date_end = value


@dataclass(slots=True)
class TrainingData:
    entries: List[TrainingEntry]
    stats: ExportStats

    ok = True

    @property
    def message(self) -> str:
        return (
            f"{self.stats.total_posts} berichten verwerkt, "
            f"{self.stats.processed} geschikt voor training"
        )


@dataclass(slots=True)
class PreparedExport:
    download_key: str
    filename: str
    line_count: int
    file_size: int

    ok = True


@dataclass(slots=True)
class StoredExport:
    filename: str
    content: bytes
    expires_at: float = 0.0


def to_jsonl(entries: List[TrainingEntry]) -> bytes:
    return b"".join(orjson.dumps(entry, option=orjson.OPT_APPEND_NEWLINE) for entry in entries)


class TrainingDataExporter:
    def __init__(self, source: AuditDataSource, prompt_builder: PromptBuilder, word_limit: int):
        self.source = source
        self.prompt_builder = prompt_builder
        self.word_limit = word_limit

    def create_entry(self, post: PostRecord) -> Optional[TrainingEntry]:
        ai_content = post.fields.get(Fields.AI_CONTENT, "")
        human_content = post.fields.get(Fields.HUMAN_CONTENT, "")
        if not ai_content or not human_content:
            logger.debug(f"Skipping post {post.id}: missing AI or human content")
            return None

        ai_clean = strip_region_prefix(ai_content)
        human_clean = strip_region_prefix(human_content)
        if ai_clean == human_clean:
            logger.debug(f"Skipping post {post.id}: identical after dateline removal")
            return None

        messages = self.prompt_builder.build(prepare_content(post.content), self.word_limit)
        return {
            "input": {
                "messages": [message.as_dict() for message in messages],
                "tools": [],
                "parallel_tool_calls": True,
            },
            "preferred_output": [{"role": "assistant", "content": human_clean}],
            "non_preferred_output": [{"role": "assistant", "content": ai_clean}],
        }

    def generate(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Union[TrainingData, ExportError]:
        posts = self.source.training_candidates(start_date, end_date, limit)
        if not posts:
            logger.debug("No suitable posts found for training data generation")
            return ExportError(
                "no_posts", "Geen geschikte berichten gevonden voor training data"
            )

        stats = ExportStats()
        entries: List[TrainingEntry] = []
        for post in posts:
            stats.total_posts += 1
            entry = self.create_entry(post)
            if entry is None:
                stats.skipped += 1
                continue
            entries.append(entry)
            stats.processed += 1
            stats.track_date(post.published_at.date())

        logger.debug(
            f"Training data generated: {stats.processed}/{stats.total_posts} posts usable"
        )
        return TrainingData(entries=entries, stats=stats)


class ExportCache:
    """Holds prepared exports for a limited time; each key downloads once."""

    def __init__(self, ttl_seconds: float = 900, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._exports: Dict[str, StoredExport] = {}
        self._lock = threading.Lock()

    def prepare(
        self, entries: List[TrainingEntry], now: Optional[datetime] = None
    ) -> Union[PreparedExport, ExportError]:
        if not entries:
            return ExportError("no_data", "Geen training data om te exporteren")

        timestamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d_%H-%M-%S")
        filename = f"dpo_training_data_{timestamp}.jsonl"
        content = to_jsonl(entries)
        download_key = secrets.token_urlsafe(24)

        with self._lock:
            self._evict_expired()
            self._exports[download_key] = StoredExport(
                filename=filename,
                content=content,
                expires_at=self._clock() + self.ttl_seconds,
            )

        logger.debug(f"Export prepared: {filename} ({len(entries)} lines, {len(content)} bytes)")
        return PreparedExport(
            download_key=download_key,
            filename=filename,
            line_count=len(entries),
            file_size=len(content),
        )

    def take(self, download_key: str) -> Union[StoredExport, ExportError]:
        with self._lock:
            self._evict_expired()
            stored = self._exports.pop(download_key, None)
        if stored is None:
            logger.error("Invalid or expired download key")
            return ExportError(
                "invalid_download",
                "Download link is verlopen of ongeldig. Genereer de export opnieuw.",
            )
        return stored

    def _evict_expired(self) -> None:
        now = self._clock()
        for key in [key for key, item in self._exports.items() if now > item.expires_at]:
            del self._exports[key]
