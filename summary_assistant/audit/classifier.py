"""
Classification of broadcast summaries by editorial effort.

Each post carries the text the model produced and the text that went on air.
Comparing them (ignoring the dateline) tells whether an editor wrote the
summary, published the model output untouched, or edited it, and for edited
summaries how much changed.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple

from summary_assistant.audit.diff import DiffResult, word_diff
from summary_assistant.audit.status import AuditStatus
from summary_assistant.constants import ChangeBuckets
from summary_assistant.summarizer.store import AuditDataSource, AuditRecord

ChangeFilter = Literal["low", "medium", "high"]

# "LEIDEN - ", "DEN HAAG - ", "ROOSENDAAL/OUDENBOSCH - ", "ETTEN-LEUR - "
_REGION_PREFIX = re.compile(r"^[A-Z][A-Z\s/\-]*\s-\s")
_WHITESPACE = re.compile(r"\s+")


@dataclass(slots=True)
class Classification:
    status: AuditStatus
    change_percentage: float = 0.0


@dataclass(slots=True)
class AuditedPost:
    id: int
    title: str
    ai_text: str
    human_text: str
    status: AuditStatus
    change_percentage: float
    author_id: Optional[int] = None
    editor_id: Optional[int] = None
    published_at: Optional[datetime] = None


@dataclass(slots=True)
class MonthAudit:
    year: int
    month: int
    posts: List[AuditedPost]
    counts: Dict[AuditStatus, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def strip_region_prefix(text: str) -> str:
    """Remove a leading dateline such as ``"LEIDEN - "``; always trims."""
    return _REGION_PREFIX.sub("", text.strip(), count=1).strip()


def change_percentage(ai_text: str, human_text: str) -> float:
    """
    Share of words not shared between both texts, relative to the longer one.

    Shared words are counted as a bag intersection: a word appearing twice
    in one text and once in the other counts once.
    """
    ai_words = _WHITESPACE.split(ai_text.strip()) if ai_text.strip() else []
    human_words = _WHITESPACE.split(human_text.strip()) if human_text.strip() else []

    if not ai_words and not human_words:
        return 0.0
    if not ai_words:
        return 100.0

    max_words = max(len(ai_words), len(human_words))
    matching = sum((Counter(ai_words) & Counter(human_words)).values())
    return round((1 - matching / max_words) * 100, 1)


def classify(ai_text: str, human_text: str) -> Classification:
    if not ai_text or not ai_text.strip():
        return Classification(AuditStatus.FULLY_HUMAN)

    ai_clean = strip_region_prefix(ai_text)
    human_clean = strip_region_prefix(human_text or "")
    if ai_clean == human_clean:
        return Classification(AuditStatus.AI_UNEDITED)

    return Classification(AuditStatus.AI_EDITED, change_percentage(ai_clean, human_clean))


def change_bucket(percentage: float) -> ChangeFilter:
    if percentage <= ChangeBuckets.LOW_MAX:
        return "low"
    if percentage <= ChangeBuckets.MEDIUM_MAX:
        return "medium"
    return "high"


def audit_record(record: AuditRecord) -> AuditedPost:
    result = classify(record.ai_content, record.human_content)
    return AuditedPost(
        id=record.id,
        title=record.title,
        ai_text=record.ai_content,
        human_text=record.human_content,
        status=result.status,
        change_percentage=result.change_percentage,
        author_id=record.author_id,
        editor_id=record.editor_id,
        published_at=record.published_at,
    )


class AuditService:
    """Audit views over an ``AuditDataSource``."""

    def __init__(self, source: AuditDataSource):
        self.source = source

    def available_months(self) -> List[Tuple[int, int]]:
        return self.source.available_months()

    def most_recent_month(self) -> Optional[Tuple[int, int]]:
        months = self.source.available_months()
        return months[0] if months else None

    def analyze_month(
        self,
        year: int,
        month: int,
        status_filter: Optional[AuditStatus] = None,
        change_filter: Optional[ChangeFilter] = None,
    ) -> MonthAudit:
        """
        Classify every post of a month.

        Counts always cover the whole month; the filters only narrow the
        returned post list. The change filter applies to edited posts only.
        """
        posts = self.source.posts_for_month(year, month)
        records = self.source.bulk_audit_records(post.id for post in posts)

        counts = {status: 0 for status in AuditStatus}
        audited: List[AuditedPost] = []
        for post in posts:
            record = records.get(post.id)
            if record is None:
                continue
            item = audit_record(record)
            counts[item.status] += 1

            if status_filter is not None and item.status is not status_filter:
                continue
            if change_filter is not None and (
                item.status is not AuditStatus.AI_EDITED
                or change_bucket(item.change_percentage) != change_filter
            ):
                continue
            audited.append(item)

        return MonthAudit(year=year, month=month, posts=audited, counts=counts)

    def diff_post(self, post_id: int) -> Optional[DiffResult]:
        record = self.source.bulk_audit_records([post_id]).get(post_id)
        if record is None:
            return None
        return word_diff(
            strip_region_prefix(record.ai_content),
            strip_region_prefix(record.human_content),
        )

