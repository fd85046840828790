"""
Post storage seen by the assistant.

The CMS owns the posts; the assistant only needs read access to article
bodies and edit fields, and write access to the two summary fields. The
protocols below describe that surface. ``InMemoryPostRepository`` implements
both and can be seeded from a YAML export.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

import yaml

from summary_assistant.constants import Fields

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PostRecord:
    id: int
    title: str
    content: str
    published_at: datetime
    author_id: Optional[int] = None
    status: str = "publish"
    fields: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class AuditRecord:
    id: int
    title: str
    ai_content: str
    human_content: str
    editor_id: Optional[int]
    author_id: Optional[int]
    published_at: datetime


class ContentFieldStore(Protocol):
    def get_post(self, post_id: int) -> Optional[PostRecord]:
        ...

    def save_summary(self, post_id: int, summary: str) -> None:
        ...


class AuditDataSource(Protocol):
    def available_months(self) -> List[Tuple[int, int]]:
        ...

    def posts_for_month(self, year: int, month: int) -> List[PostRecord]:
        ...

    def bulk_audit_records(self, post_ids: Iterable[int]) -> Dict[int, AuditRecord]:
        ...

    def training_candidates(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[PostRecord]:
        ...


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class InMemoryPostRepository:
    """Thread-safe in-process post store."""

    def __init__(self, posts: Optional[Iterable[PostRecord]] = None) -> None:
        self._posts: Dict[int, PostRecord] = {}
        self._lock = threading.Lock()
        for post in posts or ():
            self.add(post)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "InMemoryPostRepository":
        """
        Load posts from a YAML document with a top-level ``posts`` list.

        Each entry needs ``id``, ``title``, ``content`` and ``published_at``;
        ``author_id``, ``status`` and ``fields`` are optional.
        """
        data_path = Path(path)
        repository = cls()
        if not data_path.is_file():
            logger.warning(f"Post data file not found: {data_path}")
            return repository

        with open(data_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        for entry in data.get("posts", []):
            post = PostRecord(
                id=int(entry["id"]),
                title=str(entry.get("title", "")),
                content=str(entry.get("content", "")),
                published_at=_parse_datetime(entry["published_at"]),
                author_id=_optional_int(entry.get("author_id")),
                status=str(entry.get("status", "publish")),
                fields={
                    str(key): "" if value is None else str(value)
                    for key, value in (entry.get("fields") or {}).items()
                },
            )
            repository.add(post)

        logger.info(f"Loaded {len(repository)} posts from {data_path}")
        return repository

    def __len__(self) -> int:
        return len(self._posts)

    def add(self, post: PostRecord) -> None:
        with self._lock:
            self._posts[post.id] = post

    def get_post(self, post_id: int) -> Optional[PostRecord]:
        return self._posts.get(post_id)

    def save_summary(self, post_id: int, summary: str) -> None:
        with self._lock:
            post = self._posts.get(post_id)
            if post is None:
                raise KeyError(post_id)
            post.fields[Fields.SUMMARY] = summary
            post.fields[Fields.AI_MARKER] = summary

    def _broadcast_posts(self) -> List[PostRecord]:
        posts = [
            post
            for post in self._posts.values()
            if post.status == "publish" and post.fields.get(Fields.IN_BROADCAST) == "1"
        ]
        posts.sort(key=lambda post: post.published_at, reverse=True)
        return posts

    def available_months(self) -> List[Tuple[int, int]]:
        months = {
            (post.published_at.year, post.published_at.month)
            for post in self._broadcast_posts()
            if post.fields.get(Fields.AI_CONTENT, "") != ""
        }
        return sorted(months, reverse=True)

    def posts_for_month(self, year: int, month: int) -> List[PostRecord]:
        return [
            post
            for post in self._broadcast_posts()
            if post.published_at.year == year
            and post.published_at.month == month
            and Fields.AI_CONTENT in post.fields
            and Fields.HUMAN_CONTENT in post.fields
        ]

    def bulk_audit_records(self, post_ids: Iterable[int]) -> Dict[int, AuditRecord]:
        records: Dict[int, AuditRecord] = {}
        for post_id in post_ids:
            post = self._posts.get(int(post_id))
            if post is None:
                continue
            records[post.id] = AuditRecord(
                id=post.id,
                title=post.title,
                ai_content=post.fields.get(Fields.AI_CONTENT, ""),
                human_content=post.fields.get(Fields.HUMAN_CONTENT, ""),
                editor_id=_optional_int(post.fields.get(Fields.EDIT_LAST)),
                author_id=post.author_id,
                published_at=post.published_at,
            )
        return records

    def training_candidates(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[PostRecord]:
        candidates = []
        for post in self._broadcast_posts():
            ai_content = post.fields.get(Fields.AI_CONTENT)
            human_content = post.fields.get(Fields.HUMAN_CONTENT)
            if ai_content is None or human_content is None:
                continue
            if ai_content == "" or ai_content == human_content:
                continue
            # Date filter applies only when both bounds are given
            if start_date and end_date:
                published = post.published_at.date()
                if published < start_date or published > end_date:
                    continue
            candidates.append(post)
        if limit:
            candidates = candidates[:limit]
        return candidates
