"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest

from summary_assistant.config import Settings
from summary_assistant.constants import Fields
from summary_assistant.summarizer.store import InMemoryPostRepository, PostRecord


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(_env_file=None, api_key="sk-test", model="gpt-4.1")


def broadcast_post(post_id, published_at, ai_text, human_text, content="<p>Artikel</p>", **extra):
    fields = {
        Fields.IN_BROADCAST: "1",
        Fields.AI_CONTENT: ai_text,
        Fields.HUMAN_CONTENT: human_text,
    }
    fields.update(extra)
    return PostRecord(
        id=post_id,
        title=f"Bericht {post_id}",
        content=content,
        published_at=published_at,
        author_id=1,
        fields=fields,
    )


@pytest.fixture
def repository():
    return InMemoryPostRepository(
        [
            broadcast_post(
                1,
                datetime(2025, 5, 20, 10, 0),
                "LEIDEN - De kat zit op de mat",
                "LEIDEN - De hond zit op de mat",
                content="<p>De kat zat de hele dag op de mat.</p>",
                edit_last="9",
            ),
            broadcast_post(
                2,
                datetime(2025, 5, 10, 8, 0),
                "DEN HAAG - Het regent vandaag",
                "Het regent vandaag",
            ),
            broadcast_post(3, datetime(2025, 5, 3, 12, 0), "", "Handgeschreven tekst"),
            broadcast_post(
                4,
                datetime(2025, 4, 28, 16, 0),
                "X Y Z",
                "Q R S T",
            ),
            PostRecord(
                id=5,
                title="Niet voor tekst-tv",
                content="<p>Alleen web</p>",
                published_at=datetime(2025, 6, 1, 9, 0),
                fields={Fields.IN_BROADCAST: "0", Fields.AI_CONTENT: "A", Fields.HUMAN_CONTENT: "B"},
            ),
        ]
    )
