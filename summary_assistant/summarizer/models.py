"""Domain models shared by the summary pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Union


Role = Literal["system", "user", "assistant"]


class ModelFamily(str, Enum):
    CHAT_COMPLETIONS = "chat_completions"
    RESPONSES = "responses"


class ErrorKind(str, Enum):
    MISSING_API_KEY = "missing_api_key"
    MISSING_CONFIG = "missing_config"
    INVALID_INPUT = "invalid_input"
    RATE_LIMITED = "rate_limited"
    API_ERROR = "api_error"
    NETWORK_ERROR = "network_error"
    INVALID_RESPONSE = "invalid_response"


@dataclass(slots=True)
class ApiMessage:
    role: Role
    content: str

    def as_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(slots=True)
class Summary:
    text: str
    word_count: int
    attempts: int = 1

    ok = True


@dataclass(slots=True)
class SummaryError:
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None

    ok = False


SummaryResult = Union[Summary, SummaryError]


@dataclass(slots=True)
class PostSummary:
    """Summary accepted for a post, after the dateline was applied."""

    post_id: int
    summary: str
    word_count: int
    regions: List[str] = field(default_factory=list)
