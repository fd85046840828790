"""Editorial state of a broadcast summary."""

from enum import Enum


class AuditStatus(str, Enum):
    FULLY_HUMAN = "fully_human_written"
    AI_UNEDITED = "ai_written_not_edited"
    AI_EDITED = "ai_written_edited"


_LABELS = {
    AuditStatus.FULLY_HUMAN: "Handgeschreven",
    AuditStatus.AI_UNEDITED: "AI-gegenereerd",
    AuditStatus.AI_EDITED: "AI-bewerkt",
}

_CSS_CLASSES = {
    AuditStatus.FULLY_HUMAN: "human",
    AuditStatus.AI_UNEDITED: "ai-unedited",
    AuditStatus.AI_EDITED: "ai-edited",
}


def status_label(status: AuditStatus) -> str:
    return _LABELS[status]


def status_css_class(status: AuditStatus) -> str:
    return _CSS_CLASSES[status]
