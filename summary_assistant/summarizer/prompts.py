"""System/user message construction."""

from __future__ import annotations

from typing import List

from summary_assistant.constants import DEFAULT_SYSTEM_PROMPT, WORD_LIMIT_PLACEHOLDER
from summary_assistant.summarizer.models import ApiMessage


def render_system_prompt(template: str, word_limit: int) -> str:
    """Substitute the word limit into the template's single ``%d`` placeholder."""
    template = template if template and template.strip() else DEFAULT_SYSTEM_PROMPT
    return template.replace(WORD_LIMIT_PLACEHOLDER, str(word_limit), 1)


class PromptBuilder:
    def __init__(self, template: str = DEFAULT_SYSTEM_PROMPT):
        self.template = template

    def build(self, content: str, word_limit: int) -> List[ApiMessage]:
        """Return the system message followed by the untouched user content."""
        return [
            ApiMessage(role="system", content=render_system_prompt(self.template, word_limit)),
            ApiMessage(role="user", content=content),
        ]
